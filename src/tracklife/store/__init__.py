"""Domain stores: the only way callers read and change tracker data."""

from .domain_store import DomainStore, RecordValidationError
from .registry import BudgetStore, TrackerStores, UnknownDomainError

__all__ = [
    "DomainStore",
    "RecordValidationError",
    "BudgetStore",
    "TrackerStores",
    "UnknownDomainError",
]
