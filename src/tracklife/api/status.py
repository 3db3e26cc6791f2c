"""Read-only tracker status endpoints.

Tracker data never travels through the HTTP API; these endpoints only say
so, and give clients a cheap liveness probe.
"""

from fastapi import APIRouter

from ..core.enums import Domain
from .schemas import ApiHealth, ProblemDetails, TrackerStatus

router = APIRouter(
    prefix="/api",
    tags=["status"],
    responses={404: {"model": ProblemDetails, "description": "Unknown tracker"}},
)

TRACKER_LABELS = {
    Domain.SLEEP: "Sleep",
    Domain.PERIOD: "Period",
    Domain.WORKOUT: "Workout",
    Domain.HABITS: "Habit",
    Domain.BUDGET: "Budget",
    Domain.MOOD: "Mood",
    Domain.WATER: "Water",
}


def status_message(domain: Domain) -> str:
    return f"{TRACKER_LABELS[domain]} tracker data is stored locally in the browser"


@router.get("/health", response_model=ApiHealth)
def api_health() -> ApiHealth:
    """Tracker API health check."""
    return ApiHealth(status="ok")


def _make_status_endpoint(domain: Domain):
    def tracker_status() -> TrackerStatus:
        return TrackerStatus(message=status_message(domain))

    tracker_status.__name__ = f"{domain.value}_status"
    tracker_status.__doc__ = f"Where {TRACKER_LABELS[domain].lower()} tracker data is stored."
    return tracker_status


for _domain in Domain:
    router.add_api_route(
        f"/{_domain.value}",
        _make_status_endpoint(_domain),
        methods=["GET"],
        response_model=TrackerStatus,
        name=f"{_domain.value}_status",
    )
