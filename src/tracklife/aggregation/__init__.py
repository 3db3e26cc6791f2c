"""Pure aggregation functions deriving chart-ready summaries from tracker snapshots.

Every function takes a snapshot of records plus an optional reference day
(``today``) and recomputes its result from scratch.
"""
