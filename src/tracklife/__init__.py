"""TrackLife - personal self-tracking toolkit."""

__version__ = "1.0.0"
