"""Core enums and constants shared across TrackLife."""
