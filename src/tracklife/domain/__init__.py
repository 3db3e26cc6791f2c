"""Domain layer for TrackLife.

Contains the record models for every tracker. This layer has no
dependencies on infrastructure concerns.
"""
