"""Dota 2 player analytics, recommendation and projection package."""

__all__ = [
    "config",
    "opendota_client",
    "ingest",
    "normalize",
    "stats",
    "benchmarks",
    "recommendations",
    "projection",
    "charts",
    "storage",
    "session",
    "mock_data",
    "report",
    "render",
]
