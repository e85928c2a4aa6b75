"""Infrastructure adapters."""

from .mock_match_source import MockMatchSource
from .opendota_adapter import CoachingReportBuilder, OpenDotaMatchSource

__all__ = [
    "CoachingReportBuilder",
    "MockMatchSource",
    "OpenDotaMatchSource",
]
