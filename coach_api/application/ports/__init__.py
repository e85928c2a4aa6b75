"""Application ports (interfaces)."""

from .match_source import MatchSourcePort, ProgressCallbackPort
from .report_builder import ReportBuilderPort

__all__ = [
    "MatchSourcePort",
    "ProgressCallbackPort",
    "ReportBuilderPort",
]
