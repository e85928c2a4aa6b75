"""FastAPI dependency providers for adapters and state storage."""

import logging

from coaching.config import match_source_from_env
from coaching.storage import JsonFileStore

from ..application.ports.match_source import MatchSourcePort
from ..application.ports.report_builder import ReportBuilderPort
from ..infrastructure.adapters.mock_match_source import MockMatchSource
from ..infrastructure.adapters.opendota_adapter import CoachingReportBuilder, OpenDotaMatchSource

logger = logging.getLogger(__name__)


def get_match_source() -> MatchSourcePort:
    source = match_source_from_env()
    if source == "mock":
        return MockMatchSource()
    if source != "opendota":
        logger.warning(f"Unknown COACH_MATCH_SOURCE '{source}', using opendota")
    return OpenDotaMatchSource()


def get_report_builder() -> ReportBuilderPort:
    return CoachingReportBuilder()


def get_state_store() -> JsonFileStore:
    return JsonFileStore()
