"""Adapters wrapping the coaching module's OpenDota ingest and report builder."""

from typing import Any, Dict, List, Tuple
import os

from coaching.ingest import FetchMeta, fetch_player_matches
from coaching.normalize import MatchRecord, normalize_matches
from coaching.opendota_client import OpenDotaClient
from coaching.recommendations import Recommendation
from coaching.report import build_report
from coaching.stats import PlayerAnalytics

from ...application.ports.match_source import MatchSourcePort
from ...application.ports.report_builder import ReportBuilderPort


class OpenDotaMatchSource(MatchSourcePort):
    """Adapter for fetching player matches from the OpenDota API."""

    def __init__(self, api_key: str | None = None, client: OpenDotaClient | None = None):
        """Initialize with API key.

        Args:
            api_key: OpenDota API key. If None, will try to get from environment.
                The public API works without one at a lower rate limit.
            client: Preconfigured client, mainly for tests.
        """
        self._api_key = api_key or os.environ.get("OPENDOTA_API_KEY") or None
        self._client = client

    def fetch_matches(
        self,
        account_id: str,
        count: int,
    ) -> Tuple[List[MatchRecord], FetchMeta]:
        client = self._client or OpenDotaClient(api_key=self._api_key)
        raw, meta = fetch_player_matches(account_id, count, client=client)
        return normalize_matches(raw), meta


class CoachingReportBuilder(ReportBuilderPort):
    """Adapter for building reports using the coaching module."""

    def build_report(
        self,
        analytics: PlayerAnalytics,
        recommendations: List[Recommendation],
        applied_ids: List[str],
        meta: FetchMeta | None,
    ) -> Dict[str, Any]:
        return build_report(analytics, applied_ids, meta, recommendations)
