"""Offline match source backed by the deterministic mock generator."""

from typing import List, Tuple

from coaching.ingest import FetchMeta, _iso_z, _now_utc, validate_account_id, validate_match_count
from coaching.mock_data import generate_mock_matches
from coaching.normalize import MatchRecord, normalize_matches

from ...application.ports.match_source import MatchSourcePort


class MockMatchSource(MatchSourcePort):
    """Serves generated matches; selected with COACH_MATCH_SOURCE=mock."""

    def __init__(self, profile: str = ""):
        self._profile = profile

    def fetch_matches(
        self,
        account_id: str,
        count: int,
    ) -> Tuple[List[MatchRecord], FetchMeta]:
        account = validate_account_id(account_id)
        limit = validate_match_count(count)
        raw = generate_mock_matches(account, limit, self._profile)
        meta = FetchMeta(
            account_id=account,
            requested=limit,
            fetched=len(raw),
            fetched_at=_iso_z(_now_utc()),
            source="mock",
        )
        return normalize_matches(raw), meta
