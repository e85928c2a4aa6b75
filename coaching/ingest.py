from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from .config import DEFAULT_MATCH_COUNT, MATCH_FIELDS, MAX_MATCH_COUNT
from .opendota_client import OpenDotaClient

logger = logging.getLogger(__name__)


@dataclass
class FetchMeta:
    account_id: str
    requested: int
    fetched: int
    fetched_at: str
    source: str = "opendota"


def _iso_z(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def validate_account_id(account_id: Any) -> str:
    value = str(account_id or "").strip()
    if not value.isdigit():
        raise ValueError(f"Invalid account id '{account_id}': expected a numeric Steam32 id.")
    return value


def validate_match_count(count: Any) -> int:
    try:
        value = int(count)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid match count '{count}'.") from None
    if value < 1 or value > MAX_MATCH_COUNT:
        raise ValueError(f"Match count must be between 1 and {MAX_MATCH_COUNT}, got {value}.")
    return value


def fetch_player_matches(
    account_id: Any,
    count: int = DEFAULT_MATCH_COUNT,
    client: Optional[OpenDotaClient] = None,
    api_key: Optional[str] = None,
    debug: bool = False,
) -> Tuple[List[Dict[str, Any]], FetchMeta]:
    """
    Fetch the most recent matches for a player, newest first.

    Raises ValueError for bad arguments and RuntimeError when OpenDota cannot
    be reached.
    """
    account = validate_account_id(account_id)
    limit = validate_match_count(count)
    if client is None:
        client = OpenDotaClient(api_key=api_key)

    params: Dict[str, Any] = {"limit": limit, "project": list(MATCH_FIELDS)}
    body = client.get(f"players/{account}/matches", params)
    if not isinstance(body, list):
        raise RuntimeError(f"Unexpected response shape for player {account}: {type(body).__name__}")

    matches = [m for m in body if isinstance(m, dict)][:limit]
    if debug:
        logger.debug(f"[ingest] account={account} requested={limit} received={len(matches)}")

    meta = FetchMeta(
        account_id=account,
        requested=limit,
        fetched=len(matches),
        fetched_at=_iso_z(_now_utc()),
    )
    return matches, meta


def raw_matches_to_json(matches: List[Dict[str, Any]], meta: Optional[FetchMeta]) -> Dict[str, Any]:
    return {
        "meta": meta.__dict__ if meta else {},
        "matches": [dict(m) for m in matches],
    }


def raw_matches_from_json(payload: Any) -> Tuple[List[Dict[str, Any]], Optional[FetchMeta]]:
    if isinstance(payload, list):
        return [m for m in payload if isinstance(m, dict)], None

    matches = [m for m in (payload.get("matches") or []) if isinstance(m, dict)]
    meta_dict = payload.get("meta") or {}
    if not meta_dict:
        return matches, None
    meta = FetchMeta(
        account_id=str(meta_dict.get("account_id") or ""),
        requested=int(meta_dict.get("requested") or len(matches)),
        fetched=int(meta_dict.get("fetched") or len(matches)),
        fetched_at=meta_dict.get("fetched_at") or "",
        source=meta_dict.get("source") or "file",
    )
    return matches, meta
