from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


OPENDOTA_BASE_URL = "https://api.opendota.com/api"

DEFAULT_MATCH_COUNT = 30
MAX_MATCH_COUNT = 100

# Fields requested from /players/{account_id}/matches via ?project=
MATCH_FIELDS = (
    "match_id",
    "start_time",
    "duration",
    "hero_id",
    "player_slot",
    "radiant_win",
    "kills",
    "deaths",
    "assists",
    "gold_per_min",
    "xp_per_min",
    "last_hits",
    "denies",
    "hero_damage",
    "tower_damage",
    "hero_healing",
    "item_0",
    "item_1",
    "item_2",
    "item_3",
    "item_4",
    "item_5",
)


@dataclass(frozen=True)
class CacheConfig:
    enabled: bool
    base_dir: Path


def cache_config_from_env() -> CacheConfig:
    enabled = os.environ.get("OPENDOTA_CACHE", "0").lower() in {"1", "true", "yes"}
    base_dir = Path(os.environ.get("OPENDOTA_CACHE_DIR", ".cache/opendota"))
    return CacheConfig(enabled=enabled, base_dir=base_dir)


def base_url_from_env() -> str:
    return os.environ.get("OPENDOTA_BASE_URL", OPENDOTA_BASE_URL).rstrip("/")


def state_dir_from_env() -> Path:
    return Path(os.environ.get("COACH_STATE_DIR", ".coach_state"))


def match_source_from_env() -> str:
    return os.environ.get("COACH_MATCH_SOURCE", "opendota").lower()
