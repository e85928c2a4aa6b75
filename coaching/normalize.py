from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple


ITEM_SLOTS = 6


@dataclass(frozen=True)
class MatchRecord:
    kills: int = 0
    deaths: int = 0
    assists: int = 0
    gold_per_min: int = 0
    xp_per_min: int = 0
    last_hits: int = 0
    denies: int = 0
    duration: int = 0
    hero_damage: int = 0
    tower_damage: int = 0
    hero_healing: int = 0
    hero_id: int = 0
    player_slot: int = 0
    radiant_win: bool = False
    item_0: int = 0
    item_1: int = 0
    item_2: int = 0
    item_3: int = 0
    item_4: int = 0
    item_5: int = 0
    match_id: Optional[int] = None
    start_time: Optional[int] = None

    @property
    def is_radiant(self) -> bool:
        return self.player_slot < 128

    @property
    def is_win(self) -> bool:
        return self.is_radiant == self.radiant_win

    @property
    def items(self) -> Tuple[int, ...]:
        return (self.item_0, self.item_1, self.item_2, self.item_3, self.item_4, self.item_5)


def _safe_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


_COUNTERS = (
    "kills",
    "deaths",
    "assists",
    "gold_per_min",
    "xp_per_min",
    "last_hits",
    "denies",
    "duration",
    "hero_damage",
    "tower_damage",
    "hero_healing",
    "hero_id",
    "player_slot",
)


def normalize_match(raw: Dict[str, Any]) -> MatchRecord:
    values: Dict[str, Any] = {key: _safe_int(raw.get(key)) for key in _COUNTERS}
    for slot in range(ITEM_SLOTS):
        values[f"item_{slot}"] = _safe_int(raw.get(f"item_{slot}"))
    values["radiant_win"] = bool(raw.get("radiant_win"))
    values["match_id"] = _optional_int(raw.get("match_id"))
    values["start_time"] = _optional_int(raw.get("start_time"))
    return MatchRecord(**values)


def normalize_matches(raws: List[Dict[str, Any]]) -> List[MatchRecord]:
    return [normalize_match(r) for r in raws if isinstance(r, dict)]


def match_to_dict(match: MatchRecord) -> Dict[str, Any]:
    return dict(match.__dict__)
