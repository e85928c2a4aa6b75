"""Deterministic synthetic match history for demos and offline runs."""

from __future__ import annotations

import random
from typing import Any, Dict, List

# Per-profile ranges: (min, max) inclusive for each stat.
PROFILES: Dict[str, Dict[str, Any]] = {
    "carry": {
        "kills": (3, 14),
        "deaths": (1, 8),
        "assists": (2, 12),
        "gold_per_min": (480, 720),
        "xp_per_min": (520, 760),
        "last_hits": (180, 380),
        "hero_damage": (12000, 38000),
        "heroes": (1, 8, 44, 94, 114),
    },
    "support": {
        "kills": (0, 6),
        "deaths": (4, 12),
        "assists": (6, 22),
        "gold_per_min": (220, 360),
        "xp_per_min": (280, 420),
        "last_hits": (10, 60),
        "hero_damage": (4000, 16000),
        "heroes": (5, 26, 64, 87),
    },
    "struggling": {
        "kills": (0, 7),
        "deaths": (6, 13),
        "assists": (2, 10),
        "gold_per_min": (380, 520),
        "xp_per_min": (420, 560),
        "last_hits": (90, 200),
        "hero_damage": (5000, 14000),
        "heroes": (11, 17),
    },
}

ITEM_POOL = (1, 29, 36, 48, 50, 63, 65, 108, 114, 116, 135, 139, 147, 160, 208, 235, 254)


def generate_mock_matches(account_id: str, count: int = 30, profile: str = "") -> List[Dict[str, Any]]:
    """
    Build `count` raw match dicts shaped like OpenDota's player matches.

    The same account id always yields the same history. Without an explicit
    profile one is picked from the account id.
    """
    seed = sum(ord(c) * (i + 1) for i, c in enumerate(str(account_id)))
    rng = random.Random(seed)
    names = sorted(PROFILES)
    ranges = PROFILES.get(profile) or PROFILES[names[seed % len(names)]]

    matches: List[Dict[str, Any]] = []
    start = 1_700_000_000
    for idx in range(count):
        duration = rng.randint(1000, 3200)
        player_slot = rng.choice((0, 1, 2, 3, 4, 128, 129, 130, 131, 132))
        match: Dict[str, Any] = {
            "match_id": 7_000_000_000 + seed * 100 + idx,
            "start_time": start - idx * 7200,
            "duration": duration,
            "hero_id": rng.choice(ranges["heroes"]),
            "player_slot": player_slot,
            "radiant_win": rng.random() < 0.5,
            "denies": rng.randint(0, 20),
            "tower_damage": rng.randint(0, 8000),
            "hero_healing": rng.randint(0, 3000),
        }
        for key in ("kills", "deaths", "assists", "gold_per_min", "xp_per_min", "last_hits", "hero_damage"):
            low, high = ranges[key]
            match[key] = rng.randint(low, high)
        for slot in range(6):
            match[f"item_{slot}"] = rng.choice(ITEM_POOL) if rng.random() < 0.85 else 0
        matches.append(match)
    return matches
