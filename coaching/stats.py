"""
Aggregate statistics over a player's recent matches.

Every reduction is pure and returns None for an empty match list so callers
can tell "no data" apart from "all zero".
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .benchmarks import Role
from .normalize import MatchRecord


# Duration thresholds (seconds) and weights for the death-phase heuristic.
EARLY_GAME_END_S = 1200
MID_GAME_END_S = 2400
EARLY_DEATH_WEIGHT = 0.5
MID_DEATH_WEIGHT = 0.5
LATE_DEATH_WEIGHT = 0.3

TOP_HEROES = 5
TOP_ITEMS = 10
TREND_PERIOD = 25
TREND_MIN_MATCHES = 20
HERO_PERFORMANCE_MIN_GAMES = 3


def _round_half_up(value: float, digits: int = 0) -> float:
    quant = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(quant, rounding=ROUND_HALF_UP))


def _round_int(value: float) -> int:
    return int(math.floor(value + 0.5))


def _ratio(kills: float, assists: float, deaths: float) -> float:
    # A deathless sample reports kills + assists rather than infinity.
    if deaths > 0:
        return (kills + assists) / deaths
    return kills + assists


@dataclass(frozen=True)
class KdaStats:
    avg_kills: float
    avg_deaths: float
    avg_assists: float
    kda_ratio: float
    total_kills: int
    total_deaths: int
    total_assists: int


@dataclass(frozen=True)
class FarmStats:
    avg_gpm: int
    avg_xpm: int
    avg_last_hits: int
    avg_denies: int


@dataclass(frozen=True)
class DeathAnalysis:
    """Deaths per game split by game phase.

    Estimated from match duration only (no per-death timestamps are
    available), so treat it as an approximation.
    """

    early_game_deaths: float
    mid_game_deaths: float
    late_game_deaths: float
    heuristic: bool = True


@dataclass(frozen=True)
class TeamfightImpact:
    avg_hero_damage: int
    avg_tower_damage: int
    avg_hero_healing: int
    avg_teamfight_participation: float


@dataclass(frozen=True)
class HeroStats:
    hero_id: int
    games: int
    wins: int
    kills: int
    deaths: int
    assists: int
    win_rate: float
    avg_kda: float


@dataclass(frozen=True)
class HeroPool:
    most_played_heroes: Tuple[HeroStats, ...]
    total_unique_heroes: int
    hero_versatility: float


@dataclass(frozen=True)
class WinRateStats:
    total_matches: int
    wins: int
    losses: int
    win_rate: float


@dataclass(frozen=True)
class ItemFrequency:
    item_id: int
    count: int
    frequency: float


@dataclass(frozen=True)
class ItemBuilds:
    frequent_items: Tuple[ItemFrequency, ...]
    avg_items_per_match: float


@dataclass(frozen=True)
class PlayerAnalytics:
    account_id: Optional[str]
    match_count: int
    analyzed_at: str
    player_role: Role
    kda: KdaStats
    death_analysis: DeathAnalysis
    hero_pool: HeroPool
    win_rate: WinRateStats
    item_builds: ItemBuilds
    farm: Optional[FarmStats] = None
    teamfight_impact: Optional[TeamfightImpact] = None


def calculate_kda(matches: Sequence[MatchRecord]) -> Optional[KdaStats]:
    if not matches:
        return None
    n = len(matches)
    kills = sum(m.kills for m in matches)
    deaths = sum(m.deaths for m in matches)
    assists = sum(m.assists for m in matches)
    return KdaStats(
        avg_kills=_round_half_up(kills / n, 1),
        avg_deaths=_round_half_up(deaths / n, 1),
        avg_assists=_round_half_up(assists / n, 1),
        kda_ratio=_round_half_up(_ratio(kills, assists, deaths), 2),
        total_kills=kills,
        total_deaths=deaths,
        total_assists=assists,
    )


def calculate_farm_efficiency(matches: Sequence[MatchRecord]) -> Optional[FarmStats]:
    if not matches:
        return None
    n = len(matches)
    return FarmStats(
        avg_gpm=_round_int(sum(m.gold_per_min for m in matches) / n),
        avg_xpm=_round_int(sum(m.xp_per_min for m in matches) / n),
        avg_last_hits=_round_int(sum(m.last_hits for m in matches) / n),
        avg_denies=_round_int(sum(m.denies for m in matches) / n),
    )


def analyze_deaths(matches: Sequence[MatchRecord]) -> Optional[DeathAnalysis]:
    if not matches:
        return None
    early = mid = late = 0.0
    for m in matches:
        if m.duration < EARLY_GAME_END_S:
            early += m.deaths * EARLY_DEATH_WEIGHT
        elif m.duration < MID_GAME_END_S:
            mid += m.deaths * MID_DEATH_WEIGHT
        else:
            late += m.deaths * LATE_DEATH_WEIGHT
    n = len(matches)
    return DeathAnalysis(
        early_game_deaths=_round_half_up(early / n, 1),
        mid_game_deaths=_round_half_up(mid / n, 1),
        late_game_deaths=_round_half_up(late / n, 1),
    )


def analyze_teamfight_impact(matches: Sequence[MatchRecord]) -> Optional[TeamfightImpact]:
    if not matches:
        return None
    n = len(matches)
    participation = sum(m.kills + m.assists for m in matches) / n
    return TeamfightImpact(
        avg_hero_damage=_round_int(sum(m.hero_damage for m in matches) / n),
        avg_tower_damage=_round_int(sum(m.tower_damage for m in matches) / n),
        avg_hero_healing=_round_int(sum(m.hero_healing for m in matches) / n),
        avg_teamfight_participation=_round_half_up(participation, 1),
    )


def _hero_rows(matches: Sequence[MatchRecord]) -> List[HeroStats]:
    # dicts keep insertion order, which settles ties on games played
    totals: Dict[int, Dict[str, int]] = {}
    for m in matches:
        row = totals.setdefault(m.hero_id, {"games": 0, "wins": 0, "kills": 0, "deaths": 0, "assists": 0})
        row["games"] += 1
        row["wins"] += 1 if m.is_win else 0
        row["kills"] += m.kills
        row["deaths"] += m.deaths
        row["assists"] += m.assists

    rows: List[HeroStats] = []
    for hero_id, t in totals.items():
        if t["deaths"] > 0:
            avg_kda = (t["kills"] + t["assists"]) / t["deaths"]
        else:
            avg_kda = (t["kills"] + t["assists"]) / t["games"]
        rows.append(
            HeroStats(
                hero_id=hero_id,
                games=t["games"],
                wins=t["wins"],
                kills=t["kills"],
                deaths=t["deaths"],
                assists=t["assists"],
                win_rate=_round_half_up(t["wins"] / t["games"] * 100, 1),
                avg_kda=_round_half_up(avg_kda, 2),
            )
        )
    rows.sort(key=lambda h: h.games, reverse=True)
    return rows


def analyze_hero_pool(matches: Sequence[MatchRecord]) -> Optional[HeroPool]:
    if not matches:
        return None
    rows = _hero_rows(matches)
    return HeroPool(
        most_played_heroes=tuple(rows[:TOP_HEROES]),
        total_unique_heroes=len(rows),
        hero_versatility=_round_half_up(len(rows) / len(matches), 2),
    )


def calculate_win_rate(matches: Sequence[MatchRecord]) -> Optional[WinRateStats]:
    if not matches:
        return None
    total = len(matches)
    wins = sum(1 for m in matches if m.is_win)
    return WinRateStats(
        total_matches=total,
        wins=wins,
        losses=total - wins,
        win_rate=_round_half_up(wins / total * 100, 1),
    )


def analyze_item_builds(matches: Sequence[MatchRecord]) -> Optional[ItemBuilds]:
    if not matches:
        return None
    counts: Counter = Counter()
    for m in matches:
        for item_id in m.items:
            if item_id > 0:
                counts[item_id] += 1
    n = len(matches)
    # Equal counts fall back to ascending item id.
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))[:TOP_ITEMS]
    frequent = tuple(
        ItemFrequency(item_id=item_id, count=count, frequency=_round_half_up(count / n * 100, 1))
        for item_id, count in ranked
    )
    return ItemBuilds(
        frequent_items=frequent,
        avg_items_per_match=sum(counts.values()) / n,
    )


def classify_role(avg_gpm: float, avg_xpm: float = 0.0, avg_last_hits: float = 0.0) -> Role:
    # Order matters: the first matching threshold wins.
    if avg_gpm > 500 and avg_last_hits > 200:
        return Role.CARRY
    elif avg_gpm > 450 and avg_xpm > 500:
        return Role.MIDLANE
    elif avg_gpm > 400 and avg_last_hits > 150:
        return Role.OFFLANE
    elif avg_gpm > 300:
        return Role.SUPPORT
    else:
        return Role.HARD_SUPPORT


def identify_player_role(matches: Sequence[MatchRecord]) -> Role:
    if not matches:
        return Role.UNKNOWN
    n = len(matches)
    return classify_role(
        avg_gpm=sum(m.gold_per_min for m in matches) / n,
        avg_xpm=sum(m.xp_per_min for m in matches) / n,
        avg_last_hits=sum(m.last_hits for m in matches) / n,
    )


def _now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def analyze_player_performance(
    matches: Sequence[MatchRecord],
    account_id: Optional[str] = None,
    analyzed_at: Optional[str] = None,
) -> Optional[PlayerAnalytics]:
    if not matches:
        return None
    return PlayerAnalytics(
        account_id=account_id,
        match_count=len(matches),
        analyzed_at=analyzed_at or _now_iso(),
        player_role=identify_player_role(matches),
        kda=calculate_kda(matches),
        farm=calculate_farm_efficiency(matches),
        death_analysis=analyze_deaths(matches),
        teamfight_impact=analyze_teamfight_impact(matches),
        hero_pool=analyze_hero_pool(matches),
        win_rate=calculate_win_rate(matches),
        item_builds=analyze_item_builds(matches),
    )


def quick_stats(matches: Sequence[MatchRecord]) -> Optional[Dict[str, Any]]:
    if not matches:
        return None
    return {
        "kda_ratio": calculate_kda(matches).kda_ratio,
        "win_rate": calculate_win_rate(matches).win_rate,
        "total_matches": len(matches),
        "player_role": identify_player_role(matches).value,
    }


@dataclass(frozen=True)
class TrendPeriod:
    matches: int
    kda: KdaStats
    win_rate: WinRateStats


@dataclass(frozen=True)
class TrendAnalysis:
    recent: TrendPeriod
    older: TrendPeriod
    kda_change: float
    win_rate_change: float
    improving: bool


def analyze_trends(matches: Sequence[MatchRecord]) -> TrendAnalysis:
    """
    Compare the most recent block of matches with the block before it.

    Matches are expected newest first, as the match source returns them.
    """
    if len(matches) < TREND_MIN_MATCHES:
        raise ValueError(
            f"Not enough match history for trend analysis: need {TREND_MIN_MATCHES}, got {len(matches)}."
        )
    recent = list(matches[:TREND_PERIOD])
    older = list(matches[TREND_PERIOD:TREND_PERIOD * 2])
    if not older:
        raise ValueError(
            f"Not enough match history for trend analysis: need more than {TREND_PERIOD} matches."
        )

    recent_period = TrendPeriod(len(recent), calculate_kda(recent), calculate_win_rate(recent))
    older_period = TrendPeriod(len(older), calculate_kda(older), calculate_win_rate(older))
    kda_change = recent_period.kda.kda_ratio - older_period.kda.kda_ratio
    return TrendAnalysis(
        recent=recent_period,
        older=older_period,
        kda_change=_round_half_up(kda_change, 2),
        win_rate_change=_round_half_up(recent_period.win_rate.win_rate - older_period.win_rate.win_rate, 1),
        improving=kda_change > 0,
    )


@dataclass(frozen=True)
class HeroPerformance:
    best_heroes: Tuple[HeroStats, ...]
    worst_heroes: Tuple[HeroStats, ...]
    most_played: Optional[HeroStats]
    total_unique_heroes: int
    versatility: float
    qualified: Tuple[HeroStats, ...] = field(default_factory=tuple)


def hero_performance(matches: Sequence[MatchRecord]) -> Optional[HeroPerformance]:
    pool = analyze_hero_pool(matches)
    if pool is None:
        return None
    qualified = sorted(
        (h for h in pool.most_played_heroes if h.games >= HERO_PERFORMANCE_MIN_GAMES),
        key=lambda h: h.win_rate,
        reverse=True,
    )
    return HeroPerformance(
        best_heroes=tuple(qualified[:3]),
        worst_heroes=tuple(reversed(qualified[-3:])),
        most_played=pool.most_played_heroes[0] if pool.most_played_heroes else None,
        total_unique_heroes=pool.total_unique_heroes,
        versatility=pool.hero_versatility,
        qualified=tuple(qualified),
    )
