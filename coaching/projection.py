"""
What-if projections: fold the expected impact of applied recommendations onto
the current aggregates and summarize the difference.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional

from .recommendations import Recommendation
from .stats import (
    FarmStats,
    PlayerAnalytics,
    TeamfightImpact,
    WinRateStats,
    _round_half_up,
    _round_int,
)

# Surviving longer converts part of the avoided deaths into fight participation.
DEATH_TO_KILLS = 0.5
DEATH_TO_ASSISTS = 0.2
MIN_PROJECTED_DEATHS = 0.5
NOISE_THRESHOLD = 0.5


@dataclass(frozen=True)
class ProjectedKda:
    avg_kills: float
    avg_deaths: float
    avg_assists: float
    kda_ratio: float


@dataclass(frozen=True)
class ProjectedStats:
    kda: ProjectedKda
    win_rate: WinRateStats
    farm: Optional[FarmStats]
    teamfight_impact: Optional[TeamfightImpact]
    applied_ids: tuple
    total_death_reduction: float


def _dedupe(recommendations: Iterable[Recommendation]) -> List[Recommendation]:
    seen = set()
    out: List[Recommendation] = []
    for rec in recommendations:
        if rec.id in seen:
            continue
        seen.add(rec.id)
        out.append(rec)
    return out


def calculate_projected_stats(
    analytics: Optional[PlayerAnalytics],
    applied: Optional[Iterable[Recommendation]],
) -> Optional[ProjectedStats]:
    if analytics is None or not applied:
        return None
    recs = _dedupe(applied)
    if not recs:
        return None

    kills = analytics.kda.avg_kills
    deaths = analytics.kda.avg_deaths
    assists = analytics.kda.avg_assists
    win_rate = analytics.win_rate.win_rate
    gpm = float(analytics.farm.avg_gpm) if analytics.farm else 0.0
    last_hits = float(analytics.farm.avg_last_hits) if analytics.farm else 0.0
    hero_damage = float(analytics.teamfight_impact.avg_hero_damage) if analytics.teamfight_impact else 0.0
    death_reduction = 0.0

    for rec in recs:
        impact = rec.expected_impact
        kills += impact.kills or 0.0
        assists += impact.assists or 0.0
        win_rate += impact.win_rate or 0.0
        gpm += impact.gpm or 0.0
        last_hits += impact.last_hits or 0.0
        hero_damage += impact.hero_damage or 0.0
        if impact.deaths:
            deaths += impact.deaths
            if impact.deaths < 0:
                death_reduction += abs(impact.deaths)

    # Cross-term applied once over the whole applied set.
    kills += DEATH_TO_KILLS * death_reduction
    assists += DEATH_TO_ASSISTS * death_reduction

    deaths = max(MIN_PROJECTED_DEATHS, deaths)
    win_rate = min(100.0, max(0.0, win_rate))

    kills = _round_half_up(kills, 1)
    deaths = _round_half_up(deaths, 1)
    assists = _round_half_up(assists, 1)
    # Recomputed from the projected tuple; summed kda_ratio deltas are ignored.
    kda_ratio = _round_half_up((kills + assists) / deaths, 2)

    farm = None
    if analytics.farm is not None:
        farm = replace(analytics.farm, avg_gpm=_round_int(gpm), avg_last_hits=_round_int(last_hits))
    teamfight = None
    if analytics.teamfight_impact is not None:
        teamfight = replace(analytics.teamfight_impact, avg_hero_damage=_round_int(hero_damage))

    return ProjectedStats(
        kda=ProjectedKda(avg_kills=kills, avg_deaths=deaths, avg_assists=assists, kda_ratio=kda_ratio),
        win_rate=replace(analytics.win_rate, win_rate=_round_half_up(win_rate, 1)),
        farm=farm,
        teamfight_impact=teamfight,
        applied_ids=tuple(sorted(r.id for r in recs)),
        total_death_reduction=_round_half_up(death_reduction, 1),
    )


def percentage_change(old: float, new: float, digits: Optional[int] = 1) -> float:
    # A zero baseline has no meaningful ratio; report full gain or nothing.
    if old == 0:
        return 100.0 if new > 0 else 0.0
    change = (new - old) / abs(old) * 100
    return change if digits is None else _round_half_up(change, digits)


def calculate_improvement_percentages(
    current: Optional[PlayerAnalytics],
    projected: Optional[ProjectedStats],
    digits: Optional[int] = 1,
) -> Optional[Dict[str, float]]:
    """Percent change per metric; `digits=None` keeps full precision."""
    if current is None or projected is None:
        return None

    def pct(old: float, new: float) -> float:
        return percentage_change(old, new, digits)

    improvements = {
        "kda_ratio": pct(current.kda.kda_ratio, projected.kda.kda_ratio),
        "avg_kills": pct(current.kda.avg_kills, projected.kda.avg_kills),
        "avg_deaths": pct(current.kda.avg_deaths, projected.kda.avg_deaths),
        "avg_assists": pct(current.kda.avg_assists, projected.kda.avg_assists),
        "win_rate": pct(current.win_rate.win_rate, projected.win_rate.win_rate),
    }
    if current.farm is not None and projected.farm is not None:
        improvements["avg_gpm"] = pct(current.farm.avg_gpm, projected.farm.avg_gpm)
        improvements["avg_last_hits"] = pct(current.farm.avg_last_hits, projected.farm.avg_last_hits)
    return improvements


@dataclass(frozen=True)
class ImprovementItem:
    metric: str
    change: str
    positive: bool
    icon: str


# (key, label, higher_is_better, icon_if_positive, icon_if_negative)
_SUMMARY_METRICS = (
    ("kda_ratio", "KDA Ratio", True, "📈", "📉"),
    ("avg_kills", "Avg Kills", True, "⚔️", "📉"),
    ("avg_deaths", "Avg Deaths", False, "✅", "⚠️"),
    ("win_rate", "Win Rate", True, "🎯", "📊"),
    ("avg_gpm", "GPM", True, "💰", "📊"),
)


def generate_improvement_summary(improvements: Optional[Dict[str, float]]) -> List[ImprovementItem]:
    if not improvements:
        return []
    summary: List[ImprovementItem] = []
    for key, label, higher_is_better, good_icon, bad_icon in _SUMMARY_METRICS:
        change = improvements.get(key)
        if change is None or abs(change) <= NOISE_THRESHOLD:
            continue
        positive = change > 0 if higher_is_better else change < 0
        summary.append(
            ImprovementItem(
                metric=label,
                change=f"{_round_half_up(change, 1):+.1f}",
                positive=positive,
                icon=good_icon if positive else bad_icon,
            )
        )
    return summary


def build_improvement_summary(
    current: Optional[PlayerAnalytics],
    projected: Optional[ProjectedStats],
) -> List[ImprovementItem]:
    return generate_improvement_summary(calculate_improvement_percentages(current, projected, digits=None))
