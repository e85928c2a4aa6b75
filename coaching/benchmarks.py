"""Per-role reference values and the scoring built on top of them."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from .stats import PlayerAnalytics


class Role(str, Enum):
    """Resource priority of a player, position 1 to 5."""

    CARRY = "Carry"
    MIDLANE = "Midlane"
    OFFLANE = "Offlane"
    SUPPORT = "Support"
    HARD_SUPPORT = "Hard Support"
    UNKNOWN = "Unknown"


CORE_ROLES = (Role.CARRY, Role.MIDLANE, Role.OFFLANE)


@dataclass(frozen=True)
class RoleBenchmark:
    avg_gpm: int
    avg_xpm: int
    avg_last_hits: int
    target_kda: float
    target_deaths: int


ROLE_BENCHMARKS: Dict[Role, RoleBenchmark] = {
    Role.CARRY: RoleBenchmark(avg_gpm=550, avg_xpm=600, avg_last_hits=250, target_kda=3.0, target_deaths=5),
    Role.MIDLANE: RoleBenchmark(avg_gpm=500, avg_xpm=550, avg_last_hits=180, target_kda=2.8, target_deaths=6),
    Role.OFFLANE: RoleBenchmark(avg_gpm=450, avg_xpm=500, avg_last_hits=150, target_kda=2.5, target_deaths=7),
    Role.SUPPORT: RoleBenchmark(avg_gpm=350, avg_xpm=400, avg_last_hits=50, target_kda=2.0, target_deaths=8),
    Role.HARD_SUPPORT: RoleBenchmark(avg_gpm=300, avg_xpm=350, avg_last_hits=30, target_kda=1.8, target_deaths=9),
}


def _as_role(role: Any) -> Optional[Role]:
    if isinstance(role, Role):
        return role
    try:
        return Role(str(role))
    except ValueError:
        return None


def benchmark_for(role: Any) -> RoleBenchmark:
    """Benchmark for a role; unknown roles are measured against Support."""
    resolved = _as_role(role)
    if resolved is None or resolved not in ROLE_BENCHMARKS:
        return ROLE_BENCHMARKS[Role.SUPPORT]
    return ROLE_BENCHMARKS[resolved]


def is_core_role(role: Any) -> bool:
    return _as_role(role) in CORE_ROLES


def _status(good: bool) -> str:
    return "good" if good else "needs_improvement"


def compare_to_role(analytics: Optional["PlayerAnalytics"], role: Any = None) -> Dict[str, Dict[str, Any]]:
    if analytics is None:
        return {}
    benchmark = benchmark_for(role if role is not None else analytics.player_role)
    comparison: Dict[str, Dict[str, Any]] = {}

    kda = analytics.kda
    comparison["kda"] = {
        "current": kda.kda_ratio,
        "benchmark": benchmark.target_kda,
        "difference": round(kda.kda_ratio - benchmark.target_kda, 2),
        "status": _status(kda.kda_ratio >= benchmark.target_kda),
    }
    comparison["deaths"] = {
        "current": kda.avg_deaths,
        "benchmark": benchmark.target_deaths,
        "difference": round(kda.avg_deaths - benchmark.target_deaths, 1),
        "status": _status(kda.avg_deaths <= benchmark.target_deaths),
    }

    farm = analytics.farm
    if farm is not None:
        comparison["gpm"] = {
            "current": farm.avg_gpm,
            "benchmark": benchmark.avg_gpm,
            "difference": farm.avg_gpm - benchmark.avg_gpm,
            "status": _status(farm.avg_gpm >= benchmark.avg_gpm),
        }
        comparison["last_hits"] = {
            "current": farm.avg_last_hits,
            "benchmark": benchmark.avg_last_hits,
            "difference": farm.avg_last_hits - benchmark.avg_last_hits,
            "status": _status(farm.avg_last_hits >= benchmark.avg_last_hits),
        }
    return comparison


def calculate_performance_score(analytics: Optional["PlayerAnalytics"], role: Any = None) -> int:
    if analytics is None:
        return 0
    role = role if role is not None else analytics.player_role
    benchmark = benchmark_for(role)
    score = 100.0

    score += (analytics.kda.kda_ratio - benchmark.target_kda) * 5
    score -= (analytics.kda.avg_deaths - benchmark.target_deaths) * 3

    if is_core_role(role) and analytics.farm is not None:
        score += ((analytics.farm.avg_gpm - benchmark.avg_gpm) / 50) * 5

    win_rate = analytics.win_rate.win_rate
    if win_rate > 50:
        score += (win_rate - 50) * 2
    else:
        score -= (50 - win_rate) * 1.5

    return int(max(0, min(100, math.floor(score + 0.5))))


@dataclass(frozen=True)
class PerformanceGrade:
    grade: str
    color: str
    label: str


_GRADES = (
    (90, PerformanceGrade("S", "#FFD700", "Exceptional")),
    (80, PerformanceGrade("A", "#4CAF50", "Excellent")),
    (70, PerformanceGrade("B", "#8BC34A", "Good")),
    (60, PerformanceGrade("C", "#FFC107", "Average")),
    (50, PerformanceGrade("D", "#FF9800", "Below Average")),
)


def performance_grade(score: float) -> PerformanceGrade:
    for floor, grade in _GRADES:
        if score >= floor:
            return grade
    return PerformanceGrade("F", "#F44336", "Needs Improvement")
