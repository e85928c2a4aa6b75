"""
Rule-based coaching recommendations.

Each rule compares one aggregate against a threshold or the role benchmark
and, when it fires, emits a Recommendation with a fixed expected impact.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from .benchmarks import Role, benchmark_for, is_core_role
from .stats import PlayerAnalytics


class Priority(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"


PRIORITY_WEIGHTS: Dict[Priority, int] = {
    Priority.CRITICAL: 5,
    Priority.HIGH: 4,
    Priority.MEDIUM: 3,
    Priority.LOW: 2,
    Priority.INFO: 1,
}


class Category(str, Enum):
    POSITIONING = "Positioning"
    FARM_EFFICIENCY = "Farm Efficiency"
    MAP_AWARENESS = "Map Awareness"
    ITEMIZATION = "Itemization"
    HERO_MASTERY = "Hero Mastery"
    TEAM_COORDINATION = "Team Coordination"
    MECHANICS = "Mechanics"


@dataclass(frozen=True)
class ExpectedImpact:
    """Hand-tuned deltas a recommendation is expected to produce.

    Fields left as None are not affected by the recommendation.
    """

    kills: Optional[float] = None
    deaths: Optional[float] = None
    assists: Optional[float] = None
    kda_ratio: Optional[float] = None
    win_rate: Optional[float] = None
    gpm: Optional[float] = None
    last_hits: Optional[float] = None
    net_worth: Optional[float] = None
    hero_damage: Optional[float] = None

    def as_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


@dataclass(frozen=True)
class RecommendationMetric:
    current: float
    target: float
    unit: str


@dataclass(frozen=True)
class Recommendation:
    id: str
    category: Category
    priority: Priority
    title: str
    issue: str
    recommendation: str
    actionable_steps: Tuple[str, ...]
    expected_impact: ExpectedImpact
    metrics: RecommendationMetric

    @property
    def weight(self) -> int:
        return PRIORITY_WEIGHTS[self.priority]


# Win-rate threshold (percent) below which the team-play rule fires.
LOW_WIN_RATE = 45.0
LOW_KDA_RATIO = 2.0
HIGH_DEATHS = 7.0
MODERATE_DEATHS = 5.0
EARLY_DEATHS = 2.0
GPM_SLACK = 50
LAST_HITS_SLACK = 30
HERO_MIN_GAMES = 5
SMALL_POOL_HEROES = 5
SMALL_POOL_MIN_MATCHES = 20
LOW_HERO_DAMAGE = 10000
DAMAGE_ROLES = (Role.CARRY, Role.MIDLANE)


def _death_rules(analytics: PlayerAnalytics) -> List[Recommendation]:
    kda = analytics.kda
    target = benchmark_for(analytics.player_role).target_deaths
    if kda.avg_deaths > HIGH_DEATHS:
        return [
            Recommendation(
                id="high-deaths",
                category=Category.POSITIONING,
                priority=Priority.CRITICAL,
                title="High Death Count",
                issue=f"Average {kda.avg_deaths} deaths per game",
                recommendation="Focus on map awareness and positioning. Always check minimap before engaging.",
                actionable_steps=(
                    "Look at minimap every 3-5 seconds",
                    "Stay behind your team's frontline",
                    "Buy Observer Wards to track enemy movements",
                    "Avoid farming without vision of enemy cores",
                ),
                expected_impact=ExpectedImpact(deaths=-2.0, win_rate=5, kda_ratio=0.5),
                metrics=RecommendationMetric(current=kda.avg_deaths, target=target, unit="deaths/game"),
            )
        ]
    if kda.avg_deaths > MODERATE_DEATHS:
        return [
            Recommendation(
                id="moderate-deaths",
                category=Category.POSITIONING,
                priority=Priority.HIGH,
                title="Room for Death Reduction",
                issue=f"Average {kda.avg_deaths} deaths per game",
                recommendation="Improve positioning in teamfights. Don't initiate unless you're the initiator role.",
                actionable_steps=(
                    "Let your tanks engage first",
                    "Position near escape routes (trees, high ground)",
                    "Keep TP scroll ready for emergency escapes",
                    "Track enemy ultimates and play safer when they're available",
                ),
                expected_impact=ExpectedImpact(deaths=-1.0, win_rate=3, kda_ratio=0.3),
                metrics=RecommendationMetric(current=kda.avg_deaths, target=target, unit="deaths/game"),
            )
        ]
    return []


def _early_death_rule(analytics: PlayerAnalytics) -> List[Recommendation]:
    early = analytics.death_analysis.early_game_deaths
    if early <= EARLY_DEATHS:
        return []
    return [
        Recommendation(
            id="early-deaths",
            category=Category.MAP_AWARENESS,
            priority=Priority.HIGH,
            title="Dying Too Much in Laning Phase",
            issue=f"Average {early} early game deaths",
            recommendation="Play safer during the laning phase. Prioritize experience over risky last hits.",
            actionable_steps=(
                "Stay near your creeps for protection",
                "Buy extra Tangoes and Healing Salves",
                "Ask for support rotations if being pressured",
                "Pull creeps to tower if lane is dangerous",
                "Don't greed for last hits if enemy has kill potential",
            ),
            expected_impact=ExpectedImpact(deaths=-1.5, win_rate=4, gpm=20),
            metrics=RecommendationMetric(current=early, target=1.5, unit="early deaths/game"),
        )
    ]


def _kda_rule(analytics: PlayerAnalytics) -> List[Recommendation]:
    ratio = analytics.kda.kda_ratio
    if not ratio < LOW_KDA_RATIO:
        return []
    return [
        Recommendation(
            id="low-kda",
            category=Category.TEAM_COORDINATION,
            priority=Priority.HIGH,
            title="Low Kill Participation",
            issue=f"KDA ratio of {ratio:.2f}",
            recommendation="Increase teamfight participation. Carry TP scroll to join fights globally.",
            actionable_steps=(
                "Always carry a TP scroll",
                "Join teamfights even if farming",
                "Communicate with team before engaging",
                "Focus on securing assists if you can't get kills",
                "Use Smoke of Deceit for coordinated ganks",
            ),
            expected_impact=ExpectedImpact(kills=1.5, assists=3.0, kda_ratio=0.8, win_rate=6),
            metrics=RecommendationMetric(
                current=ratio,
                target=benchmark_for(analytics.player_role).target_kda,
                unit="KDA ratio",
            ),
        )
    ]


def _farm_rules(analytics: PlayerAnalytics) -> List[Recommendation]:
    farm = analytics.farm
    if farm is None or not is_core_role(analytics.player_role):
        return []
    benchmark = benchmark_for(analytics.player_role)
    out: List[Recommendation] = []

    if farm.avg_gpm < benchmark.avg_gpm - GPM_SLACK:
        out.append(
            Recommendation(
                id="low-farm",
                category=Category.FARM_EFFICIENCY,
                priority=Priority.HIGH,
                title="Low Farm Efficiency",
                issue=f"{farm.avg_gpm} GPM (target: {benchmark.avg_gpm}+)",
                recommendation="Improve last-hitting and jungle farming patterns. Don't stay in lane forever.",
                actionable_steps=(
                    "Practice last-hitting in demo mode",
                    "Stack jungle camps before farming them",
                    "Farm jungle between lane waves",
                    "Use abilities to farm faster (if mana allows)",
                    "Take unsafe farm only with escape mechanism ready",
                    "Push out waves then farm jungle",
                ),
                expected_impact=ExpectedImpact(gpm=80, net_worth=2500, win_rate=7),
                metrics=RecommendationMetric(current=farm.avg_gpm, target=benchmark.avg_gpm, unit="GPM"),
            )
        )

    if farm.avg_last_hits < benchmark.avg_last_hits - LAST_HITS_SLACK:
        out.append(
            Recommendation(
                id="low-cs",
                category=Category.MECHANICS,
                priority=Priority.MEDIUM,
                title="Low Last Hit Count",
                issue=f"{farm.avg_last_hits} average last hits",
                recommendation="Focus on improving last-hit mechanics. Aim for 50 CS by 10 minutes.",
                actionable_steps=(
                    "Practice last-hitting in demo mode for 10 mins daily",
                    "Learn attack animation timing",
                    "Use attack move for easier last-hitting",
                    "Don't auto-attack - only hit for last hits",
                    "Consider Quelling Blade for melee heroes",
                ),
                expected_impact=ExpectedImpact(last_hits=50, gpm=60, net_worth=2000),
                metrics=RecommendationMetric(
                    current=farm.avg_last_hits, target=benchmark.avg_last_hits, unit="last hits"
                ),
            )
        )
    return out


def _win_rate_rule(analytics: PlayerAnalytics) -> List[Recommendation]:
    wr = analytics.win_rate
    if not wr.win_rate < LOW_WIN_RATE:
        return []
    return [
        Recommendation(
            id="low-winrate",
            category=Category.TEAM_COORDINATION,
            priority=Priority.HIGH,
            title="Below Average Win Rate",
            issue=f"{wr.win_rate}% win rate ({wr.wins}W-{wr.losses}L)",
            recommendation="Focus on playing with your team and objective-based gameplay.",
            actionable_steps=(
                "Don't farm while team is fighting without you",
                "Push objectives after winning teamfights",
                "Communicate your intentions (Roshan, push, etc.)",
                "Avoid tilting - mute toxic players",
                "Play comfort heroes in ranked",
                "Take breaks after 2 losses in a row",
            ),
            expected_impact=ExpectedImpact(win_rate=8),
            metrics=RecommendationMetric(current=wr.win_rate, target=50, unit="% win rate"),
        )
    ]


def _hero_pool_rules(analytics: PlayerAnalytics) -> List[Recommendation]:
    pool = analytics.hero_pool
    if not pool.most_played_heroes:
        return []
    out: List[Recommendation] = []
    top = pool.most_played_heroes[0]

    if top.win_rate < LOW_WIN_RATE and top.games >= HERO_MIN_GAMES:
        out.append(
            Recommendation(
                id="hero-winrate",
                category=Category.HERO_MASTERY,
                priority=Priority.MEDIUM,
                title="Low Win Rate on Most Played Hero",
                issue=f"{top.win_rate}% win rate on Hero ID {top.hero_id} ({top.games} games)",
                recommendation="Watch professional replays and guides for this hero. Consider learning a new hero.",
                actionable_steps=(
                    "Watch high MMR replays of this hero",
                    "Study optimal item builds on Dotabuff/OpenDota",
                    "Learn hero matchups (good vs bad)",
                    "Practice hero mechanics in demo mode",
                    "Consider taking a break from this hero",
                ),
                expected_impact=ExpectedImpact(win_rate=10),
                metrics=RecommendationMetric(current=top.win_rate, target=50, unit="% hero win rate"),
            )
        )

    if pool.total_unique_heroes < SMALL_POOL_HEROES and analytics.match_count >= SMALL_POOL_MIN_MATCHES:
        out.append(
            Recommendation(
                id="hero-pool-small",
                category=Category.HERO_MASTERY,
                priority=Priority.LOW,
                title="Limited Hero Pool",
                issue=f"Only {pool.total_unique_heroes} unique heroes played",
                recommendation="Expand your hero pool to adapt to different team compositions and counters.",
                actionable_steps=(
                    "Try at least 2-3 heroes per role",
                    "Learn counter-picks to common heroes",
                    "Play unranked to practice new heroes",
                    "Start with mechanically simple heroes",
                    "Master 2-3 heroes per role before expanding",
                ),
                # Versatility gains are qualitative and do not move projected stats.
                expected_impact=ExpectedImpact(),
                metrics=RecommendationMetric(current=pool.total_unique_heroes, target=8, unit="unique heroes"),
            )
        )
    return out


def _damage_rule(analytics: PlayerAnalytics) -> List[Recommendation]:
    impact = analytics.teamfight_impact
    if impact is None or analytics.player_role not in DAMAGE_ROLES:
        return []
    if impact.avg_hero_damage >= LOW_HERO_DAMAGE:
        return []
    return [
        Recommendation(
            id="low-damage",
            category=Category.TEAM_COORDINATION,
            priority=Priority.MEDIUM,
            title="Low Teamfight Damage Output",
            issue=f"{impact.avg_hero_damage:,} average hero damage",
            recommendation="Focus on dealing damage in teamfights. Don't hesitate to use abilities.",
            actionable_steps=(
                "Use all your abilities in teamfights (don't save them)",
                "Target enemy supports first if you're a carry",
                "Build damage items before too much survivability",
                "Position to hit multiple enemies with AoE spells",
                "Practice ability combos in demo mode",
            ),
            expected_impact=ExpectedImpact(hero_damage=5000, kills=1.0, win_rate=4),
            metrics=RecommendationMetric(current=impact.avg_hero_damage, target=15000, unit="hero damage"),
        )
    ]


_RULES = (
    _death_rules,
    _early_death_rule,
    _kda_rule,
    _farm_rules,
    _win_rate_rule,
    _hero_pool_rules,
    _damage_rule,
)


def generate_recommendations(analytics: Optional[PlayerAnalytics]) -> List[Recommendation]:
    if analytics is None:
        return []
    recommendations: List[Recommendation] = []
    for rule in _RULES:
        recommendations.extend(rule(analytics))
    # sort is stable: equal priorities keep rule order
    recommendations.sort(key=lambda r: r.weight, reverse=True)
    return recommendations


def get_top_recommendations(recommendations: List[Recommendation], limit: int = 5) -> List[Recommendation]:
    return list(recommendations[:limit])


def filter_by_category(recommendations: List[Recommendation], category: object) -> List[Recommendation]:
    if category in (None, "all"):
        return list(recommendations)
    return [r for r in recommendations if r.category == category]


def filter_by_priority(recommendations: List[Recommendation], priority: object) -> List[Recommendation]:
    return [r for r in recommendations if r.priority == priority]


TOTAL_IMPACT_KEYS = ("win_rate", "kda_ratio", "deaths", "kills", "assists", "gpm")


def calculate_total_impact(recommendations: Iterable[Recommendation]) -> Dict[str, float]:
    totals = {key: 0.0 for key in TOTAL_IMPACT_KEYS}
    for rec in recommendations:
        for key, value in rec.expected_impact.as_dict().items():
            if key in totals:
                totals[key] += value
    return totals
