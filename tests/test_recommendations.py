from dataclasses import replace

from coaching.benchmarks import Role
from coaching.normalize import MatchRecord
from coaching.recommendations import (
    Category,
    Priority,
    calculate_total_impact,
    filter_by_category,
    filter_by_priority,
    generate_recommendations,
    get_top_recommendations,
)
from coaching.stats import analyze_player_performance


def _analytics(n: int = 20, **kw):
    return analyze_player_performance([MatchRecord(**kw)] * n, account_id="1")


def _struggling():
    return _analytics(
        kills=2,
        deaths=8,
        assists=4,
        gold_per_min=350,
        xp_per_min=400,
        last_hits=50,
        duration=2000,
        hero_id=1,
        player_slot=0,
        radiant_win=False,
    )


def _healthy_carry():
    matches = [
        MatchRecord(
            kills=8,
            deaths=3,
            assists=10,
            gold_per_min=600,
            xp_per_min=600,
            last_hits=300,
            hero_damage=20000,
            duration=2500,
            hero_id=i % 6 + 1,
            player_slot=0,
            radiant_win=i % 5 < 3,
        )
        for i in range(20)
    ]
    return analyze_player_performance(matches)


def test_no_analytics_no_recommendations() -> None:
    assert generate_recommendations(None) == []


def test_healthy_player_gets_nothing() -> None:
    assert generate_recommendations(_healthy_carry()) == []


def test_struggling_player_sorted_by_priority() -> None:
    recs = generate_recommendations(_struggling())
    assert [r.id for r in recs] == [
        "high-deaths",
        "low-kda",
        "low-winrate",
        "hero-winrate",
        "hero-pool-small",
    ]
    weights = [r.weight for r in recs]
    assert weights == sorted(weights, reverse=True)
    assert recs[0].priority == Priority.CRITICAL
    assert recs[0].metrics.target == 8


def test_ratio_of_exactly_two_is_not_low() -> None:
    analytics = _analytics(kills=4, deaths=6, assists=8, gold_per_min=350, player_slot=0, radiant_win=True)
    assert analytics.kda.kda_ratio == 2.0
    ids = [r.id for r in generate_recommendations(analytics)]
    assert "low-kda" not in ids
    assert "moderate-deaths" in ids


def test_death_tiers_are_exclusive() -> None:
    seven = _analytics(kills=10, deaths=7, assists=10, player_slot=0, radiant_win=True)
    ids = [r.id for r in generate_recommendations(seven)]
    assert "moderate-deaths" in ids
    assert "high-deaths" not in ids

    five = _analytics(kills=10, deaths=5, assists=10, player_slot=0, radiant_win=True)
    ids = [r.id for r in generate_recommendations(five)]
    assert "moderate-deaths" not in ids


def test_early_deaths_rule() -> None:
    analytics = _analytics(kills=10, deaths=6, assists=10, duration=1000, player_slot=0, radiant_win=True)
    assert analytics.death_analysis.early_game_deaths == 3.0
    rec = next(r for r in generate_recommendations(analytics) if r.id == "early-deaths")
    assert rec.category == Category.MAP_AWARENESS
    assert rec.expected_impact.deaths == -1.5


def test_farm_rules_only_for_cores() -> None:
    carry = replace(_healthy_carry(), player_role=Role.CARRY)
    low = replace(carry, farm=replace(carry.farm, avg_gpm=450, avg_last_hits=200))
    ids = [r.id for r in generate_recommendations(low)]
    assert "low-farm" in ids
    assert "low-cs" in ids

    support = replace(low, player_role=Role.SUPPORT)
    ids = [r.id for r in generate_recommendations(support)]
    assert "low-farm" not in ids
    assert "low-cs" not in ids


def test_low_damage_for_carry_only() -> None:
    carry = _healthy_carry()
    weak = replace(carry, teamfight_impact=replace(carry.teamfight_impact, avg_hero_damage=8000))
    rec = next(r for r in generate_recommendations(weak) if r.id == "low-damage")
    assert rec.issue == "8,000 average hero damage"

    offlane = replace(weak, player_role=Role.OFFLANE)
    assert "low-damage" not in [r.id for r in generate_recommendations(offlane)]


def test_small_pool_has_no_numeric_impact() -> None:
    rec = next(r for r in generate_recommendations(_struggling()) if r.id == "hero-pool-small")
    assert rec.expected_impact.as_dict() == {}


def test_helpers() -> None:
    recs = generate_recommendations(_struggling())
    assert len(get_top_recommendations(recs, limit=2)) == 2
    assert filter_by_category(recs, "all") == recs
    assert [r.id for r in filter_by_category(recs, Category.HERO_MASTERY)] == ["hero-winrate", "hero-pool-small"]
    assert [r.id for r in filter_by_priority(recs, Priority.HIGH)] == ["low-kda", "low-winrate"]

    totals = calculate_total_impact(recs)
    assert totals["deaths"] == -2.0
    assert totals["win_rate"] == 5 + 6 + 8 + 10
    assert totals["kills"] == 1.5
    assert totals["gpm"] == 0.0
    assert calculate_total_impact([])["win_rate"] == 0.0
