import pytest

from coaching.benchmarks import Role
from coaching.normalize import MatchRecord
from coaching.stats import (
    _round_half_up,
    analyze_deaths,
    analyze_hero_pool,
    analyze_item_builds,
    analyze_player_performance,
    analyze_trends,
    calculate_farm_efficiency,
    calculate_kda,
    calculate_win_rate,
    classify_role,
    hero_performance,
    identify_player_role,
    quick_stats,
)


def _match(**kw) -> MatchRecord:
    return MatchRecord(**kw)


def test_empty_inputs_return_none() -> None:
    assert calculate_kda([]) is None
    assert calculate_farm_efficiency([]) is None
    assert analyze_deaths([]) is None
    assert calculate_win_rate([]) is None
    assert analyze_player_performance([]) is None
    assert quick_stats([]) is None
    assert identify_player_role([]) == Role.UNKNOWN


def test_single_deathless_match_ratio() -> None:
    kda = calculate_kda([_match(kills=5, deaths=0, assists=3)])
    assert kda.kda_ratio == 8.0
    assert kda.avg_kills == 5.0
    assert kda.total_deaths == 0


def test_kda_uses_totals() -> None:
    matches = [_match(kills=4, deaths=6, assists=8)] * 20
    kda = calculate_kda(matches)
    assert kda.kda_ratio == 2.0
    assert kda.avg_deaths == 6.0


def test_averages_round_half_up() -> None:
    kda = calculate_kda([_match(kills=1), _match(kills=1), _match(kills=0)])
    assert kda.avg_kills == 0.7
    assert _round_half_up(0.25, 1) == 0.3
    assert _round_half_up(2.675, 2) == 2.68
    farm = calculate_farm_efficiency([_match(gold_per_min=501), _match(gold_per_min=500)])
    assert farm.avg_gpm == 501


def test_wins_and_losses_partition_matches() -> None:
    matches = [
        _match(player_slot=0, radiant_win=True),
        _match(player_slot=128, radiant_win=True),
        _match(player_slot=129, radiant_win=False),
        _match(player_slot=3, radiant_win=False),
        _match(player_slot=1, radiant_win=True),
    ]
    wr = calculate_win_rate(matches)
    assert wr.wins + wr.losses == len(matches)
    assert wr.wins == 3
    assert wr.win_rate == 60.0


@pytest.mark.parametrize(
    "gpm,xpm,lh,expected",
    [
        (600, 0, 300, Role.CARRY),
        (470, 520, 100, Role.MIDLANE),
        (420, 0, 160, Role.OFFLANE),
        (320, 0, 0, Role.SUPPORT),
        (250, 0, 0, Role.HARD_SUPPORT),
    ],
)
def test_classify_role(gpm: int, xpm: int, lh: int, expected: Role) -> None:
    assert classify_role(gpm, xpm, lh) == expected


def test_death_phases_from_duration() -> None:
    matches = [
        _match(duration=1000, deaths=6),
        _match(duration=2000, deaths=4),
        _match(duration=3000, deaths=10),
    ]
    deaths = analyze_deaths(matches)
    assert deaths.early_game_deaths == 1.0
    assert deaths.mid_game_deaths == 0.7
    assert deaths.late_game_deaths == 1.0
    assert deaths.heuristic


def test_hero_pool_orders_by_games() -> None:
    matches = [
        _match(hero_id=1, kills=5, assists=3),
        _match(hero_id=2, kills=1, deaths=2, assists=1),
        _match(hero_id=1, kills=5, assists=3),
    ]
    pool = analyze_hero_pool(matches)
    assert pool.total_unique_heroes == 2
    assert pool.hero_versatility == 0.67
    top = pool.most_played_heroes[0]
    assert top.hero_id == 1
    assert top.games == 2
    # no deaths: kills + assists per game
    assert top.avg_kda == 8.0
    assert pool.most_played_heroes[1].avg_kda == 1.0


def test_item_builds_ignore_empty_slots() -> None:
    matches = [
        _match(item_0=1, item_1=48),
        _match(item_0=1, item_3=0),
    ]
    builds = analyze_item_builds(matches)
    assert builds.frequent_items[0].item_id == 1
    assert builds.frequent_items[0].count == 2
    assert builds.frequent_items[0].frequency == 100.0
    assert [f.item_id for f in builds.frequent_items] == [1, 48]
    assert builds.avg_items_per_match == 1.5


def test_analyze_player_performance_fields() -> None:
    matches = [_match(kills=10, deaths=2, assists=5, gold_per_min=620, xp_per_min=650, last_hits=280, hero_id=8)] * 4
    analytics = analyze_player_performance(matches, account_id="42", analyzed_at="2026-01-01T00:00:00Z")
    assert analytics.account_id == "42"
    assert analytics.match_count == 4
    assert analytics.player_role == Role.CARRY
    assert analytics.farm.avg_gpm == 620
    assert analytics.teamfight_impact.avg_teamfight_participation == 15.0
    assert analytics.analyzed_at == "2026-01-01T00:00:00Z"


def test_trends_require_enough_history() -> None:
    with pytest.raises(ValueError):
        analyze_trends([_match()] * 19)
    with pytest.raises(ValueError):
        analyze_trends([_match()] * 25)


def test_trends_compare_recent_block_to_older() -> None:
    recent = [_match(kills=6, deaths=2, assists=6, player_slot=0, radiant_win=True)] * 25
    older = [_match(kills=2, deaths=4, assists=2, player_slot=0, radiant_win=False)] * 10
    trends = analyze_trends(recent + older)
    assert trends.recent.matches == 25
    assert trends.older.matches == 10
    assert trends.kda_change == 5.0
    assert trends.win_rate_change == 100.0
    assert trends.improving


def test_hero_performance_needs_three_games() -> None:
    matches = (
        [_match(hero_id=1, player_slot=0, radiant_win=True)] * 3
        + [_match(hero_id=2, player_slot=0, radiant_win=False)] * 4
        + [_match(hero_id=3, player_slot=0, radiant_win=True)] * 2
    )
    perf = hero_performance(matches)
    assert [h.hero_id for h in perf.qualified] == [1, 2]
    assert perf.best_heroes[0].hero_id == 1
    assert perf.worst_heroes[0].hero_id == 2
    assert perf.most_played.hero_id == 2
    assert hero_performance([]) is None


def test_item_ties_order_by_item_id() -> None:
    builds = analyze_item_builds([_match(item_0=116, item_1=48, item_2=1), _match(item_0=48)])
    assert [f.item_id for f in builds.frequent_items] == [48, 1, 116]


def test_quick_stats() -> None:
    matches = [_match(kills=10, deaths=2, assists=5, gold_per_min=620, xp_per_min=650, last_hits=280)] * 4
    assert quick_stats(matches) == {
        "kda_ratio": 7.5,
        "win_rate": 0.0,
        "total_matches": 4,
        "player_role": "Carry",
    }
