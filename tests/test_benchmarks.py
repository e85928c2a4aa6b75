from coaching.benchmarks import (
    ROLE_BENCHMARKS,
    Role,
    benchmark_for,
    calculate_performance_score,
    compare_to_role,
    performance_grade,
)
from coaching.normalize import MatchRecord
from coaching.stats import analyze_player_performance


def _analytics(n: int = 10, **kw):
    return analyze_player_performance([MatchRecord(**kw)] * n)


def test_unknown_role_uses_support_benchmark() -> None:
    assert benchmark_for(Role.UNKNOWN) == ROLE_BENCHMARKS[Role.SUPPORT]
    assert benchmark_for("nonsense") == ROLE_BENCHMARKS[Role.SUPPORT]
    assert benchmark_for("Carry").avg_gpm == 550


def test_compare_to_role() -> None:
    analytics = _analytics(kills=2, deaths=8, assists=4, gold_per_min=350)
    comparison = compare_to_role(analytics)
    assert comparison["kda"]["status"] == "needs_improvement"
    assert comparison["deaths"]["status"] == "good"
    assert comparison["gpm"]["difference"] == 0
    assert compare_to_role(None) == {}


def test_score_is_clamped() -> None:
    weak = _analytics(kills=2, deaths=8, assists=4, gold_per_min=350, player_slot=0, radiant_win=False)
    assert calculate_performance_score(weak) == 19

    strong = _analytics(
        kills=8, deaths=3, assists=10, gold_per_min=600, last_hits=300, player_slot=0, radiant_win=True
    )
    assert calculate_performance_score(strong) == 100
    assert calculate_performance_score(None) == 0


def test_grades() -> None:
    assert performance_grade(90).grade == "S"
    assert performance_grade(89).grade == "A"
    assert performance_grade(60).label == "Average"
    assert performance_grade(49).grade == "F"
