from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Optional

from .benchmarks import benchmark_for, calculate_performance_score, compare_to_role, performance_grade
from .charts import prepare_chart_data
from .ingest import FetchMeta
from .projection import build_improvement_summary, calculate_improvement_percentages, calculate_projected_stats
from .recommendations import (
    Recommendation,
    calculate_total_impact,
    generate_recommendations,
    get_top_recommendations,
)
from .stats import PlayerAnalytics


def recommendation_to_dict(rec: Recommendation, applied: bool = False) -> Dict[str, Any]:
    return {
        "id": rec.id,
        "category": rec.category.value,
        "priority": rec.priority.value,
        "title": rec.title,
        "issue": rec.issue,
        "recommendation": rec.recommendation,
        "actionable_steps": list(rec.actionable_steps),
        "expected_impact": rec.expected_impact.as_dict(),
        "metrics": asdict(rec.metrics),
        "applied": applied,
    }


def _analytics_dict(analytics: PlayerAnalytics) -> Dict[str, Any]:
    data = asdict(analytics)
    data["player_role"] = analytics.player_role.value
    return data


def build_projection(
    analytics: PlayerAnalytics,
    recommendations: List[Recommendation],
    applied_ids: Iterable[str],
) -> Dict[str, Any]:
    """Projection, improvements, summary and chart rows for one applied set."""
    applied_set = set(applied_ids)
    applied = [r for r in recommendations if r.id in applied_set]
    projected = calculate_projected_stats(analytics, applied)
    improvements = calculate_improvement_percentages(analytics, projected)
    charts = prepare_chart_data(analytics, projected)
    return {
        "applied_ids": [r.id for r in applied],
        "total_impact": calculate_total_impact(applied),
        "projected": asdict(projected) if projected else None,
        "improvements": improvements,
        "summary": [asdict(item) for item in build_improvement_summary(analytics, projected)],
        "charts": asdict(charts) if charts else None,
    }


def build_report(
    analytics: PlayerAnalytics,
    applied_ids: Optional[Iterable[str]] = None,
    meta: Optional[FetchMeta] = None,
    recommendations: Optional[List[Recommendation]] = None,
) -> Dict[str, Any]:
    if recommendations is None:
        recommendations = generate_recommendations(analytics)
    applied_set = set(applied_ids or [])

    score = calculate_performance_score(analytics)
    projection = build_projection(analytics, recommendations, applied_set)

    return {
        "meta": asdict(meta) if meta else {"account_id": analytics.account_id},
        "analytics": _analytics_dict(analytics),
        "performance": {
            "score": score,
            "grade": asdict(performance_grade(score)),
            "benchmark": asdict(benchmark_for(analytics.player_role)),
            "comparison": compare_to_role(analytics),
        },
        "recommendations": [recommendation_to_dict(r, r.id in applied_set) for r in recommendations],
        "top_recommendations": [r.id for r in get_top_recommendations(recommendations)],
        **projection,
    }
