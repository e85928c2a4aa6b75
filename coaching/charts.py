"""Flat row structures for the charting front end."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .projection import ProjectedStats
from .stats import PlayerAnalytics


Row = Dict[str, Any]


@dataclass(frozen=True)
class ChartData:
    kda_bar_data: List[Row]
    win_rate_data: List[Row]
    kda_ratio_data: List[Row]
    farm_data: Optional[List[Row]]
    has_projected: bool


def _row(metric: str, current: float, projected: float) -> Row:
    return {"metric": metric, "Current": current, "Projected": projected}


def prepare_chart_data(
    analytics: Optional[PlayerAnalytics],
    projected: Optional[ProjectedStats] = None,
) -> Optional[ChartData]:
    if analytics is None:
        return None

    kda = analytics.kda
    # Without a projection both series show the current values.
    proj_kda = projected.kda if projected else kda
    proj_win_rate = projected.win_rate.win_rate if projected else analytics.win_rate.win_rate

    farm_data = None
    if analytics.farm is not None and projected is not None and projected.farm is not None:
        farm_data = [
            _row("GPM", analytics.farm.avg_gpm, projected.farm.avg_gpm),
            _row("Last Hits", analytics.farm.avg_last_hits, projected.farm.avg_last_hits),
        ]

    return ChartData(
        kda_bar_data=[
            _row("Kills", kda.avg_kills, proj_kda.avg_kills),
            _row("Deaths", kda.avg_deaths, proj_kda.avg_deaths),
            _row("Assists", kda.avg_assists, proj_kda.avg_assists),
        ],
        win_rate_data=[_row("Win Rate", analytics.win_rate.win_rate, proj_win_rate)],
        kda_ratio_data=[
            {"stage": "Current", "value": kda.kda_ratio},
            {"stage": "Projected", "value": proj_kda.kda_ratio},
        ],
        farm_data=farm_data,
        has_projected=projected is not None,
    )
