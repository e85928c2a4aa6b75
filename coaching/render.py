from __future__ import annotations

from typing import Any, Dict


def render_text(report: Dict[str, Any]) -> str:
    meta = report.get("meta", {})
    analytics = report.get("analytics", {})
    kda = analytics.get("kda") or {}
    win_rate = analytics.get("win_rate") or {}
    farm = analytics.get("farm") or {}
    performance = report.get("performance", {})
    grade = performance.get("grade") or {}
    recommendations = report.get("recommendations", [])
    projected = report.get("projected")
    summary = report.get("summary", [])

    lines = []
    lines.append("PLAYER PERFORMANCE REPORT")
    lines.append(
        f"Account: {meta.get('account_id')} | Matches: {analytics.get('match_count', 0)} | "
        f"Role: {analytics.get('player_role')}"
    )
    lines.append("")

    lines.append("Overview")
    lines.append(
        f"K/D/A: {kda.get('avg_kills', 0):.1f}/{kda.get('avg_deaths', 0):.1f}/"
        f"{kda.get('avg_assists', 0):.1f} | KDA ratio: {kda.get('kda_ratio', 0):.2f}"
    )
    lines.append(
        f"Win rate: {win_rate.get('win_rate', 0):.1f}% "
        f"({win_rate.get('wins', 0)}W-{win_rate.get('losses', 0)}L)"
    )
    if farm:
        lines.append(f"GPM/XPM: {farm.get('avg_gpm', 0)}/{farm.get('avg_xpm', 0)} | Last hits: {farm.get('avg_last_hits', 0)}")
    lines.append(
        f"Performance score: {performance.get('score', 0)} ({grade.get('grade', '?')}, {grade.get('label', '')})"
    )
    lines.append("")

    lines.append("Recommendations")
    if not recommendations:
        lines.append("- none, performance meets the role benchmarks")
    for rec in recommendations:
        mark = "x" if rec.get("applied") else " "
        lines.append(f"[{mark}] {rec.get('priority')} {rec.get('id')}: {rec.get('title')}")
        lines.append(f"    {rec.get('issue')}")
        lines.append(f"    {rec.get('recommendation')}")

    if projected:
        pkda = projected.get("kda") or {}
        pwr = projected.get("win_rate") or {}
        lines.append("")
        lines.append("Projected (applied: " + ", ".join(report.get("applied_ids") or []) + ")")
        lines.append(
            f"K/D/A: {pkda.get('avg_kills', 0):.1f}/{pkda.get('avg_deaths', 0):.1f}/"
            f"{pkda.get('avg_assists', 0):.1f} | KDA ratio: {pkda.get('kda_ratio', 0):.2f} | "
            f"Win rate: {pwr.get('win_rate', 0):.1f}%"
        )
        for item in summary:
            lines.append(f"  {item.get('icon')} {item.get('metric')}: {item.get('change')}%")

    return "\n".join(lines)
