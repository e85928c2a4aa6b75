"""Transform snake_case coaching reports to the front end's camelCase format."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

logger = logging.getLogger(__name__)

PROJECTION_KEYS = ("applied_ids", "total_impact", "projected", "improvements", "summary", "charts")


def _to_camel_case(snake_str: str) -> str:
    """Convert snake_case to camelCase."""
    components = snake_str.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


def camelize(value: Any) -> Any:
    """Recursively camelCase dict keys. Keys without underscores are kept as-is."""
    if isinstance(value, dict):
        return {
            (_to_camel_case(k) if isinstance(k, str) else k): camelize(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [camelize(v) for v in value]
    return value


def _generated_at() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def transform_analysis_to_frontend(report: Dict[str, Any]) -> Dict[str, Any]:
    """Transform a full analysis report.

    Args:
        report: Report from coaching.report.build_report

    Returns:
        camelCase report with a generation timestamp
    """
    result = camelize(report)
    result["generatedAt"] = _generated_at()
    logger.debug(f"Transformed report sections: {sorted(result)}")
    return result


def transform_projection_to_frontend(report: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only the projection part of a report (applied ids through charts)."""
    return camelize({k: report.get(k) for k in PROJECTION_KEYS})
