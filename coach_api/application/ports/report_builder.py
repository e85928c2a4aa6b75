"""Port (interface) for building analysis reports."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from coaching.ingest import FetchMeta
from coaching.recommendations import Recommendation
from coaching.stats import PlayerAnalytics


class ReportBuilderPort(ABC):
    """Port for turning analytics into a report document."""

    @abstractmethod
    def build_report(
        self,
        analytics: PlayerAnalytics,
        recommendations: List[Recommendation],
        applied_ids: List[str],
        meta: FetchMeta | None,
    ) -> Dict[str, Any]:
        """Build the snake_case report for one applied set.

        Args:
            analytics: Aggregated player analytics
            recommendations: Recommendations generated for the analytics
            applied_ids: Recommendation ids the user has applied
            meta: Fetch metadata

        Returns:
            Report dictionary in internal format
        """
        ...
