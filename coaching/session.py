"""
Session-scoped state: which recommendations the user has applied and the
progress baseline they are measured against.

Nothing here is global. A session is created per account, loaded and saved
explicitly through a JsonFileStore.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from .projection import ProjectedStats, calculate_projected_stats
from .recommendations import Recommendation
from .stats import PlayerAnalytics
from .storage import JsonFileStore, applied_key, progress_key

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


@dataclass
class RecommendationSession:
    account_id: str
    store: Optional[JsonFileStore] = None
    applied_ids: List[str] = field(default_factory=list)

    def load(self) -> "RecommendationSession":
        self.applied_ids = []
        if self.store is None:
            return self
        saved = self.store.get(applied_key(self.account_id))
        if saved is None:
            return self
        if not isinstance(saved, list):
            logger.warning(f"Ignoring malformed applied recommendations for {self.account_id}")
            return self
        self.applied_ids = list(dict.fromkeys(str(x) for x in saved))
        return self

    def save(self) -> bool:
        if self.store is None:
            return False
        return self.store.set(applied_key(self.account_id), list(self.applied_ids))

    def is_applied(self, recommendation_id: str) -> bool:
        return recommendation_id in self.applied_ids

    def toggle(self, recommendation_id: str) -> bool:
        """Flip one recommendation; returns whether it is now applied."""
        if recommendation_id in self.applied_ids:
            self.applied_ids.remove(recommendation_id)
            return False
        self.applied_ids.append(recommendation_id)
        return True

    def apply(self, recommendation_ids: Iterable[str]) -> None:
        for rid in recommendation_ids:
            if rid not in self.applied_ids:
                self.applied_ids.append(rid)

    def apply_all(self, recommendations: Iterable[Recommendation]) -> None:
        self.applied_ids = list(dict.fromkeys(r.id for r in recommendations))

    def clear(self) -> None:
        self.applied_ids = []

    def select(self, recommendations: Iterable[Recommendation]) -> List[Recommendation]:
        # Ids from an older analysis that no longer fire are skipped.
        applied = set(self.applied_ids)
        return [r for r in recommendations if r.id in applied]

    def projected_stats(
        self,
        analytics: Optional[PlayerAnalytics],
        recommendations: Iterable[Recommendation],
    ) -> Optional[ProjectedStats]:
        return calculate_projected_stats(analytics, self.select(recommendations))


def _snapshot(analytics: PlayerAnalytics) -> Dict[str, Any]:
    return {
        "timestamp": _now_iso(),
        "kda": asdict(analytics.kda),
        "win_rate": asdict(analytics.win_rate),
        "farm": asdict(analytics.farm) if analytics.farm else None,
        "match_count": analytics.match_count,
    }


@dataclass
class ProgressTracker:
    """Baseline and checkpoints recorded while following recommendations."""

    account_id: str
    store: Optional[JsonFileStore] = None
    data: Optional[Dict[str, Any]] = None

    def load(self) -> "ProgressTracker":
        self.data = None
        if self.store is None:
            return self
        saved = self.store.get(progress_key(self.account_id))
        if isinstance(saved, dict) and isinstance(saved.get("baseline"), dict):
            saved.setdefault("checkpoints", [])
            self.data = saved
        elif saved is not None:
            logger.warning(f"Ignoring malformed progress data for {self.account_id}")
        return self

    @property
    def has_baseline(self) -> bool:
        return bool(self.data and self.data.get("baseline"))

    def _persist(self) -> None:
        if self.store is not None and self.data is not None:
            self.store.set(progress_key(self.account_id), self.data)

    def save_baseline(self, analytics: Optional[PlayerAnalytics]) -> Optional[Dict[str, Any]]:
        if analytics is None:
            return None
        self.data = {"baseline": _snapshot(analytics), "checkpoints": []}
        self._persist()
        return self.data

    def add_checkpoint(self, analytics: Optional[PlayerAnalytics], note: str = "") -> Optional[Dict[str, Any]]:
        if analytics is None or not self.has_baseline:
            return None
        checkpoint = _snapshot(analytics)
        checkpoint["note"] = note
        self.data["checkpoints"] = list(self.data.get("checkpoints") or []) + [checkpoint]
        self._persist()
        return checkpoint

    def calculate_improvement(self, analytics: Optional[PlayerAnalytics]) -> Optional[Dict[str, Any]]:
        if analytics is None or not self.has_baseline:
            return None
        baseline = self.data["baseline"]
        try:
            base_kda = baseline["kda"]
            base_wr = baseline["win_rate"]
            kda_change = analytics.kda.kda_ratio - float(base_kda["kda_ratio"])
            deaths_change = analytics.kda.avg_deaths - float(base_kda["avg_deaths"])
            win_rate_change = analytics.win_rate.win_rate - float(base_wr["win_rate"])
            base_matches = int(baseline.get("match_count") or 0)
            gpm_change = 0
            base_farm = baseline.get("farm")
            if analytics.farm is not None and isinstance(base_farm, dict) and "avg_gpm" in base_farm:
                gpm_change = analytics.farm.avg_gpm - int(base_farm["avg_gpm"])
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning(f"Progress baseline for {self.account_id} is unusable: {exc}")
            return None

        return {
            "kda_change": round(kda_change, 2),
            "deaths_change": round(deaths_change, 1),
            "win_rate_change": round(win_rate_change, 1),
            "gpm_change": gpm_change,
            "matches_analyzed": analytics.match_count - base_matches,
        }
