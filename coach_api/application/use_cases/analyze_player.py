"""Use case for analyzing a player's recent matches."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Any, Dict, List

from coaching.config import DEFAULT_MATCH_COUNT
from coaching.ingest import FetchMeta
from coaching.normalize import MatchRecord
from coaching.recommendations import Recommendation, generate_recommendations
from coaching.session import RecommendationSession
from coaching.stats import PlayerAnalytics, analyze_player_performance
from coaching.storage import JsonFileStore

from ..ports.match_source import MatchSourcePort, ProgressCallbackPort
from ..ports.report_builder import ReportBuilderPort

logger = logging.getLogger(__name__)

# Thread pool for running blocking I/O operations
_executor = ThreadPoolExecutor(max_workers=4)

NO_DATA = "NO_DATA"
INVALID_REQUEST = "INVALID_REQUEST"
FETCH_ERROR = "FETCH_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass
class AnalyzePlayerRequest:
    """Request to analyze a player.

    `applied_ids` of None means "use the ids saved for this account".
    """

    account_id: str
    match_count: int = DEFAULT_MATCH_COUNT
    applied_ids: List[str] | None = None


@dataclass
class AnalyzePlayerResult:
    """Result of a player analysis."""

    success: bool
    report: Dict[str, Any] | None = None
    error: str | None = None
    error_code: str | None = None
    analytics: PlayerAnalytics | None = None
    matches: List[MatchRecord] | None = None
    recommendations: List[Recommendation] | None = None
    meta: FetchMeta | None = None


class AnalyzePlayerUseCase:
    """Use case for analyzing a player.

    This orchestrates the process of:
    1. Fetching recent matches from the match source
    2. Aggregating analytics and generating recommendations
    3. Building the report for the applied recommendation set
    """

    def __init__(
        self,
        match_source: MatchSourcePort,
        report_builder: ReportBuilderPort,
        store: JsonFileStore | None = None,
    ):
        self._match_source = match_source
        self._report_builder = report_builder
        self._store = store

    def _applied_ids(self, request: AnalyzePlayerRequest) -> List[str]:
        if request.applied_ids is not None:
            return list(dict.fromkeys(str(x) for x in request.applied_ids))
        if self._store is None:
            return []
        return RecommendationSession(request.account_id, self._store).load().applied_ids

    async def execute(
        self,
        request: AnalyzePlayerRequest,
        progress_callback: ProgressCallbackPort | None = None,
    ) -> AnalyzePlayerResult:
        """Execute the analysis use case.

        Args:
            request: Analysis request
            progress_callback: Optional callback for progress updates

        Returns:
            Analysis result; failures carry an error code instead of raising
        """
        loop = asyncio.get_running_loop()

        try:
            if progress_callback:
                await progress_callback.report_progress(
                    10, "Fetching recent matches...", "processing"
                )

            fetch_func = partial(
                self._match_source.fetch_matches,
                request.account_id,
                request.match_count,
            )
            matches, meta = await loop.run_in_executor(_executor, fetch_func)

            if not matches:
                return await self._fail(
                    progress_callback,
                    f"No matches found for account {request.account_id}.",
                    NO_DATA,
                )

            if progress_callback:
                await progress_callback.report_progress(
                    40, f"Analyzing {len(matches)} matches...", "processing"
                )

            analyze_func = partial(
                analyze_player_performance,
                matches,
                account_id=request.account_id,
            )
            analytics = await loop.run_in_executor(_executor, analyze_func)
            if analytics is None:
                return await self._fail(
                    progress_callback,
                    f"No usable matches for account {request.account_id}.",
                    NO_DATA,
                )

            if progress_callback:
                await progress_callback.report_progress(
                    65, "Generating recommendations...", "processing"
                )

            recommendations = generate_recommendations(analytics)
            applied_ids = await loop.run_in_executor(
                _executor, partial(self._applied_ids, request)
            )

            if progress_callback:
                await progress_callback.report_progress(
                    85, "Projecting improvements...", "processing"
                )

            build_func = partial(
                self._report_builder.build_report,
                analytics,
                recommendations,
                applied_ids,
                meta,
            )
            report = await loop.run_in_executor(_executor, build_func)

            logger.info(
                f"Analyzed account {request.account_id}: {len(matches)} matches, "
                f"{len(recommendations)} recommendations, {len(report.get('applied_ids') or [])} applied"
            )
            return AnalyzePlayerResult(
                success=True,
                report=report,
                analytics=analytics,
                matches=matches,
                recommendations=recommendations,
                meta=meta,
            )

        except ValueError as e:
            return await self._fail(progress_callback, str(e), INVALID_REQUEST)
        except RuntimeError as e:
            logger.error(f"Fetch failed for account {request.account_id}: {e}")
            return await self._fail(progress_callback, str(e), FETCH_ERROR)
        except Exception as e:
            logger.exception(f"Analysis failed for account {request.account_id}")
            return await self._fail(progress_callback, f"Error analyzing player: {e}", INTERNAL_ERROR)

    async def _fail(
        self,
        progress_callback: ProgressCallbackPort | None,
        message: str,
        code: str,
    ) -> AnalyzePlayerResult:
        if progress_callback:
            await progress_callback.report_progress(0, f"Error: {message}", "error")
        return AnalyzePlayerResult(success=False, error=message, error_code=code)
