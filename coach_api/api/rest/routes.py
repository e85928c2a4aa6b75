"""REST API routes for player analysis."""

from dataclasses import asdict
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from coaching.config import DEFAULT_MATCH_COUNT
from coaching.ingest import validate_account_id
from coaching.session import ProgressTracker, RecommendationSession
from coaching.stats import analyze_trends, hero_performance, quick_stats
from coaching.storage import JsonFileStore

from ..dependencies import get_match_source, get_report_builder, get_state_store
from ..transformers.analysis_transformer import (
    camelize,
    transform_analysis_to_frontend,
    transform_projection_to_frontend,
)
from ...application.ports.match_source import MatchSourcePort
from ...application.ports.report_builder import ReportBuilderPort
from ...application.use_cases.analyze_player import (
    FETCH_ERROR,
    INTERNAL_ERROR,
    INVALID_REQUEST,
    NO_DATA,
    AnalyzePlayerRequest,
    AnalyzePlayerResult,
    AnalyzePlayerUseCase,
)

router = APIRouter(prefix="/api", tags=["players"])

TREND_MATCH_COUNT = 50

_STATUS_BY_CODE = {
    NO_DATA: 404,
    INVALID_REQUEST: 400,
    FETCH_ERROR: 502,
    INTERNAL_ERROR: 500,
}


class ProjectionRequest(BaseModel):
    """Request body for a what-if projection."""

    applied_ids: List[str] = Field(
        default_factory=list,
        alias="appliedIds",
        description="Recommendation ids to apply",
    )
    match_count: int = Field(
        default=DEFAULT_MATCH_COUNT,
        alias="matchCount",
        description="Recent matches to analyze",
    )

    class Config:
        populate_by_name = True


class AppliedRequest(BaseModel):
    """Request body for persisting applied recommendation ids."""

    applied_ids: List[str] = Field(..., alias="appliedIds")

    class Config:
        populate_by_name = True


class CheckpointRequest(BaseModel):
    """Request body for a progress checkpoint."""

    note: str = Field(default="", max_length=500)
    match_count: int = Field(
        default=DEFAULT_MATCH_COUNT,
        alias="matchCount",
    )

    class Config:
        populate_by_name = True


def _error(status_code: int, code: str, message: str, details: Dict[str, Any] | None = None) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            }
        },
    )


def _account(account_id: str) -> str:
    try:
        return validate_account_id(account_id)
    except ValueError as e:
        raise _error(400, INVALID_REQUEST, str(e), {"accountId": account_id})


def _parse_applied(applied: Optional[str]) -> List[str] | None:
    if applied is None:
        return None
    return [part.strip() for part in applied.split(",") if part.strip()]


async def _analyze(
    account_id: str,
    match_count: int,
    match_source: MatchSourcePort,
    report_builder: ReportBuilderPort,
    store: JsonFileStore,
    applied_ids: List[str] | None = None,
) -> AnalyzePlayerResult:
    use_case = AnalyzePlayerUseCase(match_source, report_builder, store)
    result = await use_case.execute(
        AnalyzePlayerRequest(
            account_id=account_id,
            match_count=match_count,
            applied_ids=applied_ids,
        )
    )
    if not result.success:
        code = result.error_code or INTERNAL_ERROR
        raise _error(
            _STATUS_BY_CODE.get(code, 500),
            code,
            result.error or "Analysis failed",
            {"accountId": account_id},
        )
    return result


@router.get("/players/{account_id}/analysis")
async def get_player_analysis(
    account_id: str,
    match_count: int = Query(DEFAULT_MATCH_COUNT, alias="matchCount"),
    applied: Optional[str] = Query(None, description="Comma-separated recommendation ids"),
    match_source: MatchSourcePort = Depends(get_match_source),
    report_builder: ReportBuilderPort = Depends(get_report_builder),
    store: JsonFileStore = Depends(get_state_store),
):
    """Get the full analysis report for a player.

    Without `applied` the ids saved for the account are used.

    Returns:
        Analytics, performance grade, recommendations and projection in camelCase
    """
    account = _account(account_id)
    result = await _analyze(account, match_count, match_source, report_builder, store, _parse_applied(applied))
    return transform_analysis_to_frontend(result.report)


@router.post("/players/{account_id}/projection")
async def project_player(
    account_id: str,
    request: ProjectionRequest,
    match_source: MatchSourcePort = Depends(get_match_source),
    report_builder: ReportBuilderPort = Depends(get_report_builder),
    store: JsonFileStore = Depends(get_state_store),
):
    """Project stats for an explicit set of applied recommendations."""
    account = _account(account_id)
    result = await _analyze(
        account, request.match_count, match_source, report_builder, store, request.applied_ids
    )
    return transform_projection_to_frontend(result.report)


@router.get("/players/{account_id}/applied")
async def get_applied(account_id: str, store: JsonFileStore = Depends(get_state_store)):
    account = _account(account_id)
    session = RecommendationSession(account, store).load()
    return {"accountId": account, "appliedIds": session.applied_ids}


@router.put("/players/{account_id}/applied")
async def put_applied(
    account_id: str,
    request: AppliedRequest,
    store: JsonFileStore = Depends(get_state_store),
):
    """Replace the saved applied recommendation ids for a player."""
    account = _account(account_id)
    session = RecommendationSession(account, store)
    session.apply(request.applied_ids)
    saved = session.save()
    return {"accountId": account, "appliedIds": session.applied_ids, "saved": saved}


@router.get("/players/{account_id}/trends")
async def get_trends(
    account_id: str,
    match_count: int = Query(TREND_MATCH_COUNT, alias="matchCount"),
    match_source: MatchSourcePort = Depends(get_match_source),
    report_builder: ReportBuilderPort = Depends(get_report_builder),
    store: JsonFileStore = Depends(get_state_store),
):
    """Compare the most recent 25 matches to the 25 before them."""
    account = _account(account_id)
    result = await _analyze(account, match_count, match_source, report_builder, store, [])
    try:
        trends = analyze_trends(result.matches or [])
    except ValueError as e:
        raise _error(400, INVALID_REQUEST, str(e), {"accountId": account})
    return camelize(asdict(trends))


@router.get("/players/{account_id}/quick")
async def get_quick_stats(
    account_id: str,
    match_count: int = Query(DEFAULT_MATCH_COUNT, alias="matchCount"),
    match_source: MatchSourcePort = Depends(get_match_source),
    report_builder: ReportBuilderPort = Depends(get_report_builder),
    store: JsonFileStore = Depends(get_state_store),
):
    """Headline KDA ratio, win rate and role without the full report."""
    account = _account(account_id)
    result = await _analyze(account, match_count, match_source, report_builder, store, [])
    return camelize(quick_stats(result.matches or []))


@router.get("/players/{account_id}/heroes")
async def get_heroes(
    account_id: str,
    match_count: int = Query(DEFAULT_MATCH_COUNT, alias="matchCount"),
    match_source: MatchSourcePort = Depends(get_match_source),
    report_builder: ReportBuilderPort = Depends(get_report_builder),
    store: JsonFileStore = Depends(get_state_store),
):
    """Best and worst heroes among those played at least three times."""
    account = _account(account_id)
    result = await _analyze(account, match_count, match_source, report_builder, store, [])
    heroes = hero_performance(result.matches or [])
    if heroes is None:
        raise _error(404, NO_DATA, "No hero data available", {"accountId": account})
    return camelize(asdict(heroes))


def _progress_body(account: str, tracker: ProgressTracker, improvement: Dict[str, Any] | None) -> Dict[str, Any]:
    data = tracker.data or {}
    return camelize({
        "account_id": account,
        "has_baseline": tracker.has_baseline,
        "baseline": data.get("baseline"),
        "checkpoints": data.get("checkpoints") or [],
        "improvement": improvement,
    })


@router.get("/players/{account_id}/progress")
async def get_progress(
    account_id: str,
    match_count: int = Query(DEFAULT_MATCH_COUNT, alias="matchCount"),
    match_source: MatchSourcePort = Depends(get_match_source),
    report_builder: ReportBuilderPort = Depends(get_report_builder),
    store: JsonFileStore = Depends(get_state_store),
):
    """Saved baseline and checkpoints, with improvement against current stats."""
    account = _account(account_id)
    tracker = ProgressTracker(account, store).load()
    if not tracker.has_baseline:
        return _progress_body(account, tracker, None)
    result = await _analyze(account, match_count, match_source, report_builder, store, [])
    return _progress_body(account, tracker, tracker.calculate_improvement(result.analytics))


@router.post("/players/{account_id}/progress/baseline")
async def save_progress_baseline(
    account_id: str,
    match_count: int = Query(DEFAULT_MATCH_COUNT, alias="matchCount"),
    match_source: MatchSourcePort = Depends(get_match_source),
    report_builder: ReportBuilderPort = Depends(get_report_builder),
    store: JsonFileStore = Depends(get_state_store),
):
    """Record current stats as the baseline; clears earlier checkpoints."""
    account = _account(account_id)
    result = await _analyze(account, match_count, match_source, report_builder, store, [])
    tracker = ProgressTracker(account, store)
    tracker.save_baseline(result.analytics)
    return _progress_body(account, tracker, tracker.calculate_improvement(result.analytics))


@router.post("/players/{account_id}/progress/checkpoint")
async def add_progress_checkpoint(
    account_id: str,
    request: CheckpointRequest,
    match_source: MatchSourcePort = Depends(get_match_source),
    report_builder: ReportBuilderPort = Depends(get_report_builder),
    store: JsonFileStore = Depends(get_state_store),
):
    account = _account(account_id)
    tracker = ProgressTracker(account, store).load()
    if not tracker.has_baseline:
        raise _error(
            400,
            INVALID_REQUEST,
            "No baseline recorded; POST progress/baseline first",
            {"accountId": account},
        )
    result = await _analyze(account, request.match_count, match_source, report_builder, store, [])
    tracker.add_checkpoint(result.analytics, request.note)
    return _progress_body(account, tracker, tracker.calculate_improvement(result.analytics))
