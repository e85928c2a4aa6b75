"""WebSocket handlers for real-time analysis progress."""

import asyncio
import json
import logging
from typing import Any, Dict

from fastapi import WebSocket, WebSocketDisconnect

from coaching.config import DEFAULT_MATCH_COUNT
from coaching.storage import JsonFileStore

from ..transformers.analysis_transformer import transform_analysis_to_frontend
from ...application.ports.match_source import MatchSourcePort, ProgressCallbackPort
from ...application.ports.report_builder import ReportBuilderPort
from ...application.use_cases.analyze_player import (
    AnalyzePlayerRequest,
    AnalyzePlayerUseCase,
)

logger = logging.getLogger(__name__)


class WebSocketProgressCallback(ProgressCallbackPort):
    """Progress callback that sends updates via WebSocket."""

    def __init__(self, websocket: WebSocket, account_id: str):
        self._websocket = websocket
        self._account_id = account_id

    async def report_progress(
        self, progress: int, message: str, status: str = "processing"
    ) -> None:
        """Send progress update via WebSocket."""
        await self._websocket.send_json({
            "status": status,
            "progress": progress,
            "message": message,
            "accountId": self._account_id,
        })


async def _send_error(websocket: WebSocket, message: str) -> None:
    await websocket.send_json({
        "status": "error",
        "progress": 0,
        "message": message,
    })


async def _run_analysis(
    websocket: WebSocket,
    use_case: AnalyzePlayerUseCase,
    request: AnalyzePlayerRequest,
) -> None:
    callback = WebSocketProgressCallback(websocket, request.account_id)
    await callback.report_progress(0, "Initializing...", "connecting")

    # Failures are already reported through the callback.
    result = await use_case.execute(request, callback)
    if not result.success:
        return

    await websocket.send_json({
        "status": "completed",
        "progress": 100,
        "message": "Analysis ready!",
        "accountId": request.account_id,
        "report": transform_analysis_to_frontend(result.report),
    })


def _log_task_result(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Analysis task failed: {exc!r}")


def _build_request(data: Dict[str, Any]) -> AnalyzePlayerRequest:
    applied = data.get("appliedIds")
    if applied is not None and not isinstance(applied, list):
        raise ValueError("appliedIds must be a list")
    return AnalyzePlayerRequest(
        account_id=str(data["accountId"]),
        match_count=data.get("matchCount", DEFAULT_MATCH_COUNT),
        applied_ids=applied,
    )


async def handle_analysis_websocket(
    websocket: WebSocket,
    match_source: MatchSourcePort,
    report_builder: ReportBuilderPort,
    store: JsonFileStore | None = None,
) -> None:
    """Handle WebSocket connection for player analysis.

    Expected client message format:
    {
        "action": "analyze",
        "accountId": "123456789",
        "matchCount": 30,          // Optional
        "appliedIds": ["low-kda"]  // Optional, defaults to saved ids
    }

    Server sends progress updates:
    {
        "status": "connecting" | "processing" | "completed" | "error",
        "progress": 0-100,
        "message": "Human-readable status"
    }

    A new "analyze" message cancels the analysis still in flight, so only
    the latest request produces a "completed" message.

    Args:
        websocket: FastAPI WebSocket connection
        match_source: Source of player matches
        report_builder: Report builder adapter
        store: State store for saved applied ids
    """
    await websocket.accept()
    use_case = AnalyzePlayerUseCase(match_source, report_builder, store)
    current: asyncio.Task | None = None

    try:
        while True:
            text = await websocket.receive_text()
            try:
                data = json.loads(text)
            except json.JSONDecodeError:
                await _send_error(websocket, "Invalid JSON message")
                continue

            action = data.get("action") if isinstance(data, dict) else None
            if action != "analyze":
                await _send_error(websocket, f"Unknown action: {action}")
                continue
            if not data.get("accountId"):
                await _send_error(websocket, "accountId is required")
                continue

            try:
                request = _build_request(data)
            except ValueError as e:
                await _send_error(websocket, str(e))
                continue

            if current is not None and not current.done():
                logger.info(f"Cancelling superseded analysis before account {request.account_id}")
                current.cancel()
            current = asyncio.create_task(_run_analysis(websocket, use_case, request))
            current.add_done_callback(_log_task_result)

    except WebSocketDisconnect:
        logger.info("Analysis WebSocket client disconnected")
    finally:
        if current is not None and not current.done():
            current.cancel()
