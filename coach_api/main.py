"""Main FastAPI application with hexagonal architecture."""

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from coaching.config import match_source_from_env
from coaching.storage import JsonFileStore

from . import __version__
from .api.dependencies import get_match_source, get_report_builder, get_state_store
from .api.rest.routes import router as players_router
from .api.websocket.handlers import handle_analysis_websocket
from .application.ports.match_source import MatchSourcePort
from .application.ports.report_builder import ReportBuilderPort

load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Dota Coach API starting with match source '{match_source_from_env()}'")
    yield


app = FastAPI(
    title="Dota Coach API",
    description="Dota 2 player analytics, improvement recommendations and what-if projections",
    version=__version__,
    lifespan=lifespan,
)

# CORS configuration for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # Alternative dev port
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    api_key_configured: bool
    match_source: str


@app.get("/", tags=["meta"])
async def root():
    """API root with information and available endpoints."""
    return {
        "name": "Dota Coach API",
        "version": __version__,
        "description": "Dota 2 player analytics and recommendations",
        "docs": "/docs",
        "endpoints": {
            "health": "GET /health",
            "analysis": "GET /api/players/{account_id}/analysis",
            "projection": "POST /api/players/{account_id}/projection",
            "applied": "GET|PUT /api/players/{account_id}/applied",
            "trends": "GET /api/players/{account_id}/trends",
            "heroes": "GET /api/players/{account_id}/heroes",
            "quick": "GET /api/players/{account_id}/quick",
            "progress": "GET /api/players/{account_id}/progress",
            "websocket": "WS /ws/analysis",
        },
    }


@app.get("/health", response_model=HealthResponse, tags=["meta"])
async def health_check():
    """Check API health and configuration status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        api_key_configured=bool(os.environ.get("OPENDOTA_API_KEY")),
        match_source=match_source_from_env(),
    )


app.include_router(players_router)


@app.websocket("/ws/analysis")
async def websocket_analysis(
    websocket: WebSocket,
    match_source: MatchSourcePort = Depends(get_match_source),
    report_builder: ReportBuilderPort = Depends(get_report_builder),
    store: JsonFileStore = Depends(get_state_store),
):
    """WebSocket endpoint for player analysis with progress updates.

    Send {"action": "analyze", "accountId": "..."}; progress messages follow
    and the final message has status "completed" and the full report.
    """
    await handle_analysis_websocket(websocket, match_source, report_builder, store)
