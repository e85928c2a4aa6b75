"""Application use cases."""

from .analyze_player import (
    AnalyzePlayerRequest,
    AnalyzePlayerResult,
    AnalyzePlayerUseCase,
)

__all__ = [
    "AnalyzePlayerRequest",
    "AnalyzePlayerResult",
    "AnalyzePlayerUseCase",
]
