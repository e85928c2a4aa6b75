from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .config import state_dir_from_env

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def applied_key(account_id: str) -> str:
    return f"applied_recommendations_{account_id}"


def progress_key(account_id: str) -> str:
    return f"recommendation_progress_{account_id}"


@dataclass
class JsonFileStore:
    """Best-effort key/value store: one JSON document per key.

    Reads of missing, unreadable or corrupt entries return None; failed writes
    are logged and otherwise ignored.
    """

    base_dir: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.base_dir is None:
            self.base_dir = state_dir_from_env()
        self.base_dir = Path(self.base_dir)

    def _path(self, key: str) -> Path:
        assert self.base_dir is not None
        return self.base_dir / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> Any:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning(f"Discarding unreadable state for '{key}': {exc}")
            return None

    def set(self, key: str, value: Any) -> bool:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                json.dump(value, f, indent=2)
            return True
        except (OSError, TypeError, ValueError) as exc:
            logger.warning(f"Could not persist state for '{key}': {exc}")
            return False

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning(f"Could not delete state for '{key}': {exc}")
