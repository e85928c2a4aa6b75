from __future__ import annotations

import hashlib
import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from .config import CacheConfig, base_url_from_env, cache_config_from_env

logger = logging.getLogger(__name__)

RETRY_STATUS = (429, 500, 502, 503, 504)


@dataclass
class OpenDotaClient:
    api_key: Optional[str] = None
    timeout_s: int = 30
    cache: Optional[CacheConfig] = None
    base_url: Optional[str] = None

    def __post_init__(self) -> None:
        self.session = requests.Session()
        self.session.headers.update({"accept": "application/json"})
        if self.cache is None:
            self.cache = cache_config_from_env()
        if self.base_url is None:
            self.base_url = base_url_from_env()

    def _cache_path(self, url: str, params: Dict[str, Any]) -> Path:
        assert self.cache is not None
        key_src = json.dumps({"url": url, "params": params}, sort_keys=True)
        digest = hashlib.sha1(key_src.encode("utf-8")).hexdigest()
        return self.cache.base_dir / f"{digest}.json"

    def get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        retries: int = 3,
        backoff_s: float = 0.6,
    ) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        query = dict(params or {})
        cache = self.cache
        # The key never takes part in the cache digest.
        cache_path = self._cache_path(url, query) if cache and cache.enabled else None
        if cache_path is not None and cache_path.exists():
            with cache_path.open("r", encoding="utf-8") as f:
                return json.load(f)

        if self.api_key:
            query["api_key"] = self.api_key

        last_err: Optional[Exception] = None
        for attempt in range(retries):
            try:
                resp = self.session.get(url, params=query, timeout=self.timeout_s)
                if resp.status_code in RETRY_STATUS:
                    logger.warning(
                        f"OpenDota returned {resp.status_code} for {path} (attempt {attempt + 1}/{retries})"
                    )
                    last_err = RuntimeError(f"HTTP {resp.status_code}")
                    time.sleep(backoff_s * (attempt + 1))
                    continue

                resp.raise_for_status()
                body = resp.json()
                if isinstance(body, dict) and body.get("error"):
                    raise RuntimeError(f"OpenDota error: {body['error']}")

                if cache_path is not None:
                    cache_path.parent.mkdir(parents=True, exist_ok=True)
                    with cache_path.open("w", encoding="utf-8") as f:
                        json.dump(body, f)
                return body
            except requests.HTTPError as exc:
                # 4xx other than 429 will not improve on retry
                raise RuntimeError(f"OpenDota request failed: {exc}") from exc
            except (requests.RequestException, ValueError) as exc:
                last_err = exc
                logger.warning(f"OpenDota request error for {path}: {exc}")
                time.sleep(backoff_s * (attempt + 1))

        raise RuntimeError(f"Failed after {retries} attempts. Last error: {last_err}")
