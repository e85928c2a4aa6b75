import json

import pytest
import requests

from coaching.config import CacheConfig
from coaching.ingest import (
    fetch_player_matches,
    raw_matches_from_json,
    raw_matches_to_json,
    validate_match_count,
)
from coaching.opendota_client import OpenDotaClient


class _Response:
    def __init__(self, status_code: int, body=None):
        self.status_code = status_code
        self._body = body

    def json(self):
        return self._body

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class _Session:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params))
        return self.responses.pop(0)


def _client(responses, **kw) -> OpenDotaClient:
    kw.setdefault("cache", CacheConfig(enabled=False, base_dir=None))
    client = OpenDotaClient(base_url="https://example.test/api", **kw)
    client.session = _Session(responses)
    return client


@pytest.fixture(autouse=True)
def _no_sleep(monkeypatch) -> None:
    monkeypatch.setattr("coaching.opendota_client.time.sleep", lambda s: None)


def test_get_returns_body_and_sends_key() -> None:
    client = _client([_Response(200, [{"match_id": 1}])], api_key="secret")
    assert client.get("players/1/matches", {"limit": 5}) == [{"match_id": 1}]
    url, params = client.session.calls[0]
    assert url == "https://example.test/api/players/1/matches"
    assert params == {"limit": 5, "api_key": "secret"}


def test_retries_on_server_errors() -> None:
    client = _client([_Response(503), _Response(429), _Response(200, [])])
    assert client.get("players/1/matches") == []
    assert len(client.session.calls) == 3


def test_gives_up_after_retries() -> None:
    client = _client([_Response(500)] * 3)
    with pytest.raises(RuntimeError, match="Failed after 3 attempts"):
        client.get("players/1/matches")


def test_client_errors_are_not_retried() -> None:
    client = _client([_Response(404), _Response(200, [])])
    with pytest.raises(RuntimeError):
        client.get("players/1/matches")
    assert len(client.session.calls) == 1


def test_error_body_raises() -> None:
    client = _client([_Response(200, {"error": "invalid account id"})])
    with pytest.raises(RuntimeError, match="invalid account id"):
        client.get("players/1/matches")


def test_cache_skips_network(tmp_path) -> None:
    cache = CacheConfig(enabled=True, base_dir=tmp_path)
    client = _client([_Response(200, [{"match_id": 9}])], cache=cache, api_key="k1")
    assert client.get("players/1/matches", {"limit": 1}) == [{"match_id": 9}]

    # different key, same cache entry
    again = _client([], cache=cache, api_key="k2")
    assert again.get("players/1/matches", {"limit": 1}) == [{"match_id": 9}]
    assert again.session.calls == []


class _FakeClient:
    def __init__(self, body):
        self.body = body
        self.calls = []

    def get(self, path, params=None):
        self.calls.append((path, params))
        return self.body


def test_fetch_player_matches() -> None:
    client = _FakeClient([{"match_id": i} for i in range(4)])
    matches, meta = fetch_player_matches("123", 3, client=client)
    assert len(matches) == 3
    assert meta.account_id == "123"
    assert meta.requested == 3
    assert meta.fetched == 3
    path, params = client.calls[0]
    assert path == "players/123/matches"
    assert params["limit"] == 3
    assert "kills" in params["project"]


def test_fetch_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        fetch_player_matches("not-a-number", 10, client=_FakeClient([]))
    with pytest.raises(ValueError):
        validate_match_count(0)
    with pytest.raises(ValueError):
        validate_match_count(101)


def test_fetch_unexpected_shape() -> None:
    with pytest.raises(RuntimeError):
        fetch_player_matches("1", 5, client=_FakeClient({"rows": []}))


def test_raw_json_roundtrip() -> None:
    matches, meta = fetch_player_matches("5", 2, client=_FakeClient([{"kills": 1}, {"kills": 2}]))
    payload = json.loads(json.dumps(raw_matches_to_json(matches, meta)))
    loaded, loaded_meta = raw_matches_from_json(payload)
    assert loaded == matches
    assert loaded_meta.account_id == "5"
    assert raw_matches_from_json([{"kills": 1}, 3]) == ([{"kills": 1}], None)
