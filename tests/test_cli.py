import json

import pytest

from coaching.cli import main
from coaching.storage import JsonFileStore, applied_key


def test_cli_mock_run_saves_applied(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("COACH_MATCH_SOURCE", raising=False)
    out = tmp_path / "report.json"
    raw = tmp_path / "raw.json"
    state = tmp_path / "state"
    main([
        "--account-id", "123456",
        "--matches", "20",
        "--mock",
        "--apply-all",
        "--state-dir", str(state),
        "--save-raw", str(raw),
        "--output", str(out),
    ])
    report = json.loads(out.read_text(encoding="utf-8"))
    assert report["meta"]["source"] == "mock"
    assert report["analytics"]["match_count"] == 20
    ids = [r["id"] for r in report["recommendations"]]
    assert report["applied_ids"] == ids
    assert JsonFileStore(state).get(applied_key("123456")) == ids

    saved = json.loads(raw.read_text(encoding="utf-8"))
    assert len(saved["matches"]) == 20


def test_cli_from_raw_text_output(tmp_path, capsys) -> None:
    raw = tmp_path / "raw.json"
    raw.write_text(
        json.dumps([{"kills": 2, "deaths": 9, "assists": 3, "gold_per_min": 300, "player_slot": 0}] * 5),
        encoding="utf-8",
    )
    main([
        "--account-id", "77",
        "--from-raw", str(raw),
        "--state-dir", str(tmp_path / "state"),
        "--apply", "high-deaths",
        "--output-format", "text",
    ])
    text = capsys.readouterr().out
    assert "Matches: 5" in text
    assert "[x] CRITICAL high-deaths" in text


def test_cli_rejects_bad_account(tmp_path) -> None:
    with pytest.raises(SystemExit):
        main(["--account-id", "abc", "--mock", "--state-dir", str(tmp_path)])
