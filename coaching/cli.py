from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv

from .config import DEFAULT_MATCH_COUNT, match_source_from_env
from .ingest import (
    FetchMeta,
    fetch_player_matches,
    raw_matches_from_json,
    raw_matches_to_json,
    validate_account_id,
    validate_match_count,
)
from .mock_data import generate_mock_matches
from .normalize import normalize_matches
from .recommendations import generate_recommendations
from .render import render_text
from .report import build_report
from .session import RecommendationSession
from .stats import analyze_player_performance
from .storage import JsonFileStore


def _load_env() -> None:
    load_dotenv()


def _write_json(path: str, obj: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Dota 2 player analytics and recommendation projections")
    parser.add_argument("--account-id", required=True, help="Steam32 account id")
    parser.add_argument("--matches", type=int, default=DEFAULT_MATCH_COUNT, help="Recent matches to analyze")
    parser.add_argument("--from-raw", default=None, help="Load raw match JSON instead of querying OpenDota")
    parser.add_argument("--mock", action="store_true", help="Use generated demo matches")
    parser.add_argument("--save-raw", default=None, help="Path to save raw match JSON")
    parser.add_argument("--apply", action="append", default=[], help="Recommendation id to apply (repeatable)")
    parser.add_argument("--apply-all", action="store_true", help="Apply every generated recommendation")
    parser.add_argument("--clear-applied", action="store_true", help="Forget previously applied recommendations")
    parser.add_argument("--state-dir", default=None, help="Directory for persisted session state")
    parser.add_argument("--no-save", action="store_true", help="Do not persist the applied recommendations")
    parser.add_argument("--output", default=None, help="Path to output report JSON/text")
    parser.add_argument(
        "--output-format", choices=["json", "text"], default="json", help="Output format"
    )
    parser.add_argument("--cache", action="store_true", help="Enable on-disk HTTP cache")
    parser.add_argument("--debug", action="store_true", help="Print debug logs")
    return parser.parse_args(argv)


def _load_matches(args: argparse.Namespace) -> tuple:
    validate_account_id(args.account_id)
    validate_match_count(args.matches)
    if args.from_raw:
        with open(args.from_raw, "r", encoding="utf-8") as f:
            raw, meta = raw_matches_from_json(json.load(f))
        if meta is None:
            meta = FetchMeta(
                account_id=str(args.account_id),
                requested=args.matches,
                fetched=len(raw),
                fetched_at="",
                source="file",
            )
        return raw[: args.matches], meta
    if args.mock or match_source_from_env() == "mock":
        raw = generate_mock_matches(args.account_id, args.matches)
        return raw, FetchMeta(
            account_id=str(args.account_id),
            requested=args.matches,
            fetched=len(raw),
            fetched_at="",
            source="mock",
        )
    return fetch_player_matches(
        args.account_id,
        args.matches,
        api_key=os.environ.get("OPENDOTA_API_KEY"),
        debug=args.debug,
    )


def main(argv: Optional[List[str]] = None) -> None:
    _load_env()
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.cache:
        os.environ["OPENDOTA_CACHE"] = "1"

    try:
        raw, meta = _load_matches(args)
    except ValueError as exc:
        raise SystemExit(str(exc))
    except RuntimeError as exc:
        raise SystemExit(f"Failed to fetch matches: {exc}")

    if args.save_raw:
        _write_json(args.save_raw, raw_matches_to_json(raw, meta))

    matches = normalize_matches(raw)
    analytics = analyze_player_performance(matches, account_id=str(args.account_id))
    if analytics is None:
        raise SystemExit(f"No matches found for account {args.account_id}.")

    recommendations = generate_recommendations(analytics)
    store = JsonFileStore(Path(args.state_dir)) if args.state_dir else JsonFileStore()
    session = RecommendationSession(account_id=str(args.account_id), store=store).load()
    if args.clear_applied:
        session.clear()
    if args.apply_all:
        session.apply_all(recommendations)
    session.apply(args.apply)
    if not args.no_save:
        session.save()

    report = build_report(analytics, session.applied_ids, meta, recommendations)

    if args.output_format == "json":
        output_text = json.dumps(report, indent=2)
    else:
        output_text = render_text(report)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output_text)
    else:
        print(output_text)


if __name__ == "__main__":
    main()
