"""Command-line interface for serving the proxy and one-shot standings."""

from __future__ import annotations

import argparse
import asyncio
import csv
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from cartola_proxy.config import ProxySettings
from cartola_proxy.config_loader import RouteProfile
from cartola_proxy.errors import ProxyError
from cartola_proxy.service import LeagueInspection, LiveStandings, StandingsService


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Live Cartola FC league standings proxy")
    parser.add_argument(
        "--routes-profile",
        type=Path,
        default=None,
        help="JSON file overriding upstream route templates",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP proxy")
    serve.add_argument("--host", default="0.0.0.0", help="Interface to bind")
    serve.add_argument("--port", type=int, default=None, help="Port to bind (defaults to $PORT or 8080)")

    live = subparsers.add_parser("live", help="Compute live standings for a league once")
    live.add_argument("league", help="League id or slug")
    live.add_argument("--output", type=Path, default=None, help="Write standings CSV instead of JSON")

    league = subparsers.add_parser("league", help="Show how a league identifier resolves upstream")
    league.add_argument("league", help="League id or slug")

    routes = subparsers.add_parser("routes", help="Write the effective route profile as JSON")
    routes.add_argument("output", type=Path, help="Destination JSON path")
    return parser.parse_args(argv)


def _load_settings(args: argparse.Namespace) -> ProxySettings:
    settings = ProxySettings.from_env()
    if args.routes_profile:
        routes = RouteProfile.load(args.routes_profile).apply(settings.routes)
        settings = replace(settings, routes=routes)
    return settings


async def _run_live(settings: ProxySettings, identifier: str) -> LiveStandings:
    service = StandingsService(settings)
    try:
        return await service.live_standings(identifier)
    finally:
        await service.aclose()


async def _run_league(settings: ProxySettings, identifier: str) -> LeagueInspection:
    service = StandingsService(settings)
    try:
        return await service.inspect_league(identifier)
    finally:
        await service.aclose()


def _write_standings_csv(result: LiveStandings, path: Path) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["position", "team_id", "display_name", "partial_score"])
        for position, standing in enumerate(result.standings, start=1):
            writer.writerow([
                position,
                standing.team_id,
                standing.display_name,
                f"{standing.partial_score:.2f}",
            ])


def _live_payload(result: LiveStandings) -> dict:
    return {
        "league": result.league.model_dump(),
        "market": result.market.model_dump(),
        "live": result.live,
        "state": result.state,
        "updated_at": result.updated_at.isoformat(),
        "standings": [standing.model_dump() for standing in result.standings],
    }


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    settings = _load_settings(args)

    if args.command == "serve":
        import uvicorn

        from cartola_proxy.api import create_app

        uvicorn.run(create_app(settings), host=args.host, port=args.port or settings.port)
        return

    if args.command == "routes":
        RouteProfile.from_routes(settings.routes).save(args.output)
        print(f"Saved route profile to {args.output}")
        return

    try:
        if args.command == "live":
            result = asyncio.run(_run_live(settings, args.league))
            if args.output:
                _write_standings_csv(result, args.output)
                print(f"Wrote {len(result.standings)} standings to {args.output}")
            else:
                print(json.dumps(_live_payload(result), indent=2, ensure_ascii=False))
            if not result.live:
                print("Market is not live; all partial scores are 0.", file=sys.stderr)
        else:
            inspection = asyncio.run(_run_league(settings, args.league))
            report = {
                "route": inspection.resolved.route,
                "attempts": [attempt.to_dict() for attempt in inspection.resolved.attempts],
                "league": inspection.summary.model_dump(),
                "participants": len(inspection.participants),
            }
            print(json.dumps(report, indent=2, ensure_ascii=False))
    except ProxyError as exc:
        print(json.dumps(exc.to_dict(), indent=2, ensure_ascii=False, default=str), file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
