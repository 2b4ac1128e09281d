"""Lightweight REST client for a running cartola proxy."""

from __future__ import annotations

import argparse
import json

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the cartola proxy REST API")
    parser.add_argument("base_url", help="Base URL of the proxy, e.g. http://localhost:8080")
    parser.add_argument("league", nargs="?", help="League id or slug")
    parser.add_argument("--status", action="store_true", help="Print the upstream market status and exit")
    parser.add_argument("--debug", action="store_true", help="Show how the league resolves instead of standings")
    parser.add_argument("--timeout", type=float, default=60.0, help="Request timeout in seconds")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url, timeout=args.timeout) as client:
        if args.status:
            resp = client.get("/status")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2, ensure_ascii=False))
            return

        if not args.league:
            raise SystemExit("league is required unless using --status")

        path = f"/debug/league/{args.league}" if args.debug else f"/live/{args.league}"
        resp = client.get(path)
        payload = resp.json()
        if resp.status_code >= 400:
            hint = payload.get("hint")
            message = f"{payload.get('error')}: {payload.get('message')}"
            raise SystemExit(f"{message} ({hint})" if hint else message)

        if args.debug:
            print(json.dumps(payload, indent=2, ensure_ascii=False))
            return

        league = payload["league"]
        print(f"{league.get('name') or league['identifier']} - round {payload['market'].get('round')} ({payload['state']})")
        for position, standing in enumerate(payload["standings"], start=1):
            print(f"{position:>3}. {standing['display_name']:<30} {standing['partial_score']:>8.2f}")


if __name__ == "__main__":
    main()
