#!/usr/bin/env python3
"""
Operator helpers for the guard-tour API connection.

    python scripts/guardtour_cli.py check            # connection test + endpoint probe
    python scripts/guardtour_cli.py site-id "Atom"   # resolve a site id by name
    python scripts/guardtour_cli.py clear-token      # wipe the cached access token

Settings come from the environment / .env exactly as for the server.
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Adjust path so imports resolve when running from project root
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from askari.core.config import get_settings
from askari.core.logging import configure_logging
from askari.environments.guardtour.auth import TokenStore
from askari.main import build_patrol_client


async def check() -> int:
    settings = get_settings()
    print("🔍 Testing guard tour API connection...")
    print(f"Base URL: {settings.ASKARI_API_URL}")
    print(f"Auth mode: {settings.ASKARI_AUTH_MODE}")

    client = await build_patrol_client(settings)
    try:
        connection = await client.test_connection()
        print(f"{'✅' if connection['success'] else '❌'} {connection['message']}")

        results = await client.probe_endpoints()
    finally:
        await client.aclose()

    print("\n📊 Endpoint summary:")
    print("=" * 50)
    for result in results:
        marker = "✅" if result["success"] else "❌"
        status = result["status_code"] if result["status_code"] is not None else "-"
        print(f"{marker} {result['endpoint']} ({status})")

    reachable = sum(1 for r in results if r["success"])
    print(f"\n{reachable}/{len(results)} endpoints reachable")
    return 0 if connection["success"] else 1


async def site_id(name: str) -> int:
    settings = get_settings()
    client = await build_patrol_client(settings)
    try:
        site = await client.find_site_by_name(name)
    finally:
        await client.aclose()

    if site is None:
        print("Site not found.")
        return 1
    print(f'ID for "{site.name}": {site.id}')
    return 0


async def clear_token() -> int:
    settings = get_settings()
    store = TokenStore(settings.TOKEN_FILE_PATH)
    await store.clear()
    print(f"Cleared cached token in {store.path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Guard tour API helper commands")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("check", help="Test the API connection and probe known endpoints")

    site = sub.add_parser("site-id", help="Look up a site id by exact name")
    site.add_argument("name", help="Site name (case-insensitive)")

    sub.add_parser("clear-token", help="Clear the cached access token")
    return parser


async def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(get_settings().LOG_LEVEL)

    if args.command == "check":
        return await check()
    if args.command == "site-id":
        return await site_id(args.name)
    return await clear_token()


if __name__ == '__main__':
    sys.exit(asyncio.run(main()))
