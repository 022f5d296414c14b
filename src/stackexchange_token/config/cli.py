# src/stackexchange_token/config/cli.py

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Sequence

from ..adapters.stackexchange.profile_client import StackExchangeProfileClient
from ..application.use_cases.authenticate import StackExchangeTokenStrategy
from .env import settings_from_env


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="stackexchange-token",
        description="Inspect Stack Exchange access tokens and OAuth settings "
                    "(configured via STACKEXCHANGE_* environment variables)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    profile = sub.add_parser("profile", help="Fetch the normalized profile behind an access token")
    profile.add_argument("--access-token", "-t", required=True, help="Stack Exchange access token")
    profile.add_argument("--site", help="Override STACKEXCHANGE_SITE (e.g. superuser)")
    profile.add_argument(
        "--raw",
        action="store_true",
        help="Include the raw provider response in the output.",
    )

    authorize = sub.add_parser("authorize-url", help="Print the Stack Exchange authorization URL")
    authorize.add_argument("--state", help="Explicit OAuth state value (generated if omitted)")
    authorize.add_argument("--scope", help="Space-separated scopes, e.g. 'read_inbox no_expiry'")

    return parser.parse_args(args=argv)


def _reject_all(*_: Any) -> None:
    return None


def _run(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if getattr(args, "site", None):
        overrides["site"] = args.site
    settings = settings_from_env(**overrides)

    if args.command == "profile":
        client = StackExchangeProfileClient(
            stack_apps_key=settings.stack_apps_key,
            site=settings.site,
            profile_url=settings.profile_url,
            timeout=settings.timeout,
        )
        try:
            profile = client.fetch(args.access_token)
        finally:
            client.close()
        return {"profile": profile.to_dict(include_raw=args.raw)}

    strategy = StackExchangeTokenStrategy(settings, _reject_all)
    extra = {"scope": args.scope} if args.scope else {}
    url, state = strategy.authorization_url(state=args.state, **extra)
    return {"url": url, "state": state}


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)

    try:
        summary = _run(args)
        json.dump({"ok": True, **summary}, sys.stdout, indent=2)
        sys.stdout.write("\n")
    except Exception as exc:  # noqa: BLE001
        json.dump({"ok": False, "error": str(exc)}, sys.stdout, indent=2)
        sys.stdout.write("\n")
        raise


if __name__ == "__main__":
    main()
