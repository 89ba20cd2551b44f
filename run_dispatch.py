"""
run_dispatch.py — send one generation request through the dispatcher.

Loads the signed-in user from a JSON file (the same document the login flow
stores), acquires a slot for generation-class operations and prints the
result or the error message.

Usage:
    python run_dispatch.py --user user.json --endpoint https://gemx.example.com/api/imagen/generate \
        --body request.json --operation "IMAGEN GENERATE"
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from genclient.core.config import settings, validate_settings_for_production
from genclient.core.logging import setup_logging
from genclient.core.sentry import init_sentry
from genclient.dispatch.dispatcher import GenerationDispatcher
from genclient.dispatch.errors import DispatchError
from genclient.dispatch.events import PERSONAL_TOKEN_FAILED, EventBus
from genclient.schemas.session import SessionContext

logger = logging.getLogger("run_dispatch")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Dispatch one generation request")
    parser.add_argument("--user", type=Path, help="JSON file with the current user")
    parser.add_argument("--endpoint", required=True)
    parser.add_argument("--body", type=Path, help="JSON file with the request body")
    parser.add_argument("--operation", default="GENERATE")
    parser.add_argument("--token", help="Use this token instead of the personal one")
    parser.add_argument("--proxy", help="Selected proxy server URL")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logging()
    init_sentry()
    if settings.is_production:
        validate_settings_for_production()

    user_json = args.user.read_text(encoding="utf-8") if args.user else None
    body = json.loads(args.body.read_text(encoding="utf-8")) if args.body else {}
    session = SessionContext(current_user_json=user_json, selected_proxy_server=args.proxy)

    bus = EventBus()
    bus.subscribe(PERSONAL_TOKEN_FAILED, lambda: logger.warning("Personal token was rejected; ask the user to refresh it"))

    dispatcher = GenerationDispatcher(session=session, events=bus)
    try:
        result = await dispatcher.dispatch(
            args.endpoint,
            body,
            args.operation,
            override_credential=args.token,
            on_status=lambda s: logger.info("Status: %s", s) if s else None,
        )
    except DispatchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result.payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
