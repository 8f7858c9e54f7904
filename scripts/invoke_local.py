#!/usr/bin/env python3
"""
Feed a skill event to the router locally and print the response envelope.

Usage:
    python scripts/invoke_local.py events/launch.json
    python scripts/invoke_local.py --intent GETCATPHOTOINTENT

Environment Variables:
    SECRETS_PLAINTEXT=1 - read REDDIT_ACCESS_TOKEN_URL etc. without KMS
    STORAGE_BUCKET      - bucket holding the cache record and images

Exit Codes:
    0 - Event handled
    1 - Handling failed
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from catso.apps.skill.app import create_application
from catso.core.logging import configure_logging
from catso.core.settings import get_settings

logger = logging.getLogger(__name__)


def _synthetic_event(request_type: str, intent: str | None) -> dict:
    request: dict = {"type": request_type, "requestId": "local-request"}
    if intent:
        request = {"type": "IntentRequest", "requestId": "local-request", "intent": {"name": intent, "slots": {}}}
    return {
        "session": {
            "new": True,
            "sessionId": "local-session",
            "application": {"applicationId": get_settings().application_id},
        },
        "request": request,
    }


async def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("event_file", nargs="?", help="JSON event file")
    parser.add_argument("--intent", help="Build an IntentRequest for this intent name")
    parser.add_argument("--type", default="LaunchRequest", help="Request type when no file is given")
    args = parser.parse_args(argv)

    configure_logging()
    if args.event_file:
        event = json.loads(Path(args.event_file).read_text(encoding="utf-8"))
    else:
        event = _synthetic_event(args.type, args.intent)

    try:
        response = await create_application().dispatch(event)
    except Exception as e:
        logger.error(f"Event handling failed: {e}", exc_info=True)
        return 1

    print(json.dumps(response, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
