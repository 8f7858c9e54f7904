#!/usr/bin/env python3
"""
Force a rebuild of the cached photo record.

Usage:
    python scripts/refresh_cache.py [--category cats]

Exit Codes:
    0 - Record rebuilt and stored
    1 - Refresh failed (nothing was written)
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from catso.apps.skill.app import create_context
from catso.core.errors import SkillError
from catso.core.logging import configure_logging

logger = logging.getLogger(__name__)


async def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Rebuild the cached photo record")
    parser.add_argument("--category", help="Subreddit to pull from (defaults to PHOTO_CATEGORY)")
    args = parser.parse_args(argv)

    configure_logging()
    context = create_context()
    category = args.category or context.settings.category

    try:
        cache = await context.get_photo_cache()
        images = await cache.refresh(category)
    except SkillError as e:
        logger.error(f"✗ Refresh failed: {e}", exc_info=True)
        return 1

    logger.info(f"✓ Stored {len(images)} image pairs for r/{category}")
    for pair in images:
        logger.info(f"  {pair.small} | {pair.large}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
