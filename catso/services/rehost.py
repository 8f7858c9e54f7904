"""Copy upstream images into our own bucket so card URLs stay stable."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Callable, Optional

import aiohttp

from catso.core.errors import DownloadFailed
from catso.core.settings import Settings
from catso.core.storage import ObjectStore
from catso.core.time_utils import Clock, now_ms

logger = logging.getLogger(__name__)

IMAGE_CONTENT_TYPE = "image/jpeg"


def generate_image_key(
    prefix: str = "",
    *,
    clock: Clock = now_ms,
    randint: Callable[[int, int], int] = random.randint,
) -> str:
    return f"{prefix}{clock()}{randint(0, 999)}.jpg"


class Rehoster:
    def __init__(
        self,
        settings: Settings,
        store: ObjectStore,
        *,
        clock: Clock = now_ms,
        key_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self._store = store
        self._timeout = settings.http_timeout_seconds
        self._user_agent = settings.reddit_user_agent
        prefix = settings.image_key_prefix
        self._key_factory = key_factory or (lambda: generate_image_key(prefix, clock=clock))

    async def download(self, url: str) -> bytes:
        timeout = aiohttp.ClientTimeout(total=float(self._timeout))
        headers = {"User-Agent": self._user_agent}
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url, headers=headers) as resp:
                    if resp.status >= 400:
                        raise DownloadFailed(f"HTTP {resp.status} downloading {url}")
                    return await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise DownloadFailed(f"Could not download {url}: {exc}") from exc

    async def rehost(self, url: str) -> str:
        """Download ``url`` and publish it under a fresh key; returns the public URL."""
        body = await self.download(url)
        key = self._key_factory()
        public_url = await self._store.put_public_bytes(key, body, content_type=IMAGE_CONTENT_TYPE)
        logger.debug("rehost.uploaded", extra={"key": key, "size": len(body)})
        return public_url


__all__ = ["Rehoster", "generate_image_key"]
