"""Cached list of re-hosted photos with a staleness policy.

The whole list lives in one JSON object in S3. A read either serves the
record as-is (FRESH) or rebuilds it from the upstream listing
(STALE_OR_MISSING). A rebuild is all-or-nothing: the record is only written
once every post has been re-hosted.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from enum import Enum
from typing import Any, Optional, Protocol

from pydantic import ValidationError

from catso.core.errors import NoImageAvailable
from catso.core.settings import Settings
from catso.core.storage import ObjectStore
from catso.core.time_utils import Clock, now_ms
from catso.domain.images import select_variants
from catso.domain.models import CacheRecord, ImagePair

logger = logging.getLogger(__name__)


class PostSource(Protocol):
    async def fetch_top_posts(self, category: str, count: int) -> list[dict[str, Any]]:
        ...


class ImageHost(Protocol):
    async def rehost(self, url: str) -> str:
        ...


class CacheState(str, Enum):
    FRESH = "fresh"
    STALE_OR_MISSING = "stale_or_missing"


class PhotoCache:
    def __init__(
        self,
        settings: Settings,
        store: ObjectStore,
        source: PostSource,
        host: ImageHost,
        *,
        clock: Clock = now_ms,
    ) -> None:
        self._store = store
        self._source = source
        self._host = host
        self._clock = clock
        self._cache_key = settings.cache_object_key
        self._stale_after_ms = settings.stale_after_ms
        self._post_count = settings.refresh_post_count
        self._inflight: dict[tuple[str, str], asyncio.Task] = {}

    async def read_record(self) -> Optional[CacheRecord]:
        """Return the stored record, or None when it is absent or unreadable."""
        result = await self._store.get_json(self._cache_key)
        if result.is_failure():
            error = result.error
            if error.not_found:
                logger.info("photo_cache.record.missing", extra={"key": self._cache_key})
            else:
                logger.warning("photo_cache.record.unreadable: %s", error, extra={"key": self._cache_key})
            return None
        try:
            return CacheRecord.model_validate(result.unwrap())
        except ValidationError as exc:
            logger.warning(
                "photo_cache.record.invalid",
                extra={"key": self._cache_key, "errors": exc.error_count()},
            )
            return None

    def classify(self, record: Optional[CacheRecord], now: int) -> CacheState:
        if record is None or record.is_stale(now, self._stale_after_ms):
            return CacheState.STALE_OR_MISSING
        return CacheState.FRESH

    async def get_images(self, category: str) -> list[ImagePair]:
        record = await self.read_record()
        now = self._clock()
        if self.classify(record, now) is CacheState.FRESH:
            logger.debug("photo_cache.hit", extra={"age_ms": record.age_ms(now)})
            return record.images

        logger.info(
            "photo_cache.refresh.needed",
            extra={"age_ms": record.age_ms(now) if record is not None else None, "category": category},
        )
        return await self.refresh(category)

    async def refresh(self, category: str) -> list[ImagePair]:
        """Rebuild and persist the record.

        Callers racing on the same record and category inside this process
        share a single in-flight rebuild.
        """
        flight = (self._cache_key, category)
        task = self._inflight.get(flight)
        if task is None or task.done():
            task = asyncio.ensure_future(self._refresh(category))
            self._inflight[flight] = task
            task.add_done_callback(functools.partial(self._forget, flight))
        else:
            logger.info("photo_cache.refresh.joined", extra={"category": category})
        return await asyncio.shield(task)

    def _forget(self, flight: tuple[str, str], task: asyncio.Task) -> None:
        if self._inflight.get(flight) is task:
            del self._inflight[flight]

    async def _refresh(self, category: str) -> list[ImagePair]:
        posts = await self._source.fetch_top_posts(category, self._post_count)
        if not posts:
            raise NoImageAvailable(f"r/{category} returned no posts")

        tasks = [asyncio.ensure_future(self._process_post(post)) for post in posts]
        try:
            images = list(await asyncio.gather(*tasks))
        except BaseException:
            for pending in tasks:
                pending.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.warning("photo_cache.refresh.failed", extra={"category": category}, exc_info=True)
            raise

        record = CacheRecord(timestamp=self._clock(), images=images)
        await self._store.put_json(self._cache_key, record.model_dump())
        logger.info("photo_cache.refresh.stored", extra={"category": category, "images": len(images)})
        return record.images

    async def _process_post(self, post: dict[str, Any]) -> ImagePair:
        variants = select_variants(post)
        if variants.same_image:
            small = await self._host.rehost(variants.small)
            return ImagePair(small=small, large=small)
        small, large = await asyncio.gather(
            self._host.rehost(variants.small),
            self._host.rehost(variants.large),
        )
        return ImagePair(small=small, large=large)


__all__ = ["CacheState", "ImageHost", "PhotoCache", "PostSource"]
