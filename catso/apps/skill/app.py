"""Application factory for the skill backend."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from catso.core.secrets import Credentials, SecretsLoader
from catso.core.settings import Settings, get_settings
from catso.core.storage import ObjectStore, create_s3_client
from catso.domain.models import ImagePair
from catso.services.photo_cache import PhotoCache
from catso.services.reddit_client import RedditClient
from catso.services.rehost import Rehoster

__all__ = ["SkillContext", "build_photo_cache", "create_application", "create_context"]

logger = logging.getLogger(__name__)

ImageChooser = Callable[[Sequence[ImagePair]], ImagePair]


def build_photo_cache(
    settings: Settings,
    credentials: Credentials,
    *,
    s3_client: Any = None,
) -> PhotoCache:
    store = ObjectStore(settings, s3_client or create_s3_client(settings, credentials))
    return PhotoCache(
        settings,
        store,
        RedditClient(settings, credentials),
        Rehoster(settings, store),
    )


@dataclass
class SkillContext:
    """Everything handlers need, built once per process.

    The photo cache is assembled on first use so launch/help/stop events
    never pay for decrypting credentials.
    """

    settings: Settings
    secrets: SecretsLoader
    choose_image: ImageChooser = random.choice
    photo_cache: Optional[PhotoCache] = field(default=None)

    async def get_photo_cache(self) -> PhotoCache:
        if self.photo_cache is None:
            credentials = await self.secrets.load()
            self.photo_cache = build_photo_cache(self.settings, credentials)
            logger.info("skill.photo_cache.ready", extra={"bucket": self.settings.storage_bucket})
        return self.photo_cache


def create_context(settings: Optional[Settings] = None, *, secrets: Optional[SecretsLoader] = None) -> SkillContext:
    actual = settings or get_settings()
    return SkillContext(settings=actual, secrets=secrets or SecretsLoader(actual))


def create_application(settings: Optional[Settings] = None, *, secrets: Optional[SecretsLoader] = None):
    """Create the router wired to a fresh context."""
    from .router import SkillRouter

    return SkillRouter(create_context(settings, secrets=secrets))
