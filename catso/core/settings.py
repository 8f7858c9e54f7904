from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from catso.core.env import load_env


DEFAULT_STALE_AFTER_SECONDS = 3600
DEFAULT_REFRESH_POST_COUNT = 3
DEFAULT_PHOTO_INTENT = "GETCATPHOTOINTENT"
DEFAULT_CACHE_OBJECT_KEY = "catso/cache.json"
DEFAULT_REDDIT_API_BASE = "https://oauth.reddit.com"


@dataclass(frozen=True)
class Settings:
    environment: str  # development, production, test
    log_level: str
    log_json: bool
    log_file: str
    application_id: str
    photo_intent_name: str
    category: str
    stale_after_seconds: int
    refresh_post_count: int
    storage_bucket: str
    storage_region: str
    storage_public_base_url: str
    cache_object_key: str
    image_key_prefix: str
    reddit_api_base: str
    reddit_user_agent: str
    http_timeout_seconds: float
    secrets_plaintext: bool
    lambda_function_name: str

    @property
    def stale_after_ms(self) -> int:
        return self.stale_after_seconds * 1000

    @property
    def public_base_url(self) -> str:
        if self.storage_public_base_url:
            return self.storage_public_base_url.rstrip("/")
        return f"https://{self.storage_bucket}.s3.amazonaws.com"


def _get_int(name: str, default: int, *, minimum: Optional[int] = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except (TypeError, ValueError):
        return default
    if minimum is not None and value < minimum:
        return default
    return value


def _get_float(name: str, default: float, *, minimum: Optional[float] = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw.strip())
    except (TypeError, ValueError):
        return default
    if minimum is not None and value < minimum:
        return default
    return value


def _get_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _get_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


load_env()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    environment = _get_str("ENVIRONMENT", "development").lower()
    if environment not in {"development", "production", "test"}:
        environment = "development"

    lambda_function_name = _get_str("AWS_LAMBDA_FUNCTION_NAME")
    # Plaintext secrets are only honoured outside the Lambda runtime.
    secrets_plaintext = _get_bool("SECRETS_PLAINTEXT", default=False) and not lambda_function_name

    return Settings(
        environment=environment,
        log_level=_get_str("LOG_LEVEL", "INFO").upper() or "INFO",
        log_json=_get_bool("LOG_JSON", default=bool(lambda_function_name)),
        log_file=_get_str("LOG_FILE"),
        application_id=_get_str("SKILL_APPLICATION_ID"),
        photo_intent_name=_get_str("PHOTO_INTENT_NAME", DEFAULT_PHOTO_INTENT),
        category=_get_str("PHOTO_CATEGORY", "cats"),
        stale_after_seconds=_get_int("STALE_AFTER_SECONDS", DEFAULT_STALE_AFTER_SECONDS, minimum=0),
        refresh_post_count=_get_int("REFRESH_POST_COUNT", DEFAULT_REFRESH_POST_COUNT, minimum=1),
        storage_bucket=_get_str("STORAGE_BUCKET"),
        storage_region=_get_str("STORAGE_REGION") or _get_str("AWS_REGION", "us-east-1"),
        storage_public_base_url=_get_str("STORAGE_PUBLIC_BASE_URL"),
        cache_object_key=_get_str("CACHE_OBJECT_KEY", DEFAULT_CACHE_OBJECT_KEY),
        image_key_prefix=_get_str("IMAGE_KEY_PREFIX"),
        reddit_api_base=_get_str("REDDIT_API_BASE", DEFAULT_REDDIT_API_BASE).rstrip("/"),
        reddit_user_agent=_get_str("REDDIT_USER_AGENT", "catso-skill/1.0"),
        http_timeout_seconds=_get_float("HTTP_TIMEOUT_SECONDS", 10.0, minimum=0.1),
        secrets_plaintext=secrets_plaintext,
        lambda_function_name=lambda_function_name,
    )


__all__ = ["Settings", "get_settings"]
