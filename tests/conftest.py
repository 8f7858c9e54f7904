import dataclasses
import json
import os
from typing import Any, Optional

import pytest

TEST_ENV = {
    "ENVIRONMENT": "test",
    "LOG_LEVEL": "DEBUG",
    "LOG_JSON": "false",
    "LOG_FILE": "",
    "SKILL_APPLICATION_ID": "amzn1.ask.skill.test-app",
    "PHOTO_INTENT_NAME": "GETCATPHOTOINTENT",
    "PHOTO_CATEGORY": "cats",
    "STALE_AFTER_SECONDS": "3600",
    "REFRESH_POST_COUNT": "3",
    "STORAGE_BUCKET": "catso-test",
    "STORAGE_REGION": "us-east-1",
    "STORAGE_PUBLIC_BASE_URL": "",
    "CACHE_OBJECT_KEY": "catso/cache.json",
    "IMAGE_KEY_PREFIX": "",
    "SECRETS_PLAINTEXT": "0",
}

for key, value in TEST_ENV.items():
    os.environ[key] = value
os.environ.pop("AWS_LAMBDA_FUNCTION_NAME", None)

from catso.core.result import StorageError, failure, success


@pytest.fixture(scope="session", autouse=True)
def _set_test_env():
    """Force deterministic env for tests and reset cached settings."""
    for key, value in TEST_ENV.items():
        os.environ[key] = value

    from catso.core import settings as settings_module

    settings_module.get_settings.cache_clear()
    yield
    settings_module.get_settings.cache_clear()


@pytest.fixture
def settings():
    from catso.core.settings import get_settings

    return get_settings()


@pytest.fixture
def make_settings(settings):
    def _make(**overrides):
        return dataclasses.replace(settings, **overrides)

    return _make


class FakeObjectStore:
    """In-memory stand-in for ObjectStore."""

    def __init__(self, objects: Optional[dict[str, Any]] = None, *, fail_puts: bool = False) -> None:
        self.objects: dict[str, Any] = dict(objects or {})
        self.raw: dict[str, bytes] = {}
        self.fail_puts = fail_puts
        self.reads = 0
        self.json_writes: list[tuple[str, Any]] = []
        self.byte_writes: list[str] = []

    def public_url(self, key: str) -> str:
        return f"https://catso-test.s3.amazonaws.com/{key}"

    async def get_json(self, key: str):
        self.reads += 1
        if key in self.raw:
            try:
                return success(json.loads(self.raw[key]))
            except ValueError as exc:
                return failure(StorageError(operation="get_json", message="bad json", original_exception=exc))
        if key not in self.objects:
            return failure(StorageError(operation="get_json", message="NoSuchKey", not_found=True))
        return success(json.loads(json.dumps(self.objects[key])))

    async def put_json(self, key: str, payload: Any) -> None:
        from catso.core.errors import UploadFailed

        if self.fail_puts:
            raise UploadFailed(f"cannot write {key}")
        self.objects[key] = payload
        self.json_writes.append((key, payload))

    async def put_public_bytes(self, key: str, body: bytes, *, content_type: str) -> str:
        from catso.core.errors import UploadFailed

        if self.fail_puts:
            raise UploadFailed(f"cannot write {key}")
        self.byte_writes.append(key)
        return self.public_url(key)


class FakePostSource:
    def __init__(self, posts: Optional[list[dict]] = None, *, error: Optional[Exception] = None) -> None:
        self.posts = posts or []
        self.error = error
        self.calls: list[tuple[str, int]] = []

    async def fetch_top_posts(self, category: str, count: int) -> list[dict]:
        self.calls.append((category, count))
        if self.error is not None:
            raise self.error
        return self.posts[:count]


class FakeImageHost:
    def __init__(self, *, fail_on: Optional[set[str]] = None) -> None:
        self.fail_on = fail_on or set()
        self.calls: list[str] = []

    async def rehost(self, url: str) -> str:
        from catso.core.errors import DownloadFailed

        self.calls.append(url)
        if url in self.fail_on:
            raise DownloadFailed(f"cannot download {url}")
        return "https://catso-test.s3.amazonaws.com/" + url.rsplit("/", 1)[-1].split("?", 1)[0]


def make_post(post_id: str, resolutions: list[tuple[int, int]]) -> dict:
    return {
        "id": post_id,
        "title": f"post {post_id}",
        "preview": {
            "images": [
                {
                    "resolutions": [
                        {
                            "width": width,
                            "height": height,
                            "url": f"https://preview.redd.it/{post_id}-{width}x{height}.jpg?s=abc&amp;fit=crop",
                        }
                        for width, height in resolutions
                    ]
                }
            ]
        },
    }


@pytest.fixture
def fake_store():
    return FakeObjectStore()


@pytest.fixture
def post_factory():
    return make_post


@pytest.fixture
def fake_source_factory():
    return FakePostSource


@pytest.fixture
def fake_host_factory():
    return FakeImageHost


@pytest.fixture
def store_factory():
    return FakeObjectStore
