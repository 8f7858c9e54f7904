"""S3 object storage adapter.

boto3 is synchronous, so every call is pushed to a worker thread.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from catso.core.errors import UploadFailed
from catso.core.result import Result, StorageError, failure, success
from catso.core.secrets import Credentials
from catso.core.settings import Settings

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


def create_s3_client(settings: Settings, credentials: Optional[Credentials] = None) -> Any:
    kwargs: dict[str, Any] = {"region_name": settings.storage_region}
    if credentials is not None and credentials.storage_access_key_id:
        kwargs["aws_access_key_id"] = credentials.storage_access_key_id
        kwargs["aws_secret_access_key"] = credentials.storage_secret_access_key
    return boto3.client("s3", **kwargs)


class ObjectStore:
    def __init__(self, settings: Settings, client: Any) -> None:
        self._bucket = settings.storage_bucket
        self._public_base_url = settings.public_base_url
        self._client = client

    def public_url(self, key: str) -> str:
        return f"{self._public_base_url}/{key}"

    def _read_sync(self, key: str) -> bytes:
        response = self._client.get_object(Bucket=self._bucket, Key=key)
        body = response["Body"]
        try:
            return body.read()
        finally:
            close = getattr(body, "close", None)
            if close is not None:
                close()

    async def get_json(self, key: str) -> Result[Any, StorageError]:
        """Read and decode a JSON object; a missing or broken object is a Failure."""
        try:
            raw = await asyncio.to_thread(self._read_sync, key)
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            return failure(
                StorageError(
                    operation="get_json",
                    message=f"s3://{self._bucket}/{key}: {code or exc}",
                    not_found=code in _NOT_FOUND_CODES,
                    original_exception=exc,
                )
            )
        except BotoCoreError as exc:
            return failure(StorageError(operation="get_json", message=str(exc), original_exception=exc))

        try:
            return success(json.loads(raw))
        except (UnicodeDecodeError, ValueError) as exc:
            return failure(
                StorageError(
                    operation="get_json",
                    message=f"s3://{self._bucket}/{key} is not valid JSON",
                    original_exception=exc,
                )
            )

    async def _put(self, key: str, body: bytes, *, content_type: str, public: bool) -> None:
        kwargs: dict[str, Any] = {
            "Bucket": self._bucket,
            "Key": key,
            "Body": body,
            "ContentType": content_type,
        }
        if public:
            kwargs["ACL"] = "public-read"
        try:
            await asyncio.to_thread(self._client.put_object, **kwargs)
        except (BotoCoreError, ClientError) as exc:
            logger.warning("storage.put.failed", extra={"key": key}, exc_info=True)
            raise UploadFailed(f"Could not write s3://{self._bucket}/{key}: {exc}") from exc

    async def put_json(self, key: str, payload: Any) -> None:
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        await self._put(key, body, content_type="application/json", public=False)

    async def put_public_bytes(self, key: str, body: bytes, *, content_type: str) -> str:
        await self._put(key, body, content_type=content_type, public=True)
        return self.public_url(key)


__all__ = ["ObjectStore", "create_s3_client"]
