"""Decrypt credentials shipped as KMS ciphertext in the environment.

Each secret is decrypted at most once per loader; the resulting
``Credentials`` object is passed explicitly to whoever needs it.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from catso.core.errors import SecretsUnavailable
from catso.core.settings import Settings

logger = logging.getLogger(__name__)

REDDIT_ACCESS_TOKEN_URL = "REDDIT_ACCESS_TOKEN_URL"
STORAGE_ACCESS_KEY_ID = "STORAGE_ACCESS_KEY_ID"
STORAGE_SECRET_ACCESS_KEY = "STORAGE_SECRET_ACCESS_KEY"

SECRET_NAMES: tuple[str, ...] = (
    REDDIT_ACCESS_TOKEN_URL,
    STORAGE_ACCESS_KEY_ID,
    STORAGE_SECRET_ACCESS_KEY,
)


@dataclass(frozen=True)
class Credentials:
    values: Mapping[str, str] = field(default_factory=dict)

    def __getitem__(self, name: str) -> str:
        return self.values[name]

    @property
    def reddit_token_url(self) -> str:
        return self.values.get(REDDIT_ACCESS_TOKEN_URL, "")

    @property
    def storage_access_key_id(self) -> Optional[str]:
        return self.values.get(STORAGE_ACCESS_KEY_ID) or None

    @property
    def storage_secret_access_key(self) -> Optional[str]:
        return self.values.get(STORAGE_SECRET_ACCESS_KEY) or None

    def __repr__(self) -> str:
        # Never print plaintext.
        return f"Credentials(names={sorted(self.values)!r})"


class SecretsLoader:
    def __init__(
        self,
        settings: Settings,
        *,
        kms_client: Any = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._settings = settings
        self._kms_client = kms_client
        self._environ = environ if environ is not None else os.environ
        self._plaintext: dict[str, str] = {}

    def _client(self) -> Any:
        if self._kms_client is None:
            self._kms_client = boto3.client("kms", region_name=self._settings.storage_region)
        return self._kms_client

    def _decrypt_sync(self, name: str, ciphertext: str) -> str:
        try:
            blob = base64.b64decode(ciphertext, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise SecretsUnavailable(f"{name} is not valid base64", missing=(name,)) from exc

        kwargs: dict[str, Any] = {"CiphertextBlob": blob}
        if self._settings.lambda_function_name:
            kwargs["EncryptionContext"] = {"LambdaFunctionName": self._settings.lambda_function_name}
        try:
            response = self._client().decrypt(**kwargs)
        except (BotoCoreError, ClientError) as exc:
            raise SecretsUnavailable(f"KMS decrypt failed for {name}: {exc}", missing=(name,)) from exc
        plaintext = response.get("Plaintext")
        if isinstance(plaintext, (bytes, bytearray)):
            return bytes(plaintext).decode("utf-8")
        raise SecretsUnavailable(f"KMS returned no plaintext for {name}", missing=(name,))

    async def _resolve(self, name: str) -> str:
        raw = (self._environ.get(name) or "").strip()
        if not raw:
            raise SecretsUnavailable(f"{name} is not set", missing=(name,))
        if self._settings.secrets_plaintext:
            return raw
        return await asyncio.to_thread(self._decrypt_sync, name, raw)

    async def load(self, names: Iterable[str] = SECRET_NAMES) -> Credentials:
        """Decrypt every name not decrypted yet and return the full set.

        Values decrypted successfully are kept even when a sibling fails, so
        a retry only pays for what is still missing.
        """
        wanted = tuple(names)
        pending = [name for name in wanted if name not in self._plaintext]
        if pending:
            results = await asyncio.gather(
                *(self._resolve(name) for name in pending),
                return_exceptions=True,
            )
            failed: list[str] = []
            for name, result in zip(pending, results):
                if isinstance(result, BaseException):
                    logger.error("secrets.decrypt.failed", extra={"secret": name}, exc_info=result)
                    failed.append(name)
                    continue
                self._plaintext[name] = result
            if failed:
                raise SecretsUnavailable(
                    f"Could not decrypt: {', '.join(failed)}",
                    missing=tuple(failed),
                )
            logger.info("secrets.loaded", extra={"count": len(pending)})
        return Credentials({name: self._plaintext[name] for name in wanted})

    def cached_names(self) -> frozenset[str]:
        return frozenset(self._plaintext)


__all__ = [
    "Credentials",
    "REDDIT_ACCESS_TOKEN_URL",
    "SECRET_NAMES",
    "STORAGE_ACCESS_KEY_ID",
    "STORAGE_SECRET_ACCESS_KEY",
    "SecretsLoader",
]
