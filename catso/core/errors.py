"""Error kinds raised by the skill backend.

Adapters translate library exceptions (aiohttp, botocore) into these so the
router can decide what the user hears without knowing about transports.
"""

from __future__ import annotations


class SkillError(RuntimeError):
    """Base class for every failure the skill knows how to report."""


class SecretsUnavailable(SkillError):
    """Raised when at least one configured secret could not be decrypted."""

    def __init__(self, message: str, *, missing: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.missing = missing


class AuthenticationFailed(SkillError):
    """Raised when the upstream token exchange fails or returns garbage."""


class UpstreamFetchFailed(SkillError):
    """Raised when the upstream posts listing cannot be fetched or parsed."""


class NoImageAvailable(SkillError):
    """Raised when a post carries no usable preview resolutions."""


class DownloadFailed(SkillError):
    """Raised when the source image cannot be downloaded for re-hosting."""


class UploadFailed(SkillError):
    """Raised when object storage rejects a write."""


class InvalidIntent(SkillError):
    def __init__(self, intent_name: str | None) -> None:
        super().__init__(f"Invalid intent: {intent_name!r}")
        self.intent_name = intent_name


__all__ = [
    "AuthenticationFailed",
    "DownloadFailed",
    "InvalidIntent",
    "NoImageAvailable",
    "SecretsUnavailable",
    "SkillError",
    "UploadFailed",
    "UpstreamFetchFailed",
]
