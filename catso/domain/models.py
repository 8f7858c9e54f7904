"""Pydantic models for the cached photo record."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class ImagePair(BaseModel):
    """Re-hosted URLs of one post, sized for the companion app card."""

    small: str = Field(min_length=1)
    large: str = ""

    @model_validator(mode="after")
    def _large_defaults_to_small(self) -> "ImagePair":
        if not self.large:
            self.large = self.small
        return self


class CacheRecord(BaseModel):
    timestamp: int = Field(ge=0, description="Epoch milliseconds when the record was written")
    images: list[ImagePair] = Field(min_length=1)

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.timestamp

    def is_stale(self, now_ms: int, stale_after_ms: int) -> bool:
        return self.age_ms(now_ms) > stale_after_ms


__all__ = ["CacheRecord", "ImagePair"]
