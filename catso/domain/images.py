"""Pick small/large preview variants out of a Reddit post."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence

from catso.core.errors import NoImageAvailable

SMALL_MIN_WIDTH = 720
SMALL_MIN_HEIGHT = 480
LARGE_MIN_WIDTH = 1200
LARGE_MIN_HEIGHT = 800


@dataclass(frozen=True)
class ImageVariants:
    small: str
    large: str

    @property
    def same_image(self) -> bool:
        return self.small == self.large


def decode_url(url: str) -> str:
    # Reddit escapes preview URLs as HTML; only &amp; shows up in practice.
    return url.replace("&amp;", "&")


def _dimension(item: Mapping[str, Any], key: str) -> int:
    try:
        return int(item.get(key) or 0)
    except (TypeError, ValueError):
        return 0


def _first_matching(
    resolutions: Sequence[Mapping[str, Any]],
    predicate: Callable[[Mapping[str, Any]], bool],
) -> Mapping[str, Any]:
    for item in resolutions:
        if predicate(item):
            return item
    return resolutions[-1]


def _is_small(item: Mapping[str, Any]) -> bool:
    return _dimension(item, "width") >= SMALL_MIN_WIDTH or _dimension(item, "height") >= SMALL_MIN_HEIGHT


def _is_large(item: Mapping[str, Any]) -> bool:
    return _dimension(item, "width") >= LARGE_MIN_WIDTH or _dimension(item, "height") >= LARGE_MIN_HEIGHT


def preview_resolutions(post: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    """Return the resolutions of the first preview image, or an empty list."""
    preview = post.get("preview") or {}
    if not isinstance(preview, Mapping):
        return []
    images = preview.get("images") or []
    if not isinstance(images, list) or not images or not isinstance(images[0], Mapping):
        return []
    resolutions = images[0].get("resolutions") or []
    if not isinstance(resolutions, list):
        return []
    return [item for item in resolutions if isinstance(item, Mapping) and item.get("url")]


def select_variants(post: Mapping[str, Any]) -> ImageVariants:
    """Choose the small and large preview URLs of ``post``.

    Both picks scan the resolutions in upstream order and fall back to the
    last entry when nothing meets the threshold.
    """
    resolutions = preview_resolutions(post)
    if not resolutions:
        post_id: Optional[str] = post.get("id") if isinstance(post, Mapping) else None
        raise NoImageAvailable(f"Post {post_id or '?'} has no preview resolutions")

    small = _first_matching(resolutions, _is_small)
    large = _first_matching(resolutions, _is_large)
    return ImageVariants(small=decode_url(str(small["url"])), large=decode_url(str(large["url"])))


__all__ = ["ImageVariants", "decode_url", "preview_resolutions", "select_variants"]
