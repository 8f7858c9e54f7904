"""Intent handlers: each returns a complete response envelope."""

from __future__ import annotations

import logging
from typing import Any

from catso.core.errors import NoImageAvailable, SkillError

from .app import SkillContext
from .responses import build_photo_speechlet_response, build_response, build_speechlet_response

logger = logging.getLogger(__name__)

WELCOME_TITLE = "Welcome"
WELCOME_SPEECH = "Welcome to Catso. Ask me for some photos."
WELCOME_REPROMPT = "Would you like a cat photo?"

PHOTO_TITLE = "Cat Photos"
PHOTO_SPEECH = "I have sent a cat photo to your phone. Check the Alexa app."
PHOTO_TEXT = "Here is a cat photo:"

PHOTO_ERROR_TITLE = "Cat Photos"
PHOTO_ERROR_SPEECH = "Sorry, there was a problem getting a photo. Please try again later."

FALLBACK_TITLE = "Catso"
FALLBACK_SPEECH = "Sorry, I didn't catch that. Ask me for a cat photo."

SESSION_END_TITLE = "Session Ended"


def get_welcome_response() -> dict[str, Any]:
    return build_response(
        {},
        build_speechlet_response(WELCOME_TITLE, WELCOME_SPEECH, WELCOME_REPROMPT, False),
    )


def handle_session_end_request() -> dict[str, Any]:
    # No speech when the user leaves.
    return build_response({}, build_speechlet_response(SESSION_END_TITLE, "", None, True))


def get_photo_error_response() -> dict[str, Any]:
    return build_response({}, build_speechlet_response(PHOTO_ERROR_TITLE, PHOTO_ERROR_SPEECH, None, True))


def get_fallback_response() -> dict[str, Any]:
    return build_response(
        {},
        build_speechlet_response(FALLBACK_TITLE, FALLBACK_SPEECH, WELCOME_REPROMPT, False),
    )


async def get_cat_photo(context: SkillContext) -> dict[str, Any]:
    category = context.settings.category
    try:
        cache = await context.get_photo_cache()
        images = await cache.get_images(category)
        if not images:
            raise NoImageAvailable(f"No cached images for r/{category}")
    except SkillError as exc:
        logger.error(
            "skill.photo.failed: %s",
            exc,
            extra={"category": category, "error": type(exc).__name__},
            exc_info=True,
        )
        return get_photo_error_response()
    except Exception:
        logger.exception("skill.photo.unexpected_error", extra={"category": category})
        return get_photo_error_response()

    image = context.choose_image(images)
    return build_response(
        {},
        build_photo_speechlet_response(PHOTO_TITLE, PHOTO_SPEECH, PHOTO_TEXT, image, "", True),
    )


__all__ = [
    "get_cat_photo",
    "get_fallback_response",
    "get_photo_error_response",
    "get_welcome_response",
    "handle_session_end_request",
]
