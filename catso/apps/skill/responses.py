"""Builders for the outbound response envelope.

All functions are pure: they only shape dictionaries.
"""

from __future__ import annotations

from typing import Any, Optional

from catso.domain.models import ImagePair

RESPONSE_VERSION = "1.0"


def _plain_text(text: Optional[str]) -> dict[str, str]:
    return {"type": "PlainText", "text": text or ""}


def build_speechlet_response(
    title: str,
    output: str,
    reprompt_text: Optional[str],
    should_end_session: bool,
) -> dict[str, Any]:
    """Speech-only response with a plain text card."""
    return {
        "outputSpeech": _plain_text(output),
        "card": {
            "type": "Simple",
            "title": title,
            "content": output,
        },
        "reprompt": {"outputSpeech": _plain_text(reprompt_text)},
        "shouldEndSession": should_end_session,
    }


def build_photo_speechlet_response(
    title: str,
    speech_output: str,
    text_output: str,
    image: ImagePair,
    reprompt_text: Optional[str],
    should_end_session: bool,
) -> dict[str, Any]:
    """Speech plus a companion-app card carrying one image pair."""
    return {
        "outputSpeech": _plain_text(speech_output),
        "card": {
            "type": "Standard",
            "title": title,
            "text": text_output,
            "image": {
                "smallImageUrl": image.small,
                "largeImageUrl": image.large or image.small,
            },
        },
        "reprompt": {"outputSpeech": _plain_text(reprompt_text)},
        "shouldEndSession": should_end_session,
    }


def build_response(session_attributes: Optional[dict[str, Any]], speechlet_response: dict[str, Any]) -> dict[str, Any]:
    return {
        "version": RESPONSE_VERSION,
        "sessionAttributes": dict(session_attributes or {}),
        "response": speechlet_response,
    }


__all__ = [
    "RESPONSE_VERSION",
    "build_photo_speechlet_response",
    "build_response",
    "build_speechlet_response",
]
