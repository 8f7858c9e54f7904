"""Dispatch inbound events to handlers by request type and intent name."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Mapping, Optional

from catso.core.errors import InvalidIntent

from . import handlers
from .app import SkillContext
from .schemas import INTENT_REQUEST, LAUNCH_REQUEST, SESSION_ENDED_REQUEST, SkillEvent

logger = logging.getLogger(__name__)

HELP_INTENT = "AMAZON.HelpIntent"
STOP_INTENT = "AMAZON.StopIntent"
CANCEL_INTENT = "AMAZON.CancelIntent"

IntentHandler = Callable[[SkillContext], Awaitable[dict[str, Any]]]


async def _welcome(_context: SkillContext) -> dict[str, Any]:
    return handlers.get_welcome_response()


async def _session_end(_context: SkillContext) -> dict[str, Any]:
    return handlers.handle_session_end_request()


class SkillRouter:
    def __init__(self, context: SkillContext) -> None:
        self.context = context
        self._intents: dict[str, IntentHandler] = {
            context.settings.photo_intent_name: handlers.get_cat_photo,
            HELP_INTENT: _welcome,
            STOP_INTENT: _session_end,
            CANCEL_INTENT: _session_end,
        }

    def resolve_intent(self, name: Optional[str]) -> IntentHandler:
        handler = self._intents.get(name or "")
        if handler is None:
            raise InvalidIntent(name)
        return handler

    def check_application(self, event: SkillEvent) -> bool:
        expected = self.context.settings.application_id
        actual = event.session.application.application_id
        if expected and actual != expected:
            # Logged only; the event is still processed.
            logger.warning("skill.application_id.mismatch", extra={"application_id": actual})
            return False
        return True

    def on_session_started(self, event: SkillEvent) -> None:
        logger.info(
            "skill.session.started",
            extra={"request_id": event.request.request_id, "session_id": event.session.session_id},
        )

    async def on_launch(self, event: SkillEvent) -> dict[str, Any]:
        logger.info("skill.launch", extra={"request_id": event.request.request_id})
        return handlers.get_welcome_response()

    async def on_intent(self, event: SkillEvent) -> dict[str, Any]:
        intent_name = event.request.intent.name if event.request.intent else None
        logger.info(
            "skill.intent",
            extra={"intent": intent_name, "request_id": event.request.request_id},
        )
        try:
            handler = self.resolve_intent(intent_name)
        except InvalidIntent as exc:
            logger.warning("skill.intent.invalid: %s", exc, extra={"intent": intent_name})
            return handlers.get_fallback_response()
        return await handler(self.context)

    def on_session_ended(self, event: SkillEvent) -> None:
        logger.info(
            "skill.session.ended",
            extra={"request_id": event.request.request_id, "reason": event.request.reason},
        )

    async def dispatch(self, raw_event: Mapping[str, Any]) -> Optional[dict[str, Any]]:
        """Handle one event; returns the response envelope or None."""
        event = SkillEvent.model_validate(raw_event)
        self.check_application(event)

        if event.session.new:
            self.on_session_started(event)

        request_type = event.request.type
        if request_type == LAUNCH_REQUEST:
            return await self.on_launch(event)
        if request_type == INTENT_REQUEST:
            return await self.on_intent(event)
        if request_type == SESSION_ENDED_REQUEST:
            self.on_session_ended(event)
            return None

        logger.warning("skill.request.unsupported", extra={"request_type": request_type})
        return None


__all__ = ["CANCEL_INTENT", "HELP_INTENT", "STOP_INTENT", "SkillRouter"]
