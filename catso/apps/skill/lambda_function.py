"""AWS Lambda entrypoint (``catso.apps.skill.lambda_function.handler``)."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional

from catso.core.error_handler import log_unhandled_exceptions, setup_global_exception_handler
from catso.core.logging import configure_logging

from .app import create_application
from .router import SkillRouter

logger = logging.getLogger(__name__)

# Survives warm invocations so secrets are decrypted once per container.
_router: Optional[SkillRouter] = None


def get_router() -> SkillRouter:
    global _router
    if _router is None:
        configure_logging()
        _router = create_application()
    return _router


def reset_router() -> None:
    global _router
    _router = None


async def _dispatch(router: SkillRouter, event: Mapping[str, Any]) -> Optional[dict[str, Any]]:
    setup_global_exception_handler()
    return await router.dispatch(event)


@log_unhandled_exceptions
def handler(event: Mapping[str, Any], context: Any = None) -> Optional[dict[str, Any]]:
    router = get_router()
    request_id = getattr(context, "aws_request_id", None)
    logger.debug("skill.invocation", extra={"aws_request_id": request_id})
    return asyncio.run(_dispatch(router, event))


__all__ = ["get_router", "handler", "reset_router"]
