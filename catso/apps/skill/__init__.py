"""Skill application package exports."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "SkillContext",
    "SkillRouter",
    "create_application",
    "handler",
]


def __getattr__(name: str) -> Any:
    if name == "SkillRouter":
        from .router import SkillRouter as _SkillRouter

        return _SkillRouter

    if name in {"SkillContext", "create_application"}:
        app_module = import_module(".app", __name__)
        attr = getattr(app_module, name)
        globals()[name] = attr
        return attr

    if name == "handler":
        from .lambda_function import handler as _handler

        return _handler

    raise AttributeError(name)


def __dir__() -> list[str]:
    return sorted(set(globals()) | set(__all__))
