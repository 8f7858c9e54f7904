"""Catso: voice-assistant skill that serves cached cat photos."""

__version__ = "1.0.0"
