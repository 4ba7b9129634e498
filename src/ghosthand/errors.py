"""
Exception hierarchy for ghosthand.

The render path itself never raises for degenerate input; these cover
environment problems (camera, model assets, tracker backends) and
invalid configuration.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class GhostHandError(RuntimeError):
    """Base error. Optional context is appended to the message as `key=value` pairs."""

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        self.context = context or {}
        full_message = message
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            full_message = f"{message} [{context_str}]"
        super().__init__(full_message)


class ConfigurationError(GhostHandError):
    """Invalid render settings."""


class TrackerUnavailableError(GhostHandError):
    """A hand tracker backend could not be initialized."""


class CameraError(GhostHandError):
    """Camera could not be opened or read."""

    def __init__(self, camera_index: int, operation: str = "open", hint: str = "") -> None:
        message = f"Could not {operation} camera index {camera_index}."
        if hint:
            message = f"{message}\n{hint}"
        super().__init__(message, context={"camera_index": camera_index, "operation": operation})
        self.camera_index = camera_index


class ModelAssetError(GhostHandError):
    """A model file is missing and could not be fetched."""
