"""Error taxonomy for the yamlunit builder.

Every error aborts the whole build. Errors that relate to a file carry it
in ``path``.
"""

from __future__ import annotations

from pathlib import Path


class YamlUnitError(Exception):
    """Base class for all builder errors."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.path = str(path) if path is not None else None


class NotFoundError(YamlUnitError):
    """Raised when the spec root directory does not exist."""


class ParseError(YamlUnitError):
    """Raised when a spec document cannot be parsed."""


class ConfigurationError(YamlUnitError):
    """Raised for missing templates or invalid builder settings."""


class GenerationError(YamlUnitError):
    """Raised when an emitted module fails self-validation."""


class ActionCompileError(YamlUnitError):
    """Raised when an action sequence cannot be turned into code."""
