"""Hierarchy of domain exceptions for confloader."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from confloader.core.contracts import Violation


class ConfLoaderError(Exception):
    """Base exception for all confloader errors."""


class RegisterError(ConfLoaderError):
    """Populating a settings record from its source failed."""


class ParseError(RegisterError):
    """Environment values could not be mapped onto the settings record."""


class ReadError(RegisterError):
    """The configuration file could not be read."""


class DecodeError(RegisterError):
    """The configuration file is not a valid document for the record."""


class ValidationError(ConfLoaderError):
    """One or more declared constraints were violated.

    Carries every violation found, not just the first one.
    """

    def __init__(self, violations: list[Violation]) -> None:
        self.violations = list(violations)
        lines = [f"Key: '{v.field}' Error:{v.message}" for v in self.violations]
        super().__init__("\n".join(lines) or "validation failed")


class RenderError(ConfLoaderError):
    """Serialization or output-write failure while printing a record."""


class PipelineError(ConfLoaderError):
    """Load pipeline orchestration failure."""
