"""Capabilities a configuration object may implement.

Only ``register`` is mandatory. The load pipeline checks each object for
``validate`` and ``print`` by capability, not by inheritance.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Configurable(Protocol):
    """Populates its settings record from a source (environment, file)."""

    def register(self) -> None: ...


@runtime_checkable
class Validatable(Protocol):
    """Checks the populated record against its declared constraints."""

    def validate(self) -> None: ...


@runtime_checkable
class Printable(Protocol):
    """Exposes the populated record as a read-only snapshot for rendering."""

    def print(self) -> Any: ...
