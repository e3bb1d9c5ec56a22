"""Environment adapter: populate a settings dataclass from environment variables."""

from __future__ import annotations

import dataclasses
import os
import types
import typing
from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from confloader.core.contracts import (
    ENV_DEFAULT_KEY,
    ENV_KEY,
    ENV_PREFIX_KEY,
    ENV_REQUIRED_KEY,
)
from confloader.core.exceptions import ParseError
from confloader.core.logging import get_logger
from confloader.core.records import is_record, record_fields

logger = get_logger(__name__)

LIST_SEPARATOR = ","
KEY_VALUE_SEPARATOR = ":"

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset)


def parse_env(
    settings: Any,
    *,
    environ: Mapping[str, str] | None = None,
    prefix: str = "",
) -> None:
    """Populate the ``env``-annotated fields of *settings* in place.

    Fields whose variable is unset keep their current value unless an
    ``env_default`` is declared. Nested dataclasses are walked recursively,
    with their optional ``env_prefix`` prepended to every name inside.

    Raises:
        ParseError: *settings* is not a mutable dataclass instance, or one or
            more values could not be coerced (all failures are reported).
    """
    if isinstance(settings, type) or not dataclasses.is_dataclass(settings):
        msg = f"expected a dataclass instance, got {settings!r}"
        raise ParseError(msg)

    env = os.environ if environ is None else environ
    errors: list[str] = []
    _populate(settings, env, prefix, errors)

    if errors:
        raise ParseError("env: " + "; ".join(errors))

    logger.debug("env.parsed", record=type(settings).__name__, prefix=prefix)


def _populate(record: Any, env: Mapping[str, str], prefix: str, errors: list[str]) -> None:
    for field in record_fields(record):
        meta = field.metadata
        current = getattr(record, field.name)

        if ENV_KEY not in meta:
            if is_record(current):
                _populate(current, env, prefix + meta.get(ENV_PREFIX_KEY, ""), errors)
            continue

        var = prefix + meta[ENV_KEY]
        raw = env.get(var)
        if raw is None:
            if ENV_DEFAULT_KEY in meta:
                raw = meta[ENV_DEFAULT_KEY]
            elif meta.get(ENV_REQUIRED_KEY):
                errors.append(f'required environment variable "{var}" is not set')
                continue
            else:
                continue

        try:
            value = coerce(raw, field.annotation, current)
        except ValueError as exc:
            reason = _reason(exc)
            errors.append(f'parse error on field "{field.name}" from "{var}": {reason}')
            continue

        try:
            setattr(record, field.name, value)
        except dataclasses.FrozenInstanceError as exc:
            msg = f"{type(record).__name__} is frozen; pass a mutable settings record"
            raise ParseError(msg) from exc


def coerce(raw: str, annotation: Any, current: Any = None) -> Any:
    """Convert an environment string to *annotation* using pydantic lax parsing."""
    if isinstance(annotation, str) or annotation is None:
        # Unresolvable annotation; fall back to the type of the current value.
        if current is None:
            return raw
        annotation = type(current)

    target = _unwrap_optional(annotation)
    origin = typing.get_origin(target) or target

    if isinstance(origin, type) and issubclass(origin, Mapping):
        data: Any = dict(_split_pairs(raw))
    elif isinstance(origin, type) and issubclass(origin, _SEQUENCE_ORIGINS):
        data = raw.split(LIST_SEPARATOR) if raw else []
    else:
        data = raw

    return TypeAdapter(annotation).validate_python(data)


def _reason(exc: ValueError) -> str:
    if isinstance(exc, PydanticValidationError) and exc.error_count():
        return exc.errors()[0]["msg"]
    return str(exc)


def _unwrap_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _split_pairs(raw: str) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    if not raw:
        return pairs
    for item in raw.split(LIST_SEPARATOR):
        key, sep, value = item.partition(KEY_VALUE_SEPARATOR)
        if not sep:
            msg = f"invalid map item {item!r}, expected key{KEY_VALUE_SEPARATOR}value"
            raise ValueError(msg)
        pairs.append((key, value))
    return pairs
