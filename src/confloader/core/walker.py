"""Field walker: flattens a settings record into named, masked display values.

Two encodings share one naming and masking algorithm:

* :func:`walk_fields` yields flat :class:`FieldRecord` rows with string values,
  nested fields named ``Parent.Child``, for the table renderer.
* :func:`walk_json` keeps native values and nests records as dicts, for the
  JSON renderer.

A field marked secret is replaced by :data:`SENSITIVE_DATA_MASK` whatever its
type, and a secret nested record is not descended into.
"""

from __future__ import annotations

import weakref
from enum import Enum
from typing import Any

from confloader.core.contracts import SENSITIVE_DATA_MASK, FieldRecord
from confloader.core.exceptions import RenderError
from confloader.core.records import is_record, is_secret, record_fields


def deref(value: Any) -> Any:
    """Resolve a snapshot handed over behind a weak reference."""
    if isinstance(value, weakref.ref):
        target = value()
        if target is None:
            raise RenderError("settings snapshot reference is no longer alive")
        value = target
    if not is_record(value):
        msg = f"cannot print {type(value).__name__!r}: not a settings record"
        raise RenderError(msg)
    return value


def walk_fields(value: Any) -> list[FieldRecord]:
    """Flatten *value* into declaration-ordered table rows."""
    return _extract_fields("", deref(value))


def walk_json(value: Any) -> dict[str, Any]:
    """Convert *value* into a nested mapping with native leaf values."""
    return _extract_json_fields(deref(value))


def format_value(value: Any) -> str:
    """Canonical, locale-independent string form of a leaf value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _extract_fields(prefix: str, record: Any) -> list[FieldRecord]:
    rows: list[FieldRecord] = []

    for field in record_fields(record):
        name = f"{prefix}.{field.name}" if prefix else field.name

        if is_secret(field.metadata):
            rows.append(FieldRecord(name, SENSITIVE_DATA_MASK, masked=True))
            continue

        value = getattr(record, field.name)
        if is_record(value):
            rows.extend(_extract_fields(name, value))
        else:
            rows.append(FieldRecord(name, format_value(value)))

    return rows


def _extract_json_fields(record: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}

    for field in record_fields(record):
        if is_secret(field.metadata):
            out[field.name] = SENSITIVE_DATA_MASK
            continue

        value = getattr(record, field.name)
        out[field.name] = _extract_json_fields(value) if is_record(value) else value

    return out
