"""Introspection helpers over settings records (dataclasses and pydantic models)."""

from __future__ import annotations

import dataclasses
import functools
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from confloader.core.contracts import SECRET_KEY


@dataclass(frozen=True)
class RecordField:
    """A declared field of a settings record, in declaration order."""

    name: str
    metadata: Mapping[str, Any]
    annotation: Any


def is_record(value: Any) -> bool:
    """True for dataclass and pydantic model *instances*."""
    if isinstance(value, type):
        return False
    return dataclasses.is_dataclass(value) or isinstance(value, BaseModel)


def is_record_type(tp: Any) -> bool:
    if typing.get_origin(tp) is not None:
        return False
    return isinstance(tp, type) and (
        dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)
    )


def record_fields(obj: Any) -> tuple[RecordField, ...]:
    """Return the fields of a record instance or record class."""
    cls = obj if isinstance(obj, type) else type(obj)
    return _fields_of(cls)


@functools.cache
def _fields_of(cls: type) -> tuple[RecordField, ...]:
    if dataclasses.is_dataclass(cls):
        hints = _type_hints(cls)
        return tuple(
            RecordField(f.name, f.metadata, hints.get(f.name) or _default_type(f))
            for f in dataclasses.fields(cls)
        )

    if issubclass(cls, BaseModel):
        out: list[RecordField] = []
        for name, info in cls.model_fields.items():
            extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
            out.append(RecordField(name, extra, info.annotation))
        return tuple(out)

    msg = f"{cls.__name__} is not a settings record"
    raise TypeError(msg)


def _type_hints(cls: type) -> dict[str, Any]:
    # Classes defined inside functions can't always resolve postponed annotations.
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        return {}


def _default_type(f: dataclasses.Field[Any]) -> Any:
    """Fall back to the default's record type when the annotation is an unresolved string."""
    if not isinstance(f.type, str):
        return f.type
    if f.default_factory is not dataclasses.MISSING:
        if is_record_type(f.default_factory):
            return f.default_factory
        default = f.default_factory()
    else:
        default = f.default
    return type(default) if is_record(default) else f.type


def is_secret(metadata: Mapping[str, Any]) -> bool:
    """A field is secret only when explicitly marked true."""
    flag = metadata.get(SECRET_KEY)
    if isinstance(flag, str):
        return flag == "true"
    return flag is True


def is_zero(value: Any) -> bool:
    """Report whether *value* is the zero value of its type."""
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float, complex)):
        return value == 0
    if isinstance(value, (str, bytes, Mapping, list, tuple, set, frozenset)):
        return len(value) == 0
    if is_record(value):
        return all(is_zero(getattr(value, f.name)) for f in record_fields(value))
    return False
