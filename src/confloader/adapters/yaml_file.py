"""YAML adapter: populate a settings dataclass from a YAML document."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from confloader.core.contracts import YAML_KEY
from confloader.core.exceptions import DecodeError, ParseError, ReadError
from confloader.core.logging import get_logger
from confloader.core.records import is_record, is_record_type, record_fields

logger = get_logger(__name__)

SKIP_KEY = "-"

# YAML numbers such as `12345` still decode into string fields.
_SCALAR_CONFIG = ConfigDict(coerce_numbers_to_str=True)


def parse_yaml(settings: Any, path: str | Path) -> None:
    """Read *path* and decode it onto *settings* in place.

    Keys come from each field's ``yaml`` annotation, falling back to the
    lowercased field name. Missing keys leave defaults untouched and unknown
    keys are ignored; an empty document is not an error.

    Raises:
        ParseError: *settings* is not a dataclass instance.
        ReadError: the file could not be read.
        DecodeError: the document is malformed or does not fit the record.
    """
    if isinstance(settings, type) or not dataclasses.is_dataclass(settings):
        msg = f"expected a dataclass instance, got {settings!r}"
        raise ParseError(msg)

    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ReadError(f"failed to read YAML file {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise DecodeError(f"failed to unmarshal YAML data: {path}: {exc}") from exc

    try:
        decode_yaml(settings, text)
    except dataclasses.FrozenInstanceError as exc:
        msg = f"{type(settings).__name__} is frozen; pass a mutable settings record"
        raise ParseError(msg) from exc
    logger.debug("yaml.parsed", record=type(settings).__name__, path=str(path))


def decode_yaml(settings: Any, text: str) -> None:
    """Decode a YAML document held in memory onto *settings*."""
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DecodeError(f"failed to unmarshal YAML data: {exc}") from exc

    if document is None:
        return
    if not isinstance(document, Mapping):
        msg = (
            "failed to unmarshal YAML data: expected a mapping at the top level, "
            f"got {type(document).__name__}"
        )
        raise DecodeError(msg)

    errors: list[str] = []
    _assign(settings, document, "", errors)
    if errors:
        raise DecodeError("failed to unmarshal YAML data: " + "; ".join(errors))


def yaml_key(name: str, metadata: Mapping[str, Any]) -> str:
    return metadata.get(YAML_KEY) or name.lower()


def _assign(record: Any, data: Mapping[str, Any], path: str, errors: list[str]) -> None:
    for field in record_fields(record):
        key = yaml_key(field.name, field.metadata)
        # Absent and null keys both keep the current value.
        if key == SKIP_KEY or data.get(key) is None:
            continue

        value = data[key]
        where = f"{path}.{key}" if path else key
        current = getattr(record, field.name)

        if is_record(current):
            if not isinstance(value, Mapping):
                errors.append(f"{where}: cannot decode {type(value).__name__} into a mapping")
                continue
            _assign(current, value, where, errors)
            continue

        if isinstance(field.annotation, str):
            setattr(record, field.name, value)
            continue

        try:
            setattr(record, field.name, _adapter(field.annotation).validate_python(value))
        except PydanticValidationError as exc:
            errors.append(f"{where}: {exc.errors()[0]['msg']}")


def _adapter(annotation: Any) -> TypeAdapter[Any]:
    if is_record_type(annotation):
        return TypeAdapter(annotation)
    return TypeAdapter(annotation, config=_SCALAR_CONFIG)
