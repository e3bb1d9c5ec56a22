"""Structured renderer: indented JSON with nested records as nested objects."""

from __future__ import annotations

import json
from typing import IO, Any

from pydantic_core import PydanticSerializationError, to_jsonable_python

from confloader.core.exceptions import RenderError


def dump_json(mapping: dict[str, Any]) -> str:
    """Serialize *mapping* with a stable 2-space indent."""
    try:
        return json.dumps(
            mapping, indent=2, ensure_ascii=False, default=to_jsonable_python
        )
    except (TypeError, ValueError, PydanticSerializationError) as exc:
        raise RenderError(f"failed to marshal config to JSON: {exc}") from exc


def render_json(mapping: dict[str, Any], sink: IO[str]) -> None:
    """Write *mapping* as a newline-terminated JSON document onto *sink*."""
    payload = dump_json(mapping)
    try:
        sink.write(payload + "\n")
        sink.flush()
    except OSError as exc:
        raise RenderError(f"failed to write config JSON: {exc}") from exc
