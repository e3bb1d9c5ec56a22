"""Shared value types: output format, field records, violations and field annotations."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

SENSITIVE_DATA_MASK = "***************"

ENV_KEY = "env"
ENV_DEFAULT_KEY = "env_default"
ENV_REQUIRED_KEY = "env_required"
ENV_PREFIX_KEY = "env_prefix"
YAML_KEY = "yaml"
VALIDATE_KEY = "validate"
SECRET_KEY = "secret"


class OutputFormat(StrEnum):
    TABLE = "table"
    JSON = "json"


@dataclass(frozen=True)
class FieldRecord:
    """One flattened field produced by the field walker."""

    name: str
    value: str
    masked: bool = False


@dataclass(frozen=True)
class Violation:
    """A single failed validation rule on a single field."""

    field: str
    rule: str
    param: str | None
    value: Any
    message: str

    @property
    def tag(self) -> str:
        return f"{self.rule}={self.param}" if self.param is not None else self.rule


def setting(
    default: Any = dataclasses.MISSING,
    *,
    default_factory: Any = dataclasses.MISSING,
    env: str | None = None,
    env_default: str | None = None,
    env_required: bool = False,
    env_prefix: str | None = None,
    yaml: str | None = None,
    validate: str | None = None,
    secret: bool = False,
) -> Any:
    """Declare a settings field together with its source, rule and secrecy annotations.

    Thin wrapper over :func:`dataclasses.field`; only the annotations that are
    actually given end up in the field metadata::

        @dataclass
        class Conf:
            port: int = setting(0, env="PORT", validate="gte=8080,lte=9000")
            password: str = setting("", env="MY_PASSWORD", secret=True)
    """
    metadata: dict[str, Any] = {}
    if env is not None:
        metadata[ENV_KEY] = env
    if env_default is not None:
        metadata[ENV_DEFAULT_KEY] = env_default
    if env_required:
        metadata[ENV_REQUIRED_KEY] = True
    if env_prefix is not None:
        metadata[ENV_PREFIX_KEY] = env_prefix
    if yaml is not None:
        metadata[YAML_KEY] = yaml
    if validate is not None:
        metadata[VALIDATE_KEY] = validate
    if secret:
        metadata[SECRET_KEY] = True

    return dataclasses.field(
        default=default, default_factory=default_factory, metadata=metadata
    )
