"""Validation adapter: check a settings record against its ``validate`` rules.

Rules are comma separated (``required,gte=1024,lte=65535``). Each record type is
compiled once into a pydantic model whose fields run the rules, so a single
``model_validate`` call reports every failing field, nested records included.
"""

from __future__ import annotations

import functools
import typing
from collections.abc import Callable, Mapping
from typing import Annotated, Any
from urllib.parse import urlparse

from pydantic import BaseModel, BeforeValidator, ConfigDict, create_model
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from confloader.core.contracts import VALIDATE_KEY, Violation
from confloader.core.exceptions import ConfLoaderError, ValidationError
from confloader.core.logging import get_logger
from confloader.core.records import is_record, is_record_type, is_zero, record_fields

logger = get_logger(__name__)

RULE_SEPARATOR = ","
PARAM_SEPARATOR = "="

Rule = tuple[str, str | None]
Check = Callable[[Any, str | None], bool]

NUMERIC_RULES = frozenset({"gte", "lte", "gt", "lt", "min", "max", "len"})

_MESSAGE = "Field validation for '{field}' failed on the '{tag}' tag"


def validate_struct(settings: Any) -> None:
    """Validate every annotated field of *settings*.

    Raises:
        ValidationError: one or more rules failed; ``.violations`` lists all of them.
        ConfLoaderError: *settings* is not a record instance, or a rule is unknown.
    """
    if not is_record(settings):
        msg = f"cannot validate {settings!r}: not a settings record instance"
        raise ConfLoaderError(msg)

    model = rules_model(type(settings))
    try:
        model.model_validate(settings, from_attributes=True)
    except PydanticValidationError as exc:
        violations = [_to_violation(err) for err in exc.errors()]
        logger.debug(
            "validation.failed",
            record=type(settings).__name__,
            violations=len(violations),
        )
        raise ValidationError(violations) from exc


def parse_rules(text: str) -> list[Rule]:
    """Split ``"required,gte=5"`` into ``[("required", None), ("gte", "5")]``."""
    rules: list[Rule] = []
    for chunk in text.split(RULE_SEPARATOR):
        chunk = chunk.strip()
        if not chunk:
            continue
        name, sep, raw = chunk.partition(PARAM_SEPARATOR)
        param = raw if sep else None
        if name not in CHECKS and name != "omitempty":
            msg = f"undefined validation rule {name!r} in {text!r}"
            raise ConfLoaderError(msg)
        if name in NUMERIC_RULES and not _is_number(param):
            msg = f"rule {name!r} needs a numeric parameter, got {param!r}"
            raise ConfLoaderError(msg)
        rules.append((name, param))
    return rules


@functools.cache
def rules_model(cls: type) -> type[BaseModel]:
    """Compile the ``validate`` annotations of *cls* into a pydantic model."""
    fields: dict[str, Any] = {}

    for field in record_fields(cls):
        if field.name.startswith("_"):
            continue

        rules = parse_rules(field.metadata.get(VALIDATE_KEY, ""))
        target, optional = _unwrap_optional(field.annotation)

        inner: Any = rules_model(target) if is_record_type(target) else Any
        if optional and inner is not Any:
            inner = inner | None

        if rules:
            inner = Annotated[inner, BeforeValidator(_checker(field.name, rules))]
        fields[field.name] = (inner, ...)

    return create_model(
        f"{cls.__name__}Rules",
        __config__=ConfigDict(
            from_attributes=True,
            arbitrary_types_allowed=True,
            protected_namespaces=(),
        ),
        **fields,
    )


def _unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    args = typing.get_args(annotation)
    if type(None) in args:
        rest = [a for a in args if a is not type(None)]
        if len(rest) == 1:
            return rest[0], True
    return annotation, False


def _checker(name: str, rules: list[Rule]) -> Callable[[Any], Any]:
    omit_empty = any(rule == "omitempty" for rule, _ in rules)
    active = [(rule, param) for rule, param in rules if rule != "omitempty"]

    def check(value: Any) -> Any:
        if omit_empty and is_zero(value):
            return value
        for rule, param in active:
            if not CHECKS[rule](value, param):
                tag = f"{rule}={param}" if param is not None else rule
                raise PydanticCustomError(
                    rule, _MESSAGE, {"field": name, "tag": tag, "param": param}
                )
        return value

    return check


def _to_violation(err: Mapping[str, Any]) -> Violation:
    field = ".".join(str(part) for part in err["loc"])
    ctx = err.get("ctx") or {}
    return Violation(
        field=field,
        rule=err["type"],
        param=ctx.get("param"),
        value=err.get("input"),
        message=err["msg"],
    )


def _is_number(param: str | None) -> bool:
    if param is None:
        return False
    try:
        float(param)
    except ValueError:
        return False
    return True


def _number(param: str | None) -> float:
    return float(param or 0)


def _measure(value: Any) -> float | None:
    """Numbers compare by value, strings and containers by length."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return len(value)
    except TypeError:
        return None


def _compare(op: Callable[[float, float], bool]) -> Check:
    def check(value: Any, param: str | None) -> bool:
        measured = _measure(value)
        return measured is not None and op(measured, _number(param))

    return check


def _equals(value: Any, param: str | None) -> bool:
    if isinstance(value, bool):
        return str(value).lower() == (param or "").lower()
    if isinstance(value, str):
        return value == param
    measured = _measure(value)
    return measured is not None and measured == _number(param)


def _one_of(value: Any, param: str | None) -> bool:
    return str(value) in (param or "").split()


def _uri(value: Any, _param: str | None) -> bool:
    if not isinstance(value, str) or not value:
        return False
    if value.startswith("/"):
        return True
    parsed = urlparse(value)
    return bool(parsed.scheme) and bool(parsed.netloc or parsed.path)


def _url(value: Any, _param: str | None) -> bool:
    if not isinstance(value, str) or not value:
        return False
    parsed = urlparse(value)
    return bool(parsed.scheme) and bool(parsed.netloc)


CHECKS: dict[str, Check] = {
    "required": lambda value, _param: not is_zero(value),
    "gte": _compare(lambda a, b: a >= b),
    "lte": _compare(lambda a, b: a <= b),
    "gt": _compare(lambda a, b: a > b),
    "lt": _compare(lambda a, b: a < b),
    "min": _compare(lambda a, b: a >= b),
    "max": _compare(lambda a, b: a <= b),
    "len": _compare(lambda a, b: a == b),
    "eq": _equals,
    "ne": lambda value, param: not _equals(value, param),
    "oneof": _one_of,
    "uri": _uri,
    "url": _url,
}
