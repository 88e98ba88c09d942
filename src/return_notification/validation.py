"""Dot-path field validation and coercion for inbound request payloads.

Rules address payload fields by dot-separated paths (``differences.to``).
Each rule is checked in declaration order and the first failing field raises
``ValidationError``; coerced values are written back into the payload in place
so later stages read typed values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math
import re
from typing import Any, Iterable, Mapping, MutableMapping

from .errors import InvalidRulesError, ValidationError


Payload = MutableMapping[str, Any]

_NUMERIC = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*")
_ABSENT = object()


class FieldKind(str, Enum):
    INT = "int"
    STRING = "string"


@dataclass(frozen=True)
class FieldRule:
    """Declarative constraint for one addressable payload field.

    ``pattern`` only applies to string fields and must match the whole value.
    ``allow_zero`` lets a required int field hold 0, for enumerations whose
    first member is a real value.
    """

    path: str
    required: bool
    kind: FieldKind
    pattern: str | None = None
    allow_zero: bool = False

    @property
    def segments(self) -> list[str]:
        return self.path.split(".")


def validate(rules: Iterable[FieldRule], payload: Any) -> Payload:
    """Validate and coerce ``payload`` against ``rules``; returns the same mapping."""

    checked = _check_rules(rules)
    if not isinstance(payload, MutableMapping):
        raise ValidationError("data", ValidationError.NOT_A_MAPPING)

    for rule in checked:
        _validate_field(rule, payload)
    return payload


def resolve(payload: Mapping[str, Any], path: str) -> Any:
    """Return the value at ``path`` or None when any segment is missing."""

    value = _walk(payload, path.split("."))
    return None if value is _ABSENT else value


def _check_rules(rules: Iterable[FieldRule]) -> tuple[FieldRule, ...]:
    try:
        checked = tuple(rules)
    except TypeError as exc:
        raise InvalidRulesError("Field rules must be an iterable of FieldRule") from exc

    seen: set[str] = set()
    for rule in checked:
        if not isinstance(rule, FieldRule):
            raise InvalidRulesError(f"Unsupported field rule: {rule!r}")
        if not rule.path or any(not segment for segment in rule.segments):
            raise InvalidRulesError(f"Invalid field path: {rule.path!r}")
        if not isinstance(rule.kind, FieldKind):
            raise InvalidRulesError(f"Unsupported kind for field {rule.path}: {rule.kind!r}")
        if rule.path in seen:
            raise InvalidRulesError(f"Duplicate field rule: {rule.path}")
        if rule.pattern:
            try:
                re.compile(rule.pattern)
            except re.error as exc:
                raise InvalidRulesError(f"Invalid pattern for field {rule.path}: {exc}") from exc
        seen.add(rule.path)
    return checked


def _walk(node: Any, segments: list[str]) -> Any:
    for segment in segments:
        if not isinstance(node, Mapping) or node.get(segment) is None:
            return _ABSENT
        node = node[segment]
    return node


def _validate_field(rule: FieldRule, payload: Payload) -> None:
    segments = rule.segments
    value = _walk(payload, segments)
    if value is _ABSENT:
        if rule.required:
            raise ValidationError(rule.path, ValidationError.NOT_FOUND)
        return

    coerced = _coerce(rule, value)
    if rule.kind is FieldKind.STRING and rule.pattern:
        if re.fullmatch(rule.pattern, coerced) is None:
            raise ValidationError(rule.path, ValidationError.PATTERN_MISMATCH, pattern=rule.pattern)

    parent = _walk(payload, segments[:-1]) if len(segments) > 1 else payload
    if not isinstance(parent, MutableMapping):
        raise ValidationError(rule.path, ValidationError.NOT_A_MAPPING)
    parent[segments[-1]] = coerced


def _coerce(rule: FieldRule, value: Any) -> int | str:
    if rule.kind is FieldKind.INT:
        number = _as_int(value)
        if number is not None and (number != 0 or not rule.required or rule.allow_zero):
            return number
    elif rule.kind is FieldKind.STRING:
        if isinstance(value, str) and (value != "" or not rule.required):
            return value
    raise ValidationError(rule.path, ValidationError.WRONG_TYPE)


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str) and _NUMERIC.fullmatch(value):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        number = float(text)
        return int(number) if math.isfinite(number) else None
    return None
