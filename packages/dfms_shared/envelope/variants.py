"""Closed set of response body shapes recognized by normalization.

``classify_body`` inspects a decoded body once, in a fixed order, and returns
exactly one variant. Conversion to an envelope then works per variant without
re-inspecting the raw body.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from .raw import MISSING

ENVELOPE_KEYS = frozenset({"code", "message", "success"})


@dataclass(frozen=True)
class Absent:
    """JSON ``null`` or no body at all."""


@dataclass(frozen=True)
class EmptyObject:
    """Object body without any keys."""

    original: dict[str, Any]


@dataclass(frozen=True)
class Primitive:
    """String, number or boolean body."""

    value: str | int | float | bool


@dataclass(frozen=True)
class Canonical:
    """Body that already carries a numeric ``code`` and string ``message``."""

    code: int | float
    message: str
    data: Any = MISSING
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PartialCode:
    """Body with a numeric ``code`` but no ``message`` key.

    When ``data`` is missing, ``remainder`` holds the sibling fields left after
    dropping the envelope keys; a payload field literally named ``code`` or
    ``message`` cannot be told apart from the envelope keys and is lost.
    """

    code: int | float
    data: Any = MISSING
    remainder: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ListBody:
    """Array body."""

    items: list[Any]


@dataclass(frozen=True)
class PlainObject:
    """Object body that does not look like an envelope."""

    value: dict[str, Any]


@dataclass(frozen=True)
class Unrecognized:
    """Anything the other variants do not cover."""

    value: Any


BodyVariant = Union[
    Absent,
    EmptyObject,
    Primitive,
    Canonical,
    PartialCode,
    ListBody,
    PlainObject,
    Unrecognized,
]


def is_number(value: object) -> bool:
    """Return ``True`` for ints and floats, excluding booleans."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def classify_body(body: Any) -> BodyVariant:
    """Classify one decoded response body into its variant."""
    if body is None or body is MISSING:
        return Absent()

    if isinstance(body, Mapping) and len(body) == 0:
        return EmptyObject(original=dict(body))

    if isinstance(body, (str, int, float, bool)):
        return Primitive(value=body)

    if isinstance(body, Mapping) and is_number(body.get("code")):
        fields = dict(body)
        code = fields["code"]
        if isinstance(fields.get("message"), str):
            return Canonical(
                code=code,
                message=fields["message"],
                data=fields.get("data", MISSING),
                extra={
                    key: value
                    for key, value in fields.items()
                    if key not in ENVELOPE_KEYS and key != "data"
                },
            )
        if "message" not in fields:
            remainder = {
                key: value
                for key, value in fields.items()
                if key not in ENVELOPE_KEYS and key != "data"
            }
            return PartialCode(
                code=code,
                data=fields.get("data", MISSING),
                remainder=remainder,
            )

    if isinstance(body, (list, tuple)):
        return ListBody(items=list(body))

    if isinstance(body, Mapping):
        return PlainObject(value=dict(body))

    return Unrecognized(value=body)
