# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Deterministic test-value synthesis keyed by field type.

Each supported :class:`TypeTag` maps to a :class:`SynthesisRule` providing
three values: a *dummy* written during accessor round-trips, a *non-null
default* used to populate absent fields, and a *different* value guaranteed to
compare unequal to a given current value. Tags without a rule produce
:data:`UNSUPPORTED`, which callers treat as "skip this field" rather than as a
failure or as a legitimately absent value.
"""

from __future__ import annotations

import types
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Annotated, Final, Literal, Union, get_args, get_origin

__all__ = [
    "UNSUPPORTED",
    "SynthesisRule",
    "Synthesized",
    "TypeTag",
    "Unsupported",
    "different",
    "dummy",
    "is_optional",
    "non_null_default",
    "type_tag_for",
]


class TypeTag(Enum):
    """Closed set of field kinds the synthesizer knows how to populate."""

    TEXT = "text"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    FLOAT = "float"
    WIDE_INTEGER = "wide-integer"
    DATE = "date"
    TIMESTAMP = "timestamp"
    UNSUPPORTED = "unsupported"


class Unsupported(Enum):
    """Marker type for :data:`UNSUPPORTED`."""

    TOKEN = "unsupported"

    def __repr__(self) -> str:
        return "UNSUPPORTED"


UNSUPPORTED: Final = Unsupported.TOKEN

type Synthesized = object | Literal[Unsupported.TOKEN]

_UNION_TYPES: Final = (Union, types.UnionType)
_NONE_TYPE: Final = type(None)

# Exact-type lookup: bool must not resolve as int, datetime must not resolve as date.
_TYPE_TAGS: Final[Mapping[object, TypeTag]] = {
    str: TypeTag.TEXT,
    int: TypeTag.INTEGER,
    bool: TypeTag.BOOLEAN,
    float: TypeTag.FLOAT,
    Decimal: TypeTag.WIDE_INTEGER,
    date: TypeTag.DATE,
    datetime: TypeTag.TIMESTAMP,
}

DEFAULT_DATE: Final = date(2000, 1, 1)
DEFAULT_TIMESTAMP: Final = datetime(2000, 1, 1, tzinfo=UTC)
_DATE_OFFSET: Final = timedelta(days=1)
_TIMESTAMP_OFFSET: Final = timedelta(seconds=1)


@dataclass(slots=True, frozen=True)
class SynthesisRule:
    """Value strategy for one :class:`TypeTag`.

    Attributes:
        dummy: Canonical value written during accessor round-trip checks.
        default: Canonical non-absent value for populating empty fields.
        different: Callable returning a value unequal to its argument, which
            may be ``None`` when the field is currently absent.
    """

    dummy: object
    default: object
    different: Callable[[object], object]


def _toggle[V](first: V, second: V) -> Callable[[object], V]:
    def pick(current: object) -> V:
        return second if current == first else first

    return pick


def _flip(current: object) -> bool:
    if current is None:
        return True
    return not current


def _offset[D: date](current: D, delta: timedelta) -> D:
    # Step backwards at the top of the calendar (date.max, datetime.max).
    try:
        return current + delta
    except OverflowError:
        return current - delta


def _shift_date(current: object) -> date:
    if isinstance(current, date):
        return _offset(current, _DATE_OFFSET)
    return DEFAULT_DATE


def _shift_timestamp(current: object) -> datetime:
    if isinstance(current, datetime):
        return _offset(current, _TIMESTAMP_OFFSET)
    return DEFAULT_TIMESTAMP


_RULES: Final[Mapping[TypeTag, SynthesisRule]] = {
    TypeTag.TEXT: SynthesisRule(
        dummy="testValue",
        default="defaultString",
        different=_toggle("differentString", "alternateString"),
    ),
    TypeTag.INTEGER: SynthesisRule(dummy=42, default=1, different=_toggle(1, 2)),
    TypeTag.BOOLEAN: SynthesisRule(dummy=True, default=True, different=_flip),
    TypeTag.FLOAT: SynthesisRule(dummy=3.14, default=1.0, different=_toggle(1.0, 2.0)),
    TypeTag.WIDE_INTEGER: SynthesisRule(
        dummy=Decimal(100),
        default=Decimal(1),
        different=_toggle(Decimal(1), Decimal(2)),
    ),
    TypeTag.DATE: SynthesisRule(
        dummy=DEFAULT_DATE, default=DEFAULT_DATE, different=_shift_date
    ),
    TypeTag.TIMESTAMP: SynthesisRule(
        dummy=DEFAULT_TIMESTAMP,
        default=DEFAULT_TIMESTAMP,
        different=_shift_timestamp,
    ),
}


def _strip_annotation(annotation: object) -> tuple[object, bool]:
    """Return the base type of ``annotation`` and whether it admits ``None``."""

    optional = False
    base = annotation
    while True:
        origin = get_origin(base)
        if origin is Annotated:
            base = get_args(base)[0]
            continue
        if origin in _UNION_TYPES:
            arms = [arm for arm in get_args(base) if arm is not _NONE_TYPE]
            if len(arms) != len(get_args(base)):
                optional = True
            if len(arms) != 1:
                return base, optional
            base = arms[0]
            continue
        return base, optional


def type_tag_for(annotation: object) -> TypeTag:
    """Resolve a field annotation to its :class:`TypeTag`.

    ``X | None``, ``Optional[X]`` and ``Annotated[X, ...]`` resolve to the tag
    of ``X``. Unions of several concrete types and anything outside the table
    resolve to :attr:`TypeTag.UNSUPPORTED`.
    """

    base, _ = _strip_annotation(annotation)
    try:
        return _TYPE_TAGS.get(base, TypeTag.UNSUPPORTED)
    except TypeError:
        # Unhashable annotation objects cannot be in the table.
        return TypeTag.UNSUPPORTED


def is_optional(annotation: object) -> bool:
    """Return ``True`` when ``annotation`` admits ``None``."""

    if annotation is None or annotation is _NONE_TYPE:
        return True
    _, optional = _strip_annotation(annotation)
    return optional


def dummy(tag: TypeTag) -> Synthesized:
    """Return the canonical round-trip test value for ``tag``."""

    rule = _RULES.get(tag)
    return UNSUPPORTED if rule is None else rule.dummy


def non_null_default(tag: TypeTag) -> Synthesized:
    """Return the canonical non-absent value for ``tag``."""

    rule = _RULES.get(tag)
    return UNSUPPORTED if rule is None else rule.default


def different(tag: TypeTag, current: object) -> Synthesized:
    """Return a value of kind ``tag`` that compares unequal to ``current``."""

    rule = _RULES.get(tag)
    return UNSUPPORTED if rule is None else rule.different(current)
