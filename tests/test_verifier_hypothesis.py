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

"""Property-based tests running the verifier over generated value classes."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import field, make_dataclass
from datetime import date, datetime
from decimal import Decimal

import pytest
from hypothesis import given, settings, strategies as st

from valuecheck import ALL_CHECKS, Check, ContractViolation, Law, create_verifier

FIELD_TYPES: tuple[type[object], ...] = (
    str,
    int,
    bool,
    float,
    Decimal,
    date,
    datetime,
    bytes,
)
FIELD_NAMES = ("alpha", "beta", "gamma", "delta", "epsilon", "zeta")


def _getter(name: str) -> Callable[[object], object]:
    def get(self: object) -> object:
        return getattr(self, name)

    return get


def _setter(name: str) -> Callable[[object, object], None]:
    def set_(self: object, value: object) -> None:
        object.__setattr__(self, name, value)

    return set_


@st.composite
def value_classes(draw: st.DrawFn) -> type[object]:
    names = draw(st.lists(st.sampled_from(FIELD_NAMES), unique=True, max_size=5))
    specs = [
        (name, draw(st.sampled_from(FIELD_TYPES)) | None, field(default=None))
        for name in names
    ]
    namespace: dict[str, object] = {}
    for name in names:
        namespace[f"get_{name}"] = _getter(name)
        namespace[f"set_{name}"] = _setter(name)
    return make_dataclass(
        "Generated",
        specs,
        namespace=namespace,
        frozen=draw(st.booleans()),
        unsafe_hash=True,
        slots=draw(st.booleans()),
    )


@given(value_classes())
@settings(max_examples=50, deadline=None)
def test_generated_value_classes_pass_every_check(target: type[object]) -> None:
    create_verifier(target).test(*ALL_CHECKS).build()


@given(st.sampled_from(FIELD_TYPES[:-1]), st.booleans())
@settings(max_examples=30, deadline=None)
def test_field_left_out_of_equality_is_detected(
    ignored_type: type[object], frozen: bool
) -> None:
    def eq(self: object, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return getattr(self, "kept") == getattr(other, "kept")

    def hash_(self: object) -> int:
        return hash(getattr(self, "kept"))

    target = make_dataclass(
        "Leaky",
        [
            ("kept", str | None, field(default=None)),
            ("ignored", ignored_type | None, field(default=None)),
        ],
        namespace={"__eq__": eq, "__hash__": hash_},
        eq=False,
        frozen=frozen,
    )

    with pytest.raises(ContractViolation) as exc:
        create_verifier(target).test(Check.EQUALS)

    assert exc.value.law is Law.FIELD_SENSITIVITY
    assert exc.value.subject == "ignored"
