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

"""Exception hierarchy for :mod:`valuecheck`."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import override


class ValueCheckError(Exception):
    """Base class for all valuecheck exceptions.

    Structural problems with a target class (it cannot be built, or its fields
    cannot be introspected) and broken contracts both derive from this class,
    so callers can catch everything the verifier raises with one handler.

    Note:
        Subclasses also inherit from a standard exception type. Contract
        violations are ``AssertionError`` instances so test runners report
        them as ordinary test failures rather than errors.
    """


class InstantiationError(ValueCheckError, RuntimeError):
    """Raised when no instance of the target class can be produced.

    Common causes:
        - The class is abstract or has no inspectable constructor
        - ``builder()`` returned an object without a ``build()`` method
        - The builder or constructor raised while creating the instance

    This error is fatal to the verification run and is never retried, since a
    structural mismatch cannot succeed on a second attempt.
    """

    def __init__(self, target: type[object], message: str) -> None:
        super().__init__(f"Cannot instantiate {target.__qualname__}: {message}")
        self.target = target


class IntrospectionError(ValueCheckError, RuntimeError):
    """Raised when a target class's fields cannot be resolved or written."""

    def __init__(self, target: type[object], message: str) -> None:
        super().__init__(f"Cannot introspect {target.__qualname__}: {message}")
        self.target = target


class Law(StrEnum):
    """Contracts a well-formed value object must satisfy."""

    SETTER_ROUND_TRIP = "setter round-trip"
    GETTER_ROUND_TRIP = "getter round-trip"
    STRING_REPRESENTATION = "string representation"
    HASH_STABILITY = "hash stability"
    HASH_EQUALITY = "equal objects hash equal"
    HASH_COLLISION = "distinct objects hash distinct"
    REFLEXIVE = "reflexive equality"
    SYMMETRIC = "symmetric equality"
    TRANSITIVE = "transitive equality"
    CONSISTENT = "consistent equality"
    NULL_COMPARISON = "inequality with None"
    TYPE_COMPARISON = "inequality with unrelated type"
    FIELD_SENSITIVITY = "field-sensitive equality"


@dataclass(slots=True, eq=False)
class ContractViolation(ValueCheckError, AssertionError):
    """A value object broke one of its contracts.

    Attributes:
        target: The class under verification.
        law: The contract that was violated.
        subject: Field or method name the violation concerns, if any.
        expected: What the contract required.
        actual: What the target class produced.
    """

    target: type[object]
    law: Law
    subject: str | None = None
    expected: object = None
    actual: object = None

    @override
    def __str__(self) -> str:
        """Describe the broken law and the offending field or method."""
        where = f" for {self.subject!r}" if self.subject is not None else ""
        return (
            f"{self.target.__name__}: {self.law} violated{where}; "
            f"expected {self.expected!r}, got {self.actual!r}"
        )


__all__ = [
    "ContractViolation",
    "InstantiationError",
    "IntrospectionError",
    "Law",
    "ValueCheckError",
]
