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

"""Contract verification for value classes.

A :class:`Verifier` builds fresh instances of a target class and checks the
contracts every well-formed value object should satisfy::

    create_verifier(Truck).test(Check.SETTERS, Check.GETTERS).test(
        Check.EQUALS
    ).build()

Each :meth:`Verifier.test` call stops at the first broken contract and raises
:class:`~valuecheck.errors.ContractViolation` naming the law, the field or
method involved, and the expected and actual values.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from enum import Enum
from functools import partial
from typing import Final, NoReturn, Self

from .errors import ContractViolation, IntrospectionError, Law
from .factory import ConstructorArgs, InstanceFactory
from .introspection import (
    FieldDescriptor,
    declared_fields,
    read_field,
    resolve_accessors,
    undeclared_setters,
    write_field,
)
from .logging import StructuredLogger, get_logger
from .synthesis import UNSUPPORTED, different, dummy

__all__ = ["ALL_CHECKS", "Check", "Verifier", "create_verifier"]


class Check(Enum):
    """Contract suites a caller can select."""

    SETTERS = "setters"
    GETTERS = "getters"
    TO_STRING = "to_string"
    HASH_CODE = "hash_code"
    EQUALS = "equals"


ALL_CHECKS: Final[tuple[Check, ...]] = tuple(Check)

_EQ: Final = "__eq__"
_HASH: Final = "__hash__"
_STR: Final = "__str__"


class _Unrelated:
    """Instances compare equal to nothing but themselves."""

    __slots__ = ()


class _ContractRun[T]:
    """State for one :meth:`Verifier.test` call."""

    __slots__ = ("_factory", "_fields", "_logger", "_target")

    def __init__(
        self,
        target: type[T],
        *,
        factory: InstanceFactory[T],
        logger: StructuredLogger,
    ) -> None:
        super().__init__()
        self._target = target
        self._factory = factory
        self._logger = logger
        self._fields = declared_fields(target)

    def execute(self, check: Check) -> None:
        self._logger.debug(
            "Running contract check.",
            event="valuecheck.verifier.check",
            context={"check": check.value, "fields": len(self._fields)},
        )
        instance = self._factory.create()
        match check:
            case Check.SETTERS:
                self._check_setters(instance)
            case Check.GETTERS:
                self._check_getters(instance)
            case Check.TO_STRING:
                self._check_to_string(instance)
            case Check.HASH_CODE:
                self._check_hash_code(instance)
            case Check.EQUALS:
                self._check_equals(instance)

    # -- failure plumbing -------------------------------------------------

    def _fail(
        self,
        law: Law,
        subject: str | None,
        *,
        expected: object,
        actual: object,
    ) -> NoReturn:
        violation = ContractViolation(
            target=self._target,
            law=law,
            subject=subject,
            expected=expected,
            actual=actual,
        )
        self._logger.info(
            "Contract violated.",
            event="valuecheck.verifier.violation",
            context={"law": law.value, "subject": subject},
        )
        raise violation

    def _invoke[R](self, law: Law, subject: str, call: Callable[[], R]) -> R:
        try:
            return call()
        except ContractViolation:
            raise
        except Exception as error:
            self._logger.info(
                "Target code raised during contract check.",
                event="valuecheck.verifier.violation",
                context={"law": law.value, "subject": subject},
            )
            raise ContractViolation(
                target=self._target,
                law=law,
                subject=subject,
                expected="no exception",
                actual=f"{type(error).__name__}: {error}",
            ) from error

    def _equals(self, left: object, right: object, law: Law, subject: str) -> bool:
        return self._invoke(law, subject, lambda: bool(left == right))

    def _hash(self, instance: object, law: Law) -> int:
        return self._invoke(law, _HASH, lambda: hash(instance))

    def _skip(self, field: FieldDescriptor, check: str, reason: str) -> None:
        self._logger.debug(
            "Skipping field.",
            event="valuecheck.verifier.field_skipped",
            context={"check": check, "field": field.name, "reason": reason},
        )

    # -- accessor round-trips ---------------------------------------------

    def _check_setters(self, instance: T) -> None:
        orphans = undeclared_setters(self._target, self._fields)
        if orphans:
            raise IntrospectionError(
                self._target, f"no declared field for setter {orphans[0]!r}"
            )
        accessors = resolve_accessors(self._target, self._fields)
        for field in self._fields:
            setter = accessors[field.name].setter
            if setter is None:
                continue
            value = dummy(field.type_tag)
            if value is UNSUPPORTED:
                self._skip(field, Check.SETTERS.value, "unsupported type")
                continue
            method = getattr(instance, setter)
            self._invoke(Law.SETTER_ROUND_TRIP, setter, partial(method, value))
            actual = read_field(instance, field.name)
            if actual != value:
                self._fail(
                    Law.SETTER_ROUND_TRIP, field.name, expected=value, actual=actual
                )

    def _check_getters(self, instance: T) -> None:
        accessors = resolve_accessors(self._target, self._fields)
        for field in self._fields:
            getter = accessors[field.name].getter
            if getter is None:
                continue
            value = dummy(field.type_tag)
            if value is UNSUPPORTED:
                self._skip(field, Check.GETTERS.value, "unsupported type")
                continue
            write_field(instance, field.name, value)
            actual = self._invoke(
                Law.GETTER_ROUND_TRIP, getter, getattr(instance, getter)
            )
            if actual != value:
                self._fail(
                    Law.GETTER_ROUND_TRIP, field.name, expected=value, actual=actual
                )

    # -- string representation --------------------------------------------

    def _check_to_string(self, instance: T) -> None:
        text = self._invoke(Law.STRING_REPRESENTATION, _STR, lambda: str(instance))
        name = self._target.__name__
        if not text:
            self._fail(
                Law.STRING_REPRESENTATION,
                _STR,
                expected="a non-empty string",
                actual=text,
            )
        if name not in text:
            self._fail(
                Law.STRING_REPRESENTATION,
                _STR,
                expected=f"text containing {name!r}",
                actual=text,
            )

    # -- hashing ----------------------------------------------------------

    def _check_hash_stable(self, instance: T) -> int:
        first = self._hash(instance, Law.HASH_STABILITY)
        second = self._hash(instance, Law.HASH_STABILITY)
        if first != second:
            self._fail(Law.HASH_STABILITY, _HASH, expected=first, actual=second)
        return first

    def _check_hash_code(self, instance: T) -> None:
        default_hash = self._check_hash_stable(instance)

        populated = self._factory.create_populated(self._fields)
        populated_hash = self._check_hash_stable(populated)

        twin = self._factory.create_populated(self._fields)
        twin_hash = self._hash(twin, Law.HASH_EQUALITY)
        if (
            self._equals(populated, twin, Law.HASH_EQUALITY, _EQ)
            and populated_hash != twin_hash
        ):
            self._fail(
                Law.HASH_EQUALITY, _HASH, expected=populated_hash, actual=twin_hash
            )

        # Collisions are legal in general; for these canonical values they
        # indicate fields missing from the hash.
        if (
            not self._equals(instance, populated, Law.HASH_COLLISION, _EQ)
            and default_hash == populated_hash
        ):
            self._fail(
                Law.HASH_COLLISION,
                _HASH,
                expected=f"a hash other than {populated_hash}",
                actual=default_hash,
            )

    # -- equality ---------------------------------------------------------

    def _check_equals(self, instance: T) -> None:
        populated_fresh = partial(self._factory.create_populated, self._fields)
        populated = populated_fresh()

        for label, base, fresh in (
            ("default", instance, self._factory.create),
            ("populated", populated, populated_fresh),
        ):
            self._check_equality_laws(base, fresh, label)
            self._check_field_sensitivity(base, fresh, label)

        subject = f"{_EQ}[default/populated]"
        self._check_symmetric(instance, populated, subject)
        self._check_consistent(instance, populated, subject)

    def _check_symmetric(self, left: object, right: object, subject: str) -> None:
        forward = self._equals(left, right, Law.SYMMETRIC, subject)
        backward = self._equals(right, left, Law.SYMMETRIC, subject)
        if forward != backward:
            self._fail(Law.SYMMETRIC, subject, expected=forward, actual=backward)

    def _check_consistent(self, left: object, right: object, subject: str) -> None:
        first = self._equals(left, right, Law.CONSISTENT, subject)
        second = self._equals(left, right, Law.CONSISTENT, subject)
        if first != second:
            self._fail(Law.CONSISTENT, subject, expected=first, actual=second)

    def _check_equality_laws(
        self, base: T, fresh: Callable[[], T], label: str
    ) -> None:
        subject = f"{_EQ}[{label}]"

        if not self._equals(base, base, Law.REFLEXIVE, subject):
            self._fail(Law.REFLEXIVE, subject, expected=True, actual=False)

        other = fresh()
        third = fresh()
        self._check_symmetric(base, other, subject)

        if (
            self._equals(base, other, Law.TRANSITIVE, subject)
            and self._equals(other, third, Law.TRANSITIVE, subject)
            and not self._equals(base, third, Law.TRANSITIVE, subject)
        ):
            self._fail(Law.TRANSITIVE, subject, expected=True, actual=False)

        self._check_consistent(base, other, subject)

        if self._equals(base, None, Law.NULL_COMPARISON, subject):
            self._fail(Law.NULL_COMPARISON, subject, expected=False, actual=True)

        if self._equals(base, _Unrelated(), Law.TYPE_COMPARISON, subject):
            self._fail(Law.TYPE_COMPARISON, subject, expected=False, actual=True)

    def _check_field_sensitivity(
        self, base: T, fresh: Callable[[], T], label: str
    ) -> None:
        check = f"{Check.EQUALS.value}[{label}]"
        for field in self._fields:
            if not field.compare:
                self._skip(field, check, "excluded from comparison")
                continue
            modified = fresh()
            original = read_field(modified, field.name)
            changed = different(field.type_tag, original)
            if changed is UNSUPPORTED:
                self._skip(field, check, "unsupported type")
                continue
            write_field(modified, field.name, changed)
            if self._equals(base, modified, Law.FIELD_SENSITIVITY, field.name):
                self._fail(
                    Law.FIELD_SENSITIVITY,
                    field.name,
                    expected=f"inequality once {field.name} is {changed!r}",
                    actual="instances compare equal",
                )
            write_field(modified, field.name, original)


class Verifier[T]:
    """Fluent entry point running contract checks against one class."""

    __slots__ = ("_completed", "_logger", "_supplied", "_target")

    def __init__(
        self,
        target: type[T],
        *,
        logger: logging.Logger | StructuredLogger | None = None,
    ) -> None:
        super().__init__()
        self._target = target
        self._supplied: ConstructorArgs | None = None
        self._completed: list[Check] = []
        self._logger = get_logger(
            __name__,
            logger_override=logger,
            context={"target": target.__qualname__},
        )

    @property
    def target(self) -> type[T]:
        """The class under verification."""
        return self._target

    @property
    def completed(self) -> Sequence[Check]:
        """Checks that passed so far, in the order they ran."""
        return tuple(self._completed)

    def with_constructor_args(self, *args: object, **kwargs: object) -> Self:
        """Pass ``args`` and ``kwargs`` to the constructor of every instance.

        Ignored for classes constructed through ``builder()``.
        """

        self._supplied = ConstructorArgs(args=args, kwargs=dict(kwargs))
        return self

    def test(self, *checks: Check) -> Self:
        """Run ``checks`` against freshly constructed instances.

        Each check receives its own instance. The first broken contract
        raises :class:`~valuecheck.errors.ContractViolation` and aborts the
        remaining checks of this call.

        Raises:
            ValueError: No checks were given.
            TypeError: An argument is not a :class:`Check`.
            InstantiationError: No instance of the target class can be built.
            IntrospectionError: Fields cannot be resolved or written.
            ContractViolation: A contract is broken.
        """

        if not checks:
            raise ValueError("test() expects at least one Check")
        for check in checks:
            if not isinstance(check, Check):
                raise TypeError(f"Expected a Check, got {check!r}")

        factory = InstanceFactory(
            self._target, supplied=self._supplied, logger=self._logger
        )
        run = _ContractRun(self._target, factory=factory, logger=self._logger)
        for check in dict.fromkeys(checks):
            run.execute(check)
            self._completed.append(check)
        return self

    def build(self) -> None:
        """Mark the verification run complete."""

        self._logger.info(
            "Verification completed.",
            event="valuecheck.verifier.completed",
            context={"checks": [check.value for check in self._completed]},
        )


def create_verifier[T](
    target: type[T],
    *,
    logger: logging.Logger | StructuredLogger | None = None,
) -> Verifier[T]:
    """Return a :class:`Verifier` for ``target``."""

    return Verifier(target, logger=logger)
