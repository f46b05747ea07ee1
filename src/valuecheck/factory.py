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

"""Instance construction for value classes under verification."""

from __future__ import annotations

import inspect
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Final, Protocol, get_overloads

from .errors import InstantiationError
from .introspection import FieldDescriptor, declared_fields, read_field, write_field
from .logging import StructuredLogger, get_logger
from .synthesis import UNSUPPORTED, TypeTag, is_optional, non_null_default, type_tag_for

__all__ = [
    "BuilderConstruction",
    "Construction",
    "ConstructorArgs",
    "ConstructorConstruction",
    "InstanceFactory",
    "resolve_construction",
]

_BUILDER: Final = "builder"
_BUILD: Final = "build"

_ZERO_ARGUMENTS: Final[Mapping[TypeTag, object]] = {
    TypeTag.TEXT: "",
    TypeTag.INTEGER: 0,
    TypeTag.BOOLEAN: False,
    TypeTag.FLOAT: 0.0,
    TypeTag.WIDE_INTEGER: Decimal(0),
}

_VARIADIC: Final = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(slots=True, frozen=True)
class ConstructorArgs:
    """Caller-supplied arguments for constructor-based instantiation."""

    args: tuple[object, ...] = ()
    kwargs: Mapping[str, object] = field(default_factory=dict)


class Construction(Protocol):
    """A resolved way of producing instances of one class."""

    def construct(self, cls: type[object], supplied: ConstructorArgs | None) -> object:
        """Return a new instance of ``cls``."""
        ...


@dataclass(slots=True, frozen=True)
class BuilderConstruction:
    """``cls.builder().build()`` with no field population."""

    def construct(self, cls: type[object], supplied: ConstructorArgs | None) -> object:
        builder = getattr(cls, _BUILDER)()
        build = getattr(builder, _BUILD, None)
        if not callable(build):
            raise InstantiationError(
                cls, f"{type(builder).__qualname__} has no callable build()"
            )
        return build()


@dataclass(slots=True, frozen=True)
class ConstructorConstruction:
    """Call the class with supplied arguments or zero/absent placeholders.

    Attributes:
        signature: The constructor signature with the fewest parameters,
            excluding ``self``.
    """

    signature: inspect.Signature

    def construct(self, cls: type[object], supplied: ConstructorArgs | None) -> object:
        if supplied is not None:
            return cls(*supplied.args, **supplied.kwargs)
        args: list[object] = []
        kwargs: dict[str, object] = {}
        for parameter in self.signature.parameters.values():
            if parameter.kind in _VARIADIC or parameter.default is not parameter.empty:
                continue
            placeholder = _zero_argument(parameter.annotation)
            if parameter.kind is inspect.Parameter.KEYWORD_ONLY:
                kwargs[parameter.name] = placeholder
            else:
                args.append(placeholder)
        return cls(*args, **kwargs)


def _zero_argument(annotation: object) -> object:
    if annotation is inspect.Parameter.empty or is_optional(annotation):
        return None
    return _ZERO_ARGUMENTS.get(type_tag_for(annotation))


def _has_builder(cls: type[object]) -> bool:
    try:
        attribute = inspect.getattr_static(cls, _BUILDER)
    except AttributeError:
        return False
    return isinstance(attribute, (staticmethod, classmethod))


def _signature(target: object, *, bound: bool) -> inspect.Signature:
    try:
        signature = inspect.signature(target, eval_str=True)  # pyright: ignore[reportArgumentType]
    except (NameError, SyntaxError):
        signature = inspect.signature(target)  # pyright: ignore[reportArgumentType]
    if bound:
        return signature
    parameters = list(signature.parameters.values())[1:]
    return signature.replace(parameters=parameters)


def _constructor_signatures(cls: type[object]) -> list[inspect.Signature]:
    init = cls.__dict__.get("__init__")
    overloads = get_overloads(init) if inspect.isfunction(init) else []
    if overloads:
        return [_signature(overload, bound=False) for overload in overloads]
    return [_signature(cls, bound=True)]


def resolve_construction(cls: type[object]) -> Construction:
    """Pick the construction strategy for ``cls`` by capability check.

    A ``builder`` staticmethod or classmethod wins. Otherwise the constructor
    signature with the fewest parameters is used; among ``typing.overload``
    declarations of ``__init__`` ties keep declaration order.
    """

    if _has_builder(cls):
        return BuilderConstruction()
    if inspect.isabstract(cls):
        raise InstantiationError(cls, "abstract classes cannot be instantiated")
    try:
        candidates = _constructor_signatures(cls)
    except (TypeError, ValueError) as error:
        raise InstantiationError(cls, f"no inspectable constructor ({error})") from error
    best = min(candidates, key=lambda signature: len(signature.parameters))
    return ConstructorConstruction(signature=best)


class InstanceFactory[T]:
    """Produce fresh instances of one class for a verification run."""

    __slots__ = ("_cls", "_construction", "_logger", "_supplied")

    def __init__(
        self,
        cls: type[T],
        *,
        supplied: ConstructorArgs | None = None,
        logger: StructuredLogger | None = None,
    ) -> None:
        super().__init__()
        self._cls = cls
        self._supplied = supplied
        self._logger = logger or get_logger(__name__)
        self._construction = resolve_construction(cls)
        self._logger.debug(
            "Resolved construction strategy.",
            event="valuecheck.factory.strategy",
            context={
                "target": cls.__qualname__,
                "strategy": type(self._construction).__name__,
            },
        )

    @property
    def construction(self) -> Construction:
        """The strategy resolved for the target class."""
        return self._construction

    def create(self) -> T:
        """Return a default instance built by the resolved strategy."""

        try:
            instance = self._construction.construct(self._cls, self._supplied)
        except InstantiationError:
            raise
        except Exception as error:
            raise InstantiationError(
                self._cls, f"{type(error).__name__}: {error}"
            ) from error
        if not isinstance(instance, self._cls):
            raise InstantiationError(
                self._cls, f"construction returned {type(instance).__qualname__}"
            )
        return instance

    def create_populated(self, fields: Sequence[FieldDescriptor] | None = None) -> T:
        """Return a default instance with every absent field filled in.

        Absent (``None`` or unset) fields are written directly with the
        non-null default for their type; fields of unsupported types keep
        whatever the construction left there.
        """

        instance = self.create()
        for descriptor in declared_fields(self._cls) if fields is None else fields:
            if read_field(instance, descriptor.name) is not None:
                continue
            value = non_null_default(descriptor.type_tag)
            if value is UNSUPPORTED:
                continue
            write_field(instance, descriptor.name, value)
        return instance
