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

"""Field and accessor discovery for value classes.

Fields are the annotations declared directly on a class, in declaration
order. Accessors are found by naming convention: ``get_<name>``/``is_<name>``
read a field and ``set_<name>`` writes it. The JavaBean spelling
(``getName``/``isName``/``setName``) is also recognised, with the snake-case
spelling preferred when a class defines both.
"""

from __future__ import annotations

import dataclasses
import inspect
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import ClassVar, Final, get_origin, get_type_hints

from .errors import IntrospectionError
from .synthesis import TypeTag, type_tag_for

__all__ = [
    "AccessorPair",
    "FieldDescriptor",
    "declared_fields",
    "getter_names",
    "is_getter",
    "is_setter",
    "read_field",
    "resolve_accessors",
    "setter_names",
    "undeclared_setters",
    "write_field",
]

_GET: Final = "get"
_IS: Final = "is"
_SET: Final = "set"


@dataclass(slots=True, frozen=True)
class FieldDescriptor:
    """A field declared on a value class.

    Attributes:
        name: Attribute name as declared.
        annotation: Resolved type annotation.
        type_tag: Synthesis kind derived from ``annotation``.
        compare: ``False`` for dataclass fields excluded from equality.
    """

    name: str
    annotation: object
    type_tag: TypeTag
    compare: bool = True

    @property
    def suffix(self) -> str:
        """Accessor suffix: the field name without leading underscores."""
        return self.name.lstrip("_")


@dataclass(slots=True, frozen=True)
class AccessorPair:
    """Names of the recognised getter and setter for one field."""

    getter: str | None = None
    setter: str | None = None


def _camel(suffix: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in suffix.split("_"))


def _spellings(prefix: str, suffix: str) -> tuple[str, str]:
    return f"{prefix}_{suffix}", f"{prefix}{_camel(suffix)}"


def getter_names(field: FieldDescriptor) -> tuple[str, ...]:
    """Return candidate getter names for ``field`` in preference order."""

    names = _spellings(_GET, field.suffix)
    if field.type_tag is TypeTag.BOOLEAN:
        snake_is, camel_is = _spellings(_IS, field.suffix)
        return (snake_is, names[0], camel_is, names[1])
    return names


def setter_names(field: FieldDescriptor) -> tuple[str, ...]:
    """Return candidate setter names for ``field`` in preference order."""

    return _spellings(_SET, field.suffix)


def _own_annotations(cls: type[object]) -> dict[str, object]:
    try:
        return dict(inspect.get_annotations(cls))
    except (NameError, TypeError) as error:
        raise IntrospectionError(cls, f"unreadable annotations ({error})") from error


class _Unresolved:
    """Stands in for names an annotation refers to but cannot reach."""

    __slots__ = ()

    def __class_getitem__(cls, item: object) -> type[_Unresolved]:
        return cls


def _resolve_hints(cls: type[object]) -> dict[str, object]:
    """Resolve annotations on ``cls``, binding unreachable names to a placeholder.

    Classes declared inside functions often refer to sibling local classes
    that are gone by the time the annotations are evaluated. Each missing
    name is bound to :class:`_Unresolved` and resolution retried, so the
    affected fields end up with an unsupported type instead of failing the
    whole class.
    """

    localns: dict[str, object] | None = None
    max_retries = 32
    for _ in range(max_retries):
        try:
            return get_type_hints(cls, localns=localns, include_extras=True)
        except NameError as error:
            missing = getattr(error, "name", None)
            if localns is None:
                # Module names shadow class attributes, as in the default lookup.
                localns = dict(vars(cls))
                module = sys.modules.get(cls.__module__)
                if module is not None:
                    localns.update(vars(module))
                localns.update(
                    (param.__name__, param)
                    for param in getattr(cls, "__type_params__", ())
                )
            if not missing or localns.get(missing) is _Unresolved:
                raise IntrospectionError(
                    cls, f"cannot resolve field annotations ({error})"
                ) from error
            localns[missing] = _Unresolved
        except (TypeError, AttributeError) as error:
            raise IntrospectionError(
                cls, f"cannot resolve field annotations ({error})"
            ) from error
    raise IntrospectionError(cls, "too many unresolvable names in annotations")


def declared_fields(cls: type[object]) -> tuple[FieldDescriptor, ...]:
    """Return the fields annotated directly on ``cls`` in declaration order.

    Inherited fields, ``ClassVar`` annotations and dataclass ``InitVar``
    pseudo-fields are excluded. Fields whose annotations name something
    that cannot be resolved are reported with :attr:`TypeTag.UNSUPPORTED`.
    """

    own = _own_annotations(cls)
    if not own:
        return ()
    hints = _resolve_hints(cls)

    compare_flags: dict[str, bool] | None = None
    if "__dataclass_fields__" in cls.__dict__:
        compare_flags = {item.name: item.compare for item in dataclasses.fields(cls)}

    descriptors: list[FieldDescriptor] = []
    for name in own:
        annotation = hints.get(name, own[name])
        if compare_flags is not None:
            if name not in compare_flags:
                continue
        elif get_origin(annotation) is ClassVar or annotation is ClassVar:
            continue
        if isinstance(annotation, dataclasses.InitVar):
            continue
        descriptors.append(
            FieldDescriptor(
                name=name,
                annotation=annotation,
                type_tag=type_tag_for(annotation),
                compare=True if compare_flags is None else compare_flags[name],
            )
        )
    return tuple(descriptors)


def _parameter_count(method: object) -> int | None:
    """Return the number of parameters after ``self``, or ``None`` if unknown."""

    try:
        signature = inspect.signature(method)  # pyright: ignore[reportArgumentType]
    except (TypeError, ValueError):
        return None
    parameters = list(signature.parameters.values())
    if not parameters or parameters[0].kind not in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    ):
        return None
    return len(parameters) - 1


def _instance_method(cls: type[object], name: str, arity: int) -> bool:
    # Only methods declared on the class itself; descriptors such as
    # staticmethod, classmethod and property are not accessors.
    attribute = cls.__dict__.get(name)
    if not inspect.isfunction(attribute):
        return False
    return _parameter_count(attribute) == arity


def _first_declared(
    cls: type[object], candidates: Sequence[str], arity: int
) -> str | None:
    for name in candidates:
        if _instance_method(cls, name, arity):
            return name
    return None


def resolve_accessors(
    cls: type[object], fields: Sequence[FieldDescriptor]
) -> dict[str, AccessorPair]:
    """Build the accessor map for ``fields`` keyed by field name."""

    return {
        field.name: AccessorPair(
            getter=_first_declared(cls, getter_names(field), 0),
            setter=_first_declared(cls, setter_names(field), 1),
        )
        for field in fields
    }


def _setter_shaped(name: str) -> bool:
    rest = name.removeprefix(_SET)
    if rest == name or not rest:
        return False
    return rest[0].isupper() or (rest[0] == "_" and len(rest) > 1)


def undeclared_setters(
    cls: type[object], fields: Sequence[FieldDescriptor]
) -> tuple[str, ...]:
    """Return one-argument ``set`` methods on ``cls`` that name no declared field.

    ``set_lable`` on a class declaring ``label`` is reported here, since a
    setter whose field cannot be located can never be verified.
    """

    known = {name for field in fields for name in setter_names(field)}
    return tuple(
        name
        for name in cls.__dict__
        if _setter_shaped(name)
        and name not in known
        and _instance_method(cls, name, 1)
    )


def _field_named_by(
    cls: type[object],
    method_name: str,
    names: Callable[[FieldDescriptor], tuple[str, ...]],
) -> FieldDescriptor | None:
    for field in declared_fields(cls):
        if method_name in names(field):
            return field
    return None


def is_getter(cls: type[object], method_name: str) -> bool:
    """Return ``True`` when ``method_name`` is a recognised getter on ``cls``.

    A getter is a plain instance method declared on ``cls`` that takes no
    parameters besides ``self`` and whose name matches a declared field.
    Zero-argument methods with no matching field are not getters.
    """

    field = _field_named_by(cls, method_name, getter_names)
    return field is not None and _instance_method(cls, method_name, 0)


def is_setter(cls: type[object], method_name: str) -> bool:
    """Return ``True`` when ``method_name`` is a recognised setter on ``cls``."""

    field = _field_named_by(cls, method_name, setter_names)
    return field is not None and _instance_method(cls, method_name, 1)


def read_field(instance: object, name: str) -> object:
    """Read a field directly; an unset attribute reads as ``None``."""

    return getattr(instance, name, None)


def write_field(instance: object, name: str, value: object) -> None:
    """Write a field directly, bypassing accessors and frozen dataclasses."""

    try:
        object.__setattr__(instance, name, value)
    except (AttributeError, TypeError) as error:
        raise IntrospectionError(
            type(instance), f"field {name!r} is not writable ({error})"
        ) from error
