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

"""Contract verification for value objects.

``valuecheck`` instantiates a class it has never seen, discovers its fields and
accessors by naming convention, and checks that its accessors round-trip,
and that ``str()``, ``hash()`` and ``==`` obey their contracts::

    from valuecheck import ALL_CHECKS, create_verifier

    create_verifier(Truck).test(*ALL_CHECKS).build()
"""

from __future__ import annotations

from .errors import (
    ContractViolation,
    InstantiationError,
    IntrospectionError,
    Law,
    ValueCheckError,
)
from .factory import ConstructorArgs, InstanceFactory, resolve_construction
from .introspection import (
    AccessorPair,
    FieldDescriptor,
    declared_fields,
    is_getter,
    is_setter,
    resolve_accessors,
)
from .logging import configure_logging, get_logger
from .synthesis import (
    UNSUPPORTED,
    TypeTag,
    different,
    dummy,
    non_null_default,
    type_tag_for,
)
from .verifier import ALL_CHECKS, Check, Verifier, create_verifier

__all__ = [
    "ALL_CHECKS",
    "UNSUPPORTED",
    "AccessorPair",
    "Check",
    "ConstructorArgs",
    "ContractViolation",
    "FieldDescriptor",
    "InstanceFactory",
    "InstantiationError",
    "IntrospectionError",
    "Law",
    "TypeTag",
    "ValueCheckError",
    "Verifier",
    "configure_logging",
    "create_verifier",
    "declared_fields",
    "different",
    "dummy",
    "get_logger",
    "is_getter",
    "is_setter",
    "non_null_default",
    "resolve_accessors",
    "resolve_construction",
    "type_tag_for",
]
