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

"""Sample value classes exercised by the verifier tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar, overload

__all__ = [
    "Account",
    "Empty",
    "Point",
    "Reading",
    "Tagged",
    "Truck",
    "TruckBuilder",
]


@dataclass(unsafe_hash=True)
class Truck:
    """Builder-constructed value object with full snake-case accessors."""

    wheels: str | None = None
    color: str | None = None
    model: str | None = None
    make: str | None = None

    @staticmethod
    def builder() -> TruckBuilder:
        return TruckBuilder()

    def get_wheels(self) -> str | None:
        return self.wheels

    def set_wheels(self, wheels: str | None) -> None:
        self.wheels = wheels

    def get_color(self) -> str | None:
        return self.color

    def set_color(self, color: str | None) -> None:
        self.color = color

    def get_model(self) -> str | None:
        return self.model

    def set_model(self, model: str | None) -> None:
        self.model = model

    def get_make(self) -> str | None:
        return self.make

    def set_make(self, make: str | None) -> None:
        self.make = make


class TruckBuilder:
    def __init__(self) -> None:
        self._values: dict[str, str | None] = {}

    def wheels(self, wheels: str | None) -> TruckBuilder:
        self._values["wheels"] = wheels
        return self

    def color(self, color: str | None) -> TruckBuilder:
        self._values["color"] = color
        return self

    def build(self) -> Truck:
        return Truck(**self._values)


class Account:
    """Constructor-only class using JavaBean accessor spelling."""

    currency: ClassVar[str] = "EUR"

    _owner: str
    _balance: int
    _active: bool
    _rate: float
    _limit: Decimal
    _opened: date | None
    _updated: datetime | None

    def __init__(self, owner: str, balance: int) -> None:
        self._owner = owner
        self._balance = balance
        self._active = False
        self._rate = 0.0
        self._limit = Decimal(0)
        self._opened = None
        self._updated = None

    def getOwner(self) -> str:
        return self._owner

    def setOwner(self, owner: str) -> None:
        self._owner = owner

    def getBalance(self) -> int:
        return self._balance

    def setBalance(self, balance: int) -> None:
        self._balance = balance

    def isActive(self) -> bool:
        return self._active

    def setActive(self, active: bool) -> None:
        self._active = active

    def getRate(self) -> float:
        return self._rate

    def setRate(self, rate: float) -> None:
        self._rate = rate

    def getLimit(self) -> Decimal:
        return self._limit

    def setLimit(self, limit: Decimal) -> None:
        self._limit = limit

    def getOpened(self) -> date | None:
        return self._opened

    def setOpened(self, opened: date | None) -> None:
        self._opened = opened

    def getUpdated(self) -> datetime | None:
        return self._updated

    def setUpdated(self, updated: datetime | None) -> None:
        self._updated = updated

    def getSummary(self) -> str:
        return f"{self._owner}: {self._balance}"

    @staticmethod
    def getCurrency() -> str:
        return Account.currency

    def _key(self) -> tuple[object, ...]:
        return (
            self._owner,
            self._balance,
            self._active,
            self._rate,
            self._limit,
            self._opened,
            self._updated,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"Account(owner={self._owner!r}, balance={self._balance!r})"


@dataclass(frozen=True)
class Empty:
    """A value object without fields."""


@dataclass(frozen=True)
class Tagged:
    """A value object whose only field has no synthesis rule."""

    labels: tuple[str, ...] = ()

    def get_labels(self) -> tuple[str, ...]:
        return self.labels

    def set_labels(self, labels: tuple[str, ...]) -> None:
        object.__setattr__(self, "labels", labels)


class Point:
    """Constructor overloads; the zero-argument form is preferred."""

    x: int
    y: int

    @overload
    def __init__(self) -> None: ...

    @overload
    def __init__(self, x: int, y: int) -> None: ...

    def __init__(self, x: int = 0, y: int = 0) -> None:
        self.x = x
        self.y = y

    def get_x(self) -> int:
        return self.x

    def get_y(self) -> int:
        return self.y

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return (self.x, self.y) == (other.x, other.y)

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __repr__(self) -> str:
        return f"Point({self.x}, {self.y})"


@dataclass(unsafe_hash=True)
class Reading:
    """Dataclass with a field excluded from comparison."""

    sensor: str | None = None
    value: float | None = None
    note: str | None = field(default=None, compare=False)
