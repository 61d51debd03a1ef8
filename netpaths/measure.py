"""Cost measures: the arithmetic contract every edge cost must satisfy.

A ``Measure`` supplies the three operations shortest-path engines need from a
cost type:

- ``zero()``: the identity element, ``add(zero(), x) == x``.
- ``less(lhs, rhs)``: a total order.
- ``add(lhs, rhs)``: a new cost; neither operand is mutated, so a cost can be
  accumulated along many paths.

Built-in measures cover Python ``int``, every ``numpy`` integer scalar type
(checked addition), the ``Wrapping`` and ``Saturating`` fixed-width wrappers,
``fractions.Fraction`` and the ``NotNan`` float wrapper.

Raw floating point (``float``, ``numpy.floating``) is rejected on purpose:
NaN breaks the total order that the Dijkstra frontier and the Floyd-Warshall
relaxation rely on. Wrap such values in ``NotNan`` instead.

Example:
    >>> measure = measure_for(NotNan(1.5))
    >>> measure.add(measure.zero(), NotNan(1.5))
    NotNan(value=1.5)
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from fractions import Fraction
from functools import singledispatch, total_ordering
from typing import Any, Callable, Generic, Iterable, Type, TypeVar, Union

import numpy as np

from netpaths.exceptions import CostOverflowError, UnsupportedCostError

C = TypeVar("C")

DTypeLike = Union[str, type, np.dtype]


class Measure(ABC, Generic[C]):
    """Arithmetic and ordering for one cost type."""

    name: str = "measure"

    @abstractmethod
    def zero(self) -> C:
        """Return the identity element."""

    @abstractmethod
    def add(self, lhs: C, rhs: C) -> C:
        """Return ``lhs + rhs`` as a new value."""

    @abstractmethod
    def accepts(self, value: Any) -> bool:
        """Return True if ``value`` is a cost of this measure's type."""

    def less(self, lhs: C, rhs: C) -> bool:
        """Strict total order between two costs."""
        return lhs < rhs

    def is_negative(self, value: C) -> bool:
        """True when ``value`` sorts below ``zero()``."""
        return self.less(value, self.zero())

    def exact(self) -> Measure:
        """Measure that engines accumulate in; ``self`` unless overridden.

        Measures whose addition can fail on intermediate sums return an
        unbounded measure here. Costs enter it through ``widen`` and reported
        results leave it through ``narrow``.
        """
        return self

    def widen(self, value: C) -> Any:
        return value

    def narrow(self, value: Any) -> C:
        return value

    def sums_are_safe(self, costs: Iterable[C]) -> bool:
        """True when no path over distinct edges with these costs can fail.

        Engines that report results lazily use this to decide whether a
        failure could surface while a result iterator is being consumed.
        """
        return True

    def validate(self, value: Any) -> C:
        """Return ``value`` as a cost of this measure or raise.

        Raises:
            UnsupportedCostError: If the value does not belong to this measure.
        """
        if not self.accepts(value):
            raise UnsupportedCostError(
                f"{self.name} measure cannot use cost {value!r} "
                f"of type {type(value).__name__}.",
                value,
            )
        return value

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def __eq__(self, other: Any) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))


def _integer_dtype(dtype: DTypeLike) -> np.dtype:
    resolved = np.dtype(dtype)
    if resolved.kind not in ("i", "u"):
        raise UnsupportedCostError(
            f"Fixed-width costs need an integer dtype, got '{resolved}'."
        )
    return resolved


#
# Built-in measures
#
class IntegerMeasure(Measure[int]):
    """Unbounded Python integers."""

    name = "integer"

    def zero(self) -> int:
        return 0

    def add(self, lhs: int, rhs: int) -> int:
        return lhs + rhs

    def accepts(self, value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)


class FractionMeasure(Measure[Fraction]):
    """Exact rationals; Python ints are promoted on validation."""

    name = "fraction"

    def zero(self) -> Fraction:
        return Fraction(0)

    def add(self, lhs: Fraction, rhs: Fraction) -> Fraction:
        return lhs + rhs

    def accepts(self, value: Any) -> bool:
        return isinstance(value, Fraction)

    def validate(self, value: Any) -> Fraction:
        if isinstance(value, int) and not isinstance(value, bool):
            return Fraction(value)
        return super().validate(value)


class FixedWidthMeasure(Measure[np.integer]):
    """``numpy`` integer scalars with checked addition.

    An addition whose exact result leaves the range of the dtype raises
    ``CostOverflowError`` instead of wrapping silently. Use ``Wrapping`` or
    ``Saturating`` costs to opt into other overflow behavior.

    Engines do not add in the dtype directly: they accumulate exact Python
    ints (``exact()``) and check only the distances they report, so a long
    detour that is never chosen cannot fail a query.
    """

    def __init__(self, dtype: DTypeLike) -> None:
        self.dtype = _integer_dtype(dtype)
        self._info = np.iinfo(self.dtype)
        self.name = str(self.dtype)

    def zero(self) -> np.integer:
        return self.dtype.type(0)

    def add(self, lhs: np.integer, rhs: np.integer) -> np.integer:
        result = int(lhs) + int(rhs)
        if result < self._info.min or result > self._info.max:
            raise CostOverflowError(
                f"{lhs} + {rhs} overflows {self.dtype} "
                f"(range {self._info.min}..{self._info.max})."
            )
        return self.dtype.type(result)

    def accepts(self, value: Any) -> bool:
        return isinstance(value, np.integer) and value.dtype == self.dtype

    def validate(self, value: Any) -> np.integer:
        if isinstance(value, int) and not isinstance(value, bool):
            if value < self._info.min or value > self._info.max:
                raise CostOverflowError(f"Cost {value} does not fit in {self.dtype}.")
            return self.dtype.type(value)
        return super().validate(value)

    def exact(self) -> Measure:
        return IntegerMeasure()

    def widen(self, value: np.integer) -> int:
        return int(value)

    def narrow(self, value: int) -> np.integer:
        return self.validate(value)

    def sums_are_safe(self, costs: Iterable[np.integer]) -> bool:
        high = low = 0
        for cost in costs:
            if cost > 0:
                high += int(cost)
            else:
                low += int(cost)
        return low >= self._info.min and high <= self._info.max

    def __repr__(self) -> str:
        return f"FixedWidthMeasure('{self.dtype}')"

    def __eq__(self, other: Any) -> bool:
        return type(self) is type(other) and self.dtype == other.dtype

    def __hash__(self) -> int:
        return hash((type(self), self.dtype))


#
# Fixed-width wrapper types
#
@total_ordering
class _BoundedInt:
    """Fixed-width integer value with an overflow policy set by the subclass."""

    __slots__ = ("value", "dtype")

    def __init__(self, value: Any, dtype: DTypeLike = "int64") -> None:
        resolved = _integer_dtype(dtype)
        info = np.iinfo(resolved)
        object.__setattr__(self, "dtype", resolved)
        object.__setattr__(self, "value", self._fit(int(value), info))

    @staticmethod
    def _fit(raw: int, info: np.iinfo) -> int:
        raise NotImplementedError

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def _check_peer(self, other: Any) -> bool:
        if type(other) is not type(self):
            return False
        if other.dtype != self.dtype:
            raise TypeError(
                f"Cannot combine {type(self).__name__}[{self.dtype}] "
                f"with {type(other).__name__}[{other.dtype}]."
            )
        return True

    def __add__(self, other: Any) -> Any:
        if not self._check_peer(other):
            return NotImplemented
        return type(self)(self.value + other.value, self.dtype)

    def __lt__(self, other: Any) -> bool:
        if not self._check_peer(other):
            return NotImplemented
        return self.value < other.value

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.value == other.value and self.dtype == other.dtype

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.value, self.dtype))

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value}, '{self.dtype}')"


class Wrapping(_BoundedInt):
    """Fixed-width integer whose arithmetic wraps modulo ``2**bits``."""

    __slots__ = ()

    @staticmethod
    def _fit(raw: int, info: np.iinfo) -> int:
        span = int(info.max) - int(info.min) + 1
        return (raw - int(info.min)) % span + int(info.min)


class Saturating(_BoundedInt):
    """Fixed-width integer whose arithmetic clamps at the type bounds."""

    __slots__ = ()

    @staticmethod
    def _fit(raw: int, info: np.iinfo) -> int:
        return max(int(info.min), min(int(info.max), raw))


class _BoundedMeasure(Measure[_BoundedInt]):
    kind: Type[_BoundedInt] = _BoundedInt

    def __init__(self, dtype: DTypeLike = "int64") -> None:
        self.dtype = _integer_dtype(dtype)
        self.name = f"{self.kind.__name__.lower()}[{self.dtype}]"

    def zero(self) -> _BoundedInt:
        return self.kind(0, self.dtype)

    def add(self, lhs: _BoundedInt, rhs: _BoundedInt) -> _BoundedInt:
        return lhs + rhs

    def accepts(self, value: Any) -> bool:
        return type(value) is self.kind and value.dtype == self.dtype

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self.dtype}')"

    def __eq__(self, other: Any) -> bool:
        return type(self) is type(other) and self.dtype == other.dtype

    def __hash__(self) -> int:
        return hash((type(self), self.dtype))


class WrappingMeasure(_BoundedMeasure):
    kind = Wrapping


class SaturatingMeasure(_BoundedMeasure):
    kind = Saturating


#
# Not-NaN floats
#
@total_ordering
@dataclass(frozen=True)
class NotNan:
    """A float guaranteed never to be NaN, and therefore totally ordered.

    Raises:
        ValueError: On construction from NaN, or when an addition yields NaN
            (``inf + -inf``).
    """

    value: float

    def __post_init__(self) -> None:
        value = float(self.value)
        if math.isnan(value):
            raise ValueError("NotNan cannot hold NaN")
        object.__setattr__(self, "value", value)

    def __add__(self, other: Any) -> NotNan:
        if not isinstance(other, NotNan):
            return NotImplemented
        return NotNan(self.value + other.value)

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, NotNan):
            return NotImplemented
        return self.value < other.value

    def __float__(self) -> float:
        return self.value


class NotNanMeasure(Measure[NotNan]):
    name = "not-nan float"

    def zero(self) -> NotNan:
        return NotNan(0.0)

    def add(self, lhs: NotNan, rhs: NotNan) -> NotNan:
        return lhs + rhs

    def accepts(self, value: Any) -> bool:
        return isinstance(value, NotNan)

    def sums_are_safe(self, costs: Iterable[NotNan]) -> bool:
        # only inf + -inf yields NaN
        signs = {math.copysign(1.0, c.value) for c in costs if math.isinf(c.value)}
        return len(signs) < 2


#
# Resolution from sample values
#
@singledispatch
def measure_for(value: Any) -> Measure:
    """Return the measure for a sample cost value.

    Args:
        value: Any cost taken from the graph.

    Returns:
        Measure able to add and compare values of the same type.

    Raises:
        UnsupportedCostError: If the type has no measure.
    """
    raise UnsupportedCostError(
        f"No cost measure registered for type {type(value).__name__}; "
        f"use register_measure() to add one.",
        value,
    )


def _reject_float(value: Any) -> Measure:
    raise UnsupportedCostError(
        f"Floating point cost {value!r} is not totally ordered; wrap it in NotNan.",
        value,
    )


def _reject_bool(value: Any) -> Measure:
    raise UnsupportedCostError(f"Boolean cost {value!r} is not a number.", value)


measure_for.register(bool, _reject_bool)
measure_for.register(float, _reject_float)
measure_for.register(complex, _reject_float)
measure_for.register(np.floating, _reject_float)
measure_for.register(int, lambda value: IntegerMeasure())
measure_for.register(Fraction, lambda value: FractionMeasure())
measure_for.register(np.integer, lambda value: FixedWidthMeasure(value.dtype))
measure_for.register(Wrapping, lambda value: WrappingMeasure(value.dtype))
measure_for.register(Saturating, lambda value: SaturatingMeasure(value.dtype))
measure_for.register(NotNan, lambda value: NotNanMeasure())


def register_measure(cls: type, factory: Callable[[Any], Measure]) -> None:
    """Make ``measure_for`` resolve instances of ``cls`` through ``factory``.

    Args:
        cls: Cost value type.
        factory: Callable receiving a sample value and returning its Measure.
    """
    measure_for.register(cls, factory)


__all__ = [
    "Measure",
    "IntegerMeasure",
    "FractionMeasure",
    "FixedWidthMeasure",
    "Wrapping",
    "Saturating",
    "WrappingMeasure",
    "SaturatingMeasure",
    "NotNan",
    "NotNanMeasure",
    "measure_for",
    "register_measure",
]
