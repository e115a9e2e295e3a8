"""Selectors identify subsets of rows or columns.

Whenever a part of a table has to be picked, the caller
has to describe *which* rows or columns it is interested into.
There are a few different ways to do so:

* By position, providing the indices of the rows or columns
  that we want, in the order we want them::

      IndexSelector([2, 0, 0])  # third row, then the first one twice

* By exclusion, providing the positions we don't want::

      ExcludeSelector([0])  # everything except the first row

* By slice, using the Python range semantics::

      SliceSelector(slice(None, None, -1))  # all rows in reverse order

* By mask, providing a ``true``/``false`` value for each row
  or column::

      MaskSelector([True, False, True])

* By name, matching the column names or the row labels::

      NameSelector(["name", "legs"])

All selectors resolve to a list of positions through
:meth:`Selector.positions`, which is the only thing the compute
engine needs to know to perform the subsetting.

Selectors never try to guess what the user meant:
a mask that is shorter than the table is not repeated
to fill the missing values, an index out of range is not
silently ignored and a name that doesn't exist is not
replaced by an empty value. All those cases are errors.

>>> IndexSelector([2, 0, 0]).positions(3)
[2, 0, 0]
>>> ExcludeSelector([0]).positions(3)
[1, 2]
>>> MaskSelector([True, False, True]).positions(3)
[0, 2]
>>> NameSelector(["legs"]).positions(3, ["name", "legs", "type"])
[1]
"""

import abc
from collections.abc import Sequence
from typing import Any

import pyarrow as pa

__all__ = (
    "Selector",
    "FullSelector",
    "IndexSelector",
    "ExcludeSelector",
    "SliceSelector",
    "MaskSelector",
    "NameSelector",
    "as_selector",
    "make_unique",
    "RangeError",
    "LengthMismatchError",
    "UnknownNameError",
)


class Selector(abc.ABC):
    """Identifies a subset of the positions of an axis.

    An axis is either the rows or the columns of a table,
    it has a ``size`` and optionally a list of ``names``
    (the column names or the row labels).
    """

    @abc.abstractmethod
    def positions(self, size: int, names: Sequence[str] | None = None) -> list[int]:
        """Resolve the selector to the list of selected positions.

        :param size: How many rows or columns the axis has.
        :param names: The names of the elements of the axis,
                      ``None`` if the axis has no names.
        """
        ...

    @abc.abstractmethod
    def __str__(self) -> str:
        """Human readable representation of the selector."""
        ...


class FullSelector(Selector):
    """Select everything, preserving the original order."""

    def positions(self, size: int, names: Sequence[str] | None = None) -> list[int]:
        return list(range(size))

    def __str__(self) -> str:
        return "FullSelector()"


def _check_positions(indices: Sequence[Any], size: int) -> None:
    for idx in indices:
        if not isinstance(idx, int) or isinstance(idx, bool):
            raise RangeError(f"Invalid index {idx!r}, positions must be integers")
        if idx < 0:
            raise RangeError(
                f"Negative index {idx}, use ExcludeSelector to exclude positions"
            )
        if idx >= size:
            raise RangeError(f"Index {idx} out of range for size {size}")


class IndexSelector(Selector):
    """Select the provided positions, in the provided order.

    Positions are 0-based, may repeat and may be in any order.
    A repeated position duplicates that row or column.
    """

    def __init__(self, indices: Sequence[int]) -> None:
        """
        :param indices: The positions to select.
        """
        self.indices = [int(i) if _is_integer(i) else i for i in indices]

    def positions(self, size: int, names: Sequence[str] | None = None) -> list[int]:
        _check_positions(self.indices, size)
        return list(self.indices)

    def __str__(self) -> str:
        return f"IndexSelector({self.indices})"


class ExcludeSelector(Selector):
    """Select everything except the provided positions.

    This is the equivalent of negative indices in languages
    that count positions from 1. As our positions start at 0,
    a negative sign can't be used to exclude the first row,
    so exclusion has its own selector.
    """

    def __init__(self, indices: Sequence[int]) -> None:
        """
        :param indices: The positions to exclude.
        """
        self.indices = [int(i) if _is_integer(i) else i for i in indices]

    def positions(self, size: int, names: Sequence[str] | None = None) -> list[int]:
        _check_positions(self.indices, size)
        excluded = set(self.indices)
        return [idx for idx in range(size) if idx not in excluded]

    def __str__(self) -> str:
        return f"ExcludeSelector({self.indices})"


class SliceSelector(Selector):
    """Select a range of positions using a Python slice.

    >>> SliceSelector(slice(3, None, -1)).positions(10)
    [3, 2, 1, 0]
    """

    def __init__(self, slc: slice) -> None:
        """
        :param slc: The slice of positions to select.
        """
        self.slice = slc

    def positions(self, size: int, names: Sequence[str] | None = None) -> list[int]:
        return list(range(size)[self.slice])

    def __str__(self) -> str:
        return f"SliceSelector({self.slice.start}:{self.slice.stop}:{self.slice.step})"


class MaskSelector(Selector):
    """Select the positions for which the mask is ``True``.

    The mask must have exactly one value for each
    element of the axis. Null values are not selected.
    """

    def __init__(self, mask: Sequence[bool] | pa.Array | pa.ChunkedArray) -> None:
        """
        :param mask: The boolean values marking which positions to keep.
        """
        if isinstance(mask, (pa.Array, pa.ChunkedArray)):
            if not pa.types.is_boolean(mask.type):
                raise TypeError(f"Mask must be boolean, got {mask.type}")
            mask = mask.to_pylist()
        self.mask = list(mask)

    def positions(self, size: int, names: Sequence[str] | None = None) -> list[int]:
        if len(self.mask) != size:
            raise LengthMismatchError(
                f"Mask has {len(self.mask)} values but the axis has size {size}"
            )
        return [idx for idx, keep in enumerate(self.mask) if keep]

    def __str__(self) -> str:
        return f"MaskSelector(len={len(self.mask)})"


class NameSelector(Selector):
    """Select the elements with the provided names, in the provided order.

    Names are matched exactly against the column names
    or the row labels.
    """

    def __init__(self, names: Sequence[str]) -> None:
        """
        :param names: The names of the columns or rows to select.
        """
        self.names = list(names)

    def positions(self, size: int, names: Sequence[str] | None = None) -> list[int]:
        if names is None:
            raise UnknownNameError(
                f"Cannot select {self.names} by name, the axis has no names"
            )
        lookup = {name: idx for idx, name in enumerate(names)}
        result = []
        for name in self.names:
            try:
                result.append(lookup[name])
            except KeyError:
                raise UnknownNameError(f"Unknown name: {name!r}") from None
        return result

    def __str__(self) -> str:
        return f"NameSelector({self.names})"


def _is_integer(value: Any) -> bool:
    # numpy and arrow integers are accepted together with python ints.
    return not isinstance(value, bool) and hasattr(value, "__index__")


def as_selector(obj: Any) -> Selector:
    """Convert plain python values to a selector.

    This allows to write ``table.select([0, 1], "name")``
    instead of having to build the selectors explicitly.

    * ``None`` selects everything.
    * An ``int`` selects one position, a ``str`` one name.
    * A ``slice`` or ``range`` selects a range of positions.
    * A sequence of booleans is a mask, a sequence of integers
      are positions, a sequence of strings are names.

    >>> as_selector(None)
    <...FullSelector...>
    >>> str(as_selector([True, False]))
    'MaskSelector(len=2)'
    >>> str(as_selector(["legs"]))
    "NameSelector(['legs'])"
    """
    if obj is None:
        return FullSelector()
    if isinstance(obj, Selector):
        return obj
    if isinstance(obj, str):
        return NameSelector([obj])
    if isinstance(obj, bool):
        raise TypeError("A single boolean is not a valid selector, provide a mask")
    if _is_integer(obj):
        return IndexSelector([obj])
    if isinstance(obj, slice):
        return SliceSelector(obj)
    if isinstance(obj, (pa.Array, pa.ChunkedArray)):
        if pa.types.is_boolean(obj.type):
            return MaskSelector(obj)
        obj = obj.to_pylist()
    if isinstance(obj, Sequence) and not isinstance(obj, bytes):
        values = list(obj)
        if values and all(isinstance(v, bool) for v in values):
            return MaskSelector(values)
        if all(isinstance(v, str) for v in values) and values:
            return NameSelector(values)
        if all(_is_integer(v) for v in values):
            return IndexSelector(values)
        raise TypeError(f"Cannot mix value types in a selector: {values!r}")
    raise TypeError(f"Cannot select using a {type(obj).__name__}")


def make_unique(names: Sequence[str]) -> list[str]:
    """Make names unique appending a counter to repeated ones.

    >>> make_unique(["a", "b", "a", "a"])
    ['a', 'b', 'a.1', 'a.2']
    """
    taken = set(names)
    counters: dict[str, int] = {}
    result = []
    for name in names:
        if name not in counters:
            counters[name] = 0
            result.append(name)
            continue
        while True:
            counters[name] += 1
            candidate = f"{name}.{counters[name]}"
            if candidate not in taken:
                break
        taken.add(candidate)
        result.append(candidate)
    return result


class RangeError(IndexError):
    """A position is out of range or is not a valid position."""


class LengthMismatchError(ValueError):
    """A sequence doesn't have the same length of the axis it applies to."""


class UnknownNameError(KeyError):
    """A column name or row label doesn't exist."""

    def __str__(self) -> str:
        # KeyError would otherwise quote the message.
        return str(self.args[0]) if self.args else ""
