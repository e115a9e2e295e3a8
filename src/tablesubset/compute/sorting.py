"""Sorting of data.

Sorting comes in two flavours that are easy to confuse:

* :func:`sort` gives back the sorted values of a column.
* :func:`order` tells in which position the sorted values are,
  that is the permutation of the rows that would sort the column.

When the goal is to reorder a whole table based on the values of
one of its columns, the sorted values alone are not enough,
the permutation is required to move all other columns consistently::

    table.select(rows=order(table["legs"]))

Both functions are stable: equal values keep their original
relative order.

The :class:`SortNode` does the same within a query plan,
sorting the rows based on one or more columns.

>>> order([30, 10, 20, 10]).to_pylist()
[1, 3, 2, 0]
>>> sort([30, 10, 20, 10]).to_pylist()
[10, 10, 20, 30]
"""

from collections.abc import Sequence
from typing import Any

import pyarrow as pa
import pyarrow.compute as pc

from .base import QueryPlanNode, collect, emit


def _as_array(values: pa.Array | pa.ChunkedArray | Sequence[Any]) -> pa.Array:
    if isinstance(values, pa.ChunkedArray):
        return values.combine_chunks()
    if isinstance(values, pa.Array):
        return values
    return pa.array(list(values))


def order(
    values: pa.Array | pa.ChunkedArray | Sequence[Any], descending: bool = False
) -> pa.Array:
    """Permutation of the positions that sorts the values.

    Null values are placed at the end.

    :param values: The values to sort.
    :param descending: Sort from the biggest to the smallest value.
    """
    return pc.array_sort_indices(
        _as_array(values),
        order="descending" if descending else "ascending",
        null_placement="at_end",
    )


def sort(
    values: pa.Array | pa.ChunkedArray | Sequence[Any], descending: bool = False
) -> pa.Array:
    """The values sorted, nulls at the end.

    Equivalent to taking the values in the :func:`order` permutation.
    """
    values = _as_array(values)
    return values.take(order(values, descending=descending))


class SortNode(QueryPlanNode):
    """Sort data in-memory based on one or more columns.

    The node expects a list of columns and a list of
    sort directions. The data will be sorted based on
    the columns in the order they are provided.

    The sort directions are used to specify if the
    sorting should be ascending or descending.

    >>> import pyarrow as pa
    >>> from tablesubset.compute import PyArrowTableDataSource
    >>> data = pa.record_batch({"values": [1, 2, 3, 4, 5]})
    >>> # Sort the data in descending order
    >>> sort = SortNode(["values"], [True], PyArrowTableDataSource(data))
    >>> next(sort.batches())["values"].to_pylist()
    [5, 4, 3, 2, 1]
    """

    def __init__(
        self, keys: list[str], descending: list[bool], child: QueryPlanNode
    ) -> None:
        """
        :param keys: The columns to sort by in the order they should be sorted.
        :param descending: If each columns should be sorted in a descending order.
        :param child: The node emitting the data to be sorted.
        """
        if len(keys) != len(descending):
            raise ValueError("Keys and descending must have the same length")

        self.sorting = list(
            zip(keys, ("descending" if desc else "ascending" for desc in descending))
        )
        self.child = child

    def __str__(self) -> str:
        return f"SortNode(sorting={self.sorting}, {self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Sort the data of the child node.

        Batches provided by child node are accumulated
        until they are all loaded in memory, than they
        are merged and sorted as an unique table.
        """
        table = collect(self.child)
        yield from emit(table.sort_by(self.sorting))
