"""Query plan nodes that implement filtering of rows.

A common request in queries is to filter the data to
pick only the rows that respect a specific filter.
An example is the ``WHERE`` condition in SQL queries.

This module implements the basic filtering capabilities.
"""

import pyarrow as pa

from .base import QueryPlanNode, collect, emit
from .expressions import Expression, apply_expression_if_needed
from .selectors import LengthMismatchError


class FilterNode(QueryPlanNode):
    """Filter data based on a predicate expression or a mask.

    The filter expects an expression that when applied
    to the data being filtered returns ``true``
    or ``false`` for each row in the data to mark which
    rows have to be preserved and which rows have to be discarded.

    A precomputed mask can be provided in place of the
    expression, in such case it must have exactly one value
    for each row: shorter or longer masks are refused
    instead of being repeated or truncated.

    Rows for which the predicate is ``null`` are discarded.

    >>> import pyarrow as pa
    >>> import pyarrow.compute as pc
    >>> from tablesubset.compute import col, lit, FunctionCallExpression, PyArrowTableDataSource
    >>> data = pa.record_batch({"values": [1, 2, 3, 4, 5]})
    >>> predicate = FunctionCallExpression(pc.greater, col("values"), lit(3))
    >>> # predicate is a function that returns true for values greater than 3
    >>> predicate.apply(data).to_pylist()
    [False, False, False, True, True]
    >>> next(FilterNode(predicate, PyArrowTableDataSource(data)).batches())["values"].to_pylist()
    [4, 5]
    """

    def __init__(
        self, expression: Expression | pa.Array | list[bool], child: QueryPlanNode
    ) -> None:
        """
        :param expression: The predicate expression or the mask to filter with.
        :param child: The node emitting the data to be filtered.
        """
        if isinstance(expression, list):
            expression = pa.array(expression, type=pa.bool_())
        self.expression = expression
        self.child = child

    def __str__(self) -> str:
        if isinstance(self.expression, Expression):
            condition = str(self.expression)
        else:
            condition = f"mask(len={len(self.expression)})"
        return f"FilterNode(filter={condition}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Apply the filtering to the child node.

        Apply the expression to the data of the child
        and get back a mask (an array of only true/false values).

        Based on the mask filter the rows of the data
        and return only those matching the filter.
        """
        table = collect(self.child)
        mask = apply_expression_if_needed(table, self.expression)
        if not isinstance(mask, (pa.Array, pa.ChunkedArray)):
            raise TypeError(f"Filter predicate must produce an array, got {mask!r}")
        if not pa.types.is_boolean(mask.type):
            raise TypeError(f"Filter predicate must be boolean, got {mask.type}")
        if len(mask) != table.num_rows:
            raise LengthMismatchError(
                f"Mask has {len(mask)} values but the data has {table.num_rows} rows"
            )
        yield from emit(table.filter(mask))
