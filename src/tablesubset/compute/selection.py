"""Query plan nodes that implement selection of rows and columns.

The most basic way to subset data is to pick specific
rows or columns of a table by their position or name.
This module implements those capabilities:

* :class:`TakeNode` picks rows, possibly in a different
  order or multiple times.
* :class:`ProjectNode` picks columns and projects new
  columns based on expressions.
  An example is the ``SELECT`` clause in SQL queries.
"""

import pyarrow as pa

from .base import QueryPlanNode, collect, emit
from .expressions import Expression
from .selectors import Selector, as_selector, make_unique


class TakeNode(QueryPlanNode):
    """Pick rows of the data by position.

    Rows are emitted in the order the selector
    resolves them, so the node can be used to reverse
    the data, sort it by a permutation or sample it.

    >>> import pyarrow as pa
    >>> from tablesubset.compute import IndexSelector, PyArrowTableDataSource
    >>> data = pa.record_batch({"values": [10, 20, 30]})
    >>> batch = next(TakeNode(IndexSelector([2, 0, 0]), PyArrowTableDataSource(data)).batches())
    >>> batch["values"].to_pylist()
    [30, 10, 10]
    """

    def __init__(self, rows: Selector, child: QueryPlanNode) -> None:
        """
        :param rows: The selector identifying the rows to pick.
                     As nodes don't know about row labels,
                     selecting by name is not possible.
        :param child: The node emitting the data to pick rows from.
        """
        self.rows = as_selector(rows)
        self.child = child

    def __str__(self) -> str:
        return f"TakeNode(rows={self.rows}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Collect the data of the child and pick the requested rows.

        Positions refer to the whole data, so all batches
        of the child have to be collected before
        the selector can be resolved.
        """
        table = collect(self.child)
        positions = self.rows.positions(table.num_rows)
        yield from emit(table.take(pa.array(positions, type=pa.int64())))


class ProjectNode(QueryPlanNode):
    """Project data by selecting specific columns and computing expressions.

    The projection expects a selector of the columns to keep and a dictionary
    of column names and expressions to project new columns.

    Selecting the same column more than once duplicates it,
    the duplicates get a numeric suffix to keep column names unique.

    >>> import pyarrow as pa
    >>> import pyarrow.compute as pc
    >>> from tablesubset.compute import col, FunctionCallExpression, PyArrowTableDataSource
    >>> data = pa.record_batch({"ctrl": [1, 2, 3], "treated": [4, 6, 3]})
    >>> batch = next(ProjectNode(["ctrl"], {"diff": FunctionCallExpression(pc.subtract, col("treated"), col("ctrl"))},
    ...                          PyArrowTableDataSource(data)).batches())
    >>> batch.to_pydict()
    {'ctrl': [1, 2, 3], 'diff': [3, 4, 0]}
    """

    def __init__(
        self,
        select: Selector | list | None,
        project: dict[str, Expression] | None,
        child: QueryPlanNode,
    ) -> None:
        """
        :param select: The selector of the columns to keep.
                       ``None`` means select all columns.
                       ``[]`` means select only the projected columns.
        :param project: The dict {name: Expression} to project new columns.
        :param child: The node emitting the data to be projected.
        """
        self.select = as_selector(select)
        self.project = project or {}
        self.child = child

    def __str__(self) -> str:
        return f"ProjectNode(select={self.select}, project={self.project}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Apply the projection to the child node.

        The expressions are applied first, in order, so
        that an expression can refer to columns projected
        by the previous ones. Then the selected columns
        are picked, followed by the projected ones.
        """
        table = collect(self.child)
        names = table.column_names
        positions = self.select.positions(len(names), names)

        for name, expr in self.project.items():
            table = table.append_column(name, expr.apply(table))

        positions += [len(names) + i for i in range(len(self.project))]
        table = table.select(positions)
        yield from emit(table.rename_columns(make_unique(table.column_names)))
