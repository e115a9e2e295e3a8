"""Base classes and interfaces for Compute Engine

This module defines the base components that are
necessary to represent a query plan and execute it.

Subsetting a table, differently from streaming
filters, frequently needs to know about the whole
table at once: excluding the last row or picking
rows in a random order requires knowing how many
rows there are. For this reason the nodes of this
engine collect the output of their children into
a single :class:`pyarrow.Table` through :func:`collect`
before working on it, and emit the result back
as batches through :func:`emit`.
"""

import abc
from typing import Any, Iterator

import pyarrow as pa


class QueryPlanNode(abc.ABC):
    """A node of a query execution plan.

    The Query plan is represented as a tree
    of nodes. Each node is a step in the execution
    and all previous steps are children of the
    last one.

    For example a simple plan might involve
    loading data and then picking a few rows::

        LoadDataNode -> TakeNode(rows)

    That would be a plan where the last step
    is the row selection, and the LoadDataNode is a child
    of the take node.

    Each Node accepts :class:`pyarrow.RecordBatch`
    data as its input and emits a new
    :class:`pyarrow.RecordBatch` as its output.

    The base `QueryPlanNode` class does nothing
    and purely acts as the interface that all nodes
    must implement. Actual work will be done
    in the subclasses.

    For example a simple node that takes data
    and just forwards it as is after printing
    its content can be implemented as::

        class DebugDataNode(QueryPlanNode):
            def __init__(self, child):
                self.child = child

            def batches(self):
                for b in self.child.batches():
                    print(b)
                    yield b

            def __str__(self):
                return f"DebugDataNode()"
    """

    RecordBatchesGenerator = Iterator[pa.RecordBatch]

    @abc.abstractmethod
    def batches(self) -> RecordBatchesGenerator:
        """Emits the batches for the next node.

        Each QueryPlan node is expected to be able to
        generate data that has to be provided to the next
        node in the plan.

        Usually this happens by consuming data from its
        child nodes, transforming it somehow, and yielding
        it back to the next consumer.
        """
        ...

    @abc.abstractmethod
    def __str__(self) -> str:
        """Human readable representation of the node."""
        ...


def collect(node: QueryPlanNode) -> pa.Table:
    """Consume all the batches of a node into a single table."""
    return pa.Table.from_batches(list(node.batches()))


def emit(table: pa.Table) -> Iterator[pa.RecordBatch]:
    """Emit the content of a table as record batches.

    Arrow doesn't produce any batch for a table
    without rows, but consumers of a node always
    expect at least one batch to know the schema
    of the data. In such case an empty batch is emitted.
    """
    batches = table.combine_chunks().to_batches()
    if not batches:
        batches = [pa.RecordBatch.from_pylist([], schema=table.schema)]
    yield from batches


class Expression(abc.ABC):
    """Expression to apply to tabular data.

    Expressions are some form of operation that
    has to be applied to the data of a :class:`pyarrow.Table`
    or :class:`pyarrow.RecordBatch` to create new data.

    Typical example of expressions are: ``legs > 4``
    which is expected to compare column ``legs`` with
    the value 4 and return a mask of ``true``/``false`` values.

    As our engine is Column Major, applying an expression
    always results in a new column, thus in a
    :class:`pyarrow.Array` that contains the data
    for that column.
    """

    @abc.abstractmethod
    def apply(self, data: pa.Table | pa.RecordBatch) -> pa.Array:
        """Apply the expression to the data.

        Expression classes must implement this method
        to dictate what will happen when an expression
        is applied.

        Suppose want to implement a ``DifferenceExpression`` class
        that might look like::

            class DifferenceExpression(Expression):
                def __init__(self, leftcol, rightcol):
                    self.lcol = lcol  # left column name
                    self.rcol = rcol  # right column name

                def apply(self, data):
                    return pyarrow.compute.subtract(
                        data[self.lcol],
                        data[self.rcol]
                    )
        """
        ...

    @abc.abstractmethod
    def __str__(self) -> str:
        """Human readable representation of the expression."""
        ...

    def __repr__(self) -> str:
        return str(self)


class ColumnRef(Expression):
    """References a column in tabular data.

    When another expression or the engine need
    to operate on a specific column, we will
    need a way to reference that column and its data.

    This expression is aware of the column and when
    applied to a table returns the data for
    that column.
    """

    def __init__(self, name: str) -> None:
        """
        :param name: The name of the column being referenced.
        """
        self.name = name

    def apply(self, data: pa.Table | pa.RecordBatch) -> pa.Array:
        """Get the data for the column."""
        return data.column(self.name)

    def __str__(self) -> str:
        return f"ColumnRef({self.name})"


class Literal(Expression):
    """A constant value.

    Applying a literal returns the same
    :class:`pyarrow.Scalar` whatever the data is,
    compute functions will broadcast it against columns.
    """

    def __init__(self, value: Any) -> None:
        """
        :param value: The python value of the literal.
        """
        self.value = value

    def apply(self, data: pa.Table | pa.RecordBatch) -> pa.Scalar:
        return pa.scalar(self.value)

    def __str__(self) -> str:
        return f"Literal({self.value!r})"


col = ColumnRef
lit = Literal
