"""Differences between paired measures.

Experiments frequently measure the same quantity twice:
once in a control condition and once after a treatment.
Tables holding those measures usually place the
two columns of each pair next to each other::

    genes, B.ctrl, B.LPS, MF.ctrl, MF.LPS, ...

What is usually interesting is not the value of the measures
themselves, but how much the treatment changed them.
The :class:`DifferenceNode` computes, for each pair, the
difference ``treatment - control`` as a new column named
after the group the pair belongs to::

    B, MF, ...

Once the differences are available, the rows where at
least one group changed significantly can be found with
:func:`abs_exceeds`.
"""

import logging
from collections.abc import Sequence

import pyarrow as pa
import pyarrow.compute as pc

from .base import QueryPlanNode, collect, emit
from .expressions import RowwiseExpression, row_any
from .selectors import Selector

logger = logging.getLogger(__name__)

LAYOUTS = ("control_first", "treatment_first")


class DifferenceNode(QueryPlanNode):
    """Compute the difference of each pair of columns.

    All columns emitted by the child are expected to be
    numeric and to come in adjacent pairs, one pair for each label.
    With the default ``control_first`` layout the first column
    of each pair is the control and the second is the treatment,
    ``treatment_first`` swaps them.

    >>> import pyarrow as pa
    >>> from tablesubset.compute import PyArrowTableDataSource
    >>> data = pa.record_batch({"G.ctrl": [1, 2, 5, 0], "G.LPS": [3, 2, 1, 0]})
    >>> next(DifferenceNode(["G"], PyArrowTableDataSource(data)).batches()).to_pydict()
    {'G': [2, 0, -4, 0]}
    """

    def __init__(
        self,
        labels: Sequence[str],
        child: QueryPlanNode,
        layout: str = "control_first",
    ) -> None:
        """
        :param labels: The name of the group of each pair, in the order of the pairs.
        :param child: The node emitting the paired columns.
        :param layout: Which column of the pair is the control.
        """
        if layout not in LAYOUTS:
            raise ShapeError(f"Unknown layout {layout!r}, expected one of {LAYOUTS}")
        if len(set(labels)) != len(labels):
            raise ShapeError(f"Group labels must be unique: {list(labels)}")
        self.labels = list(labels)
        self.layout = layout
        self.child = child

    def __str__(self) -> str:
        return f"DifferenceNode(labels={self.labels}, layout={self.layout}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Emit one difference column for each group."""
        table = collect(self.child)
        if table.num_columns == 0 or table.num_columns % 2:
            raise ShapeError(
                f"Expected an even number of paired columns, got {table.num_columns}"
            )
        if table.num_columns // 2 != len(self.labels):
            raise ShapeError(
                f"Got {table.num_columns // 2} column pairs for {len(self.labels)} labels"
            )
        for field in table.schema:
            if not (pa.types.is_integer(field.type) or pa.types.is_floating(field.type)):
                raise ShapeError(f"Column {field.name!r} is not numeric ({field.type})")

        differences = {}
        for idx, label in enumerate(self.labels):
            first, second = table.column(2 * idx), table.column(2 * idx + 1)
            if self.layout == "control_first":
                differences[label] = pc.subtract(second, first)
            else:
                differences[label] = pc.subtract(first, second)

        logger.debug(
            "Computed differences for %d groups over %d rows",
            len(self.labels),
            table.num_rows,
        )
        yield from emit(pa.table(differences))


def abs_exceeds(
    threshold: float,
    columns: Selector | Sequence[str] | None = None,
    inclusive: bool = False,
) -> RowwiseExpression:
    """Rows where at least one absolute value exceeds the threshold.

    >>> import pyarrow as pa
    >>> data = pa.table({"G": [2, 0, -4, 0]})
    >>> abs_exceeds(2).apply(data).to_pylist()
    [False, False, True, False]
    >>> abs_exceeds(2, inclusive=True).apply(data).to_pylist()
    [True, False, True, False]

    :param threshold: The value the absolute values are compared with.
    :param columns: The columns to look at, all of them if ``None``.
    :param inclusive: Also accept values equal to the threshold.
    """
    if inclusive:
        return row_any(lambda x: abs(x) >= threshold, columns)
    return row_any(lambda x: abs(x) > threshold, columns)


class ShapeError(ValueError):
    """The columns don't have the structure required by the computation."""
