"""The tablesubset Compute Engine

The compute engine defines the in-memory
format for query plans and the plan nodes
supported.

The compute engine is tightly bound to Apache Arrow,
thus the engine will expect to always deal with
:class:`pyarrow.RecordBatch` and emit a new RecordBatch
as the result of the node execution.

This allows to easily build compute pipelines like::

    (RecordBatch)-->Node1--(RecordBatch)-->Node2--(RecordBatch)-->...

The query plan nodes themselves are in charge of their execution,
this keeps the behavior near to the node and thus makes easy to
know how a Node is actually executed without having to look around too much.

Building a query plan requires to combine the nodes that we want
to be executed starting with one or more ``DataSource`` nodes as the
leafs node of a query:

>>> import pyarrow as pa
>>> data = pa.table({
...    "name": pa.array(["K", "B", "Q", "Z"]),
...    "legs": pa.array([2, 8, 100, 6]),
...    "type": pa.array(["bird", "spider", "centipede", "bug"]),
... })
>>>
>>> import pyarrow.compute as pc
>>> from tablesubset.compute import col, PyArrowTableDataSource, ProjectNode
>>> from tablesubset.compute import FilterNode, FunctionCallExpression
>>> # rows with more than 4 legs, only the first two columns.
>>> query = ProjectNode(
...     [0, 1],
...     None,
...     FilterNode(
...         FunctionCallExpression(pc.greater, col("legs"), 4),
...         child=PyArrowTableDataSource(data),
...     ),
... )
>>> for batch in query.batches():
...     print(batch.to_pydict())
{'name': ['B', 'Q', 'Z'], 'legs': [8, 100, 6]}
"""

from .base import ColumnRef, Expression, Literal, QueryPlanNode, col, lit
from .datasources import CSVDataSource, ParseError, PyArrowTableDataSource, parse_numeric
from .difference import DifferenceNode, ShapeError, abs_exceeds
from .expressions import (
    FunctionCallExpression,
    RowwiseExpression,
    grep,
    is_in,
    matches,
    row_all,
    row_any,
    row_max,
    row_min,
    string_length,
)
from .filtering import FilterNode
from .selection import ProjectNode, TakeNode
from .selectors import (
    ExcludeSelector,
    FullSelector,
    IndexSelector,
    LengthMismatchError,
    MaskSelector,
    NameSelector,
    RangeError,
    Selector,
    SliceSelector,
    UnknownNameError,
    as_selector,
)
from .sorting import SortNode, order, sort

__all__ = (
    "CSVDataSource",
    "PyArrowTableDataSource",
    "parse_numeric",
    "ParseError",
    "QueryPlanNode",
    "Expression",
    "ColumnRef",
    "Literal",
    "col",
    "lit",
    "FunctionCallExpression",
    "RowwiseExpression",
    "row_any",
    "row_all",
    "row_max",
    "row_min",
    "matches",
    "is_in",
    "string_length",
    "grep",
    "FilterNode",
    "ProjectNode",
    "TakeNode",
    "SortNode",
    "order",
    "sort",
    "DifferenceNode",
    "abs_exceeds",
    "ShapeError",
    "Selector",
    "FullSelector",
    "IndexSelector",
    "ExcludeSelector",
    "SliceSelector",
    "MaskSelector",
    "NameSelector",
    "as_selector",
    "RangeError",
    "LengthMismatchError",
    "UnknownNameError",
)
