"""Expressions executed by compute engine nodes.

The Compute Engine will sometimes need to filter data
or emit new data. This will be performed by nodes that
need to know how the data must be filtered or emitted.

Filters will need a ``predicate``, so an expression that
returns ``true`` or ``false`` for each row that has to be
filtered, like ``legs > 4``.

Projections will need an expression that computes the rows
for the projection, for example ``B.LPS - B.ctrl``.

Most expressions are vectorized, they apply a compute function
to entire columns at once. Some questions can't be answered
looking at one column at the time, like *"is any of the
measures of this row greater than 1.5?"*. Those are answered
by :class:`RowwiseExpression` which looks at the values of
each row one row at the time.

>>> import pyarrow as pa
>>> import pyarrow.compute as pc
>>> from tablesubset.compute import col
>>> data = pa.table({"type": ["bird", "spider", "crab"], "legs": [2, 8, 10]})
>>> FunctionCallExpression(pc.greater, col("legs"), 4).apply(data).to_pylist()
[False, True, True]
>>> matches(col("type"), "^c").apply(data).to_pylist()
[False, False, True]
>>> is_in(col("type"), ["spider", "centipede"]).apply(data).to_pylist()
[False, True, False]
>>> grep("r", data["type"])
[0, 1, 2]
"""

from collections.abc import Callable, Sequence
from typing import Any

import pyarrow as pa
import pyarrow.compute as pc

from .. import utils
from .base import Expression
from .selectors import Selector, as_selector


def apply_expression_if_needed(data: pa.Table | pa.RecordBatch, o: Any) -> Any:
    """Invoke Apply on expressions when needed

    If the provided object is an Expression,
    it will be applied to the target data.

    Otherwise it will treat it as if it's
    already the result of an expression
    or a literal value.

    This allows us to apply all arguments
    we receive without having to care if
    they are the data we need or if they
    are the expression resulting in that data.
    """
    if isinstance(o, Expression):
        o = o.apply(data)
    return o


class FunctionCallExpression(Expression):
    """Call a compute function on its arguments.

    Given a compute function, and a set of arguments
    (other expressions, literals or data), execute
    the function on the provided arguments and return
    the resulting data.

    For example to subtract two columns this would be used as::

        FunctionCallExpression(pyarrow.compute.subtract, ColumnRef("B.LPS"), ColumnRef("B.ctrl"))

    Keyword arguments are forwarded to the function as they are,
    which allows to provide options to the compute functions::

        FunctionCallExpression(pyarrow.compute.match_substring_regex, ColumnRef("type"), pattern="^c")
    """

    def __init__(self, func: Callable, *args: Any, **options: Any) -> None:
        """
        :param func: The function accepting the arguments.
        :param *args: The arguments for the function.
        :param **options: Keyword options for the function.
        """
        self.func = func
        self.args = args
        self.options = options

    def __str__(self) -> str:
        func_qualname = utils.inspect.get_qualname(self.func)
        args = [str(arg) for arg in self.args]
        args.extend(f"{k}={v!r}" for k, v in self.options.items())
        return f"{func_qualname}({','.join(args)})"

    def apply(self, data: pa.Table | pa.RecordBatch) -> pa.Array:
        """Invoke the function resolving all arguments on the data.

        When the function arguments are expressions themselves,
        this will apply the expressions on the provided data
        and the resulting values will be used as the arguments for the
        function.
        """
        args = tuple(apply_expression_if_needed(data, arg) for arg in self.args)
        return self.func(*args, **self.options)


class RowwiseExpression(Expression):
    """Apply a function to the values of each row.

    For each row the values of the selected columns
    are collected into a list and provided to ``func``,
    which must return a single value for the row.

    This is much slower than vectorized expressions,
    as the values have to be converted to Python objects,
    but allows to express any logic that involves
    multiple columns of the same row::

        # Maximum value across all the X columns of each row.
        RowwiseExpression(max, ["X1", "X2", "X3"])

    >>> import pyarrow as pa
    >>> data = pa.table({"a": [1, 5], "b": [3, 2]})
    >>> RowwiseExpression(max).apply(data).to_pylist()
    [3, 5]
    """

    def __init__(
        self,
        func: Callable[[list], Any],
        columns: Selector | Sequence[str] | None = None,
        type: pa.DataType | None = None,
    ) -> None:
        """
        :param func: The function receiving the list of values of each row.
        :param columns: Which columns provide the values, all of them if ``None``.
        :param type: The type of the resulting column,
                     inferred from the values when not provided.
        """
        self.func = func
        self.columns = as_selector(columns)
        self.type = type

    def __str__(self) -> str:
        func_qualname = utils.inspect.get_qualname(self.func)
        return f"RowwiseExpression({func_qualname}, {self.columns})"

    def apply(self, data: pa.Table | pa.RecordBatch) -> pa.Array:
        names = data.schema.names
        positions = self.columns.positions(len(names), names)
        values = [data.column(pos).to_pylist() for pos in positions]
        if not values:
            rows = [[] for _ in range(data.num_rows)]
        else:
            rows = [list(row) for row in zip(*values)]
        return pa.array([self.func(row) for row in rows], type=self.type)


def _present(values: list) -> list:
    return [v for v in values if v is not None]


def row_any(
    predicate: Callable[[Any], bool], columns: Selector | Sequence[str] | None = None
) -> RowwiseExpression:
    """Rows where at least one of the values respects the predicate.

    >>> import pyarrow as pa
    >>> data = pa.table({"a": [1.0, 2.0], "b": [0.2, -3.0]})
    >>> row_any(lambda x: x > 1.5).apply(data).to_pylist()
    [False, True]
    """
    return RowwiseExpression(
        lambda values: any(predicate(v) for v in _present(values)),
        columns,
        type=pa.bool_(),
    )


def row_all(
    predicate: Callable[[Any], bool], columns: Selector | Sequence[str] | None = None
) -> RowwiseExpression:
    """Rows where all the values respect the predicate."""
    return RowwiseExpression(
        lambda values: all(predicate(v) for v in _present(values)),
        columns,
        type=pa.bool_(),
    )


def row_max(columns: Selector | Sequence[str] | None = None) -> RowwiseExpression:
    """Maximum value of each row, null when the row has no values."""
    return RowwiseExpression(
        lambda values: max(_present(values), default=None), columns
    )


def row_min(columns: Selector | Sequence[str] | None = None) -> RowwiseExpression:
    """Minimum value of each row, null when the row has no values."""
    return RowwiseExpression(
        lambda values: min(_present(values), default=None), columns
    )


def matches(
    expr: Expression, pattern: str, literal: bool = False, ignore_case: bool = False
) -> FunctionCallExpression:
    """Mask of the values that contain the pattern.

    The pattern is a regular expression (RE2 syntax)
    searched anywhere in the value, unless anchored with ``^`` or ``$``.
    When ``literal`` is ``True`` the pattern is a plain substring.
    """
    func = pc.match_substring if literal else pc.match_substring_regex
    return FunctionCallExpression(func, expr, pattern=pattern, ignore_case=ignore_case)


def is_in(expr: Expression, values: Sequence[Any]) -> FunctionCallExpression:
    """Mask of the values that are members of ``values``."""
    return FunctionCallExpression(pc.is_in, expr, value_set=pa.array(list(values)))


def string_length(expr: Expression) -> FunctionCallExpression:
    """Number of characters of each value."""
    return FunctionCallExpression(pc.utf8_length, expr)


def grep(
    pattern: str,
    values: pa.Array | pa.ChunkedArray | Sequence[str],
    literal: bool = False,
    ignore_case: bool = False,
) -> list[int]:
    """Positions of all the values that match the pattern, in order.

    Uses the same matching rules of :func:`matches`,
    null values never match.
    """
    if not isinstance(values, (pa.Array, pa.ChunkedArray)):
        values = pa.array(list(values), type=pa.string())
    func = pc.match_substring if literal else pc.match_substring_regex
    mask = func(values, pattern=pattern, ignore_case=ignore_case)
    return [idx for idx, matched in enumerate(mask.to_pylist()) if matched]
