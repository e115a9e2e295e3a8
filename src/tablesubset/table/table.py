"""The Table object itself."""
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Self

import pyarrow as pa

from ..compute import (
    CSVDataSource,
    DifferenceNode,
    FilterNode,
    ProjectNode,
    PyArrowTableDataSource,
    SortNode,
    TakeNode,
)
from ..compute.base import Expression, QueryPlanNode, collect
from ..compute.datasources import parse_numeric
from ..compute.selectors import (
    ExcludeSelector,
    IndexSelector,
    LengthMismatchError,
    MaskSelector,
    SliceSelector,
    as_selector,
    make_unique,
)
from ..utils import tabulate

logger = logging.getLogger(__name__)


class Table:
    """Data structure that handles data in rows and columns.

    The Table object allows to represent in-memory data
    and extract subsets of it.

    Differently from a lazy dataframe, the Table is eager:
    every operation immediately computes its result through the
    compute engine and returns a new Table. The original
    Table is never modified, so it can be subset over and over.

    Rows are identified by their position, starting from 0,
    and optionally by a unique text label.
    Columns are identified by their position or by their name.

    >>> table = Table.from_pydict({"name": ["K", "B", "Q"], "legs": [2, 8, 100]})
    >>> table[[2, 0], "name"].to_pydict()
    {'name': ['Q', 'K']}
    >>> table["legs"].to_pylist()
    [2, 8, 100]
    """

    def __init__(
        self,
        node_or_table: QueryPlanNode | pa.Table | pa.RecordBatch,
        row_labels: Sequence[str] | None = None,
    ) -> None:
        """
        :param node_or_table: A compute engine node expected to emit
                              the data for the table or a `pyarrow.Table`.
        :param row_labels: A unique label for each row, if any.
        """
        if isinstance(node_or_table, pa.RecordBatch):
            node_or_table = pa.Table.from_batches([node_or_table])
        if isinstance(node_or_table, QueryPlanNode):
            node_or_table = collect(node_or_table)
        if not isinstance(node_or_table, pa.Table):
            raise ValueError("Invalid input, expected a QueryPlanNode or a PyArrow Table")

        names = node_or_table.column_names
        if len(set(names)) != len(names):
            raise ValueError(f"Column names must be unique: {names}")

        if row_labels is not None:
            row_labels = [str(label) for label in row_labels]
            if len(row_labels) != node_or_table.num_rows:
                raise LengthMismatchError(
                    f"Got {len(row_labels)} row labels for {node_or_table.num_rows} rows"
                )
            if len(set(row_labels)) != len(row_labels):
                raise ValueError("Row labels must be unique")

        self._table = node_or_table
        self._row_labels = row_labels

    @classmethod
    def from_pydict(
        cls, data: Mapping[str, Sequence[Any]], row_labels: Sequence[str] | None = None
    ) -> Self:
        """Create a Table from a dictionary of column names and values."""
        return cls(pa.table(dict(data)), row_labels=row_labels)

    @classmethod
    def open_csv(
        cls, filename: str, header: bool = False, skip_rows: int = 0
    ) -> Self:
        """Open a CSV file and create a Table out of its data.

        All the columns will contain text, see :meth:`parse_numeric`.

        :param filename: The path to a local CSV file.
        :param header: If the first row holds the column names.
        :param skip_rows: How many rows to skip at the beginning of the file.
        """
        return cls(CSVDataSource(filename, header=header, skip_rows=skip_rows))

    @property
    def num_rows(self) -> int:
        return self._table.num_rows

    @property
    def num_columns(self) -> int:
        return self._table.num_columns

    @property
    def shape(self) -> tuple[int, int]:
        return (self.num_rows, self.num_columns)

    @property
    def column_names(self) -> list[str]:
        return list(self._table.column_names)

    @property
    def row_labels(self) -> list[str] | None:
        if self._row_labels is None:
            return None
        return list(self._row_labels)

    def __len__(self) -> int:
        return self.num_rows

    def column(self, key: str | int) -> pa.Array:
        """Get the values of a single column.

        :param key: The name or the position of the column.
        """
        names = self._table.column_names
        if isinstance(key, str):
            positions = as_selector(key).positions(len(names), names)
        else:
            positions = IndexSelector([key]).positions(len(names))
        return self._table.column(positions[0]).combine_chunks()

    def __getitem__(self, key: Any) -> Any:
        """Subset the table with the ``table[rows, columns]`` syntax.

        A single column name returns the values of that column,
        anything else is forwarded to :meth:`select` as the rows selector.
        """
        if isinstance(key, tuple):
            if len(key) != 2:
                raise TypeError("Tables have two dimensions, use table[rows, columns]")
            return self.select(*key)
        if isinstance(key, str):
            return self.column(key)
        return self.select(key)

    def select(self, rows: Any = None, columns: Any = None) -> Self:
        """Return the requested rows and columns as a new Table.

        Both ``rows`` and ``columns`` accept a
        :class:`tablesubset.compute.selectors.Selector` or
        any value that :func:`tablesubset.compute.selectors.as_selector`
        understands. ``None`` selects everything.

        Rows selected by name are matched against the row labels.
        """
        positions = as_selector(rows).positions(self.num_rows, self._row_labels)
        node = ProjectNode(
            columns, None, TakeNode(IndexSelector(positions), self._source())
        )
        labels = None
        if self._row_labels is not None:
            labels = make_unique([self._row_labels[pos] for pos in positions])
        return self.__class__(node, row_labels=labels)

    def exclude_rows(self, positions: Sequence[int]) -> Self:
        """Return all rows except those at the provided positions."""
        return self.select(ExcludeSelector(positions))

    def head(self, n: int = 6) -> Self:
        """The first ``n`` rows."""
        return self.select(SliceSelector(slice(None, n)))

    def tail(self, n: int = 6) -> Self:
        """The last ``n`` rows."""
        return self.select(SliceSelector(slice(max(self.num_rows - n, 0), None)))

    def evaluate(self, expression: Expression) -> pa.Array:
        """Apply an expression to the table and return the resulting column."""
        result = expression.apply(self._table)
        if isinstance(result, pa.ChunkedArray):
            result = result.combine_chunks()
        return result

    def filter(self, predicate: Expression | pa.Array | Sequence[bool]) -> Self:
        """Keep only the rows for which the predicate is ``true``.

        The returned table will only contain the data that
        matches the filter predicate.

        :param predicate: The expression representing the predicate.
                          for example `legs > 4`, or a mask with
                          one value for each row.
        """
        if isinstance(predicate, Expression):
            mask = self.evaluate(predicate)
        elif isinstance(predicate, (pa.Array, pa.ChunkedArray)):
            mask = predicate
        else:
            mask = pa.array(list(predicate), type=pa.bool_())
        labels = None
        if self._row_labels is not None:
            positions = MaskSelector(mask).positions(self.num_rows)
            labels = [self._row_labels[pos] for pos in positions]
        return self.__class__(FilterNode(mask, self._source()), row_labels=labels)

    def sort_by(
        self, keys: str | Sequence[str], descending: bool | Sequence[bool] = False
    ) -> Self:
        """Sort the rows by the values of one or more columns.

        Sorting is stable, rows with equal keys keep their relative order.
        """
        if isinstance(keys, str):
            keys = [keys]
        if isinstance(descending, bool):
            descending = [descending] * len(keys)
        for key in keys:
            as_selector(key).positions(self.num_columns, self.column_names)

        if self._row_labels is None:
            return self.__class__(SortNode(list(keys), list(descending), self._source()))

        # Sort a row number along with the data to carry the labels over.
        rowid = "__rowid__"
        while rowid in self.column_names:
            rowid = "_" + rowid
        source = PyArrowTableDataSource(
            self._table.append_column(rowid, pa.array(range(self.num_rows), type=pa.int64()))
        )
        data = collect(SortNode(list(keys), list(descending), source))
        positions = data.column(rowid).to_pylist()
        return self.__class__(
            data.drop_columns([rowid]),
            row_labels=[self._row_labels[pos] for pos in positions],
        )

    def rename(self, names: Sequence[str] | Mapping[str, str]) -> Self:
        """Rename the columns.

        :param names: The new names of all the columns, in order,
                      or a mapping of the old names to the new ones.
        """
        if isinstance(names, Mapping):
            for old in names:
                as_selector(old).positions(self.num_columns, self.column_names)
            names = [names.get(name, name) for name in self.column_names]
        names = list(names)
        if len(names) != self.num_columns:
            raise LengthMismatchError(
                f"Got {len(names)} names for {self.num_columns} columns"
            )
        return self.__class__(self._table.rename_columns(names), row_labels=self._row_labels)

    def with_row_labels(self, labels: Sequence[Any] | None) -> Self:
        """Return the same data with different row labels.

        ``None`` removes the row labels.
        """
        return self.__class__(self._table, row_labels=labels)

    def with_columns(self, project: Mapping[str, Expression]) -> Self:
        """Add new columns computed by expressions.

        Existing columns with the same name are replaced
        in their original position.
        """
        result = self._table
        for name, expr in project.items():
            values = expr.apply(result)
            if name in result.column_names:
                result = result.set_column(result.column_names.index(name), name, values)
            else:
                result = result.append_column(name, values)
        return self.__class__(result, row_labels=self._row_labels)

    def parse_numeric(self, columns: Any, allow_missing: bool = False) -> Self:
        """Convert text columns to numbers.

        :param columns: The columns to convert, any columns selector.
        :param allow_missing: Convert empty values to nulls instead of failing.
        """
        names = self.column_names
        positions = as_selector(columns).positions(len(names), names)
        result = self._table
        for pos in positions:
            result = result.set_column(
                pos,
                names[pos],
                parse_numeric(result.column(pos), names[pos], allow_missing=allow_missing),
            )
        logger.debug("Parsed %d columns as numeric", len(set(positions)))
        return self.__class__(result, row_labels=self._row_labels)

    def difference_matrix(
        self,
        labels: Sequence[str],
        columns: Any = None,
        layout: str = "control_first",
    ) -> Self:
        """Compute ``treatment - control`` for each pair of columns.

        :param labels: The name of the group of each pair of columns.
        :param columns: The paired columns, all of them if ``None``.
        :param layout: ``"control_first"`` or ``"treatment_first"``.
        """
        node = DifferenceNode(
            labels, ProjectNode(columns, None, self._source()), layout=layout
        )
        return self.__class__(node, row_labels=self._row_labels)

    def equals(self, other: "Table") -> bool:
        """If the two tables hold the same data and labels."""
        return (
            isinstance(other, Table)
            and self._row_labels == other._row_labels
            and self._table.equals(other._table)
        )

    def to_arrow(self) -> pa.Table:
        """Return the data as a pyarrow.Table"""
        return self._table

    def to_pydict(self) -> dict[str, list]:
        return self._table.to_pydict()

    def _source(self) -> PyArrowTableDataSource:
        return PyArrowTableDataSource(self._table)

    def __str__(self) -> str:
        return tabulate.tabulate(self._table, row_labels=self._row_labels)

    def __repr__(self) -> str:
        return f"<Table rows={self.num_rows} columns={self.column_names}>"

