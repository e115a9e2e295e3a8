"""Query Plan nodes that load data

The datasource nodes are expected to fetch the data from some source,
convert it into the format accepted by the compute engine and forward it
to the next node in the plan.

Data loaded from text files is kept as text: the
CSV files we deal with frequently contain notes, titles and
empty rows before the actual data, which would confuse any
attempt at guessing the type of the columns.
Once the non-data rows are removed, the columns that contain
numbers can be explicitly converted with :func:`parse_numeric`.
"""

import logging
from abc import abstractmethod

import pyarrow as pa
import pyarrow.compute as pc
import pyarrow.csv

from .base import QueryPlanNode, emit

logger = logging.getLogger(__name__)


class DataSourceNode(QueryPlanNode):
    """Base class for nodes that load data from a source."""

    @abstractmethod
    def poll_schema(self) -> pa.Schema:
        """Poll the schema of the data source without loading its content."""
        ...


class CSVDataSource(DataSourceNode):
    """Load data from a CSV file.

    Given a local CSV file path, load the content as text,
    convert it into Arrow format, and emit it
    for the next nodes of the query plan to consume.

    When the file has no header the columns are named
    ``f0``, ``f1``, ``f2``...
    """

    def __init__(
        self,
        filename: str,
        header: bool = False,
        skip_rows: int = 0,
        block_size: int | None = None,
    ) -> None:
        """
        :param filename: The path of the local CSV file.
        :param header: If the first row (after the skipped ones)
                       contains the column names.
        :param skip_rows: How many rows to skip at the beginning of the file.
        :param block_size: How big to make batches of data,
                           Influences how many batches will be produced
        """
        self.filename = filename
        self.header = header
        self.skip_rows = skip_rows
        self.block_size = block_size

    def __str__(self) -> str:
        return (
            f"CSVDataSource({self.filename}, header={self.header}, "
            f"skip_rows={self.skip_rows}, block_size={self.block_size})"
        )

    def _read_options(self) -> pa.csv.ReadOptions:
        return pa.csv.ReadOptions(
            block_size=self.block_size,
            skip_rows=self.skip_rows,
            autogenerate_column_names=not self.header,
        )

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Open CSV file and emit the batches.

        All columns are read as text and empty cells
        are preserved as empty strings.
        """
        schema = self.poll_schema()
        convert_options = pa.csv.ConvertOptions(
            column_types={name: pa.string() for name in schema.names},
            strings_can_be_null=False,
            quoted_strings_can_be_null=False,
        )
        logger.debug("Reading %s with %d columns", self.filename, len(schema))
        try:
            table = pa.csv.read_csv(
                self.filename,
                read_options=self._read_options(),
                convert_options=convert_options,
            )
        except pa.ArrowInvalid as e:
            raise ParseError(f"Unable to parse {self.filename}: {e}") from e
        logger.debug("Read %d rows from %s", table.num_rows, self.filename)
        yield from emit(table)

    def poll_schema(self) -> pa.Schema:
        """Poll the schema of the CSV file."""
        try:
            with pa.csv.open_csv(
                self.filename, read_options=self._read_options()
            ) as reader:
                schema = reader.schema
        except pa.ArrowInvalid as e:
            raise ParseError(f"Unable to parse {self.filename}: {e}") from e
        return pa.schema([pa.field(name, pa.string()) for name in schema.names])


class PyArrowTableDataSource(DataSourceNode):
    """Load data from an in-memory pyarrow.Table or pyarrow.RecordBatch.

    Given a :class:`pyarrow.Table` or `pyarrow.RecordBatch` object,
    allow to use its data in a query plan.
    """

    def __init__(self, table: pa.Table | pa.RecordBatch) -> None:
        """
        :param table: The table or recordbatch with the data to read.
        """
        if isinstance(table, pa.RecordBatch):
            table = pa.Table.from_batches([table])
        self.table = table

    def __str__(self) -> str:
        return f"PyArrowTableDataSource(columns={self.table.column_names}, rows={self.table.num_rows})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Emit the data contained in the Table for consumption by other node."""
        yield from emit(self.table)

    def poll_schema(self) -> pa.Schema:
        """Poll the schema of the Table."""
        return self.table.schema


def parse_numeric(
    values: pa.Array | pa.ChunkedArray,
    name: str | None = None,
    allow_missing: bool = False,
) -> pa.Array | pa.ChunkedArray:
    """Convert a column of text to numbers.

    Leading and trailing spaces are ignored.
    Columns that are already numeric are returned unchanged.

    Empty or null values are refused, unless ``allow_missing`` is
    ``True``, in which case they become nulls.
    Values are never silently converted to ``NaN``.

    >>> parse_numeric(pa.array(["1.5", " 2", "-3e2"])).to_pylist()
    [1.5, 2.0, -300.0]

    :param values: The text values to convert.
    :param name: The name of the column, used in error messages.
    :param allow_missing: Convert empty values to nulls instead of failing.
    """
    label = repr(name) if name is not None else "of values"
    if pa.types.is_integer(values.type) or pa.types.is_floating(values.type):
        return values
    if not pa.types.is_string(values.type):
        raise ParseError(f"Column {label} has type {values.type}, expected text")

    stripped = pc.utf8_trim_whitespace(values)
    missing = pc.or_kleene(pc.is_null(stripped), pc.equal(stripped, ""))
    if pc.any(missing).as_py():
        if not allow_missing:
            raise ParseError(f"Column {label} has empty values")
        stripped = pc.if_else(missing, pa.scalar(None, type=pa.string()), stripped)

    try:
        return pc.cast(stripped, pa.float64())
    except pa.ArrowInvalid as e:
        raise ParseError(f"Column {label} is not numeric: {e}") from e


class ParseError(ValueError):
    """The data can't be read or converted to the requested type."""
