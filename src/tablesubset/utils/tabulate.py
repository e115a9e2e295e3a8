"""Format tabular data into a text table for print.

the `tabulate` function takes a `pyarrow.Table` or `pyarrow.RecordBatch`
and formats it into a text table.
It will truncate long strings, format floats to 2 decimal places, and limit the number of rows to display.
When row labels are provided, they are printed as the first column without a header.

Example:

    >>> import pyarrow as pa
    >>> data = {
    ...     "name": ["K", "B", "Q"],
    ...     "legs": [2, 8, 100],
    ...     "X1": [0.5, -1.25, 1.0],
    ... }
    >>> table = pa.table(data)
    >>> print(tabulate(table, row_labels=["1", "2", "3"]))
      | name | legs | X1
    - | ---- | ---- | -----
    1 | K    | 2    | 0.50
    2 | B    | 8    | -1.25
    3 | Q    | 100  | 1.00
"""

from collections.abc import Sequence
from typing import Any

import pyarrow as pa

DEFAULT_MAX_ROWS = 20


def tabulate(
    data: pa.Table | pa.RecordBatch,
    max_rows: int = DEFAULT_MAX_ROWS,
    row_labels: Sequence[str] | None = None,
) -> str:
    """Format tabular data into a text table.

    Will produce a string like::

        name | legs | type
        ---- | ---- | ---------
        K    | 2    | bird
        B    | 8    | spider
        Q    | 100  | centipede
    """
    cols = list(data.column_names)
    rows = [
        [format_value(row[idx]) for idx in range(len(cols))]
        for row in _rows(data.slice(length=max_rows))
    ]
    if row_labels is not None:
        cols = [""] + cols
        rows = [[str(label)] + row for label, row in zip(row_labels, rows)]

    colsizes = compute_max_colsize(cols, rows)
    header = [maketablerow(cols, colsizes=colsizes)]
    separator = [maketablerow(["-"] * len(cols), colsizes=colsizes, fillvalue="-")]
    textrows = [maketablerow(row, colsizes=colsizes) for row in rows]

    table = "\n".join(line.rstrip() for line in header + separator + textrows)
    if data.num_rows > max_rows:
        table += f"\n... and {data.num_rows - max_rows} more rows"
    return table


def _rows(data: pa.Table | pa.RecordBatch) -> list[tuple]:
    # Columns are accessed by position as column names might not be unique.
    columns = [data.column(idx).to_pylist() for idx in range(data.num_columns)]
    return list(zip(*columns))


def compute_max_colsize(cols: list[str], rows: list[list[str]]) -> list[int]:
    """Compute the maximum size of each column in a table."""
    return [
        max([len(row[colidx]) for row in rows] + [len(cols[colidx])])
        for colidx, _ in enumerate(cols)
    ]


def maketablerow(cols: list[str], colsizes: list[int], fillvalue: str = " ") -> str:
    """Make a table row with the given column sizes."""
    return " | ".join(
        [col.ljust(colsizes[idx], fillvalue) for idx, col in enumerate(cols)]
    )


def format_value(v: Any) -> str:
    """Format a value to be printed in the table.

    This function will format floats to 2 decimal places,
    print nulls as ``NA`` and truncate long strings.
    """
    if v is None:
        return "NA"
    elif isinstance(v, bool):
        return "true" if v else "false"
    elif isinstance(v, float):
        return f"{v:.2f}"

    v = str(v)
    if len(v) > 30:
        v = v[:27] + "..."
    return v
