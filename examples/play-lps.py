import logging

import pyarrow.compute as pc

from tablesubset import Table
from tablesubset.compute import (
    FunctionCallExpression,
    abs_exceeds,
    col,
    grep,
    order,
    string_length,
)

logging.basicConfig(level=logging.DEBUG)

CELL_TYPES = ["B", "MF", "NK", "Mo", "pDC", "DC1", "DC2"]
COLUMNS = ["genes"] + [
    f"{cell}.{condition}" for cell in CELL_TYPES for condition in ("ctrl", "LPS")
] + ["cluster"]

# Run generate_test_data.py first.
raw = Table.open_csv("data/lps.csv", header=False)
lps = (
    raw.exclude_rows(range(6))
    .rename(COLUMNS)
    .parse_numeric(slice(1, None))
)
lps = lps.with_row_labels(range(1, lps.num_rows + 1))
print(lps.head())

print(lps[0:10, 0:2])
print(lps[9::-1, 0:2])
print(lps[9::-1, 0:2].exclude_rows([2]))
first = lps[0:10, :]
print(first[order(first["B.ctrl"]), 0:2])
print(lps[0:10, ["Mo.LPS", "Mo.ctrl"]])
print(lps.filter(FunctionCallExpression(pc.equal, string_length(col("genes")), 3))["genes"])
print(lps[grep("Il", lps["genes"]), 0:2])
print(lps.filter(FunctionCallExpression(
    pc.greater, FunctionCallExpression(pc.subtract, col("B.LPS"), col("B.ctrl")), 2
))[:, 0:3])

diff = lps.difference_matrix(CELL_TYPES, columns=slice(1, 15))
print(diff.filter(abs_exceeds(2)))
