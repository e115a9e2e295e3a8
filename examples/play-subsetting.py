import logging

import pyarrow.compute as pc

from tablesubset.compute import (
    ExcludeSelector,
    FunctionCallExpression,
    col,
    grep,
    is_in,
    matches,
    order,
    row_all,
    row_any,
    row_max,
    sort,
)
from tablesubset.datasets import naturalist

logging.basicConfig(level=logging.INFO)

dat = naturalist(10)
print(dat)

# By index
print(dat[1, 2])
print(dat[[1, 2], [0, 1, 2]])
print(dat[3::-1, 0:3])  # first four rows in reverse order
print(dat[[0, 0, 0, 1, 1, 2], 0:3])

# Sorting needs the permutation, not the sorted values
print(sort(dat["legs"]))
print(order(dat["legs"]))
print(dat[order(dat["legs"]), 0:3])

# Excluding
print(dat[ExcludeSelector([0]), 0:3])
print(dat.exclude_rows(range(3))[:, 0:3])

# By mask
print(dat.filter(FunctionCallExpression(pc.greater, col("legs"), 4))[:, 0:3])
print(dat.filter(FunctionCallExpression(
    pc.and_,
    FunctionCallExpression(pc.greater, col("X1"), 0),
    FunctionCallExpression(pc.less, col("X2"), 0),
)))
print(dat.filter(FunctionCallExpression(pc.greater, row_max(slice(3, 8)), 1)))
print(dat.filter(row_any(lambda x: x > 1.5, slice(3, 8))))
print(dat.filter(row_all(lambda x: x < 0.5, slice(3, 8))))

# By string matching
print(dat[grep("r", dat["type"]), 0:3])
print(dat.filter(matches(col("type"), "^c"))[:, 0:3])
print(dat.filter(is_in(col("type"), ["spider", "centipede"]))[:, 0:3])

# By name
print(dat[0:5, ["name", "legs"]])
print(dat[0:3, grep("^X", dat.column_names)])
