"""tablesubset

Picking the right subset of a table, for learning and teaching purposes.

A significant portion of the effort in any data project goes into
preparing data for analysis: reading it from various sources,
preprocessing it and extracting subsets of interest.
tablesubset shows how the most common subsetting techniques work:

* Selecting rows and columns by position, including repeated and
  reordered positions, and excluding positions.
* Selecting rows with ``true``/``false`` masks, usually computed by
  applying a predicate to a column.
* Selecting rows and columns by name.
* Sorting through permutations, matching strings and
  checking set membership.
* Comparing paired control/treatment measures through a
  difference matrix.

The library is constituted by multiple components, each isolated within its own
package and each self documented in literate programming style.

The primary components are:

* The Compute Engine, in charge of executing the subsetting on the data.
* The Table API, which provides an high level API for the compute engine.
* The Datasets, a synthetic dataset to practice with.
"""

from . import compute
from .compute import (
    LengthMismatchError,
    ParseError,
    RangeError,
    ShapeError,
    UnknownNameError,
)
from .table import Table

__all__ = (
    "compute",
    "Table",
    "RangeError",
    "LengthMismatchError",
    "UnknownNameError",
    "ShapeError",
    "ParseError",
)
