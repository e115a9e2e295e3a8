"""Table library built on top of the tablesubset compute engine.

A table is the most common way to hold data for an analysis:
values organized in named columns, one row per observation.
Most of the effort of an analysis usually goes into preparing
the data: reading it, cleaning it and extracting the subsets
that are interesting for the question at hand.

The :class:`Table` object offers the subsetting techniques
in a compact form, ``table[rows, columns]``, where rows and
columns can be picked by position, by exclusion, by
``true``/``false`` masks or by name.

>>> import pyarrow.compute as pc
>>> from tablesubset.compute import col, FunctionCallExpression
>>> table = Table.from_pydict({
...     "name": ["K", "B", "Q", "Z"],
...     "legs": [2, 8, 100, 6],
... })
>>> table[2, :].to_pydict()
{'name': ['Q'], 'legs': [100]}
>>> table.filter(FunctionCallExpression(pc.greater, col("legs"), 4))["name"].to_pylist()
['B', 'Q', 'Z']
"""

from .table import Table

__all__ = ("Table",)
