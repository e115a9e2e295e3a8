"""Observations of a naturalist.

Imagine you are a naturalist that has collected some living
things and keeps observations in a table: a one letter name
for each specimen, the number of legs it has, the type of
creature it is and five measures of something.

The table mixes text, integer and floating point columns,
which is what makes tables more flexible than matrices,
and is small enough to check the results of a subsetting by eye.

>>> table = naturalist(5)
>>> table.column_names
['name', 'legs', 'type', 'X1', 'X2', 'X3', 'X4', 'X5']
>>> table.num_rows
5
"""

import random
import string

import pyarrow as pa

from ..table import Table

LEGS_TO_TYPE = {
    0: "fish",
    2: "bird",
    4: "beast",
    6: "bug",
    8: "spider",
    10: "crab",
    100: "centipede",
}

DEFAULT_SEED = 112358


def naturalist(n: int = 10, seed: int = DEFAULT_SEED, measures: int = 5) -> Table:
    """Generate the observations of ``n`` specimens.

    The type of each specimen is looked up from its number of legs
    in :data:`LEGS_TO_TYPE`, the measures are drawn from
    a standard normal distribution.

    :param n: How many specimens to generate.
    :param seed: The seed of the random generator.
    :param measures: How many measure columns (``X1``, ``X2``...) to generate.
    """
    rng = random.Random(seed)
    names = [rng.choice(string.ascii_uppercase) for _ in range(n)]
    legs = [rng.choice(list(LEGS_TO_TYPE)) for _ in range(n)]
    columns = {
        "name": pa.array(names, type=pa.string()),
        "legs": pa.array(legs, type=pa.int64()),
        "type": pa.array([LEGS_TO_TYPE[n_legs] for n_legs in legs], type=pa.string()),
    }
    for idx in range(1, measures + 1):
        columns[f"X{idx}"] = pa.array(
            [rng.gauss(0.0, 1.0) for _ in range(n)], type=pa.float64()
        )
    return Table(pa.table(columns))
