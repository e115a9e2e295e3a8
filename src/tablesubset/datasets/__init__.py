"""Datasets to practice subsetting with.

The datasets are synthetic and generated from a seed,
so they are always the same for the same seed and
examples can refer to specific rows.
"""

from .naturalist import LEGS_TO_TYPE, naturalist

__all__ = ("naturalist", "LEGS_TO_TYPE")
