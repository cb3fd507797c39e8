"""Weighted distribution utilities.

This module provides a helper for weighted categorical selection driven by
an externally supplied uniform draw, so that selection stays a pure function
of the row ordinal.
"""

from __future__ import annotations

import bisect
from collections.abc import Mapping
from typing import Generic, TypeVar

T = TypeVar("T")


class WeightedChoice(Generic[T]):
    """Map a uniform draw in ``[0, 1)`` onto weighted values.

    Values are ordered by descending weight (stable for ties) and selected
    by inverse CDF lookup.

    Example:
        >>> tips = WeightedChoice({"none": 30, "small": 50, "generous": 20})
        >>> tips.choose(0.1)
        'small'
    """

    def __init__(self, weights: Mapping[T, float]) -> None:
        """Initialize with weight mapping.

        Args:
            weights: Mapping of values to their relative weights.
                     Weights are relative, not percentages.

        Raises:
            ValueError: If weights are empty, negative or sum to zero.
        """
        if not weights:
            raise ValueError("WeightedChoice requires at least one value")
        if any(w < 0 for w in weights.values()):
            raise ValueError("Weights must be non-negative")
        total = float(sum(weights.values()))
        if total <= 0:
            raise ValueError("Weights must not sum to zero")

        ordered = sorted(weights.items(), key=lambda item: item[1], reverse=True)
        self.values: list[T] = [value for value, _ in ordered]
        self.weights: list[float] = [float(weight) for _, weight in ordered]

        cdf: list[float] = []
        acc = 0.0
        for weight in self.weights:
            acc += weight
            cdf.append(acc / total)
        self.cdf = cdf

    def choose(self, u: float) -> T:
        """Select the value whose CDF interval contains ``u``.

        Args:
            u: Uniform draw in ``[0, 1)``.

        Returns:
            The selected value.
        """
        index = bisect.bisect_right(self.cdf, u)
        return self.values[min(index, len(self.values) - 1)]

    def __len__(self) -> int:
        return len(self.values)
