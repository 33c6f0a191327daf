import math
from typing import Iterable

import numpy as np


class MathTools:
    """Numeric helpers shared by the statistics aggregators."""

    @staticmethod
    def round_half_up(value: float) -> int:
        """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""
        if not math.isfinite(value):
            return 0
        return int(math.floor(value + 0.5))

    @staticmethod
    def percent_change(first: float, last: float) -> int:
        """Return the rounded percent change from ``first`` to ``last``.

        A non-positive ``first`` yields 0 instead of dividing by zero.
        """
        if first is None or last is None or first <= 0:
            return 0
        return MathTools.round_half_up((last - first) / first * 100)

    @staticmethod
    def mean(values: Iterable[float]) -> float:
        """Return the arithmetic mean of ``values`` or 0.0 when empty."""
        data = list(values)
        if not data:
            return 0.0
        return float(np.mean(np.array(data, dtype=float)))
