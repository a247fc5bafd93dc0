"""
Smoothed frequency estimator over a fixed symbol set.

Accumulates weighted observations of one symbolic attribute and reports
add-one (Laplace) smoothed probabilities, so symbols never seen in training
still receive a small positive probability.

P(symbol) = (count[symbol] + 1) / (total + num_symbols)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from clusterdensity.errors import SymbolOutOfRangeError


@dataclass
class DiscreteFrequencyEstimator:
    """
    Add-one smoothed probability mass function for one attribute.

    Example:
        >>> est = DiscreteFrequencyEstimator(num_symbols=3)
        >>> est.add_value(0, 2.0)
        >>> est.add_value(2)
        >>> est.get_probability(1)  # (0 + 1) / (3 + 3)
        0.16666666666666666
    """

    num_symbols: int
    name: str = ""
    _counts: np.ndarray = field(default=None, repr=False)
    _total: float = field(default=0.0, repr=False)

    def __post_init__(self):
        """Initialize the count buckets."""
        if self.num_symbols < 1:
            raise ValueError(f"num_symbols must be positive, got {self.num_symbols}")
        if self._counts is None:
            self._counts = np.zeros(self.num_symbols, dtype=float)

    def _index(self, symbol_index) -> int:
        try:
            index = int(symbol_index)
        except (TypeError, ValueError, OverflowError):
            index = -1
        if index != symbol_index or not 0 <= index < self.num_symbols:
            raise SymbolOutOfRangeError(
                f"Symbol index {symbol_index} out of range for estimator "
                f"'{self.name}' with {self.num_symbols} symbols"
            )
        return index

    def add_value(self, symbol_index: int, weight: float = 1.0) -> None:
        """
        Accumulate a weighted observation.

        Args:
            symbol_index: Index of the observed symbol
            weight: Non-negative observation weight (default 1)
        """
        if weight < 0:
            raise ValueError(f"Weight must be non-negative, got {weight}")
        index = self._index(symbol_index)
        self._counts[index] += weight
        self._total += weight

    def get_probability(self, symbol_index: int) -> float:
        """
        Smoothed probability of a symbol.

        Always strictly positive; the values over all symbols sum to 1.
        """
        index = self._index(symbol_index)
        return float((self._counts[index] + 1.0) / (self._total + self.num_symbols))

    def probabilities(self) -> np.ndarray:
        """Smoothed probabilities for every symbol, in index order."""
        return (self._counts + 1.0) / (self._total + self.num_symbols)

    def count(self, symbol_index: int) -> float:
        """Raw accumulated weight for a symbol."""
        return float(self._counts[self._index(symbol_index)])

    def total(self) -> float:
        """Total accumulated weight."""
        return self._total

    def to_string(self, labels: Optional[Sequence[str]] = None) -> str:
        """
        Describe the raw counts.

        Args:
            labels: Optional symbol labels to show next to each count
        """
        if labels is not None and len(labels) == self.num_symbols:
            counts = " ".join(
                f"{label}={_format_count(c)}" for label, c in zip(labels, self._counts)
            )
        else:
            counts = " ".join(_format_count(c) for c in self._counts)
        return (
            f"Discrete Estimator. Counts = {counts}  "
            f"(Total = {_format_count(self._total)})"
        )

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return (
            f"DiscreteFrequencyEstimator(name='{self.name}', "
            f"num_symbols={self.num_symbols}, total={self._total:g})"
        )


def _format_count(value: float) -> str:
    return f"{value:g}"
