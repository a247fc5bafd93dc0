"""
In-memory instances and datasets.

Values are held as floats: symbolic attributes store their label index and
NaN marks a missing value in any slot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, Optional, Sequence

import numpy as np

from clusterdensity.ingest.schema import DatasetSchema


@dataclass
class Instance:
    """
    A single data point, one value per attribute.

    Example:
        >>> inst = Instance(np.array([1.0, np.nan]))
        >>> inst.is_missing(1)
        True
    """

    values: np.ndarray
    schema: Optional[DatasetSchema] = field(default=None, repr=False)

    def __post_init__(self):
        self.values = np.asarray(self.values, dtype=float)
        if self.values.ndim != 1:
            raise ValueError(f"Instance values must be 1-D, got shape {self.values.shape}")

    @classmethod
    def from_row(cls, schema: DatasetSchema, row: Sequence[Any]) -> Instance:
        """Encode a raw row (labels, numbers, None) against a schema."""
        return cls(values=schema.encode(row), schema=schema)

    def __len__(self) -> int:
        return len(self.values)

    def is_missing(self, index: int) -> bool:
        return bool(np.isnan(self.values[index]))

    def value(self, index: int) -> float:
        return float(self.values[index])

    def missing_mask(self) -> np.ndarray:
        return np.isnan(self.values)


@dataclass
class Dataset:
    """
    A schema plus an (n_instances, n_attributes) matrix of encoded values.

    Example:
        >>> schema = DatasetSchema([Attribute.numeric("x")])
        >>> data = Dataset.from_rows(schema, [[1.0], [2.0], [None]])
        >>> len(data)
        3
    """

    schema: DatasetSchema
    values: np.ndarray

    def __post_init__(self):
        values = np.asarray(self.values, dtype=float)
        if values.ndim == 1 and values.size == 0:
            values = values.reshape(0, len(self.schema))
        self.schema.check_matrix(values)
        self.values = values

    @classmethod
    def from_rows(cls, schema: DatasetSchema, rows: Iterable[Sequence[Any]]) -> Dataset:
        """Build a dataset from raw rows."""
        encoded = [schema.encode(row) for row in rows]
        if not encoded:
            return cls(schema=schema, values=np.empty((0, len(schema))))
        return cls(schema=schema, values=np.vstack(encoded))

    @property
    def num_attributes(self) -> int:
        return len(self.schema)

    def __len__(self) -> int:
        return self.values.shape[0]

    def __iter__(self) -> Iterator[Instance]:
        for i in range(len(self)):
            yield self.instance(i)

    def instance(self, index: int) -> Instance:
        return Instance(values=self.values[index], schema=self.schema)

    def column(self, index: int) -> np.ndarray:
        return self.values[:, index]

    def summary(self) -> Dict[str, Any]:
        """Return instance, attribute and missing-value counts."""
        return {
            "instances": len(self),
            **self.schema.summary(),
            "missing_values": int(np.isnan(self.values).sum()),
        }

    def __repr__(self) -> str:
        return f"Dataset({len(self):,} instances, {self.num_attributes} attributes)"
