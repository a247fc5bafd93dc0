"""
Attribute and schema descriptors for clustering datasets.

A schema is an ordered sequence of attributes, each either symbolic (a finite
set of labels with stable integer indices) or numeric (a real-valued scalar).
Rows are encoded into float vectors where symbolic values are stored as their
label index and NaN marks a missing value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Sequence, Tuple
import math
import numbers

import numpy as np

from clusterdensity.errors import SchemaMismatchError, SymbolOutOfRangeError


class AttributeKind(str, Enum):
    """Kind of values an attribute holds."""
    SYMBOLIC = "symbolic"
    NUMERIC = "numeric"


def is_missing(value: Any) -> bool:
    """True for None and floating-point NaN."""
    if value is None:
        return True
    if isinstance(value, (float, np.floating)):
        return bool(np.isnan(value))
    return False


@dataclass(frozen=True)
class Attribute:
    """
    Descriptor for a single attribute.

    Symbolic attributes declare their labels up front; the position of a
    label in ``values`` is its index.

    Example:
        >>> color = Attribute.symbolic("color", ["red", "green", "blue"])
        >>> color.index_of("green")
        1
        >>> width = Attribute.numeric("width")
    """

    name: str
    kind: AttributeKind
    values: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "kind", AttributeKind(self.kind))
        object.__setattr__(self, "values", tuple(str(v) for v in self.values))

        if self.kind is AttributeKind.SYMBOLIC:
            if not self.values:
                raise ValueError(f"Symbolic attribute '{self.name}' declares no values")
            if len(set(self.values)) != len(self.values):
                raise ValueError(f"Symbolic attribute '{self.name}' has duplicate values")
        elif self.values:
            raise ValueError(f"Numeric attribute '{self.name}' cannot declare values")

    @classmethod
    def symbolic(cls, name: str, values: Sequence[Any]) -> Attribute:
        return cls(name=name, kind=AttributeKind.SYMBOLIC, values=tuple(values))

    @classmethod
    def numeric(cls, name: str) -> Attribute:
        return cls(name=name, kind=AttributeKind.NUMERIC)

    @property
    def is_symbolic(self) -> bool:
        return self.kind is AttributeKind.SYMBOLIC

    @property
    def is_numeric(self) -> bool:
        return self.kind is AttributeKind.NUMERIC

    @property
    def num_values(self) -> int:
        """Number of declared labels (0 for numeric attributes)."""
        return len(self.values)

    def index_of(self, label: Any) -> int:
        """Get the index of a symbolic label."""
        try:
            return self.values.index(str(label))
        except ValueError:
            raise SchemaMismatchError(
                f"Unknown value {label!r} for attribute '{self.name}' "
                f"(declared: {', '.join(self.values)})"
            ) from None

    def check_index(self, index: int) -> None:
        """Raise SymbolOutOfRangeError unless 0 <= index < num_values."""
        if not 0 <= index < self.num_values:
            raise SymbolOutOfRangeError(
                f"Symbol index {index} out of range for attribute '{self.name}' "
                f"with {self.num_values} values"
            )

    def encode(self, value: Any) -> float:
        """
        Encode a raw value as a float.

        Args:
            value: Label or index (symbolic), number (numeric), or None/NaN

        Returns:
            Encoded value, NaN when missing
        """
        if is_missing(value):
            return math.nan

        if self.is_numeric:
            if isinstance(value, (str, bytes)) or not isinstance(value, numbers.Real):
                raise SchemaMismatchError(
                    f"Numeric attribute '{self.name}' got non-numeric value {value!r}"
                )
            if not math.isfinite(value):
                raise SchemaMismatchError(
                    f"Numeric attribute '{self.name}' got non-finite value {value!r}"
                )
            return float(value)

        if isinstance(value, str):
            return float(self.index_of(value))

        if isinstance(value, numbers.Real) and float(value).is_integer():
            index = int(value)
            self.check_index(index)
            return float(index)

        raise SchemaMismatchError(
            f"Symbolic attribute '{self.name}' got {value!r}; "
            f"expected a declared label or an integer index"
        )

    def describe(self) -> str:
        if self.is_symbolic:
            return f"{self.name} {{{','.join(self.values)}}}"
        return f"{self.name} numeric"


@dataclass(frozen=True)
class DatasetSchema:
    """
    Ordered attribute layout shared by a dataset and every model fitted on it.

    Example:
        >>> schema = DatasetSchema([
        ...     Attribute.symbolic("color", ["red", "green"]),
        ...     Attribute.numeric("width"),
        ... ])
        >>> schema.encode(["green", 2.5])
        array([1. , 2.5])
    """

    attributes: Tuple[Attribute, ...]

    def __post_init__(self):
        object.__setattr__(self, "attributes", tuple(self.attributes))
        names = [attr.name for attr in self.attributes]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate attribute names in schema: {names}")

    def __len__(self) -> int:
        return len(self.attributes)

    def __iter__(self) -> Iterator[Attribute]:
        return iter(self.attributes)

    def __getitem__(self, index: int) -> Attribute:
        return self.attributes[index]

    @property
    def names(self) -> List[str]:
        return [attr.name for attr in self.attributes]

    def index_of(self, name: str) -> int:
        """Get the position of an attribute by name."""
        for i, attr in enumerate(self.attributes):
            if attr.name == name:
                return i
        raise KeyError(f"No attribute named '{name}'")

    def symbolic_indices(self) -> List[int]:
        return [i for i, attr in enumerate(self.attributes) if attr.is_symbolic]

    def numeric_indices(self) -> List[int]:
        return [i for i, attr in enumerate(self.attributes) if attr.is_numeric]

    def encode(self, row: Sequence[Any]) -> np.ndarray:
        """
        Encode one raw row into a float vector (NaN = missing).

        Args:
            row: One value per attribute, in declaration order

        Returns:
            Float vector of length len(schema)
        """
        if len(row) != len(self.attributes):
            raise SchemaMismatchError(
                f"Row has {len(row)} values but schema declares "
                f"{len(self.attributes)} attributes"
            )
        return np.array(
            [attr.encode(value) for attr, value in zip(self.attributes, row)],
            dtype=float,
        )

    def check_matrix(self, values: np.ndarray) -> None:
        """
        Validate an encoded (n_instances, n_attributes) matrix against the schema.

        Symbolic columns must hold integral, in-range indices or NaN.
        Numeric columns must be finite or NaN.
        """
        if values.ndim != 2 or values.shape[1] != len(self.attributes):
            raise SchemaMismatchError(
                f"Expected a matrix with {len(self.attributes)} columns, "
                f"got shape {values.shape}"
            )

        for j in self.symbolic_indices():
            attr = self.attributes[j]
            column = values[:, j]
            present = column[~np.isnan(column)]
            if present.size == 0:
                continue
            if not np.all(np.mod(present, 1) == 0):
                raise SchemaMismatchError(
                    f"Symbolic attribute '{attr.name}' holds non-integral indices"
                )
            if present.min() < 0 or present.max() >= attr.num_values:
                bad = present[(present < 0) | (present >= attr.num_values)][0]
                attr.check_index(int(bad))

        for j in self.numeric_indices():
            if np.isinf(values[:, j]).any():
                raise SchemaMismatchError(
                    f"Numeric attribute '{self.attributes[j].name}' holds non-finite values"
                )

    def summary(self) -> Dict[str, int]:
        return {
            "attributes": len(self.attributes),
            "symbolic": len(self.symbolic_indices()),
            "numeric": len(self.numeric_indices()),
        }
