"""
Dataset Loader for tabular clustering data.

Loads CSV files or pandas DataFrames into encoded Datasets. Attribute kinds
are inferred from column dtypes unless a schema is supplied, which is how
query data is brought into the layout of an already-fitted model.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Optional
import logging

import numpy as np
import pandas as pd

from clusterdensity.errors import SchemaMismatchError
from clusterdensity.ingest.dataset import Dataset
from clusterdensity.ingest.schema import Attribute, DatasetSchema

logger = logging.getLogger(__name__)


class DatasetLoader:
    """
    Loader for clustering datasets.

    Object, category and bool columns become symbolic attributes; numeric
    columns become numeric attributes. Empty cells become missing values.

    Example:
        >>> loader = DatasetLoader()
        >>> dataset = loader.load_csv("data/iris.csv", symbolic=["species"])
        >>> print(dataset.summary())
    """

    def __init__(self, base_path: Optional[Path] = None):
        """
        Initialize the dataset loader.

        Args:
            base_path: Optional base path for relative CSV paths.
                      If not provided, uses current working directory.
        """
        self.base_path = Path(base_path) if base_path else Path.cwd()

    def load_csv(
        self,
        path: str | Path,
        symbolic: Optional[Iterable[str]] = None,
        schema: Optional[DatasetSchema] = None,
    ) -> Dataset:
        """
        Load a CSV file into a Dataset.

        Args:
            path: CSV file, absolute or relative to base_path
            symbolic: Extra column names to treat as symbolic
            schema: Fixed schema to encode against instead of inferring one

        Returns:
            Encoded Dataset
        """
        csv_path = Path(path)
        if not csv_path.is_absolute():
            csv_path = self.base_path / csv_path

        logger.info(f"Loading dataset from {csv_path}")
        df = pd.read_csv(csv_path)
        return self.from_frame(df, symbolic=symbolic, schema=schema)

    def from_frame(
        self,
        df: pd.DataFrame,
        symbolic: Optional[Iterable[str]] = None,
        schema: Optional[DatasetSchema] = None,
    ) -> Dataset:
        """
        Convert a DataFrame into a Dataset.

        Args:
            df: Source frame, one row per instance
            symbolic: Extra column names to treat as symbolic
            schema: Fixed schema to encode against instead of inferring one

        Returns:
            Encoded Dataset
        """
        if schema is None:
            schema = self.infer_schema(df, symbolic=symbolic)

        missing_columns = [name for name in schema.names if name not in df.columns]
        if missing_columns:
            raise SchemaMismatchError(f"Frame is missing columns: {missing_columns}")

        columns = [self._encode_column(df[attr.name], attr) for attr in schema]
        if columns:
            values = np.column_stack(columns)
        else:
            values = np.empty((len(df), 0))

        dataset = Dataset(schema=schema, values=values)
        logger.info(f"Loaded {dataset}")
        return dataset

    def infer_schema(
        self,
        df: pd.DataFrame,
        symbolic: Optional[Iterable[str]] = None,
    ) -> DatasetSchema:
        """
        Infer attribute kinds and symbolic labels from a DataFrame.

        Categorical columns keep their category order; other symbolic columns
        use their sorted distinct values.
        """
        forced = set(symbolic or [])
        unknown = forced - set(df.columns)
        if unknown:
            raise KeyError(f"Columns not in frame: {sorted(unknown)}")

        attributes = []
        for name in df.columns:
            series = df[name]
            if name in forced or self._is_symbolic_dtype(series):
                attributes.append(Attribute.symbolic(str(name), self._labels(series)))
            elif pd.api.types.is_numeric_dtype(series):
                attributes.append(Attribute.numeric(str(name)))
            else:
                raise ValueError(
                    f"Column '{name}' has unsupported dtype {series.dtype}; "
                    f"list it in symbolic= or drop it"
                )

        schema = DatasetSchema(attributes)
        logger.debug(f"Inferred schema: {[attr.describe() for attr in schema]}")
        return schema

    @staticmethod
    def _is_symbolic_dtype(series: pd.Series) -> bool:
        return (
            isinstance(series.dtype, pd.CategoricalDtype)
            or pd.api.types.is_bool_dtype(series)
            or pd.api.types.is_object_dtype(series)
            or pd.api.types.is_string_dtype(series)
        )

    @staticmethod
    def _labels(series: pd.Series) -> list:
        if isinstance(series.dtype, pd.CategoricalDtype):
            return [str(c) for c in series.cat.categories]
        return sorted({str(v) for v in series.dropna().unique()})

    @staticmethod
    def _encode_column(series: pd.Series, attr: Attribute) -> np.ndarray:
        if attr.is_numeric:
            if not pd.api.types.is_numeric_dtype(series):
                raise SchemaMismatchError(
                    f"Numeric attribute '{attr.name}' got column of dtype {series.dtype}"
                )
            return series.to_numpy(dtype=float, na_value=np.nan)

        lookup: Dict[str, int] = {label: i for i, label in enumerate(attr.values)}

        def encode(value: Any) -> float:
            if pd.isna(value):
                return np.nan
            label = str(value)
            if label not in lookup:
                raise SchemaMismatchError(
                    f"Unknown value {label!r} for attribute '{attr.name}'"
                )
            return float(lookup[label])

        return np.array([encode(v) for v in series.tolist()], dtype=float)


def load_dataset(
    source: str | Path | pd.DataFrame,
    symbolic: Optional[Iterable[str]] = None,
    schema: Optional[DatasetSchema] = None,
) -> Dataset:
    """
    Convenience function to load a dataset.

    Args:
        source: CSV path or DataFrame
        symbolic: Extra column names to treat as symbolic
        schema: Fixed schema to encode against

    Returns:
        Loaded Dataset

    Example:
        >>> dataset = load_dataset("data/weather.csv", symbolic=["outlook"])
    """
    loader = DatasetLoader()
    if isinstance(source, pd.DataFrame):
        return loader.from_frame(source, symbolic=symbolic, schema=schema)
    return loader.load_csv(source, symbolic=symbolic, schema=schema)
