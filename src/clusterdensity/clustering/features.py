"""
Feature Encoding for distance-based clusterers.

Turns a Dataset with symbolic and numeric attributes (and missing values)
into a dense real-valued matrix that scikit-learn clusterers accept.
"""

from __future__ import annotations

from typing import List, Optional
import logging

import numpy as np
from sklearn.preprocessing import StandardScaler

from clusterdensity.errors import ModelNotFittedError, SchemaMismatchError
from clusterdensity.ingest import Dataset, DatasetSchema

logger = logging.getLogger(__name__)


class FeatureEncoder:
    """
    Encode datasets as dense feature matrices.

    - Numeric attributes pass through; missing values take the training mean
    - Symbolic attributes are one-hot encoded; missing values encode as all zeros
    - Optionally standardized with StandardScaler

    Example:
        >>> encoder = FeatureEncoder()
        >>> X = encoder.fit_transform(dataset)
        >>> x = encoder.transform_values(dataset.instance(0).values)
    """

    def __init__(self, normalize: bool = True):
        """
        Initialize the feature encoder.

        Args:
            normalize: Whether to normalize features (StandardScaler)
        """
        self.normalize = normalize
        self._schema: Optional[DatasetSchema] = None
        self._means: Optional[np.ndarray] = None
        self._scaler: Optional[StandardScaler] = None

    @property
    def is_fitted(self) -> bool:
        return self._schema is not None

    def fit(self, dataset: Dataset) -> FeatureEncoder:
        """Learn imputation means (and scaling) from a training dataset."""
        means = np.zeros(dataset.num_attributes)
        for j in dataset.schema.numeric_indices():
            column = dataset.column(j)
            present = column[~np.isnan(column)]
            means[j] = present.mean() if present.size else 0.0

        scaler = None
        if self.normalize and len(dataset):
            scaler = StandardScaler()
            scaler.fit(self._encode(dataset.values, dataset.schema, means))

        self._schema = dataset.schema
        self._means = means
        self._scaler = scaler

        logger.debug(f"Encoder fitted: {len(self.feature_names)} features")
        return self

    def transform(self, dataset: Dataset) -> np.ndarray:
        """Encode a dataset with the fitted layout."""
        self._check_fitted()
        if dataset.schema != self._schema:
            raise SchemaMismatchError("Dataset schema differs from the encoder's training schema")
        return self._scale(self._encode(dataset.values, self._schema, self._means))

    def transform_values(self, values: np.ndarray) -> np.ndarray:
        """Encode a single instance's value vector into a (1, n_features) row."""
        self._check_fitted()
        row = np.asarray(values, dtype=float).reshape(1, -1)
        if row.shape[1] != len(self._schema):
            raise SchemaMismatchError(
                f"Instance has {row.shape[1]} values, expected {len(self._schema)}"
            )
        self._schema.check_matrix(row)
        return self._scale(self._encode(row, self._schema, self._means))

    def fit_transform(self, dataset: Dataset) -> np.ndarray:
        return self.fit(dataset).transform(dataset)

    @property
    def feature_names(self) -> List[str]:
        """Encoded column names, e.g. "width" or "color=red"."""
        self._check_fitted()
        names = []
        for attr in self._schema:
            if attr.is_symbolic:
                names.extend(f"{attr.name}={label}" for label in attr.values)
            else:
                names.append(attr.name)
        return names

    @staticmethod
    def _encode(values: np.ndarray, schema: DatasetSchema, means: np.ndarray) -> np.ndarray:
        blocks = []
        for j, attr in enumerate(schema):
            column = values[:, j]
            missing = np.isnan(column)
            if attr.is_symbolic:
                block = np.zeros((len(column), attr.num_values))
                rows = np.flatnonzero(~missing)
                block[rows, column[rows].astype(int)] = 1.0
            else:
                block = np.where(missing, means[j], column).reshape(-1, 1)
            blocks.append(block)
        if not blocks:
            return np.empty((values.shape[0], 0))
        return np.hstack(blocks)

    def _scale(self, X: np.ndarray) -> np.ndarray:
        if self._scaler is not None:
            return self._scaler.transform(X)
        return X

    def _check_fitted(self) -> None:
        if not self.is_fitted:
            raise ModelNotFittedError("FeatureEncoder has not been fitted")
