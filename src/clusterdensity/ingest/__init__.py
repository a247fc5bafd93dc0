"""
clusterdensity Ingest Module

Data model and loading for clustering datasets.

Key components:
- Attribute / DatasetSchema: Symbolic and numeric attribute layout
- Instance / Dataset: Encoded values, NaN marks missing
- DatasetLoader: Load CSV files and DataFrames
"""

from clusterdensity.ingest.schema import (
    Attribute,
    AttributeKind,
    DatasetSchema,
    is_missing,
)
from clusterdensity.ingest.dataset import Dataset, Instance
from clusterdensity.ingest.loader import DatasetLoader, load_dataset

__all__ = [
    "Attribute",
    "AttributeKind",
    "DatasetSchema",
    "is_missing",
    "Dataset",
    "Instance",
    "DatasetLoader",
    "load_dataset",
]
