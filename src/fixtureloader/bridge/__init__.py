"""
Integration seam with the tabular backend (pandas).

This package is the only place allowed to import pandas. Swapping the backend
means replacing these modules; ordering, filtering and loading stay untouched.
"""

from fixtureloader.bridge.adapters import PandasDatasetAdapter, PandasRowAdapter, PandasTableAdapter
from fixtureloader.bridge.readers import DatasetReader, DelimitedDatasetReader

__all__ = [
    "DatasetReader",
    "DelimitedDatasetReader",
    "PandasDatasetAdapter",
    "PandasRowAdapter",
    "PandasTableAdapter",
]
