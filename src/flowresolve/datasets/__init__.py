"""Dataset Store: versões append-only consultadas pelo resolver e escritas pelo executor."""

from .store import DatasetStore, DatasetVersion, InMemoryDatasetStore

__all__ = ["DatasetStore", "DatasetVersion", "InMemoryDatasetStore"]
