"""
Delivery layer: state persistence and the terminal front-end.

Components:
- KeyValueStore: load/save contract used by the tracker and optimizer
- MemoryStore / JsonFileStore / SqliteStore: store implementations
- cli: Rich/Typer command line (imported lazily by the entry point)
"""

from .state_store import JsonFileStore, KeyValueStore, MemoryStore, SqliteStore, StoreError

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "SqliteStore",
    "StoreError",
]
