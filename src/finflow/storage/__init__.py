"""Persistence module."""
from .kv import KeyValueStore, MemoryKeyValueStore, JsonFileKeyValueStore
from .store import TransactionStore

__all__ = ["KeyValueStore", "MemoryKeyValueStore", "JsonFileKeyValueStore", "TransactionStore"]
