"""Durable client storage backends."""

from .key_value import JsonFileStore, KeyValueStore, MemoryStore

__all__ = ['JsonFileStore', 'KeyValueStore', 'MemoryStore']
