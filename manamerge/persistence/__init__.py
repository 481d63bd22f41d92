"""Persistence: key/value stores, save records, offline catch-up."""

from manamerge.persistence.debounce import SaveDebouncer
from manamerge.persistence.offline import offline_reward
from manamerge.persistence.save import LoadedState, load, restore, save
from manamerge.persistence.store import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "JsonFileStore",
    "KeyValueStore",
    "LoadedState",
    "MemoryStore",
    "SaveDebouncer",
    "load",
    "offline_reward",
    "restore",
    "save",
]
