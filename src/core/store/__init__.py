"""
Stores — явные контейнеры состояния, внедряемые в движки.

Каждый компонент владеет своими хранилищами; чужие он не читает.
"""

from .memory import AppendOnlyArena, InMemoryKeyValueStore, KeyValueStore

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "AppendOnlyArena",
]
