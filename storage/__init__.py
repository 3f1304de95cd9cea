"""
Storage Module
存储模块 - 凭证键值存储
"""
from .token_store import (
    BaseKeyValueStore,
    MemoryStore,
    JsonFileStore,
)

__all__ = [
    "BaseKeyValueStore",
    "MemoryStore",
    "JsonFileStore",
]
