"""Key-value persistence used by the cart and the resolver caches."""

from .cache import TTLCache
from .kv import KeyValueStorage, MemoryStorage, RedisStorage, build_storage

__all__ = [
    "KeyValueStorage",
    "MemoryStorage",
    "RedisStorage",
    "TTLCache",
    "build_storage",
]
