from .kv_store import JsonFileStorage, KeyValueStorage, MemoryStorage

__all__ = ["JsonFileStorage", "KeyValueStorage", "MemoryStorage"]
