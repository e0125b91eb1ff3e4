from shopping_store.storage.base import KeyValueStorage
from shopping_store.storage.json_storage import JsonFileStorage
from shopping_store.storage.memory_storage import MemoryStorage

__all__ = ["JsonFileStorage", "KeyValueStorage", "MemoryStorage"]
