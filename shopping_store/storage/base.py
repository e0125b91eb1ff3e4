from abc import ABC, abstractmethod
from typing import Any, Optional


class KeyValueStorage(ABC):
    """Key/value persistence contract the store reads and writes through.

    Values are JSON-serializable structures. `load` returns None when the key
    has never been saved. Implementations raise PersistenceError for any
    serialization or I/O failure and never return partial data.
    """

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        raise NotImplementedError(f"{self.__class__.__name__}.save() not implemented")

    @abstractmethod
    def load(self, key: str) -> Optional[Any]:
        raise NotImplementedError(f"{self.__class__.__name__}.load() not implemented")
