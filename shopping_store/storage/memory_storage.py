import json
import logging
from typing import Any, Dict, Optional

from shopping_store.errors import PersistenceError
from shopping_store.storage.base import KeyValueStorage

logger = logging.getLogger(__name__)


class MemoryStorage(KeyValueStorage):
    """In-process storage holding each value as JSON text.

    Encoding on save means values that could not be written to disk fail
    here too, and every load hands back a fresh copy.
    """

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def save(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            logger.error("memory_storage.save: value for %s is not serializable: %s", key, exc)
            raise PersistenceError(f"Cannot serialize value for key '{key}': {exc}", key=key) from exc
        logger.debug("memory_storage.save: stored %s", key)

    def load(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)
