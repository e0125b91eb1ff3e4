import logging
from typing import Any, Callable, Dict, List, Sequence, TypeVar

from shopping_store.domain.models import Category, CompletedList, LineItem
from shopping_store.errors import PersistenceError
from shopping_store.storage.base import KeyValueStorage

logger = logging.getLogger(__name__)

CURRENT_ITEMS_KEY = "currentItems"
CATEGORIES_KEY = "categories"
HISTORY_KEY = "history"

T = TypeVar("T")


class ShoppingRepository:
    """Maps the three logical storage keys to domain collections.

    Each key holds a JSON array of records. A missing key loads as an empty
    list. Anything that is not an array of well-formed records raises
    PersistenceError naming the key and the offending index; nothing is
    silently dropped.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    def load_categories(self) -> List[Category]:
        return self._load_list(CATEGORIES_KEY, Category.from_dict)

    def load_cart(self) -> List[LineItem]:
        return self._load_list(CURRENT_ITEMS_KEY, LineItem.from_dict)

    def load_history(self) -> List[CompletedList]:
        return self._load_list(HISTORY_KEY, CompletedList.from_dict)

    def save_categories(self, categories: Sequence[Category]) -> None:
        self._save_list(CATEGORIES_KEY, [c.to_dict() for c in categories])

    def save_cart(self, items: Sequence[LineItem]) -> None:
        self._save_list(CURRENT_ITEMS_KEY, [i.to_dict() for i in items])

    def save_history(self, history: Sequence[CompletedList]) -> None:
        self._save_list(HISTORY_KEY, [h.to_dict() for h in history])

    def save_all(
        self,
        categories: Sequence[Category],
        cart: Sequence[LineItem],
        history: Sequence[CompletedList],
    ) -> None:
        """Persist every collection. The first failing key aborts the rest."""
        self.save_cart(cart)
        self.save_categories(categories)
        self.save_history(history)

    def _load_list(self, key: str, factory: Callable[[Dict[str, Any]], T]) -> List[T]:
        raw = self._storage.load(key)
        if raw is None:
            logger.debug("No stored value for %s; starting empty", key)
            return []

        if not isinstance(raw, list):
            logger.error("Stored value for %s is %s, expected a list", key, type(raw).__name__)
            raise PersistenceError(f"Stored value for '{key}' must be a list", key=key)

        records: List[T] = []
        for idx, rec in enumerate(raw):
            if not isinstance(rec, dict):
                raise PersistenceError(f"Record {idx} of '{key}' must be an object", key=key)
            try:
                records.append(factory(rec))
            except (KeyError, TypeError, ValueError) as exc:
                logger.error("Malformed record %d in %s: %r", idx, key, exc)
                raise PersistenceError(f"Malformed record {idx} in '{key}': {exc!r}", key=key) from exc

        logger.debug("Loaded %d records from %s", len(records), key)
        return records

    def _save_list(self, key: str, records: List[Dict[str, Any]]) -> None:
        self._storage.save(key, records)
        logger.debug("Saved %d records to %s", len(records), key)
