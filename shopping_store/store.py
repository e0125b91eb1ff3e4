from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Set, Tuple

from shopping_store import pricing
from shopping_store.logger import store_context
from shopping_store.domain.defaults import default_categories
from shopping_store.domain.models import Category, CompletedList, LineItem, new_id, utc_now
from shopping_store.errors import EmptyCartError, PersistenceError
from shopping_store.repository import ShoppingRepository
from shopping_store.storage.base import KeyValueStorage
from shopping_store.validator import InputValidator

Listener = Callable[["ShoppingStore"], None]


class ShoppingStore:
    """State manager for categories, the cart and the shopping history.

    Every mutation follows the same path: validate input, apply the change
    in memory, save all three collections through the repository, then
    notify subscribers. Operations run to completion synchronously, so no
    observer ever sees a half-applied change.

    Persistence failures do not roll back memory. The new in-memory state
    stays authoritative, subscribers are still notified, and the
    PersistenceError is raised to the caller. The store remembers it has
    unsaved changes and retries the full save on the next mutation or on
    flush().

    The store is not safe for concurrent mutation. Callers sharing one
    instance between threads must serialize access themselves.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        logger: Optional[logging.Logger] = None,
        validator: Optional[InputValidator] = None,
        default_color_tag: str = "orange",
        clock: Callable = utc_now,
        id_factory: Callable[[], str] = new_id,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self._repository = ShoppingRepository(storage)
        self._validator = validator or InputValidator()
        self._default_color_tag = default_color_tag
        self._clock = clock
        self._new_id = id_factory

        self._listeners: List[Listener] = []
        self._dirty = False
        self.last_persistence_error: Optional[PersistenceError] = None

        self._categories: List[Category] = self._repository.load_categories()
        self._cart: List[LineItem] = self._repository.load_cart()
        self._history: List[CompletedList] = self._repository.load_history()
        self.logger.info(
            "Loaded store: %d categories, %d cart items, %d history entries",
            len(self._categories), len(self._cart), len(self._history),
        )

        if not self._categories:
            self._categories = default_categories()
            self.logger.info("No categories found; seeded %d defaults", len(self._categories))
            try:
                self._persist()
            except PersistenceError:
                # Kept in memory; retried by the next mutation or flush()
                pass

    # ---------- Published state ----------
    @property
    def categories(self) -> Tuple[Category, ...]:
        return tuple(self._categories)

    @property
    def cart(self) -> Tuple[LineItem, ...]:
        return tuple(self._cart)

    @property
    def history(self) -> Tuple[CompletedList, ...]:
        """Completed lists, most recent first."""
        return tuple(self._history)

    @property
    def has_unsaved_changes(self) -> bool:
        return self._dirty

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener` to be called with the store after each mutation.

        Returns a callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---------- Queries ----------
    def find_category(self, category_id: str) -> Optional[Category]:
        for category in self._categories:
            if category.id == category_id:
                return category
        return None

    def grouped_cart(self) -> List[pricing.CategoryGroup]:
        return pricing.group_by_category(self._cart, self._categories)

    def receipt(self) -> pricing.Receipt:
        """Checkout figures for the current cart."""
        return pricing.build_receipt(self._cart, self._categories)

    # ---------- Cart ----------
    def add_item(self, name: str, unit_price: float, quantity: int, category_id: str) -> LineItem:
        clean_name, price, qty, category_id = self._validator.validate_item(
            name, unit_price, quantity, category_id
        )
        item = LineItem(
            id=self._new_id(),
            name=clean_name,
            category_id=category_id,
            unit_price=price,
            quantity=qty,
            completed=False,
        )
        self._cart.append(item)
        context = store_context("add_item", item_id=item.id, category_id=category_id)
        if self.find_category(category_id) is None:
            self.logger.warning("Item %s references unknown category %s", item.id, category_id, extra=context)
        self.logger.info("Added item %s (%s x%d)", item.id, item.name, item.quantity, extra=context)
        self._commit("add_item")
        return item

    def toggle_item(self, item_id: str) -> Optional[LineItem]:
        """Flip `completed` on a cart item. Unknown ids are a silent no-op returning None."""
        for idx, item in enumerate(self._cart):
            if item.id == item_id:
                updated = item.toggled()
                self._cart[idx] = updated
                self.logger.info(
                    "Toggled item %s -> completed=%s", item_id, updated.completed,
                    extra=store_context("toggle_item", item_id=item_id),
                )
                self._commit("toggle_item")
                return updated
        self.logger.debug("toggle_item: no cart item with id %s", item_id)
        return None

    def delete_items(self, item_ids: Iterable[str], category_id: str) -> int:
        """Remove cart items whose id is in `item_ids` and whose category is `category_id`.

        Returns the number of items removed. A single id may be passed as a plain string.
        """
        targets = _id_set(item_ids)
        kept = [
            item for item in self._cart
            if not (item.id in targets and item.category_id == category_id)
        ]
        removed = len(self._cart) - len(kept)
        self._cart = kept
        self.logger.info(
            "Deleted %d item(s) from category %s", removed, category_id,
            extra=store_context("delete_items", category_id=category_id, count=removed),
        )
        self._commit("delete_items")
        return removed

    # ---------- Categories ----------
    def add_category(self, name: str, tax_rate_percent: float, color_tag: Optional[str] = None) -> Category:
        clean_name, rate = self._validator.validate_category(name, tax_rate_percent)
        category = Category(
            id=self._new_id(),
            name=clean_name,
            color_tag=color_tag or self._default_color_tag,
            tax_rate_percent=rate,
        )
        self._categories.append(category)
        self.logger.info(
            "Added category %s (%s, %.3f%%)", category.id, category.name, rate,
            extra=store_context("add_category", category_id=category.id),
        )
        self._commit("add_category")
        return category

    # ---------- Checkout & history ----------
    def finish_list(self) -> CompletedList:
        """Move the whole cart into a new history entry at index 0.

        Raises EmptyCartError, without touching any state, when the cart is empty.
        """
        if not self._cart:
            raise EmptyCartError("Cannot finish an empty shopping list")

        receipt = pricing.build_receipt(self._cart, self._categories)
        entry = CompletedList(
            id=self._new_id(),
            completed_at=self._clock(),
            items=tuple(self._cart),
            subtotal=receipt.subtotal,
            tax_total=receipt.tax_total,
            grand_total=receipt.grand_total,
        )
        self._history.insert(0, entry)
        self._cart = []
        self.logger.info(
            "Finished list %s: %d items, subtotal=%r tax=%r total=%r",
            entry.id, len(entry.items), entry.subtotal, entry.tax_total, entry.grand_total,
            extra=store_context("finish_list", entry_id=entry.id, count=len(entry.items)),
        )
        self._commit("finish_list")
        return entry

    def clear_history(self) -> None:
        count = len(self._history)
        self._history = []
        self.logger.info("Cleared %d history entries", count, extra=store_context("clear_history", count=count))
        self._commit("clear_history")

    def delete_history_entries(self, ids: Iterable[str]) -> int:
        targets = _id_set(ids)
        kept = [entry for entry in self._history if entry.id not in targets]
        removed = len(self._history) - len(kept)
        self._history = kept
        self.logger.info(
            "Deleted %d history entries", removed,
            extra=store_context("delete_history_entries", count=removed),
        )
        self._commit("delete_history_entries")
        return removed

    # ---------- Persistence ----------
    def flush(self) -> None:
        """Retry saving state left unsaved by an earlier PersistenceError."""
        if self._dirty:
            self._persist()

    def _persist(self) -> None:
        try:
            self._repository.save_all(self._categories, self._cart, self._history)
        except PersistenceError as exc:
            self._dirty = True
            self.last_persistence_error = exc
            self.logger.error(
                "Failed to persist store state: %s", exc,
                extra=store_context("persist", storage_key=exc.key),
            )
            raise
        if self._dirty:
            self.logger.info("Unsaved changes persisted")
        self._dirty = False
        self.last_persistence_error = None

    def _commit(self, action: str) -> None:
        error: Optional[PersistenceError] = None
        try:
            self._persist()
        except PersistenceError as exc:
            error = exc
        self._publish(action)
        if error is not None:
            raise error

    def _publish(self, action: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                self.logger.exception("State listener failed after %s", action, extra=store_context(action))


def _id_set(ids: Iterable[str]) -> Set[str]:
    if isinstance(ids, str):
        return {ids}
    return set(ids)
