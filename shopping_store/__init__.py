from shopping_store.domain.models import Category, CompletedList, LineItem
from shopping_store.errors import (
    EmptyCartError,
    PersistenceError,
    ShoppingStoreError,
    ValidationError,
)
from shopping_store.store import ShoppingStore

__all__ = [
    "Category",
    "CompletedList",
    "EmptyCartError",
    "LineItem",
    "PersistenceError",
    "ShoppingStore",
    "ShoppingStoreError",
    "ValidationError",
]
