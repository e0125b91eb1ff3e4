from typing import Optional


class ShoppingStoreError(Exception):
    """Base class for every error raised by the shopping store engine."""


class ValidationError(ShoppingStoreError):
    """Bad input to a mutation (empty name, negative price or tax, quantity < 1)."""


class EmptyCartError(ShoppingStoreError):
    """finish_list() was called while the cart holds no items."""


class PersistenceError(ShoppingStoreError):
    """Serialization or storage I/O failure.

    `key` names the logical collection involved when it is known.
    """

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key
