# tests/conftest.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import pytest

from shopping_store.domain.models import Category, LineItem
from shopping_store.errors import PersistenceError
from shopping_store.config import StoreConfig
from shopping_store.logger import StoreLogger
from shopping_store.storage.memory_storage import MemoryStorage
from shopping_store.store import ShoppingStore

FIXED_NOW = datetime(2026, 2, 12, 18, 30, tzinfo=timezone.utc)


class FlakyStorage(MemoryStorage):
    """MemoryStorage whose saves can be switched to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_saves = False
        self.save_calls = 0

    def save(self, key: str, value: Any) -> None:
        self.save_calls += 1
        if self.fail_saves:
            raise PersistenceError(f"disk full while saving {key}", key=key)
        super().save(key, value)


@pytest.fixture
def tmp_data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def test_logger() -> logging.Logger:
    """
    Basic logger for tests, console only so nothing lands on disk.
    """
    return StoreLogger(StoreConfig(log_level="DEBUG"), name="test-logger").get_logger()


@pytest.fixture
def memory_storage() -> FlakyStorage:
    return FlakyStorage()


@pytest.fixture
def store(memory_storage: FlakyStorage, test_logger: logging.Logger) -> ShoppingStore:
    return ShoppingStore(memory_storage, logger=test_logger, clock=lambda: FIXED_NOW)


def make_category(
    name: str = "Cleaning",
    tax_rate_percent: float = 8.875,
    category_id: Optional[str] = None,
    color_tag: str = "green",
) -> Category:
    return Category(
        id=category_id or f"cat-{name.lower()}",
        name=name,
        color_tag=color_tag,
        tax_rate_percent=tax_rate_percent,
    )


def make_item(
    category_id: str,
    unit_price: float = 1.0,
    quantity: int = 1,
    name: str = "Milk",
    item_id: Optional[str] = None,
    completed: bool = False,
) -> LineItem:
    return LineItem(
        id=item_id or f"item-{name.lower()}-{category_id}",
        name=name,
        category_id=category_id,
        unit_price=unit_price,
        quantity=quantity,
        completed=completed,
    )
