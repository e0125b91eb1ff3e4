from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Tuple


def new_id() -> str:
    """Return a fresh process-wide unique identifier."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Category:
    """Tax-rate-bearing grouping for line items.

    `color_tag` is an opaque string ("purple", "blue", ...); mapping it to an
    actual colour is left to whatever renders the category.
    """

    id: str
    name: str
    color_tag: str
    tax_rate_percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "colorTag": self.color_tag,
            "taxRatePercent": self.tax_rate_percent,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Category":
        return Category(
            id=str(data["id"]),
            name=str(data["name"]),
            color_tag=str(data.get("colorTag", "gray")),
            tax_rate_percent=float(data["taxRatePercent"]),
        )


@dataclass(frozen=True)
class LineItem:
    """Single cart entry. `category_id` may point at a category that no longer exists."""

    id: str
    name: str
    category_id: str
    unit_price: float
    quantity: int
    completed: bool = False

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    def toggled(self) -> "LineItem":
        return replace(self, completed=not self.completed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "categoryId": self.category_id,
            "unitPrice": self.unit_price,
            "quantity": self.quantity,
            "completed": self.completed,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "LineItem":
        quantity = data["quantity"]
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValueError(f"quantity must be an integer, got {quantity!r}")
        category_id = data["categoryId"]
        if not isinstance(category_id, str):
            raise ValueError(f"categoryId must be a string, got {category_id!r}")
        return LineItem(
            id=str(data["id"]),
            name=str(data["name"]),
            category_id=category_id,
            unit_price=float(data["unitPrice"]),
            quantity=quantity,
            completed=bool(data.get("completed", False)),
        )


@dataclass(frozen=True)
class CompletedList:
    """Immutable snapshot of a finished cart, stored in the history."""

    id: str
    completed_at: datetime
    items: Tuple[LineItem, ...] = field(default_factory=tuple)
    subtotal: float = 0.0
    tax_total: float = 0.0
    grand_total: float = 0.0

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "completedAt": self.completed_at.isoformat(),
            "items": [item.to_dict() for item in self.items],
            "subtotal": self.subtotal,
            "taxTotal": self.tax_total,
            "grandTotal": self.grand_total,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "CompletedList":
        completed_at = datetime.fromisoformat(str(data["completedAt"]))
        if completed_at.tzinfo is None:
            completed_at = completed_at.replace(tzinfo=timezone.utc)
        return CompletedList(
            id=str(data["id"]),
            completed_at=completed_at,
            items=tuple(LineItem.from_dict(item) for item in data["items"]),
            subtotal=float(data["subtotal"]),
            tax_total=float(data["taxTotal"]),
            grand_total=float(data["grandTotal"]),
        )
