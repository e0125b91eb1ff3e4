"""
Pure pricing functions: subtotals, per-category tax and grand totals.

Amounts keep full float precision; rounding to cents happens only in
format_money(), at presentation time.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from shopping_store.domain.models import Category, LineItem


@dataclass(frozen=True)
class CategoryGroup:
    """Items of one category together with their pre-tax subtotal."""
    category: Category
    items: Tuple[LineItem, ...]
    subtotal: float

    @property
    def tax(self) -> float:
        return self.subtotal * self.category.tax_rate_percent / 100.0


@dataclass(frozen=True)
class Receipt:
    items: Tuple[LineItem, ...]
    subtotal: float
    taxes: Tuple[Tuple[str, float], ...]
    tax_total: float
    grand_total: float


def subtotal_of(items: Iterable[LineItem]) -> float:
    """Sum of unit_price * quantity; 0.0 for no items."""
    return sum((item.unit_price * item.quantity for item in items), 0.0)


def group_by_category(
    items: Sequence[LineItem], categories: Sequence[Category]
) -> List[CategoryGroup]:
    """
    Group items by category, in category order.
    Categories without items are left out, and so are items whose
    category_id matches no category (see orphaned_items()).
    """
    groups: List[CategoryGroup] = []
    seen = set()
    for category in categories:
        if category.id in seen:
            continue
        seen.add(category.id)
        members = tuple(item for item in items if item.category_id == category.id)
        if not members:
            continue
        groups.append(CategoryGroup(category=category, items=members, subtotal=subtotal_of(members)))
    return groups


def orphaned_items(items: Sequence[LineItem], categories: Sequence[Category]) -> List[LineItem]:
    """Items whose category_id matches no known category."""
    known = {c.id for c in categories}
    return [item for item in items if item.category_id not in known]


def tax_breakdown(
    items: Sequence[LineItem], categories: Sequence[Category]
) -> List[Tuple[str, float]]:
    """(category name, tax amount) for every category that has items."""
    return [(g.category.name, g.tax) for g in group_by_category(items, categories)]


def total_tax(items: Sequence[LineItem], categories: Sequence[Category]) -> float:
    return sum((amount for _, amount in tax_breakdown(items, categories)), 0.0)


def grand_total(items: Sequence[LineItem], categories: Sequence[Category]) -> float:
    return subtotal_of(items) + total_tax(items, categories)


def build_receipt(items: Sequence[LineItem], categories: Sequence[Category]) -> Receipt:
    """Compute every checkout figure for `items` in one pass over the groups."""
    taxes = tuple(tax_breakdown(items, categories))
    subtotal = subtotal_of(items)
    tax_sum = sum((amount for _, amount in taxes), 0.0)
    return Receipt(
        items=tuple(items),
        subtotal=subtotal,
        taxes=taxes,
        tax_total=tax_sum,
        grand_total=subtotal + tax_sum,
    )


def format_money(value: float) -> str:
    """Render an amount rounded to cents, e.g. 1234.5 -> "$1,234.50"."""
    return f"${value:,.2f}"
