from __future__ import annotations

import pytest

from shopping_store import pricing
from tests.conftest import make_category, make_item


@pytest.fixture
def categories():
    return [
        make_category("Food", 0.0, "food", "purple"),
        make_category("Cleaning", 8.875, "cleaning", "green"),
        make_category("Other", 8.875, "other", "gray"),
    ]


def test_subtotal_of_empty_is_zero():
    assert pricing.subtotal_of([]) == 0


def test_subtotal_multiplies_price_by_quantity():
    items = [make_item("food", 2.5, 4, "Eggs"), make_item("food", 1.25, 2, "Milk")]
    assert pricing.subtotal_of(items) == pytest.approx(12.5)


def test_checkout_example_figures():
    a = make_category("A", 8.875, "a")
    b = make_category("B", 0.0, "b")
    items = [make_item("a", 10.0, 2, "Soap"), make_item("b", 5.0, 1, "Bread")]

    assert pricing.subtotal_of(items) == pytest.approx(25.0)
    assert pricing.total_tax(items, [a, b]) == pytest.approx(1.775)
    assert pricing.grand_total(items, [a, b]) == pytest.approx(26.775)


def test_breakdown_follows_category_order_and_omits_empty_groups(categories):
    items = [make_item("other", 4.0, 1, "Batteries"), make_item("food", 3.0, 1, "Apples")]

    breakdown = pricing.tax_breakdown(items, categories)

    assert [name for name, _ in breakdown] == ["Food", "Other"]
    assert breakdown[0][1] == 0
    assert breakdown[1][1] == pytest.approx(4.0 * 8.875 / 100)


def test_unknown_category_gets_no_tax(categories):
    items = [make_item("gone", 100.0, 1, "Mystery"), make_item("cleaning", 10.0, 1, "Bleach")]

    breakdown = pricing.tax_breakdown(items, categories)

    assert [name for name, _ in breakdown] == ["Cleaning"]
    assert pricing.total_tax(items, categories) == pytest.approx(0.8875)
    # still part of the subtotal
    assert pricing.subtotal_of(items) == pytest.approx(110.0)
    assert [i.name for i in pricing.orphaned_items(items, categories)] == ["Mystery"]


def test_grand_total_identity(categories):
    items = [
        make_item("food", 3.99, 3, "Yogurt"),
        make_item("cleaning", 7.49, 2, "Sponges"),
        make_item("other", 0.99, 7, "Gum"),
        make_item("nowhere", 2.0, 1, "Orphan"),
    ]
    assert pricing.grand_total(items, categories) == (
        pricing.subtotal_of(items) + pricing.total_tax(items, categories)
    )


def test_group_by_category_subtotals(categories):
    items = [
        make_item("cleaning", 2.0, 3, "Cloth"),
        make_item("food", 1.0, 1, "Salt"),
        make_item("cleaning", 4.0, 1, "Soap"),
    ]

    groups = pricing.group_by_category(items, categories)

    assert [g.category.name for g in groups] == ["Food", "Cleaning"]
    assert [i.name for i in groups[1].items] == ["Cloth", "Soap"]
    assert groups[1].subtotal == pytest.approx(10.0)
    assert groups[1].tax == pytest.approx(0.8875)


def test_build_receipt_matches_individual_functions(categories):
    items = [make_item("cleaning", 12.0, 1, "Mop"), make_item("food", 6.0, 2, "Rice")]

    receipt = pricing.build_receipt(items, categories)

    assert receipt.subtotal == pricing.subtotal_of(items)
    assert list(receipt.taxes) == pricing.tax_breakdown(items, categories)
    assert receipt.tax_total == pytest.approx(pricing.total_tax(items, categories))
    assert receipt.grand_total == pytest.approx(pricing.grand_total(items, categories))
    assert receipt.items == tuple(items)


def test_no_rounding_before_presentation():
    cat = make_category("Tax", 8.875, "t")
    items = [make_item("t", 0.01, 1, "Penny")]

    assert pricing.total_tax(items, [cat]) == pytest.approx(0.0008875)
    assert pricing.format_money(pricing.total_tax(items, [cat])) == "$0.00"


def test_format_money():
    assert pricing.format_money(0) == "$0.00"
    assert pricing.format_money(1234.5) == "$1,234.50"
    assert pricing.format_money(25.0) == "$25.00"
