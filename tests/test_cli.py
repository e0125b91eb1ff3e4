from __future__ import annotations

import json

import pytest
from rich.console import Console

from shopping_store.adapters.console import ConsolePrinter
from shopping_store.cli import main


@pytest.fixture
def printer() -> ConsolePrinter:
    return ConsolePrinter(Console(record=True, width=140, color_system=None))


def _run(tmp_data_dir, printer, *args) -> int:
    return main(["--data-dir", str(tmp_data_dir), *args], printer=printer)


def _output(printer: ConsolePrinter) -> str:
    return printer.console.export_text()


def test_first_run_lists_default_categories(tmp_data_dir, printer):
    assert _run(tmp_data_dir, printer, "categories", "list") == 0

    out = _output(printer)
    for name in ("Food", "Medication", "Cleaning", "Other"):
        assert name in out
    assert (tmp_data_dir / "categories.json").exists()


def test_add_items_and_show_receipt(tmp_data_dir, printer):
    assert _run(tmp_data_dir, printer, "items", "add", "Soap", "10", "--qty", "2", "--category", "cleaning") == 0
    assert _run(tmp_data_dir, printer, "items", "add", "Bread", "5") == 0
    assert _run(tmp_data_dir, printer, "receipt") == 0

    out = _output(printer)
    assert "Subtotal" in out
    assert "$25.00" in out
    assert "Tax (Cleaning)" in out
    assert "Tax (Food)" in out


def test_finish_moves_cart_to_history(tmp_data_dir, printer):
    _run(tmp_data_dir, printer, "items", "add", "Milk", "1.5", "--qty", "2")

    assert _run(tmp_data_dir, printer, "finish") == 0
    assert _run(tmp_data_dir, printer, "history", "list") == 0

    history = json.loads((tmp_data_dir / "history.json").read_text(encoding="utf-8"))
    assert len(history) == 1
    assert history[0]["subtotal"] == 3.0
    assert json.loads((tmp_data_dir / "currentItems.json").read_text(encoding="utf-8")) == []
    assert "$3.00" in _output(printer)


def test_finish_empty_cart_exits_with_error(tmp_data_dir, printer):
    assert _run(tmp_data_dir, printer, "finish") == 1
    assert "Cannot finish an empty shopping list" in _output(printer)


def test_validation_error_exits_with_error(tmp_data_dir, printer):
    assert _run(tmp_data_dir, printer, "items", "add", "Milk", "-1") == 1
    assert "ValidationError" in _output(printer)


def test_unknown_category_is_rejected(tmp_data_dir, printer):
    assert _run(tmp_data_dir, printer, "items", "add", "Milk", "1", "--category", "Toys") == 2
    assert "Unknown category: Toys" in _output(printer)


def test_toggle_and_delete_by_category(tmp_data_dir, printer):
    _run(tmp_data_dir, printer, "items", "add", "Milk", "1")
    item_id = json.loads((tmp_data_dir / "currentItems.json").read_text(encoding="utf-8"))[0]["id"]

    assert _run(tmp_data_dir, printer, "items", "toggle", item_id) == 0
    items = json.loads((tmp_data_dir / "currentItems.json").read_text(encoding="utf-8"))
    assert items[0]["completed"] is True

    # wrong category leaves the item alone
    assert _run(tmp_data_dir, printer, "items", "delete", "--category", "Other", item_id) == 0
    assert len(json.loads((tmp_data_dir / "currentItems.json").read_text(encoding="utf-8"))) == 1

    assert _run(tmp_data_dir, printer, "items", "delete", "--category", "Food", item_id) == 0
    assert json.loads((tmp_data_dir / "currentItems.json").read_text(encoding="utf-8")) == []


def test_add_category_then_clear_history(tmp_data_dir, printer):
    assert _run(tmp_data_dir, printer, "categories", "add", "Pets", "4.5", "--color", "red") == 0
    categories = json.loads((tmp_data_dir / "categories.json").read_text(encoding="utf-8"))
    assert categories[-1]["name"] == "Pets"
    assert categories[-1]["colorTag"] == "red"

    _run(tmp_data_dir, printer, "items", "add", "Kibble", "20", "--category", "Pets")
    _run(tmp_data_dir, printer, "finish")
    assert _run(tmp_data_dir, printer, "history", "clear") == 0
    assert json.loads((tmp_data_dir / "history.json").read_text(encoding="utf-8")) == []


def test_bad_config_file(tmp_path, printer):
    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps({"log_level": "LOUD"}), encoding="utf-8")

    assert main(["--config", str(cfg), "receipt"], printer=printer) == 2
    assert "Invalid configuration" in _output(printer)
