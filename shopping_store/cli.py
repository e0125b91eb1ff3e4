from __future__ import annotations

import argparse
import dataclasses
import signal
from typing import List, Optional

from dotenv import load_dotenv

from shopping_store.adapters.console import ConsolePrinter
from shopping_store.config import StoreConfig
from shopping_store.domain.models import Category
from shopping_store.errors import EmptyCartError, ShoppingStoreError
from shopping_store.logger import StoreLogger
from shopping_store.store import ShoppingStore
from shopping_store.storage.json_storage import JsonFileStorage


def _handle_sigint(signum, frame) -> None:
    print("\n[INTERRUPTED] shopping-store terminated by user (Ctrl+C).")
    raise SystemExit(130)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shopping-store",
        description="Shopping list with per-category tax and trip history",
    )
    parser.add_argument("--config", type=str, default=None, help="Path to a JSON config file.")
    parser.add_argument("--data-dir", type=str, default=None, help="Directory holding the JSON data files.")

    sub = parser.add_subparsers(dest="command", required=True)

    # --------------------
    # items
    # --------------------
    items_p = sub.add_parser("items", help="Manage the current shopping list")
    items_sub = items_p.add_subparsers(dest="action", required=True)
    items_sub.add_parser("list", help="Show the list grouped by category")

    add_p = items_sub.add_parser("add", help="Add an item")
    add_p.add_argument("name", type=str)
    add_p.add_argument("price", type=float, help="Unit price")
    add_p.add_argument("--qty", type=int, default=1, help="Quantity (default 1)")
    add_p.add_argument("--category", type=str, default=None, help="Category id or name. Default: first category.")

    toggle_p = items_sub.add_parser("toggle", help="Mark an item done / not done")
    toggle_p.add_argument("item_id", type=str)

    del_p = items_sub.add_parser("delete", help="Delete items from one category")
    del_p.add_argument("--category", type=str, required=True, help="Category id or name")
    del_p.add_argument("item_ids", nargs="+")

    # --------------------
    # categories
    # --------------------
    cat_p = sub.add_parser("categories", help="Manage categories")
    cat_sub = cat_p.add_subparsers(dest="action", required=True)
    cat_sub.add_parser("list", help="List categories")
    cat_add = cat_sub.add_parser("add", help="Add a category")
    cat_add.add_argument("name", type=str)
    cat_add.add_argument("tax", type=float, help="Tax rate in percent, e.g. 8.875")
    cat_add.add_argument("--color", type=str, default=None)

    # --------------------
    # checkout & history
    # --------------------
    sub.add_parser("receipt", help="Show the receipt for the current list")
    sub.add_parser("finish", help="Finish the list and move it to history")

    hist_p = sub.add_parser("history", help="Completed lists")
    hist_sub = hist_p.add_subparsers(dest="action", required=True)
    hist_sub.add_parser("list", help="List completed lists")
    hist_sub.add_parser("clear", help="Delete the whole history")
    hist_del = hist_sub.add_parser("delete", help="Delete history entries")
    hist_del.add_argument("entry_ids", nargs="+")

    return parser


def _load_config(args: argparse.Namespace) -> StoreConfig:
    config = StoreConfig.from_file(args.config) if args.config else StoreConfig.from_env()
    if args.data_dir:
        config = dataclasses.replace(config, data_dir=args.data_dir)
    return config


def resolve_category(store: ShoppingStore, ref: Optional[str]) -> Optional[Category]:
    """Find a category by id, then by case-insensitive name. None ref means the first category."""
    if ref is None:
        return store.categories[0] if store.categories else None
    found = store.find_category(ref)
    if found is not None:
        return found
    for category in store.categories:
        if category.name.lower() == ref.lower():
            return category
    return None


def _dispatch(args: argparse.Namespace, store: ShoppingStore, printer: ConsolePrinter) -> int:
    if args.command == "items":
        if args.action == "list":
            printer.print_cart(store)
        elif args.action == "add":
            category = resolve_category(store, args.category)
            if category is None:
                printer.print_error(f"Unknown category: {args.category}")
                return 2
            item = store.add_item(args.name, args.price, args.qty, category.id)
            printer.print_info(f"Added {item.name} to {category.name} ({item.id})")
        elif args.action == "toggle":
            item = store.toggle_item(args.item_id)
            if item is None:
                printer.print_info(f"No item with id {args.item_id}; nothing changed")
            else:
                printer.print_info(f"{item.name}: {'done' if item.completed else 'not done'}")
        elif args.action == "delete":
            category = resolve_category(store, args.category)
            if category is None:
                printer.print_error(f"Unknown category: {args.category}")
                return 2
            removed = store.delete_items(args.item_ids, category.id)
            printer.print_info(f"Deleted {removed} item(s) from {category.name}")

    elif args.command == "categories":
        if args.action == "list":
            printer.print_categories(store.categories)
        elif args.action == "add":
            category = store.add_category(args.name, args.tax, args.color)
            printer.print_info(f"Added category {category.name} ({category.id})")

    elif args.command == "receipt":
        printer.print_receipt(store.receipt())

    elif args.command == "finish":
        printer.print_receipt(store.receipt())
        entry = store.finish_list()
        printer.print_info(f"List saved to history ({entry.id})")

    elif args.command == "history":
        if args.action == "list":
            printer.print_history(store.history)
        elif args.action == "clear":
            store.clear_history()
            printer.print_info("History cleared")
        elif args.action == "delete":
            removed = store.delete_history_entries(args.entry_ids)
            printer.print_info(f"Deleted {removed} history entr{'y' if removed == 1 else 'ies'}")

    return 0


def main(argv: Optional[List[str]] = None, printer: Optional[ConsolePrinter] = None) -> int:
    signal.signal(signal.SIGINT, _handle_sigint)

    load_dotenv()

    args = _build_parser().parse_args(argv)
    printer = printer or ConsolePrinter()

    try:
        config = _load_config(args)
    except (OSError, ValueError) as exc:
        printer.print_error(f"Invalid configuration: {exc}")
        return 2

    logger = StoreLogger(config, console=False).get_logger()

    storage = JsonFileStorage(config.data_dir, indent=config.json_indent, temp_suffix=config.temp_suffix)

    try:
        store = ShoppingStore(storage, logger=logger, default_color_tag=config.default_color_tag)
        return _dispatch(args, store, printer)
    except EmptyCartError as exc:
        printer.print_error(str(exc))
        return 1
    except ShoppingStoreError as exc:
        printer.print_error(f"{type(exc).__name__}: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
