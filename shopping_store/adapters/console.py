from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from shopping_store import pricing
from shopping_store.domain.models import Category, CompletedList
from shopping_store.store import ShoppingStore

# Colour tags outside this map are rendered in the default style
COLOR_STYLES = {
    "purple": "magenta",
    "blue": "blue",
    "green": "green",
    "orange": "dark_orange",
    "red": "red",
    "gray": "grey50",
}


def style_for(color_tag: str) -> str:
    return COLOR_STYLES.get(color_tag, "grey50")


class ConsolePrinter:
    """Render store state to a terminal with rich."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self._logger: logging.Logger = logging.getLogger(__name__)

    def print_info(self, message: str) -> None:
        self.console.print(f"[green]{message}[/green]")
        self._logger.info(message)

    def print_error(self, message: str) -> None:
        self.console.print(f"[bold red]ERROR:[/bold red] {message}")
        self._logger.error(message)

    def print_categories(self, categories: Sequence[Category]) -> None:
        table = Table(title="Categories")
        table.add_column("id", style="dim")
        table.add_column("name")
        table.add_column("tax %", justify="right")
        for c in categories:
            table.add_row(c.id, f"[{style_for(c.color_tag)}]{c.name}[/]", f"{c.tax_rate_percent:g}")
        self.console.print(table)

    def print_cart(self, store: ShoppingStore) -> None:
        """Grouped shopping list: one section per category with its subtotal."""
        if not store.cart:
            self.console.print("[italic dim]No items yet[/italic dim]")
            return

        table = Table(title="Shopping List", show_lines=False)
        table.add_column("", width=1)
        table.add_column("item")
        table.add_column("qty x price", justify="right")
        table.add_column("total", justify="right")
        table.add_column("id", style="dim")

        for group in store.grouped_cart():
            style = style_for(group.category.color_tag)
            table.add_row(
                "", f"[bold {style}]{group.category.name}[/]", "",
                f"[bold {style}]{pricing.format_money(group.subtotal)}[/]", "",
            )
            for item in group.items:
                mark = "[green]x[/green]" if item.completed else " "
                name = f"[strike dim]{item.name}[/]" if item.completed else item.name
                table.add_row(
                    mark, name,
                    f"{item.quantity} x {pricing.format_money(item.unit_price)}",
                    pricing.format_money(item.line_total), item.id,
                )

        orphans = pricing.orphaned_items(store.cart, store.categories)
        if orphans:
            table.add_row("", "[bold]Uncategorized[/bold]", "", "", "")
            for item in orphans:
                table.add_row(
                    " ", item.name,
                    f"{item.quantity} x {pricing.format_money(item.unit_price)}",
                    pricing.format_money(item.line_total), item.id,
                )

        self.console.print(table)

    def print_receipt(self, receipt: pricing.Receipt) -> None:
        if not receipt.items:
            self.console.print(Panel("[italic]No items yet[/italic]", title="RECEIPT"))
            return

        table = Table.grid(padding=(0, 2))
        table.add_column()
        table.add_column(justify="right")
        for item in receipt.items:
            table.add_row(f"{item.quantity} x {item.name}", pricing.format_money(item.line_total))
        table.add_row("", "")
        table.add_row("Subtotal", pricing.format_money(receipt.subtotal))
        for name, amount in receipt.taxes:
            table.add_row(f"[dim]Tax ({name})[/dim]", f"[dim]{pricing.format_money(amount)}[/dim]")
        table.add_row("[bold]TOTAL[/bold]", f"[bold]{pricing.format_money(receipt.grand_total)}[/bold]")
        self.console.print(Panel(table, title="RECEIPT", border_style="white"))

    def print_history(self, history: Sequence[CompletedList]) -> None:
        if not history:
            self.console.print("[italic dim]History is empty[/italic dim]")
            return
        table = Table(title="History")
        table.add_column("date")
        table.add_column("items", justify="right")
        table.add_column("tax", justify="right")
        table.add_column("total", justify="right")
        table.add_column("id", style="dim")
        for entry in history:
            table.add_row(
                entry.completed_at.strftime("%Y-%m-%d %H:%M"),
                str(entry.item_count),
                pricing.format_money(entry.tax_total),
                pricing.format_money(entry.grand_total),
                entry.id,
            )
        self.console.print(table)

    def follow(self, store: ShoppingStore) -> Callable[[], None]:
        """Re-render the cart after every store change. Returns the unsubscribe callable."""
        return store.subscribe(self.print_cart)
