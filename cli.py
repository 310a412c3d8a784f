# cli.py - interactive inventory console
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from inventory.config import settings
from sdk.inventory_client import InventoryClient

console = Console()
c = InventoryClient(base_url=settings.api_url)

LOW_STOCK = settings.low_stock_threshold
SORT_CHOICES = ["none", "quantity_asc", "quantity_desc"]

status_message = "Ready"
product_cache: List[Dict[str, Any]] = []

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def _qty_cell(qty: Any) -> str:
    qty = qty if qty is not None else 0
    if qty < LOW_STOCK:
        return f"[bold red]{qty}[/bold red]"
    return str(qty)


def show_products(products: List[Dict[str, Any]], title: str = "📦 Inventory"):
    if not products:
        console.print("[italic yellow]No products[/italic yellow]")
        return

    table = Table(
        title=f"{title} ({len(products)})",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=12)
    table.add_column("Name", style="bold", width=20)
    table.add_column("Category", width=14)
    table.add_column("Qty", justify="right", width=6)
    table.add_column("Location", width=12)
    table.add_column("Supplier", width=14)
    table.add_column("Updated", style="dim", width=24)

    for p in products:
        table.add_row(
            str(p.get("id", "N/A")),
            p.get("name") or "",
            p.get("category") or "",
            _qty_cell(p.get("quantity")),
            p.get("location") or "",
            p.get("supplier") or "",
            p.get("updatedDate") or "",
        )
    console.print(table)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    Returns the result, or None after printing the error.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except Exception as e:
        status_message = f"Error: {e}"
        console.print(show_status(f"Error: {e}", False))
        return None


def refresh_cache():
    global product_cache
    product_cache = try_api(c.list_products) or []


def get_product_completer():
    if not product_cache:
        refresh_cache()
    ids = [str(p.get("id", "")) for p in product_cache]
    return WordCompleter([i for i in ids if i], ignore_case=True)


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "📦 Inventory Tracker",
        f"[bold blue]{c.base_url}[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_product_fields(current: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    current = current or {}
    return {
        "name": prompt_with_autocomplete("Name", default=current.get("name") or "").strip(),
        "category": prompt_with_autocomplete("Category", default=current.get("category") or "").strip(),
        "quantity": IntPrompt.ask("Quantity", default=current.get("quantity") or 0),
        "location": prompt_with_autocomplete("Location", default=current.get("location") or "").strip(),
        "supplier": prompt_with_autocomplete("Supplier", default=current.get("supplier") or "").strip(),
    }


# ---------------------------
# Main menu
# ---------------------------
def menu():
    console.clear()
    console.print(create_header())
    refresh_cache()

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "5", "✏️ Edit product"),
            ("2", "🔍 Search / sort", "6", "🗑️ Delete product"),
            ("3", "➕ Add product", "7", "💾 Export to file"),
            ("4", "ℹ️ Get product by ID", "8", f"⚠️ Low stock (<{LOW_STOCK})"),
            ("", "", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 9)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            products = try_api(c.list_products, success_msg="Products loaded")
            if products is not None:
                show_products(products)

        elif choice == "2":
            term = prompt_with_autocomplete("Search name or category").strip()
            sort = prompt_with_autocomplete("Sort", completer=WordCompleter(SORT_CHOICES), default="none").strip()
            res = try_api(c.list_products, term or None, None if sort == "none" else sort,
                          success_msg=f"Search for '{term}' completed")
            if res is not None:
                show_products(res, title="🔍 Results")

        elif choice == "3":
            fields = ask_product_fields()
            if not fields["name"]:
                console.print(show_status("Name required", False))
                continue
            resp = try_api(c.create_product, **fields, success_msg=f"Product '{fields['name']}' added")
            if resp:
                show_products([resp], title="➕ Added")
                refresh_cache()

        elif choice == "4":
            pid = prompt_with_autocomplete("Product ID", completer=get_product_completer()).strip()
            resp = try_api(c.get_product, pid, success_msg=f"Product {pid} loaded")
            if resp:
                show_products([resp], title="ℹ️ Product")

        elif choice == "5":
            pid = prompt_with_autocomplete("Product ID", completer=get_product_completer()).strip()
            current = try_api(c.get_product, pid)
            if not current:
                continue
            fields = ask_product_fields(current)
            resp = try_api(c.update_product, pid, **fields, success_msg=f"Product {pid} updated")
            if resp:
                show_products([resp], title="✏️ Updated")
                refresh_cache()

        elif choice == "6":
            pid = prompt_with_autocomplete("Product ID", completer=get_product_completer()).strip()
            if Confirm.ask(f"[red]Delete product {pid}?[/red]"):
                if try_api(c.delete_product, pid, success_msg=f"Product {pid} deleted") is not None:
                    refresh_cache()

        elif choice == "7":
            path = Prompt.ask("Export to", default="products-export.json")
            count = try_api(c.export_products, path)
            if count is not None:
                console.print(show_status(f"Exported {count} products to {path}", True))

        elif choice == "8":
            res = try_api(c.low_stock, LOW_STOCK, success_msg="Low stock report loaded")
            if res is not None:
                show_products(res, title="⚠️ Low stock")

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Bye! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
