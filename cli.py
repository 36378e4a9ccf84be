# cli.py - interactive inventory browser
import asyncio
import sys
from datetime import datetime
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.config import configure_logging, get_settings
from sdk.errors import InventoryError
from sdk.forms import ProductForm, pick_image
from sdk.models import Product
from sdk.pyinventory import AsyncInventoryClient
from sdk.sync import Notice, SyncController
from sdk.viewstate import CATEGORIES

console = Console()

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})

FORM_LABELS = [
    ("name", "Product Name *"),
    ("description", "Description"),
    ("price", "Price *"),
    ("stock", "Stock *"),
    ("category", "Category"),
    ("brand", "Brand"),
    ("location", "Location"),
    ("sizes", "Sizes"),
]


def show_status(notice: Notice):
    style = "green" if notice.ok else "red"
    console.print(Panel.fit(f"[{style}]{notice.message}[/{style}]", title=notice.title))


def run(coro, description: str = "Processing..."):
    """Run one controller coroutine with a spinner, like the old try_api."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
    ) as progress:
        progress.add_task(description=description, total=None)
        return asyncio.run(coro)


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Product], ctl: SyncController):
    state = ctl.state
    title = f"📦 Inventory · {state.active_category} · {state.sort_mode.label}"
    if state.search_text:
        title += f" · search: '{state.search_text}'"

    if not products:
        console.print(Panel("No products found. Choose 'a' to add your first product.", title=title))
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True,
    )
    table.add_column("ID", style="dim", width=12)
    table.add_column("Name", style="bold", width=24)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Stock", justify="right", width=8)
    table.add_column("Category", width=14)
    table.add_column("Image", width=30, overflow="fold")

    for p in products:
        table.add_row(
            str(p.id),
            p.name,
            f"${(p.price or 0):.2f}",
            str(p.stock),
            p.category or "-",
            p.image_url or "-",
        )
    console.print(table)


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)
    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🗃️ PyInventory",
        "[bold blue]Inventory manager[/bold blue]",
        f"[dim]{now}[/dim]",
    )
    return Panel(header, style="bold blue")


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def product_completer(ctl: SyncController):
    ids = [str(p.id) for p in ctl.state.products]
    return WordCompleter(ids, ignore_case=True)


# ---------------------------
# Add / edit screens
# ---------------------------
def fill_form(form: ProductForm, include_codes: bool):
    labels = list(FORM_LABELS)
    if include_codes:
        labels += [("product_code", "Product Code"), ("order_name", "Order Name")]
    for field, label in labels:
        completer = WordCompleter(CATEGORIES[1:], ignore_case=True) if field == "category" else None
        value = prompt_with_autocomplete(f"{label}:", completer=completer, default=getattr(form, field))
        form.update_field(field, value)

    if form.image:
        console.print(f"[dim]Current image: {form.image}[/dim]")
    if Confirm.ask("Choose an image file?", default=False):
        path = prompt_with_autocomplete("Image path:")
        try:
            form.update_field("image", pick_image(path))
        except InventoryError as e:
            show_status(Notice(False, "Permission required", e.message))


def add_screen(ctl: SyncController):
    # a fresh form every time the screen is opened
    form = ProductForm()
    console.print(Panel("Add New Product", style="bold magenta"))
    fill_form(form, include_codes=True)
    run(ctl.create_product(form), "Uploading...")


def edit_screen(ctl: SyncController, product_id: str):
    form = run(ctl.load_product(product_id), "Loading product...")
    if form is None:
        return
    console.print(Panel(f"Edit Product {product_id}", style="bold magenta"))
    fill_form(form, include_codes=False)
    product = run(ctl.update_product(product_id, form), "Updating...")
    if product:
        show_products([product], ctl)


# ---------------------------
# Main menu (the product list screen)
# ---------------------------
def menu(ctl: SyncController):
    console.clear()
    console.print(create_header())
    run(ctl.activate(), "Loading products...")

    while True:
        show_products(ctl.visible_products(), ctl)

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        options = [
            ("s", "🔍 Search products", "a", "➕ Add product"),
            ("x", "✖️ Clear search", "e", "✏️ Edit product"),
            ("c", "🏷️ Category filter", "d", "🗑️ Delete product"),
            ("o", f"🔃 Sort ({ctl.state.sort_mode.label})", "r", "🔄 Refresh"),
            ("", "", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)
        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter(["s", "x", "c", "o", "a", "e", "d", "r", "q", "quit", "exit"]),
        ).strip().lower()

        if choice == "s":
            term = prompt_with_autocomplete("Search products...", default=ctl.state.search_text)
            run(ctl.search(term), "Searching...")

        elif choice == "x":
            run(ctl.clear_search(), "Loading products...")

        elif choice == "c":
            cat = Prompt.ask("Category", choices=CATEGORIES, default=ctl.state.active_category)
            ctl.set_category(cat)

        elif choice == "o":
            ctl.toggle_sort()

        elif choice == "a":
            add_screen(ctl)
            # returning to the list screen re-activates it
            run(ctl.activate(), "Loading products...")

        elif choice == "e":
            pid = prompt_with_autocomplete("Enter product ID", completer=product_completer(ctl)).strip()
            edit_screen(ctl, pid)
            run(ctl.activate(), "Loading products...")

        elif choice == "d":
            pid = prompt_with_autocomplete("Enter product ID", completer=product_completer(ctl)).strip()
            # ask outside the spinner; the controller only needs the answer
            confirmed = Confirm.ask("Are you sure you want to delete this product?")
            run(ctl.delete_product(pid, lambda: confirmed), "Deleting...")

        elif choice == "r":
            run(ctl.activate(), "Loading products...")

        elif choice in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Bye! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


def main(base_url: Optional[str] = None):
    settings = get_settings()
    configure_logging(settings.log_level)
    client = AsyncInventoryClient(base_url=base_url or settings.api_base_url)
    menu(SyncController(client, notify=show_status))


if __name__ == "__main__":
    try:
        main(sys.argv[1] if len(sys.argv) > 1 else None)
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
