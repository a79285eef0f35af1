# cli.py
import logging
import sys
from datetime import datetime
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.logging import RichHandler
from rich.columns import Columns
from rich.text import Text
from rich.markup import escape
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

import requests

from sdk.invstore import StoreClient, StoreError
from inventory.config import settings
from inventory.dashboard import DashboardShell
from inventory.form import FormValidationError
from inventory.formatting import format_currency
from inventory.models import Product
from inventory.notifications import Notifier, Toast
from inventory.repository import ProductRepository
from inventory.session import AuthProvider
from inventory.viewmodel import StockStatus, ViewMode

console = Console()

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


def setup_logging(level: str = settings.LOG_LEVEL):
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


# ---------------------------
# Display helpers
# ---------------------------
STOCK_STYLES = {
    StockStatus.OUT_OF_STOCK: "bold red",
    StockStatus.LOW_STOCK: "dark_orange",
    StockStatus.IN_STOCK: "dim",
}


def show_toast(toast: Toast):
    style = "red" if toast.is_error else "green"
    body = f"[bold {style}]{toast.title}[/bold {style}]"
    if toast.description:
        body += f"\n{escape(toast.description)}"
    console.print(Panel.fit(body, title="Status", border_style=style))


def stock_label(shell: DashboardShell, p: Product) -> str:
    status = shell.view.stock_status(p)
    label = f"Stock: {p.quantity}"
    if status == StockStatus.OUT_OF_STOCK:
        label = "OUT OF STOCK"
    elif status == StockStatus.LOW_STOCK:
        label = f"⚠ {label}"
    return f"[{STOCK_STYLES[status]}]{label}[/{STOCK_STYLES[status]}]"


def show_stats(shell: DashboardShell):
    view = shell.view
    low = f"[bold]{view.low_stock_count}[/bold]"
    if view.needs_attention:
        low += "  [dark_orange]Needs attention[/dark_orange]"
    cards = [
        Panel(f"[bold]{view.total_products}[/bold]", title="📦 Total Products", border_style="cyan"),
        Panel(f"[bold]{format_currency(view.total_value)}[/bold]", title="📈 Inventory Value", border_style="green"),
        Panel(low, title="⚠ Low Stock Items", border_style="dark_orange"),
    ]
    console.print(Columns(cards, equal=True, expand=True))


def product_card(shell: DashboardShell, index: int, p: Product) -> Panel:
    body = Text.from_markup(f"[bold]{escape(p.name)}[/bold]\n")
    if p.description:
        body.append(p.description[:60] + ("…" if len(p.description) > 60 else "") + "\n", style="dim")
    body.append_text(Text.from_markup(
        f"[bold magenta]{format_currency(p.price)}[/bold magenta]  {stock_label(shell, p)}"
    ))
    if p.image_url:
        body.append(f"\n🖼  {p.image_url}", style="dim")
    return Panel(body, title=f"#{index}", subtitle=escape(p.category), border_style="blue", width=36)


def show_products(shell: DashboardShell, products: List[Product]):
    view = shell.view
    message = view.empty_state_message
    if message:
        console.print(Panel(f"[italic yellow]{message}[/italic yellow]", title="No Products Found"))
        return

    if view.view_mode == ViewMode.GRID:
        console.print(Columns([product_card(shell, i, p) for i, p in enumerate(products, 1)]))
        return

    table = Table(
        title="📦 Inventory",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", style="bold", width=24)
    table.add_column("Category", width=18)
    table.add_column("Price", justify="right", width=14)
    table.add_column("Stock", justify="right", width=16)
    table.add_column("Description", width=30)

    for i, p in enumerate(products, 1):
        table.add_row(
            str(i),
            escape(p.name),
            escape(p.category),
            format_currency(p.price),
            stock_label(shell, p),
            escape(p.description or ""),
        )
    console.print(table)


def create_header(shell: DashboardShell):
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    email = shell.session.email if shell.session else "-"
    header.add_row(
        "📦 Inventory Manager",
        f"[bold blue]Welcome back, {escape(email)}[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


def show_filters(shell: DashboardShell):
    view = shell.view
    category = "All Categories" if view.selected_category == "all" else view.selected_category
    console.print(
        f"[dim]Search:[/dim] [bold]{escape(view.search_term) or '—'}[/bold]   "
        f"[dim]Category:[/dim] [bold]{escape(category)}[/bold]   "
        f"[dim]View:[/dim] [bold]{view.view_mode.value}[/bold]   "
        f"[dim]Showing {len(view.filtered_products)} of {view.total_products}[/dim]"
    )


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def with_spinner(fn, *args, **kwargs):
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
    ) as progress:
        progress.add_task(description="Processing...", total=None)
        return fn(*args, **kwargs)


def pick_product(shell: DashboardShell, action: str) -> Optional[Product]:
    products = shell.view.filtered_products
    if not products:
        console.print("[italic yellow]No products to choose from[/italic yellow]")
        return None
    names = [p.name for p in products]
    raw = prompt_with_autocomplete(
        f"{action} which product (# or name)?",
        completer=WordCompleter(names + [str(i) for i in range(1, len(products) + 1)], ignore_case=True),
    ).strip()
    if raw.isdigit() and 1 <= int(raw) <= len(products):
        return products[int(raw) - 1]
    for p in products:
        if p.name.lower() == raw.lower():
            return p
    console.print(f"[red]No product matches '{escape(raw)}'[/red]")
    return None


def probe_image(url: str) -> bool:
    r = requests.head(url, timeout=settings.STORE_TIMEOUT, allow_redirects=True)
    return r.ok and r.headers.get("content-type", "image/").startswith("image/")


def fill_form(shell: DashboardShell) -> bool:
    """Prompt for every field of the open form; returns False if the user cancelled."""
    form = shell.form
    buf = form.buffer
    console.print(Panel.fit(f"[bold]{form.title}[/bold]", border_style="cyan"))

    form.set_field("name", prompt_with_autocomplete("Product Name *", default=buf["name"]))
    form.set_field("price", Prompt.ask("Price (₹) *", default=str(buf["price"])))
    form.set_field("quantity", Prompt.ask("Quantity *", default=str(buf["quantity"])))
    form.set_field("category", prompt_with_autocomplete(
        "Category *",
        completer=WordCompleter(list(form.categories), ignore_case=True, sentence=True),
        default=buf["category"],
    ).strip())
    form.set_field("description", prompt_with_autocomplete("Description", default=buf["description"] or ""))

    if Confirm.ask("Browse suggested images?", default=False):
        form.toggle_image_suggestions()
        if form.suggestions_visible:
            images = form.suggested_images
            console.print(f"[dim]Suggested images for {escape(form.buffer['category'])}[/dim]")
            for i, url in enumerate(images, 1):
                console.print(f"  [cyan]{i}[/cyan]  {escape(url)}")
            choice = Prompt.ask("Pick an image (blank to skip)", default="")
            if choice.isdigit() and 1 <= int(choice) <= len(images):
                form.select_image(images[int(choice) - 1])
        else:
            console.print("[yellow]Select a category first[/yellow]")
    if not form.buffer["image_url"]:
        form.set_field("image_url", prompt_with_autocomplete("Product Image URL", default=""))
    if form.buffer["image_url"] and not with_spinner(form.verify_image, probe_image):
        console.print("[yellow]Image could not be loaded; it has been cleared.[/yellow]")

    return Confirm.ask(f"{form.submit_label}?", default=True)


def run_form(shell: DashboardShell):
    if not fill_form(shell):
        shell.close_form()
        console.print("[dim]Cancelled[/dim]")
        return
    try:
        with_spinner(shell.submit_form)
    except FormValidationError as e:
        for field, msg in e.errors.items():
            console.print(f"[red]{field}: {escape(msg)}[/red]")
        if Confirm.ask("Fix and try again?", default=True):
            run_form(shell)
        else:
            shell.close_form()


# ---------------------------
# Screens
# ---------------------------
def auth_screen(auth: AuthProvider) -> bool:
    console.print(Panel.fit("[bold]Sign in to manage your inventory[/bold]", title="🔐 Inventory Manager"))
    mode = prompt_with_autocomplete(
        "Sign in or sign up? (in/up/q)", completer=WordCompleter(["in", "up", "q"]), default="in"
    ).strip().lower()
    if mode in ("q", "quit", "exit"):
        return False
    email = prompt_with_autocomplete("Email")
    password = Prompt.ask("Password", password=True)
    try:
        if mode == "up":
            with_spinner(auth.sign_up, email, password)
        else:
            with_spinner(auth.sign_in, email, password)
    except StoreError as e:
        show_toast(Toast(title="Authentication failed", description=e.message, variant="destructive"))
    return True


def dashboard_screen(shell: DashboardShell):
    view = shell.view
    while shell.session is not None:
        console.print(create_header(shell))
        show_stats(shell)
        show_filters(shell)
        show_products(shell, view.filtered_products)

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        options = [
            ("1", "🔍 Search products", "5", "✏️ Edit product"),
            ("2", "🏷️ Filter by category", "6", "🗑️ Delete product"),
            ("3", "🔀 Toggle grid/list", "7", "🔄 Refresh"),
            ("4", "➕ Add product", "q", "👋 Sign out"),
        ]
        for row in options:
            menu_table.add_row(*row)
        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 8)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            view.set_search_term(prompt_with_autocomplete("Search products...", default=view.search_term))

        elif choice == "2":
            labels = view.category_options
            category = prompt_with_autocomplete(
                "Category (all for every category)",
                completer=WordCompleter(labels, ignore_case=True, sentence=True),
                default=view.selected_category,
            ).strip()
            try:
                view.select_category(category)
            except ValueError as e:
                console.print(f"[red]{escape(str(e))}[/red]")

        elif choice == "3":
            view.toggle_view_mode()

        elif choice == "4":
            shell.open_create_form()
            run_form(shell)

        elif choice == "5":
            product = pick_product(shell, "Edit")
            if product:
                shell.open_edit_form(product)
                run_form(shell)

        elif choice == "6":
            product = pick_product(shell, "Delete")
            if product:
                shell.request_delete(product.id)
                console.print(Panel.fit(
                    "This action cannot be undone. This will permanently delete "
                    f"[bold]{escape(product.name)}[/bold] from your inventory.",
                    title="Are you sure?", border_style="red",
                ))
                if Confirm.ask("[red]Delete Product?[/red]", default=False):
                    with_spinner(shell.confirm_delete)
                else:
                    shell.cancel_delete()

        elif choice == "7":
            with_spinner(shell.refresh)

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to sign out?"):
                shell.sign_out()

        console.print()
        console.rule(style="dim")


def main():
    setup_logging()
    client = StoreClient(base_url=settings.STORE_URL, timeout=settings.STORE_TIMEOUT)
    auth = AuthProvider(client)
    notifier = Notifier()
    notifier.subscribe(show_toast)
    shell = DashboardShell(auth, ProductRepository(client), notifier=notifier)

    console.clear()
    while True:
        if shell.session is None:
            if not auth_screen(auth):
                console.print(Panel.fit("[bold green]Goodbye! 👋[/bold green]", title="Goodbye"))
                return
            continue
        with_spinner(shell.mount)
        dashboard_screen(shell)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
