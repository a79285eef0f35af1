# tests/test_cli.py
import io

import pytest
from rich.console import Console

import cli
from inventory.dashboard import DashboardShell
from inventory.models import Product
from inventory.session import Session
from inventory.viewmodel import ViewMode

TS = "2026-01-01T00:00:00.000000+00:00"


class StubAuth:
    def __init__(self, session):
        self.current_user = session


@pytest.fixture
def out(monkeypatch):
    buf = io.StringIO()
    monkeypatch.setattr(cli, "console", Console(file=buf, width=200, color_system=None))
    return buf

def shell_for(email="alice@example.com"):
    return DashboardShell(StubAuth(Session(user_id="u1", email=email, access_token="t")), repository=None)

def bracketed(name="[/oops]", description="[bold]not markup[/bold]"):
    return Product(id="p1", name=name, price=10, quantity=3, category="Electronics",
                   description=description, created_at=TS, updated_at=TS)

def test_search_term_with_brackets_renders_verbatim(out):
    shell = shell_for()
    shell.view.set_search_term("[/oops]")
    cli.show_filters(shell)
    assert "[/oops]" in out.getvalue()

def test_product_names_render_verbatim_in_both_views(out):
    shell = shell_for()
    p = bracketed()
    shell.view.set_products([p])
    shell.view.set_view_mode(ViewMode.LIST)
    cli.show_products(shell, [p])
    shell.view.set_view_mode(ViewMode.GRID)
    cli.show_products(shell, [p])
    text = out.getvalue()
    assert text.count("[/oops]") == 2
    assert "[bold]not markup[/bold]" in text

def test_header_escapes_email(out):
    cli.console.print(cli.create_header(shell_for(email="[red]eve@example.com")))
    assert "[red]eve@example.com" in out.getvalue()
