#!/usr/bin/env python
from sdk.invstore import StoreClient
from inventory.config import settings
from inventory.dashboard import DashboardShell
from inventory.formatting import format_currency
from inventory.models import ProductFields
from inventory.repository import ProductRepository
from inventory.session import AuthProvider

SAMPLE = [
    ProductFields(name="Wireless Mouse", price=799, quantity=42, category="Electronics"),
    ProductFields(name="Cotton T-Shirt", price=349.5, quantity=8, category="Clothing",
                  description="Plain crew neck, size M"),
    ProductFields(name="Green Tea", price=220, quantity=0, category="Food & Beverages"),
]


def main():
    c = StoreClient(base_url=settings.STORE_URL)

    # -----------------------------
    # Reset everything for demo
    # -----------------------------
    print("Resetting store...")
    c.reset()

    # -----------------------------
    # Sign up
    # -----------------------------
    auth = AuthProvider(c)
    session = auth.sign_up("demo@example.com", "demo-password")
    print(f"\nSigned up as {session.email}")

    shell = DashboardShell(auth, ProductRepository(c))
    shell.notifier.subscribe(lambda t: print(f"  [{t.variant}] {t.title} {t.description or ''}"))
    shell.mount()

    # -----------------------------
    # Add products
    # -----------------------------
    print("\nAdding products...")
    for fields in SAMPLE:
        shell.handle_add(fields)

    # -----------------------------
    # Dashboard numbers
    # -----------------------------
    view = shell.view
    print("\nDashboard:")
    print(f"  Total products : {view.total_products}")
    print(f"  Inventory value: {format_currency(view.total_value)}")
    print(f"  Low stock items: {view.low_stock_count}")
    for p in view.filtered_products:
        print(f"  - {p.name:<16} {format_currency(p.price):>10}  qty={p.quantity:<3} {view.stock_status(p).value}")

    # -----------------------------
    # Search
    # -----------------------------
    view.set_search_term("tea")
    print("\nSearching for 'tea'...")
    print([p.name for p in view.filtered_products])
    view.set_search_term("")

    # -----------------------------
    # Delete
    # -----------------------------
    victim = view.products[-1]
    print(f"\nDeleting {victim.name}...")
    shell.request_delete(victim.id)
    shell.confirm_delete()
    print(f"  {view.total_products} products left")

    shell.sign_out()
    print("\nSigned out")


if __name__ == "__main__":
    main()
