"""
DashboardShell
Orchestrates the inventory screen: fetching, create/edit through the product
form, delete behind a confirmation dialog, and notifications.

Every repository call is caught here and turned into a toast; nothing
propagates to the caller. The list is refetched in full after each
successful mutation. After a failed mutation it is left as it was. A 401
from the store ends the session and clears the screen.
"""

import logging
from typing import Optional

from sdk.invstore import StoreError
from inventory.form import FormMode, ProductForm
from inventory.models import Product, ProductFields
from inventory.notifications import Notifier
from inventory.repository import ProductRepository
from inventory.session import AuthProvider
from inventory.viewmodel import InventoryViewModel

log = logging.getLogger(__name__)


class DeleteDialog:
    """Two states: closed (``pending_id is None``) or pending on a product id."""

    def __init__(self):
        self.pending_id: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.pending_id is not None

    def open(self, product_id: str):
        self.pending_id = product_id

    def close(self):
        self.pending_id = None


class DashboardShell:
    def __init__(self, auth: AuthProvider, repository: ProductRepository,
                 view_model: Optional[InventoryViewModel] = None,
                 form: Optional[ProductForm] = None,
                 notifier: Optional[Notifier] = None):
        self.auth = auth
        self.repository = repository
        self.view = view_model or InventoryViewModel()
        self.form = form or ProductForm()
        self.notifier = notifier or Notifier()
        self.delete_dialog = DeleteDialog()
        self.loading = True
        self.form_loading = False

    @property
    def session(self):
        return self.auth.current_user

    # ---------------------------
    # Fetching
    # ---------------------------
    def mount(self) -> bool:
        """Fetch the product list if a session exists. Returns whether it fetched."""
        if self.session is None:
            return False
        self.refresh()
        return True

    def refresh(self):
        session = self.session
        if session is None:
            return
        try:
            products = self.repository.list_products(session.user_id)
            self.view.set_products(products)
        except StoreError as e:
            self._failed("Error loading products", e)
        finally:
            self.loading = False

    # ---------------------------
    # Form
    # ---------------------------
    def open_create_form(self):
        self.form.open(None)

    def open_edit_form(self, product: Product):
        self.form.open(product)

    def close_form(self):
        self.form.cancel()

    @property
    def editing_product(self) -> Optional[Product]:
        return self.form.product if self.form.mode == FormMode.EDIT else None

    def submit_form(self):
        """Validate and submit the open form; raises ``FormValidationError`` when the buffer is invalid."""
        editing = self.editing_product
        if editing is not None:
            return self.form.submit(lambda fields: self.handle_update(editing, fields))
        return self.form.submit(self.handle_add)

    def handle_add(self, fields: ProductFields) -> bool:
        session = self.session
        if session is None:
            return False
        self.form_loading = True
        try:
            self.repository.create_product(session.user_id, fields)
            self.notifier.toast("Product added successfully!",
                                f"{fields.name} has been added to your inventory.")
            self.refresh()
            return True
        except StoreError as e:
            self._failed("Error adding product", e)
            return False
        finally:
            self.form_loading = False

    def handle_update(self, product: Product, fields: ProductFields) -> bool:
        self.form_loading = True
        try:
            self.repository.update_product(product.id, fields)
            self.notifier.toast("Product updated successfully!", f"{fields.name} has been updated.")
            self.refresh()
            return True
        except StoreError as e:
            self._failed("Error updating product", e)
            return False
        finally:
            self.form_loading = False

    # ---------------------------
    # Delete
    # ---------------------------
    def request_delete(self, product_id: str):
        self.delete_dialog.open(product_id)

    def cancel_delete(self):
        self.delete_dialog.close()

    def confirm_delete(self) -> bool:
        product_id = self.delete_dialog.pending_id
        if product_id is None:
            return False
        try:
            self.repository.delete_product(product_id)
            self.notifier.toast("Product deleted", "The product has been removed from your inventory.")
            self.refresh()
            return True
        except StoreError as e:
            self._failed("Error deleting product", e)
            return False
        finally:
            # closed whether or not the delete went through
            self.delete_dialog.close()

    # ---------------------------
    # Session
    # ---------------------------
    def sign_out(self):
        self.auth.sign_out()
        self._clear()

    def _clear(self):
        self.view.set_products([])
        self.form.reset()
        self.delete_dialog.close()
        self.loading = True

    def _failed(self, title: str, e: StoreError):
        self.notifier.error(title, e.message)
        if e.status_code == 401:
            # token expired or revoked, back to the sign-in screen
            self.auth.expire()
            self._clear()
