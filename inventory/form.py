"""
ProductForm
Ephemeral edit buffer for a single product.

The form is either closed, or open in create mode (empty buffer) or edit mode
(buffer copied from an existing product). ``submit`` validates the buffer,
hands a ``ProductFields`` to the caller's handler and then closes and resets
the form. ``cancel`` discards the buffer without calling anything.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence
from urllib.parse import urlparse

from pydantic import ValidationError

from inventory.config import settings
from inventory.models import Product, ProductFields

log = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "price", "quantity", "category", "description", "image_url")


class FormMode(str, Enum):
    CLOSED = "closed"
    CREATE = "create"
    EDIT = "edit"


class FormValidationError(Exception):
    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))


def empty_buffer() -> Dict[str, Any]:
    return {
        "name": "",
        "price": 0,
        "quantity": 0,
        "category": "",
        "description": "",
        "image_url": "",
    }


def _to_price(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


def _to_quantity(value: Any) -> int:
    # "5.5" from a number input truncates to 5
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


class ProductForm:
    def __init__(self, categories: Sequence[str] = settings.CATEGORIES,
                 suggested_images: Optional[Dict[str, List[str]]] = None):
        self.categories = tuple(categories)
        self.suggested = suggested_images if suggested_images is not None else settings.SUGGESTED_IMAGES
        self.mode = FormMode.CLOSED
        self.product: Optional[Product] = None
        self.buffer: Dict[str, Any] = empty_buffer()
        self.show_image_suggestions = False

    @property
    def is_open(self) -> bool:
        return self.mode != FormMode.CLOSED

    @property
    def title(self) -> str:
        return "Edit Product" if self.mode == FormMode.EDIT else "Add New Product"

    @property
    def submit_label(self) -> str:
        return "Update Product" if self.mode == FormMode.EDIT else "Add Product"

    def open(self, product: Optional[Product] = None):
        self.product = product
        self.show_image_suggestions = False
        if product is None:
            self.mode = FormMode.CREATE
            self.buffer = empty_buffer()
        else:
            self.mode = FormMode.EDIT
            self.buffer = {
                "name": product.name,
                "price": product.price,
                "quantity": product.quantity,
                "category": product.category,
                "description": product.description or "",
                "image_url": product.image_url or "",
            }

    def reset(self):
        self.mode = FormMode.CLOSED
        self.product = None
        self.buffer = empty_buffer()
        self.show_image_suggestions = False

    def set_field(self, field: str, value: Any):
        if field not in EDITABLE_FIELDS:
            raise KeyError(field)
        if field == "price":
            value = _to_price(value)
        elif field == "quantity":
            value = _to_quantity(value)
        elif value is None:
            value = ""
        self.buffer[field] = value

    # ---------------------------
    # Image suggestions
    # ---------------------------
    def toggle_image_suggestions(self) -> bool:
        self.show_image_suggestions = not self.show_image_suggestions
        return self.show_image_suggestions

    @property
    def suggestions_visible(self) -> bool:
        return self.show_image_suggestions and bool(self.buffer["category"])

    @property
    def suggested_images(self) -> List[str]:
        category = self.buffer["category"]
        if not category or category not in self.suggested:
            return list(self.suggested.get(settings.FALLBACK_IMAGE_CATEGORY, []))
        return list(self.suggested[category])

    def select_image(self, url: str):
        self.buffer["image_url"] = url
        self.show_image_suggestions = False

    def image_failed(self):
        self.buffer["image_url"] = ""

    def verify_image(self, probe: Callable[[str], bool]) -> bool:
        """Clear ``image_url`` unless it is an http(s) URI that ``probe`` can load."""
        url = self.buffer["image_url"]
        if not url:
            return False
        parsed = urlparse(url)
        ok = parsed.scheme in ("http", "https") and bool(parsed.netloc)
        if ok:
            try:
                ok = probe(url)
            except Exception as e:
                log.debug("image probe failed for %s: %s", url, e)
                ok = False
        if not ok:
            self.image_failed()
        return ok

    # ---------------------------
    # Submit / cancel
    # ---------------------------
    def validate(self) -> ProductFields:
        try:
            return ProductFields(**self.buffer)
        except ValidationError as e:
            errors = {}
            for err in e.errors():
                field = str(err["loc"][0]) if err["loc"] else "form"
                errors.setdefault(field, err["msg"])
            raise FormValidationError(errors) from e

    def submit(self, handler: Callable[[ProductFields], Any]) -> Any:
        if not self.is_open:
            raise RuntimeError("form is not open")
        fields = self.validate()
        try:
            return handler(fields)
        finally:
            self.reset()

    def cancel(self):
        self.reset()
