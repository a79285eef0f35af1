# inventory/viewmodel.py
from enum import Enum
from typing import List, Optional, Sequence

from inventory.config import settings
from inventory.models import Product

ALL_CATEGORIES = "all"


class StockStatus(str, Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class ViewMode(str, Enum):
    GRID = "grid"
    LIST = "list"


class InventoryViewModel:
    """Render-ready projection of the fetched product list plus local UI state.

    Everything is derived on access; aggregates always cover the full list,
    never the filtered one.
    """

    def __init__(self, categories: Sequence[str] = settings.CATEGORIES,
                 low_stock_threshold: int = settings.LOW_STOCK_THRESHOLD):
        self.categories = tuple(categories)
        self.low_stock_threshold = low_stock_threshold
        self.products: List[Product] = []
        self.search_term = ""
        self.selected_category = ALL_CATEGORIES
        self.view_mode = ViewMode.GRID

    # ---------------------------
    # State
    # ---------------------------
    def set_products(self, products: Sequence[Product]):
        self.products = list(products)

    def set_search_term(self, term: str):
        self.search_term = term or ""

    @property
    def category_options(self) -> List[str]:
        return [ALL_CATEGORIES, *self.categories]

    def select_category(self, category: str):
        if category not in self.category_options:
            raise ValueError(f"unknown category: {category}")
        self.selected_category = category

    def set_view_mode(self, mode):
        self.view_mode = ViewMode(mode)

    def toggle_view_mode(self) -> ViewMode:
        self.view_mode = ViewMode.LIST if self.view_mode == ViewMode.GRID else ViewMode.GRID
        return self.view_mode

    # ---------------------------
    # Derived values
    # ---------------------------
    def matches(self, product: Product) -> bool:
        term = self.search_term.lower()
        matches_search = term in product.name.lower() or term in product.category.lower()
        matches_category = self.selected_category == ALL_CATEGORIES or product.category == self.selected_category
        return matches_search and matches_category

    @property
    def filtered_products(self) -> List[Product]:
        return [p for p in self.products if self.matches(p)]

    @property
    def total_products(self) -> int:
        return len(self.products)

    @property
    def total_value(self) -> float:
        return sum(p.price * p.quantity for p in self.products)

    @property
    def low_stock_count(self) -> int:
        return sum(1 for p in self.products if p.quantity < self.low_stock_threshold)

    @property
    def needs_attention(self) -> bool:
        return self.low_stock_count > 0

    def stock_status(self, product: Product) -> StockStatus:
        if product.quantity == 0:
            return StockStatus.OUT_OF_STOCK
        if product.quantity < self.low_stock_threshold:
            return StockStatus.LOW_STOCK
        return StockStatus.IN_STOCK

    @property
    def empty_state_message(self) -> Optional[str]:
        if self.filtered_products:
            return None
        if not self.products:
            return "Start building your inventory by adding your first product."
        return "No products match your current search or filter criteria."
