"""
ProductRepository
Call-through wrapper over the store client for the ``products`` table.

Every method is a single round trip; there are no retries, pagination or
batching. All failures surface as ``StoreError``.
"""

import logging
from typing import List

from pydantic import ValidationError

from sdk.invstore import StoreClient, StoreError
from inventory.config import settings
from inventory.models import Product, ProductFields

log = logging.getLogger(__name__)


class ProductRepository:
    def __init__(self, client: StoreClient, table: str = settings.PRODUCTS_TABLE):
        self.client = client
        self.table = table

    def list_products(self, owner: str) -> List[Product]:
        """All products of ``owner``, newest ``created_at`` first."""
        rows = self.client.select(self.table, eq={"user_id": owner}, order="created_at", desc=True)
        try:
            products = [Product.model_validate(r) for r in rows or []]
        except ValidationError as e:
            raise StoreError(f"Malformed product row: {e}") from e
        log.debug("fetched %d products for %s", len(products), owner)
        return products

    def create_product(self, owner: str, fields: ProductFields) -> None:
        row = fields.model_dump()
        row["user_id"] = owner
        self.client.insert(self.table, [row])
        log.info("created product %r", fields.name)

    def update_product(self, product_id: str, fields: ProductFields) -> None:
        updated = self.client.update(self.table, fields.model_dump(), eq={"id": product_id})
        if not updated:
            raise StoreError(f"Product {product_id} not found", status_code=404)
        log.info("updated product %s", product_id)

    def delete_product(self, product_id: str) -> None:
        # zero rows deleted is not an error
        self.client.delete(self.table, eq={"id": product_id})
        log.info("deleted product %s", product_id)
