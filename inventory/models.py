# inventory/models.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional

from inventory.config import settings


class ProductFields(BaseModel):
    """Editable product fields; the payload for create and full-replace update."""

    name: str
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=0)
    category: str
    description: Optional[str] = ''
    image_url: Optional[str] = ''

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Product name is required')
        return v

    @field_validator('category')
    @classmethod
    def known_category(cls, v: str) -> str:
        if v not in settings.CATEGORIES:
            raise ValueError('Please select a category')
        return v


class Product(BaseModel):
    id: str
    name: str
    price: float
    quantity: int
    category: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    created_at: str
    updated_at: str
