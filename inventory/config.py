from pydantic import BaseModel
from typing import Dict, List, Tuple
import os

DEFAULT_CATEGORIES: Tuple[str, ...] = (
    'Electronics',
    'Clothing',
    'Food & Beverages',
    'Home & Garden',
    'Sports & Fitness',
    'Books & Media',
    'Health & Beauty',
    'Toys & Games',
    'Automotive',
    'Office Supplies',
)

DEFAULT_SUGGESTED_IMAGES: Dict[str, List[str]] = {
    'Electronics': [
        'https://images.unsplash.com/photo-1498049794561-7780e7231661?w=400',
        'https://images.unsplash.com/photo-1560472354-b33ff0c44a43?w=400',
        'https://images.unsplash.com/photo-1511707171634-5f897ff02aa9?w=400',
    ],
    'Clothing': [
        'https://images.unsplash.com/photo-1441986300917-64674bd600d8?w=400',
        'https://images.unsplash.com/photo-1445205170230-053b83016050?w=400',
        'https://images.unsplash.com/photo-1434389677669-e08b4cac3105?w=400',
    ],
    'Food & Beverages': [
        'https://images.unsplash.com/photo-1504674900247-0877df9cc836?w=400',
        'https://images.unsplash.com/photo-1567620905732-2d1ec7ab7445?w=400',
        'https://images.unsplash.com/photo-1482049016688-2d3e1b311543?w=400',
    ],
    'Home & Garden': [
        'https://images.unsplash.com/photo-1586023492125-27b2c045efd7?w=400',
        'https://images.unsplash.com/photo-1513475382585-d06e58bcb0e0?w=400',
        'https://images.unsplash.com/photo-1484101403633-562f891dc89a?w=400',
    ],
    'Sports & Fitness': [
        'https://images.unsplash.com/photo-1571019613454-1cb2f99b2d8b?w=400',
        'https://images.unsplash.com/photo-1517836357463-d25dfeac3438?w=400',
        'https://images.unsplash.com/photo-1538805060514-97d9cc17730c?w=400',
    ],
}


def _categories_from_env() -> Tuple[str, ...]:
    raw = os.getenv('INVENTORY_CATEGORIES')
    if not raw:
        return DEFAULT_CATEGORIES
    return tuple(c.strip() for c in raw.split(',') if c.strip())


class Settings(BaseModel):
    # Store
    STORE_URL: str = os.getenv('STORE_URL', 'http://127.0.0.1:8085')
    STORE_TIMEOUT: int = int(os.getenv('STORE_TIMEOUT', '10'))
    PRODUCTS_TABLE: str = 'products'

    # Inventory rules
    LOW_STOCK_THRESHOLD: int = int(os.getenv('LOW_STOCK_THRESHOLD', '10'))
    CATEGORIES: Tuple[str, ...] = _categories_from_env()
    SUGGESTED_IMAGES: Dict[str, List[str]] = DEFAULT_SUGGESTED_IMAGES
    FALLBACK_IMAGE_CATEGORY: str = 'Electronics'

    # Display
    CURRENCY_SYMBOL: str = '₹'
    CURRENCY_MAX_FRACTION_DIGITS: int = 2

    LOG_LEVEL: str = os.getenv('INVENTORY_LOG_LEVEL', 'WARNING')


settings = Settings()
