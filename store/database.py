import asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, List, Set

# This file holds all the in-memory tables, auth state and write locks.

USERS: Dict[str, Dict[str, Any]] = {}
REVOKED_TOKENS: Set[str] = set()
TABLES: Dict[str, Dict[str, Dict[str, Any]]] = {
    "products": {},
}
_LOCKS: Dict[str, asyncio.Lock] = {}
_LAST_TS: List[datetime] = []

# products table schema
PRODUCT_CATEGORIES = (
    "Electronics",
    "Clothing",
    "Food & Beverages",
    "Home & Garden",
    "Sports & Fitness",
    "Books & Media",
    "Health & Beauty",
    "Toys & Games",
    "Automotive",
    "Office Supplies",
)
PRODUCT_COLUMNS = ("id", "user_id", "name", "price", "quantity", "category",
                   "description", "image_url", "created_at", "updated_at")
PRODUCT_WRITABLE = ("user_id", "name", "price", "quantity", "category", "description", "image_url")


def _get_lock(key: str) -> asyncio.Lock:
    if key not in _LOCKS:
        _LOCKS[key] = asyncio.Lock()
    return _LOCKS[key]


def now_ts() -> str:
    """Strictly increasing UTC timestamp, so created_at ordering has no ties."""
    ts = datetime.now(timezone.utc)
    if _LAST_TS and ts <= _LAST_TS[0]:
        ts = _LAST_TS[0] + timedelta(microseconds=1)
    _LAST_TS[:] = [ts]
    return ts.isoformat(timespec="microseconds")


def reset_all() -> None:
    USERS.clear()
    REVOKED_TOKENS.clear()
    for rows in TABLES.values():
        rows.clear()
    _LOCKS.clear()
    _LAST_TS.clear()
