# store/main.py
from fastapi import FastAPI, HTTPException, Depends, Request, Body, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from typing import Optional, Dict, Any, List, Union
import logging, uuid

import jwt

from store.database import (
    USERS, REVOKED_TOKENS, TABLES, PRODUCT_CATEGORIES, PRODUCT_COLUMNS, PRODUCT_WRITABLE,
    _get_lock, now_ts, reset_all,
)
from store.models import CredentialsIn, UserOut, AuthOut
from store.security import hash_password, verify_password, create_access_token, decode_token
from store.config import settings

log = logging.getLogger(__name__)

app = FastAPI(title="inventory store (in-memory)")

from fastapi.middleware.cors import CORSMiddleware

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

security = HTTPBearer(auto_error=False)

# ---------------------------
# Auth helpers
# ---------------------------
def _find_user(email: str) -> Optional[Dict[str, Any]]:
    for u in USERS.values():
        if u["email"] == email:
            return u
    return None

def _auth_out(user: Dict[str, Any]) -> AuthOut:
    token, _ = create_access_token(user["id"], user["email"])
    return AuthOut(access_token=token, user=UserOut(id=user["id"], email=user["email"], created_at=user["created_at"]))

def get_current_identity(creds: HTTPAuthorizationCredentials = Depends(security)) -> dict:
    if not creds:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        payload = decode_token(creds.credentials)
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    if payload.get("type") != "access" or payload.get("jti") in REVOKED_TOKENS:
        raise HTTPException(status_code=401, detail="Invalid token")
    if payload.get("sub") not in USERS:
        raise HTTPException(status_code=401, detail="User not found")
    return payload

# ---------------------------
# Auth endpoints
# ---------------------------
@app.post("/auth/v1/signup", status_code=201, response_model=AuthOut)
async def sign_up(payload: CredentialsIn):
    email = payload.email.strip().lower()
    if not email or "@" not in email:
        raise HTTPException(status_code=400, detail="Unable to validate email address: invalid format")
    if len(payload.password) < settings.PASSWORD_MIN_LENGTH:
        raise HTTPException(status_code=400, detail=f"Password should be at least {settings.PASSWORD_MIN_LENGTH} characters")

    lock = _get_lock("auth:users")
    async with lock:
        if _find_user(email):
            raise HTTPException(status_code=409, detail="User already registered")
        uid = uuid.uuid4().hex
        USERS[uid] = {
            "id": uid,
            "email": email,
            "password_hash": hash_password(payload.password),
            "created_at": now_ts(),
        }
    log.info("user signed up: %s", email)
    return _auth_out(USERS[uid])

@app.post("/auth/v1/token", response_model=AuthOut)
async def sign_in(payload: CredentialsIn):
    user = _find_user(payload.email.strip().lower())
    if not user or not verify_password(payload.password, user["password_hash"]):
        raise HTTPException(status_code=400, detail="Invalid login credentials")
    return _auth_out(user)

@app.post("/auth/v1/logout", status_code=204)
async def sign_out(identity: dict = Depends(get_current_identity)):
    REVOKED_TOKENS.add(identity["jti"])
    return Response(status_code=204)

@app.get("/auth/v1/user", response_model=UserOut)
async def current_user(identity: dict = Depends(get_current_identity)):
    user = USERS[identity["sub"]]
    return UserOut(id=user["id"], email=user["email"], created_at=user["created_at"])

# ---------------------------
# Row helpers
# ---------------------------
def _table(name: str) -> Dict[str, Dict[str, Any]]:
    rows = TABLES.get(name)
    if rows is None:
        raise HTTPException(status_code=404, detail=f'relation "public.{name}" does not exist')
    return rows

def _parse_query(table: str, request: Request):
    """Split query params into ``(filters, order)``; filters use ``col=eq.value``."""
    filters: Dict[str, str] = {}
    order = None
    for key, raw in request.query_params.items():
        if key == "order":
            col, _, direction = raw.partition(".")
            direction = direction or "asc"
            if col not in PRODUCT_COLUMNS or direction not in ("asc", "desc"):
                raise HTTPException(status_code=400, detail=f"invalid order: {raw}")
            order = (col, direction == "desc")
            continue
        if key not in PRODUCT_COLUMNS:
            raise HTTPException(status_code=400, detail=f"column {table}.{key} does not exist")
        op, _, value = raw.partition(".")
        if op != "eq":
            raise HTTPException(status_code=400, detail=f"unsupported filter operator: {op}")
        filters[key] = value
    return filters, order

def _visible(rows: Dict[str, Dict[str, Any]], owner_id: str, filters: Dict[str, str]) -> List[Dict[str, Any]]:
    # row-level security: owners only ever see their own rows
    out = []
    for row in rows.values():
        if row["user_id"] != owner_id:
            continue
        if any(str(row.get(col)) != value for col, value in filters.items()):
            continue
        out.append(row)
    return out

def _coerce_price(value: Any) -> float:
    if isinstance(value, bool):
        raise HTTPException(status_code=400, detail=f'invalid input syntax for type numeric: "{value}"')
    try:
        return float(value)
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f'invalid input syntax for type numeric: "{value}"')

def _coerce_quantity(value: Any) -> int:
    if isinstance(value, bool):
        raise HTTPException(status_code=400, detail=f'invalid input syntax for type integer: "{value}"')
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value))
    except ValueError:
        raise HTTPException(status_code=400, detail=f'invalid input syntax for type integer: "{value}"')

def _check_product(row: Dict[str, Any]) -> Dict[str, Any]:
    """Apply the products table's not-null and check constraints; returns the normalized row."""
    for col in ("name", "price", "quantity", "category"):
        if row.get(col) is None:
            raise HTTPException(status_code=400,
                                detail=f'null value in column "{col}" of relation "products" violates not-null constraint')
    if not isinstance(row["name"], str) or not row["name"].strip():
        raise HTTPException(status_code=400,
                            detail='new row for relation "products" violates check constraint "products_name_check"')
    row["price"] = _coerce_price(row["price"])
    row["quantity"] = _coerce_quantity(row["quantity"])
    if row["price"] < 0:
        raise HTTPException(status_code=400,
                            detail='new row for relation "products" violates check constraint "products_price_check"')
    if row["quantity"] < 0:
        raise HTTPException(status_code=400,
                            detail='new row for relation "products" violates check constraint "products_quantity_check"')
    if row["category"] not in PRODUCT_CATEGORIES:
        raise HTTPException(status_code=400,
                            detail='new row for relation "products" violates check constraint "products_category_check"')
    for col in ("description", "image_url"):
        if row.get(col) is not None and not isinstance(row[col], str):
            raise HTTPException(status_code=400, detail=f'invalid input syntax for type text: "{row[col]}"')
    return row

def _check_writable(table: str, values: Dict[str, Any], owner_id: str) -> None:
    for col in values:
        if col not in PRODUCT_WRITABLE:
            raise HTTPException(status_code=400, detail=f'column "{col}" of relation "{table}" can not be written')
    if "user_id" in values and values["user_id"] != owner_id:
        raise HTTPException(status_code=403, detail=f'new row violates row-level security policy for table "{table}"')

# ---------------------------
# Table endpoints
# ---------------------------
@app.get("/rest/v1/{table}")
async def select_rows(table: str, request: Request, identity: dict = Depends(get_current_identity)):
    rows = _table(table)
    filters, order = _parse_query(table, request)
    out = _visible(rows, identity["sub"], filters)
    if order:
        col, desc = order
        out.sort(key=lambda r: (r.get(col) is None, r.get(col)), reverse=desc)
    return out

@app.post("/rest/v1/{table}", status_code=201)
async def insert_rows(
    table: str,
    payload: Union[List[Dict[str, Any]], Dict[str, Any]] = Body(...),
    identity: dict = Depends(get_current_identity),
):
    rows = _table(table)
    owner_id = identity["sub"]
    items = payload if isinstance(payload, list) else [payload]

    prepared = []
    for item in items:
        _check_writable(table, item, owner_id)
        if "user_id" not in item:
            raise HTTPException(status_code=403, detail=f'new row violates row-level security policy for table "{table}"')
        row = {col: None for col in PRODUCT_WRITABLE}
        row.update(item)
        prepared.append(_check_product(row))

    lock = _get_lock(f"table:{table}")
    async with lock:
        created = []
        for row in prepared:
            ts = now_ts()
            row.update({"id": uuid.uuid4().hex, "created_at": ts, "updated_at": ts})
            rows[row["id"]] = row
            created.append(row)
    log.info("inserted %d row(s) into %s for %s", len(created), table, owner_id)
    return created

@app.patch("/rest/v1/{table}")
async def update_rows(
    table: str,
    request: Request,
    values: Dict[str, Any] = Body(...),
    identity: dict = Depends(get_current_identity),
):
    rows = _table(table)
    owner_id = identity["sub"]
    filters, _ = _parse_query(table, request)
    _check_writable(table, values, owner_id)

    lock = _get_lock(f"table:{table}")
    async with lock:
        matched = _visible(rows, owner_id, filters)
        # validate every candidate before committing any
        staged = [_check_product({**row, **values}) for row in matched]
        updated = []
        for row in staged:
            row["updated_at"] = now_ts()
            rows[row["id"]] = row
            updated.append(row)
    log.info("updated %d row(s) in %s for %s", len(updated), table, owner_id)
    return updated

@app.delete("/rest/v1/{table}")
async def delete_rows(table: str, request: Request, identity: dict = Depends(get_current_identity)):
    rows = _table(table)
    filters, _ = _parse_query(table, request)

    lock = _get_lock(f"table:{table}")
    async with lock:
        matched = _visible(rows, identity["sub"], filters)
        for row in matched:
            del rows[row["id"]]
    log.info("deleted %d row(s) from %s", len(matched), table)
    return matched

# ---------------------------
# Utility: reset (for tests/demo)
# ---------------------------
@app.post("/reset")
async def reset():
    reset_all()
    return {"status": "reset"}

@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8085)
