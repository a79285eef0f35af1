from datetime import datetime, timedelta, timezone
from typing import Tuple
import uuid

import jwt
from passlib.context import CryptContext

from store.config import settings

pwd_ctx = CryptContext(schemes=['pbkdf2_sha256'], deprecated='auto')

def hash_password(p: str) -> str: return pwd_ctx.hash(p)

def verify_password(p: str, h: str) -> bool: return pwd_ctx.verify(p, h)

def now_utc() -> datetime: return datetime.now(timezone.utc)

def generate_jti() -> str: return uuid.uuid4().hex


def create_access_token(sub: str, email: str) -> Tuple[str, str]:
    exp = now_utc() + timedelta(seconds=settings.ACCESS_TOKEN_EXPIRES_SECONDS)
    jti = generate_jti()
    payload = {'sub': sub, 'email': email, 'jti': jti, 'exp': exp, 'type': 'access'}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM), jti


def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
