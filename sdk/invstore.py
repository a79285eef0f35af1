# sdk/invstore.py
import logging
from typing import Any, Dict, List, Optional, Union

import requests

log = logging.getLogger(__name__)


class StoreError(Exception):
    """Any failure talking to the store: transport, auth or constraint violation."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class StoreClient:
    """Thin client for the table-backed store.

    ``session`` defaults to a ``requests.Session``; anything with the same
    ``request``/``headers`` surface (e.g. FastAPI's ``TestClient``) works.
    """

    def __init__(self, base_url: str = "http://localhost:8085", api_key: Optional[str] = None,
                 timeout: int = 10, session=None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        if api_key:
            self.set_auth(api_key)

    def set_auth(self, access_token: Optional[str]):
        if access_token:
            self.session.headers.update({"Authorization": f"Bearer {access_token}"})
        else:
            self.session.headers.pop("Authorization", None)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        log.debug("%s %s params=%s", method, url, kwargs.get("params"))
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise StoreError(f"Failed to reach store: {e}") from e

        if r.status_code >= 400:
            try:
                detail = r.json().get("detail", r.text)
            except ValueError:
                detail = r.text or f"HTTP {r.status_code}"
            # FastAPI validation errors come back as a list of dicts
            if isinstance(detail, list):
                detail = "; ".join(str(d.get("msg", d)) if isinstance(d, dict) else str(d) for d in detail)
            raise StoreError(str(detail), status_code=r.status_code)

        if r.status_code == 204 or not r.content:
            return None
        return r.json()

    @staticmethod
    def _filters(eq: Optional[Dict[str, Any]]) -> Dict[str, str]:
        return {col: f"eq.{value}" for col, value in (eq or {}).items()}

    def reset(self):
        return self._request("POST", "/reset")

    # -----------------------
    # Auth
    # -----------------------
    def sign_up(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/auth/v1/signup", json={"email": email, "password": password})

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/auth/v1/token", json={"email": email, "password": password})

    def sign_out(self):
        try:
            self._request("POST", "/auth/v1/logout")
        finally:
            self.set_auth(None)

    def get_user(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/v1/user")

    # -----------------------
    # Tables
    # -----------------------
    def select(self, table: str, eq: Optional[Dict[str, Any]] = None,
               order: Optional[str] = None, desc: bool = False) -> List[Dict[str, Any]]:
        params = self._filters(eq)
        if order:
            params["order"] = f"{order}.{'desc' if desc else 'asc'}"
        return self._request("GET", f"/rest/v1/{table}", params=params)

    def insert(self, table: str, rows: Union[Dict[str, Any], List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
        return self._request("POST", f"/rest/v1/{table}", json=rows)

    def update(self, table: str, values: Dict[str, Any], eq: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self._request("PATCH", f"/rest/v1/{table}", params=self._filters(eq), json=values)

    def delete(self, table: str, eq: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self._request("DELETE", f"/rest/v1/{table}", params=self._filters(eq))
