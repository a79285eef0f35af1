# inventory/session.py
import logging
from typing import Callable, List, Optional

from pydantic import BaseModel

from sdk.invstore import StoreClient, StoreError

log = logging.getLogger(__name__)


class Session(BaseModel):
    user_id: str
    email: str
    access_token: str


SessionListener = Callable[[Optional[Session]], None]


class AuthProvider:
    """Owns the current session and notifies subscribers when it changes."""

    def __init__(self, client: StoreClient):
        self.client = client
        self._session: Optional[Session] = None
        self._listeners: List[SessionListener] = []

    @property
    def current_user(self) -> Optional[Session]:
        return self._session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _set_session(self, session: Optional[Session]):
        self._session = session
        self.client.set_auth(session.access_token if session else None)
        for listener in list(self._listeners):
            listener(session)

    def _start(self, resp: dict) -> Session:
        session = Session(
            user_id=resp["user"]["id"],
            email=resp["user"]["email"],
            access_token=resp["access_token"],
        )
        self._set_session(session)
        log.info("signed in as %s", session.email)
        return session

    def sign_up(self, email: str, password: str) -> Session:
        return self._start(self.client.sign_up(email, password))

    def sign_in(self, email: str, password: str) -> Session:
        return self._start(self.client.sign_in(email, password))

    def sign_out(self):
        if self._session is None:
            return
        try:
            self.client.sign_out()
        except StoreError as e:
            # token may already be revoked or expired; the local session ends either way
            log.warning("sign out failed on store: %s", e.message)
        finally:
            self._set_session(None)

    def expire(self):
        """End the session locally after the store rejected its token."""
        if self._session is None:
            return
        log.warning("session for %s expired", self._session.email)
        self._set_session(None)
