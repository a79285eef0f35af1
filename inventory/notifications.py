# inventory/notifications.py
import logging
from collections import deque
from typing import Callable, Deque, List, Optional

from pydantic import BaseModel

log = logging.getLogger(__name__)


class Toast(BaseModel):
    title: str
    description: Optional[str] = None
    variant: str = "default"  # or "destructive"

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"


class Notifier:
    """Collects transient notifications and forwards them to listeners."""

    def __init__(self, max_history: int = 50):
        # only the most recent toasts are kept
        self.history: Deque[Toast] = deque(maxlen=max_history)
        self._listeners: List[Callable[[Toast], None]] = []

    def subscribe(self, listener: Callable[[Toast], None]):
        self._listeners.append(listener)

    def toast(self, title: str, description: Optional[str] = None, variant: str = "default") -> Toast:
        t = Toast(title=title, description=description, variant=variant)
        if t.is_error:
            log.warning("%s: %s", title, description)
        else:
            log.info("%s: %s", title, description)
        self.history.append(t)
        for listener in list(self._listeners):
            listener(t)
        return t

    def error(self, title: str, description: Optional[str] = None) -> Toast:
        return self.toast(title, description, variant="destructive")

    @property
    def last(self) -> Optional[Toast]:
        return self.history[-1] if self.history else None
