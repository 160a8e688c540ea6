"""
Venue Calendar - Session Context
=================================

Explicit session/theme state passed to the components that need it,
instead of process-wide storage plus ambient event listeners. Interested
parties subscribe and get an unsubscribe callable back.
"""

import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from logging_config import get_logger

logger = get_logger(__name__)

THEMES = ("light", "dark", "dtao")


@dataclass(frozen=True)
class SessionEvent:
    kind: str           # "logout" | "theme"
    value: Optional[str] = None


Listener = Callable[[SessionEvent], None]


class SessionContext:
    """Holds the current token and theme and notifies subscribers on change."""

    def __init__(self, token: Optional[str] = None, theme: str = "light"):
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme}")
        self._token = token
        self._theme = theme
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def theme(self) -> str:
        return self._theme

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers ``listener``; the returned callable removes it (idempotent)."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, event: SessionEvent):
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Session listener failed on {event.kind}: {e}")

    def login(self, token: str):
        self._token = token

    def logout(self, reason: str = ""):
        """Drops the token and tells every subscriber."""
        self._token = None
        logger.info(f"Session logout ({reason or 'no reason'})")
        self._publish(SessionEvent("logout", reason or None))

    def set_theme(self, theme: str):
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme}")
        if theme == self._theme:
            return
        self._theme = theme
        self._publish(SessionEvent("theme", theme))
