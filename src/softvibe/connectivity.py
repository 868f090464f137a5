from __future__ import annotations

import logging
from typing import Callable, List, Optional

import requests

logger = logging.getLogger(__name__)

Listener = Callable[[bool], None]


def probe(url: str, timeout: float = 2.0, session: Optional[requests.Session] = None) -> bool:
    """Return True when `url` answers at all (any HTTP status counts as reachable)."""
    http = session or requests
    try:
        http.head(url, timeout=timeout)
    except requests.exceptions.ConnectionError:
        logger.info("Connectivity probe refused: %s", url)
        return False
    except requests.exceptions.Timeout:
        logger.info("Connectivity probe timed out: %s", url)
        return False
    except requests.RequestException as exc:
        logger.info("Connectivity probe failed for %s: %s", url, exc)
        return False
    return True


class ConnectivityMonitor:
    """
    Advisory online/offline flag.

    Seeded once at startup and then updated by explicit online/offline events. Listeners
    are told about actual changes only. The monitor never retries or reconnects anything.
    """

    def __init__(self, online: bool = True):
        self._online = online
        self._listeners: List[Listener] = []

    @classmethod
    def from_probe(cls, url: Optional[str], timeout: float = 2.0) -> "ConnectivityMonitor":
        if not url:
            return cls(online=True)
        return cls(online=probe(url, timeout=timeout))

    @property
    def is_online(self) -> bool:
        return self._online

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener`; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_online(self, online: bool) -> None:
        if online == self._online:
            return
        self._online = online
        logger.info("Connectivity changed: %s", "online" if online else "offline")
        for listener in list(self._listeners):
            listener(online)

    def mark_online(self) -> None:
        self.set_online(True)

    def mark_offline(self) -> None:
        self.set_online(False)
