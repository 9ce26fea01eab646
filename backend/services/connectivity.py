import inspect
import logging
from typing import Callable
import httpx

logger = logging.getLogger("connectivity")


class ConnectivityMonitor:
    """Tracks the online/offline state pushed by the platform."""

    def __init__(self, online: bool = True):
        self._online = online
        self._subscribers: set[Callable] = set()

    @property
    def online(self) -> bool:
        return self._online

    def subscribe(self, callback: Callable) -> Callable[[], None]:
        """Register a callback receiving the new state; returns an unsubscribe function."""
        self._subscribers.add(callback)
        return lambda: self._subscribers.discard(callback)

    async def set_online(self, online: bool):
        if online == self._online:
            return
        self._online = online
        logger.info(f"Connectivity changed: {'online' if online else 'offline'}")

        for cb in list(self._subscribers):
            try:
                result = cb(online)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Connectivity subscriber error: {e}")

    @staticmethod
    async def probe(url: str, timeout: float = 5.0) -> bool:
        """One-shot check of the current connectivity state."""
        async with httpx.AsyncClient(timeout=timeout) as client:
            try:
                await client.head(url)
                return True
            except httpx.HTTPError as e:
                logger.warning(f"Connectivity probe failed, starting offline: {e}")
                return False

