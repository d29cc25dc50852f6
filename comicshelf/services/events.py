"""
In-process event bus.

Services publish named events; views and other services subscribe without
holding a reference to the publisher.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

FAVORITES_CHANGED = "favorites-changed"
FAVORITE_STATUS_CHANGED = "favorite-status-changed"

Handler = Callable[[Any], Union[None, Awaitable[None]]]


@dataclass(frozen=True)
class FavoriteStatusChanged:
    """Payload of ``favorite-status-changed``."""

    character_id: int
    is_favorite: bool


class EventBus:
    """
    Minimal publish/subscribe hub.

    Handlers run in subscription order. Coroutine handlers are awaited; a
    handler that raises is logged and the remaining handlers still run.
    """

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = {}

    def subscribe(self, event: str, handler: Handler) -> Callable[[], None]:
        """
        Register ``handler`` for ``event``.

        Returns:
            A callable that removes the subscription
        """
        self._handlers.setdefault(event, []).append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(event, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def subscriber_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))

    async def publish(self, event: str, payload: Optional[Any] = None) -> None:
        """Deliver ``payload`` to every handler subscribed to ``event``."""
        for handler in list(self._handlers.get(event, [])):
            try:
                result = handler(payload)
                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Handler {handler!r} for '{event}' failed: {e}", exc_info=True)
