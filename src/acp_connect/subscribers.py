"""Token-keyed callback registries."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import itertools
from typing import TYPE_CHECKING, Any

from acp_connect.log import get_logger


if TYPE_CHECKING:
    import structlog


@dataclass(frozen=True)
class Subscription:
    """Handle returned when registering a callback."""

    token: int
    registry: SubscriberRegistry[Any]

    def unsubscribe(self) -> None:
        """Remove the callback. Calling this more than once is harmless."""
        self.registry.remove(self.token)


class SubscriberRegistry[T]:
    """Ordered set of single-argument callbacks.

    Callbacks run synchronously in registration order. A callback that
    raises is logged and does not keep the others from being called.
    """

    def __init__(self, name: str, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self.name = name
        self._logger = logger or get_logger(__name__)
        self._callbacks: dict[int, Callable[[T], Any]] = {}
        self._tokens = itertools.count(1)

    def __len__(self) -> int:
        return len(self._callbacks)

    def __repr__(self) -> str:
        return f"SubscriberRegistry(name={self.name!r}, subscribers={len(self)})"

    def add(self, callback: Callable[[T], Any]) -> Subscription:
        token = next(self._tokens)
        self._callbacks[token] = callback
        return Subscription(token, self)

    def remove(self, token: int | Subscription) -> bool:
        """Remove a callback by token. Returns whether anything was removed."""
        if isinstance(token, Subscription):
            token = token.token
        return self._callbacks.pop(token, None) is not None

    def emit(self, value: T) -> None:
        for token, callback in list(self._callbacks.items()):
            try:
                callback(value)
            except Exception:
                self._logger.exception("Subscriber failed", registry=self.name, token=token)

    def clear(self) -> None:
        self._callbacks.clear()
