"""Observer bus for controller signals, delivered once per frame."""
from __future__ import annotations

from typing import Any, Callable

Handler = Callable[[str, dict[str, Any]], None]


class SignalBus:
    """Queues published signals until ``flush``.

    Controllers publish ``transition``, ``landed`` and ``fired`` while they
    tick; the game loop flushes after the tick so subscribers (HUD, audio,
    achievements) see a consistent frame.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Handler]] = {}
        self._queue: list[tuple[str, dict[str, Any]]] = []

    def subscribe(self, signal_name: str, handler: Handler) -> None:
        self._subscribers.setdefault(signal_name, []).append(handler)

    def unsubscribe(self, signal_name: str, handler: Handler) -> None:
        handlers = self._subscribers.get(signal_name)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def publish(self, signal_name: str, **data: Any) -> None:
        self._queue.append((signal_name, data))

    def pending(self) -> int:
        return len(self._queue)

    def flush(self) -> int:
        """Deliver queued signals in publish order. Returns the number delivered.

        Signals published by handlers during the flush are held for the next one.
        """
        batch, self._queue = self._queue, []
        for signal_name, data in batch:
            for handler in list(self._subscribers.get(signal_name, ())):
                handler(signal_name, data)
        return len(batch)

    def clear(self) -> None:
        self._queue.clear()
