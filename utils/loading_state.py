"""
Observable in-flight state for named API operations.

The registry keeps a reference count per operation and publishes a boolean
snapshot (``count > 0``) to subscribers on every begin/end transition.
Callbacks run inline, so a subscriber sees the "loading" snapshot before the
request it describes has been sent.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Dict, Iterable, Iterator, Set

from utils.api_models import LoadingStateSnapshot
from utils.constants import TRACKED_OPERATIONS

logger = logging.getLogger("pokedex.loading_state")

Subscriber = Callable[[LoadingStateSnapshot], None]


class LoadingStateRegistry:
    """
    Publish/subscribe registry of in-flight operations.

    Two concurrent calls under the same operation name keep the flag set
    until both have finished.
    """

    def __init__(self, operations: Iterable[str] = TRACKED_OPERATIONS):
        self._counts: Dict[str, int] = {name: 0 for name in operations}
        self._subscribers: Set[Subscriber] = set()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a listener for future state changes.

        The callback is not invoked on registration.

        Args:
            callback: Receives a full snapshot after every transition.

        Returns:
            Function that removes the callback; calling it again is a no-op.
        """
        self._subscribers.add(callback)

        def unsubscribe() -> None:
            self._subscribers.discard(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def get_snapshot(self) -> LoadingStateSnapshot:
        """Return a copy of the current flags."""
        return {name: count > 0 for name, count in self._counts.items()}

    def get_active_count(self, name: str) -> int:
        """Return how many calls of ``name`` are currently in flight."""
        return self._counts.get(name, 0)

    def set_operation_state(self, name: str, is_loading: bool) -> None:
        """
        Record the start or end of one call and notify subscribers.

        Args:
            name: Operation name.
            is_loading: True when a call starts, False when it settles.
        """
        count = self._counts.get(name, 0)
        self._counts[name] = count + 1 if is_loading else max(count - 1, 0)
        self._notify()

    @contextmanager
    def track(self, name: str) -> Iterator[None]:
        """Mark ``name`` as loading for the duration of the block."""
        self.set_operation_state(name, True)
        try:
            yield
        finally:
            self.set_operation_state(name, False)

    def _notify(self) -> None:
        # Copy so callbacks may unsubscribe during fan-out
        for callback in tuple(self._subscribers):
            try:
                callback(self.get_snapshot())
            except Exception:
                logger.exception(
                    "Loading state subscriber failed",
                    extra={"subscriber": getattr(callback, "__name__", repr(callback))},
                )
