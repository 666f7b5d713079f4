"""
Move lock
----

Between committing a legal move and the end of its animation, no new input may be accepted.

The lock is acquired synchronously when a move is validated and hands out a Completion. The renderer gets one
callback per animation (`Completion.part()`); once every callback has fired, the `on_release` continuation runs
(turn switch) and the lock is free again.

A callback firing twice, or never firing, is a broken contract with the animation layer. Firing twice raises
right away. Never firing is detected the next time input arrives while the lock has been held for longer than
`timeout` seconds. There is always a timeout: a lock that is never released must not go unnoticed.
"""

import logging
import time
from typing import Callable, Optional

from src.core.config import DEFAULT_MOVE_LOCK_TIMEOUT
from src.core.exceptions import MoveLockError

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class Completion:
    """Collects the completion signals of one committed move."""

    def __init__(self, lock: "MoveLock", parts: int, on_release: Callable[[], None]) -> None:
        self._lock = lock
        self._pending = parts
        self._issued = 0
        self._parts = parts
        self._on_release = on_release

    @property
    def is_done(self) -> bool:
        return self._pending == 0

    def part(self) -> Callable[[], None]:
        """Hand out one single-use callback"""
        if self._issued >= self._parts:
            raise MoveLockError(f"Completion only expects {self._parts} callback(s)")
        self._issued += 1
        fired = False

        def _on_complete() -> None:
            nonlocal fired
            if fired:
                raise MoveLockError("Completion callback fired more than once")
            fired = True
            self._fire()

        return _on_complete

    def settle(self) -> None:
        """
        Resolve whatever is still pending at once (the animation layer failed to take the callbacks).
        Callbacks that fire afterwards raise MoveLockError.
        """
        if self.is_done:
            return
        self._pending = 1
        self._fire()

    def _fire(self) -> None:
        if self.is_done:
            raise MoveLockError("Completion callback fired after the move was already resolved")
        self._pending -= 1
        if self._pending > 0:
            return
        # release BEFORE running the continuation: observers notified there may already send new input.
        self._lock._release(self)
        self._on_release()


class MoveLock:
    def __init__(self, timeout: float = DEFAULT_MOVE_LOCK_TIMEOUT, clock: Clock = time.monotonic) -> None:
        if timeout is None or timeout <= 0:
            raise MoveLockError(f"Move lock timeout must be a positive number of seconds, got {timeout!r}")
        self.timeout = timeout
        self._clock = clock
        self._current: Optional[Completion] = None
        self._acquired_at = 0.0

    @property
    def locked(self) -> bool:
        return self._current is not None

    def acquire(self, parts: int, on_release: Callable[[], None]) -> Completion:
        if self._current is not None:
            raise MoveLockError("Move lock is already held")
        if parts < 1:
            raise MoveLockError("A completion needs at least one part")
        self._current = Completion(self, parts, on_release)
        self._acquired_at = self._clock()
        logger.debug("Move lock acquired (%d completion part(s))", parts)
        return self._current

    def check_stalled(self) -> None:
        """Raise if the lock has been held for longer than allowed (a completion that never fired)."""
        if self._current is None:
            return
        held_for = self._clock() - self._acquired_at
        if held_for > self.timeout:
            raise MoveLockError(
                f"Move lock held for {held_for:.2f}s (timeout {self.timeout}s): completion never fired"
            )

    def _release(self, completion: Completion) -> None:
        if completion is not self._current:
            raise MoveLockError("Completion does not belong to the current lock")
        self._current = None
        logger.debug("Move lock released")
