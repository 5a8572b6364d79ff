import logging
import signal
from dataclasses import dataclass, field
from types import FrameType
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass
class InterruptHandler:
    """Routes an interrupt signal into a flag the run loop polls.

    The signal handler only records the signal number. All reactions happen
    on the loop thread when it calls consume().
    """

    signum: int = signal.SIGINT
    _pending: Optional[int] = field(default=None, init=False)
    _previous: Any = field(default=None, init=False)
    _bound: bool = field(default=False, init=False)

    @property
    def bound(self) -> bool:
        return self._bound

    @property
    def interrupted(self) -> bool:
        """Check if an interrupt is waiting to be consumed."""
        return self._pending is not None

    def bind(self) -> None:
        """Install the signal handler.

        Raises ValueError when called outside the main thread, as signal.signal
        does, or when another InterruptHandler already owns the signal.
        """
        if self._bound:
            return
        owner = getattr(signal.getsignal(self.signum), "__self__", None)
        if isinstance(owner, InterruptHandler):
            raise ValueError(f"signal {self.signum} is already bound by another console")
        self._previous = signal.signal(self.signum, self._handle_signal)
        self._bound = True
        logger.debug("Bound interrupt handler to signal %d", self.signum)

    def unbind(self) -> None:
        """Restore whatever handler was installed before bind().

        A handler installed by someone else since bind() is left in place.
        """
        if not self._bound:
            return
        previous = self._previous
        if previous is None:
            previous = signal.SIG_DFL
        if signal.getsignal(self.signum) != self._handle_signal:
            logger.warning("Signal %d handler was replaced; not restoring", self.signum)
        else:
            try:
                signal.signal(self.signum, previous)
            except (ValueError, OSError) as e:
                logger.warning(
                    f"Failed to restore handler for signal {self.signum}: {e}"
                )
        self._previous = None
        self._bound = False

    def _handle_signal(self, signum: int, frame: Optional[FrameType]) -> None:
        self.trigger(signum)

    def trigger(self, signum: Optional[int] = None) -> None:
        """Record an interrupt request."""
        self._pending = self.signum if signum is None else signum

    def consume(self) -> Optional[int]:
        """Return the pending signal number and clear it, or None."""
        pending = self._pending
        if pending is not None:
            self._pending = None
        return pending

    def reset(self) -> None:
        """Reset the interrupt state."""
        self._pending = None

    def __enter__(self) -> "InterruptHandler":
        self.bind()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.unbind()
