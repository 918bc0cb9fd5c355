"""Cancellable periodic driver for a session."""

from typing import Any, Callable, Optional

from .session import Cursor, Session, tick


class PeriodicTicker:
    """Calls :func:`tick` on a session once per period while it is running.

    The timer is anything with Tkinter's ``after(ms, callback)`` and
    ``after_cancel(id)`` methods, normally the root window. At most one
    registration is pending at a time, and the period is re-read from
    ``session.speed`` before every reschedule.
    """

    def __init__(
        self,
        timer: Any,
        session: Session,
        on_tick: Optional[Callable[[Cursor], None]] = None,
    ) -> None:
        """Initialize the ticker.

        Args:
            timer: Object providing after() and after_cancel()
            session: Session to drive
            on_tick: Called with the written cell's cursor after each tick
        """
        self.timer = timer
        self.session = session
        self.on_tick = on_tick
        self._after_id: Optional[str] = None
        self._in_tick = False

    @property
    def active(self) -> bool:
        """Whether a tick is currently scheduled."""
        return self._after_id is not None

    def start(self) -> None:
        """Schedule the next tick if none is pending."""
        if self._after_id is None:
            self._after_id = self.timer.after(self.session.speed, self._fire)

    def cancel(self) -> None:
        """Cancel the pending tick, if any."""
        if self._after_id is not None:
            self.timer.after_cancel(self._after_id)
            self._after_id = None

    def restart(self) -> None:
        """Reschedule the pending tick with the current speed."""
        self.cancel()
        self.start()

    def _fire(self) -> None:
        self._after_id = None
        if self._in_tick or not self.session.is_running:
            return

        self._in_tick = True
        try:
            written = tick(self.session)
        finally:
            self._in_tick = False

        if self.on_tick is not None:
            self.on_tick(written)

        # on_tick may have paused the session
        if self.session.is_running:
            self.start()
