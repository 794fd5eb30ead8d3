"""
Serialized progress display for the wait engine.

Watchers never touch the terminal directly: they hand rendering
instructions to a ProgressSink, whose renderer task applies them one at a
time around a ``rich`` live spinner.
"""

import asyncio
import logging
from datetime import timedelta
from typing import Callable, Optional

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner
from rich.text import Text

from .state import RunState

log = logging.getLogger(__name__)

ProgressEvent = Callable[[], None]

DEFAULT_TICK_INTERVAL = 0.1


def _clock(seconds: float) -> str:
    return str(timedelta(seconds=int(seconds)))


class WaitIndicator:
    """Spinner line with the elapsed and remaining time of a run."""

    def __init__(self, description: str, state: RunState):
        self.description = description
        self._state = state
        self._spinner = Spinner("dots", style="cyan")

    def __rich__(self) -> Spinner:
        text = Text(self.description)
        text.append(f"  {_clock(self._state.elapsed())} elapsed", style="dim")
        remaining = self._state.remaining()
        if remaining is not None:
            text.append(f", {_clock(remaining)} left", style="dim")
        self._spinner.update(text=text)
        return self._spinner


class ProgressSink:
    """
    Single-consumer channel owning the progress display.

    Producers call ``emit`` (or ``log``) from any task. The renderer started
    with ``run`` clears the spinner, applies the instruction and redraws the
    spinner, so output of two instructions never overlaps and log lines
    never land inside the spinner line. ``emit`` returns once the
    instruction has been applied.

    While the spinner is up, ``sys.stderr`` is redirected through the
    console, so records written by other loggers print above the spinner
    rather than into it. Log handlers must look up ``sys.stderr`` when they
    write (see ``StderrHandler``).
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        description: str = "waiting",
    ):
        self.console = console or Console(stderr=True)
        self.description = description
        self._tick_interval = tick_interval
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    async def emit(self, event: ProgressEvent) -> None:
        """Hand ``event`` to the renderer and wait until it ran."""
        if self._closed:
            event()
            return
        applied = asyncio.get_running_loop().create_future()
        self._queue.put_nowait((event, applied))
        await applied

    async def log(self, message: str, *args, level: int = logging.INFO) -> None:
        await self.emit(lambda: log.log(level, message, *args))

    async def run(self, state: RunState) -> None:
        """Render until cancelled, then flush pending events and clear the display."""
        live = Live(
            WaitIndicator(self.description, state),
            console=self.console,
            auto_refresh=False,
            transient=True,
            redirect_stdout=False,
            redirect_stderr=True,
        )
        live.start(refresh=True)
        # The getter outlives each tick so a queued event is never dropped
        # by a timeout or by cancellation.
        getter: Optional[asyncio.Future] = None
        try:
            while True:
                if getter is None:
                    getter = asyncio.ensure_future(self._queue.get())
                done, _ = await asyncio.wait({getter}, timeout=self._tick_interval)
                if not done:
                    live.refresh()
                    continue
                event, applied = getter.result()
                getter = None
                live.stop()
                self._apply(event, applied)
                live.start(refresh=True)
        finally:
            live.stop()
            if getter is not None:
                if getter.done() and not getter.cancelled():
                    self._apply(*getter.result())
                else:
                    getter.cancel()
            self.close()

    def close(self) -> None:
        """Stop queueing: apply pending events now and later ones directly.

        Also call this when the renderer task ends without ever running,
        e.g. cancelled before its first step, so no producer waits forever.
        """
        self._closed = True
        while not self._queue.empty():
            event, applied = self._queue.get_nowait()
            self._apply(event, applied)

    @staticmethod
    def _apply(event: ProgressEvent, applied: asyncio.Future) -> None:
        try:
            event()
        except Exception as e:
            if not applied.done():
                applied.set_exception(e)
            return
        if not applied.done():
            applied.set_result(None)
