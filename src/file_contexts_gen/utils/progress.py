"""
Textual progress bar driven by a shared counter
"""

import threading
from typing import Optional

import click

from file_contexts_gen.utils.logger import get_logger

logger = get_logger(__name__)

BAR_WIDTH = 50
REFRESH_INTERVAL = 0.2  # seconds

def render_progress_bar(progress: int, total: int, width: int = BAR_WIDTH) -> str:
    """
    Render "\\r[====>    ]  NN% (done/total)"

    Args:
        progress: Items processed so far
        total: Total items, must be positive
        width: Number of bar cells
    """
    percent = (progress * 100) // total
    filled = (width * progress) // total

    if percent < 100:
        bar = ("=" * (filled - 1) + ">") if filled > 0 else ""
        bar += " " * (width - filled)
    else:
        bar = "=" * width

    return f"\r[{bar}] {percent:3}% ({progress}/{total})"

class ProgressTracker:
    """
    Monotonic counter shared by workers plus an optional reporter thread

    Workers call increment(); the reporter samples the counter every
    REFRESH_INTERVAL seconds and redraws the bar without blocking them.
    """

    def __init__(self, total: int, show_progress: bool, interval: float = REFRESH_INTERVAL):
        self.total = total
        self.show_progress = show_progress and total > 0
        self.interval = interval
        self._current = 0
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._draw_lock = threading.Lock()
        self._drawn = False
        self.thread: Optional[threading.Thread] = None

        if self.show_progress:
            self.start()

    @property
    def current(self) -> int:
        with self._lock:
            return self._current

    def increment(self, value: int = 1):
        """Record processed items"""
        with self._lock:
            self._current += value

    def start(self):
        """Start the reporter thread"""
        if self.thread is None:
            self.thread = threading.Thread(target=self._report, name="progress-reporter", daemon=True)
            self.thread.start()

    def stop(self):
        """Stop the reporter thread without drawing"""
        self._stop_event.set()
        if self.thread:
            self.thread.join(timeout=5)

    def abort(self):
        """Stop reporting and end a partly drawn bar so later output starts on a new line"""
        self.stop()
        if self._drawn:
            click.echo()

    def finish(self):
        """Stop reporting and draw the final state"""
        if not self.show_progress:
            return

        self.stop()
        self._draw(min(self.current, self.total))
        click.echo()

    def _report(self):
        """Periodically sample the counter until it reaches total"""
        last_count = 0
        while not self._stop_event.wait(self.interval):
            count = self.current
            if count < last_count:
                logger.debug(f"Progress counter regressed from {last_count} to {count}")
                self._draw(last_count)
            else:
                last_count = count
                self._draw(count)

            if count >= self.total:
                self._draw(self.total)
                break

    def _draw(self, progress: int):
        with self._draw_lock:
            click.echo(render_progress_bar(progress, self.total), nl=False)
            self._drawn = True
