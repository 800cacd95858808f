import asyncio
import sys
import threading
import time


class SingleLineRenderer:
    """Thread-safe writer that redraws a single console line."""

    def __init__(self, *, single_line: bool = True, stream=None) -> None:
        self.single_line = single_line
        self._stream = stream
        self._last_len = 0
        self._lock = threading.Lock()

    @property
    def stream(self):
        return self._stream if self._stream is not None else sys.stdout

    def clear_line(self) -> None:
        """Erase the current progress line."""
        with self._lock:
            if self.single_line and self._last_len > 0:
                self.stream.write('\r' + ' ' * self._last_len + '\r')
                self.stream.flush()
                self._last_len = 0

    def write_line(self, msg: str) -> None:
        """Redraw the progress line."""
        with self._lock:
            if self.single_line:
                pad = max(0, self._last_len - len(msg))
                self.stream.write('\r' + msg + (' ' * pad))
            else:
                self.stream.write(msg + '\n')
            self.stream.flush()
            self._last_len = len(msg)


# Default instance (a custom one can be passed to ConsoleProgress)
DEFAULT_WRITER = SingleLineRenderer()


class ConsoleProgress:
    """Progress bar for step-wise operations."""

    def __init__(
        self,
        total: int,
        label: str = 'Progress',
        writer: SingleLineRenderer | None = None,
    ) -> None:
        self.total = max(1, int(total))
        self.done = 0
        self.start = time.monotonic()
        self.label = label
        self._writer = writer or DEFAULT_WRITER
        self._lock = asyncio.Lock()
        self._writer.clear_line()
        self._render()

    def _format_eta(self, remaining: float) -> str:
        if remaining == float('inf'):
            return '--:--'
        m, s = divmod(int(remaining), 60)
        h, m = divmod(m, 60)
        if h > 0:
            return f'{h:02d}:{m:02d}:{s:02d}'
        return f'{m:02d}:{s:02d}'

    def _render(self) -> None:
        elapsed = max(1e-6, time.monotonic() - self.start)
        rps = self.done / elapsed
        remaining = (self.total - self.done) / rps if rps > 0 else float('inf')
        bar_len = 30
        filled = int(bar_len * self.done / self.total)
        bar = '█' * filled + '░' * (bar_len - filled)
        msg = (
            f'{self.label}: [{bar}] {self.done}/{self.total} | {rps:4.1f}/s | ETA'
            f' {self._format_eta(remaining)}'
        )
        self._writer.write_line(msg)

    def step_sync(self, n: int = 1) -> None:
        self.done = min(self.total, self.done + n)
        self._render()

    async def step(self, n: int = 1) -> None:
        async with self._lock:
            self.step_sync(n)

    def close(self) -> None:
        self._writer.clear_line()
