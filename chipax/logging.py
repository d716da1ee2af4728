"""Console logging for the emulator core and host.

Messages go through a single levelled ``ConsoleLogger``. Long jitted loops
report progress through a tqdm bar that is driven from inside the compiled
computation with ``io_callback``.
"""

import sys
import time
from typing import Callable, Optional, TextIO

import jax
from jax.experimental import io_callback

from tqdm import tqdm

LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40, "CRITICAL": 50}

COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET = "\033[0m"


class ConsoleLogger:
    """Levelled console logger.

    Args:
        name: Tag printed with every message
        log_level: Minimum level name that gets printed
        use_colors: Color the level tag when the stream is a terminal
        show_timestamps: Prefix messages with seconds since creation
        stream: Output stream, ``sys.stdout`` at call time when omitted
    """

    def __init__(
        self,
        name: str = "chipax",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: Optional[TextIO] = None,
    ):
        self.name = name
        self.use_colors = use_colors
        self.show_timestamps = show_timestamps
        self.stream = stream
        self.start_time = time.time()
        self.set_level(log_level)

    def set_level(self, log_level: str):
        level = log_level.upper()
        if level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.log_level = level

    def is_enabled(self, level: str) -> bool:
        return LEVELS[level] >= LEVELS[self.log_level]

    def log(self, level: str, message: str):
        if not self.is_enabled(level):
            return
        stream = self.stream or sys.stdout

        tag = f"[{level:>8s}]"
        if self.use_colors and getattr(stream, "isatty", lambda: False)():
            tag = f"{COLORS[level]}{tag}{RESET}"
        prefix = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""

        print(f"{prefix}{tag}[{self.name}] {message}", file=stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


logger = ConsoleLogger()


class _HostProgressBar:
    """Host side of a progress bar fed from a compiled loop."""

    def __init__(self, total: int, desc: str, **tqdm_kwargs):
        self.total = total
        self.desc = desc
        self.tqdm_kwargs = tqdm_kwargs
        self.bar = None

    def open(self):
        self.bar = tqdm(total=self.total, desc=self.desc, unit="cycle", **self.tqdm_kwargs)

    def advance(self, steps):
        if self.bar is not None:
            self.bar.update(int(steps))

    def close(self, steps):
        if self.bar is not None:
            self.bar.update(int(steps))
            self.bar.close()
            self.bar = None


def fori_loop_with_progress(
    n: int,
    print_rate: Optional[int] = None,
    desc: Optional[str] = None,
    **tqdm_kwargs,
) -> Callable:
    """Decorate a ``fori_loop`` body so it reports to a tqdm bar.

    The bar is advanced every ``print_rate`` iterations; the iterations left
    over are reported when the last one runs.
    """
    for kwarg in ("total", "mininterval", "maxinterval", "miniters"):
        tqdm_kwargs.pop(kwarg, None)
    if print_rate is None:
        print_rate = max(1, min(n // 20, 50))
    else:
        print_rate = max(1, min(print_rate, n))
    tail = n - ((n - 1) // print_rate) * print_rate

    progress = _HostProgressBar(n, desc or f"Running ({n:,} cycles)", **tqdm_kwargs)

    def _emit(condition, callback, *args):
        jax.lax.cond(
            condition,
            lambda: io_callback(callback, None, *args, ordered=True),
            lambda: None,
        )

    def decorator(body):
        def body_with_progress(i, carry):
            _emit(i == 0, progress.open)
            _emit((i % print_rate == 0) & (i > 0), progress.advance, print_rate)
            carry = body(i, carry)
            _emit(i == n - 1, progress.close, tail)
            return carry

        return body_with_progress

    return decorator
