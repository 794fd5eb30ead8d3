"""
Colored console logging for dbcopy.

All log output goes to stderr: stdout carries nothing but the artifact
size printed by ``dbcopy wait``.
"""

import logging
import os
import sys
from typing import Optional, TextIO

NOISY_LOGGERS = ("boto3", "botocore", "s3transfer", "urllib3")


class Colors:
    """ANSI color codes for terminal output."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    CYAN = '\033[36m'


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colors the level name and dims the timestamp.

    Color scheme:
    - DEBUG: Cyan
    - INFO: Green
    - WARNING: Yellow
    - ERROR: Red
    - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        use_colors: bool = True,
        stream: Optional[TextIO] = None,
    ):
        """
        Initialize the colored formatter.

        Args:
            fmt: Log format string
            datefmt: Date format string
            use_colors: Whether to use colors (disabled anyway for non-TTY streams)
            stream: The stream the handler writes to, used for TTY detection
        """
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and self._supports_color(stream or sys.stderr)

    @staticmethod
    def _supports_color(stream: TextIO) -> bool:
        if os.environ.get('NO_COLOR'):
            return False
        if os.environ.get('FORCE_COLOR'):
            return True
        if not hasattr(stream, 'isatty') or not stream.isatty():
            return False
        if sys.platform == 'win32':
            return bool(os.environ.get('ANSICON') or os.environ.get('WT_SESSION'))
        return True

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        stamp = super().formatTime(record, datefmt)
        if self.use_colors:
            return f"{Colors.DIM}{stamp}{Colors.RESET}"
        return stamp

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)

        levelname_orig = record.levelname
        level_color = self.LEVEL_COLORS.get(record.levelno, '')
        record.levelname = f"{level_color}{record.levelname}{Colors.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname_orig


class StderrHandler(logging.StreamHandler):
    """
    StreamHandler writing to whatever ``sys.stderr`` is at emit time.

    A live progress display swaps ``sys.stderr`` for a proxy that prints
    above the spinner; a handler holding the original stream would write
    straight through it.
    """

    def __init__(self, level: int = logging.NOTSET):
        logging.Handler.__init__(self, level)

    @property
    def stream(self) -> TextIO:
        return sys.stderr


def setup_colored_logging(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    date_format: Optional[str] = None,
    use_colors: bool = True,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure colored logging on stderr.

    Replaces any handlers already installed on the root logger, so it is
    safe to call more than once.

    Args:
        level: The logging level (default: INFO)
        format_string: Custom format string (default: timestamp, level, message)
        date_format: Custom date format string
        use_colors: Whether to use colors (auto-detects TTY support)
        stream: Output stream (default: the current sys.stderr, looked up
            per record)
    """
    if format_string is None:
        format_string = '%(asctime)s %(levelname)s %(message)s'
    if date_format is None:
        date_format = '%Y/%m/%d %H:%M:%S'
    formatter = ColoredFormatter(
        fmt=format_string,
        datefmt=date_format,
        use_colors=use_colors,
        stream=stream if stream is not None else sys.stderr,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream) if stream is not None else StderrHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
