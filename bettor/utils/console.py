"""
Console logging for the bettor.

Adds a SUCCESS level between INFO and WARNING and colours console output
per level: blue info, green success, yellow warning, red error.
"""
import logging
import sys
from typing import Optional, TextIO

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

RESET = "\033[0m"
LEVEL_COLOURS = {
    logging.DEBUG: "\033[90m",
    logging.INFO: "\033[34m",
    SUCCESS: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}

CONSOLE_FORMAT = "[%(levelname)s] %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ColourFormatter(logging.Formatter):
    """Formatter that wraps each record in its level colour."""

    def __init__(self, fmt: str = CONSOLE_FORMAT, use_colour: bool = True):
        super().__init__(fmt)
        self.use_colour = use_colour

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        colour = LEVEL_COLOURS.get(record.levelno)
        if not self.use_colour or colour is None:
            return message
        return f"{colour}{message}{RESET}"


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    stream: TextIO = sys.stdout,
) -> None:
    """Install a coloured console handler and, optionally, a file handler."""
    console = logging.StreamHandler(stream)
    console.setFormatter(ColourFormatter(use_colour=stream.isatty()))
    handlers = [console]
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(file_handler)
    logging.basicConfig(level=level, handlers=handlers, force=True)


def clear_console(stream: TextIO = sys.stdout) -> None:
    """Clear the terminal when attached to one."""
    if stream.isatty():
        stream.write("\033[2J\033[H")
        stream.flush()
