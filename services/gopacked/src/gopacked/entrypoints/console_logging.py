from __future__ import annotations

import logging
import sys
from typing import TextIO

_PREFIXES = {
    logging.DEBUG: ("[Debug] ", "\x1b[2m"),
    logging.INFO: ("[Info] ", ""),
    logging.WARNING: ("[Warning] ", "\x1b[33m"),
    logging.ERROR: ("[Error] ", "\x1b[31m"),
    logging.CRITICAL: ("[Fatal] ", "\x1b[35m"),
}
_RESET = "\x1b[0m"


class PrefixFormatter(logging.Formatter):
    """Console formatter: ``[Level] message``, colored on terminals."""

    def __init__(self, color: bool = False):
        super().__init__()
        self._color = color

    def format(self, record: logging.LogRecord) -> str:
        prefix, color = _PREFIXES.get(record.levelno, ("[%s] " % record.levelname.title(), ""))
        msg = record.getMessage()
        if record.exc_info:
            msg += "\n" + self.formatException(record.exc_info)
        if self._color and color:
            return f"{color}{prefix}{msg}{_RESET}"
        return f"{prefix}{msg}"


def configure_logging(verbose: bool = False, stream: TextIO | None = None) -> logging.Handler:
    """Route the ``gopacked`` logger tree to a single console handler."""
    out = stream if stream is not None else sys.stderr
    handler = logging.StreamHandler(out)
    isatty = getattr(out, "isatty", None)
    handler.setFormatter(PrefixFormatter(color=bool(isatty and isatty())))

    root = logging.getLogger("gopacked")
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    return handler
