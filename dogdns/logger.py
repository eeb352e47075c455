"""Debug logging to standard error."""

from __future__ import annotations

import logging
import sys

from .colours import Style

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_PACKAGE_LOGGER = "dogdns"

# Stay silent unless logging is switched on.
logging.getLogger(_PACKAGE_LOGGER).addHandler(logging.NullHandler())

_BRACKET = Style("38;2;150;150;150")
_LEVELS = (
    (logging.ERROR, "ERROR", Style("31")),
    (logging.WARNING, "WARN", Style("33")),
    (logging.INFO, "INFO", Style("36")),
    (logging.DEBUG, "DEBUG", Style("34")),
)
_TRACE_STYLE = Style("38;2;180;180;180")


def level_label(levelno: int) -> str:
    """Return the coloured label for a log level."""
    for threshold, name, style in _LEVELS:
        if levelno >= threshold:
            return style.paint(name)
    return _TRACE_STYLE.paint("TRACE")


class ColourFormatter(logging.Formatter):
    """Formats records as ``[LEVEL target] message`` with colours."""

    def format(self, record: logging.LogRecord) -> str:
        line = (
            f"{_BRACKET.paint('[')}{level_label(record.levelno)} "
            f"{record.name}{_BRACKET.paint(']')} {record.getMessage()}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure(value: str | None) -> logging.Logger | None:
    """Enable logging if the value is set; ``"trace"`` selects the most detail."""
    if not value:
        return None

    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(TRACE if value == "trace" else logging.DEBUG)

    for handler in list(logger.handlers):
        if isinstance(handler.formatter, ColourFormatter):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColourFormatter())
    logger.addHandler(handler)
    return logger