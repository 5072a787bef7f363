"""
structdiff.sinks — where diff lines go.

The differ only knows the ``Printer`` contract: one ``printf(fmt, *args)``
call per disagreement, rendered with ``%`` interpolation.  That is the
same rule ``logging`` applies to a record's ``msg`` and ``args``, so a
line reads identically whichever adapter receives it:

    LineCollector       collects rendered lines in a list
    StreamPrinter       writes each line plus "\\n" to a text or binary stream
    LoggerPrinter       hands fmt and args to logger.log(level, ...)
"""

from __future__ import annotations

import io
import logging
from typing import Any, IO, Protocol, Union


class Printer(Protocol):
    """Anything that accepts one formatted line per call."""

    def printf(self, fmt: str, *args: Any) -> None:
        ...


def render(fmt: str, *args: Any) -> str:
    """Render one line the way every adapter does."""
    if not args:
        return fmt
    return fmt % args


class LineCollector:
    """Collect rendered lines, without trailing newlines, in call order."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def printf(self, fmt: str, *args: Any) -> None:
        self.lines.append(render(fmt, *args))

    def __len__(self) -> int:
        return len(self.lines)


class StreamPrinter:
    """
    Write each line followed by a newline.

    Text streams receive ``str``; binary streams (raw or buffered I/O, or
    anything opened in a ``b`` mode) receive UTF-8 encoded bytes.
    """

    def __init__(self, stream: IO[Any], encoding: str = "utf-8") -> None:
        self.stream = stream
        self.encoding = encoding
        self.binary = _is_binary(stream)

    def printf(self, fmt: str, *args: Any) -> None:
        line = render(fmt, *args) + "\n"
        if self.binary:
            self.stream.write(line.encode(self.encoding))
        else:
            self.stream.write(line)


class LoggerPrinter:
    """Forward each line to ``logger.log(level, fmt, *args)``."""

    def __init__(
        self,
        logger: Union[logging.Logger, logging.LoggerAdapter],
        level: int = logging.INFO,
    ) -> None:
        self.logger = logger
        self.level = level

    def printf(self, fmt: str, *args: Any) -> None:
        self.logger.log(self.level, fmt, *args)


def _is_binary(stream: IO[Any]) -> bool:
    if isinstance(stream, io.TextIOBase):
        return False
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        return True
    return "b" in getattr(stream, "mode", "")
