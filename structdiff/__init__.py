"""
Structural Difference Engine
============================

Describe every point where two Python values disagree.

    diff(1, 2)                            → ["1 != 2"]
    diff([1, 2], [1])                     → ["list[2] != list[1]"]
    diff({"a": 1}, {"a": 2})              → ["['a']: 1 != 2"]
    diff(Config(port=80), Config(port=8080))
                                          → ["port: 80 != 8080"]

Values may be nested and cyclic: dataclasses, plain objects, named
tuples, lists, tuples, dicts, sets, weak references, enums and
registered scalar types are all walked.  Each disagreement becomes one
line, prefixed with the path that reaches it from the root, delivered
to a printer of your choice:

    diff(a, b)                 list of lines
    write_diff(stream, a, b)   one line per difference on a stream
    log_diff(logger, a, b)     one log record per difference
    print_diff(printer, a, b)  anything with printf(fmt, *args)
"""

from structdiff.core import (
    CycleGuard,
    Differ,
    diff,
    equal,
    key_diff,
    key_equal,
    log_diff,
    print_diff,
    write_diff,
)
from structdiff.errors import (
    InvalidKeyError, LoadError, StructDiffError, UnsupportedKindError,
)
from structdiff.formats import from_json, from_literal, from_toml, load_document
from structdiff.sinks import LineCollector, LoggerPrinter, Printer, StreamPrinter
from structdiff.values import Kind, Value, inspect_value, register_scalar, type_name

__version__ = "0.1.0"
__all__ = [
    "diff", "write_diff", "log_diff", "print_diff", "equal",
    "Differ", "CycleGuard", "key_equal", "key_diff",
    "Kind", "Value", "inspect_value", "register_scalar", "type_name",
    "Printer", "LineCollector", "StreamPrinter", "LoggerPrinter",
    "StructDiffError", "UnsupportedKindError", "InvalidKeyError", "LoadError",
    "from_json", "from_toml", "from_literal", "load_document",
]
