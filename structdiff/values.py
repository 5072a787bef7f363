"""
structdiff.values — Value Inspector
===================================

Python has no static type descriptor attached to a value, so the differ
works on a thin handle, ``Value``, that pairs a runtime object with the
KIND the inspector assigned to it and a TYPE descriptor used for the
"same type?" test.

    inspect_value(3)             → Value(3, Kind.INT, int)
    inspect_value((1, 2))        → Value((1, 2), Kind.ARRAY, tuple[2])
    inspect_value({"a": 1})      → Value({...}, Kind.MAP, dict)
    inspect_value(Point(1, 2))   → Value(Point(...), Kind.STRUCT, Point)

Kinds
─────

    INVALID     None (absent / nil)
    BOOL        bool
    INT         numbers.Integral (bool excluded)
    UINT        octets read out of bytes / bytearray
    FLOAT       numbers.Real that are not integral
    COMPLEX     numbers.Complex that are not real
    STRING      str
    ARRAY       plain tuples (fixed length: the length is part of the type)
    SLICE       list, deque, other mutable sequences, bytes, bytearray
    MAP         mappings; sets are viewed as {member: True}
    PTR         weakref.ref (a dead reference is nil)
    INTERFACE   enum members, unwrapped to their value
    STRUCT      dataclasses, named tuples, objects with __dict__ / __slots__
                (an exception also shows its args)
    SCALAR      registered value types compared with == (datetime, Decimal…)
    FUNC        functions, methods, builtins, functools.partial
    CHAN        queue.Queue, queue.SimpleQueue, asyncio.Queue
    OPAQUE      classes, modules, streams, sockets, locks, generators…

Anything else is a hole in the taxonomy and raises UnsupportedKindError.

Identity
────────

A value is ADDRESSABLE when it is a mutable composite (list, dict, set,
object…) that was not read directly out of a mapping entry.  Only
addressable values carry an identity, ``(id(obj), type)``, which the cycle
guard uses to stop the walk on revisits.  Values read out of a mapping
stay unprotected: a cycle running only through mapping values recurses
until Python raises RecursionError.
"""

from __future__ import annotations

import asyncio
import dataclasses
import datetime
import decimal
import enum
import functools
import inspect
import io
import ipaddress
import numbers
import pathlib
import queue
import re
import socket
import threading
import types
import uuid
import weakref
from collections import abc, deque
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from .errors import UnsupportedKindError


class Kind(enum.Enum):
    """Kinds reported by the value inspector."""
    INVALID = "invalid"
    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    COMPLEX = "complex"
    STRING = "string"
    ARRAY = "array"
    SLICE = "slice"
    MAP = "map"
    PTR = "ptr"
    INTERFACE = "interface"
    STRUCT = "struct"
    SCALAR = "scalar"
    FUNC = "func"
    CHAN = "chan"
    OPAQUE = "opaque"


@dataclass(frozen=True, slots=True)
class ArrayType:
    """Type descriptor of a fixed-length tuple: ``tuple[3]``."""
    cls: type
    length: int

    def __str__(self) -> str:
        return f"{type_name(self.cls)}[{self.length}]"


# ═══════════════════════════════════════════════════════════════════
#  KIND REGISTRIES
# ═══════════════════════════════════════════════════════════════════

_SCALAR_TYPES: tuple[type, ...] = (
    datetime.date,
    datetime.time,
    datetime.timedelta,
    datetime.tzinfo,
    decimal.Decimal,
    uuid.UUID,
    pathlib.PurePath,
    ipaddress.IPv4Address,
    ipaddress.IPv6Address,
    ipaddress.IPv4Network,
    ipaddress.IPv6Network,
    range,
    slice,
    re.Pattern,
)

_CHAN_TYPES: tuple[type, ...] = (queue.Queue, queue.SimpleQueue, asyncio.Queue)

_OPAQUE_TYPES: tuple[type, ...] = (
    type,
    types.ModuleType,
    io.IOBase,
    socket.socket,
    memoryview,
    types.GeneratorType,
    types.CoroutineType,
    types.AsyncGeneratorType,
    type(threading.Lock()),
    type(threading.RLock()),
    threading.Condition,
    threading.Event,
    threading.Semaphore,
    threading.Thread,
)

# Composites that cannot be mutated in place, hence cannot close a cycle.
_IMMUTABLE: tuple[type, ...] = (tuple, frozenset, bytes)

_COMPOSITE_KINDS = frozenset({Kind.SLICE, Kind.MAP, Kind.STRUCT})


def register_scalar(*classes: type) -> None:
    """
    Teach the inspector about additional value types.

    Instances of the registered classes are compared with ``==`` and
    rendered with ``repr()``, both in the walker and in key matching.
    """
    global _SCALAR_TYPES
    _SCALAR_TYPES = _SCALAR_TYPES + tuple(c for c in classes if c not in _SCALAR_TYPES)


def type_name(t: Any) -> str:
    """Render a type descriptor: ``int``, ``list``, ``tuple[2]``, ``pkg.mod.Point``."""
    if isinstance(t, ArrayType):
        return str(t)
    if t.__module__ == "builtins":
        return t.__qualname__
    return f"{t.__module__}.{t.__qualname__}"


# ═══════════════════════════════════════════════════════════════════
#  INSPECTED VALUE
# ═══════════════════════════════════════════════════════════════════

_UNSET = object()


@dataclass(frozen=True, slots=True)
class Value:
    """
    An inspected runtime value.

    ``obj`` is the raw object, ``kind`` what the inspector made of it and
    ``type`` the descriptor two values must share before they are
    compared any further.
    """
    obj: Any
    kind: Kind
    type: Any
    addressable: bool = False

    def __repr__(self) -> str:
        return f"Value({self.obj!r}, {self.kind.name}, {type_name(self.type)})"

    @property
    def valid(self) -> bool:
        return self.kind is not Kind.INVALID

    @property
    def identity(self) -> Optional[tuple[int, Any]]:
        """``(id(obj), type)`` for addressable values, ``None`` otherwise."""
        if not self.addressable:
            return None
        return (id(self.obj), self.type)

    @property
    def address(self) -> int:
        return id(self.obj)

    def is_nil(self) -> bool:
        if self.kind is Kind.INVALID:
            return True
        if self.kind is Kind.PTR:
            return self.obj() is None
        return False

    # ── sequences ──

    def length(self) -> int:
        return len(self.obj)

    def index(self, i: int) -> "Value":
        item = self.obj[i]
        if isinstance(self.obj, (bytes, bytearray)):
            return Value(item, Kind.UINT, int)
        return inspect_value(item)

    # ── structs ──

    def field_names(self) -> list[str]:
        """Field names in declaration order."""
        obj = self.obj
        if isinstance(obj, tuple):
            return list(type(obj)._fields)
        if dataclasses.is_dataclass(obj):
            return [f.name for f in dataclasses.fields(obj)]

        # Exceptions keep their payload in a C-level slot.
        names: list[str] = ["args"] if isinstance(obj, BaseException) else []
        for cls in reversed(type(obj).__mro__):
            slots = cls.__dict__.get("__slots__", ())
            if isinstance(slots, str):
                slots = (slots,)
            for slot in slots:
                if slot in ("__dict__", "__weakref__"):
                    continue
                if slot.startswith("__") and not slot.endswith("__"):
                    slot = f"_{cls.__name__.lstrip('_')}{slot}"
                if slot not in names:
                    names.append(slot)
        for name in getattr(obj, "__dict__", {}):
            if name not in names:
                names.append(name)
        return names

    def field(self, name: str) -> "Value":
        """The named field; a field the instance does not have is nil."""
        item = getattr(self.obj, name, _UNSET)
        if item is _UNSET:
            return NIL
        return inspect_value(item)

    def fields(self) -> Iterator[tuple[str, "Value"]]:
        for name in self.field_names():
            yield name, self.field(name)

    # ── maps ──

    def map_keys(self) -> list["Value"]:
        return [inspect_value(k, addressable=False) for k in self.obj]

    def map_index(self, key: "Value") -> "Value":
        if isinstance(self.obj, abc.Set):
            return inspect_value(True, addressable=False)
        return inspect_value(self.obj[key.obj], addressable=False)

    # ── pointers and interfaces ──

    def elem(self) -> "Value":
        """Pointee of a PTR (addressable) or value held by an INTERFACE."""
        if self.kind is Kind.PTR:
            return inspect_value(self.obj())
        if self.kind is Kind.INTERFACE:
            return inspect_value(self.obj.value, addressable=False)
        raise UnsupportedKindError(f"elem() on {self.kind.name} value")


NIL = Value(None, Kind.INVALID, type(None))


# ═══════════════════════════════════════════════════════════════════
#  INSPECTOR
# ═══════════════════════════════════════════════════════════════════

def kind_of(obj: Any) -> Kind:
    """
    Classify ``obj``.

    Order matters: enum members before numbers (IntEnum is an int), bool
    before int (bool is a subclass of int), named tuples before tuples,
    weak references before callables.
    """
    if obj is None:
        return Kind.INVALID
    if isinstance(obj, enum.Enum):
        return Kind.INTERFACE
    if isinstance(obj, _SCALAR_TYPES):
        return Kind.SCALAR
    if isinstance(obj, bool):
        return Kind.BOOL
    if isinstance(obj, numbers.Integral):
        return Kind.INT
    if isinstance(obj, numbers.Real):
        return Kind.FLOAT
    if isinstance(obj, numbers.Complex):
        return Kind.COMPLEX
    if isinstance(obj, str):
        return Kind.STRING
    if isinstance(obj, (bytes, bytearray)):
        return Kind.SLICE
    if isinstance(obj, tuple):
        return Kind.STRUCT if hasattr(type(obj), "_fields") else Kind.ARRAY
    if isinstance(obj, (list, deque, abc.MutableSequence)):
        return Kind.SLICE
    if isinstance(obj, (abc.Mapping, abc.Set)):
        return Kind.MAP
    if isinstance(obj, weakref.ref):
        return Kind.PTR
    if inspect.isroutine(obj) or isinstance(obj, functools.partial):
        return Kind.FUNC
    if isinstance(obj, _CHAN_TYPES):
        return Kind.CHAN
    if isinstance(obj, _OPAQUE_TYPES) or type(obj) is object:
        return Kind.OPAQUE
    if dataclasses.is_dataclass(obj) or hasattr(obj, "__dict__") or _has_slots(obj):
        return Kind.STRUCT
    raise UnsupportedKindError(f"no kind for value of type {type_name(type(obj))}")


def _has_slots(obj: Any) -> bool:
    return any("__slots__" in cls.__dict__ for cls in type(obj).__mro__[:-1])


def inspect_value(obj: Any, addressable: bool = True) -> Value:
    """
    Wrap ``obj`` in a Value.

    ``addressable`` is cleared by callers that read ``obj`` out of a
    mapping entry; it only sticks for mutable composites anyway.
    """
    kind = kind_of(obj)
    if kind is Kind.INVALID:
        return NIL
    if kind is Kind.ARRAY:
        t: Any = ArrayType(type(obj), len(obj))
    else:
        t = type(obj)
    addressable = (
        addressable
        and kind in _COMPOSITE_KINDS
        and not isinstance(obj, _IMMUTABLE)
    )
    return Value(obj, kind, t, addressable)
