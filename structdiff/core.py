"""
structdiff.core — Structural Difference Engine
==============================================

    diff(1, 2)                          → ["1 != 2"]
    diff(1, "x")                        → ["int != str"]
    diff(Point(1, 2), Point(1, 3))      → ["y: 2 != 3"]
    diff({"a": [1, 2]}, {"a": [1]})     → ["['a']: list[2] != list[1]"]

§1  THE WALK
────────────

Both values are walked in lock step.  At every pair of sub-values the
walker asks, in order:

    1. Is one side absent (None)?      → "nil != x" / "x != nil"
    2. Do the types differ?            → "int != str", stop
    3. Has this pair been seen before? → cycle guard (§3)
    4. Dispatch on the kind:
         atoms       compare with ==, print both sides
         array       recurse per index
         slice       length mismatch stops the walk, else recurse per index
         struct      recurse per field, in declaration order
         pointer     nil handling, then recurse into the pointee
         interface   unwrap, recurse
         func/chan   compare addresses
         map         key matching (§2)

Every mismatch produces exactly one line, prefixed with the path that
leads to it from the root:

    .name      field access (no leading dot at the root)
    [3]        sequence index
    ['key']    map entry (repr of the key)

This is NOT an edit script.  A slice that lost its first element is one
"list[3] != list[2]" line, not an alignment.

§2  KEY MATCHING
────────────────

Map entries are paired by STRUCTURAL equality of their keys, found by a
pairwise scan, O(|A|·|B|).  Hash lookups are deliberately not used: they
would pair 1, 1.0 and True, and would miss two field-wise equal
instances of a class without __eq__.

Each right key is claimed by at most one left key.  Key objects may refer
to each other; a pair of objects met again while still being compared
counts as equal, so cyclic keys terminate.

§3  CYCLES
──────────

Each side keeps a visited map  identity → identity-on-the-other-side.
Revisiting a pair consistently ends that branch silently; revisiting a
value paired with something else is reported as "(previously visited)".
Only addressable values have an identity (see structdiff.values), so a
cycle made purely of mapping values is not caught.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, IO, Optional, Union

from .errors import InvalidKeyError, UnsupportedKindError
from .sinks import LineCollector, LoggerPrinter, Printer, StreamPrinter
from .values import Kind, Value, inspect_value, type_name

logger = logging.getLogger(__name__)

Identity = tuple[int, Any]


# ═══════════════════════════════════════════════════════════════════
#  CYCLE GUARD
# ═══════════════════════════════════════════════════════════════════

class Visit(enum.Enum):
    FIRST = enum.auto()           # never seen, walk it
    REVISIT = enum.auto()         # seen with the same counterpart, skip
    LEFT_CONFLICT = enum.auto()   # left seen before, paired with another right
    RIGHT_CONFLICT = enum.auto()  # right seen before, paired with another left


@dataclass
class CycleGuard:
    """Visited maps for one top-level comparison."""
    left: dict[Identity, Identity] = field(default_factory=dict)
    right: dict[Identity, Identity] = field(default_factory=dict)

    def visit(self, a: Identity, b: Identity) -> Visit:
        """Record ``a`` and ``b`` as counterparts and say how they were met."""
        if a in self.left:
            state = Visit.REVISIT if self.left[a] == b else Visit.LEFT_CONFLICT
        elif b in self.right:
            state = Visit.RIGHT_CONFLICT
        else:
            state = Visit.FIRST
        self.left[a] = b
        self.right[b] = a
        return state


# ═══════════════════════════════════════════════════════════════════
#  KEY MATCHER
# ═══════════════════════════════════════════════════════════════════

_ATOM_KINDS = (Kind.BOOL, Kind.INT, Kind.UINT, Kind.FLOAT,
               Kind.COMPLEX, Kind.STRING, Kind.SCALAR)


def key_equal(a: Value, b: Value, _active: Optional[set] = None) -> bool:
    """
    Structural equality of two mapping keys.

    A key that is itself a mutable container cannot be a mapping key;
    meeting one raises InvalidKeyError.  Mutable containers reached
    through a key's fields or elements are compared by content.
    """
    return _key_equal(a, b, set() if _active is None else _active, False)


def _key_equal(a: Value, b: Value, active: set, nested: bool) -> bool:
    if not a.valid and not b.valid:
        return True
    if not a.valid or not b.valid or a.type != b.type:
        return False

    kind = a.kind
    if kind in _ATOM_KINDS:
        return a.obj == b.obj
    if kind is Kind.ARRAY:
        return all(_key_equal(a.index(i), b.index(i), active, True)
                   for i in range(a.length()))
    if kind is Kind.PTR:
        return a.obj() is b.obj()
    if kind in (Kind.FUNC, Kind.CHAN, Kind.OPAQUE):
        return a.address == b.address
    if kind is Kind.INTERFACE:
        return _key_equal(a.elem(), b.elem(), active, True)
    if kind is Kind.SLICE and isinstance(a.obj, bytes):
        return a.obj == b.obj
    if kind is Kind.MAP and isinstance(a.obj, frozenset):
        return _same_members(a, b, active)
    if kind not in (Kind.STRUCT, Kind.SLICE, Kind.MAP):
        raise InvalidKeyError(f"invalid map key type {type_name(a.type)}")
    if kind is not Kind.STRUCT and not nested:
        raise InvalidKeyError(f"invalid map key type {type_name(a.type)}")

    # A pair already on the open path is assumed equal; any real
    # difference shows up where the path first entered it.
    pair = (id(a.obj), id(b.obj))
    if pair in active:
        return True
    active.add(pair)
    try:
        if kind is Kind.STRUCT:
            return all(_key_equal(a.field(name), b.field(name), active, True)
                       for name in _field_names(a, b))
        if kind is Kind.SLICE:
            return a.length() == b.length() and all(
                _key_equal(a.index(i), b.index(i), active, True)
                for i in range(a.length()))
        return _same_members(a, b, active)
    finally:
        active.discard(pair)


def _same_members(a: Value, b: Value, active: set) -> bool:
    only_a, both, only_b = key_diff(a.map_keys(), b.map_keys(), active)
    if only_a or only_b:
        return False
    return all(_key_equal(a.map_index(ak), b.map_index(bk), active, True)
               for ak, bk in both)


def key_diff(
    a: list[Value], b: list[Value], _active: Optional[set] = None,
) -> tuple[list[Value], list[tuple[Value, Value]], list[Value]]:
    """
    Partition two key lists.

    Returns ``(only_a, both, only_b)`` where ``both`` holds the matched
    ``(a_key, b_key)`` pairs in the order of ``a``.  Each key of ``b``
    is matched at most once.
    """
    only_a: list[Value] = []
    both: list[tuple[Value, Value]] = []
    remaining = list(b)
    for ak in a:
        for i, bk in enumerate(remaining):
            if key_equal(ak, bk, _active):
                both.append((ak, bk))
                del remaining[i]
                break
        else:
            only_a.append(ak)
    return only_a, both, remaining


def _field_names(a: Value, b: Value) -> list[str]:
    """Fields of ``a`` in order, then any that only ``b`` has."""
    names = a.field_names()
    seen = set(names)
    return names + [n for n in b.field_names() if n not in seen]


# ═══════════════════════════════════════════════════════════════════
#  DIFFER
# ═══════════════════════════════════════════════════════════════════

_ATOM_FORMATS = {
    Kind.BOOL: "%s != %s",
    Kind.INT: "%d != %d",
    Kind.UINT: "%d != %d",
    Kind.FLOAT: "%s != %s",
    Kind.COMPLEX: "%s != %s",
    Kind.STRING: "%r != %r",
    Kind.SCALAR: "%r != %r",
}


@dataclass(frozen=True, slots=True)
class Differ:
    """
    The recursive walker.

    A Differ is immutable: ``relabel`` returns a copy sharing the printer
    and the cycle guard, so a child path never leaks into its parent.
    """
    printer: Printer
    guard: CycleGuard = field(default_factory=CycleGuard)
    label: str = ""

    def printf(self, fmt: str, *args: Any) -> None:
        if self.label:
            fmt = self.label.replace("%", "%%") + ": " + fmt
        self.printer.printf(fmt, *args)

    def relabel(self, name: str) -> "Differ":
        label = self.label
        if label and not name.startswith("["):
            label += "."
        return dataclasses.replace(self, label=label + name)

    def diff(self, av: Value, bv: Value) -> None:
        if not av.valid and bv.valid:
            self.printf("nil != %r", bv.obj)
            return
        if av.valid and not bv.valid:
            self.printf("%r != nil", av.obj)
            return
        if not av.valid and not bv.valid:
            return

        if av.type != bv.type:
            self.printf("%s != %s", type_name(av.type), type_name(bv.type))
            return

        a_id, b_id = av.identity, bv.identity
        if a_id is not None and b_id is not None:
            state = self.guard.visit(a_id, b_id)
            if state is Visit.LEFT_CONFLICT:
                self.printf("%r (previously visited) != %r", av.obj, bv.obj)
            elif state is Visit.RIGHT_CONFLICT:
                self.printf("%r != %r (previously visited)", av.obj, bv.obj)
            if state is not Visit.FIRST:
                logger.debug("cycle broken at %s (%s)", self.label or "(root)", state.name)
                return

        kind = av.kind
        if kind in _ATOM_FORMATS:
            if av.obj != bv.obj:
                self.printf(_ATOM_FORMATS[kind], av.obj, bv.obj)
        elif kind is Kind.ARRAY:
            for i in range(av.length()):
                self.relabel(f"[{i}]").diff(av.index(i), bv.index(i))
        elif kind is Kind.SLICE:
            self._diff_slice(av, bv)
        elif kind is Kind.STRUCT:
            for name in _field_names(av, bv):
                self.relabel(name).diff(av.field(name), bv.field(name))
        elif kind is Kind.PTR:
            self._diff_pointer(av, bv)
        elif kind is Kind.INTERFACE:
            self.diff(av.elem(), bv.elem())
        elif kind in (Kind.FUNC, Kind.CHAN, Kind.OPAQUE):
            if av.address != bv.address:
                self.printf("%#x != %#x", av.address, bv.address)
        elif kind is Kind.MAP:
            self._diff_map(av, bv)
        else:
            raise UnsupportedKindError(f"unknown kind: {kind.name}")

    def _diff_slice(self, av: Value, bv: Value) -> None:
        len_a, len_b = av.length(), bv.length()
        if len_a != len_b:
            name = type_name(av.type)
            self.printf("%s[%d] != %s[%d]", name, len_a, name, len_b)
            return
        for i in range(len_a):
            self.relabel(f"[{i}]").diff(av.index(i), bv.index(i))

    def _diff_pointer(self, av: Value, bv: Value) -> None:
        a_nil, b_nil = av.is_nil(), bv.is_nil()
        if a_nil and not b_nil:
            self.printf("nil != %r", bv.obj)
        elif not a_nil and b_nil:
            self.printf("%r != nil", av.obj)
        elif not a_nil and not b_nil:
            self.diff(av.elem(), bv.elem())

    def _diff_map(self, av: Value, bv: Value) -> None:
        only_a, both, only_b = key_diff(av.map_keys(), bv.map_keys())
        for k in only_a:
            self.relabel(f"[{k.obj!r}]").printf("%r != (missing)", av.map_index(k).obj)
        for ak, bk in both:
            self.relabel(f"[{ak.obj!r}]").diff(av.map_index(ak), bv.map_index(bk))
        for k in only_b:
            self.relabel(f"[{k.obj!r}]").printf("(missing) != %r", bv.map_index(k).obj)


# ═══════════════════════════════════════════════════════════════════
#  ENTRY POINTS
# ═══════════════════════════════════════════════════════════════════

def print_diff(printer: Printer, a: Any, b: Any) -> None:
    """
    Print to ``printer`` a description of the differences between a and b.

    ``printer.printf`` is called once per difference, without a trailing
    newline.  Nothing is printed when the values agree.
    """
    guard = CycleGuard()
    Differ(printer, guard).diff(inspect_value(a), inspect_value(b))
    logger.debug(
        "compared %s with %s (%d/%d identities visited)",
        type_name(type(a)), type_name(type(b)), len(guard.left), len(guard.right),
    )


def diff(a: Any, b: Any) -> list[str]:
    """
    Describe every difference between ``a`` and ``b``.

    Returns one string per difference, in walk order; an empty list
    means the values are structurally equal.
    """
    collector = LineCollector()
    print_diff(collector, a, b)
    return collector.lines


def write_diff(stream: IO[Any], a: Any, b: Any) -> None:
    """Write the differences between a and b to ``stream``, one per line."""
    print_diff(StreamPrinter(stream), a, b)


def log_diff(
    log: Union[logging.Logger, logging.LoggerAdapter],
    a: Any,
    b: Any,
    level: int = logging.INFO,
) -> None:
    """Log one record per difference between a and b at ``level``."""
    print_diff(LoggerPrinter(log, level), a, b)


def equal(a: Any, b: Any) -> bool:
    """True when ``diff(a, b)`` would be empty."""
    return not diff(a, b)


