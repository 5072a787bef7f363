"""
Stress tests / adversarial evaluation of structdiff.

This script attempts to BREAK the claimed properties:
  1. Reflexivity (diff(x, deepcopy(x)) is empty)
  2. Mutation detection (a single changed leaf yields exactly one line)
  3. Idempotence (repeated calls yield the same lines)
  4. Cycle safety on random graphs of objects
  5. Key matching on adversarial keys (1 / 1.0 / True)
  6. Deep but acyclic nesting
"""

import copy
import random
import sys, os
from dataclasses import dataclass
from typing import Optional

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from structdiff.core import diff


def test(name, condition, detail=""):
    status = "PASS" if condition else "FAIL"
    print(f"  [{status}] {name}" + (f"  ({detail})" if detail else ""))
    return condition


def random_value(depth=0, max_depth=4):
    """Generate a random nested Python value."""
    if depth >= max_depth:
        return random.choice([1, 2, 3, "a", "b", None, True, False, 1.5, (1, 2)])

    kind = random.choice(["atom", "list", "dict", "tuple"])
    if kind == "atom":
        return random_value(max_depth, max_depth)
    if kind == "list":
        return [random_value(depth + 1, max_depth) for _ in range(random.randint(0, 4))]
    if kind == "tuple":
        return tuple(random_value(depth + 1, max_depth) for _ in range(random.randint(0, 3)))
    return {
        random.choice(["x", "y", "z", 1, 2, (1, "k")]): random_value(depth + 1, max_depth)
        for _ in range(random.randint(0, 4))
    }


def leaf_paths(v, path=()):
    """Every path to a mutable-container slot holding an int leaf."""
    if isinstance(v, list):
        for i, item in enumerate(v):
            if type(item) is int:
                yield path + (i,)
            else:
                yield from leaf_paths(item, path + (i,))
    elif isinstance(v, dict):
        for k, item in v.items():
            if type(item) is int:
                yield path + (k,)
            else:
                yield from leaf_paths(item, path + (k,))


def bump(v, path):
    for step in path[:-1]:
        v = v[step]
    v[path[-1]] += 1000


random.seed(42)
SAMPLES = [random_value() for _ in range(300)]

# ═══════════════════════════════════════════════════════════════
#  §1  REFLEXIVITY
# ═══════════════════════════════════════════════════════════════

print("=" * 70)
print("  §1  REFLEXIVITY — diff(x, deepcopy(x))")
print("=" * 70)

failures = [v for v in SAMPLES if diff(v, copy.deepcopy(v))]
test("300 random values equal their deep copies", not failures, f"{len(failures)} failures")

# ═══════════════════════════════════════════════════════════════
#  §2  MUTATION DETECTION
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §2  MUTATION DETECTION — one changed leaf, one line")
print("=" * 70)

checked = wrong = 0
for v in SAMPLES:
    paths = list(leaf_paths(v))
    if not paths:
        continue
    mutated = copy.deepcopy(v)
    bump(mutated, random.choice(paths))
    lines = diff(v, mutated)
    checked += 1
    if len(lines) != 1 or "!= " not in lines[0]:
        wrong += 1
        if wrong <= 5:
            print(f"    UNEXPECTED: {lines!r}")

test(f"single-leaf mutations ({checked} checked)", wrong == 0, f"{wrong} wrong")

# ═══════════════════════════════════════════════════════════════
#  §3  IDEMPOTENCE
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §3  IDEMPOTENCE")
print("=" * 70)

pairs = list(zip(SAMPLES[::2], SAMPLES[1::2]))
unstable = sum(1 for a, b in pairs if diff(a, b) != diff(a, b))
test(f"{len(pairs)} random pairs diff identically twice", unstable == 0, f"{unstable} unstable")

# ═══════════════════════════════════════════════════════════════
#  §4  CYCLE SAFETY
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §4  CYCLE SAFETY — random object graphs")
print("=" * 70)


@dataclass(eq=False)
class GraphNode:
    label: int
    left: Optional["GraphNode"] = None
    right: Optional["GraphNode"] = None


def random_graph(n):
    nodes = [GraphNode(i) for i in range(n)]
    for node in nodes:
        node.left = random.choice(nodes + [None])
        node.right = random.choice(nodes + [None])
    return nodes[0]


crashed = noisy = 0
for _ in range(200):
    g = random_graph(random.randint(1, 12))
    try:
        if diff(g, g) or diff(g, copy.deepcopy(g)):
            noisy += 1
    except RecursionError:
        crashed += 1

test("200 random cyclic graphs vs themselves and deep copies",
     crashed == 0 and noisy == 0,
     f"{crashed} recursion errors, {noisy} non-empty diffs")

a, b = random_graph(8), random_graph(8)
try:
    lines = diff(a, b)
    test("two unrelated graphs terminate", True, f"{len(lines)} lines")
except RecursionError:
    test("two unrelated graphs terminate", False)

# ═══════════════════════════════════════════════════════════════
#  §5  ADVERSARIAL KEYS
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §5  ADVERSARIAL KEYS")
print("=" * 70)

lines = diff({1: "a"}, {1.0: "a"})
test("1 and 1.0 are different keys", len(lines) == 2, repr(lines))
lines = diff({True: "a"}, {1: "a"})
test("True and 1 are different keys", len(lines) == 2, repr(lines))
lines = diff({(1, (2, 3)): 0}, {(1, (2, 3)): 0})
test("nested tuple keys match structurally", lines == [], repr(lines))
g, h = random_graph(6), copy.deepcopy(random_graph(6))
try:
    lines = diff({g: 1}, {copy.deepcopy(g): 1})
    test("cyclic graph keys match their deep copies", lines == [], repr(lines))
    diff({g: 1}, {h: 1})
    test("unrelated cyclic graph keys terminate", True)
except RecursionError:
    test("cyclic graph keys terminate", False)

# ═══════════════════════════════════════════════════════════════
#  §6  DEEP NESTING
# ═══════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §6  DEEP NESTING — acyclic, not depth limited")
print("=" * 70)

deepest = 0
for depth in (10, 50, 100, 200, 400):
    a = b = 0
    for _ in range(depth):
        a, b = [a], [b]
    try:
        diff(a, b)
        deepest = depth
    except RecursionError:
        break

test("nesting of 100 lists is walked", deepest >= 100, f"deepest ok = {deepest}")

print()
print("=" * 70)
print("  DONE")
print("=" * 70)
