"""
Stress tests / adversarial evaluation of tagtree.

This script attempts to BREAK the claimed properties on random trees:
  1. Type partition (is_container xor is_value)
  2. Compound sentinel invariant under repeated add_child
  3. move_child no-ops and round trips
  4. Diff identity (equal trees annotate nothing)
  5. Diff completeness when the root type changes
  6. Compound order independence
  7. LongInt bounds at the edges of 64 bits
"""

import logging, sys, os, random, time
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from tagtree.core import (
    ValueType, ContainerType, Tag, ADDABLE_TYPES,
    is_container_type, is_value_type, compound, create_default_tag, is_end,
)
from tagtree.ops import add_child, move_child, is_well_formed
from tagtree.diff import DiffStatus, compute_diff_maps
from tagtree.validate import within_range, validate_text, LONG_MAX, LONG_MIN
from tagtree.formats import from_python, to_python
from tagtree.logging_utils import setup_logging


def test(name, condition, detail=""):
    status = "PASS" if condition else "FAIL"
    print(f"  [{status}] {name}" + (f"  ({detail})" if detail else ""))
    return condition


def section(title):
    print()
    print("=" * 70)
    print(f"  {title}")
    print("=" * 70)


LEAF_TYPES = [ValueType.BYTE, ValueType.SHORT_INT, ValueType.INT,
              ValueType.LONG_INT, ValueType.FLOAT, ValueType.DOUBLE_FLOAT,
              ValueType.STRING]
NAMES = ["", "a", "b", "c", "d", "e", "x", "y"]


def random_leaf(name=""):
    t = random.choice(LEAF_TYPES)
    if t == ValueType.STRING:
        return Tag(name, t, random.choice(["", "hello", "world"]))
    if t in (ValueType.FLOAT, ValueType.DOUBLE_FLOAT):
        return Tag(name, t, random.choice([0.0, 0.5, -3.25]))
    return Tag(name, t, random.randint(-100, 100))


def random_tag(name="", depth=0, max_depth=3):
    """Generate a random well-formed tag."""
    if depth >= max_depth:
        return random_leaf(name)
    kind = random.choice(["leaf", "list", "compound", "array"])
    if kind == "leaf":
        return random_leaf(name)
    if kind == "array":
        t = random.choice([ContainerType.BYTE_ARRAY, ContainerType.INT_ARRAY,
                           ContainerType.LONG_INT_ARRAY])
        return Tag(name, t, tuple(random.randint(-5, 5)
                                  for _ in range(random.randint(0, 4))))
    if kind == "list":
        n = random.randint(0, 4)
        return Tag(name, ContainerType.LIST,
                   tuple(random_tag("", depth + 1, max_depth) for _ in range(n)))
    keys = random.sample(NAMES, random.randint(0, 4))
    return compound(name, [random_tag(k, depth + 1, max_depth) for k in keys])


def count_tags(tag):
    return 1 + sum(count_tags(c) for c in tag.children())


setup_logging(console_level=logging.ERROR)
random.seed(42)
trees = [random_tag() for _ in range(200)]


# ═══════════════════════════════════════════════════════════════
#  §1  TYPE PARTITION
# ═══════════════════════════════════════════════════════════════

section("§1  TYPE PARTITION")

bad = [t for t in (*ValueType, *ContainerType)
       if is_container_type(t) == is_value_type(t)]
test("every type is exactly one of value/container", not bad, f"{bad}")
test("unknown types are neither",
     not is_container_type("quaternion") and not is_value_type("quaternion"))


# ═══════════════════════════════════════════════════════════════
#  §2  COMPOUND SENTINEL INVARIANT
# ═══════════════════════════════════════════════════════════════

section("§2  COMPOUND SENTINEL — 1000 random add_child calls")

c = compound("root")
violations = 0
for i in range(1000):
    t = random.choice(ADDABLE_TYPES)
    c = add_child(c, create_default_tag(t, f"k{i}"))
    ends = [j for j, v in enumerate(c.value) if is_end(v)]
    if ends != [len(c.value) - 1]:
        violations += 1
test("sentinel is last and unique after every insert", violations == 0,
     f"{violations} violations")
test("result is well formed at every depth", is_well_formed(c))


# ═══════════════════════════════════════════════════════════════
#  §3  MOVE NO-OPS AND ROUND TRIPS
# ═══════════════════════════════════════════════════════════════

section("§3  MOVE — all (src, dst) pairs on random lists")

noop_failures = 0
trip_failures = 0
checks = 0
for _ in range(100):
    n = random.randint(1, 8)
    lst = Tag("l", ContainerType.LIST, tuple(random_leaf() for _ in range(n)))
    for src in range(n):
        if move_child(lst, src, src).value != lst.value:
            noop_failures += 1
        if move_child(lst, src, src + 1).value != lst.value:
            noop_failures += 1
        for dst in range(n + 1):
            checks += 1
            moved = move_child(lst, src, dst)
            landed = src if dst in (src, src + 1) else (dst - 1 if src < dst else dst)
            back = src if src < landed else src + 1
            if move_child(moved, landed, back).value != lst.value:
                trip_failures += 1

test("drop-on-itself is identity", noop_failures == 0, f"{noop_failures} failures")
test(f"move round trip ({checks} moves)", trip_failures == 0,
     f"{trip_failures} failures")


# ═══════════════════════════════════════════════════════════════
#  §4  DIFF IDENTITY
# ═══════════════════════════════════════════════════════════════

section("§4  DIFF IDENTITY — equal trees annotate nothing")

same_obj = sum(1 for t in trees if not compute_diff_maps(t, t).unchanged)
copies = sum(1 for t in trees
             if not compute_diff_maps(t, from_python(to_python(t))).unchanged)
test(f"d(t, t) empty ({len(trees)} trees)", same_obj == 0, f"{same_obj} non-empty")
test(f"d(t, copy(t)) empty ({len(trees)} trees)", copies == 0, f"{copies} non-empty")


# ═══════════════════════════════════════════════════════════════
#  §5  DIFF COMPLETENESS ON REPLACEMENT
# ═══════════════════════════════════════════════════════════════

section("§5  DIFF COMPLETENESS — root type changed")

incomplete = 0
for t in trees:
    other = Tag("", ContainerType.LIST, (t,)) if t.type != ContainerType.LIST \
        else compound("", [t])
    maps = compute_diff_maps(t, other)
    ok_orig = (len(maps.original_map) == count_tags(t)
               and all(s == DiffStatus.DELETED for _, s in maps.original_map.items()))
    ok_edit = (len(maps.edited_map) == count_tags(other)
               and all(s == DiffStatus.ADDED for _, s in maps.edited_map.items()))
    if not (ok_orig and ok_edit):
        incomplete += 1
test("every node deleted on one side, added on the other", incomplete == 0,
     f"{incomplete} incomplete")


# ═══════════════════════════════════════════════════════════════
#  §6  COMPOUND ORDER INDEPENDENCE
# ═══════════════════════════════════════════════════════════════

section("§6  COMPOUND ORDER INDEPENDENCE")

order_failures = 0
compounds = [t for t in trees if t.type == ContainerType.COMPOUND]
for t in compounds:
    kids = [v for v in t.value if not is_end(v)]
    random.shuffle(kids)
    if not compute_diff_maps(t, compound(t.name, kids)).unchanged:
        order_failures += 1
test(f"shuffled compounds diff clean ({len(compounds)} compounds)",
     order_failures == 0, f"{order_failures} failures")


# ═══════════════════════════════════════════════════════════════
#  §7  LONG BOUNDS
# ═══════════════════════════════════════════════════════════════

section("§7  LONG BOUNDS — no float rounding")

test("2^63 - 1 accepted", within_range(LONG_MAX, ValueType.LONG_INT))
test("2^63 rejected", not within_range(LONG_MAX + 1, ValueType.LONG_INT))
test("-2^63 accepted", within_range(LONG_MIN, ValueType.LONG_INT))
test("-2^63 - 1 rejected", not within_range(LONG_MIN - 1, ValueType.LONG_INT))
test("text 9223372036854775808 rejected",
     not validate_text(ValueType.LONG_INT, "9223372036854775808"))


# ═══════════════════════════════════════════════════════════════
#  §8  TIMING
# ═══════════════════════════════════════════════════════════════

section("§8  TIMING — diff of a wide tree")

wide = compound("", [compound(f"c{i}", [Tag(f"v{j}", ValueType.INT, j)
                                        for j in range(50)])
                     for i in range(200)])
edited = compound("", [compound(f"c{i}", [Tag(f"v{j}", ValueType.INT, j + (i % 2))
                                          for j in range(50)])
                       for i in range(200)])
start = time.perf_counter()
maps = compute_diff_maps(wide, edited)
elapsed = time.perf_counter() - start
test(f"10k-leaf diff in {elapsed * 1000:.1f} ms",
     len(maps.edited_map) == 100 * 50)
