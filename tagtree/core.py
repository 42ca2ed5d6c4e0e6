"""
tagtree.core — The Tagged-Tree Data Model
==========================================

§1  THE MODEL
─────────────

A document is a tree of Tags.  Every Tag is the same record:

    Tag(name, type, value)

and the `type` discriminant alone decides what `value` holds.  There
are two disjoint families of types:

    VALUE TYPES                        CONTAINER TYPES
    byte     Byte        int           byteArray  ByteArray     (int, ...)
    short    ShortInt    int           intArray   IntArray      (int, ...)
    int      Int         int           longArray  LongIntArray  (int, ...)
    long     LongInt     int           list       List          (Tag, ...)
    float    Float       float         compound   Compound      (Tag, ..., end)
    double   DoubleFloat float
    string   String      str
    end      CompoundEnd None  (sentinel, not a real value)

The lower-case strings are the wire names used by the JSON exchange
format (see tagtree.formats).

§2  INVARIANTS
──────────────

    • A typed array holds only integers of its element type.
    • A List holds self-describing Tags; their names are ignored.
    • A Compound holds uniquely named Tags followed by EXACTLY ONE
      CompoundEnd sentinel, which is the last element.  Every
      Compound at every depth terminates itself this way.

§3  IMMUTABILITY
────────────────

Tags are frozen.  Container values are tuples.  Every edit (see
tagtree.ops) returns a new Tag; nothing is ever changed in place, so
two renders never alias the same mutable node.

§4  UNKNOWN TYPES
─────────────────

A type string outside both families is kept verbatim.  Such a tag is
neither a value nor a container; callers show a placeholder for it
rather than dropping it, because it may come from a newer format
revision.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from .errors import TagTypeError


# ═══════════════════════════════════════════════════════════════════
#  TYPE DISCRIMINANTS
# ═══════════════════════════════════════════════════════════════════

class ValueType(str, Enum):
    """Leaf tag types.  COMPOUND_END is the Compound terminator."""
    BYTE = "byte"
    SHORT_INT = "short"
    INT = "int"
    LONG_INT = "long"
    FLOAT = "float"
    DOUBLE_FLOAT = "double"
    STRING = "string"
    COMPOUND_END = "end"


class ContainerType(str, Enum):
    """Tag types whose value is an ordered sequence."""
    BYTE_ARRAY = "byteArray"
    INT_ARRAY = "intArray"
    LONG_INT_ARRAY = "longArray"
    LIST = "list"
    COMPOUND = "compound"


TagType = Union[ValueType, ContainerType]

VALUE_TYPES = frozenset(ValueType)
CONTAINER_TYPES = frozenset(ContainerType)
TYPED_ARRAY_TYPES = frozenset((
    ContainerType.BYTE_ARRAY,
    ContainerType.INT_ARRAY,
    ContainerType.LONG_INT_ARRAY,
))

_BY_WIRE_NAME = {t.value: t for t in (*ValueType, *ContainerType)}


def tag_type(raw: Any) -> Union[TagType, str]:
    """Resolve a wire name to its enum member; unknown names pass through."""
    if isinstance(raw, (ValueType, ContainerType)):
        return raw
    if isinstance(raw, str):
        return _BY_WIRE_NAME.get(raw, raw)
    return raw


# ═══════════════════════════════════════════════════════════════════
#  THE TAG RECORD
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class Tag:
    """
    One node of a tagged tree.

    `name` only means something for a child of a Compound.  `value` is
    a primitive for value types and a tuple for container types; lists
    passed in are frozen to tuples.

    Examples:
        Tag("Health", ValueType.SHORT_INT, 20)
        Tag("Pos", ContainerType.LIST, (Tag("", "double", 0.5), ...))
    """
    name: str
    type: Union[TagType, str]
    value: Any = None

    def __post_init__(self):
        object.__setattr__(self, "type", tag_type(self.type))
        if isinstance(self.value, list):
            object.__setattr__(self, "value", tuple(self.value))

    @property
    def is_container(self) -> bool:
        return self.type in CONTAINER_TYPES

    @property
    def is_value(self) -> bool:
        return self.type in VALUE_TYPES

    def children(self) -> tuple["Tag", ...]:
        """The nested Tags of a container (primitives are skipped)."""
        if not isinstance(self.value, tuple):
            return ()
        return tuple(v for v in self.value if isinstance(v, Tag))

    def __repr__(self) -> str:
        kind = getattr(self.type, "value", self.type)
        if isinstance(self.value, tuple) and len(self.value) > 4:
            return (f"Tag({self.name!r}, {kind}, "
                    f"[{self.value[0]!r}, ...] len={len(self.value)})")
        return f"Tag({self.name!r}, {kind}, {self.value!r})"


# ═══════════════════════════════════════════════════════════════════
#  CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════

def is_container_type(t: Any) -> bool:
    return tag_type(t) in CONTAINER_TYPES


def is_value_type(t: Any) -> bool:
    return tag_type(t) in VALUE_TYPES


def is_container(tag: Tag) -> bool:
    """True iff the tag is one of the five container types."""
    return is_container_type(tag.type)


def is_value(tag: Tag) -> bool:
    """True iff the tag is one of the eight value types (sentinel included)."""
    return is_value_type(tag.type)


def is_known(tag: Tag) -> bool:
    return is_container(tag) or is_value(tag)


def element_value_type(container_type: Any) -> Optional[ValueType]:
    """
    The value type implied for a container's elements.

    Typed arrays imply Byte / Int / LongInt.  List and Compound return
    None: their elements are Tags that carry their own type.
    """
    container_type = tag_type(container_type)
    if container_type == ContainerType.BYTE_ARRAY:
        return ValueType.BYTE
    if container_type == ContainerType.INT_ARRAY:
        return ValueType.INT
    if container_type == ContainerType.LONG_INT_ARRAY:
        return ValueType.LONG_INT
    return None


def is_end(item: Any) -> bool:
    """True for a CompoundEnd sentinel Tag."""
    return isinstance(item, Tag) and item.type == ValueType.COMPOUND_END


# ═══════════════════════════════════════════════════════════════════
#  CONSTRUCTION
# ═══════════════════════════════════════════════════════════════════

ADDABLE_TYPES: tuple[TagType, ...] = (
    ValueType.BYTE,
    ValueType.SHORT_INT,
    ValueType.INT,
    ValueType.LONG_INT,
    ValueType.FLOAT,
    ValueType.DOUBLE_FLOAT,
    ValueType.STRING,
    ContainerType.BYTE_ARRAY,
    ContainerType.INT_ARRAY,
    ContainerType.LONG_INT_ARRAY,
    ContainerType.LIST,
    ContainerType.COMPOUND,
)

TYPE_LABELS: dict[TagType, str] = {
    ValueType.BYTE: "Byte",
    ValueType.SHORT_INT: "Short",
    ValueType.INT: "Int",
    ValueType.LONG_INT: "Long",
    ValueType.FLOAT: "Float",
    ValueType.DOUBLE_FLOAT: "Double",
    ValueType.STRING: "String",
    ContainerType.BYTE_ARRAY: "Byte[]",
    ContainerType.INT_ARRAY: "Int[]",
    ContainerType.LONG_INT_ARRAY: "Long[]",
    ContainerType.LIST: "List",
    ContainerType.COMPOUND: "Compound",
}


def is_addable_type(t: Any) -> bool:
    return tag_type(t) in ADDABLE_TYPES


def type_label(t: Any) -> str:
    """Human label for a type; the wire name for anything without one."""
    t = tag_type(t)
    return TYPE_LABELS.get(t, getattr(t, "value", str(t)))


def end_tag() -> Tag:
    return Tag("", ValueType.COMPOUND_END, None)


def compound(name: str, children=()) -> Tag:
    """Build a Compound from real children, appending the sentinel."""
    items = tuple(c for c in children if not is_end(c))
    return Tag(name, ContainerType.COMPOUND, items + (end_tag(),))


def create_default_tag(t: Any, name: str) -> Tag:
    """
    A fresh tag of the given type with its zero value.

    Containers start empty; ops.add_child gives a new Compound its
    sentinel when it is inserted.
    """
    t = tag_type(t)
    if not is_addable_type(t):
        raise TagTypeError(f"cannot create a tag of type {t!r}")
    if t == ValueType.STRING:
        return Tag(name, t, "")
    if t in CONTAINER_TYPES:
        return Tag(name, t, ())
    return Tag(name, t, 0)


__all__ = [
    "ValueType", "ContainerType", "TagType", "Tag",
    "VALUE_TYPES", "CONTAINER_TYPES", "TYPED_ARRAY_TYPES",
    "tag_type", "is_container_type", "is_value_type",
    "is_container", "is_value", "is_known", "element_value_type", "is_end",
    "ADDABLE_TYPES", "TYPE_LABELS", "is_addable_type", "type_label",
    "end_tag", "compound", "create_default_tag",
]
