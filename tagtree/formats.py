"""
tagtree.formats — Convert between the editor's JSON exchange shape and Tags.

The decoder/encoder that reads binary world files emits plain objects:

    {"name": "Level", "type": "compound", "value": [
        {"name": "Time", "type": "long", "value": 9007199254740993},
        {"name": "",     "type": "end",  "value": null}
    ]}

Supported conversions:
    • Python objects (nested dicts/lists) ↔ Tag
    • JSON strings ↔ Tag

Integers stay Python ints end to end, so 64-bit LongInt values survive
the round trip exactly.  Unknown type strings are kept as they are.
"""

import json
import logging
from typing import Any

from .core import Tag, TYPED_ARRAY_TYPES, is_container, is_known
from .errors import FormatError

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  PYTHON OBJECTS ↔ TAGS
# ═══════════════════════════════════════════════════════════════════

def from_python(obj: Any) -> Tag:
    """
    Build a Tag tree from `{"name", "type", "value"}` dicts.

    Container values must be lists; their elements are nested dicts for
    List/Compound and plain numbers for typed arrays.
    """
    if not isinstance(obj, dict):
        raise FormatError(f"expected a tag object, got {type(obj).__name__}")
    if "type" not in obj or not isinstance(obj["type"], str):
        raise FormatError(f"tag object without a type string: {obj!r}")

    name = obj.get("name", "")
    if not isinstance(name, str):
        raise FormatError(f"tag name must be a string, got {name!r}")
    tag = Tag(name, obj["type"], None)
    value = obj.get("value")

    if is_container(tag):
        if value is None:
            value = []
        if not isinstance(value, list):
            raise FormatError(
                f"{obj['type']} {name!r} needs a list value, got {value!r}")
        if tag.type in TYPED_ARRAY_TYPES:
            items = tuple(value)
        else:
            items = tuple(from_python(v) for v in value)
        return Tag(name, tag.type, items)

    if not is_known(tag):
        logger.warning("unknown tag type %r for %r; keeping it as is",
                       obj["type"], name)
        return Tag(name, tag.type, _freeze(value))

    return Tag(name, tag.type, value)


def _freeze(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def to_python(tag: Tag) -> dict:
    """
    Convert a Tag tree back to plain dicts and lists.

    Inverse of from_python:
        to_python(from_python(obj)) == obj
    for well-formed payloads.
    """
    kind = getattr(tag.type, "value", tag.type)
    if isinstance(tag.value, tuple):
        value = [to_python(v) if isinstance(v, Tag) else _thaw(v)
                 for v in tag.value]
    else:
        value = tag.value
    return {"name": tag.name, "type": kind, "value": value}


def _thaw(value: Any) -> Any:
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


# ═══════════════════════════════════════════════════════════════════
#  JSON STRINGS ↔ TAGS
# ═══════════════════════════════════════════════════════════════════

def from_json(text: str) -> Tag:
    """Parse a JSON document into a Tag tree."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FormatError(f"invalid JSON: {exc}") from exc
    return from_python(payload)


def to_json(tag: Tag, **kwargs) -> str:
    """Serialize a Tag tree to JSON."""
    return json.dumps(to_python(tag), **kwargs)


__all__ = ["from_python", "to_python", "from_json", "to_json"]
