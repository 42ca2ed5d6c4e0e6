"""
tagtree.ops — Structural edits on a tagged tree.

Every operation takes a container Tag and returns a NEW container Tag;
the input is never modified.  Out-of-range positions are no-ops, not
faults.

    remove_child_at(c, i)      drop element i
    add_child(c, item)         append, keeping a Compound's sentinel last
    move_child(c, src, dst)    "insert before original position dst"
    set_child(c, i, item)      replace element i
    edit_element(c, i, text)   parse + range-check one typed-array entry

Paths address nested tags from the root: a Compound child by its name,
any other container element by its index.  `get_at` / `replace_at`
walk such paths so an edit deep in the tree rebuilds only the spine
above it.
"""

import logging
from dataclasses import replace
from typing import Any, Optional, Union

from .config import DEFAULT_CONFIG, TagTreeConfig
from .core import (
    ContainerType, Tag, ValueType, TYPED_ARRAY_TYPES,
    element_value_type, end_tag, is_container, is_end,
)
from .errors import TagTypeError, ValidationError
from .validate import INTEGER_PATTERN, check_value, within_range

logger = logging.getLogger(__name__)

PathStep = Union[str, int]


def _require_container(tag: Tag) -> tuple:
    if not is_container(tag):
        raise TagTypeError(f"{tag!r} is not a container")
    return tag.value if isinstance(tag.value, tuple) else ()


def _end_index(values) -> int:
    for i, v in enumerate(values):
        if is_end(v):
            return i
    return -1


def _terminated(tag: Tag) -> Tag:
    """A Compound tag ending in exactly one sentinel."""
    values = tag.value if isinstance(tag.value, tuple) else ()
    if _end_index(values) == len(values) - 1 and \
            sum(1 for v in values if is_end(v)) == 1:
        return tag
    items = tuple(v for v in values if not is_end(v))
    return replace(tag, value=items + (end_tag(),))


def _check_item(container: Tag, item: Any, config: TagTreeConfig) -> None:
    """Element-kind contract for a container; raises on violation."""
    if not config.strict_children:
        return
    if container.type in TYPED_ARRAY_TYPES:
        if not isinstance(item, int) or isinstance(item, bool):
            raise TagTypeError(
                f"{container.type.value} holds integers, not {item!r}")
        if config.check_array_ranges:
            elem = element_value_type(container.type)
            if elem != ValueType.BYTE:
                check_value(elem, item)
        return
    if not isinstance(item, Tag):
        raise TagTypeError(
            f"{container.type.value} holds tags, not {item!r}")
    if container.type == ContainerType.COMPOUND and is_end(item):
        raise TagTypeError("a Compound already carries its own end sentinel")


# ═══════════════════════════════════════════════════════════════════
#  MUTATIONS
# ═══════════════════════════════════════════════════════════════════

def remove_child_at(container: Tag, index: int) -> Tag:
    """Return the container without the element at `index`."""
    values = _require_container(container)
    if not 0 <= index < len(values):
        return container
    return replace(container, value=values[:index] + values[index + 1:])


def add_child(container: Tag, item: Any, *,
              config: Optional[TagTreeConfig] = None) -> Tag:
    """
    Append `item` to a container.

    For a Compound the first CompoundEnd is swapped with the new last
    element, so the sentinel stays last.  A Compound item gets its own
    sentinel first, so every Compound terminates itself.
    """
    config = config or DEFAULT_CONFIG
    values = _require_container(container)
    _check_item(container, item, config)

    if isinstance(item, Tag) and item.type == ContainerType.COMPOUND:
        item = _terminated(item)

    new_values = list(values) + [item]
    if container.type == ContainerType.COMPOUND:
        if isinstance(item, Tag) and any(
                isinstance(v, Tag) and not is_end(v) and v.name == item.name
                for v in values):
            logger.warning("duplicate name %r added to compound %r",
                           item.name, container.name)
        end = _end_index(new_values)
        if end == -1:
            logger.debug("compound %r had no end sentinel; appending one",
                         container.name)
            new_values.append(end_tag())
        elif end != len(new_values) - 1:
            new_values[end], new_values[-1] = new_values[-1], new_values[end]

    return replace(container, value=tuple(new_values))


def move_child(container: Tag, src: int, dst: int) -> Tag:
    """
    Move the element at `src` so it lands just before the element that
    was originally at `dst` (0..len).  Dropping an element onto itself
    (dst == src or dst == src + 1) changes nothing.

    In a Compound the sentinel never moves and nothing moves past it.
    """
    values = _require_container(container)
    if dst == src or dst == src + 1:
        return container
    if not 0 <= src < len(values):
        return container
    dst = max(0, min(dst, len(values)))
    if container.type == ContainerType.COMPOUND:
        end = _end_index(values)
        if end != -1:
            if src == end:
                return container
            dst = min(dst, end)
            if dst == src or dst == src + 1:
                return container

    items = list(values)
    moved = items.pop(src)
    items.insert(dst - 1 if src < dst else dst, moved)
    return replace(container, value=tuple(items))


def set_child(container: Tag, index: int, item: Any, *,
              config: Optional[TagTreeConfig] = None) -> Tag:
    """Return the container with element `index` replaced by `item`."""
    config = config or DEFAULT_CONFIG
    values = _require_container(container)
    if not 0 <= index < len(values):
        return container
    if config.strict_children and is_end(values[index]):
        if not is_end(item):
            raise TagTypeError("the end sentinel of a Compound cannot be replaced")
    else:
        _check_item(container, item, config)
    if isinstance(item, Tag) and item.type == ContainerType.COMPOUND:
        item = _terminated(item)
    return replace(container,
                   value=values[:index] + (item,) + values[index + 1:])


def rename(tag: Tag, name: str) -> Tag:
    return replace(tag, name=name)


def edit_element(container: Tag, index: int, text: str, *,
                 config: Optional[TagTreeConfig] = None) -> Tag:
    """
    Replace one typed-array entry from decimal text.

    Int and Long arrays are range-checked; Byte entries accept any
    integer.  Raises ValidationError on bad text.
    """
    if container.type not in TYPED_ARRAY_TYPES:
        raise TagTypeError(f"{container!r} is not a typed array")
    elem = element_value_type(container.type)
    if not isinstance(text, str) or INTEGER_PATTERN.fullmatch(text) is None:
        raise ValidationError(elem, text=text, reason="expected a decimal integer")
    value = int(text)
    if elem != ValueType.BYTE and not within_range(value, elem):
        raise ValidationError(elem, text=text, reason="out of range")
    return set_child(container, index, value, config=config)


# ═══════════════════════════════════════════════════════════════════
#  PATHS
# ═══════════════════════════════════════════════════════════════════

def _step_index(tag: Tag, step: PathStep) -> int:
    values = tag.value if isinstance(tag.value, tuple) else ()
    if tag.type == ContainerType.COMPOUND and isinstance(step, str):
        # last same-named child, matching the diff engine's default
        for i in range(len(values) - 1, -1, -1):
            v = values[i]
            if isinstance(v, Tag) and not is_end(v) and v.name == step:
                return i
        raise KeyError(step)
    if isinstance(step, int) and not isinstance(step, bool) \
            and 0 <= step < len(values):
        return step
    raise KeyError(step)


def get_at(root: Tag, path: tuple) -> Any:
    """The element at `path` below `root`.  Raises KeyError if absent."""
    node: Any = root
    for step in path:
        if not isinstance(node, Tag) or not is_container(node):
            raise KeyError(step)
        node = node.value[_step_index(node, step)]
    return node


def replace_at(root: Tag, path: tuple, new: Any) -> Tag:
    """A copy of `root` with the element at `path` replaced by `new`."""
    if not path:
        return new
    if not is_container(root):
        raise KeyError(path[0])
    index = _step_index(root, path[0])
    child = replace_at(root.value[index], path[1:], new) if len(path) > 1 else new
    values = root.value
    return replace(root, value=values[:index] + (child,) + values[index + 1:])


# ═══════════════════════════════════════════════════════════════════
#  INVARIANT CHECK
# ═══════════════════════════════════════════════════════════════════

def is_well_formed(tag: Tag) -> bool:
    """
    Recursively check the container invariants: typed arrays hold only
    integers; every Compound ends with exactly one CompoundEnd; nested
    List/Compound elements are Tags.
    """
    if not is_container(tag):
        return True
    values = tag.value if isinstance(tag.value, tuple) else None
    if values is None:
        return False
    if tag.type in TYPED_ARRAY_TYPES:
        return all(isinstance(v, int) and not isinstance(v, bool) for v in values)
    if not all(isinstance(v, Tag) for v in values):
        return False
    if tag.type == ContainerType.COMPOUND:
        ends = [i for i, v in enumerate(values) if is_end(v)]
        if ends != [len(values) - 1]:
            return False
    return all(is_well_formed(v) for v in values)


__all__ = [
    "remove_child_at", "add_child", "move_child", "set_child", "rename",
    "edit_element", "get_at", "replace_at", "is_well_formed", "PathStep",
]
