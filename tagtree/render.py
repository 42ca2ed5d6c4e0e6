"""
tagtree.render — Plain-text view of a tree, with diff markers.

    ~ Compound
        Int Health: 20
    ~   Int[] Scores
          1
          2
    -   String Motd: "hi"
        end

Marker column: `+` added, `~` modified, `-` deleted, blank unchanged.
A tag whose type is unknown prints `?` in place of its label and value
instead of being dropped.
"""

from typing import Optional

from .core import (
    ContainerType, Tag, ValueType, TYPED_ARRAY_TYPES,
    element_value_type, is_container, is_known, type_label,
)
from .diff import DiffMap, DiffStatus
from .validate import format_value

MARKERS = {
    DiffStatus.ADDED: "+",
    DiffStatus.MODIFIED: "~",
    DiffStatus.DELETED: "-",
}
UNKNOWN_PLACEHOLDER = "?"


def render_tree(tag: Tag, annotations: Optional[DiffMap] = None, *,
                indent: str = "  ") -> str:
    """Render `tag`; `annotations` must come from a diff rooted at `tag`."""
    lines: list[str] = []
    _render(tag, annotations, indent, 0, (), True, lines)
    return "\n".join(lines)


def _render(tag: Tag, annotations, indent: str, depth: int, path: tuple,
            show_name: bool, lines: list[str]) -> None:
    status = annotations.get(tag, path=path) if annotations is not None else None
    marker = MARKERS.get(status, " ")
    pad = indent * depth

    if not is_known(tag):
        lines.append(f"{marker} {pad}{UNKNOWN_PLACEHOLDER} {tag.name}".rstrip())
        return

    if tag.type == ValueType.COMPOUND_END:
        lines.append(f"{marker} {pad}end")
        return

    head = type_label(tag.type)
    if show_name and tag.name:
        head += f" {tag.name}"

    if not is_container(tag):
        text = format_value(tag.type, tag.value)
        if tag.type == ValueType.STRING:
            text = f'"{text}"'
        lines.append(f"{marker} {pad}{head}: {text}")
        return

    lines.append(f"{marker} {pad}{head}")
    values = tag.value if isinstance(tag.value, tuple) else ()
    if tag.type in TYPED_ARRAY_TYPES:
        elem = element_value_type(tag.type)
        for v in values:
            lines.append(f"  {pad}{indent}{format_value(elem, v)}")
        return
    named = tag.type == ContainerType.COMPOUND
    for i, v in enumerate(values):
        if isinstance(v, Tag):
            step = v.name if named else i
            _render(v, annotations, indent, depth + 1, path + (step,), named, lines)
        else:
            lines.append(f"  {pad}{indent}{v}")


__all__ = ["render_tree", "MARKERS", "UNKNOWN_PLACEHOLDER"]
