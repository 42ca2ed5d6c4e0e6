"""
tagtree.diff — Structural diff annotations for side-by-side display
====================================================================

Given two snapshots of the same document, `original` and `edited`,
compute_diff_maps() classifies nodes of each tree:

    original side:  deleted  |  modified
    edited side:    added    |  modified

A node absent from both maps is unchanged.

THE ALGORITHM
─────────────

diff(o, e) is a single depth-first walk, dispatched on the type
discriminant:

    type(o) ≠ type(e)      mark all of o deleted, all of e added
                           (no attempt to diff incompatible shapes)

    Compound / Compound    match children BY NAME:
                             o-child with no same-named e-child → deleted
                             same name on both sides           → recurse
                             e-child with no same-named o-child → added
                           so reordering a Compound is invisible.

    List / List            match children BY POSITION, i = 0..max(m, n):
                             only o[i] exists → deleted
                             only e[i] exists → added
                             both are Tags    → recurse
                           No alignment is attempted: inserting at the
                           front shifts every later comparison.

    typed array / same     compare the integer sequences exactly; on
                           any difference flag the ARRAY node modified
                           on both sides (entries are not nodes).

    value / value          differing raw values → both modified.

"Mark all" sets the status on a node and every Tag below it.

IDENTITY
────────

Maps are keyed by node identity, not equality: two equal leaves in
different places are different nodes.  Tags are immutable, so one
object may also sit at several positions; each entry is therefore
keyed by the node AND the path it was reached by (Compound children by
name, everything else by index).  DiffMap.by_path() gives a path-keyed
view for consumers that cannot hold on to node objects.

CompoundEnd sentinels are not compared: they carry no value.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional

from .config import DEFAULT_CONFIG, TagTreeConfig
from .core import ContainerType, Tag, TYPED_ARRAY_TYPES, is_end

logger = logging.getLogger(__name__)


class DiffStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"


# Background colour the UI uses for each status.
DIFF_STYLES: dict[DiffStatus, str] = {
    DiffStatus.ADDED: "green",
    DiffStatus.MODIFIED: "orange",
    DiffStatus.DELETED: "red",
}


# ═══════════════════════════════════════════════════════════════════
#  ANNOTATION MAPS
# ═══════════════════════════════════════════════════════════════════

class DiffMap:
    """Node → DiffStatus, keyed by node identity and the path it was found at."""

    __slots__ = ("_entries", "_latest", "_paths")

    def __init__(self):
        self._entries: dict[tuple[int, tuple], tuple[Tag, DiffStatus]] = {}
        self._latest: dict[int, tuple[int, tuple]] = {}
        self._paths: dict[tuple, DiffStatus] = {}

    def set(self, tag: Tag, status: DiffStatus, path: tuple = ()) -> None:
        key = (id(tag), path)
        self._entries[key] = (tag, status)
        self._latest[id(tag)] = key
        self._paths[path] = status

    def _lookup(self, tag: Any, path: Optional[tuple]):
        key = self._latest.get(id(tag)) if path is None else (id(tag), path)
        entry = self._entries.get(key) if key is not None else None
        if entry is None or entry[0] is not tag:
            return None
        return key, entry

    def get(self, tag: Any, default: Optional[DiffStatus] = None, *,
            path: Optional[tuple] = None):
        """
        Status of `tag`, or `default`.

        Tags are immutable, so one object may sit at several positions
        (the same Tag added to a List twice).  Pass `path` to ask about
        one position; without it the most recently recorded one answers.
        """
        found = self._lookup(tag, path)
        return default if found is None else found[1][1]

    def __getitem__(self, tag: Any) -> DiffStatus:
        status = self.get(tag)
        if status is None:
            raise KeyError(tag)
        return status

    def __contains__(self, tag: Any) -> bool:
        return self.get(tag) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tag]:
        return (entry[0] for entry in self._entries.values())

    def items(self) -> Iterator[tuple[Tag, DiffStatus]]:
        return iter(self._entries.values())

    def path_of(self, tag: Any) -> Optional[tuple]:
        found = self._lookup(tag, None)
        return None if found is None else found[0][1]

    def by_path(self) -> dict[tuple, DiffStatus]:
        """
        Path → status view.

        Same-named Compound children share a path, so they collapse to
        one entry here (the last one recorded); use get() with the node
        to tell them apart.
        """
        return dict(self._paths)

    def __repr__(self) -> str:
        counts: dict[str, int] = {}
        for _, status in self._entries.values():
            counts[status.value] = counts.get(status.value, 0) + 1
        return f"DiffMap({counts})"


@dataclass
class DiffMaps:
    """Annotations for both sides of a comparison."""
    original_map: DiffMap = field(default_factory=DiffMap)
    edited_map: DiffMap = field(default_factory=DiffMap)

    @property
    def unchanged(self) -> bool:
        return not self.original_map and not self.edited_map


# ═══════════════════════════════════════════════════════════════════
#  DIFF
# ═══════════════════════════════════════════════════════════════════

def mark_all(tag: Tag, status: DiffStatus, target: DiffMap, path: tuple = ()) -> None:
    """Mark a node and every Tag below it."""
    target.set(tag, status, path)
    if not isinstance(tag.value, tuple):
        return
    keyed = tag.type == ContainerType.COMPOUND
    for i, v in enumerate(tag.value):
        if isinstance(v, Tag):
            mark_all(v, status, target, path + (v.name if keyed else i,))


def _name_index(tag: Tag, children: tuple, policy: str) -> dict[str, Tag]:
    index: dict[str, Tag] = {}
    for child in children:
        if child.name in index:
            logger.warning("duplicate name %r in compound %r; keeping the %s",
                           child.name, tag.name, policy)
            if policy == "first":
                continue
        index[child.name] = child
    return index


def _diff_nodes(orig: Tag, edit: Tag, maps: DiffMaps, path: tuple,
                config: TagTreeConfig) -> None:
    if orig.type != edit.type:
        if not path:
            logger.debug("root type changed from %s to %s",
                         getattr(orig.type, "value", orig.type),
                         getattr(edit.type, "value", edit.type))
        mark_all(orig, DiffStatus.DELETED, maps.original_map, path)
        mark_all(edit, DiffStatus.ADDED, maps.edited_map, path)
        return

    kind = orig.type

    if kind == ContainerType.COMPOUND:
        # sentinels are never matched by name
        orig_children = tuple(c for c in orig.children() if not is_end(c))
        edit_children = tuple(c for c in edit.children() if not is_end(c))
        orig_by_name = _name_index(orig, orig_children, config.duplicate_names)
        edit_by_name = _name_index(edit, edit_children, config.duplicate_names)

        for child in orig_children:
            counterpart = edit_by_name.get(child.name)
            child_path = path + (child.name,)
            if counterpart is None:
                mark_all(child, DiffStatus.DELETED, maps.original_map, child_path)
            else:
                _diff_nodes(child, counterpart, maps, child_path, config)

        for child in edit_children:
            if child.name not in orig_by_name:
                mark_all(child, DiffStatus.ADDED, maps.edited_map,
                         path + (child.name,))
        return

    if kind == ContainerType.LIST:
        orig_vals = orig.value if isinstance(orig.value, tuple) else ()
        edit_vals = edit.value if isinstance(edit.value, tuple) else ()
        for i in range(max(len(orig_vals), len(edit_vals))):
            child_path = path + (i,)
            if i >= len(orig_vals):
                if isinstance(edit_vals[i], Tag):
                    mark_all(edit_vals[i], DiffStatus.ADDED, maps.edited_map,
                             child_path)
            elif i >= len(edit_vals):
                if isinstance(orig_vals[i], Tag):
                    mark_all(orig_vals[i], DiffStatus.DELETED, maps.original_map,
                             child_path)
            elif isinstance(orig_vals[i], Tag) and isinstance(edit_vals[i], Tag):
                _diff_nodes(orig_vals[i], edit_vals[i], maps, child_path, config)
            # primitive list entries are not annotated individually
        return

    if kind in TYPED_ARRAY_TYPES:
        orig_vals = orig.value if isinstance(orig.value, tuple) else ()
        edit_vals = edit.value if isinstance(edit.value, tuple) else ()
        if not _primitives_equal(orig_vals, edit_vals):
            maps.original_map.set(orig, DiffStatus.MODIFIED, path)
            maps.edited_map.set(edit, DiffStatus.MODIFIED, path)
        return

    if not _same_value(orig.value, edit.value):
        maps.original_map.set(orig, DiffStatus.MODIFIED, path)
        maps.edited_map.set(edit, DiffStatus.MODIFIED, path)


def _same_value(a: Any, b: Any) -> bool:
    if a is b or a == b:
        return True
    # two NaNs count as unchanged
    return (isinstance(a, float) and isinstance(b, float)
            and math.isnan(a) and math.isnan(b))


def _primitives_equal(a: tuple, b: tuple) -> bool:
    if len(a) != len(b):
        return False
    return all(_same_value(x, y) for x, y in zip(a, b))


def compute_diff_maps(original: Tag, edited: Tag, *,
                      config: Optional[TagTreeConfig] = None) -> DiffMaps:
    """
    Compare two trees and annotate how each node changed.

    Returns DiffMaps(original_map, edited_map).  Identical trees give
    two empty maps; the roots themselves may be annotated.
    """
    maps = DiffMaps()
    _diff_nodes(original, edited, maps, (), config or DEFAULT_CONFIG)
    return maps


__all__ = [
    "DiffStatus", "DIFF_STYLES", "DiffMap", "DiffMaps",
    "mark_all", "compute_diff_maps",
]
