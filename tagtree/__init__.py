"""
tagtree
=======

The editing core of a browser-based editor for named-tag binary
documents (NBT-style game world data):

    • a recursive Tag model with value and container types
    • value-domain validators for the textual form of every type
    • immutable structural edits that keep Compounds terminated
    • a structural diff that annotates two trees for side-by-side view

    >>> from tagtree import compound, Tag, ValueType, compute_diff_maps
    >>> a = compound("", [Tag("a", ValueType.INT, 1), Tag("b", ValueType.INT, 2)])
    >>> b = compound("", [Tag("a", ValueType.INT, 1), Tag("c", ValueType.INT, 3)])
    >>> maps = compute_diff_maps(a, b)
    >>> maps.original_map.by_path(), maps.edited_map.by_path()
    ({('b',): <DiffStatus.DELETED: 'deleted'>}, {('c',): <DiffStatus.ADDED: 'added'>})
"""

from tagtree.core import (
    # Types
    ValueType,
    ContainerType,
    Tag,
    tag_type,
    # Classification
    is_container,
    is_value,
    is_known,
    element_value_type,
    # Construction
    ADDABLE_TYPES,
    TYPE_LABELS,
    is_addable_type,
    type_label,
    end_tag,
    compound,
    create_default_tag,
)
from tagtree.validate import (
    within_range, parse_text, validate_text, format_value,
    check_value, set_value, edit_value, duplicate_names,
)
from tagtree.ops import (
    remove_child_at, add_child, move_child, set_child, rename,
    edit_element, get_at, replace_at, is_well_formed,
)
from tagtree.diff import DiffStatus, DiffMap, DiffMaps, DIFF_STYLES, compute_diff_maps
from tagtree.formats import from_python, to_python, from_json, to_json
from tagtree.render import render_tree
from tagtree.config import TagTreeConfig, DEFAULT_CONFIG, load_config
from tagtree.errors import TagTreeError, ValidationError, TagTypeError, FormatError

__version__ = "0.1.0"
__all__ = [
    "ValueType", "ContainerType", "Tag", "tag_type",
    "is_container", "is_value", "is_known", "element_value_type",
    "ADDABLE_TYPES", "TYPE_LABELS", "is_addable_type", "type_label",
    "end_tag", "compound", "create_default_tag",
    "within_range", "parse_text", "validate_text", "format_value",
    "check_value", "set_value", "edit_value", "duplicate_names",
    "remove_child_at", "add_child", "move_child", "set_child", "rename",
    "edit_element", "get_at", "replace_at", "is_well_formed",
    "DiffStatus", "DiffMap", "DiffMaps", "DIFF_STYLES", "compute_diff_maps",
    "from_python", "to_python", "from_json", "to_json",
    "render_tree",
    "TagTreeConfig", "DEFAULT_CONFIG", "load_config",
    "TagTreeError", "ValidationError", "TagTypeError", "FormatError",
]
