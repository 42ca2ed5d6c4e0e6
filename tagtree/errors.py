"""
tagtree.errors — Exception taxonomy.

Nothing here is fatal.  A ValidationError means "the edit did not
apply": it is raised before any new tree value is built, so the tree
the caller holds is exactly what it was.  A TagTypeError means the
caller broke the element-kind contract of a container.

Unknown tag types are deliberately NOT an error class: they are kept
as raw strings and rendered with a placeholder.
"""

from typing import Any, Optional


class TagTreeError(Exception):
    """Base class for every error raised by tagtree."""


class ValidationError(TagTreeError, ValueError):
    """A proposed value falls outside its tag type's domain."""

    def __init__(self, tag_type: Any, text: Optional[str] = None,
                 value: Any = None, reason: str = ""):
        self.tag_type = tag_type
        self.text = text
        self.value = value
        self.reason = reason
        shown = repr(text) if text is not None else repr(value)
        msg = f"{shown} is not a valid {_type_name(tag_type)} value"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class TagTypeError(TagTreeError, TypeError):
    """A child of the wrong kind was offered to a container."""


class FormatError(TagTreeError, ValueError):
    """A serialized payload does not have the shape of a tag tree."""


def _type_name(tag_type: Any) -> str:
    return getattr(tag_type, "value", str(tag_type))
