"""
tagtree.config — Policy knobs for the editing core.

The defaults reproduce the editor's behavior.  A JSON file can
override them:

    {"tagtree": {"duplicate_names": "first", "strict_children": false}}

The top-level object may also hold the keys directly.
"""

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Union

DUPLICATE_NAME_POLICIES = ("last", "first")


@dataclass(frozen=True, slots=True)
class TagTreeConfig:
    # Which same-named child the diff engine keeps for a Compound.
    duplicate_names: str = "last"
    # Enforce the element-kind contract in add_child / set_child.
    strict_children: bool = True
    # Range-check primitives inserted into IntArray / LongIntArray.
    check_array_ranges: bool = True

    def __post_init__(self):
        if self.duplicate_names not in DUPLICATE_NAME_POLICIES:
            raise ValueError(
                f"duplicate_names must be one of {DUPLICATE_NAME_POLICIES}, "
                f"got {self.duplicate_names!r}"
            )


DEFAULT_CONFIG = TagTreeConfig()


def load_config(path: Optional[Union[str, Path]] = None) -> TagTreeConfig:
    """Read a TagTreeConfig from a JSON file; defaults if there is none."""
    if path is None:
        return DEFAULT_CONFIG
    path = Path(path)
    if not path.exists():
        return DEFAULT_CONFIG
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{path}: expected a JSON object")
    section = payload.get("tagtree", payload)
    known = {f.name for f in fields(TagTreeConfig)}
    return TagTreeConfig(**{k: v for k, v in section.items() if k in known})


__all__ = ["TagTreeConfig", "DEFAULT_CONFIG", "load_config",
           "DUPLICATE_NAME_POLICIES"]
