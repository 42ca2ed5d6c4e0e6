"""
tagtree.validate — Value-domain validators.

Each value type has a textual round-trip contract:

    type      accepts on input                              shows as
    ──────    ───────────────────────────────────────────   ─────────
    byte      hex digits, any case  ("1f")                   "1F"
    short     signed decimal in [-32768, 32767]               "-5"
    int       signed decimal in [-2^31, 2^31 - 1]             "42"
    long      signed decimal in [-2^63, 2^63 - 1]             "42"
    float     [+-]d+(.d+)?([eE][+-]?d+)?, |x| <= 3.4028235e38 "0.5"
    double    same syntax, no range check                     "0.5"
    string    anything                                        as is

Validation is a pure accept/reject gate: it runs before a new tree is
built, so a rejected edit leaves the caller's tree untouched.

Integers are Python ints, so the 64-bit LongInt bounds are compared
exactly; nothing is ever rounded through a float.
"""

import logging
import math
import re
import sys
from dataclasses import replace
from typing import Any

from .core import Tag, ValueType, is_end, is_value, tag_type
from .errors import TagTypeError, ValidationError

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  NUMERIC DOMAINS
# ═══════════════════════════════════════════════════════════════════

SHORT_MIN, SHORT_MAX = -(2 ** 15), 2 ** 15 - 1
INT_MIN, INT_MAX = -(2 ** 31), 2 ** 31 - 1
LONG_MIN, LONG_MAX = -(2 ** 63), 2 ** 63 - 1
FLOAT_MAX = 3.4028235e38
DOUBLE_MAX = sys.float_info.max

INTEGER_TYPES = frozenset((
    ValueType.BYTE, ValueType.SHORT_INT, ValueType.INT, ValueType.LONG_INT,
))
FLOAT_TYPES = frozenset((ValueType.FLOAT, ValueType.DOUBLE_FLOAT))

_BOUNDS = {
    ValueType.SHORT_INT: (SHORT_MIN, SHORT_MAX),
    ValueType.INT: (INT_MIN, INT_MAX),
    ValueType.LONG_INT: (LONG_MIN, LONG_MAX),
    ValueType.FLOAT: (-FLOAT_MAX, FLOAT_MAX),
    ValueType.DOUBLE_FLOAT: (-DOUBLE_MAX, DOUBLE_MAX),
}

HEX_PATTERN = re.compile(r"[0-9a-fA-F]+")
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
DECIMAL_PATTERN = re.compile(r"[+-]?[0-9]+(\.[0-9]+)?([eE][+-]?[0-9]+)?")


def _is_number(value: Any) -> bool:
    # bool is an int subclass; True is not a number here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def within_range(value: Any, t: Any) -> bool:
    """
    Whether a number lies in the domain of a numeric value type.

    Defined for short, int, long, float and double.  NaN, bools and
    every other type answer False.
    """
    bounds = _BOUNDS.get(tag_type(t))
    if bounds is None or not _is_number(value):
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    lo, hi = bounds
    return lo <= value <= hi


# ═══════════════════════════════════════════════════════════════════
#  TEXT ⇄ VALUE
# ═══════════════════════════════════════════════════════════════════

def parse_text(t: Any, text: str) -> Any:
    """
    Parse user text into the stored value for type `t`.

    Raises ValidationError when the text is outside the type's domain.
    """
    t = tag_type(t)
    if not isinstance(text, str):
        raise ValidationError(t, value=text, reason="expected text")

    if t == ValueType.STRING:
        return text

    if t == ValueType.BYTE:
        if HEX_PATTERN.fullmatch(text) is None:
            return _reject(t, text, "expected hexadecimal digits")
        return int(text, 16)

    if t in (ValueType.SHORT_INT, ValueType.INT, ValueType.LONG_INT):
        if INTEGER_PATTERN.fullmatch(text) is None:
            return _reject(t, text, "expected a decimal integer")
        value = int(text)
        if not within_range(value, t):
            return _reject(t, text, "out of range")
        return value

    if t in FLOAT_TYPES:
        if DECIMAL_PATTERN.fullmatch(text) is None:
            return _reject(t, text, "expected a decimal number")
        value = float(text)
        if t == ValueType.FLOAT and not within_range(value, t):
            return _reject(t, text, "out of single-precision range")
        return value

    return _reject(t, text, "not editable as text")


def _reject(t, text: str, reason: str):
    logger.debug("rejected %r for %s: %s", text, getattr(t, "value", t), reason)
    raise ValidationError(t, text=text, reason=reason)


def validate_text(t: Any, text: str) -> bool:
    """Accept/reject gate for user text; never raises."""
    try:
        parse_text(t, text)
    except ValidationError:
        return False
    return True


def format_value(t: Any, value: Any) -> str:
    """Display text for a stored value (Byte as upper-case hex)."""
    t = tag_type(t)
    if value is None:
        return ""
    if t == ValueType.BYTE and _is_number(value):
        return format(int(value), "X")
    return str(value)


# ═══════════════════════════════════════════════════════════════════
#  ASSIGNMENT
# ═══════════════════════════════════════════════════════════════════

def check_value(t: Any, value: Any) -> Any:
    """
    Enforce the domain of `t` on an already-typed value.

    Returns the value to store (ints are widened to float for float
    types).  Raises ValidationError otherwise.  Byte is not clamped.
    """
    t = tag_type(t)
    if t in INTEGER_TYPES:
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValidationError(t, value=value, reason="expected an integer")
        if t != ValueType.BYTE and not within_range(value, t):
            raise ValidationError(t, value=value, reason="out of range")
        return value
    if t in FLOAT_TYPES:
        if not _is_number(value):
            raise ValidationError(t, value=value, reason="expected a number")
        try:
            value = float(value)
        except OverflowError:
            raise ValidationError(t, value=value, reason="out of range") from None
        if t == ValueType.FLOAT and not within_range(value, t):
            raise ValidationError(t, value=value,
                                  reason="out of single-precision range")
        return value
    if t == ValueType.STRING:
        if not isinstance(value, str):
            raise ValidationError(t, value=value, reason="expected a string")
        return value
    if t == ValueType.COMPOUND_END:
        if value is not None:
            raise ValidationError(t, value=value, reason="sentinel carries no value")
        return None
    raise ValidationError(t, value=value, reason="not a value type")


def set_value(tag: Tag, value: Any) -> Tag:
    """A copy of a value tag holding `value`, after the domain check."""
    if not is_value(tag):
        raise TagTypeError(f"{tag!r} is not a value tag")
    return replace(tag, value=check_value(tag.type, value))


def edit_value(tag: Tag, text: str) -> Tag:
    """A copy of a value tag holding the parsed `text`."""
    if not is_value(tag):
        raise TagTypeError(f"{tag!r} is not a value tag")
    return replace(tag, value=parse_text(tag.type, text))


# ═══════════════════════════════════════════════════════════════════
#  NAMES
# ═══════════════════════════════════════════════════════════════════

def duplicate_names(tag: Tag) -> list[str]:
    """Names used by more than one child of a Compound, in first-seen order."""
    seen: set[str] = set()
    dupes: list[str] = []
    for child in tag.children():
        if is_end(child):
            continue
        if child.name in seen and child.name not in dupes:
            dupes.append(child.name)
        seen.add(child.name)
    return dupes


__all__ = [
    "SHORT_MIN", "SHORT_MAX", "INT_MIN", "INT_MAX", "LONG_MIN", "LONG_MAX",
    "FLOAT_MAX", "DOUBLE_MAX", "INTEGER_TYPES", "FLOAT_TYPES",
    "within_range", "parse_text", "validate_text", "format_value",
    "check_value", "set_value", "edit_value", "duplicate_names",
]
