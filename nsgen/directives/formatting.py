"""Output formatting helpers for manifest directive lines."""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence

_SYNTACTIC_NAME = re.compile(r"^(?:(?:[^\W\d_]|\.(?![0-9]))[\w.]*|\.)$")
_DOTS = re.compile(r"^\.\.(?:\.|[0-9]+)$")
_QUOTED = re.compile(r"^([`\"']).*\1$", re.DOTALL)

RESERVED_WORDS = frozenset(
    {
        "if",
        "else",
        "repeat",
        "while",
        "function",
        "for",
        "next",
        "break",
        "in",
        "TRUE",
        "FALSE",
        "NULL",
        "Inf",
        "NaN",
        "NA",
        "NA_integer_",
        "NA_real_",
        "NA_character_",
        "NA_complex_",
    }
)

_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\t": "\\t", "\r": "\\r"}


def is_syntactic(name: str) -> bool:
    """Return True when ``name`` can appear bare in a manifest directive."""
    if name in RESERVED_WORDS or _DOTS.match(name):
        return False
    return bool(_SYNTACTIC_NAME.match(name))


def has_quotes(name: str) -> bool:
    return bool(_QUOTED.match(name))


def encode_string(value: str, quote: str) -> str:
    """Wrap ``value`` in ``quote``, escaping backslashes and the quote itself."""
    escaped = "".join(_ESCAPES.get(char, char) for char in value)
    escaped = escaped.replace(quote, "\\" + quote)
    return f"{quote}{escaped}{quote}"


def auto_backtick(name: str) -> str:
    if has_quotes(name) or is_syntactic(name):
        return name
    return encode_string(name, "`")


def auto_quote(name: str) -> str:
    if has_quotes(name) or is_syntactic(name):
        return name
    return encode_string(name, '"')


def one_per_line(directive: str, names: Iterable[str]) -> List[str]:
    """Emit ``directive(NAME)`` once for every name."""
    return [f"{directive}({auto_backtick(name)})" for name in names]


def repeat_first(directive: str, words: Sequence[str]) -> List[str]:
    """Emit ``directive(FIRST,NAME)`` for every word after the first."""
    if not words:
        return []
    first = auto_backtick(words[0])
    return [f"{directive}({first},{auto_backtick(name)})" for name in words[1:]]


def s3_method(generic: str, class_name: str) -> str:
    return f"S3method({auto_backtick(generic)},{auto_backtick(class_name)})"


__all__ = [
    "RESERVED_WORDS",
    "auto_backtick",
    "auto_quote",
    "encode_string",
    "has_quotes",
    "is_syntactic",
    "one_per_line",
    "repeat_first",
    "s3_method",
]
