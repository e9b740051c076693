"""Tag grammar table for namespace directives.

Block loaders use this table to turn raw tag text into the value shapes the
directive resolvers expect. Resolvers never re-check arity; anything that
reaches them has already been shaped here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .models import CodeFragment, TagValue

SHAPE_CODE = "code"
SHAPE_WORDS = "words"
SHAPE_WORDS_LINE = "words_line"


class TagShapeError(ValueError):
    """Raised when a raw tag value does not fit its grammar entry."""


@dataclass(frozen=True)
class TagShape:
    """Value shape rule for a single tag name."""

    kind: str
    min_words: int = 0
    max_words: Optional[int] = None

    def describe(self) -> str:
        if self.kind == SHAPE_CODE:
            return "a code fragment"
        if self.kind == SHAPE_WORDS_LINE:
            return "a single line of words"
        if self.max_words is None:
            return f"at least {self.min_words} word(s)"
        if self.min_words == self.max_words:
            return f"exactly {self.min_words} word(s)"
        return f"{self.min_words} to {self.max_words} words"


def code() -> TagShape:
    return TagShape(kind=SHAPE_CODE)


def words(min_words: int = 0, max_words: Optional[int] = None) -> TagShape:
    return TagShape(kind=SHAPE_WORDS, min_words=min_words, max_words=max_words)


def words_line() -> TagShape:
    return TagShape(kind=SHAPE_WORDS_LINE)


TAG_GRAMMAR: Dict[str, TagShape] = {
    "evalNamespace": code(),
    "export": words_line(),
    "exportClass": words(1),
    "exportS3Method": words(0, 2),
    "exportMethod": words(1),
    "exportPattern": words(1),
    "import": words(1),
    "importClassesFrom": words(2),
    "importFrom": words(2),
    "importMethodsFrom": words(2),
    "rawNamespace": code(),
    "useDynLib": words(1),
}


def shape_for(tag_name: str) -> Optional[TagShape]:
    """Return the grammar entry for ``tag_name`` or ``None`` when untracked."""
    return TAG_GRAMMAR.get(tag_name)


def shape_tag_value(tag_name: str, raw: str) -> TagValue:
    """Convert raw tag text into its shaped value.

    Tags without a grammar entry are returned as stripped text so that
    non-namespace tags survive loading untouched.
    """
    shape = shape_for(tag_name)
    if shape is None:
        return raw.strip()

    if shape.kind == SHAPE_CODE:
        if not raw.strip():
            raise TagShapeError(f"@{tag_name} requires {shape.describe()}")
        return CodeFragment(source=raw.strip())

    text = raw.strip()
    if shape.kind == SHAPE_WORDS_LINE:
        if "\n" in text:
            raise TagShapeError(f"@{tag_name} must be {shape.describe()}")
        return _split_words(text)

    tokens = _split_words(text)
    if len(tokens) < shape.min_words:
        raise TagShapeError(
            f"@{tag_name} requires {shape.describe()}, got {len(tokens)}"
        )
    if shape.max_words is not None and len(tokens) > shape.max_words:
        raise TagShapeError(
            f"@{tag_name} takes {shape.describe()}, got {len(tokens)}"
        )
    return tokens


def _split_words(text: str) -> Tuple[str, ...]:
    return tuple(text.split())


__all__ = [
    "SHAPE_CODE",
    "SHAPE_WORDS",
    "SHAPE_WORDS_LINE",
    "TAG_GRAMMAR",
    "TagShape",
    "TagShapeError",
    "shape_for",
    "shape_tag_value",
]
