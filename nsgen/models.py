"""Core data models shared across nsgen components."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union


@dataclass(frozen=True)
class CodeFragment:
    """Unparsed code captured verbatim from a tag."""

    source: str


TagValue = Union[str, Tuple[str, ...], CodeFragment]


@dataclass(frozen=True)
class TagOccurrence:
    """A single tag within a block, shaped per the tag grammar table."""

    name: str
    value: TagValue
    line: Optional[int] = None


# Documented object kinds. The set is closed: every inference site handles
# each variant explicitly and ends in ``assert_never``.


@dataclass(frozen=True)
class PlainDeclaration:
    """Ordinary function or value binding."""

    name: str
    alias: Optional[str] = None


@dataclass(frozen=True)
class FormalClass:
    class_name: str


@dataclass(frozen=True)
class FormalGeneric:
    generic: str


@dataclass(frozen=True)
class FormalMethod:
    generic: str


@dataclass(frozen=True)
class ConventionMethod:
    """Method found by naming convention, e.g. ``summary.myclass``."""

    generic: str
    class_name: str


@dataclass(frozen=True)
class RecordClass:
    """Mutable-record (reference) class definition."""

    class_name: str


DocumentedObject = Union[
    PlainDeclaration,
    FormalClass,
    FormalGeneric,
    FormalMethod,
    ConventionMethod,
    RecordClass,
]


@dataclass(frozen=True)
class Block:
    """One documentation block: ordered tags plus the object it documents."""

    tags: Tuple[TagOccurrence, ...] = ()
    object: Optional[DocumentedObject] = None
    file: Optional[str] = None
    line: Optional[int] = None
    name: Optional[str] = None

    def has(self, tag_name: str) -> bool:
        return any(tag.name == tag_name for tag in self.tags)

    def occurrences(self, tag_name: str) -> Iterator[TagOccurrence]:
        """Yield every occurrence of ``tag_name`` in source order."""
        for tag in self.tags:
            if tag.name == tag_name:
                yield tag

    def tag_names(self) -> Tuple[str, ...]:
        """Return distinct tag names in order of first appearance."""
        seen: list[str] = []
        for tag in self.tags:
            if tag.name not in seen:
                seen.append(tag.name)
        return tuple(seen)

    @property
    def location(self) -> str:
        if self.file and self.line is not None:
            return f"{self.file}:{self.line}"
        if self.file:
            return self.file
        return self.name or "<block>"


@dataclass
class BlockIssue:
    """Non-fatal problem attached to a single block."""

    location: str
    tag: str
    message: str

    def __str__(self) -> str:
        return f"[{self.location}] @{self.tag}: {self.message}"


__all__ = [
    "Block",
    "BlockIssue",
    "CodeFragment",
    "ConventionMethod",
    "DocumentedObject",
    "FormalClass",
    "FormalGeneric",
    "FormalMethod",
    "PlainDeclaration",
    "RecordClass",
    "TagOccurrence",
    "TagValue",
]
