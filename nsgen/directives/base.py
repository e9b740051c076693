"""Base classes for directive resolvers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, FrozenSet, List, Optional

from ..models import Block, BlockIssue, TagValue

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from ..evaluation import Evaluator


class DirectiveKind(str, Enum):
    """Closed set of namespace tags the compiler understands."""

    IMPORT = "import"
    IMPORT_FROM = "importFrom"
    IMPORT_CLASSES_FROM = "importClassesFrom"
    IMPORT_METHODS_FROM = "importMethodsFrom"
    USE_DYN_LIB = "useDynLib"
    RAW_NAMESPACE = "rawNamespace"
    EVAL_NAMESPACE = "evalNamespace"
    EXPORT = "export"
    EXPORT_CLASS = "exportClass"
    EXPORT_METHOD = "exportMethod"
    EXPORT_S3_METHOD = "exportS3Method"
    EXPORT_PATTERN = "exportPattern"

    @classmethod
    def from_tag(cls, tag_name: str) -> Optional["DirectiveKind"]:
        try:
            return cls(tag_name)
        except ValueError:
            return None


# Kinds resolvable without evaluating module code; processed first.
IMPORT_KINDS: FrozenSet[DirectiveKind] = frozenset(
    {
        DirectiveKind.IMPORT,
        DirectiveKind.IMPORT_FROM,
        DirectiveKind.IMPORT_CLASSES_FROM,
        DirectiveKind.IMPORT_METHODS_FROM,
        DirectiveKind.USE_DYN_LIB,
        DirectiveKind.RAW_NAMESPACE,
    }
)

ALL_KINDS: FrozenSet[DirectiveKind] = frozenset(DirectiveKind)


@dataclass
class ResolveContext:
    """Per-block state handed to resolvers: the block, evaluator, and issue sink."""

    block: Block
    evaluator: Optional["Evaluator"] = None
    issues: List[BlockIssue] = field(default_factory=list)

    def warn(self, tag: str, message: str) -> None:
        self.issues.append(
            BlockIssue(location=self.block.location, tag=tag, message=message)
        )


class DirectiveResolver(ABC):
    """Contract for turning one tag occurrence into manifest lines."""

    kind: DirectiveKind

    @abstractmethod
    def resolve(self, value: TagValue, context: ResolveContext) -> List[str]:
        """Return zero or more complete manifest lines for ``value``."""


def as_words(value: TagValue) -> tuple[str, ...]:
    """Return word tokens from a shaped value; plain strings are split."""
    if isinstance(value, tuple):
        return value
    if isinstance(value, str):
        return tuple(value.split())
    return (value.source,)


__all__ = [
    "ALL_KINDS",
    "DirectiveKind",
    "DirectiveResolver",
    "IMPORT_KINDS",
    "ResolveContext",
    "as_words",
]
