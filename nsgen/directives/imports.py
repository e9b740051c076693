"""Resolvers for import-family directives.

These kinds need no live module environment, so they are the only ones
processed in the pre-pass.
"""

from __future__ import annotations

from typing import List

from ..models import CodeFragment, TagValue
from .base import DirectiveKind, DirectiveResolver, ResolveContext, as_words
from .formatting import auto_quote, one_per_line, repeat_first


class ImportResolver(DirectiveResolver):
    kind = DirectiveKind.IMPORT

    def resolve(self, value: TagValue, context: ResolveContext) -> List[str]:
        return one_per_line("import", as_words(value))


class ImportFromResolver(DirectiveResolver):
    """Handles ``importFrom`` and its class/method siblings: package first, then symbols."""

    def __init__(self, kind: DirectiveKind) -> None:
        self.kind = kind

    def resolve(self, value: TagValue, context: ResolveContext) -> List[str]:
        return repeat_first(self.kind.value, as_words(value))


class UseDynLibResolver(DirectiveResolver):
    kind = DirectiveKind.USE_DYN_LIB

    def resolve(self, value: TagValue, context: ResolveContext) -> List[str]:
        words = as_words(value)
        if not words:
            return []
        if len(words) == 1:
            return [f"useDynLib({auto_quote(words[0])})"]
        if any("," in word for word in words):
            # Comma-bearing arguments pass through unquoted so authors can
            # write forms like `useDynLib(lib, .registration = TRUE)`.
            return [f"useDynLib({' '.join(words)})"]
        return repeat_first("useDynLib", words)


class RawNamespaceResolver(DirectiveResolver):
    kind = DirectiveKind.RAW_NAMESPACE

    def resolve(self, value: TagValue, context: ResolveContext) -> List[str]:
        if isinstance(value, CodeFragment):
            return [value.source]
        if isinstance(value, tuple):
            return [" ".join(value)] if value else []
        return [value] if value else []


__all__ = [
    "ImportFromResolver",
    "ImportResolver",
    "RawNamespaceResolver",
    "UseDynLibResolver",
]
