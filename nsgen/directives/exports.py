"""Resolvers for export-family directives."""

from __future__ import annotations

from typing import List

from ..models import ConventionMethod, TagValue
from .base import DirectiveKind, DirectiveResolver, ResolveContext, as_words
from .defaults import default_export
from .formatting import one_per_line, s3_method


class ExportResolver(DirectiveResolver):
    """Explicit names export directly; an empty tag falls back to inference."""

    kind = DirectiveKind.EXPORT

    def resolve(self, value: TagValue, context: ResolveContext) -> List[str]:
        words = as_words(value)
        if not words:
            return default_export(context.block.object, context)
        return one_per_line("export", words)


class ExportClassResolver(DirectiveResolver):
    kind = DirectiveKind.EXPORT_CLASS

    def resolve(self, value: TagValue, context: ResolveContext) -> List[str]:
        return one_per_line("exportClasses", as_words(value))


class ExportMethodResolver(DirectiveResolver):
    kind = DirectiveKind.EXPORT_METHOD

    def resolve(self, value: TagValue, context: ResolveContext) -> List[str]:
        return one_per_line("exportMethods", as_words(value))


class ExportPatternResolver(DirectiveResolver):
    kind = DirectiveKind.EXPORT_PATTERN

    def resolve(self, value: TagValue, context: ResolveContext) -> List[str]:
        return one_per_line("exportPattern", as_words(value))


class ExportS3MethodResolver(DirectiveResolver):
    """Completes ``S3method(generic,class)`` from tag words and the documented object.

    Zero words take both halves from the object, one word supplies the
    generic and borrows the class, two words are used as given.
    """

    kind = DirectiveKind.EXPORT_S3_METHOD

    def resolve(self, value: TagValue, context: ResolveContext) -> List[str]:
        words = as_words(value)
        obj = context.block.object

        if len(words) >= 2:
            return [s3_method(words[0], words[1])]

        if not isinstance(obj, ConventionMethod):
            context.warn(
                self.kind.value,
                "`@exportS3Method` and `@exportS3Method generic` must be used with an S3 method",
            )
            return []

        if not words:
            return [s3_method(obj.generic, obj.class_name)]
        return [s3_method(words[0], obj.class_name)]


__all__ = [
    "ExportClassResolver",
    "ExportMethodResolver",
    "ExportPatternResolver",
    "ExportResolver",
    "ExportS3MethodResolver",
]
