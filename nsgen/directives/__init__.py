"""Directive resolvers and the registry that maps tag kinds to them."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping

from .base import (
    ALL_KINDS,
    IMPORT_KINDS,
    DirectiveKind,
    DirectiveResolver,
    ResolveContext,
)
from .code import EvalNamespaceResolver
from .defaults import default_export
from .exports import (
    ExportClassResolver,
    ExportMethodResolver,
    ExportPatternResolver,
    ExportResolver,
    ExportS3MethodResolver,
)
from .imports import (
    ImportFromResolver,
    ImportResolver,
    RawNamespaceResolver,
    UseDynLibResolver,
)


def builtin_resolvers() -> Dict[DirectiveKind, DirectiveResolver]:
    """Return one resolver instance for every directive kind."""
    resolvers: List[DirectiveResolver] = [
        ImportResolver(),
        ImportFromResolver(DirectiveKind.IMPORT_FROM),
        ImportFromResolver(DirectiveKind.IMPORT_CLASSES_FROM),
        ImportFromResolver(DirectiveKind.IMPORT_METHODS_FROM),
        UseDynLibResolver(),
        RawNamespaceResolver(),
        EvalNamespaceResolver(),
        ExportResolver(),
        ExportClassResolver(),
        ExportMethodResolver(),
        ExportPatternResolver(),
        ExportS3MethodResolver(),
    ]
    registry = {resolver.kind: resolver for resolver in resolvers}
    missing = ALL_KINDS - registry.keys()
    if missing:  # pragma: no cover - guards future kinds
        names = ", ".join(sorted(kind.value for kind in missing))
        raise RuntimeError(f"No resolver registered for: {names}")
    return registry


def resolvers_for(
    kinds: Iterable[DirectiveKind],
    registry: Mapping[DirectiveKind, DirectiveResolver] | None = None,
) -> Dict[DirectiveKind, DirectiveResolver]:
    source = registry if registry is not None else builtin_resolvers()
    return {kind: source[kind] for kind in kinds}


__all__ = [
    "ALL_KINDS",
    "DirectiveKind",
    "DirectiveResolver",
    "IMPORT_KINDS",
    "ResolveContext",
    "builtin_resolvers",
    "default_export",
    "resolvers_for",
]
