"""Default-export inference for bare ``@export`` tags."""

from __future__ import annotations

from typing import List, assert_never

from ..models import (
    ConventionMethod,
    DocumentedObject,
    FormalClass,
    FormalGeneric,
    FormalMethod,
    PlainDeclaration,
    RecordClass,
)
from .base import ResolveContext
from .formatting import one_per_line, s3_method


def default_export(obj: DocumentedObject | None, context: ResolveContext) -> List[str]:
    """Return the directive a bare export implies for the documented object.

    Adding a new object kind means adding a branch here; the trailing
    ``assert_never`` makes type checkers flag the missing case.
    """
    if obj is None:
        name = context.block.name
        if not name:
            context.warn("export", "bare @export needs a documented object or @name")
            return []
        return one_per_line("export", [name])
    if isinstance(obj, FormalClass):
        return one_per_line("exportClasses", [obj.class_name])
    if isinstance(obj, FormalGeneric):
        return one_per_line("export", [obj.generic])
    if isinstance(obj, FormalMethod):
        return one_per_line("exportMethods", [obj.generic])
    if isinstance(obj, ConventionMethod):
        return [s3_method(obj.generic, obj.class_name)]
    if isinstance(obj, RecordClass):
        return one_per_line("exportClasses", [obj.class_name])
    if isinstance(obj, PlainDeclaration):
        return one_per_line("export", [obj.alias or obj.name])
    assert_never(obj)


__all__ = ["default_export"]
