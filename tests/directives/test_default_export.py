"""Tests for bare @export inference by documented object kind."""

from __future__ import annotations

import pytest

from nsgen.directives import ResolveContext, default_export
from nsgen.models import (
    Block,
    ConventionMethod,
    FormalClass,
    FormalGeneric,
    FormalMethod,
    PlainDeclaration,
    RecordClass,
)

from tests._fixtures.block_builder import lines_of, make_block


@pytest.mark.parametrize(
    ("obj", "expected"),
    [
        (FormalClass(class_name="Foo"), ["exportClasses(Foo)"]),
        (FormalGeneric(generic="area"), ["export(area)"]),
        (FormalMethod(generic="show"), ["exportMethods(show)"]),
        (ConventionMethod(generic="summary", class_name="myclass"), ["S3method(summary,myclass)"]),
        (RecordClass(class_name="Account"), ["exportClasses(Account)"]),
        (PlainDeclaration(name="f"), ["export(f)"]),
        (PlainDeclaration(name="f", alias="g"), ["export(g)"]),
        (PlainDeclaration(name="%||%"), ["export(`%||%`)"]),
    ],
)
def test_default_export_by_object_kind(obj, expected) -> None:  # type: ignore[no-untyped-def]
    block = Block(object=obj)
    assert default_export(obj, ResolveContext(block=block)) == expected


def test_formal_class_never_exports_as_plain_name() -> None:
    block = make_block(("export", ""), obj=FormalClass(class_name="Foo"))
    lines = lines_of([block])
    assert lines == ["exportClasses(Foo)"]
    assert "export(Foo)" not in lines


def test_absent_object_uses_block_name() -> None:
    block = make_block(("export", ""), name="pkg_options")
    assert lines_of([block]) == ["export(pkg_options)"]


def test_absent_object_without_name_warns() -> None:
    context = ResolveContext(block=Block(file="R/zzz.R", line=3))
    assert default_export(None, context) == []
    assert len(context.issues) == 1
    assert context.issues[0].location == "R/zzz.R:3"
