"""Tests for block document loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from nsgen.blocks import BlockDocumentError, load_blocks, parse_blocks
from nsgen.models import (
    CodeFragment,
    ConventionMethod,
    FormalClass,
    PlainDeclaration,
    RecordClass,
)

from tests._fixtures.block_builder import ModuleRootBuilder


def test_load_blocks_from_yaml(module_root: ModuleRootBuilder) -> None:
    path = module_root.write(
        "blocks.yml",
        """
        blocks:
          - file: R/summary.R
            line: 12
            object:
              kind: convention_method
              generic: summary
              class: myclass
            tags:
              - title: Summarise things
              - exportS3Method:
              - importFrom: rlang abort warn
              - importFrom: vctrs vec_size
          - file: R/shape.R
            object: {kind: formal_class, class: Shape}
            tags:
              export: ""
          - tags:
              - name: pkg-package
              - rawNamespace: |
                  if (TRUE) import(stats)
        """,
    )

    blocks, issues = load_blocks(path)

    assert issues == []
    assert len(blocks) == 3
    first = blocks[0]
    assert first.location == "R/summary.R:12"
    assert first.object == ConventionMethod(generic="summary", class_name="myclass")
    assert [tag.name for tag in first.tags] == [
        "title",
        "exportS3Method",
        "importFrom",
        "importFrom",
    ]
    assert first.tags[1].value == ()
    assert first.tags[2].value == ("rlang", "abort", "warn")
    assert blocks[1].object == FormalClass(class_name="Shape")
    assert blocks[2].name == "pkg-package"
    assert blocks[2].object is None
    assert blocks[2].tags[1].value == CodeFragment(source="if (TRUE) import(stats)")


def test_load_blocks_accepts_json(tmp_path: Path) -> None:
    path = tmp_path / "blocks.json"
    path.write_text(
        json.dumps([{"object": {"kind": "record_class", "class": "Account"}, "tags": {"export": None}}]),
        encoding="utf-8",
    )

    blocks, _ = load_blocks(path)

    assert blocks[0].object == RecordClass(class_name="Account")
    assert blocks[0].tags[0].value == ()


def test_mapping_tags_with_lists_repeat() -> None:
    blocks, _ = parse_blocks([{"tags": {"import": ["rlang", "vctrs"]}}])
    assert [tag.value for tag in blocks[0].tags] == [("rlang",), ("vctrs",)]


def test_plain_object_defaults_name_from_block() -> None:
    blocks, _ = parse_blocks([{"name": "tidy", "object": {"alias": "neat"}, "tags": {"export": ""}}])
    assert blocks[0].object == PlainDeclaration(name="tidy", alias="neat")


def test_arity_violation_drops_tag_and_reports_issue() -> None:
    blocks, issues = parse_blocks(
        [{"file": "R/a.R", "line": 4, "tags": [{"importFrom": "rlang"}, {"import": "vctrs"}]}]
    )

    assert [tag.name for tag in blocks[0].tags] == ["import"]
    assert len(issues) == 1
    assert issues[0].tag == "importFrom"
    assert issues[0].location == "R/a.R:4"


def test_unknown_object_kind_is_rejected() -> None:
    with pytest.raises(BlockDocumentError):
        parse_blocks([{"object": {"kind": "mystery"}}])


def test_missing_object_field_is_rejected() -> None:
    with pytest.raises(BlockDocumentError):
        parse_blocks([{"object": {"kind": "convention_method", "generic": "print"}}])


def test_malformed_documents_are_rejected() -> None:
    with pytest.raises(BlockDocumentError):
        parse_blocks({"blocks": "nope"})
    with pytest.raises(BlockDocumentError):
        parse_blocks([{"tags": [{"import": "a", "export": "b"}]}])


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_blocks(tmp_path / "missing.yml")


def test_empty_document_has_no_blocks(tmp_path: Path) -> None:
    path = tmp_path / "blocks.yml"
    path.write_text("", encoding="utf-8")
    assert load_blocks(path) == ([], [])
