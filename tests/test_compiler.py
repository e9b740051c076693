"""Tests for the two-pass namespace compiler."""

from __future__ import annotations

import itertools
import os
from pathlib import Path
from typing import Sequence

import pytest

from nsgen.compiler import CompilerState, NamespaceCompiler, finalize_lines
from nsgen.evaluation import EvaluationError
from nsgen.models import Block, FormalClass, PlainDeclaration

from tests._fixtures.block_builder import lines_of, make_block


def _age(path: Path) -> int:
    os.utime(path, ns=(1_000_000_000, 1_000_000_000))
    return path.stat().st_mtime_ns


def _sample_blocks() -> list[Block]:
    return [
        make_block(("import", "rlang"), ("export", ""), obj=PlainDeclaration(name="tidy")),
        make_block(("importFrom", "magrittr %>%"), ("title", "Pipe")),
        make_block(("export", ""), obj=FormalClass(class_name="Shape")),
        make_block(("useDynLib", "shapes"), ("exportPattern", "^shape_")),
    ]


def test_duplicate_lines_are_collapsed() -> None:
    blocks = [make_block(("import", "rlang")), make_block(("import", "rlang"))]
    assert lines_of(blocks) == ["import(rlang)"]


def test_output_is_independent_of_block_order() -> None:
    blocks = _sample_blocks()
    expected = lines_of(blocks)
    for permutation in itertools.permutations(blocks):
        assert lines_of(permutation) == expected


def test_sorting_is_by_code_point_not_locale() -> None:
    assert finalize_lines(["export(b)", "import(a)", "export(B)", "S3method(f,x)"]) == [
        "S3method(f,x)",
        "export(B)",
        "export(b)",
        "import(a)",
    ]


def test_non_namespace_tags_are_ignored() -> None:
    block = make_block(("title", "Hello"), ("param", "x value"))
    assert lines_of([block]) == []


def test_pre_pass_only_writes_import_directives(tmp_path: Path) -> None:
    target = tmp_path / "NAMESPACE"
    blocks = [
        make_block(("importFrom", "pkg a")),
        make_block(("export", ""), obj=PlainDeclaration(name="f")),
    ]
    compiler = NamespaceCompiler(target)

    pre = compiler.preprocess(blocks)
    assert pre.lines == ["importFrom(pkg,a)"]
    assert pre.written is True
    assert compiler.state is CompilerState.PRE_PASS_COMPLETE
    assert target.read_text(encoding="utf-8").splitlines()[1:] == ["importFrom(pkg,a)"]

    full = compiler.process(blocks)
    assert full.lines == ["export(f)", "importFrom(pkg,a)"]
    compiler.output(full)
    assert target.read_text(encoding="utf-8").splitlines()[1:] == [
        "export(f)",
        "importFrom(pkg,a)",
    ]


def test_pre_pass_skips_empty_result_without_prior_manifest(tmp_path: Path) -> None:
    target = tmp_path / "NAMESPACE"
    compiler = NamespaceCompiler(target)

    result = compiler.preprocess([make_block(("export", "f"))])

    assert result.lines == []
    assert result.written is False
    assert not target.exists()


def test_pre_pass_drops_stale_imports_from_generated_manifest(tmp_path: Path) -> None:
    target = tmp_path / "NAMESPACE"
    compiler = NamespaceCompiler(target)
    compiler.writer.write(target, ["export(f)", "import(rlang)"])

    result = compiler.preprocess([make_block(("export", "f"))])

    assert result.written is True
    assert target.read_text(encoding="utf-8").splitlines()[1:] == ["export(f)"]


def test_pre_pass_keeps_exports_of_generated_manifest(tmp_path: Path) -> None:
    target = tmp_path / "NAMESPACE"
    compiler = NamespaceCompiler(target)
    compiler.writer.write(target, ["S3method(print,tbl)", "export(f)", "import(vctrs)"])

    result = compiler.preprocess([make_block(("import", "rlang"))])

    assert result.lines == ["import(rlang)"]
    assert target.read_text(encoding="utf-8").splitlines()[1:] == [
        "S3method(print,tbl)",
        "export(f)",
        "import(rlang)",
    ]


def test_pre_pass_leaves_hand_written_manifest_when_empty(tmp_path: Path) -> None:
    target = tmp_path / "NAMESPACE"
    target.write_text("export(handmade)\n", encoding="utf-8")

    NamespaceCompiler(target).preprocess([make_block(("export", "f"))])

    assert target.read_text(encoding="utf-8") == "export(handmade)\n"


def test_compiling_twice_is_idempotent(tmp_path: Path) -> None:
    target = tmp_path / "NAMESPACE"
    blocks = _sample_blocks()

    first = NamespaceCompiler(target)
    first.output(first.process(blocks))
    content = target.read_bytes()
    stamp = _age(target)

    second = NamespaceCompiler(target)
    result = second.output(second.process(blocks))

    assert result.written is False
    assert target.read_bytes() == content
    assert target.stat().st_mtime_ns == stamp


def test_multi_line_raw_directive_is_idempotent(tmp_path: Path) -> None:
    target = tmp_path / "NAMESPACE"
    raw = "if (getRversion() >= '4.0') {\n  importFrom(stats, sigma)\n}"
    blocks = [make_block(("rawNamespace", raw), ("export", "f"))]

    first = NamespaceCompiler(target)
    first.output(first.process(blocks))
    stamp = _age(target)

    second = NamespaceCompiler(target)
    assert second.preprocess(blocks).written is False
    assert second.output(second.process(blocks)).written is False
    assert target.stat().st_mtime_ns == stamp
    assert target.read_text(encoding="utf-8").splitlines()[1:] == [
        "export(f)",
        "if (getRversion() >= '4.0') {",
        "  importFrom(stats, sigma)",
        "}",
    ]


def test_eval_namespace_output_is_spliced(tmp_path: Path) -> None:
    def evaluator(code: str, block: Block) -> Sequence[str]:
        assert code == "generated_exports()"
        return ["export(alpha)", "export(beta)"]

    block = make_block(("evalNamespace", "generated_exports()"), ("import", "rlang"))
    result = NamespaceCompiler(tmp_path / "NAMESPACE").process([block], evaluator)

    assert result.lines == ["export(alpha)", "export(beta)", "import(rlang)"]


def test_eval_namespace_is_not_run_in_pre_pass(tmp_path: Path) -> None:
    def evaluator(code: str, block: Block) -> Sequence[str]:  # pragma: no cover - must not run
        raise AssertionError("evaluated during pre-pass")

    block = make_block(("evalNamespace", "boom()"), ("import", "rlang"))
    compiler = NamespaceCompiler(tmp_path / "NAMESPACE")
    assert compiler.compile([block], kinds=frozenset()).lines == []
    assert compiler.preprocess([block]).lines == ["import(rlang)"]


def test_evaluation_failure_aborts_full_pass_without_writing(tmp_path: Path) -> None:
    target = tmp_path / "NAMESPACE"

    def evaluator(code: str, block: Block) -> Sequence[str]:
        raise ValueError("broken fragment")

    blocks = [make_block(("import", "rlang")), make_block(("evalNamespace", "broken()"))]
    compiler = NamespaceCompiler(target)
    compiler.preprocess(blocks)
    pre_content = target.read_text(encoding="utf-8")

    with pytest.raises(EvaluationError) as excinfo:
        compiler.process(blocks, evaluator)

    assert "broken fragment" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, ValueError)
    assert target.read_text(encoding="utf-8") == pre_content


def test_eval_namespace_without_evaluator_fails(tmp_path: Path) -> None:
    block = make_block(("evalNamespace", "anything()"))
    with pytest.raises(EvaluationError):
        NamespaceCompiler(tmp_path / "NAMESPACE").process([block])


def test_eval_namespace_rejects_non_string_results(tmp_path: Path) -> None:
    block = make_block(("evalNamespace", "numbers()"))
    with pytest.raises(EvaluationError):
        NamespaceCompiler(tmp_path / "NAMESPACE").process([block], lambda code, b: [1, 2])


def test_output_requires_full_pass(tmp_path: Path) -> None:
    compiler = NamespaceCompiler(tmp_path / "NAMESPACE")
    result = compiler.compile([make_block(("import", "rlang"))])
    with pytest.raises(RuntimeError):
        compiler.output(result)
