"""Pipeline orchestration for build/clean flows."""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .blocks import load_blocks
from .compiler import NamespaceCompiler, PassResult
from .config import NsgenConfig, load_config
from .directives import IMPORT_KINDS
from .evaluation import Evaluator, PythonEvaluator
from .logging import get_logger, log_issues
from .models import Block, BlockIssue
from .writer import ManifestWriter


@dataclass
class BuildOutcome:
    """Result of a manifest build."""

    path: Path
    lines: List[str]
    issues: List[BlockIssue] = field(default_factory=list)
    written: bool = False
    dry_run: bool = False
    diff: str = ""


class Orchestrator:
    """Loads configuration and blocks, then drives the two compiler passes."""

    def __init__(
        self,
        *,
        evaluator_factory: Callable[[str], Evaluator] | None = None,
        block_loader: Callable[[Path], tuple[List[Block], List[BlockIssue]]] | None = None,
    ) -> None:
        self._evaluator_factory = evaluator_factory or PythonEvaluator.from_module
        self._block_loader = block_loader or load_blocks
        self.logger = get_logger("orchestrator")

    def run_build(
        self,
        path: str,
        *,
        blocks: str | None = None,
        module: str | None = None,
        evaluator: Evaluator | None = None,
        pre_only: bool = False,
        dry_run: bool = False,
    ) -> BuildOutcome:
        """Compile the manifest for the module rooted at ``path``."""
        config = self._load_config(path)
        if blocks:
            config.blocks = blocks
        if module:
            config.module = module

        self.logger.info("Building %s for %s", config.manifest, config.root)
        loaded, load_issues = self._block_loader(_resolve(config.root, config.blocks))
        log_issues(self.logger, load_issues)
        self.logger.debug("Processing %d block(s)", len(loaded))

        compiler = NamespaceCompiler(
            config.manifest_path, writer=ManifestWriter(config.marker)
        )

        if dry_run:
            result = self._dry_run(compiler, loaded, config, evaluator, pre_only)
            return self._outcome(config, result, load_issues, dry_run=True, compiler=compiler)

        pre = compiler.preprocess(loaded)
        if pre_only:
            return self._outcome(config, pre, load_issues, compiler=compiler)

        full = compiler.process(loaded, evaluator or self._resolve_evaluator(config))
        compiler.output(full)
        outcome = self._outcome(config, full, load_issues, compiler=compiler)
        outcome.written = pre.written or full.written
        return outcome

    def run_clean(self, path: str) -> bool:
        """Remove the manifest when nsgen generated it."""
        config = self._load_config(path)
        removed = ManifestWriter(config.marker).clean(config.manifest_path)
        if not removed:
            self.logger.info("Nothing to clean at %s", config.manifest_path)
        return removed

    # ------------------------------------------------------------------
    # Internal helpers

    def _load_config(self, path: str) -> NsgenConfig:
        root = Path(path).expanduser().resolve()
        if not root.is_dir():
            raise FileNotFoundError(f"Module root not found: {root}")
        return load_config(root)

    def _resolve_evaluator(self, config: NsgenConfig) -> Optional[Evaluator]:
        if not config.module:
            return None
        return self._evaluator_factory(config.module)

    def _dry_run(
        self,
        compiler: NamespaceCompiler,
        blocks: Sequence[Block],
        config: NsgenConfig,
        evaluator: Evaluator | None,
        pre_only: bool,
    ) -> PassResult:
        if pre_only:
            return compiler.compile(blocks, kinds=IMPORT_KINDS)
        return compiler.process(blocks, evaluator or self._resolve_evaluator(config))

    def _outcome(
        self,
        config: NsgenConfig,
        result: PassResult,
        load_issues: Sequence[BlockIssue],
        *,
        compiler: NamespaceCompiler,
        dry_run: bool = False,
    ) -> BuildOutcome:
        outcome = BuildOutcome(
            path=config.manifest_path,
            lines=list(result.lines),
            issues=[*load_issues, *result.issues],
            written=result.written,
            dry_run=dry_run,
        )
        if dry_run:
            outcome.diff = _render_diff(compiler.writer, config.manifest_path, result.lines)
        return outcome


def _resolve(root: Path, relative: str) -> Path:
    candidate = Path(relative).expanduser()
    return candidate if candidate.is_absolute() else root / candidate


def _render_diff(writer: ManifestWriter, path: Path, lines: Sequence[str]) -> str:
    current = writer.read_lines(path) or []
    diff = difflib.unified_diff(
        current,
        list(lines),
        fromfile=f"{path.name} (current)",
        tofile=f"{path.name} (generated)",
        lineterm="",
    )
    return "\n".join(diff)


__all__ = ["BuildOutcome", "Orchestrator"]
