"""Two-pass compiler that turns documentation blocks into manifest lines."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence

from .directives import (
    ALL_KINDS,
    IMPORT_KINDS,
    DirectiveKind,
    DirectiveResolver,
    ResolveContext,
    builtin_resolvers,
)
from .evaluation import Evaluator
from .logging import get_logger, log_issues
from .models import Block, BlockIssue
from .writer import ManifestWriter, physical_lines


_IMPORT_DIRECTIVE = re.compile(
    r"^\s*(?:import|importFrom|importClassesFrom|importMethodsFrom|useDynLib)\("
)


class CompilerState(str, Enum):
    UNINITIALIZED = "uninitialized"
    PRE_PASS_COMPLETE = "pre-pass-complete"
    FULL_PASS_COMPLETE = "full-pass-complete"


@dataclass
class PassResult:
    """Lines and issues produced by one compiler pass."""

    lines: List[str]
    issues: List[BlockIssue] = field(default_factory=list)
    written: bool = False


def finalize_lines(lines: Iterable[str]) -> List[str]:
    """Drop exact duplicates and sort by code point, independent of locale."""
    return sorted(set(lines))


def merge_imports(imports: Sequence[str], existing: Sequence[str]) -> List[str]:
    """Replace the import-family lines of ``existing`` with ``imports``.

    Lines already produced by ``imports`` (including the body of multi-line
    raw directives) are dropped from ``existing`` before merging.
    """
    fresh = set(physical_lines(imports))
    kept = [
        line
        for line in existing
        if line not in fresh and not _IMPORT_DIRECTIVE.match(line)
    ]
    return finalize_lines([*imports, *kept])


class NamespaceCompiler:
    """Coordinates the import-only pre-pass and the full pass for one manifest."""

    def __init__(
        self,
        path: Path,
        *,
        writer: ManifestWriter | None = None,
        resolvers: Optional[Mapping[DirectiveKind, DirectiveResolver]] = None,
    ) -> None:
        self.path = path
        self.writer = writer or ManifestWriter()
        self._resolvers: Dict[DirectiveKind, DirectiveResolver] = dict(
            resolvers if resolvers is not None else builtin_resolvers()
        )
        self.state = CompilerState.UNINITIALIZED
        self.logger = get_logger("compiler")

    def compile(
        self,
        blocks: Sequence[Block],
        kinds: FrozenSet[DirectiveKind] = ALL_KINDS,
        *,
        evaluator: Evaluator | None = None,
    ) -> PassResult:
        """Resolve every tag in ``kinds`` across ``blocks`` without touching disk."""
        collected: List[str] = []
        issues: List[BlockIssue] = []
        for block in blocks:
            context = ResolveContext(block=block, evaluator=evaluator)
            for tag_name in block.tag_names():
                kind = DirectiveKind.from_tag(tag_name)
                if kind is None or kind not in kinds:
                    continue
                resolver = self._resolvers[kind]
                for occurrence in block.occurrences(tag_name):
                    collected.extend(resolver.resolve(occurrence.value, context))
            issues.extend(context.issues)

        log_issues(self.logger, issues)

        lines = finalize_lines(collected)
        self.logger.debug(
            "Resolved %d directive(s) into %d line(s) from %d block(s)",
            len(collected),
            len(lines),
            len(blocks),
        )
        return PassResult(lines=lines, issues=issues)

    def preprocess(self, blocks: Sequence[Block]) -> PassResult:
        """Run the import-only pass and write it when there is something to say.

        Over a machine-owned manifest only the import-family lines are
        replaced, so an unchanged rebuild leaves the file untouched and stale
        imports still disappear.
        """
        result = self.compile(blocks, IMPORT_KINDS)
        self.state = CompilerState.PRE_PASS_COMPLETE
        owned = self.writer.is_generated(self.path)
        if not result.lines and not owned:
            self.logger.debug("Pre-pass produced no imports; leaving %s alone", self.path)
            return result
        lines = result.lines
        if owned:
            lines = merge_imports(lines, self.writer.read_lines(self.path) or [])
        result.written = self.writer.write(self.path, lines, check=False)
        return result

    def process(
        self, blocks: Sequence[Block], evaluator: Evaluator | None = None
    ) -> PassResult:
        """Run the full pass over every directive kind."""
        result = self.compile(blocks, ALL_KINDS, evaluator=evaluator)
        self.state = CompilerState.FULL_PASS_COMPLETE
        return result

    def output(self, result: PassResult) -> PassResult:
        """Write the full-pass result, refusing to replace hand-written manifests."""
        if self.state is not CompilerState.FULL_PASS_COMPLETE:
            raise RuntimeError("output() requires a completed full pass")
        result.written = self.writer.write(self.path, result.lines, check=True)
        return result

    def clean(self) -> bool:
        return self.writer.clean(self.path)


__all__ = [
    "CompilerState",
    "NamespaceCompiler",
    "PassResult",
    "finalize_lines",
    "merge_imports",
]
