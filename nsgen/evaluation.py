"""Evaluation capability for code-valued namespace tags."""

from __future__ import annotations

import importlib
from typing import Any, Dict, List, Mapping, Protocol, Sequence

from .errors import NamespaceError
from .logging import get_logger
from .models import Block


class EvaluationError(NamespaceError):
    """Raised when a code fragment cannot be turned into manifest lines."""

    def __init__(self, message: str, *, location: str | None = None) -> None:
        super().__init__(f"[{location}] {message}" if location else message)
        self.location = location


class Evaluator(Protocol):
    """Evaluates a fragment in the module environment and returns lines."""

    def __call__(self, code: str, block: Block) -> Sequence[str]:
        ...


class PythonEvaluator:
    """Evaluates fragments as Python expressions against a module namespace.

    Fragments are trusted build-time code; nothing here is sandboxed.
    """

    def __init__(self, namespace: Mapping[str, Any] | None = None) -> None:
        self._namespace: Dict[str, Any] = dict(namespace or {})
        self.logger = get_logger("evaluation")

    @classmethod
    def from_module(cls, module_name: str) -> "PythonEvaluator":
        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            raise EvaluationError(f"Cannot import module '{module_name}': {exc}") from exc
        return cls(vars(module))

    def __call__(self, code: str, block: Block) -> Sequence[str]:
        self.logger.debug("Evaluating fragment from %s", block.location)
        compiled = compile(code, block.location, "eval")
        return eval(compiled, dict(self._namespace))  # noqa: S307 - trusted input


def coerce_lines(result: object, *, location: str) -> List[str]:
    """Validate an evaluation result as a sequence of strings."""
    if isinstance(result, str):
        return [result]
    if isinstance(result, Sequence) and all(isinstance(item, str) for item in result):
        return list(result)
    raise EvaluationError(
        f"evalNamespace must return a string or a sequence of strings, got {type(result).__name__}",
        location=location,
    )


__all__ = ["EvaluationError", "Evaluator", "PythonEvaluator", "coerce_lines"]
