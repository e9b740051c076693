"""Resolver for ``evalNamespace``: runs a fragment and splices its output."""

from __future__ import annotations

from typing import List

from ..evaluation import EvaluationError, coerce_lines
from ..models import CodeFragment, TagValue
from .base import DirectiveKind, DirectiveResolver, ResolveContext


class EvalNamespaceResolver(DirectiveResolver):
    kind = DirectiveKind.EVAL_NAMESPACE

    def resolve(self, value: TagValue, context: ResolveContext) -> List[str]:
        location = context.block.location
        if context.evaluator is None:
            raise EvaluationError(
                "@evalNamespace requires a live module environment", location=location
            )
        if isinstance(value, CodeFragment):
            source = value.source
        elif isinstance(value, tuple):
            source = " ".join(value)
        else:
            source = value
        try:
            result = context.evaluator(source, context.block)
        except EvaluationError:
            raise
        except Exception as exc:
            raise EvaluationError(
                f"@evalNamespace failed: {exc}", location=location
            ) from exc
        return coerce_lines(result, location=location)


__all__ = ["EvalNamespaceResolver"]
