"""Shared exception base for nsgen."""

from __future__ import annotations


class NamespaceError(RuntimeError):
    """Base class for failures that abort a compiler pass."""


__all__ = ["NamespaceError"]
