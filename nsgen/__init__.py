"""Compile namespace tags from documentation blocks into an interface manifest."""

from .compiler import CompilerState, NamespaceCompiler, PassResult
from .models import Block, BlockIssue, TagOccurrence
from .writer import ManifestWriter, WriteConflictError

__version__ = "0.1.0"

__all__ = [
    "Block",
    "BlockIssue",
    "CompilerState",
    "ManifestWriter",
    "NamespaceCompiler",
    "PassResult",
    "TagOccurrence",
    "WriteConflictError",
    "__version__",
]
