"""Load documentation blocks from YAML or JSON block documents.

A block document is the structured hand-off from whatever tokenizes source
comments. Each entry carries its tags in source order and, optionally, the
classification of the object it documents::

    blocks:
      - file: R/summary.R
        line: 12
        object: {kind: convention_method, generic: summary, class: myclass}
        tags:
          - exportS3Method: ""
          - importFrom: rlang abort
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import yaml

from .errors import NamespaceError
from .grammar import TagShapeError, shape_tag_value
from .logging import get_logger
from .models import (
    Block,
    BlockIssue,
    ConventionMethod,
    DocumentedObject,
    FormalClass,
    FormalGeneric,
    FormalMethod,
    PlainDeclaration,
    RecordClass,
    TagOccurrence,
)

_logger = get_logger("blocks")


class BlockDocumentError(NamespaceError):
    """Raised when a block document does not have the expected structure."""


def _require(payload: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    kind = payload.get("kind")
    raise BlockDocumentError(f"object of kind '{kind}' requires '{keys[0]}'")


_OBJECT_PARSERS: Dict[str, Callable[[Mapping[str, Any], Optional[str]], DocumentedObject]] = {
    "plain": lambda p, name: PlainDeclaration(
        name=_as_str(p.get("name")) or name or _require(p, "name"),
        alias=_as_str(p.get("alias")),
    ),
    "formal_class": lambda p, _: FormalClass(class_name=_require(p, "class", "class_name")),
    "formal_generic": lambda p, _: FormalGeneric(generic=_require(p, "generic")),
    "formal_method": lambda p, _: FormalMethod(generic=_require(p, "generic")),
    "convention_method": lambda p, _: ConventionMethod(
        generic=_require(p, "generic"), class_name=_require(p, "class", "class_name")
    ),
    "record_class": lambda p, _: RecordClass(class_name=_require(p, "class", "class_name")),
}

OBJECT_KINDS = tuple(_OBJECT_PARSERS)


def load_blocks(path: Path) -> Tuple[List[Block], List[BlockIssue]]:
    """Read a block document from disk."""
    if not path.exists():
        raise FileNotFoundError(f"Block document not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise BlockDocumentError(f"Failed to parse {path.name}: {exc}") from exc
    blocks, issues = parse_blocks(data, source=path.name)
    _logger.debug("Loaded %d block(s) from %s", len(blocks), path)
    return blocks, issues


def parse_blocks(
    data: Any, *, source: Optional[str] = None
) -> Tuple[List[Block], List[BlockIssue]]:
    """Build blocks from already-decoded data.

    Tags whose values break the tag grammar are dropped and reported as
    issues; structural problems raise ``BlockDocumentError``.
    """
    if data is None:
        return [], []
    if isinstance(data, Mapping):
        data = data.get("blocks", [])
    if not isinstance(data, list):
        raise BlockDocumentError("block document must be a list or contain a 'blocks' list")

    blocks: List[Block] = []
    issues: List[BlockIssue] = []
    for index, entry in enumerate(data):
        if not isinstance(entry, Mapping):
            raise BlockDocumentError(f"block #{index} must be a mapping")
        block, block_issues = _parse_block(entry, index=index, source=source)
        blocks.append(block)
        issues.extend(block_issues)
    return blocks, issues


def _parse_block(
    entry: Mapping[str, Any], *, index: int, source: Optional[str]
) -> Tuple[Block, List[BlockIssue]]:
    file = _as_str(entry.get("file")) or source
    line = entry.get("line") if isinstance(entry.get("line"), int) else None
    raw_tags = list(_iter_raw_tags(entry.get("tags"), index=index))

    name = _as_str(entry.get("name"))
    if name is None:
        name = next((raw for tag, raw in raw_tags if tag == "name" and raw.strip()), None)
        name = name.strip() if name else None

    location = _location(file, line, name, index)
    issues: List[BlockIssue] = []
    tags: List[TagOccurrence] = []
    for tag_name, raw in raw_tags:
        try:
            value = shape_tag_value(tag_name, raw)
        except TagShapeError as exc:
            issues.append(BlockIssue(location=location, tag=tag_name, message=str(exc)))
            continue
        tags.append(TagOccurrence(name=tag_name, value=value, line=line))

    obj = _parse_object(entry.get("object"), name=name, index=index)
    block = Block(tags=tuple(tags), object=obj, file=file, line=line, name=name)
    return block, issues


def _parse_object(
    payload: Any, *, name: Optional[str], index: int
) -> Optional[DocumentedObject]:
    if payload is None:
        return None
    if isinstance(payload, str):
        payload = {"kind": payload}
    if not isinstance(payload, Mapping):
        raise BlockDocumentError(f"block #{index}: 'object' must be a mapping")
    kind = _as_str(payload.get("kind")) or "plain"
    parser = _OBJECT_PARSERS.get(kind)
    if parser is None:
        known = ", ".join(OBJECT_KINDS)
        raise BlockDocumentError(f"block #{index}: unknown object kind '{kind}' (expected one of {known})")
    try:
        return parser(payload, name)
    except BlockDocumentError as exc:
        raise BlockDocumentError(f"block #{index}: {exc}") from exc


def _iter_raw_tags(payload: Any, *, index: int) -> Iterable[Tuple[str, str]]:
    """Yield ``(tag, raw text)`` pairs; list values become repeated tags."""
    if payload is None:
        return
    if isinstance(payload, Mapping):
        items: Iterable[Tuple[Any, Any]] = payload.items()
    elif isinstance(payload, list):
        pairs: List[Tuple[Any, Any]] = []
        for item in payload:
            if not isinstance(item, Mapping) or len(item) != 1:
                raise BlockDocumentError(
                    f"block #{index}: each tag must be a single-key mapping"
                )
            pairs.extend(item.items())
        items = pairs
    else:
        raise BlockDocumentError(f"block #{index}: 'tags' must be a list or mapping")

    for tag_name, value in items:
        values = value if isinstance(value, list) else [value]
        for raw in values:
            yield str(tag_name), _raw_text(raw)


def _raw_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


def _location(file: Optional[str], line: Optional[int], name: Optional[str], index: int) -> str:
    if file and line is not None:
        return f"{file}:{line}"
    return file or name or f"block #{index}"


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


__all__ = ["BlockDocumentError", "OBJECT_KINDS", "load_blocks", "parse_blocks"]
