"""Idempotent manifest writer with ownership tracking."""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import NamespaceError
from .logging import get_logger

DEFAULT_MARKER = "# Generated by nsgen: do not edit by hand"

_VALID_FILENAME = re.compile(r"^[a-zA-Z][a-zA-Z0-9_.-]*$")
_NEW_FILE_MODE = 0o644


class WriteConflictError(NamespaceError):
    """Raised instead of overwriting a manifest that nsgen did not generate."""

    def __init__(self, path: Path) -> None:
        super().__init__(
            f"Refusing to overwrite {path}: it was not generated by nsgen. "
            "Delete it to let nsgen manage it."
        )
        self.path = path


class InvalidManifestPathError(NamespaceError):
    """Raised when the target file name is not a plain file name."""


class ManifestWriter:
    """Writes manifest lines behind an ownership marker, only when they change."""

    def __init__(self, marker: str = DEFAULT_MARKER, *, prefix: Optional[str] = None) -> None:
        self.marker = marker
        self.prefix = prefix or marker.split(":", 1)[0].rstrip()
        self.logger = get_logger("writer")

    def render(self, lines: Sequence[str]) -> List[str]:
        return [self.marker, *lines]

    def is_generated(self, path: Path) -> bool:
        """Return True when ``path`` exists and starts with the ownership marker."""
        if not path.exists():
            return False
        return self._has_marker(_read_first_line(path))

    def read_lines(self, path: Path) -> Optional[List[str]]:
        """Return the manifest body without its marker, or None when absent."""
        if not path.exists():
            return None
        lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
        if lines and self._has_marker(lines[0]):
            return lines[1:]
        return lines

    def write(self, path: Path, lines: Sequence[str], *, check: bool = True) -> bool:
        """Write ``lines`` to ``path`` if they differ from what is there.

        Returns True when the file was (re)written. With ``check`` enabled an
        existing file without the marker is never replaced.
        """
        _validate_filename(path)
        current = self.read_lines(path)
        if current is not None and current == physical_lines(lines):
            self.logger.debug("%s already up to date", path)
            return False

        if current is not None and check and not self.is_generated(path):
            self.logger.warning("Skipping %s: not generated by nsgen", path)
            raise WriteConflictError(path)

        newline = _detect_newline(path) if current is not None else "\n"
        text = newline.join(self.render(physical_lines(lines))) + newline
        path.parent.mkdir(parents=True, exist_ok=True)
        atomic_write_text(path, text)
        self.logger.info("Writing %s", path.name)
        return True

    def clean(self, path: Path) -> bool:
        """Delete ``path`` only when nsgen owns it."""
        if not self.is_generated(path):
            self.logger.debug("Not removing %s: not generated by nsgen", path)
            return False
        path.unlink()
        self.logger.info("Removed %s", path.name)
        return True

    def _has_marker(self, line: str) -> bool:
        return line.startswith(self.prefix)


def physical_lines(lines: Sequence[str]) -> List[str]:
    """Split entries carrying embedded newlines into the lines they occupy on disk."""
    return "\n".join(lines).splitlines()


def atomic_write_text(path: Path, text: str, encoding: str = "utf-8") -> None:
    """Replace ``path`` with ``text`` through a temporary sibling file."""
    tmp_path: Path | None = None
    mode = _NEW_FILE_MODE
    try:
        if path.exists():
            try:
                mode = path.stat().st_mode & 0o777
            except OSError:
                mode = _NEW_FILE_MODE
        with tempfile.NamedTemporaryFile(
            "w", encoding=encoding, newline="", delete=False, dir=path.parent
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    finally:
        if tmp_path and tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError:
                pass


def _validate_filename(path: Path) -> None:
    if not _VALID_FILENAME.match(path.name):
        raise InvalidManifestPathError(
            f"Invalid manifest file name '{path.name}': use letters, digits, '.', '_' or '-'"
        )


def _read_first_line(path: Path) -> str:
    with path.open("r", encoding="utf-8", errors="replace") as handle:
        return handle.readline().rstrip("\r\n")


def _detect_newline(path: Path) -> str:
    with path.open("rb") as handle:
        head = handle.read(4096)
    return "\r\n" if b"\r\n" in head else "\n"


__all__ = [
    "DEFAULT_MARKER",
    "InvalidManifestPathError",
    "ManifestWriter",
    "WriteConflictError",
    "atomic_write_text",
    "physical_lines",
]
