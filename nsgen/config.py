"""Configuration loading for nsgen (.nsgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .writer import DEFAULT_MARKER

CONFIG_FILENAME = ".nsgen.yml"
DEFAULT_MANIFEST = "NAMESPACE"
DEFAULT_BLOCKS = "blocks.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class NsgenConfig:
    """Settings for one module root, as read from .nsgen.yml."""

    root: Path
    manifest: str = DEFAULT_MANIFEST
    blocks: str = DEFAULT_BLOCKS
    module: Optional[str] = None
    marker: str = DEFAULT_MARKER
    log_file: Optional[Path] = None

    @property
    def manifest_path(self) -> Path:
        return self.root / self.manifest

    @property
    def blocks_path(self) -> Path:
        return self.root / self.blocks


def load_config(config_path: Path) -> NsgenConfig:
    """Load configuration from a module root or an explicit config file."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return NsgenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = NsgenConfig(root=root)
    manifest = _coerce_str(data.get("manifest"))
    if manifest:
        if "/" in manifest or "\\" in manifest:
            raise ConfigError("manifest must be a file name relative to the module root")
        config.manifest = manifest
    blocks = _coerce_str(data.get("blocks"))
    if blocks:
        config.blocks = blocks
    config.module = _coerce_str(data.get("module")) or None
    marker = _coerce_str(data.get("marker"))
    if marker:
        if not marker.startswith("#"):
            raise ConfigError("marker must be a comment line starting with '#'")
        config.marker = marker
    log_file = _coerce_str(data.get("log_file"))
    config.log_file = root / log_file if log_file else None
    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _coerce_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


__all__ = ["CONFIG_FILENAME", "ConfigError", "NsgenConfig", "load_config"]
