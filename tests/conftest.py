from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.block_builder import ModuleRootBuilder


@pytest.fixture
def module_root(tmp_path: Path) -> ModuleRootBuilder:
    """Provide a module root under the pytest tmp_path."""
    return ModuleRootBuilder(tmp_path)
