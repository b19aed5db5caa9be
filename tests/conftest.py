from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def write_files():
    """Return a helper that materializes ``{relative path: content}`` under a root."""

    def _write(root: Path, files: dict[str, str]) -> Path:
        for rel_path, content in files.items():
            target = root / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _write
