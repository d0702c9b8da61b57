import sys
from pathlib import Path

import pytest

# Ensure repository root is on sys.path so `import linkpager...` works locally
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture()
def links_file(tmp_path: Path):
    """Write ``content`` to a links file under tmp_path and return its path."""
    path = tmp_path / "links.txt"

    def _write(content: str) -> Path:
        path.write_text(content, encoding="utf-8")
        return path

    return _write
