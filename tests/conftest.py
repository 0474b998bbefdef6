from pathlib import Path

import pytest

from hashline.anchors import ALPHABET, line_hash


def unused_anchor(lines: list[str]) -> str:
    """Return an anchor that no line in ``lines`` hashes to."""
    taken = {line_hash(line) for line in lines if line}
    return next(a + b for a in ALPHABET for b in ALPHABET if a + b not in taken)


@pytest.fixture
def write_file(tmp_path):
    """Write ``text`` to ``tmp_path / name`` and return the Path."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(text.encode("utf-8"))
        return path

    return _write
