"""Snapshot provider: read a file's current lines at one instant."""

from pathlib import Path

from hashline.editing.exceptions import SnapshotError
from hashline.models.edit_models import Snapshot


def resolve_path(file_path: str, cwd: str | None = None) -> Path:
    """Resolve ``file_path`` against ``cwd`` (or the process cwd) if relative."""
    path = Path(file_path).expanduser()
    if path.is_absolute():
        return path
    return (Path(cwd) if cwd else Path.cwd()) / path


def split_lines(text: str) -> list[str]:
    """Split file text on ``\\n``; a trailing newline yields a final empty line."""
    return text.split("\n")


def read_text(path: Path) -> str:
    """Read UTF-8 text without newline translation."""
    try:
        return path.read_bytes().decode("utf-8")
    except FileNotFoundError as exc:
        raise SnapshotError(f"File not found: {path}") from exc
    except IsADirectoryError as exc:
        raise SnapshotError(f"Path is a directory, not a file: {path}") from exc
    except UnicodeDecodeError as exc:
        raise SnapshotError(f"File is not valid UTF-8 text: {path}") from exc
    except OSError as exc:
        raise SnapshotError(f"Failed to read {path}: {exc}") from exc


class FileSnapshotProvider:
    """Reads snapshots from the local filesystem."""

    def __init__(self, cwd: str | None = None) -> None:
        self.cwd = cwd

    def read(self, file_path: str) -> Snapshot:
        """Return the file's current lines.

        Raises:
            SnapshotError: If the file is missing or unreadable.
        """
        path = resolve_path(file_path, self.cwd)
        return Snapshot(path=str(path), lines=split_lines(read_text(path)))

    def resolve(self, file_path: str) -> Path:
        """Absolute path a snapshot of ``file_path`` would be read from."""
        return resolve_path(file_path, self.cwd)
