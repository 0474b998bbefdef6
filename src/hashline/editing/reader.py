"""Read operation: optionally anchor-tagged, bounded file contents."""

import base64
from pathlib import Path

from hashline.anchors.tagger import render_tagged, tag_window
from hashline.config import HashlineConfig
from hashline.editing.exceptions import OffsetOutOfRangeError, OversizeLineError, SnapshotError
from hashline.editing.snapshot import FileSnapshotProvider, resolve_path
from hashline.models.read_models import ReadRequest, ReadResult
from hashline.utils.logging import get_logger
from hashline.utils.truncation import format_size, truncate_head

logger = get_logger(__name__)

IMAGE_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".bmp": "image/bmp",
    ".ico": "image/x-icon",
}


class FileReader:
    """Reads files for an editing client, tagging lines with anchors on request."""

    def __init__(
        self,
        config: HashlineConfig | None = None,
        cwd: str | None = None,
        snapshot_provider: FileSnapshotProvider | None = None,
    ) -> None:
        self.config = config or HashlineConfig()
        self.cwd = cwd
        self.snapshot_provider = snapshot_provider or FileSnapshotProvider(cwd=cwd)

    def read(self, request: ReadRequest) -> ReadResult:
        """Read ``request.path`` and bound the output.

        Raises:
            SnapshotError: If the file cannot be read.
            OffsetOutOfRangeError: If the offset is past the last line.
            OversizeLineError: If the first selected line exceeds the byte ceiling.
        """
        path = resolve_path(request.path, self.cwd)
        mime_type = IMAGE_MIME_TYPES.get(path.suffix.lower())
        if mime_type is not None:
            return self._read_image(request.path, path, mime_type)

        snapshot = self.snapshot_provider.read(request.path)
        all_lines = snapshot.lines
        total_lines = len(all_lines)

        start = max(0, request.offset - 1) if request.offset else 0
        start_display = start + 1
        if start >= total_lines:
            raise OffsetOutOfRangeError(
                f"Offset {request.offset} is beyond end of file ({total_lines} lines total)"
            )

        if request.limit is not None:
            end = min(start + max(request.limit, 0), total_lines)
        else:
            end = total_lines
        user_limited = request.limit is not None

        if request.tags:
            output = render_tagged(
                tag_window(all_lines, offset=start_display, limit=end - start, policy=self.config.tag_policy)
            )
        else:
            output = all_lines[start:end]

        truncation = truncate_head(
            "\n".join(output), max_lines=self.config.max_lines, max_bytes=self.config.max_bytes
        )
        max_size = format_size(self.config.max_bytes)

        if truncation.first_line_exceeds_limit:
            line_size = format_size(len(all_lines[start].encode("utf-8")))
            raise OversizeLineError(
                f"[Line {start_display} is {line_size}, exceeds {max_size} limit. "
                f"Use bash: sed -n '{start_display}p' {request.path} | head -c {self.config.max_bytes}]"
            )

        text = truncation.content
        end_display = start_display + truncation.output_lines - 1
        next_offset: int | None = None

        if truncation.truncated:
            next_offset = end_display + 1
            if truncation.truncated_by == "lines":
                text += (
                    f"\n\n[Showing lines {start_display}-{end_display} of {total_lines}. "
                    f"Use offset={next_offset} to continue.]"
                )
            else:
                text += (
                    f"\n\n[Showing lines {start_display}-{end_display} of {total_lines} "
                    f"({max_size} limit). Use offset={next_offset} to continue.]"
                )
        elif user_limited and end < total_lines:
            next_offset = end + 1
            text += f"\n\n[{total_lines - end} more lines in file. Use offset={next_offset} to continue.]"

        logger.debug(
            "file_read",
            path=snapshot.path,
            start=start_display,
            end=end_display,
            tags=request.tags,
            truncated=truncation.truncated,
        )
        return ReadResult(
            path=request.path,
            text=text,
            total_lines=total_lines,
            start_line=start_display,
            end_line=end_display,
            next_offset=next_offset,
            truncation=truncation if truncation.truncated else None,
        )

    def _read_image(self, display_path: str, path: Path, mime_type: str) -> ReadResult:
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise SnapshotError(f"Failed to read {path}: {exc}") from exc
        return ReadResult(
            path=display_path,
            text=f"Read image file [{mime_type}]",
            mime_type=mime_type,
            image_data=base64.b64encode(data).decode("ascii"),
        )
