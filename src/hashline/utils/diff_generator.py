"""Generate the raw before/after comparison for a mutated file."""

import difflib

# Wide enough that one hunk spans the whole file; the diff window trims it.
FULL_CONTEXT = 99999


def split_lines_keepends(text: str) -> list[str]:
    """Split on ``\\n`` only, keeping the terminator on each line.

    ``str.splitlines`` also breaks on ``\\r``, form feeds and other separators,
    which would shift line numbers relative to the snapshot.
    """
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def generate_unified_diff(
    file_path: str,
    original_content: str,
    modified_content: str,
    context_lines: int = FULL_CONTEXT,
) -> str:
    """Generate a git-compatible unified diff.

    Args:
        file_path: Path shown in the ``---``/``+++`` headers.
        original_content: File content before the mutation.
        modified_content: File content after the mutation.
        context_lines: Unchanged lines kept around each change.

    Returns:
        Unified diff string with a/ b/ prefixes. Empty string if no changes.
    """
    if original_content == modified_content:
        return ""

    original_lines = split_lines_keepends(original_content)
    modified_lines = split_lines_keepends(modified_content)

    diff_gen = difflib.unified_diff(
        original_lines,
        modified_lines,
        fromfile=f"a/{file_path}",
        tofile=f"b/{file_path}",
        n=context_lines,
        lineterm="",
    )

    # Body lines keep their own newline; strip it before joining.
    diff_lines = []
    for line in diff_gen:
        if line.endswith("\n"):
            diff_lines.append(line[:-1])
        else:
            diff_lines.append(line)

    return "\n".join(diff_lines)
