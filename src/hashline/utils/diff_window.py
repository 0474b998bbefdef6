"""Turn a raw unified comparison into a bounded, line-numbered report.

Only rows within ``context`` of a change are kept; longer unchanged runs
collapse into a single ellipsis row, so a one-line edit in a huge file
still yields a handful of rows.
"""

import re

from hashline.models.diff_models import DiffEntry, DiffReport, DiffRowType

DEFAULT_CONTEXT = 4
MIN_NUMBER_WIDTH = 3

_HUNK_RE = re.compile(r"^@@ -(\d+)(?:,\d+)? \+(\d+)(?:,\d+)? @@")


def parse_unified_diff(udiff: str) -> list[DiffEntry]:
    """Classify every hunk row, tracking old and new line counters independently."""
    entries: list[DiffEntry] = []
    old_line = new_line = 0
    in_hunk = False

    for raw in udiff.split("\n"):
        if raw.startswith("@@"):
            match = _HUNK_RE.match(raw)
            if match:
                old_line, new_line = int(match.group(1)), int(match.group(2))
                in_hunk = True
            continue
        if not in_hunk:
            # ---/+++ file headers precede the first hunk
            continue
        if not raw or raw.startswith("\\"):
            # Trailing blank or "\ No newline at end of file"
            continue

        marker, text = raw[:1], raw[1:]
        if marker == "-":
            entries.append(DiffEntry(type=DiffRowType.REMOVED, old_line=old_line, new_line=None, text=text))
            old_line += 1
        elif marker == "+":
            entries.append(DiffEntry(type=DiffRowType.ADDED, old_line=None, new_line=new_line, text=text))
            new_line += 1
        else:
            entries.append(DiffEntry(type=DiffRowType.CONTEXT, old_line=old_line, new_line=new_line, text=text))
            old_line += 1
            new_line += 1

    return entries


def _window_indices(entries: list[DiffEntry], context: int) -> set[int]:
    near: set[int] = set()
    for i, entry in enumerate(entries):
        if entry.is_change:
            near.update(range(max(0, i - context), min(len(entries), i + context + 1)))
    return near


def format_unified_diff(udiff: str, context: int = DEFAULT_CONTEXT) -> DiffReport:
    """Build a windowed report from raw ``diff -u`` style output.

    Args:
        udiff: Raw unified comparison, typically with whole-file context.
        context: Unchanged rows kept on each side of a change.

    Returns:
        DiffReport; ``diff`` is empty when the comparison holds no rows.
    """
    entries = parse_unified_diff(udiff)
    if not entries:
        return DiffReport()

    near = _window_indices(entries, context)
    kept = sorted(near)

    widest = max((entries[i].display_line for i in kept), default=0)
    width = max(MIN_NUMBER_WIDTH, len(str(widest)))

    out: list[str] = []
    window: list[DiffEntry] = []
    last = -1
    for i in kept:
        if last >= 0 and i - last > 1:
            out.append(f" {' ' * width} ...")
        entry = entries[i]
        prefix = {DiffRowType.REMOVED: "-", DiffRowType.ADDED: "+"}.get(entry.type, " ")
        out.append(f"{prefix}{entry.display_line:>{width}} {entry.text}")
        window.append(entry)
        last = i

    changed = [entry for entry in entries if entry.is_change]
    return DiffReport(
        diff="\n".join(out),
        first_changed_line=min((entry.display_line for entry in changed), default=None),
        added=sum(1 for entry in changed if entry.type == DiffRowType.ADDED),
        removed=sum(1 for entry in changed if entry.type == DiffRowType.REMOVED),
        entries=window,
    )


def summarize_diff(diff: str) -> str:
    """Count ``+``/``-`` rows of a rendered report into ``N added, M removed``."""
    added = sum(1 for line in diff.split("\n") if line.startswith("+"))
    removed = sum(1 for line in diff.split("\n") if line.startswith("-"))
    return DiffReport(added=added, removed=removed).summary()
