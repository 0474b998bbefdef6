"""Data models for hashline anchors, reads and edits."""

from hashline.models.anchor_models import (
    ResolvedAnchor,
    ResolvedRange,
    TaggedLine,
    TagPolicy,
)
from hashline.models.diff_models import DiffEntry, DiffReport, DiffRowType
from hashline.models.edit_models import (
    NO_CHANGES,
    EditMode,
    EditRequest,
    EditResult,
    MutationOutcome,
    MutationRequest,
    Snapshot,
)
from hashline.models.read_models import ReadRequest, ReadResult, TruncationResult

__all__ = [
    "NO_CHANGES",
    "DiffEntry",
    "DiffReport",
    "DiffRowType",
    "EditMode",
    "EditRequest",
    "EditResult",
    "MutationOutcome",
    "MutationRequest",
    "ReadRequest",
    "ReadResult",
    "ResolvedAnchor",
    "ResolvedRange",
    "Snapshot",
    "TagPolicy",
    "TaggedLine",
    "TruncationResult",
]
