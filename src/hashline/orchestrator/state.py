"""State definition for the per-edit LangGraph pipeline."""

import operator
import threading
from enum import Enum
from typing import Annotated, TypedDict

from hashline.models import (
    EditRequest,
    EditResult,
    MutationOutcome,
    MutationRequest,
    ResolvedRange,
    Snapshot,
)


class EditPhase(str, Enum):
    """Lifecycle of one edit request."""

    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"
    APPLIED = "applied"
    REPORTED = "reported"
    REJECTED = "rejected"  # Anchor resolution or snapshot read failed; file untouched
    FAILED = "failed"  # Executor reported an error or timed out
    ABORTED = "aborted"  # Cancelled before dispatch; file untouched


TERMINAL_PHASES = frozenset({EditPhase.REPORTED, EditPhase.REJECTED, EditPhase.FAILED, EditPhase.ABORTED})


class EditState(TypedDict):
    """State for one edit request.

    Fields with Annotated[list, operator.add] reducers accumulate across nodes.
    All other fields use default overwrite semantics.
    """

    # Input
    request: EditRequest
    cancel_event: threading.Event | None

    # Resolution
    phase: EditPhase
    snapshot: Snapshot | None
    resolved: ResolvedRange | None
    mutation: MutationRequest | None
    written_content: str

    # Mutation and report
    outcome: MutationOutcome | None
    result: EditResult | None

    # Accumulating notes
    warnings: Annotated[list[str], operator.add]
    cleanup_actions: Annotated[list[str], operator.add]

    # Failure, if any; re-raised to the caller
    error: Exception | None


def make_initial_state(
    request: EditRequest,
    cancel_event: threading.Event | None = None,
) -> EditState:
    """Create the initial state for one edit request.

    Args:
        request: What the caller wants changed.
        cancel_event: Set to abort the request before the mutation is dispatched.

    Returns:
        EditState dict with all fields initialised to defaults.
    """
    return {
        "request": request,
        "cancel_event": cancel_event,
        "phase": EditPhase.UNRESOLVED,
        "snapshot": None,
        "resolved": None,
        "mutation": None,
        "written_content": "",
        "outcome": None,
        "result": None,
        "warnings": [],
        "cleanup_actions": [],
        "error": None,
    }
