"""LangGraph pipeline for one edit request.

Wires anchor resolution, the mutation executor and diff reporting into a
StateGraph. Each node records failures in state instead of raising, so the
graph always reaches a terminal phase and the caller decides what to raise.
"""

from typing import Callable

from langgraph.graph import END, START, StateGraph

from hashline.anchors import AnchorError, anchor_for_line, resolve_range
from hashline.config import HashlineConfig
from hashline.editing.content import (
    count_lines,
    drop_insert_echo,
    ensure_trailing_newline,
    strip_anchor_prefixes,
)
from hashline.editing.exceptions import EditingError, MutationAbortedError, MutationError
from hashline.editing.executor import MutationExecutor
from hashline.editing.snapshot import FileSnapshotProvider
from hashline.models import EditMode, EditResult, MutationRequest, ResolvedRange, TagPolicy
from hashline.orchestrator.exceptions import GraphBuildError
from hashline.orchestrator.state import EditPhase, EditState
from hashline.utils.diff_generator import split_lines_keepends
from hashline.utils.diff_window import format_unified_diff
from hashline.utils.logging import get_logger

logger = get_logger(__name__)


def _ambiguity_warning(resolved: ResolvedRange) -> list[str]:
    warnings = []
    for anchor in (resolved.start, resolved.stop):
        if anchor is not None and anchor.ambiguous:
            warnings.append(
                f'Warning: hash "{anchor.anchor}" matches lines '
                f"{', '.join(map(str, anchor.candidates))}; used line {anchor.line}. "
                "Pass offset or context to pick another."
            )
    return warnings


def _describe_edit(mode: EditMode, path: str, resolved: ResolvedRange | None, content: str) -> str:
    """Summary sentence for a completed edit."""
    if mode == EditMode.CREATE or resolved is None:
        return f"Created {path} ({count_lines(content)} lines)."
    start = resolved.start.anchor
    stop = resolved.stop.anchor if resolved.stop is not None else None
    if mode == EditMode.INSERT:
        return f"Inserted before {start} in {path}."
    if mode == EditMode.REPLACE:
        return f"Replaced {start}..{stop} in {path}."
    if stop is not None and resolved.last_line != resolved.first_line:
        return f"Deleted {start}..{stop} from {path}."
    return f"Deleted {start} from {path}."


def make_resolve_node(
    snapshot_provider: FileSnapshotProvider,
    config: HashlineConfig,
) -> Callable[[EditState], dict]:
    """Factory: returns a node closure that turns the request into a MutationRequest.

    The closure:
    1. For create mode, targets the resolved path with the content verbatim
    2. Otherwise reads a fresh snapshot and resolves the anchor range
    3. Applies content clean-up when ``config.auto_cleanup`` is set
    4. Returns {"phase": RESOLVED, "mutation": ..., "snapshot": ..., "resolved": ...}

    On error: returns {"phase": REJECTED, "error": exc}
    """

    def resolve_node(state: EditState) -> dict:
        request = state["request"]
        mode = request.mode
        content = request.content or ""

        if mode == EditMode.CREATE:
            path = snapshot_provider.resolve(request.path)
            return {
                "phase": EditPhase.RESOLVED,
                "mutation": MutationRequest(path=str(path), mode=mode, content=content),
                "written_content": content,
            }

        try:
            snapshot = snapshot_provider.read(request.path)
            resolved = resolve_range(
                snapshot.lines,
                request.start,
                request.stop,
                offset=request.offset,
                context=request.context,
                policy=config.tag_policy,
                strict=config.strict_ambiguity,
            )
        except (AnchorError, EditingError) as exc:
            logger.info("edit_rejected", path=request.path, error=type(exc).__name__)
            return {"phase": EditPhase.REJECTED, "error": exc}

        cleanup: list[str] = []
        if mode != EditMode.DELETE and config.auto_cleanup:
            content, stripped = strip_anchor_prefixes(content)
            if stripped:
                cleanup.append("stripped anchor prefixes")
            if mode == EditMode.INSERT:
                content, dropped = drop_insert_echo(content, snapshot.line(resolved.first_line))
                if dropped:
                    cleanup.append("dropped trailing echo of the anchor line")

        if mode == EditMode.DELETE:
            content = ""
        else:
            content = ensure_trailing_newline(content)

        mutation = MutationRequest(
            path=snapshot.path,
            mode=mode,
            start=resolved.first_line,
            stop=resolved.last_line,
            content=content,
        )
        return {
            "phase": EditPhase.RESOLVED,
            "snapshot": snapshot,
            "resolved": resolved,
            "mutation": mutation,
            "written_content": content,
            "warnings": _ambiguity_warning(resolved),
            "cleanup_actions": cleanup,
        }

    return resolve_node


def make_mutate_node(
    executor: MutationExecutor,
    config: HashlineConfig,
) -> Callable[[EditState], dict]:
    """Factory: returns a node closure that hands the mutation to the executor.

    On cancellation: returns {"phase": ABORTED, "error": exc}
    On executor failure or timeout: returns {"phase": FAILED, "error": exc}
    """

    def mutate_node(state: EditState) -> dict:
        try:
            outcome = executor.execute(
                state["mutation"],
                timeout=config.mutation_timeout,
                cancel_event=state["cancel_event"],
            )
        except MutationAbortedError as exc:
            return {"phase": EditPhase.ABORTED, "error": exc}
        except MutationError as exc:
            return {"phase": EditPhase.FAILED, "error": exc}
        return {"phase": EditPhase.APPLIED, "outcome": outcome}

    return mutate_node


def _continuation_anchors(
    snapshot_provider: FileSnapshotProvider,
    path: str,
    first_line: int,
    line_count: int,
    policy: TagPolicy,
) -> list[str]:
    """Anchors of the first and last non-empty lines just written, from a fresh read.

    Each anchor resolves back to its own line under ``policy``; a hash shared
    with another line comes back pinned (``xE@3``).
    """
    fresh = snapshot_provider.read(path)
    last_line = first_line + line_count - 1
    if line_count <= 0 or last_line > len(fresh):
        return []
    filled = [n for n in range(first_line, last_line + 1) if fresh.line(n)]
    if not filled:
        return []
    boundary = [filled[0]] if filled[0] == filled[-1] else [filled[0], filled[-1]]
    return [anchor_for_line(fresh.lines, n, policy) for n in boundary]


def make_report_node(
    snapshot_provider: FileSnapshotProvider,
    config: HashlineConfig,
) -> Callable[[EditState], dict]:
    """Factory: returns a node closure that builds the EditResult.

    The closure:
    1. Windows the raw diff into a DiffReport (skipped for create)
    2. Re-reads the file and anchors the first and last non-empty written lines
    3. Builds the summary message, with any warnings prepended
    """

    def report_node(state: EditState) -> dict:
        request = state["request"]
        mutation = state["mutation"]
        outcome = state["outcome"]
        resolved = state["resolved"]
        written = state["written_content"]
        mode = mutation.mode

        report = None
        new_anchors: list[str] = []
        lines_written = 0
        first_written_line = 1

        if mode == EditMode.CREATE:
            message = _describe_edit(mode, request.path, None, written)
            lines_written = count_lines(written)
        elif outcome.no_changes:
            message = f"No changes made to {request.path}."
        else:
            report = format_unified_diff(outcome.raw_diff, config.context_radius)
            message = _describe_edit(mode, request.path, resolved, written)
            # Lines before the resolved start are untouched, so new content begins there.
            first_written_line = mutation.start
            lines_written = len(split_lines_keepends(written))

        if written and (mode == EditMode.CREATE or not outcome.no_changes):
            try:
                new_anchors = _continuation_anchors(
                    snapshot_provider,
                    request.path,
                    first_written_line,
                    len(split_lines_keepends(written)),
                    config.tag_policy,
                )
            except EditingError as exc:
                logger.warning("continuation_read_failed", path=request.path, error=str(exc))
            if new_anchors:
                message = f"{message[:-1]} with {'..'.join(new_anchors)}."

        if state["warnings"]:
            message = "\n".join([*state["warnings"], message])

        logger.info(
            "edit_applied",
            path=request.path,
            mode=mode.value,
            no_changes=outcome.no_changes,
            first_changed_line=report.first_changed_line if report else None,
            cleanup=state["cleanup_actions"],
        )
        result = EditResult(
            path=request.path,
            mode=mode,
            message=message,
            report=report,
            warnings=list(state["warnings"]),
            new_anchors=new_anchors,
            lines_written=lines_written,
        )
        return {"phase": EditPhase.REPORTED, "result": result}

    return report_node


def reject_node(state: EditState) -> dict:
    """Terminal: anchors did not resolve; the file was never touched."""
    logger.debug("edit_terminal", phase=EditPhase.REJECTED.value, path=state["request"].path)
    return {"phase": EditPhase.REJECTED}


def fail_node(state: EditState) -> dict:
    """Terminal: the executor failed or timed out."""
    logger.error("mutation_failed", path=state["request"].path, error=str(state["error"]))
    return {"phase": EditPhase.FAILED}


def abort_node(state: EditState) -> dict:
    """Terminal: cancelled before the executor was invoked."""
    logger.info("edit_aborted", path=state["request"].path)
    return {"phase": EditPhase.ABORTED}


def route_after_resolve(state: EditState) -> str:
    """Return "mutate" once a MutationRequest exists, else "reject"."""
    return "mutate" if state["phase"] == EditPhase.RESOLVED else "reject"


def route_after_mutate(state: EditState) -> str:
    """Return "report", "abort" or "fail" from the mutation phase."""
    phase = state["phase"]
    if phase == EditPhase.APPLIED:
        return "report"
    if phase == EditPhase.ABORTED:
        return "abort"
    return "fail"


def build_edit_graph(
    snapshot_provider: FileSnapshotProvider,
    executor: MutationExecutor,
    config: HashlineConfig | None = None,
):
    """Build and compile the per-edit StateGraph.

    Edge topology:
      START -> resolve_node -> conditional -> {mutate_node, reject_node}
      mutate_node -> conditional -> {report_node, abort_node, fail_node}
      report_node, reject_node, abort_node, fail_node -> END

    Args:
        snapshot_provider: Reads fresh file snapshots.
        executor: Applies the resolved line-range operation.
        config: Shared settings; defaults to HashlineConfig().

    Returns:
        CompiledStateGraph ready to invoke.

    Raises:
        GraphBuildError: If graph construction fails.
    """
    config = config or HashlineConfig()
    try:
        graph = StateGraph(EditState)

        graph.add_node("resolve_node", make_resolve_node(snapshot_provider, config))
        graph.add_node("mutate_node", make_mutate_node(executor, config))
        graph.add_node("report_node", make_report_node(snapshot_provider, config))
        graph.add_node("reject_node", reject_node)
        graph.add_node("abort_node", abort_node)
        graph.add_node("fail_node", fail_node)

        graph.add_edge(START, "resolve_node")
        graph.add_conditional_edges(
            "resolve_node",
            route_after_resolve,
            {"mutate": "mutate_node", "reject": "reject_node"},
        )
        graph.add_conditional_edges(
            "mutate_node",
            route_after_mutate,
            {"report": "report_node", "abort": "abort_node", "fail": "fail_node"},
        )
        for terminal in ("report_node", "reject_node", "abort_node", "fail_node"):
            graph.add_edge(terminal, END)

        return graph.compile()

    except Exception as exc:
        raise GraphBuildError(f"Failed to build edit graph: {exc}") from exc
