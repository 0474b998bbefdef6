"""Per-edit LangGraph pipeline."""

from hashline.orchestrator.exceptions import GraphBuildError, OrchestratorError
from hashline.orchestrator.graph import build_edit_graph
from hashline.orchestrator.state import EditPhase, EditState, make_initial_state

__all__ = [
    "EditPhase",
    "EditState",
    "GraphBuildError",
    "OrchestratorError",
    "build_edit_graph",
    "make_initial_state",
]
