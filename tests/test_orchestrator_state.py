"""Tests for orchestrator state module."""
import threading

from hashline.models import EditRequest
from hashline.orchestrator.state import TERMINAL_PHASES, EditPhase, make_initial_state


class TestMakeInitialState:
    """Tests for the make_initial_state factory function."""

    def test_make_initial_state_defaults(self):
        """All 12 keys present with correct defaults."""
        request = EditRequest(path="f.txt", start="xE", content="x")
        state = make_initial_state(request)

        assert state["request"] is request
        assert state["cancel_event"] is None
        assert state["phase"] == EditPhase.UNRESOLVED
        assert state["snapshot"] is None
        assert state["resolved"] is None
        assert state["mutation"] is None
        assert state["written_content"] == ""
        assert state["outcome"] is None
        assert state["result"] is None
        assert state["warnings"] == []
        assert state["cleanup_actions"] == []
        assert state["error"] is None

        assert len(state) == 12

    def test_cancel_event_carried(self):
        cancel = threading.Event()
        state = make_initial_state(EditRequest(path="f.txt"), cancel)
        assert state["cancel_event"] is cancel


def test_terminal_phases():
    assert EditPhase.REPORTED in TERMINAL_PHASES
    assert EditPhase.RESOLVED not in TERMINAL_PHASES
    assert EditPhase.APPLIED not in TERMINAL_PHASES
