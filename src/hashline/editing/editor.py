"""FileEditor: anchor-addressed edits routed through a mutation executor."""

import threading

from hashline.config import HashlineConfig
from hashline.editing.executor import MutationExecutor, make_executor
from hashline.editing.snapshot import FileSnapshotProvider
from hashline.models.edit_models import EditRequest, EditResult
from hashline.orchestrator.graph import build_edit_graph
from hashline.orchestrator.state import EditPhase, make_initial_state


class FileEditor:
    """Applies edit requests against fresh snapshots.

    Every call re-reads the file; no snapshot or resolution is reused
    between calls.
    """

    def __init__(
        self,
        config: HashlineConfig | None = None,
        cwd: str | None = None,
        snapshot_provider: FileSnapshotProvider | None = None,
        executor: MutationExecutor | None = None,
    ) -> None:
        self.config = config or HashlineConfig()
        self.snapshot_provider = snapshot_provider or FileSnapshotProvider(cwd)
        self.executor = executor or make_executor(self.config.executor)
        self._graph = build_edit_graph(self.snapshot_provider, self.executor, self.config)

    def edit(
        self,
        request: EditRequest,
        cancel_event: threading.Event | None = None,
    ) -> EditResult:
        """Resolve, mutate and report one edit.

        Raises:
            AnchorError: If the anchors are stale, ambiguous (strict) or out of order.
            SnapshotError: If the file cannot be read.
            MutationError: If the executor fails, times out or was cancelled.
        """
        final = self._graph.invoke(make_initial_state(request, cancel_event))
        if final["phase"] != EditPhase.REPORTED:
            raise final["error"]
        return final["result"]
