"""Reading and mutating files by anchor.

FileEditor lives in :mod:`hashline.editing.editor`; it depends on the
orchestrator graph, which in turn uses the primitives exported here.
"""

from hashline.editing.exceptions import (
    EditingError,
    ExternalMutationError,
    MutationAbortedError,
    MutationError,
    MutationTimeoutError,
    OffsetOutOfRangeError,
    OversizeLineError,
    ReadError,
    SnapshotError,
)
from hashline.editing.executor import (
    LocalMutationExecutor,
    MutationExecutor,
    SubprocessMutationExecutor,
    make_executor,
)
from hashline.editing.reader import FileReader
from hashline.editing.snapshot import FileSnapshotProvider

__all__ = [
    "EditingError",
    "ExternalMutationError",
    "FileReader",
    "FileSnapshotProvider",
    "LocalMutationExecutor",
    "MutationAbortedError",
    "MutationError",
    "MutationExecutor",
    "MutationTimeoutError",
    "OffsetOutOfRangeError",
    "OversizeLineError",
    "ReadError",
    "SnapshotError",
    "SubprocessMutationExecutor",
    "make_executor",
]
