"""Line-range mutation executors.

An executor applies one create / insert / replace / delete operation to a
file and reports either ``NO_CHANGES`` or the raw unified comparison with
whole-file context. Content always travels as data: in-process it is a
Python string, across a process boundary it is a length-delimited payload
on stdin. It is never part of a command line.
"""

import abc
import contextlib
import json
import os
import subprocess
import sys
import tempfile
import threading
from pathlib import Path

from hashline.editing.exceptions import (
    ExternalMutationError,
    MutationAbortedError,
    MutationTimeoutError,
)
from hashline.models.edit_models import NO_CHANGES, EditMode, MutationOutcome, MutationRequest
from hashline.utils.diff_generator import generate_unified_diff, split_lines_keepends
from hashline.utils.logging import get_logger

logger = get_logger(__name__)

WORKER_MODULE = "hashline.editing.mutation_worker"
# Directory holding the hashline package, so the worker imports the same code.
PACKAGE_ROOT = str(Path(__file__).resolve().parents[2])
NEW_FILE_MODE = 0o644


def encode_request(request: MutationRequest) -> bytes:
    """Frame a request as a JSON header line followed by raw content bytes."""
    content = request.content.encode("utf-8")
    header = {
        "path": request.path,
        "mode": request.mode.value,
        "start": request.start,
        "stop": request.stop,
        "content_length": len(content),
    }
    return json.dumps(header).encode("utf-8") + b"\n" + content


def decode_request(payload: bytes) -> MutationRequest:
    """Inverse of :func:`encode_request`.

    Raises:
        ValueError: If the header is malformed or the body length does not match.
    """
    header_bytes, sep, body = payload.partition(b"\n")
    if not sep:
        raise ValueError("Mutation payload has no header line")
    header = json.loads(header_bytes.decode("utf-8"))
    if not isinstance(header, dict):
        raise ValueError("Mutation header must be a JSON object")
    length = header.pop("content_length", None)
    if not isinstance(length, int) or length < 0:
        raise ValueError("Mutation header is missing a valid content_length")
    if len(body) != length:
        raise ValueError(f"Mutation body is {len(body)} bytes, header declared {length}")
    return MutationRequest(content=body.decode("utf-8"), **header)


def splice_lines(original: str, request: MutationRequest) -> str:
    """Apply a line-range operation to ``original`` and return the new text.

    Raises:
        ExternalMutationError: If the line bounds fall outside the file.
    """
    if request.mode == EditMode.CREATE:
        return request.content

    lines = split_lines_keepends(original)
    count = len(lines)
    start, stop = request.start, request.stop

    if request.mode == EditMode.INSERT:
        if not 1 <= start <= count + 1:
            raise ExternalMutationError(
                f"Cannot insert before line {start}: {request.path} has {count} lines"
            )
        lines[start - 1:start - 1] = [request.content]
        return "".join(lines)

    if not 1 <= start <= stop <= count:
        raise ExternalMutationError(
            f"Line range {start}-{stop} is outside {request.path} ({count} lines)"
        )
    if request.mode == EditMode.DELETE:
        del lines[start - 1:stop]
    else:
        lines[start - 1:stop] = [request.content]
    return "".join(lines)


def write_atomic(path: Path, text: str) -> None:
    """Write via a temp file in the same directory and ``os.replace``.

    The original file mode is preserved; readers never observe a partial file.
    """
    mode = path.stat().st_mode if path.exists() else NEW_FILE_MODE
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.")
    fd_open = True
    try:
        os.fchmod(fd, mode)
        with os.fdopen(fd, "wb") as f:
            fd_open = False
            f.write(text.encode("utf-8"))
        os.replace(tmp_path, path)
    except BaseException:
        if fd_open:
            os.close(fd)
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise


def perform_mutation(request: MutationRequest) -> str:
    """Apply ``request`` to disk.

    Returns:
        ``NO_CHANGES`` when the bytes are identical, else the raw unified diff.

    Raises:
        ExternalMutationError: On range or filesystem errors.
    """
    path = Path(request.path)
    try:
        if request.mode == EditMode.CREATE:
            original = path.read_bytes().decode("utf-8") if path.is_file() else ""
            path.parent.mkdir(parents=True, exist_ok=True)
        else:
            original = path.read_bytes().decode("utf-8")

        modified = splice_lines(original, request)
        if modified == original:
            return NO_CHANGES

        write_atomic(path, modified)
    except (OSError, UnicodeDecodeError) as exc:
        raise ExternalMutationError(f"{request.mode.value} failed for {request.path}: {exc}") from exc

    return generate_unified_diff(request.path, original, modified)


class MutationExecutor(abc.ABC):
    """Applies a MutationRequest and reports the raw outcome."""

    def execute(
        self,
        request: MutationRequest,
        timeout: float,
        cancel_event: threading.Event | None = None,
    ) -> MutationOutcome:
        """Dispatch the mutation unless cancellation already fired.

        Raises:
            MutationAbortedError: If ``cancel_event`` is set before dispatch.
            MutationError: If the executor fails or times out.
        """
        if cancel_event is not None and cancel_event.is_set():
            raise MutationAbortedError(f"Edit of {request.path} aborted before dispatch")
        logger.info(
            "mutation_dispatched",
            path=request.path,
            mode=request.mode.value,
            start=request.start,
            stop=request.stop,
            executor=type(self).__name__,
        )
        return MutationOutcome.from_output(self._dispatch(request, timeout))

    @abc.abstractmethod
    def _dispatch(self, request: MutationRequest, timeout: float) -> str:
        """Perform the mutation; return ``NO_CHANGES`` or the raw diff text."""


class LocalMutationExecutor(MutationExecutor):
    """Runs the mutation in-process.

    Once dispatched the write runs to completion, so ``timeout`` is not applied.
    """

    def _dispatch(self, request: MutationRequest, timeout: float) -> str:
        return perform_mutation(request)


class SubprocessMutationExecutor(MutationExecutor):
    """Runs the mutation in a worker interpreter under a hard timeout.

    The worker writes atomically, so killing it on timeout leaves the file
    either untouched or fully rewritten.
    """

    def __init__(self, python: str | None = None) -> None:
        self.python = python or sys.executable

    def _worker_env(self) -> dict[str, str]:
        env = dict(os.environ)
        paths = [PACKAGE_ROOT, *filter(None, env.get("PYTHONPATH", "").split(os.pathsep))]
        env["PYTHONPATH"] = os.pathsep.join(paths)
        return env

    def _dispatch(self, request: MutationRequest, timeout: float) -> str:
        try:
            result = subprocess.run(
                [self.python, "-m", WORKER_MODULE],
                input=encode_request(request),
                capture_output=True,
                timeout=timeout,
                env=self._worker_env(),
            )
        except subprocess.TimeoutExpired as exc:
            raise MutationTimeoutError(
                f"Mutation of {request.path} timed out after {timeout}s"
            ) from exc

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise ExternalMutationError(stderr or f"mutation worker exited with {result.returncode}")
        return result.stdout.decode("utf-8")


def make_executor(kind: str) -> MutationExecutor:
    """Build the executor named by configuration (``local`` or ``subprocess``)."""
    if kind == "local":
        return LocalMutationExecutor()
    if kind == "subprocess":
        return SubprocessMutationExecutor()
    raise ValueError(f"Unknown mutation executor: {kind}")
