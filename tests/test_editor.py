"""End-to-end tests for FileEditor: resolve, mutate through an executor, report."""

import threading
from unittest.mock import MagicMock

import pytest

from hashline.anchors import AmbiguousAnchorError, InvalidRangeError, StaleAnchorError, line_hash
from hashline.config import HashlineConfig
from hashline.editing.editor import FileEditor
from hashline.editing.exceptions import ExternalMutationError, MutationAbortedError, SnapshotError
from hashline.editing.reader import FileReader
from hashline.models import EditMode, EditRequest, ReadRequest

from conftest import unused_anchor


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def editor_for(tmp_path, **config) -> FileEditor:
    return FileEditor(config=HashlineConfig(**config), cwd=str(tmp_path))


def edit(tmp_path, path="f.txt", **fields):
    return editor_for(tmp_path).edit(EditRequest(path=path, **fields))


class TestEndToEnd:
    def test_read_then_replace(self, tmp_path, write_file):
        path = write_file("f.go", "func f() {\n  return 1\n}\n")
        read = FileReader(cwd=str(tmp_path)).read(ReadRequest(path="f.go", tags=True))
        anchors = [row.split("|", 1)[0] for row in read.text.split("\n")[:3]]
        assert len(set(anchors)) == 3

        result = edit(tmp_path, path="f.go", start=anchors[1], stop=anchors[1], content="  return 2")

        assert path.read_text() == "func f() {\n  return 2\n}\n"
        assert result.mode == EditMode.REPLACE
        rows = result.report.diff.split("\n")
        assert "-  2   return 1" in rows
        assert "+  2   return 2" in rows
        assert result.new_anchors == [line_hash("  return 2")]
        assert result.message == f"Replaced {anchors[1]}..{anchors[1]} in f.go with {line_hash('  return 2')}."
        assert result.report.summary() == "1 added, 1 removed"

    def test_thousand_line_file_report_is_bounded(self, tmp_path, write_file):
        write_file("big.txt", "".join(f"line {i}\n" for i in range(1, 1001)))
        anchor = line_hash("line 500")
        result = edit(tmp_path, path="big.txt", start=anchor, stop=anchor, offset=500, content="changed")
        assert result.report.first_changed_line == 500
        assert len(result.report.diff.split("\n")) <= 2 * (2 * 4 + 1)
        assert "line 1\n" not in result.report.diff


class TestModes:
    def test_insert(self, tmp_path, write_file):
        path = write_file("f.txt", "a\nb\n")
        result = edit(tmp_path, start=line_hash("b"), content="X")
        assert path.read_text() == "a\nX\nb\n"
        assert result.message == f"Inserted before pV in f.txt with {line_hash('X')}."
        assert result.lines_written == 1

    def test_insert_drops_echoed_anchor_line(self, tmp_path, write_file):
        path = write_file("f.txt", "a\nb\n")
        edit(tmp_path, start=line_hash("b"), content="X\nb")
        assert path.read_text() == "a\nX\nb\n"

    def test_multi_line_replace_reports_first_and_last_anchor(self, tmp_path, write_file):
        path = write_file("f.txt", "a\nb\nc\n")
        result = edit(tmp_path, start=line_hash("a"), stop=line_hash("b"), content="one\ntwo\nthree\n")
        assert path.read_text() == "one\ntwo\nthree\nc\n"
        assert result.new_anchors == [line_hash("one"), line_hash("three")]
        assert result.message.endswith(f"with {line_hash('one')}..{line_hash('three')}.")

    def test_delete_single_line(self, tmp_path, write_file):
        path = write_file("f.txt", "a\nb\n")
        result = edit(tmp_path, start=line_hash("b"))
        assert path.read_text() == "a\n"
        assert result.mode == EditMode.DELETE
        assert result.message == "Deleted pV from f.txt."
        assert result.new_anchors == []

    def test_delete_range(self, tmp_path, write_file):
        path = write_file("f.txt", "a\nb\nc\n")
        result = edit(tmp_path, start=line_hash("a"), stop=line_hash("c"), content="")
        assert path.read_text() == ""
        assert result.message == "Deleted xE..Ck from f.txt."

    def test_create(self, tmp_path):
        result = edit(tmp_path, path="sub/new.txt", content="hello\nworld")
        assert (tmp_path / "sub" / "new.txt").read_text() == "hello\nworld"
        assert result.mode == EditMode.CREATE
        world = line_hash("world")
        assert result.new_anchors == [line_hash("hello"), world]
        assert result.message == f"Created sub/new.txt (2 lines) with qx..{world}."
        assert result.report is None

    def test_create_anchors_resolve_in_new_file(self, tmp_path):
        result = edit(tmp_path, path="n.txt", content="one\ntwo\n")
        assert result.new_anchors == [line_hash("one"), line_hash("two")]
        edit(tmp_path, path="n.txt", start=result.new_anchors[-1], stop=result.new_anchors[-1], content="TWO")
        assert (tmp_path / "n.txt").read_text() == "one\nTWO\n"

    def test_create_empty_file_has_no_anchors(self, tmp_path):
        result = edit(tmp_path, path="e.txt", content="")
        assert result.new_anchors == []

    def test_create_overwrites(self, tmp_path, write_file):
        path = write_file("f.txt", "old\n")
        edit(tmp_path, content="new\n")
        assert path.read_text() == "new\n"

    def test_no_op_replace(self, tmp_path, write_file):
        path = write_file("f.txt", "a\nb\n")
        result = edit(tmp_path, start=line_hash("b"), stop=line_hash("b"), content="b")
        assert result.message == "No changes made to f.txt."
        assert result.report is None
        assert path.read_text() == "a\nb\n"


class TestContinuationAnchors:
    @pytest.mark.parametrize("policy", ["mark-all", "first-occurrence"])
    def test_duplicate_written_line_is_pinned_and_reusable(self, tmp_path, write_file, policy):
        path = write_file("f.txt", "a\nb\nc\n")
        editor = editor_for(tmp_path, tag_policy=policy)
        result = editor.edit(EditRequest(path="f.txt", start=line_hash("c"), stop=line_hash("c"), content="a"))
        assert path.read_text() == "a\nb\na\n"
        assert result.new_anchors == ["xE@3"]
        assert result.message.endswith("with xE@3.")

        anchor = result.new_anchors[0]
        editor.edit(EditRequest(path="f.txt", start=anchor, stop=anchor, content="Z"))
        assert path.read_text() == "a\nb\nZ\n"

    def test_first_occurrence_keeps_bare_hash_for_first_copy(self, tmp_path, write_file):
        write_file("f.txt", "a\nb\nc\n")
        editor = editor_for(tmp_path, tag_policy="first-occurrence")
        result = editor.edit(EditRequest(path="f.txt", start=line_hash("a"), stop=line_hash("a"), content="c"))
        assert result.new_anchors == [line_hash("c")]

    def test_pinned_anchor_goes_stale_when_line_changes(self, tmp_path, write_file):
        write_file("f.txt", "a\nb\nc\n")
        editor = editor_for(tmp_path)
        result = editor.edit(EditRequest(path="f.txt", start=line_hash("c"), stop=line_hash("c"), content="a"))
        editor.edit(EditRequest(path="f.txt", start="xE@3", stop="xE@3", content="q"))
        with pytest.raises(StaleAnchorError):
            editor.edit(EditRequest(path="f.txt", start=result.new_anchors[0], content="X"))

    def test_empty_boundary_lines_skipped(self, tmp_path, write_file):
        path = write_file("f.txt", "a\nb\nc\n")
        result = edit(tmp_path, start=line_hash("b"), stop=line_hash("b"), content="\nx\n\n")
        assert path.read_text() == "a\n\nx\n\nc\n"
        assert result.new_anchors == [line_hash("x")]
        assert result.message.endswith(f"with {line_hash('x')}.")
        edit(tmp_path, start=result.new_anchors[0], content="inserted")
        assert path.read_text() == "a\n\ninserted\nx\n\nc\n"

    def test_only_empty_lines_written(self, tmp_path, write_file):
        path = write_file("f.txt", "a\nb\n")
        result = edit(tmp_path, start=line_hash("b"), stop=line_hash("b"), content="\n\n")
        assert path.read_text() == "a\n\n\n"
        assert result.new_anchors == []
        assert result.message == "Replaced pV..pV in f.txt."


class TestCleanup:
    def test_strips_pasted_anchor_prefixes(self, tmp_path, write_file):
        path = write_file("f.txt", "a\nb\n")
        edit(tmp_path, start=line_hash("a"), stop=line_hash("b"), content="xE|A\npV|B")
        assert path.read_text() == "A\nB\n"

    def test_cleanup_disabled(self, tmp_path, write_file):
        path = write_file("f.txt", "a\nb\n")
        editor = editor_for(tmp_path, auto_cleanup=False)
        editor.edit(EditRequest(path="f.txt", start=line_hash("b"), content="X\nb"))
        assert path.read_text() == "a\nX\nb\nb\n"


class TestDisambiguation:
    def test_ambiguous_anchor_warns_and_uses_first(self, tmp_path, write_file):
        path = write_file("f.txt", "x\ny\nx\n")
        anchor = line_hash("x")
        result = edit(tmp_path, start=anchor, stop=anchor, content="X")
        assert path.read_text() == "X\ny\nx\n"
        assert result.message.startswith(f'Warning: hash "{anchor}" matches lines 1, 3')
        assert len(result.warnings) == 1

    def test_strict_rejects_ambiguity(self, tmp_path, write_file):
        path = write_file("f.txt", "x\ny\nx\n")
        anchor = line_hash("x")
        with pytest.raises(AmbiguousAnchorError):
            editor_for(tmp_path, strict_ambiguity=True).edit(
                EditRequest(path="f.txt", start=anchor, stop=anchor, content="X")
            )
        assert path.read_text() == "x\ny\nx\n"

    def test_offset(self, tmp_path, write_file):
        path = write_file("f.txt", "x\ny\nx\n")
        anchor = line_hash("x")
        result = edit(tmp_path, start=anchor, stop=anchor, offset=3, content="X")
        assert path.read_text() == "x\ny\nX\n"
        assert result.warnings == []

    def test_context(self, tmp_path, write_file):
        path = write_file("f.txt", "x\ny\nx\nz\n")
        anchor = line_hash("x")
        edit(tmp_path, start=anchor, stop=anchor, context=line_hash("z"), content="X")
        assert path.read_text() == "x\ny\nX\nz\n"


class TestFailures:
    def test_stale_anchor_leaves_file_untouched(self, tmp_path, write_file):
        path = write_file("f.txt", "a\nb\n")
        with pytest.raises(StaleAnchorError):
            edit(tmp_path, start=unused_anchor(["a", "b"]), content="X")
        assert path.read_text() == "a\nb\n"

    def test_invalid_range(self, tmp_path, write_file):
        write_file("f.txt", "c\na\n")
        with pytest.raises(InvalidRangeError):
            edit(tmp_path, start=line_hash("a"), stop=line_hash("c"), content="X")

    def test_missing_file(self, tmp_path):
        with pytest.raises(SnapshotError):
            edit(tmp_path, path="missing.txt", start="xE", content="X")

    def test_cancelled(self, tmp_path, write_file):
        path = write_file("f.txt", "a\n")
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(MutationAbortedError):
            editor_for(tmp_path).edit(
                EditRequest(path="f.txt", start=line_hash("a"), stop=line_hash("a"), content="X"),
                cancel_event=cancel,
            )
        assert path.read_text() == "a\n"

    def test_executor_error_propagates(self, tmp_path, write_file):
        write_file("f.txt", "a\n")
        executor = MagicMock()
        executor.execute.side_effect = ExternalMutationError("disk full")
        editor = FileEditor(cwd=str(tmp_path), executor=executor)
        with pytest.raises(ExternalMutationError, match="disk full"):
            editor.edit(EditRequest(path="f.txt", start=line_hash("a"), content="X"))


def test_subprocess_executor_end_to_end(tmp_path, write_file):
    path = write_file("f.txt", "a\nb\n")
    editor = editor_for(tmp_path, executor="subprocess", mutation_timeout=30.0)
    result = editor.edit(EditRequest(path="f.txt", start=line_hash("b"), stop=line_hash("b"), content="B"))
    assert path.read_text() == "a\nB\n"
    assert result.new_anchors == [line_hash("B")]
