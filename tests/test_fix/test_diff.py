"""Tests for patch creation, application and serialization."""

from __future__ import annotations

import pytest

from sarifix.core.errors import PatchConflictError
from sarifix.fix.diff import DiffEngine, split_lines
from sarifix.fix.models import Patch


def numbered(count: int, start: int = 1) -> str:
    return "".join(f"line{i}\n" for i in range(start, start + count))


@pytest.fixture
def engine() -> DiffEngine:
    return DiffEngine()


class TestSplitLines:
    def test_keeps_terminators(self):
        assert split_lines("a\nb\n") == ["a\n", "b\n"]

    def test_last_line_without_newline(self):
        assert split_lines("a\nb") == ["a\n", "b"]

    def test_empty(self):
        assert split_lines("") == []

    def test_carriage_returns_stay_in_line(self):
        assert split_lines("a\r\nb\r\n") == ["a\r\n", "b\r\n"]


class TestCreatePatch:
    def test_identical_texts_give_empty_patch(self, engine: DiffEngine):
        patch = engine.create_patch("f.py", "same\n", "same\n")
        assert patch.is_empty
        assert patch.file_path == "f.py"

    def test_single_replacement_hunk(self, engine: DiffEngine):
        patch = engine.create_patch("f.py", "a\nb\nc\n", "a\nB\nc\n")

        assert len(patch.hunks) == 1
        hunk = patch.hunks[0]
        assert (hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count) == (1, 3, 1, 3)
        assert hunk.lines == (" a\n", "-b\n", "+B\n", " c\n")

    def test_distant_changes_make_separate_hunks(self):
        engine = DiffEngine(context_lines=1)
        before = numbered(20)
        after = before.replace("line2\n", "LINE2\n").replace("line18\n", "LINE18\n")

        patch = engine.create_patch("f.py", before, after)

        assert len(patch.hunks) == 2
        assert patch.hunks[1].old_start == 17

    def test_to_unified(self, engine: DiffEngine):
        patch = engine.create_patch("src/a.js", "a\nb\nc\n", "a\nB\nc\n")
        assert patch.to_unified() == (
            "--- a/src/a.js\n"
            "+++ b/src/a.js\n"
            "@@ -1,3 +1,3 @@\n"
            " a\n"
            "-b\n"
            "+B\n"
            " c\n"
        )

    def test_to_unified_marks_missing_newline(self, engine: DiffEngine):
        text = engine.create_patch("f", "a\nb", "a\nc").to_unified()
        assert "-b\n\\ No newline at end of file\n+c\n\\ No newline at end of file\n" in text


class TestRoundTrip:
    @pytest.mark.parametrize(
        "before,after",
        [
            ("", ""),
            ("", "new file\n"),
            ("old file\n", ""),
            ("a\nb\nc\n", "a\nB\nc\n"),
            ("no newline", "no newline\n"),
            ("a\r\nb\r\n", "a\r\nB\r\nc\r\n"),
            (numbered(30), numbered(5) + "inserted\n" + numbered(25, start=6)),
            (numbered(30), numbered(10) + numbered(15, start=16)),
            ("x\n" * 10, "x\n" * 7 + "y\n" + "x\n" * 3),
            ("\n\n\n", "\n"),
        ],
    )
    def test_apply_created_patch_gives_after(self, engine: DiffEngine, before: str, after: str):
        patch = engine.create_patch("f", before, after)
        assert engine.apply_patch(before, patch) == after

    def test_empty_patch_leaves_content_unchanged(self, engine: DiffEngine):
        content = "anything\nat all"
        assert engine.apply_patch(content, Patch("f")) == content


class TestApplyPatch:
    def test_applies_when_lines_were_added_above(self, engine: DiffEngine):
        before = numbered(10)
        after = before.replace("line8\n", "LINE8\n")
        patch = engine.create_patch("f", before, after)

        shifted = "header1\nheader2\nheader3\n" + before
        assert engine.apply_patch(shifted, patch) == "header1\nheader2\nheader3\n" + after

    def test_applies_when_lines_were_removed_above(self, engine: DiffEngine):
        before = numbered(20)
        after = before.replace("line15\n", "LINE15\n")
        patch = engine.create_patch("f", before, after)

        trimmed = numbered(17, start=4)
        assert engine.apply_patch(trimmed, patch) == trimmed.replace("line15\n", "LINE15\n")

    def test_context_mismatch_returns_none(self, engine: DiffEngine):
        before = numbered(10)
        patch = engine.create_patch("f", before, before.replace("line5\n", "LINE5\n"))

        edited = before.replace("line4\n", "something else\n")
        assert engine.apply_patch(edited, patch) is None

    def test_removed_line_mismatch_returns_none(self, engine: DiffEngine):
        patch = engine.create_patch("f", "x = 1\n", "x = 2\n")
        assert engine.apply_patch("x = 3\n", patch) is None

    def test_apply_or_raise(self, engine: DiffEngine):
        patch = engine.create_patch("f", "x = 1\n", "x = 2\n")

        with pytest.raises(PatchConflictError) as exc_info:
            engine.apply_or_raise("x = 3\n", patch, index=2)

        assert exc_info.value.file_path == "f"
        assert exc_info.value.index == 2

    def test_order_of_overlapping_patches_changes_outcome(self, engine: DiffEngine):
        base = "x = 1\n"
        first = engine.create_patch("f", base, "x = 2\n")
        second = engine.create_patch("f", base, "x = 3\n")

        forward = engine.apply_patch(base, first)
        forward = engine.apply_patch(forward, second) or forward
        backward = engine.apply_patch(base, second)
        backward = engine.apply_patch(backward, first) or backward

        assert forward == "x = 2\n"
        assert backward == "x = 3\n"

    def test_non_overlapping_patches_compose(self, engine: DiffEngine):
        base = numbered(30)
        top = engine.create_patch("f", base, base.replace("line2\n", "LINE2\n"))
        bottom = engine.create_patch("f", base, base.replace("line28\n", "LINE28\n"))

        result = engine.apply_patch(engine.apply_patch(base, top), bottom)

        assert result == base.replace("line2\n", "LINE2\n").replace("line28\n", "LINE28\n")

    def test_insertion_patch_sees_earlier_insertion(self, engine: DiffEngine):
        base = numbered(30)
        first = engine.create_patch("f", base, "import os\n" + base)
        second = engine.create_patch("f", base, base.replace("line20\n", "line20\nadded\n"))

        result = engine.apply_patch(engine.apply_patch(base, first), second)

        assert result == "import os\n" + base.replace("line20\n", "line20\nadded\n")


class TestParsePatch:
    def test_parses_formatted_patch(self, engine: DiffEngine):
        patch = engine.create_patch("src/a.js", numbered(12), numbered(12).replace("line6\n", "six\n"))
        assert engine.parse_patch(patch.to_unified()) == patch

    def test_parses_no_newline_markers(self, engine: DiffEngine):
        patch = engine.create_patch("f", "a\nb", "a\nc")
        assert engine.parse_patch(patch.to_unified()) == patch

    def test_parses_jsdiff_style_header(self, engine: DiffEngine):
        text = (
            "Index: src/a.js\n"
            "===================================================================\n"
            "--- src/a.js\n"
            "+++ src/a.js\n"
            "@@ -1,2 +1,2 @@\n"
            " keep\n"
            "-old\n"
            "+new\n"
        )
        patch = engine.parse_patch(text)

        assert patch.file_path == "src/a.js"
        assert engine.apply_patch("keep\nold\n", patch) == "keep\nnew\n"

    def test_blank_context_line_without_space(self, engine: DiffEngine):
        text = "--- a/f\n+++ b/f\n@@ -1,3 +1,3 @@\n a\n\n-b\n+c\n"
        patch = engine.parse_patch(text)
        assert engine.apply_patch("a\n\nb\n", patch) == "a\n\nc\n"

    def test_count_mismatch_is_rejected(self, engine: DiffEngine):
        with pytest.raises(ValueError):
            engine.parse_patch("--- a/f\n+++ b/f\n@@ -1,3 +1,3 @@\n a\n-b\n+c\n")

    def test_missing_file_header_is_rejected(self, engine: DiffEngine):
        with pytest.raises(ValueError):
            engine.parse_patch("@@ -1 +1 @@\n-a\n+b\n")

    def test_garbage_line_in_hunk_is_rejected(self, engine: DiffEngine):
        with pytest.raises(ValueError):
            engine.parse_patch("--- a/f\n+++ b/f\n@@ -1,2 +1,2 @@\n a\n*b\n")
