"""Unified-diff creation and application.

Patches are created with ``difflib`` against one snapshot of a file and
kept as parsed hunks. Text serialization happens only at the boundary
(``format_patch`` / ``DiffEngine.parse_patch``).

Application is strict: context and removed lines must match the target
content exactly. A hunk is first tried at its expected line (shifted by
the drift of the hunks already placed), then searched outward from there.
A hunk that cannot be placed fails the whole patch.
"""

from __future__ import annotations

import difflib
import logging
import re

from sarifix.core.errors import PatchConflictError
from sarifix.fix.models import Hunk, Patch

logger = logging.getLogger(__name__)

NO_NEWLINE_MARKER = "\\ No newline at end of file"

_HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


def split_lines(text: str) -> list[str]:
    """Split on "\\n" only, keeping terminators. ``"".join`` restores ``text``."""
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _format_range(start: int, count: int) -> str:
    if count == 1:
        return str(start)
    return f"{start},{count}"


def format_patch(patch: Patch) -> str:
    """Render a patch as a unified diff with a/ and b/ path prefixes."""
    out = [f"--- a/{patch.file_path}\n", f"+++ b/{patch.file_path}\n"]
    for hunk in patch.hunks:
        out.append(
            f"@@ -{_format_range(hunk.old_start, hunk.old_count)} "
            f"+{_format_range(hunk.new_start, hunk.new_count)} @@\n"
        )
        for line in hunk.lines:
            if line.endswith("\n"):
                out.append(line)
            else:
                out.append(line + "\n")
                out.append(NO_NEWLINE_MARKER + "\n")
    return "".join(out)


class DiffEngine:
    """Creates patches between two texts and applies them to a base text."""

    def __init__(self, context_lines: int = 4):
        self.context_lines = context_lines

    def create_patch(self, file_path: str, before: str, after: str) -> Patch:
        """Diff ``before`` against ``after``. Identical texts give an empty patch."""
        old = split_lines(before)
        new = split_lines(after)
        matcher = difflib.SequenceMatcher(None, old, new, autojunk=False)

        hunks = []
        for group in matcher.get_grouped_opcodes(self.context_lines):
            i1, i2 = group[0][1], group[-1][2]
            j1, j2 = group[0][3], group[-1][4]
            lines: list[str] = []
            for tag, a1, a2, b1, b2 in group:
                if tag == "equal":
                    lines.extend(" " + line for line in old[a1:a2])
                    continue
                if tag in ("replace", "delete"):
                    lines.extend("-" + line for line in old[a1:a2])
                if tag in ("replace", "insert"):
                    lines.extend("+" + line for line in new[b1:b2])
            old_count, new_count = i2 - i1, j2 - j1
            hunks.append(
                Hunk(
                    # Unified convention: a zero-length range names the line before it
                    old_start=i1 + 1 if old_count else i1,
                    old_count=old_count,
                    new_start=j1 + 1 if new_count else j1,
                    new_count=new_count,
                    lines=tuple(lines),
                )
            )
        return Patch(file_path=file_path, hunks=tuple(hunks))

    def apply_patch(self, content: str, patch: Patch) -> str | None:
        """Apply ``patch`` to ``content``. Returns None when a hunk does not fit."""
        source = split_lines(content)
        output: list[str] = []
        cursor = 0
        drift = 0

        for number, hunk in enumerate(patch.hunks):
            old = hunk.old_lines
            nominal = hunk.old_start - 1 if hunk.old_count else hunk.old_start
            position = self._locate(source, old, nominal + drift, cursor)
            if position is None:
                logger.debug(
                    "Hunk %d of %s does not match near line %d",
                    number, patch.file_path, nominal + drift + 1,
                )
                return None
            drift = position - nominal
            output.extend(source[cursor:position])
            output.extend(hunk.new_lines)
            cursor = position + len(old)

        output.extend(source[cursor:])
        return "".join(output)

    def apply_or_raise(self, content: str, patch: Patch, index: int = 0) -> str:
        """Like ``apply_patch`` but raises ``PatchConflictError`` on mismatch."""
        result = self.apply_patch(content, patch)
        if result is None:
            raise PatchConflictError(patch.file_path, index)
        return result

    def parse_patch(self, text: str) -> Patch:
        """Parse a single-file unified diff.

        Raises ValueError for malformed input.
        """
        file_path = ""
        hunks: list[Hunk] = []
        header: tuple[int, int, int, int] | None = None
        body: list[str] = []

        def close_hunk() -> None:
            if header is None:
                return
            old_start, old_count, new_start, new_count = header
            hunk = Hunk(old_start, old_count, new_start, new_count, tuple(body))
            if len(hunk.old_lines) != old_count or len(hunk.new_lines) != new_count:
                raise ValueError(
                    f"Hunk @@ -{old_start},{old_count} +{new_start},{new_count} @@ "
                    "line counts do not match its body"
                )
            hunks.append(hunk)

        for raw in split_lines(text):
            line = raw[:-1] if raw.endswith("\n") else raw
            if header is None and (line.startswith("Index:") or line.startswith("====")):
                continue
            if line.startswith("--- ") and (header is None or self._is_complete(header, body)):
                continue
            if line.startswith("+++ ") and (header is None or self._is_complete(header, body)):
                file_path = _strip_prefix(line[4:])
                continue
            match = _HUNK_HEADER.match(line)
            if match:
                close_hunk()
                header = (
                    int(match.group(1)),
                    int(match.group(2) if match.group(2) is not None else 1),
                    int(match.group(3)),
                    int(match.group(4) if match.group(4) is not None else 1),
                )
                body = []
                continue
            if header is None:
                continue
            if line == "" and self._is_complete(header, body):
                continue
            if line.startswith("\\"):
                if not body:
                    raise ValueError("No-newline marker without a preceding line")
                body[-1] = body[-1][:-1] if body[-1].endswith("\n") else body[-1]
                continue
            if line == "":
                # Editors often strip the single space of blank context lines
                body.append(" \n")
            elif line[0] in " -+":
                body.append(line + "\n")
            else:
                raise ValueError(f"Unexpected line in hunk: {line!r}")
        close_hunk()

        if not file_path:
            raise ValueError("Missing +++ file header")
        return Patch(file_path=file_path, hunks=tuple(hunks))

    @staticmethod
    def _is_complete(header: tuple[int, int, int, int], body: list[str]) -> bool:
        _, old_count, _, new_count = header
        old = sum(1 for line in body if line[0] in " -")
        new = sum(1 for line in body if line[0] in " +")
        return old >= old_count and new >= new_count

    @staticmethod
    def _locate(source: list[str], old: list[str], expected: int, floor: int) -> int | None:
        """Find where ``old`` sits in ``source``, closest to ``expected`` first."""
        ceiling = len(source) - len(old)
        if ceiling < floor:
            return None
        expected = min(max(expected, floor), ceiling)
        span = len(old)
        reach = max(expected - floor, ceiling - expected)
        for distance in range(reach + 1):
            candidates = (expected,) if distance == 0 else (expected + distance, expected - distance)
            for position in candidates:
                if floor <= position <= ceiling and source[position:position + span] == old:
                    return position
        return None


def _strip_prefix(path: str) -> str:
    path = path.split("\t", 1)[0].strip()
    if path.startswith("a/") or path.startswith("b/"):
        return path[2:]
    return path
