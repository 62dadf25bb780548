from __future__ import annotations

from typing import Iterable

from .models import FileBlameResult

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

# Parser states.
_HEADER = "header"  # expecting `<commit> <orig> <final> [<count>]`
_METADATA = "metadata"  # first sighting of a commit: `<key> <rest>` lines up to `filename`
_CONTENT = "content"  # expecting the TAB-prefixed source line
_REPEAT = "repeat"  # seen commit: content line, or a `filename` block when git repeats it

# The only metadata git writes after a repeated commit header.
_REPEAT_KEYS = frozenset({"previous", "filename"})


class BlameParseError(ValueError):
    def __init__(self, lineno: int, line: str, reason: str) -> None:
        super().__init__(f"malformed blame output at line {lineno}: {reason}: {line[:200]!r}")
        self.lineno = lineno
        self.line = line
        self.reason = reason


def attribution_label(use_committer: bool) -> str:
    return "committer" if use_committer else "author"


def _parse_header(line: str, lineno: int) -> str:
    parts = line.split(" ")
    if len(parts) not in (3, 4):
        raise BlameParseError(lineno, line, "expected `<commit> <orig-line> <final-line> [<group-size>]`")
    commit = parts[0]
    if not commit or any(ch not in _HEX_DIGITS for ch in commit):
        raise BlameParseError(lineno, line, "commit id is not hex")
    for tok in parts[1:]:
        if not tok.isdigit():
            raise BlameParseError(lineno, line, "line number is not an integer")
    return commit


def parse_blame_porcelain(lines: Iterable[str], *, use_committer: bool = False) -> FileBlameResult:
    """
    Parse `git blame --porcelain` output for a single file.

    Every header line counts one line for its commit, so the sum of
    `lines_by_commit` equals the number of header lines in the stream. The
    author of a commit comes from the `author` (or `committer`) metadata line
    that precedes its `filename` line. Unknown metadata keys are ignored.
    """
    label = attribution_label(use_committer)
    result = FileBlameResult()
    state = _HEADER
    commit = ""
    lineno = 0
    line = ""

    for raw_line in lines:
        lineno += 1
        line = raw_line.rstrip("\n")

        if state == _HEADER:
            commit = _parse_header(line, lineno)
            if commit in result.lines_by_commit:
                result.lines_by_commit[commit] += 1
                state = _REPEAT
            else:
                result.lines_by_commit[commit] = 1
                state = _METADATA
            continue

        if state == _CONTENT or (state == _REPEAT and line.startswith("\t")):
            if not line.startswith("\t"):
                raise BlameParseError(lineno, line, "expected TAB-prefixed content line")
            state = _HEADER
            continue

        # _METADATA, or a metadata block following a repeated commit.
        key, _, rest = line.partition(" ")
        if not key:
            raise BlameParseError(lineno, line, "empty metadata key")
        if state == _REPEAT and key not in _REPEAT_KEYS:
            raise BlameParseError(lineno, line, "expected content line after repeated commit header")
        if key == label and state == _METADATA:
            result.author_by_commit[commit] = rest
        elif key == "filename":
            result.filename = rest
            state = _CONTENT

    if state != _HEADER:
        raise BlameParseError(lineno, line, f"stream ended in {state} state")
    return result
