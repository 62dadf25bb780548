from __future__ import annotations

from .models import FileBlameResult


class ChangeSummaryParseError(ValueError):
    pass


def _strip_email(ident: str) -> str:
    s = ident.strip()
    if s.endswith(">") and "<" in s:
        s = s[: s.rindex("<")]
    return " ".join(s.split())


def parse_change_summary(text: str, *, use_committer: bool = False) -> tuple[str, str]:
    """
    Extract `(commit, name)` from `git log -1 --pretty=fuller` style text:

        commit 4f2c...
        Author:     Jane Doe <jane@example.com>
        AuthorDate: ...
        Commit:     John Roe <john@example.com>

    Returns ("", "") when the text has no such lines.
    """
    ident_key = "Commit:" if use_committer else "Author:"
    commit = ""
    name = ""
    for raw_line in text.splitlines():
        parts = raw_line.split()
        if not parts:
            continue
        if parts[0] == "commit" and not raw_line[:1].isspace():
            if len(parts) < 2:
                raise ChangeSummaryParseError(f"commit line without a hash: {raw_line!r}")
            commit = parts[1]
        elif parts[0] == ident_key and not raw_line[:1].isspace():
            name = _strip_email(raw_line.split(ident_key, 1)[1])
    return commit, name


def resolve_fallback(
    result: FileBlameResult,
    summary_text: str,
    *,
    path: str,
    use_committer: bool = False,
    count_file: bool = False,
) -> FileBlameResult:
    commit, name = parse_change_summary(summary_text, use_committer=use_committer)
    # No lines_by_commit entry: the commit is attributable but contributes zero lines.
    result.author_by_commit[commit] = name
    if count_file:
        result.filename = path
    return result
