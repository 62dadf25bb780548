from __future__ import annotations

import csv
import io
import json

from .models import AuthorStat

FORMATS = ("tabular", "csv", "json", "json-lines")
HEADER = ("Name", "Lines", "Commits", "Files")


def render_tabular(stats: list[AuthorStat]) -> str:
    rows = [(st.author, str(st.lines), str(st.commit_count), str(st.file_count)) for st in stats]
    widths = [len(h) for h in HEADER]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    out = [" ".join(cell.ljust(widths[i]) for i, cell in enumerate(HEADER))]
    for row in rows:
        # Last column is left unpadded on data rows.
        out.append(" ".join([*(cell.ljust(widths[i]) for i, cell in enumerate(row[:-1])), row[-1]]))
    return "\n".join(out) + "\n"


def render_csv(stats: list[AuthorStat]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(list(HEADER))
    for st in stats:
        writer.writerow([st.author, st.lines, st.commit_count, st.file_count])
    return buf.getvalue()


def render_json(stats: list[AuthorStat]) -> str:
    return json.dumps([st.to_row() for st in stats], indent=2, ensure_ascii=False) + "\n"


def render_json_lines(stats: list[AuthorStat]) -> str:
    return "".join(json.dumps(st.to_row(), separators=(",", ":"), ensure_ascii=False) + "\n" for st in stats)


_RENDERERS = {
    "tabular": render_tabular,
    "csv": render_csv,
    "json": render_json,
    "json-lines": render_json_lines,
}


def render(stats: list[AuthorStat], fmt: str) -> str:
    fn = _RENDERERS.get(fmt)
    if fn is None:
        raise ValueError(f"Unknown format: {fmt!r} (expected one of {', '.join(FORMATS)})")
    return fn(stats)
