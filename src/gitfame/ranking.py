from __future__ import annotations

from typing import Callable, Iterable

from .models import AuthorStat

ORDER_KEYS = ("lines", "commits", "files")

# primary -> (primary, secondary, tertiary)
_METRIC_ORDER = {
    "lines": ("lines", "commits", "files"),
    "commits": ("commits", "lines", "files"),
    "files": ("files", "commits", "lines"),
}


def _metric(st: AuthorStat, name: str) -> int:
    if name == "lines":
        return st.lines
    if name == "commits":
        return st.commit_count
    return st.file_count


def sort_key(order_by: str) -> Callable[[AuthorStat], tuple[int, int, int, str]]:
    if order_by not in _METRIC_ORDER:
        raise ValueError(f"Unknown order-by key: {order_by!r} (expected one of {', '.join(ORDER_KEYS)})")
    first, second, third = _METRIC_ORDER[order_by]

    def key(st: AuthorStat) -> tuple[int, int, int, str]:
        return (-_metric(st, first), -_metric(st, second), -_metric(st, third), st.author)

    return key


def rank(stats: Iterable[AuthorStat], order_by: str = "lines") -> list[AuthorStat]:
    return sorted(stats, key=sort_key(order_by))
