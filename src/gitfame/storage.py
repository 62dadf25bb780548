from __future__ import annotations

import threading

from .models import AuthorStat, FileBlameResult


class AggregationStore:
    """
    Author -> AuthorStat table shared by all blame workers.

    `merge` is the only mutator and runs under a single lock, so a worker
    never observes (or leaves behind) a half-applied file. Commits and files
    are sets, lines are summed; merging the same results in any order gives
    the same table. Iteration follows first-seen author order.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stats: list[AuthorStat] = []
        self._index: dict[str, int] = {}

    def merge(self, result: FileBlameResult) -> None:
        with self._lock:
            for commit, author in result.author_by_commit.items():
                pos = self._index.get(author)
                if pos is None:
                    pos = len(self._stats)
                    self._index[author] = pos
                    self._stats.append(AuthorStat(author=author))
                st = self._stats[pos]
                st.commits.add(commit)
                st.lines += result.lines_for(commit)
                if result.filename:
                    st.files.add(result.filename)

    def get(self, author: str) -> AuthorStat | None:
        with self._lock:
            pos = self._index.get(author)
            return None if pos is None else self._stats[pos]

    def stats(self) -> list[AuthorStat]:
        with self._lock:
            return list(self._stats)

    def __len__(self) -> int:
        with self._lock:
            return len(self._stats)

    def __contains__(self, author: object) -> bool:
        with self._lock:
            return author in self._index
