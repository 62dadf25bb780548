from __future__ import annotations

import pytest

from gitfame.models import AuthorStat
from gitfame.ranking import ORDER_KEYS, rank, sort_key


def _stat(name: str, lines: int, commits: int, files: int) -> AuthorStat:
    return AuthorStat(
        author=name,
        lines=lines,
        commits={f"{name}-c{i}" for i in range(commits)},
        files={f"{name}-f{i}" for i in range(files)},
    )


def _names(stats: list[AuthorStat]) -> list[str]:
    return [st.author for st in stats]


STATS = [
    _stat("dave", 10, 1, 9),
    _stat("alice", 10, 3, 1),
    _stat("bob", 5, 3, 2),
    _stat("carol", 10, 3, 2),
    _stat("erin", 1, 1, 9),
]


def test_rank_by_lines() -> None:
    # lines desc, then commits desc, then files desc.
    assert _names(rank(STATS, "lines")) == ["carol", "alice", "dave", "bob", "erin"]


def test_rank_by_commits() -> None:
    # commits desc, then lines desc, then files desc.
    assert _names(rank(STATS, "commits")) == ["carol", "alice", "bob", "dave", "erin"]


def test_rank_by_files() -> None:
    # files desc, then commits desc, then lines desc.
    assert _names(rank(STATS, "files")) == ["dave", "erin", "carol", "bob", "alice"]


def test_name_tie_break_is_ascending_for_every_key() -> None:
    same = [_stat(n, 4, 2, 2) for n in ("zed", "Amy", "bea", "amy")]
    for key in ORDER_KEYS:
        assert _names(rank(same, key)) == ["Amy", "amy", "bea", "zed"]


def test_rank_result_is_totally_ordered() -> None:
    for key in ORDER_KEYS:
        ranked = rank(STATS, key)
        k = sort_key(key)
        assert all(k(a) < k(b) for a, b in zip(ranked, ranked[1:]))


def test_rank_does_not_depend_on_input_order() -> None:
    for key in ORDER_KEYS:
        assert _names(rank(STATS, key)) == _names(rank(list(reversed(STATS)), key))


def test_unknown_order_key() -> None:
    with pytest.raises(ValueError):
        rank(STATS, "age")
