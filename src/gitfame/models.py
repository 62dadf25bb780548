from __future__ import annotations

import dataclasses


@dataclasses.dataclass
class FileBlameResult:
    filename: str = ""
    lines_by_commit: dict[str, int] = dataclasses.field(default_factory=dict)  # commit -> attributed lines
    author_by_commit: dict[str, str] = dataclasses.field(default_factory=dict)  # commit -> author display name

    def lines_for(self, commit: str) -> int:
        return self.lines_by_commit.get(commit, 0)

    @property
    def total_lines(self) -> int:
        return sum(self.lines_by_commit.values())

    @property
    def is_empty(self) -> bool:
        return not self.author_by_commit


@dataclasses.dataclass
class AuthorStat:
    author: str
    lines: int = 0
    commits: set[str] = dataclasses.field(default_factory=set)
    files: set[str] = dataclasses.field(default_factory=set)

    @property
    def commit_count(self) -> int:
        return len(self.commits)

    @property
    def file_count(self) -> int:
        return len(self.files)

    def to_row(self) -> dict[str, object]:
        return {
            "name": self.author,
            "lines": self.lines,
            "commits": self.commit_count,
            "files": self.file_count,
        }
