from __future__ import annotations

import subprocess
import threading
from pathlib import Path
from typing import Callable, Iterator, Optional, TypeVar

T = TypeVar("T")

MAX_STDERR_CHARS = 50_000


class GitError(RuntimeError):
    def __init__(self, args: list[str], message: str) -> None:
        super().__init__(f"git {' '.join(args)}: {message}")
        self.git_args = list(args)
        self.message = message


def run_git(args: list[str], cwd: Path, timeout_s: int = 300, errors: str = "replace") -> tuple[int, str, str]:
    # Paths need errors="surrogateescape" so non-UTF-8 names round-trip back into git.
    proc = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        encoding="utf-8",
        errors=errors,
        timeout=timeout_s,
    )
    return proc.returncode, proc.stdout, proc.stderr


def check_git(args: list[str], cwd: Path, timeout_s: int = 300, errors: str = "replace") -> str:
    try:
        code, out, err = run_git(args, cwd=cwd, timeout_s=timeout_s, errors=errors)
    except FileNotFoundError as e:
        raise GitError(args, f"failed to start git: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise GitError(args, f"timed out after {timeout_s}s") from e
    if code != 0:
        raise GitError(args, f"exited {code}: {err.strip()[:500]}")
    return out


def get_repo_toplevel(candidate: Path) -> Optional[Path]:
    try:
        code, out, _ = run_git(["rev-parse", "--show-toplevel"], cwd=candidate, errors="surrogateescape")
    except (OSError, subprocess.TimeoutExpired):
        return None
    if code != 0 or not out.strip():
        return None
    return Path(out.strip()).resolve()


def iter_tree_files(repo: Path, revision: str, timeout_s: int = 300) -> Iterator[str]:
    """Yield the path of every blob tracked at `revision`, relative to the repo root."""
    out = check_git(
        ["ls-tree", "-r", "-z", "--full-tree", revision],
        cwd=repo,
        timeout_s=timeout_s,
        errors="surrogateescape",
    )
    for entry in out.split("\0"):
        if not entry:
            continue
        meta, sep, path = entry.partition("\t")
        parts = meta.split()
        if not sep or len(parts) != 3:
            raise GitError(["ls-tree", "-r", revision], f"unexpected entry: {entry[:200]!r}")
        # Submodules show up as `commit` entries and have nothing to blame.
        if parts[1] == "blob":
            yield path


def stream_git(args: list[str], cwd: Path, consume: Callable[[Iterator[str]], T], timeout_s: int = 300) -> T:
    """
    Run git and feed its stdout, line by line, to `consume`.

    Lines are split on "\\n" only and decoded as UTF-8 with replacement, so a
    stray carriage return inside file content cannot split a line. stderr is
    drained on a helper thread so a chatty git cannot fill the pipe and stall.
    """
    try:
        proc = subprocess.Popen(
            ["git", *args],
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        raise GitError(args, f"failed to start git: {e}") from e

    stderr_chunks: list[bytes] = []
    stderr_chars = 0

    def drain_stderr() -> None:
        nonlocal stderr_chars
        if proc.stderr is None:
            return
        while True:
            chunk = proc.stderr.read(8192)
            if not chunk:
                return
            if stderr_chars >= MAX_STDERR_CHARS:
                continue
            take = chunk[: MAX_STDERR_CHARS - stderr_chars]
            stderr_chunks.append(take)
            stderr_chars += len(take)

    stderr_thread: threading.Thread | None = None
    if proc.stderr is not None:
        stderr_thread = threading.Thread(target=drain_stderr, daemon=True)
        stderr_thread.start()

    def lines() -> Iterator[str]:
        assert proc.stdout is not None
        for raw_line in proc.stdout:
            yield raw_line.decode("utf-8", errors="replace")

    # A git that stalls mid-stream never closes stdout, so the deadline has to
    # be enforced from outside the reading thread.
    timed_out = threading.Event()

    def on_deadline() -> None:
        timed_out.set()
        proc.kill()

    deadline = threading.Timer(timeout_s, on_deadline)
    deadline.daemon = True
    deadline.start()
    try:
        try:
            value = consume(lines())
        except BaseException as e:
            proc.kill()
            proc.wait()
            if timed_out.is_set():
                raise GitError(args, f"timed out after {timeout_s}s") from e
            raise
        finally:
            if proc.stdout is not None:
                proc.stdout.close()
        code = proc.wait()
    finally:
        deadline.cancel()

    if timed_out.is_set():
        raise GitError(args, f"timed out after {timeout_s}s")
    if stderr_thread is not None:
        stderr_thread.join()
    if code != 0:
        stderr = b"".join(stderr_chunks).decode("utf-8", errors="replace")
        raise GitError(args, f"exited {code}: {stderr.strip()[:500]}")
    return value


def blame_args(revision: str, path: str) -> list[str]:
    return ["blame", "--porcelain", revision, "--", path]


def last_change_summary(repo: Path, revision: str, path: str, timeout_s: int = 300) -> str:
    return check_git(["log", "-1", "--no-decorate", "--pretty=fuller", revision, "--", path], cwd=repo, timeout_s=timeout_s)
