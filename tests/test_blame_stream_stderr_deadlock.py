from __future__ import annotations

import multiprocessing as mp
import os
import sys
import time
from pathlib import Path

import pytest

from gitfame.git import GitError, stream_git
from gitfame.run import process_file
from gitfame.storage import AggregationStore

pytestmark = pytest.mark.skipif(os.name == "nt", reason="fake git is a POSIX script")


def _run_process_file_in_subprocess(
    queue: "mp.Queue[object]",
    *,
    repo_dir: str,
    fake_git_dir: str,
) -> None:
    os.environ["PATH"] = str(fake_git_dir) + os.pathsep + os.environ.get("PATH", "")

    store = AggregationStore()
    result = process_file(Path(repo_dir), "HEAD", "file.py", store)
    queue.put((result.lines_by_commit, result.author_by_commit))


def test_process_file_does_not_deadlock_on_stderr(tmp_path: Path) -> None:
    repo_dir = tmp_path / "repo"
    repo_dir.mkdir()

    fake_git_dir = tmp_path / "bin"
    fake_git_dir.mkdir()
    fake_git = fake_git_dir / "git"
    fake_git.write_text(
        "\n".join(
            [
                f"#!{sys.executable}",
                "import sys",
                "",
                "def main() -> int:",
                "    if len(sys.argv) > 1 and sys.argv[1] == 'blame':",
                "        sys.stdout.write('aaa 1 1 1\\nauthor A\\nfilename file.py\\n\\tx = 1\\n')",
                "        sys.stdout.flush()",
                "        sys.stderr.write('E' * (2 * 1024 * 1024))",
                "        sys.stderr.flush()",
                "        sys.stdout.write('bbb 2 2 1\\nauthor B\\nfilename file.py\\n\\ty = 2\\n')",
                "        sys.stdout.flush()",
                "        return 0",
                "    sys.stderr.write('unexpected args: ' + ' '.join(sys.argv) + '\\n')",
                "    return 2",
                "",
                "if __name__ == '__main__':",
                "    raise SystemExit(main())",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    fake_git.chmod(0o755)

    queue: mp.Queue[object] = mp.Queue()
    proc = mp.Process(
        target=_run_process_file_in_subprocess,
        args=(queue,),
        kwargs={"repo_dir": str(repo_dir), "fake_git_dir": str(fake_git_dir)},
    )
    proc.start()
    proc.join(timeout=10)
    if proc.is_alive():
        proc.terminate()
        proc.join(timeout=3)
        raise AssertionError("process_file hung when git produced large stderr output")

    assert proc.exitcode == 0
    lines_by_commit, author_by_commit = queue.get(timeout=3)
    assert lines_by_commit == {"aaa": 1, "bbb": 1}
    assert author_by_commit == {"aaa": "A", "bbb": "B"}


def test_stream_git_kills_git_that_stalls_mid_stream(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    fake_git_dir = tmp_path / "bin"
    fake_git_dir.mkdir()
    fake_git = fake_git_dir / "git"
    fake_git.write_text(
        "\n".join(
            [
                f"#!{sys.executable}",
                "import sys",
                "import time",
                "",
                "sys.stdout.write('aaa 1 1 1\\nauthor A\\n')",
                "sys.stdout.flush()",
                "time.sleep(30)",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    fake_git.chmod(0o755)
    monkeypatch.setenv("PATH", str(fake_git_dir) + os.pathsep + os.environ.get("PATH", ""))

    started = time.monotonic()
    with pytest.raises(GitError, match="timed out after 1s"):
        stream_git(["blame", "--porcelain", "HEAD", "--", "file.py"], cwd=tmp_path, consume=list, timeout_s=1)

    assert time.monotonic() - started < 10
