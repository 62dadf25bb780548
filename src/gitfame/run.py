from __future__ import annotations

import dataclasses
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, TextIO

from .blame import BlameParseError, parse_blame_porcelain
from .config import FameOptions
from .fallback import ChangeSummaryParseError, resolve_fallback
from .git import GitError, blame_args, get_repo_toplevel, iter_tree_files, last_change_summary, stream_git
from .models import FileBlameResult
from .paths import FileFilter
from .ranking import rank
from .render import render
from .storage import AggregationStore

PROGRESS_EVERY = 50


@dataclasses.dataclass(frozen=True)
class FileFailure:
    path: str
    error: str


@dataclasses.dataclass
class FameRun:
    store: AggregationStore
    files: list[str]
    failures: list[FileFailure]

    @property
    def ok(self) -> bool:
        return not self.failures


def process_file(
    repo: Path,
    revision: str,
    path: str,
    store: AggregationStore,
    *,
    use_committer: bool = False,
    count_empty_files: bool = False,
    timeout_s: int = 300,
) -> FileBlameResult:
    result = stream_git(
        blame_args(revision, path),
        cwd=repo,
        consume=lambda lines: parse_blame_porcelain(lines, use_committer=use_committer),
        timeout_s=timeout_s,
    )
    if result.is_empty:
        summary = last_change_summary(repo, revision, path, timeout_s=timeout_s)
        resolve_fallback(result, summary, path=path, use_committer=use_committer, count_file=count_empty_files)
    store.merge(result)
    return result


def collect_stats(
    repo: Path,
    revision: str,
    paths: Iterable[str],
    *,
    jobs: int,
    use_committer: bool = False,
    count_empty_files: bool = False,
    timeout_s: int = 300,
    progress: TextIO | None = None,
) -> FameRun:
    """
    Blame every path on a bounded thread pool and merge into one store.

    Returns only after every task has finished. A failing file does not stop
    the others; it is recorded in `FameRun.failures`.
    """
    store = AggregationStore()
    files: list[str] = []
    failures: list[FileFailure] = []
    with ThreadPoolExecutor(max_workers=max(1, jobs)) as ex:
        futs = {}
        for path in paths:
            files.append(path)
            fut = ex.submit(
                process_file,
                repo,
                revision,
                path,
                store,
                use_committer=use_committer,
                count_empty_files=count_empty_files,
                timeout_s=timeout_s,
            )
            futs[fut] = path

        for i, fut in enumerate(as_completed(futs), start=1):
            try:
                fut.result()
            except (GitError, BlameParseError, ChangeSummaryParseError, OSError) as e:
                failures.append(FileFailure(path=futs[fut], error=str(e)))
            if progress is not None and (i % PROGRESS_EVERY == 0 or i == len(futs)):
                print(f"Blamed {i}/{len(futs)} files...", file=progress)

    failures.sort(key=lambda f: f.path)
    return FameRun(store=store, files=files, failures=failures)


def format_run_header(options: FameOptions, repo: Path, file_filter: FileFilter) -> str:
    filters: list[str] = []
    if file_filter.extensions:
        filters.append("extensions=" + ",".join(file_filter.extensions))
    if file_filter.languages:
        filters.append("languages=" + ",".join(file_filter.languages))
    if file_filter.exclude:
        filters.append("exclude=" + ",".join(file_filter.exclude))
    if file_filter.restrict_to:
        filters.append("restrict-to=" + ",".join(file_filter.restrict_to))
    lines = [
        "git-fame",
        f"- Repository: {repo}",
        f"- Revision: {options.revision}",
        f"- Attribution: {'committer' if options.use_committer else 'author'}",
        f"- Jobs: {options.jobs}  Timeout: {options.timeout}s",
        f"- Filters: {'; '.join(filters) if filters else 'none'}",
        f"- Output: {options.format}, ordered by {options.order_by}",
    ]
    return "\n".join(lines)


def run_fame(options: FameOptions, *, out: TextIO | None = None, err: TextIO | None = None, progress: bool = False) -> int:
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr

    repo = get_repo_toplevel(options.repository)
    if repo is None:
        print(f"error: not a git repository: {options.repository}", file=err)
        return 1

    file_filter = FileFilter(
        extensions=options.extensions,
        languages=options.languages,
        exclude=options.exclude,
        restrict_to=options.restrict_to,
    )
    if progress:
        print(format_run_header(options, repo, file_filter), file=err)

    try:
        paths = [p for p in iter_tree_files(repo, options.revision, timeout_s=options.timeout) if file_filter.accepts(p)]
    except GitError as e:
        print(f"error: {e}", file=err)
        return 1

    result = collect_stats(
        repo,
        options.revision,
        paths,
        jobs=options.jobs,
        use_committer=options.use_committer,
        count_empty_files=options.count_empty_files,
        timeout_s=options.timeout,
        progress=err if progress else None,
    )
    if not result.ok:
        for f in result.failures:
            print(f"error: {f.path}: {f.error}", file=err)
        print(f"{len(result.failures)} of {len(result.files)} files failed; no report written.", file=err)
        return 1

    out.write(render(rank(result.store.stats(), options.order_by), options.format))
    out.flush()
    return 0
