from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config, resolve_options
from .ranking import ORDER_KEYS
from .render import FORMATS
from .run import run_fame


def _build_parser() -> argparse.ArgumentParser:
    # Defaults are None so unset options fall through to --config values.
    parser = argparse.ArgumentParser(
        prog="git-fame",
        description="Per-author lines, commits and files attributed by git blame at a revision.",
    )
    parser.add_argument("--repository", type=Path, default=None, help="Path to the git repository (default: current directory).")
    parser.add_argument("--revision", type=str, default=None, help="Commit, branch or tag to blame (default: HEAD).")
    parser.add_argument("--order-by", dest="order_by", choices=list(ORDER_KEYS), default=None, help="Sort key (default: lines).")
    parser.add_argument("--use-committer", dest="use_committer", action="store_true", default=None, help="Attribute lines to the committer instead of the author.")
    parser.add_argument("--format", choices=list(FORMATS), default=None, help="Output format (default: tabular).")
    parser.add_argument("--extensions", type=str, default=None, help="Comma-separated extensions to include, e.g. '.go,.md'.")
    parser.add_argument("--languages", type=str, default=None, help="Comma-separated languages to include, e.g. 'go,markdown'.")
    parser.add_argument("--exclude", type=str, default=None, help="Comma-separated fnmatch globs of files to skip; '*' also matches '/', so 'vendor/*' covers nested paths.")
    parser.add_argument("--restrict-to", dest="restrict_to", type=str, default=None, help="Comma-separated fnmatch globs; only matching files are counted. '*' also matches '/'.")
    parser.add_argument("--jobs", type=int, default=None, help="Parallel blame jobs (default: cpu count + 4, max 32).")
    parser.add_argument("--timeout", type=int, default=None, help="Per git call timeout in seconds (default: 300).")
    parser.add_argument(
        "--count-empty-files",
        dest="count_empty_files",
        action="store_true",
        default=None,
        help="Count empty files toward the author of their last change.",
    )
    parser.add_argument("--config", type=Path, default=None, help="Optional JSON file with defaults for the options above.")
    parser.add_argument("--progress", action="store_true", help="Print the run plan and progress to stderr.")
    return parser


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        if args.config and not args.config.exists():
            raise ConfigError(f"config file not found: {args.config}")
        config = load_config(args.config) if args.config else {}
        options = resolve_options(args, config)
    except ConfigError as e:
        parser.error(str(e))
    return run_fame(options, progress=bool(args.progress))


if __name__ == "__main__":
    raise SystemExit(main())
