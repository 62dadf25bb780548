from __future__ import annotations

import argparse
import dataclasses
import json
import os
from pathlib import Path

from .ranking import ORDER_KEYS
from .render import FORMATS


def default_jobs() -> int:
    return max(1, min(32, (os.cpu_count() or 4) + 4))


DEFAULTS: dict[str, object] = {
    "repository": ".",
    "revision": "HEAD",
    "order_by": "lines",
    "format": "tabular",
    "use_committer": False,
    "extensions": [],
    "languages": [],
    "exclude": [],
    "restrict_to": [],
    "jobs": 0,  # 0 = default_jobs()
    "timeout": 300,
    "count_empty_files": False,
}


class ConfigError(ValueError):
    pass


@dataclasses.dataclass(frozen=True)
class FameOptions:
    repository: Path
    revision: str = "HEAD"
    order_by: str = "lines"
    format: str = "tabular"
    use_committer: bool = False
    extensions: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    restrict_to: tuple[str, ...] = ()
    jobs: int = 1
    timeout: int = 300
    count_empty_files: bool = False


def load_config(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigError(f"could not read config {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config {config_path} must contain a JSON object")
    unknown = sorted(k for k in data if k not in DEFAULTS)
    if unknown:
        raise ConfigError(f"unknown config keys in {config_path}: {', '.join(unknown)}")
    return data


def split_csv(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    items = value if isinstance(value, (list, tuple)) else [value]
    out: list[str] = []
    for v in items:
        for part in str(v).split(","):
            part = part.strip()
            if part:
                out.append(part)
    return tuple(out)


def resolve_options(args: argparse.Namespace, config: dict) -> FameOptions:
    """
    Merge CLI arguments over config values over DEFAULTS.

    CLI options left at `None` (the parser default) fall through to the
    config file.
    """

    def pick(key: str) -> object:
        v = getattr(args, key, None)
        if v is not None:
            return v
        if key in config and config[key] is not None:
            return config[key]
        return DEFAULTS[key]

    order_by = str(pick("order_by"))
    if order_by not in ORDER_KEYS:
        raise ConfigError(f"invalid order_by {order_by!r} (expected one of {', '.join(ORDER_KEYS)})")
    fmt = str(pick("format"))
    if fmt not in FORMATS:
        raise ConfigError(f"invalid format {fmt!r} (expected one of {', '.join(FORMATS)})")

    try:
        jobs = int(pick("jobs"))
        timeout = int(pick("timeout"))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"jobs and timeout must be integers: {e}") from e
    if jobs < 0:
        raise ConfigError(f"jobs must be >= 0, got {jobs}")
    if timeout <= 0:
        raise ConfigError(f"timeout must be > 0, got {timeout}")

    return FameOptions(
        repository=Path(str(pick("repository"))),
        revision=str(pick("revision")),
        order_by=order_by,
        format=fmt,
        use_committer=bool(pick("use_committer")),
        extensions=split_csv(pick("extensions")),
        languages=split_csv(pick("languages")),
        exclude=split_csv(pick("exclude")),
        restrict_to=split_csv(pick("restrict_to")),
        jobs=jobs or default_jobs(),
        timeout=timeout,
        count_empty_files=bool(pick("count_empty_files")),
    )
