from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from .errors import ConfigError


@dataclass(frozen=True)
class RunConfig:
    index_path: Path = Path("index.txt")
    data_root: str = "data"
    pool_size: int = 3
    # None means cycle until no retryable source is left.
    max_cycles: int | None = 10
    deadline_seconds: float | None = None
    timeout_seconds: float = 20
    encoding: str = "utf-8"
    out_dir: Path | None = None
    debug: bool = False

    def validate(self) -> "RunConfig":
        if self.pool_size < 1:
            raise ConfigError(f"pool_size must be >= 1 (got {self.pool_size})")
        if self.max_cycles is not None and self.max_cycles < 1:
            raise ConfigError(f"max_cycles must be >= 1 (got {self.max_cycles})")
        if self.deadline_seconds is not None and self.deadline_seconds <= 0:
            raise ConfigError(f"deadline_seconds must be > 0 (got {self.deadline_seconds})")
        if self.timeout_seconds <= 0:
            raise ConfigError(f"timeout_seconds must be > 0 (got {self.timeout_seconds})")
        return self

    def settings(self) -> dict[str, Any]:
        return {
            "index_path": str(self.index_path),
            "data_root": self.data_root,
            "pool_size": self.pool_size,
            "max_cycles": self.max_cycles,
            "deadline_seconds": self.deadline_seconds,
            "timeout_seconds": self.timeout_seconds,
            "debug": self.debug,
        }


_PATH_FIELDS = {"index_path", "out_dir"}


def _coerce(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name in _PATH_FIELDS:
        return Path(str(value)).expanduser()
    if name in ("pool_size", "max_cycles"):
        return int(value)
    if name in ("deadline_seconds", "timeout_seconds"):
        return float(value)
    if name == "debug":
        if not isinstance(value, bool):
            raise TypeError(f"expected true or false, got {value!r}")
        return value
    return str(value)


def build_config(base: dict[str, Any] | None = None, **overrides: Any) -> RunConfig:
    """
    Build a validated RunConfig from a ``run`` section plus explicit overrides.

    Overrides whose value is None are ignored, so unset CLI flags fall back to
    the file (and then to the defaults).
    """
    known = {f.name for f in fields(RunConfig)}
    values: dict[str, Any] = {}
    for source in (base or {}, {k: v for k, v in overrides.items() if v is not None}):
        for k, v in source.items():
            if k not in known:
                raise ConfigError(f"unknown run setting: {k}")
            try:
                values[k] = _coerce(k, v)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"invalid value for {k}: {v!r}") from exc
    return replace(RunConfig(), **values).validate()


def load_config_file(path: Path) -> dict[str, Any]:
    try:
        cfg = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"unable to read config {path}: {exc}") from exc
    run_cfg = cfg.get("run") if isinstance(cfg, dict) else None
    if run_cfg is None:
        return {}
    if not isinstance(run_cfg, dict):
        raise ConfigError("config.run must be an object")
    return run_cfg
