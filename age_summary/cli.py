from __future__ import annotations

import argparse
from pathlib import Path

from .config import build_config, load_config_file
from .errors import ConfigError
from .log import configure_logging, get_logger
from .pipeline import run_pipeline

log = get_logger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="age-summary", add_help=True)
    sub = p.add_subparsers(dest="cmd", required=True)

    run = sub.add_parser("run", help="Load every CSV source in the index and summarize user ages.")
    run.add_argument("--config", help="JSON file whose 'run' object supplies default settings.")
    run.add_argument("--index", dest="index_path", help="Newline-delimited list of sources (default: index.txt).")
    run.add_argument("--data-root", help="Directory bare index entries are resolved against (default: data).")
    run.add_argument("--pool-size", type=int, help="Number of concurrent workers per cycle (default: 3).")
    cycles = run.add_mutually_exclusive_group()
    cycles.add_argument("--max-cycles", type=int, help="Give up on retryable sources after N cycles (default: 10).")
    cycles.add_argument(
        "--unbounded",
        action="store_true",
        help="Keep cycling until no retryable source is left.",
    )
    run.add_argument("--deadline", dest="deadline_seconds", type=float, help="Stop starting new fetches after N seconds.")
    run.add_argument("--timeout", dest="timeout_seconds", type=float, help="HTTP timeout in seconds (default: 20).")
    run.add_argument("--out", dest="out_dir", help="Write run_.../summary.json under this directory.")
    run.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Include tracebacks in the error entries of summary.json.",
    )
    run.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(level=args.log_level)

    if args.cmd == "run":
        try:
            file_cfg = load_config_file(Path(args.config).expanduser()) if args.config else {}
            if args.unbounded:
                file_cfg = {**file_cfg, "max_cycles": None}
            config = build_config(
                file_cfg,
                index_path=args.index_path,
                data_root=args.data_root,
                pool_size=args.pool_size,
                max_cycles=args.max_cycles,
                deadline_seconds=args.deadline_seconds,
                timeout_seconds=args.timeout_seconds,
                out_dir=args.out_dir,
                debug=args.debug,
            )
            result = run_pipeline(config)
        except ConfigError as exc:
            log.error("%s", exc)
            return 2
        return int(result.exit_code)

    raise RuntimeError(f"Unsupported command: {args.cmd}")
