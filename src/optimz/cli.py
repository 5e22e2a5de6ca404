"""Command-line entry point: shrink an ELF executable in place over several passes."""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path
from typing import Sequence

from .config_manager import ConfigManager, OptimizerConfig
from .controllers.pass_controller import PassController
from .services.backup_guard import backup_path_for, ensure_backup
from .services.command_runner import CommandRunner
from .services.format_probe import ensure_candidate
from .services.shrink_pipeline import PASS_POLICIES, ShrinkPipeline
from .services.tool_locator import NoToolsAvailable, ToolLocator
from .services.verifier import sanity_check

EXIT_OK = 0
EXIT_FAILURE = 1

_COUNT_PATTERN = re.compile(r"-?\d+")


class UsageError(ValueError):
    """Raised for malformed command-line arguments."""


class _Parser(argparse.ArgumentParser):
    # Every usage problem exits with 1, not argparse's default of 2.
    def error(self, message: str):  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def _emit(message: str) -> None:
    print(message, file=sys.stderr, flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="optimz",
        description="Performs multiple optimization passes over an ELF binary.",
        epilog="<times> defaults to 1 if omitted. Example: optimz ./a.out -2",
        allow_abbrev=False,
    )
    parser.add_argument("target", type=Path, help="Path to the ELF executable to shrink in place")
    parser.add_argument(
        "times",
        nargs="?",
        default=None,
        metavar="-<times>",
        help="Maximum number of passes, written as -N (default: 1)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON settings file (created with defaults when missing)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        default=None,
        help="Do not echo the external commands being executed",
    )
    parser.add_argument(
        "--policy",
        choices=PASS_POLICIES,
        default=None,
        help="How to decide whether a pass shrank the binary (default: per-step)",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        default=None,
        help="Parse the result with LIEF afterwards and fail if it is no longer a valid executable",
    )
    return parser


def parse_pass_count(raw: str | None) -> int:
    """Turn a ``-N`` argument into a pass count, clamped to at least one."""
    if raw is None:
        return 1
    if not raw.startswith("-"):
        raise UsageError("Second argument must be -<times> (e.g., -2)")
    suffix = raw[1:]
    if not _COUNT_PATTERN.fullmatch(suffix):
        raise UsageError(f"Invalid optimization count: {raw}")
    return max(1, int(suffix))


def _split_known(parser: argparse.ArgumentParser, argv: Sequence[str] | None) -> argparse.Namespace:
    args, extras = parser.parse_known_args(argv)
    # "-abc" or "--3" look like options to argparse; treat a lone leftover as the count.
    if extras and args.times is None and len(extras) == 1:
        args.times = extras[0]
        extras = []
    if extras:
        parser.error(f"unrecognized arguments: {' '.join(extras)}")
    return args


def _resolve_config(args: argparse.Namespace) -> OptimizerConfig:
    # A missing file is only written once the run is known to go ahead.
    config = ConfigManager(args.config).load(create_missing=False) if args.config else OptimizerConfig()
    if args.quiet is not None:
        config.quiet = args.quiet
    if args.policy is not None:
        config.policy = args.policy
    if args.verify is not None:
        config.verify = args.verify
    return config


def _write_default_config(path: Path | None) -> None:
    if path is None or path.exists():
        return
    try:
        ConfigManager(path).save(OptimizerConfig())
    except OSError as exc:
        _emit(f"Unable to write default configuration {path}: {exc}")
    else:
        _emit(f"Default configuration written to {path}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = _split_known(parser, argv)

    try:
        passes = parse_pass_count(args.times)
    except UsageError as exc:
        _emit(str(exc))
        return EXIT_FAILURE

    try:
        target = ensure_candidate(args.target)
    except FileNotFoundError as exc:
        _emit(str(exc))
        return EXIT_FAILURE
    except PermissionError as exc:
        _emit(str(exc))
        return EXIT_FAILURE
    except ValueError as exc:
        _emit(f"{exc}. Skipping.")
        return EXIT_FAILURE

    try:
        config = _resolve_config(args)
    except OSError as exc:
        _emit(f"Unable to read configuration {args.config}: {exc}")
        return EXIT_FAILURE
    if args.times is None:
        passes = config.passes

    locator = ToolLocator(config.search_path)
    try:
        tools = locator.require_any(config.tool_preferences())
    except NoToolsAvailable as exc:
        _emit(str(exc))
        return EXIT_FAILURE
    _emit(f"Tools: {tools.describe()}")

    if not ensure_backup(target, suffix=config.backup_suffix, on_output=_emit):
        return EXIT_FAILURE
    _write_default_config(args.config)

    pipeline = ShrinkPipeline(
        CommandRunner(on_output=_emit),
        policy=config.policy,
        quiet=config.quiet,
        on_output=_emit,
    )
    PassController(pipeline, on_output=_emit).optimize(target, tools, passes)

    if config.verify:
        try:
            sanity_check(target)
        except (OSError, RuntimeError) as exc:
            backup = backup_path_for(target, config.backup_suffix)
            _emit(f"Verification failed: {exc}. Original kept at {backup}")
            return EXIT_FAILURE
        _emit("Verification passed.")

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
