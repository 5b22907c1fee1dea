# Copyright 2025 CrownOps Engineering
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""CLI entry point for gocheck commands."""

from __future__ import annotations

import argparse
import logging
import pathlib
from collections.abc import Callable, Sequence
from textwrap import dedent
from typing import Final

from gocheck import __version__
from gocheck.config import load_config
from gocheck.core.model_types import LogComponent, OutputFormat, SeverityLevel
from gocheck.engines import check_sync
from gocheck.exceptions import ConfigValidationError, ParseInternalError
from gocheck.logging import LOG_FORMATS, LOG_LEVELS, configure_logging, structured_extra
from gocheck.services import GoBinaryResolver, LoggingNotifier, MemoryLogSink, StreamLogSink

from .io import echo, render_diagnostics

logger: logging.Logger = logging.getLogger("gocheck.cli")

EXIT_OK: Final[int] = 0
EXIT_FINDINGS: Final[int] = 1
EXIT_FAILURE: Final[int] = 2

CONFIG_TEMPLATE: Final[str] = dedent(
    """\
    # gocheck configuration template
    # Save this file as gocheck.toml next to your Go sources, or put the same
    # keys under [tool.gocheck] in pyproject.toml.

    # Compile the package containing the file (go build / go test -c).
    buildOnSave = true
    # buildFlags = ["-race"]
    # buildTags = "integration"

    # Run a linter against the file. Only golint receives the file name
    # automatically; pass it through lintFlags for other linters.
    lintOnSave = true
    # linter = "golint"
    # lintFlags = ["-min_confidence=0.8"]

    # Run go tool vet against the file.
    vetOnSave = true
    # vetFlags = ["-shadow"]

    coverOnSave = false

    # Kill tools that run longer than this many seconds.
    # toolTimeout = 60
    """,
)

CommandHandler = Callable[[argparse.Namespace], int]


def write_config_template(path: pathlib.Path, *, force: bool) -> int:
    """Write the gocheck configuration template to a file.

    Args:
        path: Target path where the configuration file will be written.
        force: If True, overwrite the file if it already exists.

    Returns:
        int: Exit code (0 for success, 1 for failure).
    """
    if path.exists() and not force:
        echo(f"[gocheck] Refusing to overwrite existing file: {path}")
        echo("Use --force if you want to replace it.")
        return 1
    path.parent.mkdir(parents=True, exist_ok=True)
    _ = path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    echo(f"[gocheck] Wrote starter config to {path}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main CLI entry point for the gocheck command-line interface.

    Args:
        argv: Command-line arguments to parse. If None, uses sys.argv.

    Returns:
        int: Exit code from the executed command handler.
    """
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.version:
        echo(f"gocheck {__version__}")
        return EXIT_OK
    if args.command is None:
        parser.error("No command provided.")
    _ = configure_logging(args.log_format, log_level=args.log_level)
    handler = _command_handlers()[args.command]
    return handler(args)


def _command_handlers() -> dict[str, CommandHandler]:
    return {
        "check": _handle_check,
        "init": _handle_init,
    }


def _positive_seconds(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        msg = f"invalid number of seconds: {raw!r}"
        raise argparse.ArgumentTypeError(msg) from exc
    if value <= 0:
        msg = f"timeout must be greater than zero, got {raw}"
        raise argparse.ArgumentTypeError(msg)
    return value


def _logging_options(*, with_defaults: bool) -> argparse.ArgumentParser:
    """Shared logging flags.

    Subcommands get a copy without defaults so a value given before the
    subcommand name is not reset by the subparser.
    """
    options = argparse.ArgumentParser(add_help=False)
    options.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default="text" if with_defaults else argparse.SUPPRESS,
        help="Select logging output format (human-readable text or structured JSON).",
    )
    options.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="warning" if with_defaults else argparse.SUPPRESS,
        help="Set verbosity of logged events.",
    )
    return options


def _build_parser() -> argparse.ArgumentParser:
    common = _logging_options(with_defaults=True)
    subcommand_common = _logging_options(with_defaults=False)
    parser = argparse.ArgumentParser(
        prog="gocheck",
        parents=[common],
        description="Run Go build, lint and vet checks on a file and print normalised diagnostics.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--version", action="store_true", help="Print the gocheck version and exit.")
    subparsers = parser.add_subparsers(dest="command")
    _register_check_command(subparsers, parents=[subcommand_common])
    _register_init_command(subparsers, parents=[subcommand_common])
    return parser


def _register_check_command(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    *,
    parents: Sequence[argparse.ArgumentParser],
) -> None:
    check = subparsers.add_parser(
        "check",
        help="Check a Go source file",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        parents=list(parents),
    )
    check.add_argument("file", type=pathlib.Path, help="Go source file to check.")
    check.add_argument(
        "--config",
        type=pathlib.Path,
        default=None,
        help="Configuration file; discovered from the file's directory when omitted.",
    )
    for name in ("build", "lint", "vet", "cover"):
        check.add_argument(
            f"--{name}",
            dest=f"{name}_on_save",
            action=argparse.BooleanOptionalAction,
            default=None,
            help=f"Enable or disable the {name} check (overrides configuration).",
        )
    check.add_argument("--linter", default=None, help="Linter executable to run for the lint check.")
    check.add_argument(
        "--timeout",
        dest="tool_timeout",
        type=_positive_seconds,
        default=None,
        help="Kill tools that run longer than this many seconds.",
    )
    check.add_argument(
        "--format",
        dest="output_format",
        choices=[fmt.value for fmt in OutputFormat],
        default=OutputFormat.TEXT.value,
        help="Output format for diagnostics.",
    )
    check.add_argument(
        "--show-log",
        action="store_true",
        help="Echo the tool run log to stderr as it is written.",
    )


def _register_init_command(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    *,
    parents: Sequence[argparse.ArgumentParser],
) -> None:
    init = subparsers.add_parser(
        "init",
        help="Generate a starter configuration file",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        parents=list(parents),
    )
    init.add_argument(
        "-s",
        "--save-as",
        dest="output",
        type=pathlib.Path,
        default=pathlib.Path("gocheck.toml"),
        help="Destination for the generated configuration file.",
    )
    init.add_argument("--force", action="store_true", help="Overwrite the output file if it already exists.")


def _handle_init(args: argparse.Namespace) -> int:
    return write_config_template(args.output, force=args.force)


def _handle_check(args: argparse.Namespace) -> int:
    target: pathlib.Path = args.file.absolute()
    try:
        loaded = load_config(args.config, start=target.parent)
    except ConfigValidationError as exc:
        echo(f"[gocheck] {exc}", err=True)
        return EXIT_FAILURE
    config = loaded.config.with_overrides(
        build_on_save=args.build_on_save,
        lint_on_save=args.lint_on_save,
        vet_on_save=args.vet_on_save,
        cover_on_save=args.cover_on_save,
        linter=args.linter,
        tool_timeout=args.tool_timeout,
    )
    if not config.any_enabled:
        logger.warning(
            "No checks enabled for %s",
            target,
            extra=structured_extra(component=LogComponent.CLI, path=target),
        )
    sink = StreamLogSink() if args.show_log else MemoryLogSink()
    try:
        diagnostics = check_sync(
            target,
            config,
            resolver=GoBinaryResolver(),
            notifier=LoggingNotifier(),
            sink=sink,
        )
    except ParseInternalError as exc:
        echo(f"[gocheck] {exc}", err=True)
        return EXIT_FAILURE
    rendered = render_diagnostics(diagnostics, OutputFormat(args.output_format))
    if rendered:
        echo(rendered)
    if any(diagnostic.severity is SeverityLevel.ERROR for diagnostic in diagnostics):
        return EXIT_FINDINGS
    return EXIT_OK


__all__ = ["CONFIG_TEMPLATE", "main", "write_config_template"]
