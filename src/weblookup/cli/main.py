"""Command-line interface for weblookup."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from rich.console import Console
from rich.table import Table

from weblookup.backends.base import EXIT_FAILURE, EXIT_OK, InvocationMode
from weblookup.backends.hooks import HookRegistry
from weblookup.backends.manager import BackendManager
from weblookup.cli.completion import (
    COMPLETION_SHELLS,
    backend_name_completer,
    build_completion_script,
    enable_argcomplete,
    is_completing,
    option_completer,
)
from weblookup.config import general_settings, load_config
from weblookup.config.styles import StyleError, StyleStore, set_style
from weblookup.dispatcher import Dispatcher
from weblookup.launcher import Launcher
from weblookup.logger import setup_logging

PROGRAM_NAME = "lookup"
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    """Everything one CLI run needs after configuration is loaded."""

    config: Dict[str, Any]
    dispatcher: Dispatcher
    manager: BackendManager


def build_runtime(config: Dict[str, Any], config_dir: Optional[Path] = None) -> Runtime:
    """Load backends from the roster and wire them into a dispatcher."""
    general = general_settings(config)
    hooks = HookRegistry()
    manager = BackendManager(config, hook_registry=hooks, config_dir=config_dir)
    manager.load_roster()
    manager.discover_and_import()
    manager.activate_all()

    dispatcher = Dispatcher(
        StyleStore.from_config(config),
        Launcher(general["browser"]),
        hooks,
    )
    manager.register_into(dispatcher)
    return Runtime(config=config, dispatcher=dispatcher, manager=manager)


def _add_global_arguments(
    parser: argparse.ArgumentParser, dispatcher: Optional[Dispatcher] = None
) -> None:
    help_action = parser.add_argument(
        "-h",
        "--help",
        dest="help_backend",
        nargs="?",
        const="",
        metavar="BACKEND",
        help="Show this help, or the help of BACKEND.",
    )
    if dispatcher is not None:
        help_action.completer = backend_name_completer(dispatcher.names())
    parser.add_argument(
        "-L",
        "--list",
        action="store_true",
        help="List available backends with a one-line description each.",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Show load status of every backend in the roster.",
    )
    parser.add_argument(
        "-c",
        "--context",
        metavar="REFINEMENT",
        help="Resolve styles in :lookup:REFINEMENT:<backend>: instead of -default-.",
    )
    parser.add_argument(
        "--style",
        nargs=3,
        metavar=("PATTERN", "KEY", "VALUE"),
        help="Persist a style, e.g. --style ':lookup:*:leo:*' language frde",
    )
    parser.add_argument(
        "--completion-script",
        choices=COMPLETION_SHELLS,
        help="Print the shell completion setup snippet.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log at DEBUG level.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Parser for normal runs; backend arguments are passed through untouched."""
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Look things up with pluggable web backends.",
        formatter_class=argparse.RawTextHelpFormatter,
        add_help=False,
    )
    _add_global_arguments(parser)
    parser.add_argument("backend", nargs="?", help="Backend to run.")
    parser.add_argument(
        "backend_args",
        nargs=argparse.REMAINDER,
        metavar="ARGS",
        help="Options and query for the backend.",
    )
    return parser


def build_completion_parser(dispatcher: Dispatcher) -> argparse.ArgumentParser:
    """Parser mirroring every backend's option schema, for argcomplete."""
    parser = argparse.ArgumentParser(prog=PROGRAM_NAME, add_help=False)
    _add_global_arguments(parser, dispatcher)
    subparsers = parser.add_subparsers(dest="backend")
    for name in dispatcher.names():
        backend = dispatcher.get(name)
        registry = dispatcher.completions_for(name)
        subparser = subparsers.add_parser(
            name, help=dispatcher.describe(name), add_help=False
        )
        for spec in backend.options:
            if spec.takes_value:
                action = subparser.add_argument(
                    spec.flag, metavar=spec.metavar, help=spec.help
                )
            else:
                action = subparser.add_argument(
                    spec.flag, action="store_true", help=spec.help
                )
            if spec.flag in registry.flags():
                action.completer = option_completer(registry, spec.flag)
        subparser.add_argument("query", nargs="*")
    return parser


def print_backend_list(dispatcher: Dispatcher) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Backend", style="cyan", no_wrap=True)
    table.add_column("Description")
    for name, description in dispatcher.describe_all():
        table.add_row(name, description)
    console.print(table)


def print_backend_status(manager: BackendManager) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Backend", style="cyan", no_wrap=True)
    table.add_column("Enabled")
    table.add_column("State")
    table.add_column("Message")
    for status in manager.list_status():
        table.add_row(
            status.name,
            "yes" if status.enabled else "no",
            status.state,
            status.message,
        )
    console.print(table)


def run(argv: Optional[Sequence[str]] = None, config_dir: Optional[Path] = None) -> int:
    """Run one CLI command and return its exit status."""
    config = load_config(config_dir)
    general = general_settings(config)
    setup_logging(
        general["log_level"], general["log_file"], archive=not is_completing()
    )

    try:
        runtime = build_runtime(config, config_dir)
    except StyleError as exc:
        err_console.print(f"[red]Error:[/red] invalid styles configuration: {exc}")
        return EXIT_FAILURE
    dispatcher = runtime.dispatcher

    if is_completing():
        enable_argcomplete(build_completion_parser(dispatcher))

    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.completion_script:
        print(build_completion_script(args.completion_script))
        return EXIT_OK

    if args.style:
        pattern, key, value = args.style
        try:
            path = set_style(pattern, key, value, config_dir=config_dir)
        except StyleError as exc:
            err_console.print(f"[red]Error:[/red] {exc}")
            return EXIT_FAILURE
        console.print(f"Saved style {pattern} {key}={value!r} to {path}")
        return EXIT_OK

    if args.list:
        print_backend_list(dispatcher)
        return EXIT_OK

    if args.status:
        print_backend_status(runtime.manager)
        return EXIT_OK

    if args.help_backend is not None:
        if not args.help_backend:
            parser.print_help()
            return EXIT_OK
        return dispatcher.dispatch(
            args.help_backend, InvocationMode.HELP, refinement=args.context
        )

    if not args.backend:
        parser.print_usage(sys.stderr)
        err_console.print("Run 'lookup -L' to list backends.")
        return EXIT_FAILURE

    backend_args = list(args.backend_args)
    if backend_args[:1] in (["-h"], ["--help"]):
        return dispatcher.dispatch(
            args.backend, InvocationMode.HELP, refinement=args.context
        )

    return dispatcher.dispatch(
        args.backend,
        InvocationMode.EXECUTE,
        backend_args,
        refinement=args.context,
    )


def main() -> None:
    """Main entry point."""
    sys.exit(run())
