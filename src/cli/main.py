"""
Cue Command Line Entry Point.

Watches paths and re-runs a command on every change.
Requires Python 3.11+.

Usage:
    cue -w src tests -r "pytest -x"
"""

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from runner.command import Command
from runner.sink import StatusSink, TerminalSink
from runner.supervisor import RunSupervisor
from utils.config import get_settings
from utils.errors import CueError, PathNotFoundError
from utils.logger import configure_logging, get_logger
from watcher.path_watcher import PathWatcher

logger = get_logger("cue")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser, defaults taken from settings."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="cue",
        description="Automate your workflow - watch files, run commands, stay in flow.",
    )
    parser.add_argument(
        "-w",
        "--watch",
        nargs="+",
        default=[],
        metavar="PATH",
        help="Files or directories to watch recursively",
    )
    parser.add_argument("-r", "--run", help="Command to run on every change")
    parser.add_argument(
        "-d",
        "--debounce",
        type=int,
        default=settings.runner.debounce_ms,
        metavar="MS",
        help="Ignore changes closer than this to the last restart (default: %(default)s)",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=settings.runner.quiet,
        help="Only print errors",
    )
    parser.add_argument(
        "-n",
        "--no-clear",
        action="store_true",
        default=settings.runner.no_clear,
        help="Print a separator instead of clearing the screen",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {settings.app_version}",
    )
    return parser


def prepare(watch: Sequence[str], run: str, sink: StatusSink) -> tuple[list[Path], Command]:
    """
    Resolve and validate the inputs of the watch loop.

    Nothing is watched or spawned until every check has passed.

    Args:
        watch: Paths to watch
        run: Shell-style command string
        sink: Receives progress of the checks

    Returns:
        Watch roots and the parsed command

    Raises:
        CueError: On the first failed precondition
    """
    command = Command.parse(run)
    paths = [Path(p) for p in watch]

    sink.checking_paths()
    for path in paths:
        if not path.exists():
            raise PathNotFoundError(path)
        sink.path_ok(path)

    sink.checking_command()
    command.resolve()
    sink.command_ok(command.executable)

    return paths, command


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    configure_logging()
    settings = get_settings()

    args = build_parser().parse_args(argv)
    sink = TerminalSink(quiet=args.quiet)

    if not args.watch:
        sink.error("please provide paths with -w")
        return 1
    if args.run is None:
        sink.error("please provide a command with -r")
        return 1
    if args.debounce < 0:
        sink.error("debounce must not be negative")
        return 1

    try:
        paths, command = prepare(args.watch, args.run, sink)
        watcher = PathWatcher(paths, settings.runner.health_check_interval)
        watcher.start()
    except CueError as e:
        logger.debug("setup_failed", error=str(e))
        sink.error(str(e))
        return 1

    supervisor = RunSupervisor(
        command,
        sink,
        debounce_ms=args.debounce,
        no_clear=args.no_clear,
    )

    try:
        supervisor.run(watcher)
    except CueError as e:
        sink.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("interrupted")
    finally:
        supervisor.stop()
        watcher.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
