"""The clicore console script."""

from __future__ import annotations

import argparse
import sys

import shtab

from .interpreter import Interpreter
from .logging_setup import get_logger, init_logger
from .models import ClicoreError, ExitCode
from .repl import Repl

__all__ = ["get_parser", "main"]

TOML_FILE = {
    "bash": "_shtab_clicore_compgen_TOMLFiles",
    "zsh": "_files -g '(*.toml|*.TOML)'",
    "tcsh": "f:*.toml",
}

PREAMBLE = {
    "bash": """
# $1=COMP_WORDS[1]
_shtab_clicore_compgen_TOMLFiles() {
  compgen -d -- $1  # recurse into subdirs
  compgen -f -X '!*?.toml' -- $1
  compgen -f -X '!*?.TOML' -- $1
}
""",
    "zsh": "",
    "tcsh": "",
}


def get_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(prog="clicore", description="Interactive command line", allow_abbrev=False)
    parser.add_argument(
        "--debug",
        help="Enable debug mode and log to a file",
        metavar="filename",
    ).complete = shtab.FILE  # type: ignore[attr-defined]
    parser.add_argument(
        "--config",
        help="Use a different configuration file",
        metavar="filename",
    ).complete = TOML_FILE  # type: ignore[attr-defined]
    parser.add_argument(
        "-ex",
        dest="commands",
        action="append",
        default=[],
        metavar="COMMAND",
        help="Execute a single command, may be repeated",
    )
    parser.add_argument(
        "--batch",
        action="store_true",
        help="Exit after running the -ex commands",
    )
    shtab.add_argument_to(parser, preamble=PREAMBLE)
    return parser


def run(args: argparse.Namespace) -> ExitCode:
    """Run a session according to the parsed `args`."""
    log = get_logger("startup")
    interpreter = Interpreter()
    try:
        interpreter.load_config(args.config or "", required=bool(args.config))
    except ClicoreError:
        log.critical("Configuration failed.")
        return ExitCode.CONFIG_ERROR

    repl = Repl(interpreter)
    for command in args.commands:
        code = repl.run_line(command, from_tty=not args.batch)
        if code is not None:
            return code
        if repl.failed and args.batch:
            return ExitCode.USAGE_ERROR

    if args.batch:
        return ExitCode.SUCCESS
    return repl.run()


def main(argv: list[str] | None = None) -> None:
    """Run the command."""
    args = get_parser().parse_args(argv)
    if args.debug:
        init_logger(filename=args.debug, force_debug=True)
    else:
        init_logger()

    try:
        code = run(args)
    except KeyboardInterrupt:
        code = ExitCode.SUCCESS
    sys.exit(code)


if __name__ == "__main__":
    main()
