"""
sapphire.cli - Sapphire Command Line Interface

This module provides the command line entry point for the Sapphire reader:

- sapphire                Read forms from stdin, line by line (REPL on a tty)
- sapphire repl           Start the interactive REPL
- sapphire <file>...      Read forms from files, line by line
- sapphire -c <code>      Read code given on the command line
- sapphire -w [file...]   Read whole files (or stdin) in one go

Every completed program is printed back in Sapphire syntax.
"""

import argparse
import fileinput
import sys
import traceback
from typing import Optional

# Known subcommands - used to differentiate from file arguments
SUBCOMMANDS = {"repl"}


def _load_config(args: argparse.Namespace):
    from sapphire.config import ReplConfig

    config = ReplConfig.load(args.config)
    if args.max_depth is not None:
        config.max_depth = args.max_depth
    if args.no_pretty:
        config.pretty = False
    return config


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def _report(e: Exception, verbose: bool) -> int:
    print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
    if verbose:
        traceback.print_exc(file=sys.stderr)
    return 1


def cmd_repl(args: argparse.Namespace) -> int:
    """Start the interactive REPL."""
    from sapphire.repl import ReplBackend, create_repl

    config = _load_config(args)
    repl_instance = create_repl(
        mode="terminal", backend=ReplBackend(config), verbose=args.verbose
    )
    return repl_instance.run()


def cmd_stream(args: argparse.Namespace) -> int:
    """Read forms line by line from files, or stdin when none are given."""
    from sapphire.repl import ReplBackend, create_repl, source_is_tty

    config = _load_config(args)
    backend = ReplBackend(config)

    if not args.files:
        if source_is_tty(sys.stdin) and source_is_tty(sys.stdout):
            return create_repl(
                mode="terminal", backend=backend, verbose=args.verbose
            ).run()
        return create_repl(
            mode="stream", source=sys.stdin, backend=backend, verbose=args.verbose
        ).run()

    with fileinput.input(files=args.files, encoding="utf-8") as source:
        return create_repl(
            mode="stream",
            source=source,
            tty=False,
            backend=backend,
            verbose=args.verbose,
        ).run()


def cmd_exec_code(code: str, args: argparse.Namespace) -> int:
    """Read code given on the command line."""
    from sapphire.reader import ParseError
    from sapphire.repl import read_noninteractive

    config = _load_config(args)
    try:
        read_noninteractive(code, single=args.single, config=config)
    except ParseError as e:
        return _report(e, args.verbose)
    return 0


def cmd_whole(args: argparse.Namespace) -> int:
    """Read all input as one buffer."""
    if args.files:
        chunks = []
        for path in args.files:
            if path == "-":
                chunks.append(sys.stdin.read())
                continue
            with open(path, encoding="utf-8") as f:
                chunks.append(f.read())
        code = "".join(chunks)
    else:
        code = sys.stdin.read()
    return cmd_exec_code(code, args)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sapphire",
        description="Sapphire - read Lisp forms and print them back",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  sapphire                      Read from stdin (interactive on a terminal)
  sapphire repl                 Start interactive REPL (explicit)
  sapphire forms.sap            Read forms from a file
  sapphire -c "'(1 2)"          Read code directly
  sapphire -w -s forms.sap      Read only the first form of a whole file
        """,
    )

    parser.add_argument(
        "-c",
        "--command",
        metavar="CODE",
        help="Read Sapphire code directly (like python -c)",
    )

    parser.add_argument(
        "-w",
        "--whole",
        action="store_true",
        help="Read all input as one buffer instead of line by line",
    )

    parser.add_argument(
        "-s",
        "--single",
        action="store_true",
        help="With -c or -w, read only the first form and ignore the rest",
    )

    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Config file or directory (default: nearest .sapphirerc)",
    )

    parser.add_argument(
        "--max-depth",
        type=_positive_int,
        default=None,
        help="Maximum nesting depth of forms (default: no limit)",
    )

    parser.add_argument(
        "--no-pretty",
        action="store_true",
        help="Print every program on a single line",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print tracebacks for errors",
    )

    parser.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="Files to read ('-' for stdin), or 'repl' for the interactive REPL",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the Sapphire CLI. Calls sys.exit with return code."""
    sys.exit(_main(argv))


def _main(argv: Optional[list[str]] = None) -> int:
    """Internal main that returns exit code."""
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    # `sapphire repl` starts the REPL; any other positional is a file
    args.subcommand = None
    if len(args.files) == 1 and args.files[0] in SUBCOMMANDS:
        args.subcommand = args.files.pop()

    try:
        if args.subcommand == "repl":
            return cmd_repl(args)

        if args.command is not None:
            return cmd_exec_code(args.command, args)

        if args.whole:
            return cmd_whole(args)

        return cmd_stream(args)
    except (OSError, ValueError) as e:
        return _report(e, args.verbose)


if __name__ == "__main__":
    main()
