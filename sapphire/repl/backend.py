"""
Sapphire REPL - A read-print loop with pluggable frontends.

The backend buffers input line by line and asks the reader for a program
after every line. When the reader reports UnexpectedEof the line is kept and
the frontend asks for more; any other outcome clears the buffer.
"""

import json
import math
import re
import sys
import traceback
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, TextIO

from sapphire.config import ReplConfig
from sapphire.reader import (
    ParseError,
    RegexLiteral,
    Symbol,
    UnexpectedEof,
    parse,
    parse_single_form,
)


class ResultType(Enum):
    """Type of result returned from reading a buffer."""

    VALUE = "value"
    ERROR = "error"
    INCOMPLETE = "incomplete"
    EMPTY = "empty"


@dataclass
class ReadResult:
    """Result of feeding input to the REPL."""

    type: ResultType
    value: Any = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    traceback: Optional[str] = None

    def is_success(self) -> bool:
        return self.type == ResultType.VALUE or self.type == ResultType.EMPTY

    def is_error(self) -> bool:
        return self.type == ResultType.ERROR

    def is_incomplete(self) -> bool:
        return self.type == ResultType.INCOMPLETE


def _error_result(e: Exception) -> ReadResult:
    return ReadResult(
        type=ResultType.ERROR,
        error=str(e),
        error_type=type(e).__name__,
        traceback=traceback.format_exc(),
    )


class ReplBackend:
    """
    Core REPL logic shared by all frontends.

    Holds the text read so far for the form being entered. Each call to
    read_with_buffer() re-reads the whole buffer, so a form may span any
    number of lines.
    """

    def __init__(self, config: Optional[ReplConfig] = None):
        self.config = config or ReplConfig()
        self.buffer = ""

    def read(self, code: str) -> ReadResult:
        """Read code as a complete program."""
        try:
            program = parse(code, max_depth=self.config.max_depth)
        except UnexpectedEof:
            return ReadResult(type=ResultType.INCOMPLETE)
        except ParseError as e:
            return _error_result(e)

        if len(program) == 1:
            return ReadResult(type=ResultType.EMPTY)
        return ReadResult(type=ResultType.VALUE, value=program)

    def read_with_buffer(self, line: str) -> ReadResult:
        """
        Add a line to the buffer and try to read it.

        Args:
            line: A line of input, with or without its trailing newline.

        Returns:
            A ReadResult. If incomplete, the buffer is kept for the next line.
        """
        self.buffer += line if line.endswith("\n") else line + "\n"

        result = self.read(self.buffer)
        if not result.is_incomplete():
            self.buffer = ""
        return result

    def finish(self) -> Optional[ReadResult]:
        """
        Report input left over at end of input, if any.

        Returns:
            An ERROR result when an incomplete form is still buffered.
        """
        if not self.buffer.strip():
            self.buffer = ""
            return None
        code = self.buffer
        self.buffer = ""
        try:
            parse(code, max_depth=self.config.max_depth)
        except ParseError as e:
            return _error_result(e)
        return None

    def reset_buffer(self):
        """Clear the input buffer."""
        self.buffer = ""

    @property
    def prompt(self) -> str:
        """The prompt for the next line: fresh form or continuation."""
        if self.buffer:
            return self.config.continuation_prompt
        return self.config.prompt


class ReplFrontend(ABC):
    """
    Abstract base class for REPL frontends.

    Subclasses implement run(), which returns a process exit status.
    """

    def __init__(
        self,
        backend: Optional[ReplBackend] = None,
        output: Optional[TextIO] = None,
        errors: Optional[TextIO] = None,
        verbose: bool = False,
    ):
        self.backend = backend or ReplBackend()
        self.output = output or sys.stdout
        self.errors = errors or sys.stderr
        self.verbose = verbose
        self.error_count = 0

    @property
    def config(self) -> ReplConfig:
        return self.backend.config

    def print_result(self, result: ReadResult):
        """Print a read result."""
        if result.is_error():
            self.error_count += 1
            print(f"Error: {result.error_type}: {result.error}", file=self.errors)
            if result.traceback and self.verbose:
                print(result.traceback, file=self.errors)
        elif result.type == ResultType.VALUE:
            print(format_form(result.value, pretty=self.config.pretty), file=self.output)

    def finish(self):
        """Flush any leftover input at end of input."""
        leftover = self.backend.finish()
        if leftover is not None:
            self.print_result(leftover)

    @abstractmethod
    def run(self) -> int:
        """Run the REPL frontend."""
        pass


def source_is_tty(source: Any) -> bool:
    """Return True if a line source is attached to a terminal."""
    isatty = getattr(source, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        # closed file
        return False


class StreamRepl(ReplFrontend):
    """
    REPL over any iterable of lines (stdin, files, fileinput).

    Prompts are written only when the source is a terminal, so piping a file
    through the REPL prints just the programs it contains.
    """

    def __init__(
        self,
        source: Iterable[str],
        tty: Optional[bool] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.source = source
        self.tty = source_is_tty(source) if tty is None else tty

    def show_prompt(self):
        if self.tty:
            print(self.backend.prompt, end="", file=self.output, flush=True)

    def run(self) -> int:
        """Read and print forms until the source is exhausted."""
        self.show_prompt()
        for line in self.source:
            result = self.backend.read_with_buffer(line)
            self.print_result(result)
            self.show_prompt()

        if self.tty:
            print(file=self.output)
        self.finish()
        return 1 if self.error_count else 0


class TerminalRepl(ReplFrontend):
    """
    Terminal-based REPL frontend with readline support.
    """

    def __init__(self, backend: Optional[ReplBackend] = None, **kwargs):
        super().__init__(backend, **kwargs)
        self.setup_readline()

    def setup_readline(self):
        """Setup readline history if it is available and enabled."""
        self.readline = None
        history_file = self.config.history_file
        if not history_file:
            return
        try:
            import readline
        except ImportError:
            return

        self.readline = readline
        try:
            readline.read_history_file(history_file)
        except FileNotFoundError:
            pass

        import atexit

        atexit.register(lambda: readline.write_history_file(history_file))

    def run(self) -> int:
        """Run the terminal REPL."""
        print("Sapphire reader REPL. Ctrl-D to exit.", file=self.output)

        while True:
            try:
                line = input(self.backend.prompt)
            except EOFError:
                print(file=self.output)
                break
            except KeyboardInterrupt:
                print(file=self.output)
                self.backend.reset_buffer()
                continue

            if not line.strip() and not self.backend.buffer:
                continue

            self.print_result(self.backend.read_with_buffer(line))

        self.finish()
        return 0


def read_noninteractive(
    code: str,
    output: Optional[TextIO] = None,
    single: bool = False,
    config: Optional[ReplConfig] = None,
) -> Any:
    """
    Read a whole buffer at once and print the result.

    Raises:
        ParseError: If code is incomplete or malformed.
    """
    config = config or ReplConfig()
    if single:
        form = parse_single_form(code, max_depth=config.max_depth)
    else:
        form = parse(code, max_depth=config.max_depth)
    print(format_form(form, pretty=config.pretty), file=output or sys.stdout)
    return form


# =============================================================================
# Printer
# =============================================================================

# Threshold for breaking a list onto multiple lines
_LINE_LENGTH_THRESHOLD = 60

# A / not preceded by an odd run of backslashes
_BARE_SLASH_RE = re.compile(r"(?<!\\)(?:\\\\)*/")


def format_form(form: Any, indent: int = 0, pretty: bool = False) -> str:
    """
    Format a form as Sapphire source (printer).

    The output reads back to an equal form.

    Args:
        form: The form to format.
        indent: Current indentation level.
        pretty: Whether to break long lists over several lines.
    """
    return _format_form(form, indent, pretty)


def _format_form(form: Any, indent: int = 0, pretty: bool = False) -> str:
    """Internal formatting function."""
    if isinstance(form, bool):
        return "#t" if form else "#f"
    elif isinstance(form, str):
        return json.dumps(form, ensure_ascii=False)
    elif isinstance(form, Symbol):
        return form.name
    elif isinstance(form, RegexLiteral):
        return _format_regex(form)
    elif isinstance(form, tuple):
        return _format_list(form, indent, pretty)
    elif isinstance(form, float) and math.isinf(form):
        # overflows back to inf when read
        return "1e999" if form > 0 else "-1e999"
    elif isinstance(form, (int, float)):
        return repr(form)
    else:
        return str(form)


def _format_regex(rx: RegexLiteral) -> str:
    body = rx.pattern
    if body[:1].isspace() or _BARE_SLASH_RE.search(body):
        return f"%r{{{body}}}{rx.flag_chars}"
    return f"/{body}/{rx.flag_chars}"


def _format_list(form: tuple, indent: int, pretty: bool) -> str:
    """Format a list, breaking it after the head when it is too long."""
    if not form:
        return "()"

    single_line = "(" + " ".join(_format_form(f, 0, False) for f in form) + ")"
    if not pretty or len(single_line) + indent <= _LINE_LENGTH_THRESHOLD:
        return single_line

    child_indent = indent + 2
    pad = " " * child_indent
    head = _format_form(form[0], child_indent, pretty)
    rest = [pad + _format_form(f, child_indent, pretty) for f in form[1:]]
    if not rest:
        return f"({head})"
    return f"({head}\n" + "\n".join(rest) + ")"


def create_repl(mode: str = "terminal", **kwargs) -> ReplFrontend:
    """
    Factory function to create a REPL frontend.

    Args:
        mode: The mode of REPL to create ("terminal" or "stream").
        **kwargs: Additional arguments to pass to the frontend.

    Returns:
        A ReplFrontend instance.
    """
    if mode == "terminal":
        return TerminalRepl(**kwargs)
    elif mode == "stream":
        return StreamRepl(**kwargs)
    else:
        raise ValueError(f"Unknown REPL mode: {mode}")
