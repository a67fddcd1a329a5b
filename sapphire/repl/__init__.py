"""
sapphire.repl - Read-print loops

This package provides the interactive side of the reader:

Modules:
- backend.py: Line buffering, result types, frontends and the printer

The REPL supports:
- Multi-line input (incomplete forms prompt for continuation)
- Prompts only when attached to a terminal
- History (terminal mode, via readline)
"""

# Re-export from backend
from sapphire.repl.backend import (
    ReadResult,
    ReplBackend,
    ReplFrontend,
    ResultType,
    StreamRepl,
    TerminalRepl,
    create_repl,
    format_form,
    read_noninteractive,
    source_is_tty,
)

__all__ = [
    # Backend
    "ReplBackend",
    "ReplFrontend",
    "StreamRepl",
    "TerminalRepl",
    "ReadResult",
    "ResultType",
    "create_repl",
    "read_noninteractive",
    "source_is_tty",
    # Printer
    "format_form",
]
