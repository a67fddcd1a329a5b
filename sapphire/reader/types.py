"""
sapphire.reader.types - Core type definitions for the Sapphire reader

This module contains the types shared by the lexer, the reader and the REPL:
- Symbol: Represents symbolic identifiers in Sapphire code
- RegexFlag: Option bits carried by a regular expression literal
- RegexLiteral: A decoded /.../ or %r{...} literal
- TokenKind / Token: Lexically classified slices of source text
- ParseError, UnexpectedEof, BadParse: Errors raised while reading

Every other form is a plain Python value: tuples for lists (the empty tuple
is nil), bool, int, float and str.
"""

import enum
import functools
import re
from dataclasses import dataclass


class ParseError(SyntaxError):
    """Base class for errors raised while reading Sapphire source."""

    pass


class UnexpectedEof(ParseError):
    """Raised when the input ends before a form is complete.

    Appending more text to the input may complete the form, so interactive
    callers should read another line and try again.
    """

    def __init__(self, msg: str = "unexpected end of input"):
        super().__init__(msg)


class BadParse(ParseError):
    """Raised when the input is malformed regardless of what follows it."""

    def __init__(self, msg: str = "malformed input"):
        super().__init__(msg)


@dataclass(frozen=True)
class Symbol:
    """
    Represents a symbolic identifier in Sapphire code.

    Symbols compare equal and hash by name, so two reads of the same
    identifier produce interchangeable values.

    Attributes:
        name: The verbatim, case-sensitive identifier text
    """

    name: str

    def __repr__(self):
        return self.name

    def __str__(self):
        return self.name


# Reserved symbols produced by the reader itself
BEGIN = Symbol("begin")
QUOTE = Symbol("quote")
QUASIQUOTE = Symbol("quasiquote")
UNQUOTE = Symbol("unquote")
UNQUOTE_SPLICING = Symbol("unquote-splicing")


class RegexFlag(enum.IntFlag):
    """Option bits of a regex literal (same bit values as Ruby's Regexp)."""

    NONE = 0
    IGNORECASE = 1
    EXTENDED = 2
    MULTILINE = 4


# Flag character -> option bit. Unlisted characters (legacy "o") are no-ops.
REGEX_FLAG_CHARS = {
    "i": RegexFlag.IGNORECASE,
    "m": RegexFlag.MULTILINE,
    "x": RegexFlag.EXTENDED,
}


@functools.lru_cache(maxsize=256)
def _compile_regex(pattern: str, flags: RegexFlag) -> "re.Pattern[str]":
    py_flags = 0
    if flags & RegexFlag.IGNORECASE:
        py_flags |= re.IGNORECASE
    if flags & RegexFlag.MULTILINE:
        py_flags |= re.MULTILINE | re.DOTALL
    if flags & RegexFlag.EXTENDED:
        py_flags |= re.VERBOSE
    return re.compile(pattern, py_flags)


@dataclass(frozen=True)
class RegexLiteral:
    """
    A decoded regular expression literal.

    The pattern is kept exactly as written between the delimiters; escape
    sequences are interpreted by the regex engine, not by the reader.

    Example:
        /a\\/b/ix  -> RegexLiteral("a\\/b", IGNORECASE | EXTENDED)
    """

    pattern: str
    flags: RegexFlag = RegexFlag.NONE

    @property
    def ignorecase(self) -> bool:
        return bool(self.flags & RegexFlag.IGNORECASE)

    @property
    def multiline(self) -> bool:
        return bool(self.flags & RegexFlag.MULTILINE)

    @property
    def extended(self) -> bool:
        return bool(self.flags & RegexFlag.EXTENDED)

    @property
    def flag_chars(self) -> str:
        """The flags rendered back to their source characters, in 'imx' order."""
        return "".join(ch for ch, bit in REGEX_FLAG_CHARS.items() if self.flags & bit)

    def compile(self) -> "re.Pattern[str]":
        """Compile to a Python pattern (cached)."""
        return _compile_regex(self.pattern, self.flags)

    def __repr__(self):
        return f"RegexLiteral({self.pattern!r}, {self.flag_chars!r})"


class TokenKind(enum.Enum):
    """Lexical class of a token, assigned once by the lexer."""

    PUNCT = "punct"
    NUMBER = "number"
    REGEX = "regex"
    STRING = "string"
    IDENT = "ident"


@dataclass(frozen=True)
class Token:
    """A classified slice of source text. Tokens carry no position."""

    kind: TokenKind
    text: str

    def __repr__(self):
        return f"Token({self.text!r}, {self.kind.name})"

    def __str__(self):
        return self.text


__all__ = [
    "ParseError",
    "UnexpectedEof",
    "BadParse",
    "Symbol",
    "BEGIN",
    "QUOTE",
    "QUASIQUOTE",
    "UNQUOTE",
    "UNQUOTE_SPLICING",
    "RegexFlag",
    "REGEX_FLAG_CHARS",
    "RegexLiteral",
    "TokenKind",
    "Token",
]
