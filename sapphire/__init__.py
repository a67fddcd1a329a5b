"""
sapphire - A reader for the Sapphire Lisp surface syntax

Converts source text into immutable forms (tuples, Symbols, numbers,
strings, booleans and RegexLiterals) and prints them back.

    >>> from sapphire import parse, parse_single_form
    >>> parse("'(1 2)")
    (begin, (quote, (1, 2)))
    >>> parse_single_form("0x1F")
    31
"""

from sapphire.reader import (
    BadParse,
    ParseError,
    Reader,
    RegexFlag,
    RegexLiteral,
    Symbol,
    Token,
    TokenKind,
    UnexpectedEof,
    is_complete,
    parse,
    parse_single_form,
    tokenize,
)

__version__ = "0.1.0"

__all__ = [
    "parse",
    "parse_single_form",
    "is_complete",
    "tokenize",
    "Reader",
    "Symbol",
    "RegexFlag",
    "RegexLiteral",
    "Token",
    "TokenKind",
    "ParseError",
    "UnexpectedEof",
    "BadParse",
    "__version__",
]
