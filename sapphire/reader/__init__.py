"""
sapphire.reader - The Sapphire Reader

This package turns Sapphire source text into immutable forms.

Phases:
1. Lex (lexer.py): Text -> classified Tokens
2. Read (reader.py): Tokens -> forms, decoding literals via literals.py
"""

from sapphire.reader.lexer import is_number_text, tokenize
from sapphire.reader.literals import (
    decode_number,
    decode_regex,
    decode_string,
    parse_regex_flags,
)
from sapphire.reader.reader import (
    KEYWORDS,
    QUOTE_FORMS,
    Reader,
    is_complete,
    parse,
    parse_single_form,
)
from sapphire.reader.types import (
    BEGIN,
    QUASIQUOTE,
    QUOTE,
    UNQUOTE,
    UNQUOTE_SPLICING,
    BadParse,
    ParseError,
    RegexFlag,
    RegexLiteral,
    Symbol,
    Token,
    TokenKind,
    UnexpectedEof,
)

__all__ = [
    # Lexer
    "tokenize",
    "is_number_text",
    # Literals
    "decode_number",
    "decode_regex",
    "decode_string",
    "parse_regex_flags",
    # Reader
    "Reader",
    "parse",
    "parse_single_form",
    "is_complete",
    "KEYWORDS",
    "QUOTE_FORMS",
    # Types
    "Symbol",
    "RegexFlag",
    "RegexLiteral",
    "Token",
    "TokenKind",
    "BEGIN",
    "QUOTE",
    "QUASIQUOTE",
    "UNQUOTE",
    "UNQUOTE_SPLICING",
    # Errors
    "ParseError",
    "UnexpectedEof",
    "BadParse",
]
