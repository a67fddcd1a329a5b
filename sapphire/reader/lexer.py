"""
sapphire.reader.lexer - Tokenizer for Sapphire source code

Splits source text into classified Tokens. Whitespace and ; line comments are
skipped; every other character belongs to exactly one token. Each token is
tagged with its TokenKind here so the reader never has to re-match literal
grammars.

Token grammar, in priority order:
- punctuation: ,@ ( ) ' ` ,
- numbers:     -12  0b1_01  0x1F  017  1.5e2  .5
- regexes:     /abc/i  %r{a/b}mx
- strings:     "a \\"quoted\\" word"
- identifiers: anything else up to a delimiter (#t and #f included)

Numbers, regexes and strings only count as such when the literal ends at a
token boundary; "12.3.4" and "1+" are identifiers.
"""

import re

from sapphire.reader.types import BadParse, Token, TokenKind, UnexpectedEof

# =============================================================================
# Token Grammar
# =============================================================================

# Characters that end an identifier (besides whitespace)
DELIMITERS = ";()'`,"

_BOUNDARY = r"(?=[\s;()'`,]|\Z)"

BINARY_DIGITS = r"[01](?:_?[01])*"
DECIMAL_DIGITS = r"[0-9](?:_?[0-9])*"
HEX_DIGITS = r"[0-9a-fA-F](?:_?[0-9a-fA-F])*"
OCTAL_DIGITS = r"(?:_?[0-7])+"

BINARY_NUMBER = rf"0[bB]{BINARY_DIGITS}"
HEX_NUMBER = rf"0[xX]{HEX_DIGITS}"
OCTAL_NUMBER = rf"0{OCTAL_DIGITS}"
DECIMAL_NUMBER = (
    rf"(?:{DECIMAL_DIGITS})?\.?{DECIMAL_DIGITS}(?:[eE][-+]?{DECIMAL_DIGITS})?"
)

NUMBER = (
    rf"[-+]?(?:{BINARY_NUMBER}|{HEX_NUMBER}|{OCTAL_NUMBER}|{DECIMAL_NUMBER})"
)

# /.../ may not open with whitespace, so "(/ 4 2)" keeps / as a symbol
REGEX = r"(?:/(?!\s)(?:\\.|[^\\/])*/|%r\{(?:\\.|[^\\}])*\})[imxo]*"

STRING = r'"(?:\\.|[^\\"])*"'

# "@" may appear inside an identifier but never start one
IDENTIFIER = r"""[^\s;()'`,"@][^\s;()'`,]*"""

PUNCTUATION = r",@|[()'`,]"

# Compiled once, never mutated
NUMBER_RE = re.compile(rf"{NUMBER}{_BOUNDARY}")
REGEX_RE = re.compile(rf"{REGEX}{_BOUNDARY}", re.DOTALL)
STRING_RE = re.compile(STRING, re.DOTALL)
IDENTIFIER_RE = re.compile(IDENTIFIER)
PUNCTUATION_RE = re.compile(PUNCTUATION)
IGNORED_RE = re.compile(r"(?:\s+|;[^\n]*)*")
BOUNDARY_RE = re.compile(_BOUNDARY)

# Whole-token checks, used when classifying text that did not come from
# tokenize() (e.g. the printer deciding how to render a symbol)
FULL_NUMBER_RE = re.compile(rf"{NUMBER}\Z")

_TOKEN_RULES = (
    (TokenKind.PUNCT, PUNCTUATION_RE),
    (TokenKind.NUMBER, NUMBER_RE),
    (TokenKind.REGEX, REGEX_RE),
    (TokenKind.IDENT, IDENTIFIER_RE),
)


# =============================================================================
# Tokenizer
# =============================================================================


def _describe_position(src: str, pos: int) -> str:
    line = src.count("\n", 0, pos) + 1
    col = pos - (src.rfind("\n", 0, pos) + 1)
    return f"line {line}, column {col}"


def _lex_string(src: str, pos: int) -> Token:
    m = STRING_RE.match(src, pos)
    if m is None:
        raise UnexpectedEof(
            f"unterminated string starting at {_describe_position(src, pos)}"
        )
    if not BOUNDARY_RE.match(src, m.end()):
        raise BadParse(
            f"unexpected text after string at {_describe_position(src, m.end())}"
        )
    return Token(TokenKind.STRING, m.group())


def tokenize(src: str) -> list[Token]:
    """
    Tokenize source code into a list of Tokens.

    Raises:
        UnexpectedEof: A string literal is still open at end of input.
        BadParse: Text at some position matches no token rule.
    """
    tokens = []
    pos = 0
    n = len(src)

    while True:
        pos = IGNORED_RE.match(src, pos).end()
        if pos >= n:
            break

        if src[pos] == '"':
            tok = _lex_string(src, pos)
            tokens.append(tok)
            pos += len(tok.text)
            continue

        for kind, pattern in _TOKEN_RULES:
            m = pattern.match(src, pos)
            if m is not None:
                tokens.append(Token(kind, m.group()))
                pos = m.end()
                break
        else:
            raise BadParse(
                f"unexpected character {src[pos]!r} at {_describe_position(src, pos)}"
            )

    return tokens


def is_number_text(text: str) -> bool:
    """Return True if text is, in its entirety, a number literal."""
    return FULL_NUMBER_RE.match(text) is not None


__all__ = [
    "DELIMITERS",
    "NUMBER_RE",
    "REGEX_RE",
    "STRING_RE",
    "IDENTIFIER_RE",
    "tokenize",
    "is_number_text",
]
