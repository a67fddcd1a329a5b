"""
sapphire.reader.reader - Recursive-descent Reader for Sapphire source code

Converts the token list produced by sapphire.reader.lexer into forms:
- ( ... )        -> tuple of forms
- nil            -> ()
- #t / #f        -> True / False
- 'x `x ,x ,@x   -> (quote x) (quasiquote x) (unquote x) (unquote-splicing x)
- literals       -> int / float / str / RegexLiteral
- anything else  -> Symbol

Entry points:
- parse(): every form in the buffer, wrapped as (begin form...)
- parse_single_form(): the first form only; trailing tokens are ignored
- is_complete(): whether more input could still change the outcome
"""

from typing import Any, Optional

from sapphire.reader.lexer import tokenize
from sapphire.reader.literals import decode_number, decode_regex, decode_string
from sapphire.reader.types import (
    BEGIN,
    QUASIQUOTE,
    QUOTE,
    UNQUOTE,
    UNQUOTE_SPLICING,
    BadParse,
    Symbol,
    Token,
    TokenKind,
    UnexpectedEof,
)

# Reader macro punctuation -> head symbol of the wrapping list
QUOTE_FORMS = {
    "'": QUOTE,
    "`": QUASIQUOTE,
    ",": UNQUOTE,
    ",@": UNQUOTE_SPLICING,
}

# Identifiers with a fixed meaning
KEYWORDS = {
    "nil": (),
    "#t": True,
    "#f": False,
}

_DECODERS = {
    TokenKind.NUMBER: decode_number,
    TokenKind.REGEX: decode_regex,
    TokenKind.STRING: decode_string,
}


# =============================================================================
# Reader
# =============================================================================


class Reader:
    """
    Reader that parses a token list into forms.

    The token list is never modified; the reader only advances a cursor, so
    a Reader can be inspected after a read to see how much it consumed.
    """

    def __init__(self, tokens: list[Token], max_depth: Optional[int] = None):
        self.tokens = tokens
        self.i = 0
        self.depth = 0
        self.max_depth = max_depth

    def eof(self) -> bool:
        return self.i >= len(self.tokens)

    def peek(self) -> Optional[Token]:
        if self.eof():
            return None
        return self.tokens[self.i]

    def next(self) -> Optional[Token]:
        tok = self.peek()
        self.i += 1
        return tok

    def read(self) -> list[Any]:
        """Read all forms from the token stream."""
        forms = []
        while not self.eof():
            forms.append(self.read_form())
        return forms

    def read_form(self) -> Any:
        """Read a single form from the token stream."""
        tok = self.next()
        if tok is None:
            raise UnexpectedEof()

        if tok.kind is TokenKind.PUNCT:
            if tok.text == ")":
                raise BadParse("unexpected )")
            try:
                self._enter()
                if tok.text == "(":
                    return self.read_list()
                return (QUOTE_FORMS[tok.text], self.read_form())
            finally:
                self.depth -= 1

        decoder = _DECODERS.get(tok.kind)
        if decoder is not None:
            return decoder(tok.text)

        if not tok.text:
            raise BadParse("empty token")
        if tok.text in KEYWORDS:
            return KEYWORDS[tok.text]
        return Symbol(tok.text)

    def read_list(self) -> tuple:
        """Read forms up to and including the ) closing the current list."""
        items = []
        while True:
            tok = self.peek()
            if tok is None:
                raise UnexpectedEof("unterminated list, expected )")
            if tok.kind is TokenKind.PUNCT and tok.text == ")":
                self.i += 1
                return tuple(items)
            items.append(self.read_form())

    def _enter(self):
        self.depth += 1
        if self.max_depth is not None and self.depth > self.max_depth:
            raise BadParse(f"forms nested deeper than {self.max_depth} levels")


# =============================================================================
# Convenience Functions
# =============================================================================


def _read(src: str, max_depth: Optional[int], single: bool):
    rdr = Reader(tokenize(src), max_depth)
    try:
        if single:
            return rdr.read_form()
        return (BEGIN, *rdr.read())
    except RecursionError:
        raise BadParse("forms nested too deeply") from None


def parse(src: str, max_depth: Optional[int] = None) -> tuple:
    """
    Read every form in src and return them as (begin form...).

    Raises:
        UnexpectedEof: src ends in the middle of a form.
        BadParse: src is malformed.
    """
    return _read(src, max_depth, single=False)


def parse_single_form(src: str, max_depth: Optional[int] = None) -> Any:
    """
    Read the first form in src.

    The whole buffer is tokenized, but tokens after the first form are
    ignored rather than reported.
    """
    return _read(src, max_depth, single=True)


def is_complete(src: str) -> bool:
    """Return False if src is a prefix that more input could complete."""
    try:
        parse(src)
    except UnexpectedEof:
        return False
    except BadParse:
        pass
    return True


__all__ = [
    "QUOTE_FORMS",
    "KEYWORDS",
    "Reader",
    "parse",
    "parse_single_form",
    "is_complete",
]
