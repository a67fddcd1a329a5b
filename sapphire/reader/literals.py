"""
sapphire.reader.literals - Decoders for literal tokens

Turns the text of NUMBER, STRING and REGEX tokens into values:
- decode_number: "0x1F" -> 31, "1.5e2" -> 150.0, "0b101" -> 5
- decode_string: '"a\\"b"' -> 'a"b' (JSON escape rules)
- decode_regex:  "/abc/i" -> RegexLiteral("abc", IGNORECASE)

Decoders assume their input already matched the lexer's grammar for that
kind; content the grammar admits but the decoder cannot give a value to
raises BadParse.
"""

import json
import re

from sapphire.reader.types import REGEX_FLAG_CHARS, BadParse, RegexFlag, RegexLiteral

# =============================================================================
# Numbers
# =============================================================================

_RADIX_PREFIXES = {"0b": 2, "0x": 16}


def decode_number(source: str):
    """
    Decode a number literal.

    Literals with a decimal point or exponent are floats unless they are hex
    (where "e" is a digit). Everything else is an arbitrary-precision int in
    the radix given by its prefix: 0b -> 2, 0x -> 16, a leading 0 -> 8.
    """
    lowered = source.lower()
    if ("." in lowered or "e" in lowered) and "x" not in lowered:
        return float(source)

    sign = 1
    digits = lowered
    if digits[:1] in ("-", "+"):
        if digits[0] == "-":
            sign = -1
        digits = digits[1:]

    radix = _RADIX_PREFIXES.get(digits[:2])
    if radix is not None:
        digits = digits[2:]
    elif len(digits) > 1 and digits[0] == "0":
        radix = 8
        digits = digits[1:].lstrip("_")
    else:
        radix = 10

    try:
        return sign * int(digits, radix)
    except ValueError:
        raise BadParse(f"invalid number literal {source!r}") from None


# =============================================================================
# Strings
# =============================================================================


def decode_string(source: str) -> str:
    """Decode a double-quoted string literal using JSON escape rules."""
    try:
        return json.loads(source, strict=False)
    except json.JSONDecodeError as e:
        raise BadParse(f"invalid string literal {source!r}: {e.msg}") from None


# =============================================================================
# Regular Expressions
# =============================================================================


def parse_regex_flags(options: str) -> RegexFlag:
    """
    Fold flag characters into a RegexFlag.

    Example:
        "" -> RegexFlag.NONE
        "ix" -> RegexFlag.IGNORECASE | RegexFlag.EXTENDED
    """
    flags = RegexFlag.NONE
    for ch in options:
        flags |= REGEX_FLAG_CHARS.get(ch, RegexFlag.NONE)
    return flags


def decode_regex(source: str) -> RegexLiteral:
    """
    Decode a /.../flags or %r{...}flags literal.

    The body between the delimiters is kept verbatim, escapes included.
    The pattern is compiled once here so invalid patterns fail at read time.
    """
    if source.startswith("/"):
        split = source.rindex("/")
        body = source[1:split]
    elif source.startswith("%r{"):
        split = source.rindex("}")
        body = source[3:split]
    else:
        raise BadParse(f"invalid regex literal {source!r}")

    literal = RegexLiteral(body, parse_regex_flags(source[split + 1 :]))
    try:
        literal.compile()
    except (re.error, OverflowError) as e:
        raise BadParse(f"invalid regex pattern {body!r}: {e}") from None
    return literal


__all__ = [
    "decode_number",
    "decode_string",
    "parse_regex_flags",
    "decode_regex",
]
