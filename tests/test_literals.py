"""
Test suite for literal decoding.

This module tests:
- Number decoding in every radix, signs, separators and floats
- String decoding with JSON escapes
- Regex decoding, flags and compilation
"""

import re
import unittest

from sapphire.reader import (
    BadParse,
    RegexFlag,
    RegexLiteral,
    decode_number,
    decode_regex,
    decode_string,
    parse_regex_flags,
)


class TestNumbers(unittest.TestCase):
    """Test decode_number."""

    def test_radixes(self):
        """Prefixes select binary, hex, octal or decimal."""
        cases = {
            "0x1F": 31,
            "0X1f": 31,
            "0b101": 5,
            "0B1_01": 5,
            "017": 15,
            "0_17": 15,
            "42": 42,
            "1_000_000": 1000000,
            "0": 0,
            "00": 0,
        }
        for src, expected in cases.items():
            with self.subTest(src=src):
                value = decode_number(src)
                self.assertEqual(value, expected)
                self.assertIsInstance(value, int)

    def test_signs(self):
        """A leading sign applies in every radix."""
        self.assertEqual(decode_number("-0x1F"), -31)
        self.assertEqual(decode_number("+0b11"), 3)
        self.assertEqual(decode_number("-017"), -15)
        self.assertEqual(decode_number("-5"), -5)

    def test_floats(self):
        """A decimal point or exponent makes a float."""
        cases = {
            "1.5e2": 150.0,
            "1.5E2": 150.0,
            ".5": 0.5,
            "-2.25": -2.25,
            "1e3": 1000.0,
            "2e-1": 0.2,
            "1_0.5": 10.5,
        }
        for src, expected in cases.items():
            with self.subTest(src=src):
                value = decode_number(src)
                self.assertIsInstance(value, float)
                self.assertEqual(value, expected)

    def test_hex_with_e_is_integer(self):
        """An 'e' in a hex literal is a digit, not an exponent."""
        self.assertEqual(decode_number("0x1e5"), 0x1E5)

    def test_arbitrary_precision(self):
        """Integers are not truncated."""
        self.assertEqual(decode_number("0x" + "f" * 40), 16**40 - 1)
        self.assertEqual(decode_number("-" + "9" * 30), -int("9" * 30))

    def test_invalid_octal(self):
        """8 and 9 are not octal digits."""
        with self.assertRaises(BadParse):
            decode_number("09")


class TestStrings(unittest.TestCase):
    """Test decode_string."""

    def test_plain(self):
        self.assertEqual(decode_string('"hello"'), "hello")

    def test_escaped_quote(self):
        """An escaped quote decodes to a double quote."""
        self.assertEqual(decode_string('"a\\"b"'), 'a"b')

    def test_json_escapes(self):
        """Escapes follow JSON rules."""
        self.assertEqual(decode_string(r'"\n\t\\\/"'), "\n\t\\/")
        self.assertEqual(decode_string(r'"é☺"'), "é☺")

    def test_raw_newline(self):
        """Raw newlines are kept as they are."""
        self.assertEqual(decode_string('"a\nb"'), "a\nb")

    def test_empty(self):
        self.assertEqual(decode_string('""'), "")

    def test_bad_escape(self):
        """Escapes JSON rejects are malformed."""
        with self.assertRaises(BadParse):
            decode_string(r'"\q"')

    def test_bad_unicode_escape(self):
        """A unicode escape needs four hex digits."""
        with self.assertRaises(BadParse):
            decode_string(r'"\u12"')


class TestRegexes(unittest.TestCase):
    """Test decode_regex and RegexLiteral."""

    def test_flags(self):
        """Flag characters fold into a RegexFlag; o is ignored."""
        self.assertEqual(parse_regex_flags(""), RegexFlag.NONE)
        self.assertEqual(
            parse_regex_flags("ix"), RegexFlag.IGNORECASE | RegexFlag.EXTENDED
        )
        self.assertEqual(parse_regex_flags("o"), RegexFlag.NONE)
        self.assertEqual(parse_regex_flags("mm"), RegexFlag.MULTILINE)

    def test_slash_literal(self):
        """The body and flags of a /.../ literal."""
        rx = decode_regex("/abc/i")
        self.assertEqual(rx.pattern, "abc")
        self.assertTrue(rx.ignorecase)
        self.assertFalse(rx.multiline)
        self.assertFalse(rx.extended)

    def test_percent_literal(self):
        """The body and flags of a %r{...} literal."""
        rx = decode_regex("%r{a/b}mx")
        self.assertEqual(rx, RegexLiteral("a/b", RegexFlag.MULTILINE | RegexFlag.EXTENDED))
        self.assertEqual(rx.flag_chars, "mx")

    def test_escapes_kept_verbatim(self):
        """Escapes in the body are not decoded."""
        self.assertEqual(decode_regex(r"/a\/b\d/").pattern, r"a\/b\d")
        self.assertEqual(decode_regex(r"%r{a\}}").pattern, r"a\}")

    def test_compile(self):
        """compile() maps flags and caches the pattern."""
        pattern = decode_regex("/ab.c/im").compile()
        self.assertIsInstance(pattern, re.Pattern)
        self.assertTrue(pattern.search("xAB\nC"))
        self.assertIs(pattern, decode_regex("/ab.c/im").compile())

    def test_extended(self):
        """x ignores whitespace and comments in the pattern."""
        pattern = decode_regex("/a b c # letters/x").compile()
        self.assertTrue(pattern.fullmatch("abc"))

    def test_bad_delimiter(self):
        """Only / and %r{ open a regex literal."""
        with self.assertRaises(BadParse):
            decode_regex("abc")

    def test_invalid_pattern(self):
        """Patterns re cannot compile are malformed."""
        with self.assertRaises(BadParse):
            decode_regex("/a(b/")

    def test_repeat_count_too_large(self):
        """re raises OverflowError here rather than re.error."""
        with self.assertRaises(BadParse):
            decode_regex("/a{99999999999}/")


if __name__ == "__main__":
    unittest.main()
