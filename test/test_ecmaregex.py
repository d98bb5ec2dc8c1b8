"""Tests for ECMA 262 regex translation."""

import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from schemacheck import ecmaregex
from schemacheck.errors import RegexError


class TestEcmaRegex(unittest.TestCase):

    def test_search_semantics(self):
        self.assertTrue(ecmaregex.matches("b", "abc"))
        self.assertFalse(ecmaregex.matches("^b", "abc"))

    def test_dollar_only_matches_at_end(self):
        self.assertTrue(ecmaregex.matches("a$", "a"))
        self.assertFalse(ecmaregex.matches("a$", "a\n"))

    def test_ascii_classes(self):
        self.assertEqual("[0-9]", ecmaregex.translate(r"\d"))
        self.assertFalse(ecmaregex.matches(r"^\d+$", "١٢"))
        self.assertFalse(ecmaregex.matches(r"^\w$", "é"))
        self.assertTrue(ecmaregex.matches(r"^[\d_]+$", "1_2"))
        self.assertTrue(ecmaregex.matches(r"^\D$", "x"))

    def test_named_groups(self):
        self.assertTrue(ecmaregex.matches(r"^(?<x>a)\k<x>$", "aa"))
        self.assertFalse(ecmaregex.matches(r"^(?<x>a)\k<x>$", "ab"))

    def test_lookarounds(self):
        self.assertTrue(ecmaregex.matches("(?<=a)b", "ab"))
        self.assertFalse(ecmaregex.matches("a(?!b)", "ab"))

    def test_empty_classes(self):
        self.assertFalse(ecmaregex.matches("[]", "a"))
        self.assertTrue(ecmaregex.matches("^[^]$", "\n"))

    def test_bracket_in_class(self):
        self.assertTrue(ecmaregex.matches("^[[]$", "["))

    def test_escapes(self):
        self.assertTrue(ecmaregex.matches(r"\cJ", "\n"))
        self.assertTrue(ecmaregex.matches(r"\0", "\x00"))
        self.assertTrue(ecmaregex.matches(r"^\q$", "q"))
        self.assertTrue(ecmaregex.matches(r"^A$", "A"))

    def test_invalid(self):
        for pattern in ("(", "[a", "(?i)a", "(?P<x>a)", "a\\", "*"):
            self.assertFalse(ecmaregex.is_valid(pattern), pattern)

    def test_compile_error(self):
        with self.assertRaises(RegexError) as cm:
            ecmaregex.compile_ecma("(abc")
        self.assertEqual("(abc", cm.exception.pattern)


if __name__ == '__main__':
    unittest.main()
