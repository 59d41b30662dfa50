"""Tests for character class and regular expression leaves."""

import re

import pytest

from textcombinators.chars import (
    character_in,
    characters_in,
    characters_not_in,
    digits,
    letters,
    regex,
    whitespace,
)
from textcombinators.parser import literal


class TestCharacterClasses:
    def test_characters_in_is_greedy(self):
        assert characters_in("ab").match_prefix("abbac") == 4
        assert characters_in("ab").match_prefix("cab") is None

    def test_characters_in_predicate(self):
        assert characters_in(str.isupper).match_prefix("ABc") == 2

    def test_characters_not_in(self):
        assert characters_not_in('"\\').match_prefix('ab→"c') == 3
        assert characters_not_in('"').match_prefix('"') is None

    def test_character_in(self):
        hex_digit = character_in("0123456789abcdef")
        assert hex_digit.match_prefix("fa") == 1
        assert hex_digit.match_prefix("g") is None
        assert hex_digit.match_prefix("") is None

    def test_multibyte_members(self):
        arrows = characters_in("←→")
        assert arrows.match_prefix("→←x") == 2
        assert (arrows + digits).matches("→→12")

    def test_named_classes(self):
        assert digits.matches("0123")
        assert not digits.matches("")
        assert whitespace.match_prefix(" \t\nx") == 3
        assert letters.match_prefix("héllo1") == 5


class TestRegex:
    def test_matches_at_the_offset(self):
        word = regex(r"[a-z]+")
        assert word.match_prefix("12abc3", 2) == 5
        assert word.match_prefix("123") is None

    def test_anchor_is_the_start_of_the_text(self):
        assert regex(r"^a").match_prefix("ba", 1) is None
        assert regex(r"(?<=b)a").match_prefix("ba", 1) == 2

    def test_flags_and_compiled_patterns(self):
        assert regex(r"abc", re.IGNORECASE).matches("ABC")
        assert regex(re.compile(r"\d+")).match_prefix("42x") == 2

    def test_bytes_pattern_ends_are_characters(self):
        accented = regex(rb"(?:\xc3\xa9)+")
        assert accented.match_prefix("ééx") == 2
        assert (literal("a") + accented + "x").matches("aéx")

    def test_bytes_pattern_ending_inside_a_character(self):
        half = regex(rb"\xc3")
        with pytest.raises(ValueError):
            half.match_prefix("é")

    def test_captured_text(self):
        number = regex(r"-?\d+(\.\d+)?").captured_text() >> float
        assert number.parse("-1.5") == -1.5
