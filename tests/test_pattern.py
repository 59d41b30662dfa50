"""Tests for the pattern algebra."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from sample_grammars import brackets
from textcombinators.parser import (
    Parser,
    Pattern,
    failure,
    finished,
    fixed,
    literal,
    many,
    maybe,
    nothing,
    oneplus,
)

short_text = st.text(alphabet="ab→🙂", max_size=8)


class TestPrimitives:
    def test_empty_matches_only_empty_text(self):
        assert Pattern.empty().matches("")
        assert not Pattern.empty().matches("a")

    @given(short_text)
    def test_finished(self, text):
        assert finished.matches(text) == (text == "")

    @given(short_text)
    def test_nothing_consumes_nothing(self, text):
        assert nothing.match_prefix(text) == 0
        assert Pattern.pure().match_prefix(text) == 0

    @given(short_text)
    def test_failure_never_matches(self, text):
        assert failure.match_prefix(text) is None
        assert Pattern.fail().match_prefix(text) is None

    def test_renaming_a_constructed_primitive_keeps_the_shared_one(self):
        eof = Pattern.empty().named("eof")
        assert eof.name == "eof"
        assert finished.name == "end of text"
        assert Pattern.pure().named("always").name != nothing.name
        assert Pattern.fail().named("never").name != failure.name

    def test_literal(self):
        a = Pattern.literal("a")
        assert a.matches("a")
        assert not a.matches("c")
        assert not a.matches("aa")
        assert a.match_prefix("aa") == 1

    def test_literal_counts_characters(self):
        arrow = literal("→🙂")
        assert arrow.match_prefix("→🙂x") == 2
        assert (arrow + "x").matches("→🙂x")

    def test_empty_literal(self):
        assert literal("").match_prefix("abc") == 0

    def test_fixed(self):
        assert fixed(2).match_prefix("a🙂c") == 2
        assert fixed(2).match_prefix("a") is None
        assert fixed(0).matches("")

    def test_fixed_rejects_negative_counts(self):
        with pytest.raises(ValueError):
            fixed(-1)

    def test_match_prefix_validates_the_offset(self):
        with pytest.raises(IndexError):
            literal("a").match_prefix("a", 2)
        assert finished.match_prefix("a", 1) == 1


class TestSequence:
    def test_then(self):
        ab = literal("a").then(literal("b"))
        assert ab.matches("ab")
        assert not ab.matches("a")
        assert not ab.matches("ba")

    def test_strings_are_literals(self):
        assert (literal("a") + "b").matches("ab")
        assert ("a" + literal("b")).matches("ab")

    @given(short_text, short_text)
    def test_sequence_of_literals(self, s, t):
        assert (literal(s) + literal(t)).matches(s + t)
        assert (literal(s) + literal(t)).match_prefix(s + t + "x") == len(s + t)

    def test_sequence_with_a_parser_yields_its_value(self):
        p = literal("a") + literal("b").returning(2)
        assert isinstance(p, Parser)
        assert p.parse("ab") == 2

    def test_rejects_other_operands(self):
        with pytest.raises(TypeError):
            literal("a").then(1)
        with pytest.raises(TypeError):
            literal("a") + 1


class TestChoice:
    def test_either_side(self):
        a_or_b = literal("a") | literal("b")
        assert a_or_b.matches("a")
        assert a_or_b.matches("b")
        assert not a_or_b.matches("c")

    def test_first_success_wins(self):
        short_first = literal("a") | literal("ab")
        assert short_first.match_prefix("ab") == 1
        assert not short_first.matches("ab")

    @given(short_text, short_text)
    def test_or_else_with_failure_is_neutral(self, text, prefix):
        p = literal(prefix)
        assert (p | failure).match_prefix(text) == p.match_prefix(text)
        assert (failure | p).match_prefix(text) == p.match_prefix(text)

    def test_string_alternatives(self):
        assert ("x" | literal("y")).matches("x")
        assert (literal("y") | "x").matches("x")

    def test_either(self):
        digit = Pattern.either(*"0123456789")
        assert digit.matches("7")
        assert not digit.matches("x")
        assert Pattern.either().match_prefix("x") is None

    def test_mixed_kinds_are_rejected(self):
        with pytest.raises(TypeError):
            literal("a").or_else(literal("b").returning(1))
        with pytest.raises(TypeError):
            literal("a") | literal("b").returning(1)
        with pytest.raises(TypeError):
            Pattern.either(literal("a"), literal("b").returning(1))


class TestOptional:
    @given(short_text, short_text)
    def test_always_succeeds(self, text, prefix):
        p = literal(prefix)
        res = p.match_prefix(text)
        expected = 0 if res is None else res
        assert p.optional().match_prefix(text) == expected
        assert maybe(p).match_prefix(text) == expected


class TestRepetition:
    def test_zero_or_more(self):
        a = literal("a")
        assert a.zero_or_more().match_prefix("aaab") == 3
        assert a.zero_or_more().match_prefix("b") == 0
        assert many(a).matches("")

    def test_one_or_more(self):
        a = literal("a")
        assert a.one_or_more().match_prefix("aaab") == 3
        assert a.one_or_more().match_prefix("b") is None
        assert oneplus(a).matches("a")

    def test_zero_width_success_terminates(self):
        assert Pattern.pure().zero_or_more().match_prefix("abc") == 0
        assert nothing.one_or_more().match_prefix("abc") == 0
        assert literal("a").optional().zero_or_more().match_prefix("aab") == 2

    @given(st.integers(0, 10))
    def test_count(self, n):
        a = literal("a")
        assert a.count(n).matches("a" * n)
        assert a.count(n).match_prefix("a" * (n + 1)) == n
        if n > 0:
            assert a.count(n).match_prefix("a" * (n - 1) + "b") is None

    def test_count_stops_at_the_end_of_the_text(self):
        assert literal("a").count(3).match_prefix("aa") == 2
        assert literal("a").count(3).matches("aa")

    def test_count_zero(self):
        assert literal("a").count(0).match_prefix("aaa") == 0

    def test_count_rejects_negative(self):
        with pytest.raises(ValueError):
            literal("a").count(-1)

    def test_separated_by(self):
        items = literal("x").separated_by(",")
        assert items.matches("x")
        assert items.matches("x,x,x")
        assert items.match_prefix("x,x,") == 3
        assert items.match_prefix("") is None


class TestCapturedText:
    def test_captures_multibyte_text(self):
        p = (literal("→") + fixed(2)).captured_text()
        assert p.match_prefix("→🙂ab").value == "→🙂a"
        assert p.match_prefix("→🙂ab").end == 3

    def test_captures_from_the_start_offset(self):
        p = literal("b").one_or_more().captured_text()
        assert p.match_prefix("abbc", 1).value == "bb"


class TestRecursive:
    @pytest.mark.parametrize("text", ["()", "(())", "()()", "(()())", "(())(())()"])
    def test_balanced_brackets(self, text):
        assert brackets.matches(text)

    @pytest.mark.parametrize("text", ["", "(", ")", "())", "(()"])
    def test_unbalanced_brackets(self, text):
        assert not brackets.matches(text)

    def test_nested_optional(self):
        nested = Pattern.recursive(lambda p: "(" + p.optional() + ")")
        assert nested.matches("((()))")
        assert not nested.matches("(()")
