"""Client grammars built from the combinator algebra, used by the tests."""

from typing import Any, Optional

from textcombinators.chars import (
    character_in,
    characters_not_in,
    digits,
    whitespace,
)
from textcombinators.parser import Parser, Pattern, literal

# Integers and floats

uint = digits.captured_text() >> int
integer = (literal("-").optional() + digits).captured_text() >> int


def _ufloat(parts: tuple[Optional[str], Optional[str]]) -> float:
    whole, fraction = parts
    return float("%s.%s" % (whole or "0", fraction or "0"))


# Both parts are optional on their own, but at least one of them must be there
_whole = digits.captured_text().optional()
_fraction_digits = ("." + digits.captured_text()).optional()
ufloat = (_whole + _fraction_digits).when(lambda parts: parts != (None, None)) >> _ufloat

signed_float = ufloat | ("-" + ufloat) >> (lambda x: -x)


# Quoted strings and CSV

quoted = '"' + characters_not_in('"').captured_text() + '"'
cell = quoted | integer
row = cell.separated_by(",")
csv = (row + "\n").zero_or_more()


# Sums

total = Parser.recursive(
    lambda total: (integer + "+" + total) >> (lambda p: p[0] + p[1]) | integer
)


# Balanced brackets


def _bracketed(bracketed: Pattern) -> Pattern:
    single = Pattern.recursive(lambda single: "(" + single + ")" | "()")
    return single.one_or_more() | "(" + bracketed + ")"


brackets = Pattern.recursive(_bracketed)


# JSON

space = whitespace.optional()
comma = literal(",") + space

_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_unescaped = characters_not_in('"\\').captured_text()
_simple_escape = Parser.either(
    *(literal("\\" + c).returning(value) for c, value in _ESCAPES.items())
)
_unicode_escape = (
    "\\u" + character_in("0123456789abcdefABCDEF").count(4).captured_text()
) >> (lambda hex_digits: chr(int(hex_digits, 16)))

_string_part = _unescaped | _simple_escape | _unicode_escape
string = ('"' + _string_part.zero_or_more() + '"') >> "".join

_fraction = literal(".") + digits
_exponent = character_in("eE") + character_in("+-").optional() + digits


def _number(s: str) -> Any:
    if s.lstrip("-").isdecimal():
        return int(s)
    return float(s)


number = (
    literal("-").optional() + digits + _fraction.optional() + _exponent.optional()
).captured_text() >> _number


def _value(value: Parser[Any]) -> Parser[Any]:
    element = value + space
    array = (
        "[" + space + element.separated_by(comma).optional() + "]"
    ) >> (lambda items: items if items is not None else [])
    member = string + space + ":" + space + element
    obj = (
        "{" + space + member.separated_by(comma).optional() + "}"
    ) >> (lambda pairs: dict(pairs or []))
    return Parser.either(
        string,
        number,
        obj,
        array,
        literal("true").returning(True),
        literal("false").returning(False),
        literal("null").returning(None),
    )


json_value = Parser.recursive(_value)
json = space + json_value + space
