# Copyright © 2009/2023 Andrey Vlasovskikh
#
# Permission is hereby granted, free of charge, to any person obtaining a copy of this
# software and associated documentation files (the "Software"), to deal in the Software
# without restriction, including without limitation the rights to use, copy, modify,
# merge, publish, distribute, sublicense, and/or sell copies of the Software, and to
# permit persons to whom the Software is furnished to do so, subject to the following
# conditions:
#
# The above copyright notice and this permission notice shall be included in all copies
# or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR IMPLIED,
# INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY, FITNESS FOR A
# PARTICULAR PURPOSE AND NON-INFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT
# HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION OF
# CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE
# OR THE USE OR OTHER DEALINGS IN THE SOFTWARE.

"""Leaf patterns for character classes and regular expressions.

A character class is given either as a string of its characters or as a predicate on
a single character, such as `str.isdecimal`.

Examples:

```pycon
>>> from textcombinators.parser import literal
>>> assignment = letters + literal("=") + digits
>>> assignment.matches("x=42")
True
>>> assignment.matches("x=")
False

```
"""

__all__ = [
    "characters_in",
    "characters_not_in",
    "character_in",
    "regex",
    "digits",
    "whitespace",
    "letters",
]

import re
from typing import Callable, Optional, Union

from textcombinators.parser import Pattern, pattern
from textcombinators.text import UTF8, Offset

CharClass = Union[str, Callable[[str], bool]]


def _predicate(chars: CharClass) -> Callable[[str], bool]:
    if isinstance(chars, str):
        return frozenset(chars).__contains__
    return chars


def _describe(chars: CharClass) -> str:
    if isinstance(chars, str):
        return repr(chars)
    return getattr(chars, "__name__", "predicate")


def characters_in(chars: CharClass) -> Pattern:
    """Match one or more characters of the class, as many as possible."""
    member = _predicate(chars)

    @pattern("characters in %s" % _describe(chars))
    def _characters_in(text: str, at: Offset) -> Optional[Offset]:
        end = len(text)
        pos = at
        while pos < end and member(text[pos]):
            pos += 1
        if pos == at:
            return None
        return pos

    return _characters_in


def characters_not_in(chars: CharClass) -> Pattern:
    """Match one or more characters outside of the class, as many as possible."""
    member = _predicate(chars)

    def non_member(c: str) -> bool:
        return not member(c)

    return characters_in(non_member).named("characters not in %s" % _describe(chars))


def character_in(chars: CharClass) -> Pattern:
    """Match exactly one character of the class."""
    member = _predicate(chars)

    @pattern("a character in %s" % _describe(chars))
    def _character_in(text: str, at: Offset) -> Optional[Offset]:
        if at < len(text) and member(text[at]):
            return at + 1
        return None

    return _character_in


def regex(
    expr: Union[str, bytes, "re.Pattern[str]", "re.Pattern[bytes]"], flags: int = 0
) -> Pattern:
    """Match a prefix with a regular expression.

    A `str` expression is matched at the current offset of the text itself, so
    lookbehinds may see the characters before it and `^` only matches at the start
    of the whole text. A `bytes` expression is matched against the UTF-8 encoding
    of the rest of the text, and the end of its match is translated back into a
    character offset.

    Examples:

    ```pycon
    >>> regex(r"[a-z]+").match_prefix("abc123")
    3
    >>> regex(rb"(?:\\xc3\\xa9)+").match_prefix("ééx")
    2

    ```
    """
    compiled = re.compile(expr, flags)
    name = "regex %r" % (compiled.pattern,)

    if isinstance(compiled.pattern, bytes):

        def _match_utf8(suffix: str) -> Optional[int]:
            m = compiled.match(suffix.encode("utf-8", "surrogatepass"))
            if m is None:
                return None
            return m.end()

        return Pattern.from_prefix_function(_match_utf8, UTF8).named(name)

    @pattern(name)
    def _regex(text: str, at: Offset) -> Optional[Offset]:
        m = compiled.match(text, at)
        if m is None:
            return None
        return m.end()

    return _regex


digits = characters_in(str.isdecimal).named("digits")
whitespace = characters_in(str.isspace).named("whitespace")
letters = characters_in(str.isalpha).named("letters")
