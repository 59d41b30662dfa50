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

"""Offsets into text and continuation of offset-zero matchers.

Combinators address a `str` by code point offsets, i.e. plain indices in
`0 ..= len(text)`. Composite combinators never slice the text: they pass the end
offset of one step as the start offset of the next one, against the very same
string.

Leaf matchers written against the start of a string, possibly reporting their end
in UTF-8 bytes or UTF-16 code units, are adapted with `continue_at()`. It converts
the reported end back into a character offset by counting characters, never by
doing arithmetic on storage units.

Examples:

```pycon
>>> UTF8.units("a→🙂", 0, 3)
8
>>> UTF8.characters("a→🙂", 0, 4)
2
>>> UTF16.units("a→🙂", 0, 3)
4

```
"""

__all__ = [
    "Offset",
    "Codec",
    "CHARACTERS",
    "UTF8",
    "UTF16",
    "check_offset",
    "distance",
    "advance",
    "continue_at",
]

import dataclasses as dc
import sys
from typing import Callable, Optional, TypeVar, final

Offset = int

_T = TypeVar("_T")

_DC_KWARGS: dict[str, bool] = {}
if sys.version_info >= (3, 10):
    _DC_KWARGS["slots"] = True


@final
@dc.dataclass(frozen=True, **_DC_KWARGS)
class Codec:
    """Storage unit model of a text encoding.

    `width(c)` is the number of storage units the character `c` occupies.
    """

    name: str
    width: Callable[[str], int] = dc.field(repr=False, compare=False)

    def units(self, text: str, start: Offset, end: Offset) -> int:
        """Return the number of storage units between two character offsets."""
        if self is CHARACTERS:
            return end - start
        return sum(self.width(text[i]) for i in range(start, end))

    def characters(self, text: str, start: Offset, units: int) -> Offset:
        """Return the character offset that lies `units` storage units after
        `start`.

        Raises `ValueError` if the position falls inside a character or beyond the
        end of the text.
        """
        end = len(text)
        if self is CHARACTERS:
            if not 0 <= units <= end - start:
                raise ValueError(
                    "%d characters from offset %d are out of range for a text of "
                    "length %d" % (units, start, end)
                )
            return start + units

        pos = start
        remaining = units
        while remaining > 0:
            if pos >= end:
                raise ValueError(
                    "%d %s units from offset %d are beyond the end of the text"
                    % (units, self.name, start)
                )
            remaining -= self.width(text[pos])
            pos += 1
        if remaining < 0:
            raise ValueError(
                "%d %s units from offset %d end inside a character"
                % (units, self.name, start)
            )
        return pos


def _utf8_width(c: str) -> int:
    n = ord(c)
    if n < 0x80:
        return 1
    if n < 0x800:
        return 2
    if n < 0x10000:
        return 3
    return 4


def _utf16_width(c: str) -> int:
    return 2 if ord(c) > 0xFFFF else 1


CHARACTERS = Codec("characters", lambda _: 1)
UTF8 = Codec("utf-8", _utf8_width)
UTF16 = Codec("utf-16", _utf16_width)


def check_offset(text: str, at: Offset) -> None:
    """Raise `IndexError` unless `at` is a valid offset into `text`."""
    if not 0 <= at <= len(text):
        raise IndexError(
            "offset %d is out of range for a text of length %d" % (at, len(text))
        )


def distance(start: Offset, end: Offset) -> int:
    """Return the number of characters between two offsets into the same text."""
    return end - start


def advance(text: str, at: Offset, count: int) -> Optional[Offset]:
    """Return the offset `count` characters after `at`, or `None` if the text is
    too short."""
    end = at + count
    if end > len(text):
        return None
    return end


def continue_at(
    text: str,
    at: Offset,
    match: Callable[[str], Optional[_T]],
    end_of: Callable[[_T], int],
    with_end: Callable[[_T, Offset], _T],
    codec: Codec = CHARACTERS,
) -> Optional[_T]:
    """Run an offset-zero matcher against the rest of `text` after `at`.

    Type: `(str, int, (str) -> T?, (T) -> int, (T, int) -> T, Codec) -> T?`

    `match` sees the suffix of `text` as if it were a whole string and reports its
    result relative to the start of that suffix, with its end measured in `codec`
    units. The end is read with `end_of`, converted into a character distance, and
    the result is rebuilt by `with_end` with an end offset valid in `text`.

    Examples:

    ```pycon
    >>> continue_at("x🙂yz", 1, lambda s: 5, lambda r: r, lambda r, e: e, UTF8)
    3
    >>> continue_at("x🙂yz", 1, lambda s: 3, lambda r: r, lambda r, e: e, UTF16)
    3
    >>> continue_at("xyz", 1, lambda s: None, lambda r: r, lambda r, e: e) is None
    True

    ```
    """
    res = match(text[at:])
    if res is None:
        return None
    return with_end(res, codec.characters(text, at, end_of(res)))
