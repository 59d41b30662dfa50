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

"""Exceptions raised by the combinator engine.

Failing to match is not an error: combinators report it by returning `None`.
Exceptions signal either a caller asking for an exception instead of `None`
(`NoParseError`) or a malformed grammar definition.
"""

__all__ = [
    "CombinatorError",
    "NoParseError",
    "GrammarError",
    "DepthLimitExceededError",
]

from typing import Optional


class CombinatorError(Exception):
    """Base class for all exceptions raised by `textcombinators`."""


class NoParseError(CombinatorError):
    """The text could not be parsed as a whole.

    `end` is the end offset of the longest prefix the parser matched, or `None` if
    it matched no prefix at all.
    """

    def __init__(self, msg: str, end: Optional[int] = None) -> None:
        self.msg = msg
        self.end = end

    def __str__(self) -> str:
        return self.msg


class GrammarError(CombinatorError, RuntimeError):
    """A grammar was defined incorrectly.

    For example, a recursive placeholder was invoked by its own builder before the
    grammar existed.
    """


class DepthLimitExceededError(CombinatorError, RecursionError):
    """A recursive grammar nested deeper than its `max_depth`."""
