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

"""Composable patterns and parsers over text.

Combinators define an internal domain-specific language (DSL) for describing the
grammar of a textual format. You start with a few primitive matchers, combine them
into more complex ones, and finally cover the whole format you want to parse.

There are two kinds of combinators:

* `Pattern` recognizes a prefix of the text and produces no value
* `Parser[V]` recognizes a prefix of the text and produces a value of type `V`

The structure of the language:

* Primitives
    * `literal(s)`, `fixed(n)`, `finished`, `nothing`, `failure`, `pure(x)`
    * Leaves for character classes and regular expressions live in
      `textcombinators.chars`
* Combinators
    * `p1 + p2`, `p1 | p2`, `p >> f`, `-p`, `maybe(p)`, `many(p)`, `oneplus(p)`
    * `p.bind(f)`, `p.when(pred)`, `p.count(n)`, `p.separated_by(sep)`,
      `p.captured_text()`, `p.returning(x)`
* Recursion
    * `Pattern.recursive(builder)`, `Parser.recursive(builder)`

Every combinator matches a *prefix* of the text starting at some offset and reports
the offset where the match ends. Only the whole-text entry points `matches()` and
`parse()` require that the entire text is consumed.

Examples:

```pycon
>>> bit = literal("0") | literal("1")
>>> binary = bit.one_or_more().captured_text() >> (lambda s: int(s, 2))
>>> binary.parse("101")
5
>>> binary.parse("102") is None
True
>>> binary.match_prefix("102")
ParseOutcome(value=2, end=2)

```
"""

__all__ = [
    "literal",
    "fixed",
    "pure",
    "maybe",
    "many",
    "oneplus",
    "skip",
    "finished",
    "nothing",
    "failure",
    "pattern",
    "parser",
    "Pattern",
    "Parser",
    "ParseOutcome",
    "NoParseError",
    "GrammarError",
]

import dataclasses as dc
import logging
import sys
from collections.abc import Iterator
from typing import (
    Any,
    Callable,
    Generic,
    Optional,
    TypeVar,
    Union,
    final,
    overload,
)

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from textcombinators.errors import GrammarError, NoParseError
from textcombinators.recursive import RecursiveCell, forwarder
from textcombinators.text import (
    CHARACTERS,
    Codec,
    Offset,
    advance,
    check_offset,
    continue_at,
)

log = logging.getLogger("textcombinators")

debug = False

_V = TypeVar("_V")
_W = TypeVar("_W")

# Result of a single run: an end offset for patterns, a ParseOutcome for parsers
_R = TypeVar("_R")

_C = TypeVar("_C", bound="_Combinator")

_RunFn = Callable[[str, Offset], Optional[_R]]

_DC_KWARGS: dict[str, bool] = {
    # Frozen objects have performance impact, so keep it only for type checking
    # "frozen": True,
}
if sys.version_info >= (3, 10):
    _DC_KWARGS["slots"] = True


@final
@dc.dataclass(**_DC_KWARGS)
class ParseOutcome(Generic[_V]):
    """The parsed `value` and the `end` offset of the prefix a parser matched.

    Unpacks as `value, end`.
    """

    value: _V
    end: Offset

    def __iter__(self) -> Iterator[Any]:
        yield self.value
        yield self.end

    def map(self, f: Callable[[_V], _W]) -> "ParseOutcome[_W]":
        return ParseOutcome(f(self.value), self.end)

    def with_end(self, end: Offset) -> "ParseOutcome[_V]":
        return ParseOutcome(self.value, end)


def _make(cls: type[_C], name: str) -> Callable[[_RunFn[Any]], _C]:
    def _wrap(f: _RunFn[Any]) -> _C:
        return cls(f).named(name)

    return _wrap


def _coerce(other: Any) -> Any:
    if isinstance(other, str):
        return Pattern.literal(other)
    return other


def _as_pattern(other: Union["Pattern", "Parser[Any]", str]) -> "Pattern":
    other = _coerce(other)
    if isinstance(other, Parser):
        return other.pattern()
    if not isinstance(other, Pattern):
        raise TypeError("expected a pattern, a parser or a str, got %r" % (other,))
    return other


@dc.dataclass(frozen=True, init=False, **_DC_KWARGS)
class _Combinator(Generic[_R]):
    """Behavior shared by `Pattern` and `Parser`.

    The algorithms for choice, optionality, repetition, separated lists, captured
    text and recursion are written once here, against a few hooks each subclass
    provides: how to read the end offset of a result, how to rebuild a result with
    another end offset, what an absent optional result looks like, and how to
    combine repeated results.
    """

    run: _RunFn[_R]
    """Run the combinator against `text` starting at the offset `at`.

    Type: `(str, int) -> R?`

    Returns the end offset (patterns) or a `ParseOutcome` (parsers) of the matched
    prefix, or `None` if nothing matches at `at`.

    !!! Warning

        The offset is not validated. Use `match_prefix()` if it comes from outside
        of the grammar.
    """

    name: str = dc.field(compare=False)

    def __init__(self, p: Union["_Combinator[_R]", _RunFn[_R]]) -> None:
        """Wrap the run function `p` into a combinator object."""
        self._define(p)

    def named(self, name: str) -> Self:
        """Specify the name of the combinator for easier debugging.

        This name is used in the debug-level log. You can also get it via the `name`
        attribute.

        !!! Note

            You can enable the debug log this way, before building your grammar:

            ```python
            import logging
            logging.basicConfig(level=logging.DEBUG)
            import textcombinators.parser
            textcombinators.parser.debug = True
            ```
        """
        object.__setattr__(self, "name", name)
        return self

    def _named_from(self, p: Any) -> Self:
        name = getattr(p, "name", None) or p.__doc__ or getattr(p, "__name__", None)
        return self.named(name if name is not None else repr(p))

    def _define(self, p: Union["_Combinator[_R]", _RunFn[_R]]) -> None:
        f = p.run if isinstance(p, _Combinator) else p
        object.__setattr__(self, "run", self._wrap_for_debug(f) if debug else f)

        self._named_from(p)

    def _wrap_for_debug(self, f: _RunFn[_R]) -> _RunFn[_R]:
        def run_verbose(text: str, at: Offset) -> Optional[_R]:
            log.debug("trying %s at %d", self.name, at)
            return f(text, at)

        return run_verbose

    @staticmethod
    def _end_of(res: Any) -> Offset:
        raise NotImplementedError

    @staticmethod
    def _with_end(res: Any, end: Offset) -> Any:
        raise NotImplementedError

    @staticmethod
    def _absent(at: Offset) -> Any:
        raise NotImplementedError

    @staticmethod
    def _collect(results: list[Any], end: Offset) -> Any:
        raise NotImplementedError

    @classmethod
    def _same_kind(cls, other: Any) -> "Optional[Self]":
        other = _coerce(other)
        if isinstance(other, cls):
            return other
        return None

    @classmethod
    def from_prefix_function(
        cls,
        match: Callable[[str], Optional[_R]],
        codec: Codec = CHARACTERS,
    ) -> Self:
        """Wrap a leaf matcher that only knows how to match at the start of a string.

        Type: `((str) -> R?, Codec) -> Self`

        `match` receives the rest of the text and returns a result relative to its
        start: an end offset for patterns, a `ParseOutcome` for parsers. Ends are
        measured in `codec` units and translated back into character offsets of the
        whole text.

        Examples:

        ```pycon
        >>> from textcombinators.text import UTF8
        >>> first_word = Pattern.from_prefix_function(
        ...     lambda s: len(s.encode().split(b" ")[0]), UTF8)
        >>> (first_word + " !").matches("héhé !")
        True

        ```
        """
        end_of, with_end = cls._end_of, cls._with_end

        def _leaf(text: str, at: Offset) -> Optional[_R]:
            return continue_at(text, at, match, end_of, with_end, codec)

        return cls(_leaf).named(getattr(match, "__name__", "prefix function"))

    def match_prefix(self, text: str, at: Offset = 0) -> Optional[_R]:
        """Match a prefix of `text[at:]` without requiring the whole text to match.

        Raises `IndexError` if `at` is not a valid offset into `text`.
        """
        check_offset(text, at)
        return self.run(text, at)

    def matches(self, text: str) -> bool:
        """Tell whether the combinator matches the whole `text`."""
        res = self.run(text, 0)
        return res is not None and self._end_of(res) == len(text)

    def or_else(self, other: "Union[Self, str]") -> Self:
        """Ordered choice: run this combinator, and if it fails, run `other` at the
        same offset.

        The first alternative that succeeds wins, even if the other one would match
        a longer prefix. Both alternatives must be of the same kind; a `str` stands
        for a literal pattern.
        """
        alt = self._same_kind(other)
        if alt is None:
            raise TypeError(
                "cannot choose between %s and %r" % (type(self).__name__, other)
            )

        @_make(type(self), "%s or %s" % (self.name, alt.name))
        def _or(text: str, at: Offset) -> Optional[_R]:
            res = self.run(text, at)
            if res is not None:
                return res
            return alt.run(text, at)

        return _or

    def __or__(self, other: "Union[Self, str]") -> Self:
        if self._same_kind(other) is None:
            return NotImplemented
        return self.or_else(other)

    def __ror__(self, other: str) -> Self:
        first = self._same_kind(other)
        if first is None:
            return NotImplemented
        return first.or_else(self)

    @classmethod
    def either(cls, *alternatives: "Union[Self, str]") -> Self:
        """Ordered choice between any number of alternatives."""
        alts = []
        for alternative in alternatives:
            alt = cls._same_kind(alternative)
            if alt is None:
                raise TypeError(
                    "cannot choose between %s and %r" % (cls.__name__, alternative)
                )
            alts.append(alt)

        @_make(cls, " or ".join(alt.name for alt in alts) or "either()")
        def _either(text: str, at: Offset) -> Optional[_R]:
            for alt in alts:
                res = alt.run(text, at)
                if res is not None:
                    return res
            return None

        return _either

    def optional(self) -> Any:
        """Always succeed: on failure, consume nothing and yield no value.

        A pattern returns its start offset, a parser yields `None`.
        """
        absent = self._absent

        @_make(type(self), "[ %s ]" % (self.name,))
        def _optional(text: str, at: Offset) -> Any:
            res = self.run(text, at)
            if res is None:
                return absent(at)
            return res

        return _optional

    def _repeat(self, text: str, at: Offset, acc: list[_R]) -> Offset:
        # Stop on failure, at the end of the text, or after a success that consumed
        # nothing (which would otherwise repeat forever).
        end = len(text)
        pos = at
        while True:
            res = self.run(text, pos)
            if res is None:
                return pos
            acc.append(res)
            prev, pos = pos, self._end_of(res)
            if pos == prev or pos == end:
                return pos

    def zero_or_more(self) -> Any:
        """Apply the combinator as many times as it succeeds. Never fails.

        A pattern returns the end of the last application, a parser yields the
        `list` of values.
        """
        collect = self._collect

        @_make(type(self), "{ %s }" % self.name)
        def _many(text: str, at: Offset) -> Any:
            acc: list[_R] = []
            end = self._repeat(text, at, acc)
            if debug:
                log.debug("*matched* %d instances of %s, end = %d", len(acc), self.name, end)
            return collect(acc, end)

        return _many

    def one_or_more(self) -> Any:
        """Apply the combinator as many times as it succeeds, at least once."""
        collect = self._collect

        @_make(type(self), "(%s, { %s })" % (self.name, self.name))
        def _oneplus(text: str, at: Offset) -> Any:
            first = self.run(text, at)
            if first is None:
                return None
            acc = [first]
            end = self._end_of(first)
            if end != at and end != len(text):
                end = self._repeat(text, end, acc)
            return collect(acc, end)

        return _oneplus

    def count(self, n: int) -> Any:
        """Apply the combinator `n` times in sequence.

        Fails if an application fails. Stops early, successfully, once the end of the
        text is reached.
        """
        if n < 0:
            raise ValueError(
                "cannot apply %s a negative number of times: %d" % (self.name, n)
            )
        collect = self._collect

        @_make(type(self), "%s * %d" % (self.name, n))
        def _count(text: str, at: Offset) -> Any:
            acc: list[_R] = []
            end = len(text)
            pos = at
            for _ in range(n):
                res = self.run(text, pos)
                if res is None:
                    return None
                acc.append(res)
                pos = self._end_of(res)
                if pos == end:
                    break
            return collect(acc, pos)

        return _count

    def separated_by(self, sep: Union["Pattern", "Parser[Any]", str]) -> Any:
        """Match one or more applications separated by `sep`.

        The values of separators are discarded. Use `optional()` on the result to
        accept an empty list too.
        """
        sep_pattern = _as_pattern(sep)
        rest = sep_pattern.then(self)
        collect = self._collect

        @_make(type(self), "(%s, { %s })" % (self.name, rest.name))
        def _separated(text: str, at: Offset) -> Any:
            first = self.run(text, at)
            if first is None:
                return None
            acc = [first]
            end = rest._repeat(text, self._end_of(first), acc)
            return collect(acc, end)

        return _separated

    def captured_text(self) -> "Parser[str]":
        """Yield the exact text the combinator matched as the parsed value.

        Examples:

        ```pycon
        >>> (literal("a") + fixed(2)).captured_text().parse("abc")
        'abc'

        ```
        """
        end_of = self._end_of

        @parser("text of %s" % self.name)
        def _captured(text: str, at: Offset) -> Optional[ParseOutcome[str]]:
            res = self.run(text, at)
            if res is None:
                return None
            end = end_of(res)
            return ParseOutcome(text[at:end], end)

        return _captured

    @classmethod
    def recursive(
        cls,
        builder: "Callable[[Self], Union[Self, str]]",
        max_depth: Optional[int] = None,
    ) -> Self:
        """Define a combinator in terms of itself.

        Type: `((Self) -> Self, int?) -> Self`

        `builder` receives a placeholder that stands for the combinator being defined
        and returns its definition. The placeholder may be used anywhere inside
        other combinators, but must not be run by the builder itself.

        The builder is called once, the first time the combinator runs. Running the
        placeholder from within the builder raises `GrammarError`. If `max_depth` is
        given, nesting deeper than that raises `DepthLimitExceededError`.

        Examples:

        ```pycon
        >>> nested = Pattern.recursive(lambda p: "(" + p.optional() + ")")
        >>> nested.matches("((()))")
        True
        >>> nested.matches("(()")
        False

        ```
        """
        name = "recursive %s" % cls.__name__.lower()
        cell = RecursiveCell(name, max_depth)
        stand_in = cls(forwarder(cell)).named("<%s>" % name)

        def build() -> _RunFn[_R]:
            definition = builder(stand_in)
            resolved = cls._same_kind(definition)
            if resolved is None:
                raise GrammarError(
                    "the builder of %s returned %r, expected a %s"
                    % (name, definition, cls.__name__)
                )
            return resolved.run

        cell.bind(build)

        @_make(cls, name)
        def _recursive(text: str, at: Offset) -> Optional[_R]:
            return cell.invoke(text, at)

        return _recursive


@final
@dc.dataclass(frozen=True, init=False, **_DC_KWARGS)
class Pattern(_Combinator[Offset]):
    """A combinator that recognizes a prefix of the text without producing a value.

    Running a pattern yields the end offset of the matched prefix, or `None`.

    Examples:

    ```pycon
    >>> ab = literal("a") + literal("b")
    >>> ab.matches("ab")
    True
    >>> ab.match_prefix("abc")
    2
    >>> ab.match_prefix("xab", 1)
    3
    >>> ab.match_prefix("ba") is None
    True

    ```
    """

    @staticmethod
    def _end_of(res: Offset) -> Offset:
        return res

    @staticmethod
    def _with_end(res: Offset, end: Offset) -> Offset:
        return end

    @staticmethod
    def _absent(at: Offset) -> Offset:
        return at

    @staticmethod
    def _collect(results: list[Offset], end: Offset) -> Offset:
        return end

    @staticmethod
    def literal(prefix: str) -> "Pattern":
        """Match the exact string `prefix`."""

        @pattern(repr(prefix))
        def _literal(text: str, at: Offset) -> Optional[Offset]:
            if text.startswith(prefix, at):
                return at + len(prefix)
            return None

        return _literal

    @staticmethod
    def fixed(n: int) -> "Pattern":
        """Match any `n` characters. Fails if fewer than `n` characters remain."""
        if n < 0:
            raise ValueError("cannot match a negative number of characters: %d" % n)

        @pattern("<%d characters>" % n)
        def _fixed(text: str, at: Offset) -> Optional[Offset]:
            return advance(text, at, n)

        return _fixed

    @staticmethod
    def empty() -> "Pattern":
        """Match only when no characters remain."""
        return Pattern(finished)

    @staticmethod
    def pure() -> "Pattern":
        """Always match, consuming nothing."""
        return Pattern(nothing)

    @staticmethod
    def fail() -> "Pattern":
        """Never match."""
        return Pattern(failure)

    @overload
    def then(self, other: Union["Pattern", str]) -> "Pattern":
        ...

    @overload
    def then(self, other: "Parser[_V]") -> "Parser[_V]":
        ...

    def then(self, other: Any) -> Any:
        """Sequential combination: match this pattern, then `other` right where it
        ended.

        Followed by a pattern, the result is a pattern. Followed by a parser, the
        result is a parser yielding that parser's value.
        """
        other = _coerce(other)
        if not isinstance(other, _Combinator):
            raise TypeError("cannot sequence a pattern with %r" % (other,))

        @_make(type(other), "(%s, %s)" % (self.name, other.name))
        def _then(text: str, at: Offset) -> Any:
            end = self.run(text, at)
            if end is None:
                return None
            return other.run(text, end)

        return _then

    @overload
    def __add__(self, other: Union["Pattern", str]) -> "Pattern":
        ...

    @overload
    def __add__(self, other: "Parser[_V]") -> "Parser[_V]":
        ...

    def __add__(self, other: Any) -> Any:
        if not isinstance(other, (str, _Combinator)):
            return NotImplemented
        return self.then(other)

    def __radd__(self, other: str) -> "Pattern":
        if not isinstance(other, str):
            return NotImplemented
        return Pattern.literal(other).then(self)

    def returning(self, value: _V) -> "Parser[_V]":
        """Lift the pattern into a parser that yields the constant `value`."""
        return Parser.from_pattern(self, value)


@final
@dc.dataclass(frozen=True, init=False, **_DC_KWARGS)
class Parser(_Combinator[ParseOutcome[_V]], Generic[_V]):
    """A combinator that recognizes a prefix of the text and produces a value.

    Type: `Parser[V]`

    Running a parser yields a `ParseOutcome` with the parsed value and the end offset
    of the matched prefix, or `None`.

    In order to define a parser for your format:

    1. You start with primitive patterns like `literal(s)`, `fixed(n)` or the leaves
       in `textcombinators.chars`, and turn them into parsers with
       `p.captured_text()` or `p.returning(value)`
    2. You use combinators `p1 + p2`, `p1 | p2`, `p >> f`, `many(p)`, and others to
       combine them into more complex parsers
    3. You assign complex parsers to variables to name the rules of your grammar

    !!! Note

        The constructor `Parser.__init__()` is considered **internal**. Use
        primitives and combinators to construct new parsers.
    """

    @staticmethod
    def _end_of(res: ParseOutcome[Any]) -> Offset:
        return res.end

    @staticmethod
    def _with_end(res: ParseOutcome[_W], end: Offset) -> ParseOutcome[_W]:
        return res.with_end(end)

    @staticmethod
    def _absent(at: Offset) -> ParseOutcome[None]:
        return ParseOutcome(None, at)

    @staticmethod
    def _collect(results: list[ParseOutcome[_W]], end: Offset) -> ParseOutcome[list[_W]]:
        return ParseOutcome([res.value for res in results], end)

    @staticmethod
    def pure(value: _W) -> "Parser[_W]":
        """Yield `value` without consuming anything.

        Also known as `return` in Haskell.
        """

        @parser("(pure %r)" % (value,))
        def _pure(text: str, at: Offset) -> ParseOutcome[_W]:
            return ParseOutcome(value, at)

        return _pure

    @staticmethod
    def from_pattern(p: Union[Pattern, str], value: _W) -> "Parser[_W]":
        """Yield the constant `value` wherever the pattern `p` matches."""
        pat = _as_pattern(p)

        @parser(pat.name)
        def _from_pattern(text: str, at: Offset) -> Optional[ParseOutcome[_W]]:
            end = pat.run(text, at)
            if end is None:
                return None
            return ParseOutcome(value, end)

        return _from_pattern

    @staticmethod
    def captured(p: Union[Pattern, str]) -> "Parser[str]":
        """Yield the text the pattern `p` matched."""
        return _as_pattern(p).captured_text()

    def parse(self, text: str) -> Optional[_V]:
        """Parse the whole `text` and return the parsed value.

        Type: `(str) -> V?`

        Returns `None` if the parser fails, or if it matches only a prefix of the
        text. Use `parse_or_raise()` when `None` is a legitimate parsed value.
        """
        res = self.run(text, 0)
        if res is None or res.end != len(text):
            return None
        return res.value

    def parse_or_raise(self, text: str) -> _V:
        """Parse the whole `text` and return the parsed value.

        If the parser fails to parse the whole text, it raises `NoParseError`.

        Examples:

        ```pycon
        >>> expr = literal("x").returning(1)
        >>> expr.parse_or_raise("x")
        1
        >>> expr.parse_or_raise("xy")
        Traceback (most recent call last):
            ...
        textcombinators.errors.NoParseError: 'x' matched only 1 of 2 characters

        ```
        """
        res = self.run(text, 0)
        if res is None:
            raise NoParseError("%s did not match" % self.name)
        if res.end != len(text):
            raise NoParseError(
                "%s matched only %d of %d characters" % (self.name, res.end, len(text)),
                res.end,
            )
        return res.value

    @overload
    def then(self, other: Union[Pattern, str]) -> "Parser[_V]":
        ...

    @overload
    def then(self, other: "Parser[_W]") -> "Parser[tuple[_V, _W]]":
        ...

    def then(self, other: Any) -> Any:
        """Sequential combination: run this parser, then `other` right where it
        ended.

        Followed by a pattern, the result yields this parser's value. Followed by a
        parser, the result yields the pair of both values. Pairs nest from the left,
        so `p1 + p2 + p3` yields `((v1, v2), v3)`. Transform it into a new value with
        `>>`.

        Examples:

        ```pycon
        >>> digit = fixed(1).captured_text()
        >>> (digit + "," + digit).parse("1,2")
        ('1', '2')
        >>> (digit + digit + digit).parse("123")
        (('1', '2'), '3')
        >>> (-literal("#").captured_text() + digit).parse("#7")
        '7'

        ```
        """
        other = _coerce(other)
        if isinstance(other, Pattern):

            @parser("(%s, %s)" % (self.name, other.name))
            def _then_pattern(text: str, at: Offset) -> Optional[ParseOutcome[_V]]:
                res = self.run(text, at)
                if res is None:
                    return None
                end = other.run(text, res.end)
                if end is None:
                    return None
                return ParseOutcome(res.value, end)

            return _then_pattern

        if isinstance(other, Parser):

            @parser("(%s, %s)" % (self.name, other.name))
            def _then(text: str, at: Offset) -> Optional[ParseOutcome[Any]]:
                res_l = self.run(text, at)
                if res_l is None:
                    return None
                res_r = other.run(text, res_l.end)
                if res_r is None:
                    return None
                return ParseOutcome((res_l.value, res_r.value), res_r.end)

            return _then

        raise TypeError("cannot sequence a parser with %r" % (other,))

    def __add__(self, other: Any) -> Any:
        if not isinstance(other, (str, _Combinator)):
            return NotImplemented
        return self.then(other)

    def __radd__(self, other: str) -> "Parser[_V]":
        if not isinstance(other, str):
            return NotImplemented
        return Pattern.literal(other).then(self)

    def map(self, f: Callable[[_V], _W]) -> "Parser[_W]":
        """Transform the parsed value by applying the function `f`.

        The matched prefix and the success or failure stay the same.
        """

        @parser(self.name)
        def _map(text: str, at: Offset) -> Optional[ParseOutcome[_W]]:
            res = self.run(text, at)
            if res is None:
                return None
            return res.map(f)

        return _map

    def __rshift__(self, f: Callable[[_V], _W]) -> "Parser[_W]":
        """An alias for `p.map(f)`.

        Examples:

        ```pycon
        >>> expr = (literal("D") | literal("d")).captured_text() >> str.lower
        >>> expr.parse("D")
        'd'

        ```
        """
        return self.map(f)

    def bind(self, f: Callable[[_V], "Parser[_W]"]) -> "Parser[_W]":
        """Run this parser, build the next parser from its value with `f`, and run
        that one where this parser ended.

        Also known as `>>=` in Haskell. Use it for context-sensitive grammars, where
        what comes next depends on a value parsed earlier.

        Examples:

        ```pycon
        >>> digit = fixed(1).captured_text() >> int
        >>> counted = digit.bind(lambda n: fixed(n).captured_text())
        >>> counted.parse("3abc")
        'abc'
        >>> counted.parse("3ab") is None
        True

        ```
        """

        @parser("(%s >>=)" % self.name)
        def _bind(text: str, at: Offset) -> Optional[ParseOutcome[_W]]:
            res = self.run(text, at)
            if res is None:
                return None
            return f(res.value).run(text, res.end)

        return _bind

    def when(self, pred: Callable[[_V], bool]) -> "Parser[_V]":
        """Succeed only if the parsed value satisfies the predicate `pred`.

        The predicate runs after a successful match and can still turn it into a
        failure.
        """

        @parser("when(%s)" % self.name)
        def _when(text: str, at: Offset) -> Optional[ParseOutcome[_V]]:
            res = self.run(text, at)
            if res is None or not pred(res.value):
                return None
            return res

        return _when

    def pattern(self) -> Pattern:
        """Match the same prefix as this parser and drop its value."""

        @pattern(self.name)
        def _erased(text: str, at: Offset) -> Optional[Offset]:
            res = self.run(text, at)
            if res is None:
                return None
            return res.end

        return _erased

    def __neg__(self) -> Pattern:
        """An alias for `p.pattern()`: its value is ignored by the sequential `+`
        combinator.

        You can use it for throwing away elements of concrete syntax (e.g. `","`,
        `";"`) that you parsed with a parser.
        """
        return self.pattern()


def pattern(name: str) -> Callable[[_RunFn[Offset]], Pattern]:
    """Decorator to create named patterns directly.

    The decorated function takes the text and a start offset and returns the end
    offset of the match, or `None`.
    """

    def _pattern(f: _RunFn[Offset]) -> Pattern:
        return Pattern(f).named(name)

    return _pattern


def parser(name: str) -> Callable[[_RunFn[ParseOutcome[_V]]], Parser[_V]]:
    """Decorator to create named parsers directly.

    The decorated function takes the text and a start offset and returns a
    `ParseOutcome`, or `None`.
    """

    def _parser(f: _RunFn[ParseOutcome[_V]]) -> Parser[_V]:
        return Parser(f).named(name)

    return _parser


@pattern("end of text")
def finished(text: str, at: Offset) -> Optional[Offset]:
    """A pattern that matches only if there are no characters left."""
    if at >= len(text):
        return at
    return None


@pattern("nothing")
def nothing(text: str, at: Offset) -> Optional[Offset]:
    """A pattern that always matches and consumes nothing."""
    return at


@pattern("failure")
def failure(text: str, at: Offset) -> Optional[Offset]:
    """A pattern that never matches."""
    return None


def literal(prefix: str) -> Pattern:
    """An alias for `Pattern.literal(prefix)`."""
    return Pattern.literal(prefix)


def fixed(n: int) -> Pattern:
    """An alias for `Pattern.fixed(n)`."""
    return Pattern.fixed(n)


def pure(x: _V) -> Parser[_V]:
    """Wrap any object into a parser.

    An alias for `Parser.pure(x)`.
    """
    return Parser.pure(x)


@overload
def maybe(p: Pattern) -> Pattern:
    ...


@overload
def maybe(p: Parser[_V]) -> Parser[Optional[_V]]:
    ...


def maybe(p: Any) -> Any:
    """Return a combinator that also succeeds when `p` fails, consuming nothing.

    Examples:

    ```pycon
    >>> expr = maybe(literal("x").returning("x"))
    >>> expr.parse("x")
    'x'
    >>> expr.match_prefix("y")
    ParseOutcome(value=None, end=0)

    ```
    """
    return p.optional()


@overload
def many(p: Pattern) -> Pattern:
    ...


@overload
def many(p: Parser[_V]) -> Parser[list[_V]]:
    ...


def many(p: Any) -> Any:
    """Return a combinator that applies `p` as many times as it succeeds.

    Examples:

    ```pycon
    >>> expr = many(literal("x").captured_text())
    >>> expr.parse("xx")
    ['x', 'x']
    >>> expr.match_prefix("xxxy")
    ParseOutcome(value=['x', 'x', 'x'], end=3)
    >>> expr.parse("")
    []

    ```
    """
    return p.zero_or_more()


@overload
def oneplus(p: Pattern) -> Pattern:
    ...


@overload
def oneplus(p: Parser[_V]) -> Parser[list[_V]]:
    ...


def oneplus(p: Any) -> Any:
    """Return a combinator that applies `p` one or more times.

    A similar combinator `many(p)` means apply `p` zero or more times, whereas
    `oneplus(p)` means apply `p` one or more times.
    """
    return p.one_or_more()


def skip(p: Parser[Any]) -> Pattern:
    """An alias for `-p`.

    See also docs for `Parser.__neg__()`.
    """
    return -p
