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

"""One-shot resolution of self-referential grammars.

A recursive grammar is built around a `RecursiveCell`. The cell starts empty, gets
a builder, and resolves it the first time the grammar runs. The placeholder handed
to the builder reaches the cell through a weak reference, so the finished grammar
contains no strong reference cycle.

Resolution is double-checked: the resolved run function is read without locking
once it exists, and is computed at most once under the cell's lock.
"""

__all__ = ["RecursiveCell", "forwarder", "depth_clamp"]

import logging
import sys
import threading
import weakref
from typing import Any, Callable, Optional

from textcombinators.errors import DepthLimitExceededError, GrammarError

log = logging.getLogger(__name__)

_RunFn = Callable[[str, int], Any]


class RecursiveCell:
    """Private resolution slot of a single recursive grammar.

    `build` returns the run function of the resolved grammar. It is called at most
    once successfully, and dropped afterwards.

    With `max_depth` set, nested invocations through the cell are counted per thread
    and `DepthLimitExceededError` is raised beyond the limit.
    """

    __slots__ = (
        "name",
        "_build",
        "_run",
        "_lock",
        "_resolving",
        "_max_depth",
        "_local",
        "__weakref__",
    )

    def __init__(self, name: str, max_depth: Optional[int] = None) -> None:
        self.name = name
        self._build: Optional[Callable[[], _RunFn]] = None
        self._run: Optional[_RunFn] = None
        self._lock = threading.RLock()
        self._resolving = False
        self._max_depth = None if max_depth is None else depth_clamp(max_depth)
        self._local = threading.local()

    def bind(self, build: Callable[[], _RunFn]) -> None:
        self._build = build

    @property
    def is_resolved(self) -> bool:
        return self._run is not None

    def resolve(self) -> _RunFn:
        run = self._run
        if run is not None:
            return run
        with self._lock:
            if self._run is None:
                if self._resolving:
                    raise GrammarError(
                        "%s was invoked by its own builder before the grammar was "
                        "built; use the placeholder inside combinators only"
                        % self.name
                    )
                if self._build is None:
                    raise GrammarError("%s has no builder" % self.name)
                self._resolving = True
                try:
                    self._run = self._build()
                finally:
                    self._resolving = False
                self._build = None
                log.debug("resolved %s", self.name)
            return self._run

    def invoke(self, text: str, at: int) -> Any:
        run = self.resolve()
        if self._max_depth is None:
            return run(text, at)

        depth = getattr(self._local, "depth", 0)
        if depth >= self._max_depth:
            raise DepthLimitExceededError(
                "%s nested deeper than %d levels at offset %d"
                % (self.name, self._max_depth, at)
            )
        self._local.depth = depth + 1
        try:
            return run(text, at)
        finally:
            self._local.depth = depth


def forwarder(cell: RecursiveCell) -> _RunFn:
    """Return a run function that forwards to `cell` without keeping it alive."""
    ref = weakref.ref(cell)
    name = cell.name

    def _forward(text: str, at: int) -> Any:
        target = ref()
        if target is None:
            raise GrammarError(
                "the placeholder of %s outlived its grammar" % name
            )
        return target.invoke(text, at)

    return _forward


def depth_clamp(requested_depth: int, reserve_frames: int = 50) -> int:
    """Clamp a requested nesting depth against the Python recursion limit.

    Every level of a recursive grammar takes several Python frames, so a depth
    larger than the recursion limit could never be reached anyway.

    Examples:

    ```pycon
    >>> depth_clamp(10)
    10

    ```
    """
    if requested_depth < 0:
        raise ValueError("max_depth must be non-negative, got %d" % requested_depth)
    max_safe_depth = sys.getrecursionlimit() - reserve_frames
    if requested_depth > max_safe_depth:
        log.warning(
            "Requested depth %d exceeds Python recursion limit (%d). "
            "Clamping to %d to prevent RecursionError.",
            requested_depth,
            sys.getrecursionlimit(),
            max_safe_depth,
        )
        return max_safe_depth
    return requested_depth
