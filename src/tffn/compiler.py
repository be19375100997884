"""Format compiler — tokenizes format strings into cached step tuples.

Format language::

    "Hello [name]!!"    -> [Literal("Hello tffn!")]          (static action)
    "[count] items"     -> [Invoke(count), Literal(" items")] (dynamic action)
    "![literal!]"       -> [Literal("[literal]")]             (escaped brackets)

``[name]`` references an action. ``!`` makes the next character literal;
it cannot end the string or appear inside brackets. Brackets do not nest.
"""

import logging

from tffn._internal.buffer import Buffer
from tffn._internal.strmap import StringMap
from tffn.actions import ActionRegistry
from tffn.errors import ErrorKind, FormatError
from tffn.steps import Invoke, Literal, Step, Steps

logger = logging.getLogger("tffn.compiler")

OPEN_BRACKET = "["
CLOSE_BRACKET = "]"
IGNORE_TOKEN = "!"


class FormatCompiler:
    """Compiles format strings against an ``ActionRegistry``.

    Compiled tuples are cached by the exact source text. The cache is
    pure memoization: for a fixed registry, compiling a string again
    gives an equal tuple. Failed compilations are never cached.

    Not reentrant: the literal and bracket scratch buffers are shared by
    every ``compile()`` call on this instance.
    """

    __slots__ = ("_bracket", "_cache", "_literal", "_registry")

    def __init__(
        self,
        registry: ActionRegistry,
        *,
        cache_table_size: int = 128,
        buffer_capacity: int = 64,
    ) -> None:
        self._registry = registry
        self._cache: StringMap[Steps] = StringMap(cache_table_size)
        self._literal = Buffer(buffer_capacity)
        self._bracket = Buffer(buffer_capacity)

    def compile(self, source: str) -> Steps:
        """Return the steps for *source*, compiling on a cache miss.

        The empty string compiles to ``()`` without touching the cache.
        Raises ``FormatError`` for malformed input or unknown actions.
        """
        if not source:
            return ()

        steps = self._cache.lookup(source)
        if steps is not None:
            return steps

        logger.debug("Compiling format %r", source)
        steps = self._tokenize(source)
        self._cache.insert(source, steps)
        return steps

    def cached(self, source: str) -> Steps | None:
        """Return the cached steps for *source* without compiling."""
        return self._cache.lookup(source)

    def evict(self, source: str) -> bool:
        """Drop *source* from the cache. Returns whether it was cached."""
        return self._cache.delete(source) is not None

    def clear_cache(self) -> None:
        self._cache.clear()

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def release(self) -> None:
        """Release the cache and scratch buffers."""
        self._cache.clear()
        self._literal.release()
        self._bracket.release()

    def _tokenize(self, source: str) -> Steps:
        literal = self._literal
        bracket = self._bracket
        literal.clear()
        bracket.clear()

        steps: list[Step] = []
        in_bracket = False
        length = len(source)
        i = 0

        while i < length:
            char = source[i]

            if char == OPEN_BRACKET:
                if in_bracket:
                    raise FormatError(ErrorKind.NESTING_BRACKETS)
                in_bracket = True

            elif char == CLOSE_BRACKET:
                if not in_bracket:
                    raise FormatError(ErrorKind.DANGLING_CLOSE_BRACKET)
                in_bracket = False
                name = bracket.to_string()
                bracket.clear()
                self._resolve(name, steps)

            elif char == IGNORE_TOKEN:
                if in_bracket:
                    raise FormatError(ErrorKind.IGNORE_TOKEN_INSIDE_BRACKET)
                if i == length - 1:
                    raise FormatError(ErrorKind.DANGLING_IGNORE_TOKEN)
                literal.append_char(source[i + 1])
                i += 2
                continue

            elif in_bracket:
                bracket.append_char(char)

            else:
                literal.append_char(char)

            i += 1

        if in_bracket:
            raise FormatError(ErrorKind.UNCLOSED_BRACKET)

        self._flush_literal(steps)
        return tuple(steps)

    def _resolve(self, name: str, steps: list[Step]) -> None:
        # Static text is inlined; consecutive static references share one Literal
        text = self._registry.static_actions.lookup(name)
        if text is not None:
            self._literal.append(text)
            return

        action = self._registry.dynamic_actions.lookup(name)
        if action is None:
            raise FormatError(ErrorKind.UNDEFINED_ACTION, name)

        self._flush_literal(steps)
        steps.append(Invoke(action))

    def _flush_literal(self, steps: list[Step]) -> None:
        if len(self._literal) > 0:
            steps.append(Literal(self._literal.to_string()))
            self._literal.clear()
