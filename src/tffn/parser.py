"""Parser — the public entry point.

Ties the action registry, compiler and renderer together and keeps a
single error slot per instance. ``parse()`` returns ``None`` on failure;
``okay()`` tells a failure apart from a legitimately empty result.

Basic usage::

    from tffn import Parser

    parser = Parser()
    parser.define_static_action("name", "tffn")
    parser.define_dynamic_action("count", lambda buf: buf.append(str(next(ids))))

    parser.parse("[name] #[count]")   # "tffn #0"
    parser.parse("[missing]")         # None
    parser.error_message              # "'missing' action was never defined to the parser"

Single-threaded: one instance reuses its scratch and output buffers
across calls. Give each thread its own parser.
"""

import logging
from types import TracebackType
from typing import Self

from tffn._internal.buffer import Buffer
from tffn.actions import ActionRegistry
from tffn.compiler import FormatCompiler
from tffn.config import ParserConfig
from tffn.errors import ActionError, ActionExistsError, FormatError
from tffn.renderer import render_steps
from tffn.steps import DynamicAction

logger = logging.getLogger("tffn.parser")


class Parser:
    """Compile-and-render front end with a queryable error slot.

    Errors are recorded rather than raised unless
    ``ParserConfig(raise_errors=True)`` is set. The slot holds at most one
    error and is overwritten by the next one.
    """

    __slots__ = ("_closed", "_compiler", "_error", "_output", "_registry", "config")

    def __init__(self, config: ParserConfig | None = None) -> None:
        self.config = config or ParserConfig()
        self._registry = ActionRegistry(self.config.action_table_size)
        self._compiler = FormatCompiler(
            self._registry,
            cache_table_size=self.config.cache_table_size,
            buffer_capacity=self.config.buffer_capacity,
        )
        self._output = Buffer(self.config.buffer_capacity)
        self._error: ActionError | None = None
        self._closed = False

    # -- Error slot --

    def okay(self) -> bool:
        """True when the last define/parse call left no error behind."""
        return self._error is None

    @property
    def error(self) -> ActionError | None:
        return self._error

    @property
    def error_message(self) -> str | None:
        if self._error is None:
            return None
        return self._error.message

    # -- Actions --

    def define_static_action(self, name: str, text: str) -> bool:
        """Register fixed replacement *text* for ``[name]``.

        Returns whether the action was registered. A duplicate name sets
        the error slot; an empty name or ``None`` text is ignored silently.
        """
        self._check_open()
        try:
            registered = self._registry.define_static(name, text)
        except ActionExistsError as exc:
            self._record(exc)
            return False
        if registered:
            self._error = None
        return registered

    def define_dynamic_action(self, name: str, action: DynamicAction) -> bool:
        """Register *action* to append text wherever ``[name]`` appears.

        *action* receives the output ``Buffer`` and returns nothing. State
        it needs (counters, clocks) belongs to the caller, typically in a
        closure or a callable object.
        """
        self._check_open()
        try:
            registered = self._registry.define_dynamic(name, action)
        except ActionExistsError as exc:
            self._record(exc)
            return False
        if registered:
            self._error = None
        return registered

    def has_action(self, name: str) -> bool:
        return name in self._registry

    @property
    def action_count(self) -> int:
        return len(self._registry)

    def clear_actions(self) -> None:
        """Forget every action, and with them every compiled format.

        Cached steps hold inlined static text and resolved callbacks, so
        they go together with the registry.
        """
        self._check_open()
        self._registry.clear()
        self._compiler.clear_cache()

    # -- Parsing --

    def render(self, source: str) -> str:
        """Compile (or fetch from cache) and render *source*.

        Raises ``FormatError`` when *source* is malformed. Does not touch
        the error slot.
        """
        self._check_open()
        if not source:
            return ""

        steps = self._compiler.compile(source)
        out = self._output
        out.clear()
        try:
            render_steps(steps, out)
            return out.to_string()
        finally:
            out.clear()

    def parse(self, source: str) -> str | None:
        """Render *source*, recording a failure instead of raising.

        The empty string yields ``""`` and leaves the error slot alone.
        Otherwise the slot is cleared first, so ``okay()`` reflects this
        call only.
        """
        self._check_open()
        if not source:
            return ""

        self._error = None
        try:
            return self.render(source)
        except FormatError as exc:
            self._record(exc)
            return None

    # -- Cache --

    def is_cached(self, source: str) -> bool:
        return self._compiler.cached(source) is not None

    def forget(self, source: str) -> bool:
        """Drop the compiled form of *source*. Returns whether it was cached."""
        return self._compiler.evict(source)

    def clear_cache(self) -> None:
        self._compiler.clear_cache()

    # -- Lifecycle --

    def close(self) -> None:
        """Release registries, cache and buffers. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._compiler.release()
        self._registry.clear()
        self._output.release()
        self._error = None

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _record(self, exc: ActionError) -> None:
        if self.config.raise_errors:
            raise exc
        logger.debug("%s: %s", exc.kind.name, exc.message)
        self._error = exc

    def _check_open(self) -> None:
        if self._closed:
            msg = "Parser is closed."
            raise RuntimeError(msg)
