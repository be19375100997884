"""Tests for tffn.compiler — tokenizer state machine and format cache."""

import logging

import pytest

from tffn._internal.buffer import Buffer
from tffn.actions import ActionRegistry
from tffn.compiler import FormatCompiler
from tffn.errors import ErrorKind, FormatError
from tffn.steps import Invoke, Literal


def _stamp(buf: Buffer) -> None:
    buf.append("<stamp>")


@pytest.fixture
def registry() -> ActionRegistry:
    registry = ActionRegistry()
    registry.define_static("a", "A")
    registry.define_static("b", "B")
    registry.define_static("test", "in brackets!")
    registry.define_dynamic("d", _stamp)
    return registry


@pytest.fixture
def compiler(registry: ActionRegistry) -> FormatCompiler:
    return FormatCompiler(registry, cache_table_size=16, buffer_capacity=1)


class TestLiterals:
    def test_plain_text(self, compiler: FormatCompiler) -> None:
        assert compiler.compile("hello") == (Literal("hello"),)

    def test_empty_string(self, compiler: FormatCompiler) -> None:
        assert compiler.compile("") == ()

    def test_unicode(self, compiler: FormatCompiler) -> None:
        assert compiler.compile("héllo wörld") == (Literal("héllo wörld"),)


class TestEscapes:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("!!!!!!!!", "!!!!"),
            ("wow!!!!!!", "wow!!!"),
            ("![", "["),
            ("!]", "]"),
            ("![a!]", "[a]"),
            ("!x", "x"),
            ("!é", "é"),
        ],
    )
    def test_escaped(self, compiler: FormatCompiler, source: str, expected: str) -> None:
        assert compiler.compile(source) == (Literal(expected),)


class TestStaticActions:
    def test_inlined(self, compiler: FormatCompiler) -> None:
        assert compiler.compile("x[a]y") == (Literal("xAy"),)

    def test_consecutive_statics_merge(self, compiler: FormatCompiler) -> None:
        assert compiler.compile("[a][b]") == (Literal("AB"),)

    def test_static_text_is_not_reparsed(self, registry: ActionRegistry) -> None:
        registry.define_static("raw", "[d]!")
        compiler = FormatCompiler(registry)
        assert compiler.compile("[raw]") == (Literal("[d]!"),)

    def test_empty_static_produces_no_step(self, registry: ActionRegistry) -> None:
        registry.define_static("nothing", "")
        compiler = FormatCompiler(registry)
        assert compiler.compile("[nothing]") == ()


class TestDynamicActions:
    def test_alone(self, compiler: FormatCompiler) -> None:
        assert compiler.compile("[d]") == (Invoke(_stamp),)

    def test_flushes_pending_literal(self, compiler: FormatCompiler) -> None:
        assert compiler.compile("x[d]y") == (Literal("x"), Invoke(_stamp), Literal("y"))

    def test_adjacent_invokes(self, compiler: FormatCompiler) -> None:
        assert compiler.compile("[d][d]") == (Invoke(_stamp), Invoke(_stamp))

    def test_static_before_dynamic(self, compiler: FormatCompiler) -> None:
        assert compiler.compile("[a] [d] [b]") == (
            Literal("A "),
            Invoke(_stamp),
            Literal(" B"),
        )

    def test_escapes_around_actions(self, registry: ActionRegistry) -> None:
        registry.define_dynamic("this", _stamp)
        compiler = FormatCompiler(registry)
        assert compiler.compile("[this] ![[test]!]") == (
            Invoke(_stamp),
            Literal(" [in brackets!]"),
        )


class TestErrors:
    @pytest.mark.parametrize(
        ("source", "kind"),
        [
            ("]", ErrorKind.DANGLING_CLOSE_BRACKET),
            ("text]", ErrorKind.DANGLING_CLOSE_BRACKET),
            ("[unclosed", ErrorKind.UNCLOSED_BRACKET),
            ("[", ErrorKind.UNCLOSED_BRACKET),
            ("[[a]]", ErrorKind.NESTING_BRACKETS),
            ("[a[b]c]", ErrorKind.NESTING_BRACKETS),
            ("Hello!! World!", ErrorKind.DANGLING_IGNORE_TOKEN),
            ("!", ErrorKind.DANGLING_IGNORE_TOKEN),
            ("[!]", ErrorKind.IGNORE_TOKEN_INSIDE_BRACKET),
            ("[a!!b]", ErrorKind.IGNORE_TOKEN_INSIDE_BRACKET),
        ],
    )
    def test_malformed(self, compiler: FormatCompiler, source: str, kind: ErrorKind) -> None:
        with pytest.raises(FormatError) as exc_info:
            compiler.compile(source)
        assert exc_info.value.kind is kind

    def test_undefined_action(self, compiler: FormatCompiler) -> None:
        with pytest.raises(FormatError) as exc_info:
            compiler.compile("hi [missing] there")
        assert exc_info.value.kind is ErrorKind.UNDEFINED_ACTION
        assert exc_info.value.param == "missing"
        assert str(exc_info.value) == "'missing' action was never defined to the parser"

    def test_empty_brackets(self, compiler: FormatCompiler) -> None:
        with pytest.raises(FormatError) as exc_info:
            compiler.compile("[]")
        assert exc_info.value.param == ""

    def test_names_are_not_trimmed(self, compiler: FormatCompiler) -> None:
        with pytest.raises(FormatError) as exc_info:
            compiler.compile("[ a ]")
        assert exc_info.value.param == " a "

    def test_scratch_state_reset_after_error(self, compiler: FormatCompiler) -> None:
        with pytest.raises(FormatError):
            compiler.compile("leftover [unclosed")
        assert compiler.compile("fresh") == (Literal("fresh"),)


class TestCache:
    def test_second_compile_is_cached(self, compiler: FormatCompiler) -> None:
        first = compiler.compile("x[d]y")
        second = compiler.compile("x[d]y")
        assert first is second
        assert compiler.cache_size == 1

    def test_cached_lookup(self, compiler: FormatCompiler) -> None:
        assert compiler.cached("x[a]") is None
        steps = compiler.compile("x[a]")
        assert compiler.cached("x[a]") is steps

    def test_empty_string_not_cached(self, compiler: FormatCompiler) -> None:
        compiler.compile("")
        assert compiler.cache_size == 0

    def test_failures_not_cached(self, compiler: FormatCompiler) -> None:
        with pytest.raises(FormatError):
            compiler.compile("[missing]")
        assert compiler.cache_size == 0

    def test_failure_then_definition(self, registry: ActionRegistry, compiler: FormatCompiler) -> None:
        with pytest.raises(FormatError):
            compiler.compile("[late]")
        registry.define_static("late", "on time")
        assert compiler.compile("[late]") == (Literal("on time"),)

    def test_steps_with_no_output_are_cached(self, registry: ActionRegistry) -> None:
        registry.define_static("nothing", "")
        compiler = FormatCompiler(registry)
        compiler.compile("[nothing]")
        assert compiler.cached("[nothing]") == ()

    def test_evict(self, compiler: FormatCompiler) -> None:
        compiler.compile("abc")
        assert compiler.evict("abc") is True
        assert compiler.evict("abc") is False
        assert compiler.cached("abc") is None

    def test_clear_cache(self, compiler: FormatCompiler) -> None:
        for source in ("a", "b", "[a]"):
            compiler.compile(source)
        compiler.clear_cache()
        assert compiler.cache_size == 0

    def test_many_entries_share_small_table(self, registry: ActionRegistry) -> None:
        compiler = FormatCompiler(registry, cache_table_size=2)
        sources = [f"line {i} [a]" for i in range(50)]
        for source in sources:
            compiler.compile(source)
        assert compiler.cache_size == 50
        for i, source in enumerate(sources):
            assert compiler.compile(source) == (Literal(f"line {i} A"),)

    def test_logs_compile_on_miss_only(
        self, compiler: FormatCompiler, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="tffn.compiler"):
            compiler.compile("once")
            compiler.compile("once")
        messages = [r.getMessage() for r in caplog.records if r.name == "tffn.compiler"]
        assert messages == ["Compiling format 'once'"]
