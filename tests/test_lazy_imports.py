"""Tests for tffn.__init__ — the public API and its lazy name table."""

from importlib import import_module

import pytest

import tffn


@pytest.mark.parametrize(("name", "module_name"), sorted(tffn._LAZY_IMPORTS.items()))
def test_name_resolves_to_defining_module(name: str, module_name: str) -> None:
    assert getattr(tffn, name) is getattr(import_module(module_name), name)


def test_public_names_match_lazy_table() -> None:
    assert sorted(tffn.__all__) == sorted(tffn._LAZY_IMPORTS)


def test_unknown_name() -> None:
    with pytest.raises(AttributeError, match="'tffn' has no attribute 'Missing'"):
        tffn.__getattr__("Missing")


def test_top_level_parser_works() -> None:
    parser = tffn.Parser()
    parser.define_static_action("lang", "Python")
    assert parser.parse("Hello from [lang]!!") == "Hello from Python!"
