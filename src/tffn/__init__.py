"""tffn — a small template-format compiler.

Format strings mix literal text, ``[action]`` references and the ``!``
escape token. Actions are static (fixed text, inlined at compile time)
or dynamic (a callable that appends to the output at render time).
Compiled formats are cached by their exact source text.

Basic usage::

    from tffn import Parser

    parser = Parser()
    parser.define_static_action("lang", "Python")
    parser.parse("Hello from [lang]!!")  # "Hello from Python!"
"""

__version__ = "0.1.0"
__all__ = [
    "ActionError",
    "ActionExistsError",
    "ActionRegistry",
    "Buffer",
    "ErrorKind",
    "FormatCompiler",
    "FormatError",
    "Invoke",
    "Literal",
    "Parser",
    "ParserConfig",
    "StringMap",
    "TffnError",
    "error_message",
    "render_steps",
]

# name -> defining module, resolved on first attribute access
_LAZY_IMPORTS: dict[str, str] = {
    "ActionError": "tffn.errors",
    "ActionExistsError": "tffn.errors",
    "ActionRegistry": "tffn.actions",
    "Buffer": "tffn._internal.buffer",
    "ErrorKind": "tffn.errors",
    "FormatCompiler": "tffn.compiler",
    "FormatError": "tffn.errors",
    "Invoke": "tffn.steps",
    "Literal": "tffn.steps",
    "Parser": "tffn.parser",
    "ParserConfig": "tffn.config",
    "StringMap": "tffn._internal.strmap",
    "TffnError": "tffn.errors",
    "error_message": "tffn.errors",
    "render_steps": "tffn.renderer",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import tffn`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    from importlib import import_module

    return getattr(import_module(module_name), name)
