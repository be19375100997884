"""tffn exception hierarchy and error message table.

Shared across the registry, compiler and parser so every module raises
and catches the same types. Message wording is stable: callers compare
against it.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """Every failure the parser can report. ``NONE`` means no error."""

    NONE = ""
    DANGLING_CLOSE_BRACKET = "you forgot to open a bracket"
    NESTING_BRACKETS = "nesting brackets are prohibited"
    DANGLING_IGNORE_TOKEN = "format string cant end with '!'"
    UNCLOSED_BRACKET = "you forgot to close a bracket"
    IGNORE_TOKEN_INSIDE_BRACKET = "'!' token cant be used inside brackets"
    UNDEFINED_ACTION = "'{param}' action was never defined to the parser"
    ACTION_TEXT_ALREADY_EXISTS = "An action with '{param}' name already exists!"


def error_message(kind: ErrorKind, param: str | None = None) -> str | None:
    """Return the human-readable message for *kind*.

    ``ErrorKind.NONE`` has no message and yields ``None``. Parameterized
    kinds substitute *param* (an empty string when omitted)::

        error_message(ErrorKind.UNDEFINED_ACTION, "name")
        -> "'name' action was never defined to the parser"
    """
    if kind is ErrorKind.NONE:
        return None
    # str.replace instead of str.format: action names may contain braces
    return kind.value.replace("{param}", param or "")


class TffnError(Exception):
    """Base for all tffn-specific errors."""


@dataclass(frozen=True, slots=True)
class ActionError(TffnError):
    """An error with a kind from ``ErrorKind`` and an optional parameter.

    This is the value stored in a parser's error slot.
    """

    kind: ErrorKind
    param: str | None = None

    @property
    def message(self) -> str:
        return error_message(self.kind, self.param) or ""

    def __str__(self) -> str:
        return self.message


class FormatError(ActionError):
    """Raised when a format string cannot be compiled."""


class ActionExistsError(ActionError):
    """Raised when an action name is already taken by a static or dynamic action."""

    def __init__(self, name: str) -> None:
        super().__init__(kind=ErrorKind.ACTION_TEXT_ALREADY_EXISTS, param=name)
