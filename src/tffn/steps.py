"""Compiled step types.

A compiled format string is a tuple of steps: literal text to copy into
the output, or a dynamic action to call with the output buffer.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeAlias

from tffn._internal.buffer import Buffer

# Dynamic action — appends its text to the output buffer, returns nothing
DynamicAction: TypeAlias = Callable[[Buffer], None]


@dataclass(frozen=True, slots=True)
class Literal:
    """Text emitted verbatim. Static action text is already merged in."""

    text: str


@dataclass(frozen=True, slots=True)
class Invoke:
    """A dynamic action called at render time."""

    action: DynamicAction


Step: TypeAlias = Literal | Invoke

# Immutable once built; owned by the format cache
Steps: TypeAlias = tuple[Step, ...]
