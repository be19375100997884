"""Action registry — static and dynamic actions in one namespace.

Static actions map a name to fixed replacement text that the compiler
inlines. Dynamic actions map a name to a callable run at render time.
A name registered in either table blocks the other.
"""

from tffn._internal.strmap import StringMap
from tffn.errors import ActionExistsError
from tffn.steps import DynamicAction


class ActionRegistry:
    """Name → action tables used by the compiler for name resolution.

    Usage::

        registry = ActionRegistry()
        registry.define_static("name", "tffn")
        registry.define_dynamic("time", lambda buf: buf.append(now()))
        registry.lookup("name")  # "tffn"
    """

    __slots__ = ("dynamic_actions", "static_actions")

    def __init__(self, table_size: int = 128) -> None:
        self.static_actions: StringMap[str] = StringMap(table_size)
        self.dynamic_actions: StringMap[DynamicAction] = StringMap(table_size)

    def define_static(self, name: str, text: str) -> bool:
        """Register *text* as the replacement for ``[name]``.

        Returns ``False`` without raising when *name* is empty or *text* is
        ``None``. Raises ``ActionExistsError`` if *name* is already taken.
        """
        if not name or text is None:
            return False
        self._ensure_free(name)
        return self.static_actions.insert(name, text)

    def define_dynamic(self, name: str, action: DynamicAction) -> bool:
        """Register *action* to run wherever ``[name]`` appears.

        Same rejection rules as ``define_static``.
        """
        if not name or action is None:
            return False
        self._ensure_free(name)
        return self.dynamic_actions.insert(name, action)

    def lookup(self, name: str) -> str | DynamicAction | None:
        """Resolve *name*: static text first, then a dynamic action, else ``None``."""
        text = self.static_actions.lookup(name)
        if text is not None:
            return text
        return self.dynamic_actions.lookup(name)

    def contains(self, name: str) -> bool:
        return name in self.static_actions or name in self.dynamic_actions

    __contains__ = contains

    def clear(self) -> None:
        self.static_actions.clear()
        self.dynamic_actions.clear()

    def __len__(self) -> int:
        return len(self.static_actions) + len(self.dynamic_actions)

    def _ensure_free(self, name: str) -> None:
        if self.contains(name):
            raise ActionExistsError(name)
