"""Growable append-only byte buffer.

Backs every text accumulation in tffn: the compiler's literal and bracket
scratch space and the renderer's output. Storage is allocated up front
and doubled on overflow, so ``clear()`` followed by appends reuses the
same memory.
"""

from typing import Self


class Buffer:
    """A byte buffer with explicit capacity that grows by doubling.

    ``str`` input is stored as UTF-8. Nothing is terminated internally;
    text is only materialized by ``to_string()``.

    Usage::

        buf = Buffer(16)
        buf.append("Hello ")
        buf.append_char("!")
        buf.to_string()  # "Hello !"
    """

    __slots__ = ("_data", "_length")

    def __init__(self, capacity: int = 64) -> None:
        if capacity <= 0:
            msg = f"Buffer capacity must be positive, got {capacity!r}"
            raise ValueError(msg)
        self._data = bytearray(capacity)
        self._length = 0

    @classmethod
    def from_text(cls, text: str | bytes) -> Self:
        """Create a buffer already holding *text*, sized to fit it exactly."""
        data = text.encode("utf-8") if isinstance(text, str) else text
        buf = cls(max(len(data), 1))
        buf.append(data)
        return buf

    @property
    def capacity(self) -> int:
        return len(self._data)

    def __len__(self) -> int:
        return self._length

    def append(self, data: str | bytes, count: int | None = None) -> None:
        """Append the first *count* bytes of *data* (all of it by default).

        Does nothing when *data* is empty or *count* is zero.
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        if count is None:
            count = len(data)
        if not data or count <= 0:
            return
        if count > len(data):
            msg = f"Cannot append {count} bytes from a {len(data)}-byte source"
            raise ValueError(msg)

        end = self._length + count
        if end > len(self._data):
            self._grow(end)
        self._data[self._length : end] = memoryview(data)[:count]
        self._length = end

    def append_char(self, char: str) -> None:
        """Append a single character."""
        if len(char) != 1:
            msg = f"append_char expects exactly one character, got {char!r}"
            raise ValueError(msg)
        self.append(char)

    def clear(self) -> None:
        """Forget the contents. Capacity and storage are kept for reuse."""
        self._length = 0

    def to_bytes(self) -> bytes:
        """Return an independent copy of the current contents."""
        return bytes(self._data[: self._length])

    def to_string(self) -> str:
        """Return the contents as text. An empty buffer gives ``""``.

        Never fails: bytes that are not valid UTF-8 (raw bytes from an
        action, a code point cut by ``count``) come back as lone
        surrogates, and ``to_bytes()`` still returns them unchanged.
        """
        return self._data[: self._length].decode("utf-8", errors="surrogateescape")

    def release(self) -> None:
        """Drop the backing storage.

        Any later append that needs storage raises ``RuntimeError``.
        """
        self._data = bytearray()
        self._length = 0

    def _grow(self, needed: int) -> None:
        capacity = len(self._data)
        if capacity == 0:
            msg = "Buffer has been released"
            raise RuntimeError(msg)
        while capacity < needed:
            capacity *= 2
        self._data.extend(bytes(capacity - len(self._data)))

    def __repr__(self) -> str:
        return f"Buffer(length={self._length}, capacity={len(self._data)})"
