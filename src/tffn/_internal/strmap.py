"""Chained string-keyed hash map with a fixed bucket count.

Used for the action registries and the format cache. The table never
resizes: pick ``table_size`` for the expected number of keys.
"""

from collections.abc import Iterator
from typing import Generic, TypeVar

V = TypeVar("V")

_MASK64 = 0xFFFF_FFFF_FFFF_FFFF


def _key_bytes(key: str | bytes) -> bytes:
    return key.encode("utf-8") if isinstance(key, str) else bytes(key)


def string_hash(key: str | bytes, table_size: int) -> int:
    """Map *key* to a bucket index in ``[0, table_size)``.

    Multiply-by-17 accumulation over the key bytes, finished with the
    MurmurHash3 64-bit finalizer (public domain, Austin Appleby).

    Bytes are added as unsigned values (0-255), so keys containing bytes
    >= 0x80 land in different buckets than a signed-``char`` C build would
    pick. Indices are only meaningful within this package.
    """
    h = 0
    for byte in _key_bytes(key):
        h = (h * 17 + byte) & _MASK64

    h ^= h >> 33
    h = (h * 0xFF51AFD7ED558CCD) & _MASK64
    h ^= h >> 33
    h = (h * 0xC4CEB9FE1A85EC53) & _MASK64
    h ^= h >> 33

    return h % table_size


class _Entry:
    """One link of a bucket chain. Owns its copy of the key."""

    __slots__ = ("key", "key_length", "next", "value")

    def __init__(self, key: bytes, value: object, next: "_Entry | None") -> None:  # noqa: A002
        self.key = key
        self.key_length = len(key)
        self.value = value
        self.next = next

    def matches(self, key: bytes) -> bool:
        # Length first: cheap rejection when hashes collide
        return self.key_length == len(key) and self.key == key


class StringMap(Generic[V]):
    """Open-hashing map from string keys to values.

    Each bucket holds a singly-linked chain; new entries are prepended.
    A key appears at most once: the first insert wins and later inserts
    of the same key report ``False``. ``None`` is never stored.

    Usage::

        actions = StringMap[str](128)
        actions.insert("name", "value")   # True
        actions.insert("name", "other")   # False
        actions.lookup("name")            # "value"
    """

    __slots__ = ("_buckets", "_count", "_table_size")

    def __init__(self, table_size: int) -> None:
        if table_size <= 0:
            msg = f"StringMap table_size must be positive, got {table_size!r}"
            raise ValueError(msg)
        self._table_size = table_size
        self._buckets: list[_Entry | None] = [None] * table_size
        self._count = 0

    @property
    def table_size(self) -> int:
        return self._table_size

    def insert(self, key: str | bytes, value: V | None) -> bool:
        """Insert *value* under *key*. Returns whether the map changed."""
        if value is None:
            return False

        raw = _key_bytes(key)
        index = string_hash(raw, self._table_size)
        if self._find(self._buckets[index], raw) is not None:
            return False

        self._buckets[index] = _Entry(raw, value, self._buckets[index])
        self._count += 1
        return True

    def lookup(self, key: str | bytes) -> V | None:
        """Return the value stored under *key*, or ``None``."""
        raw = _key_bytes(key)
        entry = self._find(self._buckets[string_hash(raw, self._table_size)], raw)
        if entry is None:
            return None
        return entry.value  # type: ignore[return-value]

    def delete(self, key: str | bytes) -> V | None:
        """Remove *key* and return its value, or ``None`` if absent."""
        raw = _key_bytes(key)
        index = string_hash(raw, self._table_size)

        prev: _Entry | None = None
        entry = self._buckets[index]
        while entry is not None:
            if entry.matches(raw):
                if prev is None:
                    self._buckets[index] = entry.next
                else:
                    prev.next = entry.next
                entry.next = None
                self._count -= 1
                return entry.value  # type: ignore[return-value]
            prev = entry
            entry = entry.next
        return None

    def clear(self) -> None:
        """Release every entry. The bucket count is kept."""
        for index, entry in enumerate(self._buckets):
            while entry is not None:
                following = entry.next
                entry.next = None
                entry = following
            self._buckets[index] = None
        self._count = 0

    def items(self) -> Iterator[tuple[str, V]]:
        """Yield ``(key, value)`` pairs in bucket order, chain order within a bucket."""
        for head in self._buckets:
            entry = head
            while entry is not None:
                yield entry.key.decode("utf-8", errors="surrogateescape"), entry.value  # type: ignore[misc]
                entry = entry.next

    def chain_length(self, index: int) -> int:
        """Number of entries in bucket *index*."""
        length = 0
        entry = self._buckets[index]
        while entry is not None:
            length += 1
            entry = entry.next
        return length

    def __iter__(self) -> Iterator[str]:
        for key, _ in self.items():
            yield key

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (str, bytes)):
            return False
        return self.lookup(key) is not None

    def __len__(self) -> int:
        return self._count

    def __repr__(self) -> str:
        return f"StringMap(table_size={self._table_size}, entries={self._count})"

    @staticmethod
    def _find(entry: _Entry | None, key: bytes) -> _Entry | None:
        while entry is not None:
            if entry.matches(key):
                return entry
            entry = entry.next
        return None
