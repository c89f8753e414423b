"""Shared key-value context passed between tasks."""

from __future__ import annotations

import asyncio
import warnings
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Iterator, TypeVar

from .errors import TaskExecutionError

T = TypeVar("T")
R = TypeVar("R")

LEGACY_DATA_KEY = "__legacy_data"

_MISSING = object()


def _matches(value: Any, type_: type | tuple[type, ...] | None) -> bool:
    """Return True when ``value`` is of ``type_`` (any value matches ``None``).

    ``bool`` is not accepted where ``int`` is asked for, so flags and
    counters stored under the same key never mix.
    """
    if type_ is None:
        return True
    types = type_ if isinstance(type_, tuple) else (type_,)
    if isinstance(value, bool) and bool not in types:
        return False
    return isinstance(value, types)


class ExtendedContext:
    """A key-value store holding values of any type, looked up by key."""

    def __init__(self) -> None:
        self._store: dict[str, Any] = {}

    @classmethod
    def with_data(cls, data: Any) -> "ExtendedContext":
        """Create a context holding ``data`` under the legacy data key."""
        ctx = cls()
        ctx.set(LEGACY_DATA_KEY, data)
        return ctx

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        self._store[str(key)] = value

    def _lookup(self, key: str, type_: type | tuple[type, ...] | None) -> Any:
        value = self._store.get(key, _MISSING)
        if value is _MISSING or not _matches(value, type_):
            return _MISSING
        return value

    def get(self, key: str, type_: type | tuple[type, ...] | None = None) -> Any:
        """Return the value under ``key``.

        Returns None when the key is absent or the value is not of ``type_``.
        """
        value = self._lookup(key, type_)
        return None if value is _MISSING else value

    def remove(self, key: str, type_: type | tuple[type, ...] | None = None) -> Any:
        """Remove ``key`` and return its value if it is of ``type_``.

        The entry is removed even when its type does not match; None is
        returned in that case and when the key is absent.
        """
        value = self._store.pop(key, _MISSING)
        if value is _MISSING or not _matches(value, type_):
            return None
        return value

    def contains_key(self, key: str) -> bool:
        return key in self._store

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __iter__(self) -> Iterator[str]:
        return iter(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def keys(self) -> list[str]:
        """Return all keys currently stored."""
        return list(self._store)

    def clear(self) -> None:
        self._store.clear()

    def get_data(self, type_: type | tuple[type, ...] | None = None) -> Any:
        """Return the legacy data value (deprecated: use ``get`` with a key)."""
        warnings.warn(
            "get_data() is deprecated; use get() with a key instead",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.get(LEGACY_DATA_KEY, type_)

    def __repr__(self) -> str:
        return f"ExtendedContext(keys={self.keys()!r})"


class _ReadWriteLock:
    """An asyncio lock allowing many readers or a single writer."""

    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @asynccontextmanager
    async def reading(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(
                lambda: not self._writer and self._waiting_writers == 0
            )
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @asynccontextmanager
    async def writing(self) -> AsyncIterator[None]:
        async with self._cond:
            self._waiting_writers += 1
            try:
                await self._cond.wait_for(
                    lambda: not self._writer and self._readers == 0
                )
            finally:
                self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()


class Context:
    """An ``ExtendedContext`` shared between concurrently running tasks.

    Every coroutine method takes the lock itself. ``read()`` and ``write()``
    give direct access to the store for several operations under one lock;
    the coroutine methods must not be awaited while holding it.
    """

    def __init__(self, inner: ExtendedContext | None = None) -> None:
        self._inner = inner if inner is not None else ExtendedContext()
        self._lock = _ReadWriteLock()

    @asynccontextmanager
    async def read(self) -> AsyncIterator[ExtendedContext]:
        """Hold shared access to the store for the duration of the block."""
        async with self._lock.reading():
            yield self._inner

    @asynccontextmanager
    async def write(self) -> AsyncIterator[ExtendedContext]:
        """Hold exclusive access to the store for the duration of the block."""
        async with self._lock.writing():
            yield self._inner

    async def set(self, key: str, value: Any) -> None:
        async with self.write() as ctx:
            ctx.set(key, value)

    async def get(self, key: str, type_: type | tuple[type, ...] | None = None) -> Any:
        async with self.read() as ctx:
            return ctx.get(key, type_)

    async def get_or_default(self, key: str, factory: Callable[[], T]) -> T:
        """Return the value under ``key``, or ``factory()`` when absent.

        When ``factory`` is a type, the stored value must also be of it.
        """
        type_ = factory if isinstance(factory, type) else None
        async with self.read() as ctx:
            value = ctx._lookup(key, type_)
        return factory() if value is _MISSING else value

    async def get_or(
        self, key: str, default: T, type_: type | tuple[type, ...] | None = None
    ) -> T:
        """Return the value under ``key``, or ``default`` when absent.

        Without ``type_`` the stored value must be of the default's type.
        """
        if type_ is None and default is not None:
            type_ = type(default)
        async with self.read() as ctx:
            value = ctx._lookup(key, type_)
        return default if value is _MISSING else value

    async def remove(self, key: str, type_: type | tuple[type, ...] | None = None) -> Any:
        async with self.write() as ctx:
            return ctx.remove(key, type_)

    async def contains_key(self, key: str) -> bool:
        async with self.read() as ctx:
            return ctx.contains_key(key)

    async def keys(self) -> list[str]:
        async with self.read() as ctx:
            return ctx.keys()

    async def clear(self) -> None:
        async with self.write() as ctx:
            ctx.clear()

    async def update(
        self,
        key: str,
        updater: Callable[[Any], Any],
        type_: type | tuple[type, ...] | None = None,
    ) -> None:
        """Replace the value under ``key`` with ``updater(value)``.

        Raises TaskExecutionError when the key is absent or of another type.
        """
        async with self.write() as ctx:
            value = ctx._lookup(key, type_)
            if value is _MISSING:
                raise TaskExecutionError(f"Key '{key}' not found")
            ctx.set(key, updater(value))

    async def update_or_insert(
        self, key: str, default: T, updater: Callable[[T], T]
    ) -> None:
        """Store ``updater(current)``, where a missing value counts as ``default``."""
        type_ = type(default) if default is not None else None
        async with self.write() as ctx:
            value = ctx._lookup(key, type_)
            ctx.set(key, updater(default if value is _MISSING else value))

    async def with_read(self, func: Callable[[ExtendedContext], R]) -> R:
        """Call ``func`` with the store under shared access and return its result."""
        async with self.read() as ctx:
            return func(ctx)

    async def with_write(self, func: Callable[[ExtendedContext], R]) -> R:
        """Call ``func`` with the store under exclusive access and return its result."""
        async with self.write() as ctx:
            return func(ctx)

    def __repr__(self) -> str:
        return f"Context({self._inner!r})"