"""Data shared by every view."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


class SharedStore:
    """Key/value data visible to every view as a fallback to its local data.

    A single process-wide instance lives at `default_store`. Views accept an
    explicit store so renders (and tests) can be isolated from each other.
    The store has no synchronization; hosts that render concurrently must
    guard writes themselves.
    """

    __slots__: tuple[str, ...] = ("_data",)

    def __init__(self, data: Mapping[str, object] | None = None) -> None:
        self._data: dict[str, object] = dict(data) if data else {}

    def share(
        self, key: str | Mapping[str, object], value: object = None
    ) -> object:
        """Add one entry, or every entry of a mapping, to the store.

        Existing keys are overwritten; there is no removal operation.

        Args:
            key: A key, or a mapping of keys to values.
            value: The value for a single key. Ignored for mappings.

        Returns:
            The value that was set. For a mapping, the value of its last
            entry, or `value` when the mapping is empty.
        """
        if isinstance(key, str):
            self._data[key] = value
            return value

        for name, item in key.items():
            self._data[name] = item
            value = item
        return value

    def get(self, key: str, default: object = None) -> object:
        return self._data.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def merged(self, local: Mapping[str, object]) -> dict[str, object]:
        """Return the store entries overridden by `local` on key collisions."""
        return {**self._data, **local}

    def snapshot(self) -> dict[str, object]:
        return dict(self._data)

    def reset(self) -> None:
        """Drop every entry. Intended for test and process teardown."""
        self._data.clear()


default_store = SharedStore()


def share(key: str | Mapping[str, object], value: object = None) -> object:
    """Share data with every view that uses the default store."""
    return default_store.share(key, value)
