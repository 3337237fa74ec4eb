"""Header collections and the merge policy used when finalizing responses."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Iterator, Mapping, Union

HeaderPairs = tuple[tuple[str, str], ...]
HeaderSource = Union["Headers", Mapping[str, str], Iterable[tuple[str, str]]]


class HeaderPolicy(Enum):
    """How a header behaves when the same name is written twice."""

    OVERWRITE = "overwrite"
    APPEND = "append"


_CUMULATIVE_HEADERS = frozenset({"set-cookie"})


def header_policy(name: str) -> HeaderPolicy:
    """Return the merge policy for the header ``name``.

    Cookie headers are multi-valued and accumulate, everything else is
    last-writer-wins.
    """

    if name.lower() in _CUMULATIVE_HEADERS:
        return HeaderPolicy.APPEND
    return HeaderPolicy.OVERWRITE


class Headers:
    """Ordered, case-insensitive, multi-valued header collection.

    Names are stored lower-cased, matching the header tuples carried by
    :class:`~shallot.responses.Response`.
    """

    __slots__ = ("_items",)

    def __init__(self, source: HeaderSource | None = None) -> None:
        self._items: list[tuple[str, str]] = []
        if source is not None:
            for name, value in _pairs(source):
                self._items.append((name.lower(), str(value)))

    def get(self, name: str, default: str | None = None) -> str | None:
        key = name.lower()
        values = [value for item_name, value in self._items if item_name == key]
        if not values:
            return default
        if header_policy(key) is HeaderPolicy.APPEND:
            return values[0]
        return ", ".join(values)

    def get_all(self, name: str) -> list[str]:
        key = name.lower()
        return [value for item_name, value in self._items if item_name == key]

    def set(self, name: str, value: str) -> None:
        key = name.lower()
        self._items = [(item_name, item_value) for item_name, item_value in self._items if item_name != key]
        self._items.append((key, str(value)))

    def append(self, name: str, value: str) -> None:
        self._items.append((name.lower(), str(value)))

    def apply(self, name: str, value: str) -> None:
        """Write ``value`` following the policy for ``name``."""

        if header_policy(name) is HeaderPolicy.APPEND:
            self.append(name, value)
        else:
            self.set(name, value)

    def items(self) -> list[tuple[str, str]]:
        return list(self._items)

    def to_tuple(self) -> HeaderPairs:
        return tuple(self._items)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        key = name.lower()
        return any(item_name == key for item_name, _ in self._items)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self._items == other._items
        return NotImplemented

    def __repr__(self) -> str:
        return f"Headers({self._items!r})"


def _pairs(source: HeaderSource) -> Iterable[tuple[str, str]]:
    if isinstance(source, Headers):
        return source.items()
    if isinstance(source, Mapping):
        return source.items()
    return source


def merge_headers(*sources: HeaderSource | None) -> Headers:
    """Merge header sources in order into a new :class:`Headers`.

    ``Set-Cookie`` values from every source are kept; any other name keeps
    only the values written by the last source that mentions it.
    """

    result = Headers()
    for source in sources:
        if source is None:
            continue
        # a multi-valued name inside one source replaces earlier sources as a group
        written: set[str] = set()
        for name, value in _pairs(source):
            key = name.lower()
            if header_policy(key) is HeaderPolicy.APPEND or key in written:
                result.append(key, value)
            else:
                result.set(key, value)
                written.add(key)
    return result


__all__ = ["HeaderPairs", "HeaderPolicy", "HeaderSource", "Headers", "header_policy", "merge_headers"]
