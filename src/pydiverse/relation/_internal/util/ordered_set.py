# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

from collections.abc import Hashable, Iterable, Iterator, MutableSet
from typing import TypeVar

T = TypeVar("T", bound=Hashable)


class ordered_set(MutableSet[T]):
    """Set that iterates in insertion order. Used for the buckets of a relation."""

    __slots__ = ["_members"]

    def __init__(self, values: Iterable[T] = ()):
        self._members = dict.fromkeys(values)

    def __contains__(self, item: T) -> bool:
        return item in self._members

    def __iter__(self) -> Iterator[T]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._members)!r})"

    def add(self, value: T) -> None:
        self._members[value] = None

    def discard(self, value: T) -> None:
        self._members.pop(value, None)

    def first(self) -> T:
        """Return the oldest member. Raise KeyError if empty."""
        for member in self._members:
            return member
        raise KeyError("first() on an empty ordered_set")

    def copy(self) -> ordered_set[T]:
        return type(self)(self._members)

    __copy__ = copy
