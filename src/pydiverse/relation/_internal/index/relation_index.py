# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

from collections.abc import Hashable, Iterable, Iterator, Mapping
from typing import Any, Generic, TypeVar

import polars as pl
import structlog

from pydiverse.relation._internal import errors
from pydiverse.relation._internal.export.export import export_pairs
from pydiverse.relation._internal.export.targets import Target
from pydiverse.relation._internal.index.enumerator import PairEnumerator
from pydiverse.relation._internal.util.ordered_set import ordered_set

KT = TypeVar("KT", bound=Hashable)
VT = TypeVar("VT", bound=Hashable)

logger = structlog.get_logger(__name__)


class RelationIndex(Generic[KT, VT]):
    """
    Many-to-many relation between two sets of hashable objects.

    Every pair ``(a, b)`` is stored twice: in the forward index (``a -> {b, ...}``)
    and in the reverse index (``b -> {a, ...}``), so lookups, membership tests
    and removals are O(1) from either side. A key whose set of partners becomes
    empty is removed from its index.

    >>> index = RelationIndex([("Kyle", 1), ("Mary", 2)])
    >>> index.get_forward("Kyle")
    ordered_set([1])
    >>> index.get_reverse(2)
    ordered_set(['Mary'])
    >>> len(index)
    2
    """

    __slots__ = ["_forward", "_reverse", "_count"]

    def __init__(self, pairs: Iterable[tuple[KT, VT]] = tuple()):
        self._forward: dict[KT, ordered_set[VT]] = dict()
        self._reverse: dict[VT, ordered_set[KT]] = dict()
        self._count = 0
        self.update(pairs)

    @classmethod
    def from_resource(
        cls, resource: pl.DataFrame | Mapping[KT, Iterable[VT]] | Iterable[tuple[KT, VT]]
    ) -> RelationIndex[KT, VT]:
        """
        Creates a new relation index from a data source.

        :param resource:
            A polars data frame with exactly two columns (one row per pair, the
            first column holds the forward keys), a mapping from each key to an
            iterable of its values, or an iterable of ``(a, b)`` tuples. A mapping
            value that is a ``str`` or ``bytes`` is rejected rather than split into
            one pair per character.
        """
        if isinstance(resource, pl.DataFrame):
            if resource.width != 2:
                raise ValueError(
                    f"a data frame must have exactly two columns to be read as a relation, "
                    f"found {resource.width} columns\n"
                    "hint: select the two columns forming the pairs before passing the frame"
                )
            index = cls(resource.iter_rows())
        elif isinstance(resource, Mapping):
            index = cls(_mapping_pairs(resource))
        else:
            errors.check_arg_type(Iterable, "RelationIndex.from_resource", "resource", resource)
            index = cls(resource)

        logger.debug("Imported relation", resource_type=type(resource).__name__, size=index.size)
        return index

    # mutation

    def add(self, a: KT, b: VT) -> bool:
        """Insert the pair ``(a, b)``. Returns False if it was already present."""
        values = self._forward.get(a)
        if values is not None and b in values:
            return False
        # both lookups precede any write
        keys = self._reverse.get(b)

        if values is None:
            values = self._forward[a] = ordered_set()
        if keys is None:
            keys = self._reverse[b] = ordered_set()
        values.add(b)
        keys.add(a)

        self._count += 1
        return True

    def update(self, pairs: Iterable[tuple[KT, VT]]) -> int:
        """Add every pair of `pairs` in order. Returns the number of new pairs."""
        return sum(self.add(a, b) for a, b in pairs)

    def remove(self, a: KT, b: VT) -> None:
        """Remove the pair ``(a, b)`` if present."""
        if not self.contains_pair(a, b):
            return
        _unlink(self._forward, a, b)
        _unlink(self._reverse, b, a)
        self._count -= 1

    def remove_inverse_pair(self, b: VT, a: KT) -> None:
        """Remove the pair ``(a, b)``, addressed from the reverse side."""
        self.remove(a, b)

    def remove_all_forward(self, a: KT) -> None:
        """Remove every pair whose first element is `a`."""
        values = self._forward.pop(a, None)
        if values is None:
            return
        for b in values:
            _unlink(self._reverse, b, a)
        self._count -= len(values)

    def remove_all_reverse(self, b: VT) -> None:
        """Remove every pair whose second element is `b`."""
        keys = self._reverse.pop(b, None)
        if keys is None:
            return
        for a in keys:
            _unlink(self._forward, a, b)
        self._count -= len(keys)

    def clear(self) -> None:
        logger.debug("Clearing relation", size=self._count)
        self._forward.clear()
        self._reverse.clear()
        self._count = 0

    # lookup

    def contains_forward(self, a: KT) -> bool:
        return a in self._forward

    def contains_reverse(self, b: VT) -> bool:
        return b in self._reverse

    def contains_pair(self, a: KT, b: VT) -> bool:
        values = self._forward.get(a)
        return values is not None and b in values

    def contains_inverse_pair(self, b: VT, a: KT) -> bool:
        keys = self._reverse.get(b)
        return keys is not None and a in keys

    def get_forward(self, a: KT) -> ordered_set[VT]:
        """
        The values paired with `a`, in insertion order. The result is a copy and
        is empty if `a` is not in the relation.
        """
        values = self._forward.get(a)
        return ordered_set() if values is None else values.copy()

    def get_reverse(self, b: VT) -> ordered_set[KT]:
        """
        The keys paired with `b`, in insertion order. The result is a copy and
        is empty if `b` is not in the relation.
        """
        keys = self._reverse.get(b)
        return ordered_set() if keys is None else keys.copy()

    def forward_keys(self) -> Iterator[KT]:
        return iter(self._forward.keys())

    def reverse_keys(self) -> Iterator[VT]:
        return iter(self._reverse.keys())

    @property
    def size(self) -> int:
        """Number of stored pairs."""
        return self._count

    # conversion

    def pairs(self, *, inverse: bool = False) -> PairEnumerator:
        return PairEnumerator(self, inverse=inverse)

    def invert(self) -> RelationIndex[VT, KT]:
        """A new, independent relation holding ``(b, a)`` for every pair ``(a, b)``."""
        logger.debug("Inverting relation", size=self._count)
        return type(self)((b, a) for a, b in self.pairs())

    def to_array(self) -> list[tuple[KT, VT]]:
        return list(self.pairs())

    def to_inverse_array(self) -> list[tuple[VT, KT]]:
        return list(self.pairs(inverse=True))

    def to_dict(self) -> dict[KT, set[VT]]:
        return {a: set(values) for a, values in self._forward.items()}

    def to_inverse_dict(self) -> dict[VT, set[KT]]:
        return {b: set(keys) for b, keys in self._reverse.items()}

    def export(
        self,
        target: Target | type[Target],
        *,
        inverse: bool = False,
        names: tuple[str, str] | None = None,
    ) -> Any:
        """
        Convert the relation to another representation.

        :param target:
            A ``Polars``, ``Dict`` or ``ListOfTuples`` object (or class). See
            :mod:`pydiverse.relation.targets`.

        :param inverse:
            Export the reverse direction, i.e. ``(b, a)`` pairs grouped by `b`.

        :param names:
            Column names for data frame targets. Defaults to
            ``("first", "second")``.
        """
        return export_pairs(self.pairs(inverse=inverse), target, names=names)

    def copy(self) -> RelationIndex[KT, VT]:
        return self.__copy__()

    def __copy__(self) -> RelationIndex[KT, VT]:
        return type(self)(self.pairs())

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[tuple[KT, VT]]:
        return iter(self.pairs())

    def __contains__(self, pair: tuple[KT, VT]) -> bool:
        try:
            a, b = pair
        except (TypeError, ValueError):
            return False
        return self.contains_pair(a, b)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RelationIndex):
            return NotImplemented
        return self._count == other._count and all(other.contains_pair(a, b) for a, b in self.pairs())

    __hash__ = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.to_array()!r})"


def _unlink(buckets: dict[Any, ordered_set], key: Any, value: Any) -> None:
    # drops `value` from the bucket of `key` and prunes the key once empty
    bucket = buckets[key]
    bucket.discard(value)
    if not bucket:
        del buckets[key]


def _mapping_pairs(resource: Mapping[Any, Iterable[Any]]) -> Iterator[tuple[Any, Any]]:
    for key, values in resource.items():
        if isinstance(values, str | bytes):
            raise TypeError(
                f"values of the mapping passed to `RelationIndex.from_resource` must be collections, "
                f"found `{type(values).__name__}` for key {key!r}\n"
                f"hint: wrap a single value in a list, e.g. `{{{key!r}: [{values!r}]}}`"
            )
        for value in values:
            yield key, value
