# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

from collections.abc import Hashable, Iterable, Iterator, Mapping
from typing import Any, Generic, NoReturn, TypeVar

import structlog

from pydiverse.relation._internal.errors import ConflictError
from pydiverse.relation._internal.export.targets import Target
from pydiverse.relation._internal.index.relation_index import RelationIndex

KT = TypeVar("KT", bound=Hashable)
VT = TypeVar("VT", bound=Hashable)

logger = structlog.get_logger(__name__)


class BijectiveView(Generic[KT, VT]):
    """
    One to one mapping between keys and values.

    Each key is bound to at most one value and each value to at most one key.
    A write that would bind a key or a value a second time raises a
    :class:`ConflictError` and leaves the mapping unchanged.

    To go from key to value use `get` or `BijectiveView.fwd`.
    To go from value to key use `get_inverse` or `BijectiveView.bwd`.

    :param rebind:
        If True, a key that is already bound may be moved to a new value as long
        as that value is not bound to another key. By default any write to a
        key or value bound to something else is a conflict.
    """

    __slots__ = ["_index", "rebind", "fwd", "bwd"]

    def __init__(
        self,
        source: Mapping[KT, VT] | Iterable[tuple[KT, VT]] | None = None,
        /,
        *,
        rebind: bool = False,
    ):
        self._index: RelationIndex[KT, VT] = RelationIndex()
        self.rebind = rebind
        self.fwd = _BijectionSide(self._index, inverse=False)  # type: _BijectionSide[KT, VT]
        self.bwd = _BijectionSide(self._index, inverse=True)  # type: _BijectionSide[VT, KT]

        if source is not None:
            items = source.items() if isinstance(source, Mapping) else source
            for a, b in items:
                self.set(a, b)

    def set(self, a: KT, b: VT) -> None:
        index = self._index
        if index.contains_pair(a, b):
            return

        if index.contains_forward(a) and not self.rebind:
            self._conflict(a, b, (a, index.get_forward(a).first()))
        if index.contains_reverse(b):
            self._conflict(a, b, (index.get_reverse(b).first(), b))

        index.remove_all_forward(a)
        index.add(a, b)

    def _conflict(self, a: KT, b: VT, existing: tuple[Any, Any]) -> NoReturn:
        logger.debug("Rejected conflicting pair", pair=(a, b), existing=existing)
        raise ConflictError(
            f"cannot bind `{a!r}` to `{b!r}`, `{existing[0]!r}` is already bound to `{existing[1]!r}`",
            pair=(a, b),
            existing=existing,
        )

    def get(self, a: KT, default: Any = None) -> VT | Any:
        values = self._index.get_forward(a)
        return values.first() if values else default

    def get_inverse(self, b: VT, default: Any = None) -> KT | Any:
        keys = self._index.get_reverse(b)
        return keys.first() if keys else default

    def delete(self, a: KT) -> None:
        self._index.remove_all_forward(a)

    def delete_inverse(self, b: VT) -> None:
        self._index.remove_all_reverse(b)

    def contains(self, a: KT) -> bool:
        return self._index.contains_forward(a)

    def contains_inverse(self, b: VT) -> bool:
        return self._index.contains_reverse(b)

    def clear(self) -> None:
        self._index.clear()

    def invert(self) -> BijectiveView[VT, KT]:
        inverted = type(self)(rebind=self.rebind)
        inverted._index.update(self._index.pairs(inverse=True))
        return inverted

    def copy(self) -> BijectiveView[KT, VT]:
        return self.__copy__()

    def __copy__(self) -> BijectiveView[KT, VT]:
        copied = type(self)(rebind=self.rebind)
        copied._index.update(self._index.pairs())
        return copied

    def to_dict(self) -> dict[KT, VT]:
        return dict(self._index.pairs())

    def to_inverse_dict(self) -> dict[VT, KT]:
        return dict(self._index.pairs(inverse=True))

    def export(
        self,
        target: Target | type[Target],
        *,
        inverse: bool = False,
        names: tuple[str, str] | None = None,
    ) -> Any:
        return self._index.export(target, inverse=inverse, names=names)

    def __getitem__(self, a: KT) -> VT:
        return self.fwd[a]

    def __setitem__(self, a: KT, b: VT) -> None:
        self.set(a, b)

    def __delitem__(self, a: KT) -> None:
        if not self._index.contains_forward(a):
            raise KeyError(a)
        self.delete(a)

    def __contains__(self, a: KT) -> bool:
        return self.contains(a)

    def __len__(self) -> int:
        return self._index.size

    def __iter__(self) -> Iterator[tuple[KT, VT]]:
        return iter(self._index.pairs())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BijectiveView):
            return NotImplemented
        return self._index == other._index

    __hash__ = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.to_dict()!r})"


class _BijectionSide(Mapping[KT, VT]):
    """Read-only mapping over one direction of a bijection."""

    __slots__ = ["__index", "__inverse"]

    def __init__(self, index: RelationIndex, *, inverse: bool):
        self.__index = index
        self.__inverse = inverse

    def __getitem__(self, key: KT) -> VT:
        bucket = self.__index.get_reverse(key) if self.__inverse else self.__index.get_forward(key)
        if not bucket:
            raise KeyError(key)
        return bucket.first()

    def __iter__(self) -> Iterator[KT]:
        return self.__index.reverse_keys() if self.__inverse else self.__index.forward_keys()

    def __len__(self) -> int:
        return len(self.__index)

    def __contains__(self, key: object) -> bool:
        if self.__inverse:
            return self.__index.contains_reverse(key)
        return self.__index.contains_forward(key)
