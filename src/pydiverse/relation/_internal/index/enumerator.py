# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pydiverse.relation._internal.index.relation_index import RelationIndex


class PairEnumerator(Iterable[tuple[Any, Any]]):
    """
    Lazy, restartable sequence of the pairs stored in a relation index.

    Every call to ``iter()`` starts a new walk over the live index. Pairs are
    produced key by key: all values of one key are yielded before moving on to
    the next key. With ``inverse=True`` the reverse index is walked instead and
    the pairs come out as ``(b, a)``.

    The index must not be mutated while a walk is in progress.
    """

    __slots__ = ["_index", "inverse"]

    def __init__(self, index: RelationIndex, *, inverse: bool = False):
        self._index = index
        self.inverse = inverse

    def __iter__(self) -> Iterator[tuple[Any, Any]]:
        buckets = self._index._reverse if self.inverse else self._index._forward
        for key, bucket in buckets.items():
            for value in bucket:
                yield key, value

    def __len__(self) -> int:
        return self._index.size

    def __repr__(self) -> str:
        direction = "reverse" if self.inverse else "forward"
        return f"PairEnumerator({direction}, size={len(self)})"
