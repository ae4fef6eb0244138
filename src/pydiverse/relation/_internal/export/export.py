# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import polars as pl

from pydiverse.relation._internal import errors
from pydiverse.relation._internal.export.targets import Dict, ListOfTuples, Polars, Target

DEFAULT_NAMES = ("first", "second")


def export_pairs(
    pairs: Iterable[tuple[Any, Any]],
    target: Target | type[Target],
    *,
    names: tuple[str, str] | None = None,
) -> Any:
    errors.check_arg_type(Target | type, "export", "target", target)

    if not isinstance(target, Target):
        if not issubclass(target, Target):
            raise TypeError(
                f"argument for parameter `target` of `export` must be a `Target`, found `{target.__name__}`"
            )
        target = target()

    if isinstance(target, ListOfTuples):
        return list(pairs)

    elif isinstance(target, Dict):
        grouped: dict[Any, set[Any]] = dict()
        for key, value in pairs:
            grouped.setdefault(key, set()).add(value)
        return grouped

    elif isinstance(target, Polars):
        if names is None:
            names = DEFAULT_NAMES
        if len(names) != 2 or names[0] == names[1]:
            raise ValueError(f"`names` must be two distinct column names, found {names!r}")
        rows = list(pairs)
        left, right = (list(col) for col in zip(*rows)) if rows else ([], [])
        df = pl.DataFrame([_column(names[0], left), _column(names[1], right)])
        return df.lazy() if target.lazy else df

    raise AssertionError


def _column(name: str, values: list[Any]) -> pl.Series:
    # mixed or nested python objects have no native dtype; keep them as they are
    try:
        return pl.Series(name, values)
    except TypeError:
        return pl.Series(name, values, dtype=pl.Object)
