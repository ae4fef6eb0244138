# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

import typing
from typing import Any


class ConflictError(Exception):
    """
    Raised when writing a pair to a bijection would bind a key or a value a
    second time. The bijection is left unchanged.
    """

    def __init__(self, message: str, *, pair: tuple[Any, Any], existing: tuple[Any, Any]):
        super().__init__(message)
        self.pair = pair
        self.existing = existing


# Our error message format: The first line is in lowercase letters, without a dot at
# the end. More detail is given in the following lines in normal english sentences.
# To give advice to to the user, we write `hint: ...`.


def check_arg_type(
    expected_type: type,
    fn: str,
    param_name: str,
    arg: Any,
):
    if not isinstance(arg, expected_type):
        type_args = typing.get_args(expected_type)
        expected_type_str = (
            expected_type.__name__ if not type_args else " | ".join(t.__name__ for t in type_args)
        )
        raise TypeError(
            f"argument for parameter `{param_name}` of `{fn}` must have type "
            f"`{expected_type_str}`, found `{type(arg).__name__}` instead"
        )
