# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from ._internal.export.targets import Dict, ListOfTuples, Polars, Target

__all__ = ["Target", "Polars", "Dict", "ListOfTuples"]
