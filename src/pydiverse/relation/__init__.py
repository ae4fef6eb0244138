# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from ._internal.index.bijection import BijectiveView
from ._internal.index.enumerator import PairEnumerator
from ._internal.index.relation_index import RelationIndex
from ._internal.util.ordered_set import ordered_set
from .errors import *
from .errors import __all__ as __errors
from .targets import *
from .targets import __all__ as __targets
from .version import __version__

__all__ = [
    "__version__",
    "RelationIndex",
    "BijectiveView",
    "PairEnumerator",
    "ordered_set",
] + __targets + __errors
