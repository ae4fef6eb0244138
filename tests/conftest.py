# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause
import logging

import pytest

from pydiverse.common.util.structlog import setup_logging
from pydiverse.relation import BijectiveView, RelationIndex

# Setup


@pytest.fixture
def people():
    return RelationIndex([("Kyle", 1), ("Mary", 2), ("Kyle", 3), ("John", 3)])


@pytest.fixture
def bijection():
    return BijectiveView([("Kyle", 1), ("Mary", 2)])


setup_logging(log_level=logging.INFO)
