# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-KeyTree - Positional-key trees wrapping arbitrary payloads.

A lightweight, zero-dependency library providing an in-memory tree built
from nested records, with dotted positional keys, partial-match search and
round-trip serialization.
"""

__version__ = "0.1.0"

from .exceptions import InvalidKeyError, KeyTreeError, NodeNotFoundError
from .keys import (
    KEY_SEPARATOR,
    ROOT_KEY,
    child_key,
    is_valid_key,
    join_key,
    next_key,
    parent_key,
    split_key,
)
from .matching import is_match
from .node import CHILDREN_FIELD, KeyTreeNode

__all__ = [
    # Core classes
    "KeyTreeNode",
    "CHILDREN_FIELD",
    # Keys
    "ROOT_KEY",
    "KEY_SEPARATOR",
    "split_key",
    "join_key",
    "child_key",
    "next_key",
    "parent_key",
    "is_valid_key",
    # Matching
    "is_match",
    # Exceptions
    "KeyTreeError",
    "NodeNotFoundError",
    "InvalidKeyError",
]
