# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""KeyTree exceptions."""

from __future__ import annotations


class KeyTreeError(Exception):
    """Base exception for KeyTree errors."""

    pass


class NodeNotFoundError(KeyTreeError, KeyError):
    """Raised when no node in a subtree carries the requested key."""

    pass


class InvalidKeyError(KeyTreeError, ValueError):
    """Raised when a key is not a dotted sequence of non-negative integers."""

    pass
