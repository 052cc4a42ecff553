# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Positional key helpers.

Every node of a KeyTree is identified by a dotted key made of non-negative
integers. The root is always ``'0'``; each further segment is the zero-based
position of the node among its siblings, in insertion order.

Example:
    >>> child_key('0.1', 0)
    '0.1.0'
    >>> next_key('0.1.0')
    '0.1.1'
    >>> parent_key('0.1.0')
    '0.1'
"""

from __future__ import annotations

from typing import Iterable

from .exceptions import InvalidKeyError

ROOT_KEY = '0'
KEY_SEPARATOR = '.'


def split_key(key: str) -> tuple[int, ...]:
    """Split a dotted key into its integer segments.

    Args:
        key: Dotted key (e.g., '0.2.1').

    Returns:
        Tuple of segment indexes.

    Raises:
        InvalidKeyError: If any segment is empty or not a non-negative integer.
    """
    parts = key.split(KEY_SEPARATOR)
    for part in parts:
        if not (part.isascii() and part.isdigit()):
            raise InvalidKeyError(f"Invalid key segment '{part}' in '{key}'")
    return tuple(int(part) for part in parts)


def join_key(parts: Iterable[int]) -> str:
    """Join integer segments back into a dotted key."""
    return KEY_SEPARATOR.join(str(part) for part in parts)


def child_key(parent: str, index: int) -> str:
    """Return the key of the child at position ``index`` under ``parent``."""
    return f"{parent}{KEY_SEPARATOR}{index}"


def next_key(key: str) -> str:
    """Return the key following ``key`` among its siblings.

    Raises:
        InvalidKeyError: If ``key`` is malformed.
    """
    parts = list(split_key(key))
    parts[-1] += 1
    return join_key(parts)


def parent_key(key: str) -> str | None:
    """Return the parent's key, or None for a single-segment (root) key."""
    if KEY_SEPARATOR not in key:
        return None
    return key.rsplit(KEY_SEPARATOR, 1)[0]


def is_valid_key(key: str) -> bool:
    """True if ``key`` is a dotted sequence of non-negative integers."""
    try:
        split_key(key)
    except InvalidKeyError:
        return False
    return True
