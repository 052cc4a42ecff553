# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Partial structural matching used by the find_* family."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def _same_value(candidate: Any, expected: Any) -> bool:
    """Equality that keeps booleans apart from the integers 0 and 1."""
    if isinstance(candidate, bool) or isinstance(expected, bool):
        return type(candidate) is type(expected) and candidate == expected
    if isinstance(expected, (list, tuple)) and type(candidate) is type(expected):
        return len(candidate) == len(expected) and all(
            _same_value(item, other) for item, other in zip(candidate, expected)
        )
    return candidate == expected


def is_match(candidate: Any, predicate: Any) -> bool:
    """Check whether ``candidate`` matches the partial ``predicate``.

    Every field of a mapping predicate must be present in the candidate
    with a matching value. Nested mappings are matched recursively, any
    other value is compared with ``==``, except that booleans only equal
    booleans (``True`` does not match ``1``), inside lists and tuples too.
    Fields of the candidate that are not in the predicate are ignored.

    Args:
        candidate: The object under test (usually a node payload).
        predicate: Partial mapping, or a plain value for direct comparison.

    Returns:
        True if the candidate satisfies the predicate.

    Example:
        >>> is_match({'name': 'a', 'meta': {'x': 1, 'y': 2}}, {'meta': {'x': 1}})
        True
        >>> is_match({'name': 'a'}, {'name': 'a', 'size': 1})
        False
        >>> is_match({'flag': 1}, {'flag': True})
        False
    """
    if not isinstance(predicate, Mapping):
        return _same_value(candidate, predicate)
    if not isinstance(candidate, Mapping):
        return False
    for field, expected in predicate.items():
        if field not in candidate:
            return False
        if not is_match(candidate[field], expected):
            return False
    return True
