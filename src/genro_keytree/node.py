# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""KeyTreeNode - A positional-key tree wrapping arbitrary payloads.

This module provides the KeyTreeNode class. A tree is a root node; every
other node is reached by following child links. Each node stores an opaque
payload (``data``) and an insertion-ordered mapping of children keyed by
their positional key.

Key Features:
    - **Positional keys**: root is '0', its children '0.0', '0.1', ...
    - **Nested source**: built from a dict with an optional 'children' list
    - **Computed views**: ancestors, descendants, siblings, depth on demand
    - **Partial-match search**: find nodes whose payload matches a dict
    - **Round-trip**: serialize() rebuilds the nested source form

Example:
    Basic usage::

        root = KeyTreeNode({
            'name': 'r',
            'children': [{'name': 'a'}, {'name': 'b', 'children': [{'name': 'c'}]}],
        })
        root.get('0.1.0').data  # {'name': 'c'}
        root.get('0.1.0').get_path('name')  # ['r', 'b', 'c']
        root.find_one_descendant(name='c').depth  # 2
        root.append_child({'name': 'd'}).key  # '0.2'
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Iterator

from .exceptions import NodeNotFoundError
from .keys import ROOT_KEY, child_key, next_key
from .matching import is_match

CHILDREN_FIELD = 'children'

NodeFilter = Callable[['KeyTreeNode'], bool]


def _make_filter(
    predicate: Mapping[str, Any] | NodeFilter | None,
    fields: dict[str, Any],
) -> NodeFilter:
    """Build a node filter from a partial payload or a callable.

    Args:
        predicate: Partial payload mapping, callable, or None.
        fields: Extra payload fields merged into a mapping predicate.

    Returns:
        Callable accepting a node and returning True on match.

    Raises:
        TypeError: If a callable predicate is combined with keyword fields.
    """
    if callable(predicate):
        if fields:
            raise TypeError("Keyword fields cannot be combined with a callable predicate")
        return predicate
    partial: dict[str, Any] = dict(predicate or {})
    partial.update(fields)
    return lambda node: is_match(node.data, partial)


class KeyTreeNode:
    """A node in a KeyTree hierarchy.

    Each node has:
    - key: Dotted positional key, unique within the tree
    - data: The payload (source record without its children list)
    - children: Dict of child nodes by key, or None if the node never had any
    - parent: The node owning this one, or None for the root
    - children_field: Name of the children field in the serialized form

    Example:
        >>> root = KeyTreeNode({'name': 'r', 'children': [{'name': 'a'}]})
        >>> root.key
        '0'
        >>> root.children_list[0].key
        '0.0'
    """

    __slots__ = ('key', 'data', 'children', 'parent', 'children_field')

    def __init__(
        self,
        source: Mapping[str, Any] | None = None,
        parent: KeyTreeNode | None = None,
        children_field: str = CHILDREN_FIELD,
    ) -> None:
        """Initialize a KeyTreeNode from its nested serialized form.

        The node claims its key from ``parent`` but is not inserted into the
        parent's children: use append_child() to grow an existing tree.
        Nested children are loaded with an explicit stack, so the depth of
        the source is not bounded by the interpreter recursion limit.

        Args:
            source: Serialized record. Every field except the children field
                becomes payload; each entry of the children field is built
                as a child, in order. A children field set to None is kept
                in the payload and builds no container.
            parent: The node this one is attached to. None builds a root.
            children_field: Name of the children field. Ignored when a parent
                is given, since descendants always inherit it.

        Raises:
            TypeError: If source is not a mapping.
        """
        source = self._attach(source, parent, children_field)

        pending: list[tuple[KeyTreeNode, Mapping[str, Any]]] = [(self, source)]
        while pending:
            node, node_source = pending.pop()
            child_sources = node_source.get(node.children_field)
            if child_sources is None:
                continue
            node.children = {}
            for child_source in child_sources:
                child = type(node).__new__(type(node))
                child_source = child._attach(child_source, node, node.children_field)
                node.children[child.key] = child
                pending.append((child, child_source))

    def _attach(
        self,
        source: Mapping[str, Any] | None,
        parent: KeyTreeNode | None,
        children_field: str,
    ) -> Mapping[str, Any]:
        """Set payload, key and parent link of this node, without children.

        Returns:
            The checked source, for loading the children.

        Raises:
            TypeError: If source is not a mapping.
        """
        if source is None:
            source = {}
        elif not isinstance(source, Mapping):
            raise TypeError(
                f"source must be a mapping, not {type(source).__name__}"
            )
        if parent is not None:
            children_field = parent.children_field

        self.children_field = children_field
        self.data: dict[str, Any] = {
            field: value
            for field, value in source.items()
            if field != children_field or value is None
        }
        self.children: dict[str, KeyTreeNode] | None = None
        self.parent = parent
        self.key = parent.next_child_key() if parent is not None else ROOT_KEY
        return source

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        if self.children is None:
            return f"KeyTreeNode({self.key!r}, data={self.data!r})"
        return (
            f"KeyTreeNode({self.key!r}, data={self.data!r}, "
            f"children={len(self.children)})"
        )

    def __bool__(self) -> bool:
        # a leaf is still a node, even though len() is 0
        return True

    def __len__(self) -> int:
        """Return the number of direct children."""
        return len(self.children) if self.children is not None else 0

    def __iter__(self) -> Iterator[KeyTreeNode]:
        """Iterate over direct children in insertion order."""
        return iter(self.children_list)

    def __contains__(self, key: str) -> bool:
        """Check if this node or one of its descendants has the given key."""
        return self.get(key) is not None

    def __getitem__(self, key: str) -> KeyTreeNode:
        """Get node by key, raising if absent.

        Raises:
            NodeNotFoundError: If no node in this subtree has the key.
        """
        return self.get_node(key)

    # ==================== Keys ====================

    def next_child_key(self) -> str:
        """Return the key the next appended child will receive.

        The index is derived from the last inserted child key, so it relies
        on children never being removed. Does not modify the node.

        Example:
            >>> KeyTreeNode().next_child_key()
            '0.0'
        """
        if not self.children:
            return child_key(self.key, 0)
        last_key = next(reversed(self.children))
        return next_key(last_key)

    @property
    def index(self) -> int:
        """Position of this node among its siblings (0 for the root)."""
        return int(self.key.rsplit('.', 1)[-1])

    # ==================== Lookup ====================

    def get(self, key: str, default: Any = None) -> KeyTreeNode | None:
        """Get this node or a descendant by key.

        Scans the whole subtree in pre-order; no index is kept.

        Args:
            key: Dotted positional key (e.g., '0.1.0').
            default: Value to return if not found.

        Returns:
            The matching KeyTreeNode, or default.
        """
        if self.key == key:
            return self
        for node in self.iter_descendants():
            if node.key == key:
                return node
        return default

    def get_node(self, key: str) -> KeyTreeNode:
        """Get this node or a descendant by key.

        Raises:
            NodeNotFoundError: If no node in this subtree has the key.
        """
        node = self.get(key)
        if node is None:
            raise NodeNotFoundError(f"Key '{key}' not found under '{self.key}'")
        return node

    # ==================== Navigation ====================

    @property
    def is_root(self) -> bool:
        """True if this node has no parent."""
        return self.parent is None

    @property
    def depth(self) -> int:
        """Number of hops up to the root (root=0)."""
        depth = 0
        node = self
        while node.parent is not None:
            depth += 1
            node = node.parent
        return depth

    @property
    def root_node(self) -> KeyTreeNode:
        """Get the root of this hierarchy."""
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def children_list(self) -> list[KeyTreeNode]:
        """Direct children in insertion order (empty if none)."""
        if self.children is None:
            return []
        return list(self.children.values())

    @property
    def ancestors(self) -> list[KeyTreeNode]:
        """Parent, grandparent, ... up to the root. Empty for the root."""
        ancestors = []
        node = self
        while node.parent is not None:
            ancestors.append(node.parent)
            node = node.parent
        return ancestors

    def iter_descendants(self) -> Iterator[KeyTreeNode]:
        """Yield descendants in pre-order: each child, then its subtree.

        Uses an explicit stack, so arbitrarily deep trees are walked
        without hitting the interpreter recursion limit.
        """
        stack = list(reversed(self.children_list))
        while stack:
            node = stack.pop()
            yield node
            if node.children:
                stack.extend(reversed(node.children.values()))

    @property
    def descendants(self) -> list[KeyTreeNode]:
        """All descendants in pre-order (empty if none)."""
        return list(self.iter_descendants())

    @property
    def siblings(self) -> dict[str, KeyTreeNode]:
        """The parent's other children by key. Empty for the root."""
        if self.parent is None or self.parent.children is None:
            return {}
        return {
            key: node for key, node in self.parent.children.items() if key != self.key
        }

    def has_children(self) -> bool:
        """True if a children container exists, even an empty one."""
        return self.children is not None

    # ==================== Path ====================

    def get_path(self, field: str, include_root: bool = True) -> list[Any]:
        """Collect a payload field from the top of the tree down to this node.

        Args:
            field: Payload field name.
            include_root: If False, the path starts at the root's child.
                Called on the root itself, the result still holds the
                root's own value.

        Returns:
            List of field values, root-first, ending with this node's value.
            Nodes without the field contribute None.

        Example:
            >>> leaf.get_path('name')  # ['r', 'b', 'c']
            >>> leaf.get_path('name', include_root=False)  # ['b', 'c']
        """
        ancestors = self.ancestors
        if not include_root:
            ancestors = ancestors[:-1]
        path = [node.data.get(field) for node in reversed(ancestors)]
        path.append(self.data.get(field))
        return path

    # ==================== Search ====================

    def find_all_children(
        self,
        predicate: Mapping[str, Any] | NodeFilter | None = None,
        **fields: Any,
    ) -> list[KeyTreeNode]:
        """Return direct children whose payload matches the predicate.

        Args:
            predicate: Partial payload dict (see matching.is_match) or a
                callable taking a node and returning a bool.
            **fields: Additional payload fields to match.

        Example:
            >>> root.find_all_children({'name': 'a'})
            >>> root.find_all_children(name='a')
            >>> root.find_all_children(lambda n: n.has_children())
        """
        accept = _make_filter(predicate, fields)
        return [node for node in self.children_list if accept(node)]

    def find_all_descendants(
        self,
        predicate: Mapping[str, Any] | NodeFilter | None = None,
        **fields: Any,
    ) -> list[KeyTreeNode]:
        """Return descendants, in pre-order, whose payload matches the predicate.

        Same arguments as find_all_children().
        """
        accept = _make_filter(predicate, fields)
        return [node for node in self.iter_descendants() if accept(node)]

    def find_one_child(
        self,
        predicate: Mapping[str, Any] | NodeFilter | None = None,
        **fields: Any,
    ) -> KeyTreeNode | None:
        """Return the first matching direct child, or None."""
        accept = _make_filter(predicate, fields)
        return next((node for node in self.children_list if accept(node)), None)

    def find_one_descendant(
        self,
        predicate: Mapping[str, Any] | NodeFilter | None = None,
        **fields: Any,
    ) -> KeyTreeNode | None:
        """Return the first matching descendant in pre-order, or None."""
        accept = _make_filter(predicate, fields)
        return next((node for node in self.iter_descendants() if accept(node)), None)

    # ==================== Mutation ====================

    def append_child(self, node_data: Mapping[str, Any] | None = None) -> KeyTreeNode:
        """Create a child from node_data and append it.

        The child takes the next sequential key. Nested children in
        node_data are built as well.

        Args:
            node_data: Serialized record for the new child.

        Returns:
            The new KeyTreeNode.

        Example:
            >>> root = KeyTreeNode({'name': 'r'})
            >>> root.append_child({'name': 'a'}).key
            '0.0'
        """
        child = KeyTreeNode(node_data, parent=self)
        if self.children is None:
            self.children = {}
        self.children[child.key] = child
        return child

    # ==================== Walk ====================

    def traverse(self, visit: Callable[[KeyTreeNode], Any]) -> None:
        """Call visit on this node, then on each subtree in pre-order.

        There is no way to stop the walk early.
        """
        visit(self)
        for node in self.iter_descendants():
            visit(node)

    def walk(self) -> Iterator[tuple[str, KeyTreeNode]]:
        """Yield (key, node) pairs in pre-order, starting with this node.

        Example:
            >>> for key, node in root.walk():
            ...     print(key, node.data)
        """
        yield self.key, self
        for node in self.iter_descendants():
            yield node.key, node

    # ==================== Conversion ====================

    def serialize(self) -> dict[str, Any]:
        """Convert back to the nested serialized form.

        Nodes without a children container serialize to a copy of their
        payload. Otherwise the payload gains the children field holding
        each child's serialization, in insertion order.
        """
        result = dict(self.data)
        pending = [(self, result)]
        while pending:
            node, record = pending.pop()
            if node.children is None:
                continue
            child_records = record[node.children_field] = []
            for child in node.children.values():
                child_record = dict(child.data)
                child_records.append(child_record)
                pending.append((child, child_record))
        return result
