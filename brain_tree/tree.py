#!/usr/bin/env python3
"""
Tree engine: create, find, add, edit and delete nodes.

Every operation returns a new Document and leaves its input untouched, so a
failed operation can never leave a half-edited tree behind.
"""

from __future__ import annotations

# Standard Library
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
import random

# local repo modules
from .config import sanitize_name
from .errors import NodeNotFoundError, RootDeletionError, ValidationError
from .ids import generate_id
from .model import Document, Node, iter_nodes

ROOT_ALIAS = "root"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

#============================================


def timestamp(now: datetime | None = None) -> str:
	"""
	Format a timestamp for document metadata.
	"""
	return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def _require_content(content: str, label: str) -> str:
	cleaned = content.strip() if content else ""
	if not cleaned:
		raise ValidationError(f"{label} cannot be empty.")
	return cleaned


#============================================


def create_document(
	name: str,
	root_content: str,
	now: datetime | None = None,
	rng: random.Random | None = None,
) -> Document:
	"""
	Start a new tree.

	Args:
		name: Tree name, sanitized to letters, digits, underscore, hyphen.
		root_content: Text of the root node.
		now: Creation time, defaults to now.
		rng: Random source for the root id.

	Returns:
		New Document with created == modified.
	"""
	if not name or not name.strip():
		raise ValidationError("Tree name cannot be empty.")
	clean_name = sanitize_name(name)
	if not clean_name:
		raise ValidationError(f"Tree name '{name}' has no usable characters.")
	content = _require_content(root_content, "Root node content")
	stamp = timestamp(now)
	root = Node(id=generate_id(None, rng=rng), content=content)
	return Document(name=clean_name, created=stamp, modified=stamp, root=root)


#============================================


def resolve_id(document: Document, node_id: str) -> str:
	"""
	Map the 'root' alias to the real root id.
	"""
	cleaned = (node_id or "").strip()
	if cleaned == ROOT_ALIAS:
		return document.root.id
	return cleaned


def is_root(document: Document, node_id: str) -> bool:
	return resolve_id(document, node_id) == document.root.id


def find_node_or_none(document: Document, node_id: str) -> Node | None:
	target = resolve_id(document, node_id)
	for node in iter_nodes(document.root):
		if node.id == target:
			return node
	return None


def find_node(document: Document, node_id: str) -> Node:
	"""
	Depth-first lookup by id, root included.

	Args:
		document: Tree to search.
		node_id: Node id or the 'root' alias.

	Returns:
		Matching node.

	Raises:
		NodeNotFoundError: When no node has that id.
	"""
	node = find_node_or_none(document, node_id)
	if node is None:
		raise NodeNotFoundError(resolve_id(document, node_id))
	return node


#============================================


def _rebuild(root: Node, target: str, transform: Callable[[Node], Node | None]) -> tuple[Node | None, bool]:
	"""
	Copy the path from root down to target, applying transform at target.

	Subtrees off that path are shared with the input. A transform returning
	None drops the target from its parent. Both the search and the rebuild
	are iterative, so depth is not limited by the recursion limit.

	Returns:
		Tuple of (new root or None, whether target was found).
	"""
	# child id -> (parent, position in parent.children)
	parents: dict[str, tuple[Node, int]] = {}
	found: Node | None = None
	stack = [root]
	while stack:
		node = stack.pop()
		if node.id == target:
			found = node
			break
		for index, child in enumerate(node.children):
			parents[child.id] = (node, index)
			stack.append(child)
	if found is None:
		return root, False
	current = transform(found)
	node_id = found.id
	while node_id in parents:
		parent, index = parents[node_id]
		middle = (current,) if current is not None else ()
		current = replace(parent, children=parent.children[:index] + middle + parent.children[index + 1:])
		node_id = parent.id
	return current, True


def _apply(document: Document, target: str, transform: Callable[[Node], Node | None], now: datetime | None) -> Document:
	new_root, found = _rebuild(document.root, target, transform)
	if not found:
		raise NodeNotFoundError(target)
	return replace(document, root=new_root, modified=timestamp(now))


#============================================


def add_node(
	document: Document,
	parent_id: str,
	content: str,
	now: datetime | None = None,
	rng: random.Random | None = None,
) -> tuple[Document, Node]:
	"""
	Append a new child under parent_id.

	Args:
		document: Current tree.
		parent_id: Parent node id or 'root'.
		content: Text for the new node.
		now: Modification time.
		rng: Random source for the new id.

	Returns:
		Tuple of (updated document, new node).
	"""
	if not (parent_id or "").strip():
		raise ValidationError("Parent ID cannot be empty.")
	parent = find_node(document, parent_id)
	text = _require_content(content, "Node content")
	new_node = Node(id=generate_id(document, rng=rng), content=text)

	def _append(node: Node) -> Node:
		return replace(node, children=node.children + (new_node,))

	return _apply(document, parent.id, _append, now), new_node


def edit_node(document: Document, node_id: str, new_content: str, now: datetime | None = None) -> Document:
	"""
	Replace the content of one node.

	Args:
		document: Current tree.
		node_id: Node id or 'root'.
		new_content: Replacement text.
		now: Modification time.

	Returns:
		Updated document.
	"""
	if not (node_id or "").strip():
		raise ValidationError("Node ID cannot be empty.")
	node = find_node(document, node_id)
	text = _require_content(new_content, "Node content")
	return _apply(document, node.id, lambda found: replace(found, content=text), now)


def delete_node(document: Document, node_id: str, now: datetime | None = None) -> Document:
	"""
	Remove a node and its whole subtree.

	Args:
		document: Current tree.
		node_id: Id of the node to remove.
		now: Modification time.

	Returns:
		Updated document.

	Raises:
		RootDeletionError: When node_id names the root.
		NodeNotFoundError: When node_id is unknown.
	"""
	if not (node_id or "").strip():
		raise ValidationError("Node ID cannot be empty.")
	if is_root(document, node_id):
		raise RootDeletionError()
	node = find_node(document, node_id)
	return _apply(document, node.id, lambda _found: None, now)
