#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from collections.abc import Iterator
from dataclasses import dataclass

# local repo modules
from .errors import CorruptDocumentError

#============================================


@dataclass(frozen=True, slots=True)
class Node:
	"""
	One entry of the tree.

	Attributes:
		id: Identifier unique within the whole document.
		content: Non-empty text.
		children: Child nodes in display order.
	"""
	id: str
	content: str
	children: tuple[Node, ...] = ()

	#============================================
	def to_dict(self) -> dict:
		"""
		Convert the subtree to nested dicts without recursing.
		"""
		result = {"id": self.id, "content": self.content, "children": []}
		stack = [(self, result)]
		while stack:
			node, payload = stack.pop()
			for child in node.children:
				child_payload = {"id": child.id, "content": child.content, "children": []}
				payload["children"].append(child_payload)
				stack.append((child, child_payload))
		return result


@dataclass(frozen=True, slots=True)
class Document:
	"""
	A named tree with creation and modification timestamps.

	Attributes:
		name: Sanitized tree name, also the storage key.
		created: Creation timestamp string.
		modified: Last modification timestamp string.
		root: The root node; never deleted.
	"""
	name: str
	created: str
	modified: str
	root: Node

	#============================================
	def to_dict(self) -> dict:
		"""
		Convert to the persisted JSON layout.

		Returns:
			Dictionary with metadata and root keys.
		"""
		return {
			"metadata": {
				"name": self.name,
				"created": self.created,
				"modified": self.modified,
			},
			"root": self.root.to_dict(),
		}


#============================================


def iter_nodes(node: Node) -> Iterator[Node]:
	"""
	Yield node and all descendants in pre-order.

	Args:
		node: Subtree root.

	Yields:
		Nodes, parents before children.
	"""
	stack = [node]
	while stack:
		current = stack.pop()
		yield current
		stack.extend(reversed(current.children))


def all_ids(document: Document) -> set[str]:
	return {node.id for node in iter_nodes(document.root)}


def same_document(left: Document, right: Document) -> bool:
	"""
	Compare two documents node by node without recursing.

	A pre-order listing of (id, content, child count) fixes the tree shape,
	so equal listings mean equal trees.
	"""
	if (left.name, left.created, left.modified) != (right.name, right.created, right.modified):
		return False
	left_nodes = [(node.id, node.content, len(node.children)) for node in iter_nodes(left.root)]
	right_nodes = [(node.id, node.content, len(node.children)) for node in iter_nodes(right.root)]
	return left_nodes == right_nodes


#============================================


def _require_str(payload: dict, key: str, where: str) -> str:
	value = payload.get(key)
	if not isinstance(value, str):
		raise CorruptDocumentError(f"{where}: '{key}' must be a string.")
	return value


def _check_node(item: object, path: str, seen: set[str]) -> list:
	if not isinstance(item, dict):
		raise CorruptDocumentError(f"{path}: node must be an object.")
	node_id = _require_str(item, "id", path)
	if not node_id.strip():
		raise CorruptDocumentError(f"{path}: 'id' must not be empty.")
	if not _require_str(item, "content", path).strip():
		raise CorruptDocumentError(f"{path}: 'content' must not be empty.")
	if node_id in seen:
		raise CorruptDocumentError(f"{path}: duplicate node id '{node_id}'.")
	seen.add(node_id)
	children = item.get("children", [])
	if not isinstance(children, list):
		raise CorruptDocumentError(f"{path}: 'children' must be a list.")
	return children


def _node_from_dict(payload: object, where: str) -> Node:
	# iterative so deep trees never hit the recursion limit
	seen: set[str] = set()
	order: list[tuple[dict, list]] = []
	queue: list[tuple[object, int, int]] = [(payload, 0, 0)]
	while queue:
		item, depth, position = queue.pop()
		path = where if depth == 0 else f"{where} depth {depth} child {position}"
		children = _check_node(item, path, seen)
		order.append((item, children))
		for index, child in enumerate(children):
			queue.append((child, depth + 1, index))
	# children always appear after their parent in order, so build in reverse
	built: dict[int, Node] = {}
	for item, children in reversed(order):
		built[id(item)] = Node(
			id=item["id"],
			content=item["content"],
			children=tuple(built[id(child)] for child in children),
		)
	return built[id(payload)]


def document_from_dict(payload: object) -> Document:
	"""
	Build a Document from parsed JSON, validating its structure.

	Args:
		payload: Result of json.loads on a tree file.

	Returns:
		Document instance.

	Raises:
		CorruptDocumentError: When required fields are missing or malformed,
			or node ids repeat.
	"""
	if not isinstance(payload, dict):
		raise CorruptDocumentError("Tree file must contain a JSON object.")
	metadata = payload.get("metadata")
	if not isinstance(metadata, dict):
		raise CorruptDocumentError("Tree file is missing 'metadata'.")
	name = _require_str(metadata, "name", "metadata")
	if not name:
		raise CorruptDocumentError("metadata: 'name' must not be empty.")
	created = _require_str(metadata, "created", "metadata")
	modified = _require_str(metadata, "modified", "metadata")
	if "root" not in payload:
		raise CorruptDocumentError("Tree file is missing 'root'.")
	root = _node_from_dict(payload["root"], "root")
	return Document(name=name, created=created, modified=modified, root=root)
