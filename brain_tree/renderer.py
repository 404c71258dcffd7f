#!/usr/bin/env python3
"""
Depth-first rendering of a tree for the terminal and for export.
"""

from __future__ import annotations

# Standard Library
from collections.abc import Iterator
from dataclasses import dataclass

# local repo modules
from .model import Document, Node

BRANCH = "├── "
ELBOW = "└── "
PIPE = "│   "
BLANK = "    "

#============================================


@dataclass(frozen=True, slots=True)
class TreeEntry:
	"""
	One visited node.

	Attributes:
		node: The node.
		depth: 0 for the root.
		last_flags: For each level 1..depth, whether the node or its ancestor
			at that level is the last of its siblings.
	"""
	node: Node
	depth: int
	last_flags: tuple[bool, ...]


#============================================


def walk(document: Document) -> Iterator[TreeEntry]:
	"""
	Pre-order traversal, children in stored order.

	Args:
		document: Tree to traverse.

	Yields:
		TreeEntry per node, root first.
	"""
	stack: list[TreeEntry] = [TreeEntry(document.root, 0, ())]
	while stack:
		entry = stack.pop()
		yield entry
		children = entry.node.children
		count = len(children)
		for index in range(count - 1, -1, -1):
			flags = entry.last_flags + (index == count - 1,)
			stack.append(TreeEntry(children[index], entry.depth + 1, flags))


#============================================


def _paint(text: str, code: str, color: bool) -> str:
	if color:
		return f"\033[{code}m{text}\033[0m"
	return text


def connector_prefix(last_flags: tuple[bool, ...]) -> str:
	"""
	Build the box-drawing prefix for a non-root node.

	Args:
		last_flags: TreeEntry.last_flags of the node.

	Returns:
		Prefix string, empty for the root.
	"""
	if not last_flags:
		return ""
	parts = [BLANK if last else PIPE for last in last_flags[:-1]]
	parts.append(ELBOW if last_flags[-1] else BRANCH)
	return "".join(parts)


def render_lines(document: Document, color: bool = False) -> list[str]:
	"""
	Render metadata and the tree for interactive display.

	Args:
		document: Tree to render.
		color: Add ANSI colors.

	Returns:
		Lines without trailing newlines.
	"""
	lines = [
		_paint("Tree: ", "1", color) + _paint(document.name, "32", color),
		f"Created: {document.created}",
		f"Modified: {document.modified}",
		"",
	]
	for entry in walk(document):
		node = entry.node
		if entry.depth == 0:
			lines.append(_paint(f"[{node.id}] {node.content}", "1;35", color))
			continue
		label = _paint(f"[{node.id}]", "36", color)
		lines.append(f"{connector_prefix(entry.last_flags)}{label} {node.content}")
	return lines


def render_markdown(document: Document) -> str:
	"""
	Flatten the tree to a nested Markdown bullet list for export.

	Args:
		document: Tree to render.

	Returns:
		Markdown text ending in a newline.
	"""
	lines = [
		f"# {document.name}",
		"",
		# two trailing spaces force a line break inside the paragraph
		f"Created: {document.created}  ",
		f"Modified: {document.modified}",
		"",
		"## Tree Structure",
		"",
	]
	for entry in walk(document):
		lines.append(f"{'  ' * entry.depth}- {entry.node.content}")
	return "\n".join(lines) + "\n"
