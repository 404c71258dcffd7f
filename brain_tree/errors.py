#!/usr/bin/env python3
"""
Exceptions raised by the tree engine, store and exporter.
"""

#============================================


class BrainTreeError(RuntimeError):
	"""
	Base class for every error the session reports to the user.
	"""


class ValidationError(BrainTreeError):
	"""
	Empty or malformed user input.
	"""


class NodeNotFoundError(BrainTreeError):
	"""
	No node with the requested id exists in the document.
	"""

	def __init__(self, node_id: str) -> None:
		super().__init__(f"Node with ID '{node_id}' not found.")
		self.node_id = node_id


class RootDeletionError(BrainTreeError):
	"""
	The root node anchors the document and cannot be deleted.
	"""

	def __init__(self) -> None:
		super().__init__("Cannot delete the root node.")


class IdExhaustedError(BrainTreeError):
	"""
	Every identifier in the generator range is already taken.
	"""


class PersistenceError(BrainTreeError):
	"""
	Reading or writing a tree file failed.
	"""


class CorruptDocumentError(PersistenceError):
	"""
	A tree file exists but is not a well-formed document.
	"""


class ConversionError(BrainTreeError):
	"""
	The export converter failed to produce an output document.
	"""


class PreconditionError(BrainTreeError):
	"""
	A required external tool is missing at startup.
	"""
