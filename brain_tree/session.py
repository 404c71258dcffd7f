#!/usr/bin/env python3
"""
Interactive menu loop holding the active tree.
"""

from __future__ import annotations

# Standard Library
import logging
import signal
import sys
from collections.abc import Callable

# local repo modules
from .config import AppConfig, sanitize_name
from .errors import BrainTreeError, RootDeletionError
from .exporter import Converter, build_converter, export_document, export_filename
from .model import Document
from .renderer import render_lines
from .store import DocumentStore
from . import tree

logger = logging.getLogger(__name__)

MENU_LINES = (
	"[1] Create New Tree     [2] Add Node",
	"[3] Edit Node           [4] Delete Node",
	"[5] Display Tree        [6] Save Tree",
	"[7] Load Tree           [8] Export to Word",
	"[Q] Quit",
)

#============================================


class Session:
	"""
	Owns the single in-memory tree and its unsaved-changes flag.

	Attributes:
		config: Application configuration.
		store: Tree file storage.
		converter: Export backend.
		document: Active tree or None.
		dirty: True when document differs from the last save or load.
	"""

	#============================================
	def __init__(
		self,
		config: AppConfig,
		store: DocumentStore | None = None,
		converter: Converter | None = None,
		input_func: Callable[[str], str] = input,
	) -> None:
		self.config = config
		self.store = store or DocumentStore(config.normalized_base_dir())
		self.converter = converter or build_converter(config.converter)
		self.input_func = input_func
		self.document: Document | None = None
		self.dirty = False

	#============================================
	def _color(self, text: str, code: str) -> str:
		if self.config.color and sys.stdout.isatty():
			return f"\033[{code}m{text}\033[0m"
		return text

	#============================================
	def _error(self, message: str) -> None:
		print(self._color(message, "31"))

	#============================================
	def _warn(self, message: str) -> None:
		print(self._color(message, "33"))

	#============================================
	def _ok(self, message: str) -> None:
		print(self._color(message, "32"))

	#============================================
	def _title(self, title: str) -> None:
		self.print_header()
		print(self._color(title, "1"))
		print()

	#============================================
	def _ask(self, prompt: str) -> str:
		return self.input_func(prompt).strip()

	#============================================
	def confirm(self, prompt: str) -> bool:
		"""
		Ask a yes/no question; only y or Y counts as yes.

		Args:
			prompt: Question text.

		Returns:
			True when confirmed. End of input counts as no.
		"""
		try:
			answer = self._ask(self._color(prompt, "33") + " ")
		except EOFError:
			return False
		return answer in {"y", "Y"}

	#============================================
	def _require_document(self) -> bool:
		if self.document is None:
			self._error("No tree loaded. Please create or load a tree first.")
			return False
		return True

	#============================================
	def _discard_ok(self) -> bool:
		if not (self.dirty and self.document is not None):
			return True
		return self.confirm("Unsaved changes will be lost. Continue? [y/N]")

	#============================================
	def print_header(self) -> None:
		print(self._color("=== Brain Tree - Interactive Mind Mapping Tool ===", "1;34"))
		name = self.document.name if self.document else "None"
		print(f"{self._color('Current Tree:', '36')} {name}")
		print()

	#============================================
	def display_tree(self) -> bool:
		"""
		Print the active tree.

		Returns:
			False when no tree is loaded.
		"""
		if not self._require_document():
			return False
		color = self.config.color and sys.stdout.isatty()
		for line in render_lines(self.document, color=color):
			print(line)
		print()
		return True

	#============================================
	def create_tree(self) -> bool:
		"""
		Replace the active tree with a new one.

		Returns:
			True when a tree was created.
		"""
		self._title("Create New Tree")
		if not self._discard_ok():
			self._warn("Create cancelled.")
			return False
		name = self._ask("Enter tree name: ")
		if not sanitize_name(name):
			self._error("Tree name cannot be empty.")
			return False
		root_content = self._ask("Enter root node content: ")
		try:
			document = tree.create_document(name, root_content)
		except BrainTreeError as error:
			self._error(str(error))
			return False
		self.document = document
		# never saved yet
		self.dirty = True
		self._ok(f"New tree '{document.name}' created successfully.")
		return True

	#============================================
	def add_node(self) -> bool:
		self._title("Add Node")
		if not self.display_tree():
			return False
		parent_id = self._ask("Enter the ID of the parent node (or 'root' for the root node): ")
		if not parent_id:
			self._error("Parent ID cannot be empty.")
			return False
		if tree.find_node_or_none(self.document, parent_id) is None:
			self._error(f"Parent node with ID '{tree.resolve_id(self.document, parent_id)}' not found.")
			return False
		content = self._ask("Enter the content for the new node: ")
		try:
			self.document, node = tree.add_node(self.document, parent_id, content)
		except BrainTreeError as error:
			self._error(str(error))
			return False
		self.dirty = True
		self._ok(f"Node [{node.id}] added successfully.")
		return True

	#============================================
	def edit_node(self) -> bool:
		self._title("Edit Node")
		if not self.display_tree():
			return False
		node_id = self._ask("Enter the ID of the node to edit: ")
		if not node_id:
			self._error("Node ID cannot be empty.")
			return False
		node = tree.find_node_or_none(self.document, node_id)
		if node is None:
			self._error(f"Node with ID '{tree.resolve_id(self.document, node_id)}' not found.")
			return False
		print(f"Current content: {node.content}")
		new_content = self._ask("Enter new content (leave empty to cancel): ")
		if not new_content:
			self._warn("Edit cancelled.")
			return False
		try:
			self.document = tree.edit_node(self.document, node.id, new_content)
		except BrainTreeError as error:
			self._error(str(error))
			return False
		self.dirty = True
		self._ok("Node updated successfully.")
		return True

	#============================================
	def delete_node(self) -> bool:
		"""
		Delete a node and its subtree after confirmation.

		Returns:
			True when the node was deleted.
		"""
		self._title("Delete Node")
		if not self.display_tree():
			return False
		node_id = self._ask("Enter the ID of the node to delete: ")
		if not node_id:
			self._error("Node ID cannot be empty.")
			return False
		if tree.is_root(self.document, node_id):
			self._error(str(RootDeletionError()))
			return False
		if tree.find_node_or_none(self.document, node_id) is None:
			self._error(f"Node with ID '{tree.resolve_id(self.document, node_id)}' not found.")
			return False
		if not self.confirm("This will delete the node and all its children. Continue? [y/N]"):
			self._warn("Deletion cancelled.")
			return False
		try:
			self.document = tree.delete_node(self.document, node_id)
		except BrainTreeError as error:
			self._error(str(error))
			return False
		self.dirty = True
		self._ok("Node deleted successfully.")
		return True

	#============================================
	def save_tree(self) -> bool:
		"""
		Save the active tree, asking before overwriting a file.

		Returns:
			True when the file was written.
		"""
		self._title("Save Tree")
		if not self._require_document():
			return False
		try:
			if self.store.exists(self.document.name):
				if not self.confirm("Tree file already exists. Overwrite? [y/N]"):
					self._warn("Save cancelled.")
					return False
			path = self.store.save(self.document)
		except BrainTreeError as error:
			self._error(str(error))
			return False
		self.dirty = False
		self._ok(f"Tree saved successfully to {path}")
		return True

	#============================================
	def load_tree(self) -> bool:
		"""
		Pick a saved tree from a numbered list and make it active.

		Returns:
			True when a tree was loaded.
		"""
		self._title("Load Tree")
		if not self._discard_ok():
			self._warn("Load cancelled.")
			return False
		try:
			names = self.store.list_available()
		except BrainTreeError as error:
			self._error(str(error))
			return False
		if not names:
			self._warn("No saved trees found.")
			return False
		print("Available trees:")
		for index, name in enumerate(names, start=1):
			print(f"[{index}] {name}")
		print()
		selection = self._ask("Enter the number of the tree to load (or 'q' to cancel): ")
		if selection in {"", "q", "Q"}:
			self._warn("Load cancelled.")
			return False
		if not selection.isdigit() or not 1 <= int(selection) <= len(names):
			self._error("Invalid selection.")
			return False
		try:
			document = self.store.load(names[int(selection) - 1])
		except BrainTreeError as error:
			self._error(str(error))
			return False
		self.document = document
		self.dirty = False
		self._ok(f"Tree '{document.name}' loaded successfully.")
		return True

	#============================================
	def export_tree(self) -> bool:
		"""
		Export the active tree to a Word document in the export folder.

		Returns:
			True when the document was written.
		"""
		self._title("Export to Word Document")
		if not self._require_document():
			return False
		suffix = self.converter.output_suffix
		custom = self._ask(f"Enter output filename (default: {self.document.name}{suffix}): ")
		filename = export_filename(self.document.name, custom, suffix)
		output_path = self.config.normalized_export_dir() / filename
		if output_path.exists():
			if not self.confirm("File already exists. Overwrite? [y/N]"):
				self._warn("Export cancelled.")
				return False
		try:
			export_document(self.document, output_path, self.converter)
		except BrainTreeError as error:
			self._error(str(error))
			return False
		self._ok(f"Tree exported successfully to {output_path}")
		return True

	#============================================
	def shutdown(self) -> None:
		"""
		Offer to save unsaved changes, then say goodbye.
		"""
		print()
		if self.dirty and self.document is not None:
			if self.confirm("You have unsaved changes. Save before exiting? [y/N]"):
				self.save_tree()
		self._ok("Thank you for using Brain Tree!")

	#============================================
	def _on_signal(self, signum: int, _frame) -> None:
		logger.info("Received signal %s, shutting down", signum)
		# a second interrupt must not stack another save prompt
		signal.signal(signal.SIGINT, signal.SIG_IGN)
		signal.signal(signal.SIGTERM, signal.SIG_IGN)
		self.shutdown()
		raise SystemExit(0)

	#============================================
	def install_signal_handlers(self) -> None:
		signal.signal(signal.SIGINT, self._on_signal)
		signal.signal(signal.SIGTERM, self._on_signal)

	#============================================
	def handle_choice(self, choice: str) -> bool:
		"""
		Dispatch one menu choice.

		Args:
			choice: User input from the main menu.

		Returns:
			False when the session should end.
		"""
		actions = {
			"1": self.create_tree,
			"2": self.add_node,
			"3": self.edit_node,
			"4": self.delete_node,
			"6": self.save_tree,
			"7": self.load_tree,
			"8": self.export_tree,
		}
		if choice in {"q", "Q"}:
			self.shutdown()
			return False
		if choice == "5":
			self._title("Tree Display")
			self.display_tree()
			self._ask("Press Enter to continue...")
			return True
		action = actions.get(choice)
		if action is None:
			self._error("Invalid choice. Please try again.")
			return True
		action()
		return True

	#============================================
	def run(self) -> None:
		"""
		Main menu loop until quit or end of input.
		"""
		while True:
			self.print_header()
			print(self._color("Main Menu", "1"))
			print()
			for line in MENU_LINES:
				print(line)
			print()
			try:
				choice = self._ask("Enter your choice: ")
				if not self.handle_choice(choice):
					return
			except EOFError:
				self.shutdown()
				return
