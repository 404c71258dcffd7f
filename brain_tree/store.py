#!/usr/bin/env python3
"""
One JSON file per tree under a base folder.
"""

from __future__ import annotations

# Standard Library
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path

# local repo modules
from .config import sanitize_name
from .errors import CorruptDocumentError, PersistenceError, ValidationError
from .model import Document, document_from_dict, same_document

logger = logging.getLogger(__name__)

TREE_SUFFIX = ".json"
BACKUP_SUFFIX = ".bak"
FILE_MODE = 0o600

#============================================


def parse_document(text: str) -> Document:
	"""
	Parse and validate tree file contents.

	Args:
		text: Raw file text.

	Returns:
		Document instance.

	Raises:
		CorruptDocumentError: When the text is not a well-formed tree.
	"""
	try:
		payload = json.loads(text)
	except json.JSONDecodeError as error:
		raise CorruptDocumentError(f"Invalid tree file format: {error}") from error
	except RecursionError as error:
		raise CorruptDocumentError("Invalid tree file format: nesting is too deep to read.") from error
	return document_from_dict(payload)


def dump_document(document: Document) -> str:
	"""
	Serialize a tree to JSON text.

	Raises:
		PersistenceError: When the tree is nested deeper than the JSON encoder
			can handle.
	"""
	try:
		return json.dumps(document.to_dict(), indent=2, ensure_ascii=False) + "\n"
	except RecursionError as error:
		raise PersistenceError(f"Tree {document.name} is nested too deeply to save.") from error


#============================================


class DocumentStore:
	"""
	Save, load and list tree files.

	Concurrent writers to the same file are not guarded; the last save wins.
	"""

	#============================================
	def __init__(self, base_dir: Path) -> None:
		self.base_dir = Path(base_dir).expanduser()

	#============================================
	def ensure_dir(self) -> Path:
		"""
		Create the base folder on first use.

		Returns:
			The base folder.
		"""
		if self.base_dir.is_dir():
			return self.base_dir
		try:
			self.base_dir.mkdir(parents=True, exist_ok=True)
		except OSError as error:
			raise PersistenceError(f"Failed to create directory {self.base_dir}: {error}") from error
		logger.info("Created directory %s", self.base_dir)
		return self.base_dir

	#============================================
	def path_for(self, name: str) -> Path:
		"""
		Storage path for a tree name.

		Args:
			name: Tree name, sanitized before use.

		Returns:
			Path of the JSON file.
		"""
		clean = sanitize_name(name)
		if not clean:
			raise ValidationError(f"Tree name '{name}' has no usable characters.")
		return self.base_dir / f"{clean}{TREE_SUFFIX}"

	#============================================
	def exists(self, name: str) -> bool:
		return self.path_for(name).is_file()

	#============================================
	def list_available(self) -> list[str]:
		"""
		Names of saved trees, sorted.

		Returns:
			List of tree names, empty when nothing is saved.
		"""
		self.ensure_dir()
		return sorted(path.stem for path in self.base_dir.glob(f"*{TREE_SUFFIX}") if path.is_file())

	#============================================
	def backup(self, path: Path) -> Path | None:
		"""
		Copy an existing tree file to <file>.bak.

		Args:
			path: Tree file path.

		Returns:
			Backup path, or None when there was nothing to back up.
		"""
		if not path.is_file():
			return None
		backup_path = path.with_name(path.name + BACKUP_SUFFIX)
		try:
			shutil.copy2(path, backup_path)
		except OSError as error:
			raise PersistenceError(f"Failed to back up {path}: {error}") from error
		logger.info("Backup created: %s", backup_path)
		return backup_path

	#============================================
	def save(self, document: Document) -> Path:
		"""
		Write the tree atomically, backing up any previous version.

		The caller is responsible for confirming an overwrite first.

		Args:
			document: Tree to save.

		Returns:
			Path of the saved file.

		Raises:
			PersistenceError: When the file could not be written; the previous
				file is left as it was.
		"""
		self.ensure_dir()
		path = self.path_for(document.name)
		payload = dump_document(document)
		self.backup(path)
		temp_path: Path | None = None
		try:
			fd, temp_name = tempfile.mkstemp(dir=self.base_dir, prefix=f".{path.stem}.", suffix=".tmp")
			temp_path = Path(temp_name)
			with os.fdopen(fd, "w", encoding="utf-8") as handle:
				handle.write(payload)
				handle.flush()
				os.fsync(handle.fileno())
			written = parse_document(temp_path.read_text(encoding="utf-8"))
			if not same_document(written, document):
				raise PersistenceError(f"Verification of {temp_path} failed.")
			os.chmod(temp_path, FILE_MODE)
			os.replace(temp_path, path)
			temp_path = None
		except (OSError, CorruptDocumentError) as error:
			raise PersistenceError(f"Failed to save tree to {path}: {error}") from error
		finally:
			if temp_path is not None:
				temp_path.unlink(missing_ok=True)
		logger.info("Tree %s saved to %s", document.name, path)
		return path

	#============================================
	def load(self, name: str) -> Document:
		"""
		Read and validate a saved tree.

		Args:
			name: A stem from list_available, or a tree name which is
				sanitized the same way save does.

		Returns:
			Loaded Document.

		Raises:
			PersistenceError: When the file is missing or unreadable.
			CorruptDocumentError: When the file is not a well-formed tree.
		"""
		path = self.base_dir / f"{Path(name).name}{TREE_SUFFIX}"
		if not path.is_file():
			path = self.path_for(name)
		if not path.is_file():
			raise PersistenceError("Selected file does not exist.")
		try:
			text = path.read_text(encoding="utf-8")
		except (OSError, UnicodeDecodeError) as error:
			raise PersistenceError(f"Failed to read {path}: {error}") from error
		document = parse_document(text)
		logger.info("Tree %s loaded from %s", document.name, path)
		return document
