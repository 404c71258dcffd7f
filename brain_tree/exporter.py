#!/usr/bin/env python3
"""
Export a tree to a Word document through a Markdown intermediate.
"""

from __future__ import annotations

# Standard Library
import logging
import os
import re
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Protocol

# PIP3 modules
import docx
from docx.shared import Inches

# local repo modules
from .config import sanitize_filename
from .errors import ConversionError, ValidationError
from .model import Document
from .renderer import render_markdown

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*)$")
_BULLET_RE = re.compile(r"^( *)[-*+]\s+(.*)$")
_BULLET_STYLES = ("List Bullet", "List Bullet 2", "List Bullet 3")

#============================================


class Converter(Protocol):
	name: str
	output_suffix: str

	def convert(self, markdown_path: Path, output_path: Path) -> None:
		...


#============================================


class DocxConverter:
	"""
	In-process Markdown to .docx conversion with python-docx.

	Understands the subset render_markdown produces: ATX headings, nested
	bullets indented two spaces per level, and plain paragraphs where a
	trailing double space marks a line break.
	"""

	name = "docx"
	output_suffix = ".docx"

	#============================================
	def convert(self, markdown_path: Path, output_path: Path) -> None:
		"""
		Convert a Markdown file to a Word document.

		Args:
			markdown_path: Source Markdown file.
			output_path: Destination .docx file.
		"""
		try:
			text = markdown_path.read_text(encoding="utf-8")
			document = self.build(text)
			document.save(str(output_path))
		except (OSError, KeyError, ValueError) as error:
			raise ConversionError(f"Failed to export tree to Word document: {error}") from error

	#============================================
	def build(self, markdown: str):
		"""
		Build an in-memory python-docx Document from Markdown text.
		"""
		document = docx.Document()
		paragraph_lines: list[str] = []
		for line in markdown.splitlines():
			heading = _HEADING_RE.match(line)
			bullet = _BULLET_RE.match(line)
			if not line.strip() or heading or bullet:
				self._flush_paragraph(document, paragraph_lines)
			if heading:
				document.add_heading(heading.group(2).strip(), level=len(heading.group(1)))
			elif bullet:
				self._add_bullet(document, bullet.group(2), len(bullet.group(1)) // 2)
			elif line.strip():
				paragraph_lines.append(line)
		self._flush_paragraph(document, paragraph_lines)
		return document

	#============================================
	def _add_bullet(self, document, text: str, level: int) -> None:
		style = _BULLET_STYLES[min(level, len(_BULLET_STYLES) - 1)]
		paragraph = document.add_paragraph(text, style=style)
		extra = level - (len(_BULLET_STYLES) - 1)
		if extra > 0:
			# the default template stops at three bullet levels
			paragraph.paragraph_format.left_indent = Inches(0.75 + 0.25 * extra)

	#============================================
	def _flush_paragraph(self, document, lines: list[str]) -> None:
		if not lines:
			return
		paragraph = document.add_paragraph()
		for index, line in enumerate(lines):
			run = paragraph.add_run(line.strip())
			if index < len(lines) - 1 and line.endswith("  "):
				run.add_break()
			elif index < len(lines) - 1:
				paragraph.add_run(" ")
		lines.clear()


#============================================


class PandocConverter:
	"""
	Subprocess conversion with the pandoc command line tool.
	"""

	name = "pandoc"
	output_suffix = ".docx"

	#============================================
	def __init__(self, executable: str = "pandoc") -> None:
		self.executable = executable

	#============================================
	def available(self) -> bool:
		return shutil.which(self.executable) is not None

	#============================================
	def convert(self, markdown_path: Path, output_path: Path) -> None:
		"""
		Run pandoc on the Markdown file.

		Args:
			markdown_path: Source Markdown file.
			output_path: Destination .docx file.
		"""
		try:
			result = subprocess.run(
				[self.executable, "-f", "markdown", "-t", "docx", str(markdown_path), "-o", str(output_path)],
				capture_output=True,
				text=True,
				check=False,
			)
		except FileNotFoundError as error:
			raise ConversionError(f"{self.executable} is not installed.") from error
		if result.returncode != 0:
			detail = result.stderr.strip() or f"exit status {result.returncode}"
			raise ConversionError(f"Failed to export tree to Word document: {detail}")


#============================================


def build_converter(name: str) -> Converter:
	"""
	Pick the export backend by name.

	Args:
		name: "docx" or "pandoc".

	Returns:
		Converter instance.
	"""
	if name == "docx":
		return DocxConverter()
	if name == "pandoc":
		return PandocConverter()
	raise ValidationError(f"Unknown converter '{name}'.")


def export_filename(document_name: str, custom: str | None = None, suffix: str = ".docx") -> str:
	"""
	Choose the export file name.

	Args:
		document_name: Sanitized tree name, the default stem.
		custom: Optional user supplied file name.
		suffix: Extension the converter produces.

	Returns:
		File name ending in suffix.
	"""
	filename = sanitize_filename(custom or "").strip(".")
	if not filename:
		filename = document_name
	if not filename.endswith(suffix):
		filename = f"{filename}{suffix}"
	return filename


#============================================


def export_document(document: Document, output_path: Path, converter: Converter) -> Path:
	"""
	Render the tree to Markdown and convert it into output_path.

	The converter writes to a temporary file beside output_path which only
	replaces the destination once conversion succeeded. The Markdown
	intermediate is always removed.

	Args:
		document: Tree to export.
		output_path: Final document path.
		converter: Backend turning Markdown into the output format.

	Returns:
		output_path.

	Raises:
		ConversionError: When writing or converting fails.
	"""
	output_path = Path(output_path)
	markdown = render_markdown(document)
	md_path: Path | None = None
	partial_path: Path | None = None
	try:
		output_path.parent.mkdir(parents=True, exist_ok=True)
		md_fd, md_name = tempfile.mkstemp(prefix="brain_tree_", suffix=".md")
		md_path = Path(md_name)
		with os.fdopen(md_fd, "w", encoding="utf-8") as handle:
			handle.write(markdown)
		out_fd, partial_name = tempfile.mkstemp(
			dir=output_path.parent,
			prefix=f".{output_path.stem}.",
			suffix=output_path.suffix,
		)
		os.close(out_fd)
		partial_path = Path(partial_name)
		converter.convert(md_path, partial_path)
		if partial_path.stat().st_size == 0:
			raise ConversionError(f"{converter.name} produced an empty document.")
		os.replace(partial_path, output_path)
	except OSError as error:
		raise ConversionError(f"Failed to export tree to {output_path}: {error}") from error
	finally:
		if md_path is not None:
			md_path.unlink(missing_ok=True)
		if partial_path is not None:
			partial_path.unlink(missing_ok=True)
	logger.info("Exported tree %s to %s with %s", document.name, output_path, converter.name)
	return output_path
