#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from dataclasses import dataclass, field
from pathlib import Path
import json

# PIP3 modules
import yaml

# local repo modules
from .errors import ValidationError

#============================================

CONVERTERS = ("docx", "pandoc")
_NAME_CHARS = set("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-")
_FILENAME_CHARS = _NAME_CHARS | {"."}


def _default_base_dir() -> Path:
	return Path.home() / "Documents" / "brain_trees"


def _default_export_dir() -> Path:
	return Path.home() / "Documents"


#============================================


@dataclass(slots=True)
class AppConfig:
	"""
	Runtime configuration settings.

	Attributes:
		base_dir: Folder holding one JSON file per tree.
		export_dir: Folder where exported Word documents are written.
		converter: Export backend ("docx" in-process or "pandoc").
		color: Use ANSI colors when stdout is a terminal.
		verbose: Verbose logging.
		config_path: Optional user config path.
	"""
	base_dir: Path = field(default_factory=_default_base_dir)
	export_dir: Path = field(default_factory=_default_export_dir)
	converter: str = "docx"
	color: bool = True
	verbose: bool = False
	config_path: Path | None = None

	#============================================
	def normalized_base_dir(self) -> Path:
		"""
		Normalize the tree storage folder.

		Returns:
			Normalized Path.
		"""
		return self.base_dir.expanduser().resolve()

	#============================================
	def normalized_export_dir(self) -> Path:
		"""
		Normalize the export folder.

		Returns:
			Normalized Path.
		"""
		return self.export_dir.expanduser().resolve()


#============================================
def sanitize_name(name: str) -> str:
	"""
	Reduce a tree name to letters, digits, underscore and hyphen.

	Args:
		name: Raw user input.

	Returns:
		Sanitized name, possibly empty.
	"""
	return "".join(ch for ch in name if ch in _NAME_CHARS)


#============================================
def sanitize_filename(name: str) -> str:
	"""
	Like sanitize_name but keeps dots for file extensions.
	"""
	return "".join(ch for ch in name if ch in _FILENAME_CHARS)


#============================================


def load_user_config(config_path: Path | None) -> dict:
	"""
	Load user configuration from yaml or json.

	Args:
		config_path: Path to config file.

	Returns:
		Dictionary of loaded values or empty dict.

	Raises:
		ValidationError: When the file is unreadable or not a mapping.
	"""
	if not config_path or not config_path.is_file():
		return {}
	try:
		with config_path.open("r", encoding="utf-8") as handle:
			if config_path.suffix.lower() in {".yml", ".yaml"}:
				loaded = yaml.safe_load(handle)
			else:
				loaded = json.load(handle)
	except (yaml.YAMLError, json.JSONDecodeError) as error:
		raise ValidationError(f"Cannot parse config file {config_path}: {error}") from error
	if loaded is None:
		return {}
	if not isinstance(loaded, dict):
		raise ValidationError(f"Config file {config_path} must hold a mapping of settings.")
	return loaded


#============================================


def apply_user_config(config: AppConfig, user_cfg: dict) -> AppConfig:
	"""
	Copy recognized keys from a loaded config file onto the config.

	Args:
		config: Configuration to update.
		user_cfg: Values from load_user_config.

	Returns:
		The same config instance.
	"""
	if user_cfg.get("base_dir"):
		config.base_dir = Path(user_cfg["base_dir"]).expanduser()
	if user_cfg.get("export_dir"):
		config.export_dir = Path(user_cfg["export_dir"]).expanduser()
	if user_cfg.get("converter"):
		config.converter = str(user_cfg["converter"])
	if "color" in user_cfg:
		config.color = bool(user_cfg.get("color"))
	if "verbose" in user_cfg:
		config.verbose = bool(user_cfg.get("verbose"))
	return config
