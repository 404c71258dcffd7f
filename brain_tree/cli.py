#!/usr/bin/env python3
"""
Command line interface for brain-tree.
"""

# Standard Library
import argparse
import logging
from pathlib import Path
import shutil
import sys

# local repo modules
from .config import CONVERTERS, AppConfig, apply_user_config, load_user_config
from .errors import PreconditionError, ValidationError
from .session import Session

#============================================


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse CLI arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Build and export hierarchical note trees interactively."
	)
	parser.add_argument(
		"-b",
		"--base-dir",
		dest="base_dir",
		help="Folder for saved trees (default ~/Documents/brain_trees).",
	)
	parser.add_argument(
		"-e",
		"--export-dir",
		dest="export_dir",
		help="Folder for exported Word documents (default ~/Documents).",
	)
	parser.add_argument(
		"-c",
		"--config",
		dest="config_path",
		help="Optional JSON or YAML config file.",
	)
	parser.add_argument(
		"--converter",
		dest="converter",
		choices=list(CONVERTERS),
		help="Export backend: docx (in-process, default) or pandoc.",
	)
	parser.add_argument(
		"--no-color",
		dest="no_color",
		action="store_true",
		help="Disable ANSI colors.",
	)
	parser.add_argument(
		"-v",
		"--verbose",
		dest="verbose",
		action="store_true",
		help="Verbose logging.",
	)
	return parser.parse_args(argv)


#============================================


def build_config(args: argparse.Namespace) -> AppConfig:
	"""
	Build runtime config from args and file.
	"""
	config = AppConfig()
	if args.config_path:
		config.config_path = Path(args.config_path).expanduser()
		apply_user_config(config, load_user_config(config.config_path))
	if args.base_dir:
		config.base_dir = Path(args.base_dir).expanduser()
	if args.export_dir:
		config.export_dir = Path(args.export_dir).expanduser()
	if args.converter:
		config.converter = args.converter
	if args.no_color:
		config.color = False
	if args.verbose:
		config.verbose = True
	return config


#============================================


def check_dependencies(config: AppConfig) -> None:
	"""
	Fail before the menu starts when a required tool is missing.

	Args:
		config: Application configuration.

	Raises:
		PreconditionError: When the selected converter is unusable.
	"""
	if config.converter not in CONVERTERS:
		raise PreconditionError(
			f"Unknown converter '{config.converter}' (choose from {', '.join(CONVERTERS)})."
		)
	if config.converter == "pandoc" and shutil.which("pandoc") is None:
		raise PreconditionError(
			"pandoc is not installed. Please install pandoc for document conversion "
			"(brew install pandoc) or use --converter docx."
		)


#============================================


def _color(text: str, code: str) -> str:
	if sys.stdout.isatty():
		return f"\033[{code}m{text}\033[0m"
	return text


#============================================


def main(argv: list[str] | None = None) -> None:
	"""
	Entry point for the CLI.
	"""
	args = parse_args(argv)
	try:
		config = build_config(args)
	except ValidationError as error:
		print(f"{_color('Error:', '31')} {error}")
		sys.exit(1)
	if config.verbose:
		logging.basicConfig(level=logging.INFO)
	else:
		logging.basicConfig(level=logging.WARNING)
	try:
		check_dependencies(config)
	except PreconditionError as error:
		print(f"{_color('Error:', '31')} {error}")
		sys.exit(1)
	session = Session(config=config)
	session.install_signal_handlers()
	session.run()


#============================================


if __name__ == "__main__":
	main()
