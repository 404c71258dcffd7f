#!/usr/bin/env python3
"""
Repo-root runner for brain_tree.

Examples:
	python run_brain_tree.py
	python run_brain_tree.py --base-dir ~/Notes/trees --converter pandoc
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
	"""
	Run the CLI entrypoint with repo-root import behavior.
	"""
	repo_root = Path(__file__).resolve().parent
	if str(repo_root) not in sys.path:
		sys.path.insert(0, str(repo_root))

	from brain_tree.cli import main as cli_main

	cli_main()


if __name__ == "__main__":
	main()
