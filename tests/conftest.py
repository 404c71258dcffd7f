"""
Pytest config to ensure local package imports work without installation.
"""

from __future__ import annotations

import random
import sys
from datetime import datetime
from pathlib import Path

import pytest


def _add_repo_root_to_path() -> None:
	"""
	Insert the repo root into sys.path for local imports.
	"""
	repo_root = Path(__file__).resolve().parent.parent
	repo_root_str = str(repo_root)
	if repo_root_str not in sys.path:
		sys.path.insert(0, repo_root_str)


_add_repo_root_to_path()

from brain_tree.config import AppConfig  # noqa: E402
from brain_tree.model import Document, Node  # noqa: E402

T0 = datetime(2024, 3, 1, 9, 30, 0)
T1 = datetime(2024, 3, 2, 10, 0, 0)


class ScriptedInput:
	"""
	Test-only replacement for input() that replays answers in order.
	"""

	def __init__(self, answers: list[str]) -> None:
		self.answers = list(answers)
		self.prompts: list[str] = []

	def __call__(self, prompt: str = "") -> str:
		self.prompts.append(prompt)
		if not self.answers:
			raise EOFError
		return self.answers.pop(0)


def build_chain(depth: int) -> Document:
	"""
	Document whose nodes form a single chain n0 -> n1 -> ... -> n<depth>.

	Built from the leaf up so no recursion is involved.
	"""
	node = Node(id=f"n{depth}", content=f"level {depth}")
	for level in range(depth - 1, -1, -1):
		node = Node(id=f"n{level}", content=f"level {level}", children=(node,))
	return Document(name="Deep", created="2024-03-01 09:30:00", modified="2024-03-01 09:30:00", root=node)


@pytest.fixture
def rng() -> random.Random:
	return random.Random(1234)


@pytest.fixture
def sample_document() -> Document:
	"""
	Root R with children A and B; B has one child C.
	"""
	leaf_c = Node(id="4000", content="C")
	node_a = Node(id="2000", content="A")
	node_b = Node(id="3000", content="B", children=(leaf_c,))
	root = Node(id="1000", content="R", children=(node_a, node_b))
	return Document(
		name="Sample",
		created="2024-03-01 09:30:00",
		modified="2024-03-01 09:30:00",
		root=root,
	)


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
	return AppConfig(
		base_dir=tmp_path / "trees",
		export_dir=tmp_path / "exports",
		color=False,
	)
