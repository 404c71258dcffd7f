#!/usr/bin/env python3
"""
Tests for saving and loading tree files.
"""

import json
import os
import stat
from pathlib import Path

import pytest

from brain_tree import store as store_module
from brain_tree import tree
from brain_tree.errors import CorruptDocumentError, PersistenceError
from brain_tree.store import DocumentStore


def test_list_available_creates_missing_dir(tmp_path: Path):
	base = tmp_path / "nested" / "trees"
	store = DocumentStore(base)
	assert store.list_available() == []
	assert base.is_dir()


def test_save_then_load_round_trip(tmp_path: Path, sample_document):
	store = DocumentStore(tmp_path)
	path = store.save(sample_document)
	assert path == tmp_path / "Sample.json"
	loaded = store.load("Sample")
	assert loaded == sample_document
	assert store.list_available() == ["Sample"]


def test_saved_file_is_owner_only(tmp_path: Path, sample_document):
	path = DocumentStore(tmp_path).save(sample_document)
	assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_saved_file_has_metadata_and_root(tmp_path: Path, sample_document):
	path = DocumentStore(tmp_path).save(sample_document)
	payload = json.loads(path.read_text(encoding="utf-8"))
	assert payload["metadata"]["name"] == "Sample"
	assert payload["root"]["id"] == "1000"
	assert [child["id"] for child in payload["root"]["children"]] == ["2000", "3000"]


def test_overwrite_creates_backup(tmp_path: Path, sample_document):
	store = DocumentStore(tmp_path)
	path = store.save(sample_document)
	original_text = path.read_text(encoding="utf-8")
	edited = tree.edit_node(sample_document, "2000", "changed")
	store.save(edited)
	backup = tmp_path / "Sample.json.bak"
	assert backup.read_text(encoding="utf-8") == original_text
	assert store.load("Sample") == edited


def test_failed_replace_keeps_previous_file(tmp_path: Path, sample_document, monkeypatch):
	store = DocumentStore(tmp_path)
	path = store.save(sample_document)
	before = path.read_text(encoding="utf-8")

	def _fail_replace(src, dst):
		raise OSError("disk full")

	monkeypatch.setattr(store_module.os, "replace", _fail_replace)
	with pytest.raises(PersistenceError):
		store.save(tree.edit_node(sample_document, "2000", "lost"))
	assert path.read_text(encoding="utf-8") == before
	assert not list(tmp_path.glob("*.tmp"))


def test_load_corrupt_file_raises(tmp_path: Path):
	(tmp_path / "broken.json").write_text("{ not json", encoding="utf-8")
	with pytest.raises(CorruptDocumentError):
		DocumentStore(tmp_path).load("broken")


def test_load_structurally_invalid_file_raises(tmp_path: Path):
	(tmp_path / "norooot.json").write_text(json.dumps({"metadata": {"name": "x"}}), encoding="utf-8")
	with pytest.raises(CorruptDocumentError):
		DocumentStore(tmp_path).load("norooot")


def test_load_missing_file_raises(tmp_path: Path):
	with pytest.raises(PersistenceError):
		DocumentStore(tmp_path).load("ghost")


def test_list_available_is_sorted_and_ignores_backups(tmp_path: Path):
	for name in ("zeta", "alpha", "mid"):
		(tmp_path / f"{name}.json").write_text("{}", encoding="utf-8")
	(tmp_path / "alpha.json.bak").write_text("{}", encoding="utf-8")
	os.mkdir(tmp_path / "folder.json")
	assert DocumentStore(tmp_path).list_available() == ["alpha", "mid", "zeta"]


def test_load_maps_too_deep_json_to_corrupt_document(tmp_path: Path, sample_document, monkeypatch):
	store = DocumentStore(tmp_path)
	store.save(sample_document)

	def _too_deep(text):
		raise RecursionError("maximum recursion depth exceeded")

	monkeypatch.setattr(store_module.json, "loads", _too_deep)
	with pytest.raises(CorruptDocumentError, match="too deep"):
		store.load("Sample")


def test_save_maps_too_deep_json_to_persistence_error(tmp_path: Path, sample_document, monkeypatch):
	store = DocumentStore(tmp_path)
	path = store.save(sample_document)
	before = path.read_text(encoding="utf-8")

	def _too_deep(obj, **kwargs):
		raise RecursionError("maximum recursion depth exceeded")

	monkeypatch.setattr(store_module.json, "dumps", _too_deep)
	with pytest.raises(PersistenceError, match="nested too deeply"):
		store.save(tree.edit_node(sample_document, "2000", "lost"))
	assert path.read_text(encoding="utf-8") == before
	assert not (tmp_path / "Sample.json.bak").exists()
	assert not list(tmp_path.glob("*.tmp"))


def test_load_accepts_unsanitized_tree_name(tmp_path: Path, rng):
	store = DocumentStore(tmp_path)
	document = tree.create_document("My Tree", "Top", rng=rng)
	assert store.save(document) == tmp_path / "MyTree.json"
	assert store.load("My Tree").root.content == "Top"


def test_load_prefers_listed_file_stem(tmp_path: Path, sample_document):
	(tmp_path / "odd name.json").write_text(json.dumps(sample_document.to_dict()), encoding="utf-8")
	store = DocumentStore(tmp_path)
	assert store.list_available() == ["odd name"]
	assert store.load("odd name") == sample_document
