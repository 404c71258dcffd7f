#!/usr/bin/env python3
"""
Tests for configuration loading and the CLI precondition check.
"""

import json
from pathlib import Path

import pytest

from brain_tree import cli
from brain_tree.config import AppConfig, load_user_config, sanitize_filename, sanitize_name
from brain_tree.errors import PreconditionError, ValidationError


def test_sanitize_name_keeps_safe_chars():
	assert sanitize_name("My Tree_v2-final!.json") == "MyTree_v2-finaljson"
	assert sanitize_filename("notes v1.docx") == "notesv1.docx"


def test_load_user_config_yaml(tmp_path: Path):
	path = tmp_path / "brain_tree.yaml"
	path.write_text("base_dir: ~/trees\nconverter: pandoc\ncolor: false\n", encoding="utf-8")
	assert load_user_config(path) == {"base_dir": "~/trees", "converter": "pandoc", "color": False}


def test_load_user_config_missing_file(tmp_path: Path):
	assert load_user_config(tmp_path / "absent.yaml") == {}
	assert load_user_config(None) == {}


def test_cli_flags_override_config_file(tmp_path: Path):
	path = tmp_path / "config.json"
	path.write_text(json.dumps({"base_dir": str(tmp_path / "from_file"), "converter": "pandoc"}), encoding="utf-8")
	args = cli.parse_args(["-c", str(path), "--converter", "docx", "--no-color", "-e", str(tmp_path / "out")])
	config = cli.build_config(args)
	assert config.base_dir == tmp_path / "from_file"
	assert config.export_dir == tmp_path / "out"
	assert config.converter == "docx"
	assert config.color is False


def test_missing_pandoc_is_precondition_error(monkeypatch):
	monkeypatch.setattr(cli.shutil, "which", lambda name: None)
	with pytest.raises(PreconditionError):
		cli.check_dependencies(AppConfig(converter="pandoc"))
	cli.check_dependencies(AppConfig(converter="docx"))


def test_main_exits_before_menu_when_tool_missing(monkeypatch, tmp_path: Path, capsys):
	monkeypatch.setattr(cli.shutil, "which", lambda name: None)
	with pytest.raises(SystemExit) as excinfo:
		cli.main(["--converter", "pandoc", "-b", str(tmp_path)])
	assert excinfo.value.code == 1
	assert "pandoc is not installed" in capsys.readouterr().out


@pytest.mark.parametrize(
	"filename,text",
	[
		("list.yaml", "- base_dir\n- export_dir\n"),
		("scalar.yml", "just a string\n"),
		("list.json", "[1, 2]"),
		("broken.json", "{ not json"),
		("broken.yaml", "base_dir: [unclosed\n"),
	],
)
def test_load_user_config_rejects_non_mapping(tmp_path: Path, filename, text):
	path = tmp_path / filename
	path.write_text(text, encoding="utf-8")
	with pytest.raises(ValidationError):
		load_user_config(path)


def test_load_user_config_empty_yaml(tmp_path: Path):
	path = tmp_path / "empty.yaml"
	path.write_text("", encoding="utf-8")
	assert load_user_config(path) == {}


def test_main_reports_bad_config_file(tmp_path: Path, capsys):
	path = tmp_path / "config.yaml"
	path.write_text("- not\n- a mapping\n", encoding="utf-8")
	with pytest.raises(SystemExit) as excinfo:
		cli.main(["-c", str(path), "-b", str(tmp_path)])
	assert excinfo.value.code == 1
	assert "must hold a mapping" in capsys.readouterr().out
