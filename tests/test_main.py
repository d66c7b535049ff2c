"""Tests for main.py argument parsing and pipeline configuration loading."""
import json

import pytest

from main import parse_args
from autoscroll.pipeline import load_config


class TestParseArgs:

    def test_document_required(self):
        with pytest.raises(ValueError):
            parse_args(["--serve"])

    def test_defaults(self):
        args = parse_args(["--document=poem.txt"])

        assert args["document"] == "poem.txt"
        assert args["transcript"] is None
        assert args["serve"] is False
        assert args["verbose"] is False
        assert str(args["config"]).endswith("autoscroll_config.json")

    def test_all_options(self):
        args = parse_args([
            "--document=poem.txt",
            "--transcript=heard.txt",
            "--config=custom.json",
            "--serve",
            "-v",
        ])

        assert args == {
            "document": "poem.txt",
            "transcript": "heard.txt",
            "config": "custom.json",
            "serve": True,
            "verbose": True,
        }

    def test_value_may_contain_equals(self):
        assert parse_args(["--document=a=b.txt"])["document"] == "a=b.txt"


class TestLoadConfig:

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.json")

    def test_loads_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"matching": {"window_size": 40}}), encoding="utf-8")

        assert load_config(path) == {"matching": {"window_size": 40}}

    def test_shipped_config_is_valid(self):
        from pathlib import Path
        config = load_config(Path(__file__).parent.parent / "config" / "autoscroll_config.json")

        assert config["matching"]["window_size"] == 40
        assert config["matching"]["acceptance_threshold"] == 0.7
        assert config["display"]["visible_lines"] == 40
