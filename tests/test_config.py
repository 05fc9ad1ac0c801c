"""Tests for wise.config: models and YAML loader."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from wise.config.loader import DEFAULT_CONFIG_TEMPLATE, _expand_env_vars, load_config
from wise.config.models import ManifestConfig, SyncConfig, WiseConfig

import yaml


class TestDefaults:
    def test_manifest_defaults(self):
        cfg = WiseConfig()
        assert cfg.manifest.path == ".temp/.wise.sqlite"
        assert cfg.manifest.retention_days == 30
        assert cfg.manifest.hash_algorithm == "sha256"

    def test_sync_defaults(self):
        cfg = WiseConfig()
        assert cfg.sync.hash is False
        assert cfg.sync.preserve_timestamps is True
        assert cfg.sync.max_workers == 4
        assert cfg.sync.ignore_patterns == []

    def test_logging_defaults(self):
        cfg = WiseConfig()
        assert cfg.log_level == "info"
        assert cfg.log_format == "text"

    def test_template_matches_defaults(self):
        assert WiseConfig(**yaml.safe_load(DEFAULT_CONFIG_TEMPLATE)) == WiseConfig()


class TestValidation:
    def test_rejects_unknown_algorithm(self):
        with pytest.raises(ValidationError):
            ManifestConfig(hash_algorithm="rot13")

    def test_rejects_zero_workers(self):
        with pytest.raises(ValidationError):
            SyncConfig(max_workers=0)

    def test_rejects_zero_retention(self):
        with pytest.raises(ValidationError):
            ManifestConfig(retention_days=0)

    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValidationError):
            WiseConfig(log_level="verbose")


class TestLoader:
    def test_no_files_returns_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with patch("pathlib.Path.home", return_value=tmp_path / "home"):
            assert load_config() == WiseConfig()

    def test_explicit_path(self, tmp_path):
        cfg_file = tmp_path / "custom.yaml"
        cfg_file.write_text("manifest:\n  retention_days: 7\nsync:\n  hash: true\n")
        cfg = load_config(str(cfg_file))
        assert cfg.manifest.retention_days == 7
        assert cfg.sync.hash is True

    def test_project_local_file(self, tmp_path, monkeypatch):
        (tmp_path / "wise.yaml").write_text("log_level: debug\n")
        monkeypatch.chdir(tmp_path)
        assert load_config().log_level == "debug"

    def test_user_global_file(self, tmp_path, monkeypatch):
        home = tmp_path / "home"
        (home / ".wise").mkdir(parents=True)
        (home / ".wise" / "config.yaml").write_text("log_format: json\n")
        monkeypatch.chdir(tmp_path)
        with patch("pathlib.Path.home", return_value=home):
            assert load_config().log_format == "json"

    def test_empty_file_falls_through(self, tmp_path, monkeypatch):
        (tmp_path / "wise.yaml").write_text("")
        monkeypatch.chdir(tmp_path)
        with patch("pathlib.Path.home", return_value=tmp_path / "home"):
            assert load_config() == WiseConfig()

    def test_env_var_expansion(self, tmp_path):
        cfg_file = tmp_path / "wise.yaml"
        cfg_file.write_text('manifest:\n  path: "${WISE_TEST_DIR}/m.sqlite"\n')
        with patch.dict(os.environ, {"WISE_TEST_DIR": "/var/cache/site"}):
            cfg = load_config(str(cfg_file))
        assert cfg.manifest.path == "/var/cache/site/m.sqlite"

    def test_empty_explicit_file_falls_through_to_project_local(self, tmp_path, monkeypatch):
        empty = tmp_path / "empty.yaml"
        empty.write_text("# nothing here\n")
        (tmp_path / "wise.yaml").write_text("log_level: warn\n")
        monkeypatch.chdir(tmp_path)
        assert load_config(str(empty)).log_level == "warn"

    def test_unset_env_var_expands_to_empty(self, tmp_path, monkeypatch):
        monkeypatch.delenv("WISE_UNSET_DIR", raising=False)
        cfg_file = tmp_path / "wise.yaml"
        cfg_file.write_text('manifest:\n  path: "${WISE_UNSET_DIR}/m.sqlite"\n')
        assert load_config(str(cfg_file)).manifest.path == "/m.sqlite"

    def test_invalid_yaml_raises_value_error(self, tmp_path):
        cfg_file = tmp_path / "bad.yaml"
        cfg_file.write_text("manifest: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config(str(cfg_file))

    def test_invalid_values_raise_value_error(self, tmp_path):
        cfg_file = tmp_path / "bad.yaml"
        cfg_file.write_text("sync:\n  max_workers: -3\n")
        with pytest.raises(ValueError, match="Invalid config"):
            load_config(str(cfg_file))


def test_expand_env_vars_nested():
    with patch.dict(os.environ, {"A": "1"}, clear=False):
        assert _expand_env_vars({"x": ["${A}", {"y": "${A}-${MISSING_VAR_XYZ}"}]}) == {
            "x": ["1", {"y": "1-"}]
        }
