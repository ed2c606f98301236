"""Tests for agentsh/config.py"""

import json
import logging

import pytest

from agentsh.config import (
    DEFAULT_MODEL_ALIAS,
    load_config,
    load_env_file,
    load_settings_file,
    parse_model_spec,
    positive_int,
    resolve_model,
)
from agentsh.errors import ConfigError


def write_settings(config_dir, settings):
    (config_dir / "settings.json").write_text(json.dumps(settings))


class TestLoadEnvFile:
    def test_missing_file_is_empty(self, tmp_path):
        assert load_env_file(tmp_path / ".env") == {}

    def test_reads_quoted_values(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text('GEMINI_API_KEY="abc123"\n# comment\nOTHER=plain\n')

        assert load_env_file(env_file) == {"GEMINI_API_KEY": "abc123", "OTHER": "plain"}

    def test_does_not_touch_environ(self, tmp_path, mock_env):
        import os

        env_file = tmp_path / ".env"
        env_file.write_text("GEMINI_API_KEY=from-file\n")

        load_env_file(env_file)

        assert "GEMINI_API_KEY" not in os.environ


class TestLoadSettingsFile:
    def test_missing_file_is_empty(self, tmp_path):
        assert load_settings_file(tmp_path / "settings.json") == {}

    def test_malformed_json_is_empty(self, tmp_path):
        settings_file = tmp_path / "settings.json"
        settings_file.write_text("{not json")

        assert load_settings_file(settings_file) == {}

    def test_non_object_is_empty(self, tmp_path):
        settings_file = tmp_path / "settings.json"
        settings_file.write_text("[1, 2]")

        assert load_settings_file(settings_file) == {}


class TestParseModelSpec:
    def test_bare_model_is_gemini(self):
        assert parse_model_spec("gemini-2.5-pro") == ("gemini", "gemini-2.5-pro")

    def test_provider_prefix(self):
        assert parse_model_spec("claude:claude-sonnet-4-5") == ("claude", "claude-sonnet-4-5")
        assert parse_model_spec("openai:gpt-5.2") == ("openai", "gpt-5.2")

    def test_unknown_provider_raises(self):
        with pytest.raises(ConfigError, match="Unknown provider"):
            parse_model_spec("mystery:model")


class TestResolveModel:
    def test_empty_settings_use_flash(self):
        assert resolve_model(None, {}) == ("flash", "gemini-3-flash-preview")

    def test_configured_default(self):
        settings = {"default_model": "pro", "models": {"pro": "gemini-2.5-pro"}}

        assert resolve_model(None, settings) == ("pro", "gemini-2.5-pro")

    def test_explicit_alias(self):
        settings = {"models": {"sonnet": "claude:claude-sonnet-4-5"}}

        assert resolve_model("sonnet", settings) == ("sonnet", "claude:claude-sonnet-4-5")

    def test_unknown_alias_falls_back_with_warning(self, caplog):
        settings = {"default_model": "pro", "models": {"pro": "gemini-2.5-pro"}}

        with caplog.at_level(logging.WARNING, logger="agentsh.config"):
            result = resolve_model("nope", settings)

        assert result == ("pro", "gemini-2.5-pro")
        assert "Unknown model alias 'nope'" in caplog.text

    def test_unknown_default_falls_back_to_flash(self):
        assert resolve_model(None, {"default_model": "ghost"})[0] == DEFAULT_MODEL_ALIAS

    def test_malformed_models_ignored(self):
        assert resolve_model(None, {"models": "not a dict"}) == ("flash", "gemini-3-flash-preview")


class TestPositiveInt:
    @pytest.mark.parametrize("value", [None, 0, -5, "abc", True, 2.5j])
    def test_bad_values_use_default(self, value):
        assert positive_int(value, 50) == 50

    def test_numeric_string(self):
        assert positive_int("12", 50) == 12

    def test_int(self):
        assert positive_int(7, 50) == 7


class TestLoadConfig:
    def test_missing_key_raises(self, config_dir):
        with pytest.raises(ConfigError, match="GEMINI_API_KEY"):
            load_config(config_dir=config_dir)

    def test_key_from_environment(self, config_dir, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")

        config = load_config(config_dir=config_dir)

        assert config.provider == "gemini"
        assert config.api_key == "env-key"
        assert config.model == "gemini-3-flash-preview"

    def test_google_api_key_accepted(self, config_dir, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "google-key")

        assert load_config(config_dir=config_dir).api_key == "google-key"

    def test_key_from_env_file(self, config_dir):
        (config_dir / ".env").write_text("GEMINI_API_KEY=file-key\n")

        assert load_config(config_dir=config_dir).api_key == "file-key"

    def test_environment_beats_env_file(self, config_dir, monkeypatch):
        (config_dir / ".env").write_text("GEMINI_API_KEY=file-key\n")
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")

        assert load_config(config_dir=config_dir).api_key == "env-key"

    def test_placeholder_key_ignored(self, config_dir):
        (config_dir / ".env").write_text("GEMINI_API_KEY=paste_your_key_here\n")

        with pytest.raises(ConfigError):
            load_config(config_dir=config_dir)

    def test_claude_alias_uses_anthropic_key(self, config_dir, monkeypatch):
        write_settings(config_dir, {"models": {"sonnet": "claude:claude-sonnet-4-5"}})
        monkeypatch.setenv("ANTHROPIC_API_KEY", "ant-key")

        config = load_config(model_alias="sonnet", config_dir=config_dir)

        assert (config.provider, config.model, config.api_key) == (
            "claude",
            "claude-sonnet-4-5",
            "ant-key",
        )

    def test_numeric_settings(self, config_dir, monkeypatch):
        write_settings(
            config_dir, {"max_iterations": 10, "shell_timeout": 30, "output_limit": "bad"}
        )
        monkeypatch.setenv("GEMINI_API_KEY", "k")

        config = load_config(config_dir=config_dir)

        assert config.max_iterations == 10
        assert config.shell_timeout == 30
        assert config.output_limit == 2000

    def test_contexts_dir_default(self, config_dir, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "k")

        assert load_config(config_dir=config_dir).contexts_dir == config_dir / "contexts"

    def test_contexts_dir_env_override(self, config_dir, monkeypatch, tmp_path):
        write_settings(config_dir, {"contexts_dir": str(tmp_path / "from-settings")})
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        monkeypatch.setenv("AGENTSH_CONTEXTS_DIR", str(tmp_path / "from-env"))

        assert load_config(config_dir=config_dir).contexts_dir == tmp_path / "from-env"

    def test_contexts_dir_from_settings(self, config_dir, monkeypatch, tmp_path):
        write_settings(config_dir, {"contexts_dir": str(tmp_path / "from-settings")})
        monkeypatch.setenv("GEMINI_API_KEY", "k")

        assert load_config(config_dir=config_dir).contexts_dir == tmp_path / "from-settings"

    def test_context_name_defaults(self, config_dir, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "k")

        assert load_config(config_dir=config_dir).context_name == "default"
        assert load_config(context_name="net", config_dir=config_dir).context_name == "net"
