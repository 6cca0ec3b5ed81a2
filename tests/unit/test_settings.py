# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Unit tests for settings loading.
"""
import os
import pytest
from dockeryzer.CONFIG.settings import Settings, load_settings
from dockeryzer.errors import ConfigError


class TestLoadSettings:
    """Tests for load_settings precedence and validation."""

    def test_defaults(self, tmp_path, monkeypatch):
        """Test defaults without config file or environment."""
        monkeypatch.chdir(tmp_path)
        settings = load_settings(env={})
        assert settings.ai_provider == "gemini"
        assert settings.api_key is None
        assert settings.output_dockerfile == "Dockeryzer.Dockerfile"
        assert settings.temperature == 0.2
        assert settings.detection_temperature == 0.1

    def test_default_yaml_file(self, tmp_path, monkeypatch):
        """Test that .dockeryzer.yml in the working directory is read."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".dockeryzer.yml").write_text("ai_provider: openai\nmodel: gpt-4o\nunknown_key: 1\n")
        settings = load_settings(env={})
        assert settings.ai_provider == "openai"
        assert settings.model == "gpt-4o"

    def test_environment_overrides_yaml(self, tmp_path):
        """Test that environment variables win over the config file."""
        config = tmp_path / "custom.yml"
        config.write_text("ai_provider: openai\napi_key: from-file\n")
        settings = load_settings(str(config), env={"DOCKERYZER_API_KEY": "from-env", "DOCKERYZER_MODEL": ""})
        assert settings.ai_provider == "openai"
        assert settings.api_key == "from-env"
        assert settings.model == ""

    def test_dotenv_does_not_override_environment(self, tmp_path, monkeypatch):
        """Test that .env fills gaps but never replaces set variables."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("OPENAI_API_KEY", "from-process")
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("DOCKERYZER_API_KEY", raising=False)
        monkeypatch.delenv("DOCKERYZER_AI_PROVIDER", raising=False)
        monkeypatch.delenv("DOCKERYZER_MODEL", raising=False)
        dotenv = tmp_path / ".env"
        dotenv.write_text("OPENAI_API_KEY=from-dotenv\nGEMINI_API_KEY=gemini-dotenv\n")
        try:
            settings = load_settings(dotenv_path=str(dotenv))
        finally:
            os.environ.pop("GEMINI_API_KEY", None)
        assert settings.openai_api_key == "from-process"
        assert settings.gemini_api_key == "gemini-dotenv"

    def test_missing_explicit_file(self, tmp_path):
        """Test that an explicit missing file is an error."""
        with pytest.raises(ConfigError, match="not found"):
            load_settings(str(tmp_path / "missing.yml"), env={})

    def test_invalid_yaml(self, tmp_path):
        """Test malformed and non-mapping YAML."""
        broken = tmp_path / "broken.yml"
        broken.write_text("ai_provider: [unclosed\n")
        with pytest.raises(ConfigError):
            load_settings(str(broken), env={})

        listing = tmp_path / "list.yml"
        listing.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_settings(str(listing), env={})

    def test_unreadable_file(self, tmp_path):
        """Test that undecodable or unopenable files are ConfigErrors."""
        binary = tmp_path / "binary.yml"
        binary.write_bytes(b"ai_provider: \xff\xfe\n")
        with pytest.raises(ConfigError, match="Cannot read configuration file"):
            load_settings(str(binary), env={})

        directory = tmp_path / "conf.d"
        directory.mkdir()
        with pytest.raises(ConfigError, match="Cannot read configuration file"):
            load_settings(str(directory), env={})

    def test_invalid_value(self, tmp_path):
        """Test that a value of the wrong type is a ConfigError."""
        config = tmp_path / "bad.yml"
        config.write_text("temperature: hot\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_settings(str(config), env={})


class TestResolveApiKey:
    """Tests for Settings.resolve_api_key."""

    def test_generic_key_wins(self):
        """Test that api_key is preferred over provider keys."""
        settings = Settings(api_key="generic", openai_api_key="openai")
        assert settings.resolve_api_key() == "generic"

    def test_provider_specific_keys(self):
        """Test selection by provider."""
        assert Settings(ai_provider="openai", openai_api_key="o", gemini_api_key="g").resolve_api_key() == "o"
        assert Settings(ai_provider="Gemini", openai_api_key="o", gemini_api_key="g").resolve_api_key() == "g"
        assert Settings(ai_provider="claude", openai_api_key="o").resolve_api_key() is None
        assert Settings().resolve_api_key() is None

    def test_provider_config(self):
        """Test the derived ProviderConfig."""
        config = Settings(ai_provider="openai", openai_api_key="o", model="gpt-4o").provider_config()
        assert (config.type, config.api_key, config.model) == ("openai", "o", "gpt-4o")
        assert Settings().provider_config().api_key == ""
