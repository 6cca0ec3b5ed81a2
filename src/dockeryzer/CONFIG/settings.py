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
Settings loading: defaults, an optional YAML file, then the environment.
"""
import os
from typing import Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv, find_dotenv
from pydantic import BaseModel, ValidationError

from ..AI.provider import ProviderConfig, ProviderType
from ..errors import ConfigError

DEFAULT_CONFIG_FILE = ".dockeryzer.yml"

# Environment variable -> settings field
ENV_KEYS = {
    "DOCKERYZER_AI_PROVIDER": "ai_provider",
    "DOCKERYZER_API_KEY": "api_key",
    "DOCKERYZER_MODEL": "model",
    "OPENAI_API_KEY": "openai_api_key",
    "GEMINI_API_KEY": "gemini_api_key",
}


class Settings(BaseModel):
    """
    Runtime configuration. Passed explicitly to the components that need it.
    """
    model_config = {"extra": "ignore"}

    ai_provider: str = ProviderType.GEMINI.value
    api_key: Optional[str] = None
    model: str = ""
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    output_dockerfile: str = "Dockeryzer.Dockerfile"
    temperature: float = 0.2
    detection_temperature: float = 0.1

    def resolve_api_key(self) -> Optional[str]:
        """
        The generic key if set, else the key of the selected provider.
        """
        if self.api_key:
            return self.api_key
        if self.ai_provider.lower() == ProviderType.OPENAI.value:
            return self.openai_api_key or None
        if self.ai_provider.lower() == ProviderType.GEMINI.value:
            return self.gemini_api_key or None
        return None

    def provider_config(self) -> ProviderConfig:
        return ProviderConfig(type=self.ai_provider, api_key=self.resolve_api_key() or "", model=self.model)


def _read_yaml(config_path: str) -> Dict:
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read configuration file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid configuration file {config_path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {config_path} must contain a mapping")
    return data


def load_settings(config_path: Optional[str] = None,
                  env: Optional[Mapping[str, str]] = None,
                  dotenv_path: Optional[str] = None) -> Settings:
    """
    Loads settings.

    :param config_path: YAML file to read. Defaults to ``.dockeryzer.yml``
        in the current directory, if it exists.
    :param env: Environment to read instead of ``os.environ``. When given,
        no ``.env`` file is loaded.
    :param dotenv_path: Explicit ``.env`` file for the process environment.
    :return: The merged settings.
    :raises ConfigError: If the YAML file is unusable or a value is invalid.
    """
    values: Dict = {}

    if config_path is not None:
        if not os.path.exists(config_path):
            raise ConfigError(f"Configuration file {config_path} not found")
        values.update(_read_yaml(config_path))
    elif os.path.exists(DEFAULT_CONFIG_FILE):
        values.update(_read_yaml(DEFAULT_CONFIG_FILE))

    if env is None:
        # Existing variables win over .env entries
        load_dotenv(dotenv_path or find_dotenv(usecwd=True), override=False)
        env = os.environ

    for key, field in ENV_KEYS.items():
        if env.get(key):
            values[field] = env[key]

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
