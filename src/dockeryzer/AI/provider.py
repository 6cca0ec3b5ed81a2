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
LLM provider abstraction used for Dockerfile drafting and project detection.
"""
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional
from pydantic import BaseModel

from ..errors import AIProviderError

logger = logging.getLogger(__name__)


class ProviderType(str, Enum):
    """Supported LLM backends."""
    GEMINI = "gemini"
    OPENAI = "openai"


class ProviderConfig(BaseModel):
    """
    Configuration for creating a provider.
    An empty ``model`` selects the provider's default model.
    """
    type: str = ProviderType.GEMINI.value
    api_key: str = ""
    model: str = ""


class AIProvider(ABC):
    """
    A text generation backend.
    """
    @abstractmethod
    def generate_content(self, system_prompt: str, user_prompt: str, temperature: float) -> str:
        """
        Generates text for a prompt.

        :param system_prompt: Instructions framing the assistant's role.
        :param user_prompt: The request itself.
        :param temperature: Sampling temperature.
        :return: The generated text.
        :raises AIProviderError: If the backend fails or answers with nothing.
        """

    def close(self):
        """Releases any client resources."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class OpenAIProvider(AIProvider):
    """
    Provider backed by the OpenAI chat completions API.
    """
    DEFAULT_MODEL = "gpt-4.1-mini"

    def __init__(self, api_key: str, model: str = ""):
        from openai import OpenAI

        self.model = model or self.DEFAULT_MODEL
        self.client = OpenAI(api_key=api_key)

    def generate_content(self, system_prompt: str, user_prompt: str, temperature: float) -> str:
        logger.debug("Requesting completion from OpenAI model %s", self.model)
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
            )
        except Exception as e:
            raise AIProviderError(f"OpenAI request failed: {e}") from e

        text = response.choices[0].message.content if response.choices else None
        if not text:
            raise AIProviderError("OpenAI returned an empty response")
        return text

    def close(self):
        self.client.close()


class GeminiProvider(AIProvider):
    """
    Provider backed by Google Gemini.
    """
    DEFAULT_MODEL = "gemini-2.0-flash"

    def __init__(self, api_key: str, model: str = ""):
        import google.generativeai as genai

        self.model = model or self.DEFAULT_MODEL
        self._genai = genai
        genai.configure(api_key=api_key)

    def generate_content(self, system_prompt: str, user_prompt: str, temperature: float) -> str:
        logger.debug("Requesting completion from Gemini model %s", self.model)
        try:
            client = self._genai.GenerativeModel(self.model, system_instruction=system_prompt)
            response = client.generate_content(
                user_prompt,
                generation_config={"temperature": temperature},
            )
            text = response.text
        except Exception as e:
            raise AIProviderError(f"Gemini request failed: {e}") from e

        if not text:
            raise AIProviderError("Gemini returned an empty response")
        return text


def new_ai_provider(config: ProviderConfig) -> AIProvider:
    """
    Creates the provider selected by ``config``.

    :param config: Provider type, API key and optional model.
    :return: A ready provider.
    :raises AIProviderError: If the key is missing or the type is unsupported.
    """
    if not config.api_key:
        raise AIProviderError("API key is required")

    provider_type = config.type.lower()
    if provider_type == ProviderType.GEMINI.value:
        return GeminiProvider(config.api_key, config.model)
    if provider_type == ProviderType.OPENAI.value:
        return OpenAIProvider(config.api_key, config.model)
    raise AIProviderError(f"unsupported provider type: {config.type}")


def strip_code_fences(text: str, language: Optional[str] = None) -> str:
    """
    Removes a surrounding Markdown code fence from an LLM answer.

    :param text: The raw answer.
    :param language: Fence language tag to strip, e.g. ``json``.
    :return: The unfenced content.
    """
    text = text.strip()
    if language and text.startswith(f"```{language}"):
        text = text[len(language) + 3:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()
