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
Dockerfile creation for local projects: LLM drafting with template fallback,
.dockerignore generation and optional image build.
"""
import logging
import os
import subprocess
from typing import Callable, Optional

from pydantic import BaseModel

from ..AI.provider import AIProvider, ProviderConfig, new_ai_provider, strip_code_fences
from ..AI.prompts import DOCKERFILE_SYSTEM_PROMPT, build_dockerfile_prompt
from ..CONFIG.settings import Settings
from ..DETECTORS.file_tree import scan_directory, render_project_tree
from ..DETECTORS.project_detector import ProjectTechnologyDetector
from ..MODELS.project_technology import ProjectTechnology
from ..errors import AIProviderError, DockeryzerError
from .templates import render_fallback_dockerfile, DOCKERIGNORE_CONTENT

logger = logging.getLogger(__name__)


class GenerationResult(BaseModel):
    """
    A generated Dockerfile and how it was produced.
    """
    content: str
    technology: ProjectTechnology
    used_ai: bool = False


class DockerfileGenerator:
    """
    Drafts a Dockerfile for the project in a directory.
    """
    def __init__(self,
                 settings: Settings,
                 provider_factory: Callable[[ProviderConfig], AIProvider] = new_ai_provider):
        """
        :param settings: Provider selection, API keys and temperatures.
        :param provider_factory: Creates LLM providers; replaceable in tests.
        """
        self.settings = settings
        self.provider_factory = provider_factory
        self.detector = ProjectTechnologyDetector(
            provider_config=settings.provider_config() if settings.resolve_api_key() else None,
            provider_factory=provider_factory,
            temperature=settings.detection_temperature,
        )

    def generate(self, root: str = ".", ignore_comments: bool = False) -> GenerationResult:
        """
        Detects the project and asks the LLM for a Dockerfile, falling back
        to a template when the LLM is unavailable or fails.

        :param root: The project directory.
        :param ignore_comments: Ask for a Dockerfile without comments.
        """
        tech = self.detector.detect_smart(scan_directory(root))
        logger.info("Detected project: language=%s framework=%s package_manager=%s",
                    tech.language, tech.framework, tech.package_manager)

        try:
            content = self._generate_with_ai(tech, ignore_comments, render_project_tree(root))
        except AIProviderError as e:
            logger.warning("Falling back to template Dockerfile: %s", e)
            return GenerationResult(content=render_fallback_dockerfile(tech, ignore_comments), technology=tech)
        return GenerationResult(content=content, technology=tech, used_ai=True)

    def _generate_with_ai(self, tech: ProjectTechnology, ignore_comments: bool, project_tree: str) -> str:
        config = self.settings.provider_config()
        if not config.api_key:
            raise AIProviderError("API key is required")
        prompt = build_dockerfile_prompt(tech, ignore_comments, project_tree)
        with self.provider_factory(config) as provider:
            response = provider.generate_content(DOCKERFILE_SYSTEM_PROMPT, prompt, self.settings.temperature)

        content = strip_code_fences(response, "dockerfile")
        if not content:
            raise AIProviderError("LLM returned an empty Dockerfile")
        return content + "\n"


def write_dockerfile(root: str, content: str, filename: str = "Dockeryzer.Dockerfile") -> str:
    """
    Writes the Dockerfile and returns its path.
    """
    path = os.path.join(root, filename)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)
    return path


def write_dockerignore(root: str = ".") -> Optional[str]:
    """
    Writes a standard ``.dockerignore`` unless one already exists.

    :return: The path written, or ``None`` if an existing file was kept.
    """
    path = os.path.join(root, ".dockerignore")
    if os.path.exists(path):
        logger.info("Keeping existing %s", path)
        return None
    with open(path, 'w', encoding='utf-8') as f:
        f.write(DOCKERIGNORE_CONTENT)
    return path


def build_image(image_name: str, dockerfile: str, context: str = ".") -> None:
    """
    Runs ``docker build`` for the generated Dockerfile, streaming its output.

    :raises DockeryzerError: If docker is missing or the build fails.
    """
    cmd = ["docker", "build", "-t", image_name, "-f", dockerfile, context]
    logger.info("Running %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, check=False)
    except FileNotFoundError as e:
        raise DockeryzerError("docker executable not found") from e
    if result.returncode != 0:
        raise DockeryzerError(f"docker build failed with exit code {result.returncode}")
