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
Detection of the language, framework and tooling of a local project.

Heuristic detection picks the dominant language from file extensions and
then runs exactly one language specific detector that reads the relevant
manifest. The smart variant asks an LLM only when heuristics give up.
"""
import json
import logging
from typing import Callable, Dict, List, Optional, Tuple

from ..MODELS.project_technology import FileTreeSnapshot, ProjectTechnology
from ..AI.provider import AIProvider, ProviderConfig, new_ai_provider, strip_code_fences
from ..AI.prompts import DETECTION_SYSTEM_PROMPT, build_detection_prompt
from ..errors import AIProviderError, AIResponseError
from .file_tree import scan_directory

logger = logging.getLogger(__name__)

UNKNOWN_LANGUAGE = "unknown"

EXTENSION_LANGUAGES = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".go": "go",
    ".java": "java",
    ".kt": "kotlin",
    ".rs": "rust",
    ".php": "php",
    ".rb": "ruby",
    ".cs": "csharp",
    ".cpp": "cpp",
    ".c": "c",
    ".swift": "swift",
    ".dart": "dart",
}

# Dependency name -> framework, first match wins
NODE_FRAMEWORKS = [
    ("next", "nextjs"),
    ("nuxt", "nuxt"),
    ("react", "react"),
    ("vue", "vue"),
    ("svelte", "svelte"),
    ("express", "express"),
    ("nestjs", "nestjs"),
]

# Manifest substring -> framework, first match wins
GO_FRAMEWORKS = [
    ("github.com/gin-gonic/gin", "gin"),
    ("github.com/gofiber/fiber", "fiber"),
    ("github.com/labstack/echo", "echo"),
]
RUST_FRAMEWORKS = [("actix-web", "actix-web"), ("rocket", "rocket"), ("axum", "axum")]
PHP_FRAMEWORKS = [("laravel/framework", "laravel"), ("symfony/symfony", "symfony")]
RUBY_FRAMEWORKS = [("rails", "rails"), ("sinatra", "sinatra")]


def detect_language_from_extensions(extension_counts: Dict[str, int]) -> str:
    """
    Returns the language with the most files. Ties go to the
    alphabetically first language; no known extension gives ``unknown``.
    """
    language_counts: Dict[str, int] = {}
    for ext, count in extension_counts.items():
        language = EXTENSION_LANGUAGES.get(ext)
        if language:
            language_counts[language] = language_counts.get(language, 0) + count

    ranked = sorted(
        ((lang, count) for lang, count in language_counts.items() if count > 0),
        key=lambda item: (-item[1], item[0]),
    )
    return ranked[0][0] if ranked else UNKNOWN_LANGUAGE


def _first_match(content: str, table: List[Tuple[str, str]]) -> str:
    for needle, name in table:
        if needle in content:
            return name
    return ""


def _string_map(value) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {k: v for k, v in value.items() if isinstance(v, str)}


def detect_nodejs_project(tech: ProjectTechnology, snapshot: FileTreeSnapshot):
    content = snapshot.read("package.json")
    if content is None:
        return
    try:
        package_json = json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning("Ignoring invalid package.json: %s", e)
        return
    if not isinstance(package_json, dict):
        return

    if snapshot.has_file("yarn.lock"):
        tech.package_manager = "yarn"
    elif snapshot.has_file("pnpm-lock.yaml"):
        tech.package_manager = "pnpm"
    else:
        tech.package_manager = "npm"

    tech.dependencies = _string_map(package_json.get("dependencies"))
    tech.dev_dependencies = _string_map(package_json.get("devDependencies"))
    tech.scripts = _string_map(package_json.get("scripts"))

    all_deps = tech.all_dependencies()
    for dependency, framework in NODE_FRAMEWORKS:
        if dependency in all_deps:
            tech.framework = framework
            break

    if snapshot.has_file("vite.config.js") or snapshot.has_file("vite.config.ts"):
        tech.build_tool = "vite"
    elif snapshot.has_file("webpack.config.js"):
        tech.build_tool = "webpack"
    elif "vite" in all_deps:
        tech.build_tool = "vite"
    elif "webpack" in all_deps:
        tech.build_tool = "webpack"


def detect_python_project(tech: ProjectTechnology, snapshot: FileTreeSnapshot):
    if snapshot.has_file("Pipfile"):
        tech.package_manager = "pipenv"
    elif snapshot.has_file("poetry.lock"):
        tech.package_manager = "poetry"
    elif snapshot.has_file("requirements.txt"):
        tech.package_manager = "pip"
    elif snapshot.has_file("conda.yml") or snapshot.has_file("environment.yml"):
        tech.package_manager = "conda"

    if snapshot.has_file("manage.py"):
        tech.framework = "django"
    elif snapshot.has_file("app.py") or snapshot.has_file("main.py"):
        content = snapshot.read("app.py") or ""
        if "from flask" in content or "import flask" in content:
            tech.framework = "flask"
        elif "from fastapi" in content or "import fastapi" in content:
            tech.framework = "fastapi"


def detect_go_project(tech: ProjectTechnology, snapshot: FileTreeSnapshot):
    tech.package_manager = "go modules"

    content = snapshot.read("go.mod")
    if content is None:
        return

    tech.framework = _first_match(content, GO_FRAMEWORKS)
    for line in content.splitlines():
        if line.strip().startswith("go "):
            parts = line.split()
            if len(parts) >= 2:
                tech.version = parts[1]
            break


def detect_java_project(tech: ProjectTechnology, snapshot: FileTreeSnapshot):
    if snapshot.has_file("pom.xml"):
        tech.package_manager = "maven"
        tech.build_tool = "maven"
    elif snapshot.has_file("build.gradle") or snapshot.has_file("build.gradle.kts"):
        tech.package_manager = "gradle"
        tech.build_tool = "gradle"

    if tech.package_manager == "maven" and "spring-boot" in (snapshot.read("pom.xml") or ""):
        tech.framework = "spring-boot"


def detect_rust_project(tech: ProjectTechnology, snapshot: FileTreeSnapshot):
    tech.package_manager = "cargo"
    tech.build_tool = "cargo"
    tech.framework = _first_match(snapshot.read("Cargo.toml") or "", RUST_FRAMEWORKS)


def detect_php_project(tech: ProjectTechnology, snapshot: FileTreeSnapshot):
    if not snapshot.has_file("composer.json"):
        return
    tech.package_manager = "composer"
    tech.framework = _first_match(snapshot.read("composer.json") or "", PHP_FRAMEWORKS)


def detect_ruby_project(tech: ProjectTechnology, snapshot: FileTreeSnapshot):
    if not snapshot.has_file("Gemfile"):
        return
    tech.package_manager = "bundler"
    tech.framework = _first_match(snapshot.read("Gemfile") or "", RUBY_FRAMEWORKS)


def detect_csharp_project(tech: ProjectTechnology, snapshot: FileTreeSnapshot):
    tech.package_manager = "nuget"
    if "Microsoft.AspNetCore" in (snapshot.csproj_contents() or ""):
        tech.framework = "aspnet-core"


SubDetector = Callable[[ProjectTechnology, FileTreeSnapshot], None]

LANGUAGE_DETECTORS: Dict[str, SubDetector] = {
    "javascript": detect_nodejs_project,
    "typescript": detect_nodejs_project,
    "python": detect_python_project,
    "go": detect_go_project,
    "java": detect_java_project,
    "rust": detect_rust_project,
    "php": detect_php_project,
    "ruby": detect_ruby_project,
    "csharp": detect_csharp_project,
}

# Used when no language could be derived from extensions, in priority order
CONFIG_FALLBACKS: List[Tuple[Tuple[str, ...], str]] = [
    (("package.json",), "javascript"),
    (("go.mod",), "go"),
    (("requirements.txt", "Pipfile", "pyproject.toml"), "python"),
    (("Cargo.toml",), "rust"),
    (("composer.json",), "php"),
]


class ProjectTechnologyDetector:
    """
    Detects the technology stack of a source project.
    """
    def __init__(self,
                 provider_config: Optional[ProviderConfig] = None,
                 provider_factory: Callable[[ProviderConfig], AIProvider] = new_ai_provider,
                 temperature: float = 0.1):
        """
        :param provider_config: LLM settings for smart detection. Smart
            detection is skipped when absent or without an API key.
        :param provider_factory: Creates the provider from ``provider_config``.
        :param temperature: Sampling temperature for the detection call.
        """
        self.provider_config = provider_config
        self.provider_factory = provider_factory
        self.temperature = temperature

    def detect(self, snapshot: FileTreeSnapshot) -> ProjectTechnology:
        """
        Heuristic detection over a file tree snapshot.

        :param snapshot: The scanned project.
        :return: The detected technology; ``language`` is ``unknown`` when
            nothing could be identified.
        """
        tech = ProjectTechnology(
            root_files=list(snapshot.root_files),
            file_extensions=dict(snapshot.extension_counts),
            config_files=list(snapshot.config_files),
        )
        tech.language = detect_language_from_extensions(snapshot.extension_counts)

        sub_detector = LANGUAGE_DETECTORS.get(tech.language)
        if sub_detector is not None:
            sub_detector(tech, snapshot)
            return tech

        for config_files, language in CONFIG_FALLBACKS:
            if any(name in snapshot.config_files for name in config_files):
                logger.debug("Language inferred from %s: %s", config_files, language)
                tech.language = language
                LANGUAGE_DETECTORS[language](tech, snapshot)
                break
        return tech

    def detect_with_ai(self, tech: ProjectTechnology):
        """
        Fills ``tech`` from an LLM answer when heuristics found no language.
        Non-empty answer fields overwrite the record.

        :raises AIProviderError: If the provider cannot be created or fails.
        :raises AIResponseError: If the answer is not the expected JSON object.
        """
        if not tech.is_unknown:
            return
        if self.provider_config is None:
            raise AIProviderError("API key is required")

        logger.info("Using AI to detect project technology")
        with self.provider_factory(self.provider_config) as provider:
            response = provider.generate_content(
                DETECTION_SYSTEM_PROMPT, build_detection_prompt(tech), self.temperature
            )

        try:
            result = json.loads(strip_code_fences(response, "json"))
        except json.JSONDecodeError as e:
            raise AIResponseError(f"failed to parse AI response: {e}") from e
        if not isinstance(result, dict):
            raise AIResponseError("failed to parse AI response: expected a JSON object")

        for key, field in (("language", "language"), ("framework", "framework"),
                           ("packageManager", "package_manager"), ("buildTool", "build_tool")):
            value = result.get(key)
            if isinstance(value, str) and value:
                setattr(tech, field, value)

    def detect_smart(self, snapshot: FileTreeSnapshot) -> ProjectTechnology:
        """
        Heuristic detection, falling back to the LLM only when the language
        is unknown and an API key is configured. LLM failures are logged and
        the heuristic result is returned.
        """
        tech = self.detect(snapshot)
        if not tech.is_unknown:
            return tech
        if self.provider_config is None or not self.provider_config.api_key:
            logger.info("Could not detect project type and no API key is configured")
            return tech

        logger.warning("Could not detect project type automatically")
        try:
            self.detect_with_ai(tech)
        except AIProviderError as e:
            logger.warning("AI detection failed: %s", e)
        return tech

    def detect_project(self, root: str = ".", smart: bool = False) -> ProjectTechnology:
        """
        Scans ``root`` and detects its technology.
        """
        snapshot = scan_directory(root)
        return self.detect_smart(snapshot) if smart else self.detect(snapshot)
