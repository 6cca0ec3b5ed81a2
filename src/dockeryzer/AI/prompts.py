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
Prompt texts sent to the LLM providers.
"""
import json
from typing import Optional

from ..MODELS.project_technology import ProjectTechnology

DOCKERFILE_SYSTEM_PROMPT = "You are a Docker expert. Respond only with Dockerfile content, no explanations."

DETECTION_SYSTEM_PROMPT = "You are a project analysis expert. Always respond with valid JSON only."

_DOCKERFILE_PROMPT = """Generate a production-ready optimized Dockerfile for a project with the following characteristics:
{technology}
{structure}
Technical requirements:
- Detect the primary language and framework from the provided information
- Use appropriate base image for the detected language/framework:
  * Node.js projects: node:alpine or node:lts-alpine
  * Python projects: python:3.12-slim or python:alpine
  * Go projects: golang:1.25.1 for build, alpine for runtime
  * Java or Spring Boot projects: openjdk:25-ea-slim-bookworm
  * Rust projects: rust:alpine for build, alpine for runtime
  * PHP projects: php:8.2-fpm-alpine or php:apache
  * Ruby projects: ruby:3.2-alpine
  * .NET projects: mcr.microsoft.com/dotnet/sdk for build, runtime for production
- The Dockerfile must be optimized for production use
- Use multi-stage builds to optimize the final image size whenever possible
- Try to keep the number of layers as low as possible
- Follow security best practices (non-root user, minimal base image)
- Include only necessary files (use .dockerignore patterns in comments if helpful)
- Include Health Check instruction
- Make sure the application starts correctly
- Copy all necessary configuration and dependency files
- Install the correct package manager if needed (npm, yarn, pnpm, pip, poetry, cargo, composer, etc.)
- Expose appropriate ports based on the framework
- At the end of the Dockerfile, add a comment with the "docker run" example command to start the application

Formatting requirements:
- Return ONLY the raw Dockerfile content without any markdown formatting, code blocks, or explanations
- Start directly with the FROM instruction or the comment block
- Do not include any markdown backticks or formatting
{comment_rule}

Remember:
Respond with only the raw Dockerfile content, starting with FROM (or the comment block) and no other text or formatting."""

_DETECTION_PROMPT = """Analyze the following project structure and identify:
1. Primary programming language
2. Framework (if any)
3. Package manager
4. Build tool (if any)

Project information:
{context}

Respond ONLY with a JSON object in this exact format:
{{
  "language": "language-name",
  "framework": "framework-name",
  "packageManager": "package-manager-name",
  "buildTool": "build-tool-name"
}}

Use lowercase for all values. If something is not detected, use empty string."""


def build_dockerfile_prompt(technology: ProjectTechnology,
                            ignore_comments: bool,
                            project_tree: Optional[str] = None) -> str:
    """
    Builds the user prompt asking for a Dockerfile.

    :param technology: The detected project technology.
    :param ignore_comments: Ask for a Dockerfile without comments.
    :param project_tree: Optional rendering of the project structure.
    """
    if ignore_comments:
        comment_rule = "- Do not include any comments in the Dockerfile"
    else:
        comment_rule = ("- Each instruction must be preceded by a comment explaining its purpose\n"
                        "- Comments must be on their own lines, above their related instructions")

    structure = f"\nProject structure:\n{project_tree}\n" if project_tree else ""
    return _DOCKERFILE_PROMPT.format(
        technology=technology.to_prompt_json(),
        structure=structure,
        comment_rule=comment_rule,
    )


def build_detection_prompt(technology: ProjectTechnology) -> str:
    """
    Builds the prompt asking the LLM to identify a project the heuristics
    could not classify.
    """
    context = json.dumps({
        "rootFiles": technology.root_files,
        "configFiles": technology.config_files,
        "fileExtensions": technology.file_extensions,
    }, indent=2)
    return _DETECTION_PROMPT.format(context=context)
