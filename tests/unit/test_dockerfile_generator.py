import json
import pytest
from dockeryzer.CONFIG.settings import Settings
from dockeryzer.GENERATORS import dockerfile_generator
from dockeryzer.GENERATORS.dockerfile_generator import (
    DockerfileGenerator, write_dockerfile, write_dockerignore, build_image,
)
from dockeryzer.GENERATORS.templates import render_fallback_dockerfile, select_template, DOCKERIGNORE_CONTENT
from dockeryzer.GENERATORS import templates
from dockeryzer.MODELS.project_technology import ProjectTechnology
from dockeryzer.errors import AIProviderError, DockeryzerError


@pytest.fixture
def node_project(tmp_path):
    (tmp_path / "package.json").write_text(json.dumps({
        "dependencies": {"express": "^4.18.0"},
        "scripts": {"start": "node index.js"},
    }))
    (tmp_path / "index.js").write_text("require('express')\n")
    return tmp_path


def test_generate_with_ai(node_project, fake_provider_factory):
    factory = fake_provider_factory("```dockerfile\nFROM node:20-alpine\nCMD [\"node\", \"index.js\"]\n```")
    settings = Settings(ai_provider="openai", openai_api_key="sk-test", temperature=0.3)
    result = DockerfileGenerator(settings, provider_factory=factory).generate(str(node_project))

    assert result.used_ai
    assert result.content == 'FROM node:20-alpine\nCMD ["node", "index.js"]\n'
    assert result.technology.language == "javascript"
    assert result.technology.framework == "express"

    system_prompt, user_prompt, temperature = factory.providers[0].calls[0]
    assert system_prompt == "You are a Docker expert. Respond only with Dockerfile content, no explanations."
    assert '"framework": "express"' in user_prompt
    assert "index.js" in user_prompt
    assert temperature == 0.3
    assert factory.configs[0].type == "openai"


def test_generate_without_key_uses_template(node_project, fake_provider_factory):
    factory = fake_provider_factory("FROM scratch")
    result = DockerfileGenerator(Settings(), provider_factory=factory).generate(str(node_project))
    assert not result.used_ai
    assert result.content == render_fallback_dockerfile(result.technology)
    assert factory.providers == []


def test_generate_falls_back_on_provider_error(node_project, fake_provider_factory):
    factory = fake_provider_factory(error=AIProviderError("rate limited"))
    settings = Settings(api_key="key")
    result = DockerfileGenerator(settings, provider_factory=factory).generate(str(node_project), ignore_comments=True)
    assert not result.used_ai
    assert "#" not in result.content
    assert result.content.startswith("FROM node:alpine AS builder\n")


def test_generate_falls_back_on_empty_answer(node_project, fake_provider_factory):
    factory = fake_provider_factory("```dockerfile\n```")
    result = DockerfileGenerator(Settings(api_key="key"), provider_factory=factory).generate(str(node_project))
    assert not result.used_ai


@pytest.mark.parametrize("tech,expected", [
    (ProjectTechnology(language="typescript", build_tool="vite"), templates.VITE_TEMPLATE),
    (ProjectTechnology(language="javascript", framework="vue"), templates.VITE_TEMPLATE),
    (ProjectTechnology(language="javascript", scripts={"build": "tsc"}), templates.NODE_BUILD_TEMPLATE),
    (ProjectTechnology(language="javascript"), templates.NODE_TEMPLATE),
    (ProjectTechnology(language="python"), templates.PYTHON_TEMPLATE),
    (ProjectTechnology(language="go"), templates.GO_TEMPLATE),
    (ProjectTechnology(language="java", package_manager="gradle"), templates.JAVA_GRADLE_TEMPLATE),
    (ProjectTechnology(language="java", package_manager="maven"), templates.JAVA_MAVEN_TEMPLATE),
    (ProjectTechnology(language="rust"), templates.RUST_TEMPLATE),
    (ProjectTechnology(language="php", framework="laravel"), templates.PHP_LARAVEL_TEMPLATE),
    (ProjectTechnology(language="php"), templates.PHP_TEMPLATE),
    (ProjectTechnology(language="ruby", framework="rails"), templates.RUBY_RAILS_TEMPLATE),
    (ProjectTechnology(language="ruby"), templates.RUBY_TEMPLATE),
    (ProjectTechnology(language="unknown"), templates.NODE_TEMPLATE),
])
def test_select_template(tech, expected):
    assert select_template(tech) == expected


def test_render_comments_toggle():
    tech = ProjectTechnology(language="python")
    with_comments = render_fallback_dockerfile(tech)
    assert with_comments.startswith("# Use Python slim image\nFROM python:3.11-slim\n")
    assert with_comments.endswith("# Example: docker run -p 8000:8000 image-name\n")

    without = render_fallback_dockerfile(tech, ignore_comments=True)
    assert without.startswith("FROM python:3.11-slim\nWORKDIR /app\n")
    assert without.endswith('CMD ["python", "app.py"]\n')
    assert "{{" not in without


def test_write_files(tmp_path):
    path = write_dockerfile(str(tmp_path), "FROM scratch\n", "Custom.Dockerfile")
    assert (tmp_path / "Custom.Dockerfile").read_text() == "FROM scratch\n"
    assert path.endswith("Custom.Dockerfile")

    assert write_dockerignore(str(tmp_path)) is not None
    assert (tmp_path / ".dockerignore").read_text() == DOCKERIGNORE_CONTENT


def test_existing_dockerignore_is_kept(tmp_path):
    (tmp_path / ".dockerignore").write_text("secrets\n")
    assert write_dockerignore(str(tmp_path)) is None
    assert (tmp_path / ".dockerignore").read_text() == "secrets\n"


class FakeCompleted:
    def __init__(self, returncode):
        self.returncode = returncode


def test_build_image(monkeypatch):
    calls = []

    def fake_run(cmd, check):
        calls.append(cmd)
        return FakeCompleted(0)

    monkeypatch.setattr(dockerfile_generator.subprocess, "run", fake_run)
    build_image("my-app", "Dockeryzer.Dockerfile", "/src")
    assert calls == [["docker", "build", "-t", "my-app", "-f", "Dockeryzer.Dockerfile", "/src"]]


def test_build_image_failures(monkeypatch):
    monkeypatch.setattr(dockerfile_generator.subprocess, "run", lambda cmd, check: FakeCompleted(1))
    with pytest.raises(DockeryzerError, match="exit code 1"):
        build_image("my-app", "Dockeryzer.Dockerfile")

    def missing_docker(cmd, check):
        raise FileNotFoundError("docker")

    monkeypatch.setattr(dockerfile_generator.subprocess, "run", missing_docker)
    with pytest.raises(DockeryzerError, match="docker executable not found"):
        build_image("my-app", "Dockeryzer.Dockerfile")
