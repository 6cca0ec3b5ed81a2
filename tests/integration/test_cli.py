import json
from click.testing import CliRunner
from dockeryzer.CLI import main
from dockeryzer.CLI.main import cli
from dockeryzer.CONFIG.settings import Settings
from dockeryzer.MODELS.image_metadata import ImageMetadata
from dockeryzer.errors import ImageInspectionError

DOCKERFILE = """FROM node:20-alpine
WORKDIR /app
COPY . .
RUN npm ci
CMD ["node", "index.js"]
"""


class FakeInspector:
    def __init__(self, images):
        self.images = images

    def inspect(self, name):
        if name not in self.images:
            raise ImageInspectionError(f"Image '{name}' not found")
        return self.images[name]


IMAGES = {
    "app:slim": ImageMetadata(env=["NODE_VERSION=20.0.0"], size=60_000_000, layers=["a", "b"],
                              repo_tags=["app:slim"], os="linux"),
    "app:full": ImageMetadata(env=["NODE_VERSION=18.0.0"], size=900_000_000, layers=[str(i) for i in range(12)],
                              repo_tags=["app:full"], os="linux"),
}


def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    for command in ('analyze', 'compare', 'create', 'detect'):
        assert command in result.output


def test_analyze_dockerfile():
    runner = CliRunner()
    with runner.isolated_filesystem():
        with open('Dockerfile', 'w') as f:
            f.write(DOCKERFILE)
        result = runner.invoke(cli, ['analyze', '-d', 'Dockerfile'], obj={})
    assert result.exit_code == 0
    assert "[PASS] CIS-1.1 - Use official base images" in result.output
    assert "[FAIL] CIS-4.1 - Container should not run as root" in result.output
    assert "  Severity: HIGH" in result.output
    assert "  Issue: Missing USER instruction" in result.output
    assert "Security Score: 40%" in result.output


def test_analyze_missing_dockerfile():
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(cli, ['analyze', '--dockerfile', 'nope.Dockerfile'], obj={})
    assert result.exit_code == 2
    assert "does not exist" in result.output


def test_analyze_image():
    runner = CliRunner()
    result = runner.invoke(cli, ['analyze', 'app:full', '--debug'], obj={'inspector': FakeInspector(IMAGES)})
    assert result.exit_code == 0
    assert "=== DEBUG IMAGE INFO ===" in result.output
    assert "Details of image app:full:" in result.output
    assert "  - Size: 900.00 MB" in result.output
    assert "  - N. of Layers: 12" in result.output
    assert "  - Language: Node.js 18.0.0" in result.output
    assert " Improvement suggestions:" in result.output
    assert "  - Consider reducing the size of your image." in result.output


def test_analyze_unknown_image():
    runner = CliRunner()
    result = runner.invoke(cli, ['analyze', 'ghost'], obj={'inspector': FakeInspector(IMAGES)})
    assert result.exit_code == 1
    assert "Error: Image 'ghost' not found" in result.output


def test_created_inspector_is_closed(monkeypatch):
    created = []

    class ClosingInspector(FakeInspector):
        def __init__(self):
            super().__init__(IMAGES)
            self.closed = False
            created.append(self)

        def close(self):
            self.closed = True

    monkeypatch.setattr(main, "ImageInspector", ClosingInspector)
    runner = CliRunner()
    result = runner.invoke(cli, ['compare', 'app:slim', 'app:full'], obj={})
    assert result.exit_code == 0
    assert len(created) == 1
    assert created[0].closed


def test_compare():
    runner = CliRunner()
    result = runner.invoke(cli, ['compare', 'app:slim', 'app:full'], obj={'inspector': FakeInspector(IMAGES)})
    assert result.exit_code == 0
    assert "Image app:slim has 10 less layers than image app:full (2 < 12)." in result.output
    assert "Image app:slim is 93.33% smaller than image app:full (60.00 MB < 900.00 MB)." in result.output
    assert "Image app:slim uses newer Node.js (20.0.0 > 18.0.0)" in result.output
    # Minimal reports leave out suggestions
    assert "Improvement suggestions" not in result.output


def test_detect(tmp_path):
    (tmp_path / "go.mod").write_text("module example.com/svc\n\ngo 1.22\n\nrequire github.com/labstack/echo/v4 v4.11.4\n")
    (tmp_path / "main.go").write_text("package main\n")
    runner = CliRunner()
    result = runner.invoke(cli, ['detect', str(tmp_path)], obj={})
    assert result.exit_code == 0
    assert "Language:        go" in result.output
    assert "Framework:       echo" in result.output
    assert "Package Manager: go modules" in result.output
    assert "Version:         1.22" in result.output
    assert "  * go.mod" in result.output
    assert "  .go: 1 files" in result.output


def test_detect_with_ai(tmp_path, fake_provider_factory):
    (tmp_path / "mix.exs").write_text("")
    factory = fake_provider_factory('{"language": "elixir", "framework": "phoenix"}')
    runner = CliRunner()
    result = runner.invoke(
        cli, ['detect', str(tmp_path), '--ai'],
        obj={'provider_factory': factory, 'settings': Settings(api_key="key")},
    )
    assert result.exit_code == 0
    assert "Language:        elixir" in result.output
    assert "Framework:       phoenix" in result.output


def test_create_with_fallback(fake_provider_factory):
    runner = CliRunner()
    with runner.isolated_filesystem():
        with open('requirements.txt', 'w') as f:
            f.write("flask\n")
        with open('app.py', 'w') as f:
            f.write("from flask import Flask\n")
        result = runner.invoke(
            cli, ['create', '-i'],
            obj={'provider_factory': fake_provider_factory(), 'settings': Settings()},
        )
        with open('Dockeryzer.Dockerfile') as f:
            dockerfile = f.read()
        with open('.dockerignore') as f:
            dockerignore = f.read()
    assert result.exit_code == 0
    assert "Detected: python (flask) [pip]" in result.output
    assert dockerfile.startswith("FROM python:3.11-slim\n")
    assert "node_modules" in dockerignore


def test_create_with_provider_override(fake_provider_factory):
    factory = fake_provider_factory("FROM node:20-alpine\n")
    runner = CliRunner()
    with runner.isolated_filesystem():
        with open('package.json', 'w') as f:
            f.write(json.dumps({"dependencies": {"express": "4"}}))
        result = runner.invoke(
            cli, ['create', '--provider', 'OpenAI', '--api-key', 'sk-cli'],
            obj={'provider_factory': factory, 'settings': Settings()},
        )
        with open('Dockeryzer.Dockerfile') as f:
            dockerfile = f.read()
    assert result.exit_code == 0
    assert dockerfile == "FROM node:20-alpine\n"
    assert factory.configs[0].type == "openai"
    assert factory.configs[0].api_key == "sk-cli"


def test_bad_config_file():
    runner = CliRunner()
    with runner.isolated_filesystem():
        with open('broken.yml', 'w') as f:
            f.write("- not\n- a mapping\n")
        result = runner.invoke(cli, ['--config', 'broken.yml', 'create'], obj={})
    assert result.exit_code == 1
    assert "Error: Configuration file broken.yml must contain a mapping" in result.output

