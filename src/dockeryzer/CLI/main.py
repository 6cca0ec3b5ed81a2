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
Command Line Interface for Dockeryzer.
"""
import logging
import os

import click

from ..AI.provider import new_ai_provider
from ..CONFIG.settings import load_settings
from ..DETECTORS.project_detector import ProjectTechnologyDetector
from ..GENERATORS.dockerfile_generator import DockerfileGenerator, write_dockerfile, write_dockerignore, build_image
from ..IMAGES.inspector import ImageInspector
from ..IMAGES.report import build_image_report, compare_images, debug_lines
from ..SECURITY.cis_analyzer import CISAnalyzer
from ..errors import DockeryzerError
from .output import cis_lines, image_lines, comparison_lines, technology_lines, detected_summary, create_success_lines


def _echo_lines(lines):
    for line in lines:
        click.echo(line)


def _settings(ctx):
    """Settings for this invocation, loaded once."""
    if 'settings' not in ctx.obj:
        try:
            ctx.obj['settings'] = load_settings(ctx.obj.get('config_path'))
        except DockeryzerError as e:
            raise click.ClickException(str(e)) from e
    return ctx.obj['settings']


def _inspector(ctx) -> ImageInspector:
    if 'inspector' not in ctx.obj:
        inspector = ImageInspector()
        ctx.call_on_close(inspector.close)
        ctx.obj['inspector'] = inspector
    return ctx.obj['inspector']


@click.group()
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), default=None,
              help='Configuration file (default: .dockeryzer.yml)')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.version_option(package_name='dockeryzer')
@click.pass_context
def cli(ctx, config_path, verbose):
    """
    Dockeryzer - analyze Docker images and Dockerfiles, and generate
    Dockerfiles for local projects.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s: %(message)s",
    )


@cli.command()
@click.argument('target')
@click.option('--dockerfile', '-d', is_flag=True, help='Analyze a Dockerfile instead of an image')
@click.option('--debug', is_flag=True, help='Print raw image metadata')
@click.pass_context
def analyze(ctx, target, dockerfile, debug):
    """Analyze a Docker image, or a Dockerfile against the CIS Docker Benchmark."""
    if dockerfile:
        path = click.Path(exists=True, dir_okay=False).convert(target, None, ctx)
        try:
            report = CISAnalyzer().analyze_file(path)
        except (OSError, UnicodeDecodeError) as e:
            raise click.ClickException(f"Failed to read Dockerfile: {e}") from e
        _echo_lines(cis_lines(report))
        return

    try:
        metadata = _inspector(ctx).inspect(target)
    except DockeryzerError as e:
        raise click.ClickException(str(e)) from e
    if debug:
        _echo_lines(debug_lines(metadata))
    _echo_lines(image_lines(build_image_report(target, metadata)))


@cli.command()
@click.argument('image1')
@click.argument('image2')
@click.pass_context
def compare(ctx, image1, image2):
    """Compare two Docker images by size, layers and language runtime."""
    inspector = _inspector(ctx)
    try:
        meta1 = inspector.inspect(image1)
        meta2 = inspector.inspect(image2)
    except DockeryzerError as e:
        raise click.ClickException(str(e)) from e
    _echo_lines(comparison_lines(compare_images(image1, meta1, image2, meta2)))


@cli.command()
@click.option('--image-name', '-n', default='', help='Build an image with this name after generating')
@click.option('--ignore-comments', '-i', is_flag=True, help='Generate the Dockerfile without comments')
@click.option('--provider', type=click.Choice(['gemini', 'openai'], case_sensitive=False), default=None,
              help='LLM provider to use')
@click.option('--api-key', default=None, help='API key for the LLM provider')
@click.pass_context
def create(ctx, image_name, ignore_comments, provider, api_key):
    """Generate a Dockerfile and .dockerignore for the current project, optionally building an image."""
    settings = _settings(ctx)
    overrides = {}
    if provider:
        overrides['ai_provider'] = provider.lower()
    if api_key:
        overrides['api_key'] = api_key
    if overrides:
        settings = settings.model_copy(update=overrides)

    generator = DockerfileGenerator(settings, provider_factory=ctx.obj.get('provider_factory', new_ai_provider))
    root = os.getcwd()
    try:
        result = generator.generate(root, ignore_comments=ignore_comments)
        click.echo(detected_summary(result.technology))
        if not result.used_ai:
            click.echo(click.style("Using default Dockerfile template.", fg="yellow"))
        write_dockerfile(root, result.content, settings.output_dockerfile)
        write_dockerignore(root)
        _echo_lines(create_success_lines(settings.output_dockerfile, image_name))
        if image_name:
            build_image(image_name, settings.output_dockerfile, root)
    except DockeryzerError as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@click.argument('path', default='.', type=click.Path(exists=True, file_okay=False))
@click.option('--ai', 'use_ai', is_flag=True, help='Ask the LLM when the project type is not recognized')
@click.pass_context
def detect(ctx, path, use_ai):
    """Detect the technology stack of a project directory."""
    provider_config = None
    if use_ai:
        settings = _settings(ctx)
        if settings.resolve_api_key():
            provider_config = settings.provider_config()
        detector = ProjectTechnologyDetector(
            provider_config=provider_config,
            provider_factory=ctx.obj.get('provider_factory', new_ai_provider),
            temperature=settings.detection_temperature,
        )
    else:
        detector = ProjectTechnologyDetector()

    tech = detector.detect_project(path, smart=use_ai)
    _echo_lines(technology_lines(tech))


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()
