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
Builds image analysis and comparison reports from image metadata.
"""
from typing import List, Optional

from ..MODELS.image_metadata import ImageMetadata
from ..MODELS.language_info import Tier
from ..MODELS.reports import ImageReport, ComparisonLine, ComparisonReport, LinePart
from ..DETECTORS.language_detector import (
    detect_primary_language,
    language_improvement_suggestions,
)
from ..DETECTORS.version_classifier import get_major_version

BIG_IMAGE_MB = 250
MANY_LAYERS = 10

GOOD = Tier.SUCCESS
BAD = Tier.ERROR

SUGGEST_SMALLER_IMAGE = ("Consider reducing the size of your image. Try using smaller base images "
                         "and ensure that no unnecessary files are included.")
SUGGEST_FEWER_LAYERS = ("Your image has multiple layers. Consider applying a multi-build stage strategy "
                        "or combining commands to reduce the number of layers.")
SUGGEST_NO_RUNTIME = ("No programming language runtime detected. Ensure your image is configured "
                      "correctly if it requires a runtime environment.")


def size_tier(metadata: ImageMetadata) -> Tier:
    size_in_mb = metadata.size_in_mb
    if size_in_mb < 250:
        return Tier.SUCCESS
    if size_in_mb <= 500:
        return Tier.WARNING
    return Tier.ERROR


def layers_tier(metadata: ImageMetadata) -> Tier:
    layers = metadata.layer_count
    if layers < 10:
        return Tier.SUCCESS
    if layers <= 20:
        return Tier.WARNING
    return Tier.ERROR


def build_image_report(name: str, metadata: ImageMetadata) -> ImageReport:
    """
    Analyzes a single image.

    :param name: The name the user asked for.
    :param metadata: The inspected image.
    :return: Report with tiers and improvement suggestions.
    """
    language = detect_primary_language(metadata)

    is_big_image = metadata.size_in_mb > BIG_IMAGE_MB
    has_many_layers = metadata.layer_count > MANY_LAYERS

    suggestions = []
    if is_big_image:
        suggestions.append(SUGGEST_SMALLER_IMAGE)
    if has_many_layers:
        suggestions.append(SUGGEST_FEWER_LAYERS)
    suggestions.extend(language_improvement_suggestions(language))
    if language is None and (is_big_image or has_many_layers):
        suggestions.append(SUGGEST_NO_RUNTIME)

    return ImageReport(
        name=name,
        tags=list(metadata.repo_tags),
        size=metadata.size_string,
        size_tier=size_tier(metadata),
        layers=metadata.layer_count,
        layers_tier=layers_tier(metadata),
        language=language,
        author=metadata.author_display,
        created=metadata.formatted_creation_date,
        os=metadata.os,
        suggestions=suggestions,
    )


def _line(*parts, winner: Optional[str] = None, loser: Optional[str] = None) -> ComparisonLine:
    """
    Builds a line from plain strings and ``(text, tier)`` pairs.
    """
    return ComparisonLine(
        parts=[LinePart(text=p) if isinstance(p, str) else LinePart(text=p[0], tier=p[1]) for p in parts],
        winner=winner,
        loser=loser,
    )


def compare_layers(name1: str, meta1: ImageMetadata, name2: str, meta2: ImageMetadata) -> ComparisonLine:
    layers1, layers2 = meta1.layer_count, meta2.layer_count
    if layers1 == layers2:
        return _line(f"Images have the same number of layers: {layers2}")

    if layers1 < layers2:
        fewer, fewer_count, more, more_count = name1, layers1, name2, layers2
    else:
        fewer, fewer_count, more, more_count = name2, layers2, name1, layers1
    return _line(
        "Image ", (fewer, GOOD), " has ", (f"{more_count - fewer_count} less layers", GOOD),
        " than image ", (more, BAD), " (", (str(fewer_count), GOOD), " < ", (str(more_count), BAD), ").",
        winner=fewer,
        loser=more,
    )


def compare_sizes(name1: str, meta1: ImageMetadata, name2: str, meta2: ImageMetadata) -> ComparisonLine:
    if meta1.size == meta2.size:
        return _line(f"Images have the same size: {meta1.size_string}")

    if meta1.size < meta2.size:
        smaller_name, smaller, bigger_name, bigger = name1, meta1, name2, meta2
    else:
        smaller_name, smaller, bigger_name, bigger = name2, meta2, name1, meta1
    percent = 100 - (smaller.size / bigger.size) * 100
    return _line(
        "Image ", (smaller_name, GOOD), " is ", (f"{percent:.2f}% smaller", GOOD),
        " than image ", (bigger_name, BAD), " (", (smaller.size_string, GOOD),
        " < ", (bigger.size_string, BAD), ").",
        winner=smaller_name,
        loser=bigger_name,
    )


def compare_languages(name1: str, meta1: ImageMetadata, name2: str, meta2: ImageMetadata) -> ComparisonLine:
    lang1 = detect_primary_language(meta1)
    lang2 = detect_primary_language(meta2)

    if lang1 is None and lang2 is None:
        return _line("No programming language runtime detected in either image.")
    if lang1 is None or lang2 is None:
        name, lang = (name2, lang2) if lang1 is None else (name1, lang1)
        return _line(
            "Only image ", (name, GOOD),
            f" has detected language runtime: {lang.name.value} {lang.version}",
            winner=name,
        )

    if lang1.name != lang2.name:
        return _line(
            f"Images use different languages: {lang1.name.value} ({lang1.version}) "
            f"vs {lang2.name.value} ({lang2.version})"
        )

    language = lang1.name.value
    if lang1.version == lang2.version:
        return _line(f"Both images use the same {language} version: {lang1.version}")

    major1 = get_major_version(lang1.version)
    major2 = get_major_version(lang2.version)
    if major1 == major2:
        return _line(f"Both images use {language} version {lang1.version} (minor version may differ)")

    if major1 > major2:
        newer_name, newer, older_name, older = name1, lang1, name2, lang2
    else:
        newer_name, newer, older_name, older = name2, lang2, name1, lang1
    return _line(
        "Image ", (newer_name, GOOD), f" uses newer {language} (",
        (newer.version, GOOD), " > ", (older.version, BAD), ")",
        winner=newer_name,
        loser=older_name,
    )


def compare_images(name1: str, meta1: ImageMetadata, name2: str, meta2: ImageMetadata) -> ComparisonReport:
    """
    Compares two images by layers, size and runtime version.
    """
    return ComparisonReport(
        image1=build_image_report(name1, meta1),
        image2=build_image_report(name2, meta2),
        layers=compare_layers(name1, meta1, name2, meta2),
        size=compare_sizes(name1, meta1, name2, meta2),
        language=compare_languages(name1, meta1, name2, meta2),
    )


def debug_lines(metadata: ImageMetadata) -> List[str]:
    """
    Raw metadata dump used by ``analyze --debug``.
    """
    lines = ["=== DEBUG IMAGE INFO ===", "", "Environment Variables:"]
    lines += [f"  [{i}] {env}" for i, env in enumerate(metadata.env)] or ["  (empty)"]
    lines += ["", "Cmd:"]
    lines += [f"  [{i}] {part}" for i, part in enumerate(metadata.cmd)] or ["  (empty)"]
    lines += ["", "Entrypoint:"]
    lines += [f"  [{i}] {part}" for i, part in enumerate(metadata.entrypoint)] or ["  (empty)"]
    lines += ["", f"Working Directory: {metadata.working_dir}", "", "Labels:"]
    lines += [f"  {k} = {v}" for k, v in sorted(metadata.labels.items())] or ["  (empty)"]
    lines += ["", f"Image Architecture: {metadata.architecture}", f"Image OS: {metadata.os}",
              "", "=== END DEBUG ==="]
    return lines
