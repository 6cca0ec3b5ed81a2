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
Console rendering of analysis results.
"""
from typing import List, Optional

import click

from ..MODELS.cis_result import CISReport
from ..MODELS.language_info import Tier
from ..MODELS.project_technology import ProjectTechnology
from ..MODELS.reports import ImageReport, ComparisonReport, ComparisonLine

TIER_COLORS = {
    Tier.SUCCESS: "green",
    Tier.WARNING: "yellow",
    Tier.ERROR: "red",
}

SEPARATOR = "=" * 40


def styled(text: str, tier: Tier) -> str:
    return click.style(text, fg=TIER_COLORS[tier])


def cis_lines(report: CISReport) -> List[str]:
    """
    Lines of the CIS benchmark report, ending with the security score.
    """
    lines = ["", "Security Analysis based on CIS Docker Benchmark:", ""]
    for result in report.results:
        status = "PASS" if result.passed else "FAIL"
        line = f"[{status}] {result.rule_id} - {result.description}"
        lines.append(click.style(line, fg="green" if result.passed else "red"))
        if not result.passed:
            severity = result.severity.value if result.severity else ""
            lines += [f"  Severity: {severity}", f"  Issue: {result.message}", ""]
    lines.append(f"Security Score: {report.score}%")
    return lines


def image_lines(report: ImageReport, minimal: bool = False, ignore_suggestions: bool = False) -> List[str]:
    """
    Lines describing one image. ``minimal`` drops author, date and OS;
    ``ignore_suggestions`` drops the improvement suggestions.
    """
    lines = [
        "Details of image " + click.style(f"{report.name}:", bold=True),
        f"  - Tags: [{' '.join(report.tags)}]",
        "  - Size: " + styled(report.size, report.size_tier),
        "  - N. of Layers: " + styled(str(report.layers), report.layers_tier),
    ]

    if report.language is None:
        lines.append("  - Language: " + click.style("not detected", fg="yellow"))
    else:
        language = f"{report.language.name.value} {report.language.version}"
        lines.append("  - Language: " + styled(language, report.language.tier))

    if not minimal:
        lines += [
            f"  - Author: {report.author}",
            f"  - Creation date: {report.created}",
            f"  - OS: {report.os}",
        ]

    if report.suggestions and not ignore_suggestions:
        lines += ["", " Improvement suggestions:"]
        lines += [f"  - {suggestion}" for suggestion in report.suggestions]
    return lines


def comparison_line(line: ComparisonLine) -> str:
    """Renders one comparison line with its highlighted parts colored."""
    text = "".join(styled(part.text, part.tier) if part.tier else part.text for part in line.parts)
    return f"  - {text}"


def comparison_lines(report: ComparisonReport) -> List[str]:
    lines = image_lines(report.image1, minimal=True, ignore_suggestions=True)
    lines.append("")
    lines += image_lines(report.image2, minimal=True, ignore_suggestions=True)
    lines += ["", "Comparison:"]
    lines += [comparison_line(line) for line in (report.layers, report.size, report.language)]
    return lines


def technology_lines(tech: ProjectTechnology, extension_limit: int = 10, dependency_sample: int = 5) -> List[str]:
    """
    Project detection summary: main fields, config files, the most common
    file extensions and a sample of dependencies.
    """
    lines = [
        "",
        "Project Detection Results",
        SEPARATOR,
        f"Language:        {tech.language}",
        f"Framework:       {tech.framework}",
        f"Package Manager: {tech.package_manager}",
        f"Build Tool:      {tech.build_tool}",
        f"Version:         {tech.version}",
        "",
        "Config Files Found:",
    ]
    lines += [f"  * {name}" for name in tech.config_files] or ["  (none)"]

    lines += ["", "File Extensions Distribution:"]
    extensions = sorted(tech.file_extensions.items(), key=lambda item: (-item[1], item[0]))
    lines += [f"  {ext}: {count} files" for ext, count in extensions[:extension_limit]] or ["  (none)"]

    if tech.dependencies:
        lines += ["", "Dependencies (sample):"]
        for i, (name, version) in enumerate(sorted(tech.dependencies.items())):
            if i >= dependency_sample:
                lines.append(f"  ... and {len(tech.dependencies) - dependency_sample} more")
                break
            lines.append(f"  * {name}: {version}")
    lines.append(SEPARATOR)
    return lines


def detected_summary(tech: ProjectTechnology) -> str:
    summary = f"Detected: {tech.language}"
    if tech.framework:
        summary += f" ({tech.framework})"
    if tech.package_manager:
        summary += f" [{tech.package_manager}]"
    return summary


def create_success_lines(dockerfile: str, image_name: Optional[str]) -> List[str]:
    lines = [click.style(f"{dockerfile} and .dockerignore created successfully.", fg="green")]
    if image_name:
        lines.append(f"Building image {image_name}...")
    else:
        lines.append(f"Run 'docker build -t <image-name> -f {dockerfile} .' to build your image.")
    return lines
