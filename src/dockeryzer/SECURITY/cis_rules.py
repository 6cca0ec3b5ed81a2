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
CIS Docker Benchmark style rules for Dockerfiles.

Every rule is a plain function over the raw Dockerfile text returning
``None`` when it passes, or the severity and message of the failure.
Rules are stateless and independent; ``DEFAULT_RULES`` fixes their
display order.
"""
import os
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..MODELS.cis_result import CISResult, Severity

Failure = Optional[Tuple[Severity, str]]


@dataclass(frozen=True)
class CISRule:
    """
    A registered rule: identity, description and check function.
    """
    rule_id: str
    description: str
    check: Callable[[str], Failure]

    def evaluate(self, dockerfile: str) -> CISResult:
        failure = self.check(dockerfile)
        if failure is None:
            return CISResult(rule_id=self.rule_id, description=self.description, passed=True)
        severity, message = failure
        return CISResult(
            rule_id=self.rule_id,
            description=self.description,
            passed=False,
            severity=severity,
            message=message,
        )


def _lines(dockerfile: str) -> List[str]:
    return [line.strip() for line in dockerfile.splitlines()]


def _is_instruction(line: str, keyword: str) -> bool:
    return line.upper().startswith(keyword)


def _first_from_image(dockerfile: str) -> Optional[str]:
    """
    Image reference of the first FROM line, ``""`` if the line has none,
    ``None`` if there is no FROM line at all.
    """
    for line in _lines(dockerfile):
        if _is_instruction(line, "FROM"):
            tokens = line.split()
            return tokens[1] if len(tokens) > 1 else ""
    return None


def check_official_base_image(dockerfile: str) -> Failure:
    image = _first_from_image(dockerfile)
    if image is None:
        return Severity.HIGH, "No FROM instruction"
    if "/" in image and not image.startswith("library/"):
        return Severity.MEDIUM, f"Base image '{image}' does not appear to be an official image"
    return None


def check_explicit_tag(dockerfile: str) -> Failure:
    image = _first_from_image(dockerfile)
    if image is None:
        return Severity.HIGH, "No FROM instruction"
    if ":" not in image or image.endswith(":latest"):
        return Severity.HIGH, f"Base image '{image}' does not pin an explicit version tag"
    return None


def check_non_root_user(dockerfile: str) -> Failure:
    if "user" not in dockerfile.lower():
        return Severity.HIGH, "Missing USER instruction"
    return None


CACHE_CLEANUP_MARKERS = ("apt-get clean", "rm -rf /var/lib/apt/lists", "apk --no-cache")


def check_cache_cleanup(dockerfile: str) -> Failure:
    text = dockerfile.lower()
    if any(marker in text for marker in CACHE_CLEANUP_MARKERS):
        return None
    return Severity.MEDIUM, "Package manager cache is not cleaned up"


def check_healthcheck(dockerfile: str) -> Failure:
    if "healthcheck" not in dockerfile.lower():
        return Severity.LOW, "Missing HEALTHCHECK instruction"
    return None


def check_dockerignore(dockerfile: str) -> Failure:
    # Looks next to the build context, i.e. the current directory
    if os.path.isfile(".dockerignore"):
        return None
    return Severity.LOW, "No .dockerignore file found in the build context"


def check_minimal_port_exposure(dockerfile: str) -> Failure:
    exposed = sum(1 for line in _lines(dockerfile) if _is_instruction(line, "EXPOSE"))
    if exposed > 1:
        return Severity.LOW, f"{exposed} EXPOSE instructions found; expose only the ports you need"
    return None


def check_multi_stage_build(dockerfile: str) -> Failure:
    stages = sum(1 for line in _lines(dockerfile) if _is_instruction(line, "FROM"))
    if stages <= 1:
        return Severity.MEDIUM, "Single-stage build; use a multi-stage build to slim the final image"
    return None


def check_combined_run(dockerfile: str) -> Failure:
    for line in _lines(dockerfile):
        if _is_instruction(line, "RUN") and "&&" not in line:
            return Severity.LOW, f"RUN instruction not combined with '&&': {line}"
    return None


def check_instruction_order(dockerfile: str) -> Failure:
    last_install = -1
    last_copy = -1
    for index, line in enumerate(_lines(dockerfile)):
        if _is_instruction(line, "RUN") and "install" in line.lower():
            last_install = index
        if _is_instruction(line, "COPY"):
            last_copy = index
    if last_install > last_copy:
        return Severity.LOW, "Dependencies are installed after the last COPY, which defeats layer caching"
    return None


DEFAULT_RULES: List[CISRule] = [
    CISRule("CIS-1.1", "Use official base images", check_official_base_image),
    CISRule("CIS-1.2", "Pin base image to an explicit tag", check_explicit_tag),
    CISRule("CIS-4.1", "Container should not run as root", check_non_root_user),
    CISRule("CIS-5.1", "Clean package manager cache", check_cache_cleanup),
    CISRule("CIS-4.6", "Container must define HEALTHCHECK", check_healthcheck),
    CISRule("CIS-5.2", "Use a .dockerignore file", check_dockerignore),
    CISRule("CIS-6.1", "Expose only required ports", check_minimal_port_exposure),
    CISRule("CIS-7.1", "Use multi-stage builds", check_multi_stage_build),
    CISRule("CIS-8.1", "Combine RUN commands", check_combined_run),
    CISRule("CIS-9.1", "Order instructions for layer caching", check_instruction_order),
]
