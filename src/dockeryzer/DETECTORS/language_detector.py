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
Detection of the primary language runtime shipped in an image.

Detection is a priority cascade: an ordered list of steps evaluated top to
bottom where the first step that recognises the image wins. Specific
environment variables come first, then command sniffing, then the
compiled-binary heuristic.
"""
from typing import Callable, List, NamedTuple, Optional

from ..MODELS.image_metadata import ImageMetadata
from ..MODELS.language_info import LanguageInfo, Runtime, Tier, DETECTED, COMPILED, UNKNOWN
from .version_classifier import classify


class DetectionStep(NamedTuple):
    """
    One entry of the cascade. ``detect`` returns ``None`` when the step
    does not apply to the image.
    """
    name: str
    detect: Callable[[ImageMetadata], Optional[LanguageInfo]]


def _from_env(runtime: Runtime, lookup: Callable[[ImageMetadata], Optional[str]]):
    """
    Wraps a version lookup into a step that grades the version it finds.
    """
    def detect(metadata: ImageMetadata) -> Optional[LanguageInfo]:
        version = lookup(metadata)
        if version is None:
            return None
        return LanguageInfo(name=runtime, version=version, tier=classify(runtime, version))
    return detect


def _java_version(metadata: ImageMetadata) -> Optional[str]:
    version = metadata.get_env("JAVA_VERSION")
    if version is not None:
        return version
    java_home = metadata.get_env("JAVA_HOME")
    if java_home is None:
        return None
    if "java-" in java_home:
        # /usr/lib/jvm/java-17-openjdk -> 17-openjdk
        return java_home.split("java-", 1)[1].split("/")[0] or DETECTED
    return DETECTED


def _go_version(metadata: ImageMetadata) -> Optional[str]:
    version = metadata.get_env("GOLANG_VERSION", "GO_VERSION")
    if version is not None:
        return version
    if metadata.has_env("GOPATH"):
        return DETECTED
    return None


def _rust_version(metadata: ImageMetadata) -> Optional[str]:
    version = metadata.get_env("RUST_VERSION")
    if version is not None:
        return version
    if metadata.has_env("CARGO_HOME"):
        return DETECTED
    return None


# Substrings looked up in "entrypoint + cmd", in priority order
COMMAND_SIGNATURES = [
    (("node", "npm"), Runtime.NODEJS),
    (("python",), Runtime.PYTHON),
    (("java -jar", "java "), Runtime.JAVA),
    (("php",), Runtime.PHP),
    (("ruby",), Runtime.RUBY),
    (("dotnet",), Runtime.DOTNET),
]


def _detect_by_command(metadata: ImageMetadata) -> Optional[LanguageInfo]:
    command = " ".join(list(metadata.entrypoint) + list(metadata.cmd))
    for needles, runtime in COMMAND_SIGNATURES:
        if any(needle in command for needle in needles):
            # No version information here, so the tier is not graded
            return LanguageInfo(name=runtime, version=UNKNOWN, tier=Tier.WARNING)
    return None


BINARY_PREFIXES = ("/app/", "/usr/local/bin/", "/bin/")
INTERPRETER_NAMES = ("python", "node", "java", "ruby", "php")
GO_WORKING_DIRS = ("/app", "/go/src/app")


def _detect_compiled_binary(metadata: ImageMetadata) -> Optional[LanguageInfo]:
    """
    Small images whose entrypoint is a bare binary are usually Go builds.
    """
    if not metadata.entrypoint:
        return None

    binary = metadata.entrypoint[0]
    is_likely_go_binary = (
        binary.startswith(BINARY_PREFIXES)
        and not binary.endswith(".sh")
        and not any(name in binary for name in INTERPRETER_NAMES)
    )
    if not is_likely_go_binary:
        return None

    size_in_mib = metadata.size / (1024 * 1024)
    has_go_working_dir = metadata.working_dir in GO_WORKING_DIRS
    is_small_image = 5 < size_in_mib < 100

    if not (has_go_working_dir or is_small_image):
        return None
    if size_in_mib < 20 or (has_go_working_dir and is_small_image):
        return LanguageInfo(name=Runtime.GO, version=COMPILED, tier=Tier.SUCCESS)
    return None


DEFAULT_CASCADE: List[DetectionStep] = [
    DetectionStep("nodejs", _from_env(Runtime.NODEJS, lambda m: m.get_env("NODE_VERSION"))),
    DetectionStep("python", _from_env(Runtime.PYTHON, lambda m: m.get_env("PYTHON_VERSION"))),
    DetectionStep("java", _from_env(Runtime.JAVA, _java_version)),
    DetectionStep("go", _from_env(Runtime.GO, _go_version)),
    DetectionStep("php", _from_env(Runtime.PHP, lambda m: m.get_env("PHP_VERSION"))),
    DetectionStep("ruby", _from_env(Runtime.RUBY, lambda m: m.get_env("RUBY_VERSION"))),
    DetectionStep("dotnet", _from_env(Runtime.DOTNET, lambda m: m.get_env("DOTNET_VERSION", "ASPNETCORE_VERSION"))),
    DetectionStep("rust", _from_env(Runtime.RUST, _rust_version)),
    DetectionStep("command", _detect_by_command),
    DetectionStep("compiled-binary", _detect_compiled_binary),
]


class LanguageDetector:
    """
    Identifies the primary runtime of an image from its metadata.
    Pure: the same metadata always yields the same answer.
    """
    def __init__(self, cascade: Optional[List[DetectionStep]] = None):
        """
        :param cascade: Steps to evaluate in order. Defaults to ``DEFAULT_CASCADE``.
        """
        self.cascade = list(cascade) if cascade is not None else list(DEFAULT_CASCADE)

    def detect(self, metadata: ImageMetadata) -> Optional[LanguageInfo]:
        """
        Runs the cascade and returns the first match.

        :param metadata: The inspected image.
        :return: The detected runtime, or ``None`` if nothing matched.
        """
        for step in self.cascade:
            language = step.detect(metadata)
            if language is not None:
                return language
        return None


def detect_primary_language(metadata: ImageMetadata) -> Optional[LanguageInfo]:
    return LanguageDetector().detect(metadata)


def has_outdated_language(language: Optional[LanguageInfo]) -> bool:
    return language is not None and language.is_outdated


def language_improvement_suggestions(language: Optional[LanguageInfo]) -> List[str]:
    """
    Suggestions for an outdated or unversioned runtime. Empty when the
    runtime is current or nothing was detected.
    """
    if language is None:
        return []

    name = language.name.value
    if language.tier == Tier.ERROR:
        return [
            f"{name} version {language.version} is outdated and may have security "
            f"vulnerabilities. Consider upgrading to a newer version."
        ]
    if language.tier == Tier.WARNING:
        if language.version == UNKNOWN:
            return [
                f"{name} runtime detected but version could not be determined. "
                f"Consider using official base images with explicit version tags."
            ]
        return [
            f"{name} version {language.version} is approaching end-of-life. "
            f"Consider upgrading to ensure continued support."
        ]
    return []
