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
Buckets runtime versions into freshness tiers.

Every runtime has a fixed threshold table. Placeholder versions
(``detected``, ``unknown`` and, for Go, ``compiled``) are resolved before
any numeric parsing; anything that does not parse counts as version 0.
"""
import re
from typing import Callable, Dict, Union

from ..MODELS.language_info import Tier, Runtime, DETECTED, COMPILED, UNKNOWN

_NUMBER = re.compile(r'^[+-]?\d+$')


def _version_part(version: str, index: int) -> int:
    parts = version.split(".")
    if len(parts) <= index or not _NUMBER.match(parts[index]):
        return 0
    return int(parts[index])


def get_major_version(version: str) -> int:
    """
    Returns the first dot-separated integer of ``version``, or 0.
    """
    return _version_part(version, 0)


def get_minor_version(version: str) -> int:
    """
    Returns the second dot-separated integer of ``version``, or 0.
    """
    return _version_part(version, 1)


def _nodejs_tier(version: str) -> Tier:
    major = get_major_version(version)
    if major < 14:
        return Tier.ERROR
    if major <= 16:
        return Tier.WARNING
    return Tier.SUCCESS


def _python_tier(version: str) -> Tier:
    major = get_major_version(version)
    if major < 3:
        return Tier.ERROR
    if major == 3 and get_minor_version(version) < 8:
        return Tier.WARNING
    return Tier.SUCCESS


def _java_tier(version: str) -> Tier:
    major = get_major_version(version)
    if major < 11:
        return Tier.ERROR
    if major < 17:
        return Tier.WARNING
    return Tier.SUCCESS


def _go_tier(version: str) -> Tier:
    major = get_major_version(version)
    if major < 1:
        return Tier.ERROR
    if major == 1 and get_minor_version(version) < 19:
        return Tier.WARNING
    return Tier.SUCCESS


def _php_tier(version: str) -> Tier:
    major = get_major_version(version)
    if major < 7:
        return Tier.ERROR
    if major == 7:
        return Tier.WARNING
    return Tier.SUCCESS


def _ruby_tier(version: str) -> Tier:
    major = get_major_version(version)
    if major < 2:
        return Tier.ERROR
    if major == 2:
        return Tier.WARNING
    return Tier.SUCCESS


def _dotnet_tier(version: str) -> Tier:
    # .NET has no error tier
    if get_major_version(version) < 6:
        return Tier.WARNING
    return Tier.SUCCESS


def _rust_tier(version: str) -> Tier:
    return Tier.SUCCESS


_THRESHOLDS: Dict[Runtime, Callable[[str], Tier]] = {
    Runtime.NODEJS: _nodejs_tier,
    Runtime.PYTHON: _python_tier,
    Runtime.JAVA: _java_tier,
    Runtime.GO: _go_tier,
    Runtime.PHP: _php_tier,
    Runtime.RUBY: _ruby_tier,
    Runtime.DOTNET: _dotnet_tier,
    Runtime.RUST: _rust_tier,
}

# Tier reported for placeholder versions, per runtime
_PLACEHOLDER_TIERS: Dict[Runtime, Dict[str, Tier]] = {
    Runtime.GO: {DETECTED: Tier.SUCCESS, UNKNOWN: Tier.SUCCESS, COMPILED: Tier.SUCCESS},
    Runtime.RUST: {DETECTED: Tier.SUCCESS, UNKNOWN: Tier.SUCCESS, COMPILED: Tier.SUCCESS},
}
_DEFAULT_PLACEHOLDER_TIERS: Dict[str, Tier] = {DETECTED: Tier.WARNING, UNKNOWN: Tier.WARNING}


def classify(runtime: Union[Runtime, str], version: str) -> Tier:
    """
    Classifies a runtime version into a freshness tier.

    Args:
        runtime: A ``Runtime`` or its display name (e.g. ``"Node.js"``).
        version: The version string captured from the image.

    Returns:
        Tier: ``success``, ``warning`` or ``error``.

    Raises:
        ValueError: If ``runtime`` is not a known runtime.
    """
    runtime = Runtime(runtime)
    placeholders = _PLACEHOLDER_TIERS.get(runtime, _DEFAULT_PLACEHOLDER_TIERS)
    if version in placeholders:
        return placeholders[version]
    return _THRESHOLDS[runtime](version)
