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
Exceptions raised by Dockeryzer.
"""


class DockeryzerError(Exception):
    """Base class for all Dockeryzer errors."""


class ConfigError(DockeryzerError):
    """Raised when a configuration file cannot be used."""


class ImageInspectionError(DockeryzerError):
    """Raised when an image cannot be inspected through the Docker daemon."""


class AIProviderError(DockeryzerError):
    """Raised when an LLM provider cannot be created or fails to answer."""


class AIResponseError(AIProviderError):
    """Raised when an LLM answer does not have the expected shape."""
