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
Models describing the runtime detected inside an image.
"""
from enum import Enum
from pydantic import BaseModel


class Tier(str, Enum):
    """
    Freshness of a detected runtime version.
    """
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Runtime(str, Enum):
    """
    Runtimes the language detector can report.
    """
    NODEJS = "Node.js"
    PYTHON = "Python"
    JAVA = "Java"
    GO = "Go"
    PHP = "PHP"
    RUBY = "Ruby"
    DOTNET = ".NET"
    RUST = "Rust"


# Placeholder versions for runtimes found without a precise version number
DETECTED = "detected"
COMPILED = "compiled"
UNKNOWN = "unknown"


class LanguageInfo(BaseModel):
    """
    The primary runtime of an image together with its freshness tier.
    """
    name: Runtime
    version: str
    tier: Tier

    model_config = {"frozen": True}

    @property
    def is_outdated(self) -> bool:
        return self.tier in (Tier.ERROR, Tier.WARNING)
