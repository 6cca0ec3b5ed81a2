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
Models representing inspected container images.
"""
import re
from datetime import datetime
from typing import List, Dict, Any, Optional
from pydantic import BaseModel

_CREATED_PATTERN = re.compile(r'^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})')


class ImageMetadata(BaseModel):
    """
    Read-only view of a Docker image inspection record.
    """
    env: List[str] = []
    cmd: List[str] = []
    entrypoint: List[str] = []
    working_dir: str = ""
    size: int = 0
    layers: List[str] = []
    os: str = ""
    architecture: str = ""

    created: str = ""
    author: str = ""
    repo_tags: List[str] = []
    labels: Dict[str, str] = {}
    exposed_ports: List[str] = []
    user: str = ""

    model_config = {"frozen": True}

    @classmethod
    def from_inspect(cls, data: Dict[str, Any]) -> "ImageMetadata":
        """
        Builds the model from a Docker engine inspect payload.

        :param data: The JSON body returned by ``GET /images/{name}/json``.
        :return: The parsed metadata.
        """
        config = data.get('Config') or {}
        rootfs = data.get('RootFS') or {}
        return cls(
            env=config.get('Env') or [],
            cmd=config.get('Cmd') or [],
            entrypoint=config.get('Entrypoint') or [],
            working_dir=config.get('WorkingDir') or "",
            size=data.get('Size') or 0,
            layers=rootfs.get('Layers') or [],
            os=data.get('Os') or "",
            architecture=data.get('Architecture') or "",
            created=data.get('Created') or "",
            author=data.get('Author') or "",
            repo_tags=data.get('RepoTags') or [],
            labels=config.get('Labels') or {},
            exposed_ports=sorted((config.get('ExposedPorts') or {}).keys()),
            user=config.get('User') or "",
        )

    @property
    def layer_count(self) -> int:
        return len(self.layers)

    @property
    def size_in_mb(self) -> float:
        """Size in decimal megabytes."""
        return self.size / 10 ** 6

    @property
    def size_string(self) -> str:
        """Human readable size, switching to GB above 1000 MB."""
        size_in_mb = self.size_in_mb
        if size_in_mb > 1000:
            return f"{size_in_mb / 1000:.2f} GB"
        return f"{size_in_mb:.2f} MB"

    @property
    def formatted_creation_date(self) -> str:
        """Creation date as ``02 Jan 2006``, or an empty string if unparsable."""
        match = _CREATED_PATTERN.match(self.created)
        if not match:
            return ""
        try:
            parsed = datetime.strptime(match.group(1), "%Y-%m-%dT%H:%M:%S")
        except ValueError:
            return ""
        return parsed.strftime("%d %b %Y")

    @property
    def author_display(self) -> str:
        return self.author or "<none>"

    def get_env(self, *keys: str) -> Optional[str]:
        """
        Returns the value of the first ``KEY=VALUE`` entry, in environment
        order, whose key is one of ``keys``. Empty values count as absent.
        """
        prefixes = tuple(f"{key}=" for key in keys)
        for entry in self.env:
            for prefix in prefixes:
                if entry.startswith(prefix) and len(entry) > len(prefix):
                    return entry[len(prefix):]
        return None

    def has_env(self, key: str) -> bool:
        """Presence only: an empty value still counts."""
        prefix = f"{key}="
        return any(entry.startswith(prefix) for entry in self.env)
