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
Fetches image inspection records from the Docker daemon.
"""
import logging
from typing import Optional

import docker
from docker.errors import DockerException, ImageNotFound

from ..MODELS.image_metadata import ImageMetadata
from ..errors import ImageInspectionError

logger = logging.getLogger(__name__)


class ImageInspector:
    """
    Thin adapter over the Docker SDK that returns ImageMetadata records.
    """
    def __init__(self, client: Optional[docker.DockerClient] = None):
        """
        :param client: An existing client. Created from the environment on
            first use when omitted.
        """
        self._client = client

    @property
    def client(self) -> docker.DockerClient:
        if self._client is None:
            try:
                self._client = docker.from_env()
            except DockerException as e:
                raise ImageInspectionError(f"Cannot connect to the Docker daemon: {e}") from e
        return self._client

    def inspect(self, name: str) -> ImageMetadata:
        """
        Inspects an image by name or id.

        :param name: Image reference, e.g. ``node:20-alpine``.
        :return: The image metadata.
        :raises ImageInspectionError: If the image is missing or the daemon fails.
        """
        logger.debug("Inspecting image %s", name)
        try:
            data = self.client.api.inspect_image(name)
        except ImageNotFound as e:
            raise ImageInspectionError(f"Image '{name}' not found") from e
        except DockerException as e:
            raise ImageInspectionError(f"Failed to inspect image '{name}': {e}") from e
        return ImageMetadata.from_inspect(data)

    def close(self):
        if self._client is not None:
            self._client.close()
