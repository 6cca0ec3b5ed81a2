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
Models describing the technology stack of a local source project.
"""
from typing import List, Dict, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class FileTreeSnapshot(BaseModel):
    """
    Everything the project detector needs to know about a directory,
    captured once so that detection itself never touches the filesystem.
    """
    root_files: List[str] = []
    extension_counts: Dict[str, int] = {}
    config_files: List[str] = []
    # file name -> UTF-8 content, only for manifests that could be read
    manifests: Dict[str, str] = {}

    def has_file(self, name: str) -> bool:
        return name in self.root_files

    def read(self, name: str) -> Optional[str]:
        return self.manifests.get(name)

    def csproj_contents(self) -> Optional[str]:
        """Content of the first ``*.csproj`` file in name order."""
        for name in sorted(self.manifests):
            if name.endswith(".csproj"):
                return self.manifests[name]
        return None


class ProjectTechnology(BaseModel):
    """
    Detected language, framework and tooling of a project. Serialized with
    camelCase keys when handed to an LLM.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    language: str = ""
    framework: str = ""
    build_tool: str = ""
    package_manager: str = ""
    version: str = ""
    config_files: List[str] = []
    dependencies: Dict[str, str] = {}
    dev_dependencies: Dict[str, str] = {}
    scripts: Dict[str, str] = {}
    root_files: List[str] = []
    file_extensions: Dict[str, int] = {}

    @property
    def is_unknown(self) -> bool:
        return self.language in ("", "unknown")

    @property
    def has_build_script(self) -> bool:
        return "build" in self.scripts

    def all_dependencies(self) -> Dict[str, str]:
        merged = dict(self.dependencies)
        merged.update(self.dev_dependencies)
        return merged

    def to_prompt_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2, exclude={"scripts"})
