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
Filesystem scanning for project detection.
Produces a FileTreeSnapshot so that detection logic stays free of I/O.
"""
import fnmatch
import logging
import os
from collections import Counter
from typing import Dict, List, Optional

from ..MODELS.project_technology import FileTreeSnapshot

logger = logging.getLogger(__name__)

IGNORED_DIRS = {
    ".git", "node_modules", "vendor", "venv", ".venv", "__pycache__",
    "dist", "build", "target", ".next", ".nuxt",
}

KNOWN_CONFIG_FILES = [
    # Node.js
    "package.json", "package-lock.json", "yarn.lock", "pnpm-lock.yaml",
    "tsconfig.json", "webpack.config.js", "vite.config.js", "vite.config.ts",
    "next.config.js", "nuxt.config.js", "svelte.config.js",
    # Python
    "requirements.txt", "Pipfile", "Pipfile.lock", "pyproject.toml", "setup.py",
    "poetry.lock", "conda.yml", "environment.yml",
    # Go
    "go.mod", "go.sum",
    # Java
    "pom.xml", "build.gradle", "build.gradle.kts", "settings.gradle",
    # Rust
    "Cargo.toml", "Cargo.lock",
    # PHP
    "composer.json", "composer.lock",
    # Ruby
    "Gemfile", "Gemfile.lock",
    # .NET
    "*.csproj", "*.sln", "packages.config",
    # Docker
    "Dockerfile", "docker-compose.yml", "docker-compose.yaml",
    # Others
    "Makefile", "CMakeLists.txt",
]

# Files whose content feeds the language specific detectors
MANIFEST_FILES = [
    "package.json", "go.mod", "pom.xml", "build.gradle", "build.gradle.kts",
    "Cargo.toml", "composer.json", "Gemfile", "app.py",
]

# Entries skipped when rendering the project structure
TREE_IGNORED = {".git", "node_modules", "vendor", "dist", "build", ".idea", ".vscode", ".DS_Store"}


def get_root_files(root: str) -> List[str]:
    """
    Lists regular files directly under ``root``, sorted by name.
    """
    try:
        entries = os.listdir(root)
    except OSError as e:
        logger.warning("Cannot list %s: %s", root, e)
        return []
    return sorted(name for name in entries if os.path.isfile(os.path.join(root, name)))


def count_file_extensions(root: str) -> Dict[str, int]:
    """
    Counts files per lower-cased extension below ``root``, skipping ignored
    and hidden directories as well as hidden files.
    """
    counts: Counter = Counter()
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d not in IGNORED_DIRS and not d.startswith(".")]
        for filename in filenames:
            if filename.startswith("."):
                continue
            ext = os.path.splitext(filename)[1]
            if ext:
                counts[ext.lower()] += 1
    return dict(counts)


def find_config_files(root_files: List[str]) -> List[str]:
    """
    Returns the known configuration entries present among ``root_files``,
    in catalog order. Glob entries match if any root file matches them.
    """
    found = []
    for pattern in KNOWN_CONFIG_FILES:
        if any(fnmatch.fnmatchcase(name, pattern) for name in root_files):
            found.append(pattern)
    return found


def _read_text(path: str) -> Optional[str]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Skipping unreadable file %s: %s", path, e)
        return None


def read_manifests(root: str, root_files: List[str]) -> Dict[str, str]:
    """
    Reads the manifest files present in ``root``. Missing or unreadable
    files are left out.
    """
    names = [name for name in MANIFEST_FILES if name in root_files]
    names += [name for name in root_files if name.endswith(".csproj")]

    manifests = {}
    for name in names:
        content = _read_text(os.path.join(root, name))
        if content is not None:
            manifests[name] = content
    return manifests


def scan_directory(root: str = ".") -> FileTreeSnapshot:
    """
    Captures everything project detection needs from ``root``.

    :param root: The project directory.
    :return: The snapshot.
    """
    root_files = get_root_files(root)
    return FileTreeSnapshot(
        root_files=root_files,
        extension_counts=count_file_extensions(root),
        config_files=find_config_files(root_files),
        manifests=read_manifests(root, root_files),
    )


def render_project_tree(root: str = ".") -> str:
    """
    Renders the directory structure below ``root`` using box drawing
    connectors, one entry per line.
    """
    lines: List[str] = []
    _walk_tree(root, "", lines)
    return "\n".join(lines) + ("\n" if lines else "")


def _walk_tree(path: str, prefix: str, lines: List[str]):
    try:
        entries = sorted(os.listdir(path))
    except OSError as e:
        logger.debug("Cannot list %s: %s", path, e)
        return

    entries = [name for name in entries if name not in TREE_IGNORED]
    for i, name in enumerate(entries):
        is_last = i == len(entries) - 1
        lines.append(prefix + ("└── " if is_last else "├── ") + name)
        full_path = os.path.join(path, name)
        if os.path.isdir(full_path):
            _walk_tree(full_path, prefix + ("    " if is_last else "│   "), lines)
