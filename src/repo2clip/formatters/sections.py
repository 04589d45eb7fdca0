"""
Optional sections rendered before the file listing.

- Directory structure: a bounded-depth tree of each root.
- Dependencies: declared dependencies read from well-known manifest files
  next to each root. This section is advisory, so any parse failure is
  logged at debug level and the manifest is left out.
"""

import json
import logging
import os
import re
import tomllib
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from ..utils.file_filter import FileFilter
from ..utils.path_utils import PathUtils
from ..utils.tree_builder import FileTreeBuilder

logger = logging.getLogger(__name__)


@dataclass
class ManifestDependencies:
    """Dependencies declared by one manifest file."""

    manifest: str
    dependencies: List[str] = field(default_factory=list)


def build_structure(roots: Sequence[str], file_filter: FileFilter, max_depth: int) -> str:
    """Render the directory trees of all roots, one after another."""
    builder = FileTreeBuilder(file_filter, max_depth=max_depth)
    trees = [builder.render(builder.build(root)) for root in roots if os.path.exists(root)]
    return "\n\n".join(trees)


def _format_requirement(name: str, spec) -> str:
    if isinstance(spec, str):
        return f"{name} {spec}"
    if isinstance(spec, dict) and isinstance(spec.get("version"), str):
        return f"{name} {spec['version']}"
    return name


def parse_package_json(text: str) -> List[str]:
    data = json.loads(text)
    deps = []
    for key in ("dependencies", "devDependencies", "peerDependencies"):
        table = data.get(key) or {}
        deps.extend(_format_requirement(name, version) for name, version in table.items())
    return deps


def parse_cargo_toml(text: str) -> List[str]:
    data = tomllib.loads(text)
    deps = []
    for key in ("dependencies", "dev-dependencies", "build-dependencies"):
        table = data.get(key) or {}
        deps.extend(_format_requirement(name, spec) for name, spec in table.items())
    return deps


def parse_pyproject_toml(text: str) -> List[str]:
    data = tomllib.loads(text)
    project = data.get("project") or {}
    deps = list(project.get("dependencies") or [])
    for extra in (project.get("optional-dependencies") or {}).values():
        deps.extend(extra)

    poetry = (data.get("tool") or {}).get("poetry") or {}
    for name, spec in (poetry.get("dependencies") or {}).items():
        if name != "python":
            deps.append(_format_requirement(name, spec))
    return deps


def parse_requirements_txt(text: str) -> List[str]:
    return [
        line.strip() for line in text.splitlines()
        if line.strip() and not line.strip().startswith("#")
    ]


_GO_REQUIRE_BLOCK = re.compile(r'^require\s*\((.*?)^\)', re.MULTILINE | re.DOTALL)
_GO_REQUIRE_LINE = re.compile(r'^require\s+([^\s(]+)\s+(\S+)', re.MULTILINE)


def parse_go_mod(text: str) -> List[str]:
    deps = []
    for block in _GO_REQUIRE_BLOCK.findall(text):
        for line in block.splitlines():
            line = line.split("//", 1)[0].strip()
            if line:
                deps.append(" ".join(line.split()))
    for module, version in _GO_REQUIRE_LINE.findall(text):
        deps.append(f"{module} {version}")
    return deps


MANIFEST_PARSERS: Dict[str, Callable[[str], List[str]]] = {
    "package.json": parse_package_json,
    "Cargo.toml": parse_cargo_toml,
    "pyproject.toml": parse_pyproject_toml,
    "requirements.txt": parse_requirements_txt,
    "go.mod": parse_go_mod,
}


def read_manifest(path: str) -> Optional[ManifestDependencies]:
    """Parse one manifest file. Returns None if it cannot be read or parsed."""
    parser = MANIFEST_PARSERS.get(os.path.basename(path))
    if parser is None:
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            deps = parser(f.read())
    except Exception as e:
        logger.debug(f"Ignoring unreadable manifest {path}: {e}")
        return None
    return ManifestDependencies(manifest=PathUtils.display_path(path), dependencies=deps)


def collect_dependencies(roots: Sequence[str]) -> List[ManifestDependencies]:
    """Read every recognized manifest found directly inside each root."""
    results = []
    seen = set()
    for root in roots:
        directory = root if os.path.isdir(root) else os.path.dirname(root) or os.curdir
        real = os.path.realpath(directory)
        if real in seen:
            continue
        seen.add(real)
        for name in MANIFEST_PARSERS:
            path = os.path.join(directory, name)
            if os.path.isfile(path):
                manifest = read_manifest(path)
                if manifest is not None:
                    results.append(manifest)
    return results
