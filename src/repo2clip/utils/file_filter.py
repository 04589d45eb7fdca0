"""
File filtering utilities for repo2clip.

This module decides, purely from names and paths, whether a file or
directory takes part in a run: extension include/exclude sets, the
auto-exclude list of build and VCS artifacts, user exclude patterns and
override ("unignore") patterns.
"""

import os
from typing import Iterable, Optional

import pathspec

from ..core.errors import ConfigurationError
from ..core.models import FilterConfig, check_glob, normalize_extensions
from .path_utils import PathUtils


# Directories that hold build output, dependencies or VCS data
AUTO_EXCLUDED_DIRS = frozenset({
    '__pycache__', '.git', '.hg', '.svn', '.idea', '.vscode',
    'node_modules', '.pytest_cache', '.mypy_cache', '.ruff_cache', '.tox',
    'venv', '.venv', 'virtualenv', '.virtualenv', 'bower_components',
    '.sass-cache', '.cache', 'dist', 'build', 'target', '.next', '.nuxt',
    '.output', '.parcel-cache', '.gradle', 'coverage', 'htmlcov',
})

# Generated files that are text but never worth reading
AUTO_EXCLUDED_NAMES = frozenset({
    'package-lock.json', 'yarn.lock', 'pnpm-lock.yaml', 'poetry.lock',
    'Pipfile.lock', 'composer.lock', 'Cargo.lock', 'go.sum', '.DS_Store',
    'Thumbs.db', '.coverage',
})

AUTO_EXCLUDED_SUFFIXES = ('.min.js', '.min.css', '.map')

# Compiled artifacts
AUTO_EXCLUDED_EXTENSIONS = frozenset({
    'pyc', 'pyo', 'pyd', 'o', 'obj', 'a', 'lib', 'so', 'dll', 'dylib',
    'exe', 'class', 'jar', 'war', 'whl', 'egg', 'dex', 'apk',
})

# Never descended into, even by the override walk
VCS_DIRS = frozenset({'.git', '.hg', '.svn'})


def compile_patterns(patterns: Iterable[str]) -> Optional[pathspec.PathSpec]:
    """
    Compile glob patterns with gitignore semantics.

    Returns:
        A PathSpec, or None when there are no patterns.

    Raises:
        ConfigurationError: If any pattern is invalid.
    """
    patterns = list(patterns)
    if not patterns:
        return None
    for pattern in patterns:
        check_glob(pattern)
    try:
        return pathspec.GitIgnoreSpec.from_lines(patterns)
    except ValueError as e:
        raise ConfigurationError(f"Invalid glob pattern: {e}") from e


class FileFilter:
    """Handles file filtering logic."""

    def __init__(self, config: FilterConfig):
        self.config = config
        self.include_extensions = normalize_extensions(config.include_extensions)
        self.exclude_extensions = normalize_extensions(config.exclude_extensions)
        self.exclude_spec = compile_patterns(config.exclude_patterns)
        self.override_spec = compile_patterns(config.unignore)

    @staticmethod
    def extension_of(file_path: str) -> Optional[str]:
        """Lower-cased extension without the dot, or None."""
        suffix = os.path.splitext(os.path.basename(file_path))[1]
        return suffix[1:].lower() if len(suffix) > 1 else None

    @staticmethod
    def is_hidden(name: str) -> bool:
        return name.startswith('.') and name not in ('.', '..')

    def should_exclude_directory(self, dir_name: str) -> bool:
        """
        Check if a directory is an auto-excluded artifact directory.

        Args:
            dir_name: Name of the directory (not full path).
        """
        if dir_name in VCS_DIRS:
            return True
        return self.config.auto_exclude and dir_name in AUTO_EXCLUDED_DIRS

    def is_auto_excluded(self, file_path: str) -> bool:
        """Check a file name against the well-known artifact list."""
        if not self.config.auto_exclude:
            return False
        name = os.path.basename(file_path)
        if name in AUTO_EXCLUDED_NAMES:
            return True
        if name.endswith(AUTO_EXCLUDED_SUFFIXES):
            return True
        return self.extension_of(name) in AUTO_EXCLUDED_EXTENSIONS

    def matches_extension(self, file_path: str) -> bool:
        """
        Apply the include/exclude extension sets.

        A file without an extension passes only when no include set is given.
        """
        extension = self.extension_of(file_path)
        if extension is None:
            return not self.include_extensions
        if extension in self.exclude_extensions:
            return False
        if self.include_extensions and extension not in self.include_extensions:
            return False
        return True

    def _matches_any_form(self, spec: Optional[pathspec.PathSpec], file_path: str) -> bool:
        if spec is None:
            return False
        forms = (
            file_path,
            os.path.basename(file_path),
            PathUtils.normalize_path(file_path),
        )
        return any(spec.match_file(form) for form in forms)

    def is_excluded_by_pattern(self, file_path: str) -> bool:
        """Check the user exclude patterns (which always include .env)."""
        return self._matches_any_form(self.exclude_spec, file_path)

    def is_rescued(self, file_path: str) -> bool:
        """
        Check if an override pattern re-includes this path.

        The path as given, the bare file name and the separator-normalized
        path are each tested; any match rescues the file.
        """
        return self._matches_any_form(self.override_spec, file_path)

    def get_excluded_reason(self, file_path: str) -> Optional[str]:
        """
        Get the reason why a file would be excluded by name-based rules.

        Returns:
            Reason string if file would be excluded, None otherwise.
        """
        if self.is_excluded_by_pattern(file_path):
            return "Matches exclude pattern"
        if self.is_auto_excluded(file_path):
            return "Build or VCS artifact"
        if not self.matches_extension(file_path):
            return "Filtered by file type"
        return None
