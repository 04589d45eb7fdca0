"""Path normalization utilities for cross-platform compatibility."""

import os
from typing import List


class PathUtils:
    """Utilities for consistent path handling across platforms."""

    @staticmethod
    def normalize_path(path: str) -> str:
        """
        Normalize path separators to forward slashes.

        Args:
            path: File path with potentially mixed separators

        Returns:
            Path with forward slashes only
        """
        return path.replace('\\\\', '/').replace('\\', '/')

    @staticmethod
    def normalize_and_split(path: str) -> List[str]:
        """Normalize path and split into non-empty components."""
        return [part for part in PathUtils.normalize_path(path).split('/') if part]

    @staticmethod
    def display_path(root: str, rel_path: str = "") -> str:
        """
        Build the path shown to users for a file under a root.

        ``./src/a.py`` and ``src/a.py`` both become ``src/a.py``.
        """
        joined = os.path.join(root, rel_path) if rel_path else root
        return PathUtils.normalize_path(os.path.normpath(joined))

    @staticmethod
    def depth_of(rel_path: str) -> int:
        """Depth of a path relative to its root (direct children are depth 1)."""
        return len(PathUtils.normalize_and_split(rel_path))

    @staticmethod
    def same_file(path_a: str, path_b: str) -> bool:
        """True if both paths resolve to the same filesystem location."""
        return os.path.realpath(path_a) == os.path.realpath(path_b)
