"""FileNode tree building utilities for the directory-structure section."""

import logging
import os
from typing import List

from ..core.models import FileNode
from .file_filter import FileFilter
from .path_utils import PathUtils

logger = logging.getLogger(__name__)


class FileTreeBuilder:
    """Builds and renders bounded-depth trees of a root's contents."""

    def __init__(self, file_filter: FileFilter, max_depth: int = 3):
        self.file_filter = file_filter
        self.max_depth = max_depth

    def build(self, root: str) -> FileNode:
        """
        Build a FileNode tree for ``root``.

        Auto-excluded directories and files are left out, as are hidden
        entries unless the filter config includes them. Directories below
        ``max_depth`` are kept but marked as truncated.
        """
        display = PathUtils.display_path(root)
        name = os.path.basename(os.path.abspath(root)) or display
        node = FileNode(path=display, name=name, type='dir' if os.path.isdir(root) else 'file')
        if node.is_directory():
            self._fill(root, node, depth=1)
        return node

    def _fill(self, dir_path: str, node: FileNode, depth: int) -> None:
        try:
            entries = sorted(os.scandir(dir_path), key=lambda e: e.name)
        except OSError as e:
            logger.warning(f"Cannot list {dir_path}: {e}")
            return

        for entry in entries:
            if self.file_filter.is_hidden(entry.name) and not self.file_filter.config.include_hidden:
                continue
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                continue
            rel = PathUtils.normalize_path(os.path.join(node.path, entry.name))

            if is_dir:
                if self.file_filter.should_exclude_directory(entry.name):
                    continue
                child = FileNode(path=rel, name=entry.name, type='dir')
                if depth < self.max_depth:
                    self._fill(entry.path, child, depth + 1)
                else:
                    child.truncated = True
                node.children.append(child)
            else:
                if self.file_filter.is_auto_excluded(entry.name):
                    continue
                node.children.append(FileNode(path=rel, name=entry.name, type='file'))

    @staticmethod
    def render(tree: FileNode) -> str:
        """Render a tree with box-drawing connectors, directories first."""
        lines: List[str] = [f"{tree.name}/" if tree.is_directory() else tree.name]

        def format_recursive(node: FileNode, prefix: str) -> None:
            children = sorted(node.children, key=lambda x: (x.is_file(), x.name))
            for i, child in enumerate(children):
                is_last = i == len(children) - 1
                connector = "└── " if is_last else "├── "
                label = f"{child.name}/" if child.is_directory() else child.name
                if child.truncated:
                    label += " ..."
                lines.append(f"{prefix}{connector}{label}")
                if child.is_directory():
                    format_recursive(child, prefix + ("    " if is_last else "│   "))

        format_recursive(tree, "")
        return "\n".join(lines)
