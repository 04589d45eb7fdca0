"""Utility modules for repo2clip."""

from .file_filter import FileFilter
from .encodings import EncodingDetector
from .path_utils import PathUtils
from .tree_builder import FileTreeBuilder

__all__ = ["FileFilter", "EncodingDetector", "PathUtils", "FileTreeBuilder"]
