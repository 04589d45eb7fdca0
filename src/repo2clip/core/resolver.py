"""
Candidate discovery for repo2clip.

PathResolver walks the root paths and produces the sorted, deduplicated
candidate list. It runs two independent walks:

1. The primary walk honours ``.gitignore`` files (when enabled, including
   those between a root and its repository top), hidden entries, the
   auto-exclude list, exclude patterns and extension filters.
2. The override walk, run only when override patterns are configured,
   disables ignore rules and re-includes files that match an override
   pattern but were not found by the primary walk.

The two results are combined by path identity and sorted by display path.
That sort is the only ordering guarantee; traversal order is not trusted.
"""

import logging
import os
import re
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

import pathspec

from ..utils.file_filter import VCS_DIRS, FileFilter
from ..utils.path_utils import PathUtils
from .models import AdmissionReason, Candidate, FilterConfig

logger = logging.getLogger(__name__)

GITIGNORE_NAME = '.gitignore'

# (directory it lives in, compiled rules)
IgnoreLayer = Tuple[str, pathspec.PathSpec]


class PathResolver:
    """Turns root paths into the candidate list for one run."""

    def __init__(self, config: FilterConfig, file_filter: Optional[FileFilter] = None,
                 chunked_output: bool = False):
        """
        Args:
            config: Traversal and filtering rules.
            file_filter: Shared filter, built from ``config`` when omitted.
            chunked_output: The run may split its output into numbered chunk
                files, which are then skipped along with the output file.
        """
        self.config = config
        self.file_filter = file_filter or FileFilter(config)
        self.errors: List[str] = []
        self._output_pattern = self._build_output_pattern(config.output_path, chunked_output)

    def resolve(self, roots: Sequence[str]) -> List[Candidate]:
        """
        Produce the sorted, duplicate-free candidate list for ``roots``.

        Args:
            roots: Directories or files, in the order given by the user.

        Returns:
            Candidates sorted lexicographically by display path.
        """
        primary = self._primary_walk(roots)
        rescued: Mapping[str, Candidate] = {}
        if self.config.has_overrides:
            rescued = self._override_walk(roots, primary)

        merged = {**rescued, **primary}
        candidates = sorted(merged.values(), key=lambda c: c.path)
        logger.debug(f"Resolved {len(candidates)} candidates ({len(rescued)} rescued by overrides)")
        return candidates

    def _primary_walk(self, roots: Sequence[str]) -> Dict[str, Candidate]:
        found: Dict[str, Candidate] = {}
        for root in roots:
            for display, abs_path in self._walk(root, respect_ignores=True):
                if abs_path in found or self._is_output(abs_path):
                    continue
                if self.file_filter.get_excluded_reason(display) is not None:
                    continue
                found[abs_path] = Candidate(display, abs_path, AdmissionReason.MATCHED)
        return found

    def _override_walk(self, roots: Sequence[str], primary: Mapping[str, Candidate]) -> Dict[str, Candidate]:
        found: Dict[str, Candidate] = {}
        for root in roots:
            for display, abs_path in self._walk(root, respect_ignores=False):
                if abs_path in primary or abs_path in found or self._is_output(abs_path):
                    continue
                if self.file_filter.is_excluded_by_pattern(display):
                    continue
                if self.file_filter.is_rescued(display):
                    found[abs_path] = Candidate(display, abs_path, AdmissionReason.RESCUED)
        return found

    def _walk(self, root: str, respect_ignores: bool) -> Iterator[Tuple[str, str]]:
        """
        Yield ``(display_path, absolute_path)`` for every file under ``root``.

        With ``respect_ignores`` the walk honours .gitignore layers (if
        enabled), skips hidden entries (unless configured) and prunes
        auto-excluded directories. Without it only VCS directories are
        pruned. Depth limits always apply.
        """
        root = os.path.normpath(root)
        if os.path.isfile(root):
            yield PathUtils.display_path(root), os.path.realpath(root)
            return
        if not os.path.isdir(root):
            self._warn(f"Could not process entry: {root}: no such file or directory")
            return

        max_depth = self.config.max_depth
        use_gitignore = respect_ignores and self.config.use_gitignore
        skip_hidden = respect_ignores and not self.config.include_hidden
        layers: Dict[str, List[IgnoreLayer]] = {}
        enclosing = self._enclosing_layers(root) if use_gitignore else []

        for dirpath, dirnames, filenames in os.walk(root, onerror=self._on_walk_error):
            rel_dir = os.path.relpath(dirpath, root)
            depth = 0 if rel_dir == os.curdir else PathUtils.depth_of(rel_dir)

            if depth == 0:
                current = list(enclosing)
            else:
                current = list(layers.get(os.path.dirname(dirpath), []))
            if use_gitignore:
                spec = self._load_gitignore(dirpath)
                if spec is not None:
                    current.append((dirpath, spec))
            layers[dirpath] = current

            kept_dirs = []
            # children of a directory at max_depth - 1 would hold files past the limit
            descend = max_depth is None or depth + 1 < max_depth
            for name in sorted(dirnames) if descend else []:
                if skip_hidden and self.file_filter.is_hidden(name):
                    continue
                if respect_ignores and self.file_filter.should_exclude_directory(name):
                    continue
                if name in VCS_DIRS:
                    continue
                if self._is_ignored(os.path.join(dirpath, name), current, is_dir=True):
                    continue
                kept_dirs.append(name)
            dirnames[:] = kept_dirs

            if max_depth is not None and depth + 1 > max_depth:
                continue
            for name in sorted(filenames):
                if skip_hidden and self.file_filter.is_hidden(name):
                    continue
                file_path = os.path.join(dirpath, name)
                if self._is_ignored(file_path, current, is_dir=False):
                    continue
                yield PathUtils.display_path(file_path), os.path.realpath(file_path)

    def _enclosing_layers(self, root: str) -> List[IgnoreLayer]:
        """
        .gitignore layers of the directories above ``root``, outermost first.

        Only directories inside the same repository count: the search stops
        at the first ancestor holding a VCS directory. A root that is not
        inside a repository gets no enclosing layers.
        """
        current = os.path.abspath(root)
        if self._is_repo_root(current):
            return []

        found: List[IgnoreLayer] = []
        parent = os.path.dirname(current)
        while parent != current:
            spec = self._load_gitignore(parent)
            if spec is not None:
                found.append((parent, spec))
            if self._is_repo_root(parent):
                found.reverse()
                return found
            current, parent = parent, os.path.dirname(parent)
        return []

    @staticmethod
    def _is_repo_root(dirpath: str) -> bool:
        return any(os.path.isdir(os.path.join(dirpath, name)) for name in VCS_DIRS)

    def _load_gitignore(self, dirpath: str) -> Optional[pathspec.PathSpec]:
        gitignore_path = os.path.join(dirpath, GITIGNORE_NAME)
        if not os.path.isfile(gitignore_path):
            return None
        try:
            with open(gitignore_path, 'r', encoding='utf-8', errors='replace') as fh:
                return pathspec.GitIgnoreSpec.from_lines(fh)
        except (OSError, ValueError) as e:
            self._warn(f"Could not read {gitignore_path}: {e}")
            return None

    @staticmethod
    def _is_ignored(path: str, layers: List[IgnoreLayer], is_dir: bool) -> bool:
        """A path is ignored if any enclosing .gitignore layer matches it."""
        for base, spec in layers:
            rel = PathUtils.normalize_path(os.path.relpath(path, base))
            if is_dir:
                rel += '/'
            if spec.match_file(rel):
                return True
        return False

    def _on_walk_error(self, error: OSError) -> None:
        self._warn(f"Could not process entry: {error.filename}: {error.strerror or error}")

    def _warn(self, message: str) -> None:
        # collected messages are reported once by the caller
        logger.debug(message)
        self.errors.append(message)

    @staticmethod
    def _build_output_pattern(output_path: Optional[str], chunked: bool) -> Optional[re.Pattern]:
        """
        Match the output file, and with ``chunked`` also the chunk names
        ``chunk_path`` produces (``out_001.txt``, ``out_1500.txt``).
        """
        if not output_path:
            return None
        real = os.path.realpath(output_path)
        if not chunked:
            return re.compile(re.escape(real))
        stem, ext = os.path.splitext(real)
        return re.compile(re.escape(stem) + r'(_\d{3,})?' + re.escape(ext))

    def _is_output(self, abs_path: str) -> bool:
        if self._output_pattern is None:
            return False
        if self._output_pattern.fullmatch(abs_path):
            logger.debug(f"Skipping output destination {abs_path}")
            return True
        return False
