"""
Core data models for repo2clip.

This module contains the configuration objects supplied once per run, the
records that flow between pipeline stages (candidates, loaded files, skips),
and the final extraction and rendering results.
"""

import os
import re
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Literal, Optional, Tuple

from .errors import ConfigurationError


# Patterns that are excluded no matter what the user asks for
ALWAYS_EXCLUDED: Tuple[str, ...] = ('.env',)

_EXTENSION_TOKEN = re.compile(r'^[A-Za-z0-9_+\-]+(\.[A-Za-z0-9_+\-]+)*$')

Layout = Literal['plain', 'markdown', 'json']
LAYOUTS: Tuple[str, ...] = ('plain', 'markdown', 'json')


def normalize_extensions(tokens: Iterable[str]) -> FrozenSet[str]:
    """
    Turn user-supplied extension tokens into a canonical set.

    Accepts ``py``, ``.py`` and ``PY`` alike; rejects anything that is not a
    plain extension (``*.py``, ``a/b``, empty tokens).

    Raises:
        ConfigurationError: If a token is malformed.
    """
    result = set()
    for token in tokens:
        cleaned = token.strip().lstrip('.')
        if not cleaned or not _EXTENSION_TOKEN.match(cleaned):
            raise ConfigurationError(f"Invalid file type filter: {token!r}")
        result.add(cleaned.lower())
    return frozenset(result)


def check_glob(pattern: str) -> None:
    """
    Reject glob patterns that cannot be compiled sensibly.

    Raises:
        ConfigurationError: For empty patterns, negations and unbalanced
            character classes.
    """
    if not pattern or not pattern.strip():
        raise ConfigurationError("Invalid glob pattern: empty pattern")
    if pattern.startswith('!'):
        raise ConfigurationError(f"Invalid glob pattern {pattern!r}: negation is not supported")

    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == '\\':
            i += 2
            continue
        if char == '[':
            j = i + 1
            if j < len(pattern) and pattern[j] in '!^':
                j += 1
            if j < len(pattern) and pattern[j] == ']':
                j += 1
            while j < len(pattern) and pattern[j] != ']':
                j += 1
            if j >= len(pattern):
                raise ConfigurationError(f"Invalid glob pattern {pattern!r}: unclosed '['")
            i = j
        i += 1


@dataclass(frozen=True)
class FilterConfig:
    """Traversal and filtering rules. Immutable once the run starts."""

    max_depth: Optional[int] = None
    use_gitignore: bool = True
    unignore: Tuple[str, ...] = ()
    exclude_patterns: Tuple[str, ...] = ALWAYS_EXCLUDED
    include_extensions: FrozenSet[str] = frozenset()
    exclude_extensions: FrozenSet[str] = frozenset()
    auto_exclude: bool = True
    skip_empty: bool = False
    include_hidden: bool = False
    output_path: Optional[str] = None

    def __post_init__(self):
        # .env never leaves the machine, whatever the caller passed
        patterns = tuple(self.exclude_patterns)
        for pattern in ALWAYS_EXCLUDED:
            if pattern not in patterns:
                patterns += (pattern,)
        object.__setattr__(self, 'exclude_patterns', patterns)
        object.__setattr__(self, 'unignore', tuple(self.unignore))

    def validate(self) -> None:
        """Raise ConfigurationError if any rule is malformed."""
        if self.max_depth is not None and self.max_depth < 0:
            raise ConfigurationError(f"Depth must be non-negative (got {self.max_depth})")
        for pattern in self.unignore:
            check_glob(pattern)
        for pattern in self.exclude_patterns:
            check_glob(pattern)
        normalize_extensions(self.include_extensions)
        normalize_extensions(self.exclude_extensions)

    @property
    def has_overrides(self) -> bool:
        return bool(self.unignore)


@dataclass(frozen=True)
class Budget:
    """Ceilings on the cumulative size of the admitted file set."""

    max_bytes: Optional[int] = None
    max_tokens: Optional[int] = None

    def validate(self) -> None:
        if self.max_bytes is not None and self.max_bytes <= 0:
            raise ConfigurationError(f"Byte budget must be positive (got {self.max_bytes})")
        if self.max_tokens is not None and self.max_tokens <= 0:
            raise ConfigurationError(f"Token budget must be positive (got {self.max_tokens})")


@dataclass
class RenderOptions:
    """How the admitted files are laid out in the artifact."""

    layout: Layout = 'plain'
    structure: bool = False
    dependencies: bool = False
    group: bool = False
    compress: bool = False
    structure_depth: int = 3

    def validate(self) -> None:
        if self.layout not in LAYOUTS:
            raise ConfigurationError(
                f"Unknown output layout {self.layout!r} (expected one of {', '.join(LAYOUTS)})"
            )
        if self.structure_depth < 1:
            raise ConfigurationError("Structure depth must be at least 1")


@dataclass
class OutputTarget:
    """Where the artifact goes. No path means the clipboard."""

    path: Optional[str] = None
    chunk_size: Optional[int] = None
    append: bool = False

    @property
    def is_clipboard(self) -> bool:
        return self.path is None

    def validate(self) -> None:
        if self.chunk_size is not None and self.chunk_size <= 0:
            raise ConfigurationError(f"Chunk size must be positive (got {self.chunk_size})")
        if self.is_clipboard and (self.chunk_size or self.append):
            raise ConfigurationError("Chunking and append mode require an output file")


@dataclass
class Config:
    """Configuration settings for one repo2clip run."""

    filters: FilterConfig = field(default_factory=FilterConfig)
    budget: Budget = field(default_factory=Budget)
    render: RenderOptions = field(default_factory=RenderOptions)
    output: OutputTarget = field(default_factory=OutputTarget)

    jobs: int = 1  # 1 means sequential extraction
    encoding: Optional[str] = None  # tiktoken encoding name, None for the heuristic
    encoding_fallbacks: Tuple[str, ...] = ('utf-8',)
    show_progress: bool = True

    def validate(self) -> None:
        """Validate every section. Called before any filesystem work."""
        if self.jobs < 1:
            raise ConfigurationError(f"Worker count must be at least 1 (got {self.jobs})")
        if not self.encoding_fallbacks:
            raise ConfigurationError("At least one text encoding is required")
        self.filters.validate()
        self.budget.validate()
        self.render.validate()
        self.output.validate()


class AdmissionReason(Enum):
    """Why a path became a candidate."""
    MATCHED = "matched"    # passed the normal inclusion rules
    RESCUED = "rescued"    # ignored by VCS rules, re-included by an override pattern


class SkipReason(Enum):
    """Why a candidate did not make it into the artifact."""
    BINARY = "binary"
    ENCODING_ERROR = "encoding error"
    EMPTY = "empty"
    UNREADABLE = "unreadable"
    BUDGET = "budget exceeded"


@dataclass(frozen=True)
class Candidate:
    """A file path that survived traversal and filtering."""

    path: str          # display path, unique within a run
    abs_path: str
    reason: AdmissionReason = AdmissionReason.MATCHED

    @property
    def name(self) -> str:
        return os.path.basename(self.path)


@dataclass(frozen=True)
class LoadedFile:
    """Normalized text content of one admitted (or admissible) file."""

    path: str
    content: str
    byte_size: int
    token_count: int

    @property
    def extension(self) -> str:
        """Lower-cased extension without the dot, or '' when there is none."""
        return os.path.splitext(self.path)[1].lstrip('.').lower()


@dataclass(frozen=True)
class FileSkip:
    """A candidate excluded from the result, with the reason."""

    path: str
    reason: SkipReason
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.path}: {self.reason.value} ({self.detail})"
        return f"{self.path}: {self.reason.value}"


@dataclass
class ExtensionStats:
    files: int = 0
    bytes: int = 0
    tokens: int = 0


@dataclass
class ExtractionResult:
    """Admitted files in path order plus everything that was left out."""

    files: List[LoadedFile] = field(default_factory=list)
    skipped: List[FileSkip] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def total_bytes(self) -> int:
        return sum(f.byte_size for f in self.files)

    @property
    def total_tokens(self) -> int:
        return sum(f.token_count for f in self.files)

    def has_errors(self) -> bool:
        """Check if any user-visible problems occurred during extraction."""
        return len(self.errors) > 0

    def extension_breakdown(self) -> Dict[str, ExtensionStats]:
        """Per-extension totals, keyed by extension ('' for none), sorted by key."""
        stats: Dict[str, ExtensionStats] = defaultdict(ExtensionStats)
        for loaded in self.files:
            entry = stats[loaded.extension]
            entry.files += 1
            entry.bytes += loaded.byte_size
            entry.tokens += loaded.token_count
        return dict(sorted(stats.items()))


@dataclass(frozen=True)
class RenderedArtifact:
    """The final text plus its derived size totals."""

    text: str
    token_count: int

    @property
    def data(self) -> bytes:
        return self.text.encode('utf-8')

    @property
    def byte_size(self) -> int:
        return len(self.data)


@dataclass
class FileNode:
    """Represents a file or directory in the structure section."""

    path: str
    name: str
    type: str  # 'file' or 'dir'
    children: List['FileNode'] = field(default_factory=list)
    truncated: bool = False  # directory deeper than the structure depth

    def is_file(self) -> bool:
        return self.type == 'file'

    def is_directory(self) -> bool:
        return self.type == 'dir'
