"""
Base formatter interface.

Every layout shares one pass over the admitted files that produces a
layout-agnostic Document. Concrete formatters only serialize that record.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..core.models import LoadedFile, RenderOptions, RenderedArtifact
from ..core.tokenizer import TokenCounter
from ..utils.file_filter import FileFilter
from .compression import compress_text
from .sections import ManifestDependencies, build_structure, collect_dependencies
from .tables import category_for, language_for


@dataclass
class FileEntry:
    path: str
    content: str
    tokens: int
    bytes: int
    language: str
    category: str


@dataclass
class FileGroup:
    name: Optional[str]  # None when grouping is off
    files: List[FileEntry] = field(default_factory=list)


@dataclass
class Document:
    """Everything a layout needs, in render order."""

    groups: List[FileGroup]
    structure: Optional[str] = None
    dependencies: Optional[List[ManifestDependencies]] = None

    @property
    def files(self) -> List[FileEntry]:
        return [entry for group in self.groups for entry in group.files]

    @property
    def is_grouped(self) -> bool:
        return any(group.name is not None for group in self.groups)

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def total_bytes(self) -> int:
        return sum(entry.bytes for entry in self.files)

    @property
    def total_tokens(self) -> int:
        return sum(entry.tokens for entry in self.files)


class Formatter(ABC):
    """
    Abstract base class for output layouts.

    Subclasses implement ``serialize``; ``format`` handles the shared
    pre-processing (structure, dependencies, grouping, compression).
    """

    def __init__(self, options: RenderOptions, file_filter: FileFilter, token_counter: TokenCounter):
        self.options = options
        self.file_filter = file_filter
        self.token_counter = token_counter

    def format(self, files: Sequence[LoadedFile], roots: Sequence[str]) -> RenderedArtifact:
        """Render admitted files (in path order) into an artifact."""
        document = self.build_document(files, roots)
        text = self.serialize(document)
        return RenderedArtifact(text=text, token_count=self.token_counter.count(text))

    def build_document(self, files: Sequence[LoadedFile], roots: Sequence[str]) -> Document:
        entries = [self._entry(loaded) for loaded in files]

        if self.options.group:
            buckets: Dict[str, List[FileEntry]] = defaultdict(list)
            for entry in entries:
                buckets[entry.category].append(entry)
            ordered = sorted(buckets.items(), key=lambda item: (item[0], -len(item[1])))
            groups = [FileGroup(name, members) for name, members in ordered]
        else:
            groups = [FileGroup(None, entries)]

        structure = None
        if self.options.structure:
            structure = build_structure(roots, self.file_filter, self.options.structure_depth)

        dependencies = collect_dependencies(roots) if self.options.dependencies else None
        return Document(groups=groups, structure=structure, dependencies=dependencies)

    def _entry(self, loaded: LoadedFile) -> FileEntry:
        content, tokens, size = loaded.content, loaded.token_count, loaded.byte_size
        if self.options.compress:
            content = compress_text(content)
            tokens = self.token_counter.count(content)
            size = len(content.encode('utf-8'))
        return FileEntry(
            path=loaded.path,
            content=content,
            tokens=tokens,
            bytes=size,
            language=language_for(loaded.path),
            category=category_for(loaded.path),
        )

    @abstractmethod
    def serialize(self, document: Document) -> str:
        """Turn the document into the final text."""
        pass
