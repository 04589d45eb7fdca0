"""Main pipeline: resolve -> extract -> format -> deliver."""

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence

from rich.console import Console

from ..formatters import create_formatter
from ..utils.encodings import EncodingDetector
from ..utils.file_filter import FileFilter
from .budget import BudgetTracker
from .extractor import Extractor
from .file_analyzer import FileAnalyzer
from .models import Config, ExtractionResult, RenderedArtifact
from .output import OutputSink
from .resolver import PathResolver
from .tokenizer import TokenCounter

logger = logging.getLogger(__name__)


@dataclass
class PackResult:
    """Everything one run produced, for delivery and the summary."""

    roots: List[str]
    candidate_count: int
    extraction: ExtractionResult
    artifact: Optional[RenderedArtifact] = None
    errors: List[str] = field(default_factory=list)
    destinations: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.extraction.total_files == 0

    def has_errors(self) -> bool:
        return len(self.errors) > 0


class RepositoryPacker:
    """
    Runs the whole pipeline for one invocation.

    All configuration is validated, and the destination checked, in the
    constructor so that a run-fatal error surfaces before any file is read
    or written.
    """

    def __init__(self, config: Config, console: Optional[Console] = None):
        config.validate()
        self.config = config
        self.console = console
        self.token_counter = TokenCounter(config.encoding)
        self.file_filter = FileFilter(config.filters)
        self.formatter = create_formatter(config.render, self.file_filter, self.token_counter)
        self.sink = OutputSink(config.output)
        self.sink.check_writable()

    def pack(self, roots: Sequence[str]) -> PackResult:
        """
        Resolve, extract and render ``roots``. Does not deliver.

        Returns:
            PackResult; ``artifact`` is None when no file was admitted.
        """
        roots = list(roots)
        filters = self.config.filters
        if filters.output_path is None and self.config.output.path:
            filters = replace(filters, output_path=self.config.output.path)
        resolver = PathResolver(
            filters,
            self.file_filter,
            chunked_output=self.config.output.chunk_size is not None,
        )
        candidates = resolver.resolve(roots)

        analyzer = FileAnalyzer(
            self.token_counter,
            EncodingDetector(self.config.encoding_fallbacks),
            skip_empty=self.config.filters.skip_empty,
        )
        extractor = Extractor(
            analyzer,
            BudgetTracker(self.config.budget),
            jobs=self.config.jobs,
            console=self.console,
            show_progress=self.config.show_progress and self.console is not None,
        )
        extraction = extractor.extract(candidates)

        result = PackResult(
            roots=roots,
            candidate_count=len(candidates),
            extraction=extraction,
            errors=resolver.errors + extraction.errors,
        )
        if not result.is_empty:
            result.artifact = self.formatter.format(extraction.files, roots)
        logger.debug(
            f"Admitted {extraction.total_files}/{len(candidates)} candidates, "
            f"{extraction.total_bytes:,} bytes"
        )
        return result

    def deliver(self, result: PackResult) -> List[str]:
        """Write the artifact to its destination. No-op for an empty result."""
        if result.artifact is None:
            return []
        result.destinations = self.sink.deliver(result.artifact)
        return result.destinations

    def run(self, roots: Sequence[str]) -> PackResult:
        result = self.pack(roots)
        self.deliver(result)
        return result
