"""
Extraction stage: load candidates and admit them against the budget.

Loading runs on a thread pool when more than one worker is configured.
Budget admission always happens afterwards, on the calling thread, in
candidate (sorted path) order. Which files are admitted near a budget edge
therefore does not depend on the number of workers or on scheduling.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn

from .budget import BudgetTracker
from .file_analyzer import FileAnalyzer
from .models import Candidate, ExtractionResult, FileSkip, LoadedFile, SkipReason

logger = logging.getLogger(__name__)

LoadOutcome = Tuple[Optional[LoadedFile], Optional[FileSkip]]


class Extractor:
    """Drives the FileAnalyzer and BudgetTracker over a candidate list."""

    def __init__(self, file_analyzer: FileAnalyzer, budget_tracker: BudgetTracker,
                 jobs: int = 1, console: Optional[Console] = None, show_progress: bool = False):
        self.file_analyzer = file_analyzer
        self.budget_tracker = budget_tracker
        self.jobs = max(1, jobs)
        self.console = console
        self.show_progress = show_progress

    def extract(self, candidates: Sequence[Candidate]) -> ExtractionResult:
        """
        Load every candidate and admit those that fit the budget.

        Args:
            candidates: Candidates in sorted path order.

        Returns:
            ExtractionResult whose files are sorted by path.
        """
        result = ExtractionResult()
        if not candidates:
            return result

        if self.show_progress:
            with Progress(
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
                TextColumn("{task.completed}/{task.total}"),
                TimeElapsedColumn(),
                console=self.console,
                transient=True,
            ) as progress:
                task = progress.add_task("Reading files", total=len(candidates))
                outcomes = self._load_all(candidates, lambda: progress.advance(task))
                self._admit(outcomes, result)
        else:
            self._admit(self._load_all(candidates), result)

        result.files.sort(key=lambda f: f.path)
        return result

    def _load_all(self, candidates: Sequence[Candidate],
                  on_done: Optional[Callable[[], None]] = None) -> Iterator[LoadOutcome]:
        """Yield load outcomes in candidate order, however they were scheduled."""
        def load(candidate: Candidate) -> LoadOutcome:
            return self.file_analyzer.load(candidate)

        if self.jobs == 1 or len(candidates) == 1:
            for candidate in candidates:
                outcome = load(candidate)
                if on_done:
                    on_done()
                yield outcome
            return

        with ThreadPoolExecutor(max_workers=min(self.jobs, len(candidates))) as pool:
            for outcome in pool.map(load, candidates):
                if on_done:
                    on_done()
                yield outcome

    def _admit(self, outcomes: Iterator[LoadOutcome], result: ExtractionResult) -> None:
        for loaded, skip in outcomes:
            if skip is not None:
                self._record_skip(skip, result)
                continue
            if self.budget_tracker.try_reserve(loaded.byte_size, loaded.token_count):
                result.files.append(loaded)
            else:
                detail = f"{loaded.byte_size:,} bytes, ~{loaded.token_count:,} tokens"
                self._record_skip(FileSkip(loaded.path, SkipReason.BUDGET, detail), result)

    @staticmethod
    def _record_skip(skip: FileSkip, result: ExtractionResult) -> None:
        result.skipped.append(skip)
        if skip.reason is SkipReason.BINARY:
            # expected, not worth the user's attention
            logger.debug(f"Skipping binary file {skip.path}")
            return
        # reported once by the caller from result.errors
        logger.debug(f"Skipping {skip}")
        result.errors.append(str(skip))
