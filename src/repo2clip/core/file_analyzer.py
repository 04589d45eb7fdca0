"""
File analysis module for repo2clip.

This module handles individual file loading:
- Binary classification from the leading bytes
- Decoding with configured encodings
- Normalization (BOM removal, CRLF to LF)
- Size and token measurement

It holds no shared state, so one FileAnalyzer can serve many worker threads.
"""

import logging
from typing import Optional, Tuple

from ..utils.encodings import EncodingDetector
from .models import Candidate, FileSkip, LoadedFile, SkipReason
from .tokenizer import TokenCounter

logger = logging.getLogger(__name__)


class FileAnalyzer:
    """Loads one candidate into a LoadedFile, or explains why it cannot."""

    def __init__(self, token_counter: TokenCounter, encoding_detector: Optional[EncodingDetector] = None,
                 skip_empty: bool = False):
        self.token_counter = token_counter
        self.encoding_detector = encoding_detector or EncodingDetector()
        self.skip_empty = skip_empty

    def read_bytes(self, file_path: str) -> bytes:
        with open(file_path, 'rb') as f:
            return f.read()

    def load(self, candidate: Candidate) -> Tuple[Optional[LoadedFile], Optional[FileSkip]]:
        """
        Read, classify and normalize a candidate file.

        Returns:
            Tuple of (loaded_file, skip).
            If successful, skip is None; otherwise loaded_file is None and
            skip says why (binary, encoding error, empty, unreadable).
        """
        try:
            raw_content = self.read_bytes(candidate.abs_path)
        except OSError as e:
            return None, FileSkip(candidate.path, SkipReason.UNREADABLE, e.strerror or str(e))

        if self.encoding_detector.is_likely_binary(raw_content):
            return None, FileSkip(candidate.path, SkipReason.BINARY)

        text, _, error = self.encoding_detector.decode_bytes(raw_content, candidate.path)
        if text is None:
            return None, FileSkip(candidate.path, SkipReason.ENCODING_ERROR, error or "")

        content = self.encoding_detector.normalize_text(text)
        if self.skip_empty and not content.strip():
            return None, FileSkip(candidate.path, SkipReason.EMPTY)

        loaded = LoadedFile(
            path=candidate.path,
            content=content,
            byte_size=len(content.encode('utf-8')),
            token_count=self.token_counter.count(content),
        )
        return loaded, None
