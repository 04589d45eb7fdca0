"""
Encoding detection and text normalization utilities.

This module classifies raw bytes as binary or text, decodes text with a
configurable list of encodings, and normalizes decoded text (BOM removal,
CRLF to LF) so every loaded file looks the same downstream.
"""

import logging
from typing import Optional, List, Sequence, Tuple


# Bytes inspected by the binary classifier
BINARY_SAMPLE_SIZE = 1024

# Share of control characters above which a sample counts as binary
CONTROL_CHAR_RATIO = 0.3

DEFAULT_ENCODINGS = ('utf-8',)

# UTF-16/32 text contains null bytes and is classified binary before decoding
_BOMS = (
    (b'\xef\xbb\xbf', 'utf-8-sig'),
)

# Set up module logger
logger = logging.getLogger(__name__)


class EncodingDetector:
    """Handles binary classification, decoding and normalization."""

    def __init__(self, fallback_encodings: Optional[Sequence[str]] = None):
        """
        Initialize the encoding detector.

        Args:
            fallback_encodings: Encodings to try in order. Defaults to UTF-8 only.
        """
        self.encodings: List[str] = list(fallback_encodings or DEFAULT_ENCODINGS)

    @staticmethod
    def is_likely_binary(content: bytes, sample_size: int = BINARY_SAMPLE_SIZE) -> bool:
        """
        Classify content as binary from its first bytes.

        A sample is binary if it contains a null byte, or if more than 30% of
        its bytes are control characters other than tab, newline and carriage
        return.
        """
        sample = content[:sample_size]
        if not sample:
            return False

        if b'\x00' in sample:
            return True

        non_printable = 0
        for byte in sample:
            if byte < 32 and byte not in (9, 10, 13):  # tab, newline, carriage return
                non_printable += 1

        return non_printable > len(sample) * CONTROL_CHAR_RATIO

    @staticmethod
    def has_bom(content: bytes) -> Tuple[bool, Optional[str]]:
        """
        Check if content starts with a Byte Order Mark (BOM).

        Returns:
            Tuple of (has_bom, encoding_name).
        """
        for bom, encoding in _BOMS:
            if content.startswith(bom):
                return True, encoding
        return False, None

    def decode_bytes(self, content: bytes, file_path: Optional[str] = None) -> Tuple[Optional[str], Optional[str], Optional[str]]:
        """
        Attempt to decode bytes to string.

        A BOM, when present, decides the encoding. Otherwise each configured
        encoding is tried in order.

        Returns:
            Tuple of (decoded_text, encoding_used, error_message).
            If successful: (text, encoding, None)
            If failed: (None, None, error_message)
        """
        has_bom, bom_encoding = self.has_bom(content)
        if has_bom:
            try:
                decoded = content.decode(bom_encoding)
                logger.debug(f"Decoded {file_path} using BOM-detected {bom_encoding}")
                return decoded, bom_encoding, None
            except UnicodeDecodeError as e:
                logger.debug(f"BOM decode failed for {file_path}: {e}")

        last_error = None
        for encoding in self.encodings:
            try:
                decoded = content.decode(encoding)
                logger.debug(f"Decoded {file_path} using {encoding}")
                return decoded, encoding, None
            except UnicodeDecodeError as e:
                last_error = e

        error_msg = f"not valid {'/'.join(self.encodings)}"
        if last_error is not None:
            error_msg += f" (failed at byte {last_error.start})"
        return None, None, error_msg

    @staticmethod
    def normalize_text(text: str) -> str:
        """
        Strip a leading BOM and convert CRLF line endings to LF.

        Idempotent: normalizing already-normalized text returns it unchanged.
        """
        if text.startswith('\ufeff'):
            text = text[1:]
        return text.replace('\r\n', '\n')
