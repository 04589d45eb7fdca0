"""Delivery of the rendered artifact to the clipboard or to disk."""

import logging
import os
from typing import List, Optional

import pyperclip

from .errors import OutputError
from .models import OutputTarget, RenderedArtifact

logger = logging.getLogger(__name__)

CLIPBOARD = "clipboard"


def split_chunks(data: bytes, chunk_size: int) -> List[bytes]:
    """
    Split ``data`` into ``chunk_size``-byte pieces (the last may be shorter).

    Concatenating the pieces in order gives back ``data`` exactly. Splits
    are made on byte boundaries, so a multi-byte character may straddle two
    chunks.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if not data:
        return [b""]
    return [data[i:i + chunk_size] for i in range(0, len(data), chunk_size)]


def chunk_path(path: str, index: int, total: int) -> str:
    """``out.txt`` -> ``out_001.txt``; the suffix grows past three digits if needed."""
    stem, ext = os.path.splitext(path)
    width = max(3, len(str(total)))
    return f"{stem}_{index:0{width}d}{ext}"


class OutputSink:
    """Writes an artifact to the configured destination."""

    def __init__(self, target: OutputTarget):
        self.target = target

    def check_writable(self) -> None:
        """
        Fail early if the destination cannot be written.

        Raises:
            OutputError: If the output path is a directory or its parent
                directory is missing or read-only.
        """
        if self.target.is_clipboard:
            return
        path = self.target.path
        if os.path.isdir(path):
            raise OutputError(f"Output path is a directory: {path}")
        parent = os.path.dirname(os.path.abspath(path))
        if not os.path.isdir(parent):
            raise OutputError(f"Output directory does not exist: {parent}")
        if not os.access(parent, os.W_OK):
            raise OutputError(f"Output directory is not writable: {parent}")
        if os.path.exists(path) and not os.access(path, os.W_OK):
            raise OutputError(f"Output file is not writable: {path}")

    def deliver(self, artifact: RenderedArtifact) -> List[str]:
        """
        Deliver the artifact.

        Returns:
            The written file paths, or ``["clipboard"]``.

        Raises:
            OutputError: If the clipboard or a file cannot be written.
        """
        if self.target.is_clipboard:
            self._write_clipboard(artifact.text)
            return [CLIPBOARD]
        return self._write_files(artifact.data)

    @staticmethod
    def _write_clipboard(text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            raise OutputError(f"Clipboard unavailable: {e}") from e
        logger.debug(f"Copied {len(text):,} characters to clipboard")

    def _write_files(self, data: bytes) -> List[str]:
        chunk_size: Optional[int] = self.target.chunk_size
        if chunk_size and len(data) > chunk_size:
            chunks = split_chunks(data, chunk_size)
            paths = [chunk_path(self.target.path, i, len(chunks)) for i in range(1, len(chunks) + 1)]
        else:
            chunks = [data]
            paths = [self.target.path]

        mode = 'ab' if self.target.append else 'wb'
        for path, chunk in zip(paths, chunks):
            try:
                with open(path, mode) as f:
                    f.write(chunk)
            except OSError as e:
                raise OutputError(f"Cannot write {path}: {e.strerror or e}") from e
            logger.debug(f"Wrote {len(chunk):,} bytes to {path}")
        return paths
