"""Exceptions raised by repo2clip.

Only run-fatal conditions are raised. Per-file problems (binary content,
decode failures, budget rejections) are recorded on the extraction result
and never surface as exceptions.
"""


class Repo2ClipError(Exception):
    """Base class for all run-fatal errors."""


class ConfigurationError(Repo2ClipError, ValueError):
    """Invalid pattern, extension token, size string, budget or layout."""


class OutputError(Repo2ClipError):
    """The destination cannot be written (unwritable path, no clipboard)."""
