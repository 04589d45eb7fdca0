"""Output layouts for repo2clip."""

from ..core.errors import ConfigurationError
from ..core.models import RenderOptions
from ..core.tokenizer import TokenCounter
from ..utils.file_filter import FileFilter
from .base import Document, FileEntry, FileGroup, Formatter
from .layouts import JsonFormatter, MarkdownFormatter, PlainFormatter

FORMATTERS = {
    'plain': PlainFormatter,
    'markdown': MarkdownFormatter,
    'json': JsonFormatter,
}


def create_formatter(options: RenderOptions, file_filter: FileFilter, token_counter: TokenCounter) -> Formatter:
    """
    Create the formatter for ``options.layout``.

    Raises:
        ConfigurationError: If the layout is unknown.
    """
    formatter_cls = FORMATTERS.get(options.layout)
    if formatter_cls is None:
        raise ConfigurationError(f"Unknown output layout: {options.layout!r}")
    return formatter_cls(options, file_filter, token_counter)


__all__ = [
    'Document', 'FileEntry', 'FileGroup', 'Formatter',
    'PlainFormatter', 'MarkdownFormatter', 'JsonFormatter',
    'FORMATTERS', 'create_formatter',
]
