"""
Token estimation for repo2clip.

Budgets and reports work on an approximate token count. The default
estimator is a deterministic character-class heuristic; an exact tiktoken
encoding can be selected instead. Either way the result is kept inside
``[ceil(chars / 6), 2 * chars]`` so budget behaviour stays predictable.
"""

import logging
from typing import Dict, Optional, Any

import tiktoken

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# Weights are in twelfths of a token per character
_UNIT = 12
_WORD_WEIGHT = 3        # ASCII letters and digits, ~4 chars per token
_SPACE_WEIGHT = 2       # whitespace mostly merges into neighbouring tokens
_PUNCT_WEIGHT = 6       # punctuation often stands alone
_NON_ASCII_WEIGHT = 12  # CJK and friends are roughly one token each
_DENSE_EXTRA = 3        # added per char inside a run of brackets/operators
_DENSE_RUN = 3

_DENSE_CHARS = frozenset('{}[]()<>=+-*/%&|^!~?:;,.')


def token_bounds(char_count: int) -> tuple:
    """Inclusive (low, high) bounds every estimate must respect."""
    if char_count == 0:
        return 0, 0
    return -(-char_count // 6), 2 * char_count


def _clamp(value: int, char_count: int) -> int:
    low, high = token_bounds(char_count)
    return max(low, min(high, value))


def estimate_tokens(text: str) -> int:
    """
    Estimate the token count of ``text`` without an encoder.

    Pure and deterministic. Letters, whitespace, punctuation and non-ASCII
    characters are weighted separately, and runs of three or more
    bracket/operator characters (typical of dense code) cost extra.
    """
    if not text:
        return 0

    units = 0
    run = 0
    for char in text:
        if char in _DENSE_CHARS:
            run += 1
            units += _PUNCT_WEIGHT
            if run == _DENSE_RUN:
                units += _DENSE_EXTRA * _DENSE_RUN
            elif run > _DENSE_RUN:
                units += _DENSE_EXTRA
            continue
        run = 0
        if ord(char) > 127:
            units += _NON_ASCII_WEIGHT
        elif char.isalnum() or char == '_':
            units += _WORD_WEIGHT
        elif char.isspace():
            units += _SPACE_WEIGHT
        else:
            units += _PUNCT_WEIGHT

    return _clamp(-(-units // _UNIT), len(text))


class TokenCounter:
    """
    Counts tokens for text content.

    Without an encoding name the heuristic estimator is used. With one, the
    named tiktoken encoding is loaded up front and its counts are clamped to
    the same bounds as the heuristic.
    """

    def __init__(self, encoding_name: Optional[str] = None):
        """
        Initialize the token counter.

        Args:
            encoding_name: tiktoken encoding to use (e.g. ``cl100k_base``),
                or None for the built-in estimator.

        Raises:
            ConfigurationError: If the encoding cannot be loaded.
        """
        self.encoding_name = encoding_name
        self.encoder: Optional[Any] = None

        if encoding_name:
            try:
                self.encoder = tiktoken.get_encoding(encoding_name)
            except Exception as e:
                raise ConfigurationError(
                    f"Failed to initialize token encoder '{encoding_name}': {e}"
                ) from e

    @property
    def is_exact(self) -> bool:
        """True when counts come from a real tokenizer."""
        return self.encoder is not None

    def count(self, text: str) -> int:
        """
        Count tokens in the given text.

        Args:
            text: The text to count tokens for.

        Returns:
            Number of tokens, always within the estimator bounds.
        """
        if not text:
            return 0
        if self.encoder is None:
            return estimate_tokens(text)

        tokens = len(self.encoder.encode(text, disallowed_special=()))
        return _clamp(tokens, len(text))

    def count_batch(self, texts: Dict[str, str]) -> Dict[str, int]:
        """Count tokens for multiple texts, keyed like the input."""
        return {key: self.count(text) for key, text in texts.items()}
