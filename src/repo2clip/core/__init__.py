"""Core components for repo2clip."""

from .errors import ConfigurationError, OutputError, Repo2ClipError
from .models import (
    Budget,
    Candidate,
    Config,
    ExtractionResult,
    FilterConfig,
    LoadedFile,
    OutputTarget,
    RenderOptions,
    RenderedArtifact,
    SkipReason,
)
from .tokenizer import TokenCounter, estimate_tokens

__all__ = [
    "Budget",
    "Candidate",
    "Config",
    "ConfigurationError",
    "ExtractionResult",
    "FilterConfig",
    "LoadedFile",
    "OutputError",
    "OutputTarget",
    "RenderOptions",
    "RenderedArtifact",
    "Repo2ClipError",
    "SkipReason",
    "TokenCounter",
    "estimate_tokens",
]
