"""repo2clip - pack a directory tree into one bounded text artifact."""

__version__ = "1.0.0"
