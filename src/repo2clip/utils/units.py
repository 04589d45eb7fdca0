"""Human-readable size parsing and formatting."""

from typing import Optional

from ..core.errors import ConfigurationError

_MULTIPLIERS = {"k": 1024, "m": 1024 ** 2, "g": 1024 ** 3}


def parse_size(size_str: Optional[str], what: str = "size") -> Optional[int]:
    """
    Parse ``"1500"``, ``"64K"``, ``"2m"`` or ``"1G"`` into a byte count.

    Args:
        size_str: The string to parse. None passes through.
        what: Name of the option, used in error messages.

    Raises:
        ConfigurationError: For unparsable, zero or negative sizes.
    """
    if size_str is None:
        return None

    text = str(size_str).strip().lower()
    if text.endswith("b") and len(text) > 1 and text[-2] in _MULTIPLIERS:
        text = text[:-1]  # accept "64kb"

    try:
        if text and text[-1] in _MULTIPLIERS:
            value = int(text[:-1]) * _MULTIPLIERS[text[-1]]
        else:
            value = int(text)
    except ValueError:
        raise ConfigurationError(f"Invalid {what}: {size_str!r}") from None

    if value <= 0:
        raise ConfigurationError(f"Invalid {what}: {size_str!r} (must be positive)")
    return value


def format_size(num_bytes: int) -> str:
    """Format a byte count for the run summary."""
    size = float(num_bytes)
    for unit in ("B", "KB", "MB"):
        if size < 1024 or unit == "MB":
            return f"{int(size)} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} MB"
