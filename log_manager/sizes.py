"""Size string helpers shared by the configurators and the UI."""

from typing import Optional

SIZE_UNITS = {"K": 1024**1, "M": 1024**2, "G": 1024**3, "T": 1024**4, "P": 1024**5}


def size_to_bytes(size_str: str) -> int:
    """
    Convert a human-readable size string (e.g., '5m', '100M', '1G') to bytes.

    Units are binary multiples and case-insensitive, so Docker's '10m' and
    journald's '10M' are the same size.

    Args:
        size_str: The size string.

    Returns:
        Size in bytes.

    Raises:
        ValueError: If the size cannot be parsed.
    """
    text = size_str.upper().strip()
    if text.endswith("B") and len(text) > 1 and text[-2] in SIZE_UNITS:
        text = text[:-1]
    if text in ["0", "0B"]:
        return 0
    if not text:
        raise ValueError(f"Invalid size format: {size_str!r}")
    if text[-1] in SIZE_UNITS:
        try:
            value = float(text[:-1])
        except ValueError:
            raise ValueError(f"Invalid size format: {size_str!r}")
        if value < 0:
            raise ValueError(f"Invalid size format: {size_str!r}")
        return int(value * SIZE_UNITS[text[-1]])
    try:
        value = int(text)
    except ValueError:
        raise ValueError(f"Invalid size format: {size_str!r}")
    if value < 0:
        raise ValueError(f"Invalid size format: {size_str!r}")
    return value


def format_bytes(bytes_val: Optional[int]) -> str:
    """Convert a byte value to a human-readable string (e.g., '1.23 GB')."""
    if bytes_val is None:
        return "N/A"
    if bytes_val == 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB", "TB", "PB"]
    size = float(bytes_val)
    idx = 0
    while size >= 1024 and idx < len(units) - 1:
        size /= 1024
        idx += 1
    return f"{size:.2f} {units[idx]}"
