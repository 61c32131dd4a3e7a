"""Utilities for formatting sizes and durations."""

BYTES_IN_KB = 1024.0
SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60


def format_size(size_in_bytes: int) -> str:
    """Convert a size in bytes to a human-readable format (KB, MB, GB).

    Args:
        size_in_bytes: The size in bytes.

    Returns:
        The formatted size string.

    """
    size = float(size_in_bytes)

    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size < BYTES_IN_KB:
            return f"{size:.2f} {unit}"
        size /= BYTES_IN_KB
    return f"{size:.2f} PB"


def format_duration(seconds: float) -> str:
    """Format a duration as MM:SS, or HH:MM:SS from one hour upwards."""
    total = max(int(seconds), 0)
    hours, remainder = divmod(total, SECONDS_PER_HOUR)
    minutes, secs = divmod(remainder, SECONDS_PER_MINUTE)
    if hours:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"
