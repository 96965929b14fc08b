"""Display helpers for captured responses."""


def format_duration(seconds: float) -> str:
    """
    Human readable duration.

    Example:
        >>> format_duration(0.01234)
        '12.34ms'
        >>> format_duration(90)
        '1.5m'
    """
    if seconds < 1:
        return f"{seconds * 1000:.2f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    if seconds < 3600:
        return f"{seconds / 60:.1f}m"
    return f"{seconds / 3600:.1f}h"
