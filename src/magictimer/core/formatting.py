"""Elapsed-time formatting for display."""

_HOUR = 3600
_MINUTE = 60


def format_elapsed(seconds: float) -> str:
    """Format *seconds* as ``MM:SS``, or ``HH:MM:SS`` from one hour upward.

    Fractions of a second are truncated and negative input is shown as zero.
    """
    total = max(int(seconds), 0)
    hours, rest = divmod(total, _HOUR)
    minutes, secs = divmod(rest, _MINUTE)
    if total >= _HOUR:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"
