import math


def to_tenths(elapsed: float) -> int:
    """Whole tenths of a second in ``elapsed``, as shown on the board."""
    # Accumulated 0.1 ticks land just under the tenth (0.7 -> 0.6999...)
    return int(math.floor(max(0.0, elapsed) * 10 + 1e-6))


def format_time(elapsed: float) -> str:
    """Render seconds as ``{minutes}m {seconds}s.{tenths}``.

    The minutes segment is left out while it is zero: ``7s.3``, ``2m 5s.0``.
    """
    total_seconds, tenths = divmod(to_tenths(elapsed), 10)
    minutes, seconds = divmod(total_seconds, 60)
    prefix = f"{minutes}m " if minutes > 0 else ''
    return f"{prefix}{seconds}s.{tenths}"
