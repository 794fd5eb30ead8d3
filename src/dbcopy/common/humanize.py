"""Human-readable byte counts."""

import math

SI_SIZES = ("B", "kB", "MB", "GB", "TB", "PB", "EB")
IEC_SIZES = ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB")


def humanize_bytes(size: int, iec: bool = False) -> tuple[str, str]:
    """Split a byte count into a display value and its unit.

    Values are rounded half-up to one decimal place, which is dropped once
    the value reaches 10 (``"1.5", "KiB"`` but ``"15", "KiB"``).

    Args:
        size: Byte count, must not be negative.
        iec: Use base-1024 units (KiB, MiB, ...) instead of base-1000 ones.
    """
    if size < 0:
        raise ValueError(f"size must not be negative: {size}")

    sizes = IEC_SIZES if iec else SI_SIZES
    base = 1024 if iec else 1000

    if size < 10:
        return str(size), sizes[0]

    exponent = 0
    while exponent < len(sizes) - 1 and size >= base ** (exponent + 1):
        exponent += 1

    value = math.floor(size / base**exponent * 10 + 0.5) / 10
    if value < 10:
        return f"{value:.1f}", sizes[exponent]
    return f"{value:.0f}", sizes[exponent]


def format_size(size: int, iec: bool = True) -> str:
    value, unit = humanize_bytes(size, iec)
    return f"{value} {unit}"
