"""Human-readable byte sizes."""

UNITS = ["Bytes", "KB", "MB", "GB"]


def format_bytes(num_bytes: int) -> str:
    """Format a byte count with binary prefixes.

    Values are rounded to two decimals with trailing zeros dropped, e.g.
    1536 -> "1.5 KB". Anything past gigabytes is still reported in GB.

    Args:
        num_bytes: Non-negative byte count

    Returns:
        Formatted size such as "0 Bytes", "512 Bytes" or "2.25 MB"
    """
    if num_bytes <= 0:
        return "0 Bytes"

    exponent = 0
    while exponent < len(UNITS) - 1 and num_bytes >= 1024 ** (exponent + 1):
        exponent += 1

    value = round(num_bytes / 1024**exponent, 2)
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {UNITS[exponent]}"
