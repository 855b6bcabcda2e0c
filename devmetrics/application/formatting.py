BYTE_UNITS = ("B", "KB", "MB", "GB")
KILO = 1024


def format_number(num: int) -> str:
    """Abbreviates large counts: 999 -> "999", 1500 -> "1.5K", 2500000 -> "2.5M"."""
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    if num >= 1_000:
        return f"{num / 1_000:.1f}K"
    return str(num)


def format_bytes(size: int) -> str:
    """
    Renders a byte count in binary units with at most one decimal place,
    using the largest unit that keeps the value at or above 1.
    A trailing ".0" is dropped, so 1024 renders as "1 KB".
    """
    if size <= 0:
        return "0 B"

    exponent = 0
    while exponent < len(BYTE_UNITS) - 1 and size >= KILO ** (exponent + 1):
        exponent += 1

    text = f"{size / KILO ** exponent:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return f"{text} {BYTE_UNITS[exponent]}"
