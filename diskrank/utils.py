from __future__ import annotations

SUFFIXES = ("B", "K", "M", "G", "T", "P", "E", "Z", "Y", "H")
OVERFLOW_SUFFIX = "<ginormous!>"


def magnitude(num: int) -> int:
    """Power-of-1024 scale of num: floor(log2(num) / 10), 0 for 0."""
    if num <= 0:
        return 0
    return (num.bit_length() - 1) // 10


def human_size(num: int) -> str:
    if num < 0:
        raise ValueError(f"size must be non-negative, got {num}")
    m = magnitude(num)
    suffix = SUFFIXES[m] if m < len(SUFFIXES) else OVERFLOW_SUFFIX
    x = num / 1024 ** m
    digits = 0 if x >= 10.0 else 1
    return f"{x:.{digits}f}{suffix}"


def format_size(num: int, raw: bool = False) -> str:
    if raw:
        return str(num)
    return human_size(num)
