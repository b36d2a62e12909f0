"""Fixed-point amount codec for contract-defined precision"""

from typing import Optional
from rusd_gateway.domain.exceptions import InvalidAmount

I128_MIN = -(2**127)
I128_MAX = 2**127 - 1

EXCHANGE_RATE_DECIMALS = 6


def format_amount(value: int, decimals: int) -> str:
    """
    Render an integer amount as a decimal string at the given precision.

    Trailing zeros of the fractional part are dropped, and the point too
    when nothing significant remains.

    Example:
        123456789 at 7 decimals → "12.3456789"
        100000000 at 7 decimals → "10"
    """
    negative = value < 0
    magnitude = -value if negative else value
    base = 10**decimals

    whole, fraction = divmod(magnitude, base)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0") if decimals else ""

    formatted = f"{whole}.{fraction_str}" if fraction_str else str(whole)
    return f"-{formatted}" if negative else formatted


def parse_amount(text: str, decimals: int) -> int:
    """
    Parse a user-typed decimal string into an integer amount.

    Rules:
    - Surrounding whitespace is ignored; empty input is zero
    - Optional leading "-", at most one "."
    - Fractional digits beyond `decimals` are truncated, not rounded

    Raises:
        InvalidAmount: On any other character
    """
    trimmed = text.strip()
    if not trimmed:
        return 0

    negative = trimmed.startswith("-")
    unsigned = trimmed[1:] if negative else trimmed

    whole_part, _, fraction_part = unsigned.partition(".")
    if not _is_digits(whole_part) or not _is_digits(fraction_part):
        raise InvalidAmount(f"Invalid amount: {text!r}")

    whole = int(whole_part) if whole_part else 0
    padded = fraction_part.ljust(decimals, "0")[:decimals]
    fraction = int(padded) if padded else 0

    value = whole * 10**decimals + fraction
    return -value if negative else value


def _is_digits(part: str) -> bool:
    # str.isdigit accepts superscripts and other unicode digits
    return all("0" <= ch <= "9" for ch in part)


def ensure_i128(value: int) -> int:
    """Reject amounts the ledger's i128 type cannot carry"""
    if not I128_MIN <= value <= I128_MAX:
        raise InvalidAmount("Amount is out of range")
    return value


def shorten(identifier: str, width: int = 4) -> str:
    """Display form of an account or contract id: first and last `width` chars"""
    if not identifier:
        return ""
    return f"{identifier[:width]}...{identifier[-width:]}"


def exchange_rate(reserve: Optional[int], supply: Optional[int]) -> str:
    """
    Collateral held per issued token, at 6 decimals.

    Unknown or empty reserve/supply reads as parity.
    """
    if not reserve or not supply:
        return "1.000000"
    scaled = reserve * 10**EXCHANGE_RATE_DECIMALS // supply
    return format_amount(scaled, EXCHANGE_RATE_DECIMALS)
