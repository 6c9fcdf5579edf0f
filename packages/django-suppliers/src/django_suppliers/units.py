"""Parsing helpers shared by supplier adapters."""

import re
from decimal import Decimal

from .exceptions import UnsupportedFormat

_GB_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*GB\s*$", re.IGNORECASE)
_MB_RE = re.compile(r"^\s*(\d+)\s*MB\s*$", re.IGNORECASE)


def parse_megabytes(data_amount: str, mb_per_gb: int = 1000) -> int:
    """Convert "5GB" / "500MB" into whole megabytes.

    Raises:
        UnsupportedFormat: If the string is neither a GB nor an MB amount
    """
    gb_match = _GB_RE.match(data_amount or "")
    if gb_match:
        return int(Decimal(gb_match.group(1)) * mb_per_gb)

    mb_match = _MB_RE.match(data_amount or "")
    if mb_match:
        return int(mb_match.group(1))

    raise UnsupportedFormat(data_amount)


def parse_gigabytes(data_amount: str) -> Decimal:
    """Convert "5GB" / "500MB" into gigabytes (MB divided by 1024).

    Raises:
        UnsupportedFormat: If the string is neither a GB nor an MB amount
    """
    gb_match = _GB_RE.match(data_amount or "")
    if gb_match:
        return Decimal(gb_match.group(1))

    mb_match = _MB_RE.match(data_amount or "")
    if mb_match:
        return Decimal(mb_match.group(1)) / Decimal(1024)

    raise UnsupportedFormat(data_amount)


def format_gigabytes(value: Decimal) -> str:
    """Render a GB amount without exponent or trailing zeros ("5", "0.48828125")."""
    text = format(value.normalize(), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def whole_gigabytes(data_amount: str) -> int:
    """Return the GB amount as an int, for suppliers that only sell whole GB.

    Raises:
        UnsupportedFormat: If the amount is not a whole number of gigabytes
    """
    gigabytes = parse_gigabytes(data_amount)
    if gigabytes != gigabytes.to_integral_value():
        raise UnsupportedFormat(data_amount, expected='"1GB", "5GB", "10GB"')
    return int(gigabytes)


def normalize_phone(phone: str) -> str:
    """Normalize a Ghanaian phone number.

    Strips "+", spaces and dashes. Numbers with the 233 country code are kept
    as-is, nine-digit numbers get their leading 0 back.
    """
    cleaned = re.sub(r"[+\s-]", "", phone or "")
    if cleaned.startswith("233"):
        return cleaned
    if len(cleaned) == 9:
        return "0" + cleaned
    return cleaned
