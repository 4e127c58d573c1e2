import re
from decimal import Decimal
from typing import Optional

# Leading numeric prefix: sign, digits with optional fraction, optional exponent.
# "Infinity" and "NaN" never match, so non-finite values come back as None.
_NUMERIC_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Anything past double range would be Infinity in a browser form; treat as non-numeric.
_MAX_ADJUSTED_EXPONENT = 308


def parse_money_input(raw: Optional[str]) -> Optional[Decimal]:
    """Parse a raw form value into a Decimal, or None when missing/non-numeric.

    Parsing is tolerant of trailing junk: "35abc" parses as 35.
    """
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    match = _NUMERIC_PREFIX.match(text)
    if match is None:
        return None
    value = Decimal(match.group(0))
    if value and value.adjusted() > _MAX_ADJUSTED_EXPONENT:
        return None
    return value
