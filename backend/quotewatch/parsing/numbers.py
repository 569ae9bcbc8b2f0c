from __future__ import annotations

import math
import re
from typing import Optional

_NBSP_RE = re.compile(r"[\u00a0\u2007\u202f]")
# Comma-grouped thousands must be tried before the bare form, otherwise
# "72850.20" would stop at "728".
_PRICE_RE = re.compile(
    r"(?:[₹$€£¥]|Rs\.?|INR|USD)?\s*"
    r"([0-9]{1,3}(?:,[0-9]{3})+(?:\.[0-9]+)?|[0-9]+(?:\.[0-9]+)?)"
)


def extract_number(text: Optional[str]) -> Optional[float]:
    """Return the first price-like number found in ``text``, or ``None``.

    Currency markers, thousands separators and non-breaking spaces are
    tolerated. Only the leftmost match is considered.
    """
    if not text or not isinstance(text, str):
        return None
    normalized = _NBSP_RE.sub(" ", text)
    match = _PRICE_RE.search(normalized)
    if not match:
        return None
    try:
        value = float(match.group(1).replace(",", ""))
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value
