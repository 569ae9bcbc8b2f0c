from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from quotewatch.parsing.documents import Document
from quotewatch.parsing.numbers import extract_number

logger = logging.getLogger(__name__)

WHOLE_DOCUMENT = "<document>"


@dataclass(frozen=True)
class ExtractedValue:
    value: float
    raw: Optional[str]
    rule: str


def _try_rules(document: Document, rules: Iterable[str]) -> Optional[ExtractedValue]:
    for rule in rules:
        try:
            text = document.select_text(rule)
        except Exception as exc:  # a malformed selector is a miss
            logger.debug("Selector %r failed: %s", rule, exc)
            continue
        if not text:
            continue
        value = extract_number(text)
        if value is not None:
            return ExtractedValue(value=value, raw=text.strip(), rule=rule)
    return None


def resolve_match(
    document: Document,
    primary_rules: Iterable[str],
    fallback_rules: Iterable[str] = (),
) -> Optional[ExtractedValue]:
    match = _try_rules(document, primary_rules)
    if match is not None:
        return match

    match = _try_rules(document, fallback_rules)
    if match is not None:
        return match

    try:
        text = document.full_text()
    except Exception as exc:
        logger.debug("Whole-document scan failed: %s", exc)
        return None
    value = extract_number(text)
    if value is None:
        return None
    return ExtractedValue(value=value, raw=None, rule=WHOLE_DOCUMENT)


def resolve_value(
    document: Document,
    primary_rules: Iterable[str],
    fallback_rules: Iterable[str] = (),
) -> Optional[float]:
    match = resolve_match(document, primary_rules, fallback_rules)
    return match.value if match is not None else None
