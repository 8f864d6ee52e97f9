"""Tier 0: zero-cost rule-based document classification.

Scans text against a fixed gazetteer of known persons and a handful of
topic, date and place patterns. Pure computation with no external calls,
so it can run over the whole corpus for free and cannot fail.
"""

import re
from collections.abc import Iterable
from datetime import datetime, timezone

from records_intel.config.gazetteer import (
    DATE_PATTERN,
    DEFAULT_DOCUMENT_TYPE,
    DOCUMENT_TYPE_PATTERNS,
    KNOWN_PERSONS,
    LOCATION_PATTERNS,
)
from records_intel.models import AnalysisTier, PersonCategory, PersonMention, TieredAnalysisResult

CONTEXT_RADIUS = 80
SUMMARY_HEAD_CHARS = 500

GazetteerEntry = tuple[str, str, PersonCategory]


def proper_case(name: str) -> str:
    """Capitalize each whitespace-separated word, lower-casing the rest."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in name.split())


def infer_document_type(text: str) -> str:
    for pattern, document_type in DOCUMENT_TYPE_PATTERNS:
        if pattern.search(text):
            return document_type
    return DEFAULT_DOCUMENT_TYPE


def infer_date(text: str) -> str | None:
    match = DATE_PATTERN.search(text)
    return match.group(0) if match else None


def extract_locations(text: str) -> list[str]:
    """Known place names found in the text, de-duplicated in first-seen order."""
    found: dict[str, None] = {}
    for pattern in LOCATION_PATTERNS:
        for match in pattern.finditer(text):
            found.setdefault(match.group(0), None)
    return list(found)


def find_known_persons(
    text: str,
    file_name: str,
    gazetteer: Iterable[GazetteerEntry] = KNOWN_PERSONS,
) -> list[PersonMention]:
    """Match gazetteer names on word boundaries, case-insensitively.

    Args:
        text: Document text.
        file_name: Used as fallback context when no excerpt can be cut.
        gazetteer: (name, role, category) entries to look for.

    Returns:
        One mention per gazetteer name found, in gazetteer order.
    """
    persons: list[PersonMention] = []
    seen: set[str] = set()

    for name, role, category in gazetteer:
        key = name.lower()
        if key in seen:
            continue
        seen.add(key)

        pattern = re.compile(rf"\b{re.escape(name)}\b", re.I)
        matches = pattern.findall(text)
        if not matches:
            continue

        context_match = re.search(
            rf".{{0,{CONTEXT_RADIUS}}}\b{re.escape(name)}\b.{{0,{CONTEXT_RADIUS}}}", text, re.I
        )
        context = context_match.group(0).strip() if context_match else ""

        persons.append(
            PersonMention(
                name=proper_case(name),
                role=role,
                category=category,
                context=context or f"Mentioned in {file_name}",
                mention_count=len(matches),
            )
        )

    return persons


def _build_summary(document_type: str, data_set: str, persons: list[PersonMention], text: str) -> str:
    head = " ".join(text[:SUMMARY_HEAD_CHARS].split())
    if not persons:
        return f"{document_type} from Data Set {data_set}. {head[:200]}..."

    names = ", ".join(p.name for p in persons[:3])
    more = " and others" if len(persons) > 3 else ""
    return f"{document_type} from Data Set {data_set} mentioning {names}{more}. {head[:150]}..."


def classify_document(
    text: str,
    file_name: str,
    data_set: str,
    gazetteer: Iterable[GazetteerEntry] | None = None,
    analyzed_at: datetime | None = None,
) -> TieredAnalysisResult:
    """Produce a baseline Tier 0 record for a document.

    Args:
        text: Full document text.
        file_name: Document file name.
        data_set: Data-set label.
        gazetteer: Known persons to look for. Defaults to the built-in list.
        analyzed_at: Timestamp to stamp the record with. Defaults to now.

    Returns:
        Zero-cost record with empty connections, events and key facts.
    """
    persons = find_known_persons(text, file_name, KNOWN_PERSONS if gazetteer is None else gazetteer)
    document_type = infer_document_type(text)

    return TieredAnalysisResult(
        file_name=file_name,
        data_set=data_set,
        document_type=document_type,
        date_original=infer_date(text),
        summary=_build_summary(document_type, data_set, persons, text),
        persons=persons,
        connections=[],
        events=[],
        locations=extract_locations(text),
        key_facts=[],
        analyzed_at=analyzed_at or datetime.now(timezone.utc),
        tier=AnalysisTier.RULE_BASED,
        cost_cents=0.0,
        input_tokens=0,
        output_tokens=0,
    )
