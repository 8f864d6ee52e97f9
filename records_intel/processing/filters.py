"""Filters that keep non-person strings out of the person roster.

``is_junk_name`` looks at a raw extracted name (OCR noise, codes, role
phrases). ``is_non_person`` looks at a normalized name (organizations,
placeholders, redactions, generic roles, initials, numbered labels).
"""

import re

ORG_KEYWORDS = re.compile(
    r"\b(inc|llc|corp|corporation|department|dept|office|bureau|agency|court|company|co"
    r"|foundation|university|institute|group|committee|firm|association|bank|service|services"
    r"|hotel|airlines|airline|club|resort|trust|estate|estates|ltd|lp|partners|partnership"
    r"|federal|state|county|city|national|international|organization|board|commission"
    r"|council|division|unit|center|school|academy|holdings|enterprises|management"
    r"|consulting|media|publishing|press|records|fund|securities|investments|capital"
    r"|financial|aviation|telecom|telecommunications|communications|network|systems"
    r"|technologies|tech|software|solutions|global|worldwide|americas|properties|realty"
    r"|development|construction|design|studio|gallery|museum|library|hospital|clinic"
    r"|medical|pharmacy|laboratory|lab|research)\b"
)
PLACEHOLDER_PATTERN = re.compile(r"\b(jane|john)\s+doe\b|^doe\s+\d|^doe$")
REDACTED_PATTERN = re.compile(
    r"redacted|sealed|unknown|confidential|unnamed|unidentified|anonymous|\[.*\]|\(.*redact.*\)"
)

GENERIC_WORDS = frozenset({
    "agent", "detective", "officer", "judge", "attorney", "counsel", "witness", "victim",
    "defendant", "plaintiff", "interviewer", "investigator", "respondent", "complainant",
    "petitioner", "claimant", "applicant", "deponent", "affiant", "declarant",
    "correspondent", "sender", "recipient", "caller", "client", "patient", "student",
    "employee", "employer", "manager", "director", "supervisor", "secretary", "assistant",
    "clerk", "staff", "member", "person", "individual", "male", "female", "minor", "child",
    "adult", "mr", "mrs", "ms", "dr",
})

GENERIC_ROLE_PHRASES = frozenset({
    "assistant united states attorney",
    "special agent",
    "case agent name",
    "correctional officer",
    "attorney general",
    "unit manager",
    "senior inspector",
    "supervisory inspector",
    "fbi assistant director",
    "deputy united states attorney",
    "unknown recipient",
    "unknown sender",
    "institution duty officer",
    "victim witness coordinator",
    "us attorney",
    "assistant us attorney",
})

MAX_RAW_NAME_CHARS = 60
_OCR_SYMBOLS = re.compile(r"[!;&$%^°•\\*<>=]")
_DIGIT_RUN = re.compile(r"[0-9]{2,}")
_DIGITS_AROUND_LETTERS = re.compile(r"[0-9].*[a-zA-Z].*[0-9]")
_DIGIT_INSIDE_WORD = re.compile(r"^[A-Z][a-z]*[0-9][a-z]")
_BRACKETED = re.compile(r"^\[.*\]$")
_ALL_CAPS_CODE = re.compile(r"^[A-Z]{4,}$")


def is_junk_name(raw_name: str) -> bool:
    """Whether a raw extracted name is extraction noise rather than a person."""
    name = raw_name.strip()
    if len(name) <= 2 or len(name) > MAX_RAW_NAME_CHARS:
        return True
    if _OCR_SYMBOLS.search(name) or "/" in name:
        return True
    if _DIGIT_RUN.search(name) or _DIGITS_AROUND_LETTERS.search(name) or _DIGIT_INSIDE_WORD.search(name):
        return True
    if _BRACKETED.match(name) or _ALL_CAPS_CODE.match(name):
        return True
    return name.lower().replace(".", "") in GENERIC_ROLE_PHRASES


def is_non_person(name: str) -> bool:
    """Whether a normalized (lower-case) name is not an individual."""
    if not name or len(name) < 4 or " " not in name:
        return True

    if ORG_KEYWORDS.search(name) or PLACEHOLDER_PATTERN.search(name) or REDACTED_PATTERN.search(name):
        return True

    words = name.split()
    if name in GENERIC_ROLE_PHRASES or all(word in GENERIC_WORDS for word in words):
        return True

    # "j e"
    if all(len(word) <= 1 for word in words):
        return True

    # "victim 1", "witness 2"
    return any(word.isdigit() for word in words)
