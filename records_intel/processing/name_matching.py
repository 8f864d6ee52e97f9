"""Person name normalization and same-person matching.

Every threshold used by ``NameMatcher`` comes from ``NameMatchSettings``.
The defaults were tuned by hand on real OCR output and trade recall for
precision; validate changes against a labeled sample before widening
them.
"""

import re
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from rapidfuzz.distance import Levenshtein

NAME_SUFFIXES = frozenset({"jr", "sr", "ii", "iii", "iv", "esq"})

NICKNAMES: dict[str, str] = {
    "bob": "robert", "rob": "robert", "bobby": "robert", "robby": "robert",
    "bill": "william", "billy": "william", "will": "william", "willy": "william",
    "jim": "james", "jimmy": "james", "jes": "james", "jamie": "james",
    "mike": "michael", "mikey": "michael",
    "dick": "richard", "rick": "richard", "rich": "richard", "ricky": "richard",
    "tom": "thomas", "tommy": "thomas",
    "joe": "joseph", "joey": "joseph",
    "jack": "john", "johnny": "john", "jon": "john",
    "ted": "theodore", "teddy": "theodore",
    "ed": "edward", "eddie": "edward",
    "al": "albert", "bert": "albert",
    "alex": "alexander", "sandy": "alexander",
    "dan": "daniel", "danny": "daniel",
    "dave": "david", "davy": "david",
    "steve": "steven", "stevie": "steven",
    "chris": "christopher",
    "nick": "nicholas", "nicky": "nicholas",
    "tony": "anthony",
    "larry": "lawrence", "laurence": "lawrence",
    "charlie": "charles", "chuck": "charles",
    "harry": "henry", "hank": "henry",
    "greg": "gregory",
    "jeff": "jeffrey",
    "matt": "matthew",
    "pat": "patrick",
    "pete": "peter",
    "sam": "samuel",
    "ben": "benjamin",
    "ken": "kenneth", "kenny": "kenneth",
    "meg": "megan", "meghan": "megan",
}

_HONORIFICS = re.compile(r"\b(dr|mr|mrs|ms|miss|ii|iii|iv)\b\.?")
_NON_LETTERS = re.compile(r"[^a-z\s]")
_WHITESPACE = re.compile(r"\s+")


class NameMatchSettings(BaseSettings):
    """Tunable thresholds for ``NameMatcher``."""

    model_config = SettingsConfigDict(
        env_prefix="NAME_MATCH_",
        env_file=".env",
        extra="ignore",
    )

    min_core_chars: int = 6  # first+last core comparison
    max_core_words: int = 5
    min_spaceless_chars: int = 6
    min_last_name_chars: int = 3
    min_first_prefix_chars: int = 3
    min_fuzzy_first_chars: int = 4
    max_first_distance: int = 2
    min_fuzzy_last_chars: int = 5
    max_last_distance: int = 2
    min_canonical_fuzzy_last_chars: int = 6
    min_last_prefix_chars: int = 4
    min_whole_name_chars: int = 10
    max_whole_name_distance: int = 2
    min_containment_chars: int = 8


@lru_cache
def get_name_match_settings() -> NameMatchSettings:
    """Get cached name matching thresholds."""
    return NameMatchSettings()


def normalize_name(name: str) -> str:
    """Normalize a raw person name for grouping.

    Lower-cases, turns "Last, First" into "First Last", drops honorifics
    and roman-numeral suffixes, strips periods and other non-letters, and
    collapses whitespace. "Dr. Smith, John J." becomes "john j smith".
    """
    normalized = name.lower()

    if "," in normalized:
        parts = [part.strip() for part in normalized.split(",")]
        if len(parts) == 2 and parts[1]:
            normalized = f"{parts[1]} {parts[0]}"

    normalized = _HONORIFICS.sub("", normalized)
    normalized = normalized.replace(".", "")
    normalized = _NON_LETTERS.sub("", normalized)
    return _WHITESPACE.sub(" ", normalized).strip()


def canonical_first_name(first: str) -> str:
    """Resolve a nickname to its canonical first name."""
    return NICKNAMES.get(first, first)


def collapse_ocr_spaces(name: str) -> str:
    """Re-join word fragments split by OCR.

    A fragment of one or two letters is glued to the following word, or to
    the preceding word when it is the last one: "jeff pa liuca" becomes
    "jeff paliuca" and "to nyricco" becomes "tonyricco".
    """
    parts = name.split(" ")
    merged: list[str] = []
    carry = ""
    for i, part in enumerate(parts):
        part = carry + part
        carry = ""
        if len(part) <= 2 and i + 1 < len(parts):
            carry = part
        elif len(part) <= 2 and merged:
            merged[-1] += part
        else:
            merged.append(part)
    return " ".join(merged)


def _prepare(name: str) -> str:
    cleaned = name.lower().replace(".", " ").replace(",", " ")
    return _WHITESPACE.sub(" ", cleaned).strip()


def _strip_suffixes(tokens: list[str]) -> list[str]:
    stripped = [token for token in tokens if token not in NAME_SUFFIXES]
    return stripped if len(stripped) >= 2 else tokens


def _contains_token_run(longer: list[str], shorter: list[str]) -> bool:
    size = len(shorter)
    return any(longer[i:i + size] == shorter for i in range(len(longer) - size + 1))


class NameMatcher:
    """Decides whether two person names denote the same individual.

    Rules are tried in order and the first that holds merges the pair.
    Each rule is symmetric, so ``should_merge(a, b) == should_merge(b, a)``.

    Args:
        settings: Thresholds. Defaults to the cached environment settings.
    """

    def __init__(self, settings: NameMatchSettings | None = None) -> None:
        self.settings = settings or get_name_match_settings()

    def first_names_match(self, first_a: str, first_b: str) -> bool:
        """First-name equivalence used together with a matching last name.

        Holds for equal names, an initial ("j" / "james"), a mutual prefix
        of at least three letters ("alex" / "alexander"), nicknames of the
        same canonical name ("bob" / "robert"), or a small edit distance.
        """
        s = self.settings
        if first_a == first_b:
            return True

        shorter, longer = sorted((first_a, first_b), key=len)
        if len(shorter) == 1 and longer.startswith(shorter):
            return True
        if len(shorter) >= s.min_first_prefix_chars and longer.startswith(shorter):
            return True

        if canonical_first_name(first_a) == canonical_first_name(first_b):
            return True

        return (
            len(shorter) >= s.min_fuzzy_first_chars
            and Levenshtein.distance(first_a, first_b) <= s.max_first_distance
        )

    def should_merge(self, name_a: str, name_b: str) -> bool:
        """Whether two names refer to the same person.

        Args:
            name_a: First name string, raw or normalized.
            name_b: Second name string, raw or normalized.

        Returns:
            True when any matching rule holds.
        """
        s = self.settings
        a, b = _prepare(name_a), _prepare(name_b)
        if not a or not b:
            return False

        # 1. exact
        if a == b:
            return True

        # 3. tokenization artifacts: "tony ricco" / "tonyricco"
        spaceless_a, spaceless_b = a.replace(" ", ""), b.replace(" ", "")
        if min(len(spaceless_a), len(spaceless_b)) >= s.min_spaceless_chars and spaceless_a == spaceless_b:
            return True

        tokens_a, tokens_b = a.split(" "), b.split(" ")
        # Single tokens only merge on the rules above; anything looser
        # chains unrelated people together through a shared surname.
        if len(tokens_a) < 2 or len(tokens_b) < 2:
            return False

        # reversed order: "maxwell ghislaine" / "ghislaine maxwell"
        if sorted(tokens_a) == sorted(tokens_b):
            return True

        # OCR space insertion: "jeff pa liuca" / "jeff paliuca"
        if collapse_ocr_spaces(a) == collapse_ocr_spaces(b):
            return True

        core_a, core_b = _strip_suffixes(tokens_a), _strip_suffixes(tokens_b)

        # 2. first + last core, middle names and suffixes dropped
        if 2 <= len(core_a) <= s.max_core_words and 2 <= len(core_b) <= s.max_core_words:
            first_last_a = f"{core_a[0]} {core_a[-1]}"
            first_last_b = f"{core_b[0]} {core_b[-1]}"
            if first_last_a == first_last_b and len(first_last_a) >= s.min_core_chars:
                return True

        first_a, last_a = core_a[0], core_a[-1]
        first_b, last_b = core_b[0], core_b[-1]
        short_last = min(len(last_a), len(last_b))

        # 4. same last name
        if last_a == last_b and len(last_a) >= s.min_last_name_chars:
            if self.first_names_match(first_a, first_b):
                return True

        last_distance = Levenshtein.distance(last_a, last_b)

        # 5. fuzzy last name
        if short_last >= s.min_fuzzy_last_chars and last_distance <= s.max_last_distance:
            if self.first_names_match(first_a, first_b):
                return True

        # 6. same canonical first name, fuzzy last name
        if (
            short_last >= s.min_canonical_fuzzy_last_chars
            and last_distance <= s.max_last_distance
            and canonical_first_name(first_a) == canonical_first_name(first_b)
        ):
            return True

        # 7. truncated last name: "mennin" / "menninger"
        if first_a == first_b and len(first_a) >= s.min_first_prefix_chars:
            shorter_last, longer_last = sorted((last_a, last_b), key=len)
            if len(shorter_last) >= s.min_last_prefix_chars and longer_last.startswith(shorter_last):
                return True

        # 8. whole-name typo with a shared first or last token
        if (
            min(len(a), len(b)) >= s.min_whole_name_chars
            and Levenshtein.distance(a, b) <= s.max_whole_name_distance
            and (first_a == first_b or last_a == last_b)
        ):
            return True

        # 9. containment with the same first token: "david perry" / "david perry qc"
        if len(a) != len(b):
            shorter, longer = sorted((a, b), key=len)
            if len(shorter) >= s.min_containment_chars:
                shorter_tokens, longer_tokens = shorter.split(" "), longer.split(" ")
                if shorter_tokens[0] == longer_tokens[0] and _contains_token_run(longer_tokens, shorter_tokens):
                    return True

        return False
