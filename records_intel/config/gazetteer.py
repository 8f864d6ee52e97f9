"""Fixed reference data for the rule-based (Tier 0) classifier."""

import re

from records_intel.models import PersonCategory

# (lower-case name, role, category)
KNOWN_PERSONS: list[tuple[str, str, PersonCategory]] = [
    ("jeffrey epstein", "Defendant/Subject", PersonCategory.KEY_FIGURE),
    ("ghislaine maxwell", "Co-conspirator/Associate", PersonCategory.KEY_FIGURE),
    ("virginia giuffre", "Victim/Plaintiff", PersonCategory.VICTIM),
    ("virginia roberts", "Victim/Plaintiff", PersonCategory.VICTIM),
    ("prince andrew", "Associate/Named Individual", PersonCategory.POLITICAL),
    ("alan dershowitz", "Defense Attorney", PersonCategory.LEGAL),
    ("jean-luc brunel", "Associate/Recruiter", PersonCategory.ASSOCIATE),
    ("sarah kellen", "Assistant/Associate", PersonCategory.STAFF),
    ("les wexner", "Financial Associate", PersonCategory.ASSOCIATE),
    ("alexander acosta", "Prosecutor (NPA)", PersonCategory.LEGAL),
    ("bill clinton", "Associate/Named Individual", PersonCategory.POLITICAL),
    ("donald trump", "Associate/Named Individual", PersonCategory.POLITICAL),
    ("nadia marcinkova", "Victim/Associate", PersonCategory.VICTIM),
    ("johanna sjoberg", "Victim/Witness", PersonCategory.VICTIM),
    ("adriana ross", "Associate", PersonCategory.ASSOCIATE),
    ("lesley groff", "Executive Assistant", PersonCategory.STAFF),
    ("bill gates", "Associate", PersonCategory.ASSOCIATE),
    ("bill richardson", "Associate/Named Individual", PersonCategory.POLITICAL),
    ("george mitchell", "Associate/Named Individual", PersonCategory.POLITICAL),
    ("ehud barak", "Associate/Named Individual", PersonCategory.POLITICAL),
    ("leon black", "Financial Associate", PersonCategory.ASSOCIATE),
    ("glenn dubin", "Financial Associate", PersonCategory.ASSOCIATE),
    ("eva andersson-dubin", "Associate", PersonCategory.ASSOCIATE),
    ("larry summers", "Associate/Named Individual", PersonCategory.POLITICAL),
    ("naomi campbell", "Associate", PersonCategory.ASSOCIATE),
    ("kevin spacey", "Associate", PersonCategory.ASSOCIATE),
    ("david copperfield", "Associate", PersonCategory.ASSOCIATE),
    ("woody allen", "Associate", PersonCategory.ASSOCIATE),
    ("reid hoffman", "Associate", PersonCategory.ASSOCIATE),
    ("sergey brin", "Associate", PersonCategory.ASSOCIATE),
    ("richard branson", "Associate", PersonCategory.ASSOCIATE),
    ("peter mandelson", "Associate/Named Individual", PersonCategory.POLITICAL),
    ("sarah ferguson", "Associate", PersonCategory.ASSOCIATE),
    ("steve bannon", "Associate/Named Individual", PersonCategory.POLITICAL),
    ("peter attia", "Associate", PersonCategory.ASSOCIATE),
    ("marvin minsky", "Associate/Academic", PersonCategory.ASSOCIATE),
    ("lawrence krauss", "Associate/Academic", PersonCategory.ASSOCIATE),
    ("stephen hawking", "Associate/Academic", PersonCategory.ASSOCIATE),
    ("leon botstein", "Associate/Academic", PersonCategory.ASSOCIATE),
    ("katie couric", "Associate", PersonCategory.ASSOCIATE),
    ("martha stewart", "Associate", PersonCategory.ASSOCIATE),
    ("chris tucker", "Associate", PersonCategory.ASSOCIATE),
]

# Ordered: first match wins
DOCUMENT_TYPE_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"flight\s+log|manifest|passenger|aircraft|tail\s+number|teterboro", re.I), "flight log"),
    (re.compile(r"deposition|testimony|sworn|under\s+oath|direct\s+examination|cross.?examination", re.I), "deposition"),
    (re.compile(r"grand\s+jury|indictment|true\s+bill|presentment", re.I), "grand jury transcript"),
    (re.compile(r"search\s+warrant|inventory|seized|raid", re.I), "search warrant"),
    (re.compile(r"fbi|302|investigation|bureau|special\s+agent", re.I), "fbi report"),
    (re.compile(r"email|correspondence|from:\s*\S|to:\s*\S|subject:\s*\S", re.I), "email"),
    (re.compile(r"court|filing|motion|order|docket|plea", re.I), "court filing"),
    (re.compile(r"financial|bank|wire\s+transfer|account|transaction", re.I), "financial record"),
    (re.compile(r"contact|address\s+book|phone\s+number|rolodex", re.I), "contact list"),
    (re.compile(r"property|real\s+estate|island|little\s+st", re.I), "property record"),
    (re.compile(r"police|report|incident|complaint", re.I), "police report"),
]

DEFAULT_DOCUMENT_TYPE = "government record"

DATE_PATTERN = re.compile(
    r"\b("
    r"(?:January|February|March|April|May|June|July|August|September|October|November|December)"
    r"\s+\d{1,2},?\s+\d{4}"
    r"|\d{1,2}/\d{1,2}/\d{2,4}"
    r"|\d{4}-\d{2}-\d{2}"
    r")\b",
    re.I,
)

LOCATION_PATTERNS: list[re.Pattern] = [
    re.compile(
        r"Palm Beach|New York|Manhattan|Little St\.? James|U\.?S\.? Virgin Islands"
        r"|Zorro Ranch|New Mexico|Teterboro|London|Paris",
        re.I,
    ),
]
