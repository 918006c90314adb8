"""
Grade / Subject Taxonomy - route token normalization

Route and query tokens arrive in many shapes ("Grade-1:1", "grade_1", "1st",
"nursery", "Mathematics101"). The functions here map them onto the canonical
keys used as store filter values:

    grades table      name      -> "Grade 1" .. "Grade 5", "Nursery"
    contents table    class     -> "1st" .. "5th", "nursery"
    contents table    subject   -> "math", "english", "bangla", "science"

Every function is pure and total: unrecognized input degrades to a
best-effort value or to "no constraint" (None), never to an exception.
"""

import re
from typing import List, Optional
from urllib.parse import quote, unquote

from eduplay.config import DEFAULT_GRADE_NAME

SHORT_GRADE_KEYS = ["nursery", "1st", "2nd", "3rd", "4th", "5th"]

# Short route key -> grade display name (grades.name)
GRADE_DISPLAY_NAMES = {
    "1st": "Grade 1",
    "2nd": "Grade 2",
    "3rd": "Grade 3",
    "4th": "Grade 4",
    "5th": "Grade 5",
    "nursery": "Nursery",
}

# Grade display name -> contents.class key
CLASS_KEYS = {display: key for key, display in GRADE_DISPLAY_NAMES.items()}

ORDINAL_CLASS_KEYS = {1: "1st", 2: "2nd", 3: "3rd", 4: "4th", 5: "5th"}

# Substring -> canonical subject key, checked in this order
SUBJECT_KEYS = ["math", "english", "bangla", "science"]

# Subject card name (lower-cased) -> lesson route key or absolute path
SUBJECT_ROUTE_ALIASES = {
    "basic-math": "math",
    "english-basics": "english",
    "bangla-basics": "bangla",
    "mathematics": "math",
    "english": "english",
    "bangla": "bangla",
    "science": "science",
    "football-math": "/nursery-math",
    "football math": "/nursery-math",
}

# The Nursery grade has a fixed subject list instead of rows in the store
NURSERY_SUBJECTS = [
    {"id": 1, "name": "Football Math", "description": "Learn counting and basic math with footballs! ⚽", "grade_id": 1},
    {"id": 2, "name": "Basic English", "description": "Learn letters, words, and simple sentences! 🔤", "grade_id": 1},
    {"id": 3, "name": "বেসিক বাংলা", "description": "বর্ণ, শব্দ এবং সহজ বাক্য শিখুন! 🇧🇩", "grade_id": 1},
    {"id": 4, "name": "Colors & Shapes", "description": "Discover colors, shapes, and patterns! 🌈", "grade_id": 1},
]

_DELIMITERS = re.compile(r"[-_:]+")
_GRADE_TOKEN = re.compile(r"grade\s*([1-5])")
_GRADE_SEARCH = re.compile(r"grade\s*(\d)", re.IGNORECASE)


def normalize_grade(raw: Optional[str]) -> Optional[str]:
    """
    Normalize a grade route token.

    "1st" / "NURSERY" -> "1st" / "nursery"; "grade_1", "Grade-1" -> "Grade 1";
    anything else is returned cleaned with its first character upper-cased.
    """
    if not raw:
        return None
    cleaned = _DELIMITERS.sub(" ", unquote(raw)).strip()
    if not cleaned:
        return None

    lower = cleaned.lower()
    if lower in SHORT_GRADE_KEYS:
        return lower

    match = _GRADE_TOKEN.fullmatch(lower)
    if match:
        return f"Grade {match.group(1)}"

    return cleaned[0].upper() + cleaned[1:]


def grade_display_name(normalized: Optional[str]) -> str:
    """Map a normalized grade token to the name stored in the grades table."""
    if not normalized:
        return DEFAULT_GRADE_NAME
    return GRADE_DISPLAY_NAMES.get(normalized, normalized)


def fallback_grade_name(name: str) -> str:
    """Second-chance grade name: "Grade-1:1" -> "Grade 1"."""
    spaced = _DELIMITERS.sub(" ", name)
    match = _GRADE_SEARCH.search(spaced)
    if match:
        return f"Grade {match.group(1)}"
    return spaced


def grade_lookup_names(raw: Optional[str]) -> List[str]:
    """Ordered grade names to try against the grades table for a route token."""
    normalized = normalize_grade(raw)
    primary = grade_display_name(normalized)
    names = [primary]
    if normalized:
        fallback = fallback_grade_name(primary)
        if fallback not in names:
            names.append(fallback)
    return names


def canonical_grade_name(raw: Optional[str]) -> str:
    """The grade name a route token finally resolves to when every lookup step is applied."""
    return grade_lookup_names(raw)[-1]


def normalize_subject(raw: Optional[str]) -> Optional[str]:
    """
    Normalize a subject token to a canonical subject key.

    Unknown subjects return None, which callers treat as "no subject filter"
    rather than as an empty result.
    """
    if not raw:
        return None
    cleaned = unquote(raw).lower().strip()
    for key in SUBJECT_KEYS:
        if key in cleaned:
            return key
    return None


def normalize_class(raw: Optional[str]) -> Optional[str]:
    """Normalize a class token to the contents.class key ("grade 1:1" -> "1st")."""
    if not raw:
        return None
    # Only '-' and '_' separate words here; a ':' starts a trailing qualifier
    spaced = re.sub(r"[-_]+", " ", unquote(raw).lower()).strip()
    cleaned = re.sub(r":.*$", "", spaced).strip()
    if not cleaned:
        return None

    if cleaned == "nursery" or cleaned in ORDINAL_CLASS_KEYS.values():
        return cleaned

    match = re.search(r"grade\s*(\d)", cleaned)
    if match:
        return ORDINAL_CLASS_KEYS.get(int(match.group(1)))
    return cleaned


def class_key_for_grade(grade_name: str) -> str:
    """Grade display name -> contents.class key; unmapped names pass through."""
    return CLASS_KEYS.get(grade_name, grade_name)


def grade_name_for_class(class_key: str) -> str:
    """contents.class key -> grade display name; unmapped keys pass through."""
    return GRADE_DISPLAY_NAMES.get(class_key, class_key)


def grade_slug(grade_name: str) -> str:
    """Grade name as used in /class/<slug> links: "Grade 1" -> "grade-1"."""
    return grade_name.replace(" ", "-").lower()


def subject_route(subject_name: str, standard: Optional[str] = None) -> str:
    """Route a subject card navigates to."""
    key = subject_name.lower()
    mapped = SUBJECT_ROUTE_ALIASES.get(key, key)
    if mapped.startswith("/"):
        return mapped
    route = f"/lessons/{quote(mapped)}"
    if standard:
        route += f"?class={quote(standard)}"
    return route
