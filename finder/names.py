"""
Person-name matching across independently entered sources.

Streamtime, the team sheet and the freelancer roster are typed by different
people, so "Giedrė" in one is "Giedre" in another. Names are compared after
stripping accents and folding case.
"""

import unicodedata


def normalize_name(name: str | None) -> str:
    """
    Normalize a free-text person name for matching.

    Decomposes to NFD, drops combining marks, casefolds and trims.

    Examples:
        "José García"  -> "jose garcia"
        " GIEDRĖ "     -> "giedre"
    """
    if not name:
        return ""
    decomposed = unicodedata.normalize("NFD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold().strip()


def names_match(first: str | None, second: str | None) -> bool:
    """Return True if two names denote the same person."""
    a = (first or "").strip()
    b = (second or "").strip()
    if not a or not b:
        return False
    if a.lower() == b.lower():
        return True
    return normalize_name(a) == normalize_name(b)


def full_name(first_name: str | None, last_name: str | None) -> str:
    """Join first and last name the way Streamtime displays them."""
    parts = [(p or "").strip() for p in (first_name, last_name)]
    return " ".join(p for p in parts if p)
