"""Description normalization for duplicate and recurring matching."""
import re
import unicodedata

COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")


def normalize_description(text: str) -> str:
    """
    Canonical form of a description.

    Decomposes to NFD, drops combining diacritical marks, lower-cases and
    trims surrounding whitespace. Two descriptions are the same iff their
    canonical forms are equal.

    Args:
        text: Raw description

    Returns:
        Canonical description
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text)
    return COMBINING_MARKS.sub("", decomposed).lower().strip()


def same_description(a: str, b: str) -> bool:
    """True if both descriptions share a canonical form."""
    return normalize_description(a) == normalize_description(b)
