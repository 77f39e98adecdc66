"""
Text normalization helpers shared by the extractor, normalizer and roster.
"""
import re

_WHITESPACE_RE = re.compile(r"\s+")
_REFERENCE_RE = re.compile(r"\[(?:\d+|[a-z]|note \d+|edit)\]", re.IGNORECASE)
_KEY_RE = re.compile(r"[^a-z0-9]+")


def normalize_whitespace(value: str) -> str:
    """
    Collapse internal whitespace to single spaces and trim.

    Examples:
        "  5 LP \n" -> "5 LP"
    """
    return _WHITESPACE_RE.sub(" ", value or "").strip()


def clean_cell_text(value: str) -> str:
    """
    Normalize a scraped cell: strip reference markers like [1] and collapse whitespace.

    Examples:
        "+2[1]" -> "+2"
        "Hadoken (236P)" -> "Hadoken (236P)"
    """
    return normalize_whitespace(_REFERENCE_RE.sub("", value or ""))


def normalize_key(value: str) -> str:
    """
    Lowercase ASCII key with all punctuation and spaces removed.

    Examples:
        "Chun-Li" -> "chunli"
        "E.Honda" -> "ehonda"
    """
    return _KEY_RE.sub("", (value or "").lower())


def normalize_header(value: str) -> str:
    """
    Lowercase header key with punctuation collapsed to single spaces.

    Examples:
        "On-Hit" -> "on hit"
        "Start Up (frames)" -> "start up frames"
    """
    return _KEY_RE.sub(" ", (value or "").lower()).strip()
