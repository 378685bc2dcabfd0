# ---------- NORMALIZATION FUNCTIONS ----------

from typing import Iterable, List


def normalize_token(tok: str) -> str:
    """
    Clean a display value: trim and collapse inner whitespace.

    The original casing is kept, so "  Node.js " becomes "Node.js".

    Args:
        tok: Raw value.

    Returns:
        The cleaned value ("" for blank input).
    """

    return " ".join(tok.split()) if tok else ""


def skill_key(name: str) -> str:
    """
    Comparison key for skill names.

    Two names with the same key are the same skill: "GO", "go" and " Go "
    all map to "go". Only used for comparison, never stored.

    Args:
        name: Skill name.

    Returns:
        Case-folded, whitespace-normalized key.
    """

    return normalize_token(name).casefold()


def normalize_list(items: Iterable[str]) -> List[str]:
    """
    Clean and deduplicate values case-insensitively, keeping first occurrences.

    Args:
        items: Raw values; non-strings and blanks are skipped.

    Returns:
        normalized: Cleaned values in first-seen order.
    """

    normalized = []
    seen = set()

    for item in items:
        if not isinstance(item, str):
            continue
        val = normalize_token(item)
        key = val.casefold()
        if val and key not in seen:
            normalized.append(val)
            seen.add(key)

    return normalized


def unique_ids(ids: Iterable[str]) -> List[str]:
    """
    Deduplicate ids, keeping insertion order.

    Args:
        ids: Ids, possibly with repeats.

    Returns:
        Ids in first-seen order.
    """

    return list(dict.fromkeys(ids))
