"""Description similarity used to merge duplicate issue reports."""

import re

_NON_ALPHA = re.compile(r"[^a-z\s]+")
_WHITESPACE = re.compile(r"\s+")


def normalize_description(text: str) -> str:
    """Lower-case, drop punctuation and digits, collapse whitespace."""
    text = _NON_ALPHA.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


def levenshtein(a: str, b: str) -> int:
    """Edit distance between two strings (insert, delete, substitute)."""
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (char_a != char_b),
                )
            )
        previous = current
    return previous[-1]


def description_similarity(a: str, b: str) -> float:
    """Similarity in [0, 1] of two issue descriptions after normalization.

    Computed as ``1 - distance / longer_length``; two empty descriptions
    are identical.
    """
    norm_a = normalize_description(a)
    norm_b = normalize_description(b)
    longest = max(len(norm_a), len(norm_b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein(norm_a, norm_b) / longest
