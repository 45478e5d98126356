"""Global concept order.

Concepts are ordered by their term using a locale-aware, numeric-aware
comparison: accents and case do not split otherwise equal terms, and digit
runs compare by value ("Unit 2" before "Unit 10"). Remaining ties fall back
to the raw term and then to the structural identity (shard id, local
offset), so the order is total and reproducible.
"""

import re
import unicodedata

from conceptdeck.domain.common.value_objects import ConceptIdentity

# Splits "Unit 10b" into ["Unit ", "10", "b"]; only ASCII digits count as numbers.
_DIGIT_RUN = re.compile(r"([0-9]+)")

# (kind, number, text): numbers (kind 0) sort before text (kind 1)
TermChunk = tuple[int, int, str]


def _fold(term: str) -> str:
    """Strip accents and case so that "Élan" and "elan" collate together."""
    decomposed = unicodedata.normalize("NFKD", term)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(stripped.casefold().split())


def term_collation_key(term: str) -> tuple[TermChunk, ...]:
    """Primary collation key of a term."""
    chunks: list[TermChunk] = []
    for part in _DIGIT_RUN.split(_fold(term)):
        if not part:
            continue
        if part.isascii() and part.isdigit():
            chunks.append((0, int(part), ""))
        else:
            chunks.append((1, 0, part))
    return tuple(chunks)


def concept_sort_key(
    term: str, identity: ConceptIdentity
) -> tuple[tuple[TermChunk, ...], str, str, int]:
    """Total order key: collated term, raw term, then (shard id, local offset)."""
    return term_collation_key(term), term, str(identity.shard_id), identity.local_offset


def compare_terms(left: str, right: str) -> int:
    """Three-way comparison of two terms by the primary collation key alone."""
    left_key, right_key = term_collation_key(left), term_collation_key(right)
    return (left_key > right_key) - (left_key < right_key)
