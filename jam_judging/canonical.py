"""
Canonical pair representation.

Every comparison is stored with the lexicographically smaller entry id first
and its outcome expressed as preference toward that entry.
"""

from .exceptions import ValidationError
from .models import Outcome, PairKey


def pair_key(id_a: str, id_b: str) -> PairKey:
    """Return the canonical (low, high) key for an unordered pair."""
    if id_a == id_b:
        raise ValidationError(f"a pair needs two distinct entries, got {id_a!r} twice")
    return (id_a, id_b) if id_a < id_b else (id_b, id_a)


def canonicalize(id_a: str, id_b: str, outcome: Outcome) -> tuple[str, str, Outcome]:
    """
    Map (id_a, id_b, outcome) onto its canonical form.

    `outcome` expresses preference toward id_a. If id_a already sorts first the
    triple is returned unchanged, otherwise the ids are swapped and the
    outcome inverted. Ties and skips are unaffected by the swap.

    Raises:
        ValidationError: if both ids are the same entry
    """
    low, high = pair_key(id_a, id_b)
    if low == id_a:
        return low, high, outcome
    return low, high, outcome.inverted()
