"""Set similarity used to rank candidate movies."""

from __future__ import annotations

from typing import AbstractSet


def jaccard(a: AbstractSet[str], b: AbstractSet[str]) -> float:
    """Intersection size over union size.

    Two empty sets score 0.0: no genre information is not treated as a match.
    """
    if not a and not b:
        return 0.0
    return len(a & b) / len(a | b)
