"""MovieLens-100k genre vocabulary and flag decoding."""

from __future__ import annotations

from typing import Sequence


# Order matters: u.item stores one 0/1 flag column per genre, in this order,
# as the trailing 18 fields of every record.
GENRE_NAMES: tuple[str, ...] = (
    "Action",
    "Adventure",
    "Animation",
    "Children's",
    "Comedy",
    "Crime",
    "Documentary",
    "Drama",
    "Fantasy",
    "Film-Noir",
    "Horror",
    "Musical",
    "Mystery",
    "Romance",
    "Sci-Fi",
    "Thriller",
    "War",
    "Western",
)

GENRE_SET: frozenset[str] = frozenset(GENRE_NAMES)


def decode_genre_flags(flags: Sequence[str]) -> frozenset[str]:
    """Map positional 0/1 flags onto `GENRE_NAMES`.

    Only a flag equal to "1" (after stripping) marks the genre as present.
    Positions beyond the end of `flags` count as absent.
    """
    present: list[str] = []
    for i, name in enumerate(GENRE_NAMES):
        flag = flags[i].strip() if i < len(flags) else "0"
        if flag == "1":
            present.append(name)
    return frozenset(present)


def trailing_flag_fields(fields: Sequence[str]) -> Sequence[str]:
    """Return the last `len(GENRE_NAMES)` fields (or all of them if fewer)."""
    start = max(0, len(fields) - len(GENRE_NAMES))
    return fields[start:]
