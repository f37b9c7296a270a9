from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Generic, Iterable, Tuple, TypeVar

import pandas as pd

from .genres import GENRE_NAMES, decode_genre_flags, trailing_flag_fields
from .utils import iter_nonblank_lines, parse_int


logger = logging.getLogger(__name__)

T = TypeVar("T")

MOVIE_FIELD_SEP = "|"
RATING_FIELD_SEP = "\t"

MIN_MOVIE_FIELDS = 2
MIN_RATING_FIELDS = 4

FRAME_COLUMNS: Dict[str, Tuple[str, ...]] = {
    "movies": ("movieId", "title", "genres"),
    "ratings": ("userId", "movieId", "rating", "timestamp"),
}


@dataclass(frozen=True)
class Movie:
    id: int
    title: str
    genres: frozenset[str]


@dataclass(frozen=True)
class Rating:
    userId: int
    itemId: int
    rating: int
    timestamp: int


@dataclass(frozen=True)
class ParseReport(Generic[T]):
    """Parsed entities plus the 1-based numbers of lines that were dropped.

    Blank lines are not counted as skipped.
    """

    entities: tuple[T, ...]
    skipped_line_numbers: tuple[int, ...]

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_line_numbers)


def _log_skips(kind: str, skipped: list[int], parsed: int) -> None:
    if skipped:
        logger.warning(
            "Parsed %d %s, skipped %d malformed line(s) (first: %s)",
            parsed,
            kind,
            len(skipped),
            skipped[:10],
        )
    else:
        logger.info("Parsed %d %s", parsed, kind)


def parse_movies(text: str) -> ParseReport[Movie]:
    """Parse u.item records: `id|title|...metadata...|g1|...|g18`.

    Lines with fewer than two fields or a non-integer id are skipped and
    reported. Genre flags are read from the trailing 18 fields by position.
    """
    movies: list[Movie] = []
    skipped: list[int] = []

    for line_no, line in iter_nonblank_lines(text):
        parts = line.split(MOVIE_FIELD_SEP)
        if len(parts) < MIN_MOVIE_FIELDS:
            logger.debug("u.item line %d: expected >= %d fields, got %d", line_no, MIN_MOVIE_FIELDS, len(parts))
            skipped.append(line_no)
            continue

        movie_id = parse_int(parts[0])
        if movie_id is None:
            logger.debug("u.item line %d: non-integer id %r", line_no, parts[0])
            skipped.append(line_no)
            continue

        genres = decode_genre_flags(trailing_flag_fields(parts))
        movies.append(Movie(id=movie_id, title=parts[1].strip(), genres=genres))

    _log_skips("movies", skipped, len(movies))
    return ParseReport(entities=tuple(movies), skipped_line_numbers=tuple(skipped))


def parse_ratings(text: str) -> ParseReport[Rating]:
    """Parse u.data records: `userId<TAB>itemId<TAB>rating<TAB>timestamp`.

    Extra trailing fields are ignored; no range validation is applied.
    """
    ratings: list[Rating] = []
    skipped: list[int] = []

    for line_no, line in iter_nonblank_lines(text):
        parts = line.split(RATING_FIELD_SEP)
        if len(parts) < MIN_RATING_FIELDS:
            logger.debug("u.data line %d: expected >= %d fields, got %d", line_no, MIN_RATING_FIELDS, len(parts))
            skipped.append(line_no)
            continue

        values = [parse_int(p) for p in parts[:MIN_RATING_FIELDS]]
        if any(v is None for v in values):
            logger.debug("u.data line %d: non-integer field in %r", line_no, parts[:MIN_RATING_FIELDS])
            skipped.append(line_no)
            continue

        user_id, item_id, rating, timestamp = values
        ratings.append(Rating(userId=user_id, itemId=item_id, rating=rating, timestamp=timestamp))

    _log_skips("ratings", skipped, len(ratings))
    return ParseReport(entities=tuple(ratings), skipped_line_numbers=tuple(skipped))


def movies_frame(movies: Iterable[Movie]) -> pd.DataFrame:
    """Tabular view of movies; genres rendered pipe-joined in vocabulary order."""
    rows = [
        {
            "movieId": m.id,
            "title": m.title,
            "genres": "|".join(g for g in GENRE_NAMES if g in m.genres),
        }
        for m in movies
    ]
    df = pd.DataFrame(rows, columns=list(FRAME_COLUMNS["movies"]))
    return df.astype({"movieId": "int64", "title": "string", "genres": "string"})


def ratings_frame(ratings: Iterable[Rating]) -> pd.DataFrame:
    """Tabular view of ratings with MovieLens column names."""
    rows = [
        {"userId": r.userId, "movieId": r.itemId, "rating": r.rating, "timestamp": r.timestamp}
        for r in ratings
    ]
    df = pd.DataFrame(rows, columns=list(FRAME_COLUMNS["ratings"]))
    return df.astype("int64")
