"""Data quality checks over a loaded catalog.

Every check only reports: malformed input has already been dropped by the
parsers, so nothing here raises. Findings come back as PASS/WARN results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .data import movies_frame, ratings_frame
from .genres import GENRE_SET
from .store.catalog import MovieCatalog


@dataclass(frozen=True)
class CheckResult:
    """Single validation check outcome."""

    name: str
    status: str  # "PASS" | "WARN"
    details: str


def run_catalog_checks(catalog: MovieCatalog) -> Tuple[CheckResult, ...]:
    """Run data-quality checks on the currently loaded catalog."""
    movies = movies_frame(catalog.movies)
    ratings = ratings_frame(catalog.ratings)

    checks: List[CheckResult] = []

    def _pass_or_warn(name: str, ok: bool, warn_msg: str) -> None:
        if ok:
            checks.append(CheckResult(name=name, status="PASS", details="OK"))
        else:
            checks.append(CheckResult(name=name, status="WARN", details=warn_msg))

    # 1) Skipped lines from the last parse
    movie_skips = catalog.movie_report.skipped_line_numbers if catalog.movie_report else ()
    rating_skips = catalog.rating_report.skipped_line_numbers if catalog.rating_report else ()
    _pass_or_warn(
        "movies.skipped_lines",
        ok=(len(movie_skips) == 0),
        warn_msg=f"u.item: {len(movie_skips)} malformed line(s) skipped, first: {list(movie_skips[:10])}",
    )
    _pass_or_warn(
        "ratings.skipped_lines",
        ok=(len(rating_skips) == 0),
        warn_msg=f"u.data: {len(rating_skips)} malformed line(s) skipped, first: {list(rating_skips[:10])}",
    )

    # 2) Movie ids are assumed unique by lookups
    dup_ids = sorted(movies.loc[movies["movieId"].duplicated(), "movieId"].unique().tolist())
    _pass_or_warn(
        "movies.id_unique",
        ok=(len(dup_ids) == 0),
        warn_msg=f"Duplicate movie ids (first occurrence is used for lookups): {dup_ids[:10]}",
    )

    # 3) Genre vocabulary
    observed: set[str] = set()
    for m in catalog.movies:
        observed.update(m.genres)
    unknown = sorted(observed - GENRE_SET)
    _pass_or_warn(
        "movies.genres_vocabulary",
        ok=(len(unknown) == 0),
        warn_msg=f"Unknown genre names found: {unknown}",
    )

    # 4) Movies without any genre can never be recommended
    n_no_genre = int((movies["genres"] == "").sum())
    _pass_or_warn(
        "movies.has_genres",
        ok=(n_no_genre == 0),
        warn_msg=f"{n_no_genre} movie(s) have no genre flags set",
    )

    # 5) Ratings reference known movies (not enforced at load time)
    movie_ids = set(movies["movieId"].tolist())
    bad_items = sorted(set(ratings["movieId"].tolist()) - movie_ids)
    _pass_or_warn(
        "ratings.item_ids_known",
        ok=(len(bad_items) == 0),
        warn_msg=f"{len(bad_items)} rated item id(s) not in u.item: {bad_items[:10]}",
    )

    return tuple(checks)
