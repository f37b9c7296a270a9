"""Owned in-memory movie/rating catalog with an init/reload lifecycle."""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Optional

from ..data import Movie, ParseReport, Rating, parse_movies, parse_ratings
from ..sources import FetchResponse, RetrievalError, TextSource


logger = logging.getLogger(__name__)

ITEM_RESOURCE = "u.item"
DATA_RESOURCE = "u.data"


class LoadKind(str, enum.Enum):
    LOADED = "loaded"
    RETRIEVAL_FAILED = "retrieval_failed"


@dataclass(frozen=True)
class LoadOutcome:
    kind: LoadKind
    movies: int = 0
    ratings: int = 0
    skipped_movie_lines: int = 0
    skipped_rating_lines: int = 0
    source_name: Optional[str] = None
    status: Optional[int] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.kind is LoadKind.LOADED


@dataclass(frozen=True)
class MovieOption:
    id: int
    title: str


class MovieCatalog:
    """Movies and ratings owned by whoever holds the handle.

    `load()` fetches u.item then u.data and swaps both collections in only
    after both parsed, so a failure leaves the previous contents untouched.
    """

    def __init__(
        self,
        *,
        item_resource: str = ITEM_RESOURCE,
        data_resource: str = DATA_RESOURCE,
    ) -> None:
        self.item_resource = item_resource
        self.data_resource = data_resource
        self._movies: tuple[Movie, ...] = ()
        self._ratings: tuple[Rating, ...] = ()
        self._movie_report: ParseReport[Movie] | None = None
        self._rating_report: ParseReport[Rating] | None = None
        self._movie_id_to_index: dict[int, int] = {}
        self.load_count = 0

    @classmethod
    def from_texts(cls, item_text: str, data_text: str = "") -> "MovieCatalog":
        """Build a loaded catalog directly from raw u.item / u.data texts."""
        catalog = cls()
        catalog._install(parse_movies(item_text), parse_ratings(data_text))
        return catalog

    @property
    def movies(self) -> tuple[Movie, ...]:
        return self._movies

    @property
    def ratings(self) -> tuple[Rating, ...]:
        return self._ratings

    @property
    def movie_report(self) -> ParseReport[Movie] | None:
        return self._movie_report

    @property
    def rating_report(self) -> ParseReport[Rating] | None:
        return self._rating_report

    @property
    def is_loaded(self) -> bool:
        return self.load_count > 0

    def _install(self, movie_report: ParseReport[Movie], rating_report: ParseReport[Rating]) -> None:
        index: dict[int, int] = {}
        for i, movie in enumerate(movie_report.entities):
            # First occurrence wins for lookups; duplicates stay in the collection.
            index.setdefault(movie.id, i)

        self._movies = movie_report.entities
        self._ratings = rating_report.entities
        self._movie_report = movie_report
        self._rating_report = rating_report
        self._movie_id_to_index = index
        self.load_count += 1

    async def _fetch_text(self, source: TextSource, name: str) -> str:
        resp: FetchResponse = await source.fetch(name)
        if not resp.ok:
            raise RetrievalError(name, status=resp.status)
        return resp.body

    async def load(self, source: TextSource) -> LoadOutcome:
        """Fetch and parse u.item then u.data, replacing the catalog on success.

        Returns a `LoadOutcome`; retrieval failures do not raise.
        """
        t0 = time.perf_counter()
        try:
            item_text = await self._fetch_text(source, self.item_resource)
            movie_report = parse_movies(item_text)

            data_text = await self._fetch_text(source, self.data_resource)
            rating_report = parse_ratings(data_text)
        except RetrievalError as exc:
            logger.error("Catalog load from %r aborted: %s", source, exc)
            return LoadOutcome(
                kind=LoadKind.RETRIEVAL_FAILED,
                movies=len(self._movies),
                ratings=len(self._ratings),
                source_name=exc.source_name,
                status=exc.status,
                message=str(exc),
            )

        self._install(movie_report, rating_report)
        logger.info(
            "Loaded catalog movies=%d ratings=%d skipped=(%d, %d) in %.2fs",
            len(self._movies),
            len(self._ratings),
            movie_report.skipped_count,
            rating_report.skipped_count,
            time.perf_counter() - t0,
        )
        return LoadOutcome(
            kind=LoadKind.LOADED,
            movies=len(self._movies),
            ratings=len(self._ratings),
            skipped_movie_lines=movie_report.skipped_count,
            skipped_rating_lines=rating_report.skipped_count,
            message="Data loaded. Please select a movie.",
        )

    async def init(self, source: TextSource) -> LoadOutcome:
        if self.is_loaded:
            logger.info("Catalog already loaded (%d loads); reloading", self.load_count)
        return await self.load(source)

    async def reload(self, source: TextSource) -> LoadOutcome:
        return await self.load(source)

    def has_movie(self, movie_id: int) -> bool:
        """Return True if the catalog contains `movie_id`."""
        return int(movie_id) in self._movie_id_to_index

    def get_movie(self, movie_id: int) -> Movie | None:
        """Return the first movie with `movie_id`, or None."""
        idx = self._movie_id_to_index.get(int(movie_id))
        return None if idx is None else self._movies[idx]

    def movie_options(self) -> list[MovieOption]:
        """Selection list sorted by case-insensitive title."""
        ordered = sorted(self._movies, key=lambda m: (m.title.casefold(), m.id))
        return [MovieOption(id=m.id, title=m.title) for m in ordered]
