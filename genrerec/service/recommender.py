"""Genre-overlap movie recommender (Jaccard over genre sets)."""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from ..data import Movie
from ..similarity import jaccard
from ..store.catalog import MovieCatalog
from ..utils import parse_int

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 2
SCORE_DECIMALS = 2


class OutcomeKind(str, enum.Enum):
    NO_MATCHES = "no_matches"
    ONE_MATCH = "one_match"
    TWO_MATCHES = "two_matches"
    MATCHES = "matches"
    NO_SELECTION = "no_selection"
    INVALID_ID = "invalid_id"
    NOT_FOUND = "not_found"


ERROR_KINDS: frozenset[OutcomeKind] = frozenset(
    {OutcomeKind.NO_SELECTION, OutcomeKind.INVALID_ID, OutcomeKind.NOT_FOUND}
)


@dataclass(frozen=True)
class ScoredCandidate:
    movie: Movie
    score: float

    @property
    def title(self) -> str:
        return self.movie.title

    @property
    def rounded_score(self) -> float:
        return round(self.score, SCORE_DECIMALS)


@dataclass(frozen=True)
class RecommendationResult:
    kind: OutcomeKind
    selected: Optional[Movie] = None
    matches: tuple[ScoredCandidate, ...] = field(default_factory=tuple)
    candidate_count: int = 0

    @property
    def is_error(self) -> bool:
        return self.kind in ERROR_KINDS

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "selected": None
            if self.selected is None
            else {"id": self.selected.id, "title": self.selected.title},
            "matches": [
                {"id": c.movie.id, "title": c.title, "score": c.rounded_score} for c in self.matches
            ],
        }


def _kind_for_matches(n: int) -> OutcomeKind:
    if n == 0:
        return OutcomeKind.NO_MATCHES
    if n == 1:
        return OutcomeKind.ONE_MATCH
    if n == 2:
        return OutcomeKind.TWO_MATCHES
    return OutcomeKind.MATCHES


def coerce_selected_id(selected_id: Any) -> tuple[Optional[int], Optional[OutcomeKind]]:
    """Turn a raw selection (int, dropdown string or None) into a movie id.

    Returns (movie_id, None) on success or (None, error_kind).
    """
    if selected_id is None:
        return None, OutcomeKind.NO_SELECTION
    if isinstance(selected_id, bool):
        return None, OutcomeKind.INVALID_ID
    if isinstance(selected_id, int):
        return int(selected_id), None
    if isinstance(selected_id, str):
        if selected_id.strip() == "":
            return None, OutcomeKind.NO_SELECTION
        parsed = parse_int(selected_id)
        if parsed is None:
            return None, OutcomeKind.INVALID_ID
        return parsed, None
    return None, OutcomeKind.INVALID_ID


def rank_candidates(selected: Movie, candidates: list[Movie]) -> list[ScoredCandidate]:
    """Score every candidate against `selected`, best first.

    Ties: case-insensitive title ascending, then id ascending.
    """
    scored = [ScoredCandidate(movie=c, score=jaccard(selected.genres, c.genres)) for c in candidates]
    scored.sort(key=lambda c: (-c.score, c.movie.title.casefold(), c.movie.id))
    return scored


def recommend(catalog: MovieCatalog, selected_id: Any, *, top_n: int = DEFAULT_TOP_N) -> RecommendationResult:
    """Recommend up to `top_n` movies sharing genres with the selected one.

    Never raises for bad input: no selection, a non-integer id or an unknown
    id come back as their own `OutcomeKind`.
    """
    t0 = time.perf_counter()

    movie_id, error_kind = coerce_selected_id(selected_id)
    if error_kind is not None or movie_id is None:
        logger.info("recommend rejected selection=%r kind=%s", selected_id, error_kind)
        return RecommendationResult(kind=error_kind or OutcomeKind.INVALID_ID)

    selected = catalog.get_movie(movie_id)
    if selected is None:
        logger.info("recommend movieId=%d not found (catalog size=%d)", movie_id, len(catalog.movies))
        return RecommendationResult(kind=OutcomeKind.NOT_FOUND)

    # Every row sharing the selected id is excluded, duplicates included.
    candidates = [m for m in catalog.movies if m.id != selected.id]
    ranked = rank_candidates(selected, candidates)
    top = tuple(c for c in ranked[: max(0, int(top_n))] if c.score > 0.0)

    result = RecommendationResult(
        kind=_kind_for_matches(len(top)),
        selected=selected,
        matches=top,
        candidate_count=len(candidates),
    )
    logger.info(
        "recommend movieId=%d candidates=%d kind=%s top=%s (%.4fs)",
        movie_id,
        len(candidates),
        result.kind.value,
        [(c.movie.id, c.rounded_score) for c in top],
        time.perf_counter() - t0,
    )
    return result
