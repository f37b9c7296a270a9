"""Pydantic schemas for the recommendation API."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


OutcomeKindLiteral = Literal[
    "no_matches",
    "one_match",
    "two_matches",
    "matches",
    "no_selection",
    "invalid_id",
    "not_found",
]


class RecommendRequest(BaseModel):
    """Payload for `/recommend`: the raw selection value from the movie list."""

    # Any JSON value is accepted; booleans, fractions and other non-integers
    # come back as an invalid_id outcome rather than a 422.
    movie_id: Any = Field(None, description="Selected movie id (integer or the dropdown's string value).")


class MovieItem(BaseModel):
    id: int
    title: str


class RecommendationItem(BaseModel):
    """A single recommended movie with its rounded Jaccard score."""

    id: int
    title: str
    score: float = Field(..., ge=0.0, le=1.0)


class RecommendResponse(BaseModel):
    kind: OutcomeKindLiteral
    selected: Optional[MovieItem] = None
    matches: list[RecommendationItem]
    message: str


class MoviesResponse(BaseModel):
    count: int
    results: list[MovieItem]


class LoadResponse(BaseModel):
    kind: Literal["loaded", "retrieval_failed"]
    movies: int
    ratings: int
    skipped_movie_lines: int = 0
    skipped_rating_lines: int = 0
    source_name: Optional[str] = None
    status: Optional[int] = None
    message: str


class HealthResponse(BaseModel):
    status: Literal["ok", "loading", "error"]
    loaded: bool
    movies: int
    ratings: int
