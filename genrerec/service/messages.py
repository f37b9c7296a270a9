"""User-facing texts for recommendation and load outcomes."""

from __future__ import annotations

from ..store.catalog import LoadKind, LoadOutcome
from .recommender import OutcomeKind, RecommendationResult


LOADING_MESSAGE = "Loading data..."
GENERIC_ERROR_MESSAGE = "Error computing recommendations."

_ERROR_MESSAGES: dict[OutcomeKind, str] = {
    OutcomeKind.NO_SELECTION: "Please select a movie first.",
    OutcomeKind.INVALID_ID: "Invalid movie selection.",
    OutcomeKind.NOT_FOUND: "Selected movie not found in dataset.",
}

_MATCH_KINDS = frozenset({OutcomeKind.ONE_MATCH, OutcomeKind.TWO_MATCHES, OutcomeKind.MATCHES})


def render_recommendation(result: RecommendationResult) -> str:
    """Plain-text rendering of a recommendation outcome."""
    kind = result.kind
    if kind in _ERROR_MESSAGES:
        return _ERROR_MESSAGES[kind]

    title = result.selected.title if result.selected is not None else ""
    if kind is OutcomeKind.NO_MATCHES:
        return f'Because you liked "{title}", we couldn\'t find very similar movies.'
    if kind in _MATCH_KINDS:
        lines = [f'Because you liked "{title}", we recommend:']
        lines.extend(f"- {c.title} (score: {c.rounded_score:.2f})" for c in result.matches)
        return "\n".join(lines)

    raise ValueError(f"Unhandled outcome kind: {kind!r}")


def render_load(outcome: LoadOutcome) -> str:
    if outcome.kind is LoadKind.LOADED:
        return "Data loaded. Please select a movie."
    if outcome.kind is LoadKind.RETRIEVAL_FAILED:
        return f"Error loading data: {outcome.message}"
    raise ValueError(f"Unhandled load outcome: {outcome.kind!r}")
