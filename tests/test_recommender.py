from __future__ import annotations

import pytest

from genrerec.data import Movie
from genrerec.genres import GENRE_NAMES
from genrerec.service.recommender import OutcomeKind, coerce_selected_id, rank_candidates, recommend
from genrerec.store.catalog import MovieCatalog


def _catalog(*movies: Movie) -> MovieCatalog:
    lines = []
    for m in movies:
        flags = ["1" if g in m.genres else "0" for g in GENRE_NAMES]
        lines.append(f"{m.id}|{m.title}|" + "|".join(flags))
    return MovieCatalog.from_texts("\n".join(lines))


def test_recommend_single_match_excludes_zero_scores() -> None:
    catalog = _catalog(
        Movie(1, "A", frozenset({"Action"})),
        Movie(2, "B", frozenset({"Action"})),
        Movie(3, "C", frozenset({"Drama"})),
    )

    result = recommend(catalog, 1)

    assert result.kind is OutcomeKind.ONE_MATCH
    assert result.selected.title == "A"
    assert [(c.title, c.rounded_score) for c in result.matches] == [("B", 1.0)]
    assert result.candidate_count == 2


def test_recommend_ties_break_by_case_insensitive_title() -> None:
    catalog = _catalog(
        Movie(1, "Liked", frozenset({"Action", "Sci-Fi"})),
        Movie(2, "zeta", frozenset({"Action"})),
        Movie(3, "Alpha", frozenset({"Sci-Fi"})),
        Movie(4, "beta", frozenset({"Action"})),
    )

    first = recommend(catalog, 1)
    again = recommend(catalog, "1")

    assert first.kind is OutcomeKind.TWO_MATCHES
    assert [c.title for c in first.matches] == ["Alpha", "beta"]
    assert [c.rounded_score for c in first.matches] == [0.5, 0.5]
    assert first.matches == again.matches


def test_recommend_orders_by_score_then_caps_at_two(item_text: str) -> None:
    catalog = MovieCatalog.from_texts(item_text)

    result = recommend(catalog, 1)  # Action

    assert result.kind is OutcomeKind.TWO_MATCHES
    assert [c.movie.id for c in result.matches] == [2, 4]
    assert result.matches[0].score == pytest.approx(0.5)


def test_recommend_top_n_override_returns_more(item_text: str) -> None:
    catalog = MovieCatalog.from_texts(item_text)

    result = recommend(catalog, 2, top_n=5)

    # Delta matches exactly, Alpha shares Action; Charlie/Echo share nothing.
    assert result.kind is OutcomeKind.TWO_MATCHES
    assert [(c.title, c.rounded_score) for c in result.matches] == [("Delta (1997)", 1.0), ("Alpha (1995)", 0.5)]


def test_recommend_many_matches_kind() -> None:
    catalog = _catalog(
        Movie(1, "A", frozenset({"Comedy"})),
        Movie(2, "B", frozenset({"Comedy"})),
        Movie(3, "C", frozenset({"Comedy"})),
        Movie(4, "D", frozenset({"Comedy"})),
    )

    assert recommend(catalog, 1, top_n=3).kind is OutcomeKind.MATCHES


def test_recommend_no_matches_when_genres_empty(item_text: str) -> None:
    catalog = MovieCatalog.from_texts(item_text)

    result = recommend(catalog, 5)  # Echo has no genres

    assert result.kind is OutcomeKind.NO_MATCHES
    assert result.matches == ()
    assert not result.is_error


def test_recommend_rounds_scores_to_two_decimals() -> None:
    catalog = _catalog(
        Movie(1, "A", frozenset({"Action", "Crime", "Drama"})),
        Movie(2, "B", frozenset({"Action"})),
    )

    match = recommend(catalog, 1).matches[0]

    assert match.score == pytest.approx(1 / 3)
    assert match.rounded_score == 0.33


def test_recommend_excludes_every_row_with_selected_id() -> None:
    catalog = MovieCatalog.from_texts("1|First|1\n1|Second|1\n2|Other|1")

    result = recommend(catalog, 1)

    assert [c.movie.id for c in result.matches] == [2]


@pytest.mark.parametrize(
    ("selected", "kind"),
    [
        (None, OutcomeKind.NO_SELECTION),
        ("", OutcomeKind.NO_SELECTION),
        ("   ", OutcomeKind.NO_SELECTION),
        ("abc", OutcomeKind.INVALID_ID),
        ("1.5", OutcomeKind.INVALID_ID),
        (True, OutcomeKind.INVALID_ID),
        (2.0, OutcomeKind.INVALID_ID),
        (999, OutcomeKind.NOT_FOUND),
        ("999", OutcomeKind.NOT_FOUND),
    ],
)
def test_recommend_user_input_errors_are_outcomes(item_text: str, selected: object, kind: OutcomeKind) -> None:
    catalog = MovieCatalog.from_texts(item_text)

    result = recommend(catalog, selected)

    assert result.kind is kind
    assert result.is_error
    assert result.matches == ()


def test_recommend_on_empty_catalog_is_not_found() -> None:
    assert recommend(MovieCatalog(), 1).kind is OutcomeKind.NOT_FOUND


def test_recommend_does_not_mutate_catalog(item_text: str) -> None:
    catalog = MovieCatalog.from_texts(item_text)
    before = catalog.movies

    recommend(catalog, 1)

    assert catalog.movies is before


def test_coerce_selected_id_accepts_padded_string() -> None:
    assert coerce_selected_id(" 42 ") == (42, None)


def test_rank_candidates_keeps_zero_scores_last() -> None:
    liked = Movie(1, "L", frozenset({"War"}))
    ranked = rank_candidates(liked, [Movie(2, "x", frozenset()), Movie(3, "Y", frozenset({"War"}))])

    assert [c.movie.id for c in ranked] == [3, 2]


def test_result_to_dict_shape(item_text: str) -> None:
    catalog = MovieCatalog.from_texts(item_text)

    payload = recommend(catalog, "4").to_dict()

    assert payload["kind"] == "two_matches"
    assert payload["selected"] == {"id": 4, "title": "Delta (1997)"}
    assert payload["matches"][0] == {"id": 2, "title": "bravo (1995)", "score": 1.0}
