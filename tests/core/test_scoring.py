"""
Unit tests for preference scoring and ranking.
"""

import pytest

from reelpick.core.suggest.movie import MovieRecord
from reelpick.core.suggest.scoring import (
    actor_score,
    build_actor_pattern,
    genre_score,
    rank_candidates,
    relevance_score,
)


def candidate(tconst, genres, rating, cast=()):
    return MovieRecord(
        tconst=tconst,
        primary_title=tconst,
        genres=genres,
        average_rating=rating,
        num_votes=5000,
        cast_names=list(cast),
    )


class TestGenreScore:

    def test_counts_distinct_matches(self):
        assert genre_score({"Action", "Sci-Fi"}, "Action, Sci-Fi") == 2
        assert genre_score({"Action", "Drama"}, "Action, Crime") == 1

    def test_case_insensitive_substring(self):
        assert genre_score({"sci-fi"}, "Action, Sci-Fi") == 1
        assert genre_score({"Crime"}, "Crime,Drama") == 1

    def test_no_genres(self):
        assert genre_score({"Action"}, "") == 0
        assert genre_score({"Action"}, None) == 0
        assert genre_score(set(), "Action") == 0


class TestActorScore:

    def test_word_boundary_match(self):
        pattern = build_actor_pattern({"Keanu Reeves"})

        assert actor_score(pattern, ["Laurence Fishburne", "Keanu Reeves"]) == 1
        assert actor_score(pattern, ["KEANU REEVES"]) == 1
        assert actor_score(pattern, ["Keanu Reevesworth"]) == 0

    def test_partial_name_does_not_match_inside_word(self):
        pattern = build_actor_pattern({"Moss"})

        assert actor_score(pattern, ["Carrie-Anne Moss"]) == 1
        assert actor_score(pattern, ["Elisabeth Mossman"]) == 0

    def test_special_characters_are_literal(self):
        pattern = build_actor_pattern({"Robert Downey Jr.", "(.*)"})

        assert actor_score(pattern, ["Robert Downey Jr."]) == 1
        assert actor_score(pattern, ["Robert Downey Jrx"]) == 0
        assert actor_score(pattern, ["Anyone"]) == 0

    def test_empty_actor_set(self):
        assert build_actor_pattern(set()) is None
        assert build_actor_pattern({"", "  "}) is None
        assert actor_score(None, ["Keanu Reeves"]) == 0

    def test_counts_at_most_one(self):
        pattern = build_actor_pattern({"Keanu Reeves", "Laurence Fishburne"})
        assert actor_score(pattern, ["Keanu Reeves", "Laurence Fishburne"]) == 1


class TestRanking:

    def test_relevance_formula(self):
        assert relevance_score(1, 1, 8.0) == pytest.approx((1 * 2 + 1 * 3) * 8.0 * 0.1)
        assert relevance_score(2, 0, 5.0) == pytest.approx(2.0)
        assert relevance_score(1, 0, None) == 0.0

    def test_actor_and_genre_outranks_genre_only(self):
        """Genre+actor match beats a higher-rated genre-only match."""
        both = candidate("tt2", "Action, Thriller", 7.0, cast=["Keanu Reeves"])
        genre_only = candidate("tt1", "Action, Drama", 9.0, cast=["Someone Else"])

        ranked = rank_candidates([genre_only, both], {"Action", "Sci-Fi"}, {"Keanu Reeves"})

        assert [m.tconst for m in ranked] == ["tt2", "tt1"]
        assert ranked[0].genre_score == 1
        assert ranked[0].actor_score == 1
        assert ranked[0].score == pytest.approx((1 * 2 + 1 * 3) * 7.0 * 0.1)
        assert ranked[1].score == pytest.approx(2 * 9.0 * 0.1)

    def test_ineligible_candidates_dropped(self):
        unrelated = candidate("tt1", "Drama", 9.5, cast=["Tim Robbins"])
        ranked = rank_candidates([unrelated], {"Action"}, {"Keanu Reeves"})
        assert ranked == []

    def test_excluded_ids_dropped(self):
        liked = candidate("tt1", "Action", 9.0)
        other = candidate("tt2", "Action", 8.0)

        ranked = rank_candidates([liked, other], {"Action"}, {"X"}, exclude_ids=["tt1"])
        assert [m.tconst for m in ranked] == ["tt2"]

    def test_ties_broken_by_id(self):
        movies = [candidate(t, "Action", 8.0) for t in ("tt3", "tt1", "tt2")]

        ranked = rank_candidates(movies, {"Action"}, {"Nobody"})
        assert [m.tconst for m in ranked] == ["tt1", "tt2", "tt3"]

    def test_ranking_is_deterministic(self):
        def build():
            return [
                candidate("tt5", "Action, Sci-Fi", 7.5, cast=["Keanu Reeves"]),
                candidate("tt4", "Sci-Fi", 8.0),
                candidate("tt3", "Action", 8.0),
                candidate("tt2", "Comedy", 9.0, cast=["Keanu Reeves"]),
                candidate("tt1", "Drama", 9.9),
            ]

        first = [m.tconst for m in rank_candidates(build(), {"Action", "Sci-Fi"}, {"Keanu Reeves"})]
        second = [m.tconst for m in rank_candidates(list(reversed(build())), {"Action", "Sci-Fi"}, {"Keanu Reeves"})]

        assert first == second == ["tt5", "tt2", "tt3", "tt4"]

    def test_limit(self):
        movies = [candidate(f"tt{i:02d}", "Action", 8.0) for i in range(30)]
        assert len(rank_candidates(movies, {"Action"}, {"X"}, limit=20)) == 20

    def test_duplicate_candidates_collapsed(self):
        movies = [candidate("tt1", "Action", 8.0), candidate("tt1", "Action", 8.0)]
        assert len(rank_candidates(movies, {"Action"}, {"X"})) == 1
