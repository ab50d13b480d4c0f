"""
Unit tests for profile derivation.
"""

from datetime import datetime, timezone

from reelpick.core.suggest.movie import MovieRecord, format_runtime, parse_float, parse_int
from reelpick.core.suggest.profile import (
    PreferenceProfile,
    derive_profile,
    extract_actors,
    extract_genres,
    new_profile,
    split_tokens,
)


def movie(tconst, genres="", cast=""):
    return MovieRecord(tconst=tconst, genres=genres, cast=cast)


class TestTokens:

    def test_split_tokens(self):
        assert split_tokens("Action, Sci-Fi") == ["Action", "Sci-Fi"]
        assert split_tokens("Action,Sci-Fi,") == ["Action", "Sci-Fi"]
        assert split_tokens(" , ") == []
        assert split_tokens(None) == []

    def test_extract_genres_union(self):
        genres = extract_genres([
            movie("tt1", genres="Action, Sci-Fi"),
            movie("tt2", genres="Action, Crime"),
            movie("tt3"),
        ])
        assert genres == {"Action", "Sci-Fi", "Crime"}

    def test_extract_actors_first_three_per_movie(self):
        actors = extract_actors([
            movie("tt1", cast="A One, B Two, C Three, D Four"),
            movie("tt2", cast="E Five"),
        ])
        assert actors == {"A One", "B Two", "C Three", "E Five"}

    def test_extract_actors_custom_count(self):
        actors = extract_actors([movie("tt1", cast="A One, B Two, C Three")], per_movie=1)
        assert actors == {"A One"}


class TestDeriveProfile:

    def test_derive_replaces_sets_and_keeps_query(self):
        stored = PreferenceProfile(
            user_id="u1",
            initial_query="Matrix",
            preferred_genres={"Western"},
            preferred_actors={"John Wayne"},
        )
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)

        profile = derive_profile(
            stored,
            [movie("tt1", genres="Action, Sci-Fi", cast="Keanu Reeves, Laurence Fishburne")],
            now=now,
        )

        assert profile.initial_query == "Matrix"
        assert profile.preferred_genres == {"Action", "Sci-Fi"}
        assert profile.preferred_actors == {"Keanu Reeves", "Laurence Fishburne"}
        assert profile.last_updated == now
        # input is left untouched
        assert stored.preferred_genres == {"Western"}

    def test_derive_from_nothing_clears_preferences(self):
        stored = PreferenceProfile(user_id="u1", preferred_genres={"Drama"}, preferred_actors={"X"})

        profile = derive_profile(stored, [])

        assert profile.preferred_genres == set()
        assert profile.preferred_actors == set()
        assert not profile.has_signal

    def test_has_signal_needs_both_sets(self):
        assert not PreferenceProfile(user_id="u", preferred_genres={"Action"}).has_signal
        assert not PreferenceProfile(user_id="u", preferred_actors={"X"}).has_signal
        assert PreferenceProfile(user_id="u", preferred_genres={"Action"}, preferred_actors={"X"}).has_signal

    def test_new_profile(self):
        profile = new_profile("u1", "Heat")

        assert profile.initial_query == "Heat"
        assert profile.preferred_genres == set()
        assert profile.last_updated is not None


class TestFieldParsing:

    def test_parse_int(self):
        assert parse_int("1999") == 1999
        assert parse_int(" 42 ") == 42
        assert parse_int("\\N") is None
        assert parse_int(None) is None
        assert parse_int(7.9) == 7

    def test_parse_float(self):
        assert parse_float("8.7") == 8.7
        assert parse_float(9) == 9.0
        assert parse_float("n/a") is None

    def test_format_runtime(self):
        assert format_runtime(136) == "136 min"
        assert format_runtime("95") == "95 min"
        assert format_runtime(0) == "N/A"
        assert format_runtime(None) == ""
        assert format_runtime("136 min") == "136 min"
