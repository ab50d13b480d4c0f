"""
Movie display card component with like/dislike buttons.
"""

from typing import Callable

import streamlit as st


def render_movie_card(movie: dict, on_feedback: Callable[[str, bool], None] | None = None) -> None:
    """
    Render a movie card.

    Args:
        movie: Movie as returned by the API (camelCase keys)
        on_feedback: Callback(tconst, liked) for the like/dislike buttons
    """
    tconst = movie["tconst"]
    with st.container():
        col1, col2, col3 = st.columns([1, 4, 1])
        with col1:
            if movie.get("poster"):
                st.image(movie["poster"], use_container_width=True)
        with col2:
            st.markdown(f"**{movie.get('primaryTitle', tconst)}**")
            meta = [str(v) for v in (movie.get("startYear"), movie.get("genres"), movie.get("runtime")) if v]
            if movie.get("averageRating") is not None:
                meta.append(f"★ {movie['averageRating']:.1f}")
            if meta:
                st.caption(" | ".join(meta))
            if movie.get("director"):
                st.caption(f"Director: {movie['director']}")
            if movie.get("cast"):
                st.caption(f"Cast: {movie['cast']}")
            st.write(movie.get("plot", ""))
        with col3:
            if on_feedback:
                if st.button("👍", key=f"like_{tconst}"):
                    on_feedback(tconst, True)
                if st.button("👎", key=f"dislike_{tconst}"):
                    on_feedback(tconst, False)
        st.divider()
