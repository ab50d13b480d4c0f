"""
SQLAlchemy ORM models for the ReelPick database.

The catalog tables follow the shape of the public IMDb dataset dumps
(title.basics, title.ratings, name.basics, title.principals). The
user_preferences and user_feedback tables hold the per-user session state
owned by the suggestion engine.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import (
    Integer, String, Float, Text, Boolean, ForeignKey,
    UniqueConstraint, Index, TIMESTAMP
)
from sqlalchemy.orm import DeclarativeBase, relationship, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


class Title(Base):
    """
    Title table (IMDb title.basics).

    Attributes:
        tconst: IMDb title identifier, e.g. 'tt0133093'
        title_type: Kind of title ('movie', 'short', 'tvSeries', ...)
        primary_title: Display title
        original_title: Title in the original language
        start_year: Release year
        runtime_minutes: Runtime in minutes
        genres: Comma-separated genre list, e.g. 'Action,Sci-Fi'
    """
    __tablename__ = 'title_basics'

    tconst: Mapped[str] = mapped_column(String(20), primary_key=True)
    title_type: Mapped[str] = mapped_column(String(20), nullable=False, default='movie')
    primary_title: Mapped[str] = mapped_column(Text, nullable=False)
    original_title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    start_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    runtime_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    genres: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Relationships
    rating: Mapped[Optional["TitleRating"]] = relationship(
        "TitleRating",
        back_populates="title",
        uselist=False,
        cascade="all, delete-orphan"
    )
    principals: Mapped[List["Principal"]] = relationship(
        "Principal",
        back_populates="title",
        cascade="all, delete-orphan",
        order_by="Principal.ordering"
    )

    __table_args__ = (
        Index('idx_title_basics_title', 'primary_title'),
        Index('idx_title_basics_type', 'title_type'),
    )

    def __repr__(self) -> str:
        return f"<Title(tconst='{self.tconst}', title='{self.primary_title}', year={self.start_year})>"


class TitleRating(Base):
    """Rating summary for a title (IMDb title.ratings)."""
    __tablename__ = 'title_ratings'

    tconst: Mapped[str] = mapped_column(
        String(20),
        ForeignKey('title_basics.tconst', ondelete='CASCADE'),
        primary_key=True
    )
    average_rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    num_votes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    title: Mapped["Title"] = relationship("Title", back_populates="rating")

    __table_args__ = (
        Index('idx_title_ratings_votes', 'num_votes'),
    )

    def __repr__(self) -> str:
        return f"<TitleRating(tconst='{self.tconst}', rating={self.average_rating}, votes={self.num_votes})>"


class Person(Base):
    """Cast or crew member (IMDb name.basics)."""
    __tablename__ = 'name_basics'

    nconst: Mapped[str] = mapped_column(String(20), primary_key=True)
    primary_name: Mapped[str] = mapped_column(Text, nullable=False)

    credits: Mapped[List["Principal"]] = relationship("Principal", back_populates="person")

    __table_args__ = (
        Index('idx_name_basics_name', 'primary_name'),
    )

    def __repr__(self) -> str:
        return f"<Person(nconst='{self.nconst}', name='{self.primary_name}')>"


class Principal(Base):
    """
    Principal cast/crew credit (IMDb title.principals).

    Attributes:
        tconst: Title the credit belongs to
        ordering: Billing order within the title
        nconst: Credited person
        category: 'actor', 'actress', 'director', 'writer', ...
        job: Job title, if any
        characters: Played characters, if any
    """
    __tablename__ = 'title_principals'

    tconst: Mapped[str] = mapped_column(
        String(20),
        ForeignKey('title_basics.tconst', ondelete='CASCADE'),
        primary_key=True
    )
    ordering: Mapped[int] = mapped_column(Integer, primary_key=True)
    nconst: Mapped[str] = mapped_column(
        String(20),
        ForeignKey('name_basics.nconst', ondelete='CASCADE'),
        nullable=False
    )
    category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    job: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    characters: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    title: Mapped["Title"] = relationship("Title", back_populates="principals")
    person: Mapped["Person"] = relationship("Person", back_populates="credits")

    __table_args__ = (
        Index('idx_title_principals_nconst', 'nconst'),
    )

    def __repr__(self) -> str:
        return f"<Principal(tconst='{self.tconst}', nconst='{self.nconst}', category='{self.category}')>"


class UserPreference(Base):
    """
    Preference profile for a suggestion session.

    Attributes:
        user_id: Opaque session/user identifier
        initial_query: Free-text query captured at session start
        preferred_genres: JSON array of genre tokens
        preferred_actors: JSON array of actor name tokens
        last_updated: Timestamp of the most recent recompute
    """
    __tablename__ = 'user_preferences'

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    initial_query: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    preferred_genres: Mapped[str] = mapped_column(Text, nullable=False, default='[]')
    preferred_actors: Mapped[str] = mapped_column(Text, nullable=False, default='[]')
    last_updated: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        server_default=func.current_timestamp()
    )

    def __repr__(self) -> str:
        return f"<UserPreference(user_id='{self.user_id}', query='{self.initial_query}')>"


class UserFeedback(Base):
    """
    Liked/disliked fact for a (user, movie) pair.

    One row per pair; repeated feedback overwrites `liked` and refreshes
    `created_at`.
    """
    __tablename__ = 'user_feedback'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    movie_id: Mapped[str] = mapped_column(String(20), nullable=False)
    liked: Mapped[bool] = mapped_column(Boolean, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        server_default=func.current_timestamp()
    )

    __table_args__ = (
        UniqueConstraint('user_id', 'movie_id', name='unique_user_movie_feedback'),
        Index('idx_user_feedback_user_id', 'user_id'),
        Index('idx_user_feedback_movie_id', 'movie_id'),
    )

    def __repr__(self) -> str:
        return f"<UserFeedback(user_id='{self.user_id}', movie_id='{self.movie_id}', liked={self.liked})>"
