"""
Exceptions raised by the suggestion engine.
"""


class SuggestError(RuntimeError):
    """Base class for suggestion engine errors."""


class SourceUnavailable(SuggestError):
    """The catalog or the enrichment source failed or timed out."""


class ProfilePersistenceError(SuggestError):
    """A preference profile or feedback record could not be written."""

    def __init__(self, user_id: str, message: str = "Failed to save user preferences"):
        super().__init__(f"{message} (user {user_id})")
        self.user_id = user_id
