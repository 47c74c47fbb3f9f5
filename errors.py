"""Error taxonomy shared by the store backends, the lifecycle manager and the surfaces."""


class LearningError(Exception):
    """Base class for errors surfaced to the presentation layer."""


class NotFound(LearningError):
    """A referenced subject or learning session does not resolve."""

    def __init__(self, table: str, record_id: str):
        self.table = table
        self.record_id = record_id
        super().__init__(f"No row in '{table}' with id '{record_id}'")


class ValidationFailure(LearningError):
    """Input rejected before any write was issued."""


class SessionCompleted(LearningError):
    """An answer was submitted to a session that is already completed."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session '{session_id}' is already completed")


class StoreUnavailable(LearningError):
    """The data store read or write failed."""
