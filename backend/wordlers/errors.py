"""Scoreboard error taxonomy.

Every error carries the HTTP status the API answers with and a message that
is shown to players verbatim.
"""


class ScoreboardError(Exception):
    status = 500

    def __init__(self, message, status=None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status

    def to_dict(self):
        return {'error': self.message}


class StoreUnavailable(ScoreboardError):
    """The document store could not be reached or refused the operation."""
    status = 503


class MalformedRecord(ScoreboardError):
    """A stored game document is missing required fields."""
    status = 500

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


class ValidationError(ScoreboardError):
    status = 400


class NotFound(ScoreboardError):
    status = 404


class VersionConflict(ScoreboardError):
    """The document changed between read and write."""
    status = 409

    def __init__(self, message, expected=None, actual=None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual
