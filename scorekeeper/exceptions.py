class ScoringError(Exception):
    """Base class for every error raised by the score keeper."""


class InvalidTransitionError(ScoringError):
    pass


class MatchCompletedError(InvalidTransitionError):
    """A point was awarded after the deciding set closed."""


class InvalidPointEventError(ScoringError, ValueError):
    pass


class MalformedStateError(ScoringError, ValueError):
    """Persisted score state is broken beyond a safe repair."""


class UnknownFormatError(ScoringError, ValueError):
    pass


class StaleStateError(ScoringError):
    """The caller applied an event against an outdated session version."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Session is at version {actual}, caller expected {expected}"
        )
        self.expected = expected
        self.actual = actual


class MatchRecordError(ScoringError, ValueError):
    pass
