"""Exceptions raised while loading and deriving competition results."""


class CompetitionError(Exception):
    """Base class for competition results errors."""


class SnapshotFormatError(CompetitionError, ValueError):
    """The raw competition snapshot does not have the expected shape."""


class DataConsistencyError(CompetitionError):
    """Snapshot data contradicts the scoring rules (e.g. an impossible round tally)."""


class ApiError(CompetitionError):
    """Retrieving the competition snapshot failed."""

    def __init__(self, status, status_text):
        super().__init__(f"{status} {status_text}")
        self.status = status
        self.status_text = status_text
