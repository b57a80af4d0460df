class QldAtarError(Exception):
    """Base class for load-time failures (reference tables, cohort files)."""


class ScalingDataError(QldAtarError):
    """Reference scaling tables are missing, unreadable or malformed."""


class CohortFileError(QldAtarError):
    """A cohort results file could not be read."""

    def __init__(self, message, row_errors=None):
        super().__init__(message)
        self.row_errors = row_errors or []
