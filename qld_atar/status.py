from enum import Enum


class Status(str, Enum):
    """Non-numeric TE/ATAR outcomes. Members compare equal to their display text."""

    INELIGIBLE = 'ATAR Ineligible'
    NOT_AVAILABLE = 'N/A'
    INVALID_TE = 'Invalid TE'
    INVALID_TE_RANGE = 'Invalid TE Range'
    CALCULATION_ERROR = 'Calculation Error'

    def __str__(self):
        return self.value

    @classmethod
    def lookup(cls, value):
        """The member whose text is `value`, else None."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value == value:
                    return member
        return None


def is_status(value):
    return Status.lookup(value) is not None
