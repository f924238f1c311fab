"""Database-level enumerations."""

import enum


class ApplicationStatus(str, enum.Enum):
    """Review states of a submitted application.

    Every application starts ``pending``; reviewers may move it to any other
    state from the admin panel, in any order.
    """

    PENDING = "pending"
    REVIEWING = "reviewing"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @classmethod
    def values(cls) -> list[str]:
        return [s.value for s in cls]
