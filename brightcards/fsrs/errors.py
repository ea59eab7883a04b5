"""Errors raised by the scheduling engine."""


class SchedulerError(ValueError):
    """Base class for scheduler input errors."""


class InvalidGrade(SchedulerError):
    """Grade is not one of Again, Hard, Good, Easy."""

    def __init__(self, grade):
        self.grade = grade
        super().__init__(f"Invalid grade {grade!r}: expected 1-4 or one of again/hard/normal/easy")


class InvalidInputState(SchedulerError):
    """Memory state or parameters the engine cannot schedule from."""
