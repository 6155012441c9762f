# ABOUTME: Declares the error kinds raised by the tutoring core.
# ABOUTME: Callers map them to user-facing behavior such as HTTP status codes.


class TutorCoreError(Exception):
    """Base class for errors raised by the decision core."""


class NotFoundError(TutorCoreError, LookupError):
    """Unknown student, knowledge component, content item, or empty grade-level cohort."""


class ValidationError(TutorCoreError, ValueError):
    """Out-of-range BKT parameters or a malformed response payload."""
