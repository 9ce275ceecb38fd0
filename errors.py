"""Failure kinds raised by the generation and grading pipelines.

Only ``InputValidation`` is meant for the caller's eyes; the routers turn every
other kind into a generic message and log the detail.
"""


class TutorError(Exception):
    pass


class InputValidation(TutorError):
    """Caller-supplied fields are missing or malformed."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedPayload(TutorError):
    """Model output did not contain a parseable JSON object."""


class InvalidGeneratedContent(TutorError):
    """Model output parsed, but the fields are unusable."""


class GenerationFailed(TutorError):
    """Model returned nothing, or the ERROR sentinel, for a problem request."""


class FeedbackGenerationFailed(TutorError):
    """Model returned no feedback text."""


class SessionNotFound(TutorError):
    def __init__(self, session_id: str):
        super().__init__(f"session {session_id!r} not found")
        self.session_id = session_id


class StoreFailure(TutorError):
    """The database rejected a read or a write."""


class TextServiceError(TutorError):
    """The text-generation service could not be reached or raised."""
