"""Error taxonomy shared by the quiz managers.

Each error carries the HTTP status the routes answer with, so the boundary in
``classes.results`` can turn any of them into a uniform failure result.
"""


class QuizPlatformError(Exception):
    code = "error"
    status = 500

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    default_message = "An error occurred"


class NotFoundError(QuizPlatformError):
    code = "not_found"
    status = 404
    default_message = "Not found"


class ValidationError(QuizPlatformError, ValueError):
    code = "validation_error"
    status = 400
    default_message = "Invalid input"


class PermissionDeniedError(QuizPlatformError):
    code = "forbidden"
    status = 403
    default_message = "Unauthorized"


class DuplicateAnswerError(QuizPlatformError):
    code = "duplicate_answer"
    status = 409
    default_message = "Question already answered for this attempt"


class AlreadySubmittedError(QuizPlatformError):
    code = "already_submitted"
    status = 409
    default_message = "Quiz attempt not found or already completed"


class UpstreamError(QuizPlatformError):
    code = "upstream_error"
    status = 502
    default_message = "The data store could not complete the request"


class StoreTimeoutError(QuizPlatformError, TimeoutError):
    code = "timeout"
    status = 504
    default_message = "The data store did not respond in time"
