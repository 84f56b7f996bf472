# prepwise/core/exceptions.py
from fastapi import status


class PrepwiseError(Exception):
    """Base error carrying the HTTP status the request boundary reports it with"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidRequestError(PrepwiseError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidStructureError(PrepwiseError):
    status_code = status.HTTP_400_BAD_REQUEST


class ForbiddenError(PrepwiseError):
    status_code = status.HTTP_403_FORBIDDEN


class StructureNotFoundError(PrepwiseError):
    status_code = status.HTTP_404_NOT_FOUND


class InterviewNotFoundError(PrepwiseError):
    status_code = status.HTTP_404_NOT_FOUND


class ProfileNotFoundError(PrepwiseError):
    status_code = status.HTTP_404_NOT_FOUND


class GenerationProviderError(PrepwiseError):
    """The text-generation call itself failed (transport or provider side)"""
    status_code = status.HTTP_502_BAD_GATEWAY


class QuestionParseError(PrepwiseError):
    status_code = status.HTTP_502_BAD_GATEWAY


class QuestionCountMismatchError(PrepwiseError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Failed to generate exactly {expected} personalized questions. Got {actual} questions."
        )
        self.expected = expected
        self.actual = actual
