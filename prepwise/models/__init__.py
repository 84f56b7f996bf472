"""Pydantic models package"""

from .user import CurrentUser
from .interview import GenerateInterviewRequest, GenerateInterviewResponse, InterviewInstance
from .structure import InterviewStructure, StructureCreateRequest, DraftQuestionsRequest
from .profile import UserProfile, ProfileData, ProfileCompletion
from .common import ErrorResponse

__all__ = [
    "CurrentUser",
    "GenerateInterviewRequest", "GenerateInterviewResponse", "InterviewInstance",
    "InterviewStructure", "StructureCreateRequest", "DraftQuestionsRequest",
    "UserProfile", "ProfileData", "ProfileCompletion",
    "ErrorResponse"
]
