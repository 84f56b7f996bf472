from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional

from prepwise.models.common import StoredDocument

InterviewStatus = Literal["ready", "in_progress", "completed"]

class GenerateInterviewRequest(BaseModel):
    """Body of the take-interview call; ids are checked by the workflow itself"""
    structure_id: Optional[str] = None
    user_id: Optional[str] = None
    resume: Optional[str] = None
    generate_personalized: bool = True

class GenerateInterviewResult(BaseModel):
    interview_id: str
    pre_generated_questions: List[str] = []
    personalized_questions: List[str] = []
    duplicate: bool = False
    message: str
    request_id: str

class GenerateInterviewResponse(GenerateInterviewResult):
    success: bool = True

class InterviewInstance(StoredDocument):
    """A personalized interview generated from a structure for one user"""
    id: Optional[str] = None
    structure_id: str
    user_id: str
    pre_generated_questions: List[str] = []
    personalized_questions: List[str] = []
    user_profile: Dict[str, Any] = Field(default_factory=dict)
    role: str = "Interview"
    level: str = "entry"
    type: str = "technical"
    techstack: List[str] = []
    status: InterviewStatus = "ready"
    interview_category: Literal["mock", "job"] = "mock"
    finalized: bool = True
    created_at: Optional[str] = None
    request_id: Optional[str] = None
