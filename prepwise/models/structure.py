from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Dict, List, Literal, Optional

from prepwise.core.config import get_settings
from prepwise.models.common import StoredDocument, split_string_list

Level = Literal["entry", "mid", "senior"]
InterviewType = Literal["technical", "behavioral", "mixed"]
InterviewCategory = Literal["mock", "job"]

TYPE_ALIASES = {"behavioural": "behavioral"}

def _normalize_choice(value):
    if isinstance(value, str):
        lowered = value.strip().lower()
        return TYPE_ALIASES.get(lowered, lowered)
    return value


class CategorizedQuestions(StoredDocument):
    technical: List[str] = []
    behavioral: List[str] = []


class InterviewStructure(StoredDocument):
    """A stored interview structure (template)"""
    id: Optional[str] = None
    role: Optional[str] = None
    level: Optional[Level] = None
    type: Optional[InterviewType] = None
    techstack: List[str] = []
    compulsory_count: int = Field(0, ge=0)
    personalized_count: int = Field(0, ge=0)
    technical_count: Optional[int] = Field(None, ge=0)
    behavioral_count: Optional[int] = Field(None, ge=0)
    personalized_question_prompt: str = ""
    questions: List[str] = []
    categorized_questions: Optional[CategorizedQuestions] = None
    interview_category: InterviewCategory = "mock"
    job_title: Optional[str] = None
    responsibilities: Optional[str] = None
    ctc: Optional[str] = None
    location: Optional[str] = None
    designation: Optional[str] = None
    user_id: Optional[str] = None
    visibility: bool = False
    usage_count: int = Field(0, ge=0)
    last_used: Optional[str] = None
    created_at: Optional[str] = None

    @field_validator("level", "type", "interview_category", mode="before")
    @classmethod
    def _normalize(cls, value):
        return _normalize_choice(value)

    @field_validator("techstack", mode="before")
    @classmethod
    def _split_techstack(cls, value):
        return split_string_list(value)


class DraftQuestionsRequest(BaseModel):
    """Structure wizard step: ask the model for the compulsory questions"""
    role: str = Field(..., min_length=2)
    level: Level
    type: InterviewType
    techstack: List[str] = Field(..., min_length=1)
    interview_category: InterviewCategory = "mock"
    compulsory_count: int = Field(..., ge=0, le=20)
    technical_count: Optional[int] = Field(None, ge=0, le=20)
    behavioral_count: Optional[int] = Field(None, ge=0, le=20)
    job_title: Optional[str] = None
    responsibilities: Optional[str] = None
    ctc: Optional[str] = None
    location: Optional[str] = None
    designation: Optional[str] = None
    regenerate: bool = False

    @field_validator("level", "type", "interview_category", mode="before")
    @classmethod
    def _normalize(cls, value):
        return _normalize_choice(value)

    @field_validator("techstack", mode="before")
    @classmethod
    def _split_techstack(cls, value):
        return split_string_list(value)


class DraftQuestionsResponse(BaseModel):
    success: bool = True
    questions: List[str]
    categorized_questions: Optional[CategorizedQuestions] = None
    compulsory_count: int
    message: str


class StructureCreateRequest(DraftQuestionsRequest):
    """Final wizard step: persist the structure with its compulsory questions"""
    personalized_count: int = Field(0, ge=0, le=20)
    personalized_question_prompt: str = ""
    questions: List[str] = []
    categorized_questions: Optional[CategorizedQuestions] = None
    visibility: bool = False

    @model_validator(mode="after")
    def _check_counts(self):
        settings = get_settings()
        total = self.compulsory_count + self.personalized_count
        if total < settings.MIN_TOTAL_QUESTIONS:
            raise ValueError(
                f"Total questions (compulsory + personalized) must be at least {settings.MIN_TOTAL_QUESTIONS}"
            )
        if total > settings.MAX_TOTAL_QUESTIONS:
            raise ValueError(
                f"Total questions (compulsory + personalized) cannot exceed {settings.MAX_TOTAL_QUESTIONS}"
            )
        if len(self.questions) != self.compulsory_count:
            raise ValueError(
                f"Expected {self.compulsory_count} compulsory questions, got {len(self.questions)}"
            )
        if self.type == "mixed":
            technical = self.technical_count or 0
            behavioral = self.behavioral_count or 0
            if technical + behavioral != self.compulsory_count:
                raise ValueError("Technical + Behavioral questions must equal the number of compulsory questions")
        if self.personalized_count > 0 and not self.personalized_question_prompt.strip():
            raise ValueError("Please provide a prompt for personalized questions")
        if self.interview_category == "job":
            self._check_job_fields()
        return self

    def _check_job_fields(self):
        minimums: Dict[str, int] = {
            "job_title": 2,
            "responsibilities": 10,
            "ctc": 1,
            "location": 2,
            "designation": 2,
        }
        for field_name, minimum in minimums.items():
            value = (getattr(self, field_name) or "").strip()
            if len(value) < minimum:
                raise ValueError(f"{field_name} is required for job interviews (at least {minimum} characters)")


class StructureCreateResponse(BaseModel):
    success: bool = True
    structure_id: str
    message: str
