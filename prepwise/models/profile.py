from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional

from prepwise.models.common import StoredDocument, split_string_list


class WorkExperience(StoredDocument):
    company: str = ""
    position: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""
    is_current_job: bool = False

    @field_validator("is_current_job", mode="before")
    @classmethod
    def _coerce_flag(cls, value):
        # older clients stored the checkbox value as a string
        return value is True or str(value).strip().lower() == "true"


class Education(StoredDocument):
    institution: str = ""
    degree: str = ""
    field_of_study: str = ""
    start_date: str = ""
    end_date: str = ""
    grade: str = ""
    summary: str = ""  # free-text education from legacy profiles


class Project(StoredDocument):
    name: str = ""
    description: str = ""
    technologies: List[str] = []
    live_url: str = ""
    github_url: str = ""

    @field_validator("technologies", mode="before")
    @classmethod
    def _split(cls, value):
        return split_string_list(value)


class Achievement(StoredDocument):
    title: str = ""
    description: str = ""
    date: str = ""
    organization: str = ""
    url: str = ""


class SocialLinks(StoredDocument):
    linkedin: str = ""
    github: str = ""
    portfolio: str = ""
    twitter: str = ""


class ProfileData(StoredDocument):
    """Editable profile fields, shared by candidates and recruiters"""
    # Candidate fields
    current_role: str = ""
    experience: str = ""
    location: str = ""
    phone: str = ""
    summary: str = ""
    skills: List[str] = []
    work_experience: List[WorkExperience] = []
    education: List[Education] = []
    projects: List[Project] = []
    achievements: List[Achievement] = []
    languages: List[str] = []
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    resume: str = ""

    # Recruiter fields
    company_description: str = ""
    sector: str = ""
    company_size: str = ""
    founded: str = ""
    website: str = ""
    specialties: List[str] = []

    @field_validator("skills", "languages", "specialties", mode="before")
    @classmethod
    def _split(cls, value):
        return split_string_list(value)

    @field_validator("education", mode="before")
    @classmethod
    def _normalize_education(cls, value):
        """Education arrives as free text, a single entry or a list of entries"""
        if isinstance(value, str):
            return [{"summary": value.strip()}] if value.strip() else []
        if isinstance(value, dict):
            return [value]
        if isinstance(value, list):
            return [{"summary": item} if isinstance(item, str) else item for item in value if item]
        return value


class UserProfile(ProfileData):
    """A stored profile document (document id == user id)"""
    user_id: str = ""
    completion_percentage: int = 0
    completed_sections: Dict[str, int] = {}
    completed_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProfileCompletion(BaseModel):
    sections: Dict[str, int]
    completed_sections: int
    percentage: int

    @property
    def is_complete(self) -> bool:
        return self.percentage == 100


class ProfileResponse(BaseModel):
    success: bool = True
    message: str
    profile: UserProfile


class ProfileCompletionResponse(BaseModel):
    user_id: str
    is_complete: bool
    completion: ProfileCompletion
