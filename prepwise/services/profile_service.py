from typing import Any, Dict, Optional

from fastapi import Depends
from loguru import logger

from prepwise.core.config import get_settings
from prepwise.core.exceptions import ProfileNotFoundError
from prepwise.core.firebase import get_document_store
from prepwise.models.profile import ProfileCompletion, ProfileData, UserProfile
from prepwise.models.user import CurrentUser
from prepwise.services.document_store import DocumentStore
from prepwise.utils.utils import clean_for_firestore, utc_now_iso


def _filled(*values: str) -> bool:
    return all(value and value.strip() for value in values)


def _score(sections: Dict[str, int]) -> ProfileCompletion:
    completed = sum(sections.values())
    return ProfileCompletion(
        sections=sections,
        completed_sections=completed,
        percentage=round(completed / len(sections) * 100),
    )


def calculate_candidate_completion(profile: ProfileData) -> ProfileCompletion:
    """Nine sections, each worth one point"""
    links = profile.social_links
    sections = {
        "basic_info": _filled(profile.current_role, profile.experience, profile.location),
        "summary": len(profile.summary.strip()) >= 50,
        "skills": bool(profile.skills),
        "work_experience": any(
            _filled(exp.company, exp.position, exp.start_date, exp.description)
            for exp in profile.work_experience
        ),
        "education": any(
            _filled(edu.institution, edu.degree, edu.field_of_study, edu.start_date)
            for edu in profile.education
        ),
        "projects": any(
            _filled(project.name, project.description) and bool(project.technologies)
            for project in profile.projects
        ),
        "achievements": any(
            _filled(item.title, item.description, item.date, item.organization)
            for item in profile.achievements
        ),
        "languages": bool(profile.languages),
        "social_links": bool(links.linkedin or links.github or links.portfolio),
    }
    return _score({name: int(done) for name, done in sections.items()})


def calculate_recruiter_completion(profile: ProfileData) -> ProfileCompletion:
    """Three sections; LinkedIn is the required social link for recruiters"""
    sections = {
        "company_info": (
            len(profile.company_description.strip()) >= 100
            and _filled(profile.sector, profile.company_size, profile.location)
        ),
        "specialties": bool(profile.specialties),
        "social_links": _filled(profile.social_links.linkedin),
    }
    return _score({name: int(done) for name, done in sections.items()})


def calculate_completion(profile: ProfileData, is_recruiter: bool) -> ProfileCompletion:
    if is_recruiter:
        return calculate_recruiter_completion(profile)
    return calculate_candidate_completion(profile)


class ProfileService:
    def __init__(self, store: DocumentStore):
        self.store = store
        self.settings = get_settings()

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        data = self.store.get(self.settings.PROFILES_COLLECTION, user_id)
        if data is None:
            return None
        return UserProfile.model_validate(data)

    def save_profile(self, user: CurrentUser, data: ProfileData) -> UserProfile:
        """Create or replace the caller's profile"""
        completion = calculate_completion(data, user.is_recruiter)
        existing = self.store.get(self.settings.PROFILES_COLLECTION, user.user_id)
        now = utc_now_iso()

        document = data.model_dump()
        document.update({
            "user_id": user.user_id,
            "completion_percentage": completion.percentage,
            "completed_sections": completion.sections,
            "completed_at": (existing or {}).get("completed_at") or now,
            "updated_at": now,
        })
        self.store.set(self.settings.PROFILES_COLLECTION, user.user_id, clean_for_firestore(document))
        self.store.set(
            self.settings.USERS_COLLECTION, user.user_id, {"profile_completed": True}, merge=True
        )

        logger.info(f"Saved profile for {user.user_id} ({completion.percentage}% complete)")
        return UserProfile.model_validate(document)

    def update_profile(self, user: CurrentUser, changes: Dict[str, Any]) -> UserProfile:
        """Merge ``changes`` into the stored profile and recompute completion"""
        existing = self.store.get(self.settings.PROFILES_COLLECTION, user.user_id)
        if existing is None:
            raise ProfileNotFoundError("Profile not found")

        merged = UserProfile.model_validate({**existing, **changes})
        completion = calculate_completion(merged, user.is_recruiter)

        update = dict(ProfileData.model_validate(changes).model_dump(include=set(changes)))
        update.update({
            "completion_percentage": completion.percentage,
            "completed_sections": completion.sections,
            "updated_at": utc_now_iso(),
        })
        self.store.update(self.settings.PROFILES_COLLECTION, user.user_id, clean_for_firestore(update))

        logger.info(f"Updated profile for {user.user_id} ({completion.percentage}% complete)")
        return merged.model_copy(update={
            "completion_percentage": completion.percentage,
            "completed_sections": completion.sections,
            "updated_at": update["updated_at"],
        })

    def get_completion(self, user_id: str, is_recruiter: bool) -> ProfileCompletion:
        profile = self.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError("Profile not found")
        return calculate_completion(profile, is_recruiter)


def get_profile_service(store: DocumentStore = Depends(get_document_store)) -> ProfileService:
    return ProfileService(store)
