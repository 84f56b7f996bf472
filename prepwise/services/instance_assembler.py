from typing import Any, Dict, List, Optional

from loguru import logger

from prepwise.models.profile import UserProfile
from prepwise.models.structure import InterviewStructure
from prepwise.services.document_store import DocumentStore
from prepwise.utils.utils import clean_for_firestore, utc_now_iso

SNAPSHOT_FIELDS = {
    "current_role", "experience", "location", "phone", "summary", "skills",
    "work_experience", "education", "projects", "achievements", "languages",
    "social_links", "resume",
}


def sanitize_profile(user_id: str, profile: Optional[Any]) -> Dict[str, Any]:
    """Profile snapshot with every field defined ("" / [] / {} instead of missing)"""
    if profile is None:
        normalized = UserProfile()
    elif isinstance(profile, UserProfile):
        normalized = profile
    else:
        normalized = UserProfile.model_validate(profile)

    snapshot = normalized.model_dump(include=SNAPSHOT_FIELDS)
    snapshot["id"] = user_id
    return snapshot


class InstanceAssembler:
    def __init__(self, store: DocumentStore, log=logger):
        self.store = store
        self.log = log

    def assemble(
        self,
        structure_id: str,
        user_id: str,
        structure: InterviewStructure,
        personalized_questions: List[str],
        profile: Optional[UserProfile],
        category: str,
        request_id: str,
    ) -> Dict[str, Any]:
        record = {
            "structure_id": structure_id,
            "user_id": user_id,
            "pre_generated_questions": list(structure.questions),
            "personalized_questions": list(personalized_questions),
            "user_profile": sanitize_profile(user_id, profile),
            "role": structure.role or "Interview",
            "level": structure.level or "entry",
            "type": structure.type or "technical",
            "techstack": list(structure.techstack),
            "created_at": utc_now_iso(),
            "status": "ready",
            "interview_category": category,
            "finalized": True,
            "request_id": request_id,
        }
        return clean_for_firestore(record)

    def persist(
        self,
        collection: str,
        record: Dict[str, Any],
        structure_collection: str,
        structure_id: str,
        usage_count: int,
    ) -> str:
        """Write the instance, then bump the structure's usage counter.

        A failed instance write propagates. A failed counter update leaves the
        instance in place and is only logged.
        """
        self.log.info(f"Saving interview to {collection}")
        interview_id = self.store.add(collection, record)
        self.log.info(f"Interview saved successfully with ID: {interview_id}")

        try:
            self.store.update(structure_collection, structure_id, {
                "usage_count": usage_count + 1,
                "last_used": utc_now_iso(),
            })
        except Exception as e:
            self.log.warning(f"Could not update usage count for structure {structure_id}: {e}")

        return interview_id
