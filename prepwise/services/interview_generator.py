from typing import Any, Dict, List, Optional

from fastapi import Depends
from loguru import logger

from prepwise.core.config import get_settings
from prepwise.core.exceptions import (
    ForbiddenError,
    InterviewNotFoundError,
    InvalidRequestError,
)
from prepwise.core.firebase import get_document_store
from prepwise.models.interview import (
    GenerateInterviewRequest,
    GenerateInterviewResult,
    InterviewInstance,
)
from prepwise.models.profile import UserProfile
from prepwise.models.structure import InterviewStructure
from prepwise.models.user import CurrentUser
from prepwise.services.count_reconciler import reconcile_question_count
from prepwise.services.document_store import DocumentStore
from prepwise.services.duplicate_guard import DuplicateGuard
from prepwise.services.instance_assembler import InstanceAssembler
from prepwise.services.profile_service import ProfileService
from prepwise.services.prompt_builder import build_personalized_prompt
from prepwise.services.question_generator import QuestionGenerator, get_question_generator
from prepwise.services.response_parser import parse_questions
from prepwise.services.structure_service import StructureService
from prepwise.utils.utils import new_request_id

DUPLICATE_MESSAGE = "Interview already exists for this structure"


class InterviewGenerationService:
    """Turns an interview structure into a personalized interview for one user.

    The chain for a request is: validate, resolve the structure, check for an
    existing instance, load the profile, prompt the model, parse, reconcile the
    count, then persist. A failed write is retried as a lookup in case a
    concurrent request for the same pair got there first.
    """

    def __init__(self, store: DocumentStore, generator: QuestionGenerator):
        self.store = store
        self.generator = generator
        self.settings = get_settings()
        self.structures = StructureService(store)
        self.profiles = ProfileService(store)

    def generate(self, request: GenerateInterviewRequest, request_id: Optional[str] = None) -> GenerateInterviewResult:
        request_id = request_id or new_request_id()
        log = logger.bind(request_id=request_id)

        structure_id = (request.structure_id or "").strip()
        user_id = (request.user_id or "").strip()
        if not structure_id or not user_id:
            raise InvalidRequestError("Missing required fields: structure_id and user_id")

        log.info(f"Generating interview for structure {structure_id}, user {user_id}")
        structure, category = self.structures.get_structure(structure_id)
        collection = self.settings.interview_collection(category)

        guard = DuplicateGuard(self.store, log=log)
        existing = guard.precheck(collection, structure_id, user_id)
        if existing:
            return self._duplicate_result(existing, request_id)

        profile = self._load_profile(user_id, log) if request.generate_personalized else None
        personalized = self._personalized_questions(request, structure, profile, log)

        assembler = InstanceAssembler(self.store, log=log)
        record = assembler.assemble(
            structure_id=structure_id,
            user_id=user_id,
            structure=structure,
            personalized_questions=personalized,
            profile=profile,
            category=category,
            request_id=request_id,
        )

        try:
            interview_id = assembler.persist(
                collection,
                record,
                structure_collection=self.settings.structure_collection(category),
                structure_id=structure_id,
                usage_count=structure.usage_count,
            )
        except Exception as e:
            log.error(f"Saving interview failed, checking for a concurrent save: {e}")
            existing = guard.recover(collection, structure_id, user_id, e)
            return self._duplicate_result(existing, request_id)

        return GenerateInterviewResult(
            interview_id=interview_id,
            pre_generated_questions=record["pre_generated_questions"],
            personalized_questions=record["personalized_questions"],
            message=f"Successfully generated {len(personalized)} personalized questions",
            request_id=request_id,
        )

    def _load_profile(self, user_id: str, log) -> Optional[UserProfile]:
        try:
            profile = self.profiles.get_profile(user_id)
        except Exception as e:
            log.warning(f"Could not load profile for {user_id}, continuing without it: {e}")
            return None
        if profile is None:
            log.info(f"No profile found for {user_id}")
        return profile

    def _personalized_questions(
        self,
        request: GenerateInterviewRequest,
        structure: InterviewStructure,
        profile: Optional[UserProfile],
        log,
    ) -> List[str]:
        if structure.personalized_count == 0:
            return []

        prompt = build_personalized_prompt(structure, profile=profile, resume=request.resume)
        log.info(f"Requesting {structure.personalized_count} personalized questions from {self.generator.model}")
        raw = self.generator.generate(prompt)
        log.debug(f"Raw generation output: {raw}")

        parsed = parse_questions(raw)
        log.info(f"Parsed {len(parsed)} questions from generation output")
        questions = reconcile_question_count(parsed, structure)
        log.debug(f"Personalized questions: {questions}")
        return questions

    def _duplicate_result(self, existing: Dict[str, Any], request_id: str) -> GenerateInterviewResult:
        return GenerateInterviewResult(
            interview_id=existing["id"],
            pre_generated_questions=existing.get("pre_generated_questions") or [],
            personalized_questions=existing.get("personalized_questions") or [],
            duplicate=True,
            message=DUPLICATE_MESSAGE,
            request_id=request_id,
        )

    def get_interview(self, interview_id: str, user: CurrentUser) -> InterviewInstance:
        """Fetch an instance from either collection; only its owner may read it"""
        for category in ("job", "mock"):
            data = self.store.get(self.settings.interview_collection(category), interview_id)
            if data is None:
                continue
            if data.get("user_id") != user.user_id:
                raise ForbiddenError("You do not have access to this interview")
            return InterviewInstance.model_validate(data)

        raise InterviewNotFoundError("Interview not found")

    def list_user_interviews(self, user_id: str, category: Optional[str] = None) -> List[InterviewInstance]:
        """The user's interviews, newest first; both collections unless ``category`` is given"""
        categories = [category] if category else ["mock", "job"]
        interviews = []
        for name in categories:
            results = self.store.find(
                self.settings.interview_collection(name),
                {"user_id": user_id},
                order_by="created_at",
            )
            interviews.extend(InterviewInstance.model_validate(data) for data in results)

        interviews.sort(key=lambda interview: interview.created_at or "", reverse=True)
        return interviews


def get_interview_service(
    store: DocumentStore = Depends(get_document_store),
    generator: QuestionGenerator = Depends(get_question_generator),
) -> InterviewGenerationService:
    return InterviewGenerationService(store, generator)
