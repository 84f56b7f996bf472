import math
from typing import List, Optional, Tuple

from fastapi import Depends
from loguru import logger
from pydantic import ValidationError

from prepwise.core.config import get_settings
from prepwise.core.exceptions import (
    ForbiddenError,
    InvalidRequestError,
    InvalidStructureError,
    StructureNotFoundError,
)
from prepwise.core.firebase import get_document_store
from prepwise.models.structure import (
    CategorizedQuestions,
    DraftQuestionsRequest,
    DraftQuestionsResponse,
    InterviewStructure,
    StructureCreateRequest,
)
from prepwise.models.user import CurrentUser
from prepwise.services.document_store import DocumentStore
from prepwise.services.prompt_builder import build_compulsory_prompt
from prepwise.services.question_generator import QuestionGenerator, get_question_generator
from prepwise.services.response_parser import parse_question_array
from prepwise.utils.utils import clean_for_firestore, utc_now_iso

CATEGORIES = ("mock", "job")


class StructureService:
    def __init__(self, store: DocumentStore, generator: Optional[QuestionGenerator] = None):
        self.store = store
        self.generator = generator
        self.settings = get_settings()

    def get_structure(self, structure_id: str) -> Tuple[InterviewStructure, str]:
        """Look the structure up in the mock collection first, then the job collection"""
        for category in CATEGORIES:
            data = self.store.get(self.settings.structure_collection(category), structure_id)
            if data is None:
                continue
            try:
                structure = InterviewStructure.model_validate(data)
            except ValidationError as e:
                logger.error(f"Structure {structure_id} failed validation: {e}")
                raise InvalidStructureError("Invalid interview structure data") from e
            return structure, category

        raise StructureNotFoundError("Interview structure not found")

    def _ask(self, request: DraftQuestionsRequest, kind: str, amount: int) -> List[str]:
        if amount <= 0:
            return []
        raw = self.generator.generate(build_compulsory_prompt(request, kind, amount))
        return parse_question_array(raw)

    def generate_draft_questions(self, request: DraftQuestionsRequest) -> DraftQuestionsResponse:
        """Draft compulsory questions for the structure wizard"""
        if self.generator is None:
            raise RuntimeError("StructureService needs a QuestionGenerator to draft questions")

        total = request.compulsory_count
        categorized = None

        if request.type == "mixed":
            behavioral_amount = request.behavioral_count if request.behavioral_count is not None else math.ceil(total / 2)
            technical_amount = request.technical_count if request.technical_count is not None else total // 2
            if behavioral_amount + technical_amount != total:
                raise InvalidRequestError(
                    "Technical + Behavioral questions must equal the number of compulsory questions"
                )
            behavioral = self._ask(request, "behavioral", behavioral_amount)
            technical = self._ask(request, "technical", technical_amount)
            questions = behavioral + technical
            categorized = CategorizedQuestions(technical=technical, behavioral=behavioral)
        else:
            questions = self._ask(request, request.type, total)

        logger.info(f"Drafted {len(questions)} compulsory questions for {request.role}")
        return DraftQuestionsResponse(
            questions=questions,
            categorized_questions=categorized,
            compulsory_count=total,
            message=f"Generated {len(questions)} compulsory questions",
        )

    def create_structure(self, owner: CurrentUser, request: StructureCreateRequest) -> str:
        if request.interview_category == "job" and not owner.is_recruiter:
            raise ForbiddenError("Only recruiters can create job interview structures")

        document = request.model_dump(exclude={"regenerate"})
        if request.type != "mixed":
            document.pop("technical_count", None)
            document.pop("behavioral_count", None)
            document.pop("categorized_questions", None)
        if request.interview_category != "job":
            for field_name in ("job_title", "responsibilities", "ctc", "location", "designation"):
                document.pop(field_name, None)

        document.update({
            "user_id": owner.user_id,
            "usage_count": 0,
            "created_at": utc_now_iso(),
        })

        collection = self.settings.structure_collection(request.interview_category)
        structure_id = self.store.add(collection, clean_for_firestore(document))
        logger.info(f"Created {request.interview_category} structure {structure_id} for {owner.user_id}")
        return structure_id

    def _read_all(self, results) -> List[InterviewStructure]:
        structures = []
        for data in results:
            try:
                structures.append(InterviewStructure.model_validate(data))
            except ValidationError as e:
                logger.warning(f"Skipping unreadable structure {data.get('id')}: {e}")
        return structures

    def list_public_structures(self, category: str, limit: int = 10) -> List[InterviewStructure]:
        results = self.store.find(
            self.settings.structure_collection(category),
            {"visibility": True},
            limit=limit,
            order_by="created_at",
        )
        return self._read_all(results)

    def list_user_structures(self, user_id: str, category: str, public_only: bool = False) -> List[InterviewStructure]:
        filters = {"user_id": user_id}
        if public_only:
            filters["visibility"] = True
        results = self.store.find(
            self.settings.structure_collection(category),
            filters,
            order_by="created_at",
        )
        return self._read_all(results)


def get_structure_service(
    store: DocumentStore = Depends(get_document_store),
    generator: QuestionGenerator = Depends(get_question_generator),
) -> StructureService:
    return StructureService(store, generator)
