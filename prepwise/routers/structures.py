from fastapi import APIRouter, Depends, Query, status
from typing import List

from prepwise.core.security import get_current_user
from prepwise.models.structure import (
    DraftQuestionsRequest,
    DraftQuestionsResponse,
    InterviewCategory,
    InterviewStructure,
    StructureCreateRequest,
    StructureCreateResponse,
)
from prepwise.models.user import CurrentUser
from prepwise.services.structure_service import StructureService, get_structure_service

router = APIRouter()

@router.post("/generate-questions", response_model=DraftQuestionsResponse)
def generate_questions(
    request: DraftQuestionsRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: StructureService = Depends(get_structure_service)
):
    """Draft the compulsory questions for a new structure"""
    return service.generate_draft_questions(request)

@router.post("", response_model=StructureCreateResponse, status_code=status.HTTP_201_CREATED)
def create_structure(
    request: StructureCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: StructureService = Depends(get_structure_service)
):
    """Finalize a structure; job structures are limited to recruiters"""
    structure_id = service.create_structure(current_user, request)
    return StructureCreateResponse(
        structure_id=structure_id,
        message="Interview structure created successfully"
    )

@router.get("/public", response_model=List[InterviewStructure])
def list_public_structures(
    category: InterviewCategory = Query("mock"),
    limit: int = Query(10, ge=1, le=50),
    current_user: CurrentUser = Depends(get_current_user),
    service: StructureService = Depends(get_structure_service)
):
    return service.list_public_structures(category, limit)

@router.get("/mine", response_model=List[InterviewStructure])
def list_my_structures(
    category: InterviewCategory = Query("mock"),
    public_only: bool = Query(False),
    current_user: CurrentUser = Depends(get_current_user),
    service: StructureService = Depends(get_structure_service)
):
    return service.list_user_structures(current_user.user_id, category, public_only)

@router.get("/{structure_id}", response_model=InterviewStructure)
def get_structure(
    structure_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: StructureService = Depends(get_structure_service)
):
    structure, _ = service.get_structure(structure_id)
    return structure.model_copy(update={"id": structure_id})
