from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from loguru import logger
from typing import List, Optional, Union

from prepwise.core.exceptions import ForbiddenError, PrepwiseError
from prepwise.core.security import get_current_user
from prepwise.models.common import ErrorResponse
from prepwise.models.interview import (
    GenerateInterviewRequest,
    GenerateInterviewResponse,
    InterviewInstance,
)
from prepwise.models.structure import InterviewCategory
from prepwise.models.user import CurrentUser
from prepwise.services.interview_generator import InterviewGenerationService, get_interview_service
from prepwise.utils.utils import new_request_id

router = APIRouter()

def _error_response(status_code: int, error: str, detail: str, request_id: str) -> JSONResponse:
    body = ErrorResponse(error=error, detail=detail, request_id=request_id)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))

@router.post("/take", response_model=Union[GenerateInterviewResponse, ErrorResponse])
def take_interview(
    request: GenerateInterviewRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: InterviewGenerationService = Depends(get_interview_service)
):
    """
    Generate (or return the existing) personalized interview for a structure.

    The body's user_id defaults to the caller and may not name anyone else.
    Every failure is reported as an error payload carrying the request id.
    """
    request_id = new_request_id()

    try:
        if request.user_id and request.user_id != current_user.user_id:
            raise ForbiddenError("Cannot generate an interview for another user")
        request = request.model_copy(update={"user_id": request.user_id or current_user.user_id})

        result = service.generate(request, request_id=request_id)
        return GenerateInterviewResponse(**result.model_dump())

    except PrepwiseError as e:
        logger.bind(request_id=request_id).error(f"Interview generation failed: {e.message}")
        return _error_response(e.status_code, e.message, type(e).__name__, request_id)
    except Exception as e:
        logger.bind(request_id=request_id).exception("Unexpected error while generating interview")
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to generate personalized interview",
            str(e),
            request_id,
        )

@router.get("/mine", response_model=List[InterviewInstance])
def list_my_interviews(
    category: Optional[InterviewCategory] = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
    service: InterviewGenerationService = Depends(get_interview_service)
):
    """List the caller's interviews, newest first, optionally for one category"""
    return service.list_user_interviews(current_user.user_id, category)

@router.get("/{interview_id}", response_model=InterviewInstance)
def get_interview(
    interview_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: InterviewGenerationService = Depends(get_interview_service)
):
    """Fetch one of the caller's interviews"""
    return service.get_interview(interview_id, current_user)
