from fastapi import APIRouter, Depends

from prepwise.core.exceptions import ProfileNotFoundError
from prepwise.core.security import get_current_user
from prepwise.models.profile import (
    ProfileCompletionResponse,
    ProfileData,
    ProfileResponse,
    UserProfile,
)
from prepwise.models.user import CurrentUser
from prepwise.services.profile_service import ProfileService, get_profile_service

router = APIRouter()

@router.put("/me", response_model=ProfileResponse)
def save_my_profile(
    request: ProfileData,
    current_user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Create or replace the current user's profile"""
    profile = service.save_profile(current_user, request)
    return ProfileResponse(message="Profile saved successfully", profile=profile)

@router.patch("/me", response_model=ProfileResponse)
def update_my_profile(
    request: ProfileData,
    current_user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Update only the fields present in the body"""
    changes = request.model_dump(exclude_unset=True)
    profile = service.update_profile(current_user, changes)
    return ProfileResponse(message="Profile updated successfully", profile=profile)

@router.get("/me/completion", response_model=ProfileCompletionResponse)
def get_my_profile_completion(
    current_user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    completion = service.get_completion(current_user.user_id, current_user.is_recruiter)
    return ProfileCompletionResponse(
        user_id=current_user.user_id,
        is_complete=completion.is_complete,
        completion=completion
    )

@router.get("/{user_id}", response_model=UserProfile)
def get_profile(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    profile = service.get_profile(user_id)
    if profile is None:
        raise ProfileNotFoundError("Profile not found")
    return profile
