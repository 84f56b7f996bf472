import pytest

from prepwise.core.exceptions import ProfileNotFoundError
from prepwise.models.profile import ProfileData, UserProfile
from prepwise.models.user import CurrentUser
from prepwise.services.profile_service import (
    ProfileService,
    calculate_candidate_completion,
    calculate_recruiter_completion,
)

from conftest import profile_document

CANDIDATE = CurrentUser(user_id="user-1")
RECRUITER = CurrentUser(user_id="recruiter-1", is_recruiter=True)


def complete_candidate(**overrides) -> ProfileData:
    data = profile_document(
        education=[{
            "institution": "TU Berlin",
            "degree": "BSc",
            "field_of_study": "Computer Science",
            "start_date": "2014-10",
        }],
        projects=[{"name": "Ledger", "description": "Double-entry bookkeeping API", "technologies": "Python, Postgres"}],
        achievements=[{
            "title": "Hackathon winner",
            "description": "Won first place",
            "date": "2022-06",
            "organization": "PyCon",
        }],
    )
    data.update(overrides)
    return ProfileData.model_validate(data)


def test_complete_candidate_profile():
    completion = calculate_candidate_completion(complete_candidate())

    assert completion.completed_sections == 9
    assert completion.percentage == 100
    assert completion.is_complete


def test_candidate_sections_counted_individually():
    completion = calculate_candidate_completion(complete_candidate(summary="Too short", languages=[]))

    assert completion.sections["summary"] == 0
    assert completion.sections["languages"] == 0
    assert completion.completed_sections == 7
    assert completion.percentage == 78
    assert not completion.is_complete


def test_legacy_education_text_does_not_complete_education():
    completion = calculate_candidate_completion(ProfileData.model_validate(profile_document()))
    assert completion.sections["education"] == 0


def test_empty_candidate_profile():
    completion = calculate_candidate_completion(ProfileData())
    assert completion.percentage == 0
    assert len(completion.sections) == 9


def test_recruiter_completion():
    profile = ProfileData(
        company_description="We build developer tooling for data teams. " * 3,
        sector="Software",
        company_size="51-200",
        location="Remote",
        specialties="Hiring, Data",
        social_links={"linkedin": "https://linkedin.com/company/example"},
    )
    assert calculate_recruiter_completion(profile).percentage == 100

    partial = profile.model_copy(update={"specialties": []})
    completion = calculate_recruiter_completion(partial)
    assert completion.completed_sections == 2
    assert completion.percentage == 67


def test_recruiter_needs_linkedin_specifically():
    profile = ProfileData(social_links={"github": "https://github.com/example"})
    assert calculate_recruiter_completion(profile).sections["social_links"] == 0


def test_normalizes_legacy_shapes():
    profile = UserProfile.model_validate({
        "experience": 3,
        "skills": "Go, Rust , ",
        "education": {"institution": "MIT", "degree": "MSc"},
        "work_experience": [{"company": "Initech", "is_current_job": "false"}],
        "languages": None,
        "social_links": None,
    })

    assert profile.experience == "3"
    assert profile.skills == ["Go", "Rust"]
    assert profile.education[0].institution == "MIT"
    assert profile.work_experience[0].is_current_job is False
    assert profile.languages == []
    assert profile.social_links.linkedin == ""


def test_save_profile_stamps_completion(store):
    profile = ProfileService(store).save_profile(CANDIDATE, complete_candidate())

    stored = store.docs("profiles")["user-1"]
    assert stored["completion_percentage"] == 100
    assert stored["completed_sections"]["projects"] == 1
    assert stored["completed_at"] == stored["updated_at"]
    assert store.docs("users")["user-1"] == {"profile_completed": True}
    assert profile.user_id == "user-1"


def test_resave_keeps_first_completion_time(store):
    service = ProfileService(store)
    service.save_profile(CANDIDATE, complete_candidate())
    store.collections["profiles"]["user-1"]["completed_at"] = "2024-01-01T00:00:00+00:00"

    service.save_profile(CANDIDATE, complete_candidate(summary="Short"))

    stored = store.docs("profiles")["user-1"]
    assert stored["completed_at"] == "2024-01-01T00:00:00+00:00"
    assert stored["completion_percentage"] == 89


def test_save_keeps_other_user_fields(store):
    store.seed("users", "user-1", {"name": "Ada", "profile_completed": False})
    ProfileService(store).save_profile(CANDIDATE, ProfileData())
    assert store.docs("users")["user-1"] == {"name": "Ada", "profile_completed": True}


def test_update_profile_merges_and_recomputes(store):
    service = ProfileService(store)
    service.save_profile(CANDIDATE, complete_candidate(languages=[]))

    updated = service.update_profile(CANDIDATE, {"languages": ["English"]})

    assert updated.languages == ["English"]
    assert updated.completion_percentage == 100
    stored = store.docs("profiles")["user-1"]
    assert stored["languages"] == ["English"]
    assert stored["completion_percentage"] == 100
    assert stored["current_role"] == "Software Engineer"


def test_update_missing_profile(store):
    with pytest.raises(ProfileNotFoundError):
        ProfileService(store).update_profile(CANDIDATE, {"summary": "x"})


def test_recruiter_profile_uses_recruiter_sections(store):
    profile = ProfileService(store).save_profile(RECRUITER, ProfileData(specialties=["Fintech"]))
    assert set(profile.completed_sections) == {"company_info", "specialties", "social_links"}
    assert profile.completion_percentage == 33
