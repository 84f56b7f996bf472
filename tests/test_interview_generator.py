import json

import pytest

from prepwise.core.exceptions import (
    ForbiddenError,
    GenerationProviderError,
    InterviewNotFoundError,
    InvalidRequestError,
    InvalidStructureError,
    StructureNotFoundError,
)
from prepwise.models.interview import GenerateInterviewRequest
from prepwise.models.user import CurrentUser
from prepwise.services.interview_generator import DUPLICATE_MESSAGE, InterviewGenerationService

from conftest import FakeGenerator, profile_document, structure_document

STRUCTURES = "mock_interview_structures"
INTERVIEWS = "mock_interviews"


def questions_json(*questions):
    return json.dumps({"questions": list(questions)})


def take(structure_id="s-1", user_id="user-1", **kwargs):
    return GenerateInterviewRequest(structure_id=structure_id, user_id=user_id, **kwargs)


@pytest.fixture
def seeded(store):
    store.seed(STRUCTURES, "s-1", structure_document())
    store.seed("profiles", "user-1", profile_document())
    return store


def test_generates_and_persists_instance(seeded):
    generator = FakeGenerator(questions_json("P1?", "P2?", "P3?"))
    service = InterviewGenerationService(seeded, generator)

    result = service.generate(take(resume="Maintains an open source ORM"), request_id="1700000000000_abc123def")

    assert result.duplicate is False
    assert result.personalized_questions == ["P1?", "P2?", "P3?"]
    assert result.pre_generated_questions == structure_document()["questions"]
    assert result.request_id == "1700000000000_abc123def"

    stored = seeded.docs(INTERVIEWS)[result.interview_id]
    assert stored["status"] == "ready"
    assert stored["request_id"] == "1700000000000_abc123def"
    assert stored["user_profile"]["current_role"] == "Software Engineer"
    assert seeded.docs(STRUCTURES)["s-1"]["usage_count"] == 5

    prompt = generator.prompts[0]
    assert "CANDIDATE PROFILE" in prompt
    assert "Maintains an open source ORM" in prompt


def test_compulsory_questions_copied_verbatim(store):
    store.seed(STRUCTURES, "s-q", structure_document(
        questions=["Q1", "Q2", "Q3"], compulsory_count=3, personalized_count=2,
    ))
    service = InterviewGenerationService(store, FakeGenerator(questions_json("A?", "B?")))

    result = service.generate(take(structure_id="s-q"))

    assert result.pre_generated_questions == ["Q1", "Q2", "Q3"]
    assert len(result.personalized_questions) == 2


@pytest.mark.parametrize("output", [
    questions_json("Only one?"),
    questions_json("A?", "B?", "C?", "D?", "E?"),
    "I cannot help with that.",
    "",
])
def test_always_exactly_personalized_count(seeded, output):
    service = InterviewGenerationService(seeded, FakeGenerator(output))
    result = service.generate(take())
    assert len(result.personalized_questions) == 3


def test_heuristic_output_needs_no_padding(store):
    store.seed(STRUCTURES, "s-5", structure_document(personalized_count=5))
    lines = "\n".join(f"{i}. Tell me about a time you improved system number {i} at work." for i in range(1, 6))
    service = InterviewGenerationService(store, FakeGenerator(lines))

    result = service.generate(take(structure_id="s-5"))

    assert result.personalized_questions == [
        f"Tell me about a time you improved system number {i} at work." for i in range(1, 6)
    ]


def test_second_call_is_a_duplicate_without_generation(seeded):
    generator = FakeGenerator(questions_json("P1?", "P2?", "P3?"))
    service = InterviewGenerationService(seeded, generator)

    first = service.generate(take())
    second = service.generate(take())

    assert second.duplicate is True
    assert second.interview_id == first.interview_id
    assert second.message == DUPLICATE_MESSAGE
    assert second.personalized_questions == first.personalized_questions
    assert generator.calls == 1
    assert len(seeded.docs(INTERVIEWS)) == 1


def test_write_race_returns_the_concurrent_instance(seeded):
    generator = FakeGenerator(questions_json("A1?", "A2?", "A3?"), questions_json("B1?", "B2?", "B3?"))
    service = InterviewGenerationService(seeded, generator)
    concurrent = {}

    def other_request_wins(collection, data):
        concurrent["result"] = service.generate(take())
        seeded.fail("add", collection)

    seeded.before_add = other_request_wins
    result = service.generate(take())

    assert result.duplicate is True
    assert result.interview_id == concurrent["result"].interview_id
    assert len(seeded.docs(INTERVIEWS)) == 1


def test_write_failure_without_concurrent_instance_propagates(seeded):
    seeded.fail("add", INTERVIEWS, RuntimeError("deadline exceeded"))
    service = InterviewGenerationService(seeded, FakeGenerator(questions_json("A?", "B?", "C?")))

    with pytest.raises(RuntimeError, match="deadline exceeded"):
        service.generate(take())


@pytest.mark.parametrize("structure_id,user_id", [("", "user-1"), ("s-1", ""), (None, "user-1"), ("s-1", "  ")])
def test_missing_ids_are_rejected_without_side_effects(seeded, structure_id, user_id):
    generator = FakeGenerator()
    service = InterviewGenerationService(seeded, generator)

    with pytest.raises(InvalidRequestError):
        service.generate(take(structure_id=structure_id, user_id=user_id))

    assert generator.calls == 0
    assert seeded.writes == []


def test_unknown_structure(store):
    service = InterviewGenerationService(store, FakeGenerator())
    with pytest.raises(StructureNotFoundError):
        service.generate(take(structure_id="missing"))
    assert store.writes == []


def test_job_structure_goes_to_job_collection(store):
    store.seed("job_interview_structures", "job-1", structure_document(
        interview_category="job", job_title="Platform Engineer", personalized_count=1,
    ))
    service = InterviewGenerationService(store, FakeGenerator(questions_json("J?")))

    result = service.generate(take(structure_id="job-1"))

    assert result.interview_id in store.docs("job_interviews")
    assert store.docs("job_interview_structures")["job-1"]["usage_count"] == 5
    assert "JOB POSTING DETAILS" in service.generator.prompts[0]


def test_unreadable_structure(store):
    store.seed(STRUCTURES, "bad", structure_document(level="principal"))
    with pytest.raises(InvalidStructureError):
        InterviewGenerationService(store, FakeGenerator()).generate(take(structure_id="bad"))


def test_provider_failure_is_not_retried(seeded):
    generator = FakeGenerator(GenerationProviderError("Text generation failed: timeout"))
    service = InterviewGenerationService(seeded, generator)

    with pytest.raises(GenerationProviderError):
        service.generate(take())

    assert generator.calls == 1
    assert seeded.docs(INTERVIEWS) == {}


def test_precheck_failure_still_generates(seeded):
    seeded.fail("find", INTERVIEWS)
    service = InterviewGenerationService(seeded, FakeGenerator(questions_json("A?", "B?", "C?")))

    result = service.generate(take())

    assert result.duplicate is False
    assert result.interview_id in seeded.docs(INTERVIEWS)


def test_profile_failure_still_generates(seeded):
    seeded.fail("get", "profiles")
    generator = FakeGenerator(questions_json("A?", "B?", "C?"))

    result = InterviewGenerationService(seeded, generator).generate(take())

    assert len(result.personalized_questions) == 3
    assert "CANDIDATE PROFILE" not in generator.prompts[0]
    assert seeded.docs(INTERVIEWS)[result.interview_id]["user_profile"]["current_role"] == ""


def test_no_personalization_still_generates_without_profile(seeded):
    generator = FakeGenerator(questions_json("General one?"))
    result = InterviewGenerationService(seeded, generator).generate(take(generate_personalized=False))

    assert len(result.personalized_questions) == 3
    assert result.personalized_questions[0] == "General one?"
    assert generator.calls == 1
    assert "CANDIDATE PROFILE" not in generator.prompts[0]
    stored = seeded.docs(INTERVIEWS)[result.interview_id]
    assert len(stored["personalized_questions"]) == 3
    assert stored["user_profile"]["current_role"] == ""


def test_zero_personalized_count_skips_generation(store):
    store.seed(STRUCTURES, "s-0", structure_document(personalized_count=0))
    generator = FakeGenerator()

    result = InterviewGenerationService(store, generator).generate(take(structure_id="s-0"))

    assert result.personalized_questions == []
    assert generator.calls == 0


def test_request_id_is_generated_when_missing(seeded):
    result = InterviewGenerationService(seeded, FakeGenerator(questions_json("A?", "B?", "C?"))).generate(take())

    millis, suffix = result.request_id.split("_")
    assert millis.isdigit()
    assert len(suffix) == 9


def test_get_interview_checks_owner(seeded):
    seeded.seed("job_interviews", "iv-1", {"structure_id": "s-1", "user_id": "user-1", "interview_category": "job"})
    service = InterviewGenerationService(seeded, FakeGenerator())

    interview = service.get_interview("iv-1", CurrentUser(user_id="user-1"))
    assert interview.id == "iv-1"

    with pytest.raises(ForbiddenError):
        service.get_interview("iv-1", CurrentUser(user_id="someone-else"))
    with pytest.raises(InterviewNotFoundError):
        service.get_interview("nope", CurrentUser(user_id="user-1"))


def test_list_user_interviews_across_collections(store):
    store.seed("mock_interviews", "m-old", {"structure_id": "s-1", "user_id": "user-1", "created_at": "2024-01-01"})
    store.seed("job_interviews", "j-new", {"structure_id": "s-2", "user_id": "user-1", "created_at": "2024-03-01"})
    store.seed("mock_interviews", "m-mid", {"structure_id": "s-3", "user_id": "user-1", "created_at": "2024-02-01"})
    store.seed("mock_interviews", "other", {"structure_id": "s-1", "user_id": "user-2", "created_at": "2024-04-01"})
    service = InterviewGenerationService(store, FakeGenerator())

    assert [i.id for i in service.list_user_interviews("user-1")] == ["j-new", "m-mid", "m-old"]
    assert [i.id for i in service.list_user_interviews("user-1", "mock")] == ["m-mid", "m-old"]
    assert service.list_user_interviews("nobody") == []
