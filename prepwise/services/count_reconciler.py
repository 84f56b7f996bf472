from typing import List

from loguru import logger

from prepwise.core.exceptions import QuestionCountMismatchError
from prepwise.models.structure import InterviewStructure


def fallback_question(structure: InterviewStructure, index: int) -> str:
    """The index-th generic question for a structure, cycling through five templates"""
    role = structure.role or "professional"
    level = structure.level or "expected"
    techstack = structure.techstack
    tech = techstack[index % len(techstack)] if techstack else "the technologies"
    first_tech = techstack[0] if techstack else "technology"

    templates = [
        f"Tell me about your experience with {tech} relevant to this {role} role.",
        f"How would you approach a challenging project as a {role} at the {level} level?",
        "Describe a situation where you had to learn a new technology quickly. How did you handle it?",
        f"What interests you most about working as a {role}?",
        f"How do you stay updated with the latest developments in {first_tech}?",
    ]
    return templates[index % len(templates)]


def reconcile_question_count(questions: List[str], structure: InterviewStructure) -> List[str]:
    """Return exactly ``structure.personalized_count`` questions, padding or truncating"""
    expected = structure.personalized_count
    reconciled = list(questions)

    if len(reconciled) < expected:
        shortfall = expected - len(reconciled)
        logger.warning(f"Got {len(reconciled)} questions, expected {expected}; padding {shortfall}")
        reconciled.extend(fallback_question(structure, i) for i in range(shortfall))
    elif len(reconciled) > expected:
        logger.info(f"Got {len(reconciled)} questions, trimming to {expected}")
        reconciled = reconciled[:expected]

    if len(reconciled) != expected:
        raise QuestionCountMismatchError(expected, len(reconciled))
    return reconciled
