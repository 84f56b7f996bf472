import json
import re
from typing import List

from loguru import logger

from prepwise.core.exceptions import QuestionParseError

FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
FENCE_CLOSE = re.compile(r"\s*```$")
LEADING_JSON_TAG = re.compile(r"^\s*json\s*", re.IGNORECASE)
NUMBERED = re.compile(r"^\d+\.")
LINE_PREFIX = re.compile(r"^(?:\d+[.)]\s*|[-*•]\s*)+")

MIN_QUESTION_LENGTH = 20
QUESTION_PHRASES = ("tell me", "describe", "explain", "how would you", "can you")


def strip_code_fence(text: str) -> str:
    """Trim and drop a surrounding ``` / ```json fence"""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = FENCE_OPEN.sub("", cleaned)
        cleaned = FENCE_CLOSE.sub("", cleaned)
    return LEADING_JSON_TAG.sub("", cleaned).strip()


def _clean_items(items) -> List[str]:
    questions = []
    for item in items:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            questions.append(text)
    return questions


def _looks_like_question(line: str) -> bool:
    if len(line) <= MIN_QUESTION_LENGTH:
        return False
    lowered = line.lower()
    return (
        "?" in line
        or NUMBERED.match(line) is not None
        or any(phrase in lowered for phrase in QUESTION_PHRASES)
    )


def _clean_line(line: str) -> str:
    line = LINE_PREFIX.sub("", line).strip()
    line = line.rstrip(",").strip()
    return line.strip('"').strip()


def extract_questions_from_lines(text: str) -> List[str]:
    """Fallback for output that is not JSON: keep the lines that read like questions"""
    candidates = [line.strip() for line in text.splitlines()]
    questions = []
    for line in candidates:
        if not _looks_like_question(line):
            continue
        cleaned = _clean_line(line)
        if len(cleaned) <= MIN_QUESTION_LENGTH or "{" in cleaned or "}" in cleaned:
            continue
        questions.append(cleaned)
    return questions


def parse_questions(raw: str) -> List[str]:
    """Read the ``questions`` list out of a model response.

    Tries the ``{"questions": [...]}`` object first (fenced or embedded in prose),
    then falls back to line heuristics. Never raises; may return an empty list.
    """
    raw = raw or ""
    cleaned = strip_code_fence(raw)

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end > start:
        cleaned = cleaned[start:end + 1]

    try:
        parsed = json.loads(cleaned)
    except (json.JSONDecodeError, ValueError) as e:
        logger.warning(f"Model output is not valid JSON ({e}); falling back to line extraction")
        questions = extract_questions_from_lines(raw)
        logger.info(f"Fallback extraction found {len(questions)} questions")
        return questions

    if not isinstance(parsed, dict):
        logger.warning("Model output parsed but is not a JSON object; falling back to line extraction")
        return extract_questions_from_lines(raw)

    items = parsed.get("questions", [])
    if not isinstance(items, list):
        return []
    return _clean_items(items)


def parse_question_array(raw: str) -> List[str]:
    """Read a bare JSON array of questions (structure wizard output)"""
    cleaned = strip_code_fence(raw or "")
    start = cleaned.find("[")
    end = cleaned.rfind("]")
    if start == -1 or end <= start:
        raise QuestionParseError("No JSON array found in model response")

    try:
        parsed = json.loads(cleaned[start:end + 1])
    except json.JSONDecodeError as e:
        raise QuestionParseError(f"Could not parse questions from model response: {e}") from e

    if not isinstance(parsed, list):
        raise QuestionParseError("Model response is not a list of questions")
    return _clean_items(parsed)
