"""Parsing and sanitization of raw backend responses into question records.

Backends are asked for a bare JSON object but routinely wrap it in code fences,
add prose around it, or rename fields. Everything here is lenient: fields are
coalesced from alternate spellings and normalized to the enumerations, and only
a response with no decodable JSON object at all is an error.
"""

import json
import logging
import math
import re
from collections.abc import Mapping
from typing import Any

from examgen.errors import ParseError
from .markdown import strip_markdown
from .models import (
    MARKS_FOR_DIFFICULTY,
    BloomLevel,
    DifficultyLevel,
    GeneratedQuestion,
    Marks,
    QuestionType,
)
from .validation import validate_difficulty_distribution, validate_questions

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*\n?", re.MULTILINE)
_FENCE_CLOSE = re.compile(r"\n?```\s*$", re.MULTILINE)
_decoder = json.JSONDecoder()

# Candidate keys per logical field, tried in order
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "question_text": ("question_text", "question", "questionText", "text", "prompt"),
    "answer_text": ("answer_text", "answer", "answerText", "model_answer", "solution"),
    "difficulty_level": ("difficulty_level", "difficulty", "difficultyLevel"),
    "bloom_level": ("bloom_level", "bloomLevel", "bloom", "blooms_level", "bloom_taxonomy"),
    "bloom_justification": (
        "bloom_justification",
        "bloomJustification",
        "bloom_reason",
        "justification",
    ),
    "question_type": ("question_type", "questionType", "type"),
    "marks": ("marks", "mark", "marks_value"),
    "unit_number": ("unit_number", "unitNumber", "unit"),
    "course_name": ("course_name", "courseName", "course"),
    "material_name": ("material_name", "materialName", "material"),
}

_ENUM_ALIASES = {
    "ANALYSE": BloomLevel.ANALYZE.value,
    "KNOWLEDGE": BloomLevel.REMEMBER.value,
    "COMPREHENSION": BloomLevel.UNDERSTAND.value,
    "APPLICATION": BloomLevel.APPLY.value,
    "ANALYSIS": BloomLevel.ANALYZE.value,
    "EVALUATION": BloomLevel.EVALUATE.value,
    "SYNTHESIS": BloomLevel.CREATE.value,
    "SCENARIO": QuestionType.SCENARIO_BASED.value,
    "PROBLEM": QuestionType.PROBLEM_BASED.value,
}

_MARKS_WORDS = {
    "2": Marks.TWO,
    "TWO": Marks.TWO,
    "8": Marks.EIGHT,
    "EIGHT": Marks.EIGHT,
    "16": Marks.SIXTEEN,
    "SIXTEEN": Marks.SIXTEEN,
}


def _matching_brace(text: str, start: int) -> int:
    """Index of the ``}`` closing the object opened at ``start``, or -1.

    String literals are skipped so braces inside them do not count.
    """
    depth = 0
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index

    return -1


def extract_json_object(response: str) -> dict[str, Any]:
    """Find and decode the first top-level JSON object in a response.

    Code fences are removed first. Candidates start at a ``{`` outside any
    earlier candidate, so stray braces in leading prose and trailing text
    after the object are tolerated, but an object nested inside a malformed
    or truncated one is never returned in its place.

    Raises:
        ParseError: If no object can be decoded, or an object is cut off
    """
    cleaned = _FENCE_OPEN.sub("", response.strip())
    cleaned = _FENCE_CLOSE.sub("", cleaned).strip()

    start = cleaned.find("{")
    if start == -1:
        raise ParseError("No valid JSON found in response")

    first_error: json.JSONDecodeError | None = None
    while start != -1:
        try:
            parsed, _ = _decoder.raw_decode(cleaned, start)
        except json.JSONDecodeError as e:
            first_error = first_error or e
        else:
            if isinstance(parsed, dict):
                return parsed

        end = _matching_brace(cleaned, start)
        if end == -1:
            raise ParseError(f"Response is not valid JSON (object is never closed): {first_error}")
        start = cleaned.find("{", end + 1)

    raise ParseError(f"Response is not valid JSON: {first_error}")


def parse_question_response(
    response: str, provider_name: str = "provider", fallback_unit: int = 1
) -> list[GeneratedQuestion]:
    """Parse a raw backend response into sanitized questions.

    A response without a ``questions`` list is an empty result, not an error.

    Args:
        response: Raw text returned by the completion backend
        provider_name: Backend name used in log messages
        fallback_unit: Unit number for records that do not carry one

    Returns:
        Sanitized questions (not yet quality-filtered)

    Raises:
        ParseError: If the response holds no decodable JSON object
    """
    try:
        parsed = extract_json_object(response)
    except ParseError as e:
        logger.warning(f"{provider_name}: {e}; response preview: {response[:200]!r}")
        raise

    questions = parsed.get("questions")
    if not isinstance(questions, list):
        logger.warning(f"{provider_name}: Empty or invalid response structure (keys: {list(parsed)})")
        return []

    logger.debug(f"{provider_name}: Found {len(questions)} questions in response")

    records = [record for record in questions if isinstance(record, Mapping)]
    if len(records) != len(questions):
        logger.warning(f"{provider_name}: Skipped {len(questions) - len(records)} non-object entries")

    sanitized = sanitize_questions(records, provider_name, fallback_unit)
    validate_questions(sanitized, provider_name)
    validate_difficulty_distribution(sanitized, provider_name)
    return sanitized


def coerce_text(value: Any) -> str:
    """Best-effort string form of a JSON value, empty when nothing usable."""
    if value is None:
        return ""

    if isinstance(value, str):
        return value.strip()

    if isinstance(value, list):
        parts = (item if isinstance(item, str) else coerce_text(item) for item in value)
        return " ".join(parts).strip()

    if isinstance(value, Mapping):
        nested = value.get("text")
        if isinstance(nested, str) and nested.strip():
            return nested.strip()
        serialized = json.dumps(value, ensure_ascii=False)
        return "" if serialized == "{}" else serialized

    return str(value).strip()


def get_text_value(record: Mapping[str, Any], field: str) -> str:
    """First non-empty value among the aliases of ``field``."""
    for key in FIELD_ALIASES[field]:
        if key in record:
            text = coerce_text(record[key])
            if text:
                return text
    return ""


def get_number_value(record: Mapping[str, Any], field: str, fallback: int) -> int:
    """First integral value among the aliases of ``field``."""
    for key in FIELD_ALIASES[field]:
        value = record.get(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, (int, float)) and math.isfinite(value):
            return int(value)
        if isinstance(value, str):
            try:
                number = float(value.strip())
            except ValueError:
                continue
            if math.isfinite(number):
                return int(number)
    return fallback


def normalize_difficulty(raw: str) -> DifficultyLevel:
    value = raw.strip().upper()
    try:
        return DifficultyLevel(value)
    except ValueError:
        if value:
            logger.warning(f"Unknown difficulty '{raw}', defaulting to MEDIUM")
        return DifficultyLevel.MEDIUM


def normalize_marks(raw: str, difficulty: DifficultyLevel) -> Marks:
    """Map word or digit marks to the enumeration, defaulting by difficulty."""
    value = re.sub(r"\s*MARKS?$", "", raw.strip().upper())
    try:
        value = str(int(float(value)))
    except (ValueError, OverflowError):
        pass

    marks = _MARKS_WORDS.get(value)
    if marks is None:
        if value:
            logger.warning(f"Invalid marks value '{raw}', defaulting for {difficulty.value}")
        marks = MARKS_FOR_DIFFICULTY[difficulty]
    return marks


def _normalize_enum(raw: str, enum_type, default):
    value = re.sub(r"[\s\-]+", "_", raw.strip().upper())
    value = _ENUM_ALIASES.get(value, value)
    try:
        return enum_type(value)
    except ValueError:
        if value:
            logger.warning(f"Unknown {enum_type.__name__} '{raw}', defaulting to {default.value}")
        return default


def sanitize_question(record: Mapping[str, Any], fallback_unit: int = 1) -> GeneratedQuestion:
    """Build a question from one raw record, repairing what can be repaired."""
    difficulty = normalize_difficulty(get_text_value(record, "difficulty_level"))

    return GeneratedQuestion(
        question_text=strip_markdown(get_text_value(record, "question_text")),
        answer_text=strip_markdown(get_text_value(record, "answer_text")),
        difficulty_level=difficulty,
        bloom_level=_normalize_enum(
            get_text_value(record, "bloom_level"), BloomLevel, BloomLevel.UNDERSTAND
        ),
        question_type=_normalize_enum(
            get_text_value(record, "question_type"), QuestionType, QuestionType.DIRECT
        ),
        marks=normalize_marks(get_text_value(record, "marks"), difficulty),
        bloom_justification=get_text_value(record, "bloom_justification") or None,
        unit_number=get_number_value(record, "unit_number", fallback_unit),
        course_name=get_text_value(record, "course_name"),
        material_name=get_text_value(record, "material_name"),
    )


def sanitize_questions(
    records: list[Mapping[str, Any]], provider_name: str = "provider", fallback_unit: int = 1
) -> list[GeneratedQuestion]:
    """Sanitize raw question records; empty texts are kept for the filter to drop."""
    logger.debug(f"{provider_name}: Sanitizing {len(records)} question records")
    return [sanitize_question(record, fallback_unit) for record in records]
