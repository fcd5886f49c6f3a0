"""Quality checks for sanitized questions.

``validate_questions`` is diagnostic only: it logs and returns warnings and
never changes the result set. ``filter_valid_questions`` is the gate that
actually removes unusable entries before they are accepted.
"""

import logging
import re
from collections import Counter

from .models import BLOOM_FOR_DIFFICULTY, DifficultyLevel, GeneratedQuestion, Marks

logger = logging.getLogger(__name__)

WARNING_PLACEHOLDER_PATTERNS = [
    re.compile(r"\[Mock\s+(EASY|MEDIUM|HARD)\]", re.IGNORECASE),
    re.compile(r"This is a (TWO|EIGHT|SIXTEEN)-mark answer", re.IGNORECASE),
    re.compile(r"\[Answer here\]", re.IGNORECASE),
    re.compile(r"\[Insert.*\]", re.IGNORECASE),
]

FILTER_PLACEHOLDER_PATTERNS = [
    re.compile(r"\[Mock\s+(EASY|MEDIUM|HARD)\]", re.IGNORECASE),
    re.compile(r"\[Answer here\]", re.IGNORECASE),
    re.compile(r"\[Insert.*\]", re.IGNORECASE),
    re.compile(r"placeholder", re.IGNORECASE),
]

MIN_QUESTION_CHARS = 10
MIN_ANSWER_CHARS = 20
MIN_ANSWER_WORDS = {
    Marks.TWO: 10,
    Marks.EIGHT: 25,
    Marks.SIXTEEN: 50,
}


def _matches_any(patterns: list[re.Pattern[str]], *texts: str) -> bool:
    return any(pattern.search(text) for pattern in patterns for text in texts)


def contains_placeholder(question: GeneratedQuestion) -> bool:
    """Whether question or answer text carries a known placeholder marker."""
    return _matches_any(WARNING_PLACEHOLDER_PATTERNS, question.question_text, question.answer_text)


def validate_questions(
    questions: list[GeneratedQuestion], provider_name: str = "provider"
) -> list[str]:
    """Check questions for quality problems without rejecting any.

    Args:
        questions: Sanitized questions
        provider_name: Backend name used in log messages

    Returns:
        Human-readable warnings, one per problem found
    """
    warnings: list[str] = []

    for number, question in enumerate(questions, start=1):
        if not question.question_text.strip():
            warnings.append(f"Question {number} has empty question_text - will be filtered out")
            continue

        if not question.answer_text.strip():
            warnings.append(f"Question {number} has empty answer_text")

        if contains_placeholder(question):
            warnings.append(f"Question {number} contains placeholder text")

        expected = BLOOM_FOR_DIFFICULTY[question.difficulty_level]
        if question.bloom_level not in expected:
            allowed = "/".join(sorted(level.value for level in expected))
            warnings.append(
                f"Question {number}: {question.difficulty_level.value} should use {allowed}, "
                f"got {question.bloom_level.value}"
            )

    for warning in warnings:
        logger.warning(f"{provider_name}: {warning}")

    return warnings


def validate_difficulty_distribution(
    questions: list[GeneratedQuestion], provider_name: str = "provider"
) -> dict[str, int]:
    """Log the difficulty mix and warn when only MEDIUM questions came back."""
    counts = Counter(question.difficulty_level for question in questions)
    distribution = {level.value: counts.get(level, 0) for level in DifficultyLevel}

    logger.debug(f"{provider_name}: Difficulty distribution {distribution}")

    if questions and not distribution["EASY"] and not distribution["HARD"]:
        logger.warning(f"{provider_name}: Only MEDIUM questions generated")

    return distribution


def filter_valid_questions(
    questions: list[GeneratedQuestion], provider_name: str = "provider"
) -> list[GeneratedQuestion]:
    """Drop questions that are too short or still contain placeholders.

    Answers must reach a word floor that depends on the marks: 10 words for
    TWO, 25 for EIGHT and 50 for SIXTEEN.
    """
    valid = []

    for question in questions:
        if len(question.question_text.strip()) < MIN_QUESTION_CHARS:
            logger.warning(f"{provider_name}: Filtering out question with empty/invalid question_text")
            continue

        if len(question.answer_text.strip()) < MIN_ANSWER_CHARS:
            logger.warning(f"{provider_name}: Filtering out question with empty/invalid answer_text")
            continue

        answer_words = len(question.answer_text.split())
        min_words = MIN_ANSWER_WORDS[question.marks]
        if answer_words < min_words:
            logger.warning(
                f"{provider_name}: Filtering out question with answer too short: "
                f"{answer_words} words (minimum: {min_words} for {question.marks.value} marks)"
            )
            continue

        if _matches_any(FILTER_PLACEHOLDER_PATTERNS, question.question_text, question.answer_text):
            logger.warning(f"{provider_name}: Filtering out question with placeholder text")
            continue

        valid.append(question)

    return valid
