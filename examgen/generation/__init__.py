"""Exam question generation: prompting, orchestration and response sanitizing."""

from .markdown import strip_markdown
from .models import (
    BLOOM_FOR_DIFFICULTY,
    MARKS_FOR_DIFFICULTY,
    BloomCounts,
    BloomLevel,
    DifficultyCounts,
    DifficultyLevel,
    GeneratedQuestion,
    GenerationRequest,
    Marks,
    QuestionType,
    QuestionTypeCounts,
)
from .orchestrator import GenerationConfig, QuestionGenerator, scale_request
from .parser import extract_json_object, parse_question_response, sanitize_question
from .prompts import SYSTEM_PROMPT, build_question_prompt
from .validation import filter_valid_questions, validate_difficulty_distribution, validate_questions

__all__ = [
    "BLOOM_FOR_DIFFICULTY",
    "MARKS_FOR_DIFFICULTY",
    "SYSTEM_PROMPT",
    "BloomCounts",
    "BloomLevel",
    "DifficultyCounts",
    "DifficultyLevel",
    "GeneratedQuestion",
    "GenerationConfig",
    "GenerationRequest",
    "Marks",
    "QuestionGenerator",
    "QuestionType",
    "QuestionTypeCounts",
    "build_question_prompt",
    "extract_json_object",
    "filter_valid_questions",
    "parse_question_response",
    "sanitize_question",
    "scale_request",
    "strip_markdown",
    "validate_difficulty_distribution",
    "validate_questions",
]
