"""Question generation request and result models."""

from enum import Enum

from pydantic import BaseModel, Field


class DifficultyLevel(str, Enum):
    """Question difficulty."""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class BloomLevel(str, Enum):
    """Bloom's taxonomy cognitive level."""

    REMEMBER = "REMEMBER"
    UNDERSTAND = "UNDERSTAND"
    APPLY = "APPLY"
    ANALYZE = "ANALYZE"
    EVALUATE = "EVALUATE"
    CREATE = "CREATE"


class QuestionType(str, Enum):
    """How a question is framed."""

    DIRECT = "DIRECT"
    INDIRECT = "INDIRECT"
    SCENARIO_BASED = "SCENARIO_BASED"
    PROBLEM_BASED = "PROBLEM_BASED"


class Marks(str, Enum):
    """Mark allocation, one per difficulty level."""

    TWO = "TWO"
    EIGHT = "EIGHT"
    SIXTEEN = "SIXTEEN"


MARKS_FOR_DIFFICULTY = {
    DifficultyLevel.EASY: Marks.TWO,
    DifficultyLevel.MEDIUM: Marks.EIGHT,
    DifficultyLevel.HARD: Marks.SIXTEEN,
}

BLOOM_FOR_DIFFICULTY = {
    DifficultyLevel.EASY: frozenset({BloomLevel.REMEMBER, BloomLevel.UNDERSTAND}),
    DifficultyLevel.MEDIUM: frozenset({BloomLevel.APPLY, BloomLevel.ANALYZE}),
    DifficultyLevel.HARD: frozenset({BloomLevel.EVALUATE, BloomLevel.CREATE}),
}


class QuotaCounts(BaseModel):
    """A named set of non-negative counters forming one quota axis."""

    @property
    def total(self) -> int:
        return sum(self.as_dict().values())

    def as_dict(self) -> dict[str, int]:
        return self.model_dump()


class DifficultyCounts(QuotaCounts):
    easy: int = Field(default=0, ge=0)
    medium: int = Field(default=0, ge=0)
    hard: int = Field(default=0, ge=0)


class BloomCounts(QuotaCounts):
    remember: int = Field(default=0, ge=0)
    understand: int = Field(default=0, ge=0)
    apply: int = Field(default=0, ge=0)
    analyze: int = Field(default=0, ge=0)
    evaluate: int = Field(default=0, ge=0)
    create: int = Field(default=0, ge=0)


class QuestionTypeCounts(QuotaCounts):
    direct: int = Field(default=0, ge=0)
    indirect: int = Field(default=0, ge=0)
    scenario_based: int = Field(default=0, ge=0)
    problem_based: int = Field(default=0, ge=0)


class GenerationRequest(BaseModel):
    """Everything needed to generate questions for one piece of material."""

    material_content: str
    course_name: str
    material_name: str
    unit: int = 1
    question_counts: DifficultyCounts = Field(default_factory=DifficultyCounts)
    bloom_levels: BloomCounts = Field(default_factory=BloomCounts)
    question_types: QuestionTypeCounts = Field(default_factory=QuestionTypeCounts)

    @property
    def total_questions(self) -> int:
        """Requested question count, defined by the difficulty axis."""
        return self.question_counts.total

    def quota_axes(self) -> dict[str, dict[str, int]]:
        """All quota axes keyed by field name."""
        return {
            "question_counts": self.question_counts.as_dict(),
            "bloom_levels": self.bloom_levels.as_dict(),
            "question_types": self.question_types.as_dict(),
        }

    def with_quotas(
        self, axes: dict[str, dict[str, int]], material_content: str
    ) -> "GenerationRequest":
        """Copy of this request with replaced quotas and content."""
        return self.model_copy(
            update={
                "material_content": material_content,
                "question_counts": DifficultyCounts(**axes["question_counts"]),
                "bloom_levels": BloomCounts(**axes["bloom_levels"]),
                "question_types": QuestionTypeCounts(**axes["question_types"]),
            }
        )


class GeneratedQuestion(BaseModel):
    """A sanitized question record ready for persistence."""

    question_text: str
    answer_text: str
    difficulty_level: DifficultyLevel = DifficultyLevel.MEDIUM
    bloom_level: BloomLevel = BloomLevel.UNDERSTAND
    question_type: QuestionType = QuestionType.DIRECT
    marks: Marks = Marks.EIGHT
    bloom_justification: str | None = None
    unit_number: int = 1
    course_name: str = ""
    material_name: str = ""
