"""Data models for document chunking."""

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field, ValidationError, model_validator

from examgen.errors import InvalidInput


class ChunkingMethod(str, Enum):
    """Splitting strategies understood by the chunker."""

    BY_HEADING = "by-heading"
    BY_TOKENS = "by-tokens"
    HYBRID = "hybrid"


class TailPolicy(str, Enum):
    """What happens to a trailing chunk smaller than the minimum budget."""

    MERGE = "merge"
    DROP = "drop"


class ChunkingOptions(BaseModel):
    """Budgets and strategy selection for a chunking run."""

    max_tokens_per_chunk: int = Field(default=3000, gt=0)
    min_tokens_per_chunk: int = Field(default=500, gt=0)
    overlap_tokens: int = Field(default=200, ge=0)
    method: ChunkingMethod = ChunkingMethod.BY_HEADING
    preserve_context: bool = True
    tail_policy: TailPolicy = TailPolicy.MERGE

    @model_validator(mode="after")
    def _check_budgets(self) -> "ChunkingOptions":
        if self.max_tokens_per_chunk <= self.min_tokens_per_chunk:
            raise ValueError("max_tokens_per_chunk must be greater than min_tokens_per_chunk")
        if self.overlap_tokens >= self.max_tokens_per_chunk:
            raise ValueError("overlap_tokens must be smaller than max_tokens_per_chunk")
        return self

    @classmethod
    def create(cls, **values) -> "ChunkingOptions":
        """Build options, raising ``InvalidInput`` when the budgets are inconsistent."""
        try:
            return cls(**values)
        except ValidationError as e:
            raise InvalidInput(f"Invalid chunking options: {e}") from e


@dataclass(frozen=True)
class ChunkMetadata:
    """Metadata for a content chunk."""

    heading_level: int = 1
    has_subsections: bool = False
    topic_keywords: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Chunk:
    """A bounded span of source text handed to the completion backend."""

    id: str
    title: str
    content: str
    start_line: int
    end_line: int
    tokens: int
    metadata: ChunkMetadata = field(default_factory=ChunkMetadata)

    def __len__(self) -> int:
        """Return the length of the content."""
        return len(self.content)

    def get_word_count(self) -> int:
        """Get word count for the chunk."""
        return len(self.content.split())


@dataclass
class Section:
    """A heading-delimited run of source lines."""

    heading: str
    level: int
    lines: list[str]
    start_line: int
    end_line: int

    @property
    def content(self) -> str:
        return "\n".join(self.lines)
