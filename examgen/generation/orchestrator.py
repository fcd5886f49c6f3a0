"""Chunked, retrying question generation against a completion backend."""

import asyncio
import logging

from pydantic import BaseModel, Field, model_validator

from examgen.chunking import Chunk, ChunkingOptions, chunk_content, distribute_across_chunks
from examgen.config import QuotaAllocation, Settings
from examgen.errors import GenerationFailed, InvalidRequest, ParseError
from examgen.llm.base import LLMProvider, SamplingOptions
from .models import GeneratedQuestion, GenerationRequest
from .parser import parse_question_response
from .prompts import SYSTEM_PROMPT, build_question_prompt
from .validation import filter_valid_questions

logger = logging.getLogger(__name__)


class GenerationConfig(BaseModel):
    """Tuning for one question generator."""

    temperature: float = 0.7
    retry_temperature: float = 0.5
    max_output_tokens: int = 8192
    top_p: float = 0.9
    max_tokens_per_chunk: int = Field(default=8000, gt=0)
    min_tokens_per_chunk: int = Field(default=500, gt=0)
    max_attempts: int = Field(default=3, ge=1)
    retry_backoff_seconds: float = Field(default=3.0, ge=0.0)
    quota_allocation: QuotaAllocation = QuotaAllocation.EVEN

    @model_validator(mode="after")
    def _check_chunk_budgets(self) -> "GenerationConfig":
        if self.max_tokens_per_chunk <= self.min_tokens_per_chunk:
            raise ValueError("max_tokens_per_chunk must be greater than min_tokens_per_chunk")
        return self

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenerationConfig":
        return cls(
            temperature=settings.temperature,
            retry_temperature=settings.retry_temperature,
            max_output_tokens=settings.max_output_tokens,
            top_p=settings.top_p,
            max_tokens_per_chunk=settings.max_tokens_per_chunk,
            min_tokens_per_chunk=settings.min_tokens_per_chunk,
            max_attempts=settings.max_attempts,
            retry_backoff_seconds=settings.retry_backoff_seconds,
            quota_allocation=settings.quota_allocation,
        )

    def sampling_for_attempt(self, attempt: int) -> SamplingOptions:
        """Sampling options for a 1-based attempt number."""
        return SamplingOptions(
            temperature=self.temperature if attempt == 1 else self.retry_temperature,
            max_output_tokens=self.max_output_tokens,
            top_p=self.top_p,
        )


def _ceil_ratio(count: int, ask: int, total: int) -> int:
    return -(-count * ask // total)


def scale_request(
    request: GenerationRequest, ask: int, material_content: str | None = None
) -> GenerationRequest:
    """Scale every counter on every axis by ``ask / total``, rounding up.

    Rounding up means a scaled axis can exceed ``ask``; the overall result is
    truncated to the requested total afterwards.
    """
    total = request.total_questions
    content = request.material_content if material_content is None else material_content
    if total <= 0 or ask >= total:
        return request.with_quotas(request.quota_axes(), content)

    axes = {
        axis: {name: _ceil_ratio(count, ask, total) for name, count in counters.items()}
        for axis, counters in request.quota_axes().items()
    }
    return request.with_quotas(axes, content)


class QuestionGenerator:
    """Generates exam questions for a material, one chunk at a time.

    Large materials are chunked to fit the backend's context budget and the
    requested counts are split over the chunks. Each chunk gets a bounded
    number of attempts; valid questions are accumulated across attempts and a
    chunk that never succeeds simply contributes nothing.
    """

    def __init__(self, provider: LLMProvider, config: GenerationConfig | None = None):
        self.provider = provider
        self.config = config or GenerationConfig()

    async def generate_questions(self, request: GenerationRequest) -> list[GeneratedQuestion]:
        """Generate questions for a request.

        Args:
            request: Material, labels and per-axis quotas

        Returns:
            Up to ``request.total_questions`` questions, possibly fewer

        Raises:
            InvalidRequest: If no questions are requested or the backend lacks credentials
            InvalidInput: If the material is empty or the chunk budgets are inconsistent
            GenerationFailed: If not a single valid question was produced
        """
        total = request.total_questions
        if total <= 0:
            raise InvalidRequest("At least one question must be requested")

        if not self.provider.has_credentials():
            raise InvalidRequest(f"{self.provider.name} credentials are not configured")

        chunks = chunk_content(
            request.material_content,
            ChunkingOptions.create(
                max_tokens_per_chunk=self.config.max_tokens_per_chunk,
                min_tokens_per_chunk=self.config.min_tokens_per_chunk,
                overlap_tokens=0,
            ),
        )

        if len(chunks) == 1:
            logger.info(f"{self.provider.name}: Generating {total} questions from a single chunk")
            questions = await self._generate_for_chunk(request, total, label="content")
        elif self.config.quota_allocation == QuotaAllocation.PROPORTIONAL:
            questions = await self._generate_proportional(request, chunks)
        else:
            questions = await self._generate_even(request, chunks)

        questions = questions[:total]

        if not questions:
            raise GenerationFailed(
                f"{self.provider.name} failed to generate any valid questions after "
                f"{self.config.max_attempts} attempts per chunk"
            )

        if len(questions) < total:
            logger.warning(
                f"{self.provider.name}: Generated {len(questions)}/{total} questions "
                "(partial result)"
            )
        else:
            logger.info(f"{self.provider.name}: Generated {len(questions)}/{total} questions")

        return [self._backfill(question, request) for question in questions]

    async def _generate_even(
        self, request: GenerationRequest, chunks: list[Chunk]
    ) -> list[GeneratedQuestion]:
        total = request.total_questions
        per_chunk = -(-total // len(chunks))
        logger.info(
            f"{self.provider.name}: Content split into {len(chunks)} chunks, "
            f"~{per_chunk} questions each"
        )

        questions: list[GeneratedQuestion] = []
        for index, chunk in enumerate(chunks, start=1):
            remaining = total - len(questions)
            if remaining <= 0:
                break

            ask = min(per_chunk, remaining)
            chunk_request = scale_request(request, ask, chunk.content)
            questions.extend(
                await self._generate_for_chunk(
                    chunk_request, ask, label=f"chunk {index}/{len(chunks)}"
                )
            )

        return questions

    async def _generate_proportional(
        self, request: GenerationRequest, chunks: list[Chunk]
    ) -> list[GeneratedQuestion]:
        total = request.total_questions
        allocations = distribute_across_chunks(chunks, request.quota_axes())
        logger.info(
            f"{self.provider.name}: Content split into {len(chunks)} chunks, "
            "quotas weighted by chunk size"
        )

        questions: list[GeneratedQuestion] = []
        for index, (chunk, allocation) in enumerate(zip(chunks, allocations), start=1):
            remaining = total - len(questions)
            if remaining <= 0:
                break

            chunk_total = allocation.total("question_counts")
            ask = min(chunk_total, remaining)
            if ask <= 0:
                logger.debug(f"{self.provider.name}: Skipping {chunk.id}, no questions allotted")
                continue

            chunk_request = request.with_quotas(allocation.quotas, chunk.content)
            if ask < chunk_total:
                chunk_request = scale_request(chunk_request, ask)

            questions.extend(
                await self._generate_for_chunk(
                    chunk_request, ask, label=f"chunk {index}/{len(chunks)}"
                )
            )

        return questions

    async def _generate_for_chunk(
        self, request: GenerationRequest, target: int, label: str
    ) -> list[GeneratedQuestion]:
        """Run the attempt loop for one chunk and return its valid questions."""
        name = self.provider.name
        prompt = build_question_prompt(request, request.material_content)
        accumulated: list[GeneratedQuestion] = []

        for attempt in range(1, self.config.max_attempts + 1):
            if attempt > 1:
                delay = self.config.retry_backoff_seconds * (attempt - 1)
                logger.info(
                    f"{name}: Retrying {label} in {delay:g}s "
                    f"(attempt {attempt}/{self.config.max_attempts})"
                )
                await asyncio.sleep(delay)

            try:
                result = await self.provider.generate_completion(
                    prompt,
                    system_prompt=SYSTEM_PROMPT,
                    options=self.config.sampling_for_attempt(attempt),
                )
                parsed = parse_question_response(result.content, name, fallback_unit=request.unit)
            except (RuntimeError, ParseError) as e:
                logger.warning(f"{name}: Attempt {attempt} for {label} failed: {e}")
                continue

            valid = filter_valid_questions(parsed, name)
            accumulated.extend(valid)
            logger.info(
                f"{name}: Attempt {attempt} for {label} produced {len(valid)} valid questions "
                f"({len(accumulated)}/{target})"
            )

            if len(accumulated) >= target:
                break

        if not accumulated:
            logger.error(f"{name}: No valid questions for {label} after {self.config.max_attempts} attempts")
        elif len(accumulated) < target:
            logger.warning(f"{name}: Only {len(accumulated)}/{target} questions for {label}")

        return accumulated

    @staticmethod
    def _backfill(question: GeneratedQuestion, request: GenerationRequest) -> GeneratedQuestion:
        updates = {}
        if not question.course_name:
            updates["course_name"] = request.course_name
        if not question.material_name:
            updates["material_name"] = request.material_name
        return question.model_copy(update=updates) if updates else question
