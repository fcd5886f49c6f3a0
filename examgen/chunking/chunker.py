"""Entry point for splitting course material into chunks."""

import logging
from typing import Any

from examgen.errors import InvalidInput
from .models import Chunk, ChunkingOptions, ChunkMetadata
from .strategies import create_strategy, extract_keywords
from .tokens import estimate_tokens

logger = logging.getLogger(__name__)


def chunk_content(content: str, options: ChunkingOptions | None = None) -> list[Chunk]:
    """Split material into chunks that fit the token budget.

    Content that already fits ``max_tokens_per_chunk`` is returned verbatim as a
    single "Full Content" chunk, whatever the selected method.

    Args:
        content: Plain-text or markdown rendering of the material
        options: Budgets and strategy; defaults apply when omitted

    Returns:
        Chunks in document order, ids numbered from 1

    Raises:
        InvalidInput: If content is not a non-empty string, or the options are
            inconsistent (options built with ``model_copy`` skip validation)
    """
    if not isinstance(content, str):
        raise InvalidInput(f"Content must be a string, got {type(content).__name__}")

    options = ChunkingOptions.create(**options.model_dump()) if options else ChunkingOptions()

    if not content.strip():
        raise InvalidInput("Content cannot be empty")

    total_tokens = estimate_tokens(content)
    logger.info(f"Total content: {total_tokens} tokens")

    if total_tokens <= options.max_tokens_per_chunk:
        logger.info("Content fits in single chunk")
        return [
            Chunk(
                id="chunk-1",
                title="Full Content",
                content=content,
                start_line=0,
                end_line=len(content.split("\n")) - 1,
                tokens=total_tokens,
                metadata=ChunkMetadata(
                    heading_level=1,
                    has_subsections=False,
                    topic_keywords=tuple(extract_keywords(content)),
                ),
            )
        ]

    logger.info(f"Splitting content using {options.method.value} strategy")
    chunks = create_strategy(options).chunk(content)

    logger.info(f"Created {len(chunks)} chunks")
    for chunk in chunks:
        logger.debug(f"  - {chunk.id}: '{chunk.title}' ({chunk.tokens} tokens)")

    return chunks


def get_chunk_statistics(chunks: list[Chunk]) -> dict[str, Any]:
    """Get statistics about a chunked document.

    Args:
        chunks: List of content chunks

    Returns:
        Dictionary with chunk statistics
    """
    if not chunks:
        return {"total_chunks": 0}

    token_counts = [chunk.tokens for chunk in chunks]

    return {
        "total_chunks": len(chunks),
        "total_characters": sum(len(chunk) for chunk in chunks),
        "total_words": sum(chunk.get_word_count() for chunk in chunks),
        "estimated_tokens": sum(token_counts),
        "average_chunk_tokens": sum(token_counts) // len(chunks),
        "min_chunk_tokens": min(token_counts),
        "max_chunk_tokens": max(token_counts),
        "merged_chunks": sum(1 for chunk in chunks if chunk.metadata.has_subsections),
        "line_span": [chunks[0].start_line, chunks[-1].end_line],
    }
