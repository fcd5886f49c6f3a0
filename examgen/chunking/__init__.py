"""Content chunking and quota distribution for question generation."""

from .chunker import chunk_content, get_chunk_statistics
from .distributor import ChunkAllocation, distribute_across_chunks
from .models import Chunk, ChunkingMethod, ChunkingOptions, ChunkMetadata, TailPolicy
from .strategies import (
    ChunkingStrategy,
    HeadingChunkingStrategy,
    HybridChunkingStrategy,
    TokenChunkingStrategy,
    extract_keywords,
)
from .tokens import estimate_tokens

__all__ = [
    "Chunk",
    "ChunkAllocation",
    "ChunkMetadata",
    "ChunkingMethod",
    "ChunkingOptions",
    "ChunkingStrategy",
    "HeadingChunkingStrategy",
    "HybridChunkingStrategy",
    "TailPolicy",
    "TokenChunkingStrategy",
    "chunk_content",
    "distribute_across_chunks",
    "estimate_tokens",
    "extract_keywords",
    "get_chunk_statistics",
]
