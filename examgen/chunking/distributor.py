"""Proportional distribution of question quotas across chunks."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field

from .models import Chunk

QuotaSet = Mapping[str, int]


@dataclass
class ChunkAllocation:
    """Per-axis quotas assigned to one chunk."""

    chunk_id: str
    quotas: dict[str, dict[str, int]] = field(default_factory=dict)

    def total(self, axis: str) -> int:
        """Sum of the counters on one axis."""
        return sum(self.quotas.get(axis, {}).values())


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def distribute_across_chunks(
    chunks: list[Chunk], requirements: Mapping[str, QuotaSet]
) -> list[ChunkAllocation]:
    """Spread every quota axis over the chunks by token share.

    Each chunk gets ``round(total * weight)`` of every counter, except the last
    chunk which gets whatever remains, so per-counter sums always reproduce the
    requested totals. Values are clamped at zero. Axes never mix; only the
    chunk weights are shared.

    Args:
        chunks: Chunks in generation order
        requirements: Axis name to counter name to requested count

    Returns:
        One allocation per chunk, in chunk order
    """
    if not chunks:
        return []

    total_tokens = sum(chunk.tokens for chunk in chunks)
    if total_tokens > 0:
        weights = [chunk.tokens / total_tokens for chunk in chunks]
    else:
        weights = [1 / len(chunks)] * len(chunks)

    allocations = [ChunkAllocation(chunk_id=chunk.id) for chunk in chunks]
    last_index = len(chunks) - 1

    for axis, counters in requirements.items():
        for counter, total in counters.items():
            shares = [_round_half_up(total * weight) for weight in weights[:last_index]]
            shares.append(total - sum(shares))
            _settle_deficit(shares)
            for allocation, share in zip(allocations, shares):
                allocation.quotas.setdefault(axis, {})[counter] = max(0, share)

    return allocations


def _settle_deficit(shares: list[int]) -> None:
    """Take a negative last share back from earlier chunks, latest first.

    Rounding several chunks up can overshoot the total; clamping the last
    share alone would then break the per-counter sum.
    """
    deficit = -shares[-1]
    if deficit <= 0:
        return

    shares[-1] = 0
    for index in range(len(shares) - 2, -1, -1):
        taken = min(shares[index], deficit)
        shares[index] -= taken
        deficit -= taken
        if deficit == 0:
            break
