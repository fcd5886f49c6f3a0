"""Token estimation used for chunk budgeting."""

import math


def estimate_tokens(text: str) -> int:
    """Estimate the token count of ``text``.

    Rough estimate: 1 token ≈ 4 characters for English text. Real tokenizers
    diverge from this, so the value only keeps chunks roughly bounded and must
    never be used as an exact count for the backend's context window.
    """
    return math.ceil(len(text) / 4)


def estimate_tokens_from_chars(char_count: int) -> int:
    """Same estimate as :func:`estimate_tokens` for a precomputed length."""
    return math.ceil(char_count / 4)
