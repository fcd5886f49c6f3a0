"""Tests for content chunking."""

import pytest
from pydantic import ValidationError

from examgen.chunking import (
    ChunkingMethod,
    ChunkingOptions,
    TailPolicy,
    chunk_content,
    estimate_tokens,
    extract_keywords,
    get_chunk_statistics,
)
from examgen.chunking.strategies import split_by_headings, split_line_windows
from examgen.errors import InvalidInput


def _options(**overrides) -> ChunkingOptions:
    values = {"max_tokens_per_chunk": 100, "min_tokens_per_chunk": 10, "overlap_tokens": 0}
    values.update(overrides)
    return ChunkingOptions(**values)


def _assert_contiguous(chunks, line_count):
    assert chunks[0].start_line == 0
    for previous, current in zip(chunks, chunks[1:]):
        assert current.start_line == previous.end_line + 1
    assert chunks[-1].end_line == line_count - 1


class TestEstimateTokens:
    """Test token estimation."""

    def test_four_characters_per_token(self):
        """Test the character based estimate rounds up."""
        assert estimate_tokens("") == 0
        assert estimate_tokens("abcd") == 1
        assert estimate_tokens("abcde") == 2


class TestChunkingOptions:
    """Test chunking option validation."""

    def test_defaults(self):
        """Test default budgets."""
        options = ChunkingOptions()
        assert options.max_tokens_per_chunk == 3000
        assert options.min_tokens_per_chunk == 500
        assert options.overlap_tokens == 200
        assert options.method == ChunkingMethod.BY_HEADING
        assert options.tail_policy == TailPolicy.MERGE

    def test_max_must_exceed_min(self):
        """Test max not greater than min is rejected."""
        with pytest.raises(ValidationError, match="greater than min_tokens_per_chunk"):
            ChunkingOptions(max_tokens_per_chunk=500, min_tokens_per_chunk=500)

    def test_overlap_must_be_below_max(self):
        """Test overlap not smaller than max is rejected."""
        with pytest.raises(ValidationError, match="overlap_tokens"):
            ChunkingOptions(max_tokens_per_chunk=1000, min_tokens_per_chunk=100, overlap_tokens=1000)

    def test_create_raises_invalid_input(self):
        """Test the factory reports inconsistent budgets as InvalidInput."""
        with pytest.raises(InvalidInput, match="Invalid chunking options"):
            ChunkingOptions.create(max_tokens_per_chunk=100, min_tokens_per_chunk=200)

        options = ChunkingOptions.create(max_tokens_per_chunk=200, min_tokens_per_chunk=100)
        assert options.max_tokens_per_chunk == 200


class TestChunkContent:
    """Test heading based chunking."""

    def test_small_content_single_chunk_verbatim(self):
        """Test content within budget comes back untouched."""
        content = "# Networks\n\nA protocol is a set of rules.\n\n## Layers\nThe OSI model has seven layers.\n"

        chunks = chunk_content(content)

        assert len(chunks) == 1
        chunk = chunks[0]
        assert chunk.id == "chunk-1"
        assert chunk.title == "Full Content"
        assert chunk.content == content
        assert chunk.start_line == 0
        assert chunk.end_line == len(content.split("\n")) - 1
        assert chunk.tokens == estimate_tokens(content)

    @pytest.mark.parametrize("content", ["", "   \n\t  "])
    def test_empty_content_rejected(self, content):
        """Test empty or whitespace-only content raises InvalidInput."""
        with pytest.raises(InvalidInput, match="Content cannot be empty"):
            chunk_content(content)

    @pytest.mark.parametrize("content", [5, None, ["# Notes"]])
    def test_non_string_content_rejected(self, content):
        """Test content that is not a string raises InvalidInput."""
        with pytest.raises(InvalidInput, match="Content must be a string"):
            chunk_content(content)

    def test_unvalidated_options_rejected(self):
        """Test options copied past validation are checked again."""
        options = _options().model_copy(update={"min_tokens_per_chunk": 500})

        with pytest.raises(InvalidInput, match="greater than min_tokens_per_chunk"):
            chunk_content("Some course text.", options)

    def test_invalid_input_is_value_error(self):
        """Test InvalidInput can be handled as ValueError."""
        with pytest.raises(ValueError):
            chunk_content("")

    def test_large_document_spans_without_gaps(self):
        """Test a ~50k token document is split with contiguous line spans."""
        sections = [f"## Topic {i}\n" + " ".join(["word"] * 399) for i in range(100)]
        content = "\n".join(sections)
        assert estimate_tokens(content) >= 50_000

        chunks = chunk_content(
            content, ChunkingOptions(max_tokens_per_chunk=2000, min_tokens_per_chunk=500)
        )

        assert len(chunks) > 1
        assert all(chunk.tokens <= 2000 for chunk in chunks)
        assert [chunk.id for chunk in chunks] == [f"chunk-{i}" for i in range(1, len(chunks) + 1)]
        _assert_contiguous(chunks, len(content.split("\n")))
        assert chunks[0].title == "Topic 0 → Topic 1 → Topic 2"

    def test_chunking_is_idempotent(self):
        """Test the same input and options give identical chunks."""
        content = "\n".join(f"## Part {i}\n" + "x" * 250 for i in range(6))
        options = _options()

        assert chunk_content(content, options) == chunk_content(content, options)

    def test_introduction_section(self):
        """Test text before the first heading becomes an Introduction section."""
        content = "Preface " * 60 + "\n# Chapter One\n" + "body " * 60

        chunks = chunk_content(content, _options())

        assert chunks[0].title == "Introduction"
        assert chunks[1].title == "Chapter One"

    def test_heading_metadata(self):
        """Test merged chunks report the top-most heading level."""
        content = "\n".join(
            [
                "# One",
                "a" * 360,
                "## Two",
                "b" * 100,
                "### Three",
                "c" * 100,
            ]
        )

        chunks = chunk_content(content, _options(min_tokens_per_chunk=20))

        assert len(chunks) == 2
        assert chunks[0].metadata.heading_level == 1
        assert chunks[0].metadata.has_subsections is False
        assert chunks[1].title == "Two → Three"
        assert chunks[1].metadata.heading_level == 2
        assert chunks[1].metadata.has_subsections is True
        assert chunks[1].content == "## Two\n" + "b" * 100 + "\n\n### Three\n" + "c" * 100


class TestTailPolicy:
    """Test handling of a trailing chunk below the minimum."""

    CONTENT = "\n".join(["## A", "x" * 300, "## B", "x" * 300, "## C", "y" * 115])

    def test_tail_merged_by_default(self):
        """Test a small tail is folded into the previous chunk."""
        chunks = chunk_content(self.CONTENT, _options(min_tokens_per_chunk=40))

        assert len(chunks) == 2
        assert chunks[-1].title == "B → C"
        assert chunks[-1].end_line == 5
        assert "y" * 115 in chunks[-1].content
        _assert_contiguous(chunks, 6)

    def test_tail_dropped(self):
        """Test the drop policy discards a small tail."""
        chunks = chunk_content(
            self.CONTENT, _options(min_tokens_per_chunk=40, tail_policy=TailPolicy.DROP)
        )

        assert len(chunks) == 2
        assert chunks[-1].title == "B"
        assert chunks[-1].end_line == 3
        assert all("y" * 115 not in chunk.content for chunk in chunks)

    def test_tail_above_minimum_kept(self):
        """Test a tail at or above the minimum is sealed on its own."""
        chunks = chunk_content(self.CONTENT, _options(min_tokens_per_chunk=20))

        assert [chunk.title for chunk in chunks] == ["A", "B", "C"]


class TestTokenChunking:
    """Test fixed-budget line windows."""

    LINES = [f"{i:02d} " + "z" * 37 for i in range(50)]

    def test_windows_fit_budget(self):
        """Test windows stay within the budget and cover every line."""
        content = "\n".join(self.LINES)

        chunks = chunk_content(content, _options(method=ChunkingMethod.BY_TOKENS))

        assert len(chunks) == 6
        assert all(chunk.tokens <= 100 for chunk in chunks)
        assert [chunk.title for chunk in chunks] == [f"Part {i}" for i in range(1, 7)]
        _assert_contiguous(chunks, 50)

    def test_windows_overlap(self):
        """Test consecutive windows share trailing lines up to the overlap budget."""
        content = "\n".join(self.LINES)

        chunks = chunk_content(
            content, _options(method=ChunkingMethod.BY_TOKENS, overlap_tokens=20)
        )

        assert chunks[1].start_line == chunks[0].end_line
        assert chunks[-1].end_line == 49

    def test_oversized_line_is_own_window(self):
        """Test a single line above the budget becomes its own window."""
        lines = ["short", "q" * 1000, "short"]

        assert split_line_windows(lines, 100) == [(0, 0), (1, 1), (2, 2)]


class TestHybridChunking:
    """Test heading sections with oversized sections split."""

    def test_oversized_section_split_into_parts(self):
        """Test an oversized section is cut into numbered parts."""
        content = "## Big\n" + "\n".join("w" * 40 for _ in range(30)) + "\n## Small\n" + "s" * 80

        chunks = chunk_content(content, _options(method=ChunkingMethod.HYBRID))

        assert chunks[0].title == "Big (part 1)"
        assert all(chunk.tokens <= 100 for chunk in chunks)
        assert any("Small" in chunk.title for chunk in chunks)
        _assert_contiguous(chunks, len(content.split("\n")))


class TestHelpers:
    """Test section splitting, keywords and statistics."""

    def test_split_by_headings(self):
        """Test sections cover the document with their heading levels."""
        sections = split_by_headings("intro\n# One\ntext\n### Deep\nmore")

        assert [(s.heading, s.level, s.start_line, s.end_line) for s in sections] == [
            ("Introduction", 1, 0, 0),
            ("One", 1, 1, 2),
            ("Deep", 3, 3, 4),
        ]

    def test_extract_keywords(self):
        """Test keywords are frequent words longer than four characters."""
        text = "Photosynthesis converts light. Photosynthesis needs chlorophyll; the cell grows."

        keywords = extract_keywords(text)

        assert keywords[0] == "photosynthesis"
        assert "chlorophyll" in keywords
        assert "the" not in keywords
        assert "cell" not in keywords
        assert len(keywords) <= 5

    def test_chunk_statistics(self):
        """Test statistics over a chunked document."""
        chunks = chunk_content(TestTailPolicy.CONTENT, _options(min_tokens_per_chunk=20))

        stats = get_chunk_statistics(chunks)

        assert stats["total_chunks"] == 3
        assert stats["estimated_tokens"] == sum(chunk.tokens for chunk in chunks)
        assert stats["min_chunk_tokens"] == 30
        assert stats["max_chunk_tokens"] == 77
        assert stats["line_span"] == [0, 5]

    def test_statistics_empty(self):
        """Test statistics of no chunks."""
        assert get_chunk_statistics([]) == {"total_chunks": 0}
