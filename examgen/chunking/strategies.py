"""Chunking strategies for splitting course material."""

import logging
import re
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field

from .models import Chunk, ChunkingMethod, ChunkingOptions, ChunkMetadata, Section, TailPolicy
from .tokens import estimate_tokens, estimate_tokens_from_chars

logger = logging.getLogger(__name__)

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+)$")
TITLE_SEPARATOR = " → "
KEYWORD_LIMIT = 5


def extract_keywords(text: str, limit: int = KEYWORD_LIMIT) -> list[str]:
    """Return the most frequent words longer than four characters."""
    words = re.sub(r"[^\w\s]", " ", text.lower()).split()
    frequency = Counter(word for word in words if len(word) > 4)
    return [word for word, _ in frequency.most_common(limit)]


def split_by_headings(content: str) -> list[Section]:
    """Split markdown content into sections at heading lines.

    Lines before the first heading form an "Introduction" section at level 1.
    Section line spans are contiguous and cover the whole document.
    """
    lines = content.split("\n")
    sections: list[Section] = []
    current: Section | None = None

    for index, line in enumerate(lines):
        match = HEADING_PATTERN.match(line)

        if match:
            if current:
                current.end_line = index - 1
                sections.append(current)

            current = Section(
                heading=match.group(2),
                level=len(match.group(1)),
                lines=[line],
                start_line=index,
                end_line=index,
            )
        elif current:
            current.lines.append(line)
        else:
            current = Section(
                heading="Introduction",
                level=1,
                lines=[line],
                start_line=index,
                end_line=index,
            )

    if current:
        current.end_line = len(lines) - 1
        sections.append(current)

    return sections


def split_line_windows(
    lines: list[str], max_tokens: int, overlap_tokens: int = 0
) -> list[tuple[int, int]]:
    """Split lines into inclusive (start, end) windows of at most ``max_tokens``.

    A single line longer than the budget becomes a window of its own. With
    ``overlap_tokens`` each window after the first starts with the trailing
    lines of the previous one, up to that many tokens.
    """
    windows: list[tuple[int, int]] = []
    line_count = len(lines)
    start = 0
    previous_end = -1

    while start < line_count:
        end = start
        chars = len(lines[start])
        while end + 1 < line_count:
            grown = chars + 1 + len(lines[end + 1])
            if estimate_tokens_from_chars(grown) > max_tokens:
                break
            chars = grown
            end += 1

        if end <= previous_end:
            # Overlap left no room for new lines; restart right after the last window
            start = previous_end + 1
            continue

        windows.append((start, end))
        previous_end = end
        if end >= line_count - 1:
            break

        next_start = end + 1
        if overlap_tokens > 0:
            tail_chars = -1
            while next_start - 1 > start:
                grown = tail_chars + 1 + len(lines[next_start - 1])
                if estimate_tokens_from_chars(grown) > overlap_tokens:
                    break
                tail_chars = grown
                next_start -= 1
        start = next_start

    return windows


@dataclass
class _ChunkDraft:
    """Accumulator for sections that will be sealed into one chunk."""

    headings: list[str]
    levels: list[int]
    contents: list[str]
    start_line: int
    end_line: int
    tokens: int
    keyword_text: list[str] = field(default_factory=list)

    @classmethod
    def from_section(cls, section: Section) -> "_ChunkDraft":
        content = section.content
        return cls(
            headings=[section.heading],
            levels=[section.level],
            contents=[content],
            start_line=section.start_line,
            end_line=section.end_line,
            tokens=estimate_tokens(content),
        )

    def absorb(self, other: "_ChunkDraft") -> None:
        self.headings.extend(other.headings)
        self.levels.extend(other.levels)
        self.contents.extend(other.contents)
        self.end_line = other.end_line
        self.tokens += other.tokens

    def seal(self, index: int) -> Chunk:
        return Chunk(
            id=f"chunk-{index}",
            title=TITLE_SEPARATOR.join(self.headings),
            content="\n\n".join(self.contents),
            start_line=self.start_line,
            end_line=self.end_line,
            tokens=self.tokens,
            metadata=ChunkMetadata(
                heading_level=min(self.levels),
                has_subsections=len(self.headings) > 1,
                topic_keywords=tuple(extract_keywords(" ".join(self.contents))),
            ),
        )


class ChunkingStrategy(ABC):
    """Abstract base class for chunking strategies."""

    def __init__(self, options: ChunkingOptions):
        """Initialize the strategy.

        Args:
            options: Token budgets and tail handling
        """
        self.options = options

    @abstractmethod
    def chunk(self, content: str) -> list[Chunk]:
        """Split content into chunks."""
        pass

    def _apply_tail_policy(self, drafts: list[_ChunkDraft]) -> list[_ChunkDraft]:
        """Handle a trailing draft below the minimum budget."""
        if not drafts or drafts[-1].tokens >= self.options.min_tokens_per_chunk:
            return drafts

        tail = drafts[-1]
        if self.options.tail_policy == TailPolicy.DROP:
            logger.warning(
                f"Dropping trailing chunk '{TITLE_SEPARATOR.join(tail.headings)}' "
                f"({tail.tokens} tokens < {self.options.min_tokens_per_chunk})"
            )
            return drafts[:-1]

        if len(drafts) > 1:
            logger.debug(f"Folding {tail.tokens}-token tail into the previous chunk")
            self._fold(drafts[-2], tail)
            return drafts[:-1]

        return drafts

    def _fold(self, target: _ChunkDraft, tail: _ChunkDraft) -> None:
        target.absorb(tail)

    def _merge_sections(self, sections: list[Section]) -> list[_ChunkDraft]:
        """Greedily merge adjacent sections while they fit the max budget."""
        drafts: list[_ChunkDraft] = []
        current: _ChunkDraft | None = None

        for section in sections:
            draft = _ChunkDraft.from_section(section)

            if current is None:
                current = draft
            elif current.tokens + draft.tokens <= self.options.max_tokens_per_chunk:
                current.absorb(draft)
            else:
                drafts.append(current)
                current = draft

        if current is not None:
            drafts.append(current)

        return drafts


class HeadingChunkingStrategy(ChunkingStrategy):
    """Split at markdown headings, then merge sections up to the token budget."""

    def chunk(self, content: str) -> list[Chunk]:
        sections = split_by_headings(content)
        logger.info(f"Found {len(sections)} sections")

        drafts = self._apply_tail_policy(self._merge_sections(sections))
        return [draft.seal(index) for index, draft in enumerate(drafts, start=1)]


class TokenChunkingStrategy(ChunkingStrategy):
    """Fixed-budget line windows with overlap, ignoring document structure."""

    def chunk(self, content: str) -> list[Chunk]:
        self._lines = content.split("\n")
        windows = split_line_windows(
            self._lines, self.options.max_tokens_per_chunk, self.options.overlap_tokens
        )

        drafts = []
        for number, (start, end) in enumerate(windows, start=1):
            text = "\n".join(self._lines[start : end + 1])
            drafts.append(
                _ChunkDraft(
                    headings=[f"Part {number}"],
                    levels=[self._top_heading_level(start, end)],
                    contents=[text],
                    start_line=start,
                    end_line=end,
                    tokens=estimate_tokens(text),
                )
            )

        drafts = self._apply_tail_policy(drafts)
        return [draft.seal(index) for index, draft in enumerate(drafts, start=1)]

    def _fold(self, target: _ChunkDraft, tail: _ChunkDraft) -> None:
        # Windows overlap, so rebuild the text from the source lines instead of concatenating
        text = "\n".join(self._lines[target.start_line : tail.end_line + 1])
        target.contents = [text]
        target.end_line = tail.end_line
        target.tokens = estimate_tokens(text)
        target.levels.extend(tail.levels)

    def _top_heading_level(self, start: int, end: int) -> int:
        levels = [
            len(match.group(1))
            for line in self._lines[start : end + 1]
            if (match := HEADING_PATTERN.match(line))
        ]
        return min(levels, default=1)


class HybridChunkingStrategy(ChunkingStrategy):
    """Heading sections, with oversized sections cut into windows before merging."""

    def chunk(self, content: str) -> list[Chunk]:
        sections: list[Section] = []
        for section in split_by_headings(content):
            if estimate_tokens(section.content) <= self.options.max_tokens_per_chunk:
                sections.append(section)
                continue

            windows = split_line_windows(section.lines, self.options.max_tokens_per_chunk)
            logger.debug(f"Section '{section.heading}' split into {len(windows)} parts")
            for part, (start, end) in enumerate(windows, start=1):
                sections.append(
                    Section(
                        heading=f"{section.heading} (part {part})",
                        level=section.level,
                        lines=section.lines[start : end + 1],
                        start_line=section.start_line + start,
                        end_line=section.start_line + end,
                    )
                )

        drafts = self._apply_tail_policy(self._merge_sections(sections))
        return [draft.seal(index) for index, draft in enumerate(drafts, start=1)]


STRATEGIES: dict[ChunkingMethod, type[ChunkingStrategy]] = {
    ChunkingMethod.BY_HEADING: HeadingChunkingStrategy,
    ChunkingMethod.BY_TOKENS: TokenChunkingStrategy,
    ChunkingMethod.HYBRID: HybridChunkingStrategy,
}


def create_strategy(options: ChunkingOptions) -> ChunkingStrategy:
    """Build the strategy selected by ``options.method``."""
    return STRATEGIES[options.method](options)
