"""Markdown removal for generated question and answer text."""

import re

# Applied in order; images must be handled before links
_MARKDOWN_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"```[\s\S]*?```"), ""),
    (re.compile(r"`([^`\n]*)`"), r"\1"),
    (re.compile(r"!\[([^\]]*)\]\([^)]+\)"), r"\1"),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"^#{1,6}\s+(.+)$", re.MULTILINE), r"\1"),
    (re.compile(r"\*\*([^*]+?)\*\*"), r"\1"),
    (re.compile(r"__([^_]+?)__"), r"\1"),
    (re.compile(r"(?<![\w*])\*([^*\n]+?)\*(?![\w*])"), r"\1"),
    (re.compile(r"(?<![\w_])_([^_\n]+?)_(?![\w_])"), r"\1"),
    (re.compile(r"^\s*\d+\.\s+", re.MULTILINE), ""),
    (re.compile(r"^\s*[-*+]\s+", re.MULTILINE), ""),
    (re.compile(r"^[-*_]{3,}\s*$", re.MULTILINE), ""),
    (re.compile(r"^>\s?(.*)$", re.MULTILINE), r"\1"),
    (re.compile(r"\|"), " "),
    (re.compile(r"\n{3,}"), "\n\n"),
    (re.compile(r"[ \t]{2,}"), " "),
]


def strip_markdown(text: str) -> str:
    """Strip markdown formatting while keeping the readable content.

    Fenced code blocks are removed; inline code, link text, image alt text and
    heading text are kept. Bold and italic markers, list bullets and numbers,
    horizontal rules, blockquote markers and table pipes are dropped, then
    runs of blank lines and spaces are collapsed.
    """
    if not text:
        return text

    cleaned = text
    for pattern, replacement in _MARKDOWN_RULES:
        cleaned = pattern.sub(replacement, cleaned)

    return cleaned.strip()
