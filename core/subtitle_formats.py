"""
Subtitle data structures and the SRT parser/formatter.

This module provides:
- The SubtitleEntry data structure for a single caption
- Text helpers for word-level edits between captions
- SRT parsing from text, with block-level error reporting
- SRT formatting with sequential renumbering
"""

import re
from dataclasses import dataclass, field
from typing import List
from utils.logging_config import get_logger
from core.timing_utils import Timecode, TimeConverter

logger = get_logger(__name__)

BLOCK_SEPARATOR_RE = re.compile(r'\n[ \t]*\n')
INDEX_RE = re.compile(r'\d+')
PUNCT_STRIP = '.,!?;:…"\'()[]«»“”‘’-'


class ParseError(ValueError):
    """Raised when SRT text contains a malformed block."""

    def __init__(self, message: str, block_number: int = 0, block: str = ""):
        self.block_number = block_number
        self.block = block
        if block_number:
            message = f"Block {block_number}: {message}\n{block}"
        super().__init__(message)


def normalize_word(word: str) -> str:
    """Lower-case a word and strip surrounding punctuation for rule comparisons."""
    return word.strip(PUNCT_STRIP).lower()


@dataclass
class SubtitleEntry:
    """Represents a single subtitle caption."""
    index: int
    start: Timecode
    end: Timecode
    lines: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        """All lines joined with single spaces."""
        return ' '.join(self.lines)

    def words(self) -> List[str]:
        """Whitespace tokens across every line."""
        return self.text.split()

    @property
    def word_count(self) -> int:
        return len(self.words())

    @property
    def duration_ms(self) -> int:
        return self.end.to_milliseconds() - self.start.to_milliseconds()

    def is_empty(self) -> bool:
        return self.word_count == 0

    def absorb(self, other: 'SubtitleEntry') -> None:
        """
        Merge the following entry into this one.

        The following entry's first line is space-joined onto this entry's
        last line; the time range becomes the union of both.

        Args:
            other: The entry directly after this one in reading order
        """
        self.lines = join_lines(self.lines, other.lines)
        self.start = min(self.start, other.start)
        self.end = max(self.end, other.end)

    def append_words(self, words: List[str]) -> None:
        """Append words to the end of the last line."""
        self.lines = join_lines(self.lines, [' '.join(words)])

    def prepend_words(self, words: List[str]) -> None:
        """Prepend words to the start of the first line."""
        self.lines = join_lines([' '.join(words)], self.lines)

    def pop_leading_words(self, count: int) -> List[str]:
        """Remove and return the first ``count`` words, dropping lines left empty."""
        removed = []
        while count > 0 and self.lines:
            tokens = self.lines[0].split()
            taken, kept = tokens[:count], tokens[count:]
            removed.extend(taken)
            count -= len(taken)
            if kept:
                self.lines[0] = ' '.join(kept)
            else:
                self.lines.pop(0)
        return removed

    def pop_trailing_words(self, count: int) -> List[str]:
        """Remove and return the last ``count`` words, dropping lines left empty."""
        removed = []
        while count > 0 and self.lines:
            tokens = self.lines[-1].split()
            cut = max(len(tokens) - count, 0)
            taken, kept = tokens[cut:], tokens[:cut]
            removed = taken + removed
            count -= len(taken)
            if kept:
                self.lines[-1] = ' '.join(kept)
            else:
                self.lines.pop()
        return removed

    def snapshot(self) -> tuple:
        """Comparable view of the entry's timing and text."""
        return (self.start, self.end, tuple(self.lines))


def join_lines(first: List[str], second: List[str]) -> List[str]:
    """
    Space-join two line lists at their seam.

    Args:
        first: Lines that come first in reading order
        second: Lines that follow

    Returns:
        New line list where second[0] continues first[-1]

    Example:
        >>> join_lines(["thank you"], ["so much", "really"])
        ['thank you so much', 'really']
    """
    first = [line for line in first if line.strip()]
    second = [line for line in second if line.strip()]
    if not first:
        return list(second)
    if not second:
        return list(first)
    return first[:-1] + [f"{first[-1]} {second[0]}"] + second[1:]


class SRTParser:
    """Parser and formatter for the SubRip (SRT) format."""

    @staticmethod
    def parse_text(content: str) -> List[SubtitleEntry]:
        """
        Parse SRT text into an ordered list of entries.

        Args:
            content: Raw SRT text

        Returns:
            List of SubtitleEntry objects in file order

        Raises:
            ParseError: If a block has a malformed index, a malformed time
                range, an inverted time range, or no text lines
        """
        content = content.lstrip('\ufeff').replace('\r\n', '\n').replace('\r', '\n')
        if not content.strip():
            return []

        # Split into subtitle blocks (separated by blank lines)
        blocks = BLOCK_SEPARATOR_RE.split(content.strip())
        entries = []

        for block_number, block in enumerate(blocks, start=1):
            lines = [line.strip() for line in block.strip().split('\n')]
            if not any(lines):
                continue

            index_line = lines[0]
            if not INDEX_RE.fullmatch(index_line) or int(index_line) < 1:
                raise ParseError(f"Invalid index line: {index_line!r}", block_number, block)

            if len(lines) < 2:
                raise ParseError("Missing time range line", block_number, block)

            try:
                start, end = TimeConverter.parse_srt_timestamp(lines[1])
            except ValueError as e:
                raise ParseError(str(e), block_number, block) from e

            if start > end:
                raise ParseError(f"Time range ends before it starts: {lines[1]}", block_number, block)

            text_lines = [line for line in lines[2:] if line]
            if not text_lines:
                raise ParseError("Block has no text lines", block_number, block)

            entries.append(SubtitleEntry(
                index=int(index_line),
                start=start,
                end=end,
                lines=text_lines
            ))

        logger.debug(f"Parsed {len(entries)} entries from SRT text")
        return entries

    @staticmethod
    def format_entries(entries: List[SubtitleEntry]) -> str:
        """
        Serialize entries as SRT text, renumbering from 1.

        Args:
            entries: Entries in output order

        Returns:
            SRT text with one blank line between blocks and a trailing newline
        """
        blocks = []
        for i, entry in enumerate(entries, start=1):
            block_lines = [str(i), TimeConverter.format_time_range(entry.start, entry.end)]
            block_lines.extend(entry.lines)
            blocks.append('\n'.join(block_lines) + '\n')
        return '\n'.join(blocks)
