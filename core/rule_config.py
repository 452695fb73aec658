"""
Rule configuration for transcript normalization.

This module provides:
- RuleConfiguration: the immutable word/phrase lists that drive each rule
- RulePolicy: the numeric limits and tie-break choices of the merge/split heuristics
- RuleConfigLoader: parsing of the ``KEYWORD: "item", ...`` rule file format

Rule files look like::

    # comment
    SKIP: "[music]", "subscribe"
    COMBINE: "thank you", ("you", "so")
    INSERT: "too"
    END: "it was", "the"
    SPLIT: "and", "but"
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Tuple
from utils.constants import (
    DEFAULT_RULES_TEXT, RULE_KEYWORDS, TIE_BREAK_CHOICES, INSERT_TRIGGER_CHOICES,
    DEFAULT_MAX_LINE_WORDS, DEFAULT_MIN_LINE_WORDS, DEFAULT_FLEXIBLE_MAX_WORDS,
    DEFAULT_FLEXIBLE_NEIGHBOR_LIMIT, DEFAULT_MAX_ITERATIONS
)
from utils.logging_config import get_logger
from core.subtitle_formats import normalize_word

logger = get_logger(__name__)

KEYWORD_LINE_RE = re.compile(r'([A-Za-z]+)\s*:(.*)')
ITEM_TOKEN_RE = re.compile(r'\s+|[,()]|"([^"]*)"')


class ConfigError(ValueError):
    """Raised when a rule file or policy value is malformed."""

    def __init__(self, message: str, line_number: int = 0, source: str = ""):
        self.line_number = line_number
        self.source = source
        if line_number:
            location = f"{source}:{line_number}" if source else f"line {line_number}"
            message = f"{location}: {message}"
        super().__init__(message)


def _phrase(text: str) -> str:
    return ' '.join(text.lower().split())


@dataclass(frozen=True)
class RuleConfiguration:
    """
    Word and phrase lists driving the rule operations.

    Items are normalized on construction (lower-cased, whitespace collapsed,
    and for single words surrounding punctuation stripped), so any iterable
    may be passed in.
    """
    skip_words: FrozenSet[str] = frozenset()
    combine_pairs: Tuple[Tuple[str, str], ...] = ()
    insert_words: FrozenSet[str] = frozenset()
    end_words: Tuple[str, ...] = ()
    split_words: FrozenSet[str] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, 'skip_words',
                           frozenset(_phrase(p) for p in self.skip_words if p.strip()))
        object.__setattr__(self, 'combine_pairs',
                           tuple((normalize_word(a), normalize_word(b)) for a, b in self.combine_pairs))
        object.__setattr__(self, 'insert_words',
                           frozenset(normalize_word(w) for w in self.insert_words if w.strip()))
        object.__setattr__(self, 'end_words',
                           tuple(_phrase(p) for p in self.end_words if p.strip()))
        object.__setattr__(self, 'split_words',
                           frozenset(normalize_word(w) for w in self.split_words if w.strip()))

    def is_empty(self) -> bool:
        return not (self.skip_words or self.combine_pairs or self.insert_words
                    or self.end_words or self.split_words)

    def to_text(self) -> str:
        """Render the configuration back into rule file syntax."""
        def quoted(items: Iterable[str]) -> str:
            return ', '.join(f'"{item}"' for item in items)

        pairs = ', '.join(f'("{a}", "{b}")' for a, b in self.combine_pairs)
        return '\n'.join([
            f"SKIP: {quoted(sorted(self.skip_words))}",
            f"COMBINE: {pairs}",
            f"INSERT: {quoted(sorted(self.insert_words))}",
            f"END: {quoted(self.end_words)}",
            f"SPLIT: {quoted(sorted(self.split_words))}",
        ]) + '\n'


@dataclass(frozen=True)
class RulePolicy:
    """Limits and tie-break choices for the merge and split heuristics."""
    max_line_words: int = DEFAULT_MAX_LINE_WORDS
    min_line_words: int = DEFAULT_MIN_LINE_WORDS
    flexible_max_words: int = DEFAULT_FLEXIBLE_MAX_WORDS
    flexible_neighbor_limit: int = DEFAULT_FLEXIBLE_NEIGHBOR_LIMIT
    flexible_tie_break: str = 'next'
    insert_trigger: str = 'followed_by_text'
    max_iterations: int = DEFAULT_MAX_ITERATIONS

    def __post_init__(self):
        if self.max_line_words < 2:
            raise ConfigError(f"max_line_words must be at least 2, got {self.max_line_words}")
        if not 1 <= self.min_line_words <= self.max_line_words:
            raise ConfigError(f"min_line_words must be between 1 and max_line_words, "
                              f"got {self.min_line_words}")
        if self.flexible_max_words < 0 or self.flexible_neighbor_limit < 1:
            raise ConfigError("flexible merge limits must be positive")
        if self.flexible_tie_break not in TIE_BREAK_CHOICES:
            raise ConfigError(f"flexible_tie_break must be one of {TIE_BREAK_CHOICES}, "
                              f"got {self.flexible_tie_break!r}")
        if self.insert_trigger not in INSERT_TRIGGER_CHOICES:
            raise ConfigError(f"insert_trigger must be one of {INSERT_TRIGGER_CHOICES}, "
                              f"got {self.insert_trigger!r}")
        if self.max_iterations < 1:
            raise ConfigError(f"max_iterations must be at least 1, got {self.max_iterations}")


class RuleConfigLoader:
    """Loads RuleConfiguration values from rule file text."""

    @staticmethod
    def load_text(content: str, source: str = "") -> RuleConfiguration:
        """
        Parse rule file text.

        Args:
            content: Rule file content
            source: Name used in error messages (usually the file path)

        Returns:
            RuleConfiguration built from the file

        Raises:
            ConfigError: On an unknown keyword, a line without a keyword,
                stray text outside quoted items, or an unpaired COMBINE word
        """
        sections: Dict[str, List[str]] = {}
        combine_pairs: List[Tuple[str, str]] = []

        for line_number, raw_line in enumerate(content.lstrip('\ufeff').splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith('#'):
                continue

            match = KEYWORD_LINE_RE.fullmatch(line)
            if not match:
                raise ConfigError(f"Expected 'KEYWORD: \"item\", ...', got {line!r}",
                                  line_number, source)

            keyword = match.group(1).upper()
            if keyword not in RULE_KEYWORDS:
                raise ConfigError(f"Unknown keyword {match.group(1)!r} "
                                  f"(expected one of {', '.join(RULE_KEYWORDS)})",
                                  line_number, source)

            items = RuleConfigLoader._parse_items(match.group(2), line_number, source)
            if keyword in sections:
                logger.warning(f"{keyword} defined more than once; line {line_number} replaces "
                               f"the earlier definition")
            sections[keyword] = items

            if keyword == 'COMBINE':
                combine_pairs = RuleConfigLoader._parse_combine_pairs(items, line_number, source)

        config = RuleConfiguration(
            skip_words=sections.get('SKIP', []),
            combine_pairs=combine_pairs,
            insert_words=sections.get('INSERT', []),
            end_words=sections.get('END', []),
            split_words=sections.get('SPLIT', []),
        )
        logger.debug(f"Loaded rules{' from ' + source if source else ''}: "
                     f"{len(config.skip_words)} skip, {len(config.combine_pairs)} combine, "
                     f"{len(config.insert_words)} insert, {len(config.end_words)} end, "
                     f"{len(config.split_words)} split")
        return config

    @staticmethod
    def load_file(file_path: Path) -> RuleConfiguration:
        """
        Load a rule file from disk.

        Raises:
            IOError: If the file cannot be read
            ConfigError: If the file content is malformed
        """
        try:
            content = Path(file_path).read_text(encoding='utf-8-sig')
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read rule file {file_path}: {e}")
            raise IOError(f"Cannot read rule file {file_path}: {e}")
        return RuleConfigLoader.load_text(content, source=str(file_path))

    @staticmethod
    def default() -> RuleConfiguration:
        """Load the embedded default rule set."""
        return RuleConfigLoader.load_text(DEFAULT_RULES_TEXT, source="<default rules>")

    @staticmethod
    def _parse_items(content: str, line_number: int, source: str) -> List[str]:
        """Extract the quoted items of one keyword line."""
        items = []
        pos = 0
        while pos < len(content):
            token = ITEM_TOKEN_RE.match(content, pos)
            if not token:
                remainder = content[pos:].strip()
                if remainder.startswith('"'):
                    raise ConfigError(f"Unterminated quoted item: {remainder!r}", line_number, source)
                raise ConfigError(f"Unexpected text outside quotes: {remainder!r}", line_number, source)
            if token.group(1) is not None:
                item = ' '.join(token.group(1).split())
                if not item:
                    raise ConfigError("Empty quoted item", line_number, source)
                items.append(item)
            pos = token.end()
        return items

    @staticmethod
    def _parse_combine_pairs(items: List[str], line_number: int,
                             source: str) -> List[Tuple[str, str]]:
        """
        Turn COMBINE items into (suffix_word, prefix_word) pairs.

        A multi-word item gives (first word, last word); single-word items
        pair up with the single-word item that follows them.
        """
        pairs = []
        pending = None
        for item in items:
            words = item.split()
            if len(words) > 1:
                if pending is not None:
                    raise ConfigError(f"COMBINE word {pending!r} has no partner", line_number, source)
                pairs.append((words[0], words[-1]))
            elif pending is None:
                pending = item
            else:
                pairs.append((pending, item))
                pending = None
        if pending is not None:
            raise ConfigError(f"COMBINE word {pending!r} has no partner", line_number, source)
        return pairs
