"""
Rule operations over a sequence of subtitle entries.

This module implements the five configurable rewriting passes:
- Skip: drop captions containing filler phrases
- Combine: rejoin a phrase split across two captions
- Insert: pull a stray leading word back into the previous caption
- End: push a dangling trailing word/phrase forward into the next caption
- Split: break a caption that has too many words

Every pass is a single left-to-right scan that edits the list it is given
in place and reports how much it changed.
"""

from typing import List, Optional, Tuple
from core.rule_config import RuleConfiguration, RulePolicy
from core.subtitle_formats import SubtitleEntry, normalize_word
from core.timing_utils import TimeConverter
from utils.logging_config import get_logger

logger = get_logger(__name__)


class RuleProcessor:
    """Applies the configured rule operations to entry sequences."""

    def __init__(self, config: RuleConfiguration, policy: Optional[RulePolicy] = None):
        """
        Initialize the rule processor.

        Args:
            config: Word and phrase lists for each rule
            policy: Limits and trigger choices (defaults to RulePolicy())
        """
        self.config = config
        self.policy = policy or RulePolicy()
        # Longest phrases first so "it was" wins over "was"
        self._end_phrases = sorted((phrase.split() for phrase in config.end_words),
                                   key=len, reverse=True)

    def apply_skip(self, entries: List[SubtitleEntry]) -> int:
        """
        Remove entries whose text contains a skip phrase (case-insensitive).

        Args:
            entries: Entry sequence, edited in place

        Returns:
            Number of entries removed
        """
        if not self.config.skip_words:
            return 0

        kept = []
        for entry in entries:
            text = ' '.join(entry.text.lower().split())
            phrase = next((p for p in self.config.skip_words if p in text), None)
            if phrase is None:
                kept.append(entry)
            else:
                logger.debug(f"Skip: dropped entry {entry.index} ({phrase!r}): {entry.text}")

        removed = len(entries) - len(kept)
        entries[:] = kept
        return removed

    def apply_combine(self, entries: List[SubtitleEntry]) -> int:
        """
        Merge neighbours where a configured (suffix, prefix) pair spans the boundary.

        Each entry absorbs at most one successor per pass.

        Args:
            entries: Entry sequence, edited in place

        Returns:
            Number of entries merged away
        """
        if not self.config.combine_pairs:
            return 0

        merged = 0
        i = 0
        while i < len(entries) - 1:
            current, following = entries[i], entries[i + 1]
            pair = self._matching_combine_pair(current, following)
            if pair:
                logger.debug(f"Combine {pair}: entry {current.index} + entry {following.index}")
                current.absorb(following)
                del entries[i + 1]
                merged += 1
            i += 1
        return merged

    def apply_insert(self, entries: List[SubtitleEntry]) -> Tuple[int, int]:
        """
        Move a configured leading word of the next entry onto the current one.

        Args:
            entries: Entry sequence, edited in place

        Returns:
            Tuple of (words moved, entries removed because they became empty)
        """
        if not self.config.insert_words:
            return 0, 0

        moved = emptied = 0
        i = 0
        while i < len(entries) - 1:
            current, following = entries[i], entries[i + 1]
            words = following.words()
            if normalize_word(words[0]) in self.config.insert_words and self._insert_triggered(words):
                current.append_words(following.pop_leading_words(1))
                moved += 1
                logger.debug(f"Insert: moved {words[0]!r} from entry {following.index} "
                             f"to entry {current.index}")
                if following.is_empty():
                    current.end = max(current.end, following.end)
                    del entries[i + 1]
                    emptied += 1
            i += 1
        return moved, emptied

    def apply_end(self, entries: List[SubtitleEntry]) -> Tuple[int, int]:
        """
        Move a configured trailing word or phrase to the front of the next entry.

        Args:
            entries: Entry sequence, edited in place

        Returns:
            Tuple of (phrases moved, entries removed because they became empty)
        """
        if not self._end_phrases:
            return 0, 0

        moved = emptied = 0
        i = 0
        while i < len(entries) - 1:
            current, following = entries[i], entries[i + 1]
            length = self._matching_end_length(current.words())
            if length:
                phrase = current.pop_trailing_words(length)
                following.prepend_words(phrase)
                moved += 1
                logger.debug(f"End: moved {' '.join(phrase)!r} from entry {current.index} "
                             f"to entry {following.index}")
                if current.is_empty():
                    following.start = min(current.start, following.start)
                    del entries[i]
                    emptied += 1
                    continue
            i += 1
        return moved, emptied

    def apply_split(self, entries: List[SubtitleEntry]) -> int:
        """
        Split every entry with more than max_line_words words into two.

        Time is divided in proportion to the word counts of the two parts.

        Args:
            entries: Entry sequence, edited in place

        Returns:
            Number of entries split
        """
        result = []
        splits = 0
        for entry in entries:
            words = entry.words()
            if len(words) <= self.policy.max_line_words:
                result.append(entry)
                continue

            point = self.choose_split_point(words)
            boundary = TimeConverter.divide_range(entry.start, entry.end, point, len(words))
            result.append(SubtitleEntry(entry.index, entry.start, boundary, [' '.join(words[:point])]))
            result.append(SubtitleEntry(entry.index, boundary, entry.end, [' '.join(words[point:])]))
            splits += 1
            logger.debug(f"Split: entry {entry.index} ({len(words)} words) at word {point}")

        entries[:] = result
        return splits

    def choose_split_point(self, words: List[str]) -> int:
        """
        Pick the word index where the second part starts.

        The configured split word nearest the midpoint wins (earliest on a
        tie). Split words that would leave either part shorter than
        min_line_words are not candidates; without a candidate the midpoint
        is used.

        Args:
            words: Words of the entry being split (at least two)

        Returns:
            Index in 1..len(words)-1

        Example:
            >>> RuleProcessor(RuleConfiguration()).choose_split_point(list("abcdefghij"))
            5
        """
        midpoint = len(words) // 2
        shortest = self.policy.min_line_words
        candidates = [i for i in range(shortest, len(words) - shortest + 1)
                      if normalize_word(words[i]) in self.config.split_words]
        if not candidates:
            return midpoint
        return min(candidates, key=lambda i: (abs(i - midpoint), i))

    def _matching_combine_pair(self, current: SubtitleEntry,
                               following: SubtitleEntry) -> Optional[Tuple[str, str]]:
        last_word = normalize_word(current.words()[-1])
        first_word = normalize_word(following.words()[0])
        for suffix, prefix in self.config.combine_pairs:
            if last_word == suffix and first_word == prefix:
                return suffix, prefix
        return None

    def _insert_triggered(self, words: List[str]) -> bool:
        if self.policy.insert_trigger == 'always':
            return True
        return len(words) > 1

    def _matching_end_length(self, words: List[str]) -> int:
        lowered = [word.lower() for word in words]
        for parts in self._end_phrases:
            if len(parts) <= len(lowered) and lowered[-len(parts):] == parts:
                return len(parts)
        return 0
