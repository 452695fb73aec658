"""
Length-based merge heuristics for short captions.

Two heuristics fold a short entry into a neighbour:
- Flexible merge runs once, before the rule operations, and only touches
  very short entries surrounded by short neighbours.
- Final-check merge runs inside the stabilization loop and removes every
  entry below the minimum word count.
"""

from typing import List, Optional
from core.rule_config import RulePolicy
from core.subtitle_formats import SubtitleEntry
from utils.logging_config import get_logger

logger = get_logger(__name__)


class LineMerger:
    """Folds short subtitle entries into their neighbours."""

    def __init__(self, policy: Optional[RulePolicy] = None):
        self.policy = policy or RulePolicy()

    def flexible_merge(self, entries: List[SubtitleEntry]) -> int:
        """
        Merge very short entries that sit between two short neighbours.

        An entry with at most flexible_max_words words whose neighbours both
        have fewer than flexible_neighbor_limit words joins the neighbour with
        fewer words; equal neighbours follow the flexible_tie_break policy.
        Entries at either end of the sequence are never candidates.

        Args:
            entries: Entry sequence, edited in place

        Returns:
            Number of entries merged away
        """
        merged = 0
        i = 1
        while i < len(entries) - 1:
            previous, current, following = entries[i - 1], entries[i], entries[i + 1]
            prev_count, next_count = previous.word_count, following.word_count

            if (current.word_count > self.policy.flexible_max_words
                    or prev_count >= self.policy.flexible_neighbor_limit
                    or next_count >= self.policy.flexible_neighbor_limit):
                i += 1
                continue

            if self._prefer_previous(prev_count, next_count):
                logger.debug(f"Flexible merge: entry {current.index} into previous entry {previous.index}")
                previous.absorb(current)
                del entries[i]
            else:
                logger.debug(f"Flexible merge: entry {current.index} into next entry {following.index}")
                current.absorb(following)
                del entries[i + 1]
                i += 1
            merged += 1
        return merged

    def final_check_merge(self, entries: List[SubtitleEntry]) -> int:
        """
        Merge every entry with fewer than min_line_words words into a neighbour.

        The following entry is used, or the preceding one for the last entry.
        A single remaining entry is left as it is.

        Args:
            entries: Entry sequence, edited in place

        Returns:
            Number of entries merged away
        """
        merged = 0
        i = 0
        while i < len(entries) and len(entries) > 1:
            entry = entries[i]
            if entry.word_count >= self.policy.min_line_words:
                i += 1
                continue

            if i < len(entries) - 1:
                logger.debug(f"Final check: entry {entry.index} into following entry")
                entry.absorb(entries[i + 1])
                del entries[i + 1]
            else:
                logger.debug(f"Final check: last entry {entry.index} into preceding entry")
                entries[i - 1].absorb(entry)
                del entries[i]
            merged += 1
        return merged

    def _prefer_previous(self, prev_count: int, next_count: int) -> bool:
        if prev_count != next_count:
            return prev_count < next_count
        return self.policy.flexible_tie_break == 'previous'
