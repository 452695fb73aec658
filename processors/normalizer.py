"""
Transcript normalization pipeline.

This module ties the rule operations and merge heuristics together:

    parse -> flexible merge -> skip -> combine -> insert -> end
          -> stabilization loop (split, final-check merge) -> format

The stabilization loop repeats split and final-check merge until a pass
changes nothing, bounded by RulePolicy.max_iterations. Hitting the bound is
reported as a StabilizationWarning on the outcome; the best-effort entries
are still returned.
"""

import copy
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from core.rule_config import RuleConfiguration, RulePolicy
from core.subtitle_formats import SubtitleEntry, SRTParser
from utils.logging_config import get_logger
from .rule_operations import RuleProcessor
from .merge_heuristics import LineMerger

logger = get_logger(__name__)


class StabilizationWarning(UserWarning):
    """Raised as a warning when split/merge does not settle within the iteration bound."""

    def __init__(self, iterations: int):
        self.iterations = iterations
        super().__init__(f"Entries did not stabilize after {iterations} split/merge iterations; "
                         f"returning best-effort result")


@dataclass
class ProcessingOutcome:
    """Counters describing what a normalization run did."""
    entries_in: int = 0
    entries_out: int = 0
    entries_removed: int = 0
    entries_merged: int = 0
    entries_split: int = 0
    iterations: int = 0
    stabilized: bool = True
    warnings: List[StabilizationWarning] = field(default_factory=list)

    def summary(self) -> str:
        """Human-readable one-line summary."""
        text = (f"{self.entries_in} -> {self.entries_out} entries "
                f"(removed {self.entries_removed}, merged {self.entries_merged}, "
                f"split {self.entries_split}, {self.iterations} iteration(s))")
        if not self.stabilized:
            text += " [not stabilized]"
        return text


class SubtitleNormalizer:
    """Runs the full rule pipeline over subtitle entries or SRT text."""

    def __init__(self, config: RuleConfiguration, policy: Optional[RulePolicy] = None):
        """
        Initialize the normalizer.

        Args:
            config: Rule word lists (passed explicitly, never read from a global)
            policy: Heuristic limits and tie-breaks (defaults to RulePolicy())
        """
        self.config = config
        self.policy = policy or RulePolicy()
        self.rules = RuleProcessor(config, self.policy)
        self.merger = LineMerger(self.policy)

    def normalize_text(self, content: str) -> Tuple[str, ProcessingOutcome]:
        """
        Normalize SRT text.

        Args:
            content: Raw SRT text

        Returns:
            Tuple of (normalized SRT text, outcome)

        Raises:
            ParseError: If the SRT text is malformed
        """
        entries = SRTParser.parse_text(content)
        normalized, outcome = self.normalize_entries(entries)
        return SRTParser.format_entries(normalized), outcome

    def normalize_entries(self, entries: List[SubtitleEntry]) -> Tuple[List[SubtitleEntry], ProcessingOutcome]:
        """
        Normalize a parsed entry sequence.

        The input list and its entries are left untouched; the pipeline
        works on a private copy.

        Args:
            entries: Parsed entries

        Returns:
            Tuple of (normalized entries, outcome)
        """
        working = copy.deepcopy(entries)
        outcome = ProcessingOutcome(entries_in=len(working))

        outcome.entries_merged += self.merger.flexible_merge(working)
        outcome.entries_removed += self.rules.apply_skip(working)
        outcome.entries_merged += self.rules.apply_combine(working)

        moved, emptied = self.rules.apply_insert(working)
        outcome.entries_merged += emptied
        logger.debug(f"Insert moved {moved} word(s)")

        moved, emptied = self.rules.apply_end(working)
        outcome.entries_merged += emptied
        logger.debug(f"End moved {moved} phrase(s)")

        self.stabilize(working, outcome)
        outcome.entries_out = len(working)

        logger.debug(f"Normalization finished: {outcome.summary()}")
        return working, outcome

    def stabilize(self, entries: List[SubtitleEntry],
                  outcome: Optional[ProcessingOutcome] = None) -> ProcessingOutcome:
        """
        Repeat split then final-check merge until nothing changes.

        Args:
            entries: Entry sequence, edited in place
            outcome: Outcome to update (a new one is created if omitted)

        Returns:
            The updated outcome
        """
        if outcome is None:
            outcome = ProcessingOutcome(entries_in=len(entries))

        for iteration in range(1, self.policy.max_iterations + 1):
            splits = self.rules.apply_split(entries)
            merges = self.merger.final_check_merge(entries)
            outcome.entries_split += splits
            outcome.entries_merged += merges
            outcome.iterations = iteration
            if not splits and not merges:
                outcome.stabilized = True
                return outcome

        outcome.stabilized = self.is_stable(entries)
        if not outcome.stabilized:
            warning = StabilizationWarning(self.policy.max_iterations)
            outcome.warnings.append(warning)
            logger.warning(str(warning))
        return outcome

    def is_stable(self, entries: List[SubtitleEntry]) -> bool:
        """True when no entry needs a split and no entry needs a final-check merge."""
        if any(entry.word_count > self.policy.max_line_words for entry in entries):
            return False
        if len(entries) > 1:
            return all(entry.word_count >= self.policy.min_line_words for entry in entries)
        return True
