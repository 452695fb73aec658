"""
Subtitle processing modules.

This package contains the processors that operate on parsed subtitles:
- Rule operations (skip, combine, insert, end, split)
- Merge heuristics for short entries
- The normalization pipeline and stabilization loop
- Batch processing operations
- Bilingual subtitle merging
"""

from .rule_operations import RuleProcessor
from .merge_heuristics import LineMerger
from .normalizer import SubtitleNormalizer, ProcessingOutcome, StabilizationWarning
from .batch_processor import BatchProcessor
from .merger import BilingualMerger

__all__ = [
    'RuleProcessor',
    'LineMerger',
    'SubtitleNormalizer',
    'ProcessingOutcome',
    'StabilizationWarning',
    'BatchProcessor',
    'BilingualMerger',
]
