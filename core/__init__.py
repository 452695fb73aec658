"""
Core subtitle processing modules.

This package contains the fundamental components for transcript normalization:
- Subtitle entry model and SRT parser/formatter
- Timecode arithmetic
- Rule configuration and policy
- Encoding detection for input files
"""

from .timing_utils import Timecode, TimeConverter
from .subtitle_formats import SubtitleEntry, SRTParser, ParseError
from .rule_config import RuleConfiguration, RulePolicy, RuleConfigLoader, ConfigError
from .encoding_detection import EncodingDetector

__all__ = [
    'Timecode',
    'TimeConverter',
    'SubtitleEntry',
    'SRTParser',
    'ParseError',
    'RuleConfiguration',
    'RulePolicy',
    'RuleConfigLoader',
    'ConfigError',
    'EncodingDetector',
]
