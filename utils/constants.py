"""
Shared constants and configurations for the SRT normalization application.

This module contains all the constants used across different modules including:
- Supported file formats and extensions
- Encoding detection priorities
- Default rule-processing limits
- The embedded default rule set
- Logging and application metadata
"""

from typing import Set, List

# ============================================================================
# FILE FORMAT CONSTANTS
# ============================================================================

# Supported subtitle file extensions
SUBTITLE_EXTENSIONS: Set[str] = {'.srt'}

# ============================================================================
# ENCODING DETECTION CONSTANTS
# ============================================================================

# Subtitle file encoding detection order (most likely first)
ENCODING_PRIORITY: List[str] = [
    'utf-8-sig', 'utf-8', 'cp1252', 'latin-1'
]

# UTF-8 BOM marker
UTF8_BOM: bytes = b"\xef\xbb\xbf"

# ============================================================================
# RULE PROCESSING CONSTANTS
# ============================================================================

# Entries with more words than this are split
DEFAULT_MAX_LINE_WORDS: int = 8

# Entries with fewer words than this are folded into a neighbour
DEFAULT_MIN_LINE_WORDS: int = 2

# Flexible merge: candidate size and neighbour size limits
DEFAULT_FLEXIBLE_MAX_WORDS: int = 2
DEFAULT_FLEXIBLE_NEIGHBOR_LIMIT: int = 5

# Upper bound on split/merge iterations
DEFAULT_MAX_ITERATIONS: int = 50

# Policy choices
TIE_BREAK_CHOICES: List[str] = ['next', 'previous']
INSERT_TRIGGER_CHOICES: List[str] = ['followed_by_text', 'always']

# Keywords accepted in rule files
RULE_KEYWORDS: List[str] = ['SKIP', 'COMBINE', 'INSERT', 'END', 'SPLIT']

# Default rule file name looked up by the CLI
DEFAULT_CONFIG_NAME: str = "config.txt"

# Rule set used when no rule file is available
DEFAULT_RULES_TEXT: str = """\
# Default normalization rules
SKIP: "[music]", "[applause]", "[laughter]", "subscribe to"
COMBINE: "thank you", "you know", "kind of", "sort of", "as well", "a lot"
INSERT: "too", "either", "though", "anyway"
END: "and the", "of the", "in the", "to the", "the", "a", "an", "and", "but", "or", "so"
SPLIT: "and", "but", "because", "so", "which", "that", "when", "if"
"""

# ============================================================================
# OUTPUT CONSTANTS
# ============================================================================

# Suffix appended to processed file names (movie.srt -> movie_processed.srt)
DEFAULT_OUTPUT_SUFFIX: str = "_processed"

# Default backup directory name
BACKUP_DIR_NAME: str = "subtitle_backups"

# Default log format
DEFAULT_LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_LOG_DATE_FORMAT: str = '%Y-%m-%d %H:%M:%S'

# Root logger namespace for the application
LOGGER_NAME: str = "srt_handle"

# Application metadata
APP_NAME: str = "SRT Handle"
APP_VERSION: str = "1.0.0"
APP_DESCRIPTION: str = """
A rule-driven normalizer for machine-generated SRT transcripts:
- Removes filler captions and rejoins phrases split across captions
- Moves orphaned leading/trailing words to the caption they belong to
- Splits overly long captions and folds overly short ones into neighbours
- Batch processing and bilingual merging of subtitle files
"""
