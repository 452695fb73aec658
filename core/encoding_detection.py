"""
Encoding detection for transcript files.

Transcripts from speech-to-text tools are nearly always UTF-8, but older
caption editors still write cp1252 or latin-1. A file is read once as bytes
and decoded with the first of these that works:

1. utf-8-sig when the file starts with a UTF-8 BOM
2. plain UTF-8
3. charset-normalizer's best guess
4. the first encoding in ENCODING_PRIORITY that decodes every byte
5. UTF-8 with replacement characters
"""

from pathlib import Path
from typing import Optional, Tuple
from charset_normalizer import from_bytes
from utils.constants import ENCODING_PRIORITY, UTF8_BOM
from utils.logging_config import get_logger

logger = get_logger(__name__)


class EncodingDetector:
    """Detects the text encoding of subtitle files and decodes them."""

    @staticmethod
    def detect_bytes_encoding(raw_data: bytes, label: str = "<bytes>") -> Optional[str]:
        """
        Detect the encoding of raw transcript bytes.

        Args:
            raw_data: File content
            label: Name used in log messages

        Returns:
            Encoding name, or None if nothing decodes the data cleanly
        """
        if raw_data.startswith(UTF8_BOM) and EncodingDetector._decodes(raw_data, 'utf-8-sig'):
            return 'utf-8-sig'
        if EncodingDetector._decodes(raw_data, 'utf-8'):
            return 'utf-8'

        guess = EncodingDetector._guess_encoding(raw_data)
        if guess and EncodingDetector._decodes(raw_data, guess):
            logger.debug(f"charset-normalizer detected {guess} for {label}")
            return guess

        for encoding in ENCODING_PRIORITY:
            if EncodingDetector._decodes(raw_data, encoding):
                logger.debug(f"Fallback encoding for {label}: {encoding}")
                return encoding

        logger.warning(f"Could not detect encoding for {label}")
        return None

    @staticmethod
    def read_file_with_encoding(file_path: Path) -> Tuple[str, str]:
        """
        Read a subtitle file as text.

        Args:
            file_path: File to read

        Returns:
            Tuple of (content, encoding used); a BOM is never part of the content

        Raises:
            IOError: If the file cannot be read

        Example:
            >>> content, encoding = EncodingDetector.read_file_with_encoding(Path("talk.srt"))
        """
        try:
            raw_data = file_path.read_bytes()
        except OSError as e:
            raise IOError(f"Cannot read file {file_path}: {e}")

        encoding = EncodingDetector.detect_bytes_encoding(raw_data, file_path.name)
        if encoding is None:
            logger.warning(f"Reading {file_path} as UTF-8 with replacement characters")
            return raw_data.decode('utf-8', errors='replace'), 'utf-8'

        return raw_data.decode(encoding), encoding

    @staticmethod
    def _guess_encoding(raw_data: bytes) -> Optional[str]:
        best = from_bytes(raw_data).best()
        return best.encoding.lower() if best else None

    @staticmethod
    def _decodes(raw_data: bytes, encoding: str) -> bool:
        try:
            raw_data.decode(encoding)
            return True
        except (UnicodeDecodeError, LookupError):
            return False
