"""
Time representation and conversion utilities for subtitle processing.

This module provides:
- The Timecode value type used by subtitle entries
- Conversion between SRT time strings and integer milliseconds
- Proportional division of time ranges for caption splitting
"""

import re
from dataclasses import dataclass
from typing import Tuple
from utils.logging_config import get_logger

logger = get_logger(__name__)

TIME_PATTERN = r'(\d{1,2}):(\d{2}):(\d{2})[,\.](\d{3})'
TIMESTAMP_LINE_RE = re.compile(rf'{TIME_PATTERN}\s*-->\s*{TIME_PATTERN}')
TIME_RE = re.compile(TIME_PATTERN)


@dataclass(frozen=True, order=True)
class Timecode:
    """A point in time within a subtitle track (HH:MM:SS,mmm)."""
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    milliseconds: int = 0

    def __post_init__(self):
        if not 0 <= self.hours <= 99 or not 0 <= self.minutes < 60 \
                or not 0 <= self.seconds < 60 or not 0 <= self.milliseconds < 1000:
            raise ValueError(f"Timecode component out of range: {self.hours}:{self.minutes}:"
                             f"{self.seconds},{self.milliseconds}")

    @classmethod
    def from_milliseconds(cls, total_ms: int) -> 'Timecode':
        """Build a Timecode from a millisecond offset (negative values clamp to zero)."""
        if total_ms < 0:
            total_ms = 0
        hours, remainder = divmod(total_ms, 3600000)
        minutes, remainder = divmod(remainder, 60000)
        seconds, ms = divmod(remainder, 1000)
        return cls(hours, minutes, seconds, ms)

    @classmethod
    def parse(cls, time_str: str) -> 'Timecode':
        """
        Parse an SRT time string.

        Args:
            time_str: Time string such as "01:23:45,678" (a '.' separator is accepted)

        Returns:
            Timecode instance

        Raises:
            ValueError: If the string is not a valid SRT time
        """
        match = TIME_RE.fullmatch(time_str.strip())
        if not match:
            raise ValueError(f"Invalid time format: {time_str}")
        h, m, s, ms = (int(part) for part in match.groups())
        return cls(h, m, s, ms)

    def to_milliseconds(self) -> int:
        return ((self.hours * 60 + self.minutes) * 60 + self.seconds) * 1000 + self.milliseconds

    def __str__(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d},{self.milliseconds:03d}"


class TimeConverter:
    """Handles time format conversions and manipulations for subtitles."""

    @staticmethod
    def time_to_milliseconds(time_str: str) -> int:
        """
        Convert an SRT time string to milliseconds.

        Args:
            time_str: Time string to convert

        Returns:
            Time in milliseconds

        Raises:
            ValueError: If time string format is invalid

        Example:
            >>> TimeConverter.time_to_milliseconds("01:23:45,678")
            5025678
        """
        return Timecode.parse(time_str).to_milliseconds()

    @staticmethod
    def milliseconds_to_time(total_ms: int) -> str:
        """
        Convert milliseconds to an SRT time string.

        Example:
            >>> TimeConverter.milliseconds_to_time(3825678)
            '01:03:45,678'
        """
        return str(Timecode.from_milliseconds(total_ms))

    @staticmethod
    def parse_srt_timestamp(timestamp_line: str) -> Tuple[Timecode, Timecode]:
        """
        Parse SRT timestamp line to get start and end times.

        Args:
            timestamp_line: SRT timestamp line (e.g., "00:01:23,456 --> 00:01:26,789")

        Returns:
            Tuple of (start, end) Timecodes

        Raises:
            ValueError: If timestamp format is invalid

        Example:
            >>> start, end = TimeConverter.parse_srt_timestamp("00:01:23,456 --> 00:01:26,789")
            >>> print(f"Duration: {end.to_milliseconds() - start.to_milliseconds()} ms")
        """
        match = TIMESTAMP_LINE_RE.fullmatch(timestamp_line.strip())
        if not match:
            raise ValueError(f"Invalid SRT timestamp format: {timestamp_line}")

        parts = [int(part) for part in match.groups()]
        return Timecode(*parts[:4]), Timecode(*parts[4:])

    @staticmethod
    def format_time_range(start: Timecode, end: Timecode) -> str:
        """Format a time range as an SRT timestamp line."""
        return f"{start} --> {end}"

    @staticmethod
    def divide_range(start: Timecode, end: Timecode, numerator: int,
                     denominator: int) -> Timecode:
        """
        Find the boundary that gives the first part numerator/denominator of a range.

        The boundary is computed in whole milliseconds, so the two halves
        start..boundary and boundary..end always add up to the original range.

        Args:
            start: Range start
            end: Range end
            numerator: Share of the first part
            denominator: Total share

        Returns:
            Boundary Timecode between start and end

        Example:
            >>> TimeConverter.divide_range(Timecode(), Timecode(0, 0, 10, 0), 5, 10)
            Timecode(hours=0, minutes=0, seconds=5, milliseconds=0)
        """
        if denominator <= 0:
            raise ValueError("denominator must be positive")
        start_ms = start.to_milliseconds()
        duration = end.to_milliseconds() - start_ms
        return Timecode.from_milliseconds(start_ms + duration * numerator // denominator)
