"""
Bilingual subtitle merging by timestamp pairing.

Two subtitle tracks are laid on one timeline; every interval between
consecutive start/end points that either track covers becomes one output
entry carrying the text of both tracks, stacked in the configured order.
"""

from pathlib import Path
from typing import Callable, List, Optional
from core.encoding_detection import EncodingDetector
from core.subtitle_formats import SubtitleEntry, SRTParser
from core.timing_utils import Timecode
from utils.file_operations import FileHandler
from utils.logging_config import get_logger

logger = get_logger(__name__)


class BilingualMerger:
    """Handles merging of two subtitle tracks into one bilingual track."""

    def __init__(self, top_language: str = 'first',
                 progress_callback: Optional[Callable[[str, int, int], None]] = None):
        """
        Initialize the bilingual merger.

        Args:
            top_language: Which track appears on top ('first', 'second')
            progress_callback: Optional callback function(step_name, current, total)
        """
        if top_language not in ('first', 'second'):
            raise ValueError(f"top_language must be 'first' or 'second', got {top_language!r}")
        self.top_language = top_language
        self.progress_callback = progress_callback

    def _report_progress(self, step_name: str, current: int = 0, total: int = 0):
        """Report progress to callback if available."""
        if self.progress_callback:
            self.progress_callback(step_name, current, total)

    def _combine_lines(self, lines1: List[str], lines2: List[str]) -> List[str]:
        """
        Stack two entries' lines according to the top_language setting.

        Args:
            lines1: Lines from the first track (may be empty)
            lines2: Lines from the second track (may be empty)

        Returns:
            Combined lines
        """
        if self.top_language == 'second':
            return lines2 + lines1
        return lines1 + lines2

    def merge_entries(self, first: List[SubtitleEntry],
                      second: List[SubtitleEntry]) -> List[SubtitleEntry]:
        """
        Merge two entry sequences on a shared timeline.

        Entries of one track that overlap each other are all shown while
        they overlap. A zero-length entry becomes a zero-length output entry
        at its own instant.

        Args:
            first: Entries of the first track
            second: Entries of the second track

        Returns:
            Merged entries, one per covered interval, in time order
        """
        entries = first + second
        timeline = sorted({entry.start for entry in entries} | {entry.end for entry in entries})
        segments = list(zip(timeline, timeline[1:]))
        segments.extend({(entry.start, entry.end) for entry in entries if entry.start == entry.end})
        segments.sort()
        merged = []

        for seg_start, seg_end in segments:
            lines1 = self._active_lines(first, seg_start, seg_end)
            lines2 = self._active_lines(second, seg_start, seg_end)
            if not lines1 and not lines2:
                continue

            lines = self._combine_lines(lines1, lines2)
            previous = merged[-1] if merged else None
            if previous and previous.end == seg_start and previous.lines == lines:
                previous.end = seg_end
                continue

            merged.append(SubtitleEntry(index=len(merged) + 1, start=seg_start,
                                        end=seg_end, lines=lines))

        logger.info(f"Merged {len(first)} + {len(second)} entries into {len(merged)} bilingual entries")
        return merged

    def merge_subtitle_files(self, first_path: Path, second_path: Path,
                             output_path: Optional[Path] = None) -> Path:
        """
        Merge two SRT files into one bilingual SRT file.

        Args:
            first_path: First subtitle file
            second_path: Second subtitle file
            output_path: Output path (default: <first stem>.bilingual.srt)

        Returns:
            Path of the written file

        Raises:
            IOError: If a file cannot be read or written
            ParseError: If either input is not valid SRT
        """
        self._report_progress("Parsing subtitle files", 0, 3)
        first_content, _ = EncodingDetector.read_file_with_encoding(first_path)
        second_content, _ = EncodingDetector.read_file_with_encoding(second_path)
        first = SRTParser.parse_text(first_content)
        second = SRTParser.parse_text(second_content)

        self._report_progress("Merging tracks", 1, 3)
        merged = self.merge_entries(first, second)

        if output_path is None:
            output_path = first_path.with_name(f"{first_path.stem}.bilingual.srt")

        self._report_progress("Writing output file", 2, 3)
        FileHandler.safe_write(output_path, SRTParser.format_entries(merged))
        logger.info(f"Created bilingual subtitle: {output_path}")
        return output_path

    @staticmethod
    def _active_lines(entries: List[SubtitleEntry], seg_start: Timecode,
                      seg_end: Timecode) -> List[str]:
        lines = []
        for entry in entries:
            if seg_start == seg_end:
                covers = entry.start <= seg_start < entry.end or entry.start == entry.end == seg_start
            else:
                covers = entry.start <= seg_start and seg_end <= entry.end
            if covers:
                lines.extend(entry.lines)
        return lines
