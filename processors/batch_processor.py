"""
Batch processing operations for subtitle files.

This module provides functionality for normalizing many subtitle files in
one run with progress tracking and error handling. Each file gets its own
independent pipeline run, so files can be processed in parallel.
"""

from pathlib import Path
from typing import List, Dict, Any, Optional, Tuple
from concurrent.futures import ThreadPoolExecutor, as_completed
from core.encoding_detection import EncodingDetector
from core.subtitle_formats import ParseError
from utils.constants import DEFAULT_OUTPUT_SUFFIX
from utils.file_operations import FileHandler
from utils.logging_config import get_logger
from .normalizer import SubtitleNormalizer, ProcessingOutcome

logger = get_logger(__name__)


class BatchProcessor:
    """Handles normalization of single files and whole directories."""

    def __init__(self, normalizer: SubtitleNormalizer, max_workers: int = 4,
                 suffix: str = DEFAULT_OUTPUT_SUFFIX):
        """
        Initialize the batch processor.

        Args:
            normalizer: Configured normalization pipeline
            max_workers: Maximum number of worker threads for parallel processing
            suffix: Suffix appended to output file stems
        """
        self.normalizer = normalizer
        self.max_workers = max_workers
        self.suffix = suffix

    def find_inputs(self, directory: Path, recursive: bool = False) -> List[Path]:
        """
        Find subtitle files to process, skipping earlier outputs and backups.

        Args:
            directory: Directory to scan
            recursive: Whether to include subdirectories

        Returns:
            Sorted list of input paths
        """
        inputs = []
        for path in FileHandler.find_subtitle_files(directory, recursive):
            if FileHandler.is_processed_output(path, self.suffix):
                logger.debug(f"Skipping already processed file: {path.name}")
                continue
            inputs.append(path)
        return inputs

    def process_file(self, input_path: Path, output_path: Optional[Path] = None,
                     in_place: bool = False, backup: bool = False) -> Tuple[Path, ProcessingOutcome]:
        """
        Normalize one subtitle file and write the result.

        Args:
            input_path: Subtitle file to read
            output_path: Explicit output path (default: <stem><suffix>.srt)
            in_place: Overwrite the input file instead of writing a new one
            backup: With in_place, keep a timestamped backup of the original

        Returns:
            Tuple of (written path, outcome)

        Raises:
            IOError: If the file cannot be read or written
            ParseError: If the file is not valid SRT (nothing is written)
        """
        content, encoding = EncodingDetector.read_file_with_encoding(input_path)
        logger.debug(f"Read {input_path.name} with encoding: {encoding}")

        normalized, outcome = self.normalizer.normalize_text(content)

        if in_place:
            target = input_path
        elif output_path is not None:
            target = output_path
        else:
            target = FileHandler.processed_output_path(input_path, self.suffix)

        FileHandler.safe_write(target, normalized, create_backup=in_place and backup)
        logger.info(f"Processed {input_path.name} -> {target.name}: {outcome.summary()}")
        return target, outcome

    def process_batch(self, input_paths: List[Path], parallel: bool = True,
                      output_dir: Optional[Path] = None, in_place: bool = False,
                      backup: bool = False) -> Dict[str, Any]:
        """
        Normalize multiple subtitle files.

        Args:
            input_paths: Files to process
            parallel: Whether to use a thread pool
            output_dir: Directory for outputs (default: next to each input)
            in_place: Overwrite inputs instead of writing suffixed copies
            backup: With in_place, keep backups of the originals

        Returns:
            Dictionary with processing results

        Example:
            >>> processor = BatchProcessor(SubtitleNormalizer(RuleConfigLoader.default()))
            >>> results = processor.process_batch([Path("a.srt"), Path("b.srt")])
        """
        logger.info(f"Starting batch normalization for {len(input_paths)} subtitle files")

        results = {
            'total': len(input_paths),
            'successful': 0,
            'failed': 0,
            'unstable': 0,
            'entries_removed': 0,
            'entries_merged': 0,
            'entries_split': 0,
            'errors': [],
            'processed_files': []
        }

        def run(path: Path) -> Tuple[Path, Optional[Path], Optional[ProcessingOutcome], Optional[str]]:
            target = None
            if output_dir is not None and not in_place:
                target = FileHandler.processed_output_path(path, self.suffix, output_dir)
            try:
                written, outcome = self.process_file(path, target, in_place=in_place, backup=backup)
                return path, written, outcome, None
            except ParseError as e:
                return path, None, None, f"Parse error: {e}"
            except IOError as e:
                return path, None, None, str(e)

        if parallel and len(input_paths) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [executor.submit(run, path) for path in input_paths]
                for future in as_completed(futures):
                    self._record(results, *future.result())
        else:
            for i, path in enumerate(input_paths, 1):
                logger.debug(f"Processing {i}/{len(input_paths)}: {path.name}")
                self._record(results, *run(path))

        results['processed_files'].sort()
        return results

    def _record(self, results: Dict[str, Any], path: Path, written: Optional[Path],
                outcome: Optional[ProcessingOutcome], error: Optional[str]) -> None:
        """Fold one file's result into the batch results."""
        if error:
            results['failed'] += 1
            error_msg = f"Error processing {path.name}: {error}"
            results['errors'].append(error_msg)
            logger.error(f"✗ {error_msg}")
            return

        results['successful'] += 1
        results['processed_files'].append(str(written))
        results['entries_removed'] += outcome.entries_removed
        results['entries_merged'] += outcome.entries_merged
        results['entries_split'] += outcome.entries_split
        if not outcome.stabilized:
            results['unstable'] += 1
            logger.warning(f"! {path.name} did not fully stabilize")
        logger.info(f"✓ Processed: {path.name}")

    def get_processing_summary(self, results: Dict[str, Any]) -> str:
        """
        Generate a human-readable summary of processing results.

        Args:
            results: Results dictionary from batch processing

        Returns:
            Formatted summary string
        """
        summary_lines = [
            "Batch Processing Summary:",
            f"  Total files: {results.get('total', 0)}",
            f"  Successful: {results.get('successful', 0)}",
        ]

        if results.get('failed', 0) > 0:
            summary_lines.append(f"  Failed: {results['failed']}")

        if results.get('unstable', 0) > 0:
            summary_lines.append(f"  Not stabilized: {results['unstable']}")

        summary_lines.append(
            f"  Entries removed/merged/split: {results.get('entries_removed', 0)}/"
            f"{results.get('entries_merged', 0)}/{results.get('entries_split', 0)}"
        )

        errors = results.get('errors', [])
        if errors:
            summary_lines.append("  Errors:")
            for error in errors[:10]:
                summary_lines.append(f"    - {error}")
            if len(errors) > 10:
                summary_lines.append(f"    ... and {len(errors) - 10} more errors")

        return "\n".join(summary_lines)
