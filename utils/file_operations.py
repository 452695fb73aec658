"""
File operations for transcript processing.

This module provides:
- Timestamped backups of files that are about to be overwritten
- Atomic writes (temporary file in the target directory, then rename)
- Discovery of SRT files, ignoring backup directories
- Output naming for processed files (talk.srt -> talk_processed.srt)
"""

import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional
from .constants import BACKUP_DIR_NAME, SUBTITLE_EXTENSIONS, DEFAULT_OUTPUT_SUFFIX
from .logging_config import get_logger

logger = get_logger(__name__)


class FileHandler:
    """Reads, writes and locates transcript files."""

    @staticmethod
    def create_backup(file_path: Path, backup_dir: Optional[Path] = None) -> Path:
        """
        Copy a file into the backup directory under a timestamped name.

        Args:
            file_path: File to back up
            backup_dir: Target directory (default: <file's directory>/subtitle_backups)

        Returns:
            Path of the backup copy

        Raises:
            IOError: If the file is missing or cannot be copied

        Example:
            >>> FileHandler.create_backup(Path("talk.srt"))
            PosixPath('subtitle_backups/talk_20240101_120000_000000.srt')
        """
        if not file_path.is_file():
            raise IOError(f"Cannot back up missing file: {file_path}")

        backup_dir = backup_dir or file_path.parent / BACKUP_DIR_NAME
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        backup_path = backup_dir / f"{file_path.stem}_{stamp}{file_path.suffix}"

        try:
            backup_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(file_path, backup_path)
        except OSError as e:
            logger.error(f"Backup of {file_path} failed: {e}")
            raise IOError(f"Backup creation failed for {file_path}: {e}")

        logger.debug(f"Backed up {file_path.name} to {backup_path}")
        return backup_path

    @staticmethod
    def safe_write(file_path: Path, content: str, encoding: str = 'utf-8',
                   create_backup: bool = False) -> None:
        """
        Write text atomically, optionally backing up the file it replaces.

        The content goes to a temporary file next to the target which is then
        renamed over it, so readers never see a half-written transcript.

        Args:
            file_path: Destination path
            content: Text to write (LF line endings are kept as-is)
            encoding: Output encoding
            create_backup: Back up an existing destination first

        Raises:
            IOError: If the write fails
        """
        if create_backup and file_path.exists():
            FileHandler.create_backup(file_path)

        temp_name = None
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile('w', encoding=encoding, newline='\n',
                                             dir=file_path.parent, suffix='.tmp',
                                             delete=False) as handle:
                temp_name = handle.name
                handle.write(content)
            if file_path.exists():
                shutil.copymode(file_path, temp_name)
            os.replace(temp_name, file_path)
        except OSError as e:
            if temp_name and os.path.exists(temp_name):
                os.remove(temp_name)
            logger.error(f"Failed to write {file_path}: {e}")
            raise IOError(f"Write operation failed for {file_path}: {e}")

        logger.debug(f"Wrote {len(content)} characters to {file_path}")

    @staticmethod
    def find_subtitle_files(directory: Path, recursive: bool = True,
                            exclude_dirs: Iterable[str] = (BACKUP_DIR_NAME,)) -> List[Path]:
        """
        List subtitle files under a directory.

        Args:
            directory: Directory to scan
            recursive: Include subdirectories
            exclude_dirs: Directory names whose contents are ignored

        Returns:
            Sorted subtitle file paths

        Example:
            >>> files = FileHandler.find_subtitle_files(Path("/media/transcripts"))
            >>> print(f"Found {len(files)} transcripts")
        """
        if not directory.is_dir():
            logger.warning(f"Not a directory: {directory}")
            return []

        excluded = set(exclude_dirs)
        candidates = directory.rglob('*') if recursive else directory.glob('*')
        found = sorted(
            path for path in candidates
            if path.is_file()
            and path.suffix.lower() in SUBTITLE_EXTENSIONS
            and not excluded.intersection(path.relative_to(directory).parts[:-1])
        )

        logger.debug(f"Found {len(found)} subtitle files in {directory}")
        return found

    @staticmethod
    def processed_output_path(file_path: Path, suffix: str = DEFAULT_OUTPUT_SUFFIX,
                              output_dir: Optional[Path] = None) -> Path:
        """
        Name the output for a processed file.

        Example:
            >>> FileHandler.processed_output_path(Path("talk.srt"))
            PosixPath('talk_processed.srt')
        """
        directory = output_dir if output_dir is not None else file_path.parent
        return directory / f"{file_path.stem}{suffix}{file_path.suffix or '.srt'}"

    @staticmethod
    def is_processed_output(file_path: Path, suffix: str = DEFAULT_OUTPUT_SUFFIX) -> bool:
        """True if the file name already carries the processed suffix."""
        return bool(suffix) and file_path.stem.endswith(suffix)
