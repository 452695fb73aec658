"""
Command-line interface for SRT Handle.

This module provides CLI functionality for all subtitle operations
including single-file normalization, batch processing, bilingual merging
and rule file checking.
"""

import argparse
from pathlib import Path
from typing import Optional
from core.rule_config import ConfigError, RuleConfigLoader, RuleConfiguration, RulePolicy
from core.subtitle_formats import ParseError
from processors.batch_processor import BatchProcessor
from processors.merger import BilingualMerger
from processors.normalizer import SubtitleNormalizer
from utils.constants import (
    APP_NAME, APP_VERSION, APP_DESCRIPTION, DEFAULT_CONFIG_NAME, DEFAULT_OUTPUT_SUFFIX,
    DEFAULT_MAX_LINE_WORDS, DEFAULT_MIN_LINE_WORDS, DEFAULT_MAX_ITERATIONS,
    TIE_BREAK_CHOICES, INSERT_TRIGGER_CHOICES
)
from utils.logging_config import setup_logging, verbosity_level

logger = None  # Will be initialized in setup_cli_logging


def setup_cli_logging(verbose: bool = False, debug: bool = False, use_colors: bool = True,
                      log_file: Optional[Path] = None):
    """Set up logging for CLI operations."""
    global logger

    logger = setup_logging(level=verbosity_level(verbose, debug), log_file=log_file,
                           use_colors=use_colors)
    return logger


class CLIHandler:
    """Handles command-line interface operations."""

    def create_parser(self) -> argparse.ArgumentParser:
        """
        Create the main argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog='srt-handle',
            description=APP_DESCRIPTION,
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Normalize one transcript (writes talk_processed.srt)
  srt-handle process talk.srt

  # Use a custom rule file and a stricter line length
  srt-handle process talk.srt -c rules.txt --max-words 6 -o clean.srt

  # Normalize every transcript in a directory tree in parallel
  srt-handle batch /media/transcripts --recursive --parallel

  # Merge two tracks into one bilingual file
  srt-handle merge talk.zh.srt talk.en.srt -o talk.bilingual.srt

  # Show how a rule file is understood
  srt-handle check-config rules.txt
            """
        )

        parser.add_argument('--version', action='version', version=f'{APP_NAME} {APP_VERSION}')
        parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')
        parser.add_argument('-d', '--debug', action='store_true', help='Enable debug output')
        parser.add_argument('--no-colors', action='store_true', help='Disable colored output')
        parser.add_argument('--log-file', type=Path, help='Also write log messages to this file')

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        self._add_process_parser(subparsers)
        self._add_batch_parser(subparsers)
        self._add_merge_parser(subparsers)
        self._add_check_config_parser(subparsers)

        return parser

    def _add_rule_arguments(self, subparser):
        """Add the rule file and policy options shared by process and batch."""
        subparser.add_argument('-c', '--config', type=Path,
                               help=f'Rule file (default: {DEFAULT_CONFIG_NAME} if present, '
                                    f'otherwise the built-in rules)')
        subparser.add_argument('--max-words', type=int, default=DEFAULT_MAX_LINE_WORDS,
                               help=f'Split entries with more words than this (default: {DEFAULT_MAX_LINE_WORDS})')
        subparser.add_argument('--min-words', type=int, default=DEFAULT_MIN_LINE_WORDS,
                               help=f'Merge entries with fewer words than this (default: {DEFAULT_MIN_LINE_WORDS})')
        subparser.add_argument('--max-iterations', type=int, default=DEFAULT_MAX_ITERATIONS,
                               help=f'Split/merge iteration bound (default: {DEFAULT_MAX_ITERATIONS})')
        subparser.add_argument('--tie-break', choices=TIE_BREAK_CHOICES, default='next',
                               help='Flexible merge target when both neighbours are equally short (default: next)')
        subparser.add_argument('--insert-trigger', choices=INSERT_TRIGGER_CHOICES,
                               default='followed_by_text',
                               help='When INSERT words are moved (default: followed_by_text)')

    def _add_process_parser(self, subparsers):
        """Add process command parser."""
        process_parser = subparsers.add_parser(
            'process',
            help='Normalize a single SRT file',
            description='Apply the rule pipeline to one SRT transcript'
        )

        process_parser.add_argument('input', type=Path, help='Input SRT file path')
        process_parser.add_argument('-o', '--output', type=Path,
                                    help='Output SRT file path (default: <input>_processed.srt)')
        process_parser.add_argument('--in-place', action='store_true',
                                    help='Overwrite the input file')
        process_parser.add_argument('-b', '--backup', action='store_true',
                                    help='With --in-place, keep a backup of the original')
        self._add_rule_arguments(process_parser)

    def _add_batch_parser(self, subparsers):
        """Add batch command parser."""
        batch_parser = subparsers.add_parser(
            'batch',
            help='Normalize all SRT files in a directory',
            description='Apply the rule pipeline to every SRT file in a directory'
        )

        batch_parser.add_argument('directory', type=Path, help='Directory to process')
        batch_parser.add_argument('-r', '--recursive', action='store_true',
                                  help='Process subdirectories recursively')
        batch_parser.add_argument('--parallel', action='store_true',
                                  help='Use parallel processing')
        batch_parser.add_argument('--workers', type=int, default=4,
                                  help='Worker threads for --parallel (default: 4)')
        batch_parser.add_argument('--suffix', default=DEFAULT_OUTPUT_SUFFIX,
                                  help=f'Suffix for output file names (default: {DEFAULT_OUTPUT_SUFFIX})')
        batch_parser.add_argument('--output-dir', type=Path,
                                  help='Write outputs here instead of next to the inputs')
        batch_parser.add_argument('--in-place', action='store_true',
                                  help='Overwrite the input files')
        batch_parser.add_argument('-b', '--backup', action='store_true',
                                  help='With --in-place, keep backups of the originals')
        self._add_rule_arguments(batch_parser)

    def _add_merge_parser(self, subparsers):
        """Add merge command parser."""
        merge_parser = subparsers.add_parser(
            'merge',
            help='Merge two subtitle tracks into a bilingual file',
            description='Pair two SRT files by timestamp into one bilingual SRT file'
        )

        merge_parser.add_argument('first', type=Path, help='First subtitle file')
        merge_parser.add_argument('second', type=Path, help='Second subtitle file')
        merge_parser.add_argument('-o', '--output', type=Path, help='Output file path')
        merge_parser.add_argument('--top', choices=['first', 'second'], default='first',
                                  help='Which track is shown on top (default: first)')

    def _add_check_config_parser(self, subparsers):
        """Add check-config command parser."""
        check_parser = subparsers.add_parser(
            'check-config',
            help='Validate a rule file and print the parsed rules',
            description='Parse a rule file and print the rules it defines'
        )

        check_parser.add_argument('config', type=Path, nargs='?',
                                  help='Rule file (default: the built-in rules)')

    def handle_command(self, args) -> int:
        """
        Handle the parsed command-line arguments.

        Args:
            args: Parsed arguments from argparse

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        setup_cli_logging(args.verbose, args.debug, not args.no_colors, args.log_file)

        if not args.command:
            logger.error("No command specified. Use --help for usage information.")
            return 1

        try:
            if args.command == 'process':
                return self._handle_process(args)
            elif args.command == 'batch':
                return self._handle_batch(args)
            elif args.command == 'merge':
                return self._handle_merge(args)
            elif args.command == 'check-config':
                return self._handle_check_config(args)
            else:
                logger.error(f"Unknown command: {args.command}")
                return 1

        except ConfigError as e:
            logger.error(f"Invalid configuration: {e}")
            return 1
        except ParseError as e:
            logger.error(f"Invalid SRT input: {e}")
            return 1
        except IOError as e:
            logger.error(str(e))
            return 1
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 1

    def _load_rules(self, config_path: Optional[Path]) -> RuleConfiguration:
        """Load the rule file, falling back to the built-in rules when none is given."""
        if config_path is not None:
            if not config_path.exists():
                raise IOError(f"Rule file not found: {config_path}")
            logger.info(f"Using rule file: {config_path}")
            return RuleConfigLoader.load_file(config_path)

        default_path = Path(DEFAULT_CONFIG_NAME)
        if default_path.exists():
            logger.info(f"Using rule file: {default_path}")
            return RuleConfigLoader.load_file(default_path)

        logger.info("No rule file found, using built-in rules")
        return RuleConfigLoader.default()

    def _build_normalizer(self, args) -> SubtitleNormalizer:
        """Create the normalizer from the rule file and policy options."""
        policy = RulePolicy(
            max_line_words=args.max_words,
            min_line_words=args.min_words,
            max_iterations=args.max_iterations,
            flexible_tie_break=args.tie_break,
            insert_trigger=args.insert_trigger,
        )
        return SubtitleNormalizer(self._load_rules(args.config), policy)

    def _handle_process(self, args) -> int:
        """Handle process command."""
        if not args.input.exists():
            logger.error(f"Input file not found: {args.input}")
            return 1

        processor = BatchProcessor(self._build_normalizer(args))
        output_path, outcome = processor.process_file(
            args.input,
            output_path=args.output,
            in_place=args.in_place,
            backup=args.backup
        )

        print(f"Processed SRT file saved to: {output_path}")
        print(f"  {outcome.summary()}")
        for warning in outcome.warnings:
            print(f"  Warning: {warning}")
        return 0

    def _handle_batch(self, args) -> int:
        """Handle batch command."""
        if not args.directory.is_dir():
            logger.error(f"Directory not found: {args.directory}")
            return 1

        processor = BatchProcessor(self._build_normalizer(args),
                                   max_workers=args.workers, suffix=args.suffix)
        inputs = processor.find_inputs(args.directory, args.recursive)
        if not inputs:
            logger.warning(f"No SRT files to process in {args.directory}")
            return 0

        results = processor.process_batch(
            inputs,
            parallel=args.parallel,
            output_dir=args.output_dir,
            in_place=args.in_place,
            backup=args.backup
        )

        print(processor.get_processing_summary(results))
        return 0 if results['failed'] == 0 else 1

    def _handle_merge(self, args) -> int:
        """Handle merge command."""
        for path in (args.first, args.second):
            if not path.exists():
                logger.error(f"Input file not found: {path}")
                return 1

        merger = BilingualMerger(top_language=args.top)
        output_path = merger.merge_subtitle_files(args.first, args.second, args.output)
        print(f"Bilingual SRT file saved to: {output_path}")
        return 0

    def _handle_check_config(self, args) -> int:
        """Handle check-config command."""
        if args.config is None:
            config = RuleConfigLoader.default()
        else:
            if not args.config.exists():
                logger.error(f"Rule file not found: {args.config}")
                return 1
            config = RuleConfigLoader.load_file(args.config)

        print(config.to_text(), end='')
        return 0
