#!/usr/bin/env python3
"""
SRT Handle - command-line entry point.

Cleans up machine-generated SRT transcripts with a configurable rule set:
filler captions are dropped, phrases broken across captions are rejoined,
orphaned words move to the caption they belong to, and caption length is
kept between a minimum and maximum word count.

Usage:
    python srt_handle.py process talk.srt
    python srt_handle.py process talk.srt -c rules.txt -o clean.srt
    python srt_handle.py batch /media/transcripts --recursive --parallel
    python srt_handle.py merge talk.zh.srt talk.en.srt
    python srt_handle.py check-config rules.txt
    python srt_handle.py <command> --help
"""

import platform
import sys
import traceback
from pathlib import Path
from typing import List, Optional

# Allow running from a source checkout without installing
sys.path.insert(0, str(Path(__file__).parent))

from utils.constants import APP_NAME, APP_VERSION
from ui.cli import CLIHandler


def print_system_info():
    """Print version information, shown before a --debug run."""
    print(f"{APP_NAME} v{APP_VERSION} on Python {platform.python_version()} "
          f"({platform.system()} {platform.release()})", file=sys.stderr)


def main(argv: Optional[List[str]] = None):
    """
    Parse the command line, run the requested command and exit with its status.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])
    """
    argv = sys.argv[1:] if argv is None else argv
    debug_mode = '--debug' in argv or '-d' in argv
    if debug_mode:
        print_system_info()

    handler = CLIHandler()
    args = handler.create_parser().parse_args(argv)

    try:
        exit_code = handler.handle_command(args)
    except Exception as e:
        # Anything not already reported by the command handlers
        print(f"Error: {e}", file=sys.stderr)
        if debug_mode:
            traceback.print_exc()
        exit_code = 1

    sys.exit(exit_code)


if __name__ == '__main__':
    main()
