#!/usr/bin/env python3
"""
IGC flight log decoder

This script decodes IGC flight recorder logs, prints a summary of each flight
and optionally writes a normalized copy of every decoded file.

Usage:
    python igcdecode.py [-c config] [-t timezone] [-o outputFolder] [-v] file.igc [file2.igc ...]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from igc_config import Config
from igc_parser import IgcParseError, parseIgcFile
from igc_summary import flightSummary
from igc_writer import writeIgcFile
from igc_model import Flight

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger('igcdecode')


def decode_file(config: Config, in_path: str) -> Optional[Flight]:
    """Decode one IGC file, logging and returning None on failure"""
    try:
        with open(in_path, 'r', encoding=config.encoding, errors='ignore') as track_file:
            return parseIgcFile(track_file)
    except IgcParseError as e:
        decoded = len(e.flight.points) if e.flight else 0
        logger.error(f"{in_path}: {e.kind}: {e} ({decoded} fixes decoded before the error)")
    except OSError as e:
        logger.error(f"Cannot read {in_path}: {e}")
    return None


def process_file(config: Config, in_path: str) -> bool:
    """Decode, summarize and optionally re-encode a single file"""
    logger.info(f"Processing {in_path}...")
    flight = decode_file(config, in_path)
    if flight is None:
        return False

    print(flightSummary(flight, config.timezone))
    print()

    if config.outPath:
        out_path = Path(config.outPath) / Path(in_path).name
        if out_path.resolve() == Path(in_path).resolve():
            logger.error(f"Refusing to overwrite the input file {in_path}")
            return False
        try:
            with open(out_path, 'w', encoding=config.encoding) as igc_file:
                writeIgcFile(config, igc_file, flight)
        except OSError as e:
            logger.error(f"Cannot write {out_path}: {e}")
            return False
        logger.info(f"Successfully generated: {out_path}")
    return True


def process_files(config: Config, paths: List[str]) -> int:
    """Process every file, returning the number of failures"""
    failures = 0
    for in_path in paths:
        if not process_file(config, in_path):
            failures += 1
    logger.info("Processing complete.")
    return failures


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Decode IGC flight recorder logs and summarize them',
        epilog='Example: python igcdecode.py -o normalized vuelo.igc'
    )

    parser.add_argument('-c', '--config', default=None, help='Path to config file')
    parser.add_argument('-t', '--timezone', default=None, help='Offset for displayed times when the log has no timezone header. +/-hh:mm[:ss] or +/-<decimal hours>')
    parser.add_argument('-o', '--output', default=None, help='Folder to write normalized IGC copies to')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')
    parser.add_argument('trackfile', nargs='+', help='Path to one or more IGC files')
    args = parser.parse_args(argv)

    # Set log level based on verbose flag
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = Config(args)
    failures = process_files(config, args.trackfile)
    return 1 if failures else 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except FileNotFoundError as e:
        logger.critical(f"File not found: {e.filename}")
        sys.exit(3)
    except ValueError as e:
        logger.critical(f"Invalid input: {e}")
        sys.exit(2)
    except Exception as e:
        logger.critical(f"Unexpected error: {e}", exc_info=True)
        sys.exit(1)
