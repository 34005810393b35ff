#!/usr/bin/env python3
"""
simfinder - Headless content similarity and duplicate detection.

Compares every pair of text items under several similarity algorithms,
keeps the pairs whose best score clears a threshold and groups them into
connected duplicate groups.

Usage:
    simfinder find input.json [options]
    simfinder find input.json --threshold 0.9 --algorithms cosine,jaccard
    simfinder find input.json --format json > results.json
    simfinder find input.json --storage-dir ./storage

License: GPL v3
"""

import argparse
import json
import sys
from typing import List, Optional

from loguru import logger

from . import __version__
from .core.errors import SimFinderError
from .core.logging import setup_logging
from .core.output import OutputFormatter
from .core.progress import NullProgress, ProgressReporter
from .core.storage import RunStorage, load_run_input
from .similarity.finder import RunResult, SimilarityFinder


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog='simfinder',
        description='Headless content similarity and duplicate detection',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Find similar pairs with the settings in the input file:
    simfinder find items.json

  Override the threshold and use only two algorithms:
    simfinder find items.json --threshold 0.9 --algorithms levenshtein,fuzzy

  Persist matches, groups and statistics:
    simfinder find items.json --storage-dir ./storage

  Output as CSV for spreadsheet import:
    simfinder find items.json --format csv > matches.csv

Input file:
  {"content": [{"id": "1", "text": "..."}, ...],
   "similarityThreshold": 0.8,
   "algorithms": {"cosine": true, "levenshtein": true, "fuzzy": true, "jaccard": true},
   "caseSensitive": false, "ignoreWhitespace": true,
   "minLength": 0, "groupByDuplicate": true}

Algorithms:
  cosine       - TF-IDF cosine over the pair's own two-document corpus
  levenshtein  - 1 - edit distance / longest length
  fuzzy        - Token-sort ratio (word order ignored)
  jaccard      - Shared words / all words
"""
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Find command
    find_parser = subparsers.add_parser(
        'find', aliases=['similar', 'dups'],
        help='Find similar and duplicate items'
    )
    find_parser.add_argument(
        'input_path',
        help='Path to the run input JSON file'
    )
    find_parser.add_argument(
        '--threshold', '-t',
        type=float,
        help='Minimum similarity for a pair to match, 0-1 (overrides input)'
    )
    find_parser.add_argument(
        '--algorithms', '-a',
        help='Comma separated algorithms to enable (overrides input)'
    )
    find_parser.add_argument(
        '--case-sensitive',
        action='store_true',
        default=None,
        help='Compare texts case sensitively (overrides input)'
    )
    find_parser.add_argument(
        '--keep-whitespace',
        action='store_true',
        help='Do not collapse and trim whitespace (overrides input)'
    )
    find_parser.add_argument(
        '--min-length', '-m',
        type=int,
        help='Skip items whose text is shorter than this (overrides input)'
    )
    find_parser.add_argument(
        '--no-group',
        action='store_true',
        help='Do not group matches into duplicate groups (overrides input)'
    )
    find_parser.add_argument(
        '--format', '-f',
        choices=['text', 'json', 'csv'],
        default='text',
        help='Output format (default: text)'
    )
    find_parser.add_argument(
        '--summary', '-S',
        action='store_true',
        help='Only show summary statistics, not individual matches'
    )
    find_parser.add_argument(
        '--storage-dir',
        type=str,
        help='Folder to persist dataset.jsonl, duplicate_groups.json and similarity_stats.json'
    )
    find_parser.add_argument(
        '--output', '-o',
        type=str,
        help='Output file path (default: stdout)'
    )
    find_parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress progress output and informational logs'
    )
    find_parser.add_argument(
        '--debug', '-d',
        action='store_true',
        help='Enable debug output'
    )

    # Info command
    info_parser = subparsers.add_parser(
        'info',
        help='Show input file information'
    )
    info_parser.add_argument(
        'input_path',
        help='Path to the run input JSON file'
    )
    info_parser.add_argument(
        '--format', '-f',
        choices=['text', 'json'],
        default='text',
        help='Output format (default: text)'
    )

    return parser


def persist_results(result: RunResult, storage_dir: str) -> None:
    """Write matches, the group summary and statistics to storage_dir."""
    with RunStorage(storage_dir) as storage:
        for match in result.matches:
            storage.push_data(match.to_record())
        if result.groups_record is not None:
            storage.set_value('duplicate_groups', result.groups_record)
        storage.set_value('similarity_stats', result.stats)
    logger.info("Results stored in {}", storage_dir)


def cmd_find(args) -> int:
    """Execute the find command."""
    if args.debug:
        setup_logging("DEBUG")
    elif args.quiet:
        setup_logging("WARNING")
    else:
        setup_logging("INFO")

    try:
        config, items = load_run_input(args.input_path)
        config = config.with_overrides(
            similarity_threshold=args.threshold,
            algorithms=args.algorithms,
            case_sensitive=args.case_sensitive,
            ignore_whitespace=False if args.keep_whitespace else None,
            min_length=args.min_length,
            group_by_duplicate=False if args.no_group else None,
        )

        progress = NullProgress() if args.quiet else ProgressReporter()
        with progress:
            finder = SimilarityFinder(config, progress_callback=progress.report)
            result = finder.run(items)

        if args.storage_dir:
            persist_results(result, args.storage_dir)

        # Get output file
        if args.output:
            output_file = open(args.output, 'w', encoding='utf-8')
        else:
            output_file = sys.stdout

        try:
            groups = None
            if result.groups is not None:
                groups = [g.to_record() for g in result.groups]
            formatter = OutputFormatter(args.format, output_file)
            if args.summary:
                formatter.write(formatter.output_summary(result.stats, groups))
            else:
                matches = [m.to_record() for m in result.matches]
                formatter.write(formatter.output_results(matches, groups, result.stats))
        finally:
            if args.output:
                output_file.close()

        return 0

    except SimFinderError as e:
        logger.error("Run failed: {}", e)
        print(f"Error: {e}", file=sys.stderr)
        if args.debug:
            import traceback
            traceback.print_exc()
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_info(args) -> int:
    """Execute the info command."""
    setup_logging("WARNING")

    try:
        config, items = load_run_input(args.input_path)
        config.validate()
    except SimFinderError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    eligible = sum(1 for item in items if len(item.text) >= config.min_length)
    info = {
        'input_path': args.input_path,
        'item_count': len(items),
        'eligible_items': eligible,
        'pair_count': eligible * (eligible - 1) // 2,
        'config': config.to_dict(),
    }

    if args.format == 'json':
        json.dump(info, sys.stdout, indent=2)
        print()
    else:
        enabled = ', '.join(a.value for a in config.enabled_algorithms) or 'none'
        print("Similarity Input Info", file=sys.stdout)
        print("=" * 40, file=sys.stdout)
        print(f"Path:           {info['input_path']}", file=sys.stdout)
        print(f"Items:          {info['item_count']}", file=sys.stdout)
        print(f"Eligible items: {info['eligible_items']}", file=sys.stdout)
        print(f"Pairs to score: {info['pair_count']}", file=sys.stdout)
        print(f"Threshold:      {config.similarity_threshold}", file=sys.stdout)
        print(f"Algorithms:     {enabled}", file=sys.stdout)

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command in ('find', 'similar', 'dups'):
        return cmd_find(args)
    elif args.command == 'info':
        return cmd_info(args)
    else:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
