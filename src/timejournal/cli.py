"""Command line entry point.

    timejournal parse "standup at 9am" --now 10:00
    timejournal place day.yaml --today 2024-01-15
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .core.config_manager import AppConfig, ConfigManager
from .core.error_handler import ErrorHandler, RecordError, TimeJournalError
from .core.logging_manager import LoggingManager
from .models.records import ImportedEvent, LoggedEntry
from .processors.core.temporal_extractor import TemporalExtractor
from .timeline.placement_engine import PlacementEngine, PlacementOptions


def load_day_file(path: Path) -> Dict[str, Any]:
    """Read a day document from JSON or YAML.

    Times in YAML documents must be quoted; unquoted ``10:30`` is read as a
    base-60 integer by YAML 1.1 loaders.

    Raises:
        TimeJournalError: If the file is missing, unreadable or not a mapping
    """
    if not path.exists():
        raise TimeJournalError(f"Day file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            if path.suffix.lower() == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise TimeJournalError(f"Cannot parse day file {path}: {e}") from e

    if not isinstance(data, dict):
        raise TimeJournalError(f"Day file {path} must contain a mapping")
    return data


def _convert_records(records: Sequence[Dict[str, Any]], model, error_handler: ErrorHandler) -> List:
    converted = []
    for record in records or []:
        try:
            converted.append(model.from_record(record))
        except RecordError as e:
            # Malformed records are left off the timeline
            error_handler.handle_error(e, context=f"Skipping {model.__name__} record")
    return converted


def run_parse(args, config: AppConfig) -> Dict[str, Any]:
    extractor = TemporalExtractor.from_config(config.parser)
    return extractor.parse(args.text, current_time=args.now).to_dict()


def run_place(args, config: AppConfig, error_handler: ErrorHandler) -> Dict[str, Any]:
    day = load_day_file(Path(args.day_file))
    if not day.get('date'):
        raise TimeJournalError(f"Day file {args.day_file} has no date")

    entries = _convert_records(day.get('entries'), LoggedEntry, error_handler)
    events = _convert_records(day.get('events'), ImportedEvent, error_handler)

    try:
        options = PlacementOptions.for_day(
            day['date'],
            today=args.today,
            now=args.now,
            dismissed_event_ids=frozenset(day.get('dismissed_event_ids') or ()),
            show_dismissed=args.show_dismissed,
            visible_start_hour=config.timeline.visible_start_hour,
            visible_end_hour=config.timeline.visible_end_hour,
            min_gap_minutes=config.timeline.min_gap_minutes,
            gap_scan_floor_hour=config.timeline.gap_scan_floor_hour,
            coverage_threshold=config.timeline.coverage_threshold,
        )
    except ValueError as e:
        raise TimeJournalError(str(e)) from e

    layout = PlacementEngine().place(entries, events, options)
    result = layout.to_dict()
    result['date'] = str(day['date'])
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="timejournal", description="TimeJournal time extraction and timeline placement")
    parser.add_argument("--config", help="Configuration directory")
    parser.add_argument("--log-level", help="Console log level (DEBUG, INFO, WARNING, ERROR)")

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Parse activity text
    parse_parser = subparsers.add_parser('parse', help='Extract time expressions from activity text')
    parse_parser.add_argument('text', help='Activity description')
    parse_parser.add_argument('--now', help='Reference time HH:MM for duration-only text')

    # Lay out a day
    place_parser = subparsers.add_parser('place', help='Lay out a day of entries and events')
    place_parser.add_argument('day_file', help='JSON or YAML day document')
    place_parser.add_argument('--today', help='Reference date YYYY-MM-DD (defaults to the local date)')
    place_parser.add_argument('--now', help='Current time HH:MM when the day is today')
    place_parser.add_argument('--show-dismissed', action='store_true', help='Keep dismissed events visible')

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the timejournal command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    error_handler = ErrorHandler()

    try:
        config = ConfigManager(config_path=Path(args.config) if args.config else None).load_config()
    except TimeJournalError as e:
        error_handler.handle_error(e, context="Loading configuration")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging_manager = LoggingManager()
    logging_manager.setup(config.logging)
    if args.log_level:
        try:
            logging_manager.set_log_level(args.log_level)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    try:
        if args.command == 'parse':
            result = run_parse(args, config)
        else:
            result = run_place(args, config, error_handler)
    except TimeJournalError as e:
        error_handler.handle_error(e, context=f"Running {args.command}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
