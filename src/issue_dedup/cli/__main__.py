"""CLI entry point: python -m issue_dedup.cli {detect,flag}"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

import structlog

from issue_dedup.config.settings import get_settings
from issue_dedup.db.session import get_session_factory
from issue_dedup.detection.config import DetectionConfig, load_detection_config
from issue_dedup.detection.deadline import Deadline
from issue_dedup.detection.detector import detect
from issue_dedup.detection.payload import result_to_payload
from issue_dedup.detection.records import DetectionResult
from issue_dedup.detection.service import find_duplicates
from issue_dedup.ingestion.json_loader import load_report_snapshot
from issue_dedup.logging_config import configure_logging
from issue_dedup.review.operations import toggle_important


def run_detect_file(
    input_path: Path, city_id: str | None, config: DetectionConfig
) -> DetectionResult:
    """Run detection over a JSON snapshot file."""
    log = structlog.get_logger()
    reports = load_report_snapshot(input_path, city_id=city_id)
    log.info("snapshot_loaded", path=str(input_path), reports=len(reports))

    deadline = None
    if config.timeout_seconds is not None:
        deadline = Deadline.after(config.timeout_seconds)
    return detect(reports, config, deadline)


async def run_detect_db(city_id: str, config: DetectionConfig) -> DetectionResult:
    """Run detection over the active reports of a city in the database."""
    session_factory = get_session_factory()
    async with session_factory() as session:
        return await find_duplicates(session, city_id, config)


async def run_flag(issue_id: str, operator: str) -> dict:
    """Toggle the important flag of an issue."""
    session_factory = get_session_factory()
    async with session_factory() as session:
        return await toggle_important(session, issue_id, operator=operator)


def write_output(payload: dict, output: Path | None) -> None:
    content = json.dumps(payload, ensure_ascii=False, indent=2)
    if output is None:
        sys.stdout.write(content + "\n")
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    structlog.get_logger().info("detection_output_written", path=str(output))


def build_config(args: argparse.Namespace, config_path: Path) -> DetectionConfig:
    """Load the YAML config and apply command-line overrides."""
    config = load_detection_config(config_path)
    overrides = {}
    if args.max_distance_m is not None:
        overrides["max_distance_m"] = args.max_distance_m
    if args.max_groups is not None:
        overrides["max_groups"] = args.max_groups
    if args.timeout is not None:
        overrides["timeout_seconds"] = args.timeout
    if overrides:
        config = DetectionConfig(**{**config.model_dump(), **overrides})
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="issue_dedup.cli",
        description="Civic Issue Duplicate Detection CLI",
    )
    subparsers = parser.add_subparsers(dest="command")

    detect_parser = subparsers.add_parser(
        "detect", help="Detect duplicate report groups and print them as JSON"
    )
    source = detect_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", type=str, help="JSON report snapshot file")
    source.add_argument(
        "--city", type=str, help="City ID whose active reports are read from the database"
    )
    detect_parser.add_argument(
        "--city-filter",
        type=str,
        default=None,
        help="Only use reports of this city from the --input snapshot (not valid with --city)",
    )
    detect_parser.add_argument(
        "--config", type=str, default=None, help="Detection YAML config path"
    )
    detect_parser.add_argument(
        "--max-distance-m", type=float, default=None, help="Distance threshold in metres"
    )
    detect_parser.add_argument(
        "--max-groups", type=int, default=None, help="Maximum number of groups returned"
    )
    detect_parser.add_argument(
        "--timeout", type=float, default=None, help="Scan deadline in seconds"
    )
    detect_parser.add_argument(
        "--output", type=str, default=None, help="Write JSON here instead of stdout"
    )

    flag_parser = subparsers.add_parser("flag", help="Toggle the important flag of an issue")
    flag_parser.add_argument("issue_id", type=str)
    flag_parser.add_argument("--operator", type=str, default="anonymous")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)
    if args.command == "detect" and args.city and args.city_filter:
        parser.error("--city-filter only applies to --input; --city already selects the city")

    settings = get_settings()
    configure_logging(json_output=settings.log_json, log_level=settings.log_level)
    log = structlog.get_logger()

    try:
        if args.command == "detect":
            config_path = Path(args.config) if args.config else settings.detection_config_path
            config = build_config(args, config_path)
            if args.input:
                result = run_detect_file(Path(args.input), args.city_filter, config)
            else:
                result = asyncio.run(run_detect_db(args.city, config))
            output = Path(args.output) if args.output else None
            write_output(result_to_payload(result), output)

        elif args.command == "flag":
            outcome = asyncio.run(run_flag(args.issue_id, args.operator))
            write_output(outcome, None)
    except (ValueError, LookupError) as e:
        log.error("command_failed", command=args.command, error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
