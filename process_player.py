#!/usr/bin/env python3
"""
Essencia Player Metrics CLI

Builds the dashboard metrics (one primary and two secondary goals) for a
player from a platform status export and an optional cycle report.

Usage:
    python process_player.py --status exports/player_123.json
    python process_player.py --status exports/player_123.json --csv uploads/goals.csv
    python process_player.py --status exports/player_123.json --report reports/123.json --team CARTEIRA_II
    python process_player.py --status exports/player_123.json --output out/metrics_123.json
"""

import argparse
import logging
import sys
from pathlib import Path

from essencia import (
    ReportRecord,
    TeamType,
    get_factory,
    goal_data_to_report_record,
    parse_goal_csv,
    validate_player_metrics,
)
from essencia.logging_config import get_logger, setup_logging
from essencia.models import PlayerMetrics
from essencia.utils import load_player_status, load_report_record, read_upload, save_json


def load_report(args, team: str | None) -> ReportRecord | None:
    """Load the report record from --report or --csv, if either was given."""
    if args.report:
        return load_report_record(args.report)

    if args.csv:
        goal_data = parse_goal_csv(read_upload(args.csv))
        if goal_data is None:
            raise ValueError(f'Could not parse goal CSV: {args.csv}')
        return goal_data_to_report_record(goal_data, team=team)

    return None


def print_summary(metrics: PlayerMetrics) -> None:
    """Print the three goals with their zones."""
    team = metrics.team_type.value if metrics.team_type else '?'
    lock = 'locked' if metrics.points_locked else 'unlocked'

    print("\n" + "="*60)
    print(f"{metrics.player_name or 'Player'} ({team})")
    print("="*60)
    print(f"  Points: {metrics.total_points:.0f} ({lock})")
    print(f"  Cycle day {metrics.current_cycle_day}, {metrics.days_until_cycle_end} days left")

    for label, goal in zip(('Primary', 'Secondary 1', 'Secondary 2'), metrics.goals):
        bar = goal.details.get('progress_bar')
        zone = bar.color if bar else '-'
        boost = ' [boost]' if goal.boost_active else ''
        print(f"  {label:<12} {goal.name:<24} {goal.percentage:>7.2f}%  {zone}{boost}")

    for warning in metrics.warnings:
        print(f"  ⚠️  {warning}")


def main():
    parser = argparse.ArgumentParser(description="Essencia player metrics processor")
    parser.add_argument(
        "--status", "-s",
        required=True,
        help="Path to the player status JSON exported from the platform",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--report", "-r",
        default=None,
        help="Path to a stored report record JSON",
    )
    source.add_argument(
        "--csv", "-c",
        default=None,
        help="Path to a goal CSV upload (one header row, one data row)",
    )
    parser.add_argument(
        "--team", "-t",
        choices=[team.value for team in TeamType],
        default=None,
        help="Team to process as (default: resolve from the player data)",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Write the resulting metrics JSON to this path",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress detailed output",
    )

    args = parser.parse_args()

    setup_logging(level=logging.WARNING if args.quiet else logging.INFO, log_to_file=False)
    logger = get_logger('cli')

    status_path = Path(args.status)
    if not status_path.exists():
        print(f"❌ Status file not found: {status_path}")
        sys.exit(1)

    try:
        status = load_player_status(status_path)
        report = load_report(args, args.team)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ {e}")
        sys.exit(1)

    factory = get_factory()

    if args.team:
        try:
            metrics = factory.process_player_data(args.team, status, report)
        except ValueError as e:
            print(f"❌ {e}")
            sys.exit(1)
    else:
        result = factory.process_player_data_auto(status, report)
        if not result.ok:
            print(f"❌ {result.error}")
            sys.exit(1)
        metrics = result.metrics

    for problem in validate_player_metrics(metrics):
        logger.warning(problem)

    if not args.quiet:
        print_summary(metrics)

    if args.output:
        save_json(args.output, metrics.to_dict())
        print(f"Metrics written: {args.output}")


if __name__ == "__main__":
    main()
