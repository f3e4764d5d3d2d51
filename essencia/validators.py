"""Validation functions for parsed goal data and processed player metrics."""

from .constants import CSV_METRIC_PREFIXES, CSV_OPTIONAL_METRICS
from .models import CSVGoalData, PlayerMetrics


def validate_new_metrics(goal_data: CSVGoalData, tolerance: float = 1.0) -> list[str]:
    """
    Check the optional metrics (Conversões, UPA) against business rules.

    Checks:
    - Target and current are non-negative
    - Percentage is within [0, 100]
    - Percentage reconciles with current/target*100 within tolerance

    Violations never block parsing; older feeds still load.

    Args:
        goal_data: Parsed goal data
        tolerance: Allowed gap in percentage points for the reconciliation check

    Returns:
        List of validation warnings (empty if valid)
    """
    errors = []

    for metric in CSV_OPTIONAL_METRICS:
        values = getattr(goal_data, metric)
        if values is None:
            continue

        label = CSV_METRIC_PREFIXES[metric]

        if values.target < 0:
            errors.append(f'{label} Meta must be non-negative')

        if values.current < 0:
            errors.append(f'{label} Atual must be non-negative')

        if values.percentage < 0 or values.percentage > 100:
            errors.append(f'{label} % must be between 0 and 100')

        if values.target > 0:
            calculated = values.current / values.target * 100
            if abs(calculated - values.percentage) > tolerance:
                errors.append(
                    f'{label} percentage mismatch: expected ~{calculated:.1f}%, '
                    f'got {values.percentage:g}%'
                )

    return errors


def validate_cycle_days(goal_data: CSVGoalData) -> list[str]:
    """
    Check that the cycle day sits inside the cycle.

    Returns:
        List of validation warnings (empty if valid)
    """
    if goal_data.cycle_day < 0 or goal_data.cycle_day > goal_data.total_cycle_days:
        return [f'Invalid cycle day: {goal_data.cycle_day} (total: {goal_data.total_cycle_days})']
    return []


def validate_player_metrics(metrics: PlayerMetrics) -> list[str]:
    """
    Sanity-check a processed PlayerMetrics before it leaves the engine.

    Checks:
    - All three goal slots are named
    - Every percentage is finite and non-negative
    - Cycle counters are non-negative

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    slots = [
        ('primary_goal', metrics.primary_goal),
        ('secondary_goal_1', metrics.secondary_goal_1),
        ('secondary_goal_2', metrics.secondary_goal_2),
    ]
    for slot, goal in slots:
        if goal is None or not goal.name:
            errors.append(f'{metrics.player_name or "player"} is missing {slot}')
            continue
        pct = goal.percentage
        if pct != pct or pct in (float('inf'), float('-inf')):
            errors.append(f'{goal.name} percentage is not finite')
        elif pct < 0:
            errors.append(f'{goal.name} percentage is negative: {pct}')

    if metrics.current_cycle_day < 0:
        errors.append(f'Current cycle day is negative: {metrics.current_cycle_day}')
    if metrics.days_until_cycle_end < 0:
        errors.append(f'Days until cycle end is negative: {metrics.days_until_cycle_end}')

    return errors
