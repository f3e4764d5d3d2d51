"""Challenge mapping lookup and validation."""

from collections.abc import Mapping

from .constants import CHALLENGE_MAPPING, TeamType


def get_challenge_ids(
    team_type: TeamType,
    metric: str,
    mapping: Mapping[TeamType, Mapping[str, list[str]]] = CHALLENGE_MAPPING,
) -> list[str]:
    """
    Look up the challenge identifiers accepted for a team's metric.

    Args:
        team_type: Team the metric belongs to
        metric: Metric key (e.g. 'faturamento')
        mapping: Mapping table (defaults to the built-in table)

    Returns:
        Ordered list of accepted challenge identifiers

    Raises:
        KeyError: If the team or metric is not configured
    """
    if team_type not in mapping:
        raise KeyError(f'No challenge mapping configured for team={team_type!r}')
    team_mapping = mapping[team_type]
    if metric not in team_mapping:
        raise KeyError(f'No challenge mapping configured for team={team_type!r}, metric={metric!r}')
    return list(team_mapping[metric])


def validate_challenge_mapping(
    required: Mapping[TeamType, tuple[str, ...]],
    mapping: Mapping[TeamType, Mapping[str, list[str]]] = CHALLENGE_MAPPING,
) -> list[str]:
    """
    Check that every (team, metric) pair in use has challenge identifiers.

    Args:
        required: Team -> metric keys the processors will look up
        mapping: Mapping table to check

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    for team_type, metrics in required.items():
        team_mapping = mapping.get(team_type)
        if team_mapping is None:
            errors.append(f'{team_type.value} has no challenge mapping')
            continue

        for metric in metrics:
            challenge_ids = team_mapping.get(metric)
            if not challenge_ids:
                errors.append(f'{team_type.value} has no challenge IDs for {metric}')
            elif any(not cid or not str(cid).strip() for cid in challenge_ids):
                errors.append(f'{team_type.value} has a blank challenge ID for {metric}')

    return errors
