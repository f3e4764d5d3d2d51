"""Team processor factory: team resolution and dispatch."""

import logging
import re
from functools import lru_cache
from typing import Any, Optional, Union

from .config import get_config
from .constants import (
    ADMIN_DISPLAY_NAME,
    ADMIN_TEAM_ID,
    ADMIN_TEAM_TYPE,
    ALL_TEAM_TYPES,
    CHALLENGE_MAPPING,
    METRIC_DISPLAY_NAMES,
    TEAM_DISPLAY_NAMES,
    TEAM_ID_TO_TYPE,
    TEAM_IDS,
    TeamType,
)
from .mapping import validate_challenge_mapping
from .models import PlayerMetrics, ProcessingResult, TeamOption, TeamProfile
from .processor import ReportInput, StatusInput, TeamProcessor, coerce_report, coerce_status
from .teams import TEAM_PROFILES

logger = logging.getLogger('essencia.factory')

# Name heuristics, tried in order; trailing lookahead keeps "carteira_i" from matching "carteira_iv"
_BOUNDARY = r'(?![a-z0-9])'
TEAM_NAME_PATTERNS = [
    (TeamType.CARTEIRA_IV, re.compile(r'carteira[\s_-]?(?:iv|4)' + _BOUNDARY)),
    (TeamType.CARTEIRA_III, re.compile(r'carteira[\s_-]?(?:iii|3)' + _BOUNDARY)),
    (TeamType.CARTEIRA_II, re.compile(r'carteira[\s_-]?(?:ii|2)' + _BOUNDARY)),
    (TeamType.CARTEIRA_I, re.compile(r'carteira[\s_-]?(?:i|1)' + _BOUNDARY)),
    (TeamType.CARTEIRA_0, re.compile(r'carteira[\s_-]?0' + _BOUNDARY)),
]
PLAYER_ID_PATTERNS = TEAM_NAME_PATTERNS + [
    (TeamType.CARTEIRA_0, re.compile(r'(?<![a-z0-9])c0' + _BOUNDARY)),
    (TeamType.CARTEIRA_I, re.compile(r'(?<![a-z0-9])c1' + _BOUNDARY)),
    (TeamType.CARTEIRA_II, re.compile(r'(?<![a-z0-9])c2' + _BOUNDARY)),
    (TeamType.CARTEIRA_III, re.compile(r'(?<![a-z0-9])c3' + _BOUNDARY)),
    (TeamType.CARTEIRA_IV, re.compile(r'(?<![a-z0-9])c4' + _BOUNDARY)),
    (TeamType.ER, re.compile(r'(?<![a-z0-9])(?:er|external)' + _BOUNDARY)),
]


class UnsupportedTeamTypeError(ValueError):
    """Raised when a team type outside the known variants is requested."""


class ConfigurationError(ValueError):
    """Raised when the team/mapping configuration is incomplete."""


def match_team_name(text: str, patterns=TEAM_NAME_PATTERNS) -> Optional[TeamType]:
    """Match a free-form team name or identifier against the naming conventions."""
    lowered = text.lower()
    for team_type, pattern in patterns:
        if pattern.search(lowered):
            return team_type
    return None


def parse_team_type(value: Union[TeamType, str]) -> TeamType:
    """
    Convert a TeamType or its string value into a TeamType.

    Raises:
        UnsupportedTeamTypeError: If the value is not a known team
    """
    if isinstance(value, TeamType):
        return value
    try:
        return TeamType(value)
    except ValueError:
        raise UnsupportedTeamTypeError(f'Unsupported team type: {value}') from None


class TeamProcessorFactory:
    """
    Routes player data to the right team processor.

    Builds one processor per team at construction time after checking that
    every profile has a complete challenge mapping.
    """

    def __init__(
        self,
        profiles: Optional[dict[TeamType, TeamProfile]] = None,
        mapping=CHALLENGE_MAPPING,
        default_cycle_days: Optional[int] = None,
        unlock_threshold: Optional[float] = None,
    ):
        """
        Initialize the factory.

        Args:
            profiles: Team profiles (defaults to the six built-in teams)
            mapping: Challenge mapping table
            default_cycle_days: Override for the configured cycle length
            unlock_threshold: Override for the configured local unlock threshold

        Raises:
            ConfigurationError: If a profile or its challenge mapping is incomplete
        """
        config = get_config()
        self.profiles = dict(TEAM_PROFILES if profiles is None else profiles)
        self.mapping = mapping

        errors, warnings = self.validate_configuration()
        for warning in warnings:
            logger.warning(warning)
        if errors:
            raise ConfigurationError('Invalid team configuration:\n' + '\n'.join(errors))

        self._processors = {
            team_type: TeamProcessor(
                profile,
                mapping=mapping,
                default_cycle_days=default_cycle_days or config.default_cycle_days,
                unlock_threshold=unlock_threshold or config.unlock_threshold,
            )
            for team_type, profile in self.profiles.items()
        }

    def get_processor(self, team_type: Union[TeamType, str]) -> TeamProcessor:
        """
        Get the processor for a team type.

        Raises:
            UnsupportedTeamTypeError: For anything outside the registry
        """
        resolved = parse_team_type(team_type)
        if resolved not in self._processors:
            raise UnsupportedTeamTypeError(f'Unsupported team type: {resolved.value}')
        return self._processors[resolved]

    def process_player_data(
        self, team_type: Union[TeamType, str], status: StatusInput, report: ReportInput = None
    ) -> PlayerMetrics:
        """Process player data with the processor for an explicit team type."""
        return self.get_processor(team_type).process_player_data(status, report)

    def determine_team_type(self, status: StatusInput) -> Optional[TeamType]:
        """
        Resolve a player's team from their status snapshot.

        Order: known team identifiers (first membership that matches), team
        names, then naming conventions in the player identifier.

        Returns:
            TeamType, or None when the team cannot be determined
        """
        status = coerce_status(status)

        for team_id in status.teams:
            team_type = TEAM_ID_TO_TYPE.get(team_id)
            if team_type is not None and team_type in self.profiles:
                return team_type

        for team_name in status.teams:
            team_type = match_team_name(team_name)
            if team_type is not None and team_type in self.profiles:
                return team_type

        if status.player_id:
            team_type = match_team_name(status.player_id, PLAYER_ID_PATTERNS)
            if team_type is not None and team_type in self.profiles:
                logger.info(
                    f'Team for player {status.player_id} guessed from identifier: {team_type.value}'
                )
                return team_type

        return None

    def process_player_data_auto(
        self, status: StatusInput, report: ReportInput = None
    ) -> ProcessingResult:
        """
        Resolve the team and process, capturing any failure into the result.

        The report record's declared team wins over status-based resolution.
        """
        try:
            status = coerce_status(status)
            report = coerce_report(report)

            team_type: Optional[Union[TeamType, str]] = report.team if report and report.team else None
            if team_type is None:
                team_type = self.determine_team_type(status)

            if team_type is None:
                return ProcessingResult(
                    team_type=None,
                    metrics=None,
                    error='Unable to determine team type from player data',
                )

            processor = self.get_processor(team_type)
            metrics = processor.process_player_data(status, report)
            return ProcessingResult(team_type=processor.team_type, metrics=metrics)
        except Exception as e:
            logger.error(f'Failed to process player data: {e}')
            return ProcessingResult(team_type=None, metrics=None, error=str(e))

    def get_available_teams_for_user(self, status: StatusInput) -> list[TeamOption]:
        """
        List every team a player can view, in membership order.

        Admin membership is reported as 'ADMIN'. The factory never picks
        among several memberships; a team-selection UI does.
        """
        status = coerce_status(status)
        options = []
        seen = set()

        for team_id in status.teams:
            if team_id in seen:
                continue
            seen.add(team_id)

            if team_id == ADMIN_TEAM_ID:
                options.append(TeamOption(ADMIN_TEAM_TYPE, ADMIN_DISPLAY_NAME, team_id))
                continue

            team_type = TEAM_ID_TO_TYPE.get(team_id)
            if team_type is not None and team_type in self.profiles:
                options.append(
                    TeamOption(team_type.value, self.profiles[team_type].display_name, team_id)
                )

        return options

    def has_multiple_team_assignments(self, status: StatusInput) -> bool:
        return len(self.get_available_teams_for_user(status)) > 1

    def get_available_team_types(self) -> list[TeamType]:
        return [team_type for team_type in ALL_TEAM_TYPES if team_type in self._processors]

    def get_team_info(self, team_type: Union[TeamType, str]) -> dict[str, Any]:
        """Describe a team's goals and special features."""
        profile = self.get_processor(team_type).profile
        return {
            'name': profile.display_name,
            'team_id': TEAM_IDS.get(profile.team_type),
            'primary_goal': METRIC_DISPLAY_NAMES[profile.primary_metric],
            'secondary_goals': [
                METRIC_DISPLAY_NAMES[profile.secondary_metric_1],
                METRIC_DISPLAY_NAMES[profile.secondary_metric_2],
            ],
            'special_features': list(profile.special_features),
        }

    def validate_configuration(self) -> tuple[list[str], list[str]]:
        """
        Startup validation of profiles and challenge mapping.

        Returns:
            Tuple of (errors, warnings)
            - errors: Missing mappings or boost items; processing must not start
            - warnings: Known teams without a profile
        """
        errors: list[str] = []
        warnings: list[str] = []

        for team_type, profile in self.profiles.items():
            if profile.team_type != team_type:
                errors.append(f'Profile registered under {team_type.value} is for {profile.team_type.value}')
            if not profile.boost_item_1 or not profile.boost_item_2:
                errors.append(f'{team_type.value} is missing a boost catalog item')
            if len(set(profile.metrics)) != 3:
                errors.append(f'{team_type.value} uses the same metric in more than one slot')
            for metric in profile.metrics:
                if metric not in METRIC_DISPLAY_NAMES:
                    errors.append(f'{team_type.value} uses unknown metric {metric}')

        required = {team_type: profile.metrics for team_type, profile in self.profiles.items()}
        errors.extend(validate_challenge_mapping(required, self.mapping))

        for team_type in ALL_TEAM_TYPES:
            if team_type not in self.profiles:
                warnings.append(f'No processor registered for {team_type.value}')

        return errors, warnings

    def get_processing_stats(self) -> dict[str, Any]:
        """Summarize the registry for diagnostics."""
        team_types = self.get_available_team_types()
        return {
            'available_processors': len(team_types),
            'supported_team_types': [t.value for t in team_types],
            'processor_info': [
                {
                    'team_type': t.value,
                    'display_name': TEAM_DISPLAY_NAMES[t],
                    'local_points': self._processors[t].profile.local_points,
                }
                for t in team_types
            ],
        }


@lru_cache(maxsize=1)
def get_factory() -> TeamProcessorFactory:
    """
    Shared factory built from the cached engine configuration.

    Example:
        from essencia.factory import get_factory
        result = get_factory().process_player_data_auto(status)
    """
    return TeamProcessorFactory()
