"""Team processor: turns a player status snapshot into PlayerMetrics."""

import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

from .constants import (
    CARTEIRA_II_BOOST_WARNING,
    CHALLENGE_MAPPING,
    DEFAULT_CYCLE_DAYS,
    METRIC_DISPLAY_NAMES,
    REAIS_POR_ATIVO,
    UNLOCK_POINTS_ITEM,
    TeamType,
)
from .extraction import extract_challenge_percentage, sanitize_percentage, to_number
from .mapping import get_challenge_ids
from .models import GoalMetric, PlayerMetrics, TeamProfile
from .progress import compute_progress_bar
from .schemas import PlayerStatus, ReportRecord

logger = logging.getLogger('essencia.processor')

SOURCE_CHALLENGE = 'challenge'
SOURCE_REPORT = 'report'
SOURCE_DEFAULT = 'default'

StatusInput = Union[PlayerStatus, Mapping[str, Any]]
ReportInput = Union[ReportRecord, Mapping[str, Any], None]


def coerce_status(status: StatusInput) -> PlayerStatus:
    """Accept either a validated PlayerStatus or a raw platform payload."""
    if isinstance(status, PlayerStatus):
        return status
    return PlayerStatus.model_validate(status)


def coerce_report(report: ReportInput) -> Optional[ReportRecord]:
    """Accept a ReportRecord, a raw stored record, or nothing."""
    if report is None or isinstance(report, ReportRecord):
        return report
    return ReportRecord.model_validate(report)


class TeamProcessor:
    """
    Processor for one team, driven entirely by its TeamProfile.

    Holds no per-call state, so one instance per team can be shared by
    any number of concurrent callers.
    """

    def __init__(
        self,
        profile: TeamProfile,
        mapping: Mapping[TeamType, Mapping[str, list[str]]] = CHALLENGE_MAPPING,
        default_cycle_days: int = DEFAULT_CYCLE_DAYS,
        unlock_threshold: float = 100.0,
    ):
        """
        Initialize processor.

        Args:
            profile: Team profile (slot metrics, boost items, points mode)
            mapping: Challenge mapping table
            default_cycle_days: Cycle length used when no report says otherwise
            unlock_threshold: Percent at which local-points teams unlock
        """
        self.profile = profile
        self.mapping = mapping
        self.default_cycle_days = default_cycle_days
        self.unlock_threshold = unlock_threshold

    @property
    def team_type(self) -> TeamType:
        return self.profile.team_type

    def challenge_ids(self, metric: str) -> list[str]:
        return get_challenge_ids(self.team_type, metric, self.mapping)

    def process_player_data(self, status: StatusInput, report: ReportInput = None) -> PlayerMetrics:
        """
        Build PlayerMetrics for a player.

        Args:
            status: Player status snapshot from the platform
            report: Optional report record for the current cycle

        Returns:
            PlayerMetrics with all three goal slots populated
        """
        status = coerce_status(status)
        report = coerce_report(report)
        self.check_team_type(report)

        profile = self.profile
        catalog_items = status.catalog_items

        primary_pct, primary_source = self.resolve_percentage(profile.primary_metric, status, report)
        secondary1_pct, secondary1_source = self.resolve_percentage(
            profile.secondary_metric_1, status, report
        )
        secondary2_pct, secondary2_source = self.resolve_percentage(
            profile.secondary_metric_2, status, report
        )

        boost1_active = self.is_boost_active(catalog_items, profile.boost_item_1)
        boost2_active = self.is_boost_active(catalog_items, profile.boost_item_2)

        base_points = to_number(status.total_points) or 0.0
        warnings = []
        primary_extra: dict[str, Any] = {}

        if profile.local_points:
            achievement = self.unlock_achievement(primary_pct, report)
            total_points, points_locked = self.calculate_local_points(
                base_points, achievement, boost1_active, boost2_active
            )
            primary_extra = {'is_unlock_goal': True, 'unlock_threshold': self.unlock_threshold}
            warnings.append(CARTEIRA_II_BOOST_WARNING)
        else:
            total_points = base_points
            points_locked = self.calculate_points_locked(catalog_items)

        primary_goal = self.create_goal_metric(
            profile.primary_metric,
            primary_pct,
            boost_active=False,  # primary goal has no boost slot
            details={'is_main_goal': True, 'source': primary_source, **primary_extra},
        )
        secondary_goal_1 = self.create_goal_metric(
            profile.secondary_metric_1,
            secondary1_pct,
            boost_active=boost1_active,
            details={'boost_item_id': profile.boost_item_1, 'source': secondary1_source},
        )
        secondary_goal_2 = self.create_goal_metric(
            profile.secondary_metric_2,
            secondary2_pct,
            boost_active=boost2_active,
            details={'boost_item_id': profile.boost_item_2, 'source': secondary2_source},
        )

        return PlayerMetrics(
            player_name=status.name,
            total_points=total_points,
            points_locked=points_locked,
            current_cycle_day=self.get_current_cycle_day(report),
            days_until_cycle_end=self.get_days_until_cycle_end(report),
            primary_goal=primary_goal,
            secondary_goal_1=secondary_goal_1,
            secondary_goal_2=secondary_goal_2,
            team_type=self.team_type,
            warnings=warnings,
        )

    def resolve_percentage(
        self, metric: str, status: PlayerStatus, report: Optional[ReportRecord]
    ) -> tuple[float, str]:
        """
        Pick a metric's percentage from the highest-priority valid source.

        Challenge data outranks report data, except for report-first
        profiles. Invalid values (NaN, infinite, negative) fall through to
        the next tier; the last tier is 0.

        Returns:
            Tuple of (percentage, source) where source is 'challenge',
            'report' or 'default'
        """
        challenge_value = sanitize_percentage(
            extract_challenge_percentage(status.challenge_progress, self.challenge_ids(metric))
        )
        report_value = sanitize_percentage(report.metric_percentage(metric)) if report else None

        tiers = [(challenge_value, SOURCE_CHALLENGE), (report_value, SOURCE_REPORT)]
        if self.profile.prefer_report:
            tiers.reverse()

        for value, source in tiers:
            if value is not None:
                logger.debug(f'{self.team_type.value} {metric} from {source}: {value}')
                return value, source

        logger.debug(f'{self.team_type.value} no {metric} data found, using 0')
        return 0.0, SOURCE_DEFAULT

    @staticmethod
    def calculate_points_locked(catalog_items: Optional[Mapping[str, float]]) -> bool:
        """Points stay locked unless the unlock item is owned (missing items -> locked)."""
        if not catalog_items:
            return True
        count = to_number(catalog_items.get(UNLOCK_POINTS_ITEM))
        return count is None or count <= 0

    @staticmethod
    def is_boost_active(catalog_items: Optional[Mapping[str, float]], boost_item_id: str) -> bool:
        if not catalog_items:
            return False
        count = to_number(catalog_items.get(boost_item_id))
        return count is not None and count > 0

    def unlock_achievement(self, primary_percentage: float, report: Optional[ReportRecord]) -> float:
        """
        Achievement used by local-points teams to decide the unlock.

        Uses current/target of the unlock metric when the report carries
        both, otherwise the resolved primary percentage.
        """
        if report is not None:
            target = to_number(report.targets.get(REAIS_POR_ATIVO))
            current = to_number(report.currents.get(REAIS_POR_ATIVO))
            if target is not None and target > 0 and current is not None:
                return max(0.0, current / target * 100)
        return primary_percentage

    def calculate_local_points(
        self, base_points: float, achievement: float, boost1_active: bool, boost2_active: bool
    ) -> tuple[float, bool]:
        """
        Local points rule: unlock at the threshold, +100% per active boost.

        Returns:
            Tuple of (display_points, points_locked)
        """
        if achievement < self.unlock_threshold:
            return base_points, True

        multiplier = 1 + int(boost1_active) + int(boost2_active)
        return float(round(base_points * multiplier)), False

    def get_current_cycle_day(self, report: Optional[ReportRecord]) -> int:
        if report is not None and report.current_cycle_day:
            return max(0, report.current_cycle_day)
        return 0

    def get_days_until_cycle_end(self, report: Optional[ReportRecord]) -> int:
        total_days = self.default_cycle_days
        if report is not None and report.total_cycle_days:
            total_days = report.total_cycle_days
        return max(0, total_days - self.get_current_cycle_day(report))

    def create_goal_metric(
        self,
        metric: str,
        percentage: float,
        boost_active: bool = False,
        details: Optional[dict[str, Any]] = None,
    ) -> GoalMetric:
        """Build a GoalMetric with its progress bar and challenge IDs attached."""
        goal_details = {
            'metric': metric,
            'challenge_ids': self.challenge_ids(metric),
            'progress_bar': compute_progress_bar(percentage),
        }
        goal_details.update(details or {})
        return GoalMetric(
            name=METRIC_DISPLAY_NAMES[metric],
            percentage=percentage,
            boost_active=boost_active,
            details=goal_details,
        )

    def check_team_type(self, report: Optional[ReportRecord]) -> None:
        """Log (never raise) when a report belongs to a different team."""
        if report is not None and report.team and report.team != self.team_type.value:
            logger.warning(
                f'Team type mismatch: processor={self.team_type.value}, report={report.team} '
                f'(player {report.player_id or "?"}); using report values anyway'
            )
