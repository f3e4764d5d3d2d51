"""Data models for the Essencia metrics engine."""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from .constants import TeamType


@dataclass(frozen=True)
class ProgressBar:
    """Progress-bar rendering hints for a goal percentage."""
    percentage: float  # displayed value, never clamped
    color: str
    fill_percentage: float  # 0-100 visual fill


@dataclass
class GoalMetric:
    """One goal slot (primary or secondary) of a player's dashboard."""
    name: str
    percentage: float = 0.0
    boost_active: bool = False
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class PlayerMetrics:
    """Normalized, UI-ready metrics for one player."""
    player_name: str
    total_points: float
    points_locked: bool
    current_cycle_day: int
    days_until_cycle_end: int
    primary_goal: GoalMetric
    secondary_goal_1: GoalMetric
    secondary_goal_2: GoalMetric
    team_type: Optional[TeamType] = None
    warnings: list[str] = field(default_factory=list)  # operator-facing annotations

    @property
    def goals(self) -> list[GoalMetric]:
        return [self.primary_goal, self.secondary_goal_1, self.secondary_goal_2]

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data['team_type'] = self.team_type.value if self.team_type else None
        return data


@dataclass(frozen=True)
class TeamProfile:
    """
    Everything that distinguishes one team variant from another.

    The processor is generic; a profile tells it which metric sits in which
    slot, which catalog items back the boosts, and whether points come from
    the platform or are computed locally.
    """
    team_type: TeamType
    display_name: str
    primary_metric: str
    secondary_metric_1: str
    secondary_metric_2: str
    boost_item_1: str
    boost_item_2: str
    local_points: bool = False
    prefer_report: bool = False
    special_features: tuple[str, ...] = ()

    @property
    def metrics(self) -> tuple[str, str, str]:
        return (self.primary_metric, self.secondary_metric_1, self.secondary_metric_2)


@dataclass
class MetricValues:
    """Target/current/percentage triple for one report metric."""
    target: float = 0.0
    current: float = 0.0
    percentage: float = 0.0


@dataclass
class CSVGoalData:
    """Per-player cycle snapshot parsed from a report upload."""
    player_id: str
    cycle_day: int
    total_cycle_days: int
    faturamento: MetricValues
    reais_por_ativo: MetricValues
    multimarcas_por_ativo: MetricValues
    atividade: MetricValues
    conversoes: Optional[MetricValues] = None
    upa: Optional[MetricValues] = None


@dataclass
class ProcessingResult:
    """Uniform result of automatic team resolution plus processing."""
    team_type: Optional[TeamType]
    metrics: Optional[PlayerMetrics]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.metrics is not None


@dataclass(frozen=True)
class TeamOption:
    """One selectable team for a player who belongs to several."""
    team_type: str  # TeamType value or 'ADMIN'
    display_name: str
    team_id: str
