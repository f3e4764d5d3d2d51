"""Pydantic schemas for external inputs (platform payloads, stored reports, config)."""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .extraction import to_number

logger = logging.getLogger('essencia.schemas')


def lenient_number(value: Any, field_name: str):
    """Coerce a payload number; unusable values become None with a warning."""
    if value is None or value == '':
        return None
    number = to_number(value)
    if number is None:
        logger.warning(f"Invalid numeric value for {field_name}: {value!r}, ignoring")
    return number


def lenient_text(value: Any) -> str:
    return '' if value is None else str(value)


def numeric_mapping(value: Any, field_name: str) -> dict[str, float]:
    """Keep only the numeric entries of a metric -> value mapping."""
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        logger.warning(f'Invalid {field_name} (expected a mapping): {value!r}, ignoring')
        return {}
    numbers = {}
    for key, raw in value.items():
        number = lenient_number(raw, f'{field_name}.{key}')
        if number is not None:
            numbers[str(key)] = number
    return numbers


class PlayerStatus(BaseModel):
    """Player status snapshot as returned by the gamification platform."""

    player_id: str = Field(default='', alias='_id')
    name: str = ''
    total_points: float | None = 0.0
    catalog_items: dict[str, float] | None = None
    challenge_progress: list[dict[str, Any]] = Field(default_factory=list)
    teams: list[str] = Field(default_factory=list)
    extra: dict[str, Any] = Field(default_factory=dict)

    @field_validator('player_id', 'name', mode='before')
    @classmethod
    def coerce_text(cls, v):
        return lenient_text(v)

    @field_validator('total_points', mode='before')
    @classmethod
    def coerce_points(cls, v):
        """Unparsable point totals count as missing (0 downstream)."""
        return lenient_number(v, 'total_points')

    @field_validator('challenge_progress', mode='before')
    @classmethod
    def drop_non_mapping_entries(cls, v):
        """Challenge progress may contain junk; keep only dict entries."""
        if v is None:
            return []
        if not isinstance(v, (list, tuple)):
            logger.warning(f'Invalid challenge_progress (expected a list): {type(v).__name__}, ignoring')
            return []
        return [entry for entry in v if isinstance(entry, dict)]

    @field_validator('catalog_items', mode='before')
    @classmethod
    def drop_non_numeric_items(cls, v):
        """Keep only catalog items whose owned count is numeric."""
        if v is None:
            return None
        if not isinstance(v, Mapping):
            logger.warning(f'Invalid catalog_items (expected a mapping): {type(v).__name__}, ignoring')
            return None
        items = {}
        for item_id, count in v.items():
            number = to_number(count)
            if number is not None:
                items[str(item_id)] = number
        return items

    @field_validator('teams', mode='before')
    @classmethod
    def normalize_teams(cls, v):
        """Accept a missing team list or a single team ID."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        if not isinstance(v, (list, tuple)):
            return []
        return [str(team) for team in v if team is not None]

    class Config:
        extra = 'allow'
        populate_by_name = True


class ReportRecord(BaseModel):
    """Per-player, per-cycle report record (from storage or a CSV upload)."""

    player_id: str = Field(default='', alias='playerId')
    player_name: str = Field(default='', alias='playerName')
    team: str | None = None
    atividade: float | None = None
    reais_por_ativo: float | None = Field(default=None, alias='reaisPorAtivo')
    faturamento: float | None = None
    multimarcas_por_ativo: float | None = Field(default=None, alias='multimarcasPorAtivo')
    conversoes: float | None = None
    upa: float | None = None
    current_cycle_day: int | None = Field(default=None, alias='currentCycleDay')
    total_cycle_days: int | None = Field(default=None, alias='totalCycleDays')
    report_date: str | None = Field(default=None, alias='reportDate')
    targets: dict[str, float] = Field(default_factory=dict)
    currents: dict[str, float] = Field(default_factory=dict)

    @field_validator('player_id', 'player_name', mode='before')
    @classmethod
    def coerce_text(cls, v):
        return lenient_text(v)

    @field_validator('team', 'report_date', mode='before')
    @classmethod
    def coerce_optional_text(cls, v):
        if v is None or v == '':
            return None
        return str(v)

    @field_validator(
        'atividade', 'reais_por_ativo', 'faturamento', 'multimarcas_por_ativo', 'conversoes', 'upa',
        mode='before',
    )
    @classmethod
    def coerce_percentage(cls, v, info):
        """Unusable percentages are dropped so the next source applies."""
        return lenient_number(v, info.field_name)

    @field_validator('current_cycle_day', 'total_cycle_days', mode='before')
    @classmethod
    def coerce_cycle_day(cls, v, info):
        """Cycle days truncate to whole days; unusable values count as missing."""
        number = lenient_number(v, info.field_name)
        return None if number is None else int(number)

    @field_validator('targets', 'currents', mode='before')
    @classmethod
    def coerce_metric_values(cls, v, info):
        return numeric_mapping(v, info.field_name)

    def metric_percentage(self, metric: str) -> float | None:
        """Return the stored percentage for a metric key, or None when absent."""
        return getattr(self, metric, None)

    class Config:
        extra = 'ignore'
        populate_by_name = True


class EngineConfig(BaseModel):
    """Engine configuration settings."""

    default_cycle_days: int = Field(default=21, ge=1, le=366)
    unlock_threshold: float = Field(default=100.0, gt=0)
    csv_download_timeout: float = Field(default=10.0, gt=0, le=10.0)
    csv_max_bytes: int = Field(default=1024 * 1024, gt=0, le=1024 * 1024)
    percentage_tolerance: float = Field(default=1.0, ge=0)

    class Config:
        extra = 'forbid'
