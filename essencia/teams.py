"""Team profiles for the six supported variants."""

from .constants import (
    ATIVIDADE,
    BOOST_SECONDARY_1_ITEM,
    BOOST_SECONDARY_2_ITEM,
    CONVERSOES,
    FATURAMENTO,
    MULTIMARCAS_POR_ATIVO,
    REAIS_POR_ATIVO,
    TEAM_DISPLAY_NAMES,
    UPA,
    TeamType,
)
from .models import TeamProfile


def carteira_iii_iv_profile(team_type: TeamType) -> TeamProfile:
    """
    Build the shared Carteira III / IV profile for one of the two teams.

    Raises:
        ValueError: If team_type is neither Carteira III nor IV
    """
    if team_type not in (TeamType.CARTEIRA_III, TeamType.CARTEIRA_IV):
        raise ValueError(f'Invalid team type for Carteira III/IV profile: {team_type}')

    return TeamProfile(
        team_type=team_type,
        display_name=TEAM_DISPLAY_NAMES[team_type],
        primary_metric=FATURAMENTO,
        secondary_metric_1=REAIS_POR_ATIVO,
        secondary_metric_2=MULTIMARCAS_POR_ATIVO,
        boost_item_1=BOOST_SECONDARY_1_ITEM,
        boost_item_2=BOOST_SECONDARY_2_ITEM,
        special_features=('Challenge data priority', 'Direct platform integration'),
    )


TEAM_PROFILES: dict[TeamType, TeamProfile] = {
    TeamType.CARTEIRA_0: TeamProfile(
        team_type=TeamType.CARTEIRA_0,
        display_name=TEAM_DISPLAY_NAMES[TeamType.CARTEIRA_0],
        primary_metric=CONVERSOES,
        secondary_metric_1=REAIS_POR_ATIVO,
        secondary_metric_2=FATURAMENTO,
        boost_item_1=BOOST_SECONDARY_1_ITEM,
        boost_item_2=BOOST_SECONDARY_2_ITEM,
        special_features=('Direct platform integration', 'Conversion-based metrics'),
    ),
    TeamType.CARTEIRA_I: TeamProfile(
        team_type=TeamType.CARTEIRA_I,
        display_name=TEAM_DISPLAY_NAMES[TeamType.CARTEIRA_I],
        primary_metric=ATIVIDADE,
        secondary_metric_1=REAIS_POR_ATIVO,
        secondary_metric_2=FATURAMENTO,
        boost_item_1=BOOST_SECONDARY_1_ITEM,
        boost_item_2=BOOST_SECONDARY_2_ITEM,
        special_features=('Direct platform integration', 'Standard boost logic'),
    ),
    TeamType.CARTEIRA_II: TeamProfile(
        team_type=TeamType.CARTEIRA_II,
        display_name=TEAM_DISPLAY_NAMES[TeamType.CARTEIRA_II],
        primary_metric=REAIS_POR_ATIVO,
        secondary_metric_1=ATIVIDADE,
        secondary_metric_2=MULTIMARCAS_POR_ATIVO,
        boost_item_1=BOOST_SECONDARY_1_ITEM,
        boost_item_2=BOOST_SECONDARY_2_ITEM,
        local_points=True,
        prefer_report=True,
        special_features=(
            'Local points calculation',
            'Unlock threshold at 100%',
            'Boost multipliers: +100% each',
            'Report data priority',
        ),
    ),
    TeamType.CARTEIRA_III: carteira_iii_iv_profile(TeamType.CARTEIRA_III),
    TeamType.CARTEIRA_IV: carteira_iii_iv_profile(TeamType.CARTEIRA_IV),
    TeamType.ER: TeamProfile(
        team_type=TeamType.ER,
        display_name=TEAM_DISPLAY_NAMES[TeamType.ER],
        primary_metric=FATURAMENTO,
        secondary_metric_1=REAIS_POR_ATIVO,
        secondary_metric_2=UPA,
        boost_item_1=BOOST_SECONDARY_1_ITEM,
        boost_item_2=BOOST_SECONDARY_2_ITEM,
        special_features=('Challenge data priority', 'UPA metrics'),
    ),
}


def get_profile(team_type: TeamType) -> TeamProfile:
    """Fetch a team profile, raising KeyError if missing."""
    if team_type not in TEAM_PROFILES:
        raise KeyError(f'No team profile configured for {team_type!r}')
    return TEAM_PROFILES[team_type]
