"""Constants and mappings for the Essencia metrics engine."""

from enum import Enum


class TeamType(str, Enum):
    """The six organizational variants ("carteiras")."""

    CARTEIRA_0 = 'CARTEIRA_0'
    CARTEIRA_I = 'CARTEIRA_I'
    CARTEIRA_II = 'CARTEIRA_II'
    CARTEIRA_III = 'CARTEIRA_III'
    CARTEIRA_IV = 'CARTEIRA_IV'
    ER = 'ER'


ALL_TEAM_TYPES = [
    TeamType.CARTEIRA_0,
    TeamType.CARTEIRA_I,
    TeamType.CARTEIRA_II,
    TeamType.CARTEIRA_III,
    TeamType.CARTEIRA_IV,
    TeamType.ER,
]

TEAM_DISPLAY_NAMES = {
    TeamType.CARTEIRA_0: 'Carteira 0',
    TeamType.CARTEIRA_I: 'Carteira I',
    TeamType.CARTEIRA_II: 'Carteira II',
    TeamType.CARTEIRA_III: 'Carteira III',
    TeamType.CARTEIRA_IV: 'Carteira IV',
    TeamType.ER: 'ER',
}

# Metric keys (same names the report records use)
ATIVIDADE = 'atividade'
REAIS_POR_ATIVO = 'reais_por_ativo'
FATURAMENTO = 'faturamento'
MULTIMARCAS_POR_ATIVO = 'multimarcas_por_ativo'
CONVERSOES = 'conversoes'
UPA = 'upa'

METRIC_KEYS = [ATIVIDADE, REAIS_POR_ATIVO, FATURAMENTO, MULTIMARCAS_POR_ATIVO, CONVERSOES, UPA]

METRIC_DISPLAY_NAMES = {
    ATIVIDADE: 'Atividade',
    REAIS_POR_ATIVO: 'Reais por Ativo',
    FATURAMENTO: 'Faturamento',
    MULTIMARCAS_POR_ATIVO: 'Multimarcas por Ativo',
    CONVERSOES: 'Conversões',
    UPA: 'UPA',
}

# Platform catalog items
UNLOCK_POINTS_ITEM = 'E6F0O5f'
BOOST_SECONDARY_1_ITEM = 'E6F0WGc'
BOOST_SECONDARY_2_ITEM = 'E6K79Mt'

# Platform team identifiers
TEAM_IDS = {
    TeamType.CARTEIRA_0: 'E6F5k30',
    TeamType.CARTEIRA_I: 'E6F4sCh',
    TeamType.CARTEIRA_II: 'E6F4O1b',
    TeamType.CARTEIRA_III: 'E6F4Xf2',
    TeamType.CARTEIRA_IV: 'E6F41Bb',
    TeamType.ER: 'E500AbT',
}
ADMIN_TEAM_ID = 'E6U1B1p'
ADMIN_TEAM_TYPE = 'ADMIN'
ADMIN_DISPLAY_NAME = 'Administrador'

# Reverse mapping
TEAM_ID_TO_TYPE = {v: k for k, v in TEAM_IDS.items()}

# Challenge identifiers shared between teams
_REAIS_POR_ATIVO_SHARED = [
    'E6Gm8RI',  # Subir Reais por Ativo (Carteira 0, I, III, IV, ER)
    'E6Gke5g',  # Descer Reais por Ativo
]
_FATURAMENTO_CARTEIRA_I = [
    'E6GglPq',  # Bater Faturamento (Meta)
    'E6LIVVX',  # Perder Faturamento (Meta)
]
_FATURAMENTO_CARTEIRA_III_IV = [
    'E6F8HMK',  # Bater Meta Faturamento
    'E6Gahd4',  # Subir Faturamento (Pré-Meta)
    'E6MLv3L',  # Subir Faturamento (Pós-Meta)
]
_MULTIMARCAS_CARTEIRA_III_IV = [
    'E6MMH5v',  # Subir Multimarcas por Ativo
    'E6MM3eK',  # Perder Multimarcas por Ativo
]

# mapping[team][metric] -> accepted challenge identifiers
CHALLENGE_MAPPING = {
    TeamType.CARTEIRA_0: {
        CONVERSOES: ['E82R5cQ'],
        REAIS_POR_ATIVO: list(_REAIS_POR_ATIVO_SHARED),
        FATURAMENTO: list(_FATURAMENTO_CARTEIRA_I),
    },
    TeamType.CARTEIRA_I: {
        ATIVIDADE: [
            'E6FO12f',  # Subir Atividade (Pré-Meta)
            'E6FQIjs',  # Bater Meta Atividade %
            'E6KQAoh',  # Subir Atividade (Pós-Meta)
        ],
        REAIS_POR_ATIVO: list(_REAIS_POR_ATIVO_SHARED),
        FATURAMENTO: list(_FATURAMENTO_CARTEIRA_I),
    },
    TeamType.CARTEIRA_II: {
        REAIS_POR_ATIVO: ['E6MTIIK'],
        ATIVIDADE: [
            'E6Gv58l',  # Subir Atividade
            'E6MZw2L',  # Perder Atividade
        ],
        MULTIMARCAS_POR_ATIVO: [
            'E6MWJKs',  # Subir Multimarcas por Ativo
            'E6MWYj3',  # Perder Multimarcas por Ativo
        ],
    },
    TeamType.CARTEIRA_III: {
        FATURAMENTO: list(_FATURAMENTO_CARTEIRA_III_IV),
        REAIS_POR_ATIVO: list(_REAIS_POR_ATIVO_SHARED),
        MULTIMARCAS_POR_ATIVO: list(_MULTIMARCAS_CARTEIRA_III_IV),
    },
    TeamType.CARTEIRA_IV: {
        FATURAMENTO: list(_FATURAMENTO_CARTEIRA_III_IV),
        REAIS_POR_ATIVO: list(_REAIS_POR_ATIVO_SHARED),
        MULTIMARCAS_POR_ATIVO: list(_MULTIMARCAS_CARTEIRA_III_IV),
    },
    TeamType.ER: {
        FATURAMENTO: list(_FATURAMENTO_CARTEIRA_III_IV),
        REAIS_POR_ATIVO: list(_REAIS_POR_ATIVO_SHARED),
        UPA: ['E62x2PW'],
    },
}

# Field names accepted on challenge-progress entries, in preference order
CHALLENGE_ID_FIELDS = ('challenge', 'challengeId', 'id')
CHALLENGE_PERCENTAGE_FIELDS = ('percentage', 'percent_completed', 'progress')

# Progress bar zones
ZONE_RED = 'red'
ZONE_YELLOW = 'yellow'
ZONE_GREEN = 'green'

DEFAULT_CYCLE_DAYS = 21

CARTEIRA_II_BOOST_WARNING = (
    'Carteira II points and boosts are calculated locally and are not '
    'synchronized with the platform'
)

# CSV report columns
CSV_PLAYER_ID = 'Player ID'
CSV_CYCLE_DAY = 'Dia do Ciclo'
CSV_TOTAL_CYCLE_DAYS = 'Total Dias Ciclo'

# metric key -> column prefix; each metric has "<prefix> Meta", "<prefix> Atual", "<prefix> %"
CSV_METRIC_PREFIXES = {
    FATURAMENTO: 'Faturamento',
    REAIS_POR_ATIVO: 'Reais por Ativo',
    MULTIMARCAS_POR_ATIVO: 'Multimarcas por Ativo',
    ATIVIDADE: 'Atividade',
    CONVERSOES: 'Conversões',
    UPA: 'UPA',
}
CSV_CORE_METRICS = [FATURAMENTO, REAIS_POR_ATIVO, MULTIMARCAS_POR_ATIVO, ATIVIDADE]
CSV_OPTIONAL_METRICS = [CONVERSOES, UPA]


def metric_columns(metric: str) -> tuple[str, str, str]:
    """Return the (target, current, percentage) column names for a metric."""
    prefix = CSV_METRIC_PREFIXES[metric]
    return f'{prefix} Meta', f'{prefix} Atual', f'{prefix} %'


CSV_REQUIRED_FIELDS = [CSV_PLAYER_ID, CSV_CYCLE_DAY, CSV_TOTAL_CYCLE_DAYS]
CSV_REQUIRED_HEADERS = CSV_REQUIRED_FIELDS + [
    column for metric in CSV_CORE_METRICS for column in metric_columns(metric)
]
