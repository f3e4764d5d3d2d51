from .constants import TeamType, CHALLENGE_MAPPING
from .models import (
    ProgressBar,
    GoalMetric,
    PlayerMetrics,
    TeamProfile,
    MetricValues,
    CSVGoalData,
    ProcessingResult,
    TeamOption,
)
from .schemas import PlayerStatus, ReportRecord, EngineConfig
from .mapping import get_challenge_ids, validate_challenge_mapping
from .extraction import extract_challenge_percentage, sanitize_percentage
from .progress import compute_progress_bar
from .processor import TeamProcessor
from .teams import TEAM_PROFILES, carteira_iii_iv_profile, get_profile
from .factory import (
    TeamProcessorFactory,
    UnsupportedTeamTypeError,
    ConfigurationError,
    get_factory,
)
from .csv_parser import (
    validate_csv_structure,
    parse_goal_csv,
    download_and_parse_csv,
    goal_data_to_report_record,
)
from .excel_parser import parse_goal_workbook
from .validators import validate_new_metrics, validate_cycle_days, validate_player_metrics

__all__ = [
    # Constants
    'TeamType',
    'CHALLENGE_MAPPING',
    # Models
    'ProgressBar',
    'GoalMetric',
    'PlayerMetrics',
    'TeamProfile',
    'MetricValues',
    'CSVGoalData',
    'ProcessingResult',
    'TeamOption',
    # Input schemas
    'PlayerStatus',
    'ReportRecord',
    'EngineConfig',
    # Challenge mapping and extraction
    'get_challenge_ids',
    'validate_challenge_mapping',
    'extract_challenge_percentage',
    'sanitize_percentage',
    'compute_progress_bar',
    # Processing
    'TeamProcessor',
    'TEAM_PROFILES',
    'carteira_iii_iv_profile',
    'get_profile',
    'TeamProcessorFactory',
    'UnsupportedTeamTypeError',
    'ConfigurationError',
    'get_factory',
    # Report uploads
    'validate_csv_structure',
    'parse_goal_csv',
    'download_and_parse_csv',
    'goal_data_to_report_record',
    'parse_goal_workbook',
    # Validation
    'validate_new_metrics',
    'validate_cycle_days',
    'validate_player_metrics',
]
