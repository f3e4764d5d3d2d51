"""Unit tests for the team processor and team profiles."""

import logging

import pytest

from essencia.constants import (
    BOOST_SECONDARY_1_ITEM,
    BOOST_SECONDARY_2_ITEM,
    CARTEIRA_II_BOOST_WARNING,
    UNLOCK_POINTS_ITEM,
    TeamType,
)
from essencia.processor import TeamProcessor
from essencia.schemas import PlayerStatus, ReportRecord
from essencia.teams import TEAM_PROFILES, carteira_iii_iv_profile, get_profile


def make_processor(team_type: TeamType) -> TeamProcessor:
    return TeamProcessor(get_profile(team_type))


def make_status(challenges=None, catalog_items=None, total_points=0, name='Ana Souza'):
    return {
        '_id': 'player_1',
        'name': name,
        'total_points': total_points,
        'catalog_items': catalog_items,
        'challenge_progress': challenges or [],
        'teams': [],
    }


class TestSlotAssignment:
    """Tests for each team's primary/secondary metric slots."""

    @pytest.mark.parametrize(
        'team_type,expected',
        [
            (TeamType.CARTEIRA_0, ('Conversões', 'Reais por Ativo', 'Faturamento')),
            (TeamType.CARTEIRA_I, ('Atividade', 'Reais por Ativo', 'Faturamento')),
            (TeamType.CARTEIRA_II, ('Reais por Ativo', 'Atividade', 'Multimarcas por Ativo')),
            (TeamType.CARTEIRA_III, ('Faturamento', 'Reais por Ativo', 'Multimarcas por Ativo')),
            (TeamType.CARTEIRA_IV, ('Faturamento', 'Reais por Ativo', 'Multimarcas por Ativo')),
            (TeamType.ER, ('Faturamento', 'Reais por Ativo', 'UPA')),
        ],
    )
    def test_goal_names(self, team_type, expected):
        """Test every team fills its three slots with the right metrics."""
        metrics = make_processor(team_type).process_player_data(make_status())
        assert tuple(goal.name for goal in metrics.goals) == expected
        assert metrics.team_type == team_type

    def test_carteira_iii_iv_share_profile(self):
        """Test Carteira III and IV differ only in identity."""
        iii = TEAM_PROFILES[TeamType.CARTEIRA_III]
        iv = TEAM_PROFILES[TeamType.CARTEIRA_IV]
        assert iii.metrics == iv.metrics
        assert iii.display_name == 'Carteira III'
        assert iv.display_name == 'Carteira IV'

    def test_carteira_iii_iv_profile_rejects_other_teams(self):
        """Test the shared builder only accepts Carteira III or IV."""
        with pytest.raises(ValueError):
            carteira_iii_iv_profile(TeamType.ER)


class TestPercentagePriority:
    """Tests for challenge/report/default source priority."""

    def test_carteira_0_challenge_wins(self):
        """Test Carteira 0 conversions come from the challenge over the report."""
        status = make_status(challenges=[{'challenge': 'E82R5cQ', 'percentage': 75}])
        metrics = make_processor(TeamType.CARTEIRA_0).process_player_data(
            status, {'conversoes': 90}
        )
        assert metrics.primary_goal.name == 'Conversões'
        assert metrics.primary_goal.percentage == 75
        assert metrics.primary_goal.details['source'] == 'challenge'
        assert metrics.primary_goal.details['progress_bar'].color == 'yellow'

    def test_report_used_when_no_challenge(self):
        """Test the report value is used when no challenge matches."""
        metrics = make_processor(TeamType.CARTEIRA_I).process_player_data(
            make_status(), {'atividade': 64.5}
        )
        assert metrics.primary_goal.percentage == 64.5
        assert metrics.primary_goal.details['source'] == 'report'

    def test_invalid_challenge_falls_through(self):
        """Test a NaN challenge value falls through to the report."""
        status = make_status(challenges=[{'challenge': 'E6FO12f', 'percentage': float('nan')}])
        metrics = make_processor(TeamType.CARTEIRA_I).process_player_data(
            status, {'atividade': 40}
        )
        assert metrics.primary_goal.percentage == 40

    def test_negative_report_value_defaults_to_zero(self):
        """Test a negative report value is rejected and the goal becomes 0."""
        metrics = make_processor(TeamType.ER).process_player_data(make_status(), {'upa': -5})
        assert metrics.secondary_goal_2.percentage == 0
        assert metrics.secondary_goal_2.details['source'] == 'default'

    def test_challenge_zero_beats_report(self):
        """Test a found 0 from the challenge is not replaced by the report."""
        status = make_status(challenges=[{'challengeId': 'E6F8HMK', 'progress': 0}])
        metrics = make_processor(TeamType.CARTEIRA_III).process_player_data(
            status, {'faturamento': 88}
        )
        assert metrics.primary_goal.percentage == 0
        assert metrics.primary_goal.details['source'] == 'challenge'

    def test_over_achievement_not_clamped(self):
        """Test percentages above 100 pass through to the goal."""
        status = make_status(challenges=[{'id': 'E6MLv3L', 'percentage': 142.5}])
        metrics = make_processor(TeamType.CARTEIRA_IV).process_player_data(status)
        assert metrics.primary_goal.percentage == 142.5
        assert metrics.primary_goal.details['progress_bar'].color == 'green'

    def test_aliased_challenge_ids(self):
        """Test any accepted alias backs the metric."""
        status = make_status(challenges=[{'challenge': 'E6Gke5g', 'percentage': 61}])
        metrics = make_processor(TeamType.ER).process_player_data(status)
        assert metrics.secondary_goal_1.name == 'Reais por Ativo'
        assert metrics.secondary_goal_1.percentage == 61

    def test_carteira_ii_prefers_report(self):
        """Test Carteira II uses the report before the challenge."""
        status = make_status(challenges=[{'challenge': 'E6MTIIK', 'percentage': 50}])
        metrics = make_processor(TeamType.CARTEIRA_II).process_player_data(
            status, {'reais_por_ativo': 80}
        )
        assert metrics.primary_goal.percentage == 80
        assert metrics.primary_goal.details['source'] == 'report'

    def test_carteira_ii_challenge_when_no_report(self):
        """Test Carteira II falls back to the challenge without a report."""
        status = make_status(challenges=[{'challenge': 'E6MTIIK', 'percentage': 50}])
        metrics = make_processor(TeamType.CARTEIRA_II).process_player_data(status)
        assert metrics.primary_goal.percentage == 50
        assert metrics.primary_goal.details['source'] == 'challenge'


class TestEmptyPlayer:
    """Tests for a player with no data at all."""

    def test_all_goals_zero_and_locked(self):
        """Test an empty player gets three zero goals and locked points."""
        status = make_status(catalog_items={})
        metrics = make_processor(TeamType.CARTEIRA_I).process_player_data(status)
        assert [goal.percentage for goal in metrics.goals] == [0, 0, 0]
        assert metrics.points_locked is True
        assert metrics.current_cycle_day == 0
        assert metrics.days_until_cycle_end == 21

    def test_missing_catalog_means_locked(self):
        """Test a missing catalog map defaults to locked."""
        metrics = make_processor(TeamType.ER).process_player_data(make_status(catalog_items=None))
        assert metrics.points_locked is True


class TestPointsAndBoosts:
    """Tests for lock and boost extraction from catalog items."""

    def test_unlock_item_unlocks(self):
        """Test owning the unlock item unlocks points."""
        status = make_status(catalog_items={UNLOCK_POINTS_ITEM: 1}, total_points=350)
        metrics = make_processor(TeamType.CARTEIRA_III).process_player_data(status)
        assert metrics.points_locked is False
        assert metrics.total_points == 350

    def test_zero_unlock_item_is_locked(self):
        """Test a zero count of the unlock item keeps points locked."""
        status = make_status(catalog_items={UNLOCK_POINTS_ITEM: 0})
        assert make_processor(TeamType.CARTEIRA_III).process_player_data(status).points_locked

    def test_boosts_on_secondary_only(self):
        """Test boosts light up the secondary goals and never the primary."""
        status = make_status(
            catalog_items={BOOST_SECONDARY_1_ITEM: 1, BOOST_SECONDARY_2_ITEM: 0}
        )
        metrics = make_processor(TeamType.CARTEIRA_0).process_player_data(status)
        assert metrics.primary_goal.boost_active is False
        assert metrics.secondary_goal_1.boost_active is True
        assert metrics.secondary_goal_2.boost_active is False
        assert metrics.secondary_goal_1.details['boost_item_id'] == BOOST_SECONDARY_1_ITEM
        assert metrics.secondary_goal_2.details['boost_item_id'] == BOOST_SECONDARY_2_ITEM
        assert metrics.primary_goal.details['is_main_goal'] is True

    def test_platform_teams_have_no_warnings(self):
        """Test platform-points teams attach no warning."""
        metrics = make_processor(TeamType.CARTEIRA_I).process_player_data(make_status())
        assert metrics.warnings == []


class TestCarteiraIILocalPoints:
    """Tests for Carteira II local unlock and boost multipliers."""

    def test_unlocked_with_one_boost_doubles_points(self):
        """Test reaching 100% with one boost doubles the points."""
        status = make_status(
            catalog_items={BOOST_SECONDARY_1_ITEM: 1}, total_points=1000
        )
        report = {
            'reais_por_ativo': 110,
            'targets': {'reais_por_ativo': 1300},
            'currents': {'reais_por_ativo': 1430},
        }
        metrics = make_processor(TeamType.CARTEIRA_II).process_player_data(status, report)
        assert metrics.points_locked is False
        assert metrics.total_points == 2000
        assert CARTEIRA_II_BOOST_WARNING in metrics.warnings

    def test_two_boosts_triple_points(self):
        """Test two active boosts give a 3x multiplier."""
        status = make_status(
            catalog_items={BOOST_SECONDARY_1_ITEM: 1, BOOST_SECONDARY_2_ITEM: 2},
            total_points=333.4,
        )
        metrics = make_processor(TeamType.CARTEIRA_II).process_player_data(
            status, {'reais_por_ativo': 100}
        )
        assert metrics.points_locked is False
        assert metrics.total_points == 1000

    def test_below_threshold_is_locked(self):
        """Test under 100% keeps points locked at the base value."""
        status = make_status(
            catalog_items={UNLOCK_POINTS_ITEM: 1, BOOST_SECONDARY_1_ITEM: 1}, total_points=500
        )
        report = {
            'reais_por_ativo': 120,
            'targets': {'reais_por_ativo': 1000},
            'currents': {'reais_por_ativo': 800},
        }
        metrics = make_processor(TeamType.CARTEIRA_II).process_player_data(status, report)
        # target/current wins over the stored percentage, and the platform unlock item is ignored
        assert metrics.points_locked is True
        assert metrics.total_points == 500

    def test_unlock_goal_details(self):
        """Test the primary goal is flagged as the unlock goal."""
        metrics = make_processor(TeamType.CARTEIRA_II).process_player_data(make_status())
        assert metrics.primary_goal.details['is_unlock_goal'] is True
        assert metrics.primary_goal.details['unlock_threshold'] == 100.0
        assert metrics.warnings == [CARTEIRA_II_BOOST_WARNING]


class TestCycleAndMismatch:
    """Tests for cycle bookkeeping and team mismatch handling."""

    def test_cycle_from_report(self):
        """Test cycle day and days remaining come from the report."""
        report = ReportRecord(current_cycle_day=12, total_cycle_days=21)
        metrics = make_processor(TeamType.CARTEIRA_I).process_player_data(make_status(), report)
        assert metrics.current_cycle_day == 12
        assert metrics.days_until_cycle_end == 9

    def test_days_never_negative(self):
        """Test a day past the cycle end clamps remaining days at 0."""
        report = {'currentCycleDay': 25, 'totalCycleDays': 21}
        metrics = make_processor(TeamType.ER).process_player_data(make_status(), report)
        assert metrics.days_until_cycle_end == 0

    def test_default_cycle_length_is_configurable(self):
        """Test the no-report cycle length follows the processor setting."""
        processor = TeamProcessor(get_profile(TeamType.ER), default_cycle_days=30)
        assert processor.process_player_data(make_status()).days_until_cycle_end == 30

    def test_team_mismatch_warns_and_continues(self, caplog):
        """Test a report for another team is used with a logged warning."""
        caplog.set_level(logging.WARNING, logger='essencia')
        metrics = make_processor(TeamType.CARTEIRA_I).process_player_data(
            make_status(), {'team': 'CARTEIRA_III', 'atividade': 77}
        )
        assert metrics.primary_goal.percentage == 77
        assert 'Team type mismatch' in caplog.text

    def test_accepts_validated_models(self):
        """Test pydantic inputs are accepted as well as raw dicts."""
        status = PlayerStatus.model_validate(make_status(total_points=12))
        metrics = make_processor(TeamType.CARTEIRA_0).process_player_data(status)
        assert metrics.player_name == 'Ana Souza'
        assert metrics.total_points == 12

    def test_to_dict_serializes_team(self):
        """Test PlayerMetrics.to_dict flattens the team enum."""
        data = make_processor(TeamType.ER).process_player_data(make_status()).to_dict()
        assert data['team_type'] == 'ER'
        assert data['primary_goal']['details']['progress_bar']['color'] == 'red'


class TestMalformedInput:
    """Tests that malformed payload values are absorbed, not raised."""

    @pytest.mark.parametrize(
        'report',
        [
            {'atividade': 'n/a'},
            {'faturamento': ''},
            {'reaisPorAtivo': None, 'upa': 'NaN'},
        ],
    )
    def test_unusable_report_percentage_falls_through(self, report):
        """Test a non-numeric report percentage is ignored and defaults to 0."""
        metrics = make_processor(TeamType.CARTEIRA_I).process_player_data(make_status(), report)
        assert metrics.primary_goal.percentage == 0
        assert metrics.primary_goal.details['source'] == 'default'
        assert metrics.secondary_goal_2.percentage == 0

    def test_invalid_report_value_logs_warning(self, caplog):
        """Test dropped report values are reported in the log."""
        caplog.set_level(logging.WARNING, logger='essencia')
        make_processor(TeamType.CARTEIRA_I).process_player_data(make_status(), {'atividade': 'n/a'})
        assert "Invalid numeric value for atividade: 'n/a'" in caplog.text

    def test_numeric_string_report_value_is_used(self):
        """Test numeric strings in stored reports still count."""
        metrics = make_processor(TeamType.CARTEIRA_I).process_player_data(
            make_status(), {'atividade': ' 64.5 '}
        )
        assert metrics.primary_goal.percentage == 64.5

    def test_fractional_cycle_day_truncates(self):
        """Test a fractional cycle day is truncated to a whole day."""
        metrics = make_processor(TeamType.ER).process_player_data(
            make_status(), {'currentCycleDay': 12.5, 'totalCycleDays': 21}
        )
        assert metrics.current_cycle_day == 12
        assert metrics.days_until_cycle_end == 9

    def test_unparsable_total_days_uses_default(self, caplog):
        """Test an unusable cycle length falls back to the default cycle."""
        caplog.set_level(logging.WARNING, logger='essencia')
        metrics = make_processor(TeamType.ER).process_player_data(
            make_status(), {'currentCycleDay': 5, 'totalCycleDays': 'abc'}
        )
        assert metrics.days_until_cycle_end == 16
        assert 'total_cycle_days' in caplog.text

    def test_non_numeric_targets_are_dropped(self):
        """Test junk target/current values fall back to the primary percentage."""
        report = {
            'reaisPorAtivo': 100,
            'targets': {'reais_por_ativo': 'abc'},
            'currents': {'reais_por_ativo': 50},
        }
        metrics = make_processor(TeamType.CARTEIRA_II).process_player_data(
            make_status(total_points=100), report
        )
        assert metrics.points_locked is False
        assert metrics.total_points == 100

    def test_targets_not_a_mapping(self):
        """Test a targets list is ignored rather than raised."""
        record = ReportRecord.model_validate({'targets': [1, 2], 'currents': 'x'})
        assert record.targets == {}
        assert record.currents == {}

    def test_unparsable_total_points(self, caplog):
        """Test non-numeric total points display as 0."""
        caplog.set_level(logging.WARNING, logger='essencia')
        metrics = make_processor(TeamType.CARTEIRA_I).process_player_data(
            make_status(total_points='abc')
        )
        assert metrics.total_points == 0
        assert 'total_points' in caplog.text

    def test_missing_name(self):
        """Test a null player name becomes an empty string."""
        metrics = make_processor(TeamType.CARTEIRA_0).process_player_data(make_status(name=None))
        assert metrics.player_name == ''

    def test_challenge_progress_not_a_list(self):
        """Test a non-list challenge progress is treated as empty."""
        status = make_status()
        status['challenge_progress'] = {}
        metrics = make_processor(TeamType.ER).process_player_data(status)
        assert metrics.primary_goal.percentage == 0

    def test_catalog_items_not_a_mapping(self):
        """Test a non-mapping catalog keeps points locked."""
        metrics = make_processor(TeamType.ER).process_player_data(make_status(catalog_items=['x']))
        assert metrics.points_locked is True
