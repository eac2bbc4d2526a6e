"""
Tests for participant scoring: base points, bonuses and points still possible.
"""
import pytest

from conftest import fill_bracket
from engine.errors import MissingPrerequisite
from engine.propagation import apply_play_in_result, apply_result, set_finals_mvp
from models.bracket import BracketTree
from models.matchup import Matchup
from models.rounds import BRACKET_ROUNDS, Round
from models.scoring_config import ScoringConfig
from scoring.scorer import (count_correct_series, is_upset, max_possible, score_all_participants,
                            score_participant, teams_match)

SCENARIO_CONFIG = {'basePoints': {'firstRound': 1}, 'seriesBonus': {'firstRound': 1}, 'upsetBonus': 2}


def single_slot_tree(matchup):
    tree = BracketTree()
    matchup.conference = 'East'
    tree.rounds[Round.FIRST_ROUND][0] = matchup
    return tree


def upset_official():
    return single_slot_tree(Matchup('(1) A', None, '(8) B', None, winner='B', winner_seed=8, num_games=7))


class TestSingleSeries:
    """One first round series scored in isolation."""

    def test_correct_winner_length_and_upset(self):
        predicted = single_slot_tree(Matchup('(1) A', None, '(8) B', None, winner='B', winner_seed=8, num_games=7))
        record = score_participant(predicted, upset_official(), ScoringConfig.from_dict(SCENARIO_CONFIG))
        first = record.round_breakdown['firstRound']
        assert (first.base_points, first.series_length_points, first.upset_points) == (1, 1, 2)
        assert first.total_points == 4
        assert record.total == 4
        assert record.correct_picks == 1
        assert record.correct_series == 1

    def test_different_winner_scores_nothing(self):
        predicted = single_slot_tree(Matchup('(1) A', None, '(7) C', None, winner='C', num_games=7))
        record = score_participant(predicted, upset_official(), ScoringConfig.from_dict(SCENARIO_CONFIG))
        assert record.total == 0
        assert record.correct_picks == 0
        assert record.upset_points == 0

    def test_series_bonus_needs_same_pairing(self):
        official = single_slot_tree(Matchup('Celtics', 1, 'Heat', 8, winner='Celtics', num_games=5))
        predicted = single_slot_tree(Matchup('Celtics', 1, 'Hawks', 8, winner='Celtics', num_games=5))
        record = score_participant(predicted, official)
        assert record.base_points == 1
        assert record.series_length_points == 0

    def test_series_bonus_needs_same_length(self):
        official = single_slot_tree(Matchup('Celtics', 1, 'Heat', 8, winner='Celtics', num_games=5))
        predicted = single_slot_tree(Matchup('Heat', 8, 'Celtics', 1, winner='Celtics', num_games=6))
        assert score_participant(predicted, official).series_length_points == 0

    def test_upset_uses_official_seeds(self):
        official = single_slot_tree(Matchup('Celtics', 1, 'Heat', 8, winner='Heat', winner_seed=8))
        predicted = single_slot_tree(Matchup('Celtics', None, 'Heat', None, winner='Heat'))
        assert score_participant(predicted, official).upset_points == 2

    def test_disabled_bonuses(self):
        scoring = ScoringConfig.from_dict({'upsetBonusEnabled': False, 'seriesLengthBonusEnabled': False})
        predicted = single_slot_tree(Matchup('(1) A', None, '(8) B', None, winner='B', num_games=7))
        record = score_participant(predicted, upset_official(), scoring)
        assert (record.base_points, record.series_length_points, record.upset_points) == (1, 0, 0)

    def test_no_winner_on_either_side_counts_nothing(self):
        record = score_participant(BracketTree(), BracketTree())
        assert record.total == 0
        assert record.correct_picks == 0
        assert record.max_possible == 0


class TestHelpers:

    def test_teams_match_ignores_order_prefix_and_case(self):
        assert teams_match(Matchup('(1) Celtics', None, 'Heat'), Matchup('heat', None, 'Celtics '))

    def test_teams_match_needs_both_teams(self):
        assert not teams_match(Matchup('Celtics', None, ''), Matchup('Celtics', None, ''))

    def test_is_upset(self):
        assert is_upset(Matchup('Knicks', 2, 'Bucks', 3, winner='Bucks'))
        assert not is_upset(Matchup('Knicks', 2, 'Bucks', 3, winner='Knicks'))
        assert not is_upset(Matchup('Knicks', 2, 'Bucks', 3))


class TestFullBracket:

    def test_perfect_bracket(self, official):
        result = fill_bracket(official, mvp='Tatum')
        record = score_participant(result.copy(), result)
        # base 8*1 + 4*2 + 2*3 + 4, series 8*0.5 + 4*1 + 2*1.5 + 2,
        # two upsets (3 seeds over 2 seeds in the second round), MVP 2.5
        assert record.base_points == 26
        assert record.series_length_points == 13
        assert record.upset_points == 4
        assert record.finals_mvp_points == 2.5
        assert record.total == 45.5
        assert record.correct_picks == 15
        assert record.correct_series == 15
        assert record.max_possible == 0
        assert record.possible_points == 45.5

    def test_mvp_match_ignores_case(self, official):
        result = set_finals_mvp(official, 'Jayson Tatum')
        predicted = set_finals_mvp(official, 'jayson tatum ')
        record = score_participant(predicted, result)
        assert record.mvp.correct_prediction
        assert record.finals_mvp_points == 2.5

    def test_champion_bonus_only_when_configured(self, official):
        result = fill_bracket(official)
        assert score_participant(result.copy(), result).champion_points == 0
        record = score_participant(result.copy(), result, ScoringConfig.from_dict({'championBonus': 8}))
        assert record.champion_points == 8

    def test_breakdown_document_shape(self, official):
        result = fill_bracket(official)
        doc = score_participant(result.copy(), result).to_dict()
        assert set(doc['roundBreakdown']) == {'firstRound', 'confSemis', 'confFinals', 'finals', 'mvp'}
        assert doc['roundBreakdown']['finals']['totalPoints'] == 4 + 2
        assert doc['possiblePoints'] == doc['total'] + doc['maxPossible']

    def test_no_official_bracket(self, official):
        with pytest.raises(MissingPrerequisite):
            score_participant(official, None)
        with pytest.raises(MissingPrerequisite):
            score_all_participants({'alice': official}, None)

    def test_missing_participant_bracket_scores_zero(self, official):
        assert score_participant(None, fill_bracket(official)).total == 0

    def test_score_all(self, official):
        result = fill_bracket(official)
        scores = score_all_participants({'alice': result.copy(), 'bob': official}, result)
        assert scores['alice'].total > scores['bob'].total == 0

    def test_count_correct_series(self, official):
        result = fill_bracket(official, num_games=6)
        predicted = fill_bracket(official, num_games=4)
        assert count_correct_series(predicted, result) == 0
        assert count_correct_series(result, result) == 15


class TestPlayInScoring:

    def test_each_matching_game_scores(self, official_with_play_in):
        official = apply_play_in_result(official_with_play_in, 'East', 'seventhEighth', 'Heat')
        official = apply_play_in_result(official, 'West', 'ninthTenth', 'Warriors')
        predicted = apply_play_in_result(official_with_play_in, 'East', 'seventhEighth', 'Heat')
        predicted = apply_play_in_result(predicted, 'West', 'ninthTenth', 'Rockets')
        record = score_participant(predicted, official)
        assert record.play_in_points == 1
        assert record.round_breakdown['playIn'].correct_picks == 1
        assert record.correct_picks == 1

    def test_base_points_document_sets_play_in_value(self, official_with_play_in):
        official = apply_play_in_result(official_with_play_in, 'East', 'seventhEighth', 'Heat')
        record = score_participant(official.copy(), official, ScoringConfig.from_dict({'basePoints': {'playIn': 3}}))
        assert record.play_in_points == 3

    def test_disabled_play_in_scores_nothing(self, official_with_play_in):
        official = apply_play_in_result(official_with_play_in, 'East', 'seventhEighth', 'Heat')
        record = score_participant(official.copy(), official, ScoringConfig.from_dict({'playInEnabled': False}))
        assert record.play_in_points == 0
        assert 'playIn' not in record.round_breakdown

    def test_absent_play_in_scores_nothing(self, official, official_with_play_in):
        record = score_participant(official_with_play_in, official)
        assert record.play_in_points == 0


class TestMaxPossible:
    """Points still achievable if every open pick comes true."""

    def test_nothing_decided_yet(self, official):
        predicted = fill_bracket(official, mvp='Tatum')
        assert max_possible(predicted, official) == 45.5

    def test_counts_only_open_slots_with_a_pick(self, official):
        predicted = apply_result(official, Round.FIRST_ROUND, 0, 'Celtics')
        # base 1; no upset possible for a 1 seed; no series length picked
        assert max_possible(predicted, official) == 1

    def test_series_bonus_dropped_once_pairing_is_impossible(self, official):
        predicted = fill_bracket(official, num_games=6)
        result = apply_result(official, Round.FIRST_ROUND, 0, 'Heat')
        before = max_possible(predicted, official)
        after = max_possible(predicted, result)
        # lose the first round slot (1 + 0.5) and the series bonus in the second round (1)
        assert before - after == 2.5

    def test_monotonic_as_results_arrive(self, official):
        predicted = fill_bracket(official, num_games=6, mvp='Tatum')
        final = fill_bracket(official, pick=lambda m: max(m.team1, m.team2), num_games=6, mvp='Jokic')
        final_total = score_participant(predicted, final).total

        result = official
        previous = score_participant(predicted, result)
        steps = [(rnd, i, final.matchup(rnd, i)) for rnd in BRACKET_ROUNDS
                 for i in range(len(final.matchups(rnd)))]
        for rnd, i, m in steps:
            mvp = final.finals_mvp if rnd is Round.FINALS else None
            result = apply_result(result, rnd, i, m.winner, num_games=m.num_games, mvp=mvp)
            record = score_participant(predicted, result)
            assert record.max_possible <= previous.max_possible
            assert record.total >= previous.total
            assert record.total + record.max_possible >= final_total
            previous = record

        assert previous.max_possible == 0
        assert previous.total == final_total
