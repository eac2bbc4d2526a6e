"""
Tests for the bracket tree model: shape, slot routing and serialization.
"""
import pytest

from conftest import fill_bracket
from models.bracket import BracketTree, conference_for, first_round_slot, next_slot
from models.matchup import FinalMatchup, Matchup
from models.rounds import Round, parse_round
from models.team import Team, normalize_team_name, same_team, seed_from_name


def round_sizes(tree):
    return [len(tree.matchups(rnd)) for rnd in
            (Round.FIRST_ROUND, Round.CONF_SEMIS, Round.CONF_FINALS, Round.FINALS)]


class TestRoundSizes:
    """Rounds are always 8 -> 4 -> 2 -> 1."""

    def test_new_tree(self):
        assert round_sizes(BracketTree()) == [8, 4, 2, 1]

    def test_from_empty_document(self):
        assert round_sizes(BracketTree.from_dict({})) == [8, 4, 2, 1]

    def test_short_round_is_padded(self):
        tree = BracketTree.from_dict({'firstRound': [{'team1': 'Celtics', 'team2': 'Heat'}] * 3})
        assert round_sizes(tree) == [8, 4, 2, 1]
        assert tree.matchup(Round.FIRST_ROUND, 2).team1 == 'Celtics'
        assert tree.matchup(Round.FIRST_ROUND, 3).team1 == ''

    def test_padded_slots_get_conference(self):
        tree = BracketTree.from_dict({'confSemis': []})
        assert [m.conference for m in tree.matchups(Round.CONF_SEMIS)] == ['East', 'East', 'West', 'West']

    def test_long_round_is_truncated(self):
        tree = BracketTree.from_dict({'confFinals': [{}] * 5})
        assert round_sizes(tree) == [8, 4, 2, 1]

    def test_filled_bracket(self, official):
        assert round_sizes(fill_bracket(official)) == [8, 4, 2, 1]


class TestSlotRouting:
    """Where each winner goes next."""

    @pytest.mark.parametrize('index, expected', [
        (0, (Round.CONF_SEMIS, 0, 1)),
        (1, (Round.CONF_SEMIS, 0, 2)),
        (2, (Round.CONF_SEMIS, 1, 1)),
        (3, (Round.CONF_SEMIS, 1, 2)),
        (4, (Round.CONF_SEMIS, 2, 1)),
        (7, (Round.CONF_SEMIS, 3, 2)),
    ])
    def test_first_round(self, index, expected):
        assert next_slot(Round.FIRST_ROUND, index) == expected

    @pytest.mark.parametrize('index, expected', [
        (0, (Round.CONF_FINALS, 0, 1)),
        (1, (Round.CONF_FINALS, 0, 2)),
        (2, (Round.CONF_FINALS, 1, 1)),
        (3, (Round.CONF_FINALS, 1, 2)),
    ])
    def test_conference_semis(self, index, expected):
        assert next_slot(Round.CONF_SEMIS, index) == expected

    def test_east_champion_is_team1_west_is_team2(self):
        assert next_slot(Round.CONF_FINALS, 0) == (Round.FINALS, 0, 1)
        assert next_slot(Round.CONF_FINALS, 1) == (Round.FINALS, 0, 2)

    def test_finals_has_no_next_slot(self):
        assert next_slot(Round.FINALS, 0) is None

    def test_conference_tag_overrides_position(self):
        assert next_slot(Round.CONF_SEMIS, 0, 'West') == (Round.CONF_FINALS, 1, 1)

    def test_first_round_slot_by_seed(self):
        assert first_round_slot('East', 1) == (0, 1)
        assert first_round_slot('East', 7) == (3, 2)
        assert first_round_slot('West', 8) == (4, 2)
        assert first_round_slot('West', 5) == (5, 2)

    def test_conference_for(self):
        assert conference_for(Round.FIRST_ROUND, 3) == 'East'
        assert conference_for(Round.FIRST_ROUND, 4) == 'West'
        assert conference_for(Round.CONF_FINALS, 1) == 'West'
        assert conference_for(Round.FINALS, 0) == ''


class TestRounds:

    def test_parse_identifier_and_display_name(self):
        assert parse_round('confSemis') is Round.CONF_SEMIS
        assert parse_round('NBA Finals') is Round.FINALS

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            parse_round('Sweet 16')

    def test_next_round(self):
        assert Round.FIRST_ROUND.next() is Round.CONF_SEMIS
        assert Round.FINALS.next() is None


class TestMatchup:

    def test_loser_and_seeds(self):
        m = Matchup('Celtics', 1, 'Heat', 8, winner='Heat')
        assert m.loser() == ('Celtics', 1)
        assert m.resolved_winner_seed() == 8

    def test_seed_from_prefixed_name(self):
        m = Matchup('(1) A', None, '(8) B', None, winner='B', winner_seed=8)
        assert m.winning_side() == 2
        assert m.loser() == ('(1) A', 1)

    def test_final_clear_result_clears_mvp(self):
        m = FinalMatchup('Celtics', 1, 'Thunder', 1, winner='Celtics', winner_seed=1,
                         num_games=6, winner_conference='East', predicted_mvp='Tatum')
        m.clear_result()
        assert (m.winner, m.winner_seed, m.num_games, m.winner_conference, m.predicted_mvp) == \
            ('', None, None, '', '')
        assert m.team1 == 'Celtics'

    def test_from_dict_accepts_games_played(self):
        assert Matchup.from_dict({'gamesPlayed': '6'}).num_games == 6


class TestTeamNames:

    def test_normalize(self):
        assert normalize_team_name('(3) Bucks ') == 'bucks'
        assert normalize_team_name(None) == ''

    def test_seed_from_name(self):
        assert seed_from_name('(10) Hornets') == 10
        assert seed_from_name('Hornets') is None

    def test_same_team(self):
        assert same_team('(1) Celtics', 'celtics')
        assert not same_team('', '')

    def test_str(self):
        assert str(Team('Celtics', 1, 'East')) == '(1) Celtics'


class TestSerialization:

    def test_round_trip_keeps_everything(self, official):
        tree = fill_bracket(official, mvp='Tatum')
        restored = BracketTree.from_dict(tree.to_dict())
        assert restored.to_dict() == tree.to_dict()
        assert restored.champion == 'Celtics'
        assert restored.finals.predicted_mvp == 'Tatum'

    def test_legacy_keys(self):
        tree = BracketTree.from_dict({
            'First Round': [{'team1': 'Celtics', 'team2': 'Heat', 'winner': 'Celtics'}],
            'NBA Finals': {'team1': 'Celtics', 'team2': 'Thunder'},
            'Champion': 'Celtics',
            'Finals MVP': 'Tatum',
        })
        assert tree.matchup(Round.FIRST_ROUND, 0).winner == 'Celtics'
        assert tree.finals.team2 == 'Thunder'
        assert tree.champion == 'Celtics'
        assert tree.finals.predicted_mvp == 'Tatum'

    def test_play_in_absent_unless_present(self, official_with_play_in, official):
        assert BracketTree.from_dict(official.to_dict()).play_in is None
        restored = BracketTree.from_dict(official_with_play_in.to_dict())
        assert restored.play_in.conference('West').game('ninthTenth').team1 == 'Warriors'


class TestValidate:

    def test_filled_bracket_is_valid(self, official):
        assert fill_bracket(official, mvp='Tatum').validate() == []

    def test_reports_winner_not_in_matchup(self):
        tree = BracketTree()
        tree.rounds[Round.FIRST_ROUND][0] = Matchup('Celtics', 1, 'Heat', 8, winner='Knicks')
        assert any('not in the matchup' in p for p in tree.validate())

    def test_reports_champion_mismatch(self):
        tree = BracketTree()
        tree.champion = 'Celtics'
        assert any('Champion' in p for p in tree.validate())
