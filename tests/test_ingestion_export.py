"""
Tests for roster files, results CSVs, leaderboard CSVs and league snapshots.
"""
import csv
import json

import pytest

from conftest import fill_bracket, make_play_in_teams
from engine.errors import InvalidWinner
from ingestion.results_loader import apply_results, load_results_from_csv
from ingestion.roster_loader import load_roster_from_json, save_roster_to_json
from models.rounds import Round
from output.export import (build_snapshot, export_leaderboard_csv, parse_snapshot, read_snapshot,
                           write_snapshot)
from scoring.leaderboard import build_leaderboard
from scoring.scorer import score_all_participants


class TestRoster:

    def test_save_then_load(self, tmp_path, teams):
        path = str(tmp_path / 'roster.json')
        save_roster_to_json(teams, make_play_in_teams(), path)
        loaded, play_in = load_roster_from_json(path)
        assert set(loaded) == set(teams)
        assert set(play_in) == set(make_play_in_teams())

    def test_no_play_in(self, tmp_path, teams):
        path = str(tmp_path / 'roster.json')
        save_roster_to_json(teams, None, path)
        _, play_in = load_roster_from_json(path)
        assert play_in is None

    def test_unknown_conference(self, tmp_path):
        path = tmp_path / 'roster.json'
        path.write_text(json.dumps({'conferences': [{'name': 'Central', 'teams': {'1': 'Bulls'}}]}))
        with pytest.raises(ValueError):
            load_roster_from_json(str(path))

    def test_bad_play_in_seed(self, tmp_path):
        path = tmp_path / 'roster.json'
        path.write_text(json.dumps({'conferences': [{'name': 'East', 'playIn': {'11': 'Nets'}}]}))
        with pytest.raises(ValueError):
            load_roster_from_json(str(path))


class TestResultsCsv:

    def write(self, tmp_path, text):
        path = tmp_path / 'results.csv'
        path.write_text(text)
        return str(path)

    def test_load(self, tmp_path):
        path = self.write(tmp_path,
                          'round,index,winner,games,conference,game\n'
                          'firstRound,0,Celtics,5,,\n'
                          'First Round,1,Magic,,,\n'
                          'playIn,,Hawks,,East,seventhEighth\n')
        results = load_results_from_csv(path)
        assert results[0] == {'round': Round.FIRST_ROUND, 'index': 0, 'conference': '', 'game': '',
                              'winner': 'Celtics', 'num_games': 5, 'mvp': None}
        assert results[1]['round'] is Round.FIRST_ROUND
        assert results[1]['num_games'] is None
        assert (results[2]['round'], results[2]['conference'], results[2]['game']) == \
            (Round.PLAY_IN, 'East', 'seventhEighth')

    def test_missing_columns(self, tmp_path):
        with pytest.raises(ValueError):
            load_results_from_csv(self.write(tmp_path, 'round,index\nfirstRound,0\n'))

    def test_apply_in_order(self, official):
        results = [
            {'round': Round.FIRST_ROUND, 'index': 0, 'winner': 'Celtics', 'num_games': 4, 'mvp': None},
            {'round': Round.FIRST_ROUND, 'index': 1, 'winner': 'Cavaliers', 'num_games': 6, 'mvp': None},
            {'round': Round.CONF_SEMIS, 'index': 0, 'winner': 'Cavaliers', 'num_games': 7, 'mvp': None},
        ]
        tree = apply_results(official, results)
        assert tree.matchup(Round.CONF_FINALS, 0).team1 == 'Cavaliers'

    def test_bad_row_stops_the_run(self, official):
        results = [
            {'round': Round.FIRST_ROUND, 'index': 0, 'winner': 'Celtics', 'num_games': 4, 'mvp': None},
            {'round': Round.FIRST_ROUND, 'index': 1, 'winner': 'Lakers', 'num_games': 4, 'mvp': None},
        ]
        with pytest.raises(InvalidWinner):
            apply_results(official, results)
        assert not official.matchup(Round.FIRST_ROUND, 0).is_decided


class TestLeaderboardCsv:

    def test_export(self, tmp_path, official):
        result = fill_bracket(official)
        trees = {'alice': result.copy(), 'bob': official}
        entries = build_leaderboard(score_all_participants(trees, result), trees, result)
        path = tmp_path / 'board.csv'
        export_leaderboard_csv(entries, str(path))

        with open(path, newline='') as f:
            rows = list(csv.DictReader(f))
        assert [r['participant'] for r in rows] == ['alice', 'bob']
        assert float(rows[0]['total']) == 43
        assert rows[0]['champion_pick'] == 'Celtics'


class TestSnapshot:

    def test_write_then_read(self, tmp_path, official):
        picks = fill_bracket(official, mvp='Tatum')
        snapshot = build_snapshot(official, {'alice': picks}, score_all_participants({'alice': picks}, official))
        path = str(tmp_path / 'exports' / 'league.json')
        write_snapshot(snapshot, path)

        restored_official, trees = parse_snapshot(read_snapshot(path))
        assert restored_official.to_dict() == official.to_dict()
        assert trees['alice'].to_dict() == picks.to_dict()
        assert read_snapshot(path)['scores']['alice']['maxPossible'] == 45.5

    def test_older_layout_without_bracket_key(self, official):
        _, trees = parse_snapshot({'playoffs': official.to_dict(), 'users': {'bob': fill_bracket(official).to_dict()}})
        assert trees['bob'].champion == 'Celtics'

    def test_missing_official(self):
        with pytest.raises(ValueError):
            parse_snapshot({'users': {}})
