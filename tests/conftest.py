"""Shared fixtures: a seeded playoff field and helpers to fill brackets in."""
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from engine.propagation import apply_result
from engine.reconciliation import build_official_tree
from models.rounds import BRACKET_ROUNDS
from models.team import Team
from storage.document_store import MemoryDocumentStore

EAST = ['Celtics', 'Knicks', 'Bucks', 'Cavaliers', 'Magic', 'Pacers', '76ers', 'Heat']
WEST = ['Thunder', 'Nuggets', 'Timberwolves', 'Clippers', 'Mavericks', 'Suns', 'Pelicans', 'Lakers']


def make_teams(east=EAST, west=WEST):
    """Seeds 1-8 in each conference, in list order."""
    return ([Team(name, seed, 'East') for seed, name in enumerate(east, 1)]
            + [Team(name, seed, 'West') for seed, name in enumerate(west, 1)])


def make_play_in_teams():
    return [
        Team('Heat', 7, 'East'), Team('Hawks', 8, 'East'),
        Team('Bulls', 9, 'East'), Team('Hornets', 10, 'East'),
        Team('Lakers', 7, 'West'), Team('Kings', 8, 'West'),
        Team('Warriors', 9, 'West'), Team('Rockets', 10, 'West'),
    ]


def fill_bracket(tree, pick=lambda m: m.team1, num_games=4, mvp=None):
    """Decide every series in round order, choosing winners with pick(matchup)."""
    for rnd in BRACKET_ROUNDS:
        for i in range(len(tree.matchups(rnd))):
            m = tree.matchup(rnd, i)
            tree = apply_result(tree, rnd, i, pick(m), num_games=num_games,
                                mvp=mvp if rnd.value == 'finals' else None)
    return tree


@pytest.fixture
def teams():
    return make_teams()


@pytest.fixture
def official(teams):
    """Official bracket with the first round seeded and no results."""
    return build_official_tree(teams)


@pytest.fixture
def official_with_play_in():
    """Seeds 1-6 from the roster; seeds 7 and 8 are decided by the play-in."""
    top_six = [t for t in make_teams() if t.seed <= 6]
    return build_official_tree(top_six, make_play_in_teams())


@pytest.fixture
def store():
    return MemoryDocumentStore()
