"""Central configuration for the playoff pool engine."""

import os

# Round identifiers, in bracket order
PLAY_IN = "playIn"
FIRST_ROUND = "firstRound"
CONF_SEMIS = "confSemis"
CONF_FINALS = "confFinals"
FINALS = "finals"

# Scoring: base points per correct pick in each round
DEFAULT_BASE_POINTS = {
    FIRST_ROUND: 1,
    CONF_SEMIS: 2,
    CONF_FINALS: 3,
    FINALS: 4,
}

# Extra points for also calling the series length (only if the winner is right)
DEFAULT_SERIES_BONUS = {
    FIRST_ROUND: 0.5,
    CONF_SEMIS: 1,
    CONF_FINALS: 1.5,
    FINALS: 2,
}

DEFAULT_UPSET_BONUS = 2
DEFAULT_PLAY_IN_POINTS = 1
DEFAULT_FINALS_MVP_POINTS = 2.5
DEFAULT_CHAMPION_BONUS = 0  # only awarded when a league configures it

# Bracket structure
CONFERENCES = ["East", "West"]
TEAMS_PER_CONFERENCE = 8
SERIES_GAMES_OPTIONS = (4, 5, 6, 7)

# Number of series per round
MATCHUPS_PER_ROUND = {FIRST_ROUND: 8, CONF_SEMIS: 4, CONF_FINALS: 2, FINALS: 1}

# Standard first round seed matchups (within each conference)
SEED_MATCHUPS = [(1, 8), (4, 5), (3, 6), (2, 7)]

# Seeds that enter the play-in tournament
PLAY_IN_SEEDS = (7, 8, 9, 10)

# Storage
DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")
DEFAULT_LEAGUE_ID = "default"
HTTP_TIMEOUT = 30

# Participant fan-out (reconciliation, renames, bulk resets)
DEFAULT_BATCH_WORKERS = 8

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
