"""Play-in tournament sub-bracket.

Per conference, seeds 7-10 play three games:
    seventhEighth: 7 vs 8, winner is the conference's 7 seed
    ninthTenth:    9 vs 10, loser is eliminated
    final:         loser of 7v8 vs winner of 9v10, winner is the 8 seed
"""

from __future__ import annotations

import config
from models.matchup import Matchup
from models.team import Team

SEVENTH_EIGHTH = "seventhEighth"
NINTH_TENTH = "ninthTenth"
FINAL = "final"
PLAY_IN_GAMES = (SEVENTH_EIGHTH, NINTH_TENTH, FINAL)


class ConferencePlayIn:
    """The three play-in games for one conference."""

    def __init__(self, conference: str):
        self.conference = conference
        self.games: dict[str, Matchup] = {
            key: Matchup(conference=conference) for key in PLAY_IN_GAMES
        }

    def game(self, key: str) -> Matchup:
        if key not in self.games:
            raise ValueError(f"Unknown play-in game: {key!r}")
        return self.games[key]

    def seed_teams(self, teams_by_seed: dict[int, Team]):
        """Place seeds 7-10 into the opening games and clear every result."""
        opening = self.games[SEVENTH_EIGHTH]
        opening.clear()
        for side, seed in ((1, 7), (2, 8)):
            if seed in teams_by_seed:
                opening.set_team(side, teams_by_seed[seed].name, seed)

        elimination = self.games[NINTH_TENTH]
        elimination.clear()
        for side, seed in ((1, 9), (2, 10)):
            if seed in teams_by_seed:
                elimination.set_team(side, teams_by_seed[seed].name, seed)

        self.games[FINAL].clear()

    def seeded_teams(self) -> dict[int, Team]:
        """{seed: Team} for whichever of seeds 7-10 are filled in."""
        teams = {}
        for key in (SEVENTH_EIGHTH, NINTH_TENTH):
            game = self.games[key]
            for side in (1, 2):
                name, seed = game.team(side), game.seed(side)
                if name and seed is not None:
                    teams[seed] = Team(name, seed, self.conference)
        return teams

    def to_dict(self) -> dict:
        return {key: game.to_dict() for key, game in self.games.items()}

    @classmethod
    def from_dict(cls, conference: str, data: dict | None) -> ConferencePlayIn:
        play_in = cls(conference)
        for key in PLAY_IN_GAMES:
            play_in.games[key] = Matchup.from_dict((data or {}).get(key), conference)
        return play_in


class PlayIn:
    """Play-in games for both conferences."""

    def __init__(self):
        self.conferences: dict[str, ConferencePlayIn] = {
            name: ConferencePlayIn(name) for name in config.CONFERENCES
        }

    def conference(self, name: str) -> ConferencePlayIn:
        if name not in self.conferences:
            raise ValueError(f"Unknown conference: {name!r}")
        return self.conferences[name]

    def iter_games(self):
        """Yield (conference, game_key, matchup) for all six games."""
        for name, conf in self.conferences.items():
            for key in PLAY_IN_GAMES:
                yield name, key, conf.games[key]

    def to_dict(self) -> dict:
        return {name: conf.to_dict() for name, conf in self.conferences.items()}

    @classmethod
    def from_dict(cls, data: dict | None) -> PlayIn:
        play_in = cls()
        for name in config.CONFERENCES:
            play_in.conferences[name] = ConferencePlayIn.from_dict(name, (data or {}).get(name))
        return play_in
