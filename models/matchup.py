"""Matchup data model.

A matchup is one best-of-seven series. Names are empty strings when a slot
has not been filled yet; seeds and series length are None when unknown.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass

from models.team import same_team, seed_from_name


@dataclass
class Matchup:
    team1: str = ""
    team1_seed: int | None = None
    team2: str = ""
    team2_seed: int | None = None
    winner: str = ""
    winner_seed: int | None = None
    num_games: int | None = None
    conference: str = ""

    @property
    def is_decided(self) -> bool:
        return bool(self.winner)

    @property
    def has_both_teams(self) -> bool:
        return bool(self.team1) and bool(self.team2)

    def team(self, side: int) -> str:
        return self.team1 if side == 1 else self.team2

    def seed(self, side: int) -> int | None:
        seed = self.team1_seed if side == 1 else self.team2_seed
        return seed if seed is not None else seed_from_name(self.team(side))

    def side_of(self, name: str) -> int | None:
        """Which side (1 or 2) holds this exact team name."""
        if not name:
            return None
        if name == self.team1:
            return 1
        if name == self.team2:
            return 2
        return None

    def winning_side(self) -> int | None:
        """Side of the winner, tolerating "(N) " prefixes on either name."""
        if not self.winner:
            return None
        exact = self.side_of(self.winner)
        if exact:
            return exact
        if same_team(self.winner, self.team1):
            return 1
        if same_team(self.winner, self.team2):
            return 2
        return None

    def resolved_winner_seed(self) -> int | None:
        if self.winner_seed is not None:
            return self.winner_seed
        side = self.winning_side()
        if side:
            return self.seed(side)
        return seed_from_name(self.winner)

    def loser(self) -> tuple[str, int | None]:
        """Name and seed of the losing side of a decided matchup."""
        side = self.winning_side()
        if side is None:
            # Winner names neither slot
            side = 1 if self.winner == self.team1 else 2
        other = 2 if side == 1 else 1
        return self.team(other), self.seed(other)

    def set_team(self, side: int, name: str, seed: int | None):
        if side == 1:
            self.team1, self.team1_seed = name, seed
        else:
            self.team2, self.team2_seed = name, seed

    def clear_result(self):
        self.winner = ""
        self.winner_seed = None
        self.num_games = None

    def clear(self):
        """Clear teams and result, keeping the conference tag."""
        self.set_team(1, "", None)
        self.set_team(2, "", None)
        self.clear_result()

    def copy(self) -> Matchup:
        return copy.copy(self)

    def to_dict(self) -> dict:
        return {
            "team1": self.team1,
            "team1Seed": self.team1_seed,
            "team2": self.team2,
            "team2Seed": self.team2_seed,
            "winner": self.winner,
            "winnerSeed": self.winner_seed,
            "numGames": self.num_games,
            "conference": self.conference,
        }

    @classmethod
    def from_dict(cls, data: dict | None, conference: str = "") -> Matchup:
        data = data or {}
        return cls(**_common_fields(data, conference))


@dataclass
class FinalMatchup(Matchup):
    """The championship series: East winner on team1, West winner on team2."""

    team1_conference: str = "East"
    team2_conference: str = "West"
    winner_conference: str = ""
    predicted_mvp: str = ""

    def clear_result(self):
        super().clear_result()
        self.winner_conference = ""
        self.predicted_mvp = ""

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            "team1Conference": self.team1_conference,
            "team2Conference": self.team2_conference,
            "winnerConference": self.winner_conference,
            "predictedMVP": self.predicted_mvp,
        })
        return data

    @classmethod
    def from_dict(cls, data: dict | None, conference: str = "") -> FinalMatchup:
        data = data or {}
        return cls(
            **_common_fields(data, conference),
            team1_conference=data.get("team1Conference") or "East",
            team2_conference=data.get("team2Conference") or "West",
            winner_conference=data.get("winnerConference") or "",
            predicted_mvp=data.get("predictedMVP") or "",
        )


def _common_fields(data: dict, conference: str) -> dict:
    return {
        "team1": data.get("team1") or "",
        "team1_seed": _int_or_none(data.get("team1Seed")),
        "team2": data.get("team2") or "",
        "team2_seed": _int_or_none(data.get("team2Seed")),
        "winner": data.get("winner") or "",
        "winner_seed": _int_or_none(data.get("winnerSeed")),
        # "gamesPlayed" is what older exports called it
        "num_games": _int_or_none(data.get("numGames", data.get("gamesPlayed"))),
        "conference": data.get("conference") or conference,
    }


def _int_or_none(value) -> int | None:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
