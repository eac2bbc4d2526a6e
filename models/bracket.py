"""Bracket tree data structure.

The bracket is stored as flat, index-addressed lists of matchups per round
plus a single finals matchup:
- First round:           8 series, indices 0-3 East, 4-7 West
- Conference semifinals: 4 series, indices 0-1 East, 2-3 West
- Conference finals:     2 series, index 0 East, index 1 West
- NBA Finals:            East champion on team1, West champion on team2

Within a conference, first round series are ordered by seed matchup:
1v8, 4v5, 3v6, 2v7. The winners of series 2k and 2k+1 meet in the next
round, the even index filling team1 and the odd index team2.
"""

from __future__ import annotations

import copy

import config
from models.matchup import FinalMatchup, Matchup
from models.play_in import PlayIn
from models.rounds import ARRAY_ROUNDS, BRACKET_ROUNDS, LEGACY_KEYS, Round, parse_round
from models.team import Team

# Older documents kept these at the top level under display names
LEGACY_FIELDS = {"Champion": "champion", "ChampionSeed": "championSeed", "Finals MVP": "finalsMVP"}


def conference_index(conference: str) -> int:
    """0 for East, 1 for West."""
    if conference not in config.CONFERENCES:
        raise ValueError(f"Unknown conference: {conference!r}")
    return config.CONFERENCES.index(conference)


def conference_for(round_: Round, index: int) -> str:
    """The conference a slot belongs to, from its position. Empty for the finals."""
    if round_ is Round.FINALS:
        return ""
    per_conference = round_.size // len(config.CONFERENCES)
    return config.CONFERENCES[index // per_conference]


def next_slot(round_: Round, index: int, conference: str = "") -> tuple[Round, int, int] | None:
    """Where the winner of a series goes next.

    Args:
        round_: Round of the decided series
        index: Index of the series within its round
        conference: Conference tag of the series (derived from index if empty)

    Returns:
        (next_round, next_index, side) with side 1 for team1 and 2 for team2,
        or None for the finals, whose winner is the champion.
    """
    if round_ in (Round.FINALS, Round.PLAY_IN):
        return None
    conference = conference or conference_for(round_, index)
    per_conference = round_.size // len(config.CONFERENCES)
    position = index % per_conference
    side = 1 if position % 2 == 0 else 2

    if round_ is Round.FIRST_ROUND:
        offset = conference_index(conference) * (per_conference // 2)
        return Round.CONF_SEMIS, position // 2 + offset, side
    if round_ is Round.CONF_SEMIS:
        return Round.CONF_FINALS, conference_index(conference), side
    # Conference finals: East always team1, West always team2
    return Round.FINALS, 0, conference_index(conference) + 1


def first_round_slot(conference: str, seed: int) -> tuple[int, int]:
    """First round (index, side) that a given seed starts in."""
    offset = conference_index(conference) * len(config.SEED_MATCHUPS)
    for i, pair in enumerate(config.SEED_MATCHUPS):
        if seed in pair:
            return offset + i, pair.index(seed) + 1
    raise ValueError(f"Seed {seed} has no first round slot")


class BracketTree:
    """A full playoff bracket: either the official results or one participant's picks."""

    def __init__(self, play_in: bool = False):
        self.rounds: dict[Round, list[Matchup]] = {
            rnd: _empty_round(rnd) for rnd in ARRAY_ROUNDS
        }
        self.finals = FinalMatchup()
        self.champion = ""
        self.champion_seed: int | None = None
        self.finals_mvp = ""
        self.play_in: PlayIn | None = PlayIn() if play_in else None

    def matchup(self, round_: Round | str, index: int = 0) -> Matchup:
        round_ = parse_round(round_)
        if round_ is Round.FINALS:
            if index != 0:
                raise IndexError(f"The finals has a single series, got index {index}")
            return self.finals
        if round_ is Round.PLAY_IN:
            raise ValueError("Play-in games are addressed by conference, not index")
        matchups = self.rounds[round_]
        if not 0 <= index < len(matchups):
            raise IndexError(f"{round_.display_name} has no series {index}")
        return matchups[index]

    def matchups(self, round_: Round | str) -> list[Matchup]:
        round_ = parse_round(round_)
        if round_ is Round.FINALS:
            return [self.finals]
        return self.rounds[round_]

    def iter_matchups(self):
        """Yield (round, index, matchup) for every series in the main bracket."""
        for rnd in BRACKET_ROUNDS:
            for i, m in enumerate(self.matchups(rnd)):
                yield rnd, i, m

    def first_round_teams(self) -> list[Team]:
        teams = []
        for i, m in enumerate(self.rounds[Round.FIRST_ROUND]):
            conference = m.conference or conference_for(Round.FIRST_ROUND, i)
            for side in (1, 2):
                name, seed = m.team(side), m.seed(side)
                if name and seed is not None:
                    teams.append(Team(name, seed, conference))
        return teams

    def copy(self) -> BracketTree:
        """Create a deep copy of this bracket."""
        return copy.deepcopy(self)

    def is_complete(self) -> bool:
        """Check if every series in the main bracket has a winner."""
        return all(m.is_decided for _, _, m in self.iter_matchups())

    def validate(self) -> list[str]:
        """Check structural invariants. Returns a list of problems (empty if valid)."""
        problems = []
        for rnd in ARRAY_ROUNDS:
            if len(self.rounds[rnd]) != rnd.size:
                problems.append(f"{rnd.display_name} has {len(self.rounds[rnd])} series, expected {rnd.size}")

        for rnd, i, m in self.iter_matchups():
            label = f"{rnd.display_name} #{i}"
            if m.is_decided and m.side_of(m.winner) is None:
                problems.append(f"{label}: winner {m.winner!r} is not in the matchup")
            elif m.is_decided and m.winner_seed is not None:
                side_seed = m.seed(m.side_of(m.winner))
                if side_seed is not None and side_seed != m.winner_seed:
                    problems.append(f"{label}: winner seed {m.winner_seed} does not match {side_seed}")
            if m.num_games is not None and m.num_games not in config.SERIES_GAMES_OPTIONS:
                problems.append(f"{label}: invalid series length {m.num_games}")

            target = next_slot(rnd, i, m.conference)
            if m.is_decided and target and len(self.matchups(target[0])) > target[1]:
                fed = self.matchup(target[0], target[1]).team(target[2])
                if fed != m.winner:
                    problems.append(f"{label}: winner {m.winner!r} not advanced (found {fed!r})")

        if self.champion != self.finals.winner:
            problems.append(f"Champion {self.champion!r} does not match finals winner {self.finals.winner!r}")
        if self.finals_mvp != self.finals.predicted_mvp:
            problems.append("Finals MVP fields are out of sync")
        return problems

    def to_dict(self) -> dict:
        data = {rnd.value: [m.to_dict() for m in self.rounds[rnd]] for rnd in ARRAY_ROUNDS}
        data[Round.FINALS.value] = self.finals.to_dict()
        data["champion"] = self.champion
        data["championSeed"] = self.champion_seed
        data["finalsMVP"] = self.finals_mvp
        data["playIn"] = self.play_in.to_dict() if self.play_in is not None else None
        return data

    @classmethod
    def from_dict(cls, data: dict | None) -> BracketTree:
        """Build a tree from a stored document, repairing missing or mis-sized rounds."""
        data = _normalize_keys(data or {})
        tree = cls()
        for rnd in ARRAY_ROUNDS:
            stored = data.get(rnd.value) or []
            tree.rounds[rnd] = [
                Matchup.from_dict(stored[i] if i < len(stored) else None, conference_for(rnd, i))
                for i in range(rnd.size)
            ]
        tree.finals = FinalMatchup.from_dict(data.get(Round.FINALS.value))
        tree.champion = data.get("champion") or ""
        tree.champion_seed = data.get("championSeed")
        tree.finals_mvp = data.get("finalsMVP") or tree.finals.predicted_mvp
        tree.finals.predicted_mvp = tree.finals.predicted_mvp or tree.finals_mvp
        if data.get(Round.PLAY_IN.value):
            tree.play_in = PlayIn.from_dict(data[Round.PLAY_IN.value])
        return tree


def _empty_round(round_: Round) -> list[Matchup]:
    return [Matchup(conference=conference_for(round_, i)) for i in range(round_.size)]


def _normalize_keys(data: dict) -> dict:
    """Map display-name keys from older documents onto round identifiers."""
    normalized = dict(data)
    for legacy, rnd in LEGACY_KEYS.items():
        if legacy in normalized and rnd.value not in normalized:
            normalized[rnd.value] = normalized.pop(legacy)
    for legacy, key in LEGACY_FIELDS.items():
        if legacy in normalized and key not in normalized:
            normalized[key] = normalized.pop(legacy)
    return normalized
