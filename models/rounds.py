"""Round identifiers for the playoff bracket."""

from __future__ import annotations

from enum import Enum

import config


class Round(str, Enum):
    PLAY_IN = config.PLAY_IN
    FIRST_ROUND = config.FIRST_ROUND
    CONF_SEMIS = config.CONF_SEMIS
    CONF_FINALS = config.CONF_FINALS
    FINALS = config.FINALS

    @property
    def display_name(self) -> str:
        return DISPLAY_NAMES[self]

    @property
    def size(self) -> int:
        """Number of series in this round (0 for the play-in, which is per conference)."""
        return config.MATCHUPS_PER_ROUND.get(self.value, 0)

    def next(self) -> Round | None:
        """The round a winner of this round advances into."""
        if self in (Round.PLAY_IN, Round.FINALS):
            return None
        return BRACKET_ROUNDS[BRACKET_ROUNDS.index(self) + 1]


# Rounds of the main bracket, in order
BRACKET_ROUNDS = (Round.FIRST_ROUND, Round.CONF_SEMIS, Round.CONF_FINALS, Round.FINALS)

# Rounds stored as index-addressed lists (the finals is a single matchup)
ARRAY_ROUNDS = (Round.FIRST_ROUND, Round.CONF_SEMIS, Round.CONF_FINALS)

DISPLAY_NAMES = {
    Round.PLAY_IN: "Play In Tournament",
    Round.FIRST_ROUND: "First Round",
    Round.CONF_SEMIS: "Conference Semifinals",
    Round.CONF_FINALS: "Conference Finals",
    Round.FINALS: "NBA Finals",
}

# Older league documents key everything by display name
LEGACY_KEYS = {name: rnd for rnd, name in DISPLAY_NAMES.items()}


def parse_round(value: str | Round) -> Round:
    """Accept a Round, its identifier ("confSemis") or its display name."""
    if isinstance(value, Round):
        return value
    if value in LEGACY_KEYS:
        return LEGACY_KEYS[value]
    try:
        return Round(value)
    except ValueError:
        raise ValueError(f"Unknown round: {value!r}") from None
