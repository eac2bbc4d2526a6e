"""League scoring configuration.

Every field is optional in the stored document; anything missing or invalid
falls back to the defaults in config.py. Two document shapes are accepted:

    {"basePoints": {"firstRound": 1, ...}, "seriesBonus": {...}, "upsetBonus": 2, ...}

and the flat shape older leagues were saved with:

    {"First Round": 1, "seriesLengthFirstRound": 0.5, "upsetBonusEnabled": true, ...}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import config
from engine.errors import InconsistentConfig
from models.rounds import BRACKET_ROUNDS, DISPLAY_NAMES, Round

logger = logging.getLogger(__name__)

# Flat keys used by older league documents
LEGACY_SERIES_KEYS = {
    "seriesLengthFirstRound": Round.FIRST_ROUND,
    "seriesLengthConfSemis": Round.CONF_SEMIS,
    "seriesLengthConfFinals": Round.CONF_FINALS,
    "seriesLengthNBAFinals": Round.FINALS,
}
LEGACY_SCALARS = {
    "playInCorrectPrediction": "playInPoints",
    "playInTournamentEnabled": "playInEnabled",
    "Finals MVP": "finalsMvpPoints",
    "Champion": "championBonus",
}


@dataclass
class RoundScoring:
    base_points: float
    series_bonus: float = 0


def _default_rounds() -> dict[Round, RoundScoring]:
    rounds = {}
    for rnd in BRACKET_ROUNDS:
        rounds[rnd] = RoundScoring(
            base_points=config.DEFAULT_BASE_POINTS[rnd.value],
            series_bonus=config.DEFAULT_SERIES_BONUS.get(rnd.value, 0),
        )
    return rounds


@dataclass
class ScoringConfig:
    rounds: dict[Round, RoundScoring] = field(default_factory=_default_rounds)
    upset_bonus_enabled: bool = True
    upset_bonus: float = config.DEFAULT_UPSET_BONUS
    series_length_bonus_enabled: bool = True
    play_in_enabled: bool = True
    play_in_points: float = config.DEFAULT_PLAY_IN_POINTS
    finals_mvp_points: float = config.DEFAULT_FINALS_MVP_POINTS
    champion_bonus: float = config.DEFAULT_CHAMPION_BONUS

    def base_points(self, round_: Round) -> float:
        return self.rounds[round_].base_points

    def series_bonus(self, round_: Round) -> float:
        if not self.series_length_bonus_enabled:
            return 0
        return self.rounds[round_].series_bonus

    @classmethod
    def from_dict(cls, data: dict | None) -> ScoringConfig:
        """Parse a stored scoring document, falling back per field on bad values."""
        cfg = cls()
        data = _normalize(data or {})

        for rnd, values in data.get("basePoints", {}).items():
            rnd = _round_or_none(rnd)
            if rnd in cfg.rounds:
                cfg.rounds[rnd].base_points = _field(
                    f"basePoints.{rnd.value}", values, cfg.rounds[rnd].base_points)
        for rnd, values in data.get("seriesBonus", {}).items():
            rnd = _round_or_none(rnd)
            if rnd in cfg.rounds:
                cfg.rounds[rnd].series_bonus = _field(
                    f"seriesBonus.{rnd.value}", values, cfg.rounds[rnd].series_bonus)

        cfg.upset_bonus_enabled = _flag("upsetBonusEnabled", data.get("upsetBonusEnabled"), True)
        cfg.series_length_bonus_enabled = _flag(
            "seriesLengthBonusEnabled", data.get("seriesLengthBonusEnabled"), True)
        cfg.play_in_enabled = _flag("playInEnabled", data.get("playInEnabled"), True)
        cfg.upset_bonus = _field("upsetBonus", data.get("upsetBonus"), cfg.upset_bonus)
        cfg.play_in_points = _field("playInPoints", data.get("playInPoints"), cfg.play_in_points)
        cfg.finals_mvp_points = _field(
            "finalsMvpPoints", data.get("finalsMvpPoints"), cfg.finals_mvp_points)
        cfg.champion_bonus = _field("championBonus", data.get("championBonus"), cfg.champion_bonus)
        return cfg

    def to_dict(self) -> dict:
        return {
            "basePoints": {rnd.value: r.base_points for rnd, r in self.rounds.items()},
            "seriesBonus": {rnd.value: r.series_bonus for rnd, r in self.rounds.items()},
            "upsetBonusEnabled": self.upset_bonus_enabled,
            "upsetBonus": self.upset_bonus,
            "seriesLengthBonusEnabled": self.series_length_bonus_enabled,
            "playInEnabled": self.play_in_enabled,
            "playInPoints": self.play_in_points,
            "finalsMvpPoints": self.finals_mvp_points,
            "championBonus": self.champion_bonus,
        }


def validate_points(name: str, value) -> float:
    """Return value as a number of points, or raise InconsistentConfig."""
    if isinstance(value, bool):
        raise InconsistentConfig(name, value, "expected a number, got a boolean")
    try:
        points = float(value)
    except (TypeError, ValueError):
        raise InconsistentConfig(name, value, "not a number") from None
    if points < 0 or points != points:
        raise InconsistentConfig(name, value, "must be zero or positive")
    return int(points) if points.is_integer() else points


def _field(name: str, value, default: float) -> float:
    if value is None:
        return default
    try:
        return validate_points(name, value)
    except InconsistentConfig as e:
        logger.warning("%s; using default %s", e, default)
        return default


def _flag(name: str, value, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    logger.warning("%s", InconsistentConfig(name, value, "expected true or false"))
    return default


def _round_or_none(key: str) -> Round | None:
    try:
        return Round(key)
    except ValueError:
        logger.warning("Ignoring scoring value for unknown round %r", key)
        return None


def _normalize(data: dict) -> dict:
    """Fold the flat legacy keys into the nested shape."""
    normalized = dict(data)
    base = dict(normalized.get("basePoints") or {})
    series = dict(normalized.get("seriesBonus") or {})

    for rnd, name in DISPLAY_NAMES.items():
        if name in data and rnd.value not in base:
            base[rnd.value] = data[name]
    for key, rnd in LEGACY_SERIES_KEYS.items():
        if key in data and rnd.value not in series:
            series[rnd.value] = data[key]
    for legacy, key in LEGACY_SCALARS.items():
        if legacy in data and key not in normalized:
            normalized[key] = data[legacy]
    # Play-in games are scored by playInPoints
    play_in_base = base.pop(Round.PLAY_IN.value, None)
    if play_in_base is not None and "playInPoints" not in normalized:
        normalized["playInPoints"] = play_in_base

    normalized["basePoints"] = base
    normalized["seriesBonus"] = series
    return normalized
