"""Leaderboard ranking and league-wide statistics."""

from dataclasses import dataclass

import numpy as np

import config
from models.bracket import BracketTree
from models.play_in import PLAY_IN_GAMES
from models.rounds import BRACKET_ROUNDS, Round
from models.score import ScoreRecord


@dataclass
class LeaderboardEntry:
    rank: int
    participant_id: str
    display_name: str
    score: ScoreRecord
    champion_pick: str = ""
    champion_correct: bool = False
    mvp_pick: str = ""
    mvp_correct: bool = False

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "participantId": self.participant_id,
            "displayName": self.display_name,
            "championPick": self.champion_pick,
            "championCorrect": self.champion_correct,
            "mvpPick": self.mvp_pick,
            "mvpCorrect": self.mvp_correct,
            **self.score.to_dict(),
        }


def build_leaderboard(scores: dict[str, ScoreRecord],
                      predicted_trees: dict[str, BracketTree] | None = None,
                      official: BracketTree | None = None,
                      names: dict[str, str] | None = None) -> list[LeaderboardEntry]:
    """Sort participants into a ranked leaderboard.

    Order: total points (high first), then correct picks (high first), then
    participant id. Participants level on both points and correct picks
    share a rank.

    Args:
        scores: {participant_id: ScoreRecord}
        predicted_trees: Participant brackets, for champion/MVP pick columns
        official: Official bracket, to mark champion/MVP picks correct
        names: Optional {participant_id: display name}
    """
    predicted_trees = predicted_trees or {}
    names = names or {}
    ordered = sorted(
        scores.items(),
        key=lambda item: (-item[1].total, -item[1].correct_picks, item[0]),
    )

    entries = []
    previous_key = None
    rank = 0
    for position, (pid, record) in enumerate(ordered, 1):
        key = (record.total, record.correct_picks)
        if key != previous_key:
            rank = position
            previous_key = key

        tree = predicted_trees.get(pid)
        entry = LeaderboardEntry(
            rank=rank,
            participant_id=pid,
            display_name=names.get(pid, pid),
            score=record,
            mvp_correct=record.mvp.correct_prediction,
        )
        if tree is not None:
            entry.champion_pick = tree.champion
            entry.mvp_pick = tree.finals_mvp
            if official is not None and official.champion:
                entry.champion_correct = tree.champion == official.champion
        entries.append(entry)
    return entries


def league_stats(entries: list[LeaderboardEntry]) -> dict:
    """Summary statistics across all participants.

    Returns:
        {"participants", "average", "median", "high", "low", "stdDev",
         "roundAccuracy": {round_id: share of all picks in that round that were right}}
    """
    if not entries:
        return {"participants": 0, "average": 0.0, "median": 0.0, "high": 0.0,
                "low": 0.0, "stdDev": 0.0, "roundAccuracy": {}}

    totals = np.array([e.score.total for e in entries], dtype=float)
    stats = {
        "participants": len(entries),
        "average": round(float(np.mean(totals)), 2),
        "median": round(float(np.median(totals)), 2),
        "high": float(np.max(totals)),
        "low": float(np.min(totals)),
        "stdDev": round(float(np.std(totals)), 2),
        "roundAccuracy": {},
    }

    for rnd in (Round.PLAY_IN,) + BRACKET_ROUNDS:
        correct = np.array([
            e.score.round_breakdown[rnd.value].correct_picks
            for e in entries if rnd.value in e.score.round_breakdown
        ])
        if correct.size:
            stats["roundAccuracy"][rnd.value] = _accuracy(rnd, correct, len(entries))
    return stats


def _accuracy(rnd: Round, correct: np.ndarray, participants: int) -> float:
    """Share of all picks in a round that were correct."""
    series = len(PLAY_IN_GAMES) * len(config.CONFERENCES) if rnd is Round.PLAY_IN else rnd.size
    return round(float(correct.sum()) / (series * participants), 4)
