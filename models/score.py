"""Participant score records. Derived data, recomputed on demand."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class RoundScore:
    correct_picks: int = 0
    base_points: float = 0
    series_length_points: float = 0
    series_length_correct: int = 0
    upset_points: float = 0
    possible_points: float = 0

    @property
    def total_points(self) -> float:
        return self.base_points + self.series_length_points + self.upset_points

    def to_dict(self) -> dict:
        return {
            "correctPicks": self.correct_picks,
            "basePoints": self.base_points,
            "seriesLengthPoints": self.series_length_points,
            "seriesLengthCorrect": self.series_length_correct,
            "upsetPoints": self.upset_points,
            "totalPoints": self.total_points,
            "possiblePoints": self.possible_points,
        }


@dataclass
class MvpScore:
    correct_prediction: bool = False
    base_points: float = 0

    def to_dict(self) -> dict:
        return {
            "correctPrediction": self.correct_prediction,
            "basePoints": self.base_points,
            "totalPoints": self.base_points,
        }


@dataclass
class ScoreRecord:
    base_points: float = 0
    series_length_points: float = 0
    upset_points: float = 0
    finals_mvp_points: float = 0
    play_in_points: float = 0
    champion_points: float = 0
    correct_picks: int = 0
    correct_series: int = 0
    max_possible: float = 0
    # {round_id: RoundScore}; the Finals MVP lives under "mvp"
    round_breakdown: dict[str, RoundScore] = field(default_factory=dict)
    mvp: MvpScore = field(default_factory=MvpScore)

    @property
    def total(self) -> float:
        return (self.base_points + self.series_length_points + self.upset_points
                + self.finals_mvp_points + self.play_in_points + self.champion_points)

    @property
    def possible_points(self) -> float:
        return self.total + self.max_possible

    def to_dict(self) -> dict:
        breakdown = {key: rs.to_dict() for key, rs in self.round_breakdown.items()}
        breakdown["mvp"] = self.mvp.to_dict()
        return {
            "total": self.total,
            "basePoints": self.base_points,
            "seriesLengthPoints": self.series_length_points,
            "upsetPoints": self.upset_points,
            "finalsMvpPoints": self.finals_mvp_points,
            "playInPoints": self.play_in_points,
            "championPoints": self.champion_points,
            "correctPicks": self.correct_picks,
            "correctSeries": self.correct_series,
            "maxPossible": self.max_possible,
            "possiblePoints": self.possible_points,
            "roundBreakdown": breakdown,
        }
