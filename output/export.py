"""League export and import.

A snapshot is plain JSON:
{
    "playoffs": {...official bracket...},
    "users": {"alice": {"bracket": {...}}, ...},
    "scores": {"alice": {...score record...}, ...}
}
Scores are informational; importing recomputes them from the brackets.
"""

import csv
import json
import os

from models.bracket import BracketTree
from models.score import ScoreRecord
from scoring.leaderboard import LeaderboardEntry


def build_snapshot(official: BracketTree, trees: dict[str, BracketTree],
                   scores: dict[str, ScoreRecord] | None = None) -> dict:
    snapshot = {
        "playoffs": official.to_dict(),
        "users": {pid: {"bracket": tree.to_dict()} for pid, tree in trees.items()},
    }
    if scores is not None:
        snapshot["scores"] = {pid: record.to_dict() for pid, record in scores.items()}
    return snapshot


def parse_snapshot(data: dict) -> tuple[BracketTree, dict[str, BracketTree]]:
    """Read the official bracket and participant brackets out of a snapshot."""
    if not data.get("playoffs"):
        raise ValueError("Snapshot has no official bracket under 'playoffs'")
    official = BracketTree.from_dict(data["playoffs"])
    trees = {}
    for pid, user in (data.get("users") or {}).items():
        # Older exports stored the bracket directly under the user id
        bracket = user.get("bracket", user) if isinstance(user, dict) else None
        trees[pid] = BracketTree.from_dict(bracket)
    return official, trees


def write_snapshot(snapshot: dict, filepath: str):
    """Save a snapshot as JSON."""
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(snapshot, f, indent=2)
    print(f"Exported official bracket and {len(snapshot.get('users', {}))} brackets to {filepath}")


def read_snapshot(filepath: str) -> dict:
    with open(filepath, "r", encoding="utf-8") as f:
        return json.load(f)


def export_leaderboard_csv(entries: list[LeaderboardEntry], filepath: str):
    """Export the leaderboard as a CSV file.

    Columns: rank, participant, total, base, series_length, upset, finals_mvp,
    play_in, correct_picks, max_possible, champion_pick
    """
    with open(filepath, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["rank", "participant", "total", "base", "series_length", "upset",
                         "finals_mvp", "play_in", "correct_picks", "max_possible", "champion_pick"])
        for e in entries:
            s = e.score
            writer.writerow([e.rank, e.display_name, s.total, s.base_points, s.series_length_points,
                             s.upset_points, s.finals_mvp_points, s.play_in_points,
                             s.correct_picks, s.max_possible, e.champion_pick])

    print(f"Exported {len(entries)} leaderboard rows to {filepath}")
