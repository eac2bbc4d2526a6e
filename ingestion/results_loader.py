"""Bulk entry of official results from a CSV.

Used to catch up on several results at once instead of entering them one
by one. Expected columns: round, index, winner [, games, mvp]
Play-in rows use round "playIn" and name the game with conference and
game columns (game is seventhEighth, ninthTenth or final).
Rows are applied top to bottom, so list earlier rounds first.
"""

import pandas as pd

from engine.propagation import apply_play_in_result, apply_result
from models.bracket import BracketTree
from models.rounds import Round, parse_round


def load_results_from_csv(filepath: str) -> list[dict]:
    """Read results from a CSV file.

    Returns:
        [{"round": Round, "index", "conference", "game", "winner", "num_games", "mvp"}]
    """
    df = pd.read_csv(filepath, dtype=str).fillna("")
    missing = {"round", "winner"} - set(df.columns)
    if missing:
        raise ValueError(f"{filepath} is missing columns: {', '.join(sorted(missing))}")

    results = []
    for _, row in df.iterrows():
        games = str(row.get("games", "")).strip()
        index = str(row.get("index", "")).strip()
        results.append({
            "round": parse_round(row["round"].strip()),
            "index": int(index) if index else 0,
            "conference": str(row.get("conference", "")).strip(),
            "game": str(row.get("game", "")).strip(),
            "winner": row["winner"].strip(),
            "num_games": int(games) if games else None,
            "mvp": str(row.get("mvp", "")).strip() or None,
        })

    print(f"Loaded {len(results)} results from {filepath}")
    return results


def apply_results(tree: BracketTree, results: list[dict]) -> BracketTree:
    """Apply results in order. Stops at the first invalid one (nothing is kept from a failed run)."""
    for r in results:
        if r["round"] is Round.PLAY_IN:
            tree = apply_play_in_result(tree, r["conference"], r["game"], r["winner"])
        else:
            tree = apply_result(tree, r["round"], r["index"], r["winner"],
                                num_games=r["num_games"], mvp=r["mvp"])
    return tree
