"""Pretty-print brackets, scores and leaderboards."""

from tabulate import tabulate

import config
from models.bracket import BracketTree
from models.matchup import Matchup
from models.rounds import ARRAY_ROUNDS, BRACKET_ROUNDS, Round
from models.score import ScoreRecord
from models.team import seed_from_name
from scoring.leaderboard import LeaderboardEntry


def print_bracket(tree: BracketTree, title: str = "OFFICIAL BRACKET"):
    """Print the full bracket, conference by conference."""
    print("\n" + "=" * 60)
    print(f"           {title}")
    print("=" * 60)

    if tree.play_in is not None:
        print_play_in(tree)

    for conference in config.CONFERENCES:
        print(f"\n--- {conference.upper()} ---")
        for rnd in ARRAY_ROUNDS:
            print(f"  {rnd.display_name}:")
            for i, m in enumerate(tree.matchups(rnd)):
                if m.conference == conference:
                    print(f"    [{i}] {_describe(m)}")

    print(f"\n{'=' * 60}")
    print("           NBA FINALS")
    print("=" * 60)
    print(f"\n  {_describe(tree.finals)}")
    if tree.champion:
        print(f"  CHAMPION: {_label(tree.champion, tree.champion_seed)}")
    if tree.finals_mvp:
        print(f"  FINALS MVP: {tree.finals_mvp}")
    print("\n" + "=" * 60)


def print_play_in(tree: BracketTree):
    rows = []
    for conference, key, m in tree.play_in.iter_games():
        rows.append([conference, key, _label(m.team1, m.team1_seed), _label(m.team2, m.team2_seed),
                     m.winner or "-"])
    print("\n--- PLAY-IN ---")
    print(tabulate(rows, headers=["Conf", "Game", "Team 1", "Team 2", "Winner"], tablefmt="simple"))


def print_score(record: ScoreRecord, participant: str = ""):
    """Print one participant's score broken down by round."""
    print(f"\n=== SCORE{': ' + participant if participant else ''} ===\n")
    rows = []
    for rnd in (Round.PLAY_IN,) + BRACKET_ROUNDS:
        rs = record.round_breakdown.get(rnd.value)
        if rs is None:
            continue
        rows.append([rnd.display_name, rs.correct_picks, rs.base_points, rs.series_length_points,
                     rs.upset_points, rs.total_points, rs.possible_points])
    rows.append(["Finals MVP", int(record.mvp.correct_prediction), record.mvp.base_points, "", "",
                 record.finals_mvp_points, ""])
    headers = ["Round", "Correct", "Base", "Series", "Upset", "Total", "Possible"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    print(f"\n  Total: {record.total}   Max still possible: {record.max_possible}"
          f"   Ceiling: {record.possible_points}")


def print_leaderboard(entries: list[LeaderboardEntry]):
    print("\n=== LEADERBOARD ===\n")
    rows = []
    for e in entries:
        s = e.score
        champion = e.champion_pick or "-"
        if e.champion_correct:
            champion += " *"
        rows.append([e.rank, e.display_name, s.total, s.correct_picks, s.series_length_points,
                     s.upset_points, s.max_possible, champion])
    headers = ["#", "Participant", "Points", "Correct", "Series", "Upset", "Max left", "Champion"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))


def print_stats(stats: dict):
    print("\n=== LEAGUE STATS ===\n")
    rows = [[key, stats[key]] for key in ("participants", "average", "median", "high", "low", "stdDev")]
    print(tabulate(rows, tablefmt="simple"))
    if stats.get("roundAccuracy"):
        print()
        rows = [[Round(key).display_name, f"{acc:.1%}"] for key, acc in stats["roundAccuracy"].items()]
        print(tabulate(rows, headers=["Round", "Accuracy"], tablefmt="simple"))


def _label(name: str, seed: int | None) -> str:
    if not name:
        return "TBD"
    if seed is None or seed_from_name(name) is not None:
        return name
    return f"({seed}) {name}"


def _describe(m: Matchup) -> str:
    line = f"{_label(m.team1, m.team1_seed)} vs {_label(m.team2, m.team2_seed)}"
    if m.is_decided:
        line += f"  ->  {m.winner}"
        if m.num_games:
            line += f" in {m.num_games}"
    return line
