"""Roster loader - which teams hold which seed in each conference.

Supports:
1. Interactive CLI entry
2. JSON file input
"""

import json
import os

import config
from models.team import Team


def load_roster_interactive(play_in: bool = False) -> tuple[list[Team], list[Team] | None]:
    """Interactively enter the playoff field via CLI prompts.

    Args:
        play_in: Also prompt for the play-in seeds (7-10)

    Returns:
        (teams for seeds 1-8, play-in teams for seeds 7-10 or None)
    """
    teams = []
    play_in_teams = [] if play_in else None

    print("\n=== ROSTER ENTRY ===")
    print("Enter team names by seed. Leave a seed blank to fill it later.\n")

    for conference in config.CONFERENCES:
        for seed in range(1, config.TEAMS_PER_CONFERENCE + 1):
            name = input(f"  {conference} #{seed} seed: ").strip()
            if name:
                teams.append(Team(name, seed, conference))
        if play_in:
            for seed in config.PLAY_IN_SEEDS:
                name = input(f"  {conference} play-in #{seed} seed: ").strip()
                if name:
                    play_in_teams.append(Team(name, seed, conference))
        print(f"  -> {conference} loaded\n")

    return teams, play_in_teams


def load_roster_from_json(filepath: str) -> tuple[list[Team], list[Team] | None]:
    """Load the playoff field from a JSON file.

    Expected format:
    {
        "conferences": [
            {
                "name": "East",
                "teams": {"1": "Celtics", "2": "Knicks", ..., "8": "Heat"},
                "playIn": {"7": "Magic", "8": "Heat", "9": "Bulls", "10": "Hawks"}
            },
            ...
        ]
    }
    "playIn" is optional; without it in any conference the play-in is disabled.
    """
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)

    teams = []
    play_in_teams = None

    for conf_data in data["conferences"]:
        conference = conf_data["name"]
        if conference not in config.CONFERENCES:
            raise ValueError(f"Unknown conference {conference!r} in {filepath}")

        for seed_str, name in conf_data.get("teams", {}).items():
            if name:
                teams.append(Team(name.strip(), int(seed_str), conference))

        if "playIn" in conf_data:
            play_in_teams = play_in_teams or []
            for seed_str, name in conf_data["playIn"].items():
                seed = int(seed_str)
                if seed not in config.PLAY_IN_SEEDS:
                    raise ValueError(f"Play-in seed must be one of {config.PLAY_IN_SEEDS}, got {seed}")
                if name:
                    play_in_teams.append(Team(name.strip(), seed, conference))

    print(f"Loaded roster from {filepath}: {len(teams)} teams"
          + (f", {len(play_in_teams)} in the play-in" if play_in_teams else ""))
    return teams, play_in_teams


def save_roster_to_json(teams: list[Team], play_in_teams: list[Team] | None, filepath: str):
    """Save a roster in the format load_roster_from_json reads."""
    data = {"conferences": []}

    for conference in config.CONFERENCES:
        conf_data = {
            "name": conference,
            "teams": {str(t.seed): t.name for t in sorted(teams, key=lambda t: t.seed)
                      if t.conference == conference},
        }
        if play_in_teams is not None:
            conf_data["playIn"] = {
                str(t.seed): t.name for t in sorted(play_in_teams, key=lambda t: t.seed)
                if t.conference == conference
            }
        data["conferences"].append(conf_data)

    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    print(f"Saved roster to {filepath}")
