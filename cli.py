"""Playoff Pool - CLI entry point.

Usage:
    python cli.py init [--file roster.json | --interactive] [--play-in]
    python cli.py result confSemis 1 "Knicks" --games 6
    python cli.py play-in East seventhEighth "Magic"
    python cli.py join alice --name "Alice"
    python cli.py pick alice firstRound 0 "Celtics" --games 5
    python cli.py leaderboard [--csv path]
    python cli.py export [--output path]
"""

import argparse
import json
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import config
from engine.errors import BracketError


def get_service(args):
    """Build the league service for the store selected on the command line."""
    from league.service import LeagueService

    if args.store_url:
        from storage.http_store import HttpDocumentStore
        store = HttpDocumentStore(args.store_url)
    else:
        from storage.document_store import JsonFileDocumentStore
        store = JsonFileDocumentStore(args.data_dir)
    return LeagueService(store, league_id=args.league, actor=args.actor, show_progress=True)


def report_batch(result):
    """Print a fan-out outcome; partial failures are listed, not hidden."""
    if result is None:
        return
    print(f"\n{result.summary().capitalize()}")
    if not result.ok:
        print(f"WARNING: {len(result.failed)} brackets were not updated: {', '.join(result.failed)}")
        print("Re-run the same command to retry; it is safe to repeat.")


def _load_roster(args):
    from ingestion.roster_loader import load_roster_from_json, load_roster_interactive, save_roster_to_json

    if args.file:
        return load_roster_from_json(args.file)
    if not args.interactive:
        print("ERROR: Pass --file roster.json or --interactive")
        sys.exit(1)
    teams, play_in_teams = load_roster_interactive(play_in=args.play_in)
    save_roster_to_json(teams, play_in_teams, os.path.join(args.data_dir, "raw", "roster.json"))
    return teams, play_in_teams


# --- Commands ---

def cmd_init(args):
    """Create the official bracket from the roster."""
    teams, play_in_teams = _load_roster(args)
    official = get_service(args).initialize(teams, play_in_teams)
    print(f"\nLeague '{args.league}' ready: {len(official.first_round_teams())} teams seeded"
          + (", play-in enabled" if official.play_in is not None else ""))


def cmd_roster(args):
    """Replace the roster and reconcile every participant's bracket."""
    teams, play_in_teams = _load_roster(args)
    report_batch(get_service(args).update_roster(teams, play_in_teams))


def cmd_result(args):
    """Record an official series result."""
    official = get_service(args).record_result(args.round, args.index, args.winner,
                                               num_games=args.games, mvp=args.mvp)
    print(f"\nRecorded: {args.winner}" + (f" in {args.games}" if args.games else ""))
    if official.is_complete():
        print(f"Playoffs complete. Champion: {official.champion}")


def cmd_play_in(args):
    """Record an official play-in result."""
    get_service(args).record_play_in_result(args.conference, args.game, args.winner)
    print(f"\nRecorded: {args.winner} wins {args.conference} {args.game}")


def cmd_mvp(args):
    get_service(args).set_finals_mvp(args.name)
    print(f"\nFinals MVP: {args.name}")


def cmd_clear(args):
    """Clear a result entered by mistake."""
    get_service(args).clear_result(args.round, args.index)
    print(f"\nCleared {args.round} #{args.index} and everything downstream")


def cmd_reset(args):
    """Reset official results (and optionally every participant's picks)."""
    result = get_service(args).reset_results(preserve_teams=not args.clear_teams,
                                             include_participants=args.participants)
    print(f"\nResults cleared{', teams cleared' if args.clear_teams else ''}")
    report_batch(result)


def cmd_rename(args):
    report_batch(get_service(args).rename_team(args.old, args.new))


def cmd_join(args):
    get_service(args).join(args.participant, args.name)
    print(f"\n{args.participant} has a bracket in league '{args.league}'")


def cmd_pick(args):
    """Record a participant's pick."""
    get_service(args).record_pick(args.participant, args.round, args.index, args.winner,
                                  num_games=args.games, mvp=args.mvp)
    print(f"\n{args.participant} picks {args.winner}" + (f" in {args.games}" if args.games else ""))


def cmd_pick_play_in(args):
    get_service(args).record_play_in_pick(args.participant, args.conference, args.game, args.winner)
    print(f"\n{args.participant} picks {args.winner} in {args.conference} {args.game}")


def cmd_load_results(args):
    """Apply a CSV of official results in one go."""
    from ingestion.results_loader import load_results_from_csv

    results = load_results_from_csv(args.file)
    get_service(args).record_results(results)
    print(f"\nApplied {len(results)} results")


def cmd_config(args):
    """Show or replace the league scoring settings."""
    service = get_service(args)
    if args.file:
        with open(args.file, "r", encoding="utf-8") as f:
            scoring = service.save_config(json.load(f))
        print(f"\nSaved scoring settings from {args.file}")
    else:
        scoring = service.load_config()
    print(json.dumps(scoring.to_dict(), indent=2))


def cmd_show(args):
    """Display the official bracket or a participant's bracket."""
    from output.printer import print_bracket

    service = get_service(args)
    if args.participant:
        print_bracket(service.load_participant(args.participant), title=f"{args.participant.upper()}'S PICKS")
    else:
        print_bracket(service.load_official())


def cmd_score(args):
    from output.printer import print_score

    record = get_service(args).scores().get(args.participant)
    if record is None:
        print(f"ERROR: {args.participant} has not joined. Run 'python cli.py join {args.participant}' first.")
        return
    print_score(record, args.participant)


def cmd_leaderboard(args):
    from output.printer import print_leaderboard

    entries = get_service(args).leaderboard()
    print_leaderboard(entries)
    if args.csv:
        from output.export import export_leaderboard_csv
        export_leaderboard_csv(entries, args.csv)


def cmd_stats(args):
    from output.printer import print_stats
    from scoring.leaderboard import league_stats

    print_stats(league_stats(get_service(args).leaderboard(save=False)))


def cmd_export(args):
    from output.export import write_snapshot

    output_path = args.output or os.path.join(args.data_dir, f"{args.league}_export.json")
    write_snapshot(get_service(args).export_snapshot(), output_path)


def cmd_import(args):
    from output.export import read_snapshot

    report_batch(get_service(args).import_snapshot(read_snapshot(args.file)))


# --- Main ---

def main():
    parser = argparse.ArgumentParser(
        description="Playoff Pool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Workflow:
  1. python cli.py init --file roster.json --play-in   # Seed the bracket
  2. python cli.py config --file scoring.json          # Optional custom scoring
  3. python cli.py join alice                          # Each participant joins...
  4. python cli.py pick alice firstRound 0 Celtics     # ...and fills in picks
  5. python cli.py result firstRound 0 Celtics -g 5    # Enter results as they happen
  6. python cli.py leaderboard                         # See who's winning
        """
    )
    parser.add_argument("--league", default=config.DEFAULT_LEAGUE_ID, help="League id")
    parser.add_argument("--data-dir", default=config.DATA_DIR, help="Directory for league documents")
    parser.add_argument("--store-url", help="Use a remote document store instead of --data-dir")
    parser.add_argument("--actor", default=os.environ.get("USER", "admin"), help="Recorded on every change")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    rounds = [config.FIRST_ROUND, config.CONF_SEMIS, config.CONF_FINALS, config.FINALS]
    play_in_games = ["seventhEighth", "ninthTenth", "final"]

    for name, help_text in (("init", "Create the official bracket"),
                            ("roster", "Change the roster and reconcile brackets")):
        p = subparsers.add_parser(name, help=help_text)
        p.add_argument("--file", help="JSON roster file")
        p.add_argument("--interactive", action="store_true", help="Enter the roster interactively")
        p.add_argument("--play-in", action="store_true", help="Prompt for play-in seeds (interactive)")

    p_result = subparsers.add_parser("result", help="Record an official series result")
    p_result.add_argument("round", choices=rounds)
    p_result.add_argument("index", type=int)
    p_result.add_argument("winner")
    p_result.add_argument("-g", "--games", type=int, choices=config.SERIES_GAMES_OPTIONS)
    p_result.add_argument("--mvp", help="Finals MVP (finals only)")

    p_play_in = subparsers.add_parser("play-in", help="Record an official play-in result")
    p_play_in.add_argument("conference", choices=config.CONFERENCES)
    p_play_in.add_argument("game", choices=play_in_games)
    p_play_in.add_argument("winner")

    p_mvp = subparsers.add_parser("mvp", help="Set the official Finals MVP")
    p_mvp.add_argument("name")

    p_clear = subparsers.add_parser("clear", help="Clear an official result")
    p_clear.add_argument("round", choices=rounds)
    p_clear.add_argument("index", type=int)

    p_reset = subparsers.add_parser("reset", help="Clear all official results")
    p_reset.add_argument("--clear-teams", action="store_true", help="Also clear every team slot")
    p_reset.add_argument("--participants", action="store_true", help="Also reset every participant's picks")

    p_rename = subparsers.add_parser("rename", help="Rename a team everywhere")
    p_rename.add_argument("old")
    p_rename.add_argument("new")

    p_join = subparsers.add_parser("join", help="Create a participant's bracket")
    p_join.add_argument("participant")
    p_join.add_argument("--name", help="Display name")

    p_pick = subparsers.add_parser("pick", help="Record a participant's pick")
    p_pick.add_argument("participant")
    p_pick.add_argument("round", choices=rounds)
    p_pick.add_argument("index", type=int)
    p_pick.add_argument("winner")
    p_pick.add_argument("-g", "--games", type=int, choices=config.SERIES_GAMES_OPTIONS)
    p_pick.add_argument("--mvp", help="Finals MVP pick (finals only)")

    p_pick_pi = subparsers.add_parser("pick-play-in", help="Record a participant's play-in pick")
    p_pick_pi.add_argument("participant")
    p_pick_pi.add_argument("conference", choices=config.CONFERENCES)
    p_pick_pi.add_argument("game", choices=play_in_games)
    p_pick_pi.add_argument("winner")

    p_load = subparsers.add_parser("load-results", help="Apply official results from a CSV")
    p_load.add_argument("--file", required=True)

    p_config = subparsers.add_parser("config", help="Show or set scoring settings")
    p_config.add_argument("--file", help="JSON scoring settings to store")

    p_show = subparsers.add_parser("show", help="Display a bracket")
    p_show.add_argument("--participant", help="Show this participant's picks instead")

    p_score = subparsers.add_parser("score", help="Score breakdown for one participant")
    p_score.add_argument("participant")

    p_board = subparsers.add_parser("leaderboard", help="Rank all participants")
    p_board.add_argument("--csv", help="Also export to this CSV file")

    subparsers.add_parser("stats", help="League-wide statistics")

    p_export = subparsers.add_parser("export", help="Export a JSON snapshot of the league")
    p_export.add_argument("--output", help="Output file path")

    p_import = subparsers.add_parser("import", help="Load a JSON snapshot into the league")
    p_import.add_argument("--file", required=True)

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format=config.LOG_FORMAT)

    if not args.command:
        parser.print_help()
        return

    commands = {
        "init": cmd_init,
        "roster": cmd_roster,
        "result": cmd_result,
        "play-in": cmd_play_in,
        "mvp": cmd_mvp,
        "clear": cmd_clear,
        "reset": cmd_reset,
        "rename": cmd_rename,
        "join": cmd_join,
        "pick": cmd_pick,
        "pick-play-in": cmd_pick_play_in,
        "load-results": cmd_load_results,
        "config": cmd_config,
        "show": cmd_show,
        "score": cmd_score,
        "leaderboard": cmd_leaderboard,
        "stats": cmd_stats,
        "export": cmd_export,
        "import": cmd_import,
    }

    cmd_func = commands.get(args.command)
    if not cmd_func:
        parser.print_help()
        return
    try:
        cmd_func(args)
    except BracketError as e:
        print(f"ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
