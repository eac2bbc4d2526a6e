"""League operations on top of a document store.

Each operation reads the brackets it needs, computes new brackets with the
pure engine functions and writes whole documents back. Nothing is cached
between calls.

Document layout for a league:
    leagues/{league}/gameData/current       official bracket
    leagues/{league}/settings/scoring       scoring configuration
    leagues/{league}/userData/{participant} one participant's bracket
    leagues/{league}/leaderboard/current    last computed leaderboard
"""

import logging
from datetime import datetime, timezone

import config
from engine.batch import BatchResult, run_batch
from engine.errors import MissingPrerequisite
from engine.propagation import (apply_play_in_result, apply_result, clear_result,
                                reset_results, set_finals_mvp)
from engine.reconciliation import (build_official_tree, create_participant_bracket,
                                   reconcile_roster, rename_team)
from ingestion.results_loader import apply_results
from models.bracket import BracketTree
from models.score import ScoreRecord
from models.scoring_config import ScoringConfig
from models.team import Team
from output.export import build_snapshot, parse_snapshot
from scoring.leaderboard import LeaderboardEntry, build_leaderboard, league_stats
from scoring.scorer import score_all_participants
from storage.document_store import DocumentStore

logger = logging.getLogger(__name__)


class LeagueService:
    """All admin and participant operations for one league."""

    def __init__(self, store: DocumentStore, league_id: str = config.DEFAULT_LEAGUE_ID,
                 actor: str = "admin", max_workers: int = config.DEFAULT_BATCH_WORKERS,
                 show_progress: bool = False):
        """
        Args:
            store: Where league documents live
            league_id: League to operate on
            actor: Id of whoever is making changes, recorded on every write
            max_workers: Thread pool size for participant fan-out
            show_progress: Show a progress bar during fan-out
        """
        self.store = store
        self.league_id = league_id
        self.actor = actor
        self.max_workers = max_workers
        self.show_progress = show_progress

    # --- Paths ---

    @property
    def official_path(self) -> str:
        return f"leagues/{self.league_id}/gameData/current"

    @property
    def config_path(self) -> str:
        return f"leagues/{self.league_id}/settings/scoring"

    @property
    def participants_path(self) -> str:
        return f"leagues/{self.league_id}/userData"

    @property
    def leaderboard_path(self) -> str:
        return f"leagues/{self.league_id}/leaderboard/current"

    def participant_path(self, participant_id: str) -> str:
        return f"{self.participants_path}/{participant_id}"

    # --- Official bracket ---

    def initialize(self, teams: list[Team], play_in_teams: list[Team] | None = None) -> BracketTree:
        """Create the official bracket from the roster, replacing any existing one."""
        official = build_official_tree(teams, play_in_teams)
        self._save_official(official)
        logger.info("League %s initialized with %d teams", self.league_id, len(teams))
        return official

    def load_official(self) -> BracketTree:
        doc = self.store.get(self.official_path)
        if doc is None:
            raise MissingPrerequisite(f"League {self.league_id!r} has no official bracket; run init first")
        return BracketTree.from_dict(doc)

    def record_result(self, round_, index: int, winner: str, winner_seed: int | None = None,
                      num_games: int | None = None, mvp: str | None = None) -> BracketTree:
        official = apply_result(self.load_official(), round_, index, winner, winner_seed, num_games, mvp)
        self._save_official(official)
        return official

    def record_results(self, results: list[dict]) -> BracketTree:
        """Apply a batch of results (see ingestion.results_loader). All or nothing."""
        official = apply_results(self.load_official(), results)
        self._save_official(official)
        return official

    def record_play_in_result(self, conference: str, game: str, winner: str) -> BracketTree:
        official = apply_play_in_result(self.load_official(), conference, game, winner)
        self._save_official(official)
        return official

    def set_finals_mvp(self, mvp: str) -> BracketTree:
        official = set_finals_mvp(self.load_official(), mvp)
        self._save_official(official)
        return official

    def clear_result(self, round_, index: int) -> BracketTree:
        official = clear_result(self.load_official(), round_, index)
        self._save_official(official)
        return official

    def reset_results(self, preserve_teams: bool = True,
                      include_participants: bool = False) -> BatchResult | None:
        """Clear official results, and optionally every participant's picks.

        Returns:
            The participant fan-out result, or None if participants were left alone
        """
        official = reset_results(self.load_official(), preserve_teams)
        self._save_official(official)
        logger.info("League %s results reset (teams %s)", self.league_id,
                    "kept" if preserve_teams else "cleared")
        if not include_participants:
            return None

        updated = {
            pid: reset_results(tree, preserve_teams)
            for pid, tree in self.participant_trees().items()
        }
        return self._write_participants(updated, "Resetting brackets")

    def update_roster(self, teams: list[Team], play_in_teams: list[Team] | None = None) -> BatchResult:
        """Regenerate the first round from a new roster and reconcile every participant."""
        official = build_official_tree(teams, play_in_teams)
        self._save_official(official)
        updated = reconcile_roster(official, self.participant_trees())
        return self._write_participants(updated, "Reconciling brackets")

    def rename_team(self, old_name: str, new_name: str) -> BatchResult:
        """Rename a team in the official bracket and in every participant's bracket."""
        self._save_official(rename_team(self.load_official(), old_name, new_name))
        updated = {
            pid: rename_team(tree, old_name, new_name)
            for pid, tree in self.participant_trees().items()
        }
        return self._write_participants(updated, "Renaming team")

    # --- Scoring configuration ---

    def load_config(self) -> ScoringConfig:
        return ScoringConfig.from_dict(self.store.get(self.config_path))

    def save_config(self, data: dict) -> ScoringConfig:
        """Validate and store a scoring document. Invalid fields are replaced by defaults."""
        scoring = ScoringConfig.from_dict(data)
        self.store.set(self.config_path, scoring.to_dict())
        return scoring

    # --- Participants ---

    def join(self, participant_id: str, display_name: str | None = None) -> BracketTree:
        """Give a participant a blank bracket seeded from the official teams.

        Joining twice is harmless: an existing bracket is returned unchanged.
        """
        doc = self.store.get(self.participant_path(participant_id))
        if doc is not None:
            return BracketTree.from_dict(doc)
        tree = create_participant_bracket(self.load_official())
        self.save_participant(participant_id, tree, display_name)
        logger.info("%s joined league %s", participant_id, self.league_id)
        return tree

    def load_participant(self, participant_id: str) -> BracketTree:
        doc = self.store.get(self.participant_path(participant_id))
        if doc is None:
            raise MissingPrerequisite(f"{participant_id!r} has not joined league {self.league_id!r}")
        return BracketTree.from_dict(doc)

    def save_participant(self, participant_id: str, tree: BracketTree, display_name: str | None = None):
        doc = self._document(tree)
        previous = self.store.get(self.participant_path(participant_id)) or {}
        name = display_name or previous.get("displayName")
        if name:
            doc["displayName"] = name
        self.store.set(self.participant_path(participant_id), doc)

    def record_pick(self, participant_id: str, round_, index: int, winner: str,
                    num_games: int | None = None, mvp: str | None = None) -> BracketTree:
        tree = apply_result(self.load_participant(participant_id), round_, index, winner,
                            num_games=num_games, mvp=mvp)
        self.save_participant(participant_id, tree)
        return tree

    def record_play_in_pick(self, participant_id: str, conference: str, game: str,
                            winner: str) -> BracketTree:
        tree = apply_play_in_result(self.load_participant(participant_id), conference, game, winner)
        self.save_participant(participant_id, tree)
        return tree

    def participant_trees(self) -> dict[str, BracketTree]:
        return {
            pid: BracketTree.from_dict(doc)
            for pid, doc in self.store.list(self.participants_path).items()
        }

    def participant_names(self) -> dict[str, str]:
        return {
            pid: doc.get("displayName") or pid
            for pid, doc in self.store.list(self.participants_path).items()
        }

    # --- Scores ---

    def scores(self) -> dict[str, ScoreRecord]:
        return score_all_participants(self.participant_trees(), self.load_official(), self.load_config())

    def leaderboard(self, save: bool = True) -> list[LeaderboardEntry]:
        """Score everyone, rank them and (by default) store the leaderboard document."""
        official = self.load_official()
        trees = self.participant_trees()
        scores = score_all_participants(trees, official, self.load_config())
        entries = build_leaderboard(scores, trees, official, self.participant_names())
        if save:
            self.store.set(self.leaderboard_path, {
                "entries": [e.to_dict() for e in entries],
                "stats": league_stats(entries),
                "updatedAt": _now(),
            })
        return entries

    # --- Import / export ---

    def export_snapshot(self) -> dict:
        official = self.load_official()
        trees = self.participant_trees()
        scores = score_all_participants(trees, official, self.load_config())
        return build_snapshot(official, trees, scores)

    def import_snapshot(self, snapshot: dict) -> BatchResult:
        """Replace the official bracket and write every participant bracket in the snapshot."""
        official, trees = parse_snapshot(snapshot)
        self._save_official(official)
        return self._write_participants(trees, "Importing brackets")

    # --- Internals ---

    def _document(self, tree: BracketTree) -> dict:
        doc = tree.to_dict()
        doc["updatedBy"] = self.actor
        doc["updatedAt"] = _now()
        return doc

    def _save_official(self, tree: BracketTree):
        self.store.set(self.official_path, self._document(tree))

    def _write_participants(self, trees: dict[str, BracketTree], desc: str) -> BatchResult:
        return run_batch(trees, self.save_participant, max_workers=self.max_workers,
                         show_progress=self.show_progress, desc=desc)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()
