"""Keeping brackets consistent when the official roster changes.

When teams are reselected the first round is regenerated from seeding.
Participant brackets are reconciled rather than recreated: a first round
pick survives if the team it names is still in that series, and everything
after the first round is reset.
"""

import logging

import config
from engine.propagation import place_play_in_winners, reset_results
from models.bracket import BracketTree
from models.matchup import Matchup
from models.play_in import FINAL, NINTH_TENTH, SEVENTH_EIGHTH, ConferencePlayIn
from models.rounds import Round
from models.team import Team

logger = logging.getLogger(__name__)


def generate_first_round(teams: list[Team]) -> list[Matchup]:
    """Pair teams by seed (1v8, 4v5, 3v6, 2v7), East first then West.

    Seeds with no team leave their slot empty.
    """
    by_conference: dict[str, dict[int, Team]] = {c: {} for c in config.CONFERENCES}
    for team in teams:
        if team.conference not in by_conference:
            raise ValueError(f"{team.name} has unknown conference {team.conference!r}")
        by_conference[team.conference][team.seed] = team

    matchups = []
    for conference in config.CONFERENCES:
        for high, low in config.SEED_MATCHUPS:
            m = Matchup(conference=conference)
            for side, seed in ((1, high), (2, low)):
                team = by_conference[conference].get(seed)
                if team:
                    m.set_team(side, team.name, seed)
            matchups.append(m)
    return matchups


def build_official_tree(teams: list[Team], play_in_teams: list[Team] | None = None) -> BracketTree:
    """A fresh official bracket: first round seeded, play-in seeded if given, no results."""
    tree = BracketTree(play_in=play_in_teams is not None)
    tree.rounds[Round.FIRST_ROUND] = generate_first_round(teams)
    if play_in_teams is not None:
        for conference in config.CONFERENCES:
            tree.play_in.conference(conference).seed_teams(
                {t.seed: t for t in play_in_teams if t.conference == conference}
            )
    return tree


def create_participant_bracket(official: BracketTree) -> BracketTree:
    """A blank bracket for a new participant, seeded from the official teams."""
    return reset_results(official, preserve_teams=True)


def reconcile_bracket(predicted: BracketTree | None, official: BracketTree) -> BracketTree:
    """Bring one participant's bracket in line with the current official teams.

    Args:
        predicted: The participant's bracket (None is treated as a blank bracket)
        official: Official bracket holding the regenerated first round

    Returns:
        A new bracket. First round picks are kept only when the picked team
        is still in that series; later rounds and the champion are reset;
        the Finals MVP pick is kept; play-in picks are kept per game when
        the picked team is still seeded into that game, and the kept
        play-in winners are seated at seeds 7 and 8 before first round
        picks are restored.
    """
    if predicted is None:
        return create_participant_bracket(official)

    result = create_participant_bracket(official)
    if result.play_in is not None and predicted.play_in is not None:
        for name, conf in result.play_in.conferences.items():
            _reconcile_play_in(conf, predicted.play_in.conference(name))
        result = place_play_in_winners(result)

    for i, fresh in enumerate(result.rounds[Round.FIRST_ROUND]):
        old = predicted.rounds[Round.FIRST_ROUND][i]
        if _keep_if_present(fresh, old):
            fresh.num_games = old.num_games
        elif old.is_decided:
            logger.debug("Dropping first round pick %s: no longer in series %d", old.winner, i)

    result.finals.predicted_mvp = predicted.finals_mvp or predicted.finals.predicted_mvp
    result.finals_mvp = result.finals.predicted_mvp
    return result


def reconcile_roster(official: BracketTree, predicted_trees: dict[str, BracketTree]) -> dict[str, BracketTree]:
    """Reconcile every participant's bracket against the official teams."""
    return {pid: reconcile_bracket(tree, official) for pid, tree in predicted_trees.items()}


def rename_team(tree: BracketTree, old_name: str, new_name: str) -> BracketTree:
    """Rewrite a team's name everywhere it appears (slots, winners, champion)."""
    result = tree.copy()
    matchups = [m for _, _, m in result.iter_matchups()]
    if result.play_in is not None:
        matchups.extend(m for _, _, m in result.play_in.iter_games())

    for m in matchups:
        if m.team1 == old_name:
            m.team1 = new_name
        if m.team2 == old_name:
            m.team2 = new_name
        if m.winner == old_name:
            m.winner = new_name
    if result.champion == old_name:
        result.champion = new_name
    return result


def _keep_if_present(target: Matchup, old: Matchup) -> bool:
    if not old.is_decided or not target.has_both_teams:
        return False
    side = target.side_of(old.winner)
    if side is None:
        return False
    target.winner = old.winner
    target.winner_seed = target.seed(side)
    return True


def _reconcile_play_in(target: ConferencePlayIn, old: ConferencePlayIn):
    """Carry play-in picks over onto freshly seeded games."""
    opening = target.game(SEVENTH_EIGHTH)
    if _keep_if_present(opening, old.game(SEVENTH_EIGHTH)):
        side = opening.side_of(opening.winner)
        loser = 2 if side == 1 else 1
        target.game(FINAL).set_team(1, opening.team(loser), opening.seed(loser))

    elimination = target.game(NINTH_TENTH)
    if _keep_if_present(elimination, old.game(NINTH_TENTH)):
        target.game(FINAL).set_team(2, elimination.winner, elimination.winner_seed)

    _keep_if_present(target.game(FINAL), old.game(FINAL))
