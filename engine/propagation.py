"""Winner propagation through the bracket.

Every public function here is pure: it copies the tree, applies the change
to the copy and returns the copy. Callers persist the result.

When a team lands in a slot that held a different team, whatever that
series had decided is no longer valid, so its result is cleared and the
slot it fed is emptied, all the way to the champion and Finals MVP.
"""

import logging

import config
from engine.errors import InvalidSeriesLength, InvalidWinner, MissingPrerequisite
from models.bracket import BracketTree, first_round_slot, next_slot
from models.matchup import Matchup
from models.play_in import FINAL, NINTH_TENTH, SEVENTH_EIGHTH
from models.rounds import Round, parse_round

logger = logging.getLogger(__name__)


def apply_result(tree: BracketTree, round_, index: int, winner: str,
                 winner_seed: int | None = None, num_games: int | None = None,
                 mvp: str | None = None) -> BracketTree:
    """Record a series result and advance the winner.

    Args:
        tree: Bracket to update (official results or a participant's picks)
        round_: Round (or round identifier) of the series
        index: Series index within the round (0 for the finals)
        winner: Must equal team1 or team2 of the series
        winner_seed: Used only if the series doesn't know the winner's seed
        num_games: Series length, 4-7, or None if unknown
        mvp: Finals MVP; only read for the finals

    Returns:
        A new tree with the result recorded and downstream slots updated

    Raises:
        MissingPrerequisite: tree is None
        InvalidWinner: winner isn't in the series, or the series lacks a team
        InvalidSeriesLength: num_games outside 4-7
    """
    _require(tree)
    round_ = parse_round(round_)
    if round_ is Round.PLAY_IN:
        raise ValueError("Play-in games are recorded with apply_play_in_result")
    _check_series_length(num_games)

    result = tree.copy()
    matchup = result.matchup(round_, index)
    side = _winning_side(matchup, winner, f"{round_.display_name} #{index}")

    matchup.winner = winner
    matchup.winner_seed = matchup.seed(side) if matchup.seed(side) is not None else winner_seed
    matchup.num_games = num_games

    if round_ is Round.FINALS:
        matchup.winner_conference = matchup.team1_conference if side == 1 else matchup.team2_conference
        result.champion = winner
        result.champion_seed = matchup.winner_seed
        if mvp is not None:
            _set_mvp(result, mvp)
    else:
        _advance(result, round_, index, winner, matchup.winner_seed)

    logger.info("%s #%d: %s in %s", round_.display_name, index, winner, num_games or "?")
    return result


def invalidate_downstream(tree: BracketTree, round_, index: int) -> BracketTree:
    """Clear one series' result and everything that result fed."""
    _require(tree)
    round_ = parse_round(round_)
    result = tree.copy()
    _invalidate(result, round_, index)
    return result


def clear_result(tree: BracketTree, round_, index: int) -> BracketTree:
    """Undo a recorded result (e.g. entered by mistake)."""
    result = invalidate_downstream(tree, round_, index)
    logger.info("Cleared %s #%d", parse_round(round_).display_name, index)
    return result


def set_finals_mvp(tree: BracketTree, mvp: str) -> BracketTree:
    """Set the Finals MVP, keeping both MVP fields in sync."""
    _require(tree)
    result = tree.copy()
    _set_mvp(result, mvp)
    return result


def apply_play_in_result(tree: BracketTree, conference: str, game: str, winner: str) -> BracketTree:
    """Record a play-in game and move teams on.

    The 7v8 winner takes the conference's 7 seed and the loser drops into
    the play-in final. The 9v10 winner reaches the play-in final. The final's
    winner takes the 8 seed.
    """
    _require(tree)
    if tree.play_in is None:
        raise MissingPrerequisite("The play-in tournament is not enabled for this bracket")

    result = tree.copy()
    conf = result.play_in.conference(conference)
    matchup = conf.game(game)
    side = _winning_side(matchup, winner, f"{conference} play-in {game}")
    other = 2 if side == 1 else 1

    matchup.winner = winner
    matchup.winner_seed = matchup.seed(side)

    if game == SEVENTH_EIGHTH:
        _place_play_in_final(result, conference, 1, matchup.team(other), matchup.seed(other))
        _place_first_round(result, conference, 7, winner)
    elif game == NINTH_TENTH:
        _place_play_in_final(result, conference, 2, winner, matchup.seed(side))
    else:
        _place_first_round(result, conference, 8, winner)

    logger.info("%s play-in %s: %s", conference, game, winner)
    return result


def place_play_in_winners(tree: BracketTree) -> BracketTree:
    """Seat decided play-in winners in their first round slots.

    The opening game winner takes seed 7 and the final winner seed 8.
    Undecided games leave their slot as it is.
    """
    _require(tree)
    result = tree.copy()
    if result.play_in is None:
        return result
    for conference, conf in result.play_in.conferences.items():
        for key, seed in ((SEVENTH_EIGHTH, 7), (FINAL, 8)):
            game = conf.game(key)
            if game.is_decided:
                _place_first_round(result, conference, seed, game.winner)
    return result


def reset_results(tree: BracketTree, preserve_teams: bool = True) -> BracketTree:
    """Clear every result.

    Args:
        tree: Bracket to reset
        preserve_teams: Keep the first round pairings and play-in seeds.
            Seeds 7 and 8 are emptied when a play-in decides them.
            If False, every team slot is cleared too.

    Returns:
        A new tree of the same shape
    """
    _require(tree)
    result = BracketTree(play_in=tree.play_in is not None)
    if not preserve_teams:
        return result

    for i, m in enumerate(tree.rounds[Round.FIRST_ROUND]):
        kept = m.copy()
        kept.clear_result()
        result.rounds[Round.FIRST_ROUND][i] = kept

    if tree.play_in is not None:
        for name, conf in tree.play_in.conferences.items():
            result.play_in.conference(name).seed_teams(conf.seeded_teams())
            for seed in (7, 8):
                index, side = first_round_slot(name, seed)
                result.rounds[Round.FIRST_ROUND][index].set_team(side, "", None)
    return result


# --- Internals (operate in place on a copy) ---

def _require(tree):
    if tree is None:
        raise MissingPrerequisite("No bracket found; initialize the tournament first")


def _check_series_length(num_games):
    if num_games is not None and num_games not in config.SERIES_GAMES_OPTIONS:
        raise InvalidSeriesLength(
            f"Series length must be one of {config.SERIES_GAMES_OPTIONS}, got {num_games}")


def _winning_side(matchup: Matchup, winner: str, label: str) -> int:
    if not matchup.has_both_teams:
        raise InvalidWinner(f"{label} doesn't have both teams yet")
    side = matchup.side_of(winner)
    if side is None:
        raise InvalidWinner(f"{winner!r} is not in {label} ({matchup.team1} vs {matchup.team2})")
    return side


def _set_mvp(tree: BracketTree, mvp: str):
    tree.finals.predicted_mvp = mvp or ""
    tree.finals_mvp = mvp or ""


def _advance(tree: BracketTree, round_: Round, index: int, team: str, seed: int | None):
    conference = tree.matchup(round_, index).conference
    next_round, next_index, side = next_slot(round_, index, conference)
    _place(tree, next_round, next_index, side, team, seed)


def _place(tree: BracketTree, round_: Round, index: int, side: int, team: str, seed: int | None):
    """Put a team into a slot, invalidating the series if the slot changed."""
    target = tree.matchup(round_, index)
    if target.team(side) == team:
        if seed is not None:
            target.set_team(side, team, seed)
        return

    target.set_team(side, team, seed)
    if round_ is Round.FINALS:
        conference = config.CONFERENCES[side - 1]
        if side == 1:
            target.team1_conference = conference
        else:
            target.team2_conference = conference
    _invalidate(tree, round_, index)


def _invalidate(tree: BracketTree, round_: Round, index: int):
    matchup = tree.matchup(round_, index)
    if matchup.is_decided:
        logger.debug("Clearing %s #%d (%s) after an upstream change",
                     round_.display_name, index, matchup.winner)
    matchup.clear_result()

    if round_ is Round.FINALS:
        tree.champion = ""
        tree.champion_seed = None
        tree.finals_mvp = ""
        return

    next_round, next_index, side = next_slot(round_, index, matchup.conference)
    downstream = tree.matchup(next_round, next_index)
    if downstream.team(side) or downstream.is_decided:
        downstream.set_team(side, "", None)
        _invalidate(tree, next_round, next_index)


def _place_first_round(tree: BracketTree, conference: str, seed: int, team: str):
    index, side = first_round_slot(conference, seed)
    _place(tree, Round.FIRST_ROUND, index, side, team, seed)


def _withdraw_first_round(tree: BracketTree, conference: str, seed: int, team: str):
    """Empty a first round slot if it still holds a team that no longer qualifies."""
    index, side = first_round_slot(conference, seed)
    slot = tree.matchup(Round.FIRST_ROUND, index)
    if team and slot.team(side) == team:
        slot.set_team(side, "", None)
        _invalidate(tree, Round.FIRST_ROUND, index)


def _place_play_in_final(tree: BracketTree, conference: str, side: int, team: str, seed: int | None):
    final = tree.play_in.conference(conference).game(FINAL)
    if final.team(side) == team:
        return
    if final.is_decided:
        logger.debug("Clearing %s play-in final (%s) after an upstream change", conference, final.winner)
        _withdraw_first_round(tree, conference, 8, final.winner)
        final.clear_result()
    final.set_team(side, team, seed)
