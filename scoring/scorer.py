"""Bracket scoring.

Scores a participant's bracket against the official results using the
league's scoring configuration:
- base points for each correctly picked series winner
- a series-length bonus when the winner, the length and the pairing all match
- an upset bonus when the correctly picked winner was the lower seed
- Finals MVP, play-in and (optional) champion bonuses

Slots where either side has no winner contribute nothing.
"""

from engine.errors import MissingPrerequisite
from models.bracket import BracketTree
from models.matchup import Matchup
from models.rounds import BRACKET_ROUNDS, Round
from models.score import RoundScore, ScoreRecord
from models.scoring_config import ScoringConfig
from models.team import normalize_team_name


def teams_match(a: Matchup, b: Matchup) -> bool:
    """Whether two series have the same two teams, in either order.

    Names are compared ignoring "(N) " prefixes and case. A series missing
    either team never matches.
    """
    a1, a2 = normalize_team_name(a.team1), normalize_team_name(a.team2)
    b1, b2 = normalize_team_name(b.team1), normalize_team_name(b.team2)
    if not (a1 and a2 and b1 and b2):
        return False
    return (a1, a2) == (b1, b2) or (a1, a2) == (b2, b1)


def is_upset(official: Matchup) -> bool:
    """Whether the decided series was won by the numerically higher seed."""
    if not official.is_decided:
        return False
    winner_seed = official.resolved_winner_seed()
    _, loser_seed = official.loser()
    if winner_seed is None or loser_seed is None:
        return False
    return winner_seed > loser_seed


def score_participant(predicted: BracketTree | None, official: BracketTree,
                      scoring: ScoringConfig | None = None) -> ScoreRecord:
    """Score one participant's bracket.

    Args:
        predicted: The participant's picks (None scores zero)
        official: Official results so far
        scoring: League scoring configuration (defaults if None)

    Returns:
        ScoreRecord with totals, per-round breakdown and max still possible
    """
    if official is None:
        raise MissingPrerequisite("No official bracket to score against")
    scoring = scoring or ScoringConfig()
    record = ScoreRecord()
    if predicted is None:
        return record

    ceilings = _ceilings(predicted, official, scoring)

    for rnd in BRACKET_ROUNDS:
        rs = RoundScore()
        for pred, off in zip(predicted.matchups(rnd), official.matchups(rnd)):
            _score_slot(rnd, pred, off, scoring, rs)
        rs.possible_points = rs.total_points + ceilings.get(rnd.value, 0)
        record.round_breakdown[rnd.value] = rs

        record.base_points += rs.base_points
        record.series_length_points += rs.series_length_points
        record.upset_points += rs.upset_points
        record.correct_picks += rs.correct_picks

    if scoring.champion_bonus and _same_winner(predicted.finals, official.finals):
        record.champion_points = scoring.champion_bonus

    official_mvp = _mvp(official)
    if official_mvp and official_mvp == _mvp(predicted):
        record.mvp.correct_prediction = True
        record.mvp.base_points = scoring.finals_mvp_points
        record.finals_mvp_points = scoring.finals_mvp_points

    play_in = _score_play_in(predicted, official, scoring)
    if play_in is not None:
        play_in.possible_points = play_in.total_points + ceilings.get(Round.PLAY_IN.value, 0)
        record.round_breakdown[Round.PLAY_IN.value] = play_in
        record.play_in_points = play_in.base_points
        record.correct_picks += play_in.correct_picks

    record.correct_series = count_correct_series(predicted, official)
    record.max_possible = sum(ceilings.values())
    return record


def score_all_participants(predicted_trees: dict[str, BracketTree], official: BracketTree,
                           scoring: ScoringConfig | None = None) -> dict[str, ScoreRecord]:
    """Score every participant. Returns {participant_id: ScoreRecord}."""
    if official is None:
        raise MissingPrerequisite("No official bracket to score against")
    scoring = scoring or ScoringConfig()
    return {
        pid: score_participant(tree, official, scoring)
        for pid, tree in predicted_trees.items()
    }


def max_possible(predicted: BracketTree, official: BracketTree,
                 scoring: ScoringConfig | None = None) -> float:
    """Points still available if every undecided pick comes true."""
    return sum(_ceilings(predicted, official, scoring or ScoringConfig()).values())


def count_correct_series(predicted: BracketTree, official: BracketTree) -> int:
    """Series where the winner, the length and the pairing all match."""
    count = 0
    for rnd in BRACKET_ROUNDS:
        for pred, off in zip(predicted.matchups(rnd), official.matchups(rnd)):
            if (_same_winner(pred, off) and pred.num_games is not None
                    and pred.num_games == off.num_games and teams_match(pred, off)):
                count += 1
    return count


def _same_winner(pred: Matchup, off: Matchup) -> bool:
    return pred.is_decided and off.is_decided and pred.winner == off.winner


def _mvp(tree: BracketTree) -> str:
    name = tree.finals_mvp or tree.finals.predicted_mvp
    return name.strip().lower() if name else ""


def _score_slot(rnd: Round, pred: Matchup, off: Matchup, scoring: ScoringConfig, rs: RoundScore):
    if not _same_winner(pred, off):
        return

    rs.correct_picks += 1
    rs.base_points += scoring.base_points(rnd)

    if (scoring.series_length_bonus_enabled and pred.num_games is not None
            and pred.num_games == off.num_games and teams_match(pred, off)):
        rs.series_length_points += scoring.series_bonus(rnd)
        rs.series_length_correct += 1

    if scoring.upset_bonus_enabled and is_upset(off):
        rs.upset_points += scoring.upset_bonus


def _score_play_in(predicted: BracketTree, official: BracketTree, scoring: ScoringConfig) -> RoundScore | None:
    if not scoring.play_in_enabled or predicted.play_in is None or official.play_in is None:
        return None
    rs = RoundScore()
    for conference, key, off in official.play_in.iter_games():
        pred = predicted.play_in.conference(conference).game(key)
        if _same_winner(pred, off):
            rs.correct_picks += 1
            rs.base_points += scoring.play_in_points
    return rs


def _ceilings(predicted: BracketTree, official: BracketTree, scoring: ScoringConfig) -> dict[str, float]:
    """Still-achievable points per round ("mvp" for the Finals MVP).

    A slot counts when the official result is open and the participant has
    a pick there. Bonuses are included while they remain possible.
    """
    ceilings = {}
    for rnd in BRACKET_ROUNDS:
        points = 0
        for pred, off in zip(predicted.matchups(rnd), official.matchups(rnd)):
            if off.is_decided or not pred.is_decided:
                continue
            points += scoring.base_points(rnd)
            if rnd is Round.FINALS:
                points += scoring.champion_bonus
            if (scoring.series_length_bonus_enabled and pred.num_games is not None
                    and _pairing_possible(pred, off)):
                points += scoring.series_bonus(rnd)
            if scoring.upset_bonus_enabled and _upset_possible(pred, off):
                points += scoring.upset_bonus
        ceilings[rnd.value] = points

    if not _mvp(official) and _mvp(predicted):
        ceilings["mvp"] = scoring.finals_mvp_points

    if scoring.play_in_enabled and predicted.play_in is not None and official.play_in is not None:
        points = 0
        for conference, key, off in official.play_in.iter_games():
            pred = predicted.play_in.conference(conference).game(key)
            if not off.is_decided and pred.is_decided:
                points += scoring.play_in_points
        ceilings[Round.PLAY_IN.value] = points

    return ceilings


def _known_teams(matchup: Matchup) -> list[str]:
    return [normalize_team_name(t) for t in (matchup.team1, matchup.team2) if t]


def _pairing_possible(pred: Matchup, off: Matchup) -> bool:
    """Whether the official series can still end up with the predicted pairing."""
    if off.has_both_teams:
        return teams_match(pred, off)
    predicted_pair = _known_teams(pred)
    return all(team in predicted_pair for team in _known_teams(off))


def _upset_possible(pred: Matchup, off: Matchup) -> bool:
    """Whether the predicted winner could still win this series as the lower seed."""
    winner = normalize_team_name(pred.winner)
    winner_seed = pred.resolved_winner_seed()
    opponents = [
        off.seed(side) for side in (1, 2)
        if off.team(side) and normalize_team_name(off.team(side)) != winner
    ]
    if len(opponents) > 1:
        # Official series is set and the predicted winner isn't in it
        return False
    if opponents:
        return winner_seed is None or opponents[0] is None or winner_seed > opponents[0]
    # Opponent not known yet: anyone but a 1 seed can still pull an upset
    return winner_seed is None or winner_seed > 1
