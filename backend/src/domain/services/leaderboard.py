"""
Player stat accumulator and leaderboard builder.

Works on the pre-aggregated ``match_stats`` of each roster entry: sums them
across the squad and ranks players per metric.
"""

from functools import reduce
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from ..models.player import MatchStats, Player
from ..models.statistics import LeaderboardEntry, LeaderboardMetric, TeamTotals

MetricSelector = Union[LeaderboardMetric, Callable[[MatchStats], int]]

DEFAULT_PLAYER_STATUS = "active"


def players_with_status(players: Iterable[Player], status: Optional[str]) -> List[Player]:
    """Players whose status matches (case-insensitive); None keeps everyone."""
    if status is None:
        return list(players)
    wanted = status.lower()
    return [p for p in players if (p.status or "").lower() == wanted]


def team_totals(players: Iterable[Player], status: Optional[str] = DEFAULT_PLAYER_STATUS) -> TeamTotals:
    """
    Sum every match statistic over the players with the given status.

    Args:
        players: Roster snapshot
        status: Only count players with this status; None counts everyone

    Returns:
        TeamTotals with the player count and summed stats
    """
    selected = players_with_status(players, status)
    return TeamTotals(
        player_count=len(selected),
        stats=reduce(lambda total, p: total + p.match_stats, selected, MatchStats())
    )


def _resolve_metric(metric: MetricSelector) -> Tuple[Callable[[MatchStats], int], bool]:
    if isinstance(metric, LeaderboardMetric):
        return metric.selector, metric.include_zero
    return metric, False


def build_leaderboard(
    players: Iterable[Player],
    metric: MetricSelector,
    top_n: int
) -> List[LeaderboardEntry]:
    """
    Rank players by one statistic.

    Players whose value is 0 or less are left out, except for minutes and
    games. Sorting is stable, so equal values keep roster order.

    Args:
        players: Roster snapshot, in roster order
        metric: A LeaderboardMetric, or a callable reading a value from MatchStats
        top_n: Maximum number of entries (3 on compact views, 5 on full views)

    Returns:
        Up to ``top_n`` entries, highest value first
    """
    if top_n <= 0:
        return []

    selector, include_zero = _resolve_metric(metric)

    valued = [(player, selector(player.match_stats)) for player in players]
    if not include_zero:
        valued = [(player, value) for player, value in valued if value > 0]

    ranked = sorted(valued, key=lambda pair: pair[1], reverse=True)[:top_n]
    return [
        LeaderboardEntry(rank=position, player_id=player.id, player_name=player.name, value=value)
        for position, (player, value) in enumerate(ranked, start=1)
    ]


def build_leaderboards(
    players: Iterable[Player],
    top_n: int,
    metrics: Optional[Iterable[LeaderboardMetric]] = None
) -> Dict[LeaderboardMetric, Tuple[LeaderboardEntry, ...]]:
    """Build a leaderboard for each metric (all of them by default)."""
    players = list(players)
    metrics = list(LeaderboardMetric) if metrics is None else list(metrics)
    return {
        metric: tuple(build_leaderboard(players, metric, top_n))
        for metric in metrics
    }
