"""
Player domain models for the club analytics engine.
Based on the players table and its embedded match_stats aggregate.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

from core.utils import DataValidator

from .base import BaseEntity, Serializable, record_id


# match_stats JSON keys as written by the stats rebuild job
MATCH_STATS_KEYS = {
    'total_games': 'totalGames',
    'total_minutes': 'totalMinutes',
    'total_goals': 'totalGoals',
    'total_assists': 'totalAssists',
    'total_saves': 'totalSaves',
    'yellow_cards': 'yellowCards',
    'red_cards': 'redCards',
    'captain_games': 'captainGames',
    'player_of_the_match_count': 'playerOfTheMatchCount',
}


@dataclass(frozen=True)
class MatchStats(Serializable):
    """
    Pre-aggregated per-player match statistics.

    Maintained by an external process; the engine only reads, sums and ranks them.
    """
    total_games: int = 0
    total_minutes: int = 0
    total_goals: int = 0
    total_assists: int = 0
    total_saves: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    captain_games: int = 0
    player_of_the_match_count: int = 0

    @property
    def discipline_points(self) -> int:
        """Combined discipline score: a red card weighs two yellows."""
        return self.yellow_cards + 2 * self.red_cards

    def __add__(self, other: 'MatchStats') -> 'MatchStats':
        if not isinstance(other, MatchStats):
            return NotImplemented
        return MatchStats(**{
            f.name: getattr(self, f.name) + getattr(other, f.name)
            for f in fields(self)
        })

    @classmethod
    def from_dict(cls, data: Any) -> 'MatchStats':
        """Read a match_stats JSON object; absent or malformed fields become 0."""
        if not isinstance(data, dict):
            return cls()

        values = {}
        for attr, key in MATCH_STATS_KEYS.items():
            # Accept snake_case keys as well, some legacy rows use them
            raw = data.get(key, data.get(attr))
            values[attr] = DataValidator.coerce_int(raw)
        return cls(**values)


@dataclass(frozen=True)
class Player(BaseEntity):
    """Roster entry with its embedded match statistics."""
    name: str = ""
    squad_number: Optional[int] = None
    status: Optional[str] = None
    match_stats: MatchStats = field(default_factory=MatchStats)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Player':
        """Create Player from a players row."""
        squad_number = record.get('squad_number')
        status = record.get('status')

        return cls(
            id=record_id(record),
            name=record.get('name') or "",
            squad_number=None if squad_number is None else DataValidator.coerce_int(squad_number),
            status=status if isinstance(status, str) else None,
            match_stats=MatchStats.from_dict(record.get('match_stats')),
            raw_data=record
        )
