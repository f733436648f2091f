from dataclasses import dataclass, field, asdict
from typing import Dict, Iterable, List, Mapping, Tuple

from .scores import Score


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    team: str
    score: Score
    
    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Totals:
    main: List[LeaderboardEntry] = field(default_factory=list)
    legion: List[LeaderboardEntry] = field(default_factory=list)
    
    def to_dict(self) -> dict:
        return {
            'main': [entry.to_dict() for entry in self.main],
            'legion': [entry.to_dict() for entry in self.legion],
        }


def accumulate_totals(score_maps: Iterable[Mapping[str, Score]]) -> Dict[str, Score]:
    """
    Sum each team's score across rounds.
    
    A team missing from a round simply contributes nothing for it.
    """
    totals: Dict[str, Score] = {}
    for scores in score_maps:
        for team, score in (scores or {}).items():
            totals[team] = totals.get(team, 0) + score
    return totals


def rank_totals(totals: Mapping[str, Score]) -> List[LeaderboardEntry]:
    """
    Order teams by total score, highest first.
    
    Equal totals are ordered by team name so the ranking is deterministic.
    Ranks are the 1-based positions in that order.
    """
    ordered: List[Tuple[str, Score]] = sorted(
        totals.items(),
        key=lambda item: (-item[1], item[0])
    )
    return [
        LeaderboardEntry(rank=position, team=team, score=score)
        for position, (team, score) in enumerate(ordered, start=1)
    ]


def compute_totals(records: Iterable) -> Totals:
    """
    Build both leaderboards from the full set of round records.
    
    Args:
        records: RoundResult rows (anything with ``main_results`` and
            ``legion_results`` mappings)
    
    Returns:
        Totals with the ranked main and Legion leaderboards
    """
    records = list(records)
    main = accumulate_totals(r.main_results for r in records)
    legion = accumulate_totals(r.legion_results for r in records)
    return Totals(main=rank_totals(main), legion=rank_totals(legion))
