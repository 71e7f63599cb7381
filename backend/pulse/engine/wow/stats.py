# engine/wow/stats.py
"""
Statistiques WoW d'une équipe : ZÉRO accès DB.

Ne comptent dans les moyennes que les sessions clôturées ayant un score
(≥ 3 réponses). La tendance compare la moitié récente des sessions
scorées au reste (engine/metrics/team_metrics.split_session_windows).
"""
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from pulse.engine.metrics.scoring import aggregate_scores
from pulse.engine.metrics.team_metrics import ToolMetrics, split_session_windows, tool_metrics_from_scores
from pulse.shared.enums import SessionStatus


@dataclass
class SessionSummary:
    """Vue minimale d'une session, triée du plus récent au plus ancien par l'appelant."""
    angle: str
    status: SessionStatus
    score: Optional[float]
    response_count: int = 0


@dataclass
class AngleStats:
    count: int
    avg_score: Optional[float]


@dataclass
class WowTeamStats:
    total_sessions: int
    active_sessions: int
    closed_sessions: int
    total_responses: int
    metrics: ToolMetrics
    sessions_by_angle: Dict[str, AngleStats] = field(default_factory=dict)
    recent_scores: List[float] = field(default_factory=list)


def scored_sessions(sessions: Sequence[SessionSummary]) -> List[float]:
    return [s.score for s in sessions if s.status == SessionStatus.CLOSED and s.score is not None]


def wow_tool_metrics(sessions: Sequence[SessionSummary]) -> ToolMetrics:
    current, previous = split_session_windows(scored_sessions(sessions))
    return tool_metrics_from_scores(current, previous)


def compute_team_stats(sessions: Sequence[SessionSummary]) -> WowTeamStats:
    by_angle_count: Dict[str, int] = defaultdict(int)
    by_angle_scores: Dict[str, List[float]] = defaultdict(list)
    for s in sessions:
        by_angle_count[s.angle] += 1
        if s.status == SessionStatus.CLOSED and s.score is not None:
            by_angle_scores[s.angle].append(s.score)

    scores = scored_sessions(sessions)
    return WowTeamStats(
        total_sessions=len(sessions),
        active_sessions=sum(1 for s in sessions if s.status == SessionStatus.ACTIVE),
        closed_sessions=sum(1 for s in sessions if s.status == SessionStatus.CLOSED),
        total_responses=sum(s.response_count for s in sessions),
        metrics=wow_tool_metrics(sessions),
        sessions_by_angle={
            angle: AngleStats(count=count, avg_score=aggregate_scores(by_angle_scores[angle]))
            for angle, count in by_angle_count.items()
        },
        recent_scores=scores[:3],
    )
