# engine/metrics/team_metrics.py
"""
Assemblage du TeamMetrics d'une équipe : ZÉRO accès DB.

Un seul chemin de calcul : que les moyennes viennent des lignes brutes
(tool_metrics_from_scores) ou des colonnes cache de Team
(tool_metrics_from_averages), tout finit dans le même constructeur,
donc même résultat observable.

Fenêtres :
- Vibe : les `days` jours calendaires finissant aujourd'hui vs les `days` jours
         précédents, sans chevauchement.
- WoW  : scores de sessions, plus récente d'abord, moitié récente (arrondie
         au-dessus) vs le reste.
"""
import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pulse.engine.metrics.scoring import (
    aggregate_scores,
    classify_trend,
    compute_participation,
    effective_team_size,
    needs_attention,
)
from pulse.shared.enums import Trend

DEFAULT_WINDOW_DAYS = 7


@dataclass(frozen=True)
class ToolMetrics:
    average_score: Optional[float]
    previous_average_score: Optional[float]
    trend: Optional[Trend]
    entry_count: int = 0


@dataclass(frozen=True)
class TeamMetrics:
    tools: Dict[str, ToolMetrics] = field(default_factory=dict)
    participant_count: int = 0
    today_entries: int = 0
    effective_team_size: int = 1
    participation_percent: int = 0
    needs_attention: bool = False

    def tool(self, key: str) -> Optional[ToolMetrics]:
        return self.tools.get(key)


# ── Construction par outil ────────────────────────────────

def tool_metrics_from_averages(
    average: Optional[float], previous: Optional[float], entry_count: int = 0
) -> ToolMetrics:
    return ToolMetrics(
        average_score=average,
        previous_average_score=previous,
        trend=classify_trend(average, previous),
        entry_count=entry_count or 0,
    )


def tool_metrics_from_scores(current: Sequence[float], previous: Sequence[float]) -> ToolMetrics:
    return tool_metrics_from_averages(
        aggregate_scores(current), aggregate_scores(previous), len(current)
    )


# ── Fenêtres ──────────────────────────────────────────────

def split_vibe_windows(
    entries: Iterable[Tuple[date, float]],
    today: date,
    days: int = DEFAULT_WINDOW_DAYS,
) -> Tuple[List[float], List[float]]:
    """
    entries : paires (entry_date, mood).
    Retourne (scores fenêtre courante, scores fenêtre précédente).
    Les entrées hors des deux fenêtres (ou datées du futur) sont ignorées.
    """
    current_start  = today - timedelta(days=days - 1)
    previous_start = current_start - timedelta(days=days)

    current, previous = [], []
    for entry_date, score in entries:
        if current_start <= entry_date <= today:
            current.append(score)
        elif previous_start <= entry_date < current_start:
            previous.append(score)
    return current, previous


def split_session_windows(session_scores: Sequence[float]) -> Tuple[List[float], List[float]]:
    """session_scores triés du plus récent au plus ancien."""
    scores = list(session_scores)
    if len(scores) < 2:
        return scores, []
    half = math.ceil(len(scores) / 2)
    return scores[:half], scores[half:]


# ── Assemblage équipe ─────────────────────────────────────

def build_team_metrics(
    tools: Dict[str, ToolMetrics],
    expected_team_size: Optional[int],
    participant_count: int,
    today_entries: int,
) -> TeamMetrics:
    size = effective_team_size(expected_team_size, participant_count)
    return TeamMetrics(
        tools=dict(tools),
        participant_count=participant_count or 0,
        today_entries=today_entries or 0,
        effective_team_size=size,
        participation_percent=compute_participation(size, today_entries or 0),
        needs_attention=needs_attention(t.average_score for t in tools.values()),
    )


def compute_streak(entry_dates: Iterable[date], today: date) -> int:
    """Jours consécutifs avec check-in, finissant aujourd'hui (ou hier si pas encore venu)."""
    days = set(entry_dates)
    if today in days:
        cursor = today
    elif today - timedelta(days=1) in days:
        cursor = today - timedelta(days=1)
    else:
        return 0

    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak
