# engine/metrics/vibe_signals.py
"""
Signaux Vibe calculés sur l'historique quotidien : ZÉRO accès DB.

Entrée : moyennes quotidiennes (date, moyenne, nombre de check-ins) triées ou non,
taille d'équipe effective, date du jour.

- Momentum        : sens de la dernière série de variations jour après jour
                    et nombre de jours de cette série
- Confiance       : part des check-ins attendus (faible < 30 %, élevée ≥ 60 %)
- État du jour    : participation du jour, mêmes paliers
- État de semaine : jours avec données dans la fenêtre courante
- Maturité        : jours avec données et taux de régularité (jours ≥ 30 % de participation)
- Participation   : aujourd'hui vs hier
- Garde-fou       : en dessous de MIN_WEEK_ENTRIES check-ins sur la semaine,
                    aucune carte de tendance
"""
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Sequence

from pulse.engine.metrics.scoring import compute_participation, score_delta
from pulse.shared.enums import Confidence, DayState, Direction, MaturityLevel, WeekState

MOMENTUM_STEP       = 0.1    # variation quotidienne en dessous de laquelle le jour est stable
MODERATE_PCT        = 30
HIGH_PCT            = 60
MIN_WEEK_ENTRIES    = 3
MIN_PATTERN_ENTRIES = 5
WEEK_COMPLETE_DAYS  = 5
FIRST_WEEK_DAYS     = 7
ESTABLISHED_DAYS    = 14
ESTABLISHED_CONSISTENCY = 50
HISTORY_DAYS        = 30


@dataclass(frozen=True)
class DailyVibe:
    date: date
    average: float
    count: int


@dataclass(frozen=True)
class Momentum:
    direction: Direction
    days_trending: int


@dataclass(frozen=True)
class DataMaturity:
    level: MaturityLevel
    days_of_data: int
    consistency_rate: int


@dataclass(frozen=True)
class VibeSignals:
    momentum: Momentum
    live_confidence: Confidence
    week_confidence: Confidence
    week_entry_count: int
    day_state: DayState
    week_state: WeekState
    maturity: DataMaturity
    participation_trend: Direction
    has_enough_data: bool

    @property
    def enough_for_trends(self) -> bool:
        return self.has_enough_data and self.week_confidence != Confidence.LOW

    @property
    def enough_for_patterns(self) -> bool:
        return self.has_enough_data and self.week_entry_count >= MIN_PATTERN_ENTRIES


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return int((Decimal(part) * 100 / whole).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _step(previous: float, current: float) -> Direction:
    delta = score_delta(current, previous)
    if delta > MOMENTUM_STEP:
        return Direction.RISING
    if delta < -MOMENTUM_STEP:
        return Direction.DECLINING
    return Direction.STABLE


def direction_of(change: float) -> Direction:
    if change > 0:
        return Direction.RISING
    if change < 0:
        return Direction.DECLINING
    return Direction.STABLE


def compute_momentum(daily_averages: Sequence[float]) -> Momentum:
    """
    Moyennes quotidiennes dans l'ordre chronologique.
    days_trending compte les jours de la dernière série, jour de départ inclus :
    trois baisses consécutives = 4 jours.
    """
    if len(daily_averages) < 2:
        return Momentum(Direction.STABLE, 0)
    steps = [_step(prev, cur) for prev, cur in zip(daily_averages, daily_averages[1:])]
    direction = steps[-1]
    run = 0
    for step in reversed(steps):
        if step != direction:
            break
        run += 1
    return Momentum(direction, run + 1)


def confidence_level(entries: int, expected: int) -> Confidence:
    if expected <= 0 or entries <= 0:
        return Confidence.LOW
    if entries * 100 >= HIGH_PCT * expected:
        return Confidence.HIGH
    if entries * 100 >= MODERATE_PCT * expected:
        return Confidence.MODERATE
    return Confidence.LOW


def compute_day_state(participation_rate: int) -> DayState:
    if participation_rate >= HIGH_PCT:
        return DayState.DAY_COMPLETE
    if participation_rate >= MODERATE_PCT:
        return DayState.SIGNAL_EMERGING
    return DayState.NO_SIGNAL


def compute_week_state(days_with_data: int, is_end_of_week: bool) -> WeekState:
    """Une semaine est complète à 5 jours de données, ou à 3 dès le vendredi."""
    if days_with_data >= WEEK_COMPLETE_DAYS or (is_end_of_week and days_with_data >= 3):
        return WeekState.WEEK_COMPLETE
    if days_with_data >= 3:
        return WeekState.WEEK_EMERGING
    return WeekState.WEEK_BUILDING


def compute_data_maturity(history: Sequence[DailyVibe], team_size: int) -> DataMaturity:
    days = len({d.date for d in history})
    regular = sum(1 for d in history if team_size > 0 and d.count * 100 >= MODERATE_PCT * team_size)
    consistency = _percent(regular, days)
    if days < FIRST_WEEK_DAYS:
        level = MaturityLevel.NEW
    elif days >= ESTABLISHED_DAYS and consistency >= ESTABLISHED_CONSISTENCY:
        level = MaturityLevel.ESTABLISHED
    else:
        level = MaturityLevel.BUILDING
    return DataMaturity(level, days, consistency)


def has_minimum_data(week_entries: int) -> bool:
    return week_entries >= MIN_WEEK_ENTRIES


def build_vibe_signals(
    history: Sequence[DailyVibe],
    team_size: int,
    today: date,
    window_days: int = 7,
) -> VibeSignals:
    """
    Args:
        history: une ligne par jour avec check-ins (les jours futurs sont ignorés).
        team_size: taille effective (déclarée, sinon détectée).
        window_days: fenêtre de la semaine courante, aujourd'hui inclus.
    """
    days: List[DailyVibe] = sorted((d for d in history if d.date <= today), key=lambda d: d.date)
    yesterday = today - timedelta(days=1)
    week_start = today - timedelta(days=window_days - 1)

    today_entries = sum(d.count for d in days if d.date == today)
    yesterday_entries = sum(d.count for d in days if d.date == yesterday)
    week = [d for d in days if d.date >= week_start]
    week_entries = sum(d.count for d in week)
    week_days = len({d.date for d in week})

    return VibeSignals(
        momentum=compute_momentum([d.average for d in days]),
        live_confidence=confidence_level(today_entries, team_size),
        week_confidence=confidence_level(week_entries, team_size * week_days),
        week_entry_count=week_entries,
        day_state=compute_day_state(compute_participation(team_size, today_entries)),
        # vendredi, samedi, dimanche
        week_state=compute_week_state(week_days, today.weekday() >= 4),
        maturity=compute_data_maturity(days, team_size),
        participation_trend=direction_of(today_entries - yesterday_entries),
        has_enough_data=has_minimum_data(week_entries),
    )
