# engine/wow/synthesis.py
"""
Synthèse d'une session Way of Work : ZÉRO accès DB.
Reçoit les réponses brutes ({statement_id: score 1-5}), retourne un SynthesisResult.

- Score par énoncé     : moyenne, distribution [1..5], écart-type (population)
- Désaccord            : écart-type > DISAGREEMENT_THRESHOLD
- Forces / tensions    : 2 meilleurs / 2 moins bons énoncés
- Comparaison          : même seuil strict que la tendance (0.3)

Anonymat : aucun résultat sous MIN_RESPONSES réponses.
"""
import numpy as np
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from pulse.engine.metrics.scoring import classify_trend, round_half_up, score_delta
from pulse.engine.wow.statements import (
    DEFAULT_EXPERIMENT,
    DEFAULT_FOCUS_AREA,
    get_statement,
    get_statements,
)
from pulse.shared.enums import ComparisonStatus, Trend, WowAngle, WowLevel

MIN_RESPONSES          = 3
DISAGREEMENT_THRESHOLD = 1.0

Answers = Mapping[str, int]


@dataclass
class StatementScore:
    statement_id: str
    text: str
    score: float
    response_count: int
    distribution: List[int]     # [nb de 1, nb de 2, ..., nb de 5]
    variance: float             # écart-type : 0 = accord, > 1 = désaccord


@dataclass
class SynthesisResult:
    angle: WowAngle
    response_count: int
    overall_score: float
    disagreement_count: int
    focus_area: str
    suggested_experiment: str
    level: WowLevel = WowLevel.SHU
    strengths: List[StatementScore] = field(default_factory=list)
    tensions: List[StatementScore] = field(default_factory=list)
    all_scores: List[StatementScore] = field(default_factory=list)


@dataclass
class StatementComparison:
    statement_id: str
    text: str
    score1: float
    score2: float
    change: float
    status: ComparisonStatus


@dataclass
class SessionComparison:
    statements: List[StatementComparison]
    improved_count: int
    declined_count: int
    unchanged_count: int
    overall_change: float


def _valid(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and 1 <= value <= 5


def session_score(responses: Sequence[Answers]) -> Optional[float]:
    """Moyenne de toutes les réponses valides, arrondie à 0.01. None sous MIN_RESPONSES."""
    if len(responses) < MIN_RESPONSES:
        return None
    values = [v for r in responses for v in r.values() if _valid(v)]
    if not values:
        return None
    return round_half_up(float(np.mean(values)), 2)


def _score_statement(statement_id: str, text: str, responses: Sequence[Answers]) -> StatementScore:
    scores = [r[statement_id] for r in responses if _valid(r.get(statement_id))]

    distribution = [0, 0, 0, 0, 0]
    for s in scores:
        distribution[int(round(s)) - 1] += 1

    if scores:
        arr = np.array(scores, dtype=float)
        mean = float(np.mean(arr))
        std = float(np.std(arr)) if len(scores) > 1 else 0.0
    else:
        mean, std = 0.0, 0.0

    return StatementScore(
        statement_id=statement_id,
        text=text,
        score=round_half_up(mean, 2),
        response_count=len(scores),
        distribution=distribution,
        variance=round_half_up(std, 2),
    )


def synthesize(
    angle: WowAngle, responses: Sequence[Answers], level: WowLevel = WowLevel.SHU
) -> Optional[SynthesisResult]:
    """Énoncés de l'angle au niveau de la session. None sous MIN_RESPONSES réponses."""
    if len(responses) < MIN_RESPONSES:
        return None

    scores = [_score_statement(s.id, s.text, responses) for s in get_statements(angle, level)]
    overall = session_score(responses) or 0.0

    # Tri stable : à score égal, ordre du catalogue
    ranked = sorted(scores, key=lambda s: -s.score)
    strengths = ranked[:2]
    tensions = list(reversed(ranked[-2:]))

    lowest = get_statement(tensions[0].statement_id) if tensions else None

    return SynthesisResult(
        angle=angle,
        level=level,
        response_count=len(responses),
        overall_score=overall,
        disagreement_count=sum(1 for s in scores if s.variance > DISAGREEMENT_THRESHOLD),
        focus_area=(lowest.focus_area if lowest else None) or DEFAULT_FOCUS_AREA,
        suggested_experiment=(lowest.experiment if lowest else None) or DEFAULT_EXPERIMENT,
        strengths=strengths,
        tensions=tensions,
        all_scores=ranked,
    )


# ── Comparaison de deux sessions (même angle) ─────────────

_STATUS_BY_TREND: Dict[Trend, ComparisonStatus] = {
    Trend.UP:     ComparisonStatus.IMPROVED,
    Trend.DOWN:   ComparisonStatus.DECLINED,
    Trend.STABLE: ComparisonStatus.UNCHANGED,
}


def compare_syntheses(first: SynthesisResult, second: SynthesisResult) -> SessionComparison:
    """first = session la plus ancienne, second = la plus récente."""
    second_by_id = {s.statement_id: s for s in second.all_scores}

    rows: List[StatementComparison] = []
    for s1 in first.all_scores:
        s2 = second_by_id.get(s1.statement_id)
        if s2 is None:
            continue
        rows.append(StatementComparison(
            statement_id=s1.statement_id,
            text=s1.text,
            score1=round_half_up(s1.score, 1),
            score2=round_half_up(s2.score, 1),
            change=round_half_up(score_delta(s2.score, s1.score), 1),
            status=_STATUS_BY_TREND[classify_trend(s2.score, s1.score)],
        ))

    rows.sort(key=lambda r: -r.change)
    return SessionComparison(
        statements=rows,
        improved_count=sum(1 for r in rows if r.status == ComparisonStatus.IMPROVED),
        declined_count=sum(1 for r in rows if r.status == ComparisonStatus.DECLINED),
        unchanged_count=sum(1 for r in rows if r.status == ComparisonStatus.UNCHANGED),
        overall_change=round_half_up(score_delta(second.overall_score, first.overall_score), 1),
    )
