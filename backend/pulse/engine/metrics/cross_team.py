# engine/metrics/cross_team.py
"""
Vue multi-équipes d'un coach : ZÉRO accès DB.

Consolide les TeamMetrics de toutes les équipes d'un compte et les scores
des sessions WoW clôturées récentes (par angle). Sous MIN_TEAMS équipes,
la comparaison n'a pas de sens : None.

Les puces d'insight (nl / en) résument l'angle le plus faible et le plus fort,
les équipes en baisse et l'écart de participation.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pulse.engine.metrics.scoring import aggregate_scores
from pulse.engine.metrics.team_metrics import TeamMetrics
from pulse.engine.wow.statements import get_angle_info
from pulse.shared.enums import ToolKey, Trend, WowAngle

MIN_TEAMS = 2

_BULLETS: Dict[str, Dict[str, str]] = {
    "avg-vibe": {
        "nl": "Gemiddelde Vibe over {count} teams: {score}",
        "en": "Average Vibe across {count} teams: {score}",
    },
    "weakest": {
        "nl": "{label} is het zwakste angle over alle teams ({score})",
        "en": "{label} is the weakest angle across all teams ({score})",
    },
    "also-low": {
        "nl": "{label} scoort ook laag over {count} teams ({score})",
        "en": "{label} also scores low across {count} teams ({score})",
    },
    "strongest": {
        "nl": "{label} is het sterkste angle ({score})",
        "en": "{label} is the strongest angle ({score})",
    },
    "declining-one": {
        "nl": "1 team toont dalende momentum",
        "en": "1 team shows declining momentum",
    },
    "declining-many": {
        "nl": "{count} teams tonen dalende momentum",
        "en": "{count} teams show declining momentum",
    },
    "participation-spread": {
        "nl": "Participatie verschilt sterk: {lowest}% tot {highest}%",
        "en": "Participation varies significantly: {lowest}% to {highest}%",
    },
}


@dataclass
class AngleScore:
    angle: str
    score: float
    session_count: int


@dataclass
class CrossTeamOverview:
    team_count: int
    avg_vibe_score: Optional[float]
    avg_wow_score: Optional[float]
    weakest_angles: List[AngleScore] = field(default_factory=list)
    strongest_angles: List[AngleScore] = field(default_factory=list)
    participation_range: Optional[Tuple[int, int]] = None
    declining_teams: List[str] = field(default_factory=list)
    attention_teams: List[str] = field(default_factory=list)
    insights: List[str] = field(default_factory=list)


def _tool_average(metrics: TeamMetrics, key: ToolKey) -> Optional[float]:
    tool = metrics.tool(key.value)
    return tool.average_score if tool else None


def _is_declining(metrics: TeamMetrics) -> bool:
    return any(t.trend == Trend.DOWN for t in metrics.tools.values())


def _angle_label(angle: str) -> str:
    try:
        return get_angle_info(WowAngle(angle)).label
    except ValueError:
        return angle


def build_insight_bullets(overview: CrossTeamOverview, lang: str = "en") -> List[str]:
    """Puces textuelles de la vue multi-équipes, dans l'ordre d'affichage."""
    if lang not in ("nl", "en"):
        lang = "en"

    def bullet(key: str, **values) -> str:
        return _BULLETS[key][lang].format(**values)

    bullets: List[str] = []
    if overview.avg_vibe_score is not None:
        bullets.append(bullet("avg-vibe", count=overview.team_count, score=overview.avg_vibe_score))

    if overview.weakest_angles:
        weakest = overview.weakest_angles[0]
        bullets.append(bullet("weakest", label=_angle_label(weakest.angle), score=weakest.score))
        if len(overview.weakest_angles) >= 2:
            second = overview.weakest_angles[1]
            bullets.append(bullet(
                "also-low", label=_angle_label(second.angle), count=overview.team_count, score=second.score,
            ))

    if overview.strongest_angles:
        strongest = overview.strongest_angles[0]
        bullets.append(bullet("strongest", label=_angle_label(strongest.angle), score=strongest.score))

    declining = len(overview.declining_teams)
    if declining == 1:
        bullets.append(bullet("declining-one"))
    elif declining > 1:
        bullets.append(bullet("declining-many", count=declining))

    if overview.participation_range and overview.participation_range[0] != overview.participation_range[1]:
        lowest, highest = overview.participation_range
        bullets.append(bullet("participation-spread", lowest=lowest, highest=highest))

    return bullets


def build_cross_team_overview(
    teams: Sequence[Tuple[str, TeamMetrics]],
    session_angle_scores: Iterable[Tuple[str, float]],
    lang: str = "en",
) -> Optional[CrossTeamOverview]:
    """
    Args:
        teams: paires (nom d'équipe, TeamMetrics).
        session_angle_scores: paires (angle, overall_score) des sessions clôturées.
        lang: langue des puces d'insight (nl ou en).
    """
    if len(teams) < MIN_TEAMS:
        return None

    vibe_scores = [s for s in (_tool_average(m, ToolKey.VIBE) for _, m in teams) if s is not None]
    wow_scores  = [s for s in (_tool_average(m, ToolKey.WOW) for _, m in teams) if s is not None]

    by_angle = defaultdict(list)
    for angle, score in session_angle_scores:
        if score is not None:
            by_angle[angle].append(score)
    ranked = sorted(
        (AngleScore(angle, aggregate_scores(scores), len(scores)) for angle, scores in by_angle.items()),
        key=lambda a: (a.score, a.angle),
    )

    participations = [m.participation_percent for _, m in teams if m.participant_count > 0]
    participation_range = (
        (min(participations), max(participations)) if len(participations) >= MIN_TEAMS else None
    )

    overview = CrossTeamOverview(
        team_count=len(teams),
        avg_vibe_score=aggregate_scores(vibe_scores),
        avg_wow_score=aggregate_scores(wow_scores),
        weakest_angles=ranked[:3],
        strongest_angles=list(reversed(ranked[-2:])) if ranked else [],
        participation_range=participation_range,
        declining_teams=[name for name, m in teams if _is_declining(m)],
        attention_teams=[name for name, m in teams if m.needs_attention],
    )
    overview.insights = build_insight_bullets(overview, lang)
    return overview
