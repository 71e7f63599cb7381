# engine/metrics/insights.py
"""
Insights Vibe à base de règles : ZÉRO accès DB, aucun appel IA.

Entrée : TeamMetrics (engine/metrics/team_metrics.py), langue et, si l'historique
quotidien est disponible, VibeSignals (engine/metrics/vibe_signals.py).
Sortie : au plus MAX_INSIGHTS cartes, les alertes avant les infos.

Avec VibeSignals, les cartes de tendance exigent assez de données (has_enough_data,
confiance hebdomadaire non faible) et les cartes de momentum, de participation
et de jalon s'ajoutent. Sans, seules les règles hebdomadaires s'appliquent.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from pulse.engine.metrics.scoring import score_delta
from pulse.engine.metrics.team_metrics import TeamMetrics
from pulse.engine.metrics.vibe_signals import FIRST_WEEK_DAYS, VibeSignals
from pulse.shared.enums import Confidence, Direction, InsightSeverity, ToolKey, Trend

MAX_INSIGHTS           = 3
LOW_PARTICIPATION_PCT  = 50
WEEK_DELTA_SIGNIFICANT = 0.5
MOMENTUM_MIN_DAYS      = 3
STREAK_MILESTONES      = (30, 14, 7)

SUPPORTED_LANGUAGES = ("nl", "en")


@dataclass
class Insight:
    id: str
    type: str
    severity: InsightSeverity
    message: str
    detail: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)


# Templates bilingues, ton neutre
_TEMPLATES: Dict[str, Dict] = {
    "low-participation": {
        "type": "participation",
        "severity": InsightSeverity.INFO,
        "message": {"nl": "Beperkte data vandaag", "en": "Limited data today"},
        "detail": {
            "nl": "{today} van {team_size} teamleden hebben ingecheckt.",
            "en": "{today} of {team_size} team members have checked in.",
        },
        "suggestions": {
            "nl": ["Deel de check-in link als herinnering", "Check of het tijdstip werkt voor het team"],
            "en": ["Share the check-in link as a reminder", "Check if the timing works for the team"],
        },
    },
    "participation-improving": {
        "type": "participation",
        "severity": InsightSeverity.INFO,
        "message": {"nl": "Deelname neemt toe", "en": "Participation is increasing"},
        "detail": {
            "nl": "Vandaag checken meer teamleden in dan gisteren.",
            "en": "More team members checked in today than yesterday.",
        },
    },
    "declining-trend": {
        "type": "trend",
        "severity": InsightSeverity.ATTENTION,
        "message": {"nl": "Vibe is al {days} dagen lager", "en": "Vibe has been lower for {days} days"},
        "detail": {
            "nl": "Dit patroon kan wijzen op toegenomen druk of uitdagingen.",
            "en": "This pattern may indicate increased pressure or challenges.",
        },
        "suggestions": {
            "nl": [
                "Check in met het team over de workload",
                "Bekijk recente veranderingen die het team kunnen beïnvloeden",
                "Bespreek dit in de volgende retrospective",
            ],
            "en": [
                "Check in with the team about workload",
                "Review any recent changes that might have impacted the team",
                "Consider discussing in the next retrospective",
            ],
        },
    },
    "rising-trend": {
        "type": "trend",
        "severity": InsightSeverity.INFO,
        "message": {"nl": "Vibe verbetert al {days} dagen", "en": "Vibe has been improving for {days} days"},
        "detail": {
            "nl": "Het team lijkt in een positieve trend te zitten.",
            "en": "The team appears to be in a positive trend.",
        },
        "suggestions": {
            "nl": ["Noteer wat hieraan bijdraagt", "Leg lessen vast die kunnen helpen dit vast te houden"],
            "en": ["Note what might be contributing to this", "Capture learnings that could help sustain it"],
        },
    },
    "week-drop": {
        "type": "trend",
        "severity": InsightSeverity.ATTENTION,
        "message": {"nl": "Vibe is {delta} lager dan vorige week", "en": "Vibe is {delta} lower than last week"},
        "detail": {
            "nl": "Een daling van deze omvang is de moeite waard om te bespreken.",
            "en": "A drop of this size is worth discussing with the team.",
        },
        "suggestions": {
            "nl": ["Check in met het team over de workload", "Bespreek dit in de volgende retrospective"],
            "en": ["Check in with the team about workload", "Consider discussing in the next retrospective"],
        },
    },
    "week-improvement": {
        "type": "trend",
        "severity": InsightSeverity.INFO,
        "message": {"nl": "Vibe is {delta} hoger dan vorige week", "en": "Vibe is {delta} higher than last week"},
        "detail": {
            "nl": "Het team lijkt in een positieve trend te zitten.",
            "en": "The team appears to be in a positive trend.",
        },
        "suggestions": {
            "nl": ["Noteer wat hieraan bijdraagt"],
            "en": ["Note what might be contributing to this"],
        },
    },
    "under-pressure": {
        "type": "pattern",
        "severity": InsightSeverity.ATTENTION,
        "message": {"nl": "Team staat onder druk", "en": "Team is under pressure"},
        "detail": {
            "nl": "Minstens één gemiddelde score ligt onder het midden van de schaal.",
            "en": "At least one average score is below the midpoint of the scale.",
        },
        "suggestions": {
            "nl": ["Plan een kort gesprek over wat er speelt", "Kijk welke obstakels je kunt wegnemen"],
            "en": ["Plan a short conversation about what is going on", "Look for blockers you can remove"],
        },
    },
    "steady-week": {
        "type": "pattern",
        "severity": InsightSeverity.INFO,
        "message": {"nl": "Stabiele week", "en": "Steady week"},
        "detail": {
            "nl": "De vibe is vergelijkbaar met vorige week.",
            "en": "The vibe is comparable to last week.",
        },
    },
    "streak-milestone": {
        "type": "milestone",
        "severity": InsightSeverity.INFO,
        "message": {"nl": "{days} dagen consistent inchecken", "en": "{days} days of consistent check-ins"},
        "detail": {
            "nl": "Het team bouwt een solide meetgeschiedenis op.",
            "en": "The team is building a solid measurement history.",
        },
    },
    "first-week-complete": {
        "type": "milestone",
        "severity": InsightSeverity.INFO,
        "message": {"nl": "Eerste week data compleet", "en": "First week of data complete"},
        "detail": {
            "nl": "Nu kunnen we week-over-week trends gaan vergelijken.",
            "en": "We can now start comparing week-over-week trends.",
        },
    },
}


def _build(insight_id: str, lang: str, **values) -> Insight:
    template = _TEMPLATES[insight_id]
    detail = template.get("detail")
    return Insight(
        id=insight_id,
        type=template["type"],
        severity=template["severity"],
        message=template["message"][lang].format(**values),
        detail=detail[lang].format(**values) if detail else None,
        suggestions=list(template.get("suggestions", {}).get(lang, [])),
    )


def streak_milestone(signals: VibeSignals) -> Optional[int]:
    """Jalon atteint (30, 14 ou 7 jours) le jour même ou le lendemain, hors série en baisse."""
    momentum = signals.momentum
    if momentum.direction == Direction.DECLINING:
        return None
    for milestone in STREAK_MILESTONES:
        if momentum.days_trending >= milestone:
            return milestone if momentum.days_trending <= milestone + 1 else None
    return None


def generate_insights(
    metrics: TeamMetrics, lang: str = "en", signals: Optional[VibeSignals] = None
) -> List[Insight]:
    if lang not in SUPPORTED_LANGUAGES:
        lang = "en"

    insights: List[Insight] = []
    vibe = metrics.tool(ToolKey.VIBE.value)

    if vibe is not None:
        low_today = (
            signals.live_confidence == Confidence.LOW if signals is not None
            else metrics.participation_percent < LOW_PARTICIPATION_PCT
        )
        if low_today:
            insights.append(_build(
                "low-participation", lang,
                today=metrics.today_entries, team_size=metrics.effective_team_size,
            ))

    if (
        signals is not None
        and signals.participation_trend == Direction.RISING
        and metrics.participation_percent >= LOW_PARTICIPATION_PCT
        and signals.has_enough_data
    ):
        insights.append(_build("participation-improving", lang))

    if signals is None or signals.enough_for_trends:
        if signals is not None and signals.momentum.days_trending >= MOMENTUM_MIN_DAYS:
            if signals.momentum.direction == Direction.DECLINING:
                insights.append(_build("declining-trend", lang, days=signals.momentum.days_trending))
            elif signals.momentum.direction == Direction.RISING:
                insights.append(_build("rising-trend", lang, days=signals.momentum.days_trending))

        if vibe is not None and vibe.average_score is not None and vibe.previous_average_score is not None:
            delta = score_delta(vibe.average_score, vibe.previous_average_score)
            if delta <= -WEEK_DELTA_SIGNIFICANT:
                insights.append(_build("week-drop", lang, delta=f"{abs(delta):.1f}"))
            elif delta >= WEEK_DELTA_SIGNIFICANT:
                insights.append(_build("week-improvement", lang, delta=f"{delta:.1f}"))
            elif vibe.trend == Trend.STABLE:
                insights.append(_build("steady-week", lang))

    if metrics.needs_attention:
        insights.append(_build("under-pressure", lang))

    if signals is not None:
        milestone = streak_milestone(signals)
        if milestone is not None:
            insights.append(_build("streak-milestone", lang, days=milestone))
        if signals.maturity.days_of_data == FIRST_WEEK_DAYS:
            insights.append(_build("first-week-complete", lang))

    # Alertes d'abord, ordre d'apparition conservé à sévérité égale
    insights.sort(key=lambda i: 0 if i.severity == InsightSeverity.ATTENTION else 1)
    return insights[:MAX_INSIGHTS]
