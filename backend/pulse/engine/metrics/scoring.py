# engine/metrics/scoring.py
"""
Agrégation des scores de santé d'équipe : ZÉRO accès DB.

Fonctions pures et totales, partagées par le chemin "live" (lignes brutes)
et le chemin "cache" (colonnes dénormalisées sur Team) :
- aggregate_scores      : moyenne arrondie à 0.1 (demi vers le haut), None si vide
- classify_trend        : up / down / stable selon le seuil strict TREND_THRESHOLD
- compute_participation : pourcentage entier des check-ins du jour, borné [0, 100]
- needs_attention       : au moins une moyenne sous ATTENTION_THRESHOLD
- effective_team_size   : taille déclarée > taille détectée > 1

Arithmétique décimale : 3.45 → 3.5 et 3.8 - 3.5 == 0.3 exactement,
le bruit flottant ne fait jamais basculer une frontière.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from pulse.shared.enums import Trend

# Seuils fixes (échelle 1-5)
TREND_THRESHOLD     = Decimal("0.3")
ATTENTION_THRESHOLD = 2.5


def _dec(value) -> Decimal:
    return Decimal(str(value))


def round_half_up(value: float, digits: int = 1) -> float:
    quantum = Decimal(1).scaleb(-digits)
    return float(_dec(value).quantize(quantum, rounding=ROUND_HALF_UP))


def aggregate_scores(scores: Iterable[float]) -> Optional[float]:
    """
    Moyenne arithmétique arrondie à une décimale.

    None (données insuffisantes) pour une collection vide, jamais 0.
    Les scores sont supposés déjà validés dans [1, 5] par le point d'écriture.
    """
    values = [_dec(s) for s in scores]
    if not values:
        return None
    mean = sum(values, Decimal(0)) / len(values)
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def classify_trend(current: Optional[float], previous: Optional[float]) -> Optional[Trend]:
    """None si l'une des deux fenêtres est vide. Comparaison stricte : 0.3 pile → stable."""
    if current is None or previous is None:
        return None
    diff = _dec(current) - _dec(previous)
    if diff > TREND_THRESHOLD:
        return Trend.UP
    if diff < -TREND_THRESHOLD:
        return Trend.DOWN
    return Trend.STABLE


def compute_participation(effective_team_size: int, today_entries: int) -> int:
    """
    round(100 * today / taille), borné [0, 100].
    Une taille nulle ou négative est remplacée par 1 (pas de division par zéro).
    """
    size = effective_team_size if effective_team_size and effective_team_size > 0 else 1
    pct = (Decimal(today_entries or 0) * 100 / size).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return int(min(max(pct, Decimal(0)), Decimal(100)))


def needs_attention(averages: Iterable[Optional[float]]) -> bool:
    """OR sur les moyennes non nulles. Absence de données ≠ alerte."""
    return any(a is not None and a < ATTENTION_THRESHOLD for a in averages)


def effective_team_size(expected_team_size: Optional[int], detected_count: Optional[int]) -> int:
    if expected_team_size and expected_team_size > 0:
        return expected_team_size
    if detected_count and detected_count > 0:
        return detected_count
    return 1


def score_delta(current: float, previous: float) -> float:
    """Écart exact entre deux moyennes arrondies (current - previous)."""
    return float(_dec(current) - _dec(previous))
