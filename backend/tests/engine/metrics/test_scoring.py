# tests/engine/metrics/test_scoring.py
"""
Tests unitaires pour engine.metrics.scoring

Couverture :
    aggregate_scores      : moyenne 1 décimale, arrondi demi vers le haut, vide → None
    classify_trend        : up / down / stable, frontière stricte 0.3, None si donnée absente
    compute_participation : pourcentage entier, taille nulle → 1, borné [0, 100]
    needs_attention       : OR sur les moyennes non nulles sous 2.5
    effective_team_size   : taille déclarée > détectée > 1
    Idempotence           : mêmes entrées → même sortie
"""
import itertools
import pytest

from pulse.engine.metrics.scoring import (
    ATTENTION_THRESHOLD,
    TREND_THRESHOLD,
    aggregate_scores,
    classify_trend,
    compute_participation,
    effective_team_size,
    needs_attention,
    round_half_up,
    score_delta,
)
from pulse.shared.enums import Trend

pytestmark = pytest.mark.engine


# ── aggregate_scores ──────────────────────────────────────────────────────────

class TestAggregateScores:
    def test_scores_identiques(self):
        assert aggregate_scores([3, 3, 3, 3]) == 3.0

    def test_moyenne_un_a_cinq(self):
        assert aggregate_scores([1, 2, 3, 4, 5]) == 3.0

    def test_vide_retourne_none(self):
        assert aggregate_scores([]) is None

    def test_arrondi_demi_vers_le_haut(self):
        """Moyenne 3.45 → 3.5 (et non 3.4 par arrondi bancaire)."""
        assert aggregate_scores([3.4, 3.5]) == 3.5

    def test_arrondi_vers_le_bas(self):
        """Moyenne 3.44 → 3.4."""
        assert aggregate_scores([3.44]) == 3.4

    def test_ordre_sans_effet(self):
        assert aggregate_scores([5, 1, 4]) == aggregate_scores([1, 4, 5])

    def test_accepte_un_generateur(self):
        assert aggregate_scores(s for s in [2, 4]) == 3.0

    def test_resultat_dans_l_echelle(self):
        """Toute combinaison non vide de scores 1-5 → moyenne dans [1.0, 5.0]."""
        for combo in itertools.product([1, 2, 3, 4, 5], repeat=3):
            result = aggregate_scores(combo)
            assert 1.0 <= result <= 5.0
            assert result == round(result, 1)


# ── classify_trend ────────────────────────────────────────────────────────────

class TestClassifyTrend:
    def test_precedent_absent(self):
        assert classify_trend(4.0, None) is None

    def test_courant_absent(self):
        assert classify_trend(None, 4.0) is None

    def test_hausse(self):
        assert classify_trend(3.9, 3.5) == Trend.UP

    def test_stable_petit_ecart(self):
        assert classify_trend(3.7, 3.5) == Trend.STABLE

    def test_baisse(self):
        assert classify_trend(3.0, 3.5) == Trend.DOWN

    def test_frontiere_hausse_stricte(self):
        """Écart de 0.3 pile → stable (3.8 - 3.5 en flottant vaut 0.2999...)."""
        assert classify_trend(3.8, 3.5) == Trend.STABLE

    def test_frontiere_baisse_stricte(self):
        assert classify_trend(3.2, 3.5) == Trend.STABLE

    def test_seuil_constant(self):
        assert str(TREND_THRESHOLD) == "0.3"

    def test_valeur_serialisable(self):
        assert classify_trend(4.5, 3.0).value == "up"


# ── compute_participation ─────────────────────────────────────────────────────

class TestComputeParticipation:
    def test_moitie(self):
        assert compute_participation(8, 4) == 50

    def test_taille_nulle_ne_leve_pas(self):
        result = compute_participation(0, 0)
        assert isinstance(result, int)
        assert result == 0

    def test_taille_nulle_remplacee_par_un(self):
        assert compute_participation(0, 1) == 100

    def test_borne_a_cent(self):
        assert compute_participation(3, 7) == 100

    def test_arrondi_entier(self):
        """1/3 → 33, 2/3 → 67."""
        assert compute_participation(3, 1) == 33
        assert compute_participation(3, 2) == 67

    def test_demi_vers_le_haut(self):
        """1/8 = 12.5 % → 13."""
        assert compute_participation(8, 1) == 13


# ── needs_attention ───────────────────────────────────────────────────────────

class TestNeedsAttention:
    def test_aucune_donnee(self):
        assert needs_attention([None, None]) is False

    def test_une_moyenne_basse(self):
        assert needs_attention([2.4, None]) is True

    def test_moyennes_correctes(self):
        assert needs_attention([3.0, 2.6]) is False

    def test_seuil_strict(self):
        assert needs_attention([ATTENTION_THRESHOLD]) is False

    def test_liste_vide(self):
        assert needs_attention([]) is False


# ── effective_team_size ───────────────────────────────────────────────────────

class TestEffectiveTeamSize:
    def test_taille_declaree_prioritaire(self):
        assert effective_team_size(5, 9) == 5

    def test_taille_detectee_sans_declaration(self):
        assert effective_team_size(None, 4) == 4

    def test_defaut_un(self):
        assert effective_team_size(None, 0) == 1
        assert effective_team_size(0, None) == 1


# ── Helpers décimaux ──────────────────────────────────────────────────────────

class TestDecimalHelpers:
    def test_round_half_up_deux_decimales(self):
        assert round_half_up(2.675, 2) == 2.68

    def test_score_delta_exact(self):
        assert score_delta(3.8, 3.5) == 0.3

    def test_idempotence(self):
        inputs = [4, 2, 5, 3]
        assert aggregate_scores(inputs) == aggregate_scores(inputs)
        assert classify_trend(3.9, 3.5) == classify_trend(3.9, 3.5)
        assert compute_participation(7, 3) == compute_participation(7, 3)
