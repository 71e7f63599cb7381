# tests/engine/wow/test_synthesis.py
"""
Tests unitaires pour engine.wow.synthesis

Couverture :
    session_score     : moyenne des réponses valides, None sous 3 réponses
    synthesize        : score par énoncé, distribution, désaccord, forces / tensions,
                        focus + expérience issus de la tension principale,
                        énoncés propres au niveau Shu-Ha-Ri
    compare_syntheses : seuil strict 0.3, compteurs, tri par évolution
"""
import pytest

from pulse.engine.wow.statements import (
    DEFAULT_EXPERIMENT,
    DEFAULT_FOCUS_AREA,
    get_statement,
    get_statements,
)
from pulse.engine.wow.synthesis import (
    DISAGREEMENT_THRESHOLD,
    MIN_RESPONSES,
    compare_syntheses,
    session_score,
    synthesize,
)
from pulse.shared.enums import ComparisonStatus, WowAngle, WowLevel

pytestmark = pytest.mark.engine

SCRUM_IDS = [s.id for s in get_statements(WowAngle.SCRUM)]


def _responses(*rows):
    """Chaque ligne : 5 scores dans l'ordre du catalogue scrum."""
    return [dict(zip(SCRUM_IDS, row)) for row in rows]


# ── session_score ─────────────────────────────────────────────────────────────

class TestSessionScore:
    def test_sous_le_minimum(self):
        assert session_score(_responses([5] * 5, [4] * 5)) is None

    def test_moyenne_globale(self):
        assert session_score(_responses([5] * 5, [4] * 5, [3] * 5)) == 4.0

    def test_valeurs_invalides_ignorees(self):
        responses = _responses([5] * 5, [5] * 5, [5] * 5)
        responses[0][SCRUM_IDS[0]] = 9
        responses[1][SCRUM_IDS[1]] = True
        assert session_score(responses) == 5.0

    def test_arrondi_deux_decimales(self):
        assert session_score(_responses([4, 4, 4, 4, 3], [4] * 5, [4] * 5)) == 3.93


# ── synthesize ────────────────────────────────────────────────────────────────

class TestSynthesize:
    def test_anonymat_sous_trois_reponses(self):
        assert MIN_RESPONSES == 3
        assert synthesize(WowAngle.SCRUM, _responses([3] * 5, [3] * 5)) is None

    def test_scores_par_enonce(self):
        result = synthesize(WowAngle.SCRUM, _responses(
            [5, 4, 3, 2, 1],
            [5, 4, 3, 2, 1],
            [5, 4, 3, 2, 1],
        ))
        assert result.response_count == 3
        assert result.overall_score == 3.0
        assert [s.score for s in result.all_scores] == [5.0, 4.0, 3.0, 2.0, 1.0]
        assert result.all_scores[0].distribution == [0, 0, 0, 0, 3]
        assert result.disagreement_count == 0

    def test_forces_et_tensions(self):
        result = synthesize(WowAngle.SCRUM, _responses(
            [5, 4, 3, 2, 1],
            [5, 4, 3, 2, 1],
            [5, 4, 3, 2, 1],
        ))
        assert [s.statement_id for s in result.strengths] == ["scrum_shu_1", "scrum_shu_2"]
        assert [s.statement_id for s in result.tensions] == ["scrum_shu_5", "scrum_shu_4"]

    def test_focus_et_experience_de_la_tension_principale(self):
        result = synthesize(WowAngle.SCRUM, _responses(
            [5, 4, 3, 2, 1],
            [5, 4, 3, 2, 1],
            [5, 4, 3, 2, 1],
        ))
        lowest = get_statement("scrum_shu_5")
        assert result.focus_area == lowest.focus_area
        assert result.suggested_experiment == lowest.experiment

    def test_desaccord(self):
        """Énoncé 1 : 1, 5, 5 → écart-type ≈ 1.89 > 1.0."""
        result = synthesize(WowAngle.SCRUM, _responses(
            [1, 3, 3, 3, 3],
            [5, 3, 3, 3, 3],
            [5, 3, 3, 3, 3],
        ))
        first = next(s for s in result.all_scores if s.statement_id == "scrum_shu_1")
        assert first.variance > DISAGREEMENT_THRESHOLD
        assert result.disagreement_count == 1

    def test_enonce_sans_reponse(self):
        responses = [{"scrum_shu_1": 4}, {"scrum_shu_1": 4}, {"scrum_shu_1": 4}]
        result = synthesize(WowAngle.SCRUM, responses)
        empty = next(s for s in result.all_scores if s.statement_id == "scrum_shu_2")
        assert empty.response_count == 0
        assert empty.distribution == [0, 0, 0, 0, 0]

    def test_enonces_du_niveau_de_la_session(self):
        ha_ids = [s.id for s in get_statements(WowAngle.SCRUM, WowLevel.HA)]
        responses = [dict(zip(ha_ids, [4, 4, 4, 4, 2])) for _ in range(3)]
        result = synthesize(WowAngle.SCRUM, responses, WowLevel.HA)
        assert result.level == WowLevel.HA
        assert {s.statement_id for s in result.all_scores} == set(ha_ids)
        assert result.tensions[0].statement_id == "scrum_ha_5"

    def test_niveau_sans_axe_de_travail_repli_par_defaut(self):
        ha_ids = [s.id for s in get_statements(WowAngle.SCRUM, WowLevel.HA)]
        responses = [dict(zip(ha_ids, [4, 4, 4, 4, 2])) for _ in range(3)]
        result = synthesize(WowAngle.SCRUM, responses, WowLevel.HA)
        assert result.focus_area == DEFAULT_FOCUS_AREA
        assert result.suggested_experiment == DEFAULT_EXPERIMENT

    def test_reponses_shu_ignorees_en_ri(self):
        result = synthesize(WowAngle.SCRUM, _responses([5] * 5, [5] * 5, [5] * 5), WowLevel.RI)
        assert all(s.response_count == 0 for s in result.all_scores)


# ── compare_syntheses ─────────────────────────────────────────────────────────

class TestCompareSyntheses:
    def test_evolution_par_enonce(self):
        before = synthesize(WowAngle.SCRUM, _responses([3, 3, 3, 3, 3], [3, 3, 3, 3, 3], [3, 3, 3, 3, 3]))
        after = synthesize(WowAngle.SCRUM, _responses([4, 3, 2, 3, 3], [4, 3, 2, 3, 3], [4, 3, 2, 3, 3]))

        comparison = compare_syntheses(before, after)

        by_id = {row.statement_id: row for row in comparison.statements}
        assert by_id["scrum_shu_1"].status == ComparisonStatus.IMPROVED
        assert by_id["scrum_shu_1"].change == 1.0
        assert by_id["scrum_shu_3"].status == ComparisonStatus.DECLINED
        assert by_id["scrum_shu_2"].status == ComparisonStatus.UNCHANGED
        assert (comparison.improved_count, comparison.declined_count, comparison.unchanged_count) == (1, 1, 3)
        assert comparison.overall_change == 0.0

    def test_tri_par_evolution_decroissante(self):
        before = synthesize(WowAngle.SCRUM, _responses([3] * 5, [3] * 5, [3] * 5))
        after = synthesize(WowAngle.SCRUM, _responses([2, 5, 3, 3, 3], [2, 5, 3, 3, 3], [2, 5, 3, 3, 3]))
        comparison = compare_syntheses(before, after)
        assert comparison.statements[0].statement_id == "scrum_shu_2"
        assert comparison.statements[-1].statement_id == "scrum_shu_1"

    def test_ecart_de_0_3_inchange(self):
        """3.5 → 3.8 : écart 0.3 pile, non strictement supérieur → unchanged."""
        before = synthesize(WowAngle.SCRUM, [{"scrum_shu_1": 3}, {"scrum_shu_1": 4}, {"scrum_shu_1": 4}, {"scrum_shu_1": 3}])
        after = synthesize(WowAngle.SCRUM, [
            {"scrum_shu_1": 4}, {"scrum_shu_1": 4}, {"scrum_shu_1": 4}, {"scrum_shu_1": 4}, {"scrum_shu_1": 3},
        ])
        row = next(r for r in compare_syntheses(before, after).statements if r.statement_id == "scrum_shu_1")
        assert row.status == ComparisonStatus.UNCHANGED
