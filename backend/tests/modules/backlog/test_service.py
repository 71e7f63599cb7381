# tests/modules/backlog/test_service.py
"""
Tests unitaires pour modules.backlog.service

Couverture :
    apply_decision_rule : statut non décidé → décision effacée, décidé sans décision
                          → DECISION_REQUIRED, date par défaut = aujourd'hui
    BacklogService :
        create_item   : règle appliquée avant écriture
        update_item   : fusion avec l'état courant, retour en exploring efface la décision,
                        introuvable → None
        delete_item / update_release : introuvable → False / None
"""
import pytest
from datetime import date
from unittest.mock import AsyncMock

from pulse.modules.backlog.schemas import BacklogItemIn, BacklogItemUpdateIn, ReleaseNoteUpdateIn
from pulse.modules.backlog.service import BacklogService, apply_decision_rule
from pulse.shared.enums import BacklogDecision, BacklogStatus, ProductType
from tests.conftest import make_async_db, make_backlog_item, make_release_note

pytestmark = pytest.mark.service

service = BacklogService()

TODAY = date(2025, 3, 14)


def _item_in(**kwargs) -> BacklogItemIn:
    defaults = dict(
        product=ProductType.VIBE,
        category="features",
        title_nl="Slack-integratie",
        title_en="Slack integration",
    )
    defaults.update(kwargs)
    return BacklogItemIn(**defaults)


# ── apply_decision_rule ───────────────────────────────────────────────────────

class TestDecisionRule:
    def test_statut_non_decide_efface(self):
        result = apply_decision_rule(BacklogStatus.EXPLORING, BacklogDecision.BUILDING, TODAY)
        assert result == (None, None)

    def test_decide_sans_decision(self):
        with pytest.raises(ValueError, match="DECISION_REQUIRED"):
            apply_decision_rule(BacklogStatus.DECIDED, None, None)

    def test_date_par_defaut(self):
        result = apply_decision_rule(BacklogStatus.DECIDED, BacklogDecision.NOT_DOING, None, today=TODAY)
        assert result == (BacklogDecision.NOT_DOING, TODAY)

    def test_date_fournie_conservee(self):
        given = date(2025, 1, 2)
        result = apply_decision_rule(BacklogStatus.DECIDED, BacklogDecision.BUILDING, given, today=TODAY)
        assert result == (BacklogDecision.BUILDING, given)


# ── Backlog ───────────────────────────────────────────────────────────────────

class TestBacklogItems:
    async def test_creation_decision_ignoree_en_review(self, mocker):
        mock_create = mocker.patch(
            "pulse.modules.backlog.service.backlog_repo.create_item",
            AsyncMock(return_value=make_backlog_item()),
        )
        await service.create_item(make_async_db(), _item_in(decision="building", decided_at=TODAY))
        data = mock_create.call_args.args[1]
        assert data["decision"] is None
        assert data["decided_at"] is None

    async def test_creation_decide_sans_decision(self, mocker):
        mock_create = mocker.patch("pulse.modules.backlog.service.backlog_repo.create_item", AsyncMock())
        with pytest.raises(ValueError, match="DECISION_REQUIRED"):
            await service.create_item(make_async_db(), _item_in(status="decided"))
        mock_create.assert_not_called()

    async def test_creation_decidee(self, mocker):
        mock_create = mocker.patch(
            "pulse.modules.backlog.service.backlog_repo.create_item",
            AsyncMock(return_value=make_backlog_item()),
        )
        await service.create_item(make_async_db(), _item_in(status="decided", decision="not_doing"))
        data = mock_create.call_args.args[1]
        assert data["decision"] == BacklogDecision.NOT_DOING
        assert data["decided_at"] is not None

    async def test_retour_en_exploring(self, mocker):
        item = make_backlog_item(
            status=BacklogStatus.DECIDED, decision=BacklogDecision.BUILDING, decided_at=TODAY
        )
        mocker.patch("pulse.modules.backlog.service.backlog_repo.get_item", AsyncMock(return_value=item))
        mock_update = mocker.patch(
            "pulse.modules.backlog.service.backlog_repo.update_item", AsyncMock(return_value=item)
        )

        await service.update_item(make_async_db(), 1, BacklogItemUpdateIn(status="exploring"))

        data = mock_update.call_args.args[2]
        assert data == {"status": BacklogStatus.EXPLORING, "decision": None, "decided_at": None}

    async def test_decision_modifiee_sans_statut(self, mocker):
        """Item déjà décidé : changer la décision garde la date existante."""
        decided = date(2025, 2, 1)
        item = make_backlog_item(
            status=BacklogStatus.DECIDED, decision=BacklogDecision.BUILDING, decided_at=decided
        )
        mocker.patch("pulse.modules.backlog.service.backlog_repo.get_item", AsyncMock(return_value=item))
        mock_update = mocker.patch(
            "pulse.modules.backlog.service.backlog_repo.update_item", AsyncMock(return_value=item)
        )

        await service.update_item(make_async_db(), 1, BacklogItemUpdateIn(decision="not_doing"))

        data = mock_update.call_args.args[2]
        assert data["decision"] == BacklogDecision.NOT_DOING
        assert data["decided_at"] == decided

    async def test_passage_en_decide_sans_decision(self, mocker):
        mocker.patch(
            "pulse.modules.backlog.service.backlog_repo.get_item",
            AsyncMock(return_value=make_backlog_item()),
        )
        with pytest.raises(ValueError, match="DECISION_REQUIRED"):
            await service.update_item(make_async_db(), 1, BacklogItemUpdateIn(status="decided"))

    async def test_update_introuvable(self, mocker):
        mocker.patch("pulse.modules.backlog.service.backlog_repo.get_item", AsyncMock(return_value=None))
        assert await service.update_item(make_async_db(), 9, BacklogItemUpdateIn(title_en="New")) is None

    async def test_delete_introuvable(self, mocker):
        mocker.patch("pulse.modules.backlog.service.backlog_repo.get_item", AsyncMock(return_value=None))
        assert await service.delete_item(make_async_db(), 9) is False


# ── Release notes ─────────────────────────────────────────────────────────────

class TestReleases:
    async def test_update_champs_envoyes_seulement(self, mocker):
        release = make_release_note()
        mocker.patch("pulse.modules.backlog.service.backlog_repo.get_release", AsyncMock(return_value=release))
        mock_update = mocker.patch(
            "pulse.modules.backlog.service.backlog_repo.update_release", AsyncMock(return_value=release)
        )
        await service.update_release(make_async_db(), 1, ReleaseNoteUpdateIn(version="1.2.1"))
        assert mock_update.call_args.args[2] == {"version": "1.2.1"}

    async def test_liste_filtree(self, mocker):
        mock_list = mocker.patch(
            "pulse.modules.backlog.service.backlog_repo.list_releases", AsyncMock(return_value=[])
        )
        await service.list_releases(make_async_db(), ProductType.WOW)
        assert mock_list.call_args.args[1] == ProductType.WOW
