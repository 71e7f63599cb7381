# tests/modules/backlog/test_router.py
"""
Tests HTTP pour modules.backlog.router

Couverture :
    GET    /backlog/items              → 200 public, filtre product transmis
    GET    /backlog/items?product=xyz  → 422
    POST   /backlog/items              → 201 super admin, 403 admin simple,
                                         décision manquante → 400
    PATCH  /backlog/items/{id}         → 200, introuvable → 404
    DELETE /backlog/items/{id}         → 204
    GET    /backlog/releases           → 200 public
    POST   /backlog/releases           → 201
    DELETE /backlog/releases/{id}      introuvable → 404
"""
import pytest
from unittest.mock import AsyncMock

from pulse.shared.enums import BacklogDecision, BacklogStatus, ProductType
from tests.conftest import make_backlog_item, make_release_note

pytestmark = pytest.mark.router


def _item_body(**kwargs):
    body = {
        "product": "vibe",
        "category": "integration",
        "title_nl": "Slack-integratie",
        "title_en": "Slack integration",
    }
    body.update(kwargs)
    return body


# ── Backlog ───────────────────────────────────────────────────────────────────

async def test_list_items_public_200(client, mocker):
    mock_list = mocker.patch(
        "pulse.modules.backlog.router.service.list_items",
        AsyncMock(return_value=[make_backlog_item()]),
    )
    resp = await client.get("/backlog/items", params={"product": "vibe"})
    assert resp.status_code == 200
    assert resp.json()[0]["title_en"] == "Slack integration"
    assert mock_list.call_args.args[1] == ProductType.VIBE


async def test_list_items_produit_inconnu_422(client):
    resp = await client.get("/backlog/items", params={"product": "slack"})
    assert resp.status_code == 422


async def test_create_item_201(super_admin_client, mocker):
    mocker.patch(
        "pulse.modules.backlog.router.service.create_item",
        AsyncMock(return_value=make_backlog_item(
            status=BacklogStatus.DECIDED, decision=BacklogDecision.BUILDING,
        )),
    )
    resp = await super_admin_client.post("/backlog/items", json=_item_body(status="decided", decision="building"))
    assert resp.status_code == 201
    assert resp.json()["decision"] == "building"


async def test_create_item_admin_simple_403(admin_client):
    resp = await admin_client.post("/backlog/items", json=_item_body())
    assert resp.status_code in (401, 403)


async def test_create_item_decision_manquante_400(super_admin_client, mocker):
    mocker.patch(
        "pulse.modules.backlog.router.service.create_item",
        AsyncMock(side_effect=ValueError("DECISION_REQUIRED")),
    )
    resp = await super_admin_client.post("/backlog/items", json=_item_body(status="decided"))
    assert resp.status_code == 400


async def test_update_item_200(super_admin_client, mocker):
    mocker.patch(
        "pulse.modules.backlog.router.service.update_item",
        AsyncMock(return_value=make_backlog_item(status=BacklogStatus.EXPLORING)),
    )
    resp = await super_admin_client.patch("/backlog/items/1", json={"status": "exploring"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "exploring"


async def test_update_item_404(super_admin_client, mocker):
    mocker.patch("pulse.modules.backlog.router.service.update_item", AsyncMock(return_value=None))
    resp = await super_admin_client.patch("/backlog/items/9", json={"title_en": "Teams integration"})
    assert resp.status_code == 404


async def test_delete_item_204(super_admin_client, mocker):
    mocker.patch("pulse.modules.backlog.router.service.delete_item", AsyncMock(return_value=True))
    resp = await super_admin_client.delete("/backlog/items/1")
    assert resp.status_code == 204


# ── Release notes ─────────────────────────────────────────────────────────────

async def test_list_releases_public_200(client, mocker):
    mocker.patch(
        "pulse.modules.backlog.router.service.list_releases",
        AsyncMock(return_value=[make_release_note()]),
    )
    resp = await client.get("/backlog/releases")
    assert resp.status_code == 200
    data = resp.json()
    assert data[0]["version"] == "1.2.0"
    assert data[0]["changes"][0]["en"] == "Trend arrows"


async def test_create_release_201(super_admin_client, mocker):
    mocker.patch(
        "pulse.modules.backlog.router.service.create_release",
        AsyncMock(return_value=make_release_note(version="1.3.0")),
    )
    resp = await super_admin_client.post("/backlog/releases", json={
        "product": "shared",
        "version": "1.3.0",
        "title_nl": "Nieuwe inzichten",
        "title_en": "New insights",
        "released_at": "2025-03-01",
    })
    assert resp.status_code == 201
    assert resp.json()["version"] == "1.3.0"


async def test_delete_release_404(super_admin_client, mocker):
    mocker.patch("pulse.modules.backlog.router.service.delete_release", AsyncMock(return_value=False))
    resp = await super_admin_client.delete("/backlog/releases/9")
    assert resp.status_code == 404
