# tests/modules/feedback/test_router.py
"""
Tests HTTP pour modules.feedback.router

Couverture :
    POST   /feedback/teams/{id}/link → 201, autre propriétaire → 403
    DELETE /feedback/teams/{id}/link → 204
    GET    /feedback/teams/{id}      → 200 groupé, introuvable → 404
    DELETE /feedback/teams/{id}      → 204
    GET    /feedback/check           → 200, lien invalide → 404
    POST   /feedback/submit          → 201, expiré → 410, vide → 400,
                                       question inconnue → 422
"""
import pytest
from datetime import datetime
from unittest.mock import AsyncMock

pytestmark = pytest.mark.router


def _submit_body(prompt_key="awareness"):
    return {
        "team_slug": "alpha-squad",
        "token": "tok",
        "submissions": [{"prompt_key": prompt_key, "response": "We should demo more often"}],
    }


# ── Admin ─────────────────────────────────────────────────────────────────────

async def test_create_link_201(admin_client, mocker):
    mocker.patch(
        "pulse.modules.feedback.router.service.create_link",
        AsyncMock(return_value={"token": "tok", "url": "http://localhost:3000/feedback/t/alpha-squad?k=tok", "expires_at": None}),
    )
    resp = await admin_client.post("/feedback/teams/1/link")
    assert resp.status_code == 201
    assert resp.json()["token"] == "tok"


async def test_create_link_403(admin_client, mocker):
    mocker.patch("pulse.modules.feedback.router.service.create_link", AsyncMock(side_effect=PermissionError()))
    resp = await admin_client.post("/feedback/teams/2/link")
    assert resp.status_code == 403


async def test_create_link_sans_token(client):
    resp = await client.post("/feedback/teams/1/link")
    assert resp.status_code in (401, 403)


async def test_deactivate_link_204(admin_client, mocker):
    mocker.patch("pulse.modules.feedback.router.service.deactivate_link", AsyncMock(return_value=True))
    resp = await admin_client.delete("/feedback/teams/1/link")
    assert resp.status_code == 204


async def test_get_feedback_200(admin_client, mocker):
    mocker.patch(
        "pulse.modules.feedback.router.service.get_grouped",
        AsyncMock(return_value={
            "team_id": 1,
            "total": 1,
            "groups": {"gets_in_way": [{
                "id": 1, "prompt_key": "gets_in_way", "response": "Too many meetings",
                "created_at": datetime(2025, 3, 10, 9, 0),
            }]},
        }),
    )
    resp = await admin_client.get("/feedback/teams/1")
    assert resp.status_code == 200
    assert resp.json()["groups"]["gets_in_way"][0]["response"] == "Too many meetings"


async def test_get_feedback_404(admin_client, mocker):
    mocker.patch("pulse.modules.feedback.router.service.get_grouped", AsyncMock(return_value=None))
    resp = await admin_client.get("/feedback/teams/9")
    assert resp.status_code == 404


async def test_clear_feedback_204(admin_client, mocker):
    mocker.patch("pulse.modules.feedback.router.service.clear", AsyncMock(return_value=True))
    resp = await admin_client.delete("/feedback/teams/1")
    assert resp.status_code == 204


# ── Public ────────────────────────────────────────────────────────────────────

async def test_check_200(client, mocker):
    mock_check = mocker.patch(
        "pulse.modules.feedback.router.service.check_link",
        AsyncMock(return_value={"team_name": "Alpha Squad"}),
    )
    resp = await client.get("/feedback/check", params={"team_slug": "alpha-squad", "k": "tok"})
    assert resp.status_code == 200
    assert resp.json() == {"team_name": "Alpha Squad"}
    assert mock_check.call_args.args[1:] == ("alpha-squad", "tok")


async def test_check_lien_invalide_404(client, mocker):
    mocker.patch("pulse.modules.feedback.router.service.check_link", AsyncMock(side_effect=ValueError("INVALID_LINK")))
    resp = await client.get("/feedback/check", params={"team_slug": "alpha-squad", "k": "bad"})
    assert resp.status_code == 404


async def test_submit_201(client, mocker):
    mocker.patch(
        "pulse.modules.feedback.router.service.submit",
        AsyncMock(return_value={"status": "recorded", "count": 1}),
    )
    resp = await client.post("/feedback/submit", json=_submit_body())
    assert resp.status_code == 201
    assert resp.json()["count"] == 1


@pytest.mark.parametrize("code,expected", [
    ("LINK_EXPIRED", 410),
    ("EMPTY_FEEDBACK", 400),
    ("INVALID_LINK", 404),
])
async def test_submit_erreurs(client, mocker, code, expected):
    mocker.patch("pulse.modules.feedback.router.service.submit", AsyncMock(side_effect=ValueError(code)))
    resp = await client.post("/feedback/submit", json=_submit_body())
    assert resp.status_code == expected


async def test_submit_question_inconnue_422(client):
    resp = await client.post("/feedback/submit", json=_submit_body(prompt_key="favourite_colour"))
    assert resp.status_code == 422
