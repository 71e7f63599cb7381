# tests/modules/wow/test_repository.py
"""
Tests unitaires pour modules.wow.repository.WowRepository

Couverture :
    get_closed_angle_scores : liste d'équipes vide → aucune requête,
                              50 dernières clôtures d'abord
"""
import pytest
from unittest.mock import MagicMock

from pulse.modules.wow.repository import CROSS_TEAM_SESSION_LIMIT, WowRepository
from tests.conftest import make_async_db

pytestmark = pytest.mark.service

repo = WowRepository()


class TestClosedAngleScores:
    async def test_sans_equipe(self):
        db = make_async_db()
        assert await repo.get_closed_angle_scores(db, []) == []
        db.execute.assert_not_awaited()

    async def test_dernieres_clotures_limitees(self):
        db = make_async_db()
        db.execute.return_value = MagicMock(all=MagicMock(return_value=[("flow", 3.4), ("scrum", 2.1)]))

        result = await repo.get_closed_angle_scores(db, [1, 2])

        stmt = db.execute.call_args.args[0]
        assert "ORDER BY wow_sessions.closed_at DESC" in str(stmt)
        assert stmt._limit == CROSS_TEAM_SESSION_LIMIT == 50
        assert result == [("flow", 3.4), ("scrum", 2.1)]
