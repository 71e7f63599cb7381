# pulse/modules/coach/router.py
from typing import Literal
from fastapi import APIRouter, HTTPException, Query, status

from pulse.modules.coach.schemas import CrossTeamOut, TeamInsightsOut
from pulse.modules.coach.service import CoachService
from pulse.shared.deps import DbDep, AdminDep

router = APIRouter(prefix="/coach", tags=["Coach"])
service = CoachService()


def _forbidden(e: PermissionError):
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e) or "Accès refusé.")


@router.get(
    "/teams/{team_id}/insights",
    response_model=TeamInsightsOut,
    summary="Insights d'une équipe",
    description="Requiert un tier incluant `coach`. Langues : nl, en.",
)
async def get_team_insights(
    team_id: int,
    current_admin: AdminDep,
    db: DbDep,
    lang: Literal["nl", "en"] = Query("en"),
):
    try:
        result = await service.get_team_insights(db, team_id, current_admin, lang)
    except PermissionError as e:
        raise _forbidden(e)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Équipe introuvable.")
    return result


@router.get(
    "/cross-team",
    response_model=CrossTeamOut,
    summary="Vue multi-équipes",
    description="Requiert un tier incluant `cross_team` et au moins deux équipes. Langues : nl, en.",
)
async def get_cross_team_overview(
    current_admin: AdminDep,
    db: DbDep,
    lang: Literal["nl", "en"] = Query("en"),
):
    try:
        return await service.get_cross_team_overview(db, current_admin, lang)
    except PermissionError as e:
        raise _forbidden(e)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Au moins deux équipes sont nécessaires.",
        )
