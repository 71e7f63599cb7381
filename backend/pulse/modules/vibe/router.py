# pulse/modules/vibe/router.py
"""
Endpoints publics du check-in Vibe (participants anonymes).
"""
from typing import Optional
from fastapi import APIRouter, HTTPException, Query, status

from pulse.modules.vibe.schemas import CheckInIn, CheckInOut, CheckInStatusOut
from pulse.modules.vibe.service import VibeService
from pulse.shared.deps import DbDep

router = APIRouter(prefix="/vibe", tags=["Vibe"])
service = VibeService()

_ERRORS = {
    "INVALID_LINK":       (status.HTTP_404_NOT_FOUND, "Lien invalide ou expiré."),
    "ALREADY_CHECKED_IN": (status.HTTP_409_CONFLICT, "Déjà enregistré aujourd'hui."),
    "TOOL_DISABLED":      (status.HTTP_400_BAD_REQUEST, "Vibe n'est pas activé pour cette équipe."),
}


def _http_error(e: ValueError) -> HTTPException:
    code, detail = _ERRORS.get(str(e), (status.HTTP_400_BAD_REQUEST, str(e)))
    return HTTPException(status_code=code, detail=detail)


@router.post(
    "/checkin",
    response_model=CheckInOut,
    status_code=status.HTTP_201_CREATED,
    summary="Check-in du jour",
    description="Une humeur (1-5) par participant et par jour. Retourne le streak et les stats du jour.",
)
async def check_in(payload: CheckInIn, db: DbDep):
    try:
        return await service.check_in(db, payload)
    except ValueError as e:
        raise _http_error(e)


@router.get("/status", response_model=CheckInStatusOut, summary="Statut du check-in d'un appareil")
async def get_status(
    db: DbDep,
    team_slug: str = Query(...),
    token: str = Query(..., alias="k"),
    device_id: Optional[str] = Query(None),
):
    try:
        return await service.get_status(db, team_slug, token, device_id)
    except ValueError as e:
        raise _http_error(e)
