# pulse/modules/wow/router.py
"""
Endpoints Way of Work.

Admin  : /wow/angles, /wow/levels, /wow/teams/{team_id}/..., /wow/sessions/{session_id}/...
Public : /wow/s/{code} (résolution du code, réponse anonyme, résultat)
"""
from typing import List
from fastapi import APIRouter, HTTPException, Query, status

from pulse.modules.wow.schemas import (
    AngleOut,
    ComparisonOut,
    LevelOut,
    OutcomeOut,
    PublicSessionOut,
    RespondIn,
    RespondOut,
    SessionCloseIn,
    SessionCreateIn,
    SessionOut,
    SynthesisOut,
    WowStatsOut,
)
from pulse.modules.wow.service import WowService
from pulse.shared.deps import DbDep, AdminDep

router = APIRouter(prefix="/wow", tags=["Way of Work"])
service = WowService()

_ERRORS = {
    "TOOL_DISABLED":        (status.HTTP_400_BAD_REQUEST, "Way of Work n'est pas activé pour cette équipe."),
    "SESSION_CLOSED":       (status.HTTP_400_BAD_REQUEST, "Session clôturée."),
    "SESSION_NOT_CLOSED":   (status.HTTP_400_BAD_REQUEST, "Session encore ouverte."),
    "INVALID_ANSWERS":      (status.HTTP_400_BAD_REQUEST, "Énoncés inconnus pour cet angle."),
    "NOT_ENOUGH_RESPONSES": (status.HTTP_400_BAD_REQUEST, "Au moins 3 réponses sont nécessaires."),
    "ANGLE_MISMATCH":       (status.HTTP_400_BAD_REQUEST, "Les sessions doivent porter sur le même angle."),
    "LEVEL_MISMATCH":       (status.HTTP_400_BAD_REQUEST, "Les sessions doivent porter sur le même niveau."),
    "INVALID_LINK":         (status.HTTP_404_NOT_FOUND, "Lien de session invalide."),
    "ALREADY_RESPONDED":    (status.HTTP_409_CONFLICT, "Réponse déjà enregistrée pour cet appareil."),
}


def _http_error(e: ValueError) -> HTTPException:
    code, detail = _ERRORS.get(str(e), (status.HTTP_400_BAD_REQUEST, str(e)))
    return HTTPException(status_code=code, detail=detail)


def _not_found():
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session introuvable.")


def _forbidden(e: PermissionError):
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e) or "Accès refusé.")


# ─────────────────────────────────────────────
# ADMIN
# ─────────────────────────────────────────────

@router.get("/angles", response_model=List[AngleOut], summary="Angles disponibles pour mon tier")
async def list_angles(current_admin: AdminDep):
    return service.list_angles(current_admin)


@router.get("/levels", response_model=List[LevelOut], summary="Niveaux Shu-Ha-Ri disponibles pour mon tier")
async def list_levels(current_admin: AdminDep):
    return service.list_levels(current_admin)


@router.post(
    "/teams/{team_id}/sessions",
    response_model=SessionOut,
    status_code=status.HTTP_201_CREATED,
    summary="Démarrer une session",
    description="Angles hors des 5 essentiels et niveaux Ha/Ri réservés aux tiers payants.",
)
async def create_session(team_id: int, payload: SessionCreateIn, current_admin: AdminDep, db: DbDep):
    try:
        result = await service.create_session(db, team_id, current_admin, payload)
    except PermissionError as e:
        raise _forbidden(e)
    except ValueError as e:
        raise _http_error(e)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Équipe introuvable.")
    return result


@router.get("/teams/{team_id}/sessions", response_model=List[SessionOut], summary="Sessions d'une équipe")
async def list_sessions(team_id: int, current_admin: AdminDep, db: DbDep):
    try:
        result = await service.list_sessions(db, team_id, current_admin)
    except PermissionError as e:
        raise _forbidden(e)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Équipe introuvable.")
    return result


@router.get("/teams/{team_id}/stats", response_model=WowStatsOut, summary="Statistiques WoW de l'équipe")
async def get_team_stats(team_id: int, current_admin: AdminDep, db: DbDep):
    try:
        result = await service.get_team_stats(db, team_id, current_admin)
    except PermissionError as e:
        raise _forbidden(e)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Équipe introuvable.")
    return result


@router.get("/compare", response_model=ComparisonOut, summary="Comparer deux sessions du même angle")
async def compare_sessions(
    current_admin: AdminDep,
    db: DbDep,
    first: int = Query(...),
    second: int = Query(...),
):
    try:
        result = await service.compare_sessions(db, first, second, current_admin)
    except PermissionError as e:
        raise _forbidden(e)
    except ValueError as e:
        raise _http_error(e)
    if result is None:
        raise _not_found()
    return result


@router.get("/sessions/{session_id}", response_model=SessionOut)
async def get_session(session_id: int, current_admin: AdminDep, db: DbDep):
    try:
        result = await service.get_session(db, session_id, current_admin)
    except PermissionError as e:
        raise _forbidden(e)
    if result is None:
        raise _not_found()
    return result


@router.post("/sessions/{session_id}/close", response_model=SessionOut, summary="Clôturer avec résultat")
async def close_session(session_id: int, payload: SessionCloseIn, current_admin: AdminDep, db: DbDep):
    try:
        result = await service.close_session(db, session_id, current_admin, payload)
    except PermissionError as e:
        raise _forbidden(e)
    except ValueError as e:
        raise _http_error(e)
    if result is None:
        raise _not_found()
    return result


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: int, current_admin: AdminDep, db: DbDep):
    try:
        deleted = await service.delete_session(db, session_id, current_admin)
    except PermissionError as e:
        raise _forbidden(e)
    if not deleted:
        raise _not_found()


@router.get("/sessions/{session_id}/synthesis", response_model=SynthesisOut)
async def get_synthesis(session_id: int, current_admin: AdminDep, db: DbDep):
    try:
        result = await service.get_synthesis(db, session_id, current_admin)
    except PermissionError as e:
        raise _forbidden(e)
    except ValueError as e:
        raise _http_error(e)
    if result is None:
        raise _not_found()
    return result


# ─────────────────────────────────────────────
# PUBLIC
# ─────────────────────────────────────────────

@router.get("/s/{code}", response_model=PublicSessionOut, summary="Résoudre un code de session")
async def get_public_session(code: str, db: DbDep):
    try:
        result = await service.get_public_session(db, code)
    except ValueError as e:
        raise _http_error(e)
    if result is None:
        raise _not_found()
    return result


@router.post(
    "/s/{code}/respond",
    response_model=RespondOut,
    status_code=status.HTTP_201_CREATED,
    summary="Répondre anonymement",
)
async def respond(code: str, payload: RespondIn, db: DbDep):
    try:
        result = await service.respond(db, code, payload)
    except ValueError as e:
        raise _http_error(e)
    if result is None:
        raise _not_found()
    return result


@router.get("/s/{code}/outcome", response_model=OutcomeOut, summary="Résultat d'une session clôturée")
async def get_outcome(code: str, db: DbDep):
    try:
        result = await service.get_outcome(db, code)
    except ValueError as e:
        raise _http_error(e)
    if result is None:
        raise _not_found()
    return result
