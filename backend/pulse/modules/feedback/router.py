# pulse/modules/feedback/router.py
"""
Feedback anonyme.

Admin  : /feedback/teams/{team_id}/link (POST crée, DELETE désactive),
         /feedback/teams/{team_id} (GET groupé par question, DELETE efface)
Public : /feedback/check, /feedback/submit
"""
from fastapi import APIRouter, HTTPException, Query, status

from pulse.modules.feedback.schemas import (
    FeedbackGroupedOut,
    FeedbackLinkCheckOut,
    FeedbackLinkOut,
    FeedbackSubmitIn,
    FeedbackSubmitOut,
)
from pulse.modules.feedback.service import FeedbackService
from pulse.shared.deps import DbDep, AdminDep

router = APIRouter(prefix="/feedback", tags=["Feedback"])
service = FeedbackService()

_ERRORS = {
    "INVALID_LINK":   (status.HTTP_404_NOT_FOUND, "Lien invalide."),
    "LINK_EXPIRED":   (status.HTTP_410_GONE, "Lien expiré."),
    "EMPTY_FEEDBACK": (status.HTTP_400_BAD_REQUEST, "Au moins une réponse est requise."),
}


def _http_error(e: ValueError) -> HTTPException:
    code, detail = _ERRORS.get(str(e), (status.HTTP_400_BAD_REQUEST, str(e)))
    return HTTPException(status_code=code, detail=detail)


def _not_found():
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Équipe introuvable.")


def _forbidden():
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Accès refusé.")


# ─────────────────────────────────────────────
# ADMIN
# ─────────────────────────────────────────────

@router.post(
    "/teams/{team_id}/link",
    response_model=FeedbackLinkOut,
    status_code=status.HTTP_201_CREATED,
    summary="Générer le lien de feedback",
    description="Désactive les liens précédents. Le token n'est renvoyé qu'une fois.",
)
async def create_link(team_id: int, current_admin: AdminDep, db: DbDep):
    try:
        result = await service.create_link(db, team_id, current_admin)
    except PermissionError:
        raise _forbidden()
    if result is None:
        raise _not_found()
    return result


@router.delete("/teams/{team_id}/link", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_link(team_id: int, current_admin: AdminDep, db: DbDep):
    try:
        done = await service.deactivate_link(db, team_id, current_admin)
    except PermissionError:
        raise _forbidden()
    if not done:
        raise _not_found()


@router.get("/teams/{team_id}", response_model=FeedbackGroupedOut, summary="Feedback groupé par question")
async def get_feedback(team_id: int, current_admin: AdminDep, db: DbDep):
    try:
        result = await service.get_grouped(db, team_id, current_admin)
    except PermissionError:
        raise _forbidden()
    if result is None:
        raise _not_found()
    return result


@router.delete("/teams/{team_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Effacer le feedback")
async def clear_feedback(team_id: int, current_admin: AdminDep, db: DbDep):
    try:
        done = await service.clear(db, team_id, current_admin)
    except PermissionError:
        raise _forbidden()
    if not done:
        raise _not_found()


# ─────────────────────────────────────────────
# PUBLIC
# ─────────────────────────────────────────────

@router.get("/check", response_model=FeedbackLinkCheckOut, summary="Valider un lien de feedback")
async def check_link(db: DbDep, team_slug: str = Query(...), token: str = Query(..., alias="k")):
    try:
        return await service.check_link(db, team_slug, token)
    except ValueError as e:
        raise _http_error(e)


@router.post(
    "/submit",
    response_model=FeedbackSubmitOut,
    status_code=status.HTTP_201_CREATED,
    summary="Envoyer un feedback anonyme",
)
async def submit(payload: FeedbackSubmitIn, db: DbDep):
    try:
        return await service.submit(db, payload)
    except ValueError as e:
        raise _http_error(e)
