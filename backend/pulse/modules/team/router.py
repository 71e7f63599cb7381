# pulse/modules/team/router.py
"""
Endpoints équipes (administrateur propriétaire, super admin : toutes).

Métriques et needs_attention sont inclus dans la liste et le détail.
"""
from typing import List, Optional, Literal
from fastapi import APIRouter, HTTPException, Query, status

from pulse.modules.team.schemas import (
    TeamCreateIn,
    TeamUpdateIn,
    TeamOut,
    TeamWithMetricsOut,
    TeamCreatedOut,
    TeamMetricsOut,
    InviteLinkOut,
    VibeHistoryOut,
)
from pulse.modules.team.service import TeamService
from pulse.shared.deps import DbDep, AdminDep

router = APIRouter(prefix="/teams", tags=["Teams"])
service = TeamService()


def _not_found():
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Équipe introuvable.")


def _forbidden():
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Accès refusé.")


# ─────────────────────────────────────────────
# LISTE & CRÉATION
# ─────────────────────────────────────────────

@router.get("", response_model=List[TeamWithMetricsOut], summary="Mes équipes avec métriques")
async def list_teams(
    current_admin: AdminDep,
    db: DbDep,
    filter: Optional[Literal["needs_attention"]] = Query(None),
):
    return await service.list_teams(db, current_admin, needs_attention_only=filter == "needs_attention")


@router.post(
    "",
    response_model=TeamCreatedOut,
    status_code=status.HTTP_201_CREATED,
    summary="Créer une équipe",
    description="Limité par max_teams du tier. Retourne le premier lien de check-in.",
)
async def create_team(payload: TeamCreateIn, current_admin: AdminDep, db: DbDep):
    try:
        return await service.create_team(db, current_admin, payload)
    except ValueError as e:
        if str(e) == "TEAM_LIMIT_REACHED":
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Limite d'équipes atteinte pour votre abonnement.",
            )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# ─────────────────────────────────────────────
# DÉTAIL / ÉDITION / SUPPRESSION
# ─────────────────────────────────────────────

@router.get("/{team_id}", response_model=TeamWithMetricsOut)
async def get_team(team_id: int, current_admin: AdminDep, db: DbDep):
    try:
        team = await service.get_team(db, team_id, current_admin)
    except PermissionError:
        raise _forbidden()
    if not team:
        raise _not_found()
    return team


@router.patch("/{team_id}", response_model=TeamOut)
async def update_team(team_id: int, payload: TeamUpdateIn, current_admin: AdminDep, db: DbDep):
    try:
        team = await service.update_team(db, team_id, current_admin, payload)
    except PermissionError:
        raise _forbidden()
    if not team:
        raise _not_found()
    return team


@router.delete("/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_team(team_id: int, current_admin: AdminDep, db: DbDep):
    try:
        deleted = await service.delete_team(db, team_id, current_admin)
    except PermissionError:
        raise _forbidden()
    if not deleted:
        raise _not_found()


@router.post(
    "/{team_id}/reset",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Réinitialiser les données Vibe",
    description="Supprime tous les check-ins et participants de l'équipe.",
)
async def reset_team(team_id: int, current_admin: AdminDep, db: DbDep):
    try:
        done = await service.reset_team(db, team_id, current_admin)
    except PermissionError:
        raise _forbidden()
    if not done:
        raise _not_found()


@router.post("/{team_id}/invite-link", response_model=InviteLinkOut, summary="Régénérer le lien de check-in")
async def regenerate_invite_link(team_id: int, current_admin: AdminDep, db: DbDep):
    try:
        link = await service.regenerate_invite_link(db, team_id, current_admin)
    except PermissionError:
        raise _forbidden()
    if not link:
        raise _not_found()
    return link


# ─────────────────────────────────────────────
# MÉTRIQUES
# ─────────────────────────────────────────────

@router.get("/{team_id}/metrics", response_model=TeamMetricsOut)
async def get_team_metrics(team_id: int, current_admin: AdminDep, db: DbDep):
    try:
        metrics = await service.get_metrics(db, team_id, current_admin)
    except PermissionError:
        raise _forbidden()
    if metrics is None:
        raise _not_found()
    return metrics


@router.get("/{team_id}/vibe/history", response_model=VibeHistoryOut)
async def get_vibe_history(team_id: int, current_admin: AdminDep, db: DbDep):
    try:
        history = await service.get_vibe_history(db, team_id, current_admin)
    except PermissionError:
        raise _forbidden()
    if history is None:
        raise _not_found()
    return history
