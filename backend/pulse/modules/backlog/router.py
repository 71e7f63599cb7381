# pulse/modules/backlog/router.py
"""
Backlog public et release notes.

GET publics (filtre ?product=vibe|wow, les éléments `shared` sont toujours inclus).
Création / édition / suppression : super admin.
"""
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Query, status

from pulse.modules.backlog.schemas import (
    BacklogItemIn,
    BacklogItemOut,
    BacklogItemUpdateIn,
    ReleaseNoteIn,
    ReleaseNoteOut,
    ReleaseNoteUpdateIn,
)
from pulse.modules.backlog.service import BacklogService
from pulse.shared.deps import DbDep, SuperAdminDep
from pulse.shared.enums import ProductType

router = APIRouter(prefix="/backlog", tags=["Backlog"])
service = BacklogService()


def _decision_required():
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Une décision est requise pour le statut 'decided'.",
    )


# ─────────────────────────────────────────────
# BACKLOG
# ─────────────────────────────────────────────

@router.get("/items", response_model=List[BacklogItemOut], summary="Backlog public")
async def list_items(db: DbDep, product: Optional[ProductType] = Query(None)):
    return await service.list_items(db, product)


@router.post("/items", response_model=BacklogItemOut, status_code=status.HTTP_201_CREATED)
async def create_item(payload: BacklogItemIn, current_admin: SuperAdminDep, db: DbDep):
    try:
        return await service.create_item(db, payload)
    except ValueError:
        raise _decision_required()


@router.patch("/items/{item_id}", response_model=BacklogItemOut)
async def update_item(item_id: int, payload: BacklogItemUpdateIn, current_admin: SuperAdminDep, db: DbDep):
    try:
        item = await service.update_item(db, item_id, payload)
    except ValueError:
        raise _decision_required()
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Élément introuvable.")
    return item


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(item_id: int, current_admin: SuperAdminDep, db: DbDep):
    if not await service.delete_item(db, item_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Élément introuvable.")


# ─────────────────────────────────────────────
# RELEASE NOTES
# ─────────────────────────────────────────────

@router.get("/releases", response_model=List[ReleaseNoteOut], summary="Release notes")
async def list_releases(db: DbDep, product: Optional[ProductType] = Query(None)):
    return await service.list_releases(db, product)


@router.post("/releases", response_model=ReleaseNoteOut, status_code=status.HTTP_201_CREATED)
async def create_release(payload: ReleaseNoteIn, current_admin: SuperAdminDep, db: DbDep):
    return await service.create_release(db, payload)


@router.patch("/releases/{release_id}", response_model=ReleaseNoteOut)
async def update_release(
    release_id: int, payload: ReleaseNoteUpdateIn, current_admin: SuperAdminDep, db: DbDep
):
    release = await service.update_release(db, release_id, payload)
    if not release:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Release introuvable.")
    return release


@router.delete("/releases/{release_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_release(release_id: int, current_admin: SuperAdminDep, db: DbDep):
    if not await service.delete_release(db, release_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Release introuvable.")
