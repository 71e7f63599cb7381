# pulse/modules/billing/router.py
"""
Endpoints abonnement.

- Public      : catalogue des tiers
- Admin       : état de son abonnement
- Super admin : changement de tier d'un compte (upgrade / downgrade)
"""
from fastapi import APIRouter, HTTPException, status

from pulse.modules.billing.schemas import AccountBillingOut, SetTierIn, SetTierOut, TierCatalogOut
from pulse.modules.billing.service import BillingService
from pulse.shared.deps import DbDep, AdminDep, SuperAdminDep

router = APIRouter(prefix="/billing", tags=["Billing"])
service = BillingService()


@router.get("/tiers", response_model=TierCatalogOut, summary="Catalogue des abonnements")
async def list_tiers():
    return {"tiers": service.list_tiers()}


@router.get("/me", response_model=AccountBillingOut, summary="Mon abonnement")
async def get_my_billing(current_admin: AdminDep, db: DbDep):
    return await service.get_account_billing(db, current_admin)


@router.put(
    "/admins/{admin_id}/tier",
    response_model=SetTierOut,
    summary="Changer le tier d'un compte",
)
async def set_account_tier(admin_id: int, payload: SetTierIn, current_admin: SuperAdminDep, db: DbDep):
    result = await service.set_account_tier(
        db, admin_id, payload.tier, payload.billing_status, payload.billing_period_end
    )
    if not result:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Compte introuvable.")
    return result
