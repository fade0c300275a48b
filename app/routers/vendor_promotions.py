"""
Vendor promotions: packages catalog (public), purchase / cancel / list (vendor).
Errors from the ledger are rendered by the app-level WorkflowError handler.
"""
from fastapi import APIRouter, Depends, status
from app.auth import get_workflow_context
from app.schemas.promotion import PromotionPurchase
from app.services import promotion_ledger
from app.services.workflow import WorkflowContext

router = APIRouter(prefix="/api/vendor-promotions", tags=["vendor-promotions"])


@router.get("")
def list_my_promotions(ctx: WorkflowContext = Depends(get_workflow_context)):
    """Vendor: all my promotions, newest first. Overdue ones show status EXPIRED."""
    return {"success": True, "promotions": promotion_ledger.list_all(ctx)}


@router.get("/active")
def list_my_active_promotions(ctx: WorkflowContext = Depends(get_workflow_context)):
    """Vendor: my currently active promotion (at most one)."""
    return {"success": True, "promotions": promotion_ledger.list_active(ctx)}


@router.get("/packages")
def list_packages():
    """Available promotion packages (public)."""
    return {"success": True, "packages": promotion_ledger.list_packages()}


@router.post("/purchase", status_code=status.HTTP_201_CREATED)
def purchase_promotion(
    body: PromotionPurchase,
    ctx: WorkflowContext = Depends(get_workflow_context),
):
    """Vendor: buy a package. Payment is simulated. Fails if a promotion is already active."""
    promotion, payment_id = promotion_ledger.purchase(
        ctx,
        package_id=body.package_id,
        package_name=body.package_name,
        price=body.package_price,
        duration=body.package_duration,
        payment_method=body.payment_method,
    )
    return {
        "success": True,
        "message": "Promotion purchased successfully!",
        "promotion": promotion,
        "payment_id": payment_id,
    }


@router.patch("/{promotion_id}/cancel")
def cancel_promotion(
    promotion_id: str,
    ctx: WorkflowContext = Depends(get_workflow_context),
):
    """Vendor: cancel my active promotion. Featured status is removed."""
    promotion = promotion_ledger.cancel(ctx, promotion_id)
    return {"success": True, "message": "Promotion cancelled successfully", "promotion": promotion}
