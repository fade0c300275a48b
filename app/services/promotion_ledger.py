"""
Promotion ledger: vendors buy a time-boxed featured package, cancel it, list their promotions.

vendor_promotions is the source of truth. Vendor.is_featured / promotion_tier / featured_until
are a projection of it, rebuilt by recompute_featured_state after every ledger transition.
Expiry is lazy: an ACTIVE row whose end_date has passed reads as EXPIRED everywhere, and is
persisted as EXPIRED by the next mutating operation (or the optional sweeper).

One ACTIVE promotion per vendor: checked before insert, enforced by the partial unique index
ix_vendor_promotions_vendor_id_active. Two concurrent purchases race on that index and the
loser gets Conflict.
"""
import calendar
import copy
import logging
import secrets
from datetime import datetime
from decimal import Decimal, InvalidOperation

from app.models.user import UserRole
from app.models.vendor import Vendor
from app.models.vendor_promotion import PromotionStatus, VendorPromotion
from app.repositories.gateway import PersistenceGateway
from app.schemas.promotion import PromotionResponse
from app.services.errors import Conflict, DependencyFailure, InvalidArgument, NotFound
from app.services.workflow import WorkflowContext, best_effort, commit_primary, require_text

logger = logging.getLogger(__name__)

ACTIVE = PromotionStatus.ACTIVE.value
CANCELLED = PromotionStatus.CANCELLED.value
EXPIRED = PromotionStatus.EXPIRED.value

# vendor_promotions.price is Numeric(10, 2)
MAX_PRICE = Decimal("99999999.99")

DURATION_MONTHS = {
    "1 Month": 1,
    "3 Months": 3,
    "6 Months": 6,
}

# Prices in INR
PACKAGES = [
    {
        "id": "basic",
        "name": "Basic Boost",
        "price": 2999,
        "duration": "1 Month",
        "features": [
            "Featured in search results",
            "Homepage banner (2 days)",
            "Social media mentions",
            "Basic analytics",
        ],
        "color": "blue",
        "popular": False,
    },
    {
        "id": "premium",
        "name": "Premium Push",
        "price": 7999,
        "duration": "3 Months",
        "features": [
            "Top search placement",
            "Homepage banner (1 week)",
            "Vlogger collaboration priority",
            "Advanced analytics",
            "Customer review highlights",
        ],
        "color": "orange",
        "popular": True,
    },
    {
        "id": "ultimate",
        "name": "Ultimate Exposure",
        "price": 19999,
        "duration": "6 Months",
        "features": [
            "Premium placement everywhere",
            "Dedicated promotion page",
            "Guaranteed vlogger partnerships",
            "Complete analytics suite",
            "Personal account manager",
        ],
        "color": "purple",
        "popular": False,
    },
]


def list_packages() -> list[dict]:
    """Fixed package catalog. Returns a fresh copy so callers cannot mutate the config."""
    return copy.deepcopy(PACKAGES)


def add_months(dt: datetime, months: int) -> datetime:
    """Calendar-month addition; the day is clamped to the target month (Jan 31 + 1 -> Feb 28/29)."""
    month_index = dt.month - 1 + months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def effective_status(promotion, now: datetime) -> str:
    """Persisted status with lazy expiry applied. Never trust promotion.status alone."""
    if promotion.status == ACTIVE and promotion.end_date <= now:
        return EXPIRED
    return promotion.status


def to_response(promotion, now: datetime) -> PromotionResponse:
    out = PromotionResponse.model_validate(promotion)
    out.status = effective_status(promotion, now)
    return out


def _parse_price(value) -> Decimal:
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidArgument("package_price must be a number")
    if not price.is_finite():
        raise InvalidArgument("package_price must be a number")
    if price > MAX_PRICE:
        raise InvalidArgument(f"package_price must not exceed {MAX_PRICE}")
    price = price.quantize(Decimal("0.01"))
    if price <= 0:
        raise InvalidArgument("package_price must be greater than 0")
    return price


def _persist_expiry(gateway: PersistenceGateway, promotion_id: str) -> bool:
    """ACTIVE -> EXPIRED, conditional on the row still being ACTIVE. True if this call moved it."""
    updated = commit_primary(
        gateway.update(VendorPromotion, {"id": promotion_id, "status": ACTIVE}, {"status": EXPIRED}),
        "expire promotion",
    )
    if updated is not None:
        logger.info("Promotion %s expired (vendor %s)", promotion_id, updated.vendor_id)
    return updated is not None


def recompute_featured_state(gateway: PersistenceGateway, vendor_id: str, now: datetime) -> Vendor:
    """
    Rebuild the vendor's featured fields strictly from the ledger: featured iff the vendor has
    an ACTIVE promotion whose end_date is in the future. Safe to call any time to repair drift.
    """
    result = gateway.find(VendorPromotion, {"vendor_id": vendor_id, "status": ACTIVE})
    if not result.ok:
        raise DependencyFailure(f"Could not load promotions for vendor {vendor_id}: {result.error.message}")
    current = next((p for p in result.data if effective_status(p, now) == ACTIVE), None)
    if current is not None:
        patch = {
            "is_featured": True,
            "promotion_tier": current.package_id,
            "featured_until": current.end_date,
        }
    else:
        patch = {"is_featured": False, "promotion_tier": None, "featured_until": None}
    vendor = commit_primary(gateway.update(Vendor, {"id": vendor_id}, patch), "update vendor featured state")
    if vendor is None:
        raise NotFound(f"Vendor {vendor_id} not found")
    return vendor


def _sync_featured_state(ctx: WorkflowContext, vendor_id: str) -> None:
    best_effort(f"featured-state sync for vendor {vendor_id}", recompute_featured_state, ctx.gateway, vendor_id, ctx.now())


def purchase(
    ctx: WorkflowContext,
    package_id: str | None,
    package_name: str | None,
    price,
    duration: str | None,
    payment_method: str | None = "test",
) -> tuple[PromotionResponse, str]:
    """
    Buy a promotion package for the calling vendor. Payment is simulated (always completed).
    Returns (promotion, payment_id).
    """
    ctx.actor.require(UserRole.VENDOR)
    require_text(package_id=package_id, package_name=package_name, package_price=price, package_duration=duration)
    amount = _parse_price(price)
    months = DURATION_MONTHS.get(duration.strip())
    if months is None:
        raise InvalidArgument(f"package_duration must be one of: {', '.join(DURATION_MONTHS)}")

    vendor_id = ctx.actor.id
    now = ctx.now()
    current = commit_primary(
        ctx.gateway.find_one(VendorPromotion, {"vendor_id": vendor_id, "status": ACTIVE}),
        "load active promotion",
    )
    if current is not None:
        if effective_status(current, now) != EXPIRED:
            raise Conflict("You already have an active promotion. Please wait for it to expire.")
        _persist_expiry(ctx.gateway, current.id)

    def _insert_rejected():
        # Lost the race on the one-active index, or the vendor row does not exist
        existing = ctx.gateway.find_one(VendorPromotion, {"vendor_id": vendor_id, "status": ACTIVE})
        if existing.ok and existing.data is not None:
            return Conflict("You already have an active promotion. Please wait for it to expire.")
        return NotFound("Vendor profile not found")

    payment_id = f"pay_{secrets.token_hex(6)}"
    promotion = commit_primary(
        ctx.gateway.insert(
            VendorPromotion,
            {
                "vendor_id": vendor_id,
                "package_id": package_id.strip(),
                "package_name": package_name.strip(),
                "price": amount,
                "duration": duration.strip(),
                "start_date": now,
                "end_date": add_months(now, months),
                "status": ACTIVE,
                "payment_id": payment_id,
                "payment_method": (payment_method or "test").strip() or "test",
                "payment_status": "completed",
                "created_at": now,
                "updated_at": now,
            },
        ),
        "record promotion",
        on_integrity=_insert_rejected,
    )
    logger.info(
        "Vendor %s purchased promotion %s (%s, %s) until %s",
        vendor_id, promotion.id, promotion.package_id, promotion.duration, promotion.end_date.isoformat(),
    )
    response = to_response(promotion, now)
    _sync_featured_state(ctx, vendor_id)
    return response, payment_id


def cancel(ctx: WorkflowContext, promotion_id: str | None) -> PromotionResponse:
    """Cancel the calling vendor's ACTIVE promotion. Someone else's promotion is NotFound."""
    ctx.actor.require(UserRole.VENDOR)
    require_text(promotion_id=promotion_id)
    vendor_id = ctx.actor.id
    now = ctx.now()
    promotion = commit_primary(
        ctx.gateway.find_one(VendorPromotion, {"id": promotion_id, "vendor_id": vendor_id}),
        "load promotion",
    )
    if promotion is None:
        raise NotFound("Promotion not found")

    status = effective_status(promotion, now)
    if status == EXPIRED and promotion.status == ACTIVE:
        _persist_expiry(ctx.gateway, promotion.id)
        _sync_featured_state(ctx, vendor_id)
    if status != ACTIVE:
        raise Conflict(f"Promotion is already {status.lower()}")

    updated = commit_primary(
        ctx.gateway.update(
            VendorPromotion,
            {"id": promotion_id, "vendor_id": vendor_id, "status": ACTIVE},
            {"status": CANCELLED, "cancelled_at": now, "updated_at": now},
        ),
        "cancel promotion",
    )
    if updated is None:
        raise Conflict("Promotion is no longer active")
    logger.info("Vendor %s cancelled promotion %s", vendor_id, promotion_id)
    response = to_response(updated, now)
    _sync_featured_state(ctx, vendor_id)
    return response


def list_all(ctx: WorkflowContext) -> list[PromotionResponse]:
    """All of the calling vendor's promotions, newest first, with effective status."""
    ctx.actor.require(UserRole.VENDOR)
    now = ctx.now()
    rows = commit_primary(
        ctx.gateway.find(VendorPromotion, {"vendor_id": ctx.actor.id}, order_by="created_at", descending=True),
        "load promotions",
    )
    return [to_response(p, now) for p in rows]


def list_active(ctx: WorkflowContext) -> list[PromotionResponse]:
    return [p for p in list_all(ctx) if p.status == ACTIVE]


def expire_overdue(gateway: PersistenceGateway, now: datetime) -> list[str]:
    """Persist EXPIRED on every overdue ACTIVE promotion and resync the affected vendors."""
    rows = commit_primary(gateway.find(VendorPromotion, {"status": ACTIVE}), "load active promotions")
    overdue = [(p.id, p.vendor_id) for p in rows if effective_status(p, now) == EXPIRED]
    expired = []
    for promotion_id, vendor_id in overdue:
        if _persist_expiry(gateway, promotion_id):
            expired.append(promotion_id)
            best_effort(f"featured-state sync for vendor {vendor_id}", recompute_featured_state, gateway, vendor_id, now)
    return expired


def reconcile_featured_states(gateway: PersistenceGateway, now: datetime) -> int:
    """Re-derive featured-state for every vendor from the ledger. Returns how many synced."""
    vendors = commit_primary(gateway.find(Vendor), "load vendors")
    vendor_ids = [v.id for v in vendors]
    synced = 0
    for vendor_id in vendor_ids:
        if best_effort(f"featured-state sync for vendor {vendor_id}", recompute_featured_state, gateway, vendor_id, now):
            synced += 1
    return synced
