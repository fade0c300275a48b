from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel


class PromotionResponse(BaseModel):
    """Promotion as seen by callers. status is the effective status (lazy expiry applied)."""
    id: str
    vendor_id: str
    package_id: str
    package_name: str
    price: Decimal
    duration: str
    start_date: datetime
    end_date: datetime
    status: str
    payment_id: str | None
    payment_method: str
    payment_status: str
    cancelled_at: datetime | None
    created_at: datetime

    class Config:
        from_attributes = True


class PromotionPurchase(BaseModel):
    """Body for purchase. Field names follow the public API."""
    package_id: str | None = None
    package_name: str | None = None
    package_price: Decimal | str | None = None
    package_duration: str | None = None
    payment_method: str | None = "test"

