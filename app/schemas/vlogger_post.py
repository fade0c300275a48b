from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel


class VloggerPostResponse(BaseModel):
    id: str
    vlogger_id: str
    vendor_id: str
    title: str
    description: str | None
    url: str
    screenshot_url: str | None
    platform: str
    status: str
    admin_notes: str | None
    payout_amount: Decimal | None
    submitted_at: datetime
    reviewed_at: datetime | None
    reviewed_by_id: str | None
    # Display metadata from the joined vendor / vlogger rows
    vendor_name: str | None = None
    vendor_cuisine_type: str | None = None
    vendor_location: str | None = None
    vlogger_name: str | None = None
    vlogger_username: str | None = None

    class Config:
        from_attributes = True

    @classmethod
    def from_post(cls, post) -> "VloggerPostResponse":
        out = cls.model_validate(post)
        if post.vendor is not None:
            out.vendor_name = post.vendor.name
            out.vendor_cuisine_type = post.vendor.cuisine_type
            out.vendor_location = post.vendor.location
        if post.vlogger is not None:
            out.vlogger_name = post.vlogger.name
            out.vlogger_username = post.vlogger.username
        return out


class VloggerPostReview(BaseModel):
    """Body for admin review. status: approved | rejected."""
    status: str | None = None
    admin_notes: str | None = None
    payout_amount: Decimal | str | None = None
