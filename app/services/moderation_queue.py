"""
Moderation queue for vlogger sponsored posts.
Vlogger submits (PENDING) -> admin reviews exactly once (APPROVED with payout, or REJECTED).
Payout is recorded only; disbursement happens elsewhere.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from app.config import get_settings
from app.models.user import UserRole
from app.models.vlogger_post import PostStatus, VloggerPost
from app.schemas.vlogger_post import VloggerPostResponse
from app.services.errors import Conflict, InvalidArgument, NotFound
from app.services.media_storage import MediaStorage, get_media_storage
from app.services.workflow import WorkflowContext, commit_primary, require_text

logger = logging.getLogger(__name__)

PENDING = PostStatus.PENDING.value
APPROVED = PostStatus.APPROVED.value
REJECTED = PostStatus.REJECTED.value

# vlogger_posts.payout_amount is Numeric(10, 2)
MAX_PAYOUT = Decimal("99999999.99")


@dataclass
class Screenshot:
    filename: str | None
    content_type: str | None
    content: bytes


def _parse_payout(value) -> Decimal:
    if value is None or not str(value).strip():
        raise InvalidArgument("payout_amount is required when approving a post")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidArgument("payout_amount must be a number")
    if not amount.is_finite() or amount < 0:
        raise InvalidArgument("payout_amount must be zero or greater")
    if amount > MAX_PAYOUT:
        raise InvalidArgument(f"payout_amount must not exceed {MAX_PAYOUT}")
    return amount.quantize(Decimal("0.01"))


def _store_screenshot(ctx: WorkflowContext, screenshot: Screenshot, storage: MediaStorage | None) -> str:
    ct = (screenshot.content_type or "").split(";")[0].strip().lower()
    if not ct.startswith("image/"):
        raise InvalidArgument("Only image files are allowed")
    if len(screenshot.content) > get_settings().screenshot_max_bytes:
        raise InvalidArgument("Screenshot is too large")
    storage = storage or get_media_storage()
    return storage.save(f"vlogger-posts/{ctx.actor.id}", screenshot.filename, screenshot.content)


def submit(
    ctx: WorkflowContext,
    vendor_id: str | None,
    title: str | None,
    url: str | None,
    platform: str | None,
    description: str | None = None,
    screenshot: Screenshot | None = None,
    storage: MediaStorage | None = None,
) -> VloggerPostResponse:
    """Create a PENDING post for the calling vlogger. An empty screenshot counts as none."""
    ctx.actor.require(UserRole.VLOGGER)
    require_text(vendor_id=vendor_id, title=title, url=url, platform=platform)

    screenshot_url = None
    if screenshot is not None and screenshot.content:
        screenshot_url = _store_screenshot(ctx, screenshot, storage)

    post = commit_primary(
        ctx.gateway.insert(
            VloggerPost,
            {
                "vlogger_id": ctx.actor.id,
                "vendor_id": vendor_id.strip(),
                "title": title.strip(),
                "description": (description or "").strip() or None,
                "url": url.strip(),
                "screenshot_url": screenshot_url,
                "platform": platform.strip(),
                "status": PENDING,
                "submitted_at": ctx.now(),
            },
        ),
        "submit post",
        on_integrity=lambda: NotFound("Vendor not found"),
    )
    logger.info("Vlogger %s submitted post %s for vendor %s", ctx.actor.id, post.id, post.vendor_id)
    return VloggerPostResponse.from_post(post)


def review(
    ctx: WorkflowContext,
    post_id: str | None,
    decision: str | None,
    admin_notes: str | None = None,
    payout_amount=None,
) -> VloggerPostResponse:
    """
    One-shot admin decision on a PENDING post.
    decision: "approved" | "rejected" (case-insensitive). Approval requires payout_amount >= 0;
    a payout sent with a rejection is ignored. Reviewing a post twice is a Conflict.
    """
    ctx.actor.require(UserRole.ADMIN)
    require_text(post_id=post_id)
    status = (decision or "").strip().upper()
    if status not in (APPROVED, REJECTED):
        raise InvalidArgument("Status must be approved or rejected")
    payout = _parse_payout(payout_amount) if status == APPROVED else None

    post = commit_primary(ctx.gateway.find_one(VloggerPost, {"id": post_id}), "load post")
    if post is None:
        raise NotFound("Post not found")
    if post.status != PENDING:
        raise Conflict(f"Post has already been {post.status.lower()}")

    updated = commit_primary(
        ctx.gateway.update(
            VloggerPost,
            {"id": post_id, "status": PENDING},
            {
                "status": status,
                "admin_notes": (admin_notes or "").strip() or None,
                "payout_amount": payout,
                "reviewed_at": ctx.now(),
                "reviewed_by_id": ctx.actor.id,
            },
        ),
        "review post",
    )
    if updated is None:
        raise Conflict("Post has already been reviewed")
    logger.info("Admin %s %s post %s (payout %s)", ctx.actor.id, status.lower(), post_id, payout)
    return VloggerPostResponse.from_post(updated)


def list_by_status(ctx: WorkflowContext, status: str | None = PENDING) -> list[VloggerPostResponse]:
    """Admin listing of posts in one status, newest submission first."""
    ctx.actor.require(UserRole.ADMIN)
    wanted = (status or PENDING).strip().upper()
    if wanted not in (PENDING, APPROVED, REJECTED):
        raise InvalidArgument("status must be pending, approved or rejected")
    rows = commit_primary(
        ctx.gateway.find(VloggerPost, {"status": wanted}, order_by="submitted_at", descending=True),
        "load posts",
    )
    return [VloggerPostResponse.from_post(p) for p in rows]


def list_pending(ctx: WorkflowContext) -> list[VloggerPostResponse]:
    return list_by_status(ctx, PENDING)


def list_by_vlogger(ctx: WorkflowContext) -> list[VloggerPostResponse]:
    """The calling vlogger's own posts, newest first."""
    ctx.actor.require(UserRole.VLOGGER)
    rows = commit_primary(
        ctx.gateway.find(VloggerPost, {"vlogger_id": ctx.actor.id}, order_by="submitted_at", descending=True),
        "load posts",
    )
    return [VloggerPostResponse.from_post(p) for p in rows]
