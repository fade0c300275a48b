"""
Vlogger sponsored posts: vlogger submits (optional screenshot) and lists own posts;
admin lists the moderation queue and approves / rejects once.
"""
from fastapi import APIRouter, Depends, UploadFile, File, Form, Query, status
from app.auth import get_workflow_context
from app.schemas.vlogger_post import VloggerPostReview
from app.services import moderation_queue
from app.services.moderation_queue import Screenshot
from app.services.workflow import WorkflowContext

router = APIRouter(prefix="/api/vlogger-posts", tags=["vlogger-posts"])


# ---------- Vlogger ----------


@router.get("")
def list_my_posts(ctx: WorkflowContext = Depends(get_workflow_context)):
    """Vlogger: my submitted posts with vendor info, newest first."""
    return {"success": True, "posts": moderation_queue.list_by_vlogger(ctx)}


@router.post("", status_code=status.HTTP_201_CREATED)
def submit_post(
    vendor_id: str | None = Form(None),
    post_title: str | None = Form(None),
    post_url: str | None = Form(None),
    platform: str | None = Form(None),
    post_description: str | None = Form(None),
    screenshot: UploadFile | None = File(None),
    ctx: WorkflowContext = Depends(get_workflow_context),
):
    """Vlogger: submit a post for admin approval. screenshot (image) is optional."""
    shot = None
    if screenshot is not None and screenshot.filename:
        shot = Screenshot(
            filename=screenshot.filename,
            content_type=screenshot.content_type,
            content=screenshot.file.read(),
        )
    post = moderation_queue.submit(
        ctx,
        vendor_id=vendor_id,
        title=post_title,
        url=post_url,
        platform=platform,
        description=post_description,
        screenshot=shot,
    )
    return {
        "success": True,
        "message": "Post submitted successfully! Waiting for admin approval.",
        "post": post,
    }


# ---------- Admin ----------


@router.get("/admin")
def admin_list_posts(
    status_filter: str = Query("pending", alias="status"),
    ctx: WorkflowContext = Depends(get_workflow_context),
):
    """Admin: posts in one status (default pending), newest first."""
    return {"success": True, "posts": moderation_queue.list_by_status(ctx, status_filter)}


@router.patch("/{post_id}/review")
def admin_review_post(
    post_id: str,
    body: VloggerPostReview,
    ctx: WorkflowContext = Depends(get_workflow_context),
):
    """Admin: approve (payout_amount required) or reject a pending post."""
    post = moderation_queue.review(
        ctx,
        post_id,
        decision=body.status,
        admin_notes=body.admin_notes,
        payout_amount=body.payout_amount,
    )
    return {"success": True, "message": f"Post {post.status.lower()} successfully", "post": post}
