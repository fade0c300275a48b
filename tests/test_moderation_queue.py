from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.models import VloggerPost
from app.repositories.gateway import GatewayResult
from app.services import moderation_queue
from app.services.errors import Conflict, DependencyFailure, Forbidden, InvalidArgument, NotFound
from app.services.media_storage import MediaStorage
from app.services.moderation_queue import Screenshot

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _submit(ctx, to_vendor, **overrides):
    fields = {
        "vendor_id": to_vendor,
        "title": "X",
        "url": "http://youtube.example/watch?v=abc",
        "platform": "YouTube",
    }
    fields.update(overrides)
    return moderation_queue.submit(ctx, **fields)


def _status(db, post_id):
    db.expire_all()
    return db.get(VloggerPost, post_id).status


# ---------- submit ----------


def test_submit_creates_pending_post(make_ctx, vlogger_user, vendor_user, clock):
    post = _submit(make_ctx(vlogger_user), vendor_user.id, description="  Great tacos  ")

    assert post.status == "PENDING"
    assert post.vlogger_id == vlogger_user.id
    assert post.vendor_id == vendor_user.id
    assert post.description == "Great tacos"
    assert post.submitted_at == clock.now
    assert post.screenshot_url is None
    assert post.payout_amount is None
    assert post.reviewed_at is None and post.reviewed_by_id is None
    assert post.vendor_name == "Taco Cart"
    assert post.vlogger_name == "Street Eats"


@pytest.mark.parametrize("missing", ["vendor_id", "title", "url", "platform"])
def test_submit_requires_fields(db, make_ctx, vlogger_user, vendor_user, missing):
    with pytest.raises(InvalidArgument):
        _submit(make_ctx(vlogger_user), vendor_user.id, **{missing: "  "})
    assert db.query(VloggerPost).count() == 0


def test_submit_requires_vlogger_role(make_ctx, vendor_user):
    with pytest.raises(Forbidden):
        _submit(make_ctx(vendor_user), vendor_user.id)


def test_submit_unknown_vendor_is_not_found(db, make_ctx, vlogger_user):
    with pytest.raises(NotFound):
        _submit(make_ctx(vlogger_user), "no-such-vendor")
    assert db.query(VloggerPost).count() == 0


def test_submit_stores_screenshot(tmp_path, make_ctx, vlogger_user, vendor_user):
    storage = MediaStorage(tmp_path, "/media")
    post = _submit(
        make_ctx(vlogger_user),
        vendor_user.id,
        screenshot=Screenshot(filename="my shot.png", content_type="image/png", content=PNG),
        storage=storage,
    )

    assert post.screenshot_url.startswith(f"/media/vlogger-posts/{vlogger_user.id}/")
    assert post.screenshot_url.endswith("-my-shot.png")
    stored = tmp_path / post.screenshot_url[len("/media/"):]
    assert stored.read_bytes() == PNG


def test_submit_rejects_non_image_screenshot(tmp_path, make_ctx, vlogger_user, vendor_user):
    with pytest.raises(InvalidArgument):
        _submit(
            make_ctx(vlogger_user),
            vendor_user.id,
            screenshot=Screenshot(filename="notes.txt", content_type="text/plain", content=b"hello"),
            storage=MediaStorage(tmp_path),
        )


def test_submit_rejects_oversized_screenshot(tmp_path, make_ctx, vlogger_user, vendor_user, monkeypatch):
    monkeypatch.setattr(moderation_queue, "get_settings", lambda: SimpleNamespace(screenshot_max_bytes=10))
    with pytest.raises(InvalidArgument):
        _submit(
            make_ctx(vlogger_user),
            vendor_user.id,
            screenshot=Screenshot(filename="big.png", content_type="image/png", content=PNG),
            storage=MediaStorage(tmp_path),
        )


def test_submit_fails_when_upload_fails(db, make_ctx, vlogger_user, vendor_user):
    class BrokenStorage:
        def save(self, folder, filename, content):
            raise DependencyFailure("Failed to upload screenshot")

    with pytest.raises(DependencyFailure):
        _submit(
            make_ctx(vlogger_user),
            vendor_user.id,
            screenshot=Screenshot(filename="shot.png", content_type="image/png", content=PNG),
            storage=BrokenStorage(),
        )
    assert db.query(VloggerPost).count() == 0


def test_media_storage_reports_write_errors(tmp_path):
    blocker = tmp_path / "blocked"
    blocker.write_text("not a directory")
    with pytest.raises(DependencyFailure):
        MediaStorage(blocker).save("vlogger-posts/x", "shot.png", PNG)


# ---------- review ----------


def test_approve_then_second_review_conflicts(db, make_ctx, vlogger_user, vendor_user, admin_user, clock):
    post = _submit(make_ctx(vlogger_user), vendor_user.id)
    clock.advance(hours=2)
    admin_ctx = make_ctx(admin_user)

    approved = moderation_queue.review(admin_ctx, post.id, "approved", admin_notes="Nice", payout_amount=500)

    assert approved.status == "APPROVED"
    assert approved.payout_amount == Decimal("500")
    assert approved.reviewed_by_id == admin_user.id
    assert approved.reviewed_at == clock.now
    assert approved.admin_notes == "Nice"

    with pytest.raises(Conflict):
        moderation_queue.review(admin_ctx, post.id, "rejected")
    assert _status(db, post.id) == "APPROVED"


def test_reject_never_stores_payout(make_ctx, vlogger_user, vendor_user, admin_user):
    post = _submit(make_ctx(vlogger_user), vendor_user.id)
    rejected = moderation_queue.review(make_ctx(admin_user), post.id, "REJECTED", payout_amount="250")

    assert rejected.status == "REJECTED"
    assert rejected.payout_amount is None
    assert rejected.reviewed_by_id == admin_user.id


@pytest.mark.parametrize("decision", ["maybe", "", None, "pending"])
def test_unknown_decision_leaves_post_pending(db, make_ctx, vlogger_user, vendor_user, admin_user, decision):
    post = _submit(make_ctx(vlogger_user), vendor_user.id)
    with pytest.raises(InvalidArgument):
        moderation_queue.review(make_ctx(admin_user), post.id, decision, payout_amount=10)
    assert _status(db, post.id) == "PENDING"


@pytest.mark.parametrize("payout", [None, "", "-1", "lots", "NaN", "1e30", "100000000"])
def test_approval_requires_valid_payout(db, make_ctx, vlogger_user, vendor_user, admin_user, payout):
    post = _submit(make_ctx(vlogger_user), vendor_user.id)
    with pytest.raises(InvalidArgument):
        moderation_queue.review(make_ctx(admin_user), post.id, "approved", payout_amount=payout)
    assert _status(db, post.id) == "PENDING"


def test_approval_with_explicit_zero_payout(make_ctx, vlogger_user, vendor_user, admin_user):
    post = _submit(make_ctx(vlogger_user), vendor_user.id)
    approved = moderation_queue.review(make_ctx(admin_user), post.id, "approved", payout_amount="0")
    assert approved.payout_amount == Decimal("0")


def test_review_missing_post_is_not_found(make_ctx, admin_user):
    with pytest.raises(NotFound):
        moderation_queue.review(make_ctx(admin_user), "no-such-post", "rejected")


def test_review_requires_admin(make_ctx, vlogger_user, vendor_user):
    ctx = make_ctx(vlogger_user)
    post = _submit(ctx, vendor_user.id)
    with pytest.raises(Forbidden):
        moderation_queue.review(ctx, post.id, "approved", payout_amount=100)


def test_review_lost_race_conflicts(db, make_ctx, vlogger_user, vendor_user, admin_user, gateway, monkeypatch):
    post = _submit(make_ctx(vlogger_user), vendor_user.id)
    admin_ctx = make_ctx(admin_user)
    moderation_queue.review(admin_ctx, post.id, "rejected")

    # Second reviewer loaded the post while it was still pending
    monkeypatch.setattr(
        gateway, "find_one", lambda model, filters: GatewayResult(data=SimpleNamespace(id=post.id, status="PENDING"))
    )
    with pytest.raises(Conflict):
        moderation_queue.review(admin_ctx, post.id, "approved", payout_amount=100)
    assert _status(db, post.id) == "REJECTED"


# ---------- listing ----------


def test_list_pending_newest_first(make_ctx, vlogger_user, vendor_user, admin_user, clock):
    ctx = make_ctx(vlogger_user)
    older = _submit(ctx, vendor_user.id, title="Older")
    clock.advance(minutes=5)
    newer = _submit(ctx, vendor_user.id, title="Newer")
    clock.advance(minutes=5)
    reviewed = _submit(ctx, vendor_user.id, title="Reviewed")
    admin_ctx = make_ctx(admin_user)
    moderation_queue.review(admin_ctx, reviewed.id, "approved", payout_amount=100)

    pending = moderation_queue.list_pending(admin_ctx)
    assert [p.id for p in pending] == [newer.id, older.id]
    assert pending[0].vendor_name == "Taco Cart"
    assert pending[0].vlogger_username == "streeteats"
    assert [p.id for p in moderation_queue.list_by_status(admin_ctx, "approved")] == [reviewed.id]


def test_list_by_status_rejects_unknown_status(make_ctx, admin_user):
    with pytest.raises(InvalidArgument):
        moderation_queue.list_by_status(make_ctx(admin_user), "archived")


def test_list_pending_requires_admin(make_ctx, vlogger_user):
    with pytest.raises(Forbidden):
        moderation_queue.list_pending(make_ctx(vlogger_user))


def test_list_by_vlogger_only_returns_own_posts(db, make_ctx, vlogger_user, vendor_user):
    from app.models import User, UserRole

    other = User(email="other@example.com", full_name="Other", role=UserRole.VLOGGER.value)
    db.add(other)
    db.commit()
    mine = _submit(make_ctx(vlogger_user), vendor_user.id)
    _submit(make_ctx(other), vendor_user.id)

    assert [p.id for p in moderation_queue.list_by_vlogger(make_ctx(vlogger_user))] == [mine.id]
