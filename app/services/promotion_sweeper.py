"""Background task: persist promotion expiry and repair vendor featured-state drift."""
import asyncio
import logging
from datetime import datetime

from app.database import SessionLocal
from app.repositories.gateway import PersistenceGateway
from app.services.promotion_ledger import expire_overdue, reconcile_featured_states

logger = logging.getLogger(__name__)


def sweep_once(session_factory=SessionLocal, now: datetime | None = None) -> dict:
    """One pass with its own session. Returns counts for logging/tests."""
    now = now or datetime.utcnow()
    db = session_factory()
    try:
        gateway = PersistenceGateway(db)
        expired = expire_overdue(gateway, now)
        synced = reconcile_featured_states(gateway, now)
    finally:
        db.close()
    if expired:
        logger.info("Promotion sweep expired %d promotion(s)", len(expired))
    return {"expired": len(expired), "vendors_synced": synced}


async def promotion_expiry_sweeper(interval: int):
    """Run sweep_once every `interval` seconds until cancelled."""
    while True:
        try:
            await asyncio.to_thread(sweep_once)
        except Exception:
            logger.exception("Promotion sweep failed")
        await asyncio.sleep(interval)
