"""
Shared sequencing for the promotion and moderation workflows.

Each operation gets a WorkflowContext (gateway, authenticated actor, clock). The primary
write is the system of record and must succeed; derived writes (vendor featured-state)
go through best_effort and only log on failure.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from app.repositories.gateway import GatewayResult, PersistenceGateway
from app.services.errors import DependencyFailure, Forbidden, InvalidArgument, WorkflowError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    """Already-authenticated caller. role is a UserRole value."""
    id: str
    role: str

    def require(self, *roles: str) -> None:
        if self.role not in {getattr(r, "value", r) for r in roles}:
            allowed = " or ".join(getattr(r, "value", r).lower() for r in roles)
            raise Forbidden(f"Only {allowed} accounts can do this.")


@dataclass
class WorkflowContext:
    gateway: PersistenceGateway
    actor: Actor
    clock: Callable[[], datetime] = field(default=datetime.utcnow)

    def now(self) -> datetime:
        return self.clock()


def require_text(**fields: str | None) -> None:
    """Raise InvalidArgument naming every missing/blank field."""
    missing = [name for name, value in fields.items() if value is None or not str(value).strip()]
    if missing:
        raise InvalidArgument(f"Missing required field(s): {', '.join(missing)}")


def commit_primary(
    result: GatewayResult,
    action: str,
    on_integrity: Callable[[], WorkflowError] | None = None,
):
    """Return result.data, or raise for a failed primary write/read."""
    if result.ok:
        return result.data
    if result.error.code == "integrity" and on_integrity is not None:
        raise on_integrity()
    raise DependencyFailure(f"Could not {action}: {result.error.message}")


def best_effort(action: str, fn: Callable, *args, **kwargs) -> bool:
    """Run a derived-state write. Failures are logged and swallowed."""
    try:
        fn(*args, **kwargs)
        return True
    except WorkflowError as e:
        logger.warning("Best-effort %s failed (will be repaired by reconciliation): %s", action, e.message)
        return False
