"""
Identity context. Tokens are issued by the auth provider; this service only verifies them,
loads the user, and hands the workflows an Actor. Role checks happen inside the workflows.
"""
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.config import get_settings
from app.database import get_db
from app.models.user import User
from app.repositories.gateway import PersistenceGateway
from app.schemas.user import TokenPayload
from app.services.workflow import Actor, WorkflowContext

settings = get_settings()
security = HTTPBearer(auto_error=False)


def decode_token(token: str) -> TokenPayload | None:
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
        return TokenPayload(
            sub=payload["sub"],
            email=payload["email"],
            exp=payload["exp"],
        )
    except (JWTError, KeyError):
        return None


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_token(credentials.credentials)

    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.query(User).filter(User.id == payload.sub).first()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return user


def get_actor(user: User = Depends(get_current_user)) -> Actor:
    return Actor(id=user.id, role=user.role)


def get_workflow_context(
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
) -> WorkflowContext:
    """Per-request context for promotion / moderation operations."""
    return WorkflowContext(gateway=PersistenceGateway(db), actor=actor)
