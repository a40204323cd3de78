"""API dependencies - acting user, database session and prospect store"""
from typing import Annotated, Optional
from fastapi import Depends, HTTPException, Header
from sqlalchemy.orm import Session
from sqlalchemy import select

from src.prospect_tool.config import settings
from src.prospect_tool.database import SessionLocal, get_db
from src.prospect_tool.models.user import User, UserRole
from src.prospect_tool.services.prospect_store import ProspectStore, SqlProspectStore


def get_current_user(
    db: Session = Depends(get_db),
    x_user_id: Optional[int] = Header(default=None, description="ID of the acting user")
) -> User:
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="X-User-Id header is required")
    
    user = db.execute(
        select(User).where(User.id == x_user_id, User.is_active == True)
    ).scalar_one_or_none()
    
    if not user:
        raise HTTPException(status_code=401, detail="User not found or inactive")
    
    return user


def require_agent_or_admin(current_user: User = Depends(get_current_user)) -> User:
    """Viewers can read but not import"""
    if current_user.role not in [UserRole.ADMIN, UserRole.AGENT]:
        raise HTTPException(status_code=403, detail="Agent or Admin access required")
    return current_user


def get_prospect_store() -> ProspectStore:
    return SqlProspectStore(
        SessionLocal,
        timeout=settings.STORE_TIMEOUT_SECONDS,
        read_attempts=settings.STORE_READ_ATTEMPTS,
    )


CurrentUser = Annotated[User, Depends(get_current_user)]
AgentUser = Annotated[User, Depends(require_agent_or_admin)]
DbSession = Annotated[Session, Depends(get_db)]
Store = Annotated[ProspectStore, Depends(get_prospect_store)]
