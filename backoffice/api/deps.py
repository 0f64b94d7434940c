# backoffice/api/deps.py
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from backoffice.core.config import settings
from backoffice.core.security import verify_token
from backoffice.database import get_db
from backoffice.models.user import User
from backoffice.crud.user import get_user_by_username
from backoffice.services.botbhai_bridge import BotBhaiBridge, load_botbhai_config

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login",
    auto_error=False
)

async def get_current_user(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(oauth2_scheme)
) -> User:
    """Текущий пользователь из bearer токена"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not token:
        raise credentials_exception

    payload = verify_token(token)
    if not payload or payload.get("type") != "access" or not payload.get("sub"):
        raise credentials_exception

    user = get_user_by_username(db, username=payload["sub"])
    if user is None:
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")

    return user

async def require_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """Требовать роль администратора"""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions. Admin role required."
        )
    return current_user

def get_botbhai_bridge(db: Session = Depends(get_db)) -> BotBhaiBridge:
    """Мост BotBhai с ключом, прочитанным на момент запроса"""
    return BotBhaiBridge(load_botbhai_config(db))
