"""Auth Service 도메인 서비스 레이어입니다. 토큰 발급과 사용자 확인을 담당합니다."""

import logging
from datetime import datetime, timedelta, timezone
from jose import jwt
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from backoffice.models.user import User
from backoffice.config import settings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def create_access_token(user_id: int) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def mock_sso_login(db: Session, email: str) -> User:
    user = db.query(User).filter(User.email == email, User.is_active == True).first()
    if not user:
        logger.warning("[auth] login rejected, no active user for %s", email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"No active user found for '{email}'",
        )
    logger.info("[auth] login succeeded for user_id=%s", user.user_id)
    return user
