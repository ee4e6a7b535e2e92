"""Bearer 토큰을 검증해 현재 트레이너(User)를 주입하는 인증 의존성입니다.

토큰의 sub는 트레이너 user_id이며, 이후 모든 조회는 이 id를 owner_id로 사용한다.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import ExpiredSignatureError, JWTError, jwt
from trainer_planner.database import get_db
from trainer_planner.models.user import User
from trainer_planner.config import settings
from trainer_planner.services.auth_service import ALGORITHM

logger = logging.getLogger(__name__)

security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise _unauthorized("로그인이 만료되었습니다. 다시 로그인하세요.")
    except JWTError as exc:
        logger.info("[auth] rejected token: %s", exc)
        raise _unauthorized("Invalid or expired token")


def _owner_id(payload: dict) -> Optional[int]:
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    owner_id = _owner_id(decode_token(credentials.credentials))
    if owner_id is None:
        raise _unauthorized("Invalid token payload")

    user = db.query(User).filter(User.user_id == owner_id, User.is_active == True).first()
    if not user:
        raise _unauthorized("트레이너 계정을 찾을 수 없거나 비활성화되었습니다.")
    return user
