from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from traveled.auth.utils import verify_token
from traveled.exceptions import AuthenticationError

# 토큰 누락은 get_current_user 에서 401 로 처리
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthUser:
    """ID 제공자가 인증한 사용자 핸들"""

    id: str
    email: str | None = None


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> AuthUser:
    """현재 인증된 사용자 반환"""
    if credentials is None:
        raise AuthenticationError()

    payload = verify_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError()

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError()

    return AuthUser(id=str(user_id), email=payload.get("email"))
