from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from traveled.config import settings


def create_access_token(
    user_id: str,
    email: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """ID 제공자와 같은 형식의 액세스 토큰 생성 (개발/테스트용)"""
    expire = datetime.now(UTC) + (expires_delta or timedelta(hours=1))
    to_encode = {
        "sub": user_id,
        "email": email,
        "aud": settings.jwt_audience,
        "role": "authenticated",
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.supabase_jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict | None:
    """JWT 토큰 검증"""
    try:
        return jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
        )
    except JWTError:
        return None
